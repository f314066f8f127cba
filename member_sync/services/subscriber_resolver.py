# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Locate a list, and a subscriber within it, or say which one is missing."""
from typing import Any, Dict, Tuple

from member_sync.core.exceptions import ListNotFound, MemberNotFound
from member_sync.repositories.member_repository import MemberRepository


class SubscriberResolver:
    def __init__(self, repo: MemberRepository) -> None:
        self._repo = repo

    def resolve_list(self, list_id: str) -> Dict[str, Any]:
        mc_list = self._repo.find_list(list_id)
        if mc_list is None:
            raise ListNotFound(list_id)
        return mc_list

    def resolve_member(self, mc_list: Dict[str, Any], subscriber_id: str) -> Dict[str, Any]:
        member = self._repo.find_member(mc_list["id"], subscriber_id)
        if member is None:
            raise MemberNotFound(subscriber_id)
        return member

    def resolve(self, list_id: str,
                subscriber_id: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        mc_list = self.resolve_list(list_id)
        return mc_list, self.resolve_member(mc_list, subscriber_id)
