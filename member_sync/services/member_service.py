# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: list member synchronization.

Every mutating operation follows the same local-first sequence:

    resolve ─► validate ─► commit locally ─► call MailChimp ─► reconcile

The local commit always happens before the remote call and is never rolled
back. A failed remote call surfaces as ``SyncError`` and leaves the local
record as committed.
"""
from typing import Any, Callable, Dict, List, Optional

from member_sync.core.exceptions import (
    AlreadyRemoved,
    SyncError,
    ValidationFailed,
)
from member_sync.core.logging import get_logger
from member_sync.metrics import MEMBERS_TOTAL, SYNC_OPERATIONS
from member_sync.models.domain import (
    ALLOWED_TRANSITIONS,
    STATUS_ARCHIVED,
    VALID_STATUSES,
)
from member_sync.repositories.member_repository import MemberRepository
from member_sync.services.field_validator import validate_member
from member_sync.services.mailchimp_client import MailChimpClient
from member_sync.services.subscriber_resolver import SubscriberResolver
from member_sync.services.wire_mapper import (
    from_local,
    from_wire,
    merge_payload,
    to_wire,
)

logger = get_logger(__name__)


def _members_path(mc_list: Dict[str, Any]) -> str:
    return f"/lists/{mc_list['mail_chimp_id']}/members"


def _member_path(mc_list: Dict[str, Any], member: Dict[str, Any]) -> str:
    return f"{_members_path(mc_list)}/{member['mail_chimp_id']}"


class MemberService:
    """Business logic for the member lifecycle and its MailChimp mirror."""

    def __init__(self, repo: MemberRepository, provider: MailChimpClient,
                 resolver: Optional[SubscriberResolver] = None) -> None:
        self._repo = repo
        self._provider = provider
        self._resolver = resolver or SubscriberResolver(repo)

    def seed_gauges(self) -> None:
        for status in VALID_STATUSES:
            MEMBERS_TOTAL.labels(status=status).set(self._repo.count_by_status(status))
        logger.info("Prometheus gauges loaded from DB")

    # ── Reads ──────────────────────────────────────────────────────────

    def list_members(self, list_id: str) -> List[Dict[str, Any]]:
        mc_list = self._resolver.resolve_list(list_id)
        return self._repo.list_members(mc_list["id"])

    def get_member(self, list_id: str, subscriber_id: str) -> Dict[str, Any]:
        _, member = self._resolver.resolve(list_id, subscriber_id)
        return member

    # ── Writes ─────────────────────────────────────────────────────────

    def create_member(self, list_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        mc_list = self._resolver.resolve_list(list_id)

        member = from_wire(payload)
        self._validate("create", member)

        member["list_id"] = mc_list["id"]
        member["mail_chimp_id"] = None
        member = self._repo.insert_member(member)
        MEMBERS_TOTAL.labels(status=member["status"]).inc()
        logger.info("Member stored locally id=%s list=%s status=%s",
                    member["id"], mc_list["id"], member["status"])

        response = self._call_remote(
            "create",
            lambda: self._provider.post(_members_path(mc_list), to_wire(member)),
            detail=(f"Member {member['id']} was saved locally without a MailChimp id; "
                    "retry the remote create to reconcile."),
        )
        remote_id = response.get("id")
        if not remote_id:
            raise SyncError(
                "MailChimp response did not include a member id",
                detail=f"Member {member['id']} was saved locally without a MailChimp id.",
            )

        member["mail_chimp_id"] = remote_id
        member = self._repo.update_member(member)
        logger.info("Member synced id=%s mail_chimp_id=%s", member["id"], remote_id,
                    extra={"list_id": mc_list["id"], "subscriber_id": member["id"],
                           "mail_chimp_id": remote_id})
        return member

    def update_member(self, list_id: str, subscriber_id: str,
                      payload: Dict[str, Any]) -> Dict[str, Any]:
        mc_list, existing = self._resolver.resolve(list_id, subscriber_id)

        merged = merge_payload(existing, payload)
        old_status, new_status = existing["status"], merged.get("status")
        allowed = ALLOWED_TRANSITIONS.get(old_status, set())
        # a terminal status refuses every update, status change or not
        if not allowed or (new_status != old_status
                           and new_status in VALID_STATUSES and new_status not in allowed):
            SYNC_OPERATIONS.labels(operation="update", outcome="invalid").inc()
            raise ValidationFailed({"status": [
                f"Cannot transition from '{old_status}' to '{new_status}'. "
                f"Allowed: {sorted(allowed) if allowed else 'none (purge the member instead)'}"
            ]})
        self._validate("update", merged)

        member = self._repo.update_member(merged)
        if new_status != old_status:
            MEMBERS_TOTAL.labels(status=old_status).dec()
            MEMBERS_TOTAL.labels(status=new_status).inc()
        logger.info("Member updated locally id=%s list=%s", member["id"], mc_list["id"])

        detail = (f"Member {member['id']} was updated locally; "
                  "MailChimp still holds the previous version.")
        self._require_remote_id("update", member, detail)
        self._call_remote(
            "update",
            lambda: self._provider.patch(_member_path(mc_list, member), to_wire(member)),
            detail=detail,
        )
        return member

    def remove_member(self, list_id: str, subscriber_id: str) -> None:
        """Soft remove: archive locally, then unsubscribe on MailChimp."""
        mc_list, member = self._resolver.resolve(list_id, subscriber_id)

        old_status = member["status"]
        if STATUS_ARCHIVED not in ALLOWED_TRANSITIONS.get(old_status, set()):
            SYNC_OPERATIONS.labels(operation="remove", outcome="rejected").inc()
            logger.info("Remove rejected id=%s: already %s", member["id"], old_status)
            raise AlreadyRemoved(subscriber_id)

        member["status"] = STATUS_ARCHIVED
        member = self._repo.update_member(member)
        MEMBERS_TOTAL.labels(status=old_status).dec()
        MEMBERS_TOTAL.labels(status=STATUS_ARCHIVED).inc()
        logger.info("Member archived locally id=%s list=%s", member["id"], mc_list["id"])

        detail = f"Member {member['id']} is archived locally; MailChimp was not updated."
        self._require_remote_id("remove", member, detail)
        self._call_remote(
            "remove",
            lambda: self._provider.delete(_member_path(mc_list, member)),
            detail=detail,
        )

    def delete_member_permanently(self, list_id: str, subscriber_id: str) -> None:
        """Hard remove: delete the local row, then purge it on MailChimp."""
        mc_list, member = self._resolver.resolve(list_id, subscriber_id)

        self._repo.delete_member(member["id"])
        MEMBERS_TOTAL.labels(status=member["status"]).dec()
        logger.info("Member deleted locally id=%s list=%s", member["id"], mc_list["id"])

        if not member.get("mail_chimp_id"):
            # Never acknowledged by MailChimp: nothing to purge remotely.
            SYNC_OPERATIONS.labels(operation="delete_permanent", outcome="local_only").inc()
            logger.warning("Member %s had no MailChimp id; remote purge skipped", member["id"])
            return

        self._call_remote(
            "delete_permanent",
            lambda: self._provider.post(f"{_member_path(mc_list, member)}/actions/delete-permanent"),
            detail=(f"Member {member['id']} was deleted locally; "
                    "the MailChimp record was not purged."),
        )

    # ── Private ────────────────────────────────────────────────────────

    def _validate(self, operation: str, member: Dict[str, Any]) -> None:
        errors = validate_member(from_local(member))
        if errors:
            SYNC_OPERATIONS.labels(operation=operation, outcome="invalid").inc()
            logger.info("Validation failed on %s: fields=%s", operation, sorted(errors),
                        extra={"operation": operation, "list_id": member.get("list_id")})
            raise ValidationFailed(errors)

    def _require_remote_id(self, operation: str, member: Dict[str, Any], detail: str) -> None:
        if not member.get("mail_chimp_id"):
            SYNC_OPERATIONS.labels(operation=operation, outcome="sync_error").inc()
            logger.error("Member %s has no MailChimp id; %s not sent", member["id"], operation,
                         extra={"operation": operation, "subscriber_id": member["id"]})
            raise SyncError(
                f"Member {member['id']} has no MailChimp id; it was never acknowledged by MailChimp",
                detail=detail,
            )

    def _call_remote(self, operation: str, call: Callable[[], Dict[str, Any]],
                     detail: str) -> Dict[str, Any]:
        try:
            response = call()
        except Exception as exc:
            SYNC_OPERATIONS.labels(operation=operation, outcome="sync_error").inc()
            logger.error("MailChimp %s failed: %s", operation, exc,
                         extra={"operation": operation, "status_code": getattr(exc, "status_code", None)})
            raise SyncError(getattr(exc, "message", None) or str(exc), detail=detail) from exc
        SYNC_OPERATIONS.labels(operation=operation, outcome="synced").inc()
        return response or {}
