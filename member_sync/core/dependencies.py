# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""FastAPI dependency injection wiring."""
from member_sync.core.database import engine
from member_sync.repositories.member_repository import MemberRepository
from member_sync.services.mailchimp_client import MailChimpClient
from member_sync.services.member_service import MemberService

_repo = MemberRepository(engine)
_mailchimp_client = MailChimpClient()
_service = MemberService(_repo, _mailchimp_client)


def get_member_repo() -> MemberRepository:
    return _repo


def get_member_service() -> MemberService:
    return _service
