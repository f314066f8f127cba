# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package — re-exports MemberRepository."""
from member_sync.repositories.member_repository import MemberRepository

__all__ = ["MemberRepository"]
