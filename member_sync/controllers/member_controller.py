# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: list member CRUD, soft remove and permanent delete.
Thin HTTP layer — errors are raised by MemberService and rendered by the
exception handlers registered in main.py.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from member_sync.core.dependencies import get_member_service
from member_sync.schemas import MemberOut, MessageResponse, ValidationErrorResponse
from member_sync.services.member_service import MemberService

router = APIRouter(prefix="/mailchimp/lists/{list_id}/members", tags=["List Members"])

NOT_FOUND = {404: {"model": MessageResponse, "description": "List or member not found"}}
INVALID = {400: {"model": ValidationErrorResponse,
                 "description": "Invalid data given, or the MailChimp call failed "
                                "(message only, local write kept)"}}


@router.get("", response_model=List[MemberOut], responses=NOT_FOUND)
def list_members(list_id: str, service: MemberService = Depends(get_member_service)):
    return service.list_members(list_id)


@router.get("/{subscriber_id}", response_model=MemberOut, responses=NOT_FOUND)
def get_member(list_id: str, subscriber_id: str,
               service: MemberService = Depends(get_member_service)):
    return service.get_member(list_id, subscriber_id)


@router.post("", response_model=MemberOut, responses={**NOT_FOUND, **INVALID})
def create_member(list_id: str, payload: Dict[str, Any] = Body(default={}),
                  service: MemberService = Depends(get_member_service)):
    """Create the member locally, then on MailChimp; returns the synced record."""
    return service.create_member(list_id, payload)


@router.put("/{subscriber_id}", response_model=MemberOut, responses={**NOT_FOUND, **INVALID})
def update_member(list_id: str, subscriber_id: str,
                  payload: Dict[str, Any] = Body(default={}),
                  service: MemberService = Depends(get_member_service)):
    """Merge a partial payload into the member and patch it on MailChimp."""
    return service.update_member(list_id, subscriber_id, payload)


@router.delete("/{subscriber_id}", responses={
    **NOT_FOUND, **INVALID,
    405: {"model": MessageResponse, "description": "Member already archived"},
})
def remove_member(list_id: str, subscriber_id: str,
                  service: MemberService = Depends(get_member_service)):
    """Archive the member (soft remove)."""
    service.remove_member(list_id, subscriber_id)
    return {}


@router.post("/{subscriber_id}/actions/delete-permanent", responses={**NOT_FOUND, **INVALID})
def delete_member_permanently(list_id: str, subscriber_id: str,
                              service: MemberService = Depends(get_member_service)):
    """Delete the member locally and purge it from MailChimp."""
    service.delete_member_permanently(list_id, subscriber_id)
    return {}
