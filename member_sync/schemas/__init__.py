# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic response schemas — used ONLY at the controller (HTTP) boundary."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class MemberOut(BaseModel):
    id: str
    list_id: str
    mail_chimp_id: Optional[str] = None
    email_address: str
    email_type: Optional[str] = None
    status: str
    merge_fields: Optional[Dict[str, Any]] = None
    interests: Optional[Any] = None
    language: Optional[str] = None
    vip: Optional[bool] = None
    location: Optional[Dict[str, Any]] = None
    marketing_permissions: Optional[List[Dict[str, Any]]] = None
    ip_signup: Optional[str] = None
    timestamp_signup: Optional[str] = None
    ip_opt: Optional[str] = None
    timestamp_opt: Optional[str] = None
    tags: Optional[List[str]] = None
    created_at: str
    updated_at: str


class MessageResponse(BaseModel):
    message: str


class ValidationErrorResponse(MessageResponse):
    errors: Dict[str, List[str]]
