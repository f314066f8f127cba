# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.

The pydantic models below describe the *wire-shaped* member accepted by
MailChimp. They are only used to validate; accepted payloads are stored as
given, never as the coerced model values.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    IPvAnyAddress,
    StrictBool,
    field_validator,
)

STATUS_SUBSCRIBED = "subscribed"
STATUS_UNSUBSCRIBED = "unsubscribed"
STATUS_CLEANED = "cleaned"
STATUS_PENDING = "pending"
STATUS_TRANSACTIONAL = "transactional"
STATUS_ARCHIVED = "archived"

VALID_STATUSES = (
    STATUS_SUBSCRIBED,
    STATUS_UNSUBSCRIBED,
    STATUS_CLEANED,
    STATUS_PENDING,
    STATUS_TRANSACTIONAL,
    STATUS_ARCHIVED,
)
# archived is only reachable through the soft-remove operation
CLIENT_SETTABLE_STATUSES = VALID_STATUSES[:-1]

EMAIL_TYPE_HTML = "html"
EMAIL_TYPE_TEXT = "text"

BIRTHDAY_PATTERN = r"^\d{2}/\d{2}$"
LANGUAGE_PATTERN = r"^(\w{2}|\w{2}_\w{2})$"

NonEmptyStr = Annotated[str, Field(min_length=1)]


class Address(BaseModel):
    model_config = ConfigDict(extra="ignore")

    addr1: Optional[str] = None
    addr2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class MergeFields(BaseModel):
    """Audience merge fields. Unknown tags are free text and pass through."""
    model_config = ConfigDict(extra="allow")

    FNAME: Optional[str] = None
    LNAME: Optional[str] = None
    ADDRESS: Optional[Address] = None
    PHONE: Optional[str] = None
    BIRTHDAY: Optional[Annotated[str, Field(pattern=BIRTHDAY_PATTERN)]] = None


class Location(BaseModel):
    model_config = ConfigDict(extra="ignore")

    latitude: Optional[float] = None
    longitude: Optional[float] = None


class MarketingPermission(BaseModel):
    model_config = ConfigDict(extra="ignore")

    marketing_permission_id: NonEmptyStr
    enabled: Optional[StrictBool] = None


class MemberWire(BaseModel):
    """Validation rules for a member as sent to MailChimp."""
    model_config = ConfigDict(extra="ignore")

    email_address: EmailStr
    email_type: Optional[Literal["html", "text"]] = None
    status: Literal["subscribed", "unsubscribed", "cleaned", "pending", "transactional"]
    merge_fields: Optional[MergeFields] = None
    interests: Optional[Dict[str, Any]] = None
    language: Optional[Annotated[str, Field(pattern=LANGUAGE_PATTERN)]] = None
    # payloads are stored as given, so only real booleans pass
    vip: Optional[StrictBool] = None
    location: Optional[Location] = None
    marketing_permissions: Optional[List[MarketingPermission]] = None
    ip_signup: Optional[IPvAnyAddress] = None
    timestamp_signup: Optional[str] = None
    ip_opt: Optional[IPvAnyAddress] = None
    timestamp_opt: Optional[str] = None
    tags: Optional[List[NonEmptyStr]] = None

    @field_validator("timestamp_signup", "timestamp_opt")
    @classmethod
    def must_parse_as_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("is not a valid date")
        return v


# Lifecycle. Client-settable statuses move freely between each other; archived
# is entered only through soft-remove and left only by permanent deletion.
ALLOWED_TRANSITIONS = {
    **{status: set(VALID_STATUSES) - {status} for status in CLIENT_SETTABLE_STATUSES},
    STATUS_ARCHIVED: set(),
}
