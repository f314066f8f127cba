# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Error kinds raised by the member sync engine.

    MemberSyncError (base)
    ├── ListNotFound       404  raised before any mutation
    ├── MemberNotFound     404  raised before any mutation
    ├── ValidationFailed   400  raised before any persistence
    ├── AlreadyRemoved     405  soft-remove of an archived member
    └── SyncError          400  remote call failed AFTER the local commit

Every error maps to a JSON body with at least a ``message`` key.
"""
from typing import Any, Dict, List, Optional


class MemberSyncError(Exception):
    """Base class; carries the HTTP status the API layer answers with."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"message": self.message}


class ListNotFound(MemberSyncError):
    status_code = 404

    def __init__(self, list_id: str):
        super().__init__(f"MailChimpList[{list_id}] not found")
        self.list_id = list_id


class MemberNotFound(MemberSyncError):
    status_code = 404

    def __init__(self, subscriber_id: str):
        super().__init__(f"MailChimpListMember[{subscriber_id}] not found")
        self.subscriber_id = subscriber_id


class ValidationFailed(MemberSyncError):
    status_code = 400

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__("Invalid data given")
        self.errors = errors

    def to_response(self) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class AlreadyRemoved(MemberSyncError):
    status_code = 405

    def __init__(self, subscriber_id: str):
        super().__init__("Method Not Allowed")
        self.subscriber_id = subscriber_id


class SyncError(MemberSyncError):
    """The remote provider call failed. The local write is NOT rolled back."""

    status_code = 400

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail

    def to_response(self) -> Dict[str, Any]:
        body = {"message": self.message}
        if self.detail:
            body["detail"] = self.detail
        return body


class ProviderError(Exception):
    """Transport or non-2xx failure reported by the MailChimp client."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
