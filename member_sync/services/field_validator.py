# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Field validation for wire-shaped members.

Pure function, no I/O: the candidate mapping is checked against
``MemberWire`` and every violation is reported under its dotted field path
(``merge_fields.BIRTHDAY``, ``tags.1``, ``marketing_permissions.0.enabled``).
"""
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from member_sync.models.domain import MemberWire

_VALUE_ERROR_PREFIX = "Value error, "


def _path(loc) -> str:
    return ".".join(str(part) for part in loc)


def _describe(error: Dict[str, Any]) -> str:
    msg = error["msg"]
    if msg.startswith(_VALUE_ERROR_PREFIX):
        msg = msg[len(_VALUE_ERROR_PREFIX):]
    return msg


def validate_member(wire: Mapping[str, Any]) -> Dict[str, List[str]]:
    """Return ``{field path: [violation, ...]}``; an empty dict means valid."""
    try:
        MemberWire.model_validate(dict(wire))
    except ValidationError as exc:
        errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            errors.setdefault(_path(error["loc"]), []).append(_describe(error))
        return errors
    return {}
