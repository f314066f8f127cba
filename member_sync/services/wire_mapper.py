# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Translation between the local member record and the MailChimp wire format.

The field table is declared statically so the omission rules can be read
(and tested) without instantiating anything:

* a field whose value is ``None`` is never sent;
* ``merge_fields``, ``interests`` and ``location`` are also dropped when they
  are an empty mapping, since MailChimp treats ``{}`` differently from absent.
  Any other value (an empty list included) is kept so validation rejects it.
"""
import copy
from typing import Any, Dict, Mapping, Tuple

# (local record key, wire key)
WIRE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("email_address", "email_address"),
    ("email_type", "email_type"),
    ("status", "status"),
    ("merge_fields", "merge_fields"),
    ("interests", "interests"),
    ("language", "language"),
    ("vip", "vip"),
    ("location", "location"),
    ("marketing_permissions", "marketing_permissions"),
    ("ip_signup", "ip_signup"),
    ("timestamp_signup", "timestamp_signup"),
    ("ip_opt", "ip_opt"),
    ("timestamp_opt", "timestamp_opt"),
    ("tags", "tags"),
)

OBJECT_FIELDS = frozenset({"merge_fields", "interests", "location"})

# Assigned by the service, never taken from a payload.
IMMUTABLE_FIELDS = ("id", "list_id", "mail_chimp_id")

MEMBER_FIELDS: Tuple[str, ...] = IMMUTABLE_FIELDS + tuple(local for local, _ in WIRE_FIELDS)

_WIRE_TO_LOCAL = {wire: local for local, wire in WIRE_FIELDS}


def _omitted(wire_key: str, value: Any) -> bool:
    if value is None:
        return True
    if wire_key in OBJECT_FIELDS and isinstance(value, Mapping) and not value:
        return True
    return False


def from_local(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename local keys to wire keys, applying the omission rules only."""
    wire: Dict[str, Any] = {}
    for local, wire_key in WIRE_FIELDS:
        if local not in record:
            continue
        value = record[local]
        if _omitted(wire_key, value):
            continue
        wire[wire_key] = value
    return wire


def to_wire(member: Mapping[str, Any]) -> Dict[str, Any]:
    """Request body for the provider; detached from the stored record."""
    return copy.deepcopy(from_local(member))


def from_wire(wire: Mapping[str, Any]) -> Dict[str, Any]:
    """Local attributes for every mapped field; unknown wire keys are dropped."""
    return {
        local: copy.deepcopy(wire.get(wire_key))
        for wire_key, local in _WIRE_TO_LOCAL.items()
    }


def _deep_merge(current: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(current)
    for key, value in patch.items():
        existing = merged.get(key)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            merged[key] = _deep_merge(existing, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_payload(record: Mapping[str, Any], payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply a partial update payload onto a stored record.

    Only keys present in ``payload`` change. Nested mappings are merged key by
    key so ``{"merge_fields": {"ADDRESS": {"addr1": "x"}}}`` touches a single
    leaf; lists and scalars replace. Immutable keys in the payload are ignored.
    """
    merged = copy.deepcopy(dict(record))
    for wire_key, value in payload.items():
        local = _WIRE_TO_LOCAL.get(wire_key)
        if local is None:
            continue
        existing = merged.get(local)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            merged[local] = _deep_merge(existing, value)
        else:
            merged[local] = copy.deepcopy(value)
    return merged
