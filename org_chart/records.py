"""
Org Chart Kernel — Employee Record Codec v1.0

JSON serialization and deserialization of EmployeeRecord lists.

Rules:
  - Encoded output: JSON array, records in input order, keys sorted.
  - Decoding accepts a JSON array of objects, or an object with an
    "employees" array (the shape the employee API returns).
  - "id" is required and must be a non-empty string.
  - Optional text fields must be string or null.
  - Unknown fields are ignored (employee rows carry payroll and
    scheduling columns this kernel never reads).
  - Role / status strings outside the closed enums decode to UNKNOWN;
    a missing, null or empty role / status takes the default.
  - Duplicate ids are NOT rejected here; the hierarchy builder
    reports them as anomalies.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Dict, Iterable, List

from .domain_types import EmployeeRecord, EmployeeRole, EmployeeStatus


# ══════════════════════════════════════════════════════════════
# Exception Hierarchy
# ══════════════════════════════════════════════════════════════

class RecordsError(Exception):
    """Base exception for all record codec operations."""


class SerializationError(RecordsError):
    """Raised when encoding records to JSON fails."""


class DeserializationError(RecordsError):
    """Raised when decoding JSON to records fails."""


# ══════════════════════════════════════════════════════════════
# Field Sets
# ══════════════════════════════════════════════════════════════

_TEXT_FIELDS = (
    "first_name", "last_name", "full_name", "email", "employee_code",
)

_OPTIONAL_TEXT_FIELDS = (
    "position", "manager_id", "department_code", "facility_id", "hire_date",
)


# ══════════════════════════════════════════════════════════════
# Single Record
# ══════════════════════════════════════════════════════════════

def record_from_dict(data: Dict[str, Any], where: str = "record") -> EmployeeRecord:
    """Build one EmployeeRecord from a plain dict. Raises DeserializationError."""
    if not isinstance(data, dict):
        raise DeserializationError(
            f"{where} must be a JSON object, got {type(data).__name__}"
        )

    rid = data.get("id")
    if not isinstance(rid, str) or not rid:
        raise DeserializationError(f"{where}: 'id' must be a non-empty string")

    values: Dict[str, Any] = {"id": rid}
    for name in _TEXT_FIELDS:
        value = data.get(name)
        if value is None:
            values[name] = ""
        elif isinstance(value, str):
            values[name] = value
        else:
            raise DeserializationError(
                f"{where}: '{name}' must be string, got {type(value).__name__}"
            )

    for name in _OPTIONAL_TEXT_FIELDS:
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            raise DeserializationError(
                f"{where}: '{name}' must be string or null, got {type(value).__name__}"
            )
        values[name] = value or None

    profile = data.get("profile")
    if profile is not None and not isinstance(profile, dict):
        raise DeserializationError(
            f"{where}: 'profile' must be object or null, got {type(profile).__name__}"
        )

    if not values["full_name"]:
        values["full_name"] = f"{values['first_name']} {values['last_name']}".strip()

    return EmployeeRecord(
        role=EmployeeRole.parse(data.get("role") or EmployeeRole.EMPLOYEE.value),
        status=EmployeeStatus.parse(data.get("status") or EmployeeStatus.ACTIVE.value),
        profile=dict(profile) if profile is not None else None,
        **values,
    )


def record_to_dict(record: EmployeeRecord) -> Dict[str, Any]:
    return {
        "department_code": record.department_code,
        "email": record.email,
        "employee_code": record.employee_code,
        "facility_id": record.facility_id,
        "first_name": record.first_name,
        "full_name": record.full_name,
        "hire_date": record.hire_date,
        "id": record.id,
        "last_name": record.last_name,
        "manager_id": record.manager_id,
        "position": record.position,
        "profile": dict(record.profile) if record.profile is not None else None,
        "role": record.role.value,
        "status": record.status.value,
    }


# ══════════════════════════════════════════════════════════════
# Encoder / Decoder
# ══════════════════════════════════════════════════════════════

def encode_records(records: Iterable[EmployeeRecord]) -> str:
    """Serialize records into a JSON array string. Byte-identical for identical input."""
    try:
        return json.dumps(
            [record_to_dict(r) for r in records],
            ensure_ascii=False,
            separators=(",", ":"),
            sort_keys=True,
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise SerializationError(f"Failed to encode records: {exc}") from exc


def decode_records(json_str: str) -> List[EmployeeRecord]:
    """Decode a JSON document into EmployeeRecords, preserving order."""
    try:
        raw = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise DeserializationError(f"Invalid JSON: {exc}") from exc
    return records_from_payload(raw)


def records_from_payload(raw: Any) -> List[EmployeeRecord]:
    """Accept a parsed array, or an object holding an "employees" array."""
    if isinstance(raw, dict):
        if "employees" not in raw:
            raise DeserializationError("Top-level object must have an 'employees' array")
        raw = raw["employees"]
    if not isinstance(raw, list):
        raise DeserializationError(
            f"Employee records must be a JSON array, got {type(raw).__name__}"
        )
    return [record_from_dict(item, f"employee [{i}]") for i, item in enumerate(raw)]


# ══════════════════════════════════════════════════════════════
# File I/O
# ══════════════════════════════════════════════════════════════

def export_records_to_file(records: Iterable[EmployeeRecord], path: str) -> None:
    """Write encoded records to ``path`` (UTF-8)."""
    pathlib.Path(path).write_text(encode_records(records), encoding="utf-8")


def import_records_from_file(path: str) -> List[EmployeeRecord]:
    """Read and decode records from ``path``."""
    try:
        text = pathlib.Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise DeserializationError(f"Cannot read records file {path!r}: {exc}") from exc
    return decode_records(text)
