"""
Org Chart Kernel v1.0 — Records, Filters & Reassignment Tests

Covers:
  - JSON decode of employee API rows (unknown columns, enums, nulls)
  - Strict failures on malformed rows
  - File export / import
  - Search, filters and grouping views
  - Manager candidate list and reassignment checks

Run:  python -m org_chart.test_records   (or pytest)
"""

from __future__ import annotations

import json
import os
import sys
import tempfile

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.assignment import (
    ManagerAssignmentError,
    manager_candidates,
    validate_manager_assignment,
)
from org_chart.domain_types import EmployeeRecord, EmployeeRole, EmployeeStatus
from org_chart.filters import (
    department_display_name,
    facility_display_name,
    filter_records,
    group_by_department,
    group_by_facility,
    search_records,
)
from org_chart.records import (
    DeserializationError,
    decode_records,
    encode_records,
    export_records_to_file,
    import_records_from_file,
)


def _header(title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


_ROWS = [
    {
        "id": "u1", "first_name": "Dana", "last_name": "Reyes", "full_name": "Dana Reyes",
        "email": "dana@plant.example", "employee_code": "EMP-001", "role": "superadmin",
        "status": "active", "position": "Plant Director", "manager_id": None,
        "department_code": "OPS", "facility_id": "fac-1", "hire_date": "2019-03-01",
        "profile": {"phone": "555-0100"}, "pin": "1234", "hourly_rate": None,
    },
    {
        "id": "u2", "first_name": "Lee", "last_name": "Park", "email": "lee@plant.example",
        "employee_code": "EMP-002", "role": "Manager", "status": "on_leave",
        "position": "Maintenance Lead", "manager_id": "u1", "department_code": "MNT",
        "facility_id": "fac-1",
    },
    {
        "id": "u3", "first_name": "Sam", "last_name": "Ode", "email": "sam@plant.example",
        "employee_code": "EMP-003", "role": "technician", "status": "active",
        "position": None, "manager_id": "u2", "department_code": "MNT", "facility_id": None,
    },
    {
        "id": "u4", "first_name": "Ana", "last_name": "Cruz", "email": "ana@plant.example",
        "employee_code": "EMP-004", "role": "employee", "status": "inactive",
        "position": "Forklift Operator", "manager_id": "u1", "department_code": None,
        "facility_id": "fac-2",
    },
]


def _records() -> list:
    return decode_records(json.dumps(_ROWS))


# ═══════════════════════════════════════════════════════════════
#  CODEC
# ═══════════════════════════════════════════════════════════════

def test_01_decode_employee_rows() -> None:
    _header("Test 01 — Decode employee rows")
    records = _records()

    assert [r.id for r in records] == ["u1", "u2", "u3", "u4"]
    assert records[0].role is EmployeeRole.SUPERADMIN
    assert records[0].profile == {"phone": "555-0100"}
    assert records[1].role is EmployeeRole.MANAGER
    assert records[1].status is EmployeeStatus.ON_LEAVE
    assert records[1].full_name == "Lee Park"
    assert records[2].role is EmployeeRole.UNKNOWN
    assert records[2].position is None
    assert records[0].manager_id is None

    wrapped = decode_records(json.dumps({"employees": _ROWS}))
    assert wrapped == records
    print("  [PASS]")


def test_02_round_trip_is_stable() -> None:
    _header("Test 02 — Encode is deterministic")
    records = _records()
    encoded = encode_records(records)
    assert decode_records(encoded) == records
    assert encode_records(decode_records(encoded)) == encoded
    print("  [PASS]")


def test_03_malformed_rows_rejected() -> None:
    _header("Test 03 — Malformed input")
    bad_documents = [
        "not json",
        json.dumps("string"),
        json.dumps({"rows": []}),
        json.dumps([{"first_name": "no id"}]),
        json.dumps([{"id": ""}]),
        json.dumps([{"id": 7}]),
        json.dumps([{"id": "x", "manager_id": 12}]),
        json.dumps([{"id": "x", "email": ["a"]}]),
        json.dumps([{"id": "x", "profile": "phone"}]),
        json.dumps([["x"]]),
    ]
    for doc in bad_documents:
        try:
            decode_records(doc)
        except DeserializationError as e:
            print(f"  Caught: {e}")
        else:
            raise AssertionError(f"Expected DeserializationError for {doc!r}")
    print("  [PASS]")


def test_04_file_export_import() -> None:
    _header("Test 04 — File export / import")
    records = _records()
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "employees.json")
        export_records_to_file(records, path)
        assert import_records_from_file(path) == records

        try:
            import_records_from_file(os.path.join(tmp, "missing.json"))
        except DeserializationError:
            pass
        else:
            raise AssertionError("Expected DeserializationError for missing file")
    print("  [PASS]")


# ═══════════════════════════════════════════════════════════════
#  SEARCH / FILTER / GROUP
# ═══════════════════════════════════════════════════════════════

def test_05_search() -> None:
    _header("Test 05 — Search")
    records = _records()

    assert search_records(records, "   ") == records
    assert [r.id for r in search_records(records, "dana")] == ["u1"]
    assert [r.id for r in search_records(records, "PLANT.EXAMPLE")] == ["u1", "u2", "u3", "u4"]
    assert [r.id for r in search_records(records, "emp-003")] == ["u3"]
    assert [r.id for r in search_records(records, "lead")] == ["u2"]
    assert search_records(records, "nobody") == []
    print("  [PASS]")


def test_06_filters() -> None:
    _header("Test 06 — Filters")
    records = _records()

    assert [r.id for r in filter_records(records, facility_id="fac-1")] == ["u1", "u2"]
    assert [r.id for r in filter_records(records, department_code="MNT")] == ["u2", "u3"]
    assert [r.id for r in filter_records(records, status="active")] == ["u1", "u3"]
    assert [r.id for r in filter_records(records, facility_id="fac-1", status="on_leave")] == ["u2"]
    assert filter_records(records) == records
    print("  [PASS]")


def test_07_grouping_views() -> None:
    _header("Test 07 — Department / facility partitions")
    records = _records()

    by_dept = group_by_department(records)
    assert list(by_dept) == ["OPS", "MNT", "unassigned"]
    assert [r.id for r in by_dept["MNT"]] == ["u2", "u3"]
    assert sum(len(v) for v in by_dept.values()) == len(records)

    by_fac = group_by_facility(records)
    assert list(by_fac) == ["fac-1", "unassigned", "fac-2"]

    departments = {"OPS": "Operations"}
    facilities = {"fac-1": "North Plant"}
    assert department_display_name("OPS", departments) == "Operations"
    assert department_display_name("MNT", departments) == "MNT"
    assert department_display_name("unassigned", departments) == "No Department"
    assert department_display_name(None) == "No Department"
    assert facility_display_name("fac-1", facilities) == "North Plant"
    assert facility_display_name("fac-9", facilities) == "Unknown"
    assert facility_display_name(None, facilities) == "No Facility"
    print("  [PASS]")


# ═══════════════════════════════════════════════════════════════
#  REASSIGNMENT
# ═══════════════════════════════════════════════════════════════

def test_08_manager_candidates() -> None:
    _header("Test 08 — Manager candidates")
    records = _records()
    assert [r.id for r in manager_candidates(records, "u3")] == ["u1"]
    assert [r.id for r in manager_candidates(records, "u1")] == ["u3"]
    print("  [PASS]")


def test_09_validate_manager_assignment() -> None:
    _header("Test 09 — Reassignment rules")
    records = _records()

    validate_manager_assignment(records, "u3", "u1")
    validate_manager_assignment(records, "u2", None)
    validate_manager_assignment(records, "u4", "u3")

    cases = [
        ("u2", "u2", "self_manager"),
        ("u1", "u3", "cycle"),
        ("u2", "u3", "cycle"),
        ("ghost", "u1", "unknown_employee"),
        ("u3", "ghost", "unknown_manager"),
    ]
    for employee_id, manager_id, rule in cases:
        try:
            validate_manager_assignment(records, employee_id, manager_id)
        except ManagerAssignmentError as e:
            assert e.rule == rule, (employee_id, manager_id, e.rule)
        else:
            raise AssertionError(f"Expected {rule} for {employee_id} -> {manager_id}")

    # A pre-existing cycle in the data is already repaired before checking.
    looped = [EmployeeRecord(id="a", manager_id="b"), EmployeeRecord(id="b", manager_id="a")]
    validate_manager_assignment(looped, "b", "a")
    print("  [PASS]")


def test_10_null_role_and_status_take_defaults() -> None:
    _header("Test 10 — Null / missing role and status")
    rows = [
        {"id": "n1", "role": None, "status": None},
        {"id": "n2"},
        {"id": "n3", "role": "", "status": ""},
        {"id": "n4", "role": "janitor", "status": "retired"},
    ]
    records = decode_records(json.dumps(rows))

    for record in records[:3]:
        assert record.role is EmployeeRole.EMPLOYEE, record.id
        assert record.status is EmployeeStatus.ACTIVE, record.id
    assert records[3].role is EmployeeRole.UNKNOWN
    assert records[3].status is EmployeeStatus.UNKNOWN
    print("  [PASS]")


def main() -> None:
    scenarios = [
        test_01_decode_employee_rows,
        test_02_round_trip_is_stable,
        test_03_malformed_rows_rejected,
        test_04_file_export_import,
        test_05_search,
        test_06_filters,
        test_07_grouping_views,
        test_08_manager_candidates,
        test_09_validate_manager_assignment,
        test_10_null_role_and_status_take_defaults,
    ]

    results = []
    for fn in scenarios:
        try:
            fn()
            results.append(True)
        except Exception as e:
            print(f"\n[FAIL] {fn.__name__}: {e}")
            import traceback
            traceback.print_exc()
            results.append(False)

    print(f"\n{'='*60}")
    print(f"  RESULTS: {sum(results)}/{len(results)} passed")
    print(f"{'='*60}")
    sys.exit(0 if all(results) else 1)


if __name__ == "__main__":
    main()
