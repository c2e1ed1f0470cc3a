"""
Org Chart Kernel v1.0 — Hierarchy & Stats Scenarios

Deterministic scenarios covering:
  - Forest construction order and levels
  - Dangling manager references
  - Reporting cycles (two-member, self, with tails)
  - Duplicate identifiers
  - Partition / level / direct-report invariants
  - Stats aggregation and diagnostics

Run:  python -m org_chart.test_hierarchy   (or pytest)
"""

from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.diagnostics import compute_diagnostics
from org_chart.domain_types import (
    CycleDetected,
    DanglingManagerReference,
    DuplicateIdentifier,
    EmployeeRecord,
    EmployeeRole,
)
from org_chart.hierarchy import build_hierarchy, parent_map
from org_chart.invariants import InvariantViolationError, validate_forest
from org_chart.stats import aggregate_stats


def _header(title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


def _emp(rid: str, manager_id: str | None = None, **kwargs) -> EmployeeRecord:
    return EmployeeRecord(
        id=rid,
        first_name=rid,
        last_name="Test",
        full_name=f"{rid} Test",
        manager_id=manager_id,
        **kwargs,
    )


def _five_person_company() -> list:
    return [
        _emp("A", role=EmployeeRole.SUPERADMIN),
        _emp("B", "A", role=EmployeeRole.MANAGER),
        _emp("C", "A"),
        _emp("D", "B"),
        _emp("E", "Z"),
    ]


# ═══════════════════════════════════════════════════════════════
#  CONSTRUCTION
# ═══════════════════════════════════════════════════════════════

def test_01_empty_input() -> None:
    _header("Scenario 01 — Empty input")
    result = build_hierarchy([])

    assert result.roots == []
    assert result.anomalies == []
    assert aggregate_stats([]).to_dict() == {
        "total_employees": 0,
        "managers": 0,
        "max_level": 0,
        "avg_span_of_control": 0.0,
    }
    print("\n[PASS] Scenario 01 PASSED")


def test_02_dangling_manager_and_stats() -> None:
    _header("Scenario 02 — Dangling manager + stats")
    records = _five_person_company()
    result = build_hierarchy(records)

    assert [r.id for r in result.roots] == ["A", "E"]
    assert [c.id for c in result.roots[0].children] == ["B", "C"]
    assert [c.id for c in result.roots[0].children[0].children] == ["D"]

    assert len(result.anomalies) == 1
    anomaly = result.anomalies[0]
    assert isinstance(anomaly, DanglingManagerReference)
    assert anomaly.kind == "dangling_manager_reference"
    assert anomaly.employee_id == "E"
    assert anomaly.related_ids == ("Z",)

    index = result.node_index()
    assert index["E"].manager is None
    assert index["E"].level == 0
    assert index["D"].level == 2
    assert index["D"].manager.id == "B"

    stats = aggregate_stats(records, result)
    assert stats.total_employees == 5
    assert stats.managers == 2
    assert stats.max_level == 2
    assert stats.avg_span_of_control == 1.5

    # Recomputing levels without a supplied hierarchy gives the same answer.
    assert aggregate_stats(records) == stats

    validate_forest(result, records)
    print("\n[PASS] Scenario 02 PASSED")


def test_03_two_member_cycle() -> None:
    _header("Scenario 03 — A <-> B cycle")
    records = [_emp("B", "A"), _emp("A", "B")]
    result = build_hierarchy(records)

    assert [r.id for r in result.roots] == ["A"]
    assert [c.id for c in result.roots[0].children] == ["B"]
    cycles = [a for a in result.anomalies if isinstance(a, CycleDetected)]
    assert len(cycles) == 1
    assert cycles[0].employee_id == "A"
    assert set(cycles[0].related_ids) == {"A", "B"}

    validate_forest(result, records)
    print("\n[PASS] Scenario 03 PASSED")


def test_04_self_manager() -> None:
    _header("Scenario 04 — Self-referencing manager")
    records = [_emp("X", "X"), _emp("Y", "X")]
    result = build_hierarchy(records)

    assert [r.id for r in result.roots] == ["X"]
    assert result.roots[0].children[0].id == "Y"
    assert len(result.anomalies) == 1
    assert isinstance(result.anomalies[0], CycleDetected)
    assert result.anomalies[0].related_ids == ("X",)
    print("\n[PASS] Scenario 04 PASSED")


def test_05_cycle_with_tail_and_stable_break() -> None:
    _header("Scenario 05 — Cycle with tail, order independent")
    # c -> d -> e -> c, with b hanging off d and a root elsewhere.
    records = [
        _emp("root"),
        _emp("b", "d"),
        _emp("c", "d"),
        _emp("d", "e"),
        _emp("e", "c"),
    ]
    first = build_hierarchy(records)
    second = build_hierarchy(list(reversed(records)))

    for result in (first, second):
        cycles = [a for a in result.anomalies if isinstance(a, CycleDetected)]
        assert len(cycles) == 1
        assert cycles[0].employee_id == "c"
        assert sorted(cycles[0].related_ids) == ["c", "d", "e"]
        validate_forest(result, records)

    assert parent_map(records) == parent_map(list(reversed(records)))
    index = first.node_index()
    assert index["c"].level == 0
    assert index["e"].level == 1
    assert index["d"].level == 2
    assert index["b"].level == 3
    assert [r.id for r in first.roots] == ["root", "c"]
    print("\n[PASS] Scenario 05 PASSED")


def test_06_two_independent_cycles() -> None:
    _header("Scenario 06 — Two independent cycles")
    records = [_emp("p", "q"), _emp("q", "p"), _emp("m", "n"), _emp("n", "m")]
    result = build_hierarchy(records)

    detached = sorted(a.employee_id for a in result.anomalies)
    assert detached == ["m", "p"]
    assert [r.id for r in result.roots] == ["p", "m"]
    validate_forest(result, records)
    print("\n[PASS] Scenario 06 PASSED")


def test_07_duplicate_identifier() -> None:
    _header("Scenario 07 — Duplicate identifier")
    records = [
        _emp("A"),
        _emp("B", "A", position="First B"),
        _emp("B", None, position="Second B"),
        _emp("C", "B"),
    ]
    result = build_hierarchy(records)

    dups = [a for a in result.anomalies if isinstance(a, DuplicateIdentifier)]
    assert len(dups) == 1
    assert dups[0].employee_id == "B"
    assert dups[0].related_ids == ("2",)

    index = result.node_index()
    assert index["B"].record.position == "First B"
    assert index["B"].manager.id == "A"
    assert [r.id for r in result.roots] == ["A"]
    assert aggregate_stats(records, result).total_employees == 3
    validate_forest(result, records)
    print("\n[PASS] Scenario 07 PASSED")


def test_08_sibling_order_follows_input() -> None:
    _header("Scenario 08 — Sibling order")
    records = [_emp("c3", "boss"), _emp("boss"), _emp("c1", "boss"), _emp("c2", "boss")]
    result = build_hierarchy(records)

    assert [r.id for r in result.roots] == ["boss"]
    boss = result.roots[0]
    assert [c.id for c in boss.children] == ["c3", "c1", "c2"]
    assert boss.direct_reports_count == 3
    print("\n[PASS] Scenario 08 PASSED")


def test_09_long_chain_is_not_recursive() -> None:
    _header("Scenario 09 — 3000-deep chain")
    n = 3000
    records = [_emp("e0000")] + [
        _emp(f"e{i:04d}", f"e{i-1:04d}") for i in range(1, n)
    ]
    result = build_hierarchy(records)
    stats = aggregate_stats(records, result)

    assert len(result.roots) == 1
    assert stats.max_level == n - 1
    assert stats.managers == n - 1
    validate_forest(result, records)
    print("\n[PASS] Scenario 09 PASSED")


def test_10_managers_regardless_of_role() -> None:
    _header("Scenario 10 — Manager counting ignores role")
    records = [
        _emp("lead", role=EmployeeRole.CONTRACTOR),
        _emp("w1", "lead"),
        _emp("w2", "lead"),
        _emp("w3", "lead"),
        _emp("solo", role=EmployeeRole.MANAGER),
    ]
    stats = aggregate_stats(records)
    assert stats.managers == 1
    assert stats.avg_span_of_control == 3.0
    assert stats.max_level == 1
    print("\n[PASS] Scenario 10 PASSED")


# ═══════════════════════════════════════════════════════════════
#  INVARIANTS & DIAGNOSTICS
# ═══════════════════════════════════════════════════════════════

def test_11_invariant_violation_detected() -> None:
    _header("Scenario 11 — Tampered forest fails validation")
    records = _five_person_company()
    result = build_hierarchy(records)
    result.roots[0].direct_reports_count = 7

    try:
        validate_forest(result, records)
    except InvariantViolationError as e:
        assert e.rule == "direct_reports_count"
        print(f"  Caught: {e}")
    else:
        raise AssertionError("Expected InvariantViolationError")

    fresh = build_hierarchy(records)
    try:
        validate_forest(fresh, records + [_emp("ghost")])
    except InvariantViolationError as e:
        assert e.rule == "partition"
    else:
        raise AssertionError("Expected partition violation")
    print("\n[PASS] Scenario 11 PASSED")


def test_12_diagnostics_warnings() -> None:
    _header("Scenario 12 — Diagnostics")
    records = _five_person_company() + [_emp("P", "Q"), _emp("Q", "P"), _emp("A")]
    diag = compute_diagnostics(build_hierarchy(records))

    assert diag["node_count"] == 7
    assert diag["root_count"] == 3
    assert diag["max_level"] == 2
    assert diag["anomaly_count"] == 3
    assert diag["anomalies_by_kind"] == {
        "cycle_detected": 1,
        "dangling_manager_reference": 1,
        "duplicate_identifier": 1,
    }
    assert len(diag["warnings"]) == 3
    assert "E" in diag["warnings"][0]

    clean = compute_diagnostics(build_hierarchy(records[:4]))
    assert clean["warnings"] == []
    print("\n[PASS] Scenario 12 PASSED")


# ═══════════════════════════════════════════════════════════════
#  RUNNER
# ═══════════════════════════════════════════════════════════════

def main() -> None:
    scenarios = [
        test_01_empty_input,
        test_02_dangling_manager_and_stats,
        test_03_two_member_cycle,
        test_04_self_manager,
        test_05_cycle_with_tail_and_stable_break,
        test_06_two_independent_cycles,
        test_07_duplicate_identifier,
        test_08_sibling_order_follows_input,
        test_09_long_chain_is_not_recursive,
        test_10_managers_regardless_of_role,
        test_11_invariant_violation_detected,
        test_12_diagnostics_warnings,
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
    passed = sum(results)
    total = len(results)
    print(f"  RESULTS: {passed}/{total} scenarios passed")
    print(f"{'='*60}")
    sys.exit(0 if all(results) else 1)


if __name__ == "__main__":
    main()
