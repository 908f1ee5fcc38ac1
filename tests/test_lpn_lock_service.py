"""Batch lock/unlock orchestration against the in-memory WMS."""
import pytest

from conftest import FakeManhattan
from modules.lpn_lock.models import BatchValidationError, OrgSession
from modules.lpn_lock.services import LPNLockService, parse_lpns

SESSION = OrgSession(org="ACME", token="tok-123")


def run(fake, action, lpns, code=None):
    return LPNLockService(fake).run(action, SESSION, lpns, code)


@pytest.mark.parametrize("raw, expected", [
    ("A1", ["A1"]),
    ("A1, A1;A2", ["A1", "A1", "A2"]),
    ("  a1\n\tB2 ,, ;C3  ", ["a1", "B2", "C3"]),
    (["X1", "X2 X3"], ["X1", "X2", "X3"]),
    ("", []),
    (" ,; ", []),
    (None, []),
])
def test_parse_lpns(raw, expected):
    assert parse_lpns(raw) == expected


def test_empty_lpn_list_rejected_before_any_call():
    fake = FakeManhattan()
    with pytest.raises(BatchValidationError, match="No LPNs"):
        run(fake, "lock", " ;, ", code="HOLD")
    assert fake.calls == []


def test_lock_without_code_rejected_before_any_call():
    fake = FakeManhattan(inventory={"LPN1"})
    with pytest.raises(BatchValidationError, match="No code"):
        run(fake, "lock", "LPN1 LPN2")
    assert fake.calls == []


def test_unknown_action_rejected():
    fake = FakeManhattan(inventory={"LPN1"})
    with pytest.raises(BatchValidationError):
        run(fake, "freeze", "LPN1", code="HOLD")
    assert fake.calls == []


def test_missing_lpn_gets_one_entry_and_no_further_calls():
    fake = FakeManhattan(inventory={"LPN1"})
    result = run(fake, "lock", "GHOST", code="HOLD")
    assert result.results == {"GHOST": {"error": "LPN does not exist"}}
    assert (result.success, result.fail, result.total) == (0, 1, 1)
    assert fake.calls == [("search_inventory", "GHOST")]


def test_missing_lpn_does_not_stop_siblings():
    fake = FakeManhattan(inventory={"LPN1"})
    result = run(fake, "lock", "GHOST LPN1", code="HOLD")
    assert list(result.results) == ["GHOST", "LPN1"]
    assert result.results["LPN1"] == {"success": True}
    assert (result.success, result.fail) == (1, 1)


def test_lock_saves_when_code_not_attached():
    fake = FakeManhattan(inventory={"LPN1"}, conditions={"LPN1": ["QA"]})
    result = run(fake, "lock", "LPN1", code="HOLD")
    assert fake.names("save_condition") == [("save_condition", "LPN1", "HOLD")]
    assert (result.success, result.fail, result.total) == (1, 0, 1)


def test_lock_conflict_issues_no_save():
    fake = FakeManhattan(inventory={"LPN1"}, conditions={"LPN1": ["HOLD"]})
    result = run(fake, "lock", "LPN1", code="HOLD")
    assert result.results["LPN1"] == {"error": "Already locked with HOLD"}
    assert fake.names("save_condition") == []
    assert (result.success, result.fail) == (0, 1)


def test_lock_explicit_failure_counts_as_fail():
    fake = FakeManhattan(inventory={"LPN1"}, outcome={"success": False, "error": "boom"})
    result = run(fake, "lock", "LPN1", code="HOLD")
    assert result.results["LPN1"] == {"success": False, "error": "boom"}
    assert (result.success, result.fail) == (0, 1)


def test_lock_outcome_without_flag_counts_as_success():
    fake = FakeManhattan(inventory={"LPN1"}, outcome={"data": {"ConditionCode": "HOLD"}})
    result = run(fake, "lock", "LPN1", code="HOLD")
    assert (result.success, result.fail) == (1, 0)


def test_unlock_all_deletes_each_code_with_composite_keys():
    fake = FakeManhattan(inventory={"LPN1"}, conditions={"LPN1": ["A", "B"]})
    result = run(fake, "unlock", "LPN1")
    assert fake.names("delete_condition") == [
        ("delete_condition", "LPN1", "A"),
        ("delete_condition", "LPN1", "B"),
    ]
    assert list(result.results) == ["LPN1 (remove A)", "LPN1 (remove B)"]
    assert (result.success, result.fail, result.total) == (2, 0, 1)


def test_unlock_all_skips_blank_codes():
    fake = FakeManhattan(inventory={"LPN1"}, conditions={"LPN1": ["", None, "A"]})
    result = run(fake, "unlock", "LPN1")
    assert fake.names("delete_condition") == [("delete_condition", "LPN1", "A")]
    assert list(result.results) == ["LPN1 (remove A)"]


def test_unlock_without_codes_reports_error():
    fake = FakeManhattan(inventory={"LPN1"})
    result = run(fake, "unlock", "LPN1")
    assert result.results["LPN1"] == {"error": "No condition codes"}
    assert fake.names("delete_condition") == []


def test_unlock_specific_code_on_unlocked_lpn_is_a_noop():
    fake = FakeManhattan(inventory={"LPN1"}, conditions={"LPN1": ["QA"]})
    result = run(fake, "unlock", "LPN1", code="HOLD")
    assert result.results["LPN1"] == {"error": "Not locked with HOLD"}
    assert fake.names("delete_condition") == []
    assert (result.success, result.fail) == (0, 1)


def test_unlock_specific_code_deletes_only_that_code():
    fake = FakeManhattan(inventory={"LPN1"}, conditions={"LPN1": ["QA", "HOLD"]})
    result = run(fake, "unlock", "LPN1", code="HOLD")
    assert fake.names("delete_condition") == [("delete_condition", "LPN1", "HOLD")]
    assert result.results == {"LPN1": {"success": True}}


def test_duplicates_are_processed_in_order_and_counted():
    fake = FakeManhattan(inventory={"A1", "A2"})
    result = run(fake, "lock", "A1, A1;A2", code="HOLD")
    assert fake.names("search_inventory") == [
        ("search_inventory", "A1"),
        ("search_inventory", "A1"),
        ("search_inventory", "A2"),
    ]
    assert result.total == 3
    assert result.success == 3
    assert list(result.results) == ["A1", "A2"]


def test_each_lpn_is_resolved_before_the_next():
    fake = FakeManhattan(inventory={"LPN1", "LPN2"})
    run(fake, "lock", "LPN1 LPN2", code="HOLD")
    assert fake.calls == [
        ("search_inventory", "LPN1"),
        ("search_conditions", "LPN1"),
        ("save_condition", "LPN1", "HOLD"),
        ("search_inventory", "LPN2"),
        ("search_conditions", "LPN2"),
        ("save_condition", "LPN2", "HOLD"),
    ]


def test_total_ignores_unlock_all_expansion():
    fake = FakeManhattan(inventory={"LPN1", "LPN2"},
                         conditions={"LPN1": ["A", "B", "C"]})
    result = run(fake, "unlock", "LPN1 LPN2")
    assert result.total == 2
    assert result.success + result.fail == 4
    assert result.to_dict()["results"]["LPN2"] == {"error": "No condition codes"}
