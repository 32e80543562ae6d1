"""
Unit tests for trm.workflow
===========================

The approval chain Manager -> TTO -> Engineer -> Seller: legal moves,
illegal moves, the mandatory reject reason and the queue helpers.
"""

# =========================
# Imports
# =========================
import itertools
import pytest
from trm.errors import ErrorKind
from trm.workflow import (apply, available_actions, is_pending_for,
                          is_terminal, is_rejected, next_role, parse_status,
                          ApprovalStatus as S, Role, Action, TRANSITIONS,
                          TERMINAL_STATUSES)


# -------------------------
# Tests: Legal transitions
# -------------------------
@pytest.mark.parametrize("status, role, action, expected", [
    (S.PENDING, "manager", "approve", S.MANAGER_APPROVED),
    (S.PENDING, "manager", "reject", S.MANAGER_REJECTED),
    (S.MANAGER_APPROVED, "tto", "approve", S.TTO_APPROVED),
    (S.MANAGER_APPROVED, "tto", "reject", S.TTO_REJECTED),
    (S.TTO_APPROVED, "engineer", "approve", S.ENGINEER_APPROVED),
    (S.TTO_APPROVED, "engineer", "reject", S.ENGINEER_REJECTED),
    (S.ENGINEER_APPROVED, "seller", "approve", S.ORDERED),
    (S.ENGINEER_APPROVED, "seller", "reject", S.FULFILLMENT_REJECTED),
    (S.ORDERED, "seller", "approve", S.FULFILLED),
    (S.ORDERED, "seller", "reject", S.FULFILLMENT_REJECTED),
])
def test_legal_transitions(status, role, action, expected):
    result = apply(status, role, action, reason="some reason")
    assert result.ok
    assert result.status is expected


def test_role_and_action_are_case_tolerant():
    assert apply("pending", "MANAGER", "Approve").status is S.MANAGER_APPROVED


# -------------------------
# Tests: Illegal transitions
# -------------------------
def test_engineer_cannot_approve_pending():
    result = apply(S.PENDING, "engineer", Action.APPROVE)
    assert result.error is ErrorKind.ILLEGAL_TRANSITION
    assert result.status is None


def test_every_move_outside_the_table_is_illegal():
    for status, role, action in itertools.product(S, Role, Action):
        result = apply(status, role, action, reason="because")
        legal = action in TRANSITIONS.get((role, status), {})
        assert result.ok is legal, (status, role, action)
        if not legal:
            assert result.error is ErrorKind.ILLEGAL_TRANSITION


@pytest.mark.parametrize("status", sorted(TERMINAL_STATUSES))
def test_terminal_states_accept_nothing(status):
    assert is_terminal(status)
    for role, action in itertools.product(Role, Action):
        assert apply(status, role, action, "x").error is \
            ErrorKind.ILLEGAL_TRANSITION


def test_unknown_inputs_are_illegal():
    assert apply("ARCHIVED", "manager", "approve").error is \
        ErrorKind.ILLEGAL_TRANSITION
    assert apply(S.PENDING, "admin", "approve").error is \
        ErrorKind.ILLEGAL_TRANSITION
    assert apply(S.PENDING, "manager", "escalate").error is \
        ErrorKind.ILLEGAL_TRANSITION


# -------------------------
# Tests: Reject reason
# -------------------------
@pytest.mark.parametrize("reason", [None, "", "   "])
def test_reject_requires_reason(reason):
    result = apply(S.MANAGER_APPROVED, "tto", "reject", reason)
    assert result.error is ErrorKind.MISSING_REASON


def test_reject_with_reason():
    result = apply(S.MANAGER_APPROVED, "tto", "reject", "worn beyond spec")
    assert result.status is S.TTO_REJECTED


def test_illegal_move_wins_over_missing_reason():
    result = apply(S.PENDING, "tto", "reject", "")
    assert result.error is ErrorKind.ILLEGAL_TRANSITION


# -------------------------
# Tests: Helpers
# -------------------------
def test_available_actions():
    assert available_actions(S.PENDING, "manager") == [Action.APPROVE,
                                                      Action.REJECT]
    assert available_actions(S.PENDING, "tto") == []
    assert available_actions(S.PENDING, None) == []


def test_queues():
    assert next_role(S.PENDING) is Role.MANAGER
    assert next_role(S.ORDERED) is Role.SELLER
    assert next_role(S.FULFILLED) is None
    assert is_pending_for(S.MANAGER_APPROVED, "tto")
    assert not is_pending_for(S.MANAGER_APPROVED, "manager")
    assert not is_pending_for(S.PENDING, "user")


def test_rejected_statuses():
    assert is_rejected(S.TTO_REJECTED)
    assert not is_rejected(S.FULFILLED)
    assert parse_status("tto_rejected") is S.TTO_REJECTED
    assert parse_status("nope") is None
