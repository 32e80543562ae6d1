#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Approval chain state machine
"""
# ========================================================
# IMPORTS
# ========================================================
from dataclasses import dataclass
from enum import Enum
from typing import Optional
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from trm.errors import ErrorKind


# ========================================================
# CLASSES
# ========================================================
class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    MANAGER_APPROVED = "MANAGER_APPROVED"
    MANAGER_REJECTED = "MANAGER_REJECTED"
    TTO_APPROVED = "TTO_APPROVED"
    TTO_REJECTED = "TTO_REJECTED"
    ENGINEER_APPROVED = "ENGINEER_APPROVED"
    ENGINEER_REJECTED = "ENGINEER_REJECTED"
    ORDERED = "ORDERED"
    FULFILLED = "FULFILLED"
    FULFILLMENT_REJECTED = "FULFILLMENT_REJECTED"


class Role(str, Enum):
    MANAGER = "manager"
    TTO = "tto"
    ENGINEER = "engineer"
    SELLER = "seller"


class Action(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


@dataclass(frozen=True)
class TransitionResult:
    status: Optional[ApprovalStatus] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


# ========================================================
# GLOABALS
# ========================================================
INITIAL_STATUS = ApprovalStatus.PENDING

TERMINAL_STATUSES = frozenset({
    ApprovalStatus.MANAGER_REJECTED,
    ApprovalStatus.TTO_REJECTED,
    ApprovalStatus.ENGINEER_REJECTED,
    ApprovalStatus.FULFILLED,
    ApprovalStatus.FULFILLMENT_REJECTED,
})

REJECTED_STATUSES = TERMINAL_STATUSES - {ApprovalStatus.FULFILLED}

# (role, from) -> {action: to}
TRANSITIONS = {
    (Role.MANAGER, ApprovalStatus.PENDING): {
        Action.APPROVE: ApprovalStatus.MANAGER_APPROVED,
        Action.REJECT: ApprovalStatus.MANAGER_REJECTED,
    },
    (Role.TTO, ApprovalStatus.MANAGER_APPROVED): {
        Action.APPROVE: ApprovalStatus.TTO_APPROVED,
        Action.REJECT: ApprovalStatus.TTO_REJECTED,
    },
    (Role.ENGINEER, ApprovalStatus.TTO_APPROVED): {
        Action.APPROVE: ApprovalStatus.ENGINEER_APPROVED,
        Action.REJECT: ApprovalStatus.ENGINEER_REJECTED,
    },
    (Role.SELLER, ApprovalStatus.ENGINEER_APPROVED): {
        Action.APPROVE: ApprovalStatus.ORDERED,
        Action.REJECT: ApprovalStatus.FULFILLMENT_REJECTED,
    },
    (Role.SELLER, ApprovalStatus.ORDERED): {
        Action.APPROVE: ApprovalStatus.FULFILLED,
        Action.REJECT: ApprovalStatus.FULFILLMENT_REJECTED,
    },
}

# who has to act next on a request in a given status
NEXT_ROLE = {status: role for (role, status) in TRANSITIONS}


# ========================================================
# FUNCTIONS
# ========================================================
def _parse(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return None
    text = str(value).strip()
    for candidate in (text, text.upper(), text.lower()):
        try:
            return enum_cls(candidate)
        except ValueError:
            continue
    return None


def parse_status(value) -> Optional[ApprovalStatus]:
    return _parse(ApprovalStatus, value)


def parse_role(value) -> Optional[Role]:
    return _parse(Role, value)


def parse_action(value) -> Optional[Action]:
    return _parse(Action, value)


def apply(current_status, role, action, reason: Optional[str] = None
          ) -> TransitionResult:
    """
    Compute the status a role action leads to.

    Legality is checked before the reject reason: an action that is not
    allowed from ``current_status`` is an illegal transition whatever the
    reason says. Unknown statuses, roles or actions are illegal as well.
    """
    status = parse_status(current_status)
    role_ = parse_role(role)
    action_ = parse_action(action)
    if status is None or role_ is None or action_ is None:
        return TransitionResult(
            error=ErrorKind.ILLEGAL_TRANSITION,
            message=f"Unknown status, role or action: "
                    f"{current_status!r}, {role!r}, {action!r}")

    target = TRANSITIONS.get((role_, status), {}).get(action_)
    if target is None:
        return TransitionResult(
            error=ErrorKind.ILLEGAL_TRANSITION,
            message=f"{role_.value} cannot {action_.value} a request "
                    f"in status {status.value}")

    if action_ is Action.REJECT and not (reason or "").strip():
        return TransitionResult(error=ErrorKind.MISSING_REASON,
                                message="Please provide a reason for "
                                        "rejection.")
    return TransitionResult(status=target)


def available_actions(current_status, role) -> list[Action]:
    status = parse_status(current_status)
    role_ = parse_role(role)
    return list(TRANSITIONS.get((role_, status), {}))


def is_terminal(current_status) -> bool:
    return parse_status(current_status) in TERMINAL_STATUSES


def is_rejected(current_status) -> bool:
    return parse_status(current_status) in REJECTED_STATUSES


def next_role(current_status) -> Optional[Role]:
    return NEXT_ROLE.get(parse_status(current_status))


def is_pending_for(current_status, role) -> bool:
    """True when the request sits in ``role``'s approval queue."""
    role_ = parse_role(role)
    return role_ is not None and next_role(current_status) is role_
