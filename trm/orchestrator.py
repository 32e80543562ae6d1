#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Request Orchestrator
====================

Glue between the pure request logic and its collaborators.

Responsibilities:
-----------------
- Validate drafts before they are created or updated.
- Run role actions through the approval state machine before persisting.
- Gate deletion behind an explicit ``DeletePolicy``.
- Notify the next role after a successful mutation (best effort).
- Prepare sorted dashboard tables with photo fallback chains.

Every failure reaching the caller is a ``TireRequestError`` that states
whether the attempted mutation was persisted.
"""
# =========================
# Imports
# =========================
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional
from trm.errors import (TireRequestError, ValidationFailed, IllegalTransition,
                        MissingReason, RequestNotFound, DeleteNotPermitted,
                        UnexpectedFailure, ErrorKind)
from trm.photos import resolve_all
from trm.sorting import SortSpec, sort_requests
from trm.validation import validate_form, clean_form
from trm.workflow import (ApprovalStatus, Action, apply, available_actions,
                          is_pending_for, parse_action, parse_role,
                          INITIAL_STATUS)


logger = logging.getLogger(__name__)

ALL_STATUSES = frozenset(ApprovalStatus)


# =========================
# Class: ActorContext
# =========================
@dataclass(frozen=True)
class ActorContext:
    """Who is calling; handed over by the external login."""
    role: str
    user_id: Optional[str] = None
    email: Optional[str] = None


# =========================
# Class: DeletePolicy
# =========================
@dataclass(frozen=True)
class DeletePolicy:
    """
    Which role may delete requests in which status.

    Roles that are not listed may not delete anything.
    """
    rules: Mapping[str, frozenset] = field(default_factory=lambda: {
        "admin": ALL_STATUSES,
        "user": frozenset({ApprovalStatus.PENDING}),
        "manager": frozenset({ApprovalStatus.PENDING,
                              ApprovalStatus.MANAGER_REJECTED}),
        "tto": frozenset({ApprovalStatus.MANAGER_APPROVED,
                          ApprovalStatus.TTO_REJECTED}),
        "engineer": frozenset({ApprovalStatus.TTO_APPROVED,
                               ApprovalStatus.ENGINEER_REJECTED}),
    })

    def allows(self, role, status) -> bool:
        allowed = self.rules.get(str(role or "").strip().lower(), frozenset())
        try:
            return ApprovalStatus(status) in allowed
        except ValueError:
            return False


@dataclass
class DashboardView:
    pending: list
    processed: list


# =========================
# Class: RequestOrchestrator
# =========================
class RequestOrchestrator:
    """Coordinates validation, approval and persistence of requests."""

    def __init__(self, repository, notifier=None,
                 delete_policy: Optional[DeletePolicy] = None,
                 date_policy=None):
        self.repo = repository
        self.notifier = notifier
        self.delete_policy = delete_policy or DeletePolicy()
        self.date_policy = date_policy

    # ----------------------------------------------------
    # create / update
    # ----------------------------------------------------
    def submit(self, actor: ActorContext, form: dict, photo_refs=()):
        """
        Validate and create a new request in status PENDING.

        Parameters
        ----------
        actor : ActorContext
            Caller (usually role ``user``).
        form : dict
            Draft keyed by python field names.
        photo_refs : sequence of str
            Stored photo references, at most five.

        Returns
        -------
        TireRequest
            The stored request including its id.
        """
        photo_refs = list(photo_refs or [])
        errors = validate_form({**form, "tire_photo_refs": photo_refs},
                               date_policy=self.date_policy)
        if errors:
            raise ValidationFailed(errors)

        persisted = False
        try:
            req = self.repo.create(clean_form(form), photo_refs,
                                   actor_role=actor.role)
            persisted = True
            logger.info("Request %s created by %s (%s)", req.id, actor.role,
                        req.vehicle_no)
            self._notify(req)
            return req
        except TireRequestError:
            raise
        except Exception as e:
            raise self._unexpected("submit", e, persisted) from e

    def update(self, actor: ActorContext, request_id: int, form: dict,
               photo_refs=None):
        """
        Validate and update a request that is still PENDING.

        ``photo_refs=None`` keeps the stored photos; a list replaces them.
        """
        current = self._get(request_id)
        if current.status != INITIAL_STATUS.value:
            raise IllegalTransition(
                f"Request {request_id} is {current.status} and can no "
                f"longer be edited.")
        draft = dict(form)
        draft["tire_photo_refs"] = (current.tire_photo_refs
                                    if photo_refs is None
                                    else list(photo_refs))
        errors = validate_form(draft, date_policy=self.date_policy)
        if errors:
            raise ValidationFailed(errors)

        persisted = False
        try:
            req = self.repo.update(
                request_id, clean_form(form),
                None if photo_refs is None else list(photo_refs),
                expected_status=INITIAL_STATUS, actor_role=actor.role)
            if req is None:
                raise IllegalTransition(
                    f"Request {request_id} changed while it was edited.")
            persisted = True
            logger.info("Request %s updated by %s", request_id, actor.role)
            return req
        except TireRequestError:
            raise
        except Exception as e:
            raise self._unexpected("update", e, persisted) from e

    # ----------------------------------------------------
    # role actions
    # ----------------------------------------------------
    def act(self, actor: ActorContext, request_id: int, action,
            reason: Optional[str] = None):
        """Apply an approve/reject of ``actor.role`` to a request."""
        current = self._get(request_id)
        result = apply(current.status, actor.role, action, reason)
        if not result.ok:
            logger.warning("Refused %s of request %s by %s: %s", action,
                           request_id, actor.role, result.message)
            if result.error is ErrorKind.MISSING_REASON:
                raise MissingReason(result.message)
            raise IllegalTransition(result.message)

        persisted = False
        try:
            applied = self.repo.set_status(
                request_id, ApprovalStatus(current.status), result.status,
                reason=reason, actor_role=actor.role)
            if not applied:
                raise IllegalTransition(
                    f"Request {request_id} was changed by someone else; "
                    f"reload and try again.")
            persisted = True
            logger.info("Request %s: %s -> %s by %s", request_id,
                        current.status, result.status.value, actor.role)
            req = self.repo.get(request_id)
            if req is not None:
                self._notify(req)
            return req
        except TireRequestError:
            raise
        except Exception as e:
            raise self._unexpected("act", e, persisted) from e

    def approve(self, actor: ActorContext, request_id: int):
        return self.act(actor, request_id, Action.APPROVE)

    def reject(self, actor: ActorContext, request_id: int, reason: str):
        return self.act(actor, request_id, Action.REJECT, reason)

    # ----------------------------------------------------
    # delete
    # ----------------------------------------------------
    def delete(self, actor: ActorContext, request_id: int):
        """
        Delete a request if the policy allows it for the actor's role.

        Returns the (now detached) deleted request so the caller can clean up
        its stored photos.
        """
        current = self._get(request_id)
        if not self.delete_policy.allows(actor.role, current.status):
            raise DeleteNotPermitted(
                f"Role {actor.role!r} may not delete a request in status "
                f"{current.status}.")
        try:
            if not self.repo.delete(request_id, actor_role=actor.role):
                raise RequestNotFound(f"Request {request_id} not found.")
        except TireRequestError:
            raise
        except Exception as e:
            raise self._unexpected("delete", e, False) from e
        logger.info("Request %s deleted by %s", request_id, actor.role)
        return current

    # ----------------------------------------------------
    # queries
    # ----------------------------------------------------
    def get(self, request_id: int):
        return self._get(request_id)

    def list_requests(self, search: str = "",
                      sort_spec: Optional[SortSpec] = None) -> list:
        return sort_requests(self.repo.list(search), sort_spec)

    def dashboard(self, actor: ActorContext,
                  sort_spec: Optional[SortSpec] = None) -> DashboardView:
        """Split requests into the actor's queue and everything else."""
        requests = self.list_requests(sort_spec=sort_spec)
        pending = [r for r in requests if is_pending_for(r.status, actor.role)]
        processed = [r for r in requests
                     if not is_pending_for(r.status, actor.role)]
        return DashboardView(pending=pending, processed=processed)

    @staticmethod
    def describe(req, role=None) -> dict:
        """Wire representation plus what the UI needs to render a row."""
        data = req.to_dict()
        data["availableActions"] = [a.value for a in
                                    available_actions(req.status, role)]
        data["photoCandidates"] = resolve_all(req.tire_photo_refs)
        return data

    # ----------------------------------------------------
    # helpers
    # ----------------------------------------------------
    def _get(self, request_id: int):
        req = self.repo.get(request_id)
        if req is None:
            raise RequestNotFound(f"Request {request_id} not found.")
        return req

    def _notify(self, req) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(req)
        except Exception:
            logger.exception("Notifier failed for request %s", req.id)

    @staticmethod
    def _unexpected(operation: str, error: Exception,
                    persisted: bool) -> UnexpectedFailure:
        logger.exception("Unexpected failure during %s: %s", operation, error)
        if persisted:
            message = ("Your change was saved, but something went wrong "
                       "afterwards. Please reload instead of resubmitting.")
        else:
            message = "Your change was not saved. Please try again."
        return UnexpectedFailure(message, persisted=persisted)


def parse_actor(role, user_id=None, email=None) -> ActorContext:
    """Normalise the role string handed over by the login collaborator."""
    role_ = parse_role(role)
    text = role_.value if role_ else str(role or "").strip().lower()
    return ActorContext(role=text, user_id=user_id, email=email)


__all__ = ["ActorContext", "DeletePolicy", "DashboardView",
           "RequestOrchestrator", "parse_actor", "parse_action"]
