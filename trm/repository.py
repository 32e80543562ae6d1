#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Request repository: persistence of tire replacement requests via SQLAlchemy.
"""
# ========================================================
# IMPORTS
# ========================================================
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterable, Optional
from sqlalchemy import update, select
from sqlalchemy.exc import SQLAlchemyError
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from trm.errors import RepositoryUnavailable
from trm.models import TireRequest, TirePhoto, AuditLog
from trm.workflow import ApprovalStatus, INITIAL_STATUS, REJECTED_STATUSES


# ========================================================
# GLOABALS
# ========================================================
logger = logging.getLogger(__name__)


# ========================================================
# FUNCTIONS
# ========================================================
def log_action(db, action, request_id=None, actor_role=None, details=None):
    db.add(AuditLog(action=action, request_id=request_id,
                    actor_role=actor_role, details=details))


def _photo_rows(photo_refs: Iterable[str]) -> list[TirePhoto]:
    return [TirePhoto(position=i, ref=ref)
            for i, ref in enumerate(photo_refs or [])]


# ========================================================
# CLASSES
# ========================================================
class RequestRepository:
    """Repository for CRUD operations on tire replacement requests."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @contextmanager
    def _session(self):
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Request store failure: %s", e)
            raise RepositoryUnavailable(
                "The request store is currently unavailable. "
                "Please try again.") from e
        finally:
            db.close()

    def create(self, fields: dict, photo_refs: Iterable[str] = (),
               actor_role: Optional[str] = None) -> TireRequest:
        """Insert a new request in the initial status and return it."""
        with self._session() as db:
            req = TireRequest(**fields, status=INITIAL_STATUS.value)
            req.photos = _photo_rows(photo_refs)
            db.add(req)
            db.flush()
            log_action(db, "create", req.id, actor_role,
                       f"Created: {req.vehicle_no} "
                       f"({len(req.photos)} photos)")
            db.commit()
            return req

    def get(self, request_id: int) -> Optional[TireRequest]:
        """Fetch a single request by ID."""
        with self._session() as db:
            return db.get(TireRequest, request_id)

    def list(self, search: str = "") -> list[TireRequest]:
        """List all requests, optionally filtered by vehicle, section or
        officer."""
        with self._session() as db:
            query = select(TireRequest)
            q = (search or "").strip()
            if q:
                like = f"%{q}%"
                query = query.where(
                    (TireRequest.vehicle_no.ilike(like)) |
                    (TireRequest.user_section.ilike(like)) |
                    (TireRequest.officer_service_no.ilike(like))
                )
            query = query.order_by(TireRequest.updated_at.desc(),
                                   TireRequest.id.desc())
            return list(db.scalars(query).all())

    def update(self, request_id: int, fields: dict,
               photo_refs: Optional[Iterable[str]] = None, *,
               expected_status: ApprovalStatus = INITIAL_STATUS,
               actor_role: Optional[str] = None) -> Optional[TireRequest]:
        """
        Update the descriptive fields of a request.

        Photos are only touched when ``photo_refs`` is given and are then
        replaced as a whole set. Returns ``None`` when the request does not
        exist or is no longer in ``expected_status``.
        """
        with self._session() as db:
            req = db.get(TireRequest, request_id)
            if req is None or req.status != ApprovalStatus(
                    expected_status).value:
                return None
            for name, value in fields.items():
                setattr(req, name, value)
            if photo_refs is not None:
                req.photos.clear()
                db.flush()
                req.photos.extend(_photo_rows(photo_refs))
            log_action(db, "update", req.id, actor_role,
                       f"Updated: {', '.join(sorted(fields))}")
            db.commit()
            return req

    def set_status(self, request_id: int, expected: ApprovalStatus,
                   new_status: ApprovalStatus, reason: Optional[str] = None,
                   actor_role: Optional[str] = None) -> bool:
        """
        Move a request from ``expected`` to ``new_status``.

        The update only matches while the stored status still equals
        ``expected``; False means another actor got there first (or the
        request is gone).
        """
        expected = ApprovalStatus(expected)
        new_status = ApprovalStatus(new_status)
        values = {"status": new_status.value,
                  "updated_at": datetime.now(timezone.utc)}
        if new_status in REJECTED_STATUSES:
            values["reject_reason"] = (reason or "").strip()
        with self._session() as db:
            result = db.execute(
                update(TireRequest)
                .where(TireRequest.id == request_id,
                       TireRequest.status == expected.value)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                db.rollback()
                return False
            details = f"{expected.value} -> {new_status.value}"
            if reason:
                details += f" ({reason.strip()})"
            log_action(db, "status", request_id, actor_role, details)
            db.commit()
            return True

    def delete(self, request_id: int,
               actor_role: Optional[str] = None) -> bool:
        """Delete a request (and its photos) by ID."""
        with self._session() as db:
            req = db.get(TireRequest, request_id)
            if req is None:
                return False
            details = f"Deleted: {req.vehicle_no} @ {req.status}"
            db.delete(req)
            log_action(db, "delete", request_id, actor_role, details)
            db.commit()
            return True

    def ping(self) -> bool:
        """Cheap round trip; raises ``RepositoryUnavailable`` when down."""
        with self._session() as db:
            db.execute(select(1))
            return True

    def audit_entries(self, request_id: Optional[int] = None
                      ) -> list[AuditLog]:
        with self._session() as db:
            query = select(AuditLog).order_by(AuditLog.id.asc())
            if request_id is not None:
                query = query.where(AuditLog.request_id == request_id)
            return list(db.scalars(query).all())
