#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Models
"""
# ========================================================
# IMPORTS
# ========================================================
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy import (Column, Integer, BigInteger, String, Date, DateTime,
                        Text, ForeignKey, UniqueConstraint)
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from trm.validation import to_wire
from trm.workflow import ApprovalStatus, INITIAL_STATUS


# ========================================================
# GLOABALS
# ========================================================
Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


# ========================================================
# CLASSES (MODELS from BASE)
# ========================================================
class TireRequest(Base):
    """
    TireRequest Class
    """
    __tablename__ = "tire_requests"

    id = Column(Integer, primary_key=True)
    vehicle_no = Column(String(8), nullable=False, index=True)
    vehicle_type = Column(String(50), nullable=False)
    vehicle_brand = Column(String(50), nullable=False)
    vehicle_model = Column(String(50), nullable=False)
    user_section = Column(String(50), nullable=False, index=True)
    replacement_date = Column(Date, nullable=False)
    existing_make = Column(String(50), nullable=False)
    tire_size = Column(String(30), nullable=False)
    no_of_tires = Column(Integer, nullable=False)
    no_of_tubes = Column(Integer, nullable=False)
    cost_center = Column(BigInteger, nullable=False)
    present_km = Column(Integer, nullable=False)
    previous_km = Column(Integer, nullable=False)
    wear_indicator = Column(String(3), nullable=False)
    wear_pattern = Column(String(20), nullable=False)
    officer_service_no = Column(String(20), nullable=False)
    comments = Column(Text, nullable=False)
    email = Column(String(254), nullable=False)

    status = Column(String(30), nullable=False, index=True,
                    default=INITIAL_STATUS.value)
    reject_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow,
                        nullable=False)

    photos = relationship("TirePhoto", order_by="TirePhoto.position",
                          cascade="all, delete-orphan", lazy="selectin")

    @property
    def tire_photo_refs(self) -> list[str]:
        return [p.ref for p in self.photos]

    @property
    def approval_status(self) -> ApprovalStatus:
        return ApprovalStatus(self.status)

    def to_dict(self) -> dict:
        fields = {
            "vehicle_no": self.vehicle_no,
            "vehicle_type": self.vehicle_type,
            "vehicle_brand": self.vehicle_brand,
            "vehicle_model": self.vehicle_model,
            "user_section": self.user_section,
            "replacement_date": (self.replacement_date.isoformat()
                                 if self.replacement_date else None),
            "existing_make": self.existing_make,
            "tire_size": self.tire_size,
            "no_of_tires": self.no_of_tires,
            "no_of_tubes": self.no_of_tubes,
            "cost_center": self.cost_center,
            "present_km": self.present_km,
            "previous_km": self.previous_km,
            "wear_indicator": self.wear_indicator,
            "wear_pattern": self.wear_pattern,
            "officer_service_no": self.officer_service_no,
            "comments": self.comments,
            "email": self.email,
            "tire_photo_refs": self.tire_photo_refs,
        }
        data = {"id": self.id}
        data.update(to_wire(fields))
        data.update({
            "status": self.status,
            "rejectReason": self.reject_reason,
            "createdAt": (self.created_at.isoformat()
                          if self.created_at else None),
            "updatedAt": (self.updated_at.isoformat()
                          if self.updated_at else None),
        })
        return data


class TirePhoto(Base):
    """
    TirePhoto Class
    """
    __tablename__ = "tire_photos"

    id = Column(Integer, primary_key=True)
    request_id = Column(Integer, ForeignKey("tire_requests.id",
                                            ondelete="CASCADE"),
                        nullable=False, index=True)
    position = Column(Integer, nullable=False)
    ref = Column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint("request_id", "position",
                         name="uq_request_photo_position"),
    )


class AuditLog(Base):
    """
    AuditLog Class
    """
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True)
    # 'create', 'update', 'approve', 'reject', 'delete', 'backup'
    action = Column(String(50), nullable=False)
    # None for backups
    request_id = Column(Integer, nullable=True)
    actor_role = Column(String(50), nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
