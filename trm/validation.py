#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Request form validation.

Every field of a tire replacement request is bound to a ``FieldRule`` whose
``FieldKind`` selects the checker. ``validate_form`` runs all of them over a
snapshot of the draft and returns ``{field: message}``; an empty dict means
the draft may be submitted. Nothing in here raises for bad input.
"""
# ========================================================
# IMPORTS
# ========================================================
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable, Optional
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from config import USER_SECTIONS, MAX_PHOTOS, REPLACEMENT_DATE_POLICY


# ========================================================
# GLOABALS
# ========================================================
MSG_REQUIRED = "This field is required"
MSG_EMAIL_REQUIRED = "Email is required"
MSG_EMAIL_INVALID = "Invalid email address"
MSG_DIGITS_ONLY = "Only numbers are allowed"
MSG_DATE_INVALID = "Invalid date"
MSG_DATE_FUTURE = "Replacement date cannot be in the future"
MSG_DATE_PAST = "Replacement date cannot be in the past"
MSG_KM_ORDER = "Previous Km must be less than Present Km"
MSG_PHOTO_REF = "Each photo must be a non-empty reference"

RE_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
RE_DIGITS = re.compile(r"^\d+$")
RE_VEHICLE_NO = re.compile(r"^[A-Za-z0-9-]+$")

WEAR_INDICATORS = ("Yes", "No")
WEAR_PATTERNS = ("One Edge", "Center", "Both Edges", "Uneven", "Patchy")

KM_FIELDS = ("previous_km", "present_km")

# snake_case (python) <-> camelCase (JSON API)
WIRE_NAMES = {
    "vehicle_no": "vehicleNo",
    "vehicle_type": "vehicleType",
    "vehicle_brand": "vehicleBrand",
    "vehicle_model": "vehicleModel",
    "user_section": "userSection",
    "replacement_date": "replacementDate",
    "existing_make": "existingMake",
    "tire_size": "tireSize",
    "no_of_tires": "noOfTires",
    "no_of_tubes": "noOfTubes",
    "cost_center": "costCenter",
    "present_km": "presentKm",
    "previous_km": "previousKm",
    "wear_indicator": "wearIndicator",
    "wear_pattern": "wearPattern",
    "officer_service_no": "officerServiceNo",
    "comments": "comments",
    "email": "email",
    "tire_photo_refs": "tirePhotoUrls",
}
FIELD_NAMES = {v: k for k, v in WIRE_NAMES.items()}


# ========================================================
# CLASSES
# ========================================================
class FieldKind(Enum):
    TEXT = "text"
    VEHICLE_NO = "vehicle_no"
    CHOICE = "choice"
    EMAIL = "email"
    INTEGER = "integer"
    DIGIT_CODE = "digit_code"
    DATE = "date"
    PHOTOS = "photos"


class DatePolicy(str, Enum):
    ANY = "any"
    NO_FUTURE = "no_future"
    NO_PAST = "no_past"

    @classmethod
    def parse(cls, value) -> "DatePolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.ANY


@dataclass(frozen=True)
class FieldRule:
    kind: FieldKind
    max_length: Optional[int] = None
    choices: tuple = ()
    minimum: Optional[int] = None
    maximum: Optional[int] = None


FIELD_RULES = {
    "vehicle_no": FieldRule(FieldKind.VEHICLE_NO, max_length=8),
    "vehicle_type": FieldRule(FieldKind.TEXT, max_length=50),
    "vehicle_brand": FieldRule(FieldKind.TEXT, max_length=50),
    "vehicle_model": FieldRule(FieldKind.TEXT, max_length=50),
    "user_section": FieldRule(FieldKind.CHOICE, choices=USER_SECTIONS),
    "replacement_date": FieldRule(FieldKind.DATE),
    "existing_make": FieldRule(FieldKind.TEXT, max_length=50),
    "tire_size": FieldRule(FieldKind.TEXT, max_length=30),
    "no_of_tires": FieldRule(FieldKind.INTEGER, minimum=1, maximum=50),
    "no_of_tubes": FieldRule(FieldKind.INTEGER, minimum=0, maximum=50),
    "cost_center": FieldRule(FieldKind.DIGIT_CODE, minimum=4, maximum=10),
    "present_km": FieldRule(FieldKind.INTEGER, minimum=0, maximum=9_999_999),
    "previous_km": FieldRule(FieldKind.INTEGER, minimum=0, maximum=9_999_999),
    "wear_indicator": FieldRule(FieldKind.CHOICE, choices=WEAR_INDICATORS),
    "wear_pattern": FieldRule(FieldKind.CHOICE, choices=WEAR_PATTERNS),
    "officer_service_no": FieldRule(FieldKind.TEXT, max_length=20),
    "comments": FieldRule(FieldKind.TEXT, max_length=500),
    "email": FieldRule(FieldKind.EMAIL, max_length=254),
    "tire_photo_refs": FieldRule(FieldKind.PHOTOS, maximum=MAX_PHOTOS),
}

# fields every draft must carry (photos are optional)
REQUIRED_FIELDS = tuple(n for n in FIELD_RULES if n != "tire_photo_refs")


# ========================================================
# FUNCTIONS
# ========================================================
def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _text(value)
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        # full ISO timestamp as sent back by the store
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _check_text(rule: FieldRule, value, **_) -> Optional[str]:
    text = _text(value)
    if not text:
        return MSG_REQUIRED
    if rule.max_length and len(text) > rule.max_length:
        return f"Must be at most {rule.max_length} characters"
    return None


def _check_vehicle_no(rule: FieldRule, value, **kw) -> Optional[str]:
    error = _check_text(rule, value, **kw)
    if error:
        return error
    if not RE_VEHICLE_NO.match(_text(value)):
        return "Only letters, digits and hyphens are allowed"
    return None


def _check_choice(rule: FieldRule, value, **_) -> Optional[str]:
    text = _text(value)
    if not text:
        return MSG_REQUIRED
    if text not in rule.choices:
        return f"Must be one of: {', '.join(rule.choices)}"
    return None


def _check_email(rule: FieldRule, value, **_) -> Optional[str]:
    text = _text(value)
    if not text:
        return MSG_EMAIL_REQUIRED
    if len(text) > rule.max_length or not RE_EMAIL.match(text):
        return MSG_EMAIL_INVALID
    return None


def _check_integer(rule: FieldRule, value, **_) -> Optional[str]:
    text = _text(value)
    if not text:
        return MSG_REQUIRED
    if not RE_DIGITS.match(text):
        return MSG_DIGITS_ONLY
    number = int(text)
    if number < rule.minimum or number > rule.maximum:
        return f"Must be between {rule.minimum:,} and {rule.maximum:,}"
    return None


def _check_digit_code(rule: FieldRule, value, **_) -> Optional[str]:
    text = _text(value)
    if not text:
        return MSG_REQUIRED
    if not RE_DIGITS.match(text):
        return MSG_DIGITS_ONLY
    if not rule.minimum <= len(text) <= rule.maximum:
        return f"Must be {rule.minimum} to {rule.maximum} digits"
    return None


def _check_date(rule: FieldRule, value, *, date_policy=DatePolicy.ANY,
                today=None, **_) -> Optional[str]:
    if not _text(value):
        return MSG_REQUIRED
    parsed = _parse_date(value)
    if parsed is None:
        return MSG_DATE_INVALID
    today = today or date.today()
    if date_policy is DatePolicy.NO_FUTURE and parsed > today:
        return MSG_DATE_FUTURE
    if date_policy is DatePolicy.NO_PAST and parsed < today:
        return MSG_DATE_PAST
    return None


def _check_photos(rule: FieldRule, value, **_) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (str, bytes)) or not hasattr(value, "__len__"):
        return "Photos must be a list"
    if len(value) > rule.maximum:
        return f"Only up to {rule.maximum} photos allowed"
    for ref in value:
        if not isinstance(ref, str) or not ref.strip():
            return MSG_PHOTO_REF
    return None


CHECKERS: dict[FieldKind, Callable[..., Optional[str]]] = {
    FieldKind.TEXT: _check_text,
    FieldKind.VEHICLE_NO: _check_vehicle_no,
    FieldKind.CHOICE: _check_choice,
    FieldKind.EMAIL: _check_email,
    FieldKind.INTEGER: _check_integer,
    FieldKind.DIGIT_CODE: _check_digit_code,
    FieldKind.DATE: _check_date,
    FieldKind.PHOTOS: _check_photos,
}


def _km_order_error(form: dict) -> Optional[str]:
    prev_txt = _text(form.get("previous_km"))
    pres_txt = _text(form.get("present_km"))
    if not (RE_DIGITS.match(prev_txt) and RE_DIGITS.match(pres_txt)):
        return None
    if int(prev_txt) >= int(pres_txt):
        return MSG_KM_ORDER
    return None


def validate_field(name: str, value, form: Optional[dict] = None, *,
                   date_policy: DatePolicy = DatePolicy.ANY,
                   today: Optional[date] = None) -> Optional[str]:
    """
    Validate one field and, for the km readings, the cross-field rule.

    Unknown field names are not validated and yield ``None``.
    """
    rule = FIELD_RULES.get(name)
    if rule is None:
        return None
    error = CHECKERS[rule.kind](rule, value, date_policy=date_policy,
                                today=today)
    if error or name not in KM_FIELDS:
        return error
    snapshot = dict(form or {})
    snapshot[name] = value
    other = KM_FIELDS[1] if name == KM_FIELDS[0] else KM_FIELDS[0]
    other_rule = FIELD_RULES[other]
    if CHECKERS[other_rule.kind](other_rule, snapshot.get(other)):
        return None
    return _km_order_error(snapshot)


def validate_form(form: dict, *, date_policy=None,
                  today: Optional[date] = None) -> dict[str, str]:
    """
    Validate a whole draft.

    Parameters
    ----------
    form : dict
        Snapshot of the draft keyed by python field names.
    date_policy : DatePolicy, optional
        Temporal rule for ``replacement_date``; defaults to the configured
        ``REPLACEMENT_DATE_POLICY``.
    today : date, optional
        Reference day for the date policy.

    Returns
    -------
    dict
        ``{field_name: message}``; empty when the draft is acceptable.
    """
    if date_policy is None:
        date_policy = DatePolicy.parse(REPLACEMENT_DATE_POLICY)
    form = form or {}
    errors = {}
    for name, rule in FIELD_RULES.items():
        error = CHECKERS[rule.kind](rule, form.get(name),
                                    date_policy=date_policy, today=today)
        if error:
            errors[name] = error
    if not any(k in errors for k in KM_FIELDS):
        km_error = _km_order_error(form)
        if km_error:
            for k in KM_FIELDS:
                errors[k] = km_error
    return errors


def is_acceptable(errors: dict) -> bool:
    return not errors


def clean_form(form: dict) -> dict:
    """Convert a validated draft into storage types."""
    cleaned = {}
    for name in REQUIRED_FIELDS:
        rule = FIELD_RULES[name]
        value = form.get(name)
        if rule.kind in (FieldKind.INTEGER, FieldKind.DIGIT_CODE):
            cleaned[name] = int(_text(value))
        elif rule.kind is FieldKind.DATE:
            cleaned[name] = _parse_date(value)
        else:
            cleaned[name] = _text(value)
    return cleaned


def from_wire(payload) -> dict:
    """camelCase request payload -> python field names (unknown keys dropped)."""
    out = {}
    for key, value in (payload or {}).items():
        name = FIELD_NAMES.get(key)
        if name is None and key in WIRE_NAMES:
            name = key
        if name is not None:
            out[name] = value
    return out


def to_wire(fields: dict) -> dict:
    return {WIRE_NAMES.get(k, k): v for k, v in fields.items()}
