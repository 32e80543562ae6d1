#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Utils: caller identity and query parameter helpers
"""
# ========================================================
# IMPORTS
# ========================================================
from flask import session, request
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from trm.orchestrator import ActorContext, parse_actor
from trm.sorting import SortSpec, Direction
from trm.validation import FIELD_NAMES


# ========================================================
# FUNCTIONS
# ========================================================
def get_actor() -> ActorContext:
    """
    Role handed over by the external login.

    The session (set via ``POST /api/session``) wins over the
    ``X-Actor-*`` headers. Without either the caller is a plain ``user``.
    """
    role = session.get("role") or request.headers.get("X-Actor-Role")
    user_id = session.get("user_id") or request.headers.get("X-Actor-Id")
    email = session.get("email") or request.headers.get("X-Actor-Email")
    return parse_actor(role or "user", user_id=user_id, email=email)


def get_sort_spec():
    """``?sort=presentKm&dir=desc`` -> SortSpec; no ``sort`` -> None."""
    key = (request.args.get("sort") or "").strip()
    if not key:
        return None
    key = FIELD_NAMES.get(key, key)
    if key == "createdAt":
        key = "created_at"
    elif key == "updatedAt":
        key = "updated_at"
    return SortSpec(key, Direction.parse(request.args.get("dir")))
