#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
DB
"""
# ========================================================
# IMPORTS
# ========================================================
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, scoped_session
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from config import DATABASE_URL
from trm.models import Base  # ensure models import happens before create_all


# ========================================================
# FUNCTIONS
# ========================================================
def _set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA secure_delete=ON;")
    finally:
        cursor.close()


def create_db_engine(url: str = DATABASE_URL, **kwargs):
    """Create the engine and the tables; SQLite gets WAL + foreign keys."""
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, echo=False, future=True, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _set_sqlite_pragma)
    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(engine):
    return scoped_session(sessionmaker(bind=engine, autoflush=False,
                                       expire_on_commit=False))


# ========================================================
# GLOABALS
# ========================================================
engine = create_db_engine()
SessionLocal = create_session_factory(engine)
