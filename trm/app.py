#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Flask App Factory
"""
# ========================================================
# IMPORTS
# ========================================================
from pathlib import Path
from flask import Flask
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from config import SECRET_KEY, APP_NAME, VERSION
from trm.notifications import Notifier
from trm.orchestrator import RequestOrchestrator
from trm.repository import RequestRepository
from trm.uploads import PhotoStore


# --------------------------------------------------------
# GLOBALS
# --------------------------------------------------------
ROOT_DIR = Path(__file__).resolve().parents[1]   # repo root (one level up from trm/)
STATIC_DIR = ROOT_DIR / "static"


# ========================================================
# FUNCTIONS
# ========================================================
def create_app(session_factory=None, notifier=None, photo_store=None,
               date_policy=None):
    """
    Build the JSON API.

    Collaborators default to the configured database, mail endpoints and
    upload directory; tests hand in their own.
    """
    app = Flask(__name__,
                static_folder=str(STATIC_DIR),
                static_url_path="/static",
                )
    app.secret_key = SECRET_KEY
    app.config["APP_NAME"] = APP_NAME
    app.config["APP_VERSION"] = VERSION

    if session_factory is None:
        # local import: creates the engine (and the database file)
        from trm.db import SessionLocal
        session_factory = SessionLocal

    app.extensions["trm"] = RequestOrchestrator(
        RequestRepository(session_factory),
        notifier if notifier is not None else Notifier(),
        date_policy=date_policy,
    )
    app.extensions["trm.photos"] = photo_store or PhotoStore()

    @app.teardown_appcontext
    def remove_session(exc=None):
        # scoped_session keeps one session per thread
        if hasattr(session_factory, "remove"):
            session_factory.remove()

    # Register routes
    from trm.routes import register_routes
    register_routes(app)

    return app
