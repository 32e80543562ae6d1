#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
All routes attached to app
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from flask import (
    request, jsonify, session, current_app, Response, send_from_directory
)
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from trm.errors import TireRequestError, ValidationFailed
from trm.export import export_bytes
from trm.utils import get_actor, get_sort_spec
from trm.validation import from_wire
from trm.workflow import Action


# ========================================================
# GLOABALS
# ========================================================
logger = logging.getLogger(__name__)


# ========================================================
# FUNCTIONS
# ========================================================
def _orchestrator():
    return current_app.extensions["trm"]


def _photo_store():
    return current_app.extensions["trm.photos"]


def _discard_photos(refs):
    """Remove stored photo files; a failure here never undoes the commit."""
    try:
        _photo_store().discard(refs)
    except OSError as e:
        logger.warning("Could not remove stored photos %s: %s", refs, e)


def _read_payload():
    """
    Request body as python field names.

    Returns ``(fields, uploads, photo_refs)``; ``photo_refs`` is ``None``
    when the client did not send any, which keeps stored photos on update.
    """
    if request.files or request.mimetype == "multipart/form-data":
        fields = from_wire(request.form.to_dict())
        fields.pop("tire_photo_refs", None)
        refs = request.form.getlist("tirePhotoUrls")
        uploads = [f for f in request.files.getlist("tirePhotos")
                   if f and f.filename]
        if not refs and not uploads:
            refs = None
        return fields, uploads, refs

    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationFailed({"form": "Expected a JSON object"})
    fields = from_wire(payload)
    refs = fields.pop("tire_photo_refs", None)
    if refs is not None and not isinstance(refs, list):
        raise ValidationFailed({"tire_photo_refs": "Photos must be a list"})
    return fields, [], refs


def _store_uploads(uploads, refs):
    """Save uploaded files; returns (all refs, newly saved refs)."""
    saved = _photo_store().save(uploads) if uploads else []
    if refs is None and not saved:
        return None, []
    return list(refs or []) + saved, saved


# --------------------------------------------------------
# Routes
# --------------------------------------------------------
def register_routes(app):
    @app.errorhandler(TireRequestError)
    def handle_request_error(e):
        return jsonify(e.to_dict()), e.http_status

    @app.route("/api/health")
    def health():
        _orchestrator().repo.ping()
        return jsonify({"status": "ok",
                        "app": current_app.config["APP_NAME"],
                        "version": current_app.config["APP_VERSION"]})

    @app.route("/api/session", methods=["POST"])
    def open_session():
        payload = request.get_json(silent=True) or {}
        role = str(payload.get("role") or "").strip().lower()
        if not role:
            raise ValidationFailed({"role": "This field is required"})
        session["role"] = role
        session["user_id"] = payload.get("userId")
        session["email"] = payload.get("email")
        actor = get_actor()
        logger.info("Session opened for role %s", actor.role)
        return jsonify({"role": actor.role, "userId": actor.user_id,
                        "email": actor.email})

    @app.route("/api/session", methods=["DELETE"])
    def close_session():
        session.clear()
        return jsonify({"role": None})

    @app.route("/api/tire-requests")
    def list_requests():
        actor = get_actor()
        q = request.args.get("q", "").strip()
        items = _orchestrator().list_requests(q, get_sort_spec())
        return jsonify([_orchestrator().describe(r, actor.role)
                        for r in items])

    @app.route("/api/tire-requests", methods=["POST"])
    def create_request():
        actor = get_actor()
        fields, uploads, refs = _read_payload()
        refs, saved = _store_uploads(uploads, refs)
        try:
            req = _orchestrator().submit(actor, fields, refs or [])
        except TireRequestError as e:
            if not e.persisted:
                _discard_photos(saved)
            raise
        return jsonify(_orchestrator().describe(req, actor.role)), 201

    @app.route("/api/tire-requests/<int:request_id>")
    def get_request(request_id):
        actor = get_actor()
        req = _orchestrator().get(request_id)
        return jsonify(_orchestrator().describe(req, actor.role))

    @app.route("/api/tire-requests/<int:request_id>", methods=["PUT"])
    def update_request(request_id):
        actor = get_actor()
        before = _orchestrator().get(request_id).tire_photo_refs
        fields, uploads, refs = _read_payload()
        refs, saved = _store_uploads(uploads, refs)
        try:
            req = _orchestrator().update(actor, request_id, fields, refs)
        except TireRequestError as e:
            if not e.persisted:
                _discard_photos(saved)
            raise
        if refs is not None:
            _discard_photos(set(before) - set(refs))
        return jsonify(_orchestrator().describe(req, actor.role))

    @app.route("/api/tire-requests/<int:request_id>", methods=["DELETE"])
    def delete_request(request_id):
        actor = get_actor()
        req = _orchestrator().delete(actor, request_id)
        _discard_photos(req.tire_photo_refs)
        return jsonify({"id": request_id, "deleted": True})

    @app.route("/api/tire-requests/<int:request_id>/approve",
               methods=["POST"])
    def approve_request(request_id):
        actor = get_actor()
        req = _orchestrator().act(actor, request_id, Action.APPROVE)
        return jsonify(_orchestrator().describe(req, actor.role))

    @app.route("/api/tire-requests/<int:request_id>/reject",
               methods=["POST"])
    def reject_request(request_id):
        actor = get_actor()
        payload = request.get_json(silent=True) or {}
        reason = payload.get("reason") if isinstance(payload, dict) else None
        req = _orchestrator().act(actor, request_id, Action.REJECT, reason)
        return jsonify(_orchestrator().describe(req, actor.role))

    @app.route("/api/dashboard")
    def dashboard():
        actor = get_actor()
        view = _orchestrator().dashboard(actor, get_sort_spec())
        describe = _orchestrator().describe
        return jsonify({
            "role": actor.role,
            "pending": [describe(r, actor.role) for r in view.pending],
            "processed": [describe(r, actor.role) for r in view.processed],
        })

    @app.route("/api/tire-requests/export")
    def export_requests():
        q = request.args.get("q", "").strip()
        items = _orchestrator().list_requests(q, get_sort_spec())
        try:
            payload, mimetype, filename = export_bytes(
                items, request.args.get("format", "csv"))
        except ValueError as e:
            raise ValidationFailed({"format": str(e)}) from e
        return Response(payload, mimetype=mimetype, headers={
            "Content-Disposition": f"attachment; filename={filename}"})

    @app.route("/uploads/<path:filename>")
    def uploaded_photo(filename):
        return send_from_directory(_photo_store().upload_dir, filename)

    @app.route("/favicon.ico")
    def favicon():
        return Response(status=204)
