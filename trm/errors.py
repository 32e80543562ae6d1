#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Error taxonomy.

The pure components (validation, workflow, photos, sorting) never raise for
domain conditions, they return an ``ErrorKind`` instead. The exceptions below
are raised by the orchestrator and carry whether the attempted mutation was
persisted, so a client never resubmits something that is already stored.
"""
# ========================================================
# IMPORTS
# ========================================================
from enum import Enum


# ========================================================
# CLASSES
# ========================================================
class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    ILLEGAL_TRANSITION = "illegal_transition"
    MISSING_REASON = "missing_reason"
    RESOLUTION_EXHAUSTED = "resolution_exhausted"
    REPOSITORY_UNAVAILABLE = "repository_unavailable"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    UNEXPECTED = "unexpected"


class TireRequestError(Exception):
    """Base class for failures surfaced to the user."""
    kind = ErrorKind.UNEXPECTED
    http_status = 500
    retryable = False

    def __init__(self, message: str, *, persisted: bool = False):
        super().__init__(message)
        self.message = message
        self.persisted = persisted

    def to_dict(self) -> dict:
        return {
            "error": self.kind.value,
            "message": self.message,
            "persisted": self.persisted,
            "retryable": self.retryable,
        }


class ValidationFailed(TireRequestError):
    kind = ErrorKind.VALIDATION
    http_status = 400

    def __init__(self, errors: dict, message: str = "Please fix validation "
                 "errors before submitting."):
        super().__init__(message)
        self.errors = dict(errors)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["errors"] = self.errors
        return d


class IllegalTransition(TireRequestError):
    kind = ErrorKind.ILLEGAL_TRANSITION
    http_status = 409


class MissingReason(TireRequestError):
    kind = ErrorKind.MISSING_REASON
    http_status = 400


class RequestNotFound(TireRequestError):
    kind = ErrorKind.NOT_FOUND
    http_status = 404


class DeleteNotPermitted(TireRequestError):
    kind = ErrorKind.FORBIDDEN
    http_status = 403


class RepositoryUnavailable(TireRequestError):
    kind = ErrorKind.REPOSITORY_UNAVAILABLE
    http_status = 503
    retryable = True


class UnexpectedFailure(TireRequestError):
    kind = ErrorKind.UNEXPECTED
    http_status = 500
