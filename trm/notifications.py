#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Best-effort e-mail notifications.

After a request was created or moved along the approval chain the next role
gets a mail with a deep link into its dashboard. Delivery goes through an
HTTP mail endpoint; every configured endpoint is tried in order until one
accepts. A failed notification is logged and never raised: the mutation it
reports on is already stored.
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from dataclasses import dataclass
from html import escape
from typing import Optional

import httpx
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from config import (DASHBOARD_BASE_URL, NOTIFY_ENDPOINTS, NOTIFY_TIMEOUT,
                    ROLE_EMAILS)
from trm.workflow import ApprovalStatus, Role, is_rejected, next_role


# ========================================================
# GLOABALS
# ========================================================
logger = logging.getLogger(__name__)

DETAIL_FIELDS = (
    ("Vehicle Number", "vehicle_no"),
    ("Vehicle Type", "vehicle_type"),
    ("Section", "user_section"),
    ("Tire Size", "tire_size"),
    ("Number of Tires", "no_of_tires"),
    ("Number of Tubes", "no_of_tubes"),
    ("Present KM", "present_km"),
    ("Officer Service No", "officer_service_no"),
    ("Comments", "comments"),
)


# ========================================================
# CLASSES
# ========================================================
@dataclass(frozen=True)
class Message:
    to: str
    subject: str
    html: str

    def to_dict(self) -> dict:
        return {"to": self.to, "subject": self.subject, "html": self.html}


class Notifier:
    """Sends role notifications through the configured mail endpoints."""

    def __init__(self, endpoints=None, role_emails=None,
                 dashboard_base_url: str = DASHBOARD_BASE_URL,
                 timeout: float = NOTIFY_TIMEOUT, client=None):
        self.endpoints = list(NOTIFY_ENDPOINTS if endpoints is None
                              else endpoints)
        self.role_emails = dict(ROLE_EMAILS if role_emails is None
                                else role_emails)
        self.dashboard_base_url = dashboard_base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    # ----------------------------------------------------
    # message building
    # ----------------------------------------------------
    def dashboard_link(self, role: Role, request_id) -> str:
        return f"{self.dashboard_base_url}/{role.value}?requestId={request_id}"

    def build_message(self, request) -> Optional[Message]:
        """
        Mail for whoever has to look at ``request`` next: the next approval
        role, or the requester once the request was rejected.
        """
        status = ApprovalStatus(request.status)
        rows = "".join(
            f"<p><strong>{label}:</strong> "
            f"{escape(str(getattr(request, attr, '') or ''))}</p>"
            for label, attr in DETAIL_FIELDS)

        if is_rejected(status):
            if not request.email:
                return None
            return Message(
                to=request.email,
                subject=f"Tire Request Rejected - {request.vehicle_no}",
                html=(f"<h2>Tire Request Rejected</h2>"
                      f"<p>Your request was rejected "
                      f"({status.value.replace('_', ' ').lower()}).</p>"
                      f"<p><strong>Reason:</strong> "
                      f"{escape(request.reject_reason or '')}</p>{rows}"))

        role = next_role(status)
        if role is None or not self.role_emails.get(role.value):
            return None
        if status is ApprovalStatus.PENDING:
            subject = f"New Tire Request Submitted - {request.vehicle_no}"
            intro = ("A new tire replacement request has been submitted and "
                     "requires your approval.")
        else:
            subject = (f"Tire Request Awaiting Your Action - "
                       f"{request.vehicle_no}")
            intro = (f"A tire replacement request is now "
                     f"{status.value.replace('_', ' ').lower()} and requires "
                     f"your action.")
        link = self.dashboard_link(role, request.id)
        return Message(
            to=self.role_emails[role.value],
            subject=subject,
            html=(f"<h2>Tire Request Notification</h2><p>{intro}</p>"
                  f"<h3>Request Details:</h3>{rows}"
                  f'<p><a href="{link}">Review Request in '
                  f"{role.value.upper()} Dashboard</a></p>"))

    # ----------------------------------------------------
    # delivery
    # ----------------------------------------------------
    def send(self, message: Message) -> bool:
        if not self.endpoints:
            logger.info("Notification simulated (no endpoint configured): "
                        "%s -> %s", message.subject, message.to)
            return False
        client = self._client or httpx.Client(timeout=self.timeout)
        try:
            for endpoint in self.endpoints:
                try:
                    response = client.post(endpoint, json=message.to_dict())
                    response.raise_for_status()
                except httpx.HTTPError as e:
                    logger.warning("Mail endpoint %s failed: %s", endpoint, e)
                    continue
                logger.info("Notification sent via %s: %s", endpoint,
                            message.subject)
                return True
        finally:
            if self._client is None:
                client.close()
        logger.warning("Notification not delivered: %s", message.subject)
        return False

    def notify(self, request) -> bool:
        """Build and send the follow-up mail; never raises."""
        try:
            message = self.build_message(request)
            if message is None:
                return False
            return self.send(message)
        except Exception:
            logger.exception("Notification for request %s failed",
                             getattr(request, "id", None))
            return False
