#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
App Configurations
"""
# ========================================================
# IMPORTS
# ========================================================
import os
from pathlib import Path

# ========================================================
# GLOABALS
# ========================================================
VERSION = "1.0.0"
APP_NAME = "Tire Replacement Request Manager"

BASE_DIR = Path(__file__).resolve().parent
DB_PATH = os.environ.get("TRM_DB_PATH", str(BASE_DIR / "db/tire_requests.db"))
DATABASE_URL = os.environ.get("TRM_DATABASE_URL", f"sqlite:///{DB_PATH}")
BACKUP_DIR = os.environ.get("TRM_BACKUP_DIR", str(BASE_DIR / "backups"))
UPLOAD_DIR = os.environ.get("TRM_UPLOAD_DIR", str(BASE_DIR / "uploads"))
for _d in (os.path.dirname(DB_PATH), BACKUP_DIR, UPLOAD_DIR):
    os.makedirs(_d, exist_ok=True)

# Set Production via ENV!
SECRET_KEY = os.environ.get("TRM_SECRET_KEY", "change-me-please")
HOST = os.environ.get("TRM_HOST", "0.0.0.0")
PORT = int(os.environ.get("TRM_PORT", "5000"))
LOG_LEVEL = os.environ.get("TRM_LOG_LEVEL", "INFO")

# --------------------------------------------------------
# Request form
# --------------------------------------------------------
USER_SECTIONS = (
    "Transport",
    "Logistics",
    "Delivery",
    "Operations",
    "Technical",
    "IT Solutions",
    "Administration",
    "Finance",
)
# any | no_future | no_past
REPLACEMENT_DATE_POLICY = os.environ.get("TRM_REPLACEMENT_DATE_POLICY", "any")
MAX_PHOTOS = 5
PHOTO_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}

# --------------------------------------------------------
# Photo rendering
# --------------------------------------------------------
PHOTO_BASE_URL = os.environ.get("TRM_PHOTO_BASE_URL", "/uploads")
PHOTO_ALT_BASE_URL = os.environ.get("TRM_PHOTO_ALT_BASE_URL",
                                    "/static/uploads")
PLACEHOLDER_IMAGES = (
    "/static/images/tire1.jpeg",
    "/static/images/tire2.jpeg",
    "/static/images/tire3.jpeg",
)
BROKEN_PHOTO_URL = "/static/images/photo-error.svg"

# --------------------------------------------------------
# Notifications (best effort)
# --------------------------------------------------------
DASHBOARD_BASE_URL = os.environ.get("TRM_DASHBOARD_BASE_URL",
                                    "http://localhost:3000")
# comma separated list, tried in order until one accepts the mail
NOTIFY_ENDPOINTS = [
    e.strip() for e in os.environ.get("TRM_NOTIFY_ENDPOINTS", "").split(",")
    if e.strip()
]
NOTIFY_TIMEOUT = float(os.environ.get("TRM_NOTIFY_TIMEOUT", "5"))
ROLE_EMAILS = {
    "manager": os.environ.get("TRM_MANAGER_EMAIL", "manager@example.com"),
    "tto": os.environ.get("TRM_TTO_EMAIL", "tto@example.com"),
    "engineer": os.environ.get("TRM_ENGINEER_EMAIL", "engineer@example.com"),
    "seller": os.environ.get("TRM_SELLER_EMAIL", "seller@example.com"),
}

# --------------------------------------------------------
# Backups
# --------------------------------------------------------
BACKUP_INTERVAL_MINUTES = int(os.environ.get("TRM_BACKUP_INTERVAL", "60"))
BACKUP_COPIES = int(os.environ.get("TRM_BACKUP_COPIES", "10"))
