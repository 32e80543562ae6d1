#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Backup Manager
"""
# ========================================================
# IMPORTS
# ========================================================
import os
import logging
import threading
import sqlite3
from datetime import datetime, timezone, timedelta
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from config import BACKUP_DIR, BACKUP_INTERVAL_MINUTES, BACKUP_COPIES
from trm.export import export_csv
from trm.locking import WriteLock
from trm.repository import RequestRepository, log_action


# ========================================================
# GLOABALS
# ========================================================
logger = logging.getLogger(__name__)

BACKUP_PREFIX = "tire_requests_"
LOCK_NAME = ".backup.lock"


# ========================================================
# CLASSES
# ========================================================
class BackupManager(threading.Thread):
    """Periodic database copy + CSV snapshot in a daemon thread."""

    def __init__(self, engine, session_factory, backup_dir=BACKUP_DIR,
                 interval_minutes=BACKUP_INTERVAL_MINUTES,
                 copies=BACKUP_COPIES, poll_seconds=30):
        super().__init__(name="backup-manager", daemon=True)
        self.engine = engine
        self.session_factory = session_factory
        self.backup_dir = backup_dir
        self.interval = timedelta(minutes=max(1, int(interval_minutes)))
        self.copies = max(1, int(copies))
        self.poll_seconds = poll_seconds
        self._stop_event = threading.Event()
        self._last_run = None
        os.makedirs(self.backup_dir, exist_ok=True)

    def stop(self):
        self._stop_event.set()

    def due(self, now=None) -> bool:
        now = now or datetime.now(timezone.utc)
        if self._last_run is None:
            # first backup one interval after start
            self._last_run = now
            return False
        return now - self._last_run >= self.interval

    def run(self):
        while not self._stop_event.is_set():
            try:
                if self.due():
                    self.perform_backup()
                    self._last_run = datetime.now(timezone.utc)
            except Exception:
                logger.exception("Scheduled backup failed")
            self._stop_event.wait(self.poll_seconds)

    def perform_backup(self) -> list[str]:
        """
        Write a database copy and a CSV snapshot, then apply retention.

        Returns
        -------
        list of str
            Paths of the files written.
        """
        ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
        written = []
        with WriteLock(os.path.join(self.backup_dir, LOCK_NAME)):
            if self.engine.dialect.name == "sqlite":
                bfile = os.path.join(self.backup_dir,
                                     f"{BACKUP_PREFIX}{ts}.db")
                self._sqlite_backup(bfile)
                written.append(bfile)
            else:
                logger.info("Skipping database copy for dialect %s",
                            self.engine.dialect.name)

            csvfile = os.path.join(self.backup_dir, f"{BACKUP_PREFIX}{ts}.csv")
            self.export_csv_snapshot(csvfile)
            written.append(csvfile)

            db = self.session_factory()
            try:
                log_action(db, "backup", details="Backup created: " + ", ".join(
                    os.path.basename(p) for p in written))
                db.commit()
            finally:
                db.close()

            self.prune()
        logger.info("Backup written: %s", ", ".join(written))
        return written

    def _sqlite_backup(self, target: str) -> None:
        raw = self.engine.raw_connection()
        try:
            src = raw.driver_connection  # sqlite3.Connection
            dest = sqlite3.connect(target)
            try:
                with dest:
                    src.backup(dest)
            finally:
                dest.close()
        finally:
            raw.close()

    def export_csv_snapshot(self, target_path: str) -> str:
        requests = RequestRepository(self.session_factory).list()
        return export_csv(requests, target_path)

    def backups(self, ext: str) -> list[str]:
        return sorted(f for f in os.listdir(self.backup_dir)
                      if f.startswith(BACKUP_PREFIX) and f.endswith(ext))

    def prune(self) -> None:
        """Keep the newest ``copies`` files of each kind."""
        for ext in (".db", ".csv"):
            files = self.backups(ext)
            for f in files[:max(0, len(files) - self.copies)]:
                try:
                    os.remove(os.path.join(self.backup_dir, f))
                except OSError as e:
                    logger.warning("Could not remove old backup %s: %s", f, e)
