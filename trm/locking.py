#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Cross-process lock around backup writes.
"""
# ========================================================
# IMPORTS
# ========================================================
from typing import Optional
from filelock import FileLock


# ========================================================
# CLASSES
# ========================================================
class WriteLock:
    """
    Serializes backups across processes (several workers may run a
    backup thread against the same backup directory).

    ``timeout=None`` waits forever; otherwise ``filelock.Timeout`` is raised.
    """

    def __init__(self, path: str, timeout: Optional[float] = None):
        self.path = path
        self._lock = FileLock(path, timeout=-1 if timeout is None else timeout)

    @property
    def is_locked(self) -> bool:
        return self._lock.is_locked

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self._lock.release()
