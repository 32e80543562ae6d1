#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Photo reference resolution.

Stored tire photo references come in several shapes: absolute URLs, inline
``data:image`` payloads, bare filenames, ``uploads/...`` paths and sometimes
raw base64 blobs that never render. ``resolve`` turns one of them into the
ordered list of URLs a renderer should try; the renderer walks that list with
a ``PhotoCursor``.
"""
# ========================================================
# IMPORTS
# ========================================================
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from config import (PHOTO_BASE_URL, PHOTO_ALT_BASE_URL, PLACEHOLDER_IMAGES,
                    BROKEN_PHOTO_URL)


# ========================================================
# GLOABALS
# ========================================================
RE_ABSOLUTE = re.compile(r"^(https?:)?//", re.IGNORECASE)
RE_INLINE = re.compile(r"^data:image/", re.IGNORECASE)
RE_BASE64 = re.compile(r"^[A-Za-z0-9+/]+={0,2}$")
RE_UPLOADS_PREFIX = re.compile(r"^/?(uploads/)?")

LONG_REF_LIMIT = 512
BASE64_MIN_LENGTH = 40


# ========================================================
# CLASSES
# ========================================================
class RefKind(Enum):
    ABSOLUTE = "absolute"
    INLINE = "inline"
    SUSPECT = "suspect"
    MISSING = "missing"
    STORAGE = "storage"


@dataclass(frozen=True)
class PhotoLocations:
    base_url: str = PHOTO_BASE_URL
    alt_base_url: str = PHOTO_ALT_BASE_URL
    placeholders: tuple = PLACEHOLDER_IMAGES
    broken_url: str = BROKEN_PHOTO_URL

    def placeholder(self, index: int) -> str:
        return self.placeholders[index % len(self.placeholders)]


DEFAULT_LOCATIONS = PhotoLocations()


class PhotoCursor:
    """
    Walks a fallback chain for one rendered photo.

    ``current`` is the URL to show; ``advance()`` is called when it fails to
    load. Once every candidate failed the cursor settles on the broken photo
    image.
    """

    def __init__(self, candidates: Sequence[str],
                 broken_url: str = BROKEN_PHOTO_URL):
        self._candidates = list(candidates)
        self._broken_url = broken_url
        self._pos = 0

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._candidates)

    @property
    def current(self) -> str:
        if self.exhausted:
            return self._broken_url
        return self._candidates[self._pos]

    def advance(self) -> str:
        if not self.exhausted:
            self._pos += 1
        return self.current


# ========================================================
# FUNCTIONS
# ========================================================
def classify(raw_ref, *, suspect: bool = False) -> RefKind:
    ref = raw_ref.strip() if isinstance(raw_ref, str) else ""
    if not ref:
        return RefKind.MISSING
    if RE_ABSOLUTE.match(ref):
        return RefKind.ABSOLUTE
    if RE_INLINE.match(ref):
        return RefKind.INLINE
    if (suspect or len(ref) > LONG_REF_LIMIT
            or (len(ref) >= BASE64_MIN_LENGTH and RE_BASE64.match(ref))):
        return RefKind.SUSPECT
    return RefKind.STORAGE


def storage_path(raw_ref: str) -> str:
    """``/uploads/a/b.jpg`` and ``uploads\\a\\b.jpg`` -> ``a/b.jpg``"""
    path = raw_ref.strip().replace("\\", "/")
    path = RE_UPLOADS_PREFIX.sub("", path, count=1)
    return path.lstrip("/")


def _join(base: str, path: str) -> str:
    return f"{base.rstrip('/')}/{path}"


def resolve(raw_ref, index: int = 0, *, suspect: bool = False,
            locations: Optional[PhotoLocations] = None) -> list[str]:
    """
    Return the ordered candidate URLs for a stored photo reference.

    Parameters
    ----------
    raw_ref : str
        Reference as stored with the request.
    index : int
        Position of the photo within the request; picks the placeholder.
    suspect : bool, optional
        Caller already knows the reference will not render.
    locations : PhotoLocations, optional
        Storage mounts and placeholder images, defaults to the configured.

    Returns
    -------
    list of str
        Never empty. Absolute URLs resolve to themselves only; every other
        chain ends with a placeholder image.
    """
    loc = locations or DEFAULT_LOCATIONS
    if not isinstance(index, int):
        index = 0
    placeholder = loc.placeholder(index)
    kind = classify(raw_ref, suspect=suspect)

    if kind is RefKind.ABSOLUTE:
        return [raw_ref.strip()]
    if kind is RefKind.INLINE:
        return [raw_ref.strip(), placeholder]
    if kind in (RefKind.SUSPECT, RefKind.MISSING):
        return [placeholder]

    path = storage_path(raw_ref)
    filename = path.rsplit("/", 1)[-1].split("?", 1)[0]
    if not filename:
        return [placeholder]
    candidates = []
    for url in (_join(loc.base_url, path), _join(loc.alt_base_url, filename),
                placeholder):
        if url not in candidates:
            candidates.append(url)
    return candidates


def resolve_all(raw_refs, *, locations: Optional[PhotoLocations] = None
                ) -> list[list[str]]:
    return [resolve(ref, i, locations=locations)
            for i, ref in enumerate(raw_refs or [])]
