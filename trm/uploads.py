#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Local photo store for uploaded tire photos.
"""
# ========================================================
# IMPORTS
# ========================================================
import os
import uuid
from werkzeug.utils import secure_filename
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from config import UPLOAD_DIR, MAX_PHOTOS, PHOTO_EXTENSIONS
from trm.errors import ValidationFailed


# ========================================================
# CLASSES
# ========================================================
class PhotoStore:
    """
    Saves uploaded files below ``upload_dir`` and hands back the stored
    reference (a bare filename).
    """

    def __init__(self, upload_dir: str = UPLOAD_DIR,
                 max_photos: int = MAX_PHOTOS):
        self.upload_dir = upload_dir
        self.max_photos = max_photos
        os.makedirs(self.upload_dir, exist_ok=True)

    def check(self, files) -> None:
        files = [f for f in files if f and f.filename]
        if len(files) > self.max_photos:
            raise ValidationFailed(
                {"tire_photo_refs":
                 f"Only up to {self.max_photos} photos allowed"})
        for f in files:
            ext = f.filename.rsplit(".", 1)[-1].lower() \
                if "." in f.filename else ""
            if ext not in PHOTO_EXTENSIONS:
                raise ValidationFailed(
                    {"tire_photo_refs": f"Unsupported photo type: "
                                        f"{f.filename}"})

    def save(self, files) -> list[str]:
        """Store the uploads (werkzeug ``FileStorage``) and return refs."""
        files = [f for f in files if f and f.filename]
        self.check(files)
        refs = []
        for f in files:
            name = f"{uuid.uuid4().hex[:12]}-{secure_filename(f.filename)}"
            f.save(os.path.join(self.upload_dir, name))
            refs.append(name)
        return refs

    def discard(self, refs) -> None:
        """Remove stored files again; missing files are ignored."""
        for ref in refs or []:
            path = os.path.join(self.upload_dir, os.path.basename(ref))
            if os.path.isfile(path):
                os.remove(path)
