#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 08:12:31
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
CSV / Excel export of tire requests (pandas).
"""
# ========================================================
# IMPORTS
# ========================================================
import io
from datetime import datetime, timezone
import pandas as pd
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from trm.validation import WIRE_NAMES


# ========================================================
# GLOABALS
# ========================================================
EXPORT_COLUMNS = (["id"]
                  + [w for k, w in WIRE_NAMES.items() if k != "tire_photo_refs"]
                  + ["tirePhotoUrls", "status", "rejectReason", "createdAt",
                     "updatedAt"])

FORMATS = {
    "csv": ("text/csv; charset=utf-8", "csv"),
    "xlsx": ("application/vnd.openxmlformats-officedocument."
             "spreadsheetml.sheet", "xlsx"),
}


# ========================================================
# FUNCTIONS
# ========================================================
def requests_frame(requests) -> pd.DataFrame:
    """One row per request; photo refs are joined with ``|``."""
    rows = []
    for r in requests:
        row = r.to_dict()
        row["tirePhotoUrls"] = " | ".join(row.get("tirePhotoUrls") or [])
        rows.append(row)
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_csv(requests, target=None):
    """
    Write a ``;`` separated CSV with BOM (opens cleanly in Excel).

    ``target`` may be a path; without it the CSV text is returned.
    """
    df = requests_frame(requests)
    if target is None:
        return "\ufeff" + df.to_csv(sep=";", index=False)
    df.to_csv(target, sep=";", index=False, encoding="utf-8-sig")
    return target


def export_excel(requests, target) -> None:
    """Export requests to an Excel file (path or binary buffer)."""
    requests_frame(requests).to_excel(target, index=False, engine="openpyxl")


def export_bytes(requests, fmt: str = "csv"):
    """
    Render an export for download.

    Returns
    -------
    tuple
        ``(payload, mimetype, filename)``

    Raises
    ------
    ValueError
        Unknown ``fmt``.
    """
    fmt = (fmt or "csv").strip().lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    mimetype, ext = FORMATS[fmt]
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    filename = f"tire_requests_{ts}.{ext}"
    if fmt == "csv":
        return export_csv(requests).encode("utf-8"), mimetype, filename
    buf = io.BytesIO()
    export_excel(requests, buf)
    return buf.getvalue(), mimetype, filename
