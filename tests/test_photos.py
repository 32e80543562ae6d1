"""
Unit tests for trm.photos
=========================

Fallback chains for stored photo references and the render-side cursor.
"""

# =========================
# Imports
# =========================
import pytest
from trm.photos import (resolve, resolve_all, classify, storage_path,
                        PhotoCursor, PhotoLocations, RefKind)


# -------------------------
# Fixtures
# -------------------------
@pytest.fixture
def loc():
    return PhotoLocations(base_url="https://cdn.example/uploads",
                          alt_base_url="/static/uploads",
                          placeholders=("/ph/1.jpg", "/ph/2.jpg", "/ph/3.jpg"),
                          broken_url="/ph/broken.svg")


BASE64_GARBAGE = ("QUJDREVGR0hJSktMTU5PUFFSU1RVVldYWVo" * 6)[:200]


# -------------------------
# Tests: Classification
# -------------------------
@pytest.mark.parametrize("ref, kind", [
    ("https://host/img.jpg", RefKind.ABSOLUTE),
    ("//host/img.jpg", RefKind.ABSOLUTE),
    ("data:image/png;base64,iVBORw0KGgo=", RefKind.INLINE),
    ("", RefKind.MISSING),
    ("   ", RefKind.MISSING),
    (None, RefKind.MISSING),
    (BASE64_GARBAGE, RefKind.SUSPECT),
    ("x" * 513, RefKind.SUSPECT),
    ("abc123-tire.jpg", RefKind.STORAGE),
    ("/uploads/2024/tire.jpg", RefKind.STORAGE),
])
def test_classify(ref, kind):
    assert classify(ref) is kind


def test_storage_path_strips_uploads_prefix():
    assert storage_path("/uploads/2024/tire.jpg") == "2024/tire.jpg"
    assert storage_path("uploads\\2024\\tire.jpg") == "2024/tire.jpg"
    assert storage_path("tire.jpg") == "tire.jpg"


# -------------------------
# Tests: Chains
# -------------------------
def test_absolute_url_resolves_to_itself_only(loc):
    assert resolve("https://host/img.jpg", 2, locations=loc) == \
        ["https://host/img.jpg"]


def test_storage_ref_chain(loc):
    assert resolve("/uploads/2024/tire.jpg", 0, locations=loc) == [
        "https://cdn.example/uploads/2024/tire.jpg",
        "/static/uploads/tire.jpg",
        "/ph/1.jpg",
    ]


def test_chain_has_no_duplicates():
    loc = PhotoLocations(base_url="/static/uploads",
                         alt_base_url="/static/uploads",
                         placeholders=("/ph/1.jpg",))
    assert resolve("tire.jpg", locations=loc) == ["/static/uploads/tire.jpg",
                                                  "/ph/1.jpg"]


def test_inline_data_then_placeholder(loc):
    ref = "data:image/png;base64,iVBORw0KGgo="
    assert resolve(ref, 1, locations=loc) == [ref, "/ph/2.jpg"]


@pytest.mark.parametrize("ref", ["", None, BASE64_GARBAGE, "y" * 600])
def test_unusable_refs_get_placeholder_only(loc, ref):
    assert resolve(ref, 0, locations=loc) == ["/ph/1.jpg"]


def test_suspect_flag_forces_placeholder(loc):
    assert resolve("tire.jpg", 0, suspect=True, locations=loc) == ["/ph/1.jpg"]


def test_placeholder_rotates_with_index(loc):
    assert resolve("", 0, locations=loc) == ["/ph/1.jpg"]
    assert resolve("", 4, locations=loc) == ["/ph/2.jpg"]


@pytest.mark.parametrize("ref", ["", BASE64_GARBAGE, "tire.jpg",
                                 "data:image/gif;base64,R0lGOD=",
                                 "/uploads/a/b.png"])
def test_non_absolute_chains_end_with_placeholder(loc, ref):
    chain = resolve(ref, 7, locations=loc)
    assert chain
    assert chain[-1] in loc.placeholders


def test_resolve_all_uses_positions(loc):
    chains = resolve_all(["", "", ""], locations=loc)
    assert chains == [["/ph/1.jpg"], ["/ph/2.jpg"], ["/ph/3.jpg"]]
    assert resolve_all(None, locations=loc) == []


# -------------------------
# Tests: Cursor
# -------------------------
def test_cursor_walks_chain_then_settles_on_broken_image():
    cursor = PhotoCursor(["/a.jpg", "/b.jpg"], broken_url="/broken.svg")
    assert cursor.current == "/a.jpg"
    assert cursor.advance() == "/b.jpg"
    assert not cursor.exhausted
    assert cursor.advance() == "/broken.svg"
    assert cursor.exhausted
    assert cursor.advance() == "/broken.svg"
