"""
Route definitions for the catalog API.

Endpoints under /api:
- GET  /albums             : every album, in catalog order
- GET  /albums/{album_id}  : one album
"""

from __future__ import annotations

import re
from typing import List

from fastapi import APIRouter, Depends

from ..deps import get_store
from ..errors import NotFoundError, ValidationError, internal_errors
from ..storage import CatalogStore
from .schemas import Album


_ALBUM_ID_RE = re.compile(r"^\s*[+-]?[0-9]{1,18}\s*$")

router = APIRouter(prefix="/api", tags=["catalog"])


def parse_album_id(raw: str) -> int:
    """Parse a path segment as an album id.

    The segment is taken as a string so that malformed ids produce our
    own 400 response instead of FastAPI's 422.
    """
    if not _ALBUM_ID_RE.match(raw):
        raise ValidationError("Invalid album ID")
    return int(raw)


def find_album(store: CatalogStore, album_id: int) -> Album:
    album = store.get_album(album_id)
    if album is None:
        raise NotFoundError("Album not found")
    return album


@router.get("/albums", response_model=List[Album])
def list_albums(store: CatalogStore = Depends(get_store)) -> List[Album]:
    with internal_errors("Failed to fetch albums"):
        return store.get_all_albums()


@router.get("/albums/{album_id}", response_model=Album)
def get_album(album_id: str, store: CatalogStore = Depends(get_store)) -> Album:
    parsed = parse_album_id(album_id)
    with internal_errors("Failed to fetch album"):
        return find_album(store, parsed)
