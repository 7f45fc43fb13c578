"""
Fixed initial album set used to seed the catalog store.

Swap ``default_albums`` for another zero-argument callable (passed to
``CatalogStore(seed=...)``) to load the catalog from somewhere else.
"""

from typing import List

from .schemas import AlbumCreate


ARTIST_CATALOG = "CEAZY"


def default_albums() -> List[AlbumCreate]:
    return [
        # Upcoming release; releaseDate drives the countdown on the site.
        AlbumCreate(
            title="WICKED GENERATION",
            catalog=ARTIST_CATALOG,
            cover_image="/src/assets/NS008.jpg",
            release_date="2025-06-26",
            price=None,
            is_released=False,
            preview_url=None,
            purchase_url=None,
        ),
        AlbumCreate(
            title="EVOLUTION",
            catalog=ARTIST_CATALOG,
            cover_image="/src/assets/EVOLUTION.png",
            release_date="2024-12-01",
            price="5.00",
            is_released=True,
            preview_url="/preview/evolution.mp3",
            purchase_url="/purchase/evolution",
        ),
    ]
