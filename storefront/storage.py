# storefront/storage.py
"""
In-memory store for albums and user accounts.

One ``CatalogStore`` is created per application by ``create_app`` and
handed to the route handlers through ``deps.get_store``; nothing else
touches the collections. The catalog is seeded lazily: every read goes
through ``initialize()``, which runs the seed exactly once even when the
first requests arrive together on different worker threads.
"""

import logging
import threading
from concurrent.futures import Future
from typing import Callable, Dict, Iterable, List, Optional, Union

from .catalog.schemas import Album, AlbumCreate
from .catalog.seed import default_albums
from .errors import SeedingError
from .models import CreateUserRequest, User


logger = logging.getLogger(__name__)

SeedSource = Callable[[], Iterable[Union[AlbumCreate, dict]]]


class CatalogStore:
    def __init__(self, seed: SeedSource = default_albums) -> None:
        self._seed = seed
        self._lock = threading.Lock()
        self._albums: Dict[int, Album] = {}
        self._users: Dict[int, User] = {}
        self._next_album_id = 1
        self._next_user_id = 1
        self._initialized = False
        # Seeding attempt currently running, shared by concurrent callers.
        self._seeding: Optional[Future] = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    # Seeding

    def initialize(self) -> None:
        """Seed the catalog once.

        The first caller runs the seed source. Callers arriving while it
        runs wait on the same attempt and get its outcome, success or
        ``SeedingError``. A failed attempt commits nothing and is
        forgotten, so the next call starts a fresh one.
        """
        with self._lock:
            if self._initialized:
                return
            attempt = self._seeding
            leader = attempt is None
            if leader:
                attempt = Future()
                self._seeding = attempt

        if not leader:
            attempt.result()
            return

        try:
            self._seed_albums()
        except BaseException as exc:
            logger.error("Album initialization failed: %s: %s", type(exc).__name__, exc)
            error = SeedingError("Catalog seeding failed")
            error.__cause__ = exc
            with self._lock:
                self._seeding = None
            # Waiting callers always get an outcome, even when the seed was
            # interrupted; the interrupt itself stays with this thread.
            attempt.set_exception(error)
            if not isinstance(exc, Exception):
                raise
            raise error

        with self._lock:
            self._initialized = True
            self._seeding = None
        attempt.set_result(None)

    def _seed_albums(self) -> None:
        logger.info("Starting album initialization")
        staged = [
            entry if isinstance(entry, AlbumCreate) else AlbumCreate.model_validate(entry)
            for entry in self._seed()
        ]
        # Commit in one step: a seed that fails above leaves no albums behind
        # and does not consume ids.
        with self._lock:
            for fields in staged:
                album = self._insert_album(fields)
                logger.info("Created album %d: %s", album.id, album.title)
        logger.info("Albums initialized: %d albums loaded", len(staged))

    # ------------------------------------------------------------------
    # Albums

    def _insert_album(self, fields: AlbumCreate) -> Album:
        # Caller holds self._lock.
        album = Album(id=self._next_album_id, **fields.model_dump())
        self._albums[album.id] = album
        self._next_album_id += 1
        return album

    def get_all_albums(self) -> List[Album]:
        self.initialize()
        with self._lock:
            albums = [album.model_copy() for album in self._albums.values()]
        logger.debug("Retrieved %d albums", len(albums))
        return albums

    def get_album(self, album_id: int) -> Optional[Album]:
        self.initialize()
        with self._lock:
            album = self._albums.get(album_id)
        logger.debug("Retrieved album %s: %s", album_id, "found" if album else "not found")
        return album.model_copy() if album is not None else None

    def create_album(self, fields: AlbumCreate) -> Album:
        self.initialize()
        with self._lock:
            album = self._insert_album(fields)
        return album.model_copy()

    def album_count(self) -> Optional[int]:
        """Number of albums, or ``None`` while the catalog is not seeded."""
        if not self._initialized:
            return None
        with self._lock:
            return len(self._albums)

    # ------------------------------------------------------------------
    # Users

    def create_user(self, req: CreateUserRequest) -> User:
        with self._lock:
            if any(u.username == req.username for u in self._users.values()):
                raise ValueError(f"Username {req.username!r} is already taken.")
            user = User(id=self._next_user_id, username=req.username, password=req.password)
            self._users[user.id] = user
            self._next_user_id += 1
        return user.model_copy()

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
        return user.model_copy() if user is not None else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            user = next((u for u in self._users.values() if u.username == username), None)
        return user.model_copy() if user is not None else None
