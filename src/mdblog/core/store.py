"""Process-wide holder for the current PostCollection snapshot"""

import logging
from typing import Optional

from mdblog.config import Settings
from mdblog.core.models import PostCollection
from mdblog.core.pipeline import build_collection
from mdblog.core.query import PostQuery


logger = logging.getLogger(__name__)


class PostStore:
    """Builds the collection lazily on first access; refresh() swaps in a new snapshot.

    Snapshots are never mutated, so readers holding an old one stay consistent
    while a rebuild runs.
    """

    def __init__(self, settings: Settings, kind: str = 'blog'):
        self.settings = settings
        self.kind = kind
        self._collection: Optional[PostCollection] = None

    @property
    def collection(self) -> PostCollection:
        if self._collection is None:
            self._collection = build_collection(self.settings, self.kind)
        return self._collection

    def refresh(self) -> PostCollection:
        collection = build_collection(self.settings, self.kind)
        self._collection = collection
        logger.debug("Swapped in collection built at %s", collection.built_at)
        return collection

    def query(self) -> PostQuery:
        return PostQuery(self.collection, self.settings)
