"""
Shared listing store - the current feed, as seen by every reader.

One writer (the feed service) and any number of readers. Each fetch takes a
generation number when it is issued; a completion is applied only if its
generation is still the newest one issued, so a slow response for an old
query can never overwrite a newer one.
"""
import logging
from typing import Callable, Optional

from .errors import FeedError
from .models.feed import FeedState, ListingFeedQuery
from .models.property import Property


logger = logging.getLogger(__name__)

Listener = Callable[["ListingStore"], None]


class ListingStore:
    """Snapshot of the listing feed plus its loading state."""

    def __init__(self):
        self._listings: tuple[Property, ...] = ()
        self._state = FeedState.IDLE
        self._generation = 0
        self._query: Optional[ListingFeedQuery] = None
        self._error: Optional[FeedError] = None
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    @property
    def listings(self) -> tuple[Property, ...]:
        """The last complete result set. Replaced wholesale, never patched."""
        return self._listings

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def query(self) -> Optional[ListingFeedQuery]:
        """Query of the newest issued fetch."""
        return self._query

    @property
    def error(self) -> Optional[FeedError]:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._state == FeedState.LOADING

    @property
    def is_empty(self) -> bool:
        """Populated with zero results: the "no results" state."""
        return self._state == FeedState.POPULATED and not self._listings

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Writer side: only ListingFeedService calls these
    # ------------------------------------------------------------------

    def begin(self, query: ListingFeedQuery) -> int:
        """Issue a new generation for ``query`` and enter Loading."""
        self._generation += 1
        self._query = query
        self._state = FeedState.LOADING
        self._error = None
        logger.debug(f"Generation {self._generation} issued for {query.describe()}")
        self._notify()
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def commit(self, generation: int, listings: list[Property]) -> bool:
        """Replace the listings if ``generation`` is still current."""
        if not self.is_current(generation):
            logger.warning(
                f"Discarding stale feed result (generation {generation}, "
                f"current {self._generation})"
            )
            return False
        self._listings = tuple(listings)
        self._state = FeedState.POPULATED
        self._error = None
        self._notify()
        return True

    def fail(self, generation: int, error: FeedError) -> bool:
        """Record a failure for the current generation; listings stay as they were."""
        if not self.is_current(generation):
            logger.warning(
                f"Discarding stale feed failure (generation {generation}, "
                f"current {self._generation})"
            )
            return False
        self._state = FeedState.FAILED
        self._error = error
        self._notify()
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                # A broken reader must not abort the writer mid-transition
                logger.exception(f"Listing store listener {listener!r} failed")
