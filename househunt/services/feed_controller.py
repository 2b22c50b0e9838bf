"""
Feed controller - re-issues feed fetches when the selected query changes.
"""
import asyncio
import logging
from typing import Optional

from ..models.feed import FeedState, ListingFeedQuery
from ..models.session import Session
from .feed import ListingFeedService


logger = logging.getLogger(__name__)


class FeedController:
    """
    Owns the "what is selected" state of a listings view.

    Selecting a new category or search term starts a fetch in the background
    without waiting for earlier ones; the store's generation guard keeps only
    the newest result. Re-selecting the current query is a no-op unless its
    last fetch failed, in which case it is retried.
    """

    def __init__(
        self,
        feed_service: ListingFeedService,
        credential: Optional[Session] = None,
    ):
        self.feed_service = feed_service
        self.credential = credential
        self.current_query: Optional[ListingFeedQuery] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def selected_category(self) -> str:
        """Label to highlight in the category bar."""
        query = self.current_query
        if query is None or query.category is None:
            return self.feed_service.all_label
        return query.category

    def select_category(self, label: Optional[str]) -> Optional[asyncio.Task]:
        return self._select(ListingFeedQuery.for_category(label, self.feed_service.all_label))

    def search(self, term: str) -> Optional[asyncio.Task]:
        return self._select(ListingFeedQuery.for_search(term))

    def refresh(self) -> asyncio.Task:
        """Re-run the current query, e.g. after a property was deleted."""
        query = self.current_query or ListingFeedQuery.for_category(
            None, self.feed_service.all_label
        )
        self.current_query = query
        return self._start(query)

    async def wait(self) -> None:
        """Wait for every fetch issued so far."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending)

    async def close(self) -> None:
        """Cancel outstanding fetches."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def _select(self, query: ListingFeedQuery) -> Optional[asyncio.Task]:
        if self.current_query is not None and self.current_query.key == query.key:
            if self.feed_service.store.state != FeedState.FAILED:
                logger.debug(f"{query.describe()} already selected")
                return None
            logger.info(f"Retrying failed {query.describe()}")
        self.current_query = query
        return self._start(query)

    def _start(self, query: ListingFeedQuery) -> asyncio.Task:
        task = asyncio.create_task(self.feed_service.fetch_feed(query, self.credential))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
