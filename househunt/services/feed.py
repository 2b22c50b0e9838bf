"""
Listing feed service - category, search and unfiltered listing queries.
"""
import asyncio
import logging
from typing import Optional

from ..client.househunt import HouseHuntClient
from ..config import get_config
from ..errors import ErrorCode, FeedError, HouseHuntAPIError, OperationError
from ..models.feed import ListingFeedQuery, QueryKind
from ..models.property import Property
from ..models.result import Result
from ..models.session import Session
from ..store import ListingStore


logger = logging.getLogger(__name__)


class ListingFeedService:
    """
    Fetches listings and publishes them to the shared store.

    This is the store's only writer. Each call takes a new generation, so
    when several fetches overlap the store ends up with the result of the
    most recently issued one regardless of completion order.
    """

    def __init__(self, client: HouseHuntClient, store: ListingStore):
        self.client = client
        self.store = store
        self.all_label = get_config().feed.all_category_label

    def categories(self) -> list[str]:
        """Labels for the category bar."""
        return list(get_config().feed.categories)

    async def fetch_feed(
        self,
        query: ListingFeedQuery,
        credential: Optional[Session] = None,
    ) -> Result[list[Property]]:
        """
        Run ``query`` against the remote service and publish the result.

        Args:
            query: Category, search term, or neither
            credential: Viewer session; listing endpoints are public, so this
                is only carried for callers that have one

        Returns:
            Result with the fetched properties (even when superseded by a
            newer query), or a FeedError
        """
        generation = self.store.begin(query)
        logger.info(f"Fetching {query.describe()} (generation {generation})")

        try:
            listings = await self._query_remote(query)
        except HouseHuntAPIError as e:
            error = FeedError.from_exception(e)
            if self.store.fail(generation, error):
                logger.error(f"Feed fetch for {query.describe()} failed: {e.message}")
            return Result[list[Property]].failure(error)
        except asyncio.CancelledError:
            # A cancelled fetch must not leave its generation in Loading
            self.store.fail(
                generation,
                FeedError(code=ErrorCode.TRANSPORT_ERROR, message="Feed fetch cancelled"),
            )
            raise

        if self.store.commit(generation, listings):
            logger.info(f"Feed for {query.describe()} populated with {len(listings)} listings")
        return Result[list[Property]].success(listings)

    async def fetch_category(self, label: Optional[str] = None) -> Result[list[Property]]:
        return await self.fetch_feed(ListingFeedQuery.for_category(label, self.all_label))

    async def fetch_search(self, term: str) -> Result[list[Property]]:
        return await self.fetch_feed(ListingFeedQuery.for_search(term))

    async def fetch_property(self, property_id: str) -> Result[Property]:
        """Load a single property for its detail page. Does not touch the store."""
        try:
            property = await self.client.get_property(property_id)
        except HouseHuntAPIError as e:
            logger.error(f"Loading property {property_id} failed: {e.message}")
            return Result[Property].failure(OperationError.from_exception(e))
        return Result[Property].success(property)

    async def _query_remote(self, query: ListingFeedQuery) -> list[Property]:
        kind = query.kind
        if kind == QueryKind.SEARCH:
            return await self.client.search_properties(query.search_term)
        if kind == QueryKind.CATEGORY:
            return await self.client.list_properties(category=query.category)
        return await self.client.list_properties()
