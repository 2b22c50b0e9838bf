"""
Tests for the listing store, feed service and feed controller.
"""
import asyncio

import pytest

from househunt.errors import ErrorCode, FeedError, RemoteRejectedError, TransportFailure
from househunt.models.feed import FeedState, ListingFeedQuery
from househunt.services.feed import ListingFeedService
from househunt.services.feed_controller import FeedController
from househunt.store import ListingStore


ALL = ("category", None)
BEACH = ("category", "Beach")
CABIN = ("category", "Cabin")


class TestListingStore:
    """Tests for ListingStore."""

    def test_initial_state(self):
        """Test a new store is idle and empty."""
        store = ListingStore()

        assert store.state == FeedState.IDLE
        assert store.listings == ()
        assert store.generation == 0

    def test_stale_commit_discarded(self, property_factory):
        """Test only the newest generation may write."""
        store = ListingStore()
        old = store.begin(ListingFeedQuery.for_category("Beach"))
        new = store.begin(ListingFeedQuery.for_category("Cabin"))

        assert store.commit(new, [property_factory("cabin")]) is True
        assert store.commit(old, [property_factory("beach")]) is False
        assert [p.id for p in store.listings] == ["cabin"]

    def test_failure_keeps_listings(self, property_factory):
        """Test a failed fetch leaves the previous listings in place."""
        store = ListingStore()
        gen = store.begin(ListingFeedQuery.all())
        store.commit(gen, [property_factory("a")])

        gen = store.begin(ListingFeedQuery.for_category("Beach"))
        store.fail(gen, FeedError(code=ErrorCode.TRANSPORT_ERROR))

        assert store.state == FeedState.FAILED
        assert [p.id for p in store.listings] == ["a"]
        assert store.error.code == ErrorCode.TRANSPORT_ERROR

    def test_listeners_see_transitions(self):
        """Test subscribers observe Loading then Populated."""
        store = ListingStore()
        seen = []
        unsubscribe = store.subscribe(lambda s: seen.append(s.state))

        gen = store.begin(ListingFeedQuery.all())
        store.commit(gen, [])
        unsubscribe()
        store.begin(ListingFeedQuery.all())

        assert seen == [FeedState.LOADING, FeedState.POPULATED]

    def test_failing_listener_does_not_block_transition(self, property_factory):
        """Test a raising listener is logged and later listeners still run."""
        store = ListingStore()
        seen = []

        def broken(_store):
            raise RuntimeError("render failed")

        store.subscribe(broken)
        store.subscribe(lambda s: seen.append(s.state))

        gen = store.begin(ListingFeedQuery.all())
        assert store.commit(gen, [property_factory("a")]) is True

        assert store.state == FeedState.POPULATED
        assert seen == [FeedState.LOADING, FeedState.POPULATED]


class TestListingFeedService:
    """Tests for ListingFeedService."""

    @pytest.fixture
    def store(self) -> ListingStore:
        return ListingStore()

    @pytest.fixture
    def service(self, fake_client, store) -> ListingFeedService:
        return ListingFeedService(fake_client, store)

    def test_all_category_is_unfiltered(self, service, fake_client, store, property_factory):
        """Test "All" maps to the unfiltered query."""
        fake_client.listings[ALL] = [property_factory("a"), property_factory("b")]

        result = asyncio.run(service.fetch_category("All"))

        assert result.ok
        assert fake_client.calls == [ALL]
        assert [p.id for p in store.listings] == ["a", "b"]
        assert store.state == FeedState.POPULATED

    def test_category_query(self, service, fake_client, store, property_factory):
        """Test a category label is passed through."""
        fake_client.listings[BEACH] = [property_factory("beach", category="Beach")]

        asyncio.run(service.fetch_category("Beach"))

        assert fake_client.calls == [BEACH]
        assert store.listings[0].category == "Beach"

    def test_search_without_matches_empties_store(
        self, service, fake_client, store, property_factory
    ):
        """Test a zero-result search replaces the store with an empty feed."""
        fake_client.listings[ALL] = [property_factory("a")]
        asyncio.run(service.fetch_feed(ListingFeedQuery.all()))

        result = asyncio.run(service.fetch_search("lake"))

        assert result.ok
        assert result.value == []
        assert fake_client.calls[-1] == ("search", "lake")
        assert store.listings == ()
        assert store.is_empty is True

    def test_failure_leaves_store(self, service, fake_client, store, property_factory):
        """Test a transport failure is reported and listings are kept."""
        fake_client.listings[ALL] = [property_factory("a")]
        asyncio.run(service.fetch_feed(ListingFeedQuery.all()))

        fake_client.fail_with = TransportFailure("timed out")
        result = asyncio.run(service.fetch_category("Beach"))

        assert result.error.code == ErrorCode.TRANSPORT_ERROR
        assert isinstance(result.error, FeedError)
        assert store.state == FeedState.FAILED
        assert [p.id for p in store.listings] == ["a"]

    def test_server_error_reported_as_transport(self, service, fake_client):
        """Test a non-2xx feed response becomes a FeedError."""
        fake_client.fail_with = RemoteRejectedError("Fail to fetch listings", status_code=404)

        result = asyncio.run(service.fetch_feed(ListingFeedQuery.all()))

        assert result.error.code == ErrorCode.TRANSPORT_ERROR
        assert result.error.message == "Fail to fetch listings"

    def test_late_response_never_overwrites_newer_query(
        self, service, fake_client, store, property_factory
    ):
        """Test All, Beach, All, Cabin where Beach resolves after Cabin."""
        fake_client.listings[ALL] = [property_factory("all")]
        fake_client.listings[BEACH] = [property_factory("beach")]
        fake_client.listings[CABIN] = [property_factory("cabin")]

        async def scenario():
            beach_gate = asyncio.Event()
            fake_client.gates[BEACH] = beach_gate

            tasks = [
                asyncio.create_task(service.fetch_category(label))
                for label in ("All", "Beach", "All", "Cabin")
            ]
            # Everything except Beach completes
            while sum(t.done() for t in tasks) < 3:
                await asyncio.sleep(0)
            assert [p.id for p in store.listings] == ["cabin"]

            beach_gate.set()
            return await asyncio.gather(*tasks)

        results = asyncio.run(scenario())

        assert all(r.ok for r in results)
        assert [p.id for p in store.listings] == ["cabin"]
        assert store.query.category == "Cabin"
        assert store.state == FeedState.POPULATED

    def test_stale_failure_does_not_mark_failed(
        self, service, fake_client, store, property_factory
    ):
        """Test a late failure of an old query is ignored by the store."""
        fake_client.listings[CABIN] = [property_factory("cabin")]

        async def scenario():
            beach_gate = asyncio.Event()
            fake_client.gates[BEACH] = beach_gate
            beach = asyncio.create_task(service.fetch_category("Beach"))
            await asyncio.sleep(0)
            await service.fetch_category("Cabin")
            fake_client.fail_with = TransportFailure("reset")
            beach_gate.set()
            return await beach

        stale = asyncio.run(scenario())

        assert stale.ok is False
        assert store.state == FeedState.POPULATED
        assert [p.id for p in store.listings] == ["cabin"]

    def test_fetch_property(self, service, fake_client, store, sample_property):
        """Test property detail does not touch the store."""
        fake_client.properties["prop-1"] = sample_property

        result = asyncio.run(service.fetch_property("prop-1"))

        assert result.value.id == "prop-1"
        assert store.state == FeedState.IDLE

    def test_categories_from_config(self, service):
        """Test the category bar starts with All."""
        assert service.categories()[0] == "All"


class TestFeedController:
    """Tests for FeedController."""

    def test_reselecting_same_category_is_noop(self, fake_client, property_factory):
        """Test only distinct queries are re-issued."""
        store = ListingStore()
        fake_client.listings[BEACH] = [property_factory("beach")]

        async def scenario():
            controller = FeedController(ListingFeedService(fake_client, store))
            first = controller.select_category("Beach")
            second = controller.select_category("Beach")
            await controller.wait()
            return first, second, controller

        first, second, controller = asyncio.run(scenario())

        assert first is not None
        assert second is None
        assert fake_client.calls == [BEACH]
        assert controller.selected_category == "Beach"

    def test_rapid_switching_keeps_latest(self, fake_client, property_factory):
        """Test the newest selection wins when an older one is slow."""
        store = ListingStore()
        fake_client.listings[BEACH] = [property_factory("beach")]
        fake_client.listings[CABIN] = [property_factory("cabin")]

        async def scenario():
            beach_gate = asyncio.Event()
            fake_client.gates[BEACH] = beach_gate
            controller = FeedController(ListingFeedService(fake_client, store))
            controller.select_category("Beach")
            controller.select_category("Cabin")
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            beach_gate.set()
            await controller.wait()

        asyncio.run(scenario())

        assert [p.id for p in store.listings] == ["cabin"]

    def test_reselecting_failed_category_retries(self, fake_client, property_factory):
        """Test clicking the same category again after a failure re-fetches."""
        store = ListingStore()
        fake_client.listings[BEACH] = [property_factory("beach")]

        async def scenario():
            controller = FeedController(ListingFeedService(fake_client, store))
            fake_client.fail_with = TransportFailure("timed out")
            controller.select_category("Beach")
            await controller.wait()
            failed_state = store.state
            retry = controller.select_category("Beach")
            await controller.wait()
            return failed_state, retry

        failed_state, retry = asyncio.run(scenario())

        assert failed_state == FeedState.FAILED
        assert retry is not None
        assert fake_client.calls == [BEACH, BEACH]
        assert store.state == FeedState.POPULATED
        assert [p.id for p in store.listings] == ["beach"]

    def test_search_then_refresh(self, fake_client, property_factory):
        """Test refresh re-runs the current search."""
        store = ListingStore()
        fake_client.listings[("search", "lake")] = [property_factory("lake")]

        async def scenario():
            controller = FeedController(ListingFeedService(fake_client, store))
            controller.search("lake")
            await controller.wait()
            controller.refresh()
            await controller.wait()

        asyncio.run(scenario())

        assert fake_client.calls == [("search", "lake"), ("search", "lake")]
        assert store.generation == 2

    def test_close_cancels_pending(self, fake_client):
        """Test close cancels in-flight fetches and the store leaves Loading."""
        store = ListingStore()

        async def scenario():
            fake_client.gates[ALL] = asyncio.Event()
            controller = FeedController(ListingFeedService(fake_client, store))
            task = controller.refresh()
            await asyncio.sleep(0)
            await controller.close()
            return task

        task = asyncio.run(scenario())

        assert task.cancelled()
        assert store.state == FeedState.FAILED
        assert store.error.code == ErrorCode.TRANSPORT_ERROR
