import asyncio

import httpx
import pytest

from dashboard.services.CollectionQueryService import (
    SEARCH_FAILED_MESSAGE,
    CollectionQueryService,
    build_search_params,
)
from dashboard.services.NotificationService import NotificationService
from shared.helper.HelperConfig import HelperConfig
from shared.models.notification import Severity
from shared.models.search import QueryState


@pytest.fixture
def notifications(helper_config) -> NotificationService:
    return NotificationService(helper_config)


@pytest.fixture
def service(helper_config, client, notifications) -> CollectionQueryService:
    return CollectionQueryService(helper_config, client, notifications)


class TestBuildSearchParams:
    def test_passport_expired_scenario_omits_type(self):
        state = QueryState(query="passport", document_type="", status="expired", page=1, limit=12)

        params = build_search_params(state)

        assert params == {"query": "passport", "status": "expired", "page": 1, "limit": 12}
        assert "type" not in params

    @pytest.mark.parametrize("query", ["", "   ", "\t"])
    def test_blank_query_is_never_sent(self, query):
        params = build_search_params(QueryState(query=query, document_type=" ", status=""))

        assert set(params) == {"page", "limit"}

    def test_query_is_trimmed(self):
        params = build_search_params(QueryState(query="  visa  ", document_type="passport"))

        assert params["query"] == "visa"
        assert params["type"] == "passport"


class TestSearch:
    async def test_sends_request_and_replaces_list(self, service, api, make_doc):
        api.on("GET", "/documents/search", {"documents": [make_doc("a"), make_doc("b")], "total": 30, "page": 2})
        service.documents = []

        result = await service.search(query="passport", status="expired", page=2)

        request = api.calls("GET", "/documents/search")[0]
        assert dict(request.url.params) == {"query": "passport", "status": "expired", "page": "2", "limit": "12"}
        assert request.headers["Authorization"] == "Bearer session-token"
        assert [d.id for d in result.documents] == ["a", "b"]
        assert service.state.total == 30
        assert service.state.page == 2
        assert service.total_pages == 3
        assert service.loading is False

    async def test_total_and_page_come_from_the_server(self, service, api, make_doc):
        api.on("GET", "/documents/search", {"documents": [make_doc("a")], "total": 1, "page": 1})

        await service.search(page=5)

        assert service.state.page == 1
        assert service.state.total == 1

    async def test_missing_page_keeps_requested_page(self, service, api, make_doc):
        api.on("GET", "/documents/search", {"documents": [make_doc("a")]})

        await service.search(page=3)

        assert service.state.page == 3
        assert service.state.total == 0

    async def test_degraded_response_empties_the_list(self, service, api, make_doc):
        service.documents = []
        api.on("GET", "/documents/search", {"documents": [make_doc("a")], "total": 1, "page": 1})
        await service.search()
        api.on("GET", "/documents/search", {"unexpected": True})

        await service.search()

        assert service.documents == []
        assert service.state.total == 0
        assert api.calls("GET", "/documents") == []

    async def test_omitted_arguments_keep_current_filters(self, service, api):
        api.on("GET", "/documents/search", {"documents": [], "total": 0, "page": 1})
        await service.search(query="visa", document_type="passport", status="active", page=1)

        await service.go_to_page(2)

        params = dict(api.calls("GET", "/documents/search")[-1].url.params)
        assert params == {"query": "visa", "type": "passport", "status": "active", "page": "2", "limit": "12"}

    async def test_clear_filters_resets_everything_to_page_one(self, service, api):
        api.on("GET", "/documents/search", {"documents": [], "total": 0, "page": 1})
        await service.search(query="visa", document_type="passport", status="active", page=4)

        await service.clear_filters()

        params = dict(api.calls("GET", "/documents/search")[-1].url.params)
        assert params == {"page": "1", "limit": "12"}
        assert service.state.query == ""
        assert service.state.document_type == ""
        assert service.state.status == ""

    async def test_submit_search_starts_at_page_one(self, service, api):
        api.on("GET", "/documents/search", {"documents": [], "total": 0})
        service.state.page = 3

        await service.submit_search(query="license")

        params = dict(api.calls("GET", "/documents/search")[-1].url.params)
        assert params["page"] == "1"
        assert params["query"] == "license"


class TestSearchFailure:
    async def test_falls_back_once_to_unfiltered_listing(self, service, api, notifications, make_doc):
        api.on("GET", "/documents/search", status=500, json_body={"message": "search down"})
        api.on("GET", "/documents", {"documents": [make_doc("a"), make_doc("b"), make_doc("c")]})

        result = await service.search(query="passport", page=2)

        assert [d.id for d in result.documents] == ["a", "b", "c"]
        assert service.state.total == 3
        assert service.state.page == 1
        assert len(api.calls("GET", "/documents")) == 1
        assert notifications.current.severity == Severity.WARNING
        assert notifications.current.text == SEARCH_FAILED_MESSAGE
        assert service.loading is False

    async def test_both_calls_failing_leaves_empty_list(self, service, api, make_doc):
        api.on("GET", "/documents/search", {"documents": [make_doc("a")], "total": 1})
        await service.search()
        api.on("GET", "/documents/search", raises=httpx.ConnectError("connection refused"))
        api.on("GET", "/documents", status=503)

        result = await service.search()

        assert result.documents == []
        assert service.state.total == 0
        assert service.loading is False
        assert len(api.calls("GET", "/documents/search")) == 2
        assert len(api.calls("GET", "/documents")) == 1

    async def test_loading_flag_is_set_during_the_request(self, service, api):
        seen = []

        def handler(request):
            seen.append(service.loading)
            return httpx.Response(200, json={"documents": [], "total": 0})

        api.on("GET", "/documents/search", handler=handler)

        await service.search()

        assert seen == [True]
        assert service.loading is False


class TestConcurrentSearches:
    async def _racing_api(self, api, make_doc):
        """The first search resolves after the second one."""
        first_may_finish = asyncio.Event()
        calls = []

        async def slow_then_fast(request):
            calls.append(request)
            if len(calls) == 1:
                await first_may_finish.wait()
                return httpx.Response(200, json={"documents": [make_doc("old")], "total": 1, "page": 1})
            return httpx.Response(200, json={"documents": [make_doc("new")], "total": 1, "page": 1})

        api.on("GET", "/documents/search", handler=slow_then_fast)
        return first_may_finish, calls

    async def _start_first_search(self, service, calls):
        first = asyncio.create_task(service.search(query="old"))
        while not calls:
            await asyncio.sleep(0)
        return first

    async def test_last_response_wins_by_default(self, service, api, make_doc):
        release, calls = await self._racing_api(api, make_doc)

        first = await self._start_first_search(service, calls)
        await service.search(query="new")
        release.set()
        await first

        assert [d.id for d in service.documents] == ["old"]

    async def test_stale_responses_can_be_discarded(self, env, api, client, notifications, make_doc):
        env["DASHBOARD_DISCARD_STALE_SEARCH"] = "true"
        service = CollectionQueryService(HelperConfig(logger=client.logging, env=env), client, notifications)
        release, calls = await self._racing_api(api, make_doc)

        first = await self._start_first_search(service, calls)
        await service.search(query="new")
        release.set()
        await first

        assert [d.id for d in service.documents] == ["new"]

    async def _gated_api(self, api, make_doc, failing=()):
        """Each search waits until its query's gate is opened. Queries in failing answer 500."""
        gates = {"first": asyncio.Event(), "second": asyncio.Event()}
        calls = []

        async def gated(request):
            query = request.url.params["query"]
            calls.append(query)
            await gates[query].wait()
            if query in failing:
                return httpx.Response(500, json={"message": "search down"})
            return httpx.Response(200, json={"documents": [make_doc(query)], "total": 1, "page": 1})

        api.on("GET", "/documents/search", handler=gated)
        api.on("GET", "/documents", {"documents": [make_doc("fallback")]})
        return gates, calls

    async def _start_both(self, service, calls):
        first = asyncio.create_task(service.search(query="first"))
        second = asyncio.create_task(service.search(query="second"))
        while len(calls) < 2:
            await asyncio.sleep(0)
        return first, second

    async def test_loading_stays_set_while_a_newer_search_is_pending(self, service, api, make_doc):
        gates, calls = await self._gated_api(api, make_doc)
        first, second = await self._start_both(service, calls)

        gates["first"].set()
        await first

        assert service.loading is True
        gates["second"].set()
        await second
        assert service.loading is False

    async def test_failed_stale_search_neither_warns_nor_falls_back(self, env, api, client, notifications, make_doc):
        env["DASHBOARD_DISCARD_STALE_SEARCH"] = "true"
        service = CollectionQueryService(HelperConfig(logger=client.logging, env=env), client, notifications)
        gates, calls = await self._gated_api(api, make_doc, failing=("first",))
        first, second = await self._start_both(service, calls)

        gates["second"].set()
        await second
        gates["first"].set()
        await first

        assert [d.id for d in service.documents] == ["second"]
        assert notifications.current is None
        assert api.calls("GET", "/documents") == []
        assert service.loading is False


class TestListCache:
    async def test_replace_keeps_order(self, service, api, make_doc):
        api.on("GET", "/documents/search", {"documents": [make_doc("a"), make_doc("b"), make_doc("c")], "total": 3})
        await service.search()
        updated = service.documents[1].model_copy(update={"title": "Renamed"})

        assert service.replace_document(updated) is True

        assert [d.id for d in service.documents] == ["a", "b", "c"]
        assert service.documents[1].title == "Renamed"

    async def test_page_size_comes_from_config(self, service):
        assert service.state.limit == 12
        service.state.total = 25
        assert service.total_pages == 3
        service.state.total = 0
        assert service.total_pages == 1
