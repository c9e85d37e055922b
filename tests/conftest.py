"""Shared fixtures: an in-memory documents API behind httpx.MockTransport."""

import json
import logging
from typing import Callable

import httpx
import pytest

from dashboard.DashboardController import DashboardController
from shared.clients.documents.rest.DocumentsClientRest import DocumentsClientRest
from shared.helper.HelperConfig import HelperConfig
from shared.models.session import SessionContext
from shared.models.upload import UploadFile

BASE_URL = "http://api.test/api"
TOKEN = "session-token"


class FakeDocumentsApi:
    """Routes requests by (method, path) and records every request it sees."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Callable[[httpx.Request], httpx.Response]]] = {}
        self._repeating: set[tuple[str, str]] = set()

    def on(self, method: str, path: str, json_body=None, status: int = 200, raises: Exception | None = None, handler=None) -> None:
        """Queue a reply for the route. The last queued reply repeats until a new one is queued."""
        if (method, path) in self._repeating:
            self._repeating.discard((method, path))
            self._routes[(method, path)] = []
        if handler is None:
            def handler(request, json_body=json_body, status=status, raises=raises):
                if raises is not None:
                    raise raises
                if json_body is None:
                    return httpx.Response(status)
                return httpx.Response(status, json=json_body)
        self._routes.setdefault((method, path), []).append(handler)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        handlers = self._routes.get((request.method, path))
        if not handlers:
            return httpx.Response(404, json={"message": f"no route for {request.method} {path}"})
        if len(handlers) > 1:
            handler = handlers.pop(0)
        else:
            handler = handlers[0]
            self._repeating.add((request.method, path))
        return handler(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path.removeprefix("/api") == path]

    @staticmethod
    def json_of(request: httpx.Request) -> dict:
        return json.loads(request.content)


@pytest.fixture
def env() -> dict[str, str]:
    return {
        "DOCUMENTS_REST_BASE_URL": BASE_URL,
        "DASHBOARD_PAGE_SIZE": "12",
        "TIMEZONE": "UTC",
    }


@pytest.fixture
def helper_config(env) -> HelperConfig:
    return HelperConfig(logger=logging.getLogger("dashboard.tests"), env=env)


@pytest.fixture
def api() -> FakeDocumentsApi:
    return FakeDocumentsApi()


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(token=TOKEN)


@pytest.fixture
async def client(helper_config, session, api):
    documents_client = DocumentsClientRest(helper_config=helper_config, session=session)
    await documents_client.boot(transport=httpx.MockTransport(api))
    yield documents_client
    await documents_client.close()


@pytest.fixture
def confirmations() -> list[str]:
    return []


@pytest.fixture
def redirects() -> list[str]:
    return []


@pytest.fixture
def dashboard(helper_config, client, confirmations, redirects) -> DashboardController:
    def confirm(question: str) -> bool:
        confirmations.append(question)
        return True

    return DashboardController(
        helper_config=helper_config,
        documents_client=client,
        on_unauthenticated=lambda: redirects.append("login"),
        confirm=confirm,
    )


@pytest.fixture
def make_doc() -> Callable[..., dict]:
    def _make_doc(doc_id: str, **fields) -> dict:
        doc = {
            "_id": doc_id,
            "title": f"Document {doc_id}",
            "description": "",
            "documentType": "other",
            "status": "active",
            "reminderDays": 30,
        }
        doc.update(fields)
        return doc

    return _make_doc


@pytest.fixture
def make_file() -> Callable[..., UploadFile]:
    def _make_file(name: str, content: bytes = b"%PDF-1.4", content_type: str = "application/pdf") -> UploadFile:
        return UploadFile(name=name, content=content, content_type=content_type)

    return _make_file
