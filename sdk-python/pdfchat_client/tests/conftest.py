import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from pdfchat_client.client import ChatBotClient
from pdfchat_client.credentials import MemoryCredentialStore
from pdfchat_client.navigation import NavigationSignal
from pdfchat_client.pipeline import ApiService

BASE_URL = "http://api.test/"


class FakeBackend:
    """Records every request and answers with the configured response."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: Any = {"ok": True}
        self.raw: Optional[bytes] = None
        self.error: Optional[Callable[[httpx.Request], Exception]] = None

    def reply(self, status_code: int = 200, body: Any = None, raw: Optional[bytes] = None) -> None:
        self.status_code = status_code
        self.body = body
        self.raw = raw

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        if self.body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def store():
    return MemoryCredentialStore({"token": "tok_abc", "user_id": "42"})


@pytest.fixture
def navigation():
    return NavigationSignal()


@pytest.fixture
def navigated(navigation):
    paths: List[str] = []
    navigation.subscribe(paths.append)
    return paths


@pytest.fixture
def service(backend, store, navigation):
    return ApiService(BASE_URL, store=store, navigation=navigation, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def client(service):
    return ChatBotClient(service)
