"""Shared fixtures: isolated project home, settings builder and fake CDX transport."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx
import pytest

from timetraveller.config import LookupSettings

CDX_HEADER = ["urlkey", "timestamp", "original", "mimetype", "statuscode", "digest", "length"]


def cdx_row(timestamp: str, original: str) -> list[str]:
    return ["com,example)/", timestamp, original, "text/html", "200", "DIGEST", "1234"]


def cdx_body(*rows: list[Any], header: bool = True) -> str:
    payload = ([CDX_HEADER] if header else []) + list(rows)
    return json.dumps(payload)


class FakeIndex:
    """Scripted CDX endpoint; each call takes the next response, the last one repeats."""

    def __init__(self, responses: Iterable[Any]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.responses)) - 1
        item = self.responses[index]
        if isinstance(item, Exception):
            raise item
        if not isinstance(item, httpx.Response):
            item = item(request)
        return item

    @property
    def calls(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("TIMETRAVELLER_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def make_settings() -> Callable[..., LookupSettings]:
    def _builder(**overrides: Any) -> LookupSettings:
        base: dict[str, Any] = {
            "workers": 2,
            "request_timeout": 1.0,
            "retry_attempts": 3,
            "retry_delay": 0.5,
        }
        base.update(overrides)
        return LookupSettings(**base)

    return _builder


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def record_sleep(sleeps: list[float]) -> Callable[[float], None]:
    return sleeps.append


class CdxPayloads:
    header = CDX_HEADER
    row = staticmethod(cdx_row)
    body = staticmethod(cdx_body)


@pytest.fixture
def cdx() -> type[CdxPayloads]:
    return CdxPayloads


@pytest.fixture
def fake_index() -> Callable[..., FakeIndex]:
    def _builder(*responses: Any) -> FakeIndex:
        return FakeIndex(responses)

    return _builder
