from __future__ import annotations

import io
import zipfile
from typing import Dict

import orjson
import pytest


class FakeResp:
    def __init__(self, content: bytes, status_code: int = 200, reason: str = "OK"):
        self.content = content
        self.status_code = status_code
        self.reason = reason


def make_zip(members: Dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


def make_record(name: str, url: str, bounty: bool = True) -> dict:
    return {
        "name": name,
        "program_url": f"https://hackerone.com/{name.lower()}",
        "URL": url,
        "count": 3,
        "change": 0,
        "is_new": False,
        "platform": "hackerone",
        "bounty": bounty,
        "last_updated": "2024-01-02T03:04:05.123456Z",
    }


def make_index(records: list) -> bytes:
    return orjson.dumps(records)


@pytest.fixture
def fake_web(monkeypatch: pytest.MonkeyPatch):
    """
    Route requests.get in the fetcher module to an in-memory table.
    Unknown URLs answer 404.
    """
    import tenebra.fetch.fetcher as m

    routes: Dict[str, FakeResp] = {}
    calls: list = []

    def fake_get(url, **kwargs):
        calls.append(url)
        return routes.get(url, FakeResp(b"not found", status_code=404, reason="Not Found"))

    monkeypatch.setattr(m.requests, "get", fake_get)
    fake_get.routes = routes
    fake_get.calls = calls
    return fake_get
