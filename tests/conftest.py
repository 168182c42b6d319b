"""Shared fixtures: isolated session file and in-memory service fakes."""

import asyncio
import json

import pytest
import requests

from fluentai.api import ApiError, AuthContext
from fluentai.models import Article


@pytest.fixture(autouse=True)
def isolated_session(tmp_path, monkeypatch):
    """Point the session store at a temp file and clear env overrides."""
    path = tmp_path / "session.json"
    monkeypatch.setenv("FLUENTAI_SESSION_PATH", str(path))
    monkeypatch.delenv("FLUENTAI_TOKEN", raising=False)
    monkeypatch.delenv("FLUENTAI_API_URL", raising=False)
    monkeypatch.delenv("FLUENTAI_TIMEOUT", raising=False)
    return path


@pytest.fixture
def auth():
    return AuthContext(base_url="http://api.test", token="tok-123")


def make_response(status: int, body=None, url: str = "http://api.test") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    if body is None:
        response._content = b""
    elif isinstance(body, (bytes, str)):
        response._content = body.encode() if isinstance(body, str) else body
    else:
        response._content = json.dumps(body).encode()
        response.headers["Content-Type"] = "application/json"
    return response


class FakeTransport:
    """Stand-in for requests.request that records calls and replays responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, method, url, headers=None, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "params": params, "json": json})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport(monkeypatch):
    """Install a FakeTransport; tests queue responses on it."""
    fake = FakeTransport()
    monkeypatch.setattr(requests, "request", fake)
    return fake


def article(article_id="1", **fields) -> Article:
    defaults = dict(title=f"Article {article_id}", content="<p>Body</p>", category="technology")
    defaults.update(fields)
    return Article(id=article_id, **defaults)


class FakeContentService:
    """Records calls; each method may be scripted with a result, an ApiError or a gate."""

    def __init__(self):
        self.calls = []
        self.articles: dict[str, Article] = {}
        self.fail: dict[str, ApiError] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.list_results: list = []
        self.next_id = 100

    async def _enter(self, name, *args):
        self.calls.append((name, *args))
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        if name in self.fail:
            raise self.fail[name]

    async def list(self, criteria=None):
        await self._enter("list", criteria)
        if self.list_results:
            result = self.list_results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return list(self.articles.values())

    async def get(self, article_id):
        await self._enter("get", article_id)
        if article_id not in self.articles:
            raise ApiError("Article not found", 404)
        return self.articles[article_id]

    async def create(self, fields):
        await self._enter("create", dict(fields))
        self.next_id += 1
        saved = Article(id=str(self.next_id), **fields)
        self.articles[saved.id] = saved
        return saved

    async def update(self, article_id, fields):
        await self._enter("update", article_id, dict(fields))
        saved = Article(id=article_id, **fields)
        self.articles[article_id] = saved
        return saved

    async def delete(self, article_id):
        await self._enter("delete", article_id)
        self.articles.pop(article_id, None)

    def names(self):
        return [call[0] for call in self.calls]


class FakeEnrichmentService:
    def __init__(self, summary="Generated summary", improved="<p>Better body</p>", modified="<p>Prompted body</p>"):
        self.calls = []
        self.summary = summary
        self.improved = improved
        self.modified = modified
        self.fail: dict[str, ApiError] = {}
        self.gates: dict[str, asyncio.Event] = {}

    async def _enter(self, name, *args):
        self.calls.append((name, *args))
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        if name in self.fail:
            raise self.fail[name]

    async def summarize(self, text):
        await self._enter("summarize", text)
        return self.summary

    async def improve(self, text):
        await self._enter("improve", text)
        return self.improved

    async def apply_prompt(self, text, instruction):
        await self._enter("apply_prompt", text, instruction)
        return self.modified

    def names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def content():
    return FakeContentService()


@pytest.fixture
def enrichment():
    return FakeEnrichmentService()
