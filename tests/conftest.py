import json
import os

os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from candidate_eval.utils.config import Settings, get_settings


class FakeAnthropicClient:
    """Records outgoing Messages API calls and replies with canned text"""

    def __init__(self, reply_text: str = "{}"):
        self.reply_text = reply_text
        self.calls = []

    async def create_message(self, content, max_tokens):
        self.calls.append({"content": content, "max_tokens": max_tokens})
        return {"content": [{"type": "text", "text": self.reply_text}]}


class InMemoryBlobStorage:
    """Stand-in for BlobStorageClient keeping blobs in a dict"""

    BASE_URL = "https://example.public.blob.vercel-storage.com"

    def __init__(self):
        self.blobs = {}
        self.puts = []

    async def put(self, pathname, body, content_type="application/octet-stream", add_random_suffix=True):
        stored = f"{pathname}-rnd" if add_random_suffix else pathname
        url = f"{self.BASE_URL}/{stored}"
        self.blobs[url] = (stored, body)
        self.puts.append({"pathname": pathname, "content_type": content_type, "add_random_suffix": add_random_suffix})
        return {"url": url, "pathname": stored}

    async def find_by_prefix(self, prefix, limit=1):
        return [{"url": url, "pathname": p} for url, (p, _) in self.blobs.items() if p.startswith(prefix)][:limit]

    async def fetch_json(self, url):
        return json.loads(self.blobs[url][1].decode("utf-8"))


def make_settings(**overrides) -> Settings:
    values = {"anthropic_api_key": "test-key", "blob_read_write_token": "test-token"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_response(status_code, body, headers=None):
    """MagicMock shaped like requests.Response; pass an exception as body to make .json() fail"""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.headers = headers or {}
    if isinstance(body, Exception):
        response.json.side_effect = body
        response.text = "<html>error</html>"
    else:
        response.json.return_value = body
        response.text = json.dumps(body)
    return response


@pytest.fixture
def test_app():
    from candidate_eval.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def settings(test_app):
    s = make_settings()
    test_app.dependency_overrides[get_settings] = lambda: s
    return s


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


@pytest.fixture
def fake_llm(test_app, settings):
    from candidate_eval.dependencies import get_anthropic_client
    fake = FakeAnthropicClient()
    test_app.dependency_overrides[get_anthropic_client] = lambda: fake
    return fake


@pytest.fixture
def blob_store(test_app, settings):
    from candidate_eval.dependencies import get_blob_storage
    store = InMemoryBlobStorage()
    test_app.dependency_overrides[get_blob_storage] = lambda: store
    return store
