import json
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from comment_digest.core.config import Settings
from comment_digest.main import create_app
from comment_digest.services.llm.gemini_client import GeminiClient

COMMENTS = [
    "This tutorial was really clear and helpful",
    "The audio quality could be a lot better",
    "Loved the pacing of the second half",
    "Please make a follow-up on async code",
]


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, GEMINI_API_KEY="test-key")


@pytest.fixture
def upstream_calls() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(settings, upstream_calls) -> Callable[..., TestClient]:
    """Build a TestClient whose Gemini traffic is answered by `handler`."""

    def _make(handler=None, app_settings: Settings = None, raise_server_exceptions: bool = True) -> TestClient:
        def _record(request: httpx.Request) -> httpx.Response:
            upstream_calls.append(request)
            if handler is None:
                return httpx.Response(200, json=gemini_reply("Hello"))
            return handler(request)

        cfg = app_settings or settings
        llm = GeminiClient(cfg, transport=httpx.MockTransport(_record))
        app = create_app(settings=cfg, llm=llm)
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return _make


def sent_prompt(request: httpx.Request) -> str:
    return json.loads(request.content)["contents"][0]["parts"][0]["text"]
