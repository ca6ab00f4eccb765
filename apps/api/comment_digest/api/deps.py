from fastapi import Request

from comment_digest.core.config import Settings
from comment_digest.services.llm.gemini_client import GeminiClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_llm(request: Request) -> GeminiClient:
    return request.app.state.llm


def get_request_id(request: Request) -> str:
    return request.state.request_id
