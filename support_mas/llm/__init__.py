"""LLM client package"""
from typing import Optional

from ..config import Settings, settings as default_settings
from .base import LLMClient, ChatResponse
from .scripted_client import ScriptedLLMClient


def create_llm_client(settings: Optional[Settings] = None) -> LLMClient:
    """Build the chat client selected by LLM_PROVIDER."""
    settings = settings or default_settings
    provider = settings.LLM_PROVIDER.lower()

    if provider == "scripted":
        return ScriptedLLMClient()
    if provider == "ollama":
        from .ollama_client import OllamaChatClient

        return OllamaChatClient(
            model=settings.OLLAMA_TEXT_MODEL,
            base_url=settings.OLLAMA_HOST,
            temperature=settings.LLM_TEMPERATURE
        )
    raise ValueError(f"Unknown LLM provider: {settings.LLM_PROVIDER}")


__all__ = ["LLMClient", "ChatResponse", "ScriptedLLMClient", "create_llm_client"]
