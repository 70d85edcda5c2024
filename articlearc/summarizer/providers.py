# articlearc/summarizer/providers.py
"""
Text-generation providers used for AI article summaries.

Each provider wraps one external endpoint behind ``LLMProvider.generate``.
Providers raise ``ProviderCredentialError`` when the endpoint rejects the
configured credential; every other failure propagates as-is and is classified
by the summary service.
"""

from typing import Any, Dict, Optional
import logging
from abc import ABC, abstractmethod

import httpx

from articlearc.config import Settings

logger = logging.getLogger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"


class ProviderCredentialError(RuntimeError):
    """The external endpoint rejected the configured API key."""


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name: str = "llm"

    @abstractmethod
    async def generate(self, prompt: str, max_tokens: int = 300) -> str:
        """Generate free text for the given prompt."""
        pass


class GeminiProvider(LLMProvider):
    """Google Gemini REST provider."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = GEMINI_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    async def generate(self, prompt: str, max_tokens: int = 300) -> str:
        """Generate a completion through the generateContent endpoint."""
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": max_tokens,
                "temperature": 0.3,
            },
        }
        url = f"{self.base_url}/models/{self.model}:generateContent"

        async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
            response = await client.post(
                url, json=payload, headers={"x-goog-api-key": self.api_key}
            )

        if response.status_code in (401, 403) or (
            response.status_code == 400 and "API key" in response.text
        ):
            raise ProviderCredentialError("Invalid Gemini API key")
        response.raise_for_status()

        return _gemini_text(response.json())


def _gemini_text(body: Dict[str, Any]) -> str:
    candidates = body.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)


class OpenAIProvider(LLMProvider):
    """OpenAI API provider."""

    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        try:
            from openai import AsyncOpenAI
        except ImportError:
            raise ImportError(
                "OpenAI package not installed. Install with: pip install openai"
            )

        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def generate(self, prompt: str, max_tokens: int = 300) -> str:
        """Generate response from OpenAI API."""
        from openai import AuthenticationError, PermissionDeniedError

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=0.3,
            )
        except (AuthenticationError, PermissionDeniedError) as exc:
            raise ProviderCredentialError("Invalid OpenAI API key") from exc

        return response.choices[0].message.content or ""


class AnthropicProvider(LLMProvider):
    """Anthropic Claude API provider."""

    name = "anthropic"

    def __init__(self, api_key: str, model: str = "claude-3-5-haiku-latest"):
        try:
            from anthropic import AsyncAnthropic
        except ImportError:
            raise ImportError(
                "Anthropic package not installed. Install with: pip install anthropic"
            )

        self.client = AsyncAnthropic(api_key=api_key)
        self.model = model

    async def generate(self, prompt: str, max_tokens: int = 300) -> str:
        """Generate response from Anthropic API."""
        from anthropic import AuthenticationError, PermissionDeniedError

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=0.3,
                messages=[{"role": "user", "content": prompt}],
            )
        except (AuthenticationError, PermissionDeniedError) as exc:
            raise ProviderCredentialError("Invalid Anthropic API key") from exc

        return "".join(
            block.text for block in response.content if getattr(block, "text", None)
        )


class OllamaProvider(LLMProvider):
    """Ollama local LLM provider."""

    name = "ollama"

    def __init__(
        self,
        model: str = "llama3.2",
        base_url: str = "http://localhost:11434",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Ollama provider.

        Args:
            model: Ollama model name (e.g., llama3.2, mistral)
            base_url: Ollama server URL (default: http://localhost:11434)
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    async def generate(self, prompt: str, max_tokens: int = 300) -> str:
        """Generate response from Ollama API."""
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": 0.3,
                "num_predict": max_tokens,
            },
        }

        async with httpx.AsyncClient(timeout=60.0, transport=self._transport) as client:
            response = await client.post(f"{self.base_url}/api/generate", json=payload)
            response.raise_for_status()
            result = response.json()

        return result.get("response", "")


def build_llm_provider(settings: Settings) -> Optional[LLMProvider]:
    """Instantiate the configured provider, or None when AI summaries are disabled."""
    provider_name = settings.llm_provider.lower()
    if provider_name == "none":
        return None

    if provider_name == "gemini":
        if not settings.gemini_api_key:
            logger.warning(
                "GEMINI_API_KEY not set - AI summary generation will be disabled"
            )
            return None
        model = settings.llm_model or "gemini-2.0-flash"
        logger.info(f"Initialized Gemini provider with model: {model}")
        return GeminiProvider(api_key=settings.gemini_api_key, model=model)

    if provider_name == "openai":
        if not settings.openai_api_key:
            logger.warning("OpenAI API key not configured, AI summaries disabled")
            return None
        model = settings.llm_model or "gpt-4o-mini"
        logger.info(f"Initialized OpenAI provider with model: {model}")
        return OpenAIProvider(api_key=settings.openai_api_key, model=model)

    if provider_name == "anthropic":
        if not settings.anthropic_api_key:
            logger.warning("Anthropic API key not configured, AI summaries disabled")
            return None
        model = settings.llm_model or "claude-3-5-haiku-latest"
        logger.info(f"Initialized Anthropic provider with model: {model}")
        return AnthropicProvider(api_key=settings.anthropic_api_key, model=model)

    if provider_name == "ollama":
        model = settings.llm_model or "llama3.2"
        base_url = settings.ollama_base_url or "http://localhost:11434"
        logger.info(f"Initialized Ollama provider with model: {model} at {base_url}")
        return OllamaProvider(model=model, base_url=base_url)

    logger.warning(f"Unknown LLM provider: {settings.llm_provider}")
    return None
