"""
LLM Manager - Abstraction layer for the generative-language backend.

This module provides a unified interface over the Gemini REST API: plain text
generation, schema-constrained JSON generation, search-grounded generation and
streamed chat replies.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional
from dataclasses import dataclass

import aiohttp

from ..config import get_llm_config, LLMConfig
from ..utils import get_logger

logger = get_logger(__name__)


class LLMError(Exception):
    """Raised when a generation call fails or returns an unusable response."""


@dataclass
class LLMResponse:
    """Standardized response from LLM providers."""
    success: bool
    content: str = ""
    model: str = ""
    usage: Optional[Dict[str, int]] = None
    finish_reason: Optional[str] = None
    error: Optional[str] = None
    data: Optional[Any] = None

    def raise_for_error(self) -> "LLMResponse":
        if not self.success:
            raise LLMError(self.error or "LLM call failed")
        return self


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def generate_text(self, prompt: str, system_prompt: str = "", model: Optional[str] = None,
                            tools: Optional[List[Dict[str, Any]]] = None, **kwargs) -> LLMResponse:
        """Generate text response."""

    @abstractmethod
    async def generate_structured_response(self, prompt: str, system_prompt: str = "",
                                           response_schema: Optional[Dict[str, Any]] = None,
                                           model: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate a JSON response constrained by ``response_schema``; parsed JSON goes to ``data``."""

    @abstractmethod
    def stream_chat(self, history: List[Dict[str, str]], message: str, system_prompt: str = "",
                    model: Optional[str] = None) -> AsyncIterator[str]:
        """Stream the text of a chat reply, chunk by chunk."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the default model name."""


class GeminiProvider(LLMProvider):
    """Google Gemini REST API provider."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.headers = {
            "x-goog-api-key": config.api_key or "",
            "Content-Type": "application/json",
        }
        self.timeout = aiohttp.ClientTimeout(total=config.timeout_seconds)

    def _build_payload(self, contents: List[Dict[str, Any]], system_prompt: str = "",
                       generation_config: Optional[Dict[str, Any]] = None,
                       tools: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"contents": contents}
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        if generation_config:
            payload["generationConfig"] = generation_config
        if tools:
            payload["tools"] = tools
        return payload

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if not part.get("thought"))

    async def _generate(self, model: str, payload: Dict[str, Any]) -> LLMResponse:
        if not self.config.api_key:
            return LLMResponse(success=False, error="Gemini API key not configured")

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(
                    f"{self.base_url}/models/{model}:generateContent",
                    headers=self.headers,
                    json=payload
                ) as response:
                    if response.status == 200:
                        data = await response.json()
                        candidates = data.get("candidates") or [{}]
                        return LLMResponse(
                            success=True,
                            content=self._extract_text(data),
                            model=data.get("modelVersion", model),
                            usage=data.get("usageMetadata", {}),
                            finish_reason=candidates[0].get("finishReason")
                        )
                    else:
                        error_text = await response.text()
                        return LLMResponse(
                            success=False,
                            error=f"Gemini API error {response.status}: {error_text}"
                        )

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error calling Gemini API: {e}")
            return LLMResponse(
                success=False,
                error=f"Gemini API error: {str(e)}"
            )

    async def generate_text(self, prompt: str, system_prompt: str = "", model: Optional[str] = None,
                            tools: Optional[List[Dict[str, Any]]] = None, **kwargs) -> LLMResponse:
        """Generate text response using the Gemini API."""
        model = model or self.config.fast_model
        payload = self._build_payload(
            [{"role": "user", "parts": [{"text": prompt}]}],
            system_prompt=system_prompt,
            generation_config=kwargs.get("generation_config"),
            tools=tools,
        )
        return await self._generate(model, payload)

    async def generate_structured_response(self, prompt: str, system_prompt: str = "",
                                           response_schema: Optional[Dict[str, Any]] = None,
                                           model: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate structured response using the Gemini API."""
        generation_config: Dict[str, Any] = {"responseMimeType": "application/json"}
        if response_schema:
            generation_config["responseSchema"] = response_schema

        response = await self.generate_text(
            prompt, system_prompt, model=model, generation_config=generation_config
        )

        if response.success:
            try:
                response.data = json.loads(response.content or "{}")
            except json.JSONDecodeError as e:
                logger.warning("Could not parse structured response as JSON")
                response.success = False
                response.error = f"Invalid JSON in structured response: {e}"

        return response

    async def stream_chat(self, history: List[Dict[str, str]], message: str, system_prompt: str = "",
                          model: Optional[str] = None) -> AsyncIterator[str]:
        """Stream a chat reply using server-sent events."""
        if not self.config.api_key:
            raise LLMError("Gemini API key not configured")

        model = model or self.config.chat_model
        contents = [
            {"role": turn["role"], "parts": [{"text": turn["content"]}]}
            for turn in history
        ]
        contents.append({"role": "user", "parts": [{"text": message}]})
        payload = self._build_payload(contents, system_prompt=system_prompt)

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(
                    f"{self.base_url}/models/{model}:streamGenerateContent",
                    params={"alt": "sse"},
                    headers=self.headers,
                    json=payload
                ) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise LLMError(f"Gemini API error {response.status}: {error_text}")

                    async for raw_line in response.content:
                        line = raw_line.decode("utf-8").strip()
                        if not line.startswith("data:"):
                            continue
                        event = json.loads(line[len("data:"):].strip())
                        text = self._extract_text(event)
                        if text:
                            yield text
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LLMError(f"Gemini stream error: {e}") from e
        except json.JSONDecodeError as e:
            raise LLMError(f"Gemini stream sent invalid JSON: {e}") from e

    def is_available(self) -> bool:
        return bool(self.config.api_key)

    def get_model_name(self) -> str:
        return self.config.fast_model


class LLMManager:
    """Main LLM manager that owns the configured provider."""

    def __init__(self, config: Optional[LLMConfig] = None, provider: Optional[LLMProvider] = None):
        self.config = config or get_llm_config()
        self.providers: Dict[str, LLMProvider] = {}
        if provider is not None:
            self.providers["default"] = provider
        else:
            self._initialize_providers()

    def _initialize_providers(self):
        if self.config.api_key:
            self.providers["gemini"] = GeminiProvider(self.config)

    @property
    def fast_model(self) -> str:
        return self.config.fast_model

    @property
    def pro_model(self) -> str:
        return self.config.pro_model

    @property
    def chat_model(self) -> str:
        return self.config.chat_model

    def get_available_providers(self) -> List[str]:
        return [name for name, provider in self.providers.items() if provider.is_available()]

    def get_primary_provider(self) -> Optional[LLMProvider]:
        for provider in self.providers.values():
            if provider.is_available():
                return provider
        return None

    async def generate_text(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        """Generate text using the primary provider."""
        provider = self.get_primary_provider()
        if not provider:
            return LLMResponse(success=False, error="No LLM providers available")
        return await provider.generate_text(prompt, system_prompt, **kwargs)

    async def generate_structured_response(self, prompt: str, system_prompt: str = "",
                                           response_schema: Optional[Dict[str, Any]] = None,
                                           **kwargs) -> LLMResponse:
        """Generate structured response using the primary provider."""
        provider = self.get_primary_provider()
        if not provider:
            return LLMResponse(success=False, error="No LLM providers available")
        return await provider.generate_structured_response(prompt, system_prompt, response_schema, **kwargs)

    def stream_chat(self, history: List[Dict[str, str]], message: str, system_prompt: str = "",
                    model: Optional[str] = None) -> AsyncIterator[str]:
        provider = self.get_primary_provider()
        if not provider:
            raise LLMError("No LLM providers available")
        return provider.stream_chat(history, message, system_prompt, model=model or self.chat_model)


# Global LLM manager instance
_llm_manager = None


def get_llm_manager() -> LLMManager:
    """Get the global LLM manager instance."""
    global _llm_manager
    if _llm_manager is None:
        _llm_manager = LLMManager()
    return _llm_manager
