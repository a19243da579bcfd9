from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

import openai
from openai import AsyncOpenAI

from app.ai.types import ChatMessage, LLMError

logger = logging.getLogger(__name__)


def _payload(messages: Sequence[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": m.role, "content": m.content} for m in messages]


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
    ):
        self._model = model
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    async def _create(self, **kwargs: Any):
        try:
            return await self._client.chat.completions.create(model=self._model, **kwargs)
        except openai.APIStatusError as exc:
            logger.warning("openai_request_failed model=%s status=%s: %s", self._model, exc.status_code, exc)
            raise LLMError(str(exc), code="llm_upstream_error", status_code=exc.status_code) from exc
        except openai.OpenAIError as exc:
            logger.warning("openai_request_failed model=%s: %s", self._model, exc)
            raise LLMError(str(exc)) from exc

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> str:
        create_kwargs: dict[str, Any] = {
            "messages": _payload(messages),
            "temperature": temperature,
        }
        if max_tokens is not None:
            create_kwargs["max_tokens"] = max_tokens
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        response = await self._create(**create_kwargs)
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMError("Invalid response from OpenAI API", code="empty_response")
        return content

    async def call_function(
        self,
        messages: Sequence[ChatMessage],
        *,
        function: dict[str, Any],
        temperature: float = 0.7,
    ) -> dict[str, Any]:
        response = await self._create(
            messages=_payload(messages),
            temperature=temperature,
            tools=[{"type": "function", "function": function}],
            tool_choice={"type": "function", "function": {"name": function["name"]}},
        )
        message = response.choices[0].message if response.choices else None
        tool_calls = getattr(message, "tool_calls", None) or []
        if not tool_calls:
            raise LLMError("Invalid response from OpenAI API", code="missing_function_call")
        try:
            arguments = json.loads(tool_calls[0].function.arguments)
        except (TypeError, ValueError) as exc:
            raise LLMError("Invalid response from OpenAI API", code="invalid_function_arguments") from exc
        if not isinstance(arguments, dict):
            raise LLMError("Invalid response from OpenAI API", code="invalid_function_arguments")
        return arguments

    async def aclose(self) -> None:
        await self._client.close()
