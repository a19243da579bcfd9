from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class LLMError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable", status_code: int = 502):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class AIClient(Protocol):
    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> str: ...

    async def call_function(
        self,
        messages: Sequence[ChatMessage],
        *,
        function: dict[str, Any],
        temperature: float = 0.7,
    ) -> dict[str, Any]: ...

    async def aclose(self) -> None: ...
