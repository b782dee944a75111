"""Chat-completion client used by the schedule relay."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Literal, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel

if TYPE_CHECKING:
    from visit_planner.llm.model_factory import BaseCompletionProvider


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str

    def to_langchain(self) -> BaseMessage:
        if self.role == "system":
            return SystemMessage(content=self.content)
        return HumanMessage(content=self.content)


@dataclass(frozen=True)
class CompletionResult:
    choices: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Text of the first choice, ``""`` when there is none."""
        if not self.choices:
            return ""
        return self.choices[0] or ""

    @classmethod
    def from_message(cls, message: Any) -> "CompletionResult":
        if message is None:
            return cls()
        return cls(choices=[_content_text(getattr(message, "content", None))])


def _content_text(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return str(content)


class CompletionClient:
    """Calls one provider's chat model with an explicit deployment per request."""

    def __init__(self, provider: "BaseCompletionProvider") -> None:
        self.provider = provider

    @property
    def name(self) -> str:
        return self.provider.name

    async def complete(
        self,
        deployment: str,
        messages: List[ChatMessage],
        *,
        max_tokens: int,
        temperature: float,
        stop: Optional[List[str]] = None,
    ) -> CompletionResult:
        model = self.provider.create(
            deployment=deployment,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        response = await model.ainvoke(
            [message.to_langchain() for message in messages],
            stop=stop,
        )
        return CompletionResult.from_message(response)
