"""Relays case details to the completion capability and extracts the schedule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from visit_planner.config.logger import get_logger, log_stage
from visit_planner.config.settings import Settings
from visit_planner.errors import ConfigurationError, ProviderError, ScheduleValidationError
from visit_planner.llm.completion import ChatMessage, CompletionClient
from visit_planner.prompts.prompts import SCHEDULE_SYSTEM_PROMPT, build_user_prompt
from visit_planner.utils.json_block import parse_json_block

logger = get_logger(__name__)

CLIENT_NOT_CONFIGURED_MESSAGE = "Azure OpenAI 尚未正確設定，請確認環境變數。"
DEPLOYMENT_NOT_CONFIGURED_MESSAGE = "缺少部署名稱設定，請檢查 DEPLOYMENT_NAME 環境變數。"
MISSING_CASE_DETAILS_MESSAGE = "請提供足夠的訪視與個案資訊。"
PROVIDER_FAILURE_MESSAGE = "取得 AI 排程結果時發生錯誤，請稍後再試。"


@dataclass(frozen=True)
class RelayConfig:
    client: Optional[CompletionClient]
    deployment: str
    max_tokens: int = 2000
    temperature: float = 0.3
    stop: Optional[list[str]] = None

    @classmethod
    def from_settings(cls, config: Settings, client: Optional[CompletionClient]) -> "RelayConfig":
        return cls(
            client=client,
            deployment=config.deployment,
            max_tokens=config.SCHEDULE_MAX_TOKENS,
            temperature=config.SCHEDULE_TEMPERATURE,
        )


@dataclass(frozen=True)
class ScheduleResult:
    schedule: Optional[dict[str, Any]]
    raw_response: str


def build_messages(case_details: str) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SCHEDULE_SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_user_prompt(case_details)),
    ]


async def relay_schedule(config: RelayConfig, case_details: Optional[str]) -> ScheduleResult:
    """Ask the model for a visit schedule built from ``case_details``.

    Raises ``ConfigurationError``, ``ScheduleValidationError`` or
    ``ProviderError``. An unparseable reply is not an error: the result then
    carries ``schedule=None`` and the raw text.
    """
    if config.client is None:
        raise ConfigurationError(CLIENT_NOT_CONFIGURED_MESSAGE)
    if not config.deployment:
        raise ConfigurationError(DEPLOYMENT_NOT_CONFIGURED_MESSAGE)
    if not case_details or not case_details.strip():
        raise ScheduleValidationError(MISSING_CASE_DETAILS_MESSAGE)

    messages = build_messages(case_details)
    logger.info(
        "[relay] calling provider=%s deployment=%s case_len=%s",
        config.client.name,
        config.deployment,
        len(case_details),
    )
    try:
        result = await config.client.complete(
            config.deployment,
            messages,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            stop=config.stop,
        )
    except Exception as exc:
        logger.exception("[relay] completion call failed")
        raise ProviderError(PROVIDER_FAILURE_MESSAGE, details=str(exc)) from exc

    raw_response = result.text
    log_stage(logger, "relay", raw_response)
    schedule = parse_json_block(raw_response)
    if schedule is None:
        logger.info("[relay] no structured schedule extracted; returning raw text only")
    return ScheduleResult(schedule=schedule, raw_response=raw_response)
