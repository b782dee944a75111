from abc import ABC, abstractmethod
from typing import Any

from visit_planner.config.logger import get_logger
from visit_planner.config.settings import Settings
from visit_planner.llm.completion import CompletionClient

_logger = get_logger(__name__)


class BaseCompletionProvider(ABC):
    """Abstract provider contract for chat model creation."""

    name: str = "base"

    def __init__(self, config: Settings) -> None:
        self.config = config

    @abstractmethod
    def is_available(self) -> bool:
        """Whether endpoint and credential are configured."""

    @abstractmethod
    def create(self, deployment: str, max_tokens: int, temperature: float) -> Any:
        """Create provider-specific langchain chat model instance."""


class AzureOpenAIProvider(BaseCompletionProvider):
    name = "azure"

    def is_available(self) -> bool:
        return self.config.has_azure_creds()

    def create(self, deployment: str, max_tokens: int, temperature: float) -> Any:
        from langchain_openai import AzureChatOpenAI

        return AzureChatOpenAI(
            azure_endpoint=self.config.ENDPOINT_URL,
            api_key=self.config.AZURE_OPENAI_API_KEY,
            api_version=self.config.AZURE_OPENAI_API_VERSION,
            azure_deployment=deployment,
            max_tokens=max_tokens,
            temperature=temperature,
            max_retries=0,
        )


class OpenAIProvider(BaseCompletionProvider):
    name = "openai"

    def is_available(self) -> bool:
        return self.config.has_openai_like_creds()

    def create(self, deployment: str, max_tokens: int, temperature: float) -> Any:
        from langchain_openai import ChatOpenAI

        kwargs: dict[str, Any] = {
            "model": deployment,
            "api_key": self.config.OPENAI_API_KEY,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "max_retries": 0,
        }
        if self.config.OPENAI_BASE_URL:
            kwargs["base_url"] = self.config.OPENAI_BASE_URL
        return ChatOpenAI(**kwargs)


class ModelFactory:
    """Provider registry + resolution strategy."""

    def __init__(self, config: Settings) -> None:
        self.config = config
        self.providers: dict[str, BaseCompletionProvider] = {
            AzureOpenAIProvider.name: AzureOpenAIProvider(config),
            OpenAIProvider.name: OpenAIProvider(config),
        }

    def resolve_provider(self) -> BaseCompletionProvider | None:
        provider_name = (self.config.COMPLETION_PROVIDER or "").strip().lower()
        if provider_name and provider_name != "auto":
            provider = self.providers.get(provider_name)
            if provider is None:
                raise ValueError(f"Unknown provider: {provider_name}")
            return provider if provider.is_available() else None

        # Auto strategy: Azure deployment first, then any OpenAI-compatible endpoint.
        for name in (AzureOpenAIProvider.name, OpenAIProvider.name):
            provider = self.providers[name]
            if provider.is_available():
                return provider
        return None

    def create_completion_client(self) -> CompletionClient | None:
        provider = self.resolve_provider()
        if provider is None:
            _logger.warning(
                "[model_factory] no completion provider configured; "
                "set ENDPOINT_URL and AZURE_OPENAI_API_KEY"
            )
            return None
        _logger.info("[model_factory] using provider=%s", provider.name)
        return CompletionClient(provider)


def build_completion_client(config: Settings) -> CompletionClient | None:
    return ModelFactory(config).create_completion_client()
