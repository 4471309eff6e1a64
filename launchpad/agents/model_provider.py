"""Model construction for the planning agent.

``LLM_PROVIDER`` picks the backend (``bedrock`` when unset). Bedrock ships
with the base install; the other providers come from the matching
``strands-agents`` extra and are imported only when selected.

A model id is taken from the ``model_id`` argument, then from
``<PROVIDER>_MODEL_ID`` in the environment, then from ``PROVIDER_DEFAULTS``.
"""

import importlib
import logging
import os
from collections.abc import Callable
from enum import Enum
from typing import Any

from botocore.config import Config
from strands.models.bedrock import BedrockModel

logger = logging.getLogger(__name__)

# Plan documents are long; allow a slow first token before botocore gives up.
BEDROCK_READ_TIMEOUT = 300.0
BEDROCK_CONNECT_TIMEOUT = 60.0
BEDROCK_MAX_ATTEMPTS = 3


class LLMProvider(Enum):
    """Backends the planning agent can run on."""

    BEDROCK = "bedrock"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    OLLAMA = "ollama"

    @property
    def model_env_var(self) -> str:
        return f"{self.value.upper()}_MODEL_ID"


PROVIDER_DEFAULTS: dict[LLMProvider, str] = {
    LLMProvider.BEDROCK: "anthropic.claude-3-5-sonnet-20241022-v2:0",
    LLMProvider.ANTHROPIC: "claude-sonnet-4-20250514",
    LLMProvider.OPENAI: "gpt-4o",
    LLMProvider.OLLAMA: "llama3.1:70b",
}


def get_active_provider() -> LLMProvider:
    """Read ``LLM_PROVIDER``.

    Raises:
        ValueError: The value names no known provider.
    """
    name = os.getenv("LLM_PROVIDER", LLMProvider.BEDROCK.value).strip().lower()
    for provider in LLMProvider:
        if provider.value == name:
            return provider
    choices = ", ".join(p.value for p in LLMProvider)
    raise ValueError(f"Unknown LLM_PROVIDER '{name}'. Valid options: {choices}")


def get_model_id(provider: LLMProvider | None = None) -> str:
    if provider is None:
        provider = get_active_provider()
    configured = os.getenv(provider.model_env_var)
    if configured:
        return configured
    logger.info("No %s set, using %s", provider.model_env_var, PROVIDER_DEFAULTS[provider])
    return PROVIDER_DEFAULTS[provider]


def get_default_max_tokens() -> int:
    return int(os.getenv("DEFAULT_MAX_TOKENS", "5000"))


def _load_model_class(provider: LLMProvider, class_name: str) -> type:
    """Import a provider's Strands model class, naming the extra on failure."""
    module_name = f"strands.models.{provider.value}"
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ImportError(
            f"LLM_PROVIDER={provider.value} needs the optional '{provider.value}' "
            f"dependencies. Install them with: pip install 'launchpad[{provider.value}]'"
        ) from e
    return getattr(module, class_name)


def _api_client_args(env_var: str) -> dict[str, str] | None:
    api_key = os.getenv(env_var)
    return {"api_key": api_key} if api_key else None


def _bedrock_model(model_id, max_tokens, temperature, read_timeout=BEDROCK_READ_TIMEOUT):
    region_name = os.getenv("AWS_REGION")
    if not region_name:
        raise ValueError("AWS_REGION must be set to use the bedrock provider")

    client_config = Config(
        read_timeout=read_timeout,
        connect_timeout=BEDROCK_CONNECT_TIMEOUT,
        retries={"max_attempts": BEDROCK_MAX_ATTEMPTS, "mode": "standard"},
    )
    return BedrockModel(
        model_id=model_id,
        region_name=region_name,
        boto_client_config=client_config,
        streaming=False,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def _anthropic_model(model_id, max_tokens, temperature, **_):
    model_class = _load_model_class(LLMProvider.ANTHROPIC, "AnthropicModel")
    return model_class(
        client_args=_api_client_args("ANTHROPIC_API_KEY"),
        model_id=model_id,
        max_tokens=max_tokens,
        params={"temperature": temperature},
    )


def _openai_model(model_id, max_tokens, temperature, **_):
    model_class = _load_model_class(LLMProvider.OPENAI, "OpenAIModel")
    return model_class(
        client_args=_api_client_args("OPENAI_API_KEY"),
        model_id=model_id,
        params={"max_tokens": max_tokens, "temperature": temperature},
    )


def _ollama_model(model_id, max_tokens, temperature, **_):
    model_class = _load_model_class(LLMProvider.OLLAMA, "OllamaModel")
    return model_class(
        host=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
        model_id=model_id,
        max_tokens=max_tokens,
        temperature=temperature,
    )


_PROVIDER_FACTORIES: dict[LLMProvider, Callable[..., Any]] = {
    LLMProvider.BEDROCK: _bedrock_model,
    LLMProvider.ANTHROPIC: _anthropic_model,
    LLMProvider.OPENAI: _openai_model,
    LLMProvider.OLLAMA: _ollama_model,
}


def create_model(
    model_id: str | None = None,
    max_tokens: int | None = None,
    temperature: float = 0.7,
    **kwargs,
):
    """Build a Strands model for the active provider.

    Unset ``model_id`` and ``max_tokens`` are resolved from the environment.
    Extra keyword arguments go to the provider builder (Bedrock accepts
    ``read_timeout``).
    """
    provider = get_active_provider()
    model_id = model_id or get_model_id(provider)
    max_tokens = max_tokens or get_default_max_tokens()

    logger.info("Building %s model %s (max_tokens=%s)", provider.value, model_id, max_tokens)
    build = _PROVIDER_FACTORIES[provider]
    return build(model_id=model_id, max_tokens=max_tokens, temperature=temperature, **kwargs)
