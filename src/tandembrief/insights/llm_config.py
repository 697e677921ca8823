"""LLM configuration schema, loading, and chat-model factory for review insights."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Callable

from langchain.chat_models import init_chat_model
from langchain_core.language_models import BaseChatModel
from pydantic import BaseModel

_CONFIGS_DIR = Path(__file__).resolve().parent.parent.parent.parent / "configs" / "review_insights"

# (system prompt, user prompt) -> model text
CompleteFn = Callable[[str, str], str]


class LLMConfig(BaseModel):
    """LLM provider and model configuration."""

    provider: str = "xai"
    model: str = "grok-2-latest"
    api_key_env: str = "XAI_API_KEY"
    timeout_s: float = 30.0


class TaskConfig(BaseModel):
    """Per-task sampling settings."""

    temperature: float = 0.1
    max_tokens: int = 500


class PromptsConfig(BaseModel):
    """Paths to prompt templates (relative to configs/review_insights/)."""

    analyzer: str = "prompts/analyzer_v1.md"
    generator: str = "prompts/generator_v1.md"
    translator: str = "prompts/translator_v1.md"


class InsightsConfig(BaseModel):
    """Top-level review insights configuration."""

    version: str = "1.0"
    name: str = "default"
    llm: LLMConfig = LLMConfig()
    analyzer: TaskConfig = TaskConfig(temperature=0.1, max_tokens=800)
    generator: TaskConfig = TaskConfig(temperature=0.8, max_tokens=150)
    translator: TaskConfig = TaskConfig(temperature=0.3, max_tokens=200)
    prompts: PromptsConfig = PromptsConfig()

    def load_prompt(self, key: str) -> str:
        """Load prompt markdown from configs/review_insights/{path}."""
        rel_path = getattr(self.prompts, key)
        prompt_path = _CONFIGS_DIR / rel_path
        return prompt_path.read_text()


def load_insights_config(name: str | None = None) -> InsightsConfig:
    """Load an insights config by name.

    Resolution order:
    1. Explicit name parameter
    2. TANDEMBRIEF_INSIGHTS_CONFIG environment variable
    3. "default"
    """
    config_name = name or os.environ.get("TANDEMBRIEF_INSIGHTS_CONFIG", "default")
    config_path = _CONFIGS_DIR / f"{config_name}.json"

    if not config_path.exists():
        raise FileNotFoundError(f"Insights config not found: {config_path}")

    raw = json.loads(config_path.read_text())
    return InsightsConfig.model_validate(raw)


def require_api_key(config: LLMConfig) -> str:
    """Return the provider API key or fail before any model work starts."""
    api_key = os.environ.get(config.api_key_env)
    if not api_key:
        raise ValueError(f"{config.api_key_env} environment variable is not configured")
    return api_key


def create_llm(config: InsightsConfig, task: TaskConfig) -> BaseChatModel:
    """Create a LangChain chat model for one task.

    Retries are disabled: a failed call is handled by the caller, and the
    timeout bounds each request.
    """
    return init_chat_model(
        model=config.llm.model,
        model_provider=config.llm.provider,
        api_key=require_api_key(config.llm),
        temperature=task.temperature,
        max_tokens=task.max_tokens,
        timeout=config.llm.timeout_s,
        max_retries=0,
    )


def _message_text(content: str | list) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def chat_completion(llm: BaseChatModel) -> CompleteFn:
    """Wrap a chat model as a plain ``complete(system, user) -> str`` callable."""

    def complete(system_prompt: str, user_prompt: str) -> str:
        result = llm.invoke([
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ])
        return _message_text(result.content)

    return complete
