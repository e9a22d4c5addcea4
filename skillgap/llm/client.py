from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from openai import OpenAI, OpenAIError

from skillgap.config import Settings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMModels:
    skill_extraction: str = "gpt-4o-mini"
    gap_analysis: str = "gpt-4o-mini"
    learning_path: str = "gpt-4o-mini"


@dataclass(frozen=True)
class LLMConfig:
    api_key: str | None
    base_url: str
    models: LLMModels = field(default_factory=LLMModels)
    referer: str = "http://localhost:3000"
    title: str = "Skill Gap Analyzer"
    timeout_seconds: float = 60.0
    max_retries: int = 2

    # Low temperature keeps structured JSON output stable across calls.
    temperature: float = 0.1
    max_tokens: int = 1000
    top_p: float = 0.9
    frequency_penalty: float = 0.1
    presence_penalty: float = 0.1


def load_llm_config(settings: Settings) -> LLMConfig:
    return LLMConfig(
        api_key=settings.openrouter_api_key or None,
        base_url=settings.openrouter_base_url,
        models=LLMModels(
            skill_extraction=settings.skill_extraction_model,
            gap_analysis=settings.gap_analysis_model,
            learning_path=settings.learning_path_model,
        ),
        referer=settings.frontend_url,
        title=settings.app_name,
        timeout_seconds=settings.llm_timeout_seconds,
        max_retries=settings.llm_max_retries,
    )


class LLMError(RuntimeError):
    pass


class LLMUnavailableError(LLMError):
    pass


class LLMResponseError(LLMError):
    pass


_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def parse_json_content(content: str | None) -> Any:
    """Parse a model reply as JSON, tolerating markdown code fences around it."""

    if not content or not content.strip():
        raise LLMResponseError("No response from AI model")
    cleaned = _FENCE_RE.sub("", content).strip()
    try:
        return json.loads(cleaned)
    except ValueError as exc:
        raise LLMResponseError(f"AI model returned invalid JSON: {exc}") from exc


class OpenRouterClient:
    """Chat-completions client for any OpenAI-compatible endpoint (OpenRouter by default)."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config
        self._client: OpenAI | None = None
        if config.api_key:
            self._client = OpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout_seconds,
                max_retries=config.max_retries,
                default_headers={"HTTP-Referer": config.referer, "X-Title": config.title},
            )

    @property
    def models(self) -> LLMModels:
        return self.config.models

    @property
    def available(self) -> bool:
        return self._client is not None

    def complete(self, model: str, system_prompt: str, user_prompt: str) -> str:
        if self._client is None:
            raise LLMUnavailableError("OPENROUTER_API_KEY is not configured")

        cfg = self.config
        try:
            completion = self._client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=cfg.temperature,
                max_tokens=cfg.max_tokens,
                top_p=cfg.top_p,
                frequency_penalty=cfg.frequency_penalty,
                presence_penalty=cfg.presence_penalty,
            )
        except OpenAIError as exc:
            raise LLMError(f"AI request failed: {type(exc).__name__}: {exc}") from exc

        choices = completion.choices or []
        content = choices[0].message.content if choices else None
        if not content:
            raise LLMResponseError("No response from AI model")
        return content

    def complete_json(self, model: str, system_prompt: str, user_prompt: str) -> Any:
        return parse_json_content(self.complete(model, system_prompt, user_prompt))
