"""Configuration loading and dataclasses."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml

from .clients.openrouter import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S
from .registry import DEFAULT_PROMPTS, PromptDefinition


@dataclass
class AppConfig:
    title: str = "PromptLab"
    host: str = "127.0.0.1"
    port: int = 7860
    concurrency_limit: int = 1
    log_level: str = "INFO"


@dataclass
class ApiConfig:
    base_url: str = DEFAULT_BASE_URL
    request_timeout_s: float | None = DEFAULT_TIMEOUT_S


@dataclass
class RootConfig:
    app: AppConfig
    api: ApiConfig
    prompts: list[PromptDefinition]


def default_config() -> RootConfig:
    return RootConfig(app=AppConfig(), api=ApiConfig(), prompts=list(DEFAULT_PROMPTS))


def _get(data: dict[str, Any], key: str, default: Any) -> Any:
    return data.get(key, default) if isinstance(data, dict) else default


def _parse_prompts(prompts_raw: Any) -> list[PromptDefinition]:
    if not isinstance(prompts_raw, list):
        raise ValueError("'prompts' must be a list")
    prompts: list[PromptDefinition] = []
    for item in prompts_raw:
        prompt_id = _get(item, "id", "")
        template = _get(item, "template", "")
        if not prompt_id or not isinstance(template, str):
            raise ValueError(f"Prompt entries need an 'id' and a 'template': {item!r}")
        samples = _get(item, "samples", []) or []
        prompts.append(
            PromptDefinition(
                id=str(prompt_id),
                template=template,
                samples=tuple(str(sample) for sample in samples),
            )
        )
    return prompts


def load_config(path: str) -> RootConfig:
    with open(path, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    app_raw = _get(raw, "app", {})
    api_raw = _get(raw, "api", {})
    prompts_raw = _get(raw, "prompts", None)

    app = AppConfig(
        title=_get(app_raw, "title", AppConfig.title),
        host=_get(app_raw, "host", AppConfig.host),
        port=int(_get(app_raw, "port", AppConfig.port)),
        concurrency_limit=int(_get(app_raw, "concurrency_limit", AppConfig.concurrency_limit)),
        log_level=str(_get(app_raw, "log_level", AppConfig.log_level)).upper(),
    )

    timeout = _get(api_raw, "request_timeout_s", ApiConfig.request_timeout_s)
    api = ApiConfig(
        base_url=_get(api_raw, "base_url", ApiConfig.base_url),
        request_timeout_s=float(timeout) if timeout is not None else None,
    )

    # a prompts section replaces the built-in set, never merges with it
    prompts = _parse_prompts(prompts_raw) if prompts_raw is not None else list(DEFAULT_PROMPTS)

    return RootConfig(app=app, api=api, prompts=prompts)
