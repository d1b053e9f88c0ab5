"""Unit tests for configuration loading and CLI overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from promptlab.clients.openrouter import DEFAULT_BASE_URL
from promptlab.config import load_config
from promptlab.main import apply_overrides, load_root_config, parse_args
from promptlab.registry import DEFAULT_PROMPTS


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    cfg = load_root_config(str(tmp_path / "absent.yaml"))

    assert cfg.app.title == "PromptLab"
    assert cfg.app.concurrency_limit == 1
    assert cfg.api.base_url == DEFAULT_BASE_URL
    assert [p.id for p in cfg.prompts] == [p.id for p in DEFAULT_PROMPTS]


def test_load_config_reads_sections(tmp_path: Path) -> None:
    path = tmp_path / "promptlab.yaml"
    path.write_text(
        "app:\n"
        "  title: Lab\n"
        "  port: 9000\n"
        "  log_level: debug\n"
        "api:\n"
        "  base_url: http://localhost:8000/v1\n"
        "  request_timeout_s: 30\n"
        "prompts:\n"
        "  - id: Basic Prompt\n"
        "    template: 'Respond to the following query: {input}'\n"
        "    samples:\n"
        "      - What is the capital of France?\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.app.title == "Lab"
    assert cfg.app.port == 9000
    assert cfg.app.host == "127.0.0.1"
    assert cfg.app.log_level == "DEBUG"
    assert cfg.api.base_url == "http://localhost:8000/v1"
    assert cfg.api.request_timeout_s == 30.0
    assert len(cfg.prompts) == 1
    assert cfg.prompts[0].samples == ("What is the capital of France?",)


def test_empty_file_keeps_builtin_prompts(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg.prompts == list(DEFAULT_PROMPTS)


def test_invalid_prompt_entry_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("prompts:\n  - samples: [a]\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(path))


def test_cli_overrides(tmp_path: Path) -> None:
    args = parse_args(
        [
            "--config",
            str(tmp_path / "absent.yaml"),
            "--port",
            "8080",
            "--api-base-url",
            "http://localhost:1234/v1",
            "--log-level",
            "warning",
        ]
    )

    cfg = apply_overrides(load_root_config(args.config), args)

    assert cfg.app.port == 8080
    assert cfg.api.base_url == "http://localhost:1234/v1"
    assert cfg.app.log_level == "WARNING"
    assert cfg.app.host == "127.0.0.1"
