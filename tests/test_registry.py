"""Unit tests for the prompt registry."""

from __future__ import annotations

import logging

import pytest

from promptlab.errors import PromptNotFoundError
from promptlab.registry import DEFAULT_PROMPTS, PromptDefinition, PromptRegistry, default_registry


def test_list_ids_keeps_registration_order() -> None:
    registry = PromptRegistry(
        [
            PromptDefinition(id="b", template="{input}"),
            PromptDefinition(id="a", template="{input}"),
        ]
    )

    assert registry.list_ids() == ["b", "a"]
    assert [p.id for p in registry.list()] == ["b", "a"]


def test_get_unknown_prompt_raises() -> None:
    registry = default_registry()

    with pytest.raises(PromptNotFoundError):
        registry.get("missing")
    with pytest.raises(KeyError):
        registry.get("missing")


def test_duplicate_ids_rejected() -> None:
    with pytest.raises(ValueError):
        PromptRegistry([PromptDefinition(id="x", template="{input}")] * 2)


def test_template_without_marker_is_accepted_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="promptlab.registry"):
        registry = PromptRegistry([PromptDefinition(id="plain", template="no marker")])

    assert registry.get("plain").template == "no marker"
    assert "plain" in caplog.text


def test_default_registry_contains_basic_prompt() -> None:
    registry = default_registry()

    basic = registry.get("Basic Prompt")
    assert basic.template == "Respond to the following query: {input}"
    assert basic.samples[0] == "What is the capital of France?"
    assert len(registry) == len(DEFAULT_PROMPTS)


def test_default_templates_have_one_marker() -> None:
    for definition in DEFAULT_PROMPTS:
        assert definition.template.count("{input}") == 1, definition.id


def test_sample_choices_are_numbered_from_one() -> None:
    registry = PromptRegistry([PromptDefinition(id="p", template="{input}", samples=("x", "y"))])

    assert registry.sample_choices("p") == [("Sample 1", "x"), ("Sample 2", "y")]
