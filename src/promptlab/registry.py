"""Prompt template registry."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .composer import INPUT_MARKER
from .errors import PromptNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptDefinition:
    id: str
    template: str
    samples: tuple[str, ...] = field(default_factory=tuple)


DEFAULT_PROMPTS: tuple[PromptDefinition, ...] = (
    PromptDefinition(
        id="Basic Prompt",
        template="Respond to the following query: {input}",
        samples=(
            "What is the capital of France?",
            "Explain photosynthesis in one paragraph.",
        ),
    ),
    PromptDefinition(
        id="should_discard_memory",
        template=(
            "You will be given a conversation transcript, and your task is to determine if the "
            "conversation is worth storing as a memory or not.\n"
            "It is not worth storing if there are no interesting topics, facts, or information, "
            "in that case, output discard = True.\n"
            "\n"
            "Transcript: {input}"
        ),
        samples=(
            "A: Hey, how are you? B: I'm good, how about you? A: I'm good too.",
            "A: What's your favorite color? B: Blue. A: Mine is red.",
        ),
    ),
    PromptDefinition(
        id="retrieve_is_an_omi_question",
        template=(
            "Task: Analyze the question to identify if the user is inquiring about the "
            "functionalities or usage of the app, Omi or Friend. Focus on detecting questions "
            "related to the app's operations or capabilities.\n"
            "\n"
            "Examples of User Questions:\n"
            "\n"
            '- "How does it work?"\n'
            '- "What can you do?"\n'
            '- "How can I buy it?"\n'
            '- "Where do I get it?"\n'
            '- "How does the chat function?"\n'
            "\n"
            "Instructions:\n"
            "\n"
            "1. Review the question carefully.\n"
            "2. Determine if the user is asking about:\n"
            " - The operational aspects of the app.\n"
            " - How to utilize the app effectively.\n"
            " - Any specific features or purchasing options.\n"
            "\n"
            "Output: Clearly state if the user is asking a question related to the app's "
            "functionality or usage. If yes, specify the nature of the inquiry.\n"
            "\n"
            "User's Question: {input}"
        ),
        samples=(
            "What is the capital of France?",
            "What is the meaning of life?",
        ),
    ),
)


class PromptRegistry:
    def __init__(self, definitions: Iterable[PromptDefinition]):
        self._prompts: dict[str, PromptDefinition] = {}
        for definition in definitions:
            if definition.id in self._prompts:
                raise ValueError(f"Duplicate prompt id: {definition.id}")
            markers = definition.template.count(INPUT_MARKER)
            if markers != 1:
                logger.warning(
                    "Prompt %r has %d %s markers; composition will not inject input as expected",
                    definition.id,
                    markers,
                    INPUT_MARKER,
                )
            self._prompts[definition.id] = definition

    def list(self) -> list[PromptDefinition]:
        return list(self._prompts.values())

    def list_ids(self) -> list[str]:
        return list(self._prompts)

    def get(self, prompt_id: str) -> PromptDefinition:
        try:
            return self._prompts[prompt_id]
        except KeyError:
            raise PromptNotFoundError(f"Prompt not found: {prompt_id}") from None

    def sample_choices(self, prompt_id: str) -> list[tuple[str, str]]:
        samples = self.get(prompt_id).samples
        return [(f"Sample {index}", sample) for index, sample in enumerate(samples, start=1)]

    def __len__(self) -> int:
        return len(self._prompts)


def default_registry() -> PromptRegistry:
    return PromptRegistry(DEFAULT_PROMPTS)
