"""Completion client protocol and dataclasses."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ModelDescriptor:
    id: str
    display_name: str


class CompletionClient(Protocol):
    def list_models(self, credential: str | None = None) -> list[ModelDescriptor]:
        ...

    def run_completion(self, model_id: str, prompt: str, credential: str) -> str:
        ...
