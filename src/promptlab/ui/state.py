"""UI session state."""
from __future__ import annotations

from dataclasses import dataclass, field

from ..clients.base import ModelDescriptor
from ..history import HistoryLog
from ..registry import PromptDefinition


@dataclass
class SessionState:
    selected_prompt_id: str
    current_template: str
    credential: str = field(default="", repr=False)
    selected_model_id: str = ""
    current_input: str = ""
    last_output: str = ""
    pending_feedback: str = ""
    models: list[ModelDescriptor] = field(default_factory=list)
    history: HistoryLog = field(default_factory=HistoryLog)
    in_flight: bool = False

    @classmethod
    def for_prompt(cls, definition: PromptDefinition) -> "SessionState":
        return cls(selected_prompt_id=definition.id, current_template=definition.template)

    def model_choices(self) -> list[tuple[str, str]]:
        return [(model.display_name, model.id) for model in self.models]
