"""Interaction controller wiring session state to the composer and client."""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from .clients.base import CompletionClient, ModelDescriptor
from .composer import compose_improvement_request, compose_request
from .errors import PromptLabError, RequestInFlightError, ValidationError
from .history import HistoryAction, HistoryEntry
from .registry import PromptRegistry
from .ui.state import SessionState

logger = logging.getLogger(__name__)

RUN_FAILED_MESSAGE = "Error running simulation"
IMPROVE_FAILED_MESSAGE = "Error improving prompt"
MISSING_FEEDBACK_MESSAGE = "Please provide feedback first"
BUSY_MESSAGE = "A request is already running"


def _log_notification(message: str) -> None:
    logger.info("Notification: %s", message)


class PromptLabController:
    """Apply user actions to a ``SessionState``.

    Only one network request may be in flight per controller. A second
    action triggered while one is pending is rejected instead of racing the
    first for the output and history.
    """

    def __init__(
        self,
        registry: PromptRegistry,
        client: CompletionClient,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self.registry = registry
        self.client = client
        self._notify = notify or _log_notification
        self._lock = threading.Lock()

    def new_session(self) -> SessionState:
        ids = self.registry.list_ids()
        if not ids:
            raise ValueError("Prompt registry is empty")
        return SessionState.for_prompt(self.registry.get(ids[0]))

    def load_models(self, state: SessionState) -> list[ModelDescriptor]:
        try:
            state.models = self.client.list_models(state.credential or None)
        except PromptLabError as exc:
            logger.warning("Could not load models, continuing without: %s", exc)
            state.models = []
        return state.models

    def select_prompt(self, state: SessionState, prompt_id: str) -> None:
        definition = self.registry.get(prompt_id)
        state.selected_prompt_id = definition.id
        state.current_template = definition.template
        state.current_input = ""

    def set_prompt_id(self, state: SessionState, prompt_id: str | None) -> None:
        """Record which prompt is selected without touching the edited template."""
        if prompt_id:
            state.selected_prompt_id = self.registry.get(prompt_id).id

    def select_sample(self, state: SessionState, sample: str | None) -> None:
        state.current_input = sample or ""

    def set_input(self, state: SessionState, text: str | None) -> None:
        state.current_input = text or ""

    def set_template(self, state: SessionState, template: str | None) -> None:
        state.current_template = template or ""

    def set_model(self, state: SessionState, model_id: str | None) -> None:
        state.selected_model_id = model_id or ""

    def set_credential(self, state: SessionState, credential: str | None) -> None:
        state.credential = (credential or "").strip()

    def set_feedback(self, state: SessionState, feedback: str | None) -> None:
        state.pending_feedback = feedback or ""

    @contextmanager
    def _single_flight(self, state: SessionState) -> Iterator[None]:
        with self._lock:
            if state.in_flight:
                raise RequestInFlightError(BUSY_MESSAGE)
            state.in_flight = True
        try:
            yield
        finally:
            with self._lock:
                state.in_flight = False

    def run_simulation(self, state: SessionState) -> HistoryEntry | None:
        prompt = compose_request(state.current_template, state.current_input)
        model_id = state.selected_model_id
        try:
            with self._single_flight(state):
                output = self.client.run_completion(model_id, prompt, state.credential)
        except RequestInFlightError:
            self._notify(BUSY_MESSAGE)
            return None
        except PromptLabError as exc:
            logger.warning("Simulation failed (%s): %s", type(exc).__name__, exc)
            self._notify(RUN_FAILED_MESSAGE)
            return None

        state.last_output = output
        return state.history.record(
            HistoryAction.SIMULATION_RUN,
            f"Model: {model_id}, Prompt: {state.selected_prompt_id}",
        )

    def improve_prompt(self, state: SessionState) -> HistoryEntry | None:
        try:
            self._require_feedback(state)
        except ValidationError:
            self._notify(MISSING_FEEDBACK_MESSAGE)
            return None

        request = compose_improvement_request(
            state.current_template,
            state.pending_feedback,
            state.current_input,
            state.last_output,
        )
        try:
            with self._single_flight(state):
                new_template = self.client.run_completion(state.selected_model_id, request, state.credential)
        except RequestInFlightError:
            self._notify(BUSY_MESSAGE)
            return None
        except PromptLabError as exc:
            logger.warning("Prompt improvement failed (%s): %s", type(exc).__name__, exc)
            self._notify(IMPROVE_FAILED_MESSAGE)
            return None

        state.current_template = new_template
        state.pending_feedback = ""
        return state.history.record(HistoryAction.PROMPT_IMPROVED, f"New prompt: {new_template}")

    @staticmethod
    def _require_feedback(state: SessionState) -> None:
        if not state.pending_feedback.strip():
            raise ValidationError("Feedback is empty")
