"""Error types raised by the prompt lab core."""
from __future__ import annotations


class PromptLabError(Exception):
    """Base class for every failure surfaced by the core."""


class TransportError(PromptLabError):
    """Network failure, timeout, non-2xx status or unreadable response body."""


class AuthError(PromptLabError):
    """The API rejected the credential, or none was supplied."""


class ModelError(PromptLabError):
    """The model id is unset or unknown to the API."""


class ValidationError(PromptLabError):
    pass


class RequestInFlightError(PromptLabError):
    pass


class PromptNotFoundError(PromptLabError, KeyError):
    def __str__(self) -> str:
        return self.args[0] if self.args else "Prompt not found"
