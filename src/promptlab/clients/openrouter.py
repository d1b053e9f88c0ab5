"""
OpenRouter completion client.

Talks to the OpenAI-compatible model listing and chat completion endpoints.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from .base import ModelDescriptor
from ..composer import build_messages
from ..errors import AuthError, ModelError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT_S = 120.0

_AUTH_STATUSES = {401, 403}
_MODEL_STATUSES = {400, 404}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return response.text[:200]


def _extract_content(body: Any) -> str:
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise TransportError(f"Malformed completion response: {exc!r}") from exc
    if content is None:
        raise TransportError("Completion response has no content")
    return str(content)


class OpenRouterClient:
    """Run chat completions against OpenRouter (or any compatible server)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = DEFAULT_TIMEOUT_S,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, e.g. https://openrouter.ai/api/v1
            timeout: Request timeout in seconds, ignored when ``http_client`` is given
            http_client: Preconfigured httpx client (tests pass a mock transport)
        """
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def list_models(self, credential: str | None = None) -> list[ModelDescriptor]:
        if credential and not credential.isascii():
            raise AuthError("API key contains non-ASCII characters")
        headers = {"Authorization": f"Bearer {credential}"} if credential else {}
        try:
            response = self._client.get(f"{self._base_url}/models", headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"Model listing failed: {exc!r}") from exc
        if response.status_code != 200:
            raise TransportError(
                f"Model listing returned HTTP {response.status_code}: {_error_message(response)}"
            )
        try:
            items = response.json().get("data", [])
        except (ValueError, AttributeError) as exc:
            raise TransportError(f"Malformed model listing: {exc!r}") from exc

        models: list[ModelDescriptor] = []
        for item in items if isinstance(items, list) else []:
            if not isinstance(item, dict) or not item.get("id"):
                continue
            models.append(ModelDescriptor(id=str(item["id"]), display_name=str(item.get("name") or item["id"])))
        logger.info("Loaded %d models", len(models))
        return models

    def run_completion(self, model_id: str, prompt: str, credential: str) -> str:
        if not credential:
            raise AuthError("No API key provided")
        if not credential.isascii():
            raise AuthError("API key contains non-ASCII characters")
        if not model_id:
            raise ModelError("No model selected")

        payload = {"model": model_id, "messages": build_messages(prompt)}
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }
        try:
            response = self._client.post(
                f"{self._base_url}/chat/completions",
                json=payload,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Completion request failed: {exc!r}") from exc

        status = response.status_code
        if status in _AUTH_STATUSES:
            raise AuthError(f"HTTP {status}: {_error_message(response)}")
        if status in _MODEL_STATUSES:
            raise ModelError(f"HTTP {status} for model {model_id}: {_error_message(response)}")
        if not 200 <= status < 300:
            raise TransportError(f"HTTP {status}: {_error_message(response)}")

        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(f"Completion response is not JSON: {exc!r}") from exc
        return _extract_content(body)
