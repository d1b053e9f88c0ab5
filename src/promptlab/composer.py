"""Prompt builders."""
from __future__ import annotations


INPUT_MARKER = "{input}"

IMPROVEMENT_DIRECTIVE = (
    "Please improve the prompt based on the feedback. "
    "Respond with ONLY the new improved prompt, no other text."
)


def compose_request(template: str, user_input: str) -> str:
    """Fill the first ``{input}`` marker of ``template`` with ``user_input``.

    Only the first marker is replaced and the input is inserted verbatim, so a
    marker appearing inside the input is left alone. A template without a
    marker is returned unchanged and the input is dropped.
    """
    return template.replace(INPUT_MARKER, user_input, 1)


def compose_improvement_request(template: str, feedback: str, user_input: str, output: str) -> str:
    """Build the meta-prompt asking the model to rewrite ``template``."""
    lines = [
        f"Current prompt: {template}",
        f"User Feedback: {feedback}",
        f"Previous Input: {user_input}",
        f"Previous Output: {output}",
        "",
        IMPROVEMENT_DIRECTIVE,
    ]
    return "\n".join(lines)


def build_messages(prompt: str) -> list[dict[str, str]]:
    return [{"role": "user", "content": prompt}]
