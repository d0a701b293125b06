"""Compose the ordered content parts for a generation call."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from google.genai import types

from sciviz.errors import EmptySubmission
from sciviz.generation.attachments import decode_attachment
from sciviz.generation.prompts import VALIDATION_DIRECTIVE
from sciviz.models import Attachment, Complexity, Mode


@dataclass(frozen=True)
class GenerationRequest:
    """One call's payload: attachments first, then exactly one text part."""

    attachments: tuple[Attachment, ...]
    text: str

    def to_parts(self) -> list[types.Part]:
        parts = [
            types.Part.from_bytes(data=decode_attachment(a), mime_type=a.media_type)
            for a in self.attachments
        ]
        parts.append(types.Part(text=self.text))
        return parts


def build_instruction_text(prompt: str, complexity: Complexity, mode: Mode = Mode.NORMAL) -> str:
    """Build the enriched instruction: complexity line, optional validation directive, user text."""
    text = f"Target Audience/Complexity Level: {complexity.value}.\n\n"
    if mode.is_validation:
        text += VALIDATION_DIRECTIVE + "\n\n"
    text += f"User Request: {prompt}"
    return text


def is_submittable(prompt: str, attachments: Sequence[Attachment]) -> bool:
    return bool(prompt.strip()) or len(attachments) > 0


def ensure_submittable(prompt: str, attachments: Sequence[Attachment]) -> None:
    """Raise EmptySubmission when there is neither text nor an attachment."""
    if not is_submittable(prompt, attachments):
        raise EmptySubmission("Enter a concept description or attach at least one image")


def compose_request(
    prompt: str,
    attachments: Sequence[Attachment] = (),
    complexity: Complexity = Complexity.INTERMEDIATE,
    mode: Mode = Mode.NORMAL,
) -> GenerationRequest:
    """Compose a GenerationRequest. Attachments keep their stored order."""
    return GenerationRequest(
        attachments=tuple(attachments),
        text=build_instruction_text(prompt, complexity, mode),
    )
