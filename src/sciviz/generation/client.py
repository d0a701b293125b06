"""Gemini client for visualization generation and code export."""

from __future__ import annotations

import logging
import re
import time

from google import genai
from google.genai import types

from sciviz import config
from sciviz.errors import EmptyResponse, MissingCredential, UpstreamError
from sciviz.generation.composer import GenerationRequest
from sciviz.generation.prompts import SYSTEM_INSTRUCTION, TRANSFORM_PROMPT_TEMPLATE
from sciviz.models import ExportFormat

logger = logging.getLogger(__name__)

_OPEN_FENCE_RE = re.compile(r"\A\s*```[^\n`]*\n")
_CLOSE_FENCE_RE = re.compile(r"\n?```\s*\Z")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```lang line and a trailing ``` from a reply.

    Text without fences is returned unchanged; interior content is never touched.
    """
    opened = _OPEN_FENCE_RE.match(text)
    if opened:
        text = text[opened.end():]
    closed = _CLOSE_FENCE_RE.search(text)
    if closed:
        text = text[:closed.start()]
    return text


class GeminiVisualizer:
    """Owns the contract with the hosted model: instruction, request shape, parameters."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        thinking_budget: int | None = None,
    ) -> None:
        self._api_key = api_key or config.GEMINI_API_KEY
        self._model = model or config.GEMINI_MODEL
        self._temperature = temperature if temperature is not None else config.GENERATION_TEMPERATURE
        self._max_output_tokens = max_output_tokens or config.MAX_OUTPUT_TOKENS
        self._thinking_budget = thinking_budget if thinking_budget is not None else config.THINKING_BUDGET
        # Created on first call, after the credential check
        self._client: genai.Client | None = None

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            raise MissingCredential(
                "API key is missing. Set GEMINI_API_KEY in the environment or .env file."
            )
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def _generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
            thinking_config=types.ThinkingConfig(thinking_budget=self._thinking_budget),
        )

    def _call(self, contents, gen_config: types.GenerateContentConfig | None = None) -> str:
        client = self._get_client()
        t0 = time.perf_counter()
        try:
            response = client.models.generate_content(
                model=self._model,
                contents=contents,
                config=gen_config,
            )
        except Exception as e:
            logger.error("Gemini call failed after %.0fms: %s", (time.perf_counter() - t0) * 1000, e)
            raise UpstreamError(str(e)) from e
        text = response.text or ""
        logger.debug("Generate complete: %d chars, %.0fms", len(text), (time.perf_counter() - t0) * 1000)
        return text

    def generate_visualization(self, request: GenerationRequest) -> str:
        """Send a composed request under the response contract.

        Returns:
            The raw reply text, for ``sciviz.parser.parse_response``.

        Raises:
            MissingCredential: No API key configured. Nothing is sent.
            UpstreamError: The SDK call failed.
            EmptyResponse: The call succeeded but produced no text.
        """
        self._get_client()
        logger.debug(
            "Generate visualization via %s (%d attachment(s), %d char instruction)",
            self._model, len(request.attachments), len(request.text),
        )
        contents = types.Content(role="user", parts=request.to_parts())
        text = self._call(contents, self._generation_config())
        if not text:
            raise EmptyResponse("No content generated.")
        return text

    def transform_code(self, source_code: str, target_format: ExportFormat | str) -> str:
        """Re-express visualization code in another format.

        Returns the reply with surrounding code fences removed, or "" when the
        model produced nothing.
        """
        self._get_client()
        label = target_format.value if isinstance(target_format, ExportFormat) else target_format
        logger.debug("Transform code via %s to %r (%d chars)", self._model, label, len(source_code))
        prompt = TRANSFORM_PROMPT_TEMPLATE.format(target_format=label, source_code=source_code)
        return strip_code_fences(self._call(prompt))
