"""Tests for the Gemini client: request shape, parameters, failures, fence stripping."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from google.genai import types

from sciviz.errors import EmptyResponse, MissingCredential, UpstreamError
from sciviz.generation.client import GeminiVisualizer, strip_code_fences
from sciviz.generation.composer import compose_request
from sciviz.generation.prompts import SYSTEM_INSTRUCTION
from sciviz.models import Complexity, ExportFormat, Mode
from tests.helpers import SAMPLE_REPLY, _make_text_response


class TestGenerateVisualization:
    def test_returns_raw_text(self, visualizer):
        visualizer._client.models.generate_content.return_value = _make_text_response(SAMPLE_REPLY)
        text = visualizer.generate_visualization(compose_request("pendulum"))
        assert text == SAMPLE_REPLY

    def test_request_shape(self, visualizer, png_attachment):
        visualizer._client.models.generate_content.return_value = _make_text_response("ok")
        request = compose_request("foo", [png_attachment], Complexity.ADVANCED, Mode.NORMAL)
        visualizer.generate_visualization(request)

        kwargs = visualizer._client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == visualizer.model
        contents = kwargs["contents"]
        assert contents.role == "user"
        assert len(contents.parts) == 2
        assert contents.parts[0].inline_data.mime_type == "image/png"
        assert contents.parts[1].text == request.text

    def test_generation_parameters(self, visualizer):
        visualizer._client.models.generate_content.return_value = _make_text_response("ok")
        visualizer.generate_visualization(compose_request("x"))

        gen_config = visualizer._client.models.generate_content.call_args.kwargs["config"]
        assert isinstance(gen_config, types.GenerateContentConfig)
        assert gen_config.system_instruction == SYSTEM_INSTRUCTION
        assert gen_config.temperature == pytest.approx(0.4)
        assert gen_config.max_output_tokens == 8192
        assert gen_config.thinking_config.thinking_budget == 1024

    def test_parameter_overrides(self):
        viz = GeminiVisualizer(api_key="fake", model="gemini-x", temperature=0.0, thinking_budget=0)
        viz._client = MagicMock()
        viz._client.models.generate_content.return_value = _make_text_response("ok")
        viz.generate_visualization(compose_request("x"))
        kwargs = viz._client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-x"
        assert kwargs["config"].temperature == 0.0
        assert kwargs["config"].thinking_config.thinking_budget == 0

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_reply_raises(self, visualizer, text):
        visualizer._client.models.generate_content.return_value = _make_text_response(text)
        with pytest.raises(EmptyResponse):
            visualizer.generate_visualization(compose_request("x"))

    def test_upstream_error_keeps_message(self, visualizer):
        cause = RuntimeError("429 RESOURCE_EXHAUSTED: quota exceeded")
        visualizer._client.models.generate_content.side_effect = cause
        with pytest.raises(UpstreamError) as exc_info:
            visualizer.generate_visualization(compose_request("x"))
        assert str(exc_info.value) == "429 RESOURCE_EXHAUSTED: quota exceeded"
        assert exc_info.value.__cause__ is cause

    def test_no_retry(self, visualizer):
        visualizer._client.models.generate_content.side_effect = RuntimeError("boom")
        with pytest.raises(UpstreamError):
            visualizer.generate_visualization(compose_request("x"))
        assert visualizer._client.models.generate_content.call_count == 1


class TestMissingCredential:
    def _without_key(self):
        with patch("sciviz.generation.client.config") as mock_config:
            mock_config.GEMINI_API_KEY = ""
            return GeminiVisualizer()

    def test_generate_raises_before_client_created(self):
        viz = self._without_key()
        with patch("sciviz.generation.client.genai.Client") as mock_client_cls:
            with pytest.raises(MissingCredential):
                viz.generate_visualization(compose_request("x"))
        mock_client_cls.assert_not_called()

    def test_transform_raises_before_client_created(self):
        viz = self._without_key()
        with patch("sciviz.generation.client.genai.Client") as mock_client_cls:
            with pytest.raises(MissingCredential):
                viz.transform_code("<html></html>", ExportFormat.TIKZ)
        mock_client_cls.assert_not_called()

    def test_no_call_even_with_existing_client(self):
        viz = self._without_key()
        viz._client = MagicMock()
        with pytest.raises(MissingCredential):
            viz.generate_visualization(compose_request("x"))
        viz._client.models.generate_content.assert_not_called()

    def test_client_created_lazily_with_key(self):
        viz = GeminiVisualizer(api_key="secret")
        with patch("sciviz.generation.client.genai.Client") as mock_client_cls:
            mock_client_cls.return_value.models.generate_content.return_value = _make_text_response("ok")
            viz.generate_visualization(compose_request("x"))
            viz.generate_visualization(compose_request("y"))
        mock_client_cls.assert_called_once_with(api_key="secret")


class TestTransformCode:
    def test_prompt_contains_format_and_source(self, visualizer):
        visualizer._client.models.generate_content.return_value = _make_text_response("import numpy")
        visualizer.transform_code("<canvas id='c'></canvas>", ExportFormat.MATPLOTLIB)

        kwargs = visualizer._client.models.generate_content.call_args.kwargs
        prompt = kwargs["contents"]
        assert isinstance(prompt, str)
        assert "into a Python (Matplotlib) script" in prompt
        assert "<canvas id='c'></canvas>" in prompt
        assert "Keep the scientific formulas and logic intact" in prompt
        assert kwargs["config"] is None

    def test_accepts_plain_label(self, visualizer):
        visualizer._client.models.generate_content.return_value = _make_text_response("x")
        visualizer.transform_code("src", "LaTeX (TikZ)")
        prompt = visualizer._client.models.generate_content.call_args.kwargs["contents"]
        assert "into a LaTeX (TikZ) script" in prompt

    def test_strips_fences(self, visualizer):
        reply = "```python\nimport matplotlib.pyplot as plt\nplt.show()\n```"
        visualizer._client.models.generate_content.return_value = _make_text_response(reply)
        assert visualizer.transform_code("src", ExportFormat.MATPLOTLIB) == (
            "import matplotlib.pyplot as plt\nplt.show()"
        )

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_reply_is_empty_string(self, visualizer, text):
        visualizer._client.models.generate_content.return_value = _make_text_response(text)
        assert visualizer.transform_code("src", ExportFormat.JUPYTER) == ""

    def test_upstream_error(self, visualizer):
        visualizer._client.models.generate_content.side_effect = ConnectionError("reset by peer")
        with pytest.raises(UpstreamError, match="reset by peer"):
            visualizer.transform_code("src", ExportFormat.JUPYTER)


class TestStripCodeFences:
    def test_no_fences_unchanged(self):
        text = "  \\begin{tikzpicture}\n\\end{tikzpicture}\n"
        assert strip_code_fences(text) == text

    def test_leading_and_trailing(self):
        assert strip_code_fences('```json\n{"cells": []}\n```') == '{"cells": []}'

    def test_untagged_fence(self):
        assert strip_code_fences("```\nx = 1\n```\n") == "x = 1"

    def test_tag_with_punctuation(self):
        assert strip_code_fences("```latex+tikz\n\\draw;\n```") == "\\draw;"

    def test_interior_fences_untouched(self):
        inner = 'print("```")\n# ```python\ny = 2'
        assert strip_code_fences(f"```python\n{inner}\n```") == inner

    def test_only_trailing_fence(self):
        assert strip_code_fences("x = 1\n```") == "x = 1"
