"""Split a raw model reply into summary, runnable code, and hardware BOM.

The reply is expected to follow the three-section contract of
``sciviz.generation.prompts.SYSTEM_INSTRUCTION``:

    Section 1: Summary and Explanation   -> summary
    ```html ... ```                      -> code
    Section 3: Hardware Bill of Materials (BOM) -> hardware_bom

Parsing never raises. Replies that ignore the contract degrade to an empty
``code`` with the whole reply as ``summary``.
"""

from __future__ import annotations

import re

from sciviz.models import VisualizationResult

SUMMARY_SECTION_LABEL = "Section 1: Summary and Explanation"
BOM_SECTION_LABEL = "Section 3: Hardware Bill of Materials (BOM)"
DOCTYPE_MARKER = "<!DOCTYPE html>"

_HTML_BLOCK_RE = re.compile(r"```html\s*([\s\S]*?)\s*```", re.IGNORECASE)
_SUMMARY_LABEL_RE = re.compile(re.escape(SUMMARY_SECTION_LABEL), re.IGNORECASE)
_BOM_LABEL_RE = re.compile(re.escape(BOM_SECTION_LABEL), re.IGNORECASE)
_NOT_APPLICABLE_RE = re.compile(r"^N/A\.?$", re.IGNORECASE)


def _split_sections(text: str) -> tuple[str, str, str]:
    """Return (summary, code, bom) before label cleanup."""
    match = _HTML_BLOCK_RE.search(text)
    if match and match.group(1):
        # Later fenced blocks stay in the BOM tail.
        return text[:match.start()].strip(), match.group(1), text[match.end():].strip()

    start = text.find(DOCTYPE_MARKER)
    if start != -1:
        return text[:start].strip(), text[start:], ""

    return text.strip(), "", ""


def clean_summary(summary: str) -> str:
    """Drop one summary section label and trim."""
    return _SUMMARY_LABEL_RE.sub("", summary, count=1).strip()


def clean_bom(bom: str) -> str:
    """Drop one BOM section label, trim, and collapse a bare N/A to empty."""
    if not bom:
        return ""
    bom = _BOM_LABEL_RE.sub("", bom, count=1).strip()
    if _NOT_APPLICABLE_RE.match(bom):
        return ""
    return bom


def parse_response(text: str) -> VisualizationResult:
    """Parse a raw generate-visualization reply into a VisualizationResult."""
    summary, code, bom = _split_sections(text or "")
    return VisualizationResult(
        summary=clean_summary(summary),
        code=code,
        hardware_bom=clean_bom(bom),
    )
