"""Core data types: results, attachments, and the enumerated request options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

VALIDATION_ALERT_MARKER = "VALIDATION ALERT"


class Complexity(str, Enum):
    """Audience tier that steers the sophistication of the generated output."""

    ELEMENTARY = "Elementary"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

    @property
    def label(self) -> str:
        return _COMPLEXITY_LABELS[self]


_COMPLEXITY_LABELS = {
    Complexity.ELEMENTARY: "LVL_1: Elementary (K-12)",
    Complexity.INTERMEDIATE: "LVL_2: Intermediate (Undergrad)",
    Complexity.ADVANCED: "LVL_3: Advanced (Research)",
}

DEFAULT_COMPLEXITY = Complexity.INTERMEDIATE


@dataclass(frozen=True)
class ModeText:
    """User-facing strings that differ between operating modes."""

    status_heading: str
    loading_label: str
    submit_label: str
    placeholder: str


class Mode(str, Enum):
    """Operating mode: plain synthesis, or cross-checking an image against a procedure."""

    NORMAL = "normal"
    VALIDATION = "validation"

    @property
    def text(self) -> ModeText:
        return _MODE_TEXT[self]

    @property
    def is_validation(self) -> bool:
        return self is Mode.VALIDATION


_MODE_TEXT = {
    Mode.NORMAL: ModeText(
        status_heading="System: Capabilities_Online",
        loading_label="SYNTHESIZING_MODEL",
        submit_label="INITIALIZE",
        placeholder=(
            "// ENTER SCIENTIFIC CONCEPT...\n"
            "> e.g. 'Visualize the double-slit experiment'\n"
            "> or 'Simulate a Solar Sail'"
        ),
    ),
    Mode.VALIDATION: ModeText(
        status_heading="System: Validation_Mode_Active",
        loading_label="ANALYZING_SETUP",
        submit_label="RUN_VALIDATION",
        placeholder=(
            "// ENTER EXPERIMENT PROCEDURE...\n"
            "// UPLOAD SETUP IMAGE FOR VALIDATION..."
        ),
    ),
}


class ExportFormat(str, Enum):
    """Target formats for the code export round trip. The value is sent to the model."""

    MATPLOTLIB = "Python (Matplotlib)"
    JUPYTER = "Jupyter Notebook (.ipynb JSON)"
    TIKZ = "LaTeX (TikZ)"


DEFAULT_EXPORT_FORMAT = ExportFormat.MATPLOTLIB


@dataclass(frozen=True)
class VisualizationResult:
    """Structured outcome of one generation call."""

    summary: str
    code: str
    hardware_bom: str = ""

    @property
    def has_code(self) -> bool:
        return bool(self.code)

    @property
    def has_bom(self) -> bool:
        return bool(self.hardware_bom)

    @property
    def has_validation_alert(self) -> bool:
        return VALIDATION_ALERT_MARKER in self.summary


@dataclass(frozen=True)
class Attachment:
    """One user-supplied image, encoded for transport.

    ``encoded_data`` is base64 without the ``data:...;base64,`` prefix;
    ``preview_ref`` is the full data URL, for display only.
    """

    encoded_data: str
    media_type: str
    preview_ref: str
    filename: str = ""

    @property
    def size(self) -> int:
        """Decoded size in bytes."""
        padding = self.encoded_data.count("=", -2)
        return len(self.encoded_data) * 3 // 4 - padding


@dataclass(frozen=True)
class HistoryItem:
    """Shape of a past generation. Declared for clients; nothing persists these."""

    id: str
    prompt: str
    timestamp: float
    result: VisualizationResult
