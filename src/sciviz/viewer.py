"""What the browser viewer needs to render a VisualizationResult."""

from __future__ import annotations

from dataclasses import dataclass

from sciviz.models import VisualizationResult

# Scripts and same-origin access for the generated document; no top-level navigation.
SANDBOX_POLICY = "allow-scripts allow-same-origin allow-forms allow-popups"

EXPORT_FAILED_MESSAGE = "Failed to export code. Please try again."


@dataclass(frozen=True)
class ViewerTab:
    key: str
    title: str


PREVIEW_TAB = ViewerTab("preview", "PREVIEW")
SOURCE_TAB = ViewerTab("code", "SOURCE")
HARDWARE_TAB = ViewerTab("bom", "HARDWARE")


def tabs_for(result: VisualizationResult) -> list[ViewerTab]:
    """Selectable tabs for a result. The hardware tab appears only with a BOM."""
    tabs = [PREVIEW_TAB, SOURCE_TAB]
    if result.has_bom:
        tabs.append(HARDWARE_TAB)
    return tabs
