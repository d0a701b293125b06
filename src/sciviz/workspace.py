"""Workspace state and the single-flight request lifecycle around it.

``WorkspaceState`` is an immutable snapshot; the module-level functions are
pure transitions that return a new snapshot. ``Workspace`` owns the current
snapshot, serialises transitions with a lock, and runs the remote calls
outside the lock.

Every generation and every reset advances ``epoch``. A call remembers the
epoch it started under and its completion is applied only if the epoch is
unchanged, so a response that arrives after a reset (or after a newer
submit) is discarded instead of overwriting the view.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field, replace

from sciviz.errors import (
    AttachmentIndexError,
    GenerationInProgress,
    NoResultToExport,
)
from sciviz.generation.attachments import encode_attachment
from sciviz.generation.client import GeminiVisualizer
from sciviz.generation.composer import compose_request, ensure_submittable
from sciviz.models import (
    DEFAULT_COMPLEXITY,
    DEFAULT_EXPORT_FORMAT,
    Attachment,
    Complexity,
    ExportFormat,
    Mode,
    VisualizationResult,
)
from sciviz.parser import parse_response
from sciviz.viewer import EXPORT_FAILED_MESSAGE

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred while generating the visualization."


@dataclass(frozen=True)
class ExportState:
    """Export panel state. Independent of the primary result's error state."""

    target_format: ExportFormat = DEFAULT_EXPORT_FORMAT
    code: str = ""
    error: str | None = None
    loading: bool = False
    completed: bool = False


@dataclass(frozen=True)
class WorkspaceState:
    prompt: str = ""
    attachments: tuple[Attachment, ...] = ()
    complexity: Complexity = DEFAULT_COMPLEXITY
    mode: Mode = Mode.NORMAL
    result: VisualizationResult | None = None
    error: str | None = None
    loading: bool = False
    epoch: int = 0
    export: ExportState = field(default_factory=ExportState)


# ── Pure transitions ──


def add_attachment(state: WorkspaceState, attachment: Attachment) -> WorkspaceState:
    return replace(state, attachments=state.attachments + (attachment,))


def remove_attachment(state: WorkspaceState, index: int) -> WorkspaceState:
    if not 0 <= index < len(state.attachments):
        raise AttachmentIndexError(f"No attachment at index {index}")
    return replace(state, attachments=state.attachments[:index] + state.attachments[index + 1:])


def reset(state: WorkspaceState) -> WorkspaceState:
    """Clear everything back to defaults and invalidate in-flight calls."""
    return WorkspaceState(epoch=state.epoch + 1)


def begin_generation(
    state: WorkspaceState,
    prompt: str,
    complexity: Complexity,
    mode: Mode,
) -> WorkspaceState:
    """Start a generation: drop the old result and error, take a new epoch.

    Raises:
        GenerationInProgress: A generation is already outstanding.
        EmptySubmission: Blank prompt and no attachments.
    """
    if state.loading:
        raise GenerationInProgress("A visualization is already being generated")
    ensure_submittable(prompt, state.attachments)
    return replace(
        state,
        prompt=prompt,
        complexity=complexity,
        mode=mode,
        result=None,
        error=None,
        loading=True,
        epoch=state.epoch + 1,
        export=ExportState(target_format=state.export.target_format),
    )


def complete_generation(
    state: WorkspaceState, epoch: int, result: VisualizationResult,
) -> tuple[WorkspaceState, bool]:
    """Apply a result if ``epoch`` is still current. Returns (state, applied)."""
    if epoch != state.epoch:
        return state, False
    return replace(state, result=result, error=None, loading=False), True


def fail_generation(
    state: WorkspaceState, epoch: int, message: str,
) -> tuple[WorkspaceState, bool]:
    """Record a failure if ``epoch`` is still current. Returns (state, applied)."""
    if epoch != state.epoch:
        return state, False
    return replace(state, result=None, error=message or DEFAULT_ERROR_MESSAGE, loading=False), True


def begin_export(state: WorkspaceState, target_format: ExportFormat) -> WorkspaceState:
    """Start an export of the displayed code.

    Raises:
        NoResultToExport: No result, or the result has no code.
        GenerationInProgress: An export is already outstanding.
    """
    if state.result is None or not state.result.has_code:
        raise NoResultToExport("There is no visualization code to export")
    if state.export.loading:
        raise GenerationInProgress("An export is already running")
    return replace(state, export=ExportState(target_format=target_format, loading=True))


def complete_export(
    state: WorkspaceState, epoch: int, code: str,
) -> tuple[WorkspaceState, bool]:
    if epoch != state.epoch or not state.export.loading:
        return state, False
    export = replace(state.export, code=code, error=None, loading=False, completed=True)
    return replace(state, export=export), True


def fail_export(
    state: WorkspaceState, epoch: int, message: str,
) -> tuple[WorkspaceState, bool]:
    """Record an export failure. The primary result is left untouched."""
    if epoch != state.epoch or not state.export.loading:
        return state, False
    export = replace(state.export, code="", error=message, loading=False, completed=True)
    return replace(state, export=export), True


# ── Controller ──


@dataclass(frozen=True)
class CallOutcome:
    """Snapshot after a call finished. ``discarded`` means the epoch moved on."""

    state: WorkspaceState
    discarded: bool = False


class Workspace:
    """Owns the current WorkspaceState and runs the remote calls."""

    def __init__(self, visualizer: GeminiVisualizer | None = None) -> None:
        self._visualizer = visualizer
        self._state = WorkspaceState()
        self._lock = threading.Lock()

    @property
    def visualizer(self) -> GeminiVisualizer:
        if self._visualizer is None:
            self._visualizer = GeminiVisualizer()
        return self._visualizer

    @property
    def state(self) -> WorkspaceState:
        with self._lock:
            return self._state

    def add_attachment(self, raw: bytes, declared_type: str | None = None, filename: str = "") -> Attachment:
        attachment = encode_attachment(raw, declared_type, filename)
        with self._lock:
            self._state = add_attachment(self._state, attachment)
            count = len(self._state.attachments)
        logger.info("Attachment added: %s (%d total)", attachment.media_type, count)
        return attachment

    def remove_attachment(self, index: int) -> None:
        with self._lock:
            self._state = remove_attachment(self._state, index)

    def reset(self) -> WorkspaceState:
        with self._lock:
            was_loading = self._state.loading
            self._state = reset(self._state)
            state = self._state
        if was_loading:
            logger.info("Workspace reset with a generation in flight (epoch now %d)", state.epoch)
        return state

    def generate(
        self,
        prompt: str,
        complexity: Complexity = DEFAULT_COMPLEXITY,
        mode: Mode = Mode.NORMAL,
    ) -> CallOutcome:
        """Run one generation.

        Raises whatever the client raised when the failure is still current;
        the failure message is also recorded as the workspace error.
        """
        with self._lock:
            self._state = begin_generation(self._state, prompt, complexity, mode)
            epoch = self._state.epoch
            attachments = self._state.attachments

        request = compose_request(prompt, attachments, complexity, mode)
        t0 = time.perf_counter()
        try:
            raw = self.visualizer.generate_visualization(request)
        except Exception as e:
            with self._lock:
                self._state, applied = fail_generation(self._state, epoch, str(e))
                state = self._state
            if applied:
                raise
            logger.info("Discarding stale failure from epoch %d: %s", epoch, e)
            return CallOutcome(state, discarded=True)

        result = parse_response(raw)
        with self._lock:
            self._state, applied = complete_generation(self._state, epoch, result)
            state = self._state
        if not applied:
            logger.info("Discarding stale result from epoch %d (now %d)", epoch, state.epoch)
            return CallOutcome(state, discarded=True)
        logger.info(
            "Generation complete: %d char summary, %d char code, BOM=%s, %.2fs",
            len(result.summary), len(result.code), result.has_bom, time.perf_counter() - t0,
        )
        return CallOutcome(state)

    def export(self, target_format: ExportFormat = DEFAULT_EXPORT_FORMAT) -> CallOutcome:
        """Transform the displayed code. Failures stay in the export panel."""
        with self._lock:
            self._state = begin_export(self._state, target_format)
            epoch = self._state.epoch
            source_code = self._state.result.code

        try:
            code = self.visualizer.transform_code(source_code, target_format)
        except Exception as e:
            logger.warning("Export to %r failed: %s", target_format.value, e)
            with self._lock:
                self._state, applied = fail_export(self._state, epoch, EXPORT_FAILED_MESSAGE)
                return CallOutcome(self._state, discarded=not applied)

        with self._lock:
            self._state, applied = complete_export(self._state, epoch, code)
            return CallOutcome(self._state, discarded=not applied)
