"""API router: options, workspace snapshot, attachments, generate, export, reset."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel

from sciviz import config
from sciviz.errors import (
    AttachmentIndexError,
    EmptyResponse,
    EmptySubmission,
    GenerationInProgress,
    MissingCredential,
    NoResultToExport,
    SciVizError,
    UpstreamError,
)
from sciviz.models import (
    DEFAULT_COMPLEXITY,
    DEFAULT_EXPORT_FORMAT,
    Complexity,
    ExportFormat,
    Mode,
    VisualizationResult,
)
from sciviz.viewer import SANDBOX_POLICY, tabs_for
from sciviz.workspace import Workspace, WorkspaceState

logger = logging.getLogger(__name__)

router = APIRouter()
_workspace = Workspace()

_STATUS_CODES: list[tuple[type[SciVizError], int]] = [
    (EmptySubmission, 400),
    (AttachmentIndexError, 404),
    (GenerationInProgress, 409),
    (NoResultToExport, 409),
    (MissingCredential, 503),
    (UpstreamError, 502),
    (EmptyResponse, 502),
]


def _http_error(e: SciVizError) -> HTTPException:
    for cls, status in _STATUS_CODES:
        if isinstance(e, cls):
            return HTTPException(status_code=status, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


# ── Response models ──


class OptionResponse(BaseModel):
    value: str
    label: str


class ModeTextResponse(BaseModel):
    status_heading: str
    loading_label: str
    submit_label: str
    placeholder: str


class OptionsResponse(BaseModel):
    complexities: list[OptionResponse]
    export_formats: list[OptionResponse]
    modes: dict[str, ModeTextResponse]
    default_complexity: str
    default_export_format: str
    sandbox: str


class AttachmentResponse(BaseModel):
    index: int
    filename: str
    media_type: str
    size: int
    preview: str


class TabResponse(BaseModel):
    key: str
    title: str


class ResultResponse(BaseModel):
    summary: str
    code: str
    hardware_bom: str
    has_validation_alert: bool
    tabs: list[TabResponse]
    sandbox: str


class ExportResponse(BaseModel):
    target_format: str
    code: str
    error: str | None = None
    loading: bool = False
    nothing_produced: bool = False


class WorkspaceResponse(BaseModel):
    prompt: str
    complexity: str
    mode: str
    mode_text: ModeTextResponse
    attachments: list[AttachmentResponse]
    loading: bool
    error: str | None = None
    result: ResultResponse | None = None
    export: ExportResponse
    epoch: int
    discarded: bool = False


def _mode_text(mode: Mode) -> ModeTextResponse:
    t = mode.text
    return ModeTextResponse(
        status_heading=t.status_heading,
        loading_label=t.loading_label,
        submit_label=t.submit_label,
        placeholder=t.placeholder,
    )


def _result_response(result: VisualizationResult) -> ResultResponse:
    return ResultResponse(
        summary=result.summary,
        code=result.code,
        hardware_bom=result.hardware_bom,
        has_validation_alert=result.has_validation_alert,
        tabs=[TabResponse(key=t.key, title=t.title) for t in tabs_for(result)],
        sandbox=SANDBOX_POLICY,
    )


def _workspace_response(state: WorkspaceState, discarded: bool = False) -> WorkspaceResponse:
    export = state.export
    return WorkspaceResponse(
        prompt=state.prompt,
        complexity=state.complexity.value,
        mode=state.mode.value,
        mode_text=_mode_text(state.mode),
        attachments=[
            AttachmentResponse(
                index=i,
                filename=a.filename,
                media_type=a.media_type,
                size=a.size,
                preview=a.preview_ref,
            )
            for i, a in enumerate(state.attachments)
        ],
        loading=state.loading,
        error=state.error,
        result=_result_response(state.result) if state.result else None,
        export=ExportResponse(
            target_format=export.target_format.value,
            code=export.code,
            error=export.error,
            loading=export.loading,
            nothing_produced=export.completed and not export.code and not export.error,
        ),
        epoch=state.epoch,
        discarded=discarded,
    )


# ── Health & options ──


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/options", response_model=OptionsResponse)
def options():
    return OptionsResponse(
        complexities=[OptionResponse(value=c.value, label=c.label) for c in Complexity],
        export_formats=[OptionResponse(value=f.value, label=f.value) for f in ExportFormat],
        modes={m.value: _mode_text(m) for m in Mode},
        default_complexity=DEFAULT_COMPLEXITY.value,
        default_export_format=DEFAULT_EXPORT_FORMAT.value,
        sandbox=SANDBOX_POLICY,
    )


# ── Workspace ──


@router.get("/api/workspace", response_model=WorkspaceResponse)
def get_workspace():
    return _workspace_response(_workspace.state)


@router.post("/api/reset", response_model=WorkspaceResponse)
def reset_workspace():
    logger.info("POST /api/reset")
    return _workspace_response(_workspace.reset())


# ── Attachments ──


@router.post("/api/attachments", response_model=AttachmentResponse)
def upload_attachment(file: UploadFile = File(...)):
    content = file.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(content) > config.MAX_ATTACHMENT_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {config.MAX_ATTACHMENT_BYTES} bytes",
        )
    attachment = _workspace.add_attachment(content, file.content_type, file.filename or "")
    index = len(_workspace.state.attachments) - 1
    return AttachmentResponse(
        index=index,
        filename=attachment.filename,
        media_type=attachment.media_type,
        size=attachment.size,
        preview=attachment.preview_ref,
    )


@router.delete("/api/attachments/{index}", response_model=WorkspaceResponse)
def delete_attachment(index: int):
    try:
        _workspace.remove_attachment(index)
    except AttachmentIndexError as e:
        raise _http_error(e)
    return _workspace_response(_workspace.state)


# ── Generation ──


class GenerateRequest(BaseModel):
    prompt: str = ""
    complexity: Complexity = DEFAULT_COMPLEXITY
    mode: Mode = Mode.NORMAL


@router.post("/api/generate", response_model=WorkspaceResponse)
def generate(req: GenerateRequest):
    """Blocks until the model replies. The result (or error) lands in the workspace."""
    logger.info(
        "POST /api/generate prompt=%r complexity=%s mode=%s",
        req.prompt[:120], req.complexity.value, req.mode.value,
    )
    t0 = time.perf_counter()
    try:
        outcome = _workspace.generate(req.prompt, req.complexity, req.mode)
    except (EmptySubmission, GenerationInProgress) as e:
        raise _http_error(e)
    except SciVizError as e:
        logger.error("Generation failed after %.2fs: %s", time.perf_counter() - t0, e)
        raise _http_error(e)
    except Exception as e:
        logger.exception("Generation error after %.2fs", time.perf_counter() - t0)
        raise HTTPException(status_code=500, detail=str(e))
    return _workspace_response(outcome.state, discarded=outcome.discarded)


class ExportRequest(BaseModel):
    target_format: ExportFormat = DEFAULT_EXPORT_FORMAT


@router.post("/api/export", response_model=ExportResponse)
def export(req: ExportRequest):
    logger.info("POST /api/export target_format=%r", req.target_format.value)
    try:
        outcome = _workspace.export(req.target_format)
    except (NoResultToExport, GenerationInProgress) as e:
        raise _http_error(e)
    return _workspace_response(outcome.state, discarded=outcome.discarded).export
