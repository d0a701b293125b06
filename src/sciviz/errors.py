"""Error taxonomy for generation calls and workspace transitions."""

from __future__ import annotations


class SciVizError(Exception):
    """Base class for all errors raised by sciviz."""


class MissingCredential(SciVizError):
    """Raised before any network attempt when no API key is configured."""


class UpstreamError(SciVizError):
    """Raised when the hosted model call fails (auth, quota, network, bad request).

    The message is the upstream message, unchanged. The original exception
    is available as ``__cause__``.
    """


class EmptyResponse(SciVizError):
    """Raised when the model call succeeds but returns no text."""


class EmptySubmission(SciVizError):
    """Raised when a submit has blank text and no attachments."""


class GenerationInProgress(SciVizError):
    """Raised when a generation is submitted while another is outstanding."""


class NoResultToExport(SciVizError):
    """Raised when an export is requested with no displayed code."""


class AttachmentIndexError(SciVizError, IndexError):
    """Raised when removing an attachment index that does not exist."""
