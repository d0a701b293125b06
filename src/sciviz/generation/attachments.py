"""Encode uploaded image files into transport-ready attachments."""

from __future__ import annotations

import base64
import binascii
import io
import logging

from PIL import Image, UnidentifiedImageError

from sciviz.models import Attachment

logger = logging.getLogger(__name__)

FALLBACK_MEDIA_TYPE = "application/octet-stream"


def _sniff_media_type(raw: bytes) -> str | None:
    """Detect the image MIME type from the bytes themselves, or None."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
        return None
    if not fmt:
        return None
    return Image.MIME.get(fmt)


def to_data_url(raw: bytes, declared_type: str | None = None) -> str:
    """Encode bytes as a ``data:<mime>;base64,<payload>`` URL.

    The MIME type comes from the content. ``declared_type`` (the upload's
    Content-Type) is used only when the content is not a recognised image.
    """
    media_type = _sniff_media_type(raw) or declared_type or FALLBACK_MEDIA_TYPE
    payload = base64.b64encode(raw).decode("ascii")
    return f"data:{media_type};base64,{payload}"


def split_data_url(data_url: str) -> tuple[str, str]:
    """Split a base64 data URL into ``(encoded_data, media_type)``.

    Raises:
        ValueError: If ``data_url`` is not a base64 data URL.
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")
    media_type = header[len("data:"):].split(";")[0]
    return payload, media_type


def encode_attachment(raw: bytes, declared_type: str | None = None, filename: str = "") -> Attachment:
    """Encode raw file bytes into an Attachment.

    The media type is read back from the data URL header, so the attachment
    always carries exactly what the transport encoding declared.
    """
    data_url = to_data_url(raw, declared_type)
    encoded, media_type = split_data_url(data_url)
    logger.debug("Encoded attachment %r: %s, %d bytes", filename, media_type, len(raw))
    return Attachment(
        encoded_data=encoded,
        media_type=media_type,
        preview_ref=data_url,
        filename=filename,
    )


def decode_attachment(attachment: Attachment) -> bytes:
    """Return the original bytes of an attachment.

    Raises:
        ValueError: If the stored payload is not valid base64.
    """
    try:
        return base64.b64decode(attachment.encoded_data, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Attachment payload is not valid base64: {e}") from e
