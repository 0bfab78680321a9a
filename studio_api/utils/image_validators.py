"""Image payload validation for uploaded pet photos.

Photos arrive as base64 strings, either bare or as ``data:`` URLs, or as
http(s) links that the vision API fetches itself. For inline photos we check
the decoded size and the binary signature (magic numbers) before anything is
sent upstream, so clients cannot pass arbitrary content off as an image.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Literal, Optional

logger = logging.getLogger(__name__)

ImageType = Literal["jpeg", "png", "gif", "webp"]

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?P<params>(;[\w=.-]+)*);base64,(?P<data>.*)$", re.S)

_MIME_BY_TYPE: dict[str, str] = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}


def is_remote_url(value: str) -> bool:
    """True for http(s) image links, which are passed to the vision API as-is."""
    return value.strip().lower().startswith(("http://", "https://"))


def split_data_url(value: str) -> tuple[str | None, str]:
    """Split a base64 data URL into (mime_type, base64_payload).

    Bare base64 input is returned as (None, payload). Whitespace is removed
    from the payload so line-wrapped (RFC 2045) base64 is accepted.
    """
    match = _DATA_URL_RE.match(value.strip())
    if not match:
        return None, "".join(value.split())
    return match.group("mime"), "".join(match.group("data").split())


def estimate_decoded_size(b64_payload: str) -> int:
    """Decoded byte length of a base64 payload without decoding it."""
    stripped = b64_payload.strip()
    padding = len(stripped) - len(stripped.rstrip("="))
    return max(0, (len(stripped) * 3) // 4 - padding)


def decode_base64_image(b64_payload: str) -> bytes:
    """Decode base64 image data.

    Raises:
        ValueError: If the payload is not valid base64.
    """
    try:
        return base64.b64decode(b64_payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image is not valid base64 data") from exc


def detect_image_type(data: bytes) -> Optional[ImageType]:
    """Identify the image format from its magic number.

    Args:
        data: Decoded image bytes.

    Returns:
        ImageType, or None when the signature is not a supported image.
    """
    if data.startswith(b"\xff\xd8\xff"):
        return "jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if data.startswith((b"GIF87a", b"GIF89a")):
        return "gif"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"

    logger.warning(
        "image_signature.invalid",
        extra={"actual_prefix": data[:8].hex() if data else "EMPTY"},
    )
    return None


def to_data_url(image_type: ImageType, b64_payload: str) -> str:
    """Build a data URL suitable for the vision API's image_url field."""
    return f"data:{_MIME_BY_TYPE[image_type]};base64,{b64_payload}"
