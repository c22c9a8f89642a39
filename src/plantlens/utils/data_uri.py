"""Helpers for passing image bytes through JSON as base64 data-URIs."""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

DEFAULT_MIME_TYPE = "application/octet-stream"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]+)*);base64,", re.IGNORECASE)


class InvalidDataURI(ValueError):
    pass


@dataclass(frozen=True)
class DecodedDataURI:
    mime_type: str
    data: bytes


def encode_data_uri(data: bytes, mime_type: str | None) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{payload}"


def decode_data_uri(uri: str) -> DecodedDataURI:
    """Decode ``data:<mime>;base64,<payload>`` or a bare base64 payload.

    Raises ``InvalidDataURI`` when the prefix is not base64-encoded or the
    payload is not valid base64.
    """
    uri = uri.strip()
    mime_type = DEFAULT_MIME_TYPE
    payload = uri
    if uri[:5].lower() == "data:":
        match = _DATA_URI_RE.match(uri)
        if match is None:
            raise InvalidDataURI("Data URI is not base64 encoded")
        mime_type = match.group("mime") or DEFAULT_MIME_TYPE
        payload = uri[match.end():]

    payload = "".join(payload.split())
    if not payload:
        raise InvalidDataURI("Data URI carries no payload")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidDataURI(f"Invalid base64 payload: {exc}") from exc
    return DecodedDataURI(mime_type=mime_type.lower(), data=data)
