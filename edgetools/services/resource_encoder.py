from __future__ import annotations

import base64
import binascii

from edgetools.tools.base import ResourceDescriptor

# Base64 prefixes of known binary signatures. "RIFF" encodes to "UklGR".
_SIGNATURES: tuple[tuple[str, str], ...] = (("UklGR", "audio/wav"),)

_EXTENSIONS: dict[str, str] = {
    "audio/wav": "wav",
    "audio/wave": "wav",
    "audio/x-wav": "wav",
    "audio/vnd.wave": "wav",
    "audio/mp3": "mp3",
    "audio/mpeg": "mp3",
    "audio/ogg": "ogg",
    "audio/webm": "webm",
    "audio/flac": "flac",
    "audio/aac": "aac",
    "audio/mp4": "m4a",
    "text/plain": "txt",
    "application/json": "json",
}

DEFAULT_MIME_TYPE = "audio/mp3"
DEFAULT_EXTENSION = "mp3"


class ResourceEncoder:
    """Classifies base64 payloads and wraps them as resource descriptors.

    The encoder never touches storage. Callers that upload the payload pass the
    resulting public location; otherwise the blob is embedded in a data URI.
    """

    def __init__(self, fallback_mime_type: str = DEFAULT_MIME_TYPE) -> None:
        self._fallback_mime_type = (fallback_mime_type or DEFAULT_MIME_TYPE).strip().lower()

    def sniff_mime_type(self, base64_payload: str) -> str:
        for prefix, mime_type in _SIGNATURES:
            if base64_payload.startswith(prefix):
                return mime_type
        return self._fallback_mime_type

    def resolve_mime_type(self, base64_payload: str, declared_mime_type: str | None = None) -> str:
        declared = (declared_mime_type or "").strip().lower()
        if declared:
            return declared
        return self.sniff_mime_type(base64_payload)

    def encode(
        self,
        base64_payload: str,
        declared_mime_type: str | None = None,
        *,
        location: str | None = None,
    ) -> ResourceDescriptor:
        mime_type = self.resolve_mime_type(base64_payload, declared_mime_type)
        uri = location or f"data:{mime_type};base64,{base64_payload}"
        return ResourceDescriptor(
            uri=uri,
            blob=base64_payload,
            mime_type=mime_type,
            extension=extension_for(mime_type),
        )


def extension_for(mime_type: str) -> str:
    base_type = (mime_type or "").split(";", 1)[0].strip().lower()
    return _EXTENSIONS.get(base_type, DEFAULT_EXTENSION)


def decode_payload(base64_payload: str) -> bytes:
    try:
        return base64.b64decode(base64_payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"fileData is not valid base64: {exc}") from exc
