import codecs
from typing import Optional

OCTET_STREAM = "application/octet-stream"

_MAGIC_NUMBERS = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"%PDF-", "application/pdf"),
)

_TEXT_APPLICATION_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "application/x-sh",
    "application/x-shellscript",
    "application/toml",
    "application/yaml",
    "application/x-yaml",
}

_TEXT_X11_TARGETS = {"utf8_string", "string", "text", "compound_text"}


def base_type(mime: str) -> str:
    return mime.split(";", 1)[0].strip().lower()


def is_text_mime(mime: str) -> bool:
    base = base_type(mime)
    return (
        base.startswith("text/")
        or base in _TEXT_APPLICATION_TYPES
        or base.endswith("+json")
        or base.endswith("+xml")
        or base in _TEXT_X11_TARGETS
    )


def decode_text(mime: str, payload: bytes) -> Optional[str]:
    """Return the payload as text when the mime type is textual and it decodes as UTF-8."""
    if not is_text_mime(mime):
        return None
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        return None


def sniff_mime(payload: bytes) -> str:
    """Best-effort mime type for raw clipboard bytes when none was supplied."""
    for magic, mime in _MAGIC_NUMBERS:
        if payload.startswith(magic):
            return mime
    if payload[:4] == b"RIFF" and payload[8:12] == b"WEBP":
        return "image/webp"
    try:
        payload.decode("utf-8")
    except UnicodeDecodeError:
        return OCTET_STREAM
    return "text/plain;charset=utf-8"


def human_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            return f"{int(value)} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def decode_preview(mime: str, prefix: bytes, complete: bool) -> Optional[str]:
    """Like :func:`decode_text` for a possibly truncated payload prefix.

    A multi-byte character cut off at the end of an incomplete prefix is
    dropped instead of making the whole preview undecodable.
    """
    if not is_text_mime(mime):
        return None
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        return decoder.decode(prefix, final=complete)
    except UnicodeDecodeError:
        return None


_LINE_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t"})


def escape_line(text: str) -> str:
    """Keep ``text`` on one picker line."""
    return text.translate(_LINE_ESCAPES)
