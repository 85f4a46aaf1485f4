import base64
import mimetypes
import os
from typing import Optional, Tuple


def bytes_to_data_url(data: bytes, mime: str = "application/octet-stream") -> str:
    b64 = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{b64}"


def split_data_url(data_url: str) -> Tuple[str, Optional[str]]:
    """
    Split 'data:<mime>;base64,<payload>' into (header, payload).
    Payload is None when the string carries nothing after the first comma.
    """
    if not isinstance(data_url, str) or "," not in data_url:
        return data_url or "", None
    header, b64 = data_url.split(",", 1)
    return header, (b64 or None)


def guess_mime_type(path: str) -> str:
    mime, _ = mimetypes.guess_type(path)
    return mime or "application/octet-stream"


def read_file_as_data_url(path: str) -> Tuple[str, str, str]:
    """Return (data_url, mime_type, basename) for a local file."""
    mime = guess_mime_type(path)
    with open(path, "rb") as fh:
        data = fh.read()
    return bytes_to_data_url(data, mime), mime, os.path.basename(path)
