"""Multipart upload helpers."""

from __future__ import annotations

import mimetypes
import os
from pathlib import Path
from typing import IO, Any, Union

FileInput = Union[str, "os.PathLike[str]", bytes, IO[bytes]]

DEFAULT_FILENAME = "invoice.pdf"


def build_file_upload(
    file: FileInput,
    *,
    filename: str | None = None,
    content_type: str | None = None,
    field_name: str = "file",
) -> dict[str, tuple[str, Any, str]]:
    """Build an httpx ``files`` mapping from a path, raw bytes or a binary file object.

    Paths are read eagerly so the upload does not hold an open handle.
    """
    if isinstance(file, (str, os.PathLike)):
        path = Path(file)
        content: Any = path.read_bytes()
        filename = filename or path.name
    elif isinstance(file, (bytes, bytearray)):
        content = bytes(file)
    elif hasattr(file, "read"):
        content = file.read()
        name = getattr(file, "name", None)
        if not filename and isinstance(name, str):
            filename = os.path.basename(name)
    else:
        raise TypeError("file must be a path, bytes, or a binary file object")

    filename = filename or DEFAULT_FILENAME
    content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return {field_name: (filename, content, content_type)}
