from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AnnotationFile:
    """Read-only handle to one uploaded file."""

    path: Path
    mime_type: str = field(default="")

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> AnnotationFile:
        resolved = Path(path).expanduser()
        if mime_type is None:
            guessed, _ = mimetypes.guess_type(resolved.name)
            mime_type = guessed or ""
        return cls(path=resolved, mime_type=mime_type)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        return self.path.suffix.lower().lstrip(".")

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    def read_prefix(self, size: int) -> bytes:
        with self.path.open("rb") as handle:
            return handle.read(max(size, 0))

    def read_text_prefix(self, size: int) -> str:
        return self.read_prefix(size).decode("utf-8", errors="replace")

    def read_text(self) -> str:
        return self.read_bytes().decode("utf-8", errors="replace")
