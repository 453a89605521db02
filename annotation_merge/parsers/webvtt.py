from __future__ import annotations

import re
from typing import Any

from annotation_merge.errors import AnnotationDecodeError
from annotation_merge.ingest.files import AnnotationFile

TIMESTAMP_PATTERN = re.compile(r"^(?:(\d+):)?(\d{2}):(\d{2})\.(\d{3})$")
NON_CUE_BLOCKS = ("NOTE", "STYLE", "REGION")


def parse_webvtt(file: AnnotationFile) -> list[dict[str, Any]]:
    """Decode WebVTT cues into ``{id, start_time, end_time, text}`` rows (seconds)."""

    text = file.read_text().lstrip("\ufeff")
    blocks = [block for block in re.split(r"\r?\n\s*\r?\n", text.strip()) if block.strip()]
    if not blocks or not blocks[0].startswith("WEBVTT"):
        raise AnnotationDecodeError(f"{file.name} is missing the WEBVTT header.")

    cues: list[dict[str, Any]] = []
    for block in blocks[1:]:
        lines = block.splitlines()
        if lines[0].startswith(NON_CUE_BLOCKS):
            continue

        cue_id: str | None = None
        if "-->" not in lines[0]:
            cue_id = lines[0].strip()
            lines = lines[1:]
        if not lines or "-->" not in lines[0]:
            raise AnnotationDecodeError(f"Cue without timing line in {file.name}: {block[:40]!r}")

        start_raw, end_raw = (part.strip() for part in lines[0].split("-->", 1))
        end_raw = end_raw.split()[0] if end_raw else end_raw
        start = _parse_timestamp(start_raw)
        end = _parse_timestamp(end_raw)
        if end < start:
            raise AnnotationDecodeError(f"Cue ends before it starts in {file.name}: {lines[0]!r}")

        cues.append(
            {
                "id": cue_id or f"cue_{len(cues) + 1}",
                "start_time": start,
                "end_time": end,
                "text": "\n".join(line.strip() for line in lines[1:]).strip(),
            }
        )

    return cues


def _parse_timestamp(raw_value: str) -> float:
    match = TIMESTAMP_PATTERN.match(raw_value)
    if match is None:
        raise AnnotationDecodeError(f"Invalid WebVTT timestamp: {raw_value!r}")
    hours, minutes, seconds, millis = match.groups()
    return round(int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds) + int(millis) / 1000, 3)
