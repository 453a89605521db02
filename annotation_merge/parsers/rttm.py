from __future__ import annotations

from typing import Any

from annotation_merge.errors import AnnotationDecodeError
from annotation_merge.ingest.files import AnnotationFile

MIN_SPEAKER_FIELDS = 8


def parse_rttm(file: AnnotationFile) -> list[dict[str, Any]]:
    """Decode RTTM ``SPEAKER`` lines into diarization segments.

    Other RTTM record types are ignored; ``#`` comments and blank lines are skipped.
    """

    segments: list[dict[str, Any]] = []
    for line_number, raw_line in enumerate(file.read_text().splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        fields = line.split()
        if fields[0] != "SPEAKER":
            continue
        if len(fields) < MIN_SPEAKER_FIELDS:
            raise AnnotationDecodeError(f"{file.name}:{line_number}: expected at least {MIN_SPEAKER_FIELDS} fields.")

        try:
            start = float(fields[3])
            duration = float(fields[4])
        except ValueError as exc:
            raise AnnotationDecodeError(f"{file.name}:{line_number}: invalid onset/duration.") from exc

        segments.append(
            {
                "file_id": fields[1],
                "start_time": round(start, 3),
                "duration": round(duration, 3),
                "end_time": round(start + duration, 3),
                "speaker_id": fields[7],
                "confidence": _optional_float(fields[8]) if len(fields) > 8 else None,
            }
        )

    return segments


def _optional_float(raw_value: str) -> float | None:
    if raw_value in ("<NA>", "NA", ""):
        return None
    try:
        return float(raw_value)
    except ValueError:
        return None
