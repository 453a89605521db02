from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

from annotation_merge.ingest.files import AnnotationFile
from annotation_merge.models import VideoInfo

DEFAULT_FRAME_RATE = 30.0


def probe_video_info(video: AnnotationFile, default_frame_rate: float = DEFAULT_FRAME_RATE) -> VideoInfo:
    """Read duration, dimensions and frame rate of a video via ffprobe."""

    source_path = video.path.expanduser().resolve()
    if not source_path.exists():
        raise FileNotFoundError(f"Video file not found: {source_path}")

    payload = _run_ffprobe(source_path)
    return _normalize_probe_payload(video.name, payload, default_frame_rate)


def _run_ffprobe(video_path: Path) -> dict[str, Any]:
    command = [
        "ffprobe",
        "-v",
        "error",
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        str(video_path),
    ]

    try:
        completed = subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise RuntimeError(
            "ffprobe executable was not found. Install FFmpeg so ffprobe is available on PATH."
        ) from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        if "error while loading shared libraries" in stderr:
            raise RuntimeError(
                "ffprobe is installed but failed to start because required shared libraries are missing. "
                f"ffprobe stderr: {stderr}"
            ) from exc
        details = f" ffprobe stderr: {stderr}" if stderr else ""
        raise RuntimeError(
            f"ffprobe failed while probing media file: {video_path}.{details}"
        ) from exc

    try:
        return json.loads(completed.stdout)
    except json.JSONDecodeError as exc:
        raise RuntimeError("ffprobe returned invalid JSON output.") from exc


def _normalize_probe_payload(filename: str, payload: dict[str, Any], default_frame_rate: float) -> VideoInfo:
    format_entry = payload.get("format", {})
    video_stream = next(
        (stream for stream in payload.get("streams", []) if stream.get("codec_type") == "video"),
        None,
    )
    if video_stream is None:
        raise RuntimeError(f"No video stream found in {filename}.")

    duration = _to_float(format_entry.get("duration"))
    if duration is None:
        duration = _to_float(video_stream.get("duration"))

    frame_rate = _parse_frame_rate(video_stream.get("avg_frame_rate"))
    if frame_rate is None:
        frame_rate = _parse_frame_rate(video_stream.get("r_frame_rate"))

    return VideoInfo(
        filename=filename,
        duration=duration or 0.0,
        width=_to_int(video_stream.get("width")) or 0,
        height=_to_int(video_stream.get("height")) or 0,
        frame_rate=frame_rate or default_frame_rate,
    )


def _parse_frame_rate(raw_value: Any) -> float | None:
    if raw_value in (None, "N/A", "", "0/0"):
        return None
    numerator, _, denominator = str(raw_value).partition("/")
    try:
        value = float(numerator) / float(denominator or 1)
    except (ValueError, ZeroDivisionError):
        return None
    return round(value, 3) if value > 0 else None


def _to_float(raw_value: Any) -> float | None:
    if raw_value in (None, "N/A", ""):
        return None
    return float(raw_value)


def _to_int(raw_value: Any) -> int | None:
    if raw_value in (None, "N/A", ""):
        return None
    return int(raw_value)
