from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from annotation_merge.ingest import probe
from annotation_merge.ingest.files import AnnotationFile
from annotation_merge.ingest.probe import _normalize_probe_payload, _run_ffprobe, probe_video_info


def test_run_ffprobe_wraps_missing_binary_error(tmp_path: Path) -> None:
    video_path = tmp_path / "sample.mp4"
    video_path.write_bytes(b"data")

    def _raise_missing(*args: object, **kwargs: object) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError("ffprobe")

    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(subprocess, "run", _raise_missing)
        with pytest.raises(RuntimeError, match="ffprobe executable was not found"):
            _run_ffprobe(video_path)


def test_run_ffprobe_reports_shared_library_issue(tmp_path: Path) -> None:
    video_path = tmp_path / "sample.mp4"
    video_path.write_bytes(b"data")

    command = ["ffprobe", str(video_path)]

    def _raise_process_error(*args: object, **kwargs: object) -> subprocess.CompletedProcess[str]:
        raise subprocess.CalledProcessError(
            returncode=127,
            cmd=command,
            output="",
            stderr=(
                "ffprobe: error while loading shared libraries: "
                "libSvtAv1Enc.so.4: cannot open shared object file: No such file or directory"
            ),
        )

    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(subprocess, "run", _raise_process_error)
        with pytest.raises(RuntimeError, match="failed to start because required shared libraries are missing"):
            _run_ffprobe(video_path)


def test_run_ffprobe_wraps_other_called_process_error(tmp_path: Path) -> None:
    video_path = tmp_path / "sample.mp4"
    video_path.write_bytes(b"data")

    command = ["ffprobe", str(video_path)]

    def _raise_process_error(*args: object, **kwargs: object) -> subprocess.CompletedProcess[str]:
        raise subprocess.CalledProcessError(
            returncode=1,
            cmd=command,
            output="",
            stderr="invalid data found when processing input",
        )

    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(subprocess, "run", _raise_process_error)
        with pytest.raises(RuntimeError, match="ffprobe failed while probing media file"):
            _run_ffprobe(video_path)


def test_probe_video_info_reads_first_video_stream(tmp_path: Path, monkeypatch) -> None:
    video_path = tmp_path / "clip.mp4"
    video_path.write_bytes(b"data")
    payload = {
        "format": {"duration": "120.040000"},
        "streams": [
            {"codec_type": "audio", "sample_rate": "48000"},
            {"codec_type": "video", "width": 1920, "height": 1080, "avg_frame_rate": "30000/1001"},
        ],
    }

    monkeypatch.setattr(
        probe.subprocess,
        "run",
        lambda *args, **kwargs: subprocess.CompletedProcess(args=args, returncode=0, stdout=json.dumps(payload), stderr=""),
    )

    info = probe_video_info(AnnotationFile.from_path(video_path))

    assert info.filename == "clip.mp4"
    assert info.duration == pytest.approx(120.04)
    assert (info.width, info.height) == (1920, 1080)
    assert info.frame_rate == pytest.approx(29.97)


def test_probe_video_info_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Video file not found"):
        probe_video_info(AnnotationFile.from_path(tmp_path / "missing.mp4"))


def test_normalize_probe_payload_defaults_frame_rate() -> None:
    payload = {
        "format": {},
        "streams": [{"codec_type": "video", "width": "640", "height": "360", "avg_frame_rate": "0/0", "duration": "8.5"}],
    }

    info = _normalize_probe_payload("clip.webm", payload, default_frame_rate=30.0)

    assert info.frame_rate == pytest.approx(30.0)
    assert info.duration == pytest.approx(8.5)
    assert info.width == 640


def test_normalize_probe_payload_requires_video_stream() -> None:
    with pytest.raises(RuntimeError, match="No video stream found"):
        _normalize_probe_payload("audio_only.mp4", {"streams": [{"codec_type": "audio"}]}, default_frame_rate=30.0)
