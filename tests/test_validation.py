from __future__ import annotations

from pathlib import Path

from annotation_merge.classify.validation import summarize_files, validate_file_set
from annotation_merge.ingest.files import AnnotationFile
from annotation_merge.models import ClassifiedFile


def _classified(name: str, category: str, confidence: float, pipeline: str | None = None) -> ClassifiedFile:
    return ClassifiedFile(
        file=AnnotationFile.from_path(Path("/uploads") / name),
        category=category,  # type: ignore[arg-type]
        confidence=confidence,
        pipeline=pipeline,
    )


def test_validate_file_set_accepts_video_with_pipeline_data() -> None:
    result = validate_file_set(
        [
            _classified("clip.mp4", "video", 0.95),
            _classified("complete_results.json", "complete_results", 0.95, "complete_results"),
        ]
    )

    assert result.is_valid
    assert result.missing == []
    assert result.suggestions == []


def test_validate_file_set_reports_missing_video_and_pipeline_data() -> None:
    result = validate_file_set([_classified("notes.md", "unknown", 0.0), _classified("track.wav", "audio", 0.95)])

    assert not result.is_valid
    assert result.missing == ["Video file", "Pipeline data"]
    assert result.suggestions[0] == "Add a video file (.mp4, .webm, .avi, .mov)"
    assert ".rttm for speakers" in result.suggestions[1]


def test_validate_file_set_does_not_mutate_input() -> None:
    files = [_classified("clip.vtt", "speech_recognition", 0.3, "speech_recognition")]
    snapshot = list(files)

    result = validate_file_set(files)

    assert files == snapshot
    assert result.missing == ["Video file"]


def test_summarize_files_groups_by_category() -> None:
    summary = summarize_files(
        [
            _classified("clip.mp4", "video", 0.95),
            _classified("track.wav", "audio", 0.95),
            _classified("clip.vtt", "speech_recognition", 0.9, "speech_recognition"),
            _classified("complete_results.json", "complete_results", 0.7, "complete_results"),
            _classified("misc.json", "unknown", 0.2),
        ]
    )

    assert summary.video == "clip.mp4"
    assert summary.audio == "track.wav"
    assert [(entry.name, entry.file, entry.confidence) for entry in summary.pipelines] == [
        ("speech_recognition", "clip.vtt", 0.9),
        ("complete_results", "complete_results.json", 0.7),
    ]
    assert summary.unknown == ["misc.json"]


def test_summarize_files_falls_back_to_category_name() -> None:
    summary = summarize_files([_classified("faces.json", "face_analysis", 0.6)])

    assert summary.pipelines[0].name == "face_analysis"
    assert summary.to_dict()["video"] is None
