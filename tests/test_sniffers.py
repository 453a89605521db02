from __future__ import annotations

import json
from pathlib import Path

from annotation_merge.classify.sniffers import (
    is_coco_person_payload,
    is_complete_results_payload,
    is_face_payload,
    is_scene_payload,
    looks_like_coco_person_tracking,
    looks_like_rttm,
    looks_like_webvtt,
)
from annotation_merge.ingest.files import AnnotationFile


def test_webvtt_sniffer_ignores_leading_whitespace(tmp_path: Path) -> None:
    path = tmp_path / "subs.vtt"
    path.write_text("\n  WEBVTT - transcript\n", encoding="utf-8")

    assert looks_like_webvtt(AnnotationFile.from_path(path))


def test_webvtt_sniffer_only_reads_prefix(tmp_path: Path) -> None:
    path = tmp_path / "subs.vtt"
    path.write_text(" " * 120 + "WEBVTT\n", encoding="utf-8")

    assert not looks_like_webvtt(AnnotationFile.from_path(path))


def test_rttm_sniffer_requires_speaker_token(tmp_path: Path) -> None:
    speaker = tmp_path / "a.rttm"
    speaker.write_text("SPEAKER clip 1 0.0 1.0 <NA> <NA> s0 <NA> <NA>\n", encoding="utf-8")
    other = tmp_path / "b.rttm"
    other.write_text("LEXEME clip 1 0.0 1.0 hi\n", encoding="utf-8")

    assert looks_like_rttm(AnnotationFile.from_path(speaker))
    assert not looks_like_rttm(AnnotationFile.from_path(other))


def test_missing_file_is_no_match(tmp_path: Path) -> None:
    missing = AnnotationFile.from_path(tmp_path / "gone.vtt")

    assert not looks_like_webvtt(missing)
    assert not looks_like_coco_person_tracking(missing)


def test_json_sniffer_fails_closed_on_truncated_prefix(tmp_path: Path) -> None:
    path = tmp_path / "tracks.json"
    rows = [{"keypoints": [0] * 50, "bbox": [0, 0, 1, 1]} for _ in range(40)]
    path.write_text(json.dumps(rows), encoding="utf-8")

    assert not looks_like_coco_person_tracking(AnnotationFile.from_path(path))


def test_shape_predicates_require_a_first_element() -> None:
    assert not is_coco_person_payload([])
    assert not is_face_payload([])
    assert not is_scene_payload([])
    assert not is_face_payload({"annotations": []})


def test_scene_predicate_accepts_camel_case_and_scene_type() -> None:
    assert is_scene_payload([{"startTime": 1.0}])
    assert is_scene_payload({"annotations": [{"scene_type": "indoor"}]})
    assert not is_scene_payload({"annotations": [{"bbox": [0, 0, 1, 1]}]})


def test_face_predicate_needs_attributes_for_bare_lists() -> None:
    assert not is_face_payload([{"face_id": 1}])
    assert is_face_payload({"results": [{"face_id": 1}]})


def test_complete_results_predicate_requires_truthy_fields() -> None:
    payload = {
        "video_path": "clip.mp4",
        "pipeline_results": {"scene": {}},
        "config": {"scene": {}},
        "start_time": "2025-01-01T00:00:00",
        "total_duration": 0,
    }

    assert is_complete_results_payload(payload)
    assert not is_complete_results_payload({**payload, "video_path": ""})
    assert not is_complete_results_payload([payload])
