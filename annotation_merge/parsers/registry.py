from __future__ import annotations

from typing import Any, Callable

from annotation_merge.ingest.files import AnnotationFile
from annotation_merge.parsers.pipeline_json import (
    parse_coco_person_tracking,
    parse_face_analysis,
    parse_scene_detection,
)
from annotation_merge.parsers.rttm import parse_rttm
from annotation_merge.parsers.webvtt import parse_webvtt

Decoder = Callable[[AnnotationFile], list[dict[str, Any]]]

DEFAULT_DECODERS: dict[str, Decoder] = {
    "person_tracking": parse_coco_person_tracking,
    "face_analysis": parse_face_analysis,
    "scene_detection": parse_scene_detection,
    "speech_recognition": parse_webvtt,
    "speaker_diarization": parse_rttm,
}
