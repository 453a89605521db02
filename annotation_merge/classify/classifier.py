from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable

from annotation_merge.classify.sniffers import (
    looks_like_coco_person_tracking,
    looks_like_complete_results,
    looks_like_face_analysis,
    looks_like_rttm,
    looks_like_scene_detection,
    looks_like_webvtt,
)
from annotation_merge.ingest.files import AnnotationFile
from annotation_merge.models import ClassifiedFile, FileCategory

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = {"mp4", "webm", "avi", "mov"}
AUDIO_EXTENSIONS = {"wav", "mp3", "aac", "ogg"}
JSON_SAMPLE_BYTES = 5000
DEFAULT_MAX_WORKERS = 4

# Evaluated in order; the first content match wins.
JSON_CONTENT_CHECKS: tuple[tuple[FileCategory, Callable[[AnnotationFile], bool], float], ...] = (
    ("face_analysis", looks_like_face_analysis, 0.8),
    ("person_tracking", looks_like_coco_person_tracking, 0.8),
    ("scene_detection", looks_like_scene_detection, 0.8),
)

# Filename fallbacks, used when no content check matched.
JSON_NAME_HINTS: tuple[tuple[FileCategory, tuple[str, ...], float], ...] = (
    ("complete_results", ("complete_results",), 0.7),
    ("face_analysis", ("face_annotations", "laion_face"), 0.6),
    ("person_tracking", ("person", "tracking"), 0.5),
    ("scene_detection", ("scene",), 0.5),
)


def classify_file(file: AnnotationFile) -> ClassifiedFile:
    """Detect what an uploaded file represents from its name, MIME type and content."""

    extension = file.extension
    mime_type = file.mime_type.lower()

    if extension in VIDEO_EXTENSIONS or mime_type.startswith("video/"):
        return ClassifiedFile(file=file, category="video", confidence=0.95)

    if extension in AUDIO_EXTENSIONS or mime_type.startswith("audio/"):
        return ClassifiedFile(file=file, category="audio", confidence=0.95)

    if extension == "vtt" or "speech_recognition" in file.name:
        return _pipeline_file(file, "speech_recognition", 0.9 if looks_like_webvtt(file) else 0.3)

    if extension == "rttm" or "speaker_diarization" in file.name:
        return _pipeline_file(file, "speaker_diarization", 0.9 if looks_like_rttm(file) else 0.3)

    if extension == "json" or mime_type == "application/json":
        return _classify_json(file)

    return ClassifiedFile(file=file, category="unknown", confidence=0.0)


def classify_files(
    files: Iterable[AnnotationFile],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[ClassifiedFile]:
    """Classify files concurrently and rank them by descending confidence.

    Ties keep their input order.
    """

    pending = list(files)
    if not pending:
        return []

    with ThreadPoolExecutor(max_workers=max(max_workers, 1)) as executor:
        classified = list(executor.map(classify_file, pending))

    return sorted(classified, key=lambda item: -item.confidence)


def _classify_json(file: AnnotationFile) -> ClassifiedFile:
    if looks_like_complete_results(file):
        logger.debug("Detected %s as complete_results bundle", file.name)
        return _pipeline_file(file, "complete_results", 0.95)

    try:
        json.loads(file.read_text_prefix(JSON_SAMPLE_BYTES))
    except (OSError, ValueError) as exc:
        logger.debug("JSON sample of %s could not be parsed: %s", file.name, exc)
        return ClassifiedFile(file=file, category="unknown", confidence=0.0)

    for category, check, confidence in JSON_CONTENT_CHECKS:
        if check(file):
            logger.debug("Detected %s as %s from content", file.name, category)
            return _pipeline_file(file, category, confidence)

    for category, hints, confidence in JSON_NAME_HINTS:
        if any(hint in file.name for hint in hints):
            logger.debug("Detected %s as %s from filename", file.name, category)
            return _pipeline_file(file, category, confidence)

    return ClassifiedFile(file=file, category="unknown", confidence=0.2)


def _pipeline_file(file: AnnotationFile, category: FileCategory, confidence: float) -> ClassifiedFile:
    return ClassifiedFile(file=file, category=category, confidence=confidence, pipeline=category)
