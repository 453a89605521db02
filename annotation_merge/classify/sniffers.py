from __future__ import annotations

import json
import logging
from typing import Any, Callable

from annotation_merge.ingest.files import AnnotationFile

logger = logging.getLogger(__name__)

WEBVTT_SNIFF_BYTES = 100
RTTM_SNIFF_BYTES = 1000
JSON_SNIFF_BYTES = 2000

COMPLETE_RESULTS_REQUIRED_FIELDS = ("video_path", "pipeline_results", "config", "start_time")


def looks_like_webvtt(file: AnnotationFile) -> bool:
    try:
        return file.read_text_prefix(WEBVTT_SNIFF_BYTES).strip().startswith("WEBVTT")
    except OSError:
        return False


def looks_like_rttm(file: AnnotationFile) -> bool:
    try:
        return "SPEAKER" in file.read_text_prefix(RTTM_SNIFF_BYTES)
    except OSError:
        return False


def looks_like_coco_person_tracking(file: AnnotationFile) -> bool:
    return _sniff_json_prefix(file, is_coco_person_payload)


def looks_like_scene_detection(file: AnnotationFile) -> bool:
    return _sniff_json_prefix(file, is_scene_payload)


def looks_like_face_analysis(file: AnnotationFile) -> bool:
    return _sniff_json_prefix(file, is_face_payload)


def looks_like_complete_results(file: AnnotationFile) -> bool:
    """Check the whole file against the complete-results bundle schema.

    Unlike the other JSON sniffers this parses the entire file: a bundle's
    first kilobytes often resemble a plain pipeline output.
    """

    try:
        payload = json.loads(file.read_text())
    except (OSError, ValueError) as exc:
        logger.debug("Complete-results check failed for %s: %s", file.name, exc)
        return False
    return is_complete_results_payload(payload)


def is_coco_person_payload(payload: Any) -> bool:
    if isinstance(payload, list):
        first = _first_item(payload)
        return first is not None and "keypoints" in first and "bbox" in first
    if isinstance(payload, dict):
        return isinstance(payload.get("annotations"), list) or isinstance(payload.get("results"), list)
    return False


def is_scene_payload(payload: Any) -> bool:
    if isinstance(payload, list):
        first = _first_item(payload)
        return first is not None and ("start_time" in first or "startTime" in first)
    if isinstance(payload, dict):
        if isinstance(payload.get("results"), list) or isinstance(payload.get("scenes"), list):
            return True
        first = _first_item(payload.get("annotations"))
        return first is not None and "scene_type" in first
    return False


def is_face_payload(payload: Any) -> bool:
    if isinstance(payload, list):
        first = _first_item(payload)
        return first is not None and "face_id" in first and "attributes" in first
    if isinstance(payload, dict):
        for key in ("annotations", "results"):
            first = _first_item(payload.get(key))
            if first is not None and "face_id" in first:
                return True
    return False


def is_complete_results_payload(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    if not all(_has_value(payload, key) for key in COMPLETE_RESULTS_REQUIRED_FIELDS):
        return False
    return "total_duration" in payload


def _has_value(payload: dict[str, Any], key: str) -> bool:
    # Empty objects and lists count as set; only null, false, 0 and "" do not.
    if key not in payload:
        return False
    value = payload[key]
    return value is not None and value is not False and value != 0 and value != ""


def _sniff_json_prefix(file: AnnotationFile, predicate: Callable[[Any], bool]) -> bool:
    try:
        payload = json.loads(file.read_text_prefix(JSON_SNIFF_BYTES))
    except (OSError, ValueError):
        return False
    return bool(predicate(payload))


def _first_item(values: Any) -> dict[str, Any] | None:
    if not isinstance(values, list) or not values:
        return None
    first = values[0]
    return first if isinstance(first, dict) else None
