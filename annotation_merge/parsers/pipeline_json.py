from __future__ import annotations

import json
from typing import Any

from annotation_merge.errors import AnnotationDecodeError
from annotation_merge.ingest.files import AnnotationFile


def parse_coco_person_tracking(file: AnnotationFile) -> list[dict[str, Any]]:
    """Decode COCO-style person tracking records (bbox plus keypoints per frame)."""

    records = _extract_records(file, keys=("annotations", "results"))
    for index, record in enumerate(records):
        if "bbox" not in record:
            raise AnnotationDecodeError(f"Person tracking record {index} in {file.name} has no bbox.")
    return records


def parse_scene_detection(file: AnnotationFile) -> list[dict[str, Any]]:
    return _extract_records(file, keys=("results", "scenes", "annotations"))


def parse_face_analysis(file: AnnotationFile) -> list[dict[str, Any]]:
    """Decode LAION-style face records; unrecognized containers decode to no records."""

    payload = load_json(file)
    if isinstance(payload, list):
        return _require_objects(payload, file)
    if isinstance(payload, dict):
        for key in ("annotations", "results"):
            if isinstance(payload.get(key), list):
                return _require_objects(payload[key], file)
    return []


def load_json(file: AnnotationFile) -> Any:
    try:
        return json.loads(file.read_text())
    except json.JSONDecodeError as exc:
        raise AnnotationDecodeError(f"Invalid JSON in {file.name}: {exc}") from exc


def _extract_records(file: AnnotationFile, keys: tuple[str, ...]) -> list[dict[str, Any]]:
    payload = load_json(file)
    if isinstance(payload, list):
        return _require_objects(payload, file)
    if isinstance(payload, dict):
        for key in keys:
            if isinstance(payload.get(key), list):
                return _require_objects(payload[key], file)
        expected = ", ".join(keys)
        raise AnnotationDecodeError(f"{file.name} has none of the expected record lists: {expected}.")
    raise AnnotationDecodeError(f"{file.name} must contain a JSON array or object.")


def _require_objects(values: list[Any], file: AnnotationFile) -> list[dict[str, Any]]:
    for index, value in enumerate(values):
        if not isinstance(value, dict):
            raise AnnotationDecodeError(f"Record {index} in {file.name} must be an object.")
    return values
