from __future__ import annotations

import logging
from typing import Any

from annotation_merge.errors import AnnotationDecodeError
from annotation_merge.ingest.files import AnnotationFile
from annotation_merge.models import CompleteResults
from annotation_merge.parsers.pipeline_json import load_json

logger = logging.getLogger(__name__)

# bundle section name -> record slot
BUNDLE_SECTIONS = {
    "person": "person_tracking",
    "face": "face_analysis",
    "scene": "scene_detection",
}


def extract_complete_results(file: AnnotationFile) -> CompleteResults:
    """Pull embedded pipeline outputs and run metadata from a complete-results bundle.

    A missing pipeline section yields an empty list; only a structurally
    invalid bundle raises ``AnnotationDecodeError``.
    """

    payload = load_json(file)
    if not isinstance(payload, dict):
        raise AnnotationDecodeError(f"{file.name} must contain a JSON object.")

    pipeline_results = payload.get("pipeline_results")
    if not isinstance(pipeline_results, dict):
        raise AnnotationDecodeError(f"{file.name} has no pipeline_results object.")

    extracted = {
        slot: _section_results(pipeline_results.get(section), section, file)
        for section, slot in BUNDLE_SECTIONS.items()
    }
    logger.debug(
        "Extracted bundle %s: %s",
        file.name,
        {slot: len(records) for slot, records in extracted.items()},
    )

    config = payload.get("config")
    return CompleteResults(
        person_tracking=extracted["person_tracking"],
        face_analysis=extracted["face_analysis"],
        scene_detection=extracted["scene_detection"],
        config=config if isinstance(config, dict) else None,
        processing_time=sum(_processing_time(section) for section in pipeline_results.values()),
        total_duration=_to_float(payload.get("total_duration")),
    )


def _section_results(section: Any, name: str, file: AnnotationFile) -> list[dict[str, Any]]:
    if not isinstance(section, dict):
        return []
    results = section.get("results")
    if results is None:
        return []
    if not isinstance(results, list):
        raise AnnotationDecodeError(f"pipeline_results.{name}.results in {file.name} must be a list.")
    return results


def _processing_time(section: Any) -> float:
    if not isinstance(section, dict):
        return 0.0
    return _to_float(section.get("processing_time")) or 0.0


def _to_float(raw_value: Any) -> float | None:
    if isinstance(raw_value, bool) or not isinstance(raw_value, int | float):
        return None
    return float(raw_value)
