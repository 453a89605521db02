from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from time import perf_counter
from typing import Any, Callable, Mapping

from annotation_merge.errors import MissingVideoError
from annotation_merge.ingest.files import AnnotationFile
from annotation_merge.ingest.probe import DEFAULT_FRAME_RATE, probe_video_info
from annotation_merge.models import (
    PIPELINE_SLOTS,
    AnnotationMetadata,
    ClassifiedFile,
    MergeReport,
    MergeResult,
    UnifiedAnnotationRecord,
    VideoInfo,
)
from annotation_merge.parsers.complete_results import extract_complete_results
from annotation_merge.parsers.registry import DEFAULT_DECODERS, Decoder

logger = logging.getLogger(__name__)

DEFAULT_FORMAT_VERSION = "1.1.1"
DEFAULT_SOURCE = "videoannotator"

ProgressCallback = Callable[[str, int, int], None]
VideoProbe = Callable[[AnnotationFile, float], VideoInfo]

# Pipelines a complete-results bundle can supply; a separate file only fills an empty slot.
BUNDLE_PIPELINES = ("person_tracking", "face_analysis", "scene_detection")


@dataclass(slots=True)
class _MergeAccumulator:
    """Mutable state of one merge call; never shared outside it."""

    slots: dict[str, list[dict[str, Any]]] = field(
        default_factory=lambda: {slot: [] for slot in PIPELINE_SLOTS}
    )
    pipelines_found: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    files_processed: int = 0
    video_file: AnnotationFile | None = None
    audio_file: AnnotationFile | None = None
    processing_config: dict[str, Any] | None = None
    processing_time: float | None = None
    total_duration: float | None = None

    def record_pipeline(self, name: str) -> None:
        if name not in self.pipelines_found:
            self.pipelines_found.append(name)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)


def merge_annotation_files(
    classified_files: list[ClassifiedFile],
    on_progress: ProgressCallback | None = None,
    *,
    decoders: Mapping[str, Decoder] | None = None,
    video_probe: VideoProbe | None = None,
    format_version: str = DEFAULT_FORMAT_VERSION,
    source: str = DEFAULT_SOURCE,
    default_frame_rate: float = DEFAULT_FRAME_RATE,
) -> MergeResult:
    """Merge classified pipeline outputs into one annotation record for a video.

    Precedence:
    1) a complete-results bundle is processed first and owns person/face/scene
    2) remaining files are processed in the given order; separate person/face/scene
       files only fill slots that are still empty
    3) speech and diarization files are always decoded
    4) for video and audio inputs the last one wins

    Per-file failures become warnings; only a missing video raises.
    """

    started_at = perf_counter()
    resolved_decoders = {**DEFAULT_DECODERS, **(decoders or {})}
    probe = video_probe or probe_video_info
    total_files = len(classified_files)
    state = _MergeAccumulator()

    def _report(stage: str, completed: int, total: int) -> None:
        if on_progress is not None:
            on_progress(stage, completed, total)

    bundle = next((item for item in classified_files if item.category == "complete_results"), None)
    if bundle is not None:
        _report(f"Processing {bundle.name}", state.files_processed, total_files)
        _merge_complete_results(bundle, state)

    for item in classified_files:
        if item is bundle:
            continue

        _report(f"Processing {item.name}", state.files_processed, total_files)
        try:
            _merge_file(item, state, resolved_decoders)
        except Exception as exc:
            state.warn(f"Failed to parse {item.name}: {exc}")
        state.files_processed += 1

    if state.video_file is None:
        raise MissingVideoError("No video file provided")

    _report("Extracting video metadata", state.files_processed, total_files + 1)
    video_info = probe(state.video_file, default_frame_rate)

    metadata = AnnotationMetadata(
        created=datetime.now(timezone.utc).isoformat(),
        version=format_version,
        pipelines=list(state.pipelines_found),
        source=source,
        processing_config=state.processing_config,
        processing_time=state.processing_time,
        total_duration=state.total_duration,
    )
    record = UnifiedAnnotationRecord(
        video_info=video_info,
        metadata=metadata,
        audio_file=state.audio_file,
        **{slot: values for slot, values in state.slots.items() if values},
    )

    _report("Merging complete", total_files + 1, total_files + 1)

    report = MergeReport(
        files_processed=state.files_processed,
        pipelines_found=list(state.pipelines_found),
        warnings=list(state.warnings),
        processing_time=round(perf_counter() - started_at, 6),
    )
    logger.info(
        "Merged %d file(s) for %s; pipelines=%s warnings=%d",
        state.files_processed,
        video_info.filename,
        report.pipelines_found,
        len(report.warnings),
    )
    return MergeResult(record=record, report=report)


def _merge_complete_results(bundle: ClassifiedFile, state: _MergeAccumulator) -> None:
    try:
        results = extract_complete_results(bundle.file)
    except Exception as exc:
        state.warn(f"Failed to parse complete results {bundle.name}: {exc}")
        return

    for slot in BUNDLE_PIPELINES:
        state.slots[slot] = list(getattr(results, slot))
        if state.slots[slot]:
            state.record_pipeline(slot)

    state.processing_config = results.config
    state.processing_time = results.processing_time
    state.total_duration = results.total_duration
    state.files_processed += 1


def _merge_file(item: ClassifiedFile, state: _MergeAccumulator, decoders: Mapping[str, Decoder]) -> None:
    category = item.category

    if category == "video":
        state.video_file = item.file
        return

    if category == "audio":
        state.audio_file = item.file
        return

    if category == "unknown":
        state.warn(f"Could not determine type of file: {item.name}")
        return

    if category == "complete_results":
        logger.debug("Skipping additional complete results file %s", item.name)
        return

    if category in BUNDLE_PIPELINES and state.slots[category]:
        logger.debug("Skipping %s; %s already populated", item.name, category)
        return

    state.slots[category] = list(decoders[category](item.file))
    state.record_pipeline(category)
