from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from annotation_merge.ingest.files import AnnotationFile

FileCategory = Literal[
    "video",
    "audio",
    "person_tracking",
    "speech_recognition",
    "speaker_diarization",
    "scene_detection",
    "face_analysis",
    "complete_results",
    "unknown",
]

PIPELINE_CATEGORIES: tuple[str, ...] = (
    "person_tracking",
    "speech_recognition",
    "speaker_diarization",
    "scene_detection",
    "face_analysis",
    "complete_results",
)

PIPELINE_SLOTS: tuple[str, ...] = (
    "person_tracking",
    "speech_recognition",
    "speaker_diarization",
    "scene_detection",
    "face_analysis",
)


@dataclass(frozen=True, slots=True)
class ClassifiedFile:
    """One input file with its detected category and heuristic confidence."""

    file: AnnotationFile
    category: FileCategory
    confidence: float
    pipeline: str | None = None

    @property
    def name(self) -> str:
        return self.file.name


@dataclass(slots=True)
class VideoInfo:
    filename: str
    duration: float
    width: int
    height: int
    frame_rate: float


@dataclass(slots=True)
class AnnotationMetadata:
    """Provenance block written alongside merged pipeline payloads."""

    created: str
    version: str
    pipelines: list[str]
    source: str
    processing_config: dict[str, Any] | None = None
    processing_time: float | None = None
    total_duration: float | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        for key in ("processing_config", "processing_time", "total_duration"):
            if payload[key] is None:
                del payload[key]
        return payload


@dataclass(slots=True)
class UnifiedAnnotationRecord:
    """Merged annotation record for a single video.

    Pipeline slots are ``None`` when the pipeline did not run; they are never
    empty lists.
    """

    video_info: VideoInfo
    metadata: AnnotationMetadata
    person_tracking: list[dict[str, Any]] | None = None
    speech_recognition: list[dict[str, Any]] | None = None
    speaker_diarization: list[dict[str, Any]] | None = None
    scene_detection: list[dict[str, Any]] | None = None
    face_analysis: list[dict[str, Any]] | None = None
    audio_file: AnnotationFile | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "video_info": asdict(self.video_info),
            "metadata": self.metadata.to_dict(),
        }
        for slot in PIPELINE_SLOTS:
            values = getattr(self, slot)
            if values:
                payload[slot] = values
        if self.audio_file is not None:
            payload["audio_file"] = self.audio_file.name
        return payload


@dataclass(slots=True)
class MergeReport:
    files_processed: int
    pipelines_found: list[str]
    warnings: list[str]
    processing_time: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class MergeResult:
    record: UnifiedAnnotationRecord
    report: MergeReport


@dataclass(slots=True)
class CompleteResults:
    """Pipeline payloads and run metadata pulled from a complete-results bundle."""

    person_tracking: list[dict[str, Any]]
    face_analysis: list[dict[str, Any]]
    scene_detection: list[dict[str, Any]]
    config: dict[str, Any] | None
    processing_time: float
    total_duration: float | None


@dataclass(slots=True)
class ValidationResult:
    is_valid: bool
    missing: list[str]
    suggestions: list[str]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class PipelineSummaryEntry:
    name: str
    file: str
    confidence: float


@dataclass(slots=True)
class FilesSummary:
    video: str | None = None
    audio: str | None = None
    pipelines: list[PipelineSummaryEntry] = field(default_factory=list)
    unknown: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
