from __future__ import annotations

from annotation_merge.models import (
    PIPELINE_CATEGORIES,
    ClassifiedFile,
    FilesSummary,
    PipelineSummaryEntry,
    ValidationResult,
)


def validate_file_set(classified_files: list[ClassifiedFile]) -> ValidationResult:
    """Report which required inputs are missing from a classified batch."""

    categories = {item.category for item in classified_files}
    missing: list[str] = []
    suggestions: list[str] = []

    if "video" not in categories:
        missing.append("Video file")
        suggestions.append("Add a video file (.mp4, .webm, .avi, .mov)")

    if not categories.intersection(PIPELINE_CATEGORIES):
        missing.append("Pipeline data")
        suggestions.append(
            "Add at least one annotation file (.json for tracking/scenes, .vtt for speech, .rttm for speakers)"
        )

    return ValidationResult(is_valid=not missing, missing=missing, suggestions=suggestions)


def summarize_files(classified_files: list[ClassifiedFile]) -> FilesSummary:
    """Group a classified batch for display."""

    summary = FilesSummary()
    for item in classified_files:
        if item.category == "video":
            summary.video = item.name
        elif item.category == "audio":
            summary.audio = item.name
        elif item.category in PIPELINE_CATEGORIES:
            summary.pipelines.append(
                PipelineSummaryEntry(
                    name=item.pipeline or item.category,
                    file=item.name,
                    confidence=item.confidence,
                )
            )
        else:
            summary.unknown.append(item.name)
    return summary
