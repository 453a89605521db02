from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from annotation_merge.models import ClassifiedFile, MergeResult


def export_merge_result(
    result: MergeResult,
    output_dir: str | Path,
    *,
    basename: str = "annotations",
) -> dict[str, Path]:
    """Write the unified record and its merge report as JSON files."""

    resolved_output_dir = Path(output_dir)
    resolved_output_dir.mkdir(parents=True, exist_ok=True)

    record_path = resolved_output_dir / f"{basename}.json"
    report_path = resolved_output_dir / f"{basename}_report.json"

    record_path.write_text(
        json.dumps(result.record.to_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    report_path.write_text(
        json.dumps(result.report.to_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

    return {
        "record": record_path,
        "report": report_path,
    }


def export_classification_csv(classified_files: list[ClassifiedFile], output_path: str | Path) -> Path:
    """Write a review sheet of classified files with coarse confidence labels."""

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fields = ["file", "category", "pipeline", "confidence", "confidence_label"]
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fields)
        writer.writeheader()
        for item in classified_files:
            writer.writerow(
                {
                    "file": item.name,
                    "category": item.category,
                    "pipeline": item.pipeline or "",
                    "confidence": f"{item.confidence:.2f}",
                    "confidence_label": confidence_label(item.confidence),
                }
            )

    return path


def classified_files_payload(classified_files: list[ClassifiedFile]) -> list[dict[str, Any]]:
    return [
        {
            "file": item.name,
            "path": str(item.file.path),
            "mime_type": item.file.mime_type,
            "category": item.category,
            "pipeline": item.pipeline,
            "confidence": item.confidence,
            "confidence_label": confidence_label(item.confidence),
        }
        for item in classified_files
    ]


def load_record(path: str | Path) -> dict[str, Any]:
    """Load an exported annotation record for downstream tooling."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Annotation record must be a JSON object.")
    if "video_info" not in payload:
        raise ValueError("Annotation record is missing video_info.")
    return payload


def confidence_label(confidence: float) -> str:
    if confidence >= 0.8:
        return "high"
    if confidence >= 0.5:
        return "medium"
    return "low"
