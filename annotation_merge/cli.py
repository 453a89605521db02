from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer

from annotation_merge.classify.classifier import classify_files
from annotation_merge.classify.validation import summarize_files, validate_file_set
from annotation_merge.config import Settings, load_settings
from annotation_merge.exporter import (
    classified_files_payload,
    export_classification_csv,
    export_merge_result,
)
from annotation_merge.ingest.files import AnnotationFile
from annotation_merge.logging_config import configure_logging
from annotation_merge.merger import merge_annotation_files

app = typer.Typer(help="Classify and merge video annotation pipeline outputs.")
config_app = typer.Typer(help="Configuration commands.")

app.add_typer(config_app, name="config")

logger = logging.getLogger(__name__)

CONFIG_OPTION_HELP = "Path to YAML configuration file."


def _bootstrap(config_path: Path, verbose: bool = False) -> Settings:
    settings = load_settings(config_path)
    configure_logging(settings.logging, verbose=verbose)
    logger.debug("Loaded runtime settings from %s", config_path)
    return settings


def _echo_progress(stage: str, completed: int, total: int) -> None:
    typer.echo(f"[{completed}/{total}] {stage}...", err=True)


@config_app.command("show")
def show_config(
    config_path: Path = typer.Option(
        Path("configs/default.yaml"),
        "--config",
        "-c",
        envvar="ANNOTATION_MERGE_CONFIG",
        help=CONFIG_OPTION_HELP,
    )
) -> None:
    """Print resolved runtime configuration."""

    settings = _bootstrap(config_path)
    typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))


@app.command("classify")
def classify(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Files to classify."),
    config_path: Path = typer.Option(
        Path("configs/default.yaml"),
        "--config",
        "-c",
        envvar="ANNOTATION_MERGE_CONFIG",
        help=CONFIG_OPTION_HELP,
    ),
    csv_path: Path | None = typer.Option(None, "--csv", help="Optional CSV review sheet output path."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Detect the type of each file and report completeness of the batch."""

    settings = _bootstrap(config_path, verbose)
    classified = classify_files(
        [AnnotationFile.from_path(path) for path in files],
        max_workers=settings.classifier.max_workers,
    )

    payload: dict[str, Any] = {
        "files": classified_files_payload(classified),
        "validation": validate_file_set(classified).to_dict(),
        "summary": summarize_files(classified).to_dict(),
    }
    if csv_path is not None:
        payload["csv"] = str(export_classification_csv(classified, csv_path))

    typer.echo(json.dumps(payload, indent=2))


@app.command("merge")
def merge(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Video and annotation files."),
    config_path: Path = typer.Option(
        Path("configs/default.yaml"),
        "--config",
        "-c",
        envvar="ANNOTATION_MERGE_CONFIG",
        help=CONFIG_OPTION_HELP,
    ),
    output_dir: Path | None = typer.Option(None, "--output-dir", "-o", help="Directory for record/report JSON."),
    basename: str | None = typer.Option(None, help="Base filename for exported artifacts. Defaults to the video stem."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Classify files and merge them into one unified annotation record."""

    settings = _bootstrap(config_path, verbose)

    try:
        classified = classify_files(
            [AnnotationFile.from_path(path) for path in files],
            max_workers=settings.classifier.max_workers,
        )
        validation = validate_file_set(classified)
        for missing, suggestion in zip(validation.missing, validation.suggestions):
            logger.warning("Missing %s: %s", missing.lower(), suggestion)

        result = merge_annotation_files(
            classified,
            on_progress=_echo_progress,
            format_version=settings.merge.format_version,
            source=settings.merge.source,
            default_frame_rate=settings.merge.default_frame_rate,
        )
        resolved_basename = basename or f"{Path(result.record.video_info.filename).stem}_annotations"
        exported = export_merge_result(
            result,
            output_dir or settings.output.output_dir,
            basename=resolved_basename,
        )
    except (RuntimeError, ValueError) as exc:
        logger.error("Merge failed: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        json.dumps(
            {
                "status": "partial" if result.report.warnings else "ok",
                "video": result.record.video_info.filename,
                "files_processed": result.report.files_processed,
                "pipelines_found": result.report.pipelines_found,
                "warnings": result.report.warnings,
                "outputs": {key: str(path) for key, path in exported.items()},
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    app()
