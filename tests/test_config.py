from __future__ import annotations

from pathlib import Path

import pytest

from annotation_merge.config import Settings, load_settings


def test_load_settings_reads_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "merge:\n  format_version: '1.2.0'\noutput:\n  output_dir: exports\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.merge.format_version == "1.2.0"
    assert settings.merge.source == "videoannotator"
    assert settings.output.output_dir == Path("exports")


def test_load_settings_applies_env_overrides(tmp_path: Path, monkeypatch) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("", encoding="utf-8")
    monkeypatch.setenv("ANNOTATION_MERGE_MERGE__DEFAULT_FRAME_RATE", "25")
    monkeypatch.setenv("ANNOTATION_MERGE_CLASSIFIER__MAX_WORKERS", "2")
    monkeypatch.setenv("ANNOTATION_MERGE_LOGGING__LEVEL", "DEBUG")
    monkeypatch.setenv("ANNOTATION_MERGE_UNKNOWN__KEY", "ignored")

    settings = load_settings(config_path)

    assert settings.merge.default_frame_rate == pytest.approx(25.0)
    assert settings.classifier.max_workers == 2
    assert settings.logging.level == "DEBUG"


def test_load_settings_uses_config_env_var(tmp_path: Path, monkeypatch) -> None:
    config_path = tmp_path / "alt.yaml"
    config_path.write_text("logging:\n  level: WARNING\n", encoding="utf-8")
    monkeypatch.setenv("ANNOTATION_MERGE_CONFIG", str(config_path))

    assert load_settings().logging.level == "WARNING"


def test_default_settings_match_shipped_config() -> None:
    shipped = load_settings(Path(__file__).resolve().parents[1] / "configs" / "default.yaml")

    assert shipped == Settings()
