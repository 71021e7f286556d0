"""Tests for scan configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from receiptlens.runtime.config import MB, ScanConfig, load_scan_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("RECEIPTLENS_CONFIG", "RECEIPTLENS_OCR_ENGINE", "RECEIPTLENS_OCR_URL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = load_scan_config()

    assert config == ScanConfig()
    assert config.max_file_size_bytes == 50 * MB
    assert config.max_ocr_pages == 10
    assert config.ocr_engine == "tesseract"
    assert config.fallback_to_today is True


def test_toml_tables_are_applied(tmp_path: Path) -> None:
    path = tmp_path / "receiptlens.toml"
    path.write_text(
        """
[document]
max_file_size_mb = 5
render_dpi = 200

[ocr]
engine = "service"
url = "http://ocr.internal:9000"
timeout = 15

[extraction]
fallback_to_today = false
known_merchants = ["Walmart", "Best Buy"]
""",
        encoding="utf-8",
    )

    config = load_scan_config(path)

    assert config.max_file_size_bytes == 5 * MB
    assert config.render_dpi == 200
    assert config.ocr_engine == "service"
    assert config.ocr_url == "http://ocr.internal:9000"
    assert config.ocr_timeout == 15.0
    assert config.fallback_to_today is False
    assert config.known_merchants == ("Walmart", "Best Buy")


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "env.toml"
    path.write_text("[document]\nmax_ocr_pages = 3\n", encoding="utf-8")
    monkeypatch.setenv("RECEIPTLENS_CONFIG", str(path))

    assert load_scan_config().max_ocr_pages == 3


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "receiptlens.toml"
    path.write_text('[ocr]\nengine = "tesseract"\nurl = "http://file:1"\n', encoding="utf-8")
    monkeypatch.setenv("RECEIPTLENS_OCR_ENGINE", "service")
    monkeypatch.setenv("RECEIPTLENS_OCR_URL", "http://env:2")

    config = load_scan_config(path)

    assert config.ocr_engine == "service"
    assert config.ocr_url == "http://env:2"


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    assert load_scan_config(tmp_path / "absent.toml") == ScanConfig()


def test_unknown_engine_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown OCR engine"):
        ScanConfig(ocr_engine="magic")
