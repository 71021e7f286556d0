"""Runtime configuration for the scan pipeline.

Settings come from built-in defaults, an optional TOML file and a few
environment variables, in increasing order of precedence:

    [document]
    max_file_size_mb = 50
    max_ocr_pages = 10
    render_dpi = 144

    [ocr]
    engine = "tesseract"        # or "service"
    url = "http://localhost:8001"
    language = "eng"
    timeout = 60

    [extraction]
    fallback_to_today = true
    known_merchants = ["Walmart", "Best Buy"]

Environment variables:
    RECEIPTLENS_CONFIG: TOML path used when none is passed explicitly
    RECEIPTLENS_OCR_ENGINE, RECEIPTLENS_OCR_URL: override the [ocr] table
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from receiptlens.runtime.logging import get_logger

logger = get_logger(__name__)

MB = 1024 * 1024
OCR_ENGINES = ("tesseract", "service")


@dataclass(frozen=True)
class ScanConfig:
    """Settings shared by document acquisition, OCR and field extraction."""

    max_file_size_bytes: int = 50 * MB
    max_ocr_pages: int = 10
    render_dpi: int = 144
    ocr_engine: str = "tesseract"
    ocr_url: str = "http://localhost:8001"
    ocr_language: str = "eng"
    ocr_timeout: float = 60.0
    fallback_to_today: bool = True
    known_merchants: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.ocr_engine not in OCR_ENGINES:
            raise ValueError(f"Unknown OCR engine {self.ocr_engine!r}; expected one of {', '.join(OCR_ENGINES)}")
        if self.max_file_size_bytes <= 0:
            raise ValueError("max_file_size_bytes must be positive")
        if self.max_ocr_pages <= 0:
            raise ValueError("max_ocr_pages must be positive")
        if self.render_dpi <= 0:
            raise ValueError("render_dpi must be positive")


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    with open(path, "rb") as f:
        return tomllib.load(f)


def _from_tables(data: dict[str, Any]) -> dict[str, Any]:
    document = data.get("document", {})
    ocr = data.get("ocr", {})
    extraction = data.get("extraction", {})

    values: dict[str, Any] = {}
    if "max_file_size_mb" in document:
        values["max_file_size_bytes"] = int(float(document["max_file_size_mb"]) * MB)
    if "max_ocr_pages" in document:
        values["max_ocr_pages"] = int(document["max_ocr_pages"])
    if "render_dpi" in document:
        values["render_dpi"] = int(document["render_dpi"])
    if "engine" in ocr:
        values["ocr_engine"] = str(ocr["engine"]).lower()
    if "url" in ocr:
        values["ocr_url"] = str(ocr["url"])
    if "language" in ocr:
        values["ocr_language"] = str(ocr["language"])
    if "timeout" in ocr:
        values["ocr_timeout"] = float(ocr["timeout"])
    if "fallback_to_today" in extraction:
        values["fallback_to_today"] = bool(extraction["fallback_to_today"])
    if "known_merchants" in extraction:
        values["known_merchants"] = tuple(str(m) for m in extraction["known_merchants"])
    return values


def load_scan_config(path: str | Path | None = None) -> ScanConfig:
    """
    Load scan settings.

    Args:
        path: Optional TOML path. If None, uses RECEIPTLENS_CONFIG when set.

    Returns:
        ScanConfig with file values and environment overrides applied.
        A missing file yields the defaults.
    """
    if path is None:
        env_path = os.environ.get("RECEIPTLENS_CONFIG", "").strip()
        path = env_path or None

    config = ScanConfig()
    if path is not None:
        config_path = Path(path).expanduser()
        if config_path.exists():
            config = replace(config, **_from_tables(_read_toml(config_path)))
            logger.debug("Loaded scan config from %s", config_path)
        else:
            logger.warning("Config file not found: %s", config_path)

    overrides: dict[str, Any] = {}
    env_engine = os.environ.get("RECEIPTLENS_OCR_ENGINE", "").strip().lower()
    if env_engine:
        overrides["ocr_engine"] = env_engine
    env_url = os.environ.get("RECEIPTLENS_OCR_URL", "").strip()
    if env_url:
        overrides["ocr_url"] = env_url
    if overrides:
        config = replace(config, **overrides)
    return config
