"""
Module: config

Purpose:
    Configuration dataclass for report export. Immutable configuration
    with validation on construction, plus JSON settings loading.

Key Classes:
    - ReportConfig: Main configuration for exporting a report
    - ConfigError: Settings file could not be used

Key Functions:
    - load_report_config(): Read a ReportConfig from a JSON file

Dependencies:
    - dataclasses (std)
    - json (std)

Used By:
    - controller: DocumentAssembler.export()
    - cli: Argument and settings handling
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from photo_report.core.models import CaseId, parse_case_id
from photo_report.core.validation import check_choice, raise_for
from photo_report.images.transform import EXPORT_QUALITY, IMPORT_QUALITY
from photo_report.layout.config import DEFAULT_PHOTOS_PER_PAGE

logger = logging.getLogger(__name__)

VERSION_CHOICES: Tuple[str, ...] = ("1", "2", "3", "4", "5")
GROUP_CHOICES: Tuple[str, ...] = ("1", "2", "3", "4", "5")


class ConfigError(ValueError):
    """Settings file missing, unreadable or invalid."""


@dataclass(frozen=True)
class ReportConfig:
    """
    Configuration for exporting a report (immutable).

    Attributes:
        case_id: Case identifier, AA0000/00 (normalised to upper case)
        version: Report version ("1".."5")
        group: Field team group ("1".."5")
        photos_per_page: Photo blocks per page
        import_quality: JPEG quality of the one import compression
        export_quality: JPEG quality of rotated display images
        max_workers: Threads used to resolve display images
        output_dir: Directory for FileSink output
        logo_path: Optional logo image for the header

    Example:
        >>> config = ReportConfig(case_id="ab1234/25", version="1", group="2")
        >>> config.case_id
        'AB1234/25'
    """

    # Required
    case_id: str
    version: str
    group: str

    # Layout
    photos_per_page: int = DEFAULT_PHOTOS_PER_PAGE

    # Image quality
    import_quality: float = IMPORT_QUALITY
    export_quality: float = EXPORT_QUALITY

    # Export
    max_workers: int = 4
    output_dir: Optional[Path] = None
    logo_path: Optional[Path] = None

    # Allowed selections; empty tuple disables the check
    version_choices: Tuple[str, ...] = field(default=VERSION_CHOICES, repr=False)
    group_choices: Tuple[str, ...] = field(default=GROUP_CHOICES, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        object.__setattr__(self, "case_id", str(parse_case_id(self.case_id)))
        object.__setattr__(self, "version", str(self.version).strip())
        object.__setattr__(self, "group", str(self.group).strip())

        raise_for(check_choice("version", self.version, self.version_choices))
        raise_for(check_choice("group", self.group, self.group_choices))
        if self.photos_per_page < 1:
            raise ValueError(f"photos_per_page must be >= 1: {self.photos_per_page}")
        for name in ("import_quality", "export_quality"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1]: {value}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1: {self.max_workers}")

    @property
    def parsed_case_id(self) -> CaseId:
        return parse_case_id(self.case_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], **overrides: Any) -> "ReportConfig":
        """
        Build a config from a settings dictionary.

        Unknown keys are ignored with a debug message; overrides win over
        values in data. Path-valued keys are converted to Path.

        Raises:
            ConfigError: If required keys are missing or values are invalid
        """
        known = {f.name for f in fields(cls)}
        merged = {k: v for k, v in data.items() if k in known}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.debug(f"Ignoring unknown settings keys: {unknown}")
        merged.update({k: v for k, v in overrides.items() if v is not None})

        for key in ("output_dir", "logo_path"):
            if merged.get(key):
                merged[key] = Path(merged[key])
        for key in ("version_choices", "group_choices"):
            if key in merged:
                merged[key] = tuple(str(v) for v in merged[key])

        missing = [k for k in ("case_id", "version", "group") if not merged.get(k)]
        if missing:
            raise ConfigError(f"Missing required settings: {missing}")
        try:
            return cls(**merged)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid settings: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "case_id": self.case_id,
            "version": self.version,
            "group": self.group,
            "photos_per_page": self.photos_per_page,
            "import_quality": self.import_quality,
            "export_quality": self.export_quality,
            "max_workers": self.max_workers,
            "output_dir": str(self.output_dir) if self.output_dir else None,
            "logo_path": str(self.logo_path) if self.logo_path else None,
        }


def load_report_config(path: Path, **overrides: Any) -> ReportConfig:
    """
    Load a ReportConfig from a JSON settings file.

    Args:
        path: Settings file path
        **overrides: Values that take precedence over the file

    Raises:
        ConfigError: If the file cannot be read or parsed, or is invalid
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read settings {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Settings must be a JSON object: {path}")
    return ReportConfig.from_dict(data, **overrides)


def save_report_config(config: ReportConfig, path: Path) -> None:
    """Write config to a JSON settings file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug(f"Saved settings to {path}")
