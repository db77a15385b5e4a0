"""Top-level package for the photo report builder.

Provides subpackages:
- photo_report.core – data models, errors and input validation
- photo_report.images – import pipeline, HEIC conversion, rotation
- photo_report.collection – ordered photo collection and stores
- photo_report.layout – pagination into page plans
- photo_report.output – PDF rendering, assets and delivery sinks
"""


def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text(encoding="utf-8")
        except OSError:
            content = ""
        for line in content.splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("photo-report")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
