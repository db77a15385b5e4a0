"""
Module: cli

Purpose:
    Command-line front end. Keeps a working directory with the photo
    store and the last report settings, so a report can be built up over
    several invocations and exported at the end.

Commands:
    import FILE...              Import images (JPEG/PNG/WebP/HEIC)
    list                        Show photos in report order
    caption ID TEXT             Set a caption (truncated to 78 characters)
    rotate ID ANGLE             Set display rotation (0/90/180/270)
    move ID POSITION            Move a photo to a position
    remove ID                   Remove a photo
    clear                       Start a new report
    export                      Build the PDF

    ID may be a unique prefix of a photo id.

Dependencies:
    - argparse (std)

Used By:
    - photo-report console script
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from photo_report import __version__
from photo_report.collection import DirectoryPhotoStore, PhotoCollection
from photo_report.config import (
    ConfigError,
    ReportConfig,
    load_report_config,
    save_report_config,
)
from photo_report.controller import DocumentAssembler, confirmation_summary
from photo_report.core.errors import NotFoundError, PhotoReportError
from photo_report.core.models import format_case_id
from photo_report.core.validation import check_caption
from photo_report.images import ImportSource, PhotoImporter
from photo_report.logging_utils import configure_logging
from photo_report.output.sinks import FileSink

logger = logging.getLogger(__name__)

DEFAULT_WORKDIR = Path("photo_report_data")
PHOTOS_DIRNAME = "photos"
SETTINGS_FILENAME = "settings.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-report",
        description="Assemble annotated photos into a paginated PDF report",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--workdir", type=Path, default=DEFAULT_WORKDIR,
        help=f"Working directory for photos and settings (default: {DEFAULT_WORKDIR})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug output")
    parser.add_argument("--log-file", type=Path, help="Also write debug logs to this file")

    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Import image files")
    p_import.add_argument("files", nargs="+", type=Path)

    sub.add_parser("list", help="List photos in report order")

    p_caption = sub.add_parser("caption", help="Set a photo caption")
    p_caption.add_argument("photo_id")
    p_caption.add_argument("text")

    p_rotate = sub.add_parser("rotate", help="Set a photo's display rotation")
    p_rotate.add_argument("photo_id")
    p_rotate.add_argument("angle", type=int)

    p_move = sub.add_parser("move", help="Move a photo to a position")
    p_move.add_argument("photo_id")
    p_move.add_argument("position", type=int)

    p_remove = sub.add_parser("remove", help="Remove a photo")
    p_remove.add_argument("photo_id")

    sub.add_parser("clear", help="Remove all photos and settings")

    p_export = sub.add_parser("export", help="Generate the PDF report")
    p_export.add_argument("--case-id", help="Case identifier, e.g. AB1234/25")
    p_export.add_argument("--report-version", dest="report_version", help="Report version (1-5)")
    p_export.add_argument("--group", help="Group (1-5)")
    p_export.add_argument("--photos-per-page", type=int)
    p_export.add_argument("--logo", type=Path, dest="logo_path")
    p_export.add_argument("--output", type=Path, dest="output_dir", help="Output directory")
    p_export.add_argument("--yes", action="store_true", help="Skip the confirmation summary")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns a process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    workdir: Path = args.workdir
    collection = PhotoCollection(DirectoryPhotoStore(workdir / PHOTOS_DIRNAME))

    try:
        return _dispatch(args, collection, workdir)
    except (PhotoReportError, ConfigError) as e:
        logger.error(str(e))
        return 1


def _dispatch(args: argparse.Namespace, collection: PhotoCollection, workdir: Path) -> int:
    command = args.command

    if command == "import":
        report = _build_importer(workdir).import_into(
            collection, [ImportSource.from_path(path) for path in args.files]
        )
        for outcome in report.failed:
            logger.error(f"{outcome.name}: {outcome.error}")
        return 0 if report.all_ok else 1

    if command == "list":
        _print_photos(collection)
        return 0

    if command == "caption":
        checked = check_caption(args.text)
        if checked.warning:
            logger.warning(checked.warning)
        collection.set_caption(_resolve_id(collection, args.photo_id), checked.value)
        return 0

    if command == "rotate":
        collection.set_rotation(_resolve_id(collection, args.photo_id), args.angle)
        return 0

    if command == "move":
        collection.move(_resolve_id(collection, args.photo_id), args.position)
        return 0

    if command == "remove":
        collection.remove(_resolve_id(collection, args.photo_id, missing_ok=True))
        return 0

    if command == "clear":
        collection.clear()
        settings = workdir / SETTINGS_FILENAME
        if settings.exists():
            settings.unlink()
        return 0

    if command == "export":
        return _export(args, collection, workdir)

    raise ValueError(f"Unknown command: {command}")


def _export(args: argparse.Namespace, collection: PhotoCollection, workdir: Path) -> int:
    settings_path = workdir / SETTINGS_FILENAME
    overrides = {
        "case_id": format_case_id(args.case_id) if args.case_id else None,
        "version": args.report_version,
        "group": args.group,
        "photos_per_page": args.photos_per_page,
        "logo_path": args.logo_path,
        "output_dir": args.output_dir,
    }
    if settings_path.exists():
        config = load_report_config(settings_path, **overrides)
    else:
        config = ReportConfig.from_dict({}, **overrides)
    save_report_config(config, settings_path)

    if not args.yes:
        print(confirmation_summary(collection, config))

    sink = FileSink(config.output_dir or Path.cwd())
    result = DocumentAssembler.from_config(config, sink=sink).export(collection, config)
    print(result.location)
    return 0


def _build_importer(workdir: Path) -> PhotoImporter:
    """Importer using saved quality and worker settings, or defaults before the first export."""
    settings_path = workdir / SETTINGS_FILENAME
    if not settings_path.exists():
        return PhotoImporter()
    config = load_report_config(settings_path)
    return PhotoImporter(quality=config.import_quality, max_workers=config.max_workers)


def _resolve_id(collection: PhotoCollection, token: str, *, missing_ok: bool = False) -> str:
    """
    Resolve a full id or unique id prefix.

    Raises:
        NotFoundError: If nothing (or more than one photo) matches
    """
    if token in collection:
        return token
    matches = [p.id for p in collection if p.id.startswith(token)]
    if len(matches) == 1:
        return matches[0]
    if not matches and missing_ok:
        return token
    if matches:
        raise NotFoundError(f"Ambiguous photo id prefix: {token}")
    raise NotFoundError(f"Photo not found: {token}")


def _print_photos(collection: PhotoCollection) -> None:
    photos = collection.list_photos()
    if not photos:
        print("No photos")
        return
    for photo in photos:
        caption = photo.caption or "-"
        print(f"{photo.position:>3}  {photo.id[:8]}  {photo.rotation:>3}°  {caption}")


if __name__ == "__main__":
    sys.exit(main())
