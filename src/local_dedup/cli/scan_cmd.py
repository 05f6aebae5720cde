"""Scan command."""

import time
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from humanize import naturalsize

from ..common.constants import APP_NAME
from ..common.exceptions import ConfigError, DetectionError
from ..config.settings import ScanOptions, get_settings
from ..detector.models import DigestAlgorithm, ScanReport, display_path
from ..detector.pipeline import DetectionPipeline
from ..reporting.exporter import ReportExporter
from .formatters import (
    create_progress,
    create_spinner,
    print_error,
    print_plain,
    print_success,
    print_warning,
)


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


def scan(
    directory: Path = typer.Argument(
        Path("./"), help="Directory to scan for duplicates"
    ),
    recursive: bool = typer.Option(
        False, "--recursive", "-r", help="Recursively search directory"
    ),
    exclude_dots: bool = typer.Option(
        False,
        "--exclude-dots",
        "-e",
        help="Exclude files and directories that begin with '.'",
    ),
    name_filter: Optional[str] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Only include files whose names match this regular expression",
    ),
    follow_symlinks: bool = typer.Option(
        False,
        "--follow-symlinks",
        "-l",
        help="Follow symlinks, by default symbolic links are ignored",
    ),
    algorithm: Optional[DigestAlgorithm] = typer.Option(
        None,
        "--algorithm",
        "-a",
        help="Digest algorithm: sha256 (default) or xxh64 (faster, weaker)",
    ),
    fast: bool = typer.Option(
        False,
        "--fast",
        "-5",
        help="Shortcut for --algorithm xxh64, faster but with a higher collision risk",
    ),
    max_size: Optional[int] = typer.Option(
        None, "--max", "-M", min=0, help="Maximum file size in bytes"
    ),
    min_size: Optional[int] = typer.Option(
        None, "--min", "-m", min=0, help="Minimum file size in bytes"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-j", min=1, help="Hashing threads (default: CPU count)"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Abort on the first file that cannot be read"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Hide progress information"
    ),
    separator: str = typer.Option(
        "\n", "--separator", "-1", help="String to separate duplicate file paths with"
    ),
    show_time: bool = typer.Option(
        False, "--time", "-t", help="Show total execution time"
    ),
    size: bool = typer.Option(
        False, "--size", "-s", help="Show the space wasted by each group"
    ),
    total_size: bool = typer.Option(
        False, "--total-size", "-S", help="Show the total space wasted"
    ),
    details: bool = typer.Option(
        False, "--details", "-d", help="Show all details, same as -sSt"
    ),
    export: Optional[Path] = typer.Option(
        None, "--export", help="Also write the report to this file"
    ),
    export_format: ExportFormat = typer.Option(
        ExportFormat.JSON, "--export-format", help="Export format: csv or json"
    ),
) -> None:
    """Scan a directory for groups of identical files."""
    started = time.perf_counter()
    settings = get_settings()

    try:
        options = ScanOptions.build(
            settings,
            root=directory,
            recursive=recursive,
            exclude_dots=exclude_dots,
            name_filter=name_filter,
            follow_symlinks=follow_symlinks,
            algorithm=DigestAlgorithm.XXH64 if fast else algorithm,
            min_size=min_size,
            max_size=max_size,
            workers=workers,
            strict=strict or None,
        )
        pipeline = DetectionPipeline(options)

        with create_spinner(quiet) as spinner:
            spinner.add_task("[1/2] Scanning files", total=None)
            traversal = pipeline.collect_candidates()

        with create_progress(quiet) as progress:
            task = progress.add_task(
                "[2/2] Finding duplicates", total=len(traversal.candidates)
            )
            report = pipeline.find_duplicates(
                traversal, progress=lambda _candidate: progress.advance(task)
            )

    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except DetectionError as e:
        print_error(f"Detection failed: {e}")
        raise typer.Exit(1)

    if report.is_empty:
        print_plain(f"No files to scan, {APP_NAME} will now exit")
        _print_problems(report, quiet)
        return

    _print_groups(report, separator, show_sizes=size or details)

    if show_time or details:
        print_plain(f"Took {time.perf_counter() - started:.2f}s to complete")
    if total_size or details:
        print_plain(f"{naturalsize(report.total_wasted)} total wasted space")

    _print_problems(report, quiet)

    if export is not None:
        try:
            ReportExporter().export(report, export, export_format.value)
        except OSError as e:
            print_error(f"Report export failed: {e}")
            raise typer.Exit(1)
        print_success(f"Exported report to: {export}")


def _print_groups(report: ScanReport, separator: str, show_sizes: bool) -> None:
    print_plain("")
    for group in report.groups:
        print_plain(separator.join(display_path(p) for p in group.paths))
        if show_sizes:
            print_plain(f"^ {naturalsize(group.wasted_size)} of wasted space")
        print_plain("")


def _print_problems(report: ScanReport, quiet: bool) -> None:
    if quiet:
        return
    if report.warnings:
        print_warning(f"{len(report.warnings)} entries could not be inspected and were skipped")
    if report.hash_failures:
        print_warning(f"{len(report.hash_failures)} files could not be read and were skipped")
