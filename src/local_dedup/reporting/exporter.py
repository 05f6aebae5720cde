"""CSV and JSON export functionality."""

import csv
import json
from pathlib import Path

from ..common.logging import get_logger
from ..detector.models import ScanReport, display_path

logger = get_logger(__name__)


class ReportExporter:
    """Exports a scan report to CSV or JSON."""

    def export(self, report: ScanReport, output_path: Path, fmt: str) -> None:
        """Export in the given format ("csv" or "json")."""
        if fmt == "csv":
            self.export_csv(report, output_path)
        elif fmt == "json":
            self.export_json(report, output_path)
        else:
            raise ValueError(f"Invalid format: {fmt}. Must be 'csv' or 'json'")

    def export_csv(self, report: ScanReport, output_path: Path) -> None:
        """Export duplicate groups to CSV, one row per file.

        Args:
            report: Finished scan report
            output_path: Output file path
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)

            writer.writerow(["group_id", "size", "digest", "wasted_size", "path"])

            for group in report.groups:
                for path in group.paths:
                    writer.writerow([
                        group.group_id,
                        group.size,
                        group.hexdigest,
                        group.wasted_size,
                        display_path(path),
                    ])

        logger.info(f"Exported {len(report.groups)} groups to CSV: {output_path}")

    def export_json(self, report: ScanReport, output_path: Path) -> None:
        """Export duplicate groups and failures to JSON.

        Args:
            report: Finished scan report
            output_path: Output file path
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "files_scanned": report.files_scanned,
            "total_groups": len(report.groups),
            "total_files": report.duplicate_files,
            "total_wasted_space": report.total_wasted,
            "groups": [
                {
                    "group_id": group.group_id,
                    "size": group.size,
                    "digest": group.hexdigest,
                    "count": group.count,
                    "total_size": group.total_size,
                    "wasted_size": group.wasted_size,
                    "paths": [display_path(p) for p in group.paths],
                }
                for group in report.groups
            ],
            "hash_failures": [
                {"path": display_path(f.path), "reason": f.reason} for f in report.hash_failures
            ],
            "warnings": [
                {"path": display_path(w.path), "reason": w.reason} for w in report.warnings
            ],
        }

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        logger.info(f"Exported {len(report.groups)} groups to JSON: {output_path}")
