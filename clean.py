import json
import logging
import shutil
from pathlib import Path
from typing import Optional

from utils import iso_now


def _remove(path: Path):
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def create_backup(items, backup_dir: Path, report: dict):
    if backup_dir.exists():
        shutil.rmtree(backup_dir)
    backup_dir.mkdir(parents=True)
    for item in items:
        try:
            if item.is_dir():
                shutil.copytree(item, backup_dir / item.name)
            else:
                shutil.copy2(item, backup_dir / item.name)
        except OSError as e:
            report["errors"].append({"type": "backup", "item": item.name, "error": str(e)})
            continue
        report["backed_up"].append(item.name)


def clean_dist(dist_dir: Path, backup_dir: Optional[Path] = None, report_path: Optional[Path] = None) -> dict:
    """Empty *dist_dir*, optionally copying its contents to *backup_dir* first.

    Entries that cannot be removed are recorded in the report rather than raised.
    """
    report = {"timestamp": iso_now(), "cleaned": [], "backed_up": [], "errors": [], "summary": {}}

    items = sorted(dist_dir.iterdir()) if dist_dir.is_dir() else []
    if not items:
        logging.info(f"{dist_dir} is empty or missing - nothing to clean")

    if backup_dir is not None and items:
        create_backup(items, backup_dir, report)
        logging.info(f"Backed up {len(report['backed_up'])} items to {backup_dir}")

    for item in items:
        try:
            _remove(item)
        except OSError as e:
            logging.error(f"Failed to remove {item.name}: {e}")
            report["errors"].append({"type": "cleanup", "item": item.name, "error": str(e)})
            continue
        report["cleaned"].append(item.name)
        logging.debug(f"Removed {item.name}")

    remaining = len(list(dist_dir.iterdir())) if dist_dir.is_dir() else 0
    report["summary"] = {
        "items_scanned": len(items),
        "items_cleaned": len(report["cleaned"]),
        "items_backed_up": len(report["backed_up"]),
        "items_remaining": remaining,
        "errors_count": len(report["errors"]),
        "backup_location": str(backup_dir) if backup_dir is not None else None,
    }
    if report_path is not None:
        report_path.write_text(json.dumps(report, indent=2) + "\n", encoding="utf-8")

    logging.info(
        f"Cleaned {len(report['cleaned'])} items, {len(report['errors'])} errors, {remaining} remaining"
    )
    return report
