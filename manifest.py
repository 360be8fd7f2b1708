"""Optimize SVG sources in place and regenerate the icons.json manifest."""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple

from lxml import etree
from tqdm import tqdm

from svg import cleanup_svg
from utils import Icon, iso_now, list_svg_files, to_iso

MANIFEST_VERSION = "1.0.0"

# Checked in order; the first match wins, so automotive terms take priority
# over the generic UI ones.
CATEGORY_RULES = [
    ("automotive", r"battery|charging|fuel|engine|brake|oil|tyre|wheel"),
    ("remote-control", r"remote|control|key|unlock|lock"),
    ("climate", r"climate|heating|cooling|temperature"),
    ("navigation", r"navigation|map|location|gps|direction"),
    ("entertainment", r"entertainment|music|radio|audio|video"),
    ("navigation-ui", r"arrow|up|down|left|right|back|forward"),
    ("actions", r"plus|minus|add|remove|delete|trash"),
    ("status", r"info|alert|warning|error|success|tick|cross"),
    ("settings", r"settings|gear|config|options"),
    ("interface", r"search|filter|sort|view"),
    ("communication", r"phone|email|message|contact|social"),
    ("time", r"calendar|clock|time|date"),
    ("places", r"home|house|building|location"),
    ("users", r"user|person|profile|account"),
    ("files", r"document|file|pdf|download|upload"),
    ("finance", r"payment|money|price|cost|dollar|gbp|yen"),
]
CATEGORY_RES = [(name, re.compile(pattern)) for name, pattern in CATEGORY_RULES]
DEFAULT_CATEGORY = "general"


def get_category(filename: str) -> str:
    name = filename.lower()
    for category, pattern in CATEGORY_RES:
        if pattern.search(name):
            return category
    return DEFAULT_CATEGORY


def get_tags(filename: str) -> List[str]:
    base = filename.replace(".svg", "", 1)
    tags = [t for t in re.split(r"[-_\s]+", base) if t]
    category = get_category(filename)
    if category not in tags:
        tags.append(category)
    return tags


def _relative_name(path: Path, svg_dir: Path) -> str:
    return path.relative_to(svg_dir).as_posix()


def optimize_icons(svg_dir: Path) -> Tuple[List[Path], dict]:
    """Run the SVG cleanup over every source file, rewriting them in place."""
    files = list_svg_files(svg_dir, recursive=True)

    total_original = 0
    total_optimized = 0
    stats = {
        "totalFiles": len(files),
        "categories": {},
        "sizeSavings": 0,
        "avgOptimization": "0",
    }

    logging.info(f"Optimizing {len(files)} SVG files...")
    for path in tqdm(files, desc="Optimizing SVGs", unit=" files"):
        original_size = path.stat().st_size
        try:
            cleanup_svg(path, path)
        except (etree.XMLSyntaxError, OSError) as e:
            logging.error(f"{path}: Could not optimize ({e})")
        optimized_size = path.stat().st_size

        savings = original_size - optimized_size
        total_original += original_size
        total_optimized += optimized_size

        filename = _relative_name(path, svg_dir)
        category = get_category(filename)
        entry = stats["categories"].setdefault(category, {"count": 0, "savings": 0})
        entry["count"] += 1
        entry["savings"] += savings

        percent = (savings / original_size * 100) if original_size else 0
        logging.debug(f"{filename} | {original_size}B -> {optimized_size}B | -{percent:.1f}%")

    stats["sizeSavings"] = total_original - total_optimized
    if total_original:
        stats["avgOptimization"] = f"{stats['sizeSavings'] / total_original * 100:.1f}"

    logging.info(
        f"Optimized {stats['totalFiles']} files: "
        f"{total_original / 1024:.1f}KB -> {total_optimized / 1024:.1f}KB, "
        f"saved {stats['sizeSavings'] / 1024:.1f}KB ({stats['avgOptimization']}%) "
        f"across {len(stats['categories'])} categories"
    )
    return files, stats


def load_existing_tags(manifest_path: Path) -> Dict[str, List[str]]:
    """Tags from a previous manifest, keyed by filename.

    Accepts both the old flat-list layout and the current {metadata, icons} one.
    An empty list is a curated choice and is kept.
    """
    if not manifest_path.exists():
        return {}
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except ValueError:
        logging.warning("Could not parse existing manifest, starting fresh.")
        return {}

    entries = data.get("icons", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        logging.warning("Unexpected manifest layout, starting fresh.")
        return {}
    return {
        e["filename"]: e["tags"]
        for e in entries
        if isinstance(e, dict) and "filename" in e and isinstance(e.get("tags"), list)
    }


def build_icons(files: List[Path], svg_dir: Path, existing_tags: Dict[str, List[str]]) -> List[Icon]:
    icons = []
    for path in files:
        filename = _relative_name(path, svg_dir)
        stat = path.stat()
        icons.append(
            Icon(
                name=path.stem,
                filename=filename,
                category=get_category(filename),
                tags=existing_tags[filename] if filename in existing_tags else get_tags(filename),
                size=stat.st_size,
                last_modified=to_iso(datetime.fromtimestamp(stat.st_mtime).astimezone()),
            )
        )
    return sorted(icons, key=lambda i: (i.name.lower(), i.name))


def update_manifest(files: List[Path], stats: dict, svg_dir: Path, manifest_path: Path) -> dict:
    icons = build_icons(files, svg_dir, load_existing_tags(manifest_path))
    manifest = {
        "metadata": {
            "version": MANIFEST_VERSION,
            "generated": iso_now(),
            "totalIcons": len(icons),
            "categories": sorted(stats["categories"]),
            "stats": stats,
        },
        "icons": [i.to_json() for i in icons],
    }
    manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    logging.info(f"{manifest_path.name} updated with {len(icons)} icons.")

    for category, data in sorted(stats["categories"].items(), key=lambda kv: -kv[1]["count"]):
        logging.info(f"  {category}: {data['count']} icons ({data['savings'] / 1024:.1f}KB saved)")
    return manifest
