"""Checks over SVG sources and the generated distribution."""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from svg import DEFAULT_VIEWBOX, render_icon
from utils import RESERVED_WORDS, get_svg_name, iso_now, list_svg_files, to_camel_case

STROKE_RE = re.compile(r'\bstroke\s*=|stroke-width\s*=|style\s*="[^"]*stroke\s*:', re.IGNORECASE)
DISALLOWED_FILL_RE = re.compile(r'\bfill\s*="(?!none\b)[^"]+"', re.IGNORECASE)
PAINT_RE = re.compile(r"<(linearGradient|radialGradient|pattern)\b", re.IGNORECASE)

PATH_RE = re.compile(r"<path\b[^>]*>", re.IGNORECASE)
INVALID_STROKE_RE = re.compile(r'\bstroke="(?!none\b)[^"]*"', re.IGNORECASE)
STROKE_WIDTH_RE = re.compile(r'\bstroke-width\s*=\s*"[^"]*"', re.IGNORECASE)
PATH_FILL_RE = re.compile(r'<path\b[^>]*\bfill="([^"]+)"[^>]*>', re.IGNORECASE)

# Pieces of a generated function module that carry the icon itself
MODULE_VIEWBOX_RE = re.compile(r'viewBox="([^"$]*)"')
MODULE_INNER_RE = re.compile(r"\$\{titleElement\}([\s\S]*)</svg>`;")

BUILD_TARGETS = [
    ("icons/esm", "ES Module icon functions", True),
    ("icons/cjs", "CommonJS icon functions", True),
    ("react", "React components", False),
    ("sprite", "SVG sprite", False),
    ("bundles", "Icon bundles", False),
]


@dataclass(frozen=True)
class Issue:
    file: str
    type: str
    msg: str
    severity: str = "error"
    suggestion: Optional[str] = None


def validate_attributes(svg_dir: Path) -> List[Issue]:
    """Flag sources that break the single-colour, no-stroke policy."""
    issues = []
    for path in list_svg_files(svg_dir):
        content = path.read_text(encoding="utf-8")
        if STROKE_RE.search(content):
            issues.append(Issue(path.name, "stroke", "Stroke usage detected"))
        if DISALLOWED_FILL_RE.search(content):
            issues.append(Issue(path.name, "fill", 'Hard-coded fill detected (only fill="none" allowed)'))
        if PAINT_RE.search(content):
            issues.append(Issue(path.name, "paint", "Gradient/pattern detected (not allowed)"))
    return issues


def validate_names(svg_dir: Path) -> List[Issue]:
    """Flag icon names that do not map cleanly onto JavaScript identifiers."""
    issues = []
    for path in list_svg_files(svg_dir):
        camel = to_camel_case(path.stem)
        if camel in RESERVED_WORDS:
            issues.append(
                Issue(path.name, "reserved_word", f'"{camel}" is reserved', "warning", camel + "Icon")
            )
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9]*$", camel):
            issues.append(
                Issue(
                    path.name,
                    "invalid_identifier",
                    f'"{camel}" is not a valid identifier',
                    "error",
                    "Rename to use valid characters (letters and numbers only)",
                )
            )
        if re.match(r"^[0-9]", camel):
            issues.append(
                Issue(
                    path.name,
                    "starts_with_number",
                    f'"{camel}" starts with a number',
                    "warning",
                    "icon" + camel[0].upper() + camel[1:],
                )
            )
    return issues


def render_module_default(name: str, module_source: str) -> str:
    """What the generated function returns when called with no props."""
    vb = MODULE_VIEWBOX_RE.search(module_source)
    inner = MODULE_INNER_RE.search(module_source)
    if not (vb and inner):
        raise ValueError(f"{name}: not a generated icon function module")
    # Undo template-literal escaping
    content = re.sub(r"\\([\\`$])", r"\1", inner.group(1))
    return render_icon(name, vb.group(1), content)


def check_integrity(svg_dir: Path, esm_dir: Path, icons: Optional[Iterable[str]] = None) -> List[str]:
    """Compare generated ESM output against its source SVG.

    Returns one message per failed check; an empty list means every icon passed.
    """
    if icons is None:
        icons = [p.stem for p in list_svg_files(svg_dir)]

    failures = []
    for icon in icons:
        src_path = svg_dir / get_svg_name(icon)
        dist_path = esm_dir / f"{icon}.js"
        if not src_path.exists():
            failures.append(f"Source SVG missing: {src_path}")
            continue
        if not dist_path.exists():
            failures.append(f"Generated ESM missing: {dist_path}")
            continue

        src = src_path.read_text(encoding="utf-8")
        try:
            out = render_module_default(icon, dist_path.read_text(encoding="utf-8"))
        except ValueError as e:
            failures.append(str(e))
            continue

        m = re.search(r'viewBox="([^"]+)"', src, re.IGNORECASE)
        src_viewbox = m.group(1) if m else DEFAULT_VIEWBOX
        m = re.search(r'viewBox="([^"]+)"', out, re.IGNORECASE)
        out_viewbox = m.group(1) if m else None

        src_paths = len(PATH_RE.findall(src))
        out_paths = len(PATH_RE.findall(out))
        if src_paths != out_paths:
            failures.append(f"{icon}: path count mismatch (src={src_paths}, out={out_paths})")
        if out_viewbox != src_viewbox:
            failures.append(f"{icon}: viewBox mismatch (src={src_viewbox}, out={out_viewbox})")
        if INVALID_STROKE_RE.search(out):
            failures.append(f"{icon}: invalid stroke detected in output")
        if STROKE_WIDTH_RE.search(out):
            failures.append(f"{icon}: stroke-width detected in output")
        if any(fill.lower() != "none" for fill in PATH_FILL_RE.findall(out)):
            failures.append(f"{icon}: path-level fill detected that is not 'none'")
        for rule in ("fill-rule", "clip-rule"):
            pattern = re.compile(rf'{rule}="evenodd"', re.IGNORECASE)
            if pattern.search(src) and not pattern.search(out):
                failures.append(f"{icon}: missing {rule}='evenodd' in output")
        if not (re.search(r"<svg\b[^>]*>", out) and "</svg>" in out):
            failures.append(f"{icon}: invalid SVG wrapper")
    return failures


def _dist_names(directory: Path) -> List[str]:
    return [p.stem for p in directory.glob("*.js") if p.name != "index.js"]


def check_sync(svg_dir: Path, dist_dir: Path, report_path: Optional[Path] = None) -> dict:
    """Compare source icons with the per-icon function modules in *dist_dir*."""
    svg_names = {p.stem for p in list_svg_files(svg_dir)} if svg_dir.is_dir() else set()
    dist_names = set()
    for target in ("icons/esm", "icons/cjs"):
        dist_names.update(_dist_names(dist_dir / target))

    missing = sorted(svg_names - dist_names)
    extra = sorted(dist_names - svg_names)
    if not missing and not extra:
        status = "perfect"
    elif not missing:
        status = "extra_files"
    elif not extra:
        status = "missing_files"
    else:
        status = "out_of_sync"

    targets = []
    for name, description, required in BUILD_TARGETS:
        path = dist_dir / name
        entry = {"name": name, "description": description, "required": required, "exists": path.is_dir()}
        if path.is_dir():
            count = sum(1 for f in path.iterdir() if f.suffix in (".js", ".css", ".svg"))
            entry["fileCount"] = count
            entry["status"] = "populated" if count else "empty"
        else:
            entry["status"] = "missing"
        targets.append(entry)

    recommendations = []
    if missing:
        recommendations.append(
            {"type": "missing_files", "priority": "high",
             "description": f"{len(missing)} icons missing from dist/ - run full rebuild"}
        )
    if extra:
        recommendations.append(
            {"type": "extra_files", "priority": "medium",
             "description": f"{len(extra)} extra icons in dist/ - clean and rebuild"}
        )
    missing_required = [t["name"] for t in targets if t["required"] and not t["exists"]]
    if missing_required:
        recommendations.append(
            {"type": "missing_build_targets", "priority": "high",
             "description": f"Missing required build targets: {', '.join(missing_required)}"}
        )
    empty = [t["name"] for t in targets if t["status"] == "empty"]
    if empty:
        recommendations.append(
            {"type": "empty_build_targets", "priority": "medium",
             "description": f"Empty build targets detected: {', '.join(empty)}"}
        )

    report = {
        "timestamp": iso_now(),
        "svg_icons": sorted(svg_names),
        "dist_icons": sorted(dist_names),
        "sync_status": status,
        "missing_in_dist": missing,
        "extra_in_dist": extra,
        "build_targets": targets,
        "recommendations": recommendations,
    }
    if report_path is not None:
        report_path.write_text(json.dumps(report, indent=2) + "\n")
        logging.debug(f"Validation report saved to {report_path}")
    return report


def log_issues(issues: List[Issue]):
    for issue in issues:
        log = logging.error if issue.severity == "error" else logging.warning
        hint = f" (suggestion: {issue.suggestion})" if issue.suggestion else ""
        log(f"[{issue.type}] {issue.file}: {issue.msg}{hint}")
