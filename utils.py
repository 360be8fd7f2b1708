import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

COLORS = {
    "DEBUG": "\033[36m",  # cyan
    "INFO": "\033[32m",  # green
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",  # red
    "CRITICAL": "\033[1;31m",  # bold red
}
COLOR_RESET = "\033[0m"

PACKAGE_NAME = "sva-icons"
VERSION = "3.1.0"

# JavaScript reserved words and globals an icon identifier must not shadow.
RESERVED_WORDS = frozenset(
    [
        "break", "case", "catch", "continue", "debugger", "default", "delete",
        "do", "else", "finally", "for", "function", "if", "in", "instanceof",
        "new", "return", "switch", "this", "throw", "try", "typeof", "var",
        "void", "while", "with",
        "class", "const", "enum", "export", "extends", "import", "super",
        "let", "static", "yield", "await", "async",
        "implements", "interface", "package", "private", "protected", "public",
        "Array", "Boolean", "Date", "Error", "Function", "JSON", "Math",
        "Number", "Object", "RegExp", "String", "Symbol", "console", "window",
        "document", "undefined", "null", "NaN", "Infinity",
        "alert", "confirm", "prompt", "setTimeout", "setInterval", "fetch",
        "location", "history", "navigator",
    ]
)


class ColorFormatter(logging.Formatter):
    def format(self, record):
        color = COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname}{COLOR_RESET}"
        return super().format(record)


def setup_logging():
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter("%(levelname)s %(message)s"))
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.INFO)


def iso_now() -> str:
    """UTC timestamp in the millisecond ``...Z`` form used by all reports."""
    return to_iso(datetime.now(timezone.utc))


def to_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def to_pascal_case(name: str) -> str:
    name = re.sub(r"[-_\s]", " ", name)
    name = re.sub(r"(?:^|\s)(\w)", lambda m: m.group(0).upper(), name)
    return re.sub(r"\s", "", name)


def to_camel_case(name: str) -> str:
    name = re.sub(r"[-_]([a-zA-Z0-9])", lambda m: m.group(1).upper(), name)
    name = re.sub(r"[^a-zA-Z0-9]", "", name)
    return re.sub(r"^[a-z]", lambda m: m.group(0).lower(), name)


def to_identifier(name: str) -> str:
    """PascalCase export name for an icon, safe to use as a JS identifier."""
    ident = re.sub(r"[^A-Za-z0-9_$]", "", to_pascal_case(name))
    if not ident:
        raise ValueError(f"Icon name {name!r} has no usable identifier characters")
    if ident[0].isdigit():
        ident = "Icon" + ident
    if ident in RESERVED_WORDS:
        ident += "Icon"
    return ident


def get_svg_name(icon_name: str) -> str:
    return f"{icon_name}.svg"


def list_svg_files(svg_dir: Path, recursive: bool = False) -> List[Path]:
    """Sorted SVG sources in *svg_dir*; nested directories only when *recursive*."""
    if not svg_dir.is_dir():
        raise FileNotFoundError(f"SVG source directory not found: {svg_dir}")
    pattern = "**/*.svg" if recursive else "*.svg"
    return sorted(p for p in svg_dir.glob(pattern) if p.is_file())


@dataclass(frozen=True)
class Icon:
    name: str
    filename: str
    category: str
    tags: List[str] = field(default_factory=list)
    size: int = 0
    last_modified: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError(f"Icon name must not be empty (filename={self.filename})")

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "filename": self.filename,
            "category": self.category,
            "tags": list(self.tags),
            "size": self.size,
            "lastModified": self.last_modified,
        }
