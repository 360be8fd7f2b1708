from pathlib import Path

import pytest

BATTERY = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <path fill="#000" fill-rule="evenodd" clip-rule="evenodd" d="M2 6h16v12H2z"/>
  <path d="M20 10h2v4h-2z" stroke="#333" stroke-width="2"/>
</svg>
"""

BOOK_SERVICE = """<?xml version="1.0" encoding="UTF-8"?>
<!-- Created with Inkscape -->
<svg xmlns="http://www.w3.org/2000/svg"
     xmlns:inkscape="http://www.inkscape.org/namespaces/inkscape"
     xmlns:sodipodi="http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd"
     width="48" height="48" inkscape:version="1.2">
  <sodipodi:namedview id="base"/>
  <g transform="translate(-10, 5)" inkscape:label="Layer 1">
    <path d="M 10 10   L 20 20" style="fill:#000;-inkscape-font-specification:Sans"/>
  </g>
</svg>
"""

CAR = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 32 32">
  <g>
    <path d="M4 16h24v8H4z" style="fill:red"/>
    <path d="M8 24a2 2 0 1 0 4 0" fill="none"/>
    <path d="M20 24a2 2 0 1 0 4 0"/>
  </g>
</svg>
"""

# Hand-written, no xmlns
TICK = """<svg viewBox="0 0 24 24"><path d="M9 16.2 4.8 12l-1.4 1.4L9 19 21 7l-1.4-1.4z"/></svg>
"""

ICONS = {
    "battery": BATTERY,
    "book-service": BOOK_SERVICE,
    "car": CAR,
    "tick": TICK,
}


def write_icons(directory: Path, icons: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in icons.items():
        (directory / f"{name}.svg").write_text(content, encoding="utf-8")
    return directory


@pytest.fixture
def svg_dir(tmp_path: Path) -> Path:
    return write_icons(tmp_path / "svg", ICONS)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    write_icons(tmp_path / "svg", ICONS)
    return tmp_path
