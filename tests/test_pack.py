import json
import re

import pytest
from lxml import etree

from pack import build_bundles, build_sprite, build_web_component, resolve_bundle_icons
from svg import SVG_NS

NS = {"svg": SVG_NS}


def test_build_web_component(svg_dir, tmp_path):
    output = tmp_path / "web-components" / "sva-icon-embedded.js"
    assert build_web_component(svg_dir, output) == 4

    source = output.read_text()
    assert "customElements.define('sva-icon', SvaIcon);" in source
    m = re.search(r"const ICON_DATA = ([\s\S]*?);\n\nclass SvaIcon", source)
    icon_data = json.loads(m.group(1))
    assert sorted(icon_data) == ["battery", "book-service", "car", "tick"]
    assert icon_data["book-service"].startswith("<svg")
    assert "<?xml" not in icon_data["book-service"]
    assert "<!--" not in icon_data["book-service"]


def test_build_web_component_rejects_non_svg(tmp_path):
    svg_dir = tmp_path / "svg"
    svg_dir.mkdir()
    (svg_dir / "bad.svg").write_text("<html></html>")
    with pytest.raises(AssertionError):
        build_web_component(svg_dir, tmp_path / "out.js")


def test_build_sprite(svg_dir, tmp_path):
    output = tmp_path / "sprite" / "sva-icons-sprite.svg"
    assert build_sprite(svg_dir, output) == 4

    root = etree.parse(str(output)).getroot()
    assert root.tag == f"{{{SVG_NS}}}svg"
    assert root.get("style") == "display:none"

    symbols = root.findall("svg:symbol", NS)
    assert [s.get("id") for s in symbols] == ["icon-battery", "icon-book-service", "icon-car", "icon-tick"]
    viewboxes = {s.get("id"): s.get("viewBox") for s in symbols}
    assert viewboxes["icon-car"] == "0 0 32 32"
    assert viewboxes["icon-book-service"] == "0 0 24 24"

    # tick.svg has no xmlns but still lands in the svg namespace
    tick = symbols[3]
    assert len(tick.findall("svg:path", NS)) == 1
    assert len(symbols[0].findall("svg:path", NS)) == 2
    # foreign elements are left behind
    assert not symbols[1].findall("{http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd}namedview")


def test_build_sprite_prefix(svg_dir, tmp_path):
    output = tmp_path / "sprite.svg"
    build_sprite(svg_dir, output, prefix="sva-")
    assert 'id="sva-tick"' in output.read_text()


def test_resolve_bundle_icons():
    data = {"tick": "<svg>t</svg>", "home": "<svg>h</svg>"}
    resolved = resolve_bundle_icons(["home", "check", "close", "menu"], data)
    assert resolved == {"home": "<svg>h</svg>", "check": "<svg>t</svg>"}


def test_build_bundles(svg_dir, tmp_path):
    out = tmp_path / "bundles"
    written = build_bundles(svg_dir, out)

    assert [m["name"] for m in written] == ["core", "navigation"]
    core = written[0]
    assert core["icons"] == ["check"]
    assert core["version"] == "1.0.0"
    assert core["tags"] == ["essential", "navigation", "ui"]
    assert core["size"] > 0
    assert written[1]["icons"] == []

    core_source = (out / "core.js").read_text()
    assert "const CORE_ICONS = {" in core_source
    assert "registerBundle('core'" in core_source

    index = (out / "index.js").read_text()
    assert 'const BUNDLE_NAMES = ["core", "navigation"];' in index
    assert "\"navigation\": require('./navigation.js')," in index


def test_build_bundles_custom(svg_dir, tmp_path):
    bundles = {"car-pack": {"description": "Cars", "icons": ["car", "battery"]}}
    written = build_bundles(svg_dir, tmp_path / "bundles", bundles)
    assert written[0]["icons"] == ["car", "battery"]
    assert written[0]["tags"] == []
    assert "const CAR_PACK_ICONS" in (tmp_path / "bundles" / "car-pack.js").read_text()


def test_bom_prefixed_source(svg_dir, tmp_path):
    (svg_dir / "bom.svg").write_bytes(b'\xef\xbb\xbf<svg viewBox="0 0 24 24"><path d="M0 0"/></svg>')

    output = tmp_path / "sva-icon-embedded.js"
    assert build_web_component(svg_dir, output) == 5
    m = re.search(r"const ICON_DATA = ([\s\S]*?);\n\nclass SvaIcon", output.read_text())
    assert json.loads(m.group(1))["bom"].startswith("<svg")

    written = build_bundles(svg_dir, tmp_path / "bundles", {"b": {"description": "BOM", "icons": ["bom"]}})
    assert written[0]["icons"] == ["bom"]


def test_build_sprite_skips_malformed(svg_dir, tmp_path):
    (svg_dir / "broken.svg").write_text("<svg><path></svg>")
    output = tmp_path / "sprite.svg"

    assert build_sprite(svg_dir, output) == 4
    root = etree.parse(str(output)).getroot()
    ids = [s.get("id") for s in root.findall("svg:symbol", NS)]
    assert "icon-broken" not in ids
    assert "icon-tick" in ids
