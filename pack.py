"""Pack all SVG sources into single-file outputs: web component, sprite and bundles."""

import json
import logging
from pathlib import Path
from typing import Dict, List

from lxml import etree

from svg import DEFAULT_VIEWBOX, SVG_NS, strip_prolog
from utils import list_svg_files

BUNDLE_VERSION = "1.0.0"

BUNDLES = {
    "core": {
        "description": "Essential icons for all applications",
        "icons": [
            "check", "close", "home", "search", "menu",
            "arrow-down", "arrow-up", "arrow-left", "arrow-right",
        ],
        "tags": ["essential", "navigation", "ui"],
    },
    "navigation": {
        "description": "Navigation and directional icons",
        "icons": [
            "back", "forward", "first-page", "last-page", "chevron-left",
            "chevron-right", "expand-less", "expand-more", "fullscreen",
            "fullscreen-exit",
        ],
        "tags": ["navigation", "directional", "ui"],
    },
}

# Source file to fall back on when a bundle asks for a common alias.
ICON_ALIASES = {"close": "cross", "check": "tick"}

WEB_COMPONENT = """// SVA Icon Web Component with embedded SVG data
const ICON_DATA = %(icon_data)s;

class SvaIcon extends HTMLElement {
  static get observedAttributes() {
    return ['name', 'color', 'size'];
  }

  constructor() {
    super();
    this.attachShadow({ mode: 'open' });
  }

  connectedCallback() {
    this.render();
  }

  attributeChangedCallback() {
    this.render();
  }

  render() {
    const name = this.getAttribute('name');
    let color = this.getAttribute('color') || 'currentColor';
    let size = this.getAttribute('size') || '24';

    // Support CSS variables
    if (color.startsWith('var(')) {
      const computed = getComputedStyle(this).getPropertyValue(color.slice(4, -1).trim());
      if (computed) color = computed.trim() || color;
    }

    if (size.startsWith('var(')) {
      const computed = getComputedStyle(this).getPropertyValue(size.slice(4, -1).trim());
      if (computed) size = computed.trim() || size;
    }

    // Accept both '24' and '24px' for size
    const sizeValue = size.match(/^\\d+$/) ? `${size}px` : size;

    if (!name) {
      this.shadowRoot.innerHTML = '<span>Icon name missing</span>';
      return;
    }

    const svgContent = ICON_DATA[name];
    if (svgContent) {
      let svg = svgContent;

      svg = svg.replace(/<svg/, `<svg width="${sizeValue}" height="${sizeValue}"`);

      // Colour paths without a fill, then recolour every fill except 'none'
      svg = svg.replace(/<path(?![^>]*fill=)/g, `<path fill="${color}"`);
      svg = svg.replace(/fill="(?!none)[^"]*"/g, `fill="${color}"`);

      this.shadowRoot.innerHTML = `
        <span style="display:inline-block;vertical-align:middle;line-height:0;">
          ${svg}
        </span>
      `;
    } else {
      this.shadowRoot.innerHTML = `<span>Icon not found: ${name}</span>`;
    }
  }
}

customElements.define('sva-icon', SvaIcon);
export { SvaIcon };
"""

BUNDLE_MODULE = """/**
 * SVA Icons %(title)s Bundle
 * %(description)s
 */

const %(const)s_ICONS = %(icons)s;

const %(const)s_BUNDLE_METADATA = %(metadata)s;

// Export for bundle system
if (typeof window !== 'undefined' && window.SvaIcons && window.SvaIcons.bundleRegistry) {
  window.SvaIcons.bundleRegistry.registerBundle('%(name)s', {
    icons: %(const)s_ICONS,
    metadata: %(const)s_BUNDLE_METADATA
  });
}

// Module export for Node.js/testing
if (typeof module !== 'undefined' && module.exports) {
  module.exports = {
    icons: %(const)s_ICONS,
    metadata: %(const)s_BUNDLE_METADATA
  };
}
"""


def read_icon_markup(svg_path: Path) -> str:
    content = strip_prolog(svg_path.read_text(encoding="utf-8-sig"))
    assert content.startswith("<svg"), f"{svg_path.name}: unexpected start: {content[:20]}"
    assert content.endswith("</svg>"), f"{svg_path.name}: unexpected end: {content[-20:]}"
    return content


def load_icon_data(svg_dir: Path) -> Dict[str, str]:
    svgs = list_svg_files(svg_dir)
    if not svgs:
        raise FileNotFoundError(f"No SVG files found in {svg_dir}")
    return {p.stem: read_icon_markup(p) for p in svgs}


def build_web_component(svg_dir: Path, output: Path) -> int:
    icon_data = load_icon_data(svg_dir)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        WEB_COMPONENT % {"icon_data": json.dumps(icon_data, indent=2, ensure_ascii=False)},
        encoding="utf-8",
    )
    logging.info(f"Embedded {len(icon_data)} icons in web component {output}")
    return len(icon_data)


def build_sprite(svg_dir: Path, output: Path, prefix: str = "icon-") -> int:
    """Combine every icon into one hidden <svg> of <symbol> elements."""
    svgs = list_svg_files(svg_dir)
    if not svgs:
        raise FileNotFoundError(f"No SVG files found in {svg_dir}")

    sprite = etree.Element(f"{{{SVG_NS}}}svg", nsmap={None: SVG_NS})
    sprite.set("style", "display:none")

    for svg_path in svgs:
        try:
            root = etree.parse(str(svg_path)).getroot()
        except etree.XMLSyntaxError as e:
            logging.error(f"{svg_path.name}: Could not parse ({e}), skipping...")
            continue
        symbol = etree.SubElement(sprite, f"{{{SVG_NS}}}symbol")
        symbol.set("id", f"{prefix}{svg_path.stem}")
        symbol.set("viewBox", root.get("viewBox") or DEFAULT_VIEWBOX)
        for child in list(root):
            if not isinstance(child.tag, str):
                continue
            if etree.QName(child).namespace not in (SVG_NS, None):
                continue
            symbol.append(child)

    # Icons written without xmlns contribute un-namespaced elements
    for el in sprite.iter():
        if isinstance(el.tag, str) and etree.QName(el).namespace is None:
            el.tag = f"{{{SVG_NS}}}{el.tag}"
    etree.cleanup_namespaces(sprite)

    output.parent.mkdir(parents=True, exist_ok=True)
    sprite.text = "\n"
    for symbol in sprite:
        symbol.tail = "\n"
    output.write_text(etree.tostring(sprite, encoding="unicode") + "\n", encoding="utf-8")
    count = len(sprite)
    logging.info(f"SVG sprite with {count} symbols generated: {output}")
    return count


def resolve_bundle_icons(icon_names: List[str], icon_data: Dict[str, str]) -> Dict[str, str]:
    resolved = {}
    for name in icon_names:
        source = name if name in icon_data else ICON_ALIASES.get(name)
        if source not in icon_data:
            logging.warning(f"Bundle icon '{name}' has no SVG source, omitted")
            continue
        resolved[name] = icon_data[source]
    return resolved


def build_bundles(svg_dir: Path, out_dir: Path, bundles: Dict[str, dict] = BUNDLES) -> List[dict]:
    icon_data = load_icon_data(svg_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, bundle in bundles.items():
        icons = resolve_bundle_icons(bundle["icons"], icon_data)
        metadata = {
            "name": name,
            "version": BUNDLE_VERSION,
            "description": bundle["description"],
            "icons": list(icons),
            "size": len(json.dumps(icons, separators=(",", ":"))),
            "dependencies": [],
            "tags": bundle.get("tags", []),
        }
        const = name.upper().replace("-", "_")
        source = BUNDLE_MODULE % {
            "title": name.replace("-", " ").title(),
            "description": bundle["description"],
            "const": const,
            "name": name,
            "icons": json.dumps(icons, indent=2, ensure_ascii=False),
            "metadata": json.dumps(metadata, indent=2),
        }
        (out_dir / f"{name}.js").write_text(source, encoding="utf-8")
        logging.info(f"Bundle '{name}': {len(icons)}/{len(bundle['icons'])} icons")
        written.append(metadata)

    names = [m["name"] for m in written]
    requires = "".join(f"    {json.dumps(n)}: require('./{n}.js'),\n" for n in names)
    (out_dir / "index.js").write_text(
        "// SVA Icons bundle index\n"
        f"const BUNDLE_NAMES = {json.dumps(names)};\n\n"
        "if (typeof module !== 'undefined' && module.exports) {\n"
        "  module.exports = {\n"
        "    names: BUNDLE_NAMES,\n"
        f"{requires}"
        "  };\n"
        "}\n"
    )
    return written
