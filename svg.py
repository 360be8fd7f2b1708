import logging
import re
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import quote

from lxml import etree

SVG_NS = "http://www.w3.org/2000/svg"
DEFAULT_VIEWBOX = "0 0 24 24"

TRANSLATE_RE = re.compile(r"^\s*translate\(\s*([^,\s]+)\s*[,\s]\s*([^)]+)\s*\)\s*$")
UNIT_RE = re.compile(r"^\s*([0-9.eE+-]+)\s*(px)?\s*$")

PROLOG_RE = re.compile(r"<\?xml[^>]*\?>")
COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE)
VIEWBOX_RE = re.compile(r'viewBox="([^"]+)"')
INNER_RE = re.compile(r"<svg[^>]*>([\s\S]*)</svg>", re.IGNORECASE)

# Single-colour, no-stroke theming: colour comes from the root fill at render time.
THEMING_RES = [
    re.compile(r'\sstroke="[^"]*"', re.IGNORECASE),
    re.compile(r'\sstroke-width="[^"]*"', re.IGNORECASE),
    re.compile(r'\sstyle="[^"]*"', re.IGNORECASE),
    re.compile(r'\sfill="(?!none\b)[^"]*"', re.IGNORECASE),
]


def strip_prolog(text: str) -> str:
    text = PROLOG_RE.sub("", text)
    text = DOCTYPE_RE.sub("", text)
    return COMMENT_RE.sub("", text).strip()


def extract_viewbox(text: str, default: str = DEFAULT_VIEWBOX) -> str:
    m = VIEWBOX_RE.search(text)
    return m.group(1) if m else default


def extract_inner(text: str) -> str:
    m = INNER_RE.search(text)
    return m.group(1).strip() if m else text.strip()


def parse_icon(text: str) -> Tuple[str, str]:
    """Split raw SVG markup into its viewBox and the markup inside the root."""
    cleaned = strip_prolog(text)
    return extract_viewbox(cleaned), extract_inner(cleaned)


def apply_theming_policy(inner: str) -> str:
    for pattern in THEMING_RES:
        inner = pattern.sub("", inner)
    return inner


def escape_template_literal(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def render_icon(
    name: str,
    viewbox: str,
    inner: str,
    size=24,
    color: str = "currentColor",
    class_name: str = "",
    title: Optional[str] = None,
    focusable: bool = False,
    aria_hidden: bool = True,
    **attrs,
) -> str:
    """Render an icon the way the generated function modules do at runtime.

    The whitespace layout of the opening tag matches the JS template so that
    output from either side can be compared directly.
    """
    class_names = " ".join(c for c in ("sva-icon", f"sva-icon-{name}", class_name) if c)
    title_element = f"<title>{title}</title>" if title else ""
    additional = " ".join(f'{k}="{v}"' for k, v in attrs.items())

    def js(value) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    return (
        "<svg\n"
        f'    width="{js(size)}"\n'
        f'    height="{js(size)}"\n'
        f'    viewBox="{viewbox}"\n'
        f'    class="{class_names}"\n'
        f'    fill="{color}"\n'
        '    stroke="none"\n'
        f'    focusable="{js(focusable)}"\n'
        f'    aria-hidden="{js(aria_hidden)}"\n'
        f"    {' ' + additional if additional else ''}\n"
        f"  >{title_element}{inner}</svg>"
    )


def _parse_length(value: str) -> float:
    m = UNIT_RE.match(value)
    if not m:
        raise ValueError(value)
    return float(m.group(1))


def _format_number(value: float) -> str:
    return f"{value:g}"


def cleanup_svg(path: Path, output: Path) -> bool:
    """Optimize one SVG file for distribution.

    Returns False (and writes nothing) when the root has neither a viewBox nor
    a parseable width/height.
    """
    parser = etree.XMLParser(remove_blank_text=True, resolve_entities=False)
    tree = etree.parse(str(path), parser)
    # Strip out all comments and processing instructions
    etree.strip_elements(tree, etree.Comment, etree.ProcessingInstruction, with_tail=False)

    root = tree.getroot()
    if etree.QName(root).localname != "svg":
        logging.error(f"{path}: Root element is not <svg>, skipping...")
        return False

    # Remove all elements and attributes with non-svg namespaces.
    # Hand-written icons often omit xmlns, so the empty namespace counts as svg.
    for elem in root.xpath(".|.//*"):  # type: ignore
        qname = etree.QName(elem)
        if qname.namespace not in (SVG_NS, None) or qname.localname in ("metadata",):
            parent = elem.getparent()
            if parent is not None:
                parent.remove(elem)
            continue

        for attr_name in list(elem.attrib.keys()):
            # Remove namespaced attributes (xlink:href is still meaningful)
            if "}" in attr_name and not attr_name.startswith("{http://www.w3.org/1999/xlink}"):
                del elem.attrib[attr_name]
            elif attr_name.startswith("-inkscape"):
                del elem.attrib[attr_name]

        if "style" in elem.attrib:
            style_parts = [
                part.strip()
                for part in elem.attrib["style"].split(";")
                if part.strip() and not part.strip().startswith("-inkscape")
            ]
            if style_parts:
                elem.attrib["style"] = "; ".join(style_parts)
            else:
                del elem.attrib["style"]

        # Collapse whitespace in path data
        if qname.localname == "path" and "d" in elem.attrib:
            elem.attrib["d"] = " ".join(elem.attrib["d"].split())

    etree.cleanup_namespaces(tree)

    # Handle viewBox and root size (width/height)
    width = root.get("width")
    height = root.get("height")
    viewBox = root.get("viewBox")

    if not (width and height):
        if not viewBox:
            logging.error(f"{path}: Neither viewBox nor size attributes found, skipping...")
            return False
    else:
        if not viewBox:
            # Size only: derive the viewBox from it
            try:
                w, h = _parse_length(width), _parse_length(height)
            except ValueError:
                logging.error(
                    f"{path}: Could not parse width/height ({width}, {height}), skipping..."
                )
                return False
            root.set("viewBox", f"0 0 {_format_number(w)} {_format_number(h)}")

        del root.attrib["width"]
        del root.attrib["height"]

    # Absorb a wrapping translate() into the viewBox origin.
    vb = root.get("viewBox")
    children = [c for c in root if isinstance(c.tag, str)]
    if len(children) == 1 and etree.QName(children[0]).localname == "g":
        g = children[0]
        m = TRANSLATE_RE.match(g.get("transform", ""))
        parts = vb.replace(",", " ").split()
        if m and len(parts) == 4:
            try:
                tx, ty = float(m.group(1)), float(m.group(2))
                min_x, min_y, vw, vh = (float(p) for p in parts)
            except ValueError:
                logging.debug(f"{path}: Non-numeric translate or viewBox, left as is")
            else:
                root.set(
                    "viewBox",
                    " ".join(_format_number(v) for v in (min_x - tx, min_y - ty, vw, vh)),
                )
                del g.attrib["transform"]

    # Serialize the root only, so no XML declaration or doctype survives
    svg_data = etree.tostring(root, encoding="unicode", pretty_print=False)
    output.write_text(svg_data + "\n", encoding="utf-8")
    return True


def svg_to_data_uri(markup: str) -> str:
    """Percent-encode markup for use in a CSS ``url("data:image/svg+xml,...")``."""
    markup = " ".join(markup.split())
    return "data:image/svg+xml," + quote(markup, safe="=:/'()")
