"""Emit one JavaScript module per icon: configurable SVG functions and React components."""

import json
import logging
from pathlib import Path
from typing import List, Tuple

from tqdm import tqdm

from svg import apply_theming_policy, escape_template_literal, parse_icon
from utils import list_svg_files, to_identifier

# Icons that are also exported under a second, more familiar name.
ALIASES = {"Close": "Cross", "Check": "Tick"}

CJS_PACKAGE_JSON = {"type": "commonjs"}

FUNCTION_DOC = """/**
 * %(function_name)s Icon
 * SVA Icons - Function-based icon component
 *
 * @param {Object} props - Icon configuration
 * @param {number|string} props.size - Icon size (default: 24)
 * @param {string} props.color - Icon color (default: 'currentColor')
 * @param {string} props.className - CSS classes
 * @param {number} props.strokeWidth - Stroke width (unused; strokes disabled)
 * @param {string} props.title - Accessibility title
 * @param {boolean} props.focusable - Whether icon is focusable (default: false)
 * @returns {string} SVG string
 */
"""

# The returned template's layout is mirrored by svg.render_icon.
FUNCTION_BODY = """function %(function_name)s(props = {}) {
  const {
    size = 24,
    color = 'currentColor',
    className = '',
    strokeWidth = 0,
    title,
    focusable = false,
    'aria-hidden': ariaHidden = true,
    ...otherProps
  } = props;

  const classNames = ['sva-icon', 'sva-icon-%(name)s', className].filter(Boolean).join(' ');

  const titleElement = title ? `<title>${title}</title>` : '';

  const additionalProps = Object.entries(otherProps)
    .map(([key, value]) => `${key}="${value}"`)
    .join(' ');

  return `<svg
    width="${size}"
    height="${size}"
    viewBox="%(viewbox)s"
    class="${classNames}"
    fill="${color}"
    stroke="none"
    focusable="${focusable}"
    aria-hidden="${ariaHidden}"
    ${additionalProps ? ' ' + additionalProps : ''}
  >${titleElement}%(inner)s</svg>`;
}
"""

ESM_FOOTER = """
// Named export for convenience
export { %(function_name)s };
"""

CJS_FOOTER = """
module.exports = %(function_name)s;
module.exports.default = %(function_name)s;
"""

ICON_DTS = """/**
 * %(function_name)s Icon
 */
import type { IconProps } from './index';

declare function %(function_name)s(props?: IconProps): string;

export default %(function_name)s;
export { %(function_name)s };
"""

INDEX_DTS_HEADER = """export interface IconProps {
  /** Icon size (default: 24) */
  size?: number | string;
  /** Icon color (default: 'currentColor') */
  color?: string;
  /** Additional CSS classes */
  className?: string;
  /** Stroke width (unused; strokes disabled) */
  strokeWidth?: number;
  /** Accessibility title */
  title?: string;
  /** Whether the icon is focusable (default: false) */
  focusable?: boolean;
  'aria-hidden'?: boolean;
  [attribute: string]: unknown;
}

export type IconFunction = (props?: IconProps) => string;

"""

REACT_ESM = """import React from 'react';

const %(component)s = ({
  size = 24,
  color = 'currentColor',
  strokeWidth = 1.5,
  className,
  style,
  ...props
}) => {
  return (
    <svg
      width={size}
      height={size}
      viewBox="%(viewbox)s"
      fill="none"
      stroke={color}
      strokeWidth={strokeWidth}
      strokeLinecap="round"
      strokeLinejoin="round"
      className={className}
      style={style}
      {...props}
    >
      %(inner)s
    </svg>
  );
};

%(component)s.displayName = '%(component)s';

export default %(component)s;
"""

REACT_CJS = """const React = require('react');

const %(component)s = ({
  size = 24,
  color = 'currentColor',
  strokeWidth = 1.5,
  className,
  style,
  ...props
}) => {
  return React.createElement('svg', {
    width: size,
    height: size,
    viewBox: "%(viewbox)s",
    fill: "none",
    stroke: color,
    strokeWidth: strokeWidth,
    strokeLinecap: "round",
    strokeLinejoin: "round",
    className: className,
    style: style,
    ...props,
    dangerouslySetInnerHTML: { __html: `%(inner)s` }
  });
};

%(component)s.displayName = '%(component)s';

module.exports = %(component)s;
"""

REACT_DTS_HEADER = """import { FC, SVGProps } from 'react';

export interface ReactIconProps extends SVGProps<SVGSVGElement> {
  size?: number | string;
  color?: string;
  strokeWidth?: number;
}

export type ReactIconComponent = FC<ReactIconProps>;

"""


def generate_icon_function(name: str, svg_text: str, fmt: str = "esm") -> str:
    """Module source for a function that renders the icon with runtime props."""
    if fmt not in ("esm", "cjs"):
        raise ValueError(f"Unknown module format: {fmt}")

    viewbox, inner = parse_icon(svg_text)
    values = {
        "function_name": to_identifier(name),
        "name": name,
        "viewbox": viewbox,
        "inner": escape_template_literal(apply_theming_policy(inner)),
    }
    if fmt == "esm":
        return (FUNCTION_DOC + "export default " + FUNCTION_BODY + ESM_FOOTER) % values
    return (FUNCTION_DOC + FUNCTION_BODY + CJS_FOOTER) % values


def write_cjs_package_json(cjs_dir: Path):
    (cjs_dir / "package.json").write_text(json.dumps(CJS_PACKAGE_JSON, indent=2) + "\n")


def _check_unique(exports: List[Tuple[str, str]]):
    seen = {}
    for name, ident in exports:
        if ident in seen:
            raise ValueError(f"Icons {seen[ident]!r} and {name!r} both export {ident}")
        seen[ident] = name


def build_function_icons(svg_dir: Path, esm_dir: Path, cjs_dir: Path) -> List[Tuple[str, str]]:
    """Write ESM and CJS function modules plus index files and typings.

    Returns (icon name, export identifier) pairs for every icon written.
    """
    svgs = list_svg_files(svg_dir)
    if not svgs:
        raise FileNotFoundError(f"No SVG files found in {svg_dir}")

    esm_dir.mkdir(parents=True, exist_ok=True)
    cjs_dir.mkdir(parents=True, exist_ok=True)

    exports = []
    for svg_path in tqdm(svgs, desc="Building function icons", unit=" icons"):
        name = svg_path.stem
        try:
            svg_text = svg_path.read_text(encoding="utf-8")
            esm = generate_icon_function(name, svg_text, "esm")
            cjs = generate_icon_function(name, svg_text, "cjs")
        except ValueError as e:
            logging.error(f"Error transforming {name}: {e}")
            continue
        (esm_dir / f"{name}.js").write_text(esm, encoding="utf-8")
        (cjs_dir / f"{name}.js").write_text(cjs, encoding="utf-8")
        exports.append((name, to_identifier(name)))

    _check_unique(exports)

    (esm_dir / "index.js").write_text(
        "".join(f"export {{ default as {ident} }} from './{name}.js';\n" for name, ident in exports)
    )
    (cjs_dir / "index.js").write_text(
        "".join(f"module.exports.{ident} = require('./{name}.js');\n" for name, ident in exports)
    )
    write_cjs_package_json(cjs_dir)
    write_function_types(esm_dir, exports)

    logging.info(f"Transformed {len(exports)} icons to function modules in {esm_dir.parent}")
    return exports


def write_function_types(esm_dir: Path, exports: List[Tuple[str, str]]):
    for name, ident in exports:
        (esm_dir / f"{name}.d.ts").write_text(ICON_DTS % {"function_name": ident})
    declarations = "".join(f"export declare const {ident}: IconFunction;\n" for _, ident in exports)
    (esm_dir / "index.d.ts").write_text(INDEX_DTS_HEADER + declarations)


def build_react_components(svg_dir: Path, out_dir: Path) -> List[dict]:
    svgs = list_svg_files(svg_dir)
    if not svgs:
        raise FileNotFoundError(f"No SVG files found in {svg_dir}")

    esm_dir = out_dir / "esm"
    cjs_dir = out_dir / "cjs"
    esm_dir.mkdir(parents=True, exist_ok=True)
    cjs_dir.mkdir(parents=True, exist_ok=True)

    components = []
    for svg_path in tqdm(svgs, desc="Building React components", unit=" icons"):
        try:
            component = to_identifier(svg_path.stem)
        except ValueError as e:
            logging.warning(f"Skipping {svg_path.name}: {e}")
            continue
        if not component[0].isupper():
            logging.warning(f"Skipping invalid component name: {component}")
            continue

        viewbox, inner = parse_icon(svg_path.read_text(encoding="utf-8"))
        values = {"component": component, "viewbox": viewbox, "inner": inner}
        (esm_dir / f"{component}.js").write_text(REACT_ESM % values, encoding="utf-8")
        values["inner"] = escape_template_literal(inner)
        (cjs_dir / f"{component}.js").write_text(REACT_CJS % values, encoding="utf-8")
        components.append({"name": component, "originalName": svg_path.stem, "file": f"{component}.js"})

    _check_unique([(c["originalName"], c["name"]) for c in components])

    names = {c["name"] for c in components}
    for alias, target in ALIASES.items():
        if target in names and alias not in names:
            components.append(
                {"name": alias, "originalName": alias.lower(), "file": f"{target}.js", "aliasFor": target}
            )

    (esm_dir / "index.js").write_text(
        "".join(f"export {{ default as {c['name']} }} from './{c['file']}';\n" for c in components)
    )
    (cjs_dir / "index.js").write_text(
        "".join(f"module.exports.{c['name']} = require('./{c['file']}');\n" for c in components)
    )
    (out_dir / "index.d.ts").write_text(
        REACT_DTS_HEADER
        + "".join(f"export declare const {c['name']}: ReactIconComponent;\n" for c in components)
    )
    write_cjs_package_json(cjs_dir)

    logging.info(f"Generated {len(components)} React components in {out_dir}")
    return components
