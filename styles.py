import json
import logging
import re
from pathlib import Path
from typing import Optional

from svg import apply_theming_policy, parse_icon, render_icon, svg_to_data_uri
from utils import VERSION, iso_now, list_svg_files

CSS_FILES = ["variables.css", "base.css", "sizes.css", "colors.css", "positions.css"]
OUTPUT_NAME = "sva-icons-class-based.css"

FEATURES = [
    "CSS Custom Properties",
    "Size Utilities",
    "Color Utilities",
    "Position Utilities",
    "Responsive Design",
    "High Contrast Support",
    "Accessibility Optimizations",
    "Print Styles",
    "Reduced Motion Support",
    "Container Queries (Future-proof)",
]

HEADER = """/*!
 * SVA Icons Class-Based API - CSS System
 * Version: %(version)s
 *
 * Variables, base styles, size, color and position utilities,
 * responsive helpers and per-icon mask classes.
 *
 * Generated: %(generated)s
 */

"""

UTILITY_CSS = """
/* ====================================
   UTILITY CLASSES
   ==================================== */

.sva-icon-hidden {
  display: none !important;
}

.sva-icon-visible {
  display: inline-block !important;
}

.sva-icon-loading {
  opacity: 0.5;
  animation: sva-icon-pulse 1.5s ease-in-out infinite;
}

.sva-icon-loaded {
  opacity: 1;
  animation: none;
}

.sva-icon-error {
  opacity: 0.3;
  filter: grayscale(100%);
}

@keyframes sva-icon-pulse {
  0% { opacity: 0.3; }
  50% { opacity: 0.7; }
  100% { opacity: 0.3; }
}

@media (prefers-contrast: high) {
  .sva-icon {
    filter: contrast(1.5);
  }

  .sva-icon-loading {
    animation: none;
    opacity: 0.8;
  }
}

@media (prefers-reduced-motion: reduce) {
  .sva-icon-loading {
    animation: none;
    opacity: 0.5;
  }
}

@media print {
  .sva-icon {
    filter: grayscale(100%);
    opacity: 0.8;
  }

  .sva-icon-loading {
    animation: none;
    opacity: 1;
  }
}

.sva-icon:focus-visible {
  outline: 2px solid var(--sva-icon-focus-color, #005fcc);
  outline-offset: 2px;
  border-radius: 2px;
}

.sva-icon-sr-only {
  position: absolute;
  width: 1px;
  height: 1px;
  padding: 0;
  margin: -1px;
  overflow: hidden;
  clip: rect(0, 0, 0, 0);
  white-space: nowrap;
  border: 0;
}
"""

RESPONSIVE_CSS = """
/* ====================================
   RESPONSIVE UTILITIES
   ==================================== */

@media (max-width: 768px) {
  .sva-icon-responsive {
    width: var(--sva-icon-size-sm, 16px);
    height: var(--sva-icon-size-sm, 16px);
  }
}

@media (min-width: 769px) and (max-width: 1024px) {
  .sva-icon-responsive {
    width: var(--sva-icon-size-md, 20px);
    height: var(--sva-icon-size-md, 20px);
  }
}

@media (min-width: 1025px) {
  .sva-icon-responsive {
    width: var(--sva-icon-size-lg, 24px);
    height: var(--sva-icon-size-lg, 24px);
  }
}

@supports (container-type: inline-size) {
  .sva-icon-container {
    container-type: inline-size;
  }

  @container (max-width: 300px) {
    .sva-icon-adaptive {
      width: var(--sva-icon-size-sm, 16px);
      height: var(--sva-icon-size-sm, 16px);
    }
  }

  @container (min-width: 301px) {
    .sva-icon-adaptive {
      width: var(--sva-icon-size-md, 20px);
      height: var(--sva-icon-size-md, 20px);
    }
  }
}
"""

MASK_BASE_CSS = """
/* ====================================
   ICONS
   ==================================== */

[class*="sva-icon-mask-"] {
  display: inline-block;
  width: var(--sva-icon-size, 24px);
  height: var(--sva-icon-size, 24px);
  background-color: currentColor;
  -webkit-mask: var(--sva-icon-mask) no-repeat center / contain;
  mask: var(--sva-icon-mask) no-repeat center / contain;
}
"""

COMMENT_RE = re.compile(r"/\*(?!\s*!)[\s\S]*?\*/")
ALL_COMMENTS_RE = re.compile(r"/\*[\s\S]*?\*/")


class CSSBuildError(Exception):
    pass


def normalize_css(content: str) -> str:
    content = re.sub(r"^\s*\n", "", content, flags=re.MULTILINE)
    content = re.sub(r"\n\s*$", "", content, flags=re.MULTILINE)
    content = re.sub(r"\n{3,}", "\n\n", content)
    content = re.sub(r"}\s*([.#\[])", r"}\n\n\1", content)
    return content.strip()


def minify_css(css: str) -> str:
    css = COMMENT_RE.sub("", css)
    css = re.sub(r"\s+", " ", css)
    css = re.sub(r"\s*{\s*", "{", css)
    css = re.sub(r";\s*", ";", css)
    css = re.sub(r"}\s*", "}", css)
    css = re.sub(r",\s*", ",", css)
    # Only inside declarations; selectors like "a :hover" must keep their space
    css = re.sub(r"\s*:\s*(?=[^{}]*[;}])", ":", css)
    css = css.replace(";}", "}")
    return css.strip()


def icon_mask_css(svg_dir: Path) -> str:
    rules = [MASK_BASE_CSS]
    for svg_path in list_svg_files(svg_dir):
        viewbox, inner = parse_icon(svg_path.read_text(encoding="utf-8"))
        markup = render_icon(
            svg_path.stem,
            viewbox,
            apply_theming_policy(inner),
            color="black",
            xmlns="http://www.w3.org/2000/svg",
        )
        rules.append(
            f"\n.sva-icon-mask-{svg_path.stem} {{\n"
            f'  --sva-icon-mask: url("{svg_to_data_uri(markup)}");\n'
            "}\n"
        )
    return "".join(rules)


def check_braces(css: str):
    content = ALL_COMMENTS_RE.sub("", css)
    opened, closed = content.count("{"), content.count("}")
    if opened != closed:
        raise CSSBuildError(f"Mismatched braces ({opened} open, {closed} close)")


def build_css(styles_dir: Path, out_dir: Path, svg_dir: Optional[Path] = None) -> dict:
    """Combine the style sheets into one CSS file plus a minified copy and a report."""
    out_dir.mkdir(parents=True, exist_ok=True)
    output = out_dir / OUTPUT_NAME
    minified_output = output.with_suffix(".min.css")

    combined = HEADER % {"version": VERSION, "generated": iso_now()}
    total_files = 0
    total_size = 0

    for file_name in CSS_FILES:
        path = styles_dir / file_name
        if not path.exists():
            logging.warning(f"{file_name} not found, skipping...")
            continue
        content = path.read_text(encoding="utf-8")
        section = file_name.replace(".css", "").upper()
        combined += (
            "\n/* ====================================\n"
            f"   {section}\n"
            "   ==================================== */\n\n"
        )
        combined += normalize_css(content) + "\n\n"
        total_files += 1
        total_size += len(content.encode("utf-8"))
        logging.debug(f"Processed {file_name} ({len(content)} chars)")

    combined += UTILITY_CSS + RESPONSIVE_CSS
    if svg_dir is not None:
        combined += icon_mask_css(svg_dir)

    minified = minify_css(combined)
    output.write_text(combined, encoding="utf-8")
    minified_output.write_text(minified, encoding="utf-8")

    size = len(combined.encode("utf-8"))
    minified_size = len(minified.encode("utf-8"))
    report = {
        "timestamp": iso_now(),
        "sourceFiles": total_files,
        "totalSourceSize": total_size,
        "outputSize": size,
        "minifiedSize": minified_size,
        "compressionRatio": f"{(size - minified_size) / size * 100:.1f}%",
        "outputs": {"unminified": output.name, "minified": minified_output.name},
        "features": FEATURES,
    }
    (out_dir / "css-build-report.json").write_text(json.dumps(report, indent=2) + "\n")

    check_braces(combined)
    logging.info(
        f"CSS built from {total_files} source files: {size} bytes, {minified_size} minified"
    )
    return report
