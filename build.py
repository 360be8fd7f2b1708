#!python3
"""Build the SVA icon distribution from a folder of SVG sources."""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from clean import clean_dist
from importmap import ENVIRONMENTS, generate_import_map
from manifest import optimize_icons, update_manifest
from modules import build_function_icons, build_react_components
from notify import NotifyConfig, trigger_rebuild
from pack import build_bundles, build_sprite, build_web_component
from styles import build_css
from utils import VERSION, setup_logging
from validate import check_integrity, check_sync, log_issues, validate_attributes, validate_names

SOURCES = Path("svg/")
MANIFEST = Path("icons.json")
STYLES = Path("src/styles/")
DIST = Path("dist/")
WEB_COMPONENT = Path("web-components/sva-icon-embedded.js")
IMPORT_MAP = Path("import-map.json")
BACKUP = Path(".backup-dist/")
CLEAN_REPORT = Path("clean-report.json")
VALIDATION_REPORT = Path("validation-report.json")


@dataclass(frozen=True)
class Paths:
    root: Path

    @property
    def svg(self) -> Path:
        return self.root / SOURCES

    @property
    def dist(self) -> Path:
        return self.root / DIST

    @property
    def esm(self) -> Path:
        return self.dist / "icons" / "esm"

    @property
    def cjs(self) -> Path:
        return self.dist / "icons" / "cjs"


def run_optimize(paths: Paths, args):
    files, stats = optimize_icons(paths.svg)
    update_manifest(files, stats, paths.svg, paths.root / MANIFEST)


def run_functions(paths: Paths, args):
    build_function_icons(paths.svg, paths.esm, paths.cjs)


def run_react(paths: Paths, args):
    build_react_components(paths.svg, paths.dist / "react")


def run_web_component(paths: Paths, args):
    build_web_component(paths.svg, paths.root / WEB_COMPONENT)


def run_sprite(paths: Paths, args):
    build_sprite(paths.svg, paths.dist / "sprite" / "sva-icons-sprite.svg")


def run_css(paths: Paths, args):
    build_css(paths.root / STYLES, paths.dist, paths.svg)


def run_bundles(paths: Paths, args):
    build_bundles(paths.svg, paths.dist / "bundles")


def run_import_map(paths: Paths, args):
    generate_import_map(
        paths.esm,
        paths.root / args.output,
        base_path=args.base_path,
        environment=args.environment,
        include_individual_icons=args.individual_icons,
        inline=args.inline,
    )


def run_validate(paths: Paths, args) -> int:
    selected = [args.attributes, args.names, args.integrity, args.sync]
    everything = not any(selected)
    errors = 0

    if everything or args.attributes:
        issues = validate_attributes(paths.svg)
        log_issues(issues)
        errors += len(issues)
        logging.info(f"Attribute validation: {len(issues)} issues")

    if everything or args.names:
        issues = validate_names(paths.svg)
        log_issues(issues)
        errors += sum(1 for i in issues if i.severity == "error")
        logging.info(f"Name validation: {len(issues)} issues")

    if everything or args.integrity:
        failures = check_integrity(paths.svg, paths.esm)
        for failure in failures:
            logging.error(failure)
        errors += len(failures)
        logging.info(f"Integrity checks: {len(failures)} failures")

    if everything or args.sync:
        report = check_sync(paths.svg, paths.dist, paths.root / VALIDATION_REPORT)
        logging.info(f"Sync status: {report['sync_status']}")
        for rec in report["recommendations"]:
            logging.warning(rec["description"])
        if report["sync_status"] != "perfect":
            errors += 1

    return 1 if errors else 0


def run_clean(paths: Paths, args):
    backup = None if args.no_backup else paths.root / BACKUP
    clean_dist(paths.dist, backup, paths.root / CLEAN_REPORT)


def run_notify(paths: Paths, args):
    trigger_rebuild(NotifyConfig.from_env(), args.package_version)


PIPELINE = [
    ("functions", run_functions),
    ("react", run_react),
    ("web-component", run_web_component),
    ("sprite", run_sprite),
    ("css", run_css),
    ("bundles", run_bundles),
]


def run_all(paths: Paths, args):
    for name, step in PIPELINE:
        logging.info(f"Running {name}...")
        step(paths, args)


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build SVA icon distributions (function modules, React, web component, sprite, CSS, bundles)."
    )
    parser.add_argument("--root", type=Path, default=Path("."), help="Project root directory")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("optimize", help="Optimize SVG sources in place and update icons.json").set_defaults(
        func=run_optimize
    )
    sub.add_parser("functions", help="Build ESM/CJS icon function modules").set_defaults(func=run_functions)
    sub.add_parser("react", help="Build React components").set_defaults(func=run_react)
    sub.add_parser("web-component", help="Build the embedded <sva-icon> web component").set_defaults(
        func=run_web_component
    )
    sub.add_parser("sprite", help="Build the SVG symbol sprite").set_defaults(func=run_sprite)
    sub.add_parser("css", help="Build the CSS system").set_defaults(func=run_css)
    sub.add_parser("bundles", help="Build named icon bundles").set_defaults(func=run_bundles)
    sub.add_parser("all", help="Run every build step").set_defaults(func=run_all)

    im = sub.add_parser("import-map", help="Generate an import map")
    im.add_argument("-o", "--output", type=Path, default=IMPORT_MAP, help="Output file path")
    im.add_argument("-b", "--base-path", default="./node_modules/", help="Base path for imports")
    im.add_argument("-e", "--environment", default="browser", choices=ENVIRONMENTS, help="Target environment")
    im.add_argument(
        "--no-individual-icons",
        dest="individual_icons",
        action="store_false",
        help="Skip individual icon mappings",
    )
    im.add_argument("--inline", action="store_true", help="Write an inline <script type=importmap> snippet")
    im.set_defaults(func=run_import_map)

    val = sub.add_parser("validate", help="Validate sources and generated output")
    val.add_argument("--attributes", action="store_true", help="Check stroke/fill/paint usage")
    val.add_argument("--names", action="store_true", help="Check icon names map to JS identifiers")
    val.add_argument("--integrity", action="store_true", help="Compare generated ESM output with sources")
    val.add_argument("--sync", action="store_true", help="Compare sources with dist/")
    val.set_defaults(func=run_validate)

    cl = sub.add_parser("clean", help="Empty dist/")
    cl.add_argument("--no-backup", action="store_true", help="Do not back up dist/ first")
    cl.set_defaults(func=run_clean)

    nt = sub.add_parser("notify", help="Trigger the visual testing rebuild")
    nt.add_argument("--package-version", default=VERSION, help="Published package version")
    nt.set_defaults(func=run_notify)

    return parser


def main(args) -> int:
    paths = Paths(args.root.resolve())
    try:
        return args.func(paths, args) or 0
    except Exception as e:
        logging.error(f"{args.command} failed: {e}")
        logging.debug("Traceback:", exc_info=True)
        return 1


def cli(argv=None) -> int:
    args = make_parser().parse_args(argv)

    setup_logging()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    return main(args)


if __name__ == "__main__":
    sys.exit(cli())
