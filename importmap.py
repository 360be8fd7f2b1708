import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple

PACKAGE = "sva-icons"
ENVIRONMENTS = ("browser", "vite", "webpack")

# Entry points relative to the package root
ENTRY_POINTS = {
    PACKAGE: "dist/icons/esm/index.js",
    f"{PACKAGE}/class-based": "dist/class-based/esm/index.js",
    f"{PACKAGE}/react": "dist/react/esm/index.js",
    f"{PACKAGE}/bundles": "dist/bundles/index.js",
}


def get_available_icons(esm_dir: Path) -> List[str]:
    if not esm_dir.is_dir():
        logging.warning(f"Icons directory {esm_dir} not found. Run the functions build first.")
        return []
    names = sorted(p.stem for p in esm_dir.glob("*.js") if p.name != "index.js")
    logging.info(f"Found {len(names)} icons for import mapping")
    return names


def _targets(environment: str, base_path: str) -> Tuple[Dict[str, str], str]:
    """Main entry mappings and the prefix under which icon modules live."""
    if environment == "browser":
        prefix = f"{base_path}{PACKAGE}/"
        return {specifier: prefix + target for specifier, target in ENTRY_POINTS.items()}, prefix
    if environment == "vite":
        mapping = {specifier: f"{PACKAGE}/{target}" for specifier, target in ENTRY_POINTS.items()}
        mapping[PACKAGE] = PACKAGE
        return mapping, f"{PACKAGE}/"
    if environment == "webpack":
        return {specifier: f"{PACKAGE}/{target}" for specifier, target in ENTRY_POINTS.items()}, f"{PACKAGE}/"
    raise ValueError(f"Unknown environment: {environment} (expected one of {', '.join(ENVIRONMENTS)})")


def generate_import_map(
    esm_dir: Path,
    output: Path,
    base_path: str = "./node_modules/",
    environment: str = "browser",
    include_individual_icons: bool = True,
    inline: bool = False,
) -> dict:
    """Write an import map for the given bundler/browser environment.

    With *inline*, an HTML ``<script type="importmap">`` snippet is written next
    to *output* instead (``.json`` swapped for ``.html``).
    """
    imports, icon_prefix = _targets(environment, base_path)
    icons = get_available_icons(esm_dir) if include_individual_icons else []
    for name in icons:
        imports[f"{PACKAGE}/icons/{name}"] = f"{icon_prefix}dist/icons/esm/{name}.js"

    import_map = {"imports": imports}
    rendered = json.dumps(import_map, indent=2)

    output.parent.mkdir(parents=True, exist_ok=True)
    if inline:
        if output.suffix == ".json":
            output = output.with_suffix(".html")
        output.write_text(f'<script type="importmap">\n{rendered}\n</script>\n')
    else:
        output.write_text(rendered + "\n")

    logging.info(
        f"Import map generated: {output} ({environment}, "
        f"{len(imports)} mappings: {len(ENTRY_POINTS)} main + {len(icons)} icons)"
    )
    return import_map
