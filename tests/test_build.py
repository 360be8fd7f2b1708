import json

import pytest

from build import main, make_parser


def run(root, *argv):
    return main(make_parser().parse_args(["--root", str(root), *argv]))


def test_all(project):
    assert run(project, "all") == 0

    dist = project / "dist"
    assert (dist / "icons" / "esm" / "index.js").exists()
    assert (dist / "icons" / "cjs" / "car.js").exists()
    assert (dist / "react" / "esm" / "Tick.js").exists()
    assert (dist / "sprite" / "sva-icons-sprite.svg").exists()
    assert (dist / "sva-icons-class-based.min.css").exists()
    assert (dist / "bundles" / "core.js").exists()
    assert (project / "web-components" / "sva-icon-embedded.js").exists()


def test_optimize_writes_manifest(project):
    assert run(project, "optimize") == 0
    manifest = json.loads((project / "icons.json").read_text())
    assert manifest["metadata"]["totalIcons"] == 4


def test_validate_after_build(project):
    assert run(project, "functions") == 0
    assert run(project, "validate", "--integrity", "--sync") == 0
    report = json.loads((project / "validation-report.json").read_text())
    assert report["sync_status"] == "perfect"


def test_validate_reports_source_problems(project):
    assert run(project, "validate", "--attributes") == 1
    assert run(project, "validate", "--names") == 0


def test_import_map(project):
    run(project, "functions")
    assert run(project, "import-map", "-e", "vite", "-o", "maps/vite.json") == 0
    imports = json.loads((project / "maps" / "vite.json").read_text())["imports"]
    assert imports["sva-icons/icons/tick"] == "sva-icons/dist/icons/esm/tick.js"


def test_clean(project):
    run(project, "functions")
    assert run(project, "clean") == 0
    assert list((project / "dist").iterdir()) == []
    assert (project / ".backup-dist" / "icons" / "esm" / "tick.js").exists()
    assert json.loads((project / "clean-report.json").read_text())["summary"]["items_cleaned"] == 1


def test_failure_returns_nonzero(tmp_path):
    assert run(tmp_path, "functions") == 1


def test_notify_without_configuration(project, monkeypatch):
    for var in ("VERCEL_BUILD_HOOK_URL", "VISUAL_TESTING_WEBHOOK_URL"):
        monkeypatch.delenv(var, raising=False)
    assert run(project, "notify", "--package-version", "9.9.9") == 0


def test_unknown_environment_rejected(project):
    with pytest.raises(SystemExit):
        make_parser().parse_args(["import-map", "-e", "rollup"])
