import json

import pytest

from modules import build_function_icons, build_react_components, generate_icon_function
from tests.conftest import BATTERY, CAR, write_icons


def test_generate_esm():
    source = generate_icon_function("battery", BATTERY, "esm")
    assert "export default function Battery(props = {})" in source
    assert "export { Battery };" in source
    assert "'sva-icon-battery'" in source
    assert 'viewBox="0 0 24 24"' in source
    assert 'fill-rule="evenodd"' in source
    assert 'clip-rule="evenodd"' in source
    assert 'fill="#000"' not in source
    assert 'stroke="#333"' not in source
    assert "stroke-width=" not in source
    assert "module.exports" not in source


def test_generate_cjs():
    source = generate_icon_function("car", CAR, "cjs")
    assert source.count("function Car(props = {})") == 1
    assert "export default" not in source
    assert "export {" not in source
    assert "module.exports = Car;" in source
    assert "module.exports.default = Car;" in source
    assert 'viewBox="0 0 32 32"' in source
    assert 'fill="none"' in source
    assert "style=" not in source


def test_generate_escapes_template_literal():
    source = generate_icon_function("odd", '<svg viewBox="0 0 24 24"><text>`${x}`</text></svg>')
    assert "<text>\\`\\${x}\\`</text>" in source


def test_generate_unknown_format():
    with pytest.raises(ValueError):
        generate_icon_function("tick", BATTERY, "umd")


def test_build_function_icons(svg_dir, tmp_path):
    esm, cjs = tmp_path / "dist" / "esm", tmp_path / "dist" / "cjs"
    exports = build_function_icons(svg_dir, esm, cjs)

    assert exports == [("battery", "Battery"), ("book-service", "BookService"), ("car", "Car"), ("tick", "Tick")]
    for name in ("battery", "book-service", "car", "tick"):
        assert (esm / f"{name}.js").exists()
        assert (cjs / f"{name}.js").exists()
        assert (esm / f"{name}.d.ts").exists()

    index = (esm / "index.js").read_text().splitlines()
    assert index[1] == "export { default as BookService } from './book-service.js';"
    assert (cjs / "index.js").read_text().splitlines()[3] == "module.exports.Tick = require('./tick.js');"
    assert json.loads((cjs / "package.json").read_text()) == {"type": "commonjs"}

    dts = (esm / "index.d.ts").read_text()
    assert "export interface IconProps" in dts
    assert "export declare const Car: IconFunction;" in dts
    assert "declare function Battery(props?: IconProps): string;" in (esm / "battery.d.ts").read_text()


def test_build_function_icons_rejects_clashing_names(tmp_path):
    svg_dir = write_icons(tmp_path / "svg", {"arrow-up": BATTERY, "arrow_up": BATTERY})
    with pytest.raises(ValueError, match="ArrowUp"):
        build_function_icons(svg_dir, tmp_path / "esm", tmp_path / "cjs")


def test_build_function_icons_empty(tmp_path):
    (tmp_path / "svg").mkdir()
    with pytest.raises(FileNotFoundError):
        build_function_icons(tmp_path / "svg", tmp_path / "esm", tmp_path / "cjs")


def test_build_react_components(svg_dir, tmp_path):
    out = tmp_path / "react"
    components = build_react_components(svg_dir, out)

    names = [c["name"] for c in components]
    assert names == ["Battery", "BookService", "Car", "Tick", "Check"]
    check = components[-1]
    assert check == {"name": "Check", "originalName": "check", "file": "Tick.js", "aliasFor": "Tick"}
    # No cross.svg, so no Close alias
    assert "Close" not in names

    esm_source = (out / "esm" / "Car.js").read_text()
    assert "const Car = ({" in esm_source
    assert 'viewBox="0 0 32 32"' in esm_source
    assert "Car.displayName = 'Car';" in esm_source

    cjs_source = (out / "cjs" / "Car.js").read_text()
    assert "React.createElement('svg'" in cjs_source
    assert "module.exports = Car;" in cjs_source

    assert "export { default as Check } from './Tick.js';" in (out / "esm" / "index.js").read_text()
    assert "export declare const Check: ReactIconComponent;" in (out / "index.d.ts").read_text()
