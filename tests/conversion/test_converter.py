"""Single file conversion tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from jq2react.services.conversion.converter import ConversionError, JQueryToReactConverter
from jq2react.services.conversion.types import DocumentKind


def test_convert_source_summary() -> None:
    result = JQueryToReactConverter().convert_source(
        "let n = 0;\n$('#inc').click(function () { n++; });\n$.get('/api/n');",
        component_name="counter-widget",
    )
    assert result.component_name == "CounterWidget"
    assert result.summary() == {
        "states": 1,
        "refs": 1,
        "handlers": 1,
        "functions": 0,
        "effects": 2,
        "remoteCalls": 1,
        "animations": 0,
    }
    assert result.written == []


def test_convert_file_writes_sibling_component(tmp_path: Path) -> None:
    source = tmp_path / "app.js"
    source.write_text("$('#go').click(function () { run(); });\n", encoding="utf-8")

    result = asyncio.run(JQueryToReactConverter().convert_file(source))

    assert result.component_name == "App"
    assert result.output_path == tmp_path / "app.jsx"
    assert (tmp_path / "app.jsx").read_text(encoding="utf-8") == result.code


def test_convert_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConversionError) as excinfo:
        asyncio.run(JQueryToReactConverter().convert_file(tmp_path / "missing.js"))
    assert excinfo.value.path == tmp_path / "missing.js"


def test_convert_page_writes_stylesheet_and_resources(tmp_path: Path, write_file) -> None:
    write_file(tmp_path / "site" / "css" / "site.css", "body { margin: 0; }\n")
    write_file(tmp_path / "site" / "js" / "helpers.js", "function fmt(x) { return x; }\n")
    page = write_file(
        tmp_path / "site" / "index.html",
        "<html><head>\n"
        "<link rel=\"stylesheet\" href=\"css/site.css\">\n"
        "<style>.hidden { display: none; }</style>\n"
        "<script src=\"https://code.jquery.com/jquery-3.6.0.min.js\"></script>\n"
        "<script src=\"js/helpers.js\"></script>\n"
        "</head><body>\n"
        "<script>\n$('#toggle').click(function () { $('#panel').toggle(); });\n</script>\n"
        "</body></html>\n",
    )
    out = tmp_path / "out" / "Index.jsx"

    result = asyncio.run(JQueryToReactConverter().convert_file(page, out))

    assert result.component_name == "Index"
    assert result.written == [
        out,
        out.parent / "Index.css",
        out.parent / "site.css",
        out.parent / "utils" / "helpers.util.js",
    ]
    assert (out.parent / "Index.css").read_text(encoding="utf-8") == ".hidden { display: none; }\n"
    code = out.read_text(encoding="utf-8")
    assert "import './Index.css';\n" in code
    assert "import './site.css';\n" in code
    assert "// import * as helpers from './utils/helpers.util';\n" in code
    assert " *   npm install jquery\n" in code
    assert "handleToggleClick" in code


def test_convert_source_as_page() -> None:
    result = JQueryToReactConverter().convert_source(
        "<style>.a { color: red; }</style><script>$('#a').hide();</script>",
        component_name="Card",
        kind=DocumentKind.PAGE,
    )
    assert result.stylesheet == ".a { color: red; }"
    assert "import './Card.css';" in result.code
