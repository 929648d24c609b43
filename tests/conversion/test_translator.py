"""Body translation and remote call conversion tests."""

from __future__ import annotations

from typing import Iterable

from jq2react.services.conversion.parser import JSParser
from jq2react.services.conversion.translator import CodeTranslator, dedent_block
from jq2react.services.conversion.types import RemoteCallKind


def _translate(code: str, state_names: Iterable[str] = ()) -> str:
    translator = CodeTranslator(code)
    translator.state_names = set(state_names)
    statement = JSParser.get_statements(JSParser.parse(code))[0]
    return translator.translate(statement)


def _remote(code: str):
    translator = CodeTranslator(code)
    expression = JSParser.get_statements(JSParser.parse(code))[0]["expression"]
    return translator.remote_call(expression)


def test_content_mutation_becomes_state_update() -> None:
    assert _translate("$('#title').text('Hello');") == "setTitle('Hello');"


def test_chain_is_split_into_one_statement_per_link() -> None:
    assert _translate("$('#menu').addClass('open').show();") == "setMenuClass('open');\nsetMenuVisible(true);"


def test_traversal_chain_is_left_as_written_and_flagged() -> None:
    assert _translate("$('#list').find('.item').html('<b>x</b>');") == (
        "$('#list').find('.item').html('<b>x</b>') "
        "/* TODO: traversal chain, convert to refs or state by hand */;"
    )


def test_element_state_avoids_names_the_script_declares() -> None:
    code = "$('#title').text('Hello');"
    translator = CodeTranslator(code)
    translator.reserved_names = {"title", "setTitleState"}
    statement = JSParser.get_statements(JSParser.parse(code))[0]
    assert translator.translate(statement) == "setTitleState2('Hello');"
    assert translator.element_states == {"titleState2"}


def test_simple_id_selector_becomes_ref() -> None:
    assert _translate("var el = $('#card');") == "var el = cardRef.current;"


def test_complex_selector_is_flagged() -> None:
    assert _translate("var els = $('.card');") == (
        "var els = document.querySelectorAll('.card') /* TODO: use a ref or state */;"
    )


def test_assignments_to_state_use_the_mutator() -> None:
    assert _translate("counter += 2;", ["counter"]) == "setCounter(counter + (2));"
    assert _translate("counter++;", ["counter"]) == "setCounter(counter + 1);"
    assert _translate("other = 1;", ["counter"]) == "other = 1;"


def test_this_inside_handler_is_the_event_target() -> None:
    code = "$('#b').click(function (e) { $(this).addClass('on'); });"
    translator = CodeTranslator(code)
    handler = JSParser.get_statements(JSParser.parse(code))[0]["expression"]["arguments"][0]
    assert translator.block_body(handler, "e") == "e.currentTarget.classList.add('on');"


def test_animation_and_css_become_markers() -> None:
    assert _translate("$('#box').fadeIn(400);").startswith("/* TODO: #box.fadeIn() has no direct React equivalent")
    assert _translate("$('#box').css('color', 'red');") == (
        "/* TODO: use inline style or CSS classes for #box.css(...) */;"
    )


def test_get_with_callback() -> None:
    remote = _remote("$.get('/api/users', function (data) { console.log(data); });")
    assert remote.kind == RemoteCallKind.GET
    assert remote.url == "/api/users"
    assert remote.translated_code == "\n".join([
        "fetch('/api/users')",
        "  .then(response => response.json())",
        "  .then(data => {",
        "    console.log(data);",
        "  })",
        "  .catch(error => console.error('Error:', error))",
    ])


def test_post_serialises_the_body() -> None:
    remote = _remote("$.post('/api/save', { id: 1 });")
    assert remote.method == "POST"
    assert remote.request_body == "JSON.stringify({ id: 1 })"
    assert remote.translated_code.splitlines()[:5] == [
        "fetch('/api/save', {",
        "  method: 'POST',",
        "  headers: { 'Content-Type': 'application/json' },",
        "  body: JSON.stringify({ id: 1 })",
        "})",
    ]


def test_get_data_goes_into_the_query_string() -> None:
    remote = _remote("$.get('/api/search', { q: term });")
    assert remote.translated_code.splitlines()[0] == (
        "fetch('/api/search' + '?' + new URLSearchParams({ q: term }))"
    )


def test_ajax_config_object() -> None:
    remote = _remote(
        "$.ajax({\n"
        "  url: '/api/save',\n"
        "  type: 'post',\n"
        "  data: { name: name },\n"
        "  success: function (res) { done(res); },\n"
        "  error: function (xhr) { fail(xhr); }\n"
        "});"
    )
    assert remote.kind == RemoteCallKind.GENERIC
    assert remote.method == "POST"
    assert remote.url == "/api/save"
    assert remote.success_handler == "done(res);"
    assert remote.error_handler == "fail(xhr);"
    assert "  .then(res => {" in remote.translated_code
    assert "  .catch(xhr => {" in remote.translated_code


def test_promise_continuations() -> None:
    remote = _remote(
        "$.getJSON('/api/items').done(function (items) { render(items); }).fail(function () { alert('x'); });"
    )
    lines = remote.translated_code.splitlines()
    assert lines[0] == "fetch('/api/items')"
    assert "  .then(items => {" in lines
    assert "    render(items);" in lines
    assert "  .catch(error => {" in lines
    assert "    alert('x');" in lines


def test_dedent_block_trims_and_dedents() -> None:
    assert dedent_block("\n    a();\n      b();\n    ") == "a();\n  b();"
