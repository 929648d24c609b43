"""Pattern extraction tests, one script per recognised idiom."""

from __future__ import annotations

from jq2react.services.conversion.descriptor import ComponentDescriptor
from jq2react.services.conversion.extractor import PatternExtractor, is_constant_name
from jq2react.services.conversion.types import ComponentSnapshot, EffectTrigger, StateKind


def _extract(script: str, name: str = "Widget") -> ComponentSnapshot:
    return PatternExtractor(script).extract(ComponentDescriptor(name)).snapshot()


def test_reassigned_variable_becomes_state() -> None:
    snapshot = _extract(
        "let counter = 0;\n"
        "$('#inc').click(function () {\n"
        "  counter = counter + 1;\n"
        "});\n"
    )
    assert [(s.identifier, s.initial_value, s.kind) for s in snapshot.states] == [
        ("counter", "0", StateKind.REACTIVE)
    ]
    handler = snapshot.handlers[0]
    assert handler.handler_name == "handleIncClick"
    assert handler.translated_body == "setCounter(counter + 1);"
    event_effects = [e for e in snapshot.effects if e.trigger == EffectTrigger.EVENT]
    assert [e.dependencies for e in event_effects] == [["counter"]]


def test_constants_win_and_unused_variables_stay_in_place() -> None:
    snapshot = _extract(
        "var API_URL = '/api';\n"
        "var CONFIG_timeout = 30;\n"
        "var plain = 2;\n"
        "console.log(plain);\n"
    )
    assert [(s.identifier, s.kind) for s in snapshot.states] == [
        ("API_URL", StateKind.CONSTANT),
        ("CONFIG_timeout", StateKind.CONSTANT),
    ]
    assert len(snapshot.effects) == 1
    assert snapshot.effects[0].trigger == EffectTrigger.MOUNT
    assert snapshot.effects[0].code == "var plain = 2;\nconsole.log(plain);"


def test_constant_names() -> None:
    assert is_constant_name("API_URL")
    assert is_constant_name("CONST_x")
    assert not is_constant_name("apiUrl")


def test_event_binding_gets_ref_handler_and_listener_effect() -> None:
    snapshot = _extract("$('#submitBtn').on('click', function (e) {\n  e.preventDefault();\n});")
    assert [r.identifier for r in snapshot.references] == ["submitBtnRef"]
    handler = snapshot.handlers[0]
    assert (handler.handler_name, handler.parameter, handler.reference) == (
        "handleSubmitBtnClick", "e", "submitBtnRef"
    )
    assert handler.translated_body == "e.preventDefault();"
    effect = snapshot.effects[0]
    assert effect.trigger == EffectTrigger.EVENT
    assert effect.description == "Attach click listener to #submitBtn"
    assert "element.addEventListener('click', handleSubmitBtnClick);" in effect.code
    assert "return () => element.removeEventListener('click', handleSubmitBtnClick);" in effect.code


def test_every_binding_is_covered_by_exactly_one_effect() -> None:
    snapshot = _extract(
        "$('#btn').click(function () { a(); });\n"
        "$('#btn').on('click', function () { b(); });\n"
        "$('#name').on('change keyup', function () { check(); });\n"
    )
    names = [h.handler_name for h in snapshot.handlers]
    assert names == ["handleBtnClick", "handleNameChange", "handleNameKeyup"]
    assert snapshot.handlers[0].translated_body == "a();\nb();"
    for name in names:
        covering = [e for e in snapshot.effects if e.handler_name == name]
        assert len(covering) == 1


def test_handler_name_collision_is_reported() -> None:
    snapshot = _extract(
        "let handleBtnClick = 0;\n"
        "handleBtnClick++;\n"
        "$('#btn').click(function () { go(); });\n"
    )
    assert snapshot.handlers == ()
    assert any("already taken" in warning for warning in snapshot.warnings)


def test_delegated_binding() -> None:
    snapshot = _extract("$('#list').on('click', '.item', function () { pick(); });")
    handler = snapshot.handlers[0]
    assert handler.selector == ".item"
    assert handler.reference == "itemRef"
    assert handler.delegation_parent == "#list"
    assert snapshot.effects[0].description == "Attach click listener to .item (delegated from #list)"
    assert snapshot.effects[0].code.startswith("// Delegated from #list")


def test_named_handler_and_function_extraction() -> None:
    snapshot = _extract(
        "function onSave(e) { e.preventDefault(); }\n"
        "$('#save').click(onSave);\n"
    )
    assert snapshot.handlers[0].translated_body == "onSave(e);"
    function = snapshot.functions[0]
    assert (function.name, function.parameters, function.body, function.is_async) == (
        "onSave", "e", "e.preventDefault();", False
    )


def test_this_refers_to_the_event_target() -> None:
    snapshot = _extract("$('.tab').click(function (evt) { $(this).addClass('active'); });")
    handler = snapshot.handlers[0]
    assert handler.parameter == "evt"
    assert handler.translated_body == "evt.currentTarget.classList.add('active');"


def test_ready_block_becomes_mount_effect() -> None:
    snapshot = _extract(
        "$(document).ready(function () {\n"
        "  console.log('ready');\n"
        "  $('#save').on('click', function () { save(); });\n"
        "});\n"
    )
    assert [e.trigger for e in snapshot.effects] == [EffectTrigger.MOUNT, EffectTrigger.EVENT]
    mount = snapshot.effects[0]
    assert mount.code == "console.log('ready');"
    assert mount.description == "Runs once on mount, converted from a page-ready block"
    assert mount.dependencies == []
    assert snapshot.handlers[0].handler_name == "handleSaveClick"


def test_top_level_remote_call_becomes_data_fetch_effect() -> None:
    snapshot = _extract("$.get('/api/users', function (data) {\n  console.log(data);\n});")
    assert len(snapshot.remote_calls) == 1
    assert len(snapshot.effects) == 1
    effect = snapshot.effects[0]
    assert effect.trigger == EffectTrigger.DATA_FETCH
    assert effect.description == "Fetch data from /api/users on mount"
    assert effect.code.startswith("fetch('/api/users')")
    assert "    console.log(data);" in effect.code
    assert effect.code.endswith("  .catch(error => console.error('Error:', error));")


def test_remote_call_inside_handler_stays_in_the_handler() -> None:
    snapshot = _extract(
        "$('#load').click(function () {\n"
        "  $.getJSON('/api/items', function (items) { render(items); });\n"
        "});"
    )
    assert len(snapshot.remote_calls) == 1
    assert not [e for e in snapshot.effects if e.trigger == EffectTrigger.DATA_FETCH]
    body = snapshot.handlers[0].translated_body
    assert body.startswith("fetch('/api/items')")
    assert ".then(items => {" in body


def test_animation_is_flagged_not_translated() -> None:
    snapshot = _extract("$('#box').fadeIn(400);")
    animation = snapshot.animations[0]
    assert (animation.selector, animation.method, animation.arguments, animation.suggestion) == (
        "#box", "fadeIn", "400", "Use CSS transition with opacity"
    )
    mount = snapshot.effects[0]
    assert mount.code.startswith("/* TODO: #box.fadeIn() has no direct React equivalent")
    assert "$('#box').fadeIn" not in mount.code


def test_mutations_synthesise_state() -> None:
    snapshot = _extract(
        "$('#title').text('Hello');\n"
        "$('#name').val();\n"
        "$('#panel').show();\n"
        "$('#menu').toggleClass('open');\n"
    )
    assert [(s.identifier, s.initial_value, s.purpose) for s in snapshot.states] == [
        ("title", "''", "Text content"),
        ("name", "''", "Form input value"),
        ("panelVisible", "true", "Visibility toggle"),
        ("menuClass", "''", "CSS class management for open"),
    ]
    assert snapshot.effects[0].code.splitlines()[0] == "setTitle('Hello');"


def test_style_mutation_produces_warning() -> None:
    snapshot = _extract("$('#box').css('color', 'red');")
    assert "#box.css(...) was not converted; use inline styles or CSS classes" in snapshot.warnings


def test_mutation_through_traversal_synthesises_no_state() -> None:
    snapshot = _extract("$('#list').find('.item').html('<b>x</b>');")
    assert snapshot.states == ()
    assert "TODO: traversal chain" in snapshot.effects[0].code


def test_animation_through_traversal_names_the_path() -> None:
    snapshot = _extract("$('#list').children().fadeIn();")
    assert [(a.selector, a.method) for a in snapshot.animations] == [("#list.children()", "fadeIn")]
    assert snapshot.states == ()


def test_element_state_is_renamed_around_script_functions() -> None:
    snapshot = _extract(
        "function message() { return 'm'; }\n"
        "$('#go').click(function () { $('#message').text('hi'); });\n"
    )
    assert [s.identifier for s in snapshot.states] == ["messageState"]
    assert snapshot.handlers[0].translated_body == "setMessageState('hi');"
    assert [f.name for f in snapshot.functions] == ["message"]
    assert snapshot.warnings == ()


def test_undeclarable_element_state_is_reported() -> None:
    snapshot = _extract("$('#go').click(function () { $('#handleGoClick').text('x'); });")
    assert snapshot.states == ()
    assert (
        "State 'handleGoClick' could not be declared because the name is taken; "
        "review the setHandleGoClick(...) calls"
    ) in snapshot.warnings


def test_deeply_nested_script_becomes_a_warning() -> None:
    snapshot = _extract("var x = " + "(" * 3000 + "1" + ")" * 3000 + ";")
    assert snapshot.states == ()
    assert any("nested too deeply" in warning for warning in snapshot.warnings)


def test_async_detection() -> None:
    snapshot = _extract(
        "function loadUsers() {\n"
        "  $.get('/api/users', function (data) { show(data); });\n"
        "}\n"
        "async function refresh() { await loadUsers(); }\n"
        "const double = x => x * 2;\n"
    )
    functions = {f.name: f for f in snapshot.functions}
    assert functions["loadUsers"].is_async
    assert functions["refresh"].is_async
    assert not functions["double"].is_async
    assert functions["double"].parameters == "x"
    assert functions["double"].body == "return x * 2;"
    assert not [e for e in snapshot.effects if e.trigger == EffectTrigger.DATA_FETCH]


def test_simple_id_selectors_become_refs() -> None:
    snapshot = _extract("var value = $('#amount').data('x');\nconsole.log($('.row'));")
    assert [r.identifier for r in snapshot.references] == ["amountRef"]


def test_dependencies_are_reactive_states_only() -> None:
    snapshot = _extract(
        "var LIMIT = 3;\n"
        "let count = 0;\n"
        "let label = 'x';\n"
        "$('#add').click(function () { count += LIMIT; helper(label); });\n"
        "$('#reset').click(function () { count = 0; });\n"
        "$('#title').text(label);\n"
    )
    reactive = {s.identifier for s in snapshot.states if s.kind == StateKind.REACTIVE}
    for effect in snapshot.effects:
        assert set(effect.dependencies) <= reactive


def test_unparsable_script_yields_warning_only() -> None:
    snapshot = _extract("$(function () {")
    assert snapshot.states == ()
    assert snapshot.effects == ()
    assert len(snapshot.warnings) == 1
    assert snapshot.warnings[0].startswith("Script could not be parsed")


def test_blank_script_yields_empty_snapshot() -> None:
    snapshot = _extract("   \n")
    assert snapshot.effects == ()
    assert snapshot.warnings == ()
