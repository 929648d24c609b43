"""jQuery idiom matcher tests."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from jq2react.services.conversion.parser import JSParser
from jq2react.services.conversion.patterns import (
    is_remote_idiom,
    is_traversal_chain,
    match_event_binding,
    match_ready_block,
    match_remote_chain,
    method_chain,
    selector_method_call,
    selector_of,
)


def _expression(code: str) -> Dict[str, Any]:
    return JSParser.get_statements(JSParser.parse(code))[0]["expression"]


def test_shorthand_binding() -> None:
    matches = match_event_binding(_expression("$('#btn').click(function () {});"))
    assert len(matches) == 1
    assert (matches[0].selector, matches[0].event, matches[0].delegation_parent) == ("#btn", "click", None)


def test_named_binding_with_several_namespaced_events() -> None:
    matches = match_event_binding(_expression("$('#field').on('focus.ns blur', onChange);"))
    assert [m.event for m in matches] == ["focus", "blur"]
    assert all(JSParser.identifier_name(m.handler) == "onChange" for m in matches)


def test_delegated_binding_targets_the_child() -> None:
    matches = match_event_binding(_expression("$('#list').on('click', '.item', function (e) {});"))
    assert len(matches) == 1
    assert matches[0].selector == ".item"
    assert matches[0].delegation_parent == "#list"


def test_delegate_method() -> None:
    matches = match_event_binding(_expression("$('#list').delegate('li', 'click', function () {});"))
    assert [(m.selector, m.event, m.delegation_parent) for m in matches] == [("li", "click", "#list")]


def test_trigger_call_is_not_a_binding() -> None:
    assert match_event_binding(_expression("$('#btn').click();")) == []


@pytest.mark.parametrize(
    "code",
    [
        "$(function () { a(); });",
        "$(document).ready(function () {});",
        "jQuery(document).ready(() => {});",
        "window.onload = function () {};",
        "document.addEventListener('DOMContentLoaded', function () {});",
        "$(window).on('load', function () {});",
    ],
)
def test_ready_block_variants(code: str) -> None:
    assert JSParser.is_function(match_ready_block(_expression(code)))


def test_ready_on_an_element_is_not_a_ready_block() -> None:
    assert match_ready_block(_expression("$('#x').ready(function () {});")) is None


def test_remote_chain_collects_continuations() -> None:
    chain = match_remote_chain(
        _expression("$.getJSON('/a').done(function (d) {}).fail(function () {});")
    )
    assert chain is not None
    remote, links = chain
    assert remote.method == "getJSON"
    assert [link.method for link in links] == ["done", "fail"]


def test_method_chain_unrolls_to_selector_root() -> None:
    root, links = method_chain(_expression("$('#a').addClass('x').show();"))
    assert selector_of(root) == "#a"
    assert [link.method for link in links] == ["addClass", "show"]


def test_selector_method_call_lists_traversal_links() -> None:
    match = selector_method_call(_expression("$('#list').addClass('x').find('.item').html('y');"))
    assert (match.selector, match.method, match.traversal) == ("#list", "html", ("find",))
    assert match.target == "#list.find()"
    assert selector_method_call(_expression("$('#a').addClass('x').show();")).traversal == ()


def test_traversal_chain_needs_a_link_after_the_traversal() -> None:
    assert is_traversal_chain(_expression("$('#list').children().hide();"))
    assert not is_traversal_chain(_expression("$('#list').find('.item');"))
    assert not is_traversal_chain(_expression("$('#a').addClass('x').show();"))


def test_remote_idiom_detects_fetch() -> None:
    ast = JSParser.parse("function load() { return fetch('/x'); }")
    assert is_remote_idiom(ast)
    assert not is_remote_idiom(JSParser.parse("function load() { return 1; }"))
