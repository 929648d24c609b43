"""ComponentDescriptor tests."""

from __future__ import annotations

from jq2react.services.conversion.descriptor import ComponentDescriptor, referenced_identifiers
from jq2react.services.conversion.types import (
    Capability,
    Effect,
    EffectTrigger,
    EventHandlerBinding,
    FunctionDefinition,
    StateKind,
    StateVariable,
)


def _binding(name: str, body: str) -> EventHandlerBinding:
    return EventHandlerBinding(
        selector="#btn",
        event="click",
        handler_name=name,
        reference="btnRef",
        translated_body=body,
    )


def test_identifiers_are_unique_across_kinds() -> None:
    descriptor = ComponentDescriptor("Widget")
    assert descriptor.add_state(StateVariable("count", "0"))
    assert not descriptor.add_state(StateVariable("count", "1"))
    assert descriptor.has_identifier("setCount")
    assert not descriptor.add_function(FunctionDefinition("setCount", "", ""))
    assert descriptor.get_state("count").initial_value == "0"


def test_constant_does_not_claim_a_mutator() -> None:
    descriptor = ComponentDescriptor("Widget")
    descriptor.add_state(StateVariable("LIMIT", "10", kind=StateKind.CONSTANT))
    assert not descriptor.has_identifier("setLIMIT")
    assert descriptor.snapshot().capabilities == ()


def test_reference_is_created_once_per_selector() -> None:
    descriptor = ComponentDescriptor("Widget")
    first = descriptor.add_reference("#btn")
    second = descriptor.add_reference("#btn")
    assert first is second
    assert [r.identifier for r in descriptor.references] == ["btnRef"]


def test_repeated_handler_bodies_are_merged() -> None:
    descriptor = ComponentDescriptor("Widget")
    _, created = descriptor.add_handler(_binding("handleBtnClick", "a();"))
    merged, created_again = descriptor.add_handler(_binding("handleBtnClick", "b();"))
    assert created and not created_again
    assert merged.translated_body == "a();\nb();"
    assert len(descriptor.handlers) == 1


def test_warnings_are_deduplicated() -> None:
    descriptor = ComponentDescriptor("Widget")
    descriptor.add_warning("same")
    descriptor.add_warning("same")
    assert descriptor.warnings == ["same"]


def test_capabilities_keep_first_use_order() -> None:
    descriptor = ComponentDescriptor("Widget")
    descriptor.add_reference("#a")
    descriptor.add_state(StateVariable("open", "false"))
    descriptor.add_effect(Effect(EffectTrigger.MOUNT, "load();", "load"))
    assert descriptor.snapshot().capabilities == (
        Capability.STABLE_REFERENCE,
        Capability.STATEFUL_VALUE,
        Capability.SIDE_EFFECT,
    )


def test_event_effect_dependencies_come_from_handler_body() -> None:
    descriptor = ComponentDescriptor("Widget")
    descriptor.add_state(StateVariable("unused", "0"))
    descriptor.add_state(StateVariable("count", "0"))
    descriptor.add_state(StateVariable("LIMIT", "5", kind=StateKind.CONSTANT))
    descriptor.add_handler(_binding("handleBtnClick", "setCount(count + LIMIT);"))
    descriptor.add_effect(Effect(
        EffectTrigger.EVENT,
        "btnRef.current.addEventListener('click', handleBtnClick);",
        "Attach click listener to #btn",
        handler_name="handleBtnClick",
    ))
    descriptor.add_effect(Effect(EffectTrigger.MOUNT, "console.log(count);", "mount"))

    effects = descriptor.snapshot().effects
    assert effects[0].dependencies == ["count"]
    assert effects[1].dependencies == []


def test_referenced_identifiers_ignore_strings_and_properties() -> None:
    assert referenced_identifiers("a.b + 'c d' + e(a)") == ["a", "e"]
