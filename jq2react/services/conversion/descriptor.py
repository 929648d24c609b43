"""
Component descriptor builder.

The descriptor is the intermediate representation between the pattern
extractor and the code generator. A fresh instance is created for every
conversion and handed through the extraction passes; once they are done,
snapshot() freezes it for the generator.
"""
import logging
import re
from typing import Dict, List, Optional, Tuple

from .naming import mutator_name, reference_identifier
from .types import (
    AnimationUsage,
    Capability,
    ComponentSnapshot,
    Effect,
    EffectTrigger,
    EventHandlerBinding,
    ExternalResource,
    FunctionDefinition,
    RemoteCall,
    StableReference,
    StateVariable,
)

logger = logging.getLogger(__name__)

_STRING_LITERAL = re.compile(r"'(?:\\.|[^'\\\n])*'|\"(?:\\.|[^\"\\\n])*\"|`(?:\\.|[^`\\])*`")
_IDENTIFIER = re.compile(r'(?<![\w$.])([A-Za-z_$][\w$]*)')


def referenced_identifiers(code: str) -> List[str]:
    """
    Identifiers referenced in a code fragment, in order of first appearance.

    String contents and property names (anything right after a '.') are
    ignored.
    """
    seen = []
    for name in _IDENTIFIER.findall(_STRING_LITERAL.sub("''", code)):
        if name not in seen:
            seen.append(name)
    return seen


class ComponentDescriptor:
    """
    Accumulates everything found in one source document.

    All collections keep first-discovered order; identifiers are unique
    across states, references, handlers and functions (first one wins).
    """

    def __init__(self, component_name: str):
        self.component_name = component_name
        self._states: Dict[str, StateVariable] = {}
        self._references: Dict[str, StableReference] = {}
        self._handlers: Dict[str, EventHandlerBinding] = {}
        self._functions: Dict[str, FunctionDefinition] = {}
        self._effects: List[Effect] = []
        self._remote_calls: List[RemoteCall] = []
        self._animations: List[AnimationUsage] = []
        self._capabilities: List[Capability] = []
        self._warnings: List[str] = []
        self.stylesheet = ""
        self.resources: List[ExternalResource] = []
        self.detected_libraries: List[str] = []

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def has_identifier(self, identifier: str) -> bool:
        """True if the name is taken by any declaration, including mutators."""
        if identifier in self._states or identifier in self._references:
            return True
        if identifier in self._handlers or identifier in self._functions:
            return True
        return any(
            state.is_reactive and mutator_name(state.identifier) == identifier
            for state in self._states.values()
        )

    def get_state(self, identifier: str) -> Optional[StateVariable]:
        return self._states.get(identifier)

    def get_handler(self, name: str) -> Optional[EventHandlerBinding]:
        return self._handlers.get(name)

    @property
    def states(self) -> List[StateVariable]:
        return list(self._states.values())

    @property
    def references(self) -> List[StableReference]:
        return list(self._references.values())

    @property
    def handlers(self) -> List[EventHandlerBinding]:
        return list(self._handlers.values())

    @property
    def effects(self) -> List[Effect]:
        return list(self._effects)

    @property
    def functions(self) -> List[FunctionDefinition]:
        return list(self._functions.values())

    @property
    def remote_calls(self) -> List[RemoteCall]:
        return list(self._remote_calls)

    @property
    def animations(self) -> List[AnimationUsage]:
        return list(self._animations)

    @property
    def warnings(self) -> List[str]:
        return list(self._warnings)

    # ------------------------------------------------------------------
    # Accumulation
    # ------------------------------------------------------------------

    def require(self, capability: Capability):
        if capability not in self._capabilities:
            self._capabilities.append(capability)

    def add_state(self, state: StateVariable) -> bool:
        """
        Record a state variable.

        Returns:
            False if the identifier is already taken (the state is dropped)
        """
        if self.has_identifier(state.identifier):
            return False
        self._states[state.identifier] = state
        if state.is_reactive:
            self.require(Capability.STATEFUL_VALUE)
        logger.debug(f"State '{state.identifier}' ({state.kind.value}) = {state.initial_value}")
        return True

    def add_reference(self, selector: str) -> StableReference:
        """Reference for a selector, created on first use."""
        identifier = reference_identifier(selector)
        existing = self._references.get(identifier)
        if existing is not None:
            return existing
        reference = StableReference(identifier=identifier, selector=selector)
        self._references[identifier] = reference
        self.require(Capability.STABLE_REFERENCE)
        return reference

    def add_handler(self, binding: EventHandlerBinding) -> Tuple[EventHandlerBinding, bool]:
        """
        Record an event handler.

        A second binding with the same handler name has its body appended to
        the first one.

        Returns:
            (the stored binding, whether it was newly created)
        """
        existing = self._handlers.get(binding.handler_name)
        if existing is not None:
            if binding.translated_body:
                existing.translated_body = '\n'.join(
                    part for part in (existing.translated_body, binding.translated_body) if part
                )
            return existing, False
        self._handlers[binding.handler_name] = binding
        return binding, True

    def add_effect(self, effect: Effect):
        self._effects.append(effect)
        self.require(Capability.SIDE_EFFECT)

    def add_function(self, function: FunctionDefinition) -> bool:
        if self.has_identifier(function.name):
            return False
        self._functions[function.name] = function
        return True

    def add_remote_call(self, call: RemoteCall):
        self._remote_calls.append(call)

    def add_animation(self, animation: AnimationUsage):
        self._animations.append(animation)

    def add_warning(self, message: str):
        if message not in self._warnings:
            self._warnings.append(message)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def _dependencies(self, effect: Effect, reactive: List[str]) -> List[str]:
        if effect.trigger != EffectTrigger.EVENT:
            return []
        code = effect.code
        handler = self._handlers.get(effect.handler_name) if effect.handler_name else None
        if handler is not None:
            code = f"{code}\n{handler.translated_body}"
        referenced = set(referenced_identifiers(code))
        return [name for name in reactive if name in referenced]

    def snapshot(self) -> ComponentSnapshot:
        """Freeze the descriptor, computing every effect's dependency list."""
        reactive = [s.identifier for s in self._states.values() if s.is_reactive]
        effects = tuple(
            Effect(
                trigger=effect.trigger,
                code=effect.code,
                description=effect.description,
                dependencies=self._dependencies(effect, reactive),
                handler_name=effect.handler_name,
            )
            for effect in self._effects
        )
        return ComponentSnapshot(
            component_name=self.component_name,
            states=tuple(self._states.values()),
            references=tuple(self._references.values()),
            handlers=tuple(self._handlers.values()),
            effects=effects,
            functions=tuple(self._functions.values()),
            remote_calls=tuple(self._remote_calls),
            animations=tuple(self._animations),
            capabilities=tuple(self._capabilities),
            warnings=tuple(self._warnings),
            stylesheet=self.stylesheet,
            resources=tuple(self.resources),
            detected_libraries=tuple(self.detected_libraries),
        )
