"""
Type definitions for the jQuery to React converter.

These are the building blocks of the component descriptor: everything the
pattern extractor finds in a script is recorded as one of these values, and
the code generator renders them back out in the order they were discovered.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class DocumentKind(str, Enum):
    """Kind of source document"""
    SCRIPT = "script"   # Plain JavaScript file
    PAGE = "page"       # HTML page with embedded scripts and styles


class ResourceKind(str, Enum):
    """Kind of externally referenced resource"""
    STYLESHEET = "stylesheet"
    SCRIPT = "script"


class StateKind(str, Enum):
    """How a variable is declared in the component"""
    REACTIVE = "reactive"   # useState pair
    CONSTANT = "constant"   # plain const


class EffectTrigger(str, Enum):
    """Lifecycle trigger of an effect"""
    MOUNT = "mount"
    EVENT = "event"
    DATA_FETCH = "data-fetch"


class RemoteCallKind(str, Enum):
    """Remote call idiom the call was converted from"""
    GENERIC = "generic"   # $.ajax({...})
    GET = "get"           # $.get / $.getJSON
    POST = "post"         # $.post


class Capability(str, Enum):
    """Framework capabilities the generated component needs"""
    STATEFUL_VALUE = "stateful-value"
    SIDE_EFFECT = "side-effect"
    STABLE_REFERENCE = "stable-reference"


# Hook imported for each capability
CAPABILITY_HOOKS = {
    Capability.STATEFUL_VALUE: "useState",
    Capability.SIDE_EFFECT: "useEffect",
    Capability.STABLE_REFERENCE: "useRef",
}


@dataclass
class ExternalResource:
    """A stylesheet or script referenced by the page and available locally"""
    original_reference: str
    resolved_local_path: Path
    kind: ResourceKind
    is_module: bool = False


@dataclass
class SourceDocument:
    """
    A source file prepared for conversion.

    For script files the script text is the whole file. For HTML pages it is
    the concatenation of the inline <script> bodies, and embedded <style>
    rules are kept separately so they can be written as a sibling stylesheet.
    """
    text: str
    base_name: str
    source_dir: Path
    kind: DocumentKind = DocumentKind.SCRIPT
    script: str = ""
    styles: str = ""
    path: Optional[Path] = None


@dataclass
class StateVariable:
    identifier: str
    initial_value: str
    kind: StateKind = StateKind.REACTIVE
    purpose: Optional[str] = None

    @property
    def is_reactive(self) -> bool:
        return self.kind == StateKind.REACTIVE


@dataclass
class StableReference:
    identifier: str
    selector: str


@dataclass
class EventHandlerBinding:
    """A listener found in the source, turned into a named handler"""
    selector: str
    event: str
    handler_name: str
    reference: str
    translated_body: str
    parameter: str = "e"
    delegation_parent: Optional[str] = None


@dataclass
class Effect:
    """
    A useEffect block.

    Event effects name the handler they attach so dependency inference can
    look through the handler body as well as the effect code.
    """
    trigger: EffectTrigger
    code: str
    description: str
    dependencies: List[str] = field(default_factory=list)
    handler_name: Optional[str] = None


@dataclass
class FunctionDefinition:
    name: str
    parameters: str
    body: str
    is_async: bool = False


@dataclass
class RemoteCall:
    kind: RemoteCallKind
    url: str
    translated_code: str
    method: str = "GET"
    request_body: Optional[str] = None
    success_handler: Optional[str] = None
    error_handler: Optional[str] = None


@dataclass
class AnimationUsage:
    """An animation call that has no direct React equivalent"""
    selector: str
    method: str
    arguments: str
    suggestion: str


@dataclass(frozen=True)
class ComponentSnapshot:
    """
    Read-only view of a completed descriptor, consumed by the code generator.
    """
    component_name: str
    states: Tuple[StateVariable, ...]
    references: Tuple[StableReference, ...]
    handlers: Tuple[EventHandlerBinding, ...]
    effects: Tuple[Effect, ...]
    functions: Tuple[FunctionDefinition, ...]
    remote_calls: Tuple[RemoteCall, ...]
    animations: Tuple[AnimationUsage, ...]
    capabilities: Tuple[Capability, ...]
    warnings: Tuple[str, ...] = ()
    stylesheet: str = ""
    resources: Tuple[ExternalResource, ...] = ()
    detected_libraries: Tuple[str, ...] = ()

    @property
    def reactive_states(self) -> Tuple[StateVariable, ...]:
        return tuple(s for s in self.states if s.is_reactive)
