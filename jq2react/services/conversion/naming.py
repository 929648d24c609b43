"""
Identifier derivation.

Every name the converter invents comes from here. The functions are pure, so
a selector yields the same identifier no matter where or how often it is seen.
"""
import re

FALLBACK_NAME = "element"

_NON_ALNUM = re.compile(r'[^a-zA-Z0-9]')
_UNDERSCORE_RUNS = re.compile(r'_+')
_WORD_SPLIT = re.compile(r'[^a-zA-Z0-9]+')


def selector_to_ref_name(selector: str) -> str:
    """
    Derive the base name of a stable reference from a selector.

    Strips a leading '#' or '.', replaces anything non-alphanumeric with '_',
    collapses repeats, trims boundary underscores and lower-cases the first
    character: '#submitBtn' -> 'submitBtn', '.nav-item a' -> 'nav_item_a'.
    """
    name = re.sub(r'^[#.]', '', selector.strip())
    name = _NON_ALNUM.sub('_', name)
    name = _UNDERSCORE_RUNS.sub('_', name).strip('_')
    if not name:
        return FALLBACK_NAME
    return name[0].lower() + name[1:]


def selector_to_state_name(selector: str) -> str:
    """camelCase state name for a selector: '#user-name' -> 'userName'."""
    name = to_camel_case(re.sub(r'^[#.]', '', selector.strip()))
    return name or FALLBACK_NAME


def reference_identifier(selector: str) -> str:
    return f"{selector_to_ref_name(selector)}Ref"


def handler_name(selector: str, event: str) -> str:
    """'#submitBtn', 'click' -> 'handleSubmitBtnClick'"""
    base = selector_to_ref_name(selector)
    return f"handle{base[0].upper()}{base[1:]}{to_pascal_case(event)}"


def mutator_name(identifier: str) -> str:
    """State setter paired with a state variable: 'counter' -> 'setCounter'."""
    return f"set{to_pascal_case(identifier)}"


def component_name(base_name: str) -> str:
    name = to_pascal_case(base_name)
    if not name:
        return "Component"
    if name[0].isdigit():
        return f"Component{name}"
    return name


def to_pascal_case(text: str) -> str:
    parts = [p for p in _WORD_SPLIT.split(text) if p]
    return ''.join(p[0].upper() + p[1:] for p in parts)


def to_camel_case(text: str) -> str:
    pascal = to_pascal_case(text)
    if not pascal:
        return pascal
    return pascal[0].lower() + pascal[1:]
