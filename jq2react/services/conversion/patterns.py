"""
Pattern matchers for jQuery idioms.

Each matcher looks at one AST node and reports whether it is a recognised
jQuery call shape. Matchers never raise; anything they do not recognise is
reported as "no match" and left to later passes or to the generic translator.
"""
from dataclasses import dataclass
from typing import Dict, Any, Optional, List, Tuple
import re

from .parser import JSParser


# Names the jQuery function is reachable under
JQUERY_NAMES = ('$', 'jQuery')

# Shorthand binding methods: $(sel).click(fn)
EVENT_METHODS = (
    'click', 'dblclick', 'change', 'submit', 'input',
    'keyup', 'keydown', 'keypress', 'focus', 'blur',
    'mouseover', 'mouseout', 'mouseenter', 'mouseleave',
    'scroll', 'resize',
)

# Generic binding methods: $(sel).on('click', fn)
BINDING_METHODS = ('on', 'bind')

# Visibility and transition helpers with their migration suggestion
ANIMATION_SUGGESTIONS: Dict[str, str] = {
    'show': 'Use CSS display or visibility with state',
    'hide': 'Use CSS display or visibility with state',
    'toggle': 'Toggle visibility state with conditional rendering',
    'fadeIn': 'Use CSS transition with opacity',
    'fadeOut': 'Use CSS transition with opacity',
    'fadeToggle': 'Toggle opacity state with CSS transition',
    'fadeTo': 'Use CSS transition with opacity',
    'slideUp': 'Use CSS transition with max-height',
    'slideDown': 'Use CSS transition with max-height',
    'slideToggle': 'Toggle height state with CSS transition',
    'animate': 'Use CSS animations or libraries like Framer Motion, React Spring',
}

DEFAULT_ANIMATION_SUGGESTION = 'Convert to CSS animations or use an animation library'

ANIMATION_METHODS = tuple(ANIMATION_SUGGESTIONS)

# Calls that make a variable they touch reactive
MUTATION_METHODS = ('html', 'text', 'val', 'attr', 'prop', 'css', 'show', 'hide')

CLASS_METHODS = ('addClass', 'removeClass', 'toggleClass')

# Chain links that move on to other elements than the ones first selected
TRAVERSAL_METHODS = (
    'find', 'children', 'parent', 'parents', 'closest', 'siblings', 'next', 'prev',
    'eq', 'first', 'last', 'filter', 'not', 'has', 'add', 'end',
)

# $.ajax / $.get / ... -> remote call kind
REMOTE_METHODS = {
    'ajax': 'generic',
    'get': 'get',
    'getJSON': 'get',
    'post': 'post',
}

# Promise-style continuations chained onto a remote call
REMOTE_CONTINUATIONS = ('done', 'fail', 'then', 'always')

_SIMPLE_ID = re.compile(r'^#[\w-]+$')


def get_animation_suggestion(method: str) -> str:
    return ANIMATION_SUGGESTIONS.get(method, DEFAULT_ANIMATION_SUGGESTION)


def is_simple_id_selector(selector: str) -> bool:
    return bool(_SIMPLE_ID.match(selector or ''))


@dataclass
class MethodCall:
    """A call of the form <object>.<method>(<arguments>)"""
    node: Dict[str, Any]
    receiver: Dict[str, Any]
    method: str
    arguments: List[Dict[str, Any]]


@dataclass
class BindingMatch:
    selector: str
    event: str
    handler: Dict[str, Any]
    delegation_parent: Optional[str] = None


@dataclass
class SelectorMethodMatch:
    selector: str
    method: str
    arguments: List[Dict[str, Any]]
    node: Dict[str, Any]
    # Traversal links between the $() root and the method
    traversal: Tuple[str, ...] = ()

    @property
    def target(self) -> str:
        """#list.find() for $('#list').find('.item').<method>(), else the selector."""
        return self.selector + ''.join(f".{method}()" for method in self.traversal)


def is_jquery_call(node: Optional[Dict[str, Any]]) -> bool:
    """$(...) or jQuery(...)"""
    if JSParser.get_node_type(node) != 'CallExpression':
        return False
    return JSParser.identifier_name(node.get('callee')) in JQUERY_NAMES


def jquery_argument(node: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """First argument of a $(...) call"""
    if not is_jquery_call(node):
        return None
    args = node.get('arguments') or []
    return args[0] if args else None


def selector_of(node: Optional[Dict[str, Any]]) -> Optional[str]:
    """The selector string of $('selector'), else None."""
    return JSParser.string_value(jquery_argument(node)) if is_jquery_call(node) else None


def as_method_call(node: Optional[Dict[str, Any]]) -> Optional[MethodCall]:
    if JSParser.get_node_type(node) != 'CallExpression':
        return None
    callee = node.get('callee') or {}
    if callee.get('type') != 'MemberExpression' or callee.get('computed'):
        return None
    method = JSParser.identifier_name(callee.get('property'))
    if not method:
        return None
    return MethodCall(
        node=node,
        receiver=callee.get('object') or {},
        method=method,
        arguments=node.get('arguments') or [],
    )


def method_chain(node: Dict[str, Any]) -> Tuple[Dict[str, Any], List[MethodCall]]:
    """
    Unroll a method chain.

    $('#a').addClass('x').show() -> ($('#a') node, [addClass call, show call])
    """
    links: List[MethodCall] = []
    current = node
    while True:
        call = as_method_call(current)
        if call is None or is_jquery_call(current):
            break
        links.append(call)
        current = call.receiver
    links.reverse()
    return current, links


def selector_method_call(node: Dict[str, Any], direct: bool = False) -> Optional[SelectorMethodMatch]:
    """
    Match <$('selector') ...>.<method>(...).

    With direct=True the method must be called on the $() result itself;
    otherwise the selector is taken from the root of the chain and any
    traversal links on the way are listed in the match.
    """
    call = as_method_call(node)
    if call is None:
        return None
    if direct:
        root, links = call.receiver, [call]
    else:
        root, links = method_chain(node)
    selector = selector_of(root)
    if selector is None:
        return None
    return SelectorMethodMatch(
        selector=selector,
        method=call.method,
        arguments=call.arguments,
        node=node,
        traversal=tuple(link.method for link in links[:-1] if link.method in TRAVERSAL_METHODS),
    )


def is_traversal_chain(node: Dict[str, Any]) -> bool:
    """$(...).find('.x').html(...): a call that reaches its target through a traversal."""
    root, links = method_chain(node)
    return is_jquery_call(root) and any(link.method in TRAVERSAL_METHODS for link in links[:-1])


def _event_names(raw: str) -> List[str]:
    """'click.ns touchstart' -> ['click', 'touchstart']"""
    names = []
    for part in raw.split():
        name = part.split('.', 1)[0]
        if re.match(r'^\w+$', name) and name not in names:
            names.append(name)
    return names


def _handler_argument(node: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """A handler must be an inline function or the name of one."""
    if JSParser.is_function(node) or JSParser.get_node_type(node) == 'Identifier':
        return node
    return None


def match_event_binding(node: Dict[str, Any]) -> List[BindingMatch]:
    """
    Match the three binding shapes:

    - $(sel).click(fn)                      shorthand method
    - $(sel).on('click', fn)                named event
    - $(parent).on('click', '.child', fn)   delegated
    - $(parent).delegate('.child', 'click', fn)
    """
    match = selector_method_call(node, direct=True)
    if match is None:
        return []
    args = match.arguments
    method = match.method

    if method in EVENT_METHODS:
        if len(args) != 1:
            return []
        handler = _handler_argument(args[0])
        if handler is None:
            return []
        return [BindingMatch(selector=match.selector, event=method, handler=handler)]

    if method in BINDING_METHODS and len(args) in (2, 3):
        events = JSParser.string_value(args[0])
        if not events:
            return []
        if len(args) == 2:
            handler = _handler_argument(args[1])
            child = None
        else:
            child = JSParser.string_value(args[1])
            handler = _handler_argument(args[2])
            if child is None:
                return []
        if handler is None:
            return []
        return [
            BindingMatch(
                selector=child if child is not None else match.selector,
                event=event,
                handler=handler,
                delegation_parent=match.selector if child is not None else None,
            )
            for event in _event_names(events)
        ]

    if method == 'delegate' and len(args) == 3:
        child = JSParser.string_value(args[0])
        events = JSParser.string_value(args[1])
        handler = _handler_argument(args[2])
        if child is None or not events or handler is None:
            return []
        return [
            BindingMatch(selector=child, event=event, handler=handler, delegation_parent=match.selector)
            for event in _event_names(events)
        ]

    return []


def _is_global(node: Optional[Dict[str, Any]], name: str) -> bool:
    return JSParser.identifier_name(node) == name


def match_ready_block(node: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Match "run once when the page is ready" idioms and return the callback.

    Accepts an ExpressionStatement or the expression itself.
    """
    if JSParser.get_node_type(node) == 'ExpressionStatement':
        node = node.get('expression') or {}

    node_type = JSParser.get_node_type(node)

    # window.onload = function () { ... }
    if node_type == 'AssignmentExpression':
        left = node.get('left') or {}
        if (left.get('type') == 'MemberExpression'
                and _is_global(left.get('object'), 'window')
                and JSParser.identifier_name(left.get('property')) == 'onload'
                and JSParser.is_function(node.get('right'))):
            return node['right']
        return None

    if node_type != 'CallExpression':
        return None

    # $(function () { ... })
    if is_jquery_call(node):
        arg = jquery_argument(node)
        return arg if JSParser.is_function(arg) else None

    call = as_method_call(node)
    if call is None:
        return None
    args = call.arguments
    receiver = call.receiver

    # $(document).ready(fn), $().ready(fn)
    if call.method == 'ready' and len(args) == 1 and JSParser.is_function(args[0]):
        if is_jquery_call(receiver):
            target = jquery_argument(receiver)
            if target is None or _is_global(target, 'document'):
                return args[0]
        return None

    # $(window).on('load', fn) / $(window).load(fn)
    if is_jquery_call(receiver) and _is_global(jquery_argument(receiver), 'window'):
        if call.method == 'load' and len(args) == 1 and JSParser.is_function(args[0]):
            return args[0]
        if (call.method in BINDING_METHODS and len(args) == 2
                and JSParser.string_value(args[0]) == 'load'
                and JSParser.is_function(args[1])):
            return args[1]
        return None

    # document.addEventListener('DOMContentLoaded', fn) / window.addEventListener('load', fn)
    if call.method == 'addEventListener' and len(args) >= 2 and JSParser.is_function(args[1]):
        event = JSParser.string_value(args[0])
        if _is_global(receiver, 'document') and event == 'DOMContentLoaded':
            return args[1]
        if _is_global(receiver, 'window') and event == 'load':
            return args[1]

    return None


def match_remote_call(node: Dict[str, Any]) -> Optional[MethodCall]:
    """$.ajax(...), $.get(...), $.getJSON(...), $.post(...)"""
    call = as_method_call(node)
    if call is None or call.method not in REMOTE_METHODS:
        return None
    if JSParser.identifier_name(call.receiver) not in JQUERY_NAMES:
        return None
    if not call.arguments:
        return None
    return call


def match_remote_chain(node: Dict[str, Any]) -> Optional[Tuple[MethodCall, List[MethodCall]]]:
    """
    A remote call followed by promise continuations:
    $.ajax({...}).done(fn).fail(fn)

    Returns the remote call and the continuation links.
    """
    links: List[MethodCall] = []
    current = node
    while True:
        remote = match_remote_call(current)
        if remote is not None:
            break
        call = as_method_call(current)
        if call is None or call.method not in REMOTE_CONTINUATIONS:
            return None
        links.append(call)
        current = call.receiver
    if not links:
        return None
    links.reverse()
    return remote, links


def is_remote_idiom(node: Dict[str, Any]) -> bool:
    """True if anything under node is a remote call (jQuery helpers or fetch)."""
    for child in JSParser.walk(node):
        if match_remote_call(child) is not None:
            return True
        if (JSParser.get_node_type(child) == 'CallExpression'
                and JSParser.identifier_name(child.get('callee')) == 'fetch'):
            return True
    return False


def object_property(node: Dict[str, Any], *keys: str) -> Optional[Dict[str, Any]]:
    """Look up the value node of the first matching key in an object literal."""
    if JSParser.get_node_type(node) != 'ObjectExpression':
        return None
    for prop in node.get('properties') or []:
        if prop.get('type') != 'Property' or prop.get('computed'):
            continue
        key = prop.get('key') or {}
        name = JSParser.identifier_name(key) or JSParser.string_value(key)
        if name in keys:
            return prop.get('value')
    return None


def function_declarator(node: Dict[str, Any]) -> List[Tuple[str, Dict[str, Any]]]:
    """
    Named functions introduced by a statement:

    - function name(...) { ... }
    - const name = (...) => { ... } / const name = function (...) { ... }
    """
    node_type = JSParser.get_node_type(node)
    if node_type == 'FunctionDeclaration':
        name = JSParser.identifier_name(node.get('id'))
        return [(name, node)] if name else []
    if node_type == 'VariableDeclaration':
        found = []
        for decl in node.get('declarations') or []:
            name = JSParser.identifier_name(decl.get('id'))
            if name and JSParser.is_function(decl.get('init')):
                found.append((name, decl['init']))
        return found
    return []
