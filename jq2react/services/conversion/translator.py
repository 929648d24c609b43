"""
Code translator for handler, function and effect bodies.

Rewrites the jQuery calls inside a block of code into their React
counterparts by splicing replacements into the original source text. Nodes
that are not recognised keep their source verbatim, so the output stays
close to what the developer wrote.
"""
import logging
import textwrap
from typing import Dict, Any, Optional, List, Set, Tuple

from .naming import (
    mutator_name,
    reference_identifier,
    selector_to_state_name,
)
from .parser import JSParser
from .patterns import (
    ANIMATION_METHODS,
    CLASS_METHODS,
    REMOTE_METHODS,
    MethodCall,
    as_method_call,
    is_jquery_call,
    is_simple_id_selector,
    is_traversal_chain,
    jquery_argument,
    match_remote_call,
    match_remote_chain,
    method_chain,
    object_property,
    selector_of,
)
from .types import RemoteCall, RemoteCallKind

logger = logging.getLogger(__name__)

Replacement = Tuple[int, int, str]

# jQuery getters/setters backed by a DOM property
ELEMENT_PROPERTIES = {
    'val': 'value',
    'text': 'textContent',
    'html': 'innerHTML',
}

CLASS_LIST_METHODS = {
    'addClass': 'add',
    'removeClass': 'remove',
    'toggleClass': 'toggle',
    'hasClass': 'contains',
}

INSERT_POSITIONS = {
    'append': 'beforeend',
    'prepend': 'afterbegin',
    'after': 'afterend',
    'before': 'beforebegin',
}

DEFAULT_SUCCESS_BODY = "console.log(data);"


def dedent_block(text: str) -> str:
    """Strip surrounding blank lines and common indentation from a block."""
    lines = text.split('\n')
    first = lines[0].strip()
    rest = textwrap.dedent('\n'.join(lines[1:])).split('\n') if len(lines) > 1 else []
    combined = ([first] if first else []) + rest
    combined = [line.rstrip() for line in combined]
    while combined and not combined[0]:
        combined.pop(0)
    while combined and not combined[-1]:
        combined.pop()
    return '\n'.join(combined)


def quote(value: str) -> str:
    escaped = value.replace('\\', '\\\\').replace("'", "\\'")
    return f"'{escaped}'"


def _comment_safe(text: str) -> str:
    return text.replace('*/', '* /').replace('\n', ' ')


class CodeTranslator:
    """
    Translates code regions of one cleaned source text.

    The translator is bound to the source it was built for: node ranges
    index into that text.
    """

    def __init__(self, code: str):
        self.code = code
        # Reactive state names; assignments to them become mutator calls
        self.state_names: Set[str] = set()
        # Names the script declares itself; element states must avoid them
        self.reserved_names: Set[str] = set()
        # Element-backed states whose mutators appear in translated code
        self.element_states: Set[str] = set()

    def element_state(self, selector: str, suffix: str = '') -> str:
        """
        State name backing an element's content, or its Visible/Class
        variant. A name that clashes with a script declaration, directly or
        through its mutator, gets a State suffix.
        """
        base = selector_to_state_name(selector) + suffix
        name = base
        index = 1
        while name in self.reserved_names or mutator_name(name) in self.reserved_names:
            name = f"{base}State{index if index > 1 else ''}"
            index += 1
        return name

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    def translate(self, node: Dict[str, Any], this_name: Optional[str] = None) -> str:
        """
        Translated source of a node.

        Continuation lines are returned relative to the indentation of the
        line the node starts on.

        Args:
            node: AST node to translate
            this_name: Event parameter that `this` refers to inside a handler
        """
        if not node or 'range' not in node:
            return ''
        start, end = node['range']
        replacements: List[Replacement] = []
        self._collect(node, replacements, this_name)
        text = self._splice(start, end, replacements)
        return self._relative_indent(text, start)

    def block_body(
        self,
        fn_node: Dict[str, Any],
        this_name: Optional[str] = None,
        concise_return: bool = False
    ) -> str:
        """Translated body of a function, without the surrounding braces."""
        body = fn_node.get('body') or {}
        if body.get('type') == 'BlockStatement':
            text = self.translate(body, this_name)
            if text.startswith('{') and text.endswith('}'):
                text = text[1:-1]
            return dedent_block(text)
        expression = self.translate(body, this_name)
        return f"return {expression};" if concise_return else f"{expression};"

    def parameters(self, fn_node: Dict[str, Any]) -> str:
        return ', '.join(JSParser.source_of(p, self.code) for p in fn_node.get('params') or [])

    @staticmethod
    def handler_parameter(fn_node: Dict[str, Any]) -> str:
        """Name of the event parameter of a handler ('e' when it takes none)."""
        params = fn_node.get('params') or []
        if params:
            name = JSParser.identifier_name(params[0])
            if name:
                return name
        return 'e'

    # ------------------------------------------------------------------
    # Remote calls
    # ------------------------------------------------------------------

    def remote_call(self, node: Dict[str, Any]) -> Optional[RemoteCall]:
        """
        Convert $.ajax / $.get / $.getJSON / $.post (optionally followed by
        .done/.fail/.then/.always) into a fetch() chain.
        """
        chain = match_remote_chain(node)
        if chain is not None:
            call, continuations = chain
        else:
            call = match_remote_call(node)
            continuations = []
        if call is None:
            return None

        kind = RemoteCallKind(REMOTE_METHODS[call.method])
        args = call.arguments
        success_fn = error_fn = None
        data_node = None
        url_node = None
        method = 'POST' if kind == RemoteCallKind.POST else 'GET'

        if kind == RemoteCallKind.GENERIC:
            config = args[0]
            if config.get('type') != 'ObjectExpression':
                return None
            url_node = object_property(config, 'url')
            method_value = JSParser.string_value(object_property(config, 'method', 'type'))
            if method_value:
                method = method_value.upper()
            data_node = object_property(config, 'data')
            success_fn = object_property(config, 'success')
            error_fn = object_property(config, 'error')
        else:
            url_node = args[0]
            rest = args[1:]
            if rest and JSParser.is_function(rest[0]):
                success_fn = rest[0]
            elif rest:
                data_node = rest[0]
                if len(rest) > 1 and JSParser.is_function(rest[1]):
                    success_fn = rest[1]

        finally_fn = None
        for link in continuations:
            link_args = link.arguments
            if link.method in ('done', 'then') and link_args:
                if success_fn is None and JSParser.is_function(link_args[0]):
                    success_fn = link_args[0]
                if link.method == 'then' and len(link_args) > 1 and error_fn is None \
                        and JSParser.is_function(link_args[1]):
                    error_fn = link_args[1]
            elif link.method == 'fail' and link_args and error_fn is None \
                    and JSParser.is_function(link_args[0]):
                error_fn = link_args[0]
            elif link.method == 'always' and link_args and JSParser.is_function(link_args[0]):
                finally_fn = link_args[0]

        url_value = JSParser.string_value(url_node)
        if url_value is not None:
            url = url_value
            url_expr = quote(url_value)
        elif url_node:
            url = self.translate(url_node)
            url_expr = url
        else:
            url = 'URL_HERE'
            url_expr = quote(url)

        body_expr = None
        if data_node is not None:
            data_src = self.translate(data_node)
            if kind == RemoteCallKind.GET:
                url_expr = f"{url_expr} + '?' + new URLSearchParams({data_src})"
            else:
                body_expr = data_src if data_src.startswith('JSON.stringify(') else f"JSON.stringify({data_src})"

        success_param = 'data'
        success_body = None
        if success_fn is not None:
            success_param = self._first_param(success_fn, 'data')
            success_body = self.block_body(success_fn) or None

        error_param = 'error'
        error_body = None
        if error_fn is not None:
            error_param = self._first_param(error_fn, 'error')
            error_body = self.block_body(error_fn) or None

        finally_body = self.block_body(finally_fn) if finally_fn is not None else None

        code = self._fetch_chain(
            url_expr=url_expr,
            method=method,
            body_expr=body_expr,
            with_options=kind != RemoteCallKind.GET or method != 'GET',
            success_param=success_param,
            success_body=success_body,
            error_param=error_param,
            error_body=error_body,
            finally_body=finally_body,
        )

        return RemoteCall(
            kind=kind,
            url=url,
            method=method,
            request_body=body_expr,
            success_handler=success_body,
            error_handler=error_body,
            translated_code=code,
        )

    def _first_param(self, fn_node: Dict[str, Any], default: str) -> str:
        params = fn_node.get('params') or []
        if not params:
            return default
        return JSParser.source_of(params[0], self.code) or default

    @staticmethod
    def _fetch_chain(
        url_expr: str,
        method: str,
        body_expr: Optional[str],
        with_options: bool,
        success_param: str,
        success_body: Optional[str],
        error_param: str,
        error_body: Optional[str],
        finally_body: Optional[str] = None,
    ) -> str:
        lines = []
        if with_options:
            lines.append(f"fetch({url_expr}, {{")
            if body_expr:
                lines.append(f"  method: '{method}',")
                lines.append("  headers: { 'Content-Type': 'application/json' },")
                lines.append(f"  body: {body_expr}")
            else:
                lines.append(f"  method: '{method}'")
            lines.append("})")
        else:
            lines.append(f"fetch({url_expr})")

        lines.append("  .then(response => response.json())")

        if success_body is None:
            success_param = 'data'
            success_body = DEFAULT_SUCCESS_BODY
        lines.append(f"  .then({success_param} => {{")
        lines.extend(f"    {line}" if line else '' for line in success_body.split('\n'))
        lines.append("  })")

        if error_body is None:
            lines.append("  .catch(error => console.error('Error:', error))")
        else:
            lines.append(f"  .catch({error_param} => {{")
            lines.extend(f"    {line}" if line else '' for line in error_body.split('\n'))
            lines.append("  })")

        if finally_body:
            lines.append("  .finally(() => {")
            lines.extend(f"    {line}" if line else '' for line in finally_body.split('\n'))
            lines.append("  })")

        return '\n'.join(lines)

    # ------------------------------------------------------------------
    # Replacement collection
    # ------------------------------------------------------------------

    def _collect(self, node: Dict[str, Any], out: List[Replacement], this_name: Optional[str]):
        replacement = self._replacement_for(node, this_name)
        if replacement is not None:
            start, end = node['range']
            out.append((start, end, replacement))
            return

        for child in JSParser.children(node):
            child_this = this_name
            # `this` is rebound inside non-arrow functions
            if child.get('type') in ('FunctionExpression', 'FunctionDeclaration'):
                child_this = None
            self._collect(child, out, child_this)

    def _replacement_for(self, node: Dict[str, Any], this_name: Optional[str]) -> Optional[str]:
        node_type = node.get('type')

        if node_type == 'ExpressionStatement':
            return self._chain_statement(node.get('expression') or {}, this_name)

        if node_type == 'ThisExpression':
            return f"{this_name}.currentTarget" if this_name else None

        if node_type in ('AssignmentExpression', 'UpdateExpression'):
            return self._state_update(node, this_name)

        if node_type != 'CallExpression':
            return None

        remote = self.remote_call(node)
        if remote is not None:
            return remote.translated_code

        if is_jquery_call(node):
            return self._wrapped(node, this_name)

        if is_traversal_chain(node):
            start = node['range'][0]
            source = self._relative_indent(JSParser.source_of(node, self.code), start)
            return f"{source} /* TODO: traversal chain, convert to refs or state by hand */"

        call = as_method_call(node)
        if call is not None and is_jquery_call(call.receiver):
            return self._receiver_method(call.receiver, call, this_name)

        return None

    def _state_update(self, node: Dict[str, Any], this_name: Optional[str]) -> Optional[str]:
        """counter = v / counter += v / counter++ -> setCounter(...)"""
        operator = node.get('operator') or ''
        if node.get('type') == 'UpdateExpression':
            name = JSParser.identifier_name(node.get('argument'))
            if name not in self.state_names:
                return None
            sign = '+' if operator == '++' else '-'
            return f"{mutator_name(name)}({name} {sign} 1)"

        name = JSParser.identifier_name(node.get('left'))
        if name not in self.state_names:
            return None
        value = self.translate(node.get('right') or {}, this_name)
        if operator == '=':
            return f"{mutator_name(name)}({value})"
        return f"{mutator_name(name)}({name} {operator[:-1]} ({value}))"

    def _chain_statement(self, expression: Dict[str, Any], this_name: Optional[str]) -> Optional[str]:
        """
        Split $(sel).a().b(); into one translated statement per link.
        """
        root, links = method_chain(expression)
        if len(links) < 2 or not is_jquery_call(root) or is_traversal_chain(expression):
            return None
        translated = []
        for link in links:
            text = self._receiver_method(root, link, this_name)
            if text is None:
                return None
            translated.append(text if text.startswith('/*') else f"{text};")
        return '\n'.join(translated)

    def _wrapped(self, node: Dict[str, Any], this_name: Optional[str]) -> Optional[str]:
        """Translate a bare $(...) call."""
        selector = selector_of(node)
        if selector is not None:
            if selector.lstrip().startswith('<'):
                return None
            if is_simple_id_selector(selector):
                return f"{reference_identifier(selector)}.current"
            return f"document.querySelectorAll({quote(selector)}) /* TODO: use a ref or state */"
        return self._element_expression(node, this_name)

    def _element_expression(self, node: Dict[str, Any], this_name: Optional[str]) -> Optional[str]:
        """
        DOM element expression for a $(...) call that wraps a single element,
        or None when the wrapped value is not one.
        """
        selector = selector_of(node)
        if selector is not None:
            if is_simple_id_selector(selector):
                return f"{reference_identifier(selector)}.current"
            return None
        arg = jquery_argument(node)
        arg_type = JSParser.get_node_type(arg)
        if arg_type == 'ThisExpression':
            return f"{this_name}.currentTarget" if this_name else 'this'
        if arg_type in ('Identifier', 'MemberExpression'):
            return self.translate(arg, this_name)
        return None

    def _receiver_method(
        self,
        receiver: Dict[str, Any],
        call: MethodCall,
        this_name: Optional[str]
    ) -> Optional[str]:
        """
        Translate <$(...)>.<method>(...) given the $() receiver.

        State-backed mutations on a selector become state updates; other
        element methods map onto the DOM API; animations and style changes
        become TODO markers.
        """
        method = call.method
        args = call.arguments
        selector = selector_of(receiver)
        label = selector if selector is not None else JSParser.source_of(receiver, self.code)

        if selector is not None and not selector.lstrip().startswith('<'):
            if method in ('html', 'text', 'val') and args:
                state = self._used_element_state(selector)
                return f"{mutator_name(state)}({self.translate(args[0], this_name)})"
            if method == 'val':
                return self._used_element_state(selector)
            if method == 'show':
                return f"{mutator_name(self._used_element_state(selector, 'Visible'))}(true)"
            if method == 'hide':
                return f"{mutator_name(self._used_element_state(selector, 'Visible'))}(false)"
            if method in CLASS_METHODS and args:
                class_name = JSParser.string_value(args[0])
                if class_name is not None:
                    setter = mutator_name(self._used_element_state(selector, 'Class'))
                    if method == 'addClass':
                        return f"{setter}({quote(class_name)})"
                    if method == 'removeClass':
                        return f"{setter}('')"
                    return f"{setter}(prev => (prev === {quote(class_name)} ? '' : {quote(class_name)}))"

        if method in ANIMATION_METHODS:
            return (f"/* TODO: {_comment_safe(label)}.{method}() has no direct React equivalent, "
                    f"see CONVERSION NOTES */")

        if method == 'css':
            return f"/* TODO: use inline style or CSS classes for {_comment_safe(label)}.css(...) */"

        element = self._element_expression(receiver, this_name)
        if element is None:
            if method == 'each' and len(args) == 1 and selector is not None:
                return f"{self._wrapped(receiver, this_name)}.forEach({self.translate(args[0], this_name)})"
            return None
        return self._element_method(element, method, args, this_name)

    def _used_element_state(self, selector: str, suffix: str = '') -> str:
        name = self.element_state(selector, suffix)
        self.element_states.add(name)
        return name

    def _element_method(
        self,
        element: str,
        method: str,
        args: List[Dict[str, Any]],
        this_name: Optional[str]
    ) -> Optional[str]:
        values = [self.translate(arg, this_name) for arg in args]

        if method in ELEMENT_PROPERTIES:
            prop = ELEMENT_PROPERTIES[method]
            if values:
                return f"{element}.{prop} = {values[0]}"
            return f"{element}.{prop}"

        if method in CLASS_LIST_METHODS and values:
            return f"{element}.classList.{CLASS_LIST_METHODS[method]}({values[0]})"

        if method == 'attr' and values:
            if len(values) == 1:
                return f"{element}.getAttribute({values[0]})"
            return f"{element}.setAttribute({values[0]}, {values[1]})"

        if method == 'removeAttr' and values:
            return f"{element}.removeAttribute({values[0]})"

        if method == 'prop' and values:
            name = JSParser.string_value(args[0])
            target = f"{element}.{name}" if name and name.isidentifier() else f"{element}[{values[0]}]"
            if len(values) == 1:
                return target
            return f"{target} = {values[1]}"

        if method in INSERT_POSITIONS and len(values) == 1:
            return f"{element}.insertAdjacentHTML('{INSERT_POSITIONS[method]}', {values[0]})"

        if method == 'empty' and not values:
            return f"{element}.innerHTML = ''"

        if method == 'find' and len(values) == 1:
            return f"{element}.querySelectorAll({values[0]})"

        if method in ('on', 'bind') and len(values) == 2:
            return f"{element}.addEventListener({values[0]}, {values[1]})"

        if method in ('off', 'unbind') and len(values) == 2:
            return f"{element}.removeEventListener({values[0]}, {values[1]})"

        if method == 'trigger' and len(values) == 1:
            return f"{element}.dispatchEvent(new Event({values[0]}))"

        if method in ('focus', 'blur', 'click', 'submit', 'remove') and not values:
            return f"{element}.{method}()"

        return None

    # ------------------------------------------------------------------
    # Splicing
    # ------------------------------------------------------------------

    def _line_indent(self, position: int) -> str:
        line_start = self.code.rfind('\n', 0, position) + 1
        prefix = self.code[line_start:position]
        return prefix[:len(prefix) - len(prefix.lstrip())]

    def _splice(self, start: int, end: int, replacements: List[Replacement]) -> str:
        pieces = []
        cursor = start
        for r_start, r_end, text in sorted(replacements, key=lambda r: r[0]):
            if r_start < cursor:
                continue
            pieces.append(self.code[cursor:r_start])
            if '\n' in text:
                indent = self._line_indent(r_start)
                head, *tail = text.split('\n')
                text = '\n'.join([head] + [f"{indent}{line}" if line else '' for line in tail])
            pieces.append(text)
            cursor = r_end
        pieces.append(self.code[cursor:end])
        return ''.join(pieces)

    def _relative_indent(self, text: str, start: int) -> str:
        if '\n' not in text:
            return text
        indent = self._line_indent(start)
        if not indent:
            return text
        head, *tail = text.split('\n')
        return '\n'.join([head] + [line[len(indent):] if line.startswith(indent) else line for line in tail])
