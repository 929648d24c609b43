"""
Pattern extractor.

Runs the recognition passes over one script in a fixed order and records
what they find on a ComponentDescriptor. Later passes read what earlier
passes stored (claimed identifiers, existing references), so the order in
PASSES must not change.
"""
import logging
import re
from typing import Dict, Any, Optional, List, Tuple, Set

from .descriptor import ComponentDescriptor
from .naming import handler_name, mutator_name
from .parser import JSParser, ParseError
from .patterns import (
    ANIMATION_METHODS,
    CLASS_METHODS,
    MUTATION_METHODS,
    get_animation_suggestion,
    is_jquery_call,
    is_remote_idiom,
    is_simple_id_selector,
    jquery_argument,
    as_method_call,
    function_declarator,
    match_event_binding,
    match_ready_block,
    match_remote_call,
    match_remote_chain,
    selector_method_call,
    selector_of,
)
from .translator import CodeTranslator, dedent_block
from .types import (
    AnimationUsage,
    Effect,
    EffectTrigger,
    EventHandlerBinding,
    FunctionDefinition,
    StateKind,
    StateVariable,
)

logger = logging.getLogger(__name__)

_CONSTANT_NAME = re.compile(r'^[A-Z][A-Z0-9_]*$')

# Statement paired with the page-ready callback it sits in (None at top level)
ScopedStatement = Tuple[Dict[str, Any], Optional[Dict[str, Any]]]


def is_constant_name(name: str) -> bool:
    return bool(_CONSTANT_NAME.match(name)) or name.startswith('CONFIG') or name.startswith('CONST')


class PatternExtractor:
    """
    Extracts React building blocks from a jQuery script.

    Usage:
        descriptor = ComponentDescriptor("Widget")
        PatternExtractor(script).extract(descriptor)
    """

    PASSES = (
        'classify_variables',
        'detect_ready_blocks',
        'detect_event_bindings',
        'detect_remote_calls',
        'detect_animations',
        'extract_functions',
        'detect_mutations',
        'collect_selectors',
    )

    def __init__(self, script: str):
        self.script = script
        self.code = ''
        self.translator = CodeTranslator(self.code)
        self.ast: Optional[Dict[str, Any]] = None
        self._ready_blocks: List[Tuple[Dict[str, Any], Dict[str, Any]]] = []
        self._scoped: List[ScopedStatement] = []
        self._lifted_declarators: Set[int] = set()

    def extract(self, descriptor: ComponentDescriptor) -> ComponentDescriptor:
        """
        Run every pass against the descriptor.

        Never raises: a script the parser rejects leaves the descriptor empty
        apart from a warning.
        """
        if not self.script.strip():
            return descriptor
        try:
            self.code = JSParser.strip_comments(self.script)
            self.translator = CodeTranslator(self.code)
            self.ast = JSParser.parse(self.code)
            self._index_scopes()
        except ParseError as e:
            logger.warning(f"Could not parse script for {descriptor.component_name}: {e}")
            descriptor.add_warning(f"Script could not be parsed, nothing was extracted ({e})")
            return descriptor
        except Exception as e:
            logger.exception(f"Could not index script for {descriptor.component_name}")
            descriptor.add_warning(f"Script could not be analysed, nothing was extracted ({e})")
            return descriptor

        for name in self.PASSES:
            try:
                getattr(self, name)(descriptor)
            except Exception as e:
                logger.exception(f"Pass '{name}' failed for {descriptor.component_name}")
                descriptor.add_warning(f"Pass '{name}' was skipped after an internal error: {e}")

        self._check_element_states(descriptor)
        return descriptor

    # ------------------------------------------------------------------
    # Scope bookkeeping
    # ------------------------------------------------------------------

    def _index_scopes(self):
        for statement in JSParser.get_statements(self.ast):
            callback = match_ready_block(statement)
            if callback is not None:
                self._ready_blocks.append((statement, callback))
                for inner in self._callback_statements(callback):
                    self._scoped.append((inner, callback))
            else:
                self._scoped.append((statement, None))

        declared: Set[str] = set()
        for statement, _ in self._scoped:
            declared.update(name for name, _ in function_declarator(statement))
            if statement.get('type') == 'VariableDeclaration':
                for declarator in statement.get('declarations') or []:
                    name = JSParser.identifier_name(declarator.get('id'))
                    if name:
                        declared.add(name)
        self.translator.reserved_names = declared

    def _check_element_states(self, descriptor: ComponentDescriptor):
        """Every element state the translated code sets must be declared."""
        for name in sorted(self.translator.element_states):
            state = descriptor.get_state(name)
            if state is None or not state.is_reactive:
                descriptor.add_warning(
                    f"State '{name}' could not be declared because the name is taken; "
                    f"review the {mutator_name(name)}(...) calls"
                )

    @staticmethod
    def _callback_statements(callback: Dict[str, Any]) -> List[Dict[str, Any]]:
        body = callback.get('body') or {}
        if body.get('type') != 'BlockStatement':
            return []
        return body.get('body') or []

    def _program_walk(self):
        yield from JSParser.walk(self.ast)

    # ------------------------------------------------------------------
    # Pass 1
    # ------------------------------------------------------------------

    def classify_variables(self, descriptor: ComponentDescriptor):
        """Record program-scope variables as reactive state or constants."""
        reassigned, mutated = self._usage_sets()

        for statement, _ in self._scoped:
            if statement.get('type') != 'VariableDeclaration':
                continue
            for declarator in statement.get('declarations') or []:
                name = JSParser.identifier_name(declarator.get('id'))
                init = declarator.get('init')
                if not name or init is None or JSParser.is_function(init):
                    continue

                if is_constant_name(name):
                    kind = StateKind.CONSTANT
                elif name in reassigned or name in mutated:
                    kind = StateKind.REACTIVE
                else:
                    continue

                initial = dedent_block(self.translator.translate(init))
                if descriptor.add_state(StateVariable(identifier=name, initial_value=initial, kind=kind)):
                    self._lifted_declarators.add(id(declarator))
                    if kind == StateKind.REACTIVE:
                        logger.info(f"Converting to state: {name}")

        self.translator.state_names = {s.identifier for s in descriptor.states if s.is_reactive}

    def _usage_sets(self) -> Tuple[Set[str], Set[str]]:
        reassigned: Set[str] = set()
        mutated: Set[str] = set()
        for node in self._program_walk():
            node_type = node.get('type')
            if node_type == 'AssignmentExpression':
                name = JSParser.identifier_name(node.get('left'))
                if name:
                    reassigned.add(name)
            elif node_type == 'UpdateExpression':
                name = JSParser.identifier_name(node.get('argument'))
                if name:
                    reassigned.add(name)
            elif node_type == 'CallExpression':
                call = as_method_call(node)
                if call is None or call.method not in MUTATION_METHODS:
                    continue
                receiver = call.receiver
                if is_jquery_call(receiver):
                    receiver = jquery_argument(receiver)
                name = JSParser.identifier_name(receiver)
                if name:
                    mutated.add(name)
                for arg in call.arguments:
                    mutated.update(self._variable_references(arg))
        return reassigned, mutated

    @staticmethod
    def _variable_references(node: Dict[str, Any]) -> Set[str]:
        """Identifiers used as variables under node (property names excluded)."""
        names = set()
        for inner, ancestors in JSParser.walk_with_parents(node):
            name = JSParser.identifier_name(inner)
            if not name:
                continue
            parent = ancestors[-1] if ancestors else {}
            parent_type = parent.get('type')
            if parent_type == 'MemberExpression' and parent.get('property') is inner and not parent.get('computed'):
                continue
            if parent_type == 'Property' and parent.get('key') is inner and not parent.get('shorthand'):
                continue
            names.add(name)
        return names

    # ------------------------------------------------------------------
    # Pass 2
    # ------------------------------------------------------------------

    def detect_ready_blocks(self, descriptor: ComponentDescriptor):
        """
        Turn page-ready blocks into mount effects.

        The effect keeps only the statements no other pass lifts out.
        Leftover top-level statements get one extra mount effect.
        """
        for _, callback in self._ready_blocks:
            code = self._residual(self._callback_statements(callback))
            if not code:
                continue
            descriptor.add_effect(Effect(
                trigger=EffectTrigger.MOUNT,
                code=code,
                description="Runs once on mount, converted from a page-ready block",
            ))
            logger.info("Converting page-ready block to useEffect")

        top_level = [statement for statement, callback in self._scoped if callback is None]
        code = self._residual(top_level)
        if code:
            descriptor.add_effect(Effect(
                trigger=EffectTrigger.MOUNT,
                code=code,
                description="Top-level script statements, run once on mount",
            ))

    def _is_lifted(self, statement: Dict[str, Any]) -> bool:
        statement_type = statement.get('type')
        if statement_type in ('FunctionDeclaration', 'EmptyStatement'):
            return True
        if statement_type != 'ExpressionStatement':
            return False
        if statement.get('directive'):
            return True
        expression = statement.get('expression') or {}
        if match_ready_block(expression) is not None:
            return True
        if match_event_binding(expression):
            return True
        return match_remote_call(expression) is not None or match_remote_chain(expression) is not None

    def _residual(self, statements: List[Dict[str, Any]]) -> str:
        parts = []
        for statement in statements:
            if self._is_lifted(statement):
                continue
            if statement.get('type') == 'VariableDeclaration':
                declarations = statement.get('declarations') or []
                kept = [
                    d for d in declarations
                    if id(d) not in self._lifted_declarators and not JSParser.is_function(d.get('init'))
                ]
                if not kept:
                    continue
                if len(kept) < len(declarations):
                    joined = ', '.join(dedent_block(self.translator.translate(d)) for d in kept)
                    parts.append(f"{statement.get('kind', 'let')} {joined};")
                    continue
            parts.append(dedent_block(self.translator.translate(statement)))
        return '\n'.join(part for part in parts if part)

    # ------------------------------------------------------------------
    # Pass 3
    # ------------------------------------------------------------------

    def detect_event_bindings(self, descriptor: ComponentDescriptor):
        """Lift event bindings into named handlers attached by effects."""
        for statement, _ in self._scoped:
            if statement.get('type') != 'ExpressionStatement':
                continue
            for match in match_event_binding(statement.get('expression') or {}):
                name = handler_name(match.selector, match.event)
                if descriptor.get_handler(name) is None and descriptor.has_identifier(name):
                    descriptor.add_warning(
                        f"Handler name '{name}' is already taken; the {match.event} binding "
                        f"on {match.selector} was not converted"
                    )
                    continue

                handler = match.handler
                if JSParser.is_function(handler):
                    parameter = CodeTranslator.handler_parameter(handler)
                    this_name = parameter if handler.get('type') == 'FunctionExpression' else None
                    body = self.translator.block_body(handler, this_name)
                else:
                    parameter = 'e'
                    body = f"{JSParser.identifier_name(handler)}({parameter});"

                reference = descriptor.add_reference(match.selector)
                binding, created = descriptor.add_handler(EventHandlerBinding(
                    selector=match.selector,
                    event=match.event,
                    handler_name=name,
                    reference=reference.identifier,
                    translated_body=body,
                    parameter=parameter,
                    delegation_parent=match.delegation_parent,
                ))
                if not created:
                    logger.debug(f"Merged repeated {match.event} binding into {name}")
                    continue

                descriptor.add_effect(Effect(
                    trigger=EffectTrigger.EVENT,
                    code=self._listener_code(reference.identifier, match.event, name, match.delegation_parent),
                    description=self._listener_description(match.selector, match.event, match.delegation_parent),
                    handler_name=name,
                ))
                logger.info(f"Converting {match.selector}.{match.event} binding to {name}")

    @staticmethod
    def _listener_code(reference: str, event: str, handler: str, parent: Optional[str]) -> str:
        lines = []
        if parent is not None:
            lines.append(f"// Delegated from {parent}: the listener is attached to the child directly")
        lines.extend([
            f"const element = {reference}.current;",
            "if (!element) return undefined;",
            f"element.addEventListener('{event}', {handler});",
            f"return () => element.removeEventListener('{event}', {handler});",
        ])
        return '\n'.join(lines)

    @staticmethod
    def _listener_description(selector: str, event: str, parent: Optional[str]) -> str:
        if parent is not None:
            return f"Attach {event} listener to {selector} (delegated from {parent})"
        return f"Attach {event} listener to {selector}"

    # ------------------------------------------------------------------
    # Pass 4
    # ------------------------------------------------------------------

    def detect_remote_calls(self, descriptor: ComponentDescriptor):
        """
        Record every remote call; those at program scope also become
        data-fetch effects.
        """
        scoped_expressions = {
            id(statement.get('expression'))
            for statement, _ in self._scoped
            if statement.get('type') == 'ExpressionStatement'
        }
        consumed: Set[int] = set()

        for node in self._program_walk():
            if id(node) in consumed or node.get('type') != 'CallExpression':
                continue
            chain = match_remote_chain(node)
            if chain is not None:
                consumed.add(id(chain[0].node))
                for link in chain[1]:
                    consumed.add(id(link.node))
            elif match_remote_call(node) is None:
                continue

            remote = self.translator.remote_call(node)
            if remote is None:
                continue
            descriptor.add_remote_call(remote)
            logger.info(f"Converting $.{remote.kind.value} call to fetch: {remote.url}")

            if id(node) in scoped_expressions:
                descriptor.add_effect(Effect(
                    trigger=EffectTrigger.DATA_FETCH,
                    code=f"{remote.translated_code};",
                    description=f"Fetch data from {remote.url} on mount",
                ))

    # ------------------------------------------------------------------
    # Pass 5
    # ------------------------------------------------------------------

    def detect_animations(self, descriptor: ComponentDescriptor):
        for node in self._program_walk():
            match = selector_method_call(node)
            if match is None or match.method not in ANIMATION_METHODS:
                continue
            arguments = ', '.join(JSParser.source_of(arg, self.code) for arg in match.arguments)
            descriptor.add_animation(AnimationUsage(
                selector=match.target,
                method=match.method,
                arguments=arguments,
                suggestion=get_animation_suggestion(match.method),
            ))
            logger.info(f"Animation detected: {match.target}.{match.method}()")

    # ------------------------------------------------------------------
    # Pass 6
    # ------------------------------------------------------------------

    def extract_functions(self, descriptor: ComponentDescriptor):
        for statement, _ in self._scoped:
            for name, fn in function_declarator(statement):
                if descriptor.has_identifier(name):
                    continue
                descriptor.add_function(FunctionDefinition(
                    name=name,
                    parameters=self.translator.parameters(fn),
                    body=self.translator.block_body(fn, concise_return=True),
                    is_async=bool(fn.get('isAsync')) or is_remote_idiom(fn.get('body') or {}),
                ))
                logger.info(f"Extracting function: {name}")

    # ------------------------------------------------------------------
    # Pass 7
    # ------------------------------------------------------------------

    def detect_mutations(self, descriptor: ComponentDescriptor):
        """
        Synthesize state for content, value, visibility and class mutations.

        Mutations reached through a traversal are left to the developer:
        their target is not the element the root selector names.
        """
        for node in self._program_walk():
            match = selector_method_call(node)
            if match is None or match.selector.lstrip().startswith('<'):
                continue
            method = match.method
            args = match.arguments

            if method == 'css':
                descriptor.add_warning(
                    f"{match.target}.css(...) was not converted; use inline styles or CSS classes"
                )
                continue
            if match.traversal:
                continue

            element_state = self.translator.element_state
            if method == 'html' and args:
                self._add_mutation_state(descriptor, element_state(match.selector), "''", 'DOM content')
            elif method == 'text' and args:
                self._add_mutation_state(descriptor, element_state(match.selector), "''", 'Text content')
            elif method == 'val':
                self._add_mutation_state(descriptor, element_state(match.selector), "''", 'Form input value')
            elif method in ('show', 'hide'):
                initial = 'true' if method == 'show' else 'false'
                self._add_mutation_state(
                    descriptor, element_state(match.selector, 'Visible'), initial, 'Visibility toggle'
                )
            elif method in CLASS_METHODS and args:
                class_name = JSParser.string_value(args[0])
                if class_name is not None:
                    self._add_mutation_state(
                        descriptor, element_state(match.selector, 'Class'), "''",
                        f"CSS class management for {class_name}"
                    )

    @staticmethod
    def _add_mutation_state(descriptor: ComponentDescriptor, identifier: str, initial: str, purpose: str):
        if descriptor.has_identifier(identifier):
            return
        descriptor.add_state(StateVariable(
            identifier=identifier,
            initial_value=initial,
            kind=StateKind.REACTIVE,
            purpose=purpose,
        ))
        logger.info(f"Converting {purpose.lower()} mutation to state: {identifier}")

    # ------------------------------------------------------------------
    # Pass 8
    # ------------------------------------------------------------------

    def collect_selectors(self, descriptor: ComponentDescriptor):
        """Simple id selectors left over become refs for the JSX placeholder."""
        for node in self._program_walk():
            selector = selector_of(node)
            if selector is not None and is_simple_id_selector(selector):
                descriptor.add_reference(selector)
