"""
React component generator.

Turns a ComponentSnapshot into the source of a function component. The
layout is fixed: imports, state, refs, handlers, functions, effects, a JSX
placeholder, the default export and a trailing conversion report. Every
section lists its entries in the order they were discovered.
"""
import logging
from typing import List, Optional

from .naming import mutator_name, to_camel_case
from .printer import Blank, Block, Line, Node, Printer, Text
from .resources import output_relative_path
from .types import (
    CAPABILITY_HOOKS,
    ComponentSnapshot,
    Effect,
    ResourceKind,
    StateKind,
)

logger = logging.getLogger(__name__)

VISIBILITY_PURPOSE = 'Visibility toggle'
INPUT_PURPOSE = 'Form input value'

CHECKLIST = (
    'Review all TODO comments in the code',
    'Add proper JSX structure',
    'Test event handlers',
    'Verify state updates work correctly',
    'Add error handling for async operations',
)


def _comment_text(text: str) -> str:
    return text.replace('*/', '* /').replace('\n', ' ')


class CodeGenerator:
    """
    Generates JSX source from a snapshot.

    Generation never fails on a well-formed snapshot and never checks that
    the result is valid JavaScript.
    """

    def __init__(self, printer: Optional[Printer] = None):
        self.printer = printer or Printer()

    def generate(self, snapshot: ComponentSnapshot) -> str:
        nodes: List[Node] = []
        nodes.extend(self._imports(snapshot))
        nodes.append(Blank())
        nodes.append(Block(
            header=f"function {snapshot.component_name}() {{",
            children=self._body(snapshot),
        ))
        nodes.append(Blank())
        nodes.append(Line(f"export default {snapshot.component_name};"))
        nodes.append(Blank())
        nodes.extend(self._report(snapshot))
        return self.printer.render(nodes)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _imports(self, snapshot: ComponentSnapshot) -> List[Node]:
        hooks = [CAPABILITY_HOOKS[c] for c in snapshot.capabilities]
        if hooks:
            lines: List[Node] = [Line(f"import React, {{ {', '.join(hooks)} }} from 'react';")]
        else:
            lines = [Line("import React from 'react';")]

        if snapshot.stylesheet:
            lines.append(Line(f"import './{snapshot.component_name}.css';"))

        for resource in snapshot.resources:
            target = output_relative_path(resource)
            if resource.kind == ResourceKind.STYLESHEET:
                lines.append(Line(f"import './{target}';"))
            else:
                module_path = target[:-3] if target.endswith('.js') else target
                alias = to_camel_case(resource.resolved_local_path.stem) or 'script'
                lines.append(Line(f"// import * as {alias} from './{module_path}';"))
        return lines

    def _body(self, snapshot: ComponentSnapshot) -> List[Node]:
        body: List[Node] = []

        if snapshot.states:
            body.append(Line("// State"))
            for state in snapshot.states:
                if state.kind == StateKind.CONSTANT:
                    body.extend(self._declaration(f"const {state.identifier} = ", state.initial_value, ";"))
                    continue
                setter = mutator_name(state.identifier)
                suffix = f"); // {state.purpose}" if state.purpose else ");"
                body.extend(self._declaration(
                    f"const [{state.identifier}, {setter}] = useState(", state.initial_value, suffix
                ))
            body.append(Blank())

        if snapshot.references:
            body.append(Line("// Refs"))
            for reference in snapshot.references:
                body.append(Line(f"const {reference.identifier} = useRef(null);"))
            body.append(Blank())

        if snapshot.handlers:
            body.append(Line("// Event Handlers"))
            for handler in snapshot.handlers:
                body.append(Block(
                    header=f"const {handler.handler_name} = ({handler.parameter}) => {{",
                    children=[Text(handler.translated_body)] if handler.translated_body else [],
                    footer="};",
                ))
                body.append(Blank())

        if snapshot.functions:
            body.append(Line("// Functions"))
            for function in snapshot.functions:
                keyword = "async " if function.is_async else ""
                body.append(Block(
                    header=f"const {function.name} = {keyword}({function.parameters}) => {{",
                    children=[Text(function.body)] if function.body else [],
                    footer="};",
                ))
                body.append(Blank())

        if snapshot.effects:
            body.append(Line("// Effects"))
            for effect in snapshot.effects:
                body.extend(self._effect(effect))
                body.append(Blank())

        body.append(Block(header="return (", children=[self._placeholder(snapshot)], footer=");"))
        return body

    @staticmethod
    def _declaration(prefix: str, value: str, suffix: str) -> List[Node]:
        """Declaration whose initial value may span several lines."""
        head, *rest = value.split('\n')
        if not rest:
            return [Line(f"{prefix}{head}{suffix}")]
        nodes: List[Node] = [Line(f"{prefix}{head}")]
        if len(rest) > 1:
            nodes.append(Text('\n'.join(rest[:-1])))
        nodes.append(Line(f"{rest[-1]}{suffix}"))
        return nodes

    @staticmethod
    def _effect(effect: Effect) -> List[Node]:
        dependencies = f"[{', '.join(effect.dependencies)}]"
        return [
            Line(f"// {_comment_text(effect.description)}"),
            Block(
                header="useEffect(() => {",
                children=[Text(effect.code)] if effect.code else [],
                footer=f"}}, {dependencies});",
            ),
        ]

    @staticmethod
    def _placeholder(snapshot: ComponentSnapshot) -> Block:
        children: List[Node] = [Line("{/* TODO: Add your JSX here */}")]

        if snapshot.references:
            children.append(Line("{/* Example refs: */}"))
            for reference in snapshot.references:
                children.append(Line(f"{{/* <div ref={{{reference.identifier}}}>...</div> */}}"))

        visibility = [s for s in snapshot.states if s.purpose == VISIBILITY_PURPOSE]
        if visibility:
            children.append(Line("{/* Conditional rendering: */}"))
            for state in visibility:
                children.append(Line(f"{{/* {{{state.identifier} && <div>Visible content</div>}} */}}"))

        inputs = [s for s in snapshot.states if s.purpose == INPUT_PURPOSE]
        if inputs:
            children.append(Line("{/* Controlled inputs: */}"))
            for state in inputs:
                setter = mutator_name(state.identifier)
                children.append(Line(
                    f"{{/* <input value={{{state.identifier}}} "
                    f"onChange={{(e) => {setter}(e.target.value)}} /> */}}"
                ))

        return Block(
            header=f'<div className="{snapshot.component_name.lower()}">',
            children=children,
            footer="</div>",
        )

    @staticmethod
    def _report(snapshot: ComponentSnapshot) -> List[Node]:
        lines = [
            "/* CONVERSION NOTES:",
            " * ",
            f" * State variables: {len(snapshot.states)}",
            f" * Refs: {len(snapshot.references)}",
            f" * Event handlers: {len(snapshot.handlers)}",
            f" * Functions: {len(snapshot.functions)}",
            f" * Effects: {len(snapshot.effects)}",
            f" * Remote calls converted to fetch: {len(snapshot.remote_calls)}",
            f" * Animations: {len(snapshot.animations)}",
            " * ",
            " * 1. All jQuery selectors have been converted to refs or state",
            " * 2. Event handlers are attached using useEffect with cleanup",
            " * 3. DOM manipulations should use state instead",
            " * 4. AJAX calls converted to fetch API",
        ]

        if snapshot.animations:
            lines.append(" * ")
            lines.append(" * ANIMATIONS DETECTED:")
            for animation in snapshot.animations:
                lines.append(
                    f" *   - {_comment_text(animation.selector)}.{animation.method}() => "
                    f"{_comment_text(animation.suggestion)}"
                )

        if snapshot.warnings:
            lines.append(" * ")
            lines.append(" * WARNINGS:")
            for warning in snapshot.warnings:
                lines.append(f" *   - {_comment_text(warning)}")

        if snapshot.detected_libraries:
            lines.append(" * ")
            lines.append(" * DETECTED LIBRARIES:")
            lines.append(f" *   npm install {' '.join(snapshot.detected_libraries)}")

        lines.append(" * ")
        lines.append(" * TODO Items:")
        lines.extend(f" * - {item}" for item in CHECKLIST)
        if snapshot.animations:
            lines.append(" * - Implement animations with CSS or animation library")
        lines.append(" */")
        return [Line(line) for line in lines]


def generate_component(snapshot: ComponentSnapshot) -> str:
    """Convenience wrapper around CodeGenerator().generate()."""
    logger.debug(f"Generating component {snapshot.component_name}")
    return CodeGenerator().generate(snapshot)
