"""
Output tree and printer for generated source.

The generator describes a component as a tree of these nodes; the printer
owns indentation and line joining.
"""
from dataclasses import dataclass, field
from typing import List, Union


@dataclass
class Line:
    """A single line of code"""
    text: str


@dataclass
class Blank:
    """An empty line"""


@dataclass
class Text:
    """A multi-line fragment; each of its lines is indented at the current level"""
    text: str


@dataclass
class Block:
    """
    A header line, indented children and an optional closing line.

    Example:
        Block("useEffect(() => {", [Line("load();")], "}, []);")
    """
    header: str
    children: List["Node"] = field(default_factory=list)
    footer: str = "}"


Node = Union[Line, Blank, Text, Block]


class Printer:
    """Renders output nodes to source text"""

    def __init__(self, indent: str = "  "):
        self.indent = indent

    def render(self, nodes: List[Node]) -> str:
        lines: List[str] = []
        self._emit(nodes, 0, lines)
        return '\n'.join(lines) + '\n'

    def _emit(self, nodes: List[Node], level: int, lines: List[str]):
        prefix = self.indent * level
        for node in nodes:
            if isinstance(node, Blank):
                lines.append("")
            elif isinstance(node, Line):
                lines.append(f"{prefix}{node.text}" if node.text else "")
            elif isinstance(node, Text):
                for text_line in node.text.split('\n'):
                    lines.append(f"{prefix}{text_line}" if text_line.strip() else "")
            elif isinstance(node, Block):
                lines.append(f"{prefix}{node.header}")
                self._emit(node.children, level + 1, lines)
                if node.footer:
                    lines.append(f"{prefix}{node.footer}")
            else:
                raise TypeError(f"Unknown output node: {type(node).__name__}")
