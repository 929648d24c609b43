"""
JavaScript Parser wrapper using esprima.

Parses JavaScript code to an ESTree-compatible AST (as plain dictionaries)
and offers the small set of traversal helpers the pattern matchers need.
"""
import re
from typing import Dict, Any, Optional, List, Iterator, Tuple
import esprima


class ParseError(Exception):
    """Exception raised when JavaScript parsing fails"""
    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"Parse error at line {line}, column {column}: {message}")


# Marks a spliced-out comment until the surrounding line is tidied up
_COMMENT_MARK = '\x00'


class JSParser:
    """
    JavaScript parser that converts JavaScript code to AST.

    Uses esprima to parse JavaScript and returns an ESTree-compatible AST
    with source ranges, so callers can slice the original text of any node.
    """

    @staticmethod
    def parse(code: str, tolerant: bool = True, comments: bool = False) -> Dict[str, Any]:
        """
        Parse JavaScript code to AST.

        Args:
            code: JavaScript code to parse
            tolerant: If True, continue parsing after recoverable errors
            comments: If True, collect comments on the Program node

        Returns:
            AST as a dictionary

        Raises:
            ParseError: If parsing fails
        """
        options = {
            'tolerant': tolerant,
            'range': True,
            'loc': True,
            'comment': comments,
        }

        try:
            try:
                # Try parseScript first
                ast = esprima.parseScript(code, options=options)
                return JSParser._node_to_dict(ast)
            except esprima.Error:
                try:
                    # Fall back to parseModule for import/export and top-level await
                    ast = esprima.parseModule(code, options=options)
                    return JSParser._node_to_dict(ast)
                except esprima.Error as e:
                    raise ParseError(
                        getattr(e, 'description', None) or str(e),
                        getattr(e, 'lineNumber', 0) or 0,
                        getattr(e, 'column', 0) or 0,
                    )
        except RecursionError:
            # Both esprima and the dict conversion recurse once per nesting level
            raise ParseError("Source is nested too deeply to parse")

    @staticmethod
    def strip_comments(code: str) -> str:
        """
        Remove comments from JavaScript code.

        Comment positions come from the parser, so comment-like text inside
        strings and regular expressions is left alone. Lines that held only a
        comment are dropped. Code the parser rejects is returned unchanged.
        """
        try:
            ast = JSParser.parse(code, comments=True)
        except ParseError:
            return code

        comments = ast.get('comments') or []
        if not comments:
            return code

        pieces = []
        cursor = 0
        for comment in sorted(comments, key=lambda c: c['range'][0]):
            start, end = comment['range']
            if start < cursor:
                continue
            pieces.append(code[cursor:start])
            pieces.append(_COMMENT_MARK)
            cursor = end
        pieces.append(code[cursor:])
        spliced = ''.join(pieces)

        lines = []
        for line in spliced.split('\n'):
            if _COMMENT_MARK not in line:
                lines.append(line)
                continue
            if not line.replace(_COMMENT_MARK, '').strip():
                continue
            # a/**/b must not collapse into one token
            line = re.sub(r'(?<=\w)\x00(?=\w)', ' ', line)
            lines.append(line.replace(_COMMENT_MARK, '').rstrip())
        return '\n'.join(lines)

    @staticmethod
    def _node_to_dict(node: Any) -> Dict[str, Any]:
        """
        Convert esprima node to dictionary.

        Args:
            node: Esprima AST node

        Returns:
            Dictionary representation of the node
        """
        if node is None:
            return None

        if isinstance(node, list):
            return [JSParser._node_to_dict(item) for item in node]

        if not hasattr(node, '__dict__'):
            return node

        result = {}
        for key, value in node.__dict__.items():
            if key.startswith('_'):
                continue
            if isinstance(value, list):
                result[key] = [JSParser._node_to_dict(item) for item in value]
            elif hasattr(value, '__dict__'):
                result[key] = JSParser._node_to_dict(value)
            else:
                result[key] = value

        return result

    @staticmethod
    def get_statements(ast: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Get all statements from the AST body."""
        return ast.get('body', []) if ast else []

    @staticmethod
    def get_node_type(node: Dict[str, Any]) -> str:
        """Get the type of an AST node."""
        return node.get('type', '') if isinstance(node, dict) else ''

    @staticmethod
    def is_node(value: Any) -> bool:
        return isinstance(value, dict) and 'type' in value

    @staticmethod
    def children(node: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        """Yield the direct child nodes of a node in field order."""
        for key, value in node.items():
            if key in ('range', 'loc', 'comments', 'errors', 'tokens'):
                continue
            if isinstance(value, list):
                for item in value:
                    if JSParser.is_node(item):
                        yield item
            elif JSParser.is_node(value):
                yield value

    @staticmethod
    def walk(node: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        """Depth-first, pre-order traversal of every node under (and including) node."""
        for current, _ in JSParser.walk_with_parents(node):
            yield current

    @staticmethod
    def walk_with_parents(
        node: Dict[str, Any],
        parents: Tuple[Dict[str, Any], ...] = ()
    ) -> Iterator[Tuple[Dict[str, Any], Tuple[Dict[str, Any], ...]]]:
        """
        Pre-order traversal yielding (node, ancestors) pairs.

        Ancestors run from the root down to the direct parent.
        """
        if not JSParser.is_node(node):
            return
        stack = [(node, parents)]
        while stack:
            current, ancestors = stack.pop()
            yield current, ancestors
            lineage = ancestors + (current,)
            kids = list(JSParser.children(current))
            for child in reversed(kids):
                stack.append((child, lineage))

    @staticmethod
    def source_of(node: Dict[str, Any], code: str) -> str:
        """Original source text covered by a node."""
        if not node or 'range' not in node:
            return ''
        start, end = node['range']
        return code[start:end]

    @staticmethod
    def string_value(node: Optional[Dict[str, Any]]) -> Optional[str]:
        """
        Value of a string literal (or a template literal without
        substitutions); None for anything else.
        """
        if not node:
            return None
        node_type = node.get('type')
        if node_type == 'Literal' and isinstance(node.get('value'), str):
            return node['value']
        if node_type == 'TemplateLiteral' and not node.get('expressions'):
            quasis = node.get('quasis') or []
            if len(quasis) == 1:
                value = quasis[0].get('value') or {}
                return value.get('cooked')
        return None

    @staticmethod
    def is_function(node: Optional[Dict[str, Any]]) -> bool:
        return JSParser.get_node_type(node) in ('FunctionExpression', 'ArrowFunctionExpression')

    @staticmethod
    def identifier_name(node: Optional[Dict[str, Any]]) -> Optional[str]:
        if JSParser.get_node_type(node) == 'Identifier':
            return node.get('name')
        return None
