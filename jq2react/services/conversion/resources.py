"""
External resource collection for HTML pages.

Finds the stylesheets and scripts a page pulls in, keeps the ones that live
next to the page so they can be carried over into the React project, and
reports well-known libraries as npm dependency hints instead.
"""
import logging
import re
from pathlib import Path
from typing import List, Optional

from bs4 import BeautifulSoup

from .parser import JSParser, ParseError
from .types import ExternalResource, ResourceKind

logger = logging.getLogger(__name__)

ABSOLUTE_PREFIXES = ('http://', 'https://', '//', 'data:')

# Generic UI libraries are replaced by npm packages, never copied
UI_LIBRARY_PATTERN = re.compile(
    r'jquery|bootstrap|popper|lodash|underscore|moment|font-?awesome|normalize\.css',
    re.IGNORECASE,
)

# Substring of a script URL -> npm package
LIBRARY_PACKAGES = {
    'jquery': 'jquery',
    'lodash': 'lodash',
    'axios': 'axios',
    'moment': 'moment',
    'bootstrap': 'bootstrap',
    'chart': 'chart.js',
    'three': 'three',
    'd3': 'd3',
    'gsap': 'gsap',
}


def is_absolute_reference(reference: str) -> bool:
    return reference.strip().lower().startswith(ABSOLUTE_PREFIXES)


def is_ui_library(reference: str) -> bool:
    return bool(UI_LIBRARY_PATTERN.search(Path(reference).name))


def _local_part(reference: str) -> str:
    """'css/site.css?v=3#x' -> 'css/site.css'"""
    return re.split(r'[?#]', reference.strip(), maxsplit=1)[0]


def _is_stylesheet_link(tag) -> bool:
    rel = tag.get('rel') or []
    if isinstance(rel, str):
        rel = rel.split()
    return any(value.lower() == 'stylesheet' for value in rel)


def collect_resources(text: str, source_dir: Path) -> List[ExternalResource]:
    """
    Collect local stylesheet and script references of a page.

    Args:
        text: Raw page markup
        source_dir: Directory the page lives in; references resolve against it

    Returns:
        Resources in document order. Absolute URLs and UI libraries are left out.
    """
    soup = BeautifulSoup(text, 'html.parser')
    resources = []

    for tag in soup.find_all(['link', 'script']):
        if tag.name == 'link':
            if not _is_stylesheet_link(tag):
                continue
            reference = tag.get('href')
            kind = ResourceKind.STYLESHEET
        else:
            reference = tag.get('src')
            kind = ResourceKind.SCRIPT

        if not reference or not _local_part(reference):
            continue
        if is_absolute_reference(reference):
            logger.debug(f"Skipping remote {kind.value}: {reference}")
            continue
        if is_ui_library(_local_part(reference)):
            logger.debug(f"Skipping library {kind.value}: {reference}")
            continue

        is_module = kind == ResourceKind.SCRIPT and (tag.get('type') or '').lower() == 'module'
        resources.append(ExternalResource(
            original_reference=reference,
            resolved_local_path=(source_dir / _local_part(reference)),
            kind=kind,
            is_module=is_module,
        ))
        logger.info(f"Found {kind.value}: {reference}{' (module)' if is_module else ''}")

    return resources


def output_relative_path(resource: ExternalResource) -> str:
    """
    Where a copied resource lands, relative to the component file.

    Stylesheets and module scripts keep their file name; classic scripts go
    to utils/<name>.util.js so an export list can be appended.
    """
    name = resource.resolved_local_path.name
    if resource.kind == ResourceKind.STYLESHEET or resource.is_module:
        return name
    return f"utils/{resource.resolved_local_path.stem}.util.js"


def _library_for(src: str) -> Optional[str]:
    lowered = src.lower()
    for key, package in LIBRARY_PACKAGES.items():
        if key in lowered:
            return package
    return None


def detect_libraries(text: str) -> List[str]:
    """npm packages for the well-known libraries a page loads by <script src>."""
    soup = BeautifulSoup(text, 'html.parser')
    packages = []
    for tag in soup.find_all('script', src=True):
        package = _library_for(tag['src'])
        if package and package not in packages:
            packages.append(package)
            logger.info(f"Detected library: {package}")
    return packages


_EXPORT_PATTERNS = (
    re.compile(r'^function\s+([\w$]+)\s*\(', re.MULTILINE),
    re.compile(r'^(?:const|let|var)\s+([\w$]+)\s*=', re.MULTILINE),
    re.compile(r'^class\s+([\w$]+)', re.MULTILINE),
)


def detect_exports(script: str) -> List[str]:
    """
    Top-level function, variable and class names of a script.

    Used to append an export list to a copied script so the component can
    import from it.
    """
    try:
        ast = JSParser.parse(script)
    except ParseError as e:
        logger.debug(f"Export detection falling back to line scan: {e}")
        names = []
        for pattern in _EXPORT_PATTERNS:
            for name in pattern.findall(script):
                if name not in names:
                    names.append(name)
        return names

    names = []
    for statement in JSParser.get_statements(ast):
        statement_type = statement.get('type')
        if statement_type in ('FunctionDeclaration', 'ClassDeclaration'):
            candidates = [JSParser.identifier_name(statement.get('id'))]
        elif statement_type == 'VariableDeclaration':
            candidates = [JSParser.identifier_name(d.get('id')) for d in statement.get('declarations') or []]
        else:
            continue
        for name in candidates:
            if name and name not in names:
                names.append(name)
    return names
