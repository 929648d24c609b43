"""
Source document loading.

A script file is converted as a whole. An HTML page contributes its inline
<script> bodies (joined in document order) and its <style> rules.
"""
import logging
from pathlib import Path
from typing import Optional, Tuple

from bs4 import BeautifulSoup

from .types import DocumentKind, SourceDocument

logger = logging.getLogger(__name__)

PAGE_EXTENSIONS = ('.html', '.htm')

# <script type="..."> values that hold JavaScript
SCRIPT_TYPES = ('', 'text/javascript', 'application/javascript', 'module', 'text/babel')


def split_page(html: str) -> Tuple[str, str]:
    """
    Pull inline scripts and styles out of a page.

    Returns:
        (script text, style text)
    """
    soup = BeautifulSoup(html, 'html.parser')

    scripts = []
    for tag in soup.find_all('script'):
        if tag.get('src'):
            continue
        script_type = (tag.get('type') or '').strip().lower()
        if script_type not in SCRIPT_TYPES:
            continue
        body = tag.string or tag.get_text()
        if body and body.strip():
            scripts.append(body.strip('\n'))

    styles = []
    for tag in soup.find_all('style'):
        body = tag.string or tag.get_text()
        if body and body.strip():
            styles.append(body.strip('\n'))

    return '\n\n'.join(scripts), '\n\n'.join(styles)


def document_kind(path: Path) -> DocumentKind:
    return DocumentKind.PAGE if path.suffix.lower() in PAGE_EXTENSIONS else DocumentKind.SCRIPT


def from_text(
    text: str,
    base_name: str,
    source_dir: Path,
    kind: DocumentKind = DocumentKind.SCRIPT,
    path: Optional[Path] = None
) -> SourceDocument:
    """Build a SourceDocument from text already in memory."""
    if kind == DocumentKind.PAGE:
        script, styles = split_page(text)
    else:
        script, styles = text, ""
    return SourceDocument(
        text=text,
        base_name=base_name,
        source_dir=source_dir,
        kind=kind,
        script=script,
        styles=styles,
        path=path,
    )


def load_document(path: Path) -> SourceDocument:
    """
    Read a source file from disk.

    Raises:
        OSError: If the file cannot be read
    """
    text = path.read_text(encoding='utf-8', errors='replace')
    kind = document_kind(path)
    logger.debug(f"Loaded {kind.value} {path} ({len(text)} chars)")
    return from_text(text, path.stem, path.parent, kind=kind, path=path)
