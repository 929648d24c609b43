"""
Output writing.

Every file goes through write_text_atomic: the content is written to a
temporary sibling and moved into place, so an interrupted conversion never
leaves a half-written file behind.
"""
import logging
from pathlib import Path
from typing import List, Sequence

from .resources import detect_exports, output_relative_path
from .types import ExternalResource, ResourceKind

logger = logging.getLogger(__name__)


def write_text_atomic(path: Path, text: str) -> Path:
    """
    Write text to path atomically.

    Raises:
        OSError: If the directory cannot be created or the file written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(text)
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
    logger.debug(f"Wrote {path}")
    return path


def with_exports(script: str) -> str:
    """Append an export list for the top-level names of a classic script."""
    names = detect_exports(script)
    if not names:
        return script
    return f"{script.rstrip()}\n\n// Auto-generated exports\nexport {{ {', '.join(names)} }};\n"


def copy_resources(resources: Sequence[ExternalResource], component_dir: Path) -> List[Path]:
    """
    Copy local stylesheets and scripts next to the generated component.

    Missing resources are skipped with a warning; write failures propagate.

    Returns:
        Paths that were written
    """
    written = []
    for resource in resources:
        source = resource.resolved_local_path
        if not source.is_file():
            logger.warning(f"Referenced {resource.kind.value} not found, skipping: {resource.original_reference}")
            continue
        content = source.read_text(encoding="utf-8", errors="replace")
        if resource.kind == ResourceKind.SCRIPT and not resource.is_module:
            content = with_exports(content)
        target = component_dir / output_relative_path(resource)
        written.append(write_text_atomic(target, content))
        logger.info(f"Copied {resource.original_reference} -> {target}")
    return written
