"""
Batch conversion.

Finds every jQuery file under a directory tree and converts them
concurrently, mirroring their relative paths under an output directory.
One failing file never stops the others, and two sources that would
write the same component keep the first one.
"""
import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, computed_field

from jq2react.config import settings

from .analysis import SourceAnalysis, analyze_source, contains_jquery
from .converter import ConversionError, JQueryToReactConverter

logger = logging.getLogger(__name__)


class FileReport(BaseModel):
    """Outcome for one discovered file"""
    path: str                       # Relative to the batch root
    analysis: SourceAnalysis
    output: Optional[str] = None    # Component file written, if any
    error: Optional[str] = None


class BatchSummary(BaseModel):
    """Per-file analyses and totals of a batch run, in discovery order"""
    root: str
    output_dir: Optional[str] = None
    files: List[FileReport] = []

    @computed_field
    @property
    def total_files(self) -> int:
        return len(self.files)

    @computed_field
    @property
    def totals(self) -> SourceAnalysis:
        total = SourceAnalysis()
        for report in self.files:
            total = total + report.analysis
        return total

    @computed_field
    @property
    def converted(self) -> List[str]:
        return [r.path for r in self.files if r.output is not None]

    @computed_field
    @property
    def failed(self) -> List[str]:
        return [r.path for r in self.files if r.error is not None]


def _is_eligible_name(name: str, extensions: Sequence[str]) -> bool:
    lowered = name.lower()
    if lowered.endswith('.min.js'):
        return False
    return os.path.splitext(lowered)[1] in extensions


def discover_files(
    root: Path,
    extensions: Optional[Sequence[str]] = None,
    skip_directories: Optional[Sequence[str]] = None,
    exclude: Optional[Path] = None
) -> List[Path]:
    """
    Walk a directory tree for files worth converting.

    A file qualifies when it has one of the source extensions, is not
    minified and contains a jQuery idiom. Unreadable files are skipped.

    Args:
        root: Directory to walk
        extensions: Accepted extensions (defaults to settings.SOURCE_EXTENSIONS)
        skip_directories: Directory names never entered
        exclude: A directory (usually the output directory) never entered

    Returns:
        Eligible files in a stable, sorted walk order

    Raises:
        ConversionError: If root is not a readable directory
    """
    root = Path(root)
    if not root.is_dir():
        raise ConversionError(f"Not a directory: {root}", root)

    extensions = [e.lower() for e in (extensions or settings.SOURCE_EXTENSIONS)]
    skip = set(skip_directories if skip_directories is not None else settings.SKIP_DIRECTORIES)
    excluded = exclude.resolve() if exclude is not None else None

    def on_error(error: OSError):
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

    found = []
    for current, dirnames, filenames in os.walk(root, onerror=on_error):
        current_path = Path(current)
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in skip and (excluded is None or (current_path / d).resolve() != excluded)
        )
        for filename in sorted(filenames):
            if not _is_eligible_name(filename, extensions):
                continue
            path = current_path / filename
            try:
                text = path.read_text(encoding='utf-8', errors='replace')
            except OSError as e:
                logger.warning(f"Skipping unreadable file {path}: {e}")
                continue
            if contains_jquery(text):
                found.append(path)
    return found


async def _analyze(path: Path) -> SourceAnalysis:
    text = await asyncio.to_thread(path.read_text, encoding='utf-8', errors='replace')
    return analyze_source(text)


async def analyze_batch(root: Path) -> BatchSummary:
    """Analyse every eligible file without writing anything."""
    root = Path(root)
    files = await asyncio.to_thread(discover_files, root)

    async def analyze_one(path: Path) -> FileReport:
        relative = path.relative_to(root).as_posix()
        try:
            return FileReport(path=relative, analysis=await _analyze(path))
        except OSError as e:
            logger.warning(f"Analysis failed for {relative}: {e}")
            return FileReport(path=relative, analysis=SourceAnalysis(), error=str(e))

    reports = await asyncio.gather(*(analyze_one(path) for path in files))
    return BatchSummary(root=str(root), files=list(reports))


async def convert_batch(
    root: Path,
    output_dir: Optional[Path] = None,
    converter: Optional[JQueryToReactConverter] = None,
    max_concurrency: Optional[int] = None
) -> BatchSummary:
    """
    Convert every eligible file under root.

    Args:
        root: Directory to convert
        output_dir: Where components go (defaults to settings.OUTPUT_DIR)
        converter: Converter to use (a fresh one by default)
        max_concurrency: Upper bound on files converted at once

    Returns:
        BatchSummary listing files in discovery order

    Raises:
        ConversionError: If root cannot be walked
    """
    root = Path(root)
    output_dir = Path(output_dir or settings.OUTPUT_DIR)
    converter = converter or JQueryToReactConverter()
    semaphore = asyncio.Semaphore(max_concurrency or settings.MAX_CONCURRENT_CONVERSIONS)

    files = await asyncio.to_thread(discover_files, root, None, None, output_dir)
    logger.info(f"Found {len(files)} file(s) to convert under {root}")

    # page.js and page.html both map to page.jsx; the first in walk order wins
    owners: Dict[Path, str] = {}
    for path in files:
        target = output_dir / path.relative_to(root).with_suffix(settings.COMPONENT_EXTENSION)
        owners.setdefault(target, path.relative_to(root).as_posix())

    async def convert_one(path: Path) -> FileReport:
        relative = path.relative_to(root)
        target = output_dir / relative.with_suffix(settings.COMPONENT_EXTENSION)
        async with semaphore:
            try:
                analysis = await _analyze(path)
            except OSError as e:
                logger.warning(f"Failed: {relative.as_posix()}: {e}")
                return FileReport(path=relative.as_posix(), analysis=SourceAnalysis(), error=str(e))
            owner = owners[target]
            if owner != relative.as_posix():
                message = f"Output {target} is already written for {owner}"
                logger.warning(f"Failed: {relative.as_posix()}: {message}")
                return FileReport(path=relative.as_posix(), analysis=analysis, error=message)
            try:
                await converter.convert_file(path, target)
            except ConversionError as e:
                logger.warning(f"Failed: {relative.as_posix()}: {e.message}")
                return FileReport(path=relative.as_posix(), analysis=analysis, error=e.message)
            except Exception as e:
                logger.error(f"Unexpected failure converting {relative.as_posix()}: {e}", exc_info=True)
                return FileReport(path=relative.as_posix(), analysis=analysis, error=str(e) or type(e).__name__)
        logger.info(f"Converted: {relative.as_posix()} -> {target}")
        return FileReport(path=relative.as_posix(), analysis=analysis, output=str(target))

    reports = await asyncio.gather(*(convert_one(path) for path in files))
    return BatchSummary(root=str(root), output_dir=str(output_dir), files=list(reports))
