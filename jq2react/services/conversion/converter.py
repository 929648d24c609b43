"""
jQuery to React converter.

Runs one source document through resource collection, pattern extraction
and code generation, and optionally writes the results to disk.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from jq2react.config import settings

from .descriptor import ComponentDescriptor
from .document import from_text, load_document
from .extractor import PatternExtractor
from .generator import CodeGenerator
from .naming import component_name as derive_component_name
from .resources import collect_resources, detect_libraries
from .types import ComponentSnapshot, DocumentKind, SourceDocument
from .writer import copy_resources, write_text_atomic

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Raised when a source file cannot be read or its output cannot be written"""
    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(message)


@dataclass
class ConversionResult:
    """Generated component plus everything needed to write it out"""
    component_name: str
    code: str
    snapshot: ComponentSnapshot
    stylesheet: str = ""
    output_path: Optional[Path] = None
    written: List[Path] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return list(self.snapshot.warnings)

    def summary(self) -> Dict[str, int]:
        snapshot = self.snapshot
        return {
            "states": len(snapshot.states),
            "refs": len(snapshot.references),
            "handlers": len(snapshot.handlers),
            "functions": len(snapshot.functions),
            "effects": len(snapshot.effects),
            "remoteCalls": len(snapshot.remote_calls),
            "animations": len(snapshot.animations),
        }


class JQueryToReactConverter:
    """
    Converts jQuery scripts and pages to React function components.

    The converter holds no per-conversion state: every call builds its own
    descriptor, so one instance can serve concurrent conversions.

    Example:
        converter = JQueryToReactConverter()
        result = converter.convert_source('''
            let counter = 0;
            $('#inc').on('click', function () { counter = counter + 1; });
        ''', component_name="Counter")
        print(result.code)
    """

    def __init__(self, generator: Optional[CodeGenerator] = None):
        self.generator = generator or CodeGenerator()

    def describe(self, document: SourceDocument, component_name: Optional[str] = None) -> ComponentSnapshot:
        """
        Extract the component descriptor of a document.

        Args:
            document: Source document to analyse
            component_name: Overrides the name derived from the file name

        Returns:
            Frozen snapshot of the completed descriptor
        """
        name = derive_component_name(component_name or document.base_name)
        descriptor = ComponentDescriptor(name)

        if document.kind == DocumentKind.PAGE:
            descriptor.resources = collect_resources(document.text, document.source_dir)
            descriptor.detected_libraries = detect_libraries(document.text)
            descriptor.stylesheet = document.styles

        PatternExtractor(document.script).extract(descriptor)
        return descriptor.snapshot()

    def convert_document(self, document: SourceDocument, component_name: Optional[str] = None) -> ConversionResult:
        snapshot = self.describe(document, component_name)
        code = self.generator.generate(snapshot)
        logger.info(
            f"Converted {document.base_name} -> {snapshot.component_name}: "
            f"{len(snapshot.states)} states, {len(snapshot.handlers)} handlers, "
            f"{len(snapshot.effects)} effects"
        )
        return ConversionResult(
            component_name=snapshot.component_name,
            code=code,
            snapshot=snapshot,
            stylesheet=snapshot.stylesheet,
        )

    def convert_source(
        self,
        source: str,
        component_name: str = "Component",
        kind: DocumentKind = DocumentKind.SCRIPT
    ) -> ConversionResult:
        """Convert source text held in memory. Nothing is written."""
        document = from_text(source, component_name, Path("."), kind=kind)
        return self.convert_document(document, component_name)

    async def convert_file(self, path: Path, output: Optional[Path] = None) -> ConversionResult:
        """
        Convert one file and write the component next to it (or to output).

        Args:
            path: Script or page to convert
            output: Component file to write; defaults to the source path with
                the component extension

        Raises:
            ConversionError: If the source cannot be read or an output cannot be written
        """
        path = Path(path)
        output = Path(output) if output else path.with_suffix(settings.COMPONENT_EXTENSION)

        try:
            document = await asyncio.to_thread(load_document, path)
        except OSError as e:
            raise ConversionError(f"Cannot read {path}: {e}", path) from e

        result = self.convert_document(document)

        try:
            result.written = await asyncio.to_thread(self.write_result, result, output)
        except OSError as e:
            raise ConversionError(f"Cannot write {output}: {e}", path) from e

        result.output_path = output
        return result

    @staticmethod
    def write_result(result: ConversionResult, output: Path) -> List[Path]:
        """Write the component, its stylesheet and copied resources."""
        written = [write_text_atomic(output, result.code)]
        if result.stylesheet:
            written.append(write_text_atomic(
                output.parent / f"{result.component_name}.css",
                f"{result.stylesheet.rstrip()}\n",
            ))
        written.extend(copy_resources(result.snapshot.resources, output.parent))
        return written


def convert_jquery_to_react(
    source: str,
    component_name: str = "Component",
    kind: DocumentKind = DocumentKind.SCRIPT
) -> str:
    """
    Convenience function to convert jQuery source to React component code.

    Args:
        source: Script (or page, with kind=PAGE) source
        component_name: Name of the generated component

    Returns:
        Generated component source
    """
    return JQueryToReactConverter().convert_source(source, component_name, kind).code
