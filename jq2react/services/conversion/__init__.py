"""
jQuery to React Converter

Converts imperative jQuery scripts (and HTML pages that embed them) into
React function components.

- JQueryToReactConverter: Converts one script or page
- convert_batch / analyze_batch: Convert or analyse a whole directory tree

The pipeline runs in a fixed order: resources are collected, the pattern
extractor fills a ComponentDescriptor, and the code generator renders a
frozen snapshot of it. Anything the extractor does not recognise is left
out of the component rather than reported as an error.
"""

from .analysis import Complexity, SourceAnalysis, analyze_source, contains_jquery
from .batch import BatchSummary, FileReport, analyze_batch, convert_batch, discover_files
from .converter import (
    ConversionError,
    ConversionResult,
    JQueryToReactConverter,
    convert_jquery_to_react,
)
from .descriptor import ComponentDescriptor
from .extractor import PatternExtractor
from .generator import CodeGenerator, generate_component
from .parser import JSParser, ParseError
from .types import (
    Capability,
    ComponentSnapshot,
    DocumentKind,
    Effect,
    EffectTrigger,
    EventHandlerBinding,
    ExternalResource,
    StateKind,
    StateVariable,
)

__all__ = [
    "JQueryToReactConverter",
    "convert_jquery_to_react",
    "ConversionError",
    "ConversionResult",
    "convert_batch",
    "analyze_batch",
    "discover_files",
    "BatchSummary",
    "FileReport",
    "analyze_source",
    "contains_jquery",
    "SourceAnalysis",
    "Complexity",
    "ComponentDescriptor",
    "PatternExtractor",
    "CodeGenerator",
    "generate_component",
    "JSParser",
    "ParseError",
    "Capability",
    "ComponentSnapshot",
    "DocumentKind",
    "Effect",
    "EffectTrigger",
    "EventHandlerBinding",
    "ExternalResource",
    "StateKind",
    "StateVariable",
]
