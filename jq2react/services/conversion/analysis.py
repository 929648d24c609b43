"""
Migration effort analysis.

Counts jQuery idioms in a source file and rates how much work its
conversion is likely to take. Counting is a plain text scan, so it also
works on files the parser would reject.
"""
import re
from enum import Enum

from pydantic import BaseModel, computed_field

# Marker of code that uses jQuery at all
JQUERY_MARKER = re.compile(r'\$\(|\$\.|jQuery')

SELECTOR_PATTERN = re.compile(r'\$\([\'"]')
HANDLER_PATTERN = re.compile(r'\.(on|click|change|submit|keyup|keydown|focus|blur)\s*\(')
MUTATION_PATTERN = re.compile(r'\.(html|text|val|append|prepend|remove)\s*\(')
REMOTE_PATTERN = re.compile(r'\$\.(ajax|getJSON|get|post)\b')
ANIMATION_PATTERN = re.compile(r'\.(show|hide|toggle|fade\w*|slide\w*|animate)\s*\(')
STYLE_PATTERN = re.compile(r'\.(css|addClass|removeClass|toggleClass)\s*\(')

# Score weight per counted idiom
WEIGHTS = {
    'selectors': 1,
    'event_handlers': 2,
    'mutations': 2,
    'remote_calls': 3,
    'animations': 2,
    'style_mutations': 1,
}

HIGH_THRESHOLD = 20
MEDIUM_THRESHOLD = 10


class Complexity(str, Enum):
    """Qualitative conversion effort"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SourceAnalysis(BaseModel):
    """Idiom counts for one source"""
    selectors: int = 0
    event_handlers: int = 0
    mutations: int = 0
    remote_calls: int = 0
    animations: int = 0
    style_mutations: int = 0

    @computed_field
    @property
    def score(self) -> int:
        return sum(getattr(self, name) * weight for name, weight in WEIGHTS.items())

    @computed_field
    @property
    def complexity(self) -> Complexity:
        return rate_complexity(self.score)

    def __add__(self, other: "SourceAnalysis") -> "SourceAnalysis":
        return SourceAnalysis(**{name: getattr(self, name) + getattr(other, name) for name in WEIGHTS})


def rate_complexity(score: int) -> Complexity:
    if score > HIGH_THRESHOLD:
        return Complexity.HIGH
    if score >= MEDIUM_THRESHOLD:
        return Complexity.MEDIUM
    return Complexity.LOW


def contains_jquery(text: str) -> bool:
    return bool(JQUERY_MARKER.search(text))


def analyze_source(text: str) -> SourceAnalysis:
    """
    Count the jQuery idioms in a source text.

    Args:
        text: Script or page source

    Returns:
        SourceAnalysis with per-idiom counts
    """
    return SourceAnalysis(
        selectors=len(SELECTOR_PATTERN.findall(text)),
        event_handlers=len(HANDLER_PATTERN.findall(text)),
        mutations=len(MUTATION_PATTERN.findall(text)),
        remote_calls=len(REMOTE_PATTERN.findall(text)),
        animations=len(ANIMATION_PATTERN.findall(text)),
        style_mutations=len(STYLE_PATTERN.findall(text)),
    )
