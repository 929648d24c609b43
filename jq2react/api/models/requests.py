"""Request and response models for API endpoints"""
from pydantic import BaseModel
from typing import Optional, Dict, List
from enum import Enum

from jq2react.services.conversion import SourceAnalysis


class SourceKind(str, Enum):
    """What the posted source is"""
    SCRIPT = "script"    # Plain JavaScript
    PAGE = "page"        # HTML page with inline scripts and styles


class ConvertRequest(BaseModel):
    """Request to convert posted source to a React component"""
    source: str
    componentName: Optional[str] = None
    kind: SourceKind = SourceKind.SCRIPT


class ConvertResponse(BaseModel):
    """Generated component"""
    success: bool
    componentName: str
    code: str
    stylesheet: str = ""
    summary: Dict[str, int]
    warnings: List[str] = []


class AnalyzeRequest(BaseModel):
    """Request to estimate the conversion effort of a source"""
    source: str


class AnalyzeResponse(BaseModel):
    """Idiom counts and complexity rating"""
    success: bool
    containsJQuery: bool
    analysis: SourceAnalysis
