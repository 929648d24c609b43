"""API models package"""
from jq2react.api.models.requests import (
    SourceKind,
    ConvertRequest,
    ConvertResponse,
    AnalyzeRequest,
    AnalyzeResponse
)

__all__ = [
    "SourceKind",
    "ConvertRequest",
    "ConvertResponse",
    "AnalyzeRequest",
    "AnalyzeResponse"
]
