"""Conversion API routes - Convert and Analyze posted source"""
from fastapi import APIRouter, HTTPException
import logging

from jq2react.api.models.requests import (
    ConvertRequest,
    ConvertResponse,
    AnalyzeRequest,
    AnalyzeResponse,
)
from jq2react.services.conversion import (
    ConversionError,
    DocumentKind,
    JQueryToReactConverter,
    analyze_source,
    contains_jquery,
)

logger = logging.getLogger(__name__)

router = APIRouter()

converter = JQueryToReactConverter()


@router.post("/convert", response_model=ConvertResponse)
async def convert(request: ConvertRequest):
    """
    Convert posted jQuery source to a React component.

    Nothing is written to disk; the component (and the stylesheet of an HTML
    page) is returned in the response.
    """
    if not request.source.strip():
        raise HTTPException(status_code=422, detail="Source is empty")

    try:
        result = converter.convert_source(
            request.source,
            component_name=request.componentName or "Component",
            kind=DocumentKind(request.kind.value),
        )
    except ConversionError as e:
        logger.warning(f"Conversion rejected: {e.message}")
        raise HTTPException(status_code=422, detail=e.message)
    except Exception as e:
        logger.error(f"Conversion failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return ConvertResponse(
        success=True,
        componentName=result.component_name,
        code=result.code,
        stylesheet=result.stylesheet,
        summary=result.summary(),
        warnings=result.warnings,
    )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest):
    """Count jQuery idioms and rate the conversion effort"""
    return AnalyzeResponse(
        success=True,
        containsJQuery=contains_jquery(request.source),
        analysis=analyze_source(request.source),
    )
