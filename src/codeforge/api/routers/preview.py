"""Stateless preview endpoints: POST /extract and POST /assemble."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from codeforge.api.deps import get_pipeline
from codeforge.api.schemas import (
    AssembleRequest,
    AssembleResponse,
    ExtractRequest,
    ExtractResponse,
)
from codeforge.compiler.pipeline import AssemblyPipeline, AssemblyResult
from codeforge.compiler.scaffold import SANDBOX_FLAGS
from codeforge.parser.extractor import extract, strip

router = APIRouter()


def _assemble_response(result: AssemblyResult) -> AssembleResponse:
    return AssembleResponse(
        document=result.document,
        kind=result.kind,
        files=[a.name for a in result.artifacts],
        explanation=result.explanation,
        warnings=result.warnings,
        sandbox=SANDBOX_FLAGS,
    )


@router.post("/extract", response_model=ExtractResponse)
async def extract_artifacts(body: ExtractRequest) -> ExtractResponse:
    """Split model output into files plus the surrounding explanation."""
    return ExtractResponse(artifacts=extract(body.text), explanation=strip(body.text))


@router.post("/assemble", response_model=AssembleResponse)
async def assemble_preview(
    body: AssembleRequest,
    pipeline: AssemblyPipeline = Depends(get_pipeline),  # noqa: B008
) -> AssembleResponse:
    """Build a sandboxable preview document from model output or artifacts."""
    if body.text is not None:
        result = pipeline.run(body.text)
    else:
        result = pipeline.assemble(body.artifacts or [])
    return _assemble_response(result)
