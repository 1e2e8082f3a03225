"""API routes for process validation, layout, diagrams and generation."""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel

from processgraph.adapters.bpmn_xml import to_bpmn_xml
from processgraph.analysis.validator import validate_process
from processgraph.models.process_graph import ProcessDocument
from processgraph.sdk.compiler import ProcessValidationError, compute_checked_layout
from processgraph.sdk.generation import GenerationError, build_generator

logger = logging.getLogger(__name__)

router = APIRouter()


class ValidationResponse(BaseModel):
    """Result of a structural validation."""

    valid: bool
    errors: list[str]


class GenerateRequest(BaseModel):
    """Request body for text-to-graph generation."""

    prompt: str
    errors: list[str] | None = None  # validation errors of a previous attempt


def _invalid(exc: ProcessValidationError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"message": "process failed validation", "errors": exc.errors},
    )


@router.post("/process/validate")
def validate(document: ProcessDocument) -> ValidationResponse:
    """Run the structural checks and report every problem found."""
    errors = validate_process(document.process)
    return ValidationResponse(valid=not errors, errors=errors)


@router.post("/process/layout")
def layout(document: ProcessDocument) -> dict:
    """Levels, columns, bounds and edge waypoints of a valid process."""
    try:
        result = compute_checked_layout(document.process)
    except ProcessValidationError as exc:
        raise _invalid(exc)
    return result.to_dict()


@router.post("/process/diagram")
def diagram(document: ProcessDocument) -> Response:
    """BPMN 2.0 XML for a valid process."""
    try:
        result = compute_checked_layout(document.process)
    except ProcessValidationError as exc:
        raise _invalid(exc)
    xml = to_bpmn_xml(document.process, result)
    return Response(content=xml, media_type="application/xml")


@router.post("/process/generate")
def generate(request: Request, body: GenerateRequest) -> dict:
    """Generate a process from text with the configured provider.

    The generated document is returned together with its validation errors,
    so the caller can ask for an improved version.
    """
    settings = request.app.state.settings
    generator = build_generator(settings.generator)
    try:
        document = generator.generate(body.prompt, body.errors)
    except GenerationError as exc:
        logger.warning("generation failed: %s", exc)
        diagnostics = generator.last_diagnostics
        raise HTTPException(
            status_code=502,
            detail={
                "message": str(exc),
                "diagnostics": diagnostics.model_dump(mode="json") if diagnostics else None,
            },
        )

    return {
        "document": document.model_dump(mode="json", by_alias=True, exclude_none=True),
        "errors": validate_process(document.process),
        "diagnostics": generator.last_diagnostics.model_dump(mode="json")
        if generator.last_diagnostics
        else None,
    }
