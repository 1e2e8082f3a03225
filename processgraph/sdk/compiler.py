"""Graph-to-diagram compiler: validation gate, layout and BPMN serialization.

Example:
    from processgraph.sdk import compile_document

    xml = compile_document({"process": {...}})
"""

from __future__ import annotations

import logging
from typing import Any

from processgraph.adapters.bpmn_xml import to_bpmn_xml
from processgraph.analysis.validator import validate_process
from processgraph.layout.bounds import DEFAULT_LAYOUT, LayoutConfig
from processgraph.layout.engine import compute_layout
from processgraph.models.layout import DiagramLayout
from processgraph.models.process_graph import GraphModel, ProcessDocument

logger = logging.getLogger(__name__)


class ProcessValidationError(ValueError):
    """Raised when a model fails the structural validation gate."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("process failed validation: " + "; ".join(self.errors))


def parse_process_document(data: ProcessDocument | dict[str, Any] | str | bytes) -> ProcessDocument:
    """Parse the generator's {"process": {...}} document.

    Raises:
        pydantic.ValidationError: if the document does not match the schema.
    """
    if isinstance(data, ProcessDocument):
        return data
    if isinstance(data, (str, bytes)):
        return ProcessDocument.model_validate_json(data)
    return ProcessDocument.model_validate(data)


def compute_checked_layout(
    model: GraphModel,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> DiagramLayout:
    """Validate, then lay out. Layout never runs on an invalid model."""
    errors = validate_process(model)
    if errors:
        logger.warning("process %s rejected with %d error(s)", model.id, len(errors))
        raise ProcessValidationError(errors)
    return compute_layout(model, config)


def compile_diagram(model: GraphModel, config: LayoutConfig = DEFAULT_LAYOUT) -> str:
    """Validate, lay out and serialize a model to BPMN XML."""
    layout = compute_checked_layout(model, config)
    return to_bpmn_xml(model, layout)


def compile_document(
    data: ProcessDocument | dict[str, Any] | str | bytes,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> str:
    """Parse a process document and compile it to BPMN XML."""
    return compile_diagram(parse_process_document(data).process, config)
