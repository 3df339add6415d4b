# hublab/app/api/routes_generate.py
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body

from hublab.app.api.errors import api_error
from hublab.app.models.project import MissingFieldsError, Project, ProjectValidationError, validate_project
from hublab.app.services.generate_service import CapsuleTreeError, UnknownTargetError, generate

log = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])


def run_generation(project: Project) -> Dict[str, Any]:
    """Generate every target of ``project``; tree and target errors become 400s."""
    try:
        response = generate(project)
    except CapsuleTreeError as e:
        raise api_error(400, "Invalid project specification", details=str(e))
    except UnknownTargetError as e:
        raise api_error(400, "Invalid project specification", details=str(e))
    return response.model_dump(by_alias=True)


@router.post("/generate")
def post_generate(payload: Any = Body(default=None)) -> Dict[str, Any]:
    """
    Compile a project document into per-platform source files.

    400 when a required top-level field is missing or the document does not
    validate; 200 with ``{success, project, results, summary}`` otherwise.
    """
    if not isinstance(payload, dict):
        raise api_error(400, "Invalid project specification", details="Request body must be a JSON object")
    try:
        project = validate_project(payload)
    except MissingFieldsError as e:
        raise api_error(400, str(e))
    except ProjectValidationError as e:
        raise api_error(400, "Invalid project specification", details=str(e))

    out = run_generation(project)
    return {
        "success": True,
        "project": {"name": project.name, "version": project.version},
        **out,
    }
