# hublab/app/api/routes_ai.py
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter

from hublab.app.api.errors import api_error
from hublab.app.api.models import AIBuildRequest, AIGenerateRequest, AIGenerateResponse
from hublab.app.models.project import ProjectValidationError, validate_project
from hublab.app.services.ai_service import (
    AIParseError,
    AIStructureError,
    AIUnavailable,
    AIUpstreamError,
    generate_project,
)
from hublab.app.services.generate_service import CapsuleTreeError, UnknownTargetError, generate

log = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


def _ask(prompt: str, targets=None) -> Dict[str, Any]:
    """Run the AI bridge, mapping its failures to 500s with their diagnostics."""
    try:
        return generate_project(prompt, targets)
    except AIUnavailable as e:
        raise api_error(500, str(e))
    except AIUpstreamError as e:
        raise api_error(500, str(e), details=e.details)
    except AIParseError as e:
        raise api_error(500, "Failed to parse AI response", raw=e.raw)
    except AIStructureError as e:
        raise api_error(500, str(e), project=e.project)


@router.post("/generate", response_model=AIGenerateResponse)
def ai_generate(req: AIGenerateRequest) -> AIGenerateResponse:
    if not req.prompt:
        raise api_error(400, "Missing prompt")
    project = _ask(req.prompt)
    return AIGenerateResponse(
        project=project,
        message=f'Generated "{project["name"]}" with {len(project["screens"])} screens',
    )


@router.post("/build")
def ai_build(req: AIBuildRequest) -> Dict[str, Any]:
    """Prompt -> project -> source files, with targets forced to the request's."""
    if not req.prompt:
        raise api_error(400, "Missing prompt")
    project_doc = _ask(req.prompt, req.targets)
    try:
        project = validate_project(project_doc, require_all=False)
    except ProjectValidationError as e:
        raise api_error(500, "AI build failed", details=str(e), project=project_doc)

    try:
        out = generate(project).model_dump(by_alias=True)
    except CapsuleTreeError as e:
        # the tree came from the model, not the caller
        raise api_error(500, "AI build failed", details=str(e), project=project_doc)
    except UnknownTargetError as e:
        raise api_error(400, "Invalid project specification", details=str(e))
    return {
        "success": True,
        "prompt": req.prompt,
        "project": project_doc,
        **out,
    }
