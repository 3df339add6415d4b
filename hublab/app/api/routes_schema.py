from __future__ import annotations

from fastapi import APIRouter

from hublab.app.models.schema import project_schema

router = APIRouter(tags=["schema"])


@router.get("/schema")
def schema():
    """The JSON-schema document POST /generate bodies are written against."""
    return project_schema()
