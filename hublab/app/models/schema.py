# hublab/app/models/schema.py
from __future__ import annotations

import copy
from typing import Any, Dict, Tuple

PLATFORMS: Tuple[str, ...] = ("web", "ios", "android", "desktop")

PROP_TYPES: Tuple[str, ...] = (
    "string", "number", "boolean", "color", "size", "spacing", "icon",
    "image", "action", "array", "object", "select", "slot",
)

KNOWN_CAPSULES: Tuple[str, ...] = (
    "button", "text", "input", "card", "image", "list", "modal", "form",
    "navigation", "auth-screen", "chart", "skeleton", "switch", "slider",
    "tabs", "accordion", "dropdown", "datepicker", "progress", "tooltip",
    "table", "searchbar", "rating", "stepper", "chip", "divider",
    "calendar", "file-upload", "carousel", "timeline", "bottom-sheet",
    "popover", "color-picker", "rich-text-editor", "signature", "map",
    "video", "audio", "data-table", "kanban", "chat", "qrcode", "scanner",
    "pdf-viewer", "notifications", "webview", "biometrics", "location",
    "camera", "social-share",
)

CAPSULE_ID_PATTERN = r"^[a-z][a-z0-9-]*$"

_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "HubLab Project Schema",
    "description": "Schema for AI-generated multi-platform app projects",
    "version": "1.0.0",
    "definitions": {
        "PropType": {"enum": list(PROP_TYPES)},
        "Platform": {"enum": list(PLATFORMS)},
        "CapsuleInstance": {
            "type": "object",
            "required": ["id", "capsuleId", "props"],
            "properties": {
                "id": {"type": "string", "pattern": CAPSULE_ID_PATTERN},
                "capsuleId": {"type": "string", "enum": list(KNOWN_CAPSULES)},
                "props": {"type": "object", "additionalProperties": True},
                "children": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/CapsuleInstance"},
                },
            },
        },
    },
    "type": "object",
    "required": ["name", "version", "targets", "screens", "theme"],
    "properties": {
        "name": {"type": "string", "pattern": r"^[A-Za-z][A-Za-z0-9 -]*$"},
        "version": {"type": "string", "pattern": r"^\d+\.\d+\.\d+$"},
        "targets": {"type": "array", "items": {"$ref": "#/definitions/Platform"}},
        "screens": {"type": "array", "items": {"type": "object"}},
        "theme": {"type": "object"},
    },
    "examples": [
        {
            "name": "Todo App",
            "version": "1.0.0",
            "targets": ["ios", "android"],
            "theme": {
                "name": "Default",
                "colors": {"primary": "#6366F1", "secondary": "#8B5CF6", "background": "#FFFFFF"},
            },
            "screens": [
                {
                    "id": "home",
                    "name": "Home",
                    "root": {"id": "card", "capsuleId": "card", "props": {"title": "Tasks"}, "children": []},
                }
            ],
        }
    ],
}


def project_schema() -> Dict[str, Any]:
    """A fresh copy of the input contract; callers may mutate it freely."""
    return copy.deepcopy(_SCHEMA)
