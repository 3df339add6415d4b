# hublab/app/services/ai_service.py
"""
Prompt -> Project bridge.

Asks the completion model for a project document, strips any markdown fences,
parses the JSON and fills the fields the model tends to omit.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from hublab.app.core.config import settings
from hublab.app.core.metrics import ai_requests
from hublab.app.integrations.groq.client import AIUnavailable, AIUpstreamError, get_groq_client

log = logging.getLogger(__name__)

__all__ = [
    "SYSTEM_PROMPT",
    "DEFAULT_TARGETS",
    "AIParseError",
    "AIStructureError",
    "AIUnavailable",
    "AIUpstreamError",
    "strip_fences",
    "parse_project_json",
    "fill_defaults",
    "generate_project",
]

DEFAULT_TARGETS: List[str] = ["ios", "android"]

SYSTEM_PROMPT = """You are HubLab AI, an assistant that generates mobile app specifications in JSON format.

AVAILABLE CAPSULES (use these in capsuleId):
- button: Text button with variants (primary, secondary, outline, ghost)
- text: Display text with variants (heading, subheading, body, caption)
- input: Text input with placeholder, label, type (text, email, password, number)
- card: Container with title, elevation, children
- image: Display image with src, alt, aspectRatio
- list: Scrollable list with items, separator
- modal: Popup dialog with title, content
- form: Form container with onSubmit
- chart: Data visualization (line, bar, pie)
- progress: Progress indicator (linear, circular) with value 0-100
- switch: Toggle switch with label, checked
- slider: Range slider with min, max, value
- tabs: Tab navigation with items
- accordion: Collapsible sections
- dropdown: Select dropdown with options
- datepicker: Date selection
- calendar: Full calendar view
- searchbar: Search input with placeholder
- rating: Star rating with max, value
- chip: Tag/chip with label, removable
- divider: Visual separator
- avatar: User avatar with src, name, size
- badge: Status badge with label, variant
- tooltip: Hover tooltip
- table: Data table with columns, rows
- carousel: Image/content carousel
- timeline: Vertical timeline
- map: Interactive map
- video: Video player
- chat: Chat message bubbles
- qrcode: QR code generator
- notifications: Push notification UI
- scanner: QR/barcode scanner
- audio: Audio player with controls
- skeleton: Loading placeholder with shimmer
- stepper: Numeric input with +/- buttons
- signature: Signature capture pad
- confetti: Celebration animation effect

RESPONSE FORMAT:
Return ONLY valid JSON (no markdown, no explanation). Use this structure:
{
  "name": "App Name",
  "version": "1.0.0",
  "targets": ["ios", "android"],
  "theme": {
    "colors": {
      "primary": "#6366F1",
      "secondary": "#8B5CF6",
      "background": "#FFFFFF",
      "surface": "#F8FAFC",
      "text": { "primary": "#1E293B", "secondary": "#64748B" }
    }
  },
  "navigation": { "type": "tabs" or "stack", "initialScreen": "screenId" },
  "screens": [
    {
      "id": "screen-id",
      "name": "Screen Name",
      "root": {
        "id": "unique-id",
        "capsuleId": "card",
        "props": { ... },
        "children": [ ... ]
      }
    }
  ]
}

RULES:
1. Use lowercase-kebab-case for all IDs
2. Every capsule needs: id, capsuleId, props
3. Match the app description with appropriate capsules
4. Design realistic, complete apps with 2-4 screens
5. Use semantic component hierarchy (cards contain content, lists contain items)
6. Choose colors that match the app's theme/purpose
7. ONLY output JSON, nothing else"""


class AIParseError(ValueError):
    """The model's reply is not a JSON object."""

    def __init__(self, message: str, raw: str):
        self.raw = raw
        super().__init__(message)


class AIStructureError(ValueError):
    """The model returned JSON that lacks ``name`` or ``screens``."""

    def __init__(self, message: str, project: Any):
        self.project = project
        super().__init__(message)


_LEADING_FENCE = re.compile(r"^```(?:json)?\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?```$")


def strip_fences(text: str) -> str:
    """Remove one leading ```json / ``` and one trailing ``` fence."""
    s = (text or "").strip()
    s = _LEADING_FENCE.sub("", s)
    s = _TRAILING_FENCE.sub("", s)
    return s.strip()


def _first_json_object(s: str) -> Optional[str]:
    """The first balanced {...} span in ``s``, ignoring braces inside strings."""
    start = s.find("{")
    if start == -1:
        return None
    depth = 0
    in_str = False
    escaped = False
    for i in range(start, len(s)):
        ch = s[i]
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return s[start : i + 1]
    return None


def parse_project_json(content: str) -> Dict[str, Any]:
    """
    Parse the model reply into a dict.

    Fences are stripped first. When the reply carries chatter around the JSON,
    the first balanced object is tried before giving up.
    """
    cleaned = strip_fences(content)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        span = _first_json_object(cleaned)
        if span is None:
            raise AIParseError(f"Failed to parse AI response: {e}", raw=content) from e
        try:
            data = json.loads(span)
        except json.JSONDecodeError as e2:
            raise AIParseError(f"Failed to parse AI response: {e2}", raw=content) from e2
    if not isinstance(data, dict):
        raise AIParseError("Failed to parse AI response: top-level value is not an object", raw=content)
    return data


def fill_defaults(project: Dict[str, Any], targets: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """
    Fill version, targets and theme when the model left them out.

    When ``targets`` is given it replaces whatever the model chose.
    """
    out = dict(project)
    if not out.get("version"):
        out["version"] = "1.0.0"
    if targets is not None:
        out["targets"] = list(targets)
    elif not out.get("targets"):
        out["targets"] = list(DEFAULT_TARGETS)
    if not out.get("theme"):
        out["theme"] = {"colors": {"primary": settings.default_theme_primary}}
    return out


def _user_prompt(prompt: str, targets: Optional[Sequence[str]]) -> str:
    text = f"Create a mobile app for: {prompt}"
    if targets is not None:
        text += f". Target platforms: {', '.join(targets)}"
    return text


def generate_project(prompt: str, targets: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """
    Ask the model for a project document.

    ``targets`` is set by the build flow: it is mentioned in the prompt and
    forced onto the result. Raises AIUnavailable, AIUpstreamError, AIParseError
    or AIStructureError.
    """
    endpoint = "build" if targets is not None else "generate"
    client = get_groq_client()
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": _user_prompt(prompt, targets)},
    ]
    try:
        content = client.complete(messages)
        data = parse_project_json(content)
        name, screens = data.get("name"), data.get("screens")
        if not (isinstance(name, str) and name.strip()) or not isinstance(screens, list):
            raise AIStructureError("Invalid project structure from AI", project=data)
    except (AIUnavailable, AIUpstreamError, AIParseError, AIStructureError) as e:
        ai_requests.inc({"endpoint": endpoint, "outcome": type(e).__name__})
        log.warning("AI %s failed: %s", endpoint, e)
        raise

    ai_requests.inc({"endpoint": endpoint, "outcome": "ok"})
    project = fill_defaults(data, targets)
    log.info("AI generated %r with %d screen(s)", project.get("name"), len(project.get("screens") or []))
    return project
