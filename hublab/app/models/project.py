# hublab/app/models/project.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

# Top-level keys a Project must carry before direct (non-AI) generation
REQUIRED_FIELDS: Sequence[str] = ("name", "version", "targets", "screens", "theme")


class _WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""
    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ----------------------------
# Capsule tree
# ----------------------------

class CapsuleInstance(_WireModel):
    """One node of a screen's UI tree.

    ``capsule_id`` is usually one of ``schema.KNOWN_CAPSULES`` but any string is
    accepted; generators fall back to a container or a placeholder for kinds
    they have no mapping for.

    ``props`` is an open bag (str -> str | number | bool | object | list). Which
    keys matter depends on the capsule kind and on the backend reading it.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Slug, e.g. 'tasks-card'.")
    capsule_id: str = Field(default="", description="Capsule kind tag, e.g. 'button'.")
    props: Dict[str, Any] = Field(default_factory=dict)
    children: List["CapsuleInstance"] = Field(default_factory=list)

    @field_validator("capsule_id", mode="before")
    @classmethod
    def _capsule_id_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("props", "children", mode="before")
    @classmethod
    def _null_is_empty(cls, v: Any, info) -> Any:
        if v is None:
            return {} if info.field_name == "props" else []
        return v


class Screen(_WireModel):
    id: str = Field(..., description="Screen slug, e.g. 'home'.")
    name: str = Field(default="", description="Display name used for navigation titles.")
    root: Optional[CapsuleInstance] = None

    @field_validator("id")
    @classmethod
    def _id_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("screens[].id is required")
        return v

    @property
    def title(self) -> str:
        return self.name or self.id


# ----------------------------
# Theme / navigation / platform config
# ----------------------------

class TextColors(_WireModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None


class ThemeColors(_WireModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None
    background: Optional[str] = None
    surface: Optional[str] = None
    text: Optional[TextColors] = None


class Theme(_WireModel):
    """Visual tokens. Every colour is optional; consumers apply fallbacks."""
    name: Optional[str] = None
    colors: ThemeColors = Field(default_factory=ThemeColors)

    @field_validator("colors", mode="before")
    @classmethod
    def _colors_default(cls, v: Any) -> Any:
        return {} if v is None else v


class Navigation(_WireModel):
    type: str = Field(default="stack", description="stack|tabs")
    initial_screen: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> str:
        # Anything other than "tabs" lays out as a stack
        return "tabs" if isinstance(v, str) and v.strip().lower() == "tabs" else "stack"

    @property
    def is_tabs(self) -> bool:
        return self.type == "tabs"


class AndroidConfig(_WireModel):
    model_config = ConfigDict(extra="allow")

    package_name: Optional[str] = None


class IOSConfig(_WireModel):
    model_config = ConfigDict(extra="allow")

    bundle_id: Optional[str] = None


class PlatformConfig(_WireModel):
    model_config = ConfigDict(extra="allow")

    android: Optional[AndroidConfig] = None
    ios: Optional[IOSConfig] = None


# ----------------------------
# Root model
# ----------------------------

class Project(_WireModel):
    """The full app document: metadata, targets, screens and theme."""

    name: str = Field(..., description="Display name, e.g. 'Todo App'.")
    version: str = Field(default="1.0.0", description="Semantic version string.")
    description: Optional[str] = None
    targets: List[str] = Field(default_factory=list, description="Requested platforms, in order.")
    screens: List[Screen] = Field(default_factory=list)
    theme: Theme = Field(default_factory=Theme)
    navigation: Optional[Navigation] = None
    platform_config: Optional[PlatformConfig] = None

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("name must be a non-empty string")
        return v

    @field_validator("targets", mode="before")
    @classmethod
    def _targets_lowercase(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [t.strip().lower() if isinstance(t, str) else t for t in v]
        return v

    @field_validator("theme", mode="before")
    @classmethod
    def _theme_default(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def android_package(self) -> Optional[str]:
        cfg = self.platform_config
        if cfg and cfg.android and cfg.android.package_name:
            return cfg.android.package_name
        return None

    def initial_screen(self) -> Optional[Screen]:
        """navigation.initialScreen when it names a screen, else the first screen."""
        wanted = self.navigation.initial_screen if self.navigation else None
        if wanted:
            for s in self.screens:
                if s.id == wanted:
                    return s
        return self.screens[0] if self.screens else None

    @property
    def uses_tabs(self) -> bool:
        return bool(self.navigation and self.navigation.is_tabs and len(self.screens) > 1)


# ----------------------------
# Generation output
# ----------------------------

class GeneratedFile(_WireModel):
    model_config = ConfigDict(frozen=True)

    path: str
    language: str
    content: str


class GenerationMetadata(_WireModel):
    capsule_count: int
    screen_count: int
    generated_at: str


class GenerationResult(_WireModel):
    success: bool = True
    platform: str
    files: List[GeneratedFile] = Field(default_factory=list)
    metadata: GenerationMetadata


class GenerationSummary(_WireModel):
    total_platforms: int
    total_files: int
    total_capsules: int
    total_screens: int


class GenerateResponse(_WireModel):
    results: List[GenerationResult] = Field(default_factory=list)
    summary: GenerationSummary


# ----------------------------
# Public API
# ----------------------------

class ProjectValidationError(ValueError):
    """The inbound document is not a usable Project."""


class MissingFieldsError(ProjectValidationError):
    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__("Missing required fields: " + ", ".join(self.missing))


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def missing_required_fields(data: Any) -> List[str]:
    """Names from REQUIRED_FIELDS that are absent, null or blank in ``data``."""
    if not isinstance(data, dict):
        return list(REQUIRED_FIELDS)
    return [k for k in REQUIRED_FIELDS if _is_missing(data.get(k))]


def _short_pydantic_error(err: ValidationError) -> str:
    """
    Render Pydantic errors as short lines:
      - path: message
    """
    lines: List[str] = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "<root>"
        msg = e.get("msg", "invalid value")
        lines.append(f"{loc}: {msg}")
    return "Project validation failed:\n" + "\n".join(f"- {ln}" for ln in lines)


def validate_project(data: Any, *, require_all: bool = True) -> Project:
    """
    Validate a raw project dict into a Project.

    With ``require_all`` the REQUIRED_FIELDS contract is checked first and a
    MissingFieldsError names every absent field. The AI path passes False
    because its collaborator has already default-filled the document.
    Raises ProjectValidationError with short messages on failure.
    """
    if require_all:
        missing = missing_required_fields(data)
        if missing:
            raise MissingFieldsError(missing)
    try:
        return Project.model_validate(data)
    except ValidationError as e:
        raise ProjectValidationError(_short_pydantic_error(e)) from e
