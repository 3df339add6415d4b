# hublab/app/services/generators/base.py
"""
Plumbing shared by the platform generators.

- identifier derivation (app name -> type name, screen id -> view name)
- typed readers over the open ``props`` bag
- a bounded bottom-up walk over capsule trees (depth, size and cycle guards)
- ``FragmentRegistry``: capsule kind -> translator, with the container /
  placeholder / empty fallbacks kept in one place per backend
"""
from __future__ import annotations

import json
import re
import textwrap
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from hublab.app.models.project import CapsuleInstance, GeneratedFile, Project, Theme

T = TypeVar("T")

INDENT = "    "

FALLBACK_COLORS: Dict[str, str] = {
    "primary": "#6366F1",
    "secondary": "#8B5CF6",
    "background": "#FFFFFF",
    "surface": "#F8FAFC",
    "text.primary": "#1E293B",
    "text.secondary": "#64748B",
}


# ----------------------------
# Identifiers
# ----------------------------

_WS = re.compile(r"\s+")


def capitalize(s: str) -> str:
    return s[:1].upper() + s[1:]


def app_identifier(project_name: str) -> str:
    """'Todo App' -> 'TodoApp'. First letter is upper-cased as well."""
    return capitalize(_WS.sub("", project_name or ""))


def type_name(screen_id: Optional[str], suffix: str, default: str = "Home") -> str:
    """'home' + 'View' -> 'HomeView'. The rest of the slug is left as-is."""
    return capitalize(screen_id or default) + suffix


def indent(text: str, levels: int = 1, unit: str = INDENT) -> str:
    """Indent every non-empty line of ``text`` by ``levels`` steps of ``unit``."""
    return textwrap.indent(text, unit * levels)


# ----------------------------
# Props
# ----------------------------

def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return fmt_num(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def prop_text(props: Mapping[str, Any], *keys: str, default: str = "") -> str:
    """First non-empty value among ``keys``, rendered as text."""
    for k in keys:
        v = props.get(k)
        if v is None:
            continue
        text = _as_text(v)
        if text:
            return text
    return default


def prop_number(props: Mapping[str, Any], key: str, default: float) -> float:
    v = props.get(key)
    if isinstance(v, bool) or v is None:
        return default
    if isinstance(v, (int, float)):
        return float(v) if v == v else default  # NaN
    if isinstance(v, str):
        try:
            return float(v.strip().rstrip("%"))
        except ValueError:
            return default
    return default


def prop_bool(props: Mapping[str, Any], key: str, default: bool = False) -> bool:
    v = props.get(key)
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return v != 0
    if isinstance(v, str):
        return v.strip().lower() in {"true", "1", "yes", "on"}
    return default


def percent(props: Mapping[str, Any], key: str = "value", default: float = 50.0) -> float:
    """A 0-100 percentage prop, clamped."""
    # an explicit 0 is honoured; only absent or non-numeric values take the default
    return max(0.0, min(100.0, prop_number(props, key, default)))


def fraction(props: Mapping[str, Any], key: str = "value", default: float = 50.0) -> float:
    """The same percentage normalized to 0.0-1.0."""
    return percent(props, key, default) / 100.0


def fmt_num(x: float) -> str:
    """50.0 -> '50', 0.5 -> '0.5', 1/3 -> '0.3333'."""
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    if isinstance(x, int):
        return str(x)
    return f"{round(x, 4):g}"


def fmt_fraction(x: float) -> str:
    """Fractions keep a decimal point so '1' never reads as a percentage: 1.0 -> '1.0'."""
    s = fmt_num(x)
    return s if "." in s else s + ".0"


def theme_color(theme: Optional[Theme], token: str) -> str:
    """Colour token with the documented fallback; ``token`` may be 'text.primary'."""
    colors = theme.colors if theme else None
    value: Any = None
    if colors is not None:
        if token.startswith("text."):
            text = colors.text
            value = getattr(text, token.split(".", 1)[1], None) if text else None
        else:
            value = getattr(colors, token, None)
    return value or FALLBACK_COLORS[token]


# ----------------------------
# Tree walk
# ----------------------------

class CapsuleTreeError(ValueError):
    """A capsule tree breached the walker's depth, size or cycle guard."""

    def __init__(self, message: str, *, node_id: str = "", depth: int = 0):
        self.node_id = node_id
        self.depth = depth
        super().__init__(message)


@dataclass(frozen=True)
class TreeLimits:
    max_depth: int = 64
    max_nodes: int = 5000


class _Walk:
    def __init__(self, combine: Callable[[CapsuleInstance, List[T]], T], limits: TreeLimits):
        self._combine = combine
        self._limits = limits
        self._ancestors: set[int] = set()
        self.nodes = 0

    def visit(self, node: CapsuleInstance, depth: int) -> T:
        if depth > self._limits.max_depth:
            raise CapsuleTreeError(
                f"capsule tree exceeds max depth {self._limits.max_depth} at '{node.id}'",
                node_id=node.id,
                depth=depth,
            )
        marker = id(node)
        if marker in self._ancestors:
            raise CapsuleTreeError(
                f"capsule '{node.id}' appears among its own descendants",
                node_id=node.id,
                depth=depth,
            )
        self.nodes += 1
        if self.nodes > self._limits.max_nodes:
            raise CapsuleTreeError(
                f"capsule tree exceeds max size of {self._limits.max_nodes} nodes",
                node_id=node.id,
                depth=depth,
            )
        self._ancestors.add(marker)
        try:
            results = [self.visit(child, depth + 1) for child in node.children]
        finally:
            self._ancestors.discard(marker)
        return self._combine(node, results)


def fold_tree(
    root: CapsuleInstance,
    combine: Callable[[CapsuleInstance, List[T]], T],
    limits: Optional[TreeLimits] = None,
) -> T:
    """
    Bottom-up fold: ``combine(node, child_results)`` runs after all children.
    The root sits at depth 1. Raises CapsuleTreeError on a cycle or when the
    tree is deeper or larger than ``limits`` allow.
    """
    return _Walk(combine, limits or TreeLimits()).visit(root, 1)


def count_nodes(root: Optional[CapsuleInstance], limits: Optional[TreeLimits] = None) -> int:
    if root is None:
        return 0
    return fold_tree(root, lambda _node, counts: 1 + sum(counts), limits)


# ----------------------------
# Translator registry
# ----------------------------

# (node, theme, already-joined children text) -> fragment
Translator = Callable[[CapsuleInstance, Theme, str], str]


class FragmentRegistry:
    """
    Capsule kind -> translator for one backend.

    Kinds without an entry fall back to ``container`` when they have children
    and to ``placeholder`` otherwise; an absent node renders ``empty``.
    """

    def __init__(
        self,
        *,
        separator: str,
        container: Translator,
        placeholder: Callable[[str], str],
        empty: str,
    ):
        self.separator = separator
        self.empty = empty
        self._container = container
        self._placeholder = placeholder
        self._table: Dict[str, Translator] = {}

    def register(self, *kinds: str) -> Callable[[Translator], Translator]:
        def deco(fn: Translator) -> Translator:
            for kind in kinds:
                self._table[kind] = fn
            return fn
        return deco

    def kinds(self) -> List[str]:
        return sorted(self._table)

    def translate(self, node: CapsuleInstance, theme: Theme, child_fragments: List[str]) -> str:
        children = self.separator.join(child_fragments)
        fn = self._table.get(node.capsule_id)
        if fn is not None:
            return fn(node, theme, children)
        if child_fragments:
            return self._container(node, theme, children)
        return self._placeholder(node.capsule_id or "unknown")

    def render(
        self,
        root: Optional[CapsuleInstance],
        theme: Theme,
        limits: Optional[TreeLimits] = None,
    ) -> str:
        """Translate a whole tree; the absent root renders the empty marker."""
        if root is None:
            return self.empty
        return fold_tree(root, lambda node, frags: self.translate(node, theme, frags), limits)


# ----------------------------
# Generator base
# ----------------------------

class CodeGenerator(ABC):
    """One platform backend: fragment registry plus file assembly."""

    platform: str = ""
    language: str = ""
    registry: FragmentRegistry

    def render_root(self, root: Optional[CapsuleInstance], theme: Theme, limits: TreeLimits) -> str:
        return self.registry.render(root, theme, limits)

    def file(self, path: str, content: str, language: Optional[str] = None) -> GeneratedFile:
        return GeneratedFile(path=path, language=language or self.language, content=content)

    @abstractmethod
    def generate(self, project: Project, limits: Optional[TreeLimits] = None) -> List[GeneratedFile]:
        """Full ordered file manifest for ``project``."""
        raise NotImplementedError
