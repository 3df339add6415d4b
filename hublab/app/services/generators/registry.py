# hublab/app/services/generators/registry.py
from __future__ import annotations

from typing import Dict, List, Optional

from hublab.app.services.generators.base import CodeGenerator
from hublab.app.services.generators.compose import ComposeGenerator
from hublab.app.services.generators.react import ReactGenerator
from hublab.app.services.generators.swiftui import SwiftUIGenerator

# web and desktop share one generator; no per-platform divergence is defined
_REACT = ReactGenerator()

GENERATORS: Dict[str, CodeGenerator] = {
    "ios": SwiftUIGenerator(),
    "android": ComposeGenerator(),
    "web": _REACT,
    "desktop": _REACT,
}

SUPPORTED: List[str] = list(GENERATORS)


class UnknownTargetError(ValueError):
    """Raised in strict mode for a target with no generator."""

    def __init__(self, targets: List[str]):
        self.targets = list(targets)
        super().__init__(
            "Unsupported target platform(s): "
            + ", ".join(repr(t) for t in self.targets)
            + f"; expected one of {', '.join(SUPPORTED)}"
        )


def select(target: str) -> Optional[CodeGenerator]:
    """Generator for ``target``, or None when the platform is not supported."""
    if not isinstance(target, str):
        return None
    return GENERATORS.get(target.strip().lower())


def unknown(targets: List[str]) -> List[str]:
    return [t for t in targets if select(t) is None]
