# hublab/app/services/generate_service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from hublab.app.core.config import settings
from hublab.app.core.metrics import (
    capsules_rendered,
    generate_counter,
    generate_duration,
    skipped_target_counter,
    tree_rejections,
)
from hublab.app.models.project import (
    CapsuleInstance,
    GenerateResponse,
    GenerationMetadata,
    GenerationResult,
    GenerationSummary,
    Project,
)
from hublab.app.services.generators.base import CapsuleTreeError, TreeLimits, count_nodes
from hublab.app.services.generators.registry import UnknownTargetError, select, unknown

log = logging.getLogger(__name__)

__all__ = ["count_capsules", "generate", "tree_limits", "UnknownTargetError", "CapsuleTreeError"]


def tree_limits() -> TreeLimits:
    return TreeLimits(max_depth=settings.max_tree_depth, max_nodes=settings.max_tree_nodes)


def count_capsules(node: Optional[CapsuleInstance], limits: Optional[TreeLimits] = None) -> int:
    """Nodes in the tree rooted at ``node``; 0 for an absent root."""
    return count_nodes(node, limits or tree_limits())


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate(project: Project, targets: Optional[Sequence[str]] = None) -> GenerateResponse:
    """
    Run every requested backend over ``project``.

    ``targets`` defaults to ``project.targets``. Unknown platforms are skipped
    with a warning, or rejected with UnknownTargetError when strict_targets is
    set. A tree that breaches the walker limits raises CapsuleTreeError before
    any result is produced.
    """
    requested: List[str] = [t.strip().lower() for t in (targets if targets is not None else project.targets)]
    limits = tree_limits()

    bad = unknown(requested)
    if bad and settings.strict_targets:
        raise UnknownTargetError(bad)

    try:
        total_capsules = sum(count_capsules(s.root, limits) for s in project.screens)
    except CapsuleTreeError as e:
        tree_rejections.inc()
        log.warning("Rejected capsule tree for %r: %s", project.name, e)
        raise

    stop_timer = generate_duration.timer()
    try:
        screen_count = len(project.screens)
        results: List[GenerationResult] = []
        for target in requested:
            generator = select(target)
            if generator is None:
                # unlabeled so request values never become series
                skipped_target_counter.inc()
                log.warning("Skipping unsupported target %r for project %r", target, project.name)
                continue

            files = generator.generate(project, limits)
            results.append(
                GenerationResult(
                    success=True,
                    platform=target,
                    files=files,
                    metadata=GenerationMetadata(
                        capsule_count=total_capsules,
                        screen_count=screen_count,
                        generated_at=_utc_now_iso(),
                    ),
                )
            )
            generate_counter.inc({"platform": target})
            capsules_rendered.inc({"platform": target}, by=total_capsules)
            log.debug("Generated %d file(s) for %s", len(files), target)
    finally:
        stop_timer()

    summary = GenerationSummary(
        total_platforms=len(results),
        total_files=sum(len(r.files) for r in results),
        total_capsules=total_capsules,
        total_screens=screen_count,
    )
    log.info(
        "Generated %r: %d platform(s), %d file(s), %d capsule(s)",
        project.name,
        summary.total_platforms,
        summary.total_files,
        summary.total_capsules,
    )
    return GenerateResponse(results=results, summary=summary)
