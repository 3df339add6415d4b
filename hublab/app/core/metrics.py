from __future__ import annotations

import threading
import time
from collections import defaultdict
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

LabelKey = Tuple[Tuple[str, str], ...]


def _key(labels: Optional[Dict[str, str]]) -> LabelKey:
    return tuple(sorted((labels or {}).items()))


def _escape(value: str) -> str:
    return str(value).replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _label_str(key: LabelKey, extra: str = "") -> str:
    parts = [f'{k}="{_escape(v)}"' for k, v in key]
    if extra:
        parts.append(extra)
    return "{" + ",".join(parts) + "}" if parts else ""


# ---------- Primitives ----------

class Counter:
    def __init__(self, name: str, help_: str = ""):
        self.name = name
        self.help = help_
        self._lock = threading.Lock()
        self._values: Dict[LabelKey, float] = defaultdict(float)

    def inc(self, labels: Optional[Dict[str, str]] = None, by: float = 1) -> None:
        with self._lock:
            self._values[_key(labels)] += by

    def value(self, labels: Optional[Dict[str, str]] = None) -> float:
        with self._lock:
            return self._values.get(_key(labels), 0.0)

    def render(self) -> Iterator[str]:
        if self.help:
            yield f"# HELP {self.name} {self.help}\n# TYPE {self.name} counter\n"
        with self._lock:
            items = sorted(self._values.items())
        for key, v in items:
            yield f"{self.name}{_label_str(key)} {v}\n"


class Histogram:
    DEFAULT_BUCKETS = [0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, 5]  # seconds

    def __init__(self, name: str, help_: str = "", buckets: Optional[Iterable[float]] = None):
        self.name = name
        self.help = help_
        self._lock = threading.Lock()
        self._buckets = sorted(buckets or self.DEFAULT_BUCKETS)
        self._counts: Dict[LabelKey, List[int]] = {}
        self._sum: Dict[LabelKey, float] = defaultdict(float)
        self._obs: Dict[LabelKey, int] = defaultdict(int)

    def observe(self, value_seconds: float, labels: Optional[Dict[str, str]] = None) -> None:
        key = _key(labels)
        with self._lock:
            counts = self._counts.setdefault(key, [0] * (len(self._buckets) + 1))
            for i, b in enumerate(self._buckets):
                if value_seconds <= b:
                    counts[i] += 1
                    break
            else:
                counts[-1] += 1  # +Inf
            self._sum[key] += value_seconds
            self._obs[key] += 1

    def timer(self, labels: Optional[Dict[str, str]] = None) -> Callable[[], None]:
        start = time.perf_counter()

        def _stop() -> None:
            self.observe(time.perf_counter() - start, labels=labels)

        return _stop

    def render(self) -> Iterator[str]:
        if self.help:
            yield f"# HELP {self.name} {self.help}\n# TYPE {self.name} histogram\n"
        with self._lock:
            snapshot = sorted((k, list(v), self._sum[k], self._obs[k]) for k, v in self._counts.items())
        for key, counts, sum_, cnt in snapshot:
            running = 0
            for b, c in zip(self._buckets + [float("inf")], counts):
                running += c
                le = "+Inf" if b == float("inf") else f"{b:g}"
                le_label = f'le="{le}"'
                yield f"{self.name}_bucket{_label_str(key, le_label)} {running}\n"
            yield f"{self.name}_sum{_label_str(key)} {sum_}\n"
            yield f"{self.name}_count{_label_str(key)} {cnt}\n"


# ---------- Registry ----------

class MetricsRegistry:
    def __init__(self) -> None:
        self._items: list[Counter | Histogram] = []

    def counter(self, name: str, help_: str = "") -> Counter:
        c = Counter(name, help_)
        self._items.append(c)
        return c

    def histogram(self, name: str, help_: str = "", buckets: Optional[Iterable[float]] = None) -> Histogram:
        h = Histogram(name, help_, buckets=buckets)
        self._items.append(h)
        return h

    def render_prometheus(self) -> str:
        out: list[str] = []
        for it in self._items:
            out.extend(it.render())
        return "".join(out)


REGISTRY = MetricsRegistry()

# ---------- App metrics ----------

generate_counter = REGISTRY.counter("hublab_generate_total", "Generation results by platform")
skipped_target_counter = REGISTRY.counter(
    "hublab_skipped_targets_total", "Requested targets with no matching generator"
)
capsules_rendered = REGISTRY.counter("hublab_capsules_rendered_total", "Capsules translated by platform")
tree_rejections = REGISTRY.counter("hublab_tree_rejections_total", "Capsule trees rejected by the walker guard")
ai_requests = REGISTRY.counter("hublab_ai_requests_total", "AI bridge calls by endpoint and outcome")

generate_duration = REGISTRY.histogram("hublab_generate_duration_seconds", "Full generate() duration")
