"""Occupancy metrics for packing benchmarks.

Every closed container becomes one ``ContainerMetrics`` row; an
``ExperimentMetrics`` collects the rows of a whole benchmark and derives the
aggregate statistics from them on demand. Results are exported as JSON
(summary, optionally with rows) and CSV (one row per container).
"""

from __future__ import annotations

import csv
import json
import statistics
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


CSV_FIELDS = [
    "dataset_id", "heuristic", "container_id", "pieces_placed",
    "area_used", "area_total", "occupancy_pct", "closed_at",
]


@dataclass(frozen=True)
class ContainerMetrics:
    """One closed container.

    Attributes:
        dataset_id: Run the container belongs to (dataset, ordering, heuristic).
        heuristic: Short heuristic name, e.g. ``"bssf"``.
        container_id: Index of the container within its run.
        pieces_placed: Number of rects placed in it.
        area_used: Summed area of the placed rects.
        area_total: Container area.
        closed_at: When the row was recorded.
    """

    dataset_id: str
    heuristic: str
    container_id: int
    pieces_placed: int
    area_used: float
    area_total: float
    closed_at: datetime = field(default_factory=_utcnow)

    @property
    def occupancy_pct(self) -> float:
        return 100.0 * self.area_used / self.area_total

    def to_dict(self) -> dict[str, Any]:
        """
        Example:
            >>> ContainerMetrics("d0_random_bssf", "bssf", 0, 12, 750, 1000).to_dict()["occupancy_pct"]
            75.0
        """
        d = asdict(self)
        d["occupancy_pct"] = self.occupancy_pct
        d["closed_at"] = self.closed_at.isoformat()
        return d


@dataclass
class ExperimentMetrics:
    """Rows and counters of one benchmark run.

    Attributes:
        experiment_id: Unique identifier, also the export file prefix.
        heuristics: Short names of the heuristics being compared.
        total_runs: Planned number of (dataset, ordering, heuristic) runs.
        rejected_pieces: Pieces too large for an empty container.
        errors_count: Containers that failed layout validation.
        runtime_seconds: Filled in by ``mark_complete``.
        started_at, completed_at: Wall-clock bounds of the run.
        containers: Per-container rows.
    """

    experiment_id: str
    heuristics: list[str] = field(default_factory=list)
    total_runs: int = 0
    rejected_pieces: int = 0
    errors_count: int = 0
    runtime_seconds: float = 0.0
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    containers: list[ContainerMetrics] = field(default_factory=list)

    def add_container(self, row: ContainerMetrics) -> None:
        self.containers.append(row)

    def record_rejected(self, count: int = 1) -> None:
        self.rejected_pieces += count

    def record_error(self) -> None:
        self.errors_count += 1

    def mark_complete(self) -> None:
        self.completed_at = _utcnow()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    # ── Aggregates ───────────────────────────────────────────────────────

    @property
    def total_containers(self) -> int:
        return len(self.containers)

    @property
    def total_pieces(self) -> int:
        return sum(row.pieces_placed for row in self.containers)

    def occupancy_stats(self) -> dict[str, float]:
        """Mean, median, min and max container occupancy in percent (zeros if empty)."""
        values = [row.occupancy_pct for row in self.containers]
        if not values:
            return {"avg": 0.0, "median": 0.0, "min": 0.0, "max": 0.0}
        return {
            "avg": statistics.fmean(values),
            "median": statistics.median(values),
            "min": min(values),
            "max": max(values),
        }

    @property
    def avg_occupancy_pct(self) -> float:
        return self.occupancy_stats()["avg"]

    def occupancy_by_heuristic(self) -> dict[str, float]:
        """
        Mean occupancy per heuristic, in ``heuristics`` order.

        Example:
            >>> em = ExperimentMetrics("exp", heuristics=["bssf", "bl"])
            >>> em.add_container(ContainerMetrics("d", "bssf", 0, 3, 80, 100))
            >>> em.add_container(ContainerMetrics("d", "bl", 0, 3, 60, 100))
            >>> em.add_container(ContainerMetrics("d", "bl", 1, 1, 40, 100))
            >>> em.occupancy_by_heuristic()
            {'bssf': 80.0, 'bl': 50.0}
        """
        grouped: dict[str, list[float]] = defaultdict(list)
        for row in self.containers:
            grouped[row.heuristic].append(row.occupancy_pct)
        order = self.heuristics or sorted(grouped)
        return {name: statistics.fmean(grouped[name]) for name in order if grouped[name]}

    # ── Serialisation ────────────────────────────────────────────────────

    def summary(self) -> dict[str, Any]:
        """Counters and aggregates, without per-container rows."""
        return {
            "experiment_id": self.experiment_id,
            "heuristics": list(self.heuristics),
            "total_runs": self.total_runs,
            "total_containers": self.total_containers,
            "total_pieces": self.total_pieces,
            "rejected_pieces": self.rejected_pieces,
            "errors_count": self.errors_count,
            "occupancy_pct": self.occupancy_stats(),
            "occupancy_by_heuristic": self.occupancy_by_heuristic(),
            "runtime_seconds": self.runtime_seconds,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    def to_dict(self) -> dict[str, Any]:
        d = self.summary()
        d["containers"] = [row.to_dict() for row in self.containers]
        return d


def export_to_json(metrics: ExperimentMetrics, output_path: Path | str, include_containers: bool = True) -> None:
    """Write the summary (and optionally every container row) as JSON."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = metrics.to_dict() if include_containers else metrics.summary()
    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: ExperimentMetrics, output_path: Path | str) -> None:
    """Write one CSV row per container; the header is written even with no rows."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        writer.writerows(row.to_dict() for row in metrics.containers)


def print_summary(metrics: ExperimentMetrics) -> str:
    """Human-readable report of a run (returned, not printed)."""
    stats = metrics.occupancy_stats()
    completed = metrics.completed_at.isoformat() if metrics.completed_at else "In Progress"
    lines = [
        "=" * 60,
        f"Experiment: {metrics.experiment_id}",
        f"Heuristics: {', '.join(metrics.heuristics)}",
        "=" * 60,
        f"Runs:             {metrics.total_runs}",
        f"Total Containers: {metrics.total_containers}",
        f"Pieces Placed:    {metrics.total_pieces}",
        f"Pieces Rejected:  {metrics.rejected_pieces}",
        f"Layout Errors:    {metrics.errors_count}",
        "",
        "Occupancy:",
        f"  avg {stats['avg']:.2f}%  median {stats['median']:.2f}%  "
        f"min {stats['min']:.2f}%  max {stats['max']:.2f}%",
    ]
    by_heuristic = metrics.occupancy_by_heuristic()
    if by_heuristic:
        lines.append("")
        lines.append("Per heuristic:")
        for name, occupancy in sorted(by_heuristic.items(), key=lambda kv: -kv[1]):
            lines.append(f"  {name:<5} {occupancy:6.2f}%")
    lines += [
        "",
        f"Runtime: {metrics.runtime_seconds:.1f} s",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {completed}",
        "=" * 60,
    ]
    return "\n".join(lines)
