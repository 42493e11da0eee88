"""Benchmark runner comparing placement heuristics.

One benchmark generates ``num_datasets`` random piece sets, puts each set
through every ordering strategy and packs every ordering with every
heuristic. Each (dataset, ordering, heuristic) triple is one *run*; its
closed containers are validated and recorded as metric rows.

Usage:
    maxrects-run --datasets 5 --pieces 200 --config atlas.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from maxrects.algorithms.bin_packer import BinPacker, PackResult
from maxrects.core.config import PackerConfig, load_config
from maxrects.core.errors import LayoutError
from maxrects.core.models import Heuristic, Rect
from maxrects.core.validation import validate_layout
from maxrects.monitoring.metrics import (
    ContainerMetrics,
    ExperimentMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from maxrects.monitoring.telegram_notifier import (
    TelegramNotifier,
    format_experiment_start,
    format_final_summary,
    format_layout_error,
    format_progress,
)
from maxrects.runner.dataset import ORDERING_STRATEGIES, generate_pieces

DEFAULT_CONTAINER_SIZE = 1024


class ExperimentRunner:
    """
    Runs heuristic comparisons for one container configuration.

    Args:
        config: Container size, rotation and bin selection. Its heuristic is
            replaced for every run.
        results_dir: Where JSON/CSV results are written (created if missing).
        send_telegram_updates: Post progress messages when Telegram
            credentials are present in the environment.
    """

    def __init__(
        self,
        config: PackerConfig,
        results_dir: Path | str = "results",
        send_telegram_updates: bool = False,
    ):
        self.config = config
        self.results_dir = Path(results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)
        self.notifier = TelegramNotifier.from_env() if send_telegram_updates else TelegramNotifier()

    async def run_experiment(
        self,
        num_datasets: int = 10,
        pieces_per_dataset: int = 300,
        heuristics: Sequence[Heuristic] = tuple(Heuristic),
        min_side: int = 8,
        max_side: int = 128,
    ) -> ExperimentMetrics:
        """
        Run every dataset x ordering x heuristic combination.

        Interim results are saved after each dataset and final results
        (with per-container rows) at the end.

        Returns:
            The collected ExperimentMetrics.
        """
        names = [h.short_name for h in heuristics]
        metrics = ExperimentMetrics(
            experiment_id=f"exp_{datetime.now(timezone.utc):%Y%m%d_%H%M%S}",
            heuristics=names,
            total_runs=num_datasets * len(ORDERING_STRATEGIES) * len(heuristics),
        )
        await self.notifier.send(format_experiment_start(
            metrics.total_runs, pieces_per_dataset, names,
            (self.config.container_width, self.config.container_height),
        ))

        runs_done = 0
        for dataset_idx in range(num_datasets):
            pieces = generate_pieces(pieces_per_dataset, min_side, max_side, seed=dataset_idx)
            # The random ordering shuffles with the module RNG
            random.seed(dataset_idx)

            for ordering_name, ordering in ORDERING_STRATEGIES.items():
                ordered = ordering(pieces)
                for heuristic in heuristics:
                    dataset_id = f"d{dataset_idx:03d}_{ordering_name}_{heuristic.short_name}"
                    result = self.pack(ordered, heuristic)
                    await self._record(metrics, result, heuristic, dataset_id)
                    runs_done += 1

            self._save_results(metrics, suffix=f"_interim_{dataset_idx + 1:03d}")
            await self.notifier.send(
                format_progress(runs_done, metrics.total_runs, metrics.avg_occupancy_pct)
            )

        metrics.mark_complete()
        self._save_results(metrics, suffix="_final", include_containers=True)
        await self.notifier.send(format_final_summary(
            metrics.total_containers,
            metrics.total_pieces,
            metrics.rejected_pieces,
            metrics.runtime_seconds,
            metrics.occupancy_by_heuristic(),
        ))

        print(print_summary(metrics))
        return metrics

    def pack(self, pieces: Sequence[Rect], heuristic: Heuristic) -> PackResult:
        """Pack one ordered piece list with ``heuristic``."""
        config = self.config.model_copy(update={"heuristic": heuristic})
        return BinPacker(config).pack(pieces)

    async def _record(
        self,
        metrics: ExperimentMetrics,
        result: PackResult,
        heuristic: Heuristic,
        dataset_id: str,
    ) -> None:
        metrics.record_rejected(len(result.rejected))
        width, height = self.config.container_width, self.config.container_height

        for container in result.containers:
            try:
                validate_layout(container.rects, width, height)
            except LayoutError as exc:
                metrics.record_error()
                await self.notifier.send(
                    format_layout_error(dataset_id, container.container_id, exc)
                )
                continue

            metrics.add_container(ContainerMetrics(
                dataset_id=dataset_id,
                heuristic=heuristic.short_name,
                container_id=container.container_id,
                pieces_placed=len(container.rects),
                area_used=sum(rect.area for rect in container.rects),
                area_total=self.config.area,
            ))

    def _save_results(
        self, metrics: ExperimentMetrics, suffix: str, include_containers: bool = False,
    ) -> None:
        base = self.results_dir / f"{metrics.experiment_id}{suffix}"
        export_to_json(metrics, base.with_suffix(".json"), include_containers=include_containers)
        export_to_csv(metrics, base.parent / f"{base.name}_containers.csv")


async def main(
    config: PackerConfig,
    num_datasets: int = 10,
    pieces_per_dataset: int = 300,
    results_dir: Path | str = "results",
    send_telegram_updates: bool = False,
) -> ExperimentMetrics:
    """Run a benchmark with every heuristic and print a short recap."""
    runner = ExperimentRunner(
        config, results_dir=results_dir, send_telegram_updates=send_telegram_updates,
    )
    metrics = await runner.run_experiment(
        num_datasets=num_datasets,
        pieces_per_dataset=pieces_per_dataset,
    )

    print("\nExperiment complete!")
    for name, occupancy in metrics.occupancy_by_heuristic().items():
        print(f"   {name}: {occupancy:.1f}%")
    print(f"   Results: {runner.results_dir}")
    return metrics


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maxrects-run",
        description="Compare MaxRects placement heuristics on random piece sets",
    )
    parser.add_argument(
        "--config", default=None,
        help=f"YAML container config (default: {DEFAULT_CONTAINER_SIZE}x{DEFAULT_CONTAINER_SIZE}, no rotation)",
    )
    parser.add_argument("--datasets", type=int, default=10, help="Number of datasets (default: 10)")
    parser.add_argument("--pieces", type=int, default=300, help="Pieces per dataset (default: 300)")
    parser.add_argument("--results-dir", default="results", help="Output directory (default: results)")
    parser.add_argument("--telegram", action="store_true", help="Send progress updates to Telegram")
    return parser


def cli(argv: list[str] | None = None) -> None:
    """Console script entry point (``maxrects-run``)."""
    args = build_parser().parse_args(argv)
    if args.config:
        config = load_config(args.config)
    else:
        config = PackerConfig(
            container_width=DEFAULT_CONTAINER_SIZE, container_height=DEFAULT_CONTAINER_SIZE,
        )

    asyncio.run(main(
        config,
        num_datasets=args.datasets,
        pieces_per_dataset=args.pieces,
        results_dir=args.results_dir,
        send_telegram_updates=args.telegram,
    ))


if __name__ == "__main__":
    cli()
