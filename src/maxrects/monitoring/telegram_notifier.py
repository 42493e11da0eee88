"""Telegram progress messages for packing benchmarks.

A notifier posts plain-text messages through the Bot API. It is a no-op
unless both a bot token and a chat ID are known, and a failed request only
logs a warning: progress updates never abort a benchmark.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Sequence

import httpx

log = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


@dataclass(frozen=True)
class TelegramNotifier:
    """Bot credentials plus the request timeout used for every message."""

    token: str = ""
    chat_id: str = ""
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> TelegramNotifier:
        """Read TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID."""
        return cls(
            token=os.environ.get("TELEGRAM_BOT_TOKEN", ""),
            chat_id=os.environ.get("TELEGRAM_CHAT_ID", ""),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.token and self.chat_id)

    async def send(self, text: str) -> bool:
        """
        Post ``text`` to the configured chat.

        Returns:
            True if Telegram acknowledged the message. False when the
            notifier is disabled, the request failed or the API said no.
        """
        if not self.enabled:
            return False

        url = TELEGRAM_API.format(token=self.token)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json={"chat_id": self.chat_id, "text": text})
                ok = bool(resp.json().get("ok", False))
        except (httpx.HTTPError, ValueError) as exc:
            log.warning("Telegram notification failed: %s", exc)
            return False

        if not ok:
            log.warning("Telegram rejected the message (HTTP %d)", resp.status_code)
        return ok


async def send_telegram(text: str, chat_id: str | None = None, token: str | None = None) -> bool:
    """One-off send; missing credentials are taken from the environment."""
    env = TelegramNotifier.from_env()
    notifier = TelegramNotifier(token=token or env.token, chat_id=chat_id or env.chat_id)
    return await notifier.send(text)


# ── Message builders ─────────────────────────────────────────────────────


def format_experiment_start(
    total_runs: int,
    pieces_per_dataset: int,
    heuristics: Sequence[str],
    container_dims: tuple[float, float],
) -> str:
    """
    Example:
        >>> print(format_experiment_start(40, 300, ["bssf", "cp"], (1024, 1024)))
        🚀 Packing benchmark started
        Container: 1024 x 1024
        Heuristics: bssf, cp
        Runs: 40 (300 pieces each)
    """
    width, height = container_dims
    return "\n".join([
        "🚀 Packing benchmark started",
        f"Container: {width:g} x {height:g}",
        f"Heuristics: {', '.join(heuristics)}",
        f"Runs: {total_runs} ({pieces_per_dataset} pieces each)",
    ])


def format_progress(runs_completed: int, total_runs: int, avg_occupancy: float) -> str:
    """
    Example:
        >>> print(format_progress(3, 10, 78.5))
        📊 3/10 runs (30%), avg occupancy 78.5%
    """
    pct = 100 * runs_completed / total_runs if total_runs else 100.0
    return f"📊 {runs_completed}/{total_runs} runs ({pct:.0f}%), avg occupancy {avg_occupancy:.1f}%"


def format_layout_error(dataset_id: str, container_id: int, error: Exception) -> str:
    """Message for a container that failed layout validation."""
    return (
        f"⚠️ {type(error).__name__} in {dataset_id}, container #{container_id}\n"
        f"{error}"
    )


def format_final_summary(
    total_containers: int,
    total_pieces: int,
    rejected_pieces: int,
    runtime_seconds: float,
    occupancy_by_heuristic: Mapping[str, float],
) -> str:
    """
    Example:
        >>> print(format_final_summary(45, 1000, 3, 90, {"bssf": 81.2, "bl": 77.0}))
        ✅ Packing benchmark complete
        Containers: 45, pieces: 1000, rejected: 3
        Runtime: 1.5 min
          bssf  81.2%
          bl    77.0%
    """
    lines = [
        "✅ Packing benchmark complete",
        f"Containers: {total_containers}, pieces: {total_pieces}, rejected: {rejected_pieces}",
        f"Runtime: {runtime_seconds / 60:.1f} min",
    ]
    for name, occupancy in occupancy_by_heuristic.items():
        lines.append(f"  {name:<5} {occupancy:.1f}%")
    return "\n".join(lines)
