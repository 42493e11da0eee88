"""Benchmark metrics and optional Telegram progress messages."""

from .metrics import (
    ContainerMetrics,
    ExperimentMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from .telegram_notifier import TelegramNotifier, send_telegram

__all__ = [
    "ContainerMetrics",
    "ExperimentMetrics",
    "TelegramNotifier",
    "export_to_csv",
    "export_to_json",
    "print_summary",
    "send_telegram",
]
