from __future__ import annotations

import json
import os
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Deque, Dict, List, Optional, Tuple


@dataclass
class LogConfig:
    """User-configurable toggles for import diagnostics."""

    minimum_severity: str = "INFO"
    echo: bool = True
    max_entries: int = 2000
    include_extra: bool = True
    log_slice_events: bool = True
    log_trim_events: bool = True
    log_animation_events: bool = True
    log_resolve_events: bool = True
    log_texture_events: bool = True

    def __post_init__(self):
        self.minimum_severity = str(self.minimum_severity).upper()


def print_sink(message: str, level: str = "INFO"):
    """Default sink, mirrors the viewer's log widget line format."""
    print(f"[sheetslice] [{level}] {message}")


class ImportLog:
    """Collects slicing diagnostics and mirrors them to a sink."""

    SEVERITY_ORDER = {
        "VERBOSE": 0,
        "INFO": 1,
        "WARNING": 2,
        "ERROR": 3,
    }

    CATEGORY_FLAGS = {
        "slice": "log_slice_events",
        "trim": "log_trim_events",
        "animation": "log_animation_events",
        "resolve": "log_resolve_events",
        "texture": "log_texture_events",
        "general": None,
    }

    def __init__(self, config: Optional[LogConfig] = None,
                 sink: Optional[Callable[[str, str], None]] = print_sink):
        self.config = config or LogConfig()
        self.sink = sink
        self.events: Deque[Dict[str, object]] = deque()

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #
    def apply_config(self, config: LogConfig):
        """Apply user preferences."""
        self.config = config
        while len(self.events) > config.max_entries:
            self.events.popleft()

    def includes(self, severity: str) -> bool:
        order = self.SEVERITY_ORDER
        # Unknown minimum severities behave like INFO
        return order.get(severity, 0) >= order.get(self.config.minimum_severity, order["INFO"])

    # ------------------------------------------------------------------ #
    # Logging helpers
    # ------------------------------------------------------------------ #
    def verbose(self, message: str, *, category: str = "general",
                description_id: Optional[str] = None, extra: Optional[Dict[str, object]] = None):
        self.log(message, "VERBOSE", category=category, description_id=description_id, extra=extra)

    def info(self, message: str, *, category: str = "general",
             description_id: Optional[str] = None, extra: Optional[Dict[str, object]] = None):
        self.log(message, "INFO", category=category, description_id=description_id, extra=extra)

    def warning(self, message: str, *, category: str = "general",
                description_id: Optional[str] = None, extra: Optional[Dict[str, object]] = None):
        self.log(message, "WARNING", category=category, description_id=description_id, extra=extra)

    def error(self, message: str, *, category: str = "general",
              description_id: Optional[str] = None, extra: Optional[Dict[str, object]] = None):
        self.log(message, "ERROR", category=category, description_id=description_id, extra=extra)

    def log(
        self,
        message: str,
        severity: str = "INFO",
        *,
        category: str = "general",
        description_id: Optional[str] = None,
        extra: Optional[Dict[str, object]] = None,
    ):
        cfg = self.config
        flag_name = self.CATEGORY_FLAGS.get(category)
        if flag_name and not getattr(cfg, flag_name, False):
            return

        if not self.includes(severity):
            return

        payload: Dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "category": category,
            "severity": severity,
            "message": message,
        }
        if description_id is not None:
            payload["description_id"] = description_id
        if cfg.include_extra and extra:
            payload["extra"] = extra
        self.events.append(payload)
        while len(self.events) > cfg.max_entries:
            self.events.popleft()

        if cfg.echo and self.sink:
            self.sink(message, severity)

    # ------------------------------------------------------------------ #
    # Queries / export
    # ------------------------------------------------------------------ #
    def entries(self, severity: Optional[str] = None,
                category: Optional[str] = None) -> List[Dict[str, object]]:
        return [
            event for event in self.events
            if (severity is None or event["severity"] == severity)
            and (category is None or event["category"] == category)
        ]

    def messages(self, severity: Optional[str] = None) -> List[str]:
        return [str(event["message"]) for event in self.entries(severity)]

    def export_to_file(self, filepath: str) -> Tuple[bool, str]:
        """Persist the in-memory log as JSON lines."""
        if not filepath:
            return False, "No export path specified."
        try:
            directory = os.path.dirname(filepath)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(filepath, "w", encoding="utf-8") as handle:
                for event in list(self.events):
                    handle.write(json.dumps(event, ensure_ascii=False) + "\n")
            return True, f"Import log exported to {filepath}"
        except OSError as exc:
            return False, f"Failed to export import log: {exc}"

    def clear(self):
        self.events.clear()


def resolve_log(log: Optional[ImportLog]) -> ImportLog:
    """Quiet log used when a caller does not supply one."""
    if log is not None:
        return log
    return ImportLog(LogConfig(echo=False, max_entries=0))
