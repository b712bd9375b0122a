"""
gateway.logger
~~~~~~~~~~~~~~
Configuration diagnostics: one human-readable line per event on stderr,
plus optional JSON lines with daily rotation.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from .acls import AclEntry
    from .config import Config

LOGGER_NAME = "gateway"

_ISO = "%Y-%m-%dT%H:%M:%SZ"


def _now() -> str:  # RFC-3339 without microseconds
    return datetime.now(tz=timezone.utc).strftime(_ISO)


class _PlainFormatter(logging.Formatter):
    """ e.g. Error: Expecting value (line 3) """

    def format(self, record):  # type: ignore[override]
        if not isinstance(record.msg, dict):
            return super().format(record)

        d: Dict[str, Any] = record.msg
        event = d.get("event")
        if event == "config_error":
            return f'Error: {d.get("message", "")} (line {d.get("line", -1)})'
        if event == "config_loaded":
            return f'Loaded {d["path"]}: {d["acls"]} ACL entries'
        if event == "cidr_warning":
            return f'Warning: ACL ip "{d["ip"]}": {d["reason"]}'
        if event == "listeners":
            return (
                f'redis {d["redis_host"]}:{d["redis_port"]} '
                f'(auth={d["redis_auth"]})  http {d["http_host"]}:{d["http_port"]}'
            )
        if event == "acl_entry":
            cidr = d["cidr"] or "any"
            return (
                f'acl[{d["index"]}] {cidr} basic_auth={d["basic_auth"]} '
                f'enabled={",".join(d["enabled"]) or "-"} '
                f'disabled={",".join(d["disabled"]) or "-"}'
            )
        return " ".join(f"{k}={v}" for k, v in d.items())


class _JSONFormatter(logging.Formatter):
    def format(self, record):  # type: ignore[override]
        if isinstance(record.msg, dict):
            return json.dumps(record.msg, separators=(",", ":"))
        return json.dumps({"ts": _now(), "message": record.getMessage()})


class GatewayLogger:
    def __init__(self, basename: str | Path | None = None, level: int | str = logging.INFO):
        root = logging.getLogger(LOGGER_NAME)
        root.setLevel(level)
        root.propagate = False  # keep diagnostics off the root logger

        if not any(getattr(h, "_gateway_stream", False) for h in root.handlers):
            h = logging.StreamHandler(sys.stderr)
            h.setFormatter(_PlainFormatter())
            h._gateway_stream = True  # type: ignore[attr-defined]
            root.addHandler(h)

        if basename is not None:
            jsonl_file = Path(basename).with_suffix(".jsonl")
            if not any(
                isinstance(h, logging.handlers.TimedRotatingFileHandler)
                and h.baseFilename == os.path.abspath(jsonl_file)
                for h in root.handlers
            ):
                h = logging.handlers.TimedRotatingFileHandler(
                    jsonl_file, when="midnight", backupCount=7, encoding="utf-8"
                )
                h.setFormatter(_JSONFormatter())
                root.addHandler(h)

        self.log = root

    def config_error(self, path: str, message: str, line: int = -1, column: int = -1):
        self.log.error(
            {
                "event": "config_error",
                "ts": _now(),
                "path": path,
                "message": message,
                "line": line,
                "column": column,
            }
        )

    def config_loaded(self, path: str, acl_count: int):
        self.log.info(
            {
                "event": "config_loaded",
                "ts": _now(),
                "path": path,
                "acls": acl_count,
            }
        )

    def cidr_warning(self, expression: str, reason: str):
        self.log.warning(
            {
                "event": "cidr_warning",
                "ts": _now(),
                "ip": expression,
                "reason": reason,
            }
        )

    def listeners(self, config: "Config"):
        self.log.info(
            {
                "event": "listeners",
                "ts": _now(),
                "redis_host": config.redis_host,
                "redis_port": config.redis_port,
                "redis_auth": config.redis_auth is not None,
                "http_host": config.http_host,
                "http_port": config.http_port,
            }
        )

    def acl_entry(self, index: int, entry: "AclEntry"):
        self.log.info(
            {
                "event": "acl_entry",
                "ts": _now(),
                "index": index,
                "cidr": str(entry.cidr) if entry.cidr.enabled else None,
                "basic_auth": entry.http_basic_auth is not None,
                "enabled": list(entry.enabled),
                "disabled": list(entry.disabled),
            }
        )


def get_logger() -> GatewayLogger:
    """Return the diagnostics logger, attaching the stderr handler on first use."""
    return GatewayLogger(level=logging.getLogger(LOGGER_NAME).level or logging.INFO)
