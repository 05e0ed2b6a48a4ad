from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger


def init_logging(level: str = "INFO", stdio: bool = False) -> None:
    # stdout carries the protocol in stdio mode
    logger.remove()
    logger.add(
        sink=sys.stderr if stdio else lambda msg: print(msg, end=""),
        level=level,
        backtrace=True,
        diagnose=False,
    )


@dataclass
class LogContext:
    """Logger handed to each tool invocation.

    Carries the bound loguru logger and decides whether debug artifacts
    (raw and simplified Figma payloads) are written to disk.
    """

    log: Any
    write_artifacts: bool = False
    artifact_dir: str = "logs"

    @classmethod
    def for_tool(cls, tool_name: str, write_artifacts: bool = False, artifact_dir: str = "logs") -> "LogContext":
        return cls(
            log=logger.bind(tool=tool_name),
            write_artifacts=write_artifacts,
            artifact_dir=artifact_dir,
        )

    def info(self, message: str, *args: Any) -> None:
        self.log.info(message, *args)

    def warning(self, message: str, *args: Any) -> None:
        self.log.warning(message, *args)

    def error(self, message: str, *args: Any) -> None:
        self.log.error(message, *args)

    def exception(self, message: str, *args: Any) -> None:
        self.log.exception(message, *args)

    def write_artifact(self, name: str, payload: Any) -> Path | None:
        if not self.write_artifacts:
            return None
        directory = Path(self.artifact_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        try:
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except (OSError, TypeError) as exc:
            self.log.warning("Could not write debug artifact {}: {}", path, exc)
            return None
        return path
