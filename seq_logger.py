"""
Stderr logging for the sequence generator.

Every stage reports progress through these helpers; whether a message is
printed depends on the level and format carried by the GeneratorContext.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import sys
import time
from typing import Optional

from seq_context import GeneratorContext, LogLevel


_LEVEL_TAGS = {
    LogLevel.ERROR: "ERROR",
    LogLevel.WARNING: "WARNING",
    LogLevel.INFO: "INFO",
    LogLevel.DEBUG: "DEBUG",
}


def log(context: GeneratorContext, log_level: LogLevel, message: str) -> None:
    """
    Print `message` to stderr when `context.log_level` admits `log_level`.

    With `log_rich_format` set, the line is prefixed with a local timestamp
    and the level tag, e.g. `2026-01-02 10:00:00 [INFO] Parsing '<input>'`.
    """
    if context.log_level < log_level:
        return
    prefix = ""
    if context.log_rich_format and log_level in _LEVEL_TAGS:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        prefix = f"{timestamp} [{_LEVEL_TAGS[log_level]}] "
    print(f"{prefix}{message}", file=sys.stderr)


def log_error(context: GeneratorContext, message: str) -> None:
    """Diagnostic headers, snippets and internal errors; shown unless SILENT."""
    log(context, LogLevel.ERROR, message)


def log_info(context: GeneratorContext, message: str) -> None:
    log(context, LogLevel.INFO, message)


def log_debug(context: GeneratorContext, message: str) -> None:
    """Per-stage counts and range expansion details (-vvv)."""
    log(context, LogLevel.DEBUG, message)


def log_stage(context: GeneratorContext, stage: str, origin: Optional[str] = None) -> None:
    """Announce a pipeline stage ("Lexing", "Parsing", "Evaluating") at INFO level."""
    if origin:
        log(context, LogLevel.INFO, f"{stage} '{origin}'")
    else:
        log(context, LogLevel.INFO, f"{stage}...")
