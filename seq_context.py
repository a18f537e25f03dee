"""
Generation context for cross-cutting options.

This module defines the GeneratorContext dataclass which holds options that
affect more than one stage of sequence generation (logging, evaluation limits).
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class LogLevel(IntEnum):
    """Hierarchical logging levels for the sequence generator."""
    SILENT = 0      # No logging
    ERROR = 3       # Error messages only
    WARNING = 6     # Warning messages (default)
    INFO = 10       # General progress messages (-v)
    DEBUG = 30      # Detailed diagnostic information (-vvv)


@dataclass
class GeneratorContext:
    """
    Holds cross-cutting options shared by the generator stages.

    Attributes:
        log_rich_format:        If True, emit logs in rich format: may include log level, timestamps, etc.
        log_level:              Current logging level.
        max_sequence_length:    Upper bound on the number of generated values; None means unbounded.
    """
    log_rich_format: bool = False
    log_level: LogLevel = LogLevel.WARNING
    max_sequence_length: Optional[int] = None

    @staticmethod
    def default() -> 'GeneratorContext':
        """Create a GeneratorContext with default settings."""
        return GeneratorContext(log_level=LogLevel.WARNING)
