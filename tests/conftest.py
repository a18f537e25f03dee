#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from seq_context import GeneratorContext, LogLevel
from seq_driver import SeqDriver


@pytest.fixture
def repo_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def silent_context() -> GeneratorContext:
    return GeneratorContext(log_level=LogLevel.SILENT)


@pytest.fixture
def generate(silent_context: GeneratorContext):
    """Run the full pipeline on an expression.

    Usage:
        def test_something(generate):
            result = generate("1, {2..=4}")
            assert result.values == [1, 2, 3, 4]
    """

    def _generate(src: str, **context_overrides):
        context = silent_context
        if context_overrides:
            context = GeneratorContext(log_level=LogLevel.SILENT, **context_overrides)
        return SeqDriver(context=context).generate(src)

    return _generate


def has_error_code(diagnostics, code: str) -> bool:
    """Check if any diagnostic contains the given error code.

    Args:
        diagnostics: List of Diagnostic objects
        code: Error code string like "PAR-0060" or "[PAR-0060]"

    Returns:
        True if any diagnostic message contains the error code
    """
    if not code.startswith("["):
        code = f"[{code}]"
    return any(code in d.message for d in diagnostics)
