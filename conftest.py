"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture(autouse=True)
def _no_llm_calls():
    """Prevent real OpenAI calls during tests — keeps the suite fast and free."""
    with patch(
        "result_verifier.extractor_llm.OpenAI",
        side_effect=RuntimeError("real OpenAI client constructed during tests"),
    ):
        yield
