"""Test to verify the project setup is working correctly."""

from hypothesis import given, strategies as st

import bgg_climb
from bgg_climb.main import build_parser


def test_basic_setup() -> None:
    """Test that the package imports and reports a version."""
    assert bgg_climb.__version__ == "0.1.0"


@given(st.integers())
def test_hypothesis_setup(x: int) -> None:
    """Test that Hypothesis property-based testing works."""
    assert x + 0 == x


def test_parser_lists_subcommands() -> None:
    help_text = build_parser().format_help()

    for command in ("history", "compare", "diff"):
        assert command in help_text
