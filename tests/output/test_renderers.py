"""Tests for the error and unknown-key renderers."""

from rich.console import Console

from cmdkit.output.console import get_output
from cmdkit.output.renderers import render_error, render_unknown


class TestRenderError:
    def test_prefixed_message(self, console: Console) -> None:
        render_error(console, "No CLI config found")
        assert get_output(console) == "❌ No CLI config found\n"


class TestRenderUnknown:
    def test_with_suggestion(self, console: Console) -> None:
        render_unknown(console, "helo", "hello")
        assert get_output(console).splitlines() == [
            "❌ Unknown command: helo",
            "💡 Did you mean: hello?",
        ]

    def test_without_suggestion(self, console: Console) -> None:
        render_unknown(console, "zzz", None)
        assert get_output(console).splitlines() == ["❌ Unknown command: zzz"]
