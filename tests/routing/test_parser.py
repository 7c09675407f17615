"""Tests for token parsing and key resolution."""

from __future__ import annotations

import pytest

from cmdkit.routing.parser import ParsedTokens, parse_tokens, resolve_invocation


class TestParseTokens:
    def test_positionals_only(self) -> None:
        parsed = parse_tokens(["hello", "Alice"])
        assert parsed.positional == ["hello", "Alice"]
        assert parsed.flags == {}

    def test_long_flag_with_value(self) -> None:
        assert parse_tokens(["--amount=100"]).flags == {"amount": "100"}

    def test_long_flag_is_boolean_and_consumes_nothing(self) -> None:
        parsed = parse_tokens(["--verbose", "x"])
        assert parsed.flags == {"verbose": True}
        assert parsed.positional == ["x"]

    def test_negated_flag(self) -> None:
        assert parse_tokens(["--no-color"]).flags == {"color": False}

    def test_value_keeps_equals_signs(self) -> None:
        assert parse_tokens(["--expr=a=b"]).flags == {"expr": "a=b"}

    def test_short_flag_cluster(self) -> None:
        assert parse_tokens(["-abc"]).flags == {"a": True, "b": True, "c": True}

    def test_short_flag_with_value(self) -> None:
        assert parse_tokens(["-n=5"]).flags == {"n": "5"}

    @pytest.mark.parametrize("token", ["-5", "-3.14"])
    def test_negative_numbers_are_positional(self, token: str) -> None:
        assert parse_tokens([token]).positional == [token]

    def test_double_dash_ends_flags(self) -> None:
        parsed = parse_tokens(["run", "--", "--not-a-flag", "-x"])
        assert parsed.positional == ["run", "--not-a-flag", "-x"]
        assert parsed.flags == {}

    def test_lone_dash_is_positional(self) -> None:
        assert parse_tokens(["-"]).positional == ["-"]

    def test_flags_may_precede_positionals(self) -> None:
        parsed = parse_tokens(["--dry-run", "deploy"])
        assert parsed.flags == {"dry-run": True}
        assert parsed.positional == ["deploy"]


class TestResolveInvocation:
    KEYS = {"hello", "scaffold", "scaffold/cloud", "scaffold/cloud/aws"}

    def test_no_positionals_is_root(self) -> None:
        invocation = resolve_invocation(ParsedTokens(flags={"help": True}), self.KEYS)
        assert invocation.key is None
        assert invocation.flags == {"help": True}

    def test_longest_prefix_wins(self) -> None:
        parsed = ParsedTokens(positional=["scaffold", "cloud", "aws", "extra"])
        invocation = resolve_invocation(parsed, self.KEYS)
        assert invocation.key == "scaffold/cloud/aws"
        assert invocation.args == ["extra"]

    def test_remaining_tokens_are_args(self) -> None:
        invocation = resolve_invocation(ParsedTokens(positional=["hello", "Alice"]), self.KEYS)
        assert invocation.key == "hello"
        assert invocation.args == ["Alice"]

    def test_slash_tokens(self) -> None:
        invocation = resolve_invocation(ParsedTokens(positional=["scaffold/cloud"]), self.KEYS)
        assert invocation.key == "scaffold/cloud"

    def test_unknown_joins_all_positionals(self) -> None:
        parsed = ParsedTokens(positional=["scafold", "cloud"])
        invocation = resolve_invocation(parsed, self.KEYS)
        assert invocation.key == "scafold/cloud"
        assert invocation.args == []
