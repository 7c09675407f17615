"""Token parsing — argv into positionals and flags, then into a command key.

Flags follow boolean-first rules: ``--name`` is always True and never
consumes the following token, so values are passed as ``--name=value``.

==================  =========================
token               result
==================  =========================
``--name=value``    ``{"name": "value"}``
``--name``          ``{"name": True}``
``--no-name``       ``{"name": False}``
``-abc``            ``a``, ``b``, ``c`` = True
``-k=value``        ``{"k": "value"}``
``--``              everything after is positional
==================  =========================
"""

from __future__ import annotations

import re
from collections.abc import Container
from dataclasses import dataclass, field
from typing import Any

from cmdkit.domain.keys import join_key

_NUMBER = re.compile(r"^-\d+(\.\d+)?$")


@dataclass(frozen=True)
class ParsedTokens:
    positional: list[str] = field(default_factory=list)
    flags: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedInvocation:
    """The key an invocation selects, plus its raw args and flags.

    ``key`` is None when no positional tokens were given (root help).
    """

    key: str | None
    args: list[str] = field(default_factory=list)
    flags: dict[str, Any] = field(default_factory=dict)


def parse_tokens(argv: list[str]) -> ParsedTokens:
    positional: list[str] = []
    flags: dict[str, Any] = {}

    tokens = iter(argv)
    for token in tokens:
        if token == "--":
            positional.extend(tokens)
            break
        if token.startswith("--") and len(token) > 2:
            name, sep, value = token[2:].partition("=")
            if sep:
                flags[name] = value
            elif name.startswith("no-") and len(name) > 3:
                flags[name[3:]] = False
            else:
                flags[name] = True
        elif token.startswith("-") and len(token) > 1 and not _NUMBER.match(token):
            name, sep, value = token[1:].partition("=")
            if sep and len(name) == 1:
                flags[name] = value
            else:
                for letter in name:
                    flags[letter] = True
        else:
            positional.append(token)

    return ParsedTokens(positional=positional, flags=flags)


def resolve_invocation(parsed: ParsedTokens, known_keys: Container[str]) -> ResolvedInvocation:
    """Pick the longest run of leading positionals that forms a known key.

    Tokens may themselves contain ``/``.  Remaining positionals become the
    command's args.  When nothing matches, every positional is folded into
    the (unknown) key so the user sees what they typed.
    """
    positional = list(parsed.positional)
    if not positional:
        return ResolvedInvocation(key=None, flags=dict(parsed.flags))

    matched = 0
    for count in range(len(positional), 0, -1):
        if join_key(*positional[:count]) in known_keys:
            matched = count
            break

    if matched == 0:
        return ResolvedInvocation(key=join_key(*positional), flags=dict(parsed.flags))

    return ResolvedInvocation(
        key=join_key(*positional[:matched]),
        args=positional[matched:],
        flags=dict(parsed.flags),
    )

