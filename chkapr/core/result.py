"""Ok/Err result values for fallible operations.

Fetching, decoding and evaluating a snapshot can all fail in ways the caller
must tell apart (a release that is missing is not the same outcome as a
release with nothing approved). Instead of raising, those functions return
either ``Ok(value)`` or ``Err(error)`` and the CLI decides what to do.

Usage:
    result = evaluate(snapshot, "tech-leads")
    if isinstance(result, Err):
        print(f"gate failed: {result.error}")
    else:
        for line in result.value.lines():
            print(line)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying ``error``."""

    error: E


type Result[T, E] = Ok[T] | Err[E]
