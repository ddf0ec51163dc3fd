"""Merge per-dependency fragments into sorted, duplicate-free recipe lists."""

from __future__ import annotations

from collections.abc import Iterable

from bbcargo.models import Decision


def accumulate(decisions: Iterable[Decision]) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return ``(fetch_locators, auxiliary_lines)``.

    Both are sorted so the output does not depend on the order in which the
    resolver reported packages.
    """
    locators: set[str] = set()
    auxiliary: set[str] = set()
    for decision in decisions:
        if decision.locator is not None:
            locators.add(decision.locator)
        auxiliary.update(decision.auxiliary_lines)
    return tuple(sorted(locators)), tuple(sorted(auxiliary))
