"""Include/exclude matching for asset paths.

Rules come in three shapes: a ``Literal`` string, a compiled regular
expression ``Pattern`` and ``AnyOf`` a list of rules.  Callers usually pass
plain strings, compiled patterns or lists of either; ``to_rule`` turns those
into rule objects so that ``matches`` can evaluate them uniformly.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Literal:
    """Exact path match.

    A literal ending in ``/`` names a directory and also matches every path
    below it.
    """

    value: str

    def test(self, path: str) -> bool:
        if path == self.value:
            return True
        return self.value.endswith("/") and path.startswith(self.value)


@dataclass(frozen=True)
class Pattern:
    """Regular expression searched anywhere in the path."""

    regex: re.Pattern[str]

    def test(self, path: str) -> bool:
        return self.regex.search(path) is not None


@dataclass(frozen=True)
class AnyOf:
    """Matches when any of its rules matches.  An empty ``AnyOf`` never matches."""

    rules: tuple[Rule, ...]

    def test(self, path: str) -> bool:
        return any(rule.test(path) for rule in self.rules)


Rule = Union[Literal, Pattern, AnyOf]

RuleSpec = Union[str, re.Pattern, Literal, Pattern, AnyOf, Iterable]


def to_rule(spec: RuleSpec | None) -> Rule | None:
    """Normalise a user supplied rule specification.

    :param spec: ``None``, a string, a compiled pattern, a rule or an iterable
        of any of those
    :return: the equivalent rule, or ``None`` when ``spec`` is ``None`` or an
        empty string, both of which mean "no filter"
    :raises TypeError: if an element is of an unsupported type
    """
    if spec is None or spec == "":
        return None
    if isinstance(spec, (Literal, Pattern, AnyOf)):
        return spec
    if isinstance(spec, str):
        return Literal(spec)
    if isinstance(spec, re.Pattern):
        return Pattern(spec)
    if isinstance(spec, Iterable):
        rules = []
        for item in spec:
            if item is None or item == "":
                raise TypeError(f"Unsupported rule: {item!r}")
            rules.append(to_rule(item))
        return AnyOf(tuple(rules))
    raise TypeError(f"Unsupported rule: {spec!r}")


def matches(path: str, include: RuleSpec | None = None, exclude: RuleSpec | None = None) -> bool:
    """Return ``True`` if ``path`` is selected by the include/exclude rules.

    ``exclude`` takes precedence: a path matching it is never selected.  When
    ``include`` is given the path must match it.  Without any rules every
    path is selected.
    """
    exclude_rule = to_rule(exclude)
    if exclude_rule is not None and exclude_rule.test(path):
        return False
    include_rule = to_rule(include)
    if include_rule is not None and not include_rule.test(path):
        return False
    return True
