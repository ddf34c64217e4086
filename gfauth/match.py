"""Wildcard rule matching for service and API names."""

from __future__ import annotations

NEG_MATCH_CHAR = "!"
_WILDCARD = "*"


def deny_rule(rule: str, s: str) -> bool:
    """Return True if ``rule`` is a negated rule that matches ``s``."""
    if rule.startswith(NEG_MATCH_CHAR):
        return match_rule(rule.replace(NEG_MATCH_CHAR, "").strip(), s)
    return False


def match_rule(rule: str, s: str) -> bool:
    """Return True if ``rule`` applies to ``s``, ignoring case.

    ``*`` matches everything, ``*xxx`` matches a suffix, ``xxx*`` a prefix
    and ``*xxx*`` a substring; anything else must match exactly.
    """
    rule = rule.lower()
    s = s.lower()
    if not rule:
        return False

    starts = rule.startswith(_WILDCARD)
    ends = rule.endswith(_WILDCARD)
    if starts or ends:
        match = rule.replace(_WILDCARD, "").strip()
        if not match:
            return True
        if starts and ends:
            return match in s
        if starts:
            return s.endswith(match)
        return s.startswith(match)

    return rule == s