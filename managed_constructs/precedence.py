"""
Property precedence for resolved descriptors.

Resolution always follows the same order, highest first:

1. explicit caller input
2. values computed from other inputs
3. fixed library defaults

A property set to None counts as unspecified at its tier, which is how
keyword arguments arrive when the caller leaves them out.
"""

from typing import Any, Dict, Mapping, Optional


def apply_precedence(
    explicit: Mapping[str, Any],
    computed: Optional[Mapping[str, Any]] = None,
    defaults: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Merge the three tiers into a new dict.

    Tiers are applied lowest first so that each higher tier overwrites
    what it specifies. None of the inputs is modified.

    Examples:
        >>> apply_precedence({'a': None, 'b': 2}, {'a': 1}, {'a': 0, 'c': 3})
        {'a': 1, 'c': 3, 'b': 2}
    """
    resolved: Dict[str, Any] = {}
    for tier in (defaults, computed, explicit):
        if not tier:
            continue
        for key, value in tier.items():
            if value is not None:
                resolved[key] = value
    return resolved


def resolution_sources(
    explicit: Mapping[str, Any],
    computed: Optional[Mapping[str, Any]] = None,
    defaults: Optional[Mapping[str, Any]] = None,
) -> Dict[str, str]:
    """Name the tier each resolved property was taken from."""
    sources: Dict[str, str] = {}
    for label, tier in (('default', defaults), ('computed', computed), ('explicit', explicit)):
        if not tier:
            continue
        for key, value in tier.items():
            if value is not None:
                sources[key] = label
    return sources
