"""
Keydefs option maps.

merge(primary, secondary)
- returns a fresh dict holding every entry of `primary`, followed by each entry of
  `secondary` whose key is absent from `primary` (primary always wins ties).
- neither input is mutated; values are shared by reference.

This is how defaults flow between groups: a group's own options are the primary map and
the defaults carried from previous groups are the secondary one.

    >>> merge({"keymaps": "local"}, {"keymaps": "global", "prefix": "C-c"})
    {'keymaps': 'local', 'prefix': 'C-c'}
"""
from collections.abc import Mapping


def merge(primary, secondary, /):
    if not isinstance(primary, Mapping) or not isinstance(secondary, Mapping):
        raise TypeError("merge() arguments must be mappings")
    merged = dict(primary)
    for key, value in secondary.items():
        merged.setdefault(key, value)
    return merged


__all__ = ("merge",)
