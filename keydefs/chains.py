"""
Keydefs positional parser chain.

A group may start with positional arguments (e.g., a keymap name) instead of spelling
its options as keyword/value pairs. The chain turns that positional run into options.

Contract
- A parser is a callable taking the full tuple of positional values of one group and
  returning either a mapping of option-name to value (a match) or None (decline).
  An empty mapping is a valid match.
- ParserChain.convert(args) tries parsers in registration order; the first match wins.
  When every parser declines, convert() returns None and the caller decides
  (lenient: warn and contribute no options; strict: fail).

Process-wide default
- `parsers` is the chain used when no explicit chain is injected. It starts with
  positional("keymaps"), i.e. a single positional value becomes {"keymaps": value}.
- register(parser) appends to it (first=True prepends). Configure it at setup time;
  mutating a chain while a parse is in flight is unsupported (no locking is provided).

Example
    >>> chain = ParserChain(positional("keymaps"), positional("keymaps", "package"))
    >>> chain.convert(("global-map",))
    {'keymaps': 'global-map'}
    >>> chain.convert(("global-map", "evil"))
    {'keymaps': 'global-map', 'package': 'evil'}
    >>> chain.convert(()) is None
    True
"""
from collections.abc import Mapping

from .utils import rename


class ParserChain:
    """
    Ordered, extensible list of positional-argument parsers.
    """
    __slots__ = ("_parsers",)

    def __init__(self, *parsers):
        self._parsers = []
        for parser in parsers:
            self.register(parser)

    @property
    def parsers(self):
        return tuple(self._parsers)

    def register(self, parser, /, *, first=False):
        """
        Add a parser to the chain (appended, or prepended when `first` is true).

        Returns the parser unchanged so register can be used as a decorator.
        """
        if not callable(parser):
            raise TypeError("register() argument must be callable")
        if first:
            self._parsers.insert(0, parser)
        else:
            self._parsers.append(parser)
        return parser

    def unregister(self, parser, /):
        try:
            self._parsers.remove(parser)
        except ValueError:
            raise LookupError(f"parser {parser!r} is not registered") from None

    def copy(self):
        return type(self)(*self._parsers)

    def convert(self, args, /):
        args = tuple(args)
        for parser in self._parsers:
            options = parser(args)
            if options is None:
                continue
            if not isinstance(options, Mapping):
                raise TypeError(
                    f"positional parser {getattr(parser, '__name__', parser)!r} must return a mapping or None"
                )
            return dict(options)
        return None

    def __len__(self):
        return len(self._parsers)

    def __iter__(self):
        return iter(self._parsers)

    def __repr__(self):
        return f"parser-chain({', '.join(getattr(p, '__name__', repr(p)) for p in self._parsers)})"


def positional(*names):
    """
    Build a parser that matches exactly len(names) positional values and maps them,
    in order, to the given option names.

        >>> positional("keymaps", "package")(("global-map", "evil"))
        {'keymaps': 'global-map', 'package': 'evil'}
    """
    if not names:
        raise TypeError("positional() requires at least one option name")
    for name in names:
        if not isinstance(name, str) or not name:
            raise TypeError("positional() option names must be non-empty strings")
    if len(set(names)) != len(names):
        raise ValueError("positional() option names cannot contain duplicates")

    @rename("positional[%s]" % ",".join(names))
    def parser(args):
        if len(args) != len(names):
            return None
        return dict(zip(names, args))

    return parser


parsers = ParserChain(positional("keymaps"))


def register(parser, /, *, first=False):
    """
    Register a parser on the process-wide default chain (setup time only).
    """
    return parsers.register(parser, first=first)


__all__ = (
    "ParserChain",
    "positional",
    "parsers",
    "register",
)
