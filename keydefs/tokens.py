"""
Keydefs tokens: the vocabulary of a definition stream.

What this module provides
- Keyword: interned keyword token (":keymaps", ":ext", ":", "::").
  • Option names are keywords; their `name` (without the colon) is the option key.
  • SEP (":") and RESET ("::") separate groups; EXT (":ext") marks extended bindings.
- Symbol: interned symbolic name (keymap names, command names).
- Quoted: explicit "this is data" wrapper; always positional, unwrapped by literal().
- K / S: attribute factories (K.keymaps is Keyword(":keymaps"), S.forward is Symbol("forward")).

Classification
- keywordp(token): True for keyword tokens (separators and the extended marker included).
- positionalp(token, dwim): decides whether a token belongs to the leading positional run.
  • strict (dwim off): anything that is not None, not a keyword and not key-shaped
    (str/bytes/tuple) is positional.
  • dwim on: only symbols, lists and quoted values are positional; the first other
    token starts the binding section.
  • when dwim is not given, the host-level __dwim__ setting applies (default False).
- literal(token): normalize a stream value (positionals, option values, bindings).

Example
    >>> positionalp(S.global_map, False)
    True
    >>> positionalp("C-a", False)
    False
    >>> positionalp(K.keymaps, True)
    False
"""
import functools

from rich.text import Text

from .utils import Unset, setting


class Atom:
    """
    Interned, immutable named token (base of Keyword and Symbol).

    Characteristics
    - Identity: Atom subclasses return one instance per (type, name) per process,
      so `is` comparisons are safe and copies/pickles preserve identity.
    - Immutable: attributes cannot be rebound after construction.
    """
    __slots__ = ("_name",)

    @functools.cache
    def __new__(cls, name):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__name__.lower()} name must be a string")
        self = super().__new__(cls)
        object.__setattr__(self, "_name", cls._validate(name))
        return self

    @classmethod
    def _validate(cls, name):
        if not name:
            raise ValueError(f"{cls.__name__.lower()} name cannot be empty")
        return name

    @property
    def name(self):
        return self._name

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__.lower()} tokens are immutable")

    def __reduce__(self):
        return type(self), (self._name,)

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __repr__(self):
        return self._name

    def __rich__(self):
        return Text(repr(self), style="bold magenta")


class Keyword(Atom):
    """
    Keyword token. The spelling keeps its leading colon; `name` drops it.

        >>> Keyword(":keymaps").name
        'keymaps'
        >>> Keyword(":keymaps") is K.keymaps
        True
    """
    __slots__ = ()

    @classmethod
    def _validate(cls, name):
        if not name.startswith(":"):
            raise ValueError("keyword spelling must start with ':' (for example: ':keymaps')")
        return name

    @property
    def name(self):
        return self._name[1:]

    @property
    def spelling(self):
        return self._name

    def __rich__(self):
        return Text(repr(self), style="bold cyan")


class Symbol(Atom):
    """
    Symbolic name, such as a keymap or a command.
    """
    __slots__ = ()

    def __repr__(self):
        return "'" + self._name


class Quoted:
    """
    Marks a value as literal data: always positional, and unwrapped by literal().

    Useful to pass a string or a keyword as a positional argument, e.g. when a custom
    positional parser expects a package name given as a string.
    """
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        if not isinstance(other, Quoted):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash((Quoted, self.value))

    def __repr__(self):
        return f"Quoted({self.value!r})"


class _Factory:
    __slots__ = ("_type", "_prefix")

    def __init__(self, type, prefix=""):
        self._type = type
        self._prefix = prefix

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)
        return self._type(self._prefix + name)

    def __getitem__(self, name):
        # for names that are not identifiers: K["prefix-map"]
        return self._type(self._prefix + name)

    def __repr__(self):
        return f"<{self._type.__name__.lower()} factory>"


K = _Factory(Keyword, ":")
S = _Factory(Symbol)

SEP = Keyword(":")
RESET = Keyword("::")
EXT = Keyword(":ext")

# Tokens that look like key descriptions; never positional in strict mode.
_KEYLIKE = (str, bytes, tuple)


def keywordp(token):
    return isinstance(token, Keyword)


def separatorp(token):
    return token is SEP or token is RESET


def positionalp(token, dwim=Unset):
    """
    Return True when `token` belongs to the leading positional run of a group.

    Parameters
    - token: any stream element.
    - dwim: bool | Unset
      When Unset, the host-level __dwim__ setting is read (default False).
    """
    if dwim is Unset:
        dwim = bool(setting("dwim", False))
    if isinstance(token, Quoted):
        return True
    if token is None or keywordp(token):
        return False
    if dwim:
        return isinstance(token, Symbol | list)
    return not isinstance(token, _KEYLIKE)


def literal(token):
    """
    Normalize a stream value: quoted values are unwrapped, anything else is
    already plain data and returned unchanged.
    """
    if isinstance(token, Quoted):
        return token.value
    return token


__all__ = (
    "Atom",
    "Keyword",
    "Symbol",
    "Quoted",
    "K",
    "S",
    "SEP",
    "RESET",
    "EXT",
    "keywordp",
    "separatorp",
    "positionalp",
    "literal",
)
