"""
Keydefs utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the tokens, parsing and definers layers.

Overview
- UnsetType / Unset
  • Singleton meaning "not given" (parameters) or "exhausted" (stream lookahead); never None.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- setting(name, default)
  • Read a process-wide setting exposed by the host application as a dunder in __main__
    (e.g., __dwim__ = True), falling back to the given default.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- ordinal(number)
  • Human-friendly ordinal labels ("first", "second", ..., "21st") for position-first messages.

Usage guidance
- Prefer Unset for API defaults when None is a meaningful user value; materialize with coalesce().
- Per-call arguments always win over settings; settings are read at parse time, not import time.
"""
import builtins
import functools
from typing import final


@final
class UnsetType:
    """
    Type of Unset: "no value given" for optional parameters and "nothing left" for
    stream lookahead, kept apart from None (None is a legitimate stream token).

    There is exactly one instance. It is falsey and pickles back to itself.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __reduce__(self):
        return "Unset"

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("Unset is a singleton and cannot be subclassed")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "", or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def setting(name, default=None, /):
    """
    Return the host-level setting `__<name>__` from __main__, or `default`.

    The host application configures the library the same way it customizes fault
    rendering (__styles__, __codes__, __docs__):

        # in the host's __main__ module
        __dwim__ = True
        __strict__ = True
    """
    if not isinstance(name, str) or not name.isidentifier():
        raise TypeError("setting() name must be an identifier")
    return getattr(__import__("__main__"), f"__{name}__", default)


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name)           -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


@functools.cache  # Memoize to avoid recomputing common ordinals in error messages
def ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "setting",
    "rename",
    "ordinal",
)
