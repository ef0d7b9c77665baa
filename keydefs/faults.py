"""
Keydefs faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
- DefinitionException / DefinitionWarning: base types that carry message + options and
  know how to render themselves (rich) in a lowercased, position-first, actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Policy
- Every error aborts the whole definition stream: nothing is installed when a fault is
  raised, whichever group it belongs to.
- Messages lead with the ordinal position of the offending token in the stream
  (“option ':keymaps' at third position requires a value”).

Integration
- Parsing code builds a fault with its context (title, code, hint, index, token) and
  calls trigger(fault, **runtime) where runtime carries shell/fancy/colorful.
- Outside shell mode, exceptions are raised and warnings go through warnings.warn.
- In shell mode, both are printed to stderr via rich; exceptions then exit with status 1.
- Hosts customize rendering with __styles__, __codes__, __docs__ and __prog__ in __main__.
"""
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, setting

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across keydefs (stable identifiers).

    grouping (by high-level domain)
    - options (2110x)
      • MISSING_VALUE
    - bindings (2111x)
      • MISSING_DEFINITION
    - stream structure (2112x)
      • UNEXPECTED_TOKEN
    - positionals (2113x)
      • UNMATCHED_POSITIONALS
    - warnings (22xxx)
      • UNMATCHED_POSITIONALS_IGNORED

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- option errors (21xxx) ---
    MISSING_VALUE                 = 21101

    # --- binding errors (21xxx) ---
    MISSING_DEFINITION            = 21111

    # --- stream errors (21xxx) ---
    UNEXPECTED_TOKEN              = 21121

    # --- positional errors (21xxx) ---
    UNMATCHED_POSITIONALS         = 21131

    # --- warnings (22xxx) ---
    UNMATCHED_POSITIONALS_IGNORED = 22131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(setting("codes", {}).get(self, self.value))


_PALETTES = {
    "error": {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "title": "bold #FF4DA6",  # friendly pinky title
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    },
    "warning": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",  # amber fault code for warnings
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    },
}


def _render(fault, kind):
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, _PALETTES[kind] | setting("styles", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(setting("prog", options.get("prog", "keydefs")), "prog-name"),
        " — ",
        text(code.normalize() if code else "", "code"),
        " | ",
        text(str(options.get("title", kind)).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(options.get("hint"), "hint"))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class DefinitionException(Exception):
    """
    base error for malformed definition streams.

    options
    - title, code, hint, docs: copy and documentation.
    - index: 1-based position of the offending token in the stream.
    - token: the offending token (when there is one).
    - shell, fancy, colorful, prog: runtime rendering switches.
    """

    def __init__(self, message=Unset, /, **options):
        assert message is Unset or isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def index(self):
        return self.options.get("index")

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, "error")

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingValueError(DefinitionException): ...
class MissingDefinitionError(DefinitionException): ...
class UnexpectedTokenError(DefinitionException): ...
class UnmatchedPositionalsError(DefinitionException): ...


class DefinitionWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert message is Unset or isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def index(self):
        return self.options.get("index")

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, "warning")

    def __trigger__(self):
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnmatchedPositionalsWarning(DefinitionWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return setting("docs", {}).get(code)


__all__ = (
    "FaultCode",
    "DefinitionException",
    "MissingValueError",
    "MissingDefinitionError",
    "UnexpectedTokenError",
    "UnmatchedPositionalsError",
    "DefinitionWarning",
    "UnmatchedPositionalsWarning",
    "trigger",
    "getdoc",
)
