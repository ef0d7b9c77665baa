"""
Keydefs definers: parse a definition stream and hand each group to an installer.

What this module provides
- Definer: a reusable entry point bound to an installer (the "bind these keys, with these
  options" primitive) and to a fixed set of default options.
  • calling it parses the whole stream first, then calls installer(options, bindings)
    once per group, in stream order. A malformed stream installs nothing.
  • parse(*tokens) is a dry run returning the groups.
  • derive(**defaults) builds a variant with more (or overriding) defaults.
- definer(installer, **defaults): factory; without an installer it returns a decorator.
- define(installer, *tokens): one-shot emitter without baked-in defaults.

How defaults are applied
- defaults are spelled in front of the caller's tokens as ':name value ... :' so they
  behave exactly as if the caller had typed them first: they seed the carried defaults,
  the caller's explicit options win over them, and a '::' in the caller's stream drops them.
- fault positions are relative to the caller's tokens (the prefix is not counted).

Quick start
    from keydefs import definer, S, K, SEP

    @definer(keymaps=S.global_map)
    def bind(options, bindings):
        for binding in bindings:
            print(dict(options), binding)

    bind("C-a", S.beginning_of_line, "C-e", S.end_of_line)
    bind(S.minibuffer_map, SEP, "C-g", S.abort)
"""
import functools
import operator
from collections.abc import Mapping

from .parsing import Parser
from .tokens import Keyword, K, SEP, separatorp
from .utils import Unset, coalesce, rename


def _sanitize_defaults(defaults, /):
    """
    Internal: validate default options and return them as a plain dict keyed by name.

    Keys may be option names (str, without the colon) or Keyword tokens. Separator
    keywords are rejected both as keys and as values.
    """
    if not isinstance(defaults, Mapping):
        raise TypeError("definer defaults must be a mapping")

    sanitized = {}
    for name, value in defaults.items():
        if isinstance(name, Keyword):
            if separatorp(name):
                raise ValueError(f"definer defaults cannot use separator {name!r} as an option")
            name = name.name
        if not isinstance(name, str):
            raise TypeError("definer default names must be strings or keywords")
        elif not name or name.startswith(":"):
            raise ValueError(f"definer default name {name!r} must be a bare option name (for example: 'keymaps')")
        if separatorp(value):
            raise ValueError(f"definer default {name!r} cannot be a separator")
        sanitized[name] = value
    return sanitized


class Definer:
    """
    Reusable definition entry point with baked-in default options.

    Parameters
    - installer: callable(options, bindings), called once per parsed group.
    - defaults: Mapping of option name to value applied before the caller's tokens.
    - name: label used in fault headers and representations (default: installer name).
    - chain: positional parser chain (default: the process-wide chain).
    - dwim, strict: parsing switches (default: host __dwim__ / __strict__ settings).
    - shell, fancy, colorful: fault rendering switches (see faults.trigger).
    """

    # Properties shown by __rich_repr__ and __repr__.
    __displayable__ = (
        "name",
        "defaults",
        "dwim",
        "strict",
    )

    def __init__(
            self,
            installer,
            /,
            defaults=Unset,
            *,
            name=Unset,
            chain=Unset,
            dwim=Unset,
            strict=Unset,
            shell=False,
            fancy=False,
            colorful=False
    ):
        if not callable(installer):
            raise TypeError("definer installer must be callable")
        if not isinstance(name := coalesce(name, getattr(installer, "__name__", "definer")), str):
            raise TypeError("definer 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("definer 'name' cannot be empty")

        self._installer = installer
        self._defaults = _sanitize_defaults(coalesce(defaults, {}))
        self._name = name
        self._chain = chain
        self._dwim = dwim
        self._strict = strict
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    name = property(operator.attrgetter("_name"))
    installer = property(operator.attrgetter("_installer"))
    chain = property(operator.attrgetter("_chain"))
    dwim = property(operator.attrgetter("_dwim"))
    strict = property(operator.attrgetter("_strict"))
    shell = property(operator.attrgetter("_shell"))
    fancy = property(operator.attrgetter("_fancy"))
    colorful = property(operator.attrgetter("_colorful"))

    @property
    def defaults(self):
        return dict(self._defaults)

    @property
    def prefix(self):
        """
        The tokens spelled in front of every stream (empty without defaults).
        """
        if not self._defaults:
            return ()
        prefix = []
        for name, value in self._defaults.items():
            prefix += [K[name], value]
        return (*prefix, SEP)

    def parse(self, *tokens):
        """
        Parse `tokens` (after the defaults prefix) and return the groups without installing.
        """
        prefix = self.prefix
        return Parser(
            prefix + tokens,
            index=1 - len(prefix),
            chain=self._chain,
            dwim=self._dwim,
            strict=self._strict,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
            prog=self._name,
        ).parse()

    def __call__(self, *tokens):
        # parse everything first: a malformed stream must not install anything
        for options, bindings in self.parse(*tokens):
            self._installer(options, bindings)

    def derive(self, **defaults):
        """
        Return a new definer whose defaults are these defaults overlaid by `defaults`.
        """
        return type(self)(
            self._installer,
            self._defaults | _sanitize_defaults(defaults),
            name=self._name,
            chain=self._chain,
            dwim=self._dwim,
            strict=self._strict,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
        )

    def __repr__(self):
        return "definer(%s)" % ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))

    def __rich_repr__(self):
        for name in self.__displayable__:
            yield name, getattr(self, name)


def definer(installer=Unset, /, **defaults):
    """
    Create a Definer or return a decorator to build it later.

    Invocation modes
    - Direct:
        bind = definer(install, keymaps=S.global_map)
    - Decorator:
        @definer(keymaps=S.global_map)
        def bind(options, bindings): ...

    Parameters
    - installer: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Definer is created.
    - **defaults: default options baked into the definer.
    """
    @rename("definer")
    def wrapper(installer, /):
        if not callable(installer):
            raise TypeError("@definer() must be applied to a callable")
        return Definer(installer, defaults)

    return wrapper(installer) if installer is not Unset else wrapper


def define(installer, /, *tokens, **options):
    """
    Parse `tokens` and install every group once, without baked-in defaults.

    Keyword options are those of Definer (name, chain, dwim, strict, shell, fancy, colorful).
    """
    Definer(installer, **options)(*tokens)


__all__ = (
    "Definer",
    "definer",
    "define",
)
