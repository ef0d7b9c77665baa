"""
Keydefs parsing: turn a flexible definition stream into ordered (options, bindings) groups.

Grammar (order-significant)
    stream     := group (separator group)*
    separator  := SEP | RESET
    group      := positional* SEP? kwpair* binding*
    kwpair     := KEYWORD value
    binding    := EXT (True|False|None) | EXT value | key definition

Group parsing
- positional run: a maximal run of positional tokens (see tokens.positionalp), each
  normalized with tokens.literal and handed as a whole to the positional parser chain.
  • chain match → the mapping seeds the group options.
  • chain declined → lenient: warn and contribute nothing; strict: fail.
- an optional SEP right after the positional run is a pure delimiter.
- keyword pairs: ':name value' assignments; later keywords overwrite earlier ones
  (and overwrite values produced by the positional run) within the same group.
- bindings, in encounter order:
  • EXT followed by True/False/None toggles "every next token is an extended binding".
  • EXT followed by anything else is one ExtendedBinding carrying that value.
  • EXT at the end of the stream or right before a separator only switches the mode off.
  • in extended mode, each token is one ExtendedBinding.
  • otherwise tokens pair up as Binding(key, definition).
- Quoted values are unwrapped wherever they appear (positionals, option values, bindings),
  so Quoted(SEP) passes a separator through as plain data.

Stream parsing
- carried defaults start empty; each group's own options are merged over them
  (group options win) and the result both labels the group and becomes the new defaults.
- groups without bindings are not emitted, their options still carry forward.
- SEP keeps the carried defaults for the next group; RESET clears them.
- any other leftover token is an error.

Failures (see faults) abort the whole parse; messages point at the offending position.

Example
    parse_all([S.kmap1, SEP, "a", S.cmd_a, "b", S.cmd_b, RESET, S.kmap2, "c", S.cmd_c])
    yields two groups:
      • options {"keymaps": S.kmap1}, bindings ("a", S.cmd_a), ("b", S.cmd_b)
      • options {"keymaps": S.kmap2}, bindings ("c", S.cmd_c)
"""
from collections import deque, namedtuple
from types import MappingProxyType

from .chains import parsers
from .faults import (
    FaultCode,
    MissingValueError,
    MissingDefinitionError,
    UnexpectedTokenError,
    UnmatchedPositionalsError,
    UnmatchedPositionalsWarning,
    trigger,
    getdoc,
)
from .options import merge
from .tokens import SEP, RESET, EXT, keywordp, separatorp, positionalp, literal
from .utils import Unset, coalesce, setting, ordinal

Binding = namedtuple("binding", ("key", "definition"))
ExtendedBinding = namedtuple("extended_binding", ("descriptor",))
Group = namedtuple("group", ("options", "bindings"))


class Parser:
    """
    Single-use parser over one definition stream.

    Parameters
    - tokens: Iterable of stream elements.
    - index: position of the first token (default 1); lower it to keep positions
      relative to caller tokens when a prefix is prepended.
    - chain: ParserChain used for positional runs (default: the process-wide chain).
    - dwim: bool, positional inference (default: host __dwim__ setting, else False).
    - strict: bool, fail when the chain declines a positional run (default: host
      __strict__ setting, else False).
    - shell/fancy/colorful/prog: runtime switches forwarded to triggered faults.

    Positions
    - self._index is the 1-based position of the next unread token in the stream.
    """

    def __init__(self, tokens, /, *, index=1, chain=Unset, dwim=Unset, strict=Unset, **runtime):
        self._tokens = deque(tokens)
        self._index = index
        self.chain = coalesce(chain, parsers)
        self.dwim = bool(coalesce(dwim, setting("dwim", False)))
        self.strict = bool(coalesce(strict, setting("strict", False)))
        self._runtime = runtime

    @property
    def remaining(self):
        return tuple(self._tokens)

    def _peek(self):
        return self._tokens[0] if self._tokens else Unset

    def _pop(self):
        self._index += 1
        return self._tokens.popleft()

    def _trigger(self, fault):
        trigger(fault, **self._runtime)

    def _positionals(self):
        start = self._index
        args = []
        while self._tokens and positionalp(self._tokens[0], self.dwim):
            args.append(literal(self._pop()))

        if not args:
            return {}

        options = self.chain.convert(args)
        if options is not None:
            return options

        # no parser recognized this shape
        if self.strict:
            self._trigger(UnmatchedPositionalsError(
                "%d positional arguments from %s position match no positional parser" % (len(args), ordinal(start)),
                title="unmatched positional arguments",
                code=FaultCode.UNMATCHED_POSITIONALS,
                hint="register a positional parser for this shape or spell the options as keyword/value pairs",
                index=start,
                token=args[0],
                docs=getdoc(FaultCode.UNMATCHED_POSITIONALS),
            ))  # terminative
        self._trigger(UnmatchedPositionalsWarning(
            "%d positional arguments from %s position were ignored" % (len(args), ordinal(start)),
            title="ignored positional arguments",
            code=FaultCode.UNMATCHED_POSITIONALS_IGNORED,
            hint="register a positional parser for this shape or spell the options as keyword/value pairs",
            index=start,
            token=args[0],
            docs=getdoc(FaultCode.UNMATCHED_POSITIONALS_IGNORED),
        ))
        return {}

    def _keywords(self, options):
        while keywordp(token := self._peek()) and not separatorp(token) and token is not EXT:
            start = self._index
            self._pop()
            if not self._tokens or separatorp(self._peek()):
                self._trigger(MissingValueError(
                    "option %r at %s position requires a value" % (token, ordinal(start)),
                    title="missing option value",
                    code=FaultCode.MISSING_VALUE,
                    hint="add a value after %r (for example: %r <value>)" % (token, token),
                    index=start,
                    token=token,
                    docs=getdoc(FaultCode.MISSING_VALUE),
                ))  # terminative
            options[token.name] = literal(self._pop())
        return options

    def _bindings(self):
        bindings = []
        extended = False
        while self._tokens and (not keywordp(token := self._tokens[0]) or token is EXT):
            if token is EXT:
                self._pop()
                value = self._peek()
                if value is Unset or separatorp(value):
                    # trailing marker; the separator still ends the group
                    extended = False
                elif value is None or isinstance(value, bool):
                    self._pop()
                    extended = bool(value)
                else:
                    bindings.append(ExtendedBinding(literal(self._pop())))
            elif extended:
                bindings.append(ExtendedBinding(literal(self._pop())))
            else:
                start = self._index
                key = self._pop()
                if not self._tokens or separatorp(self._peek()):
                    self._trigger(MissingDefinitionError(
                        "key %r at %s position has no definition" % (key, ordinal(start)),
                        title="missing definition",
                        code=FaultCode.MISSING_DEFINITION,
                        hint="add a definition after %r, or mark it as extended with %r" % (key, EXT),
                        index=start,
                        token=key,
                        docs=getdoc(FaultCode.MISSING_DEFINITION),
                    ))  # terminative
                bindings.append(Binding(literal(key), literal(self._pop())))
        return bindings

    def group(self):
        """
        Consume one group and return (options, bindings) as (dict, list).
        """
        options = self._positionals()
        if self._peek() is SEP:
            self._pop()
        return self._keywords(options), self._bindings()

    def parse(self):
        """
        Consume the whole stream and return the emitted groups, in stream order.
        """
        groups = []
        defaults = {}
        while True:
            options, bindings = self.group()
            defaults = merge(options, defaults)
            if bindings:
                groups.append(Group(MappingProxyType(defaults), tuple(bindings)))

            token = self._peek()
            if token is SEP:
                self._pop()
            elif token is RESET:
                self._pop()
                defaults = {}
            elif self._tokens:
                self._trigger(UnexpectedTokenError(
                    "unexpected %r at %s position" % (token, ordinal(self._index)),
                    title="unexpected token",
                    code=FaultCode.UNEXPECTED_TOKEN,
                    hint="options go before bindings; start a new group with %r or %r" % (SEP, RESET),
                    index=self._index,
                    token=token,
                    remaining=self.remaining,
                    docs=getdoc(FaultCode.UNEXPECTED_TOKEN),
                ))  # terminative
            else:
                return tuple(groups)


def parse_group(tokens, /, **options):
    """
    Parse one group from the head of `tokens`.

    Returns
    - (options, bindings, remaining): dict, tuple of bindings, tuple of unread tokens.

    The separator that may end the group is left in `remaining`.
    """
    parser = Parser(tokens, **options)
    group, bindings = parser.group()
    return group, tuple(bindings), parser.remaining


def parse_all(tokens, /, **options):
    """
    Parse a whole definition stream into a tuple of Group(options, bindings).

    Keyword options are those of Parser (chain, dwim, strict and runtime switches).
    """
    return Parser(tokens, **options).parse()


__all__ = (
    "Binding",
    "ExtendedBinding",
    "Group",
    "Parser",
    "parse_group",
    "parse_all",
)
