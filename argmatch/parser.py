"""
Argmatch parser: the token-matching state machine for one command level.

A Parser is created per command level and per invocation; it owns every working
set of that invocation (remaining-required names, the ambient exclusion set, the
pending positional slots and the matches recorded so far), so the Command it
reads stays untouched and can be parsed again.

States
- NORMAL: switches, subcommand names and positionals are recognized.
- POSITIONAL_ONLY: entered for good after a bare "--"; every later token is a
  subcommand name or a positional value.
- AWAITING_VALUE: the previous token was an option that takes its value from the
  next token.

Per token, in priority order
1. awaiting a value → the token is that value (whatever it looks like).
2. "--" → switch to positional-only, drop the token.
3. "--name" / "--name=value" → long form.
4. "-abc" / "-n" → short form (a cluster of flags, or a single flag/option).
5. anything else → the "help" subcommand (declared or implicit, it prints this
   level's help), another declared subcommand (the rest of the tokens go to a
   child Parser), or the next positional slot.

End of level: a pending option value, outstanding required arguments and matched
excluded arguments are reported before a recognized subcommand is parsed.

Faults are raised (see argmatch.faults); nothing here prints or exits.
"""
import difflib
import logging
from collections import deque
from enum import Enum

from .arguments import Flag, Option
from .faults import *
from .matches import FlagMatch, Matches, OptionMatch, PositionalMatch, SubcommandMatch
from .utils import *

logger = logging.getLogger(__name__)


class State(Enum):
    NORMAL = "normal"
    POSITIONAL_ONLY = "positional-only"
    AWAITING_VALUE = "awaiting-value"


class Parser:
    """
    Match tokens against one command level.

    parameters
    - command: the Command (registry) of this level.
    - tokens: the tokens left for this level (program path excluded).
    - prog: display name of this level, e.g. "git" or "git remote".
    - index: ordinal of the token preceding the first one (0 at the top level), so
      positions in messages stay relative to the whole command line.
    """

    def __init__(self, command, tokens, /, *, prog=Unset, index=0):
        command._check_relations()

        self.command = command
        self.prog = coalesce(prog, command.name)

        self._builtins = command._builtins()
        self.flags = dict(command._flags)
        self.options = dict(command._options)
        self.subcommands = command._effective_subcommands()

        switches = (*self.flags.values(), *self._builtins.values(), *self.options.values())
        self._longs = {argument.long: argument for argument in switches if argument.long}
        self._shorts = {argument.short: argument for argument in switches if argument.short}

        self._tokens = deque(tokens)
        self._index = index

        self._positional_only = False
        self._awaiting = None  # (option, input, index)
        self._pending = deque(command._positionals.values())

        # name → None (ordered sets) / name → label of the excluding argument
        self._required = dict.fromkeys(command._required)
        self._excluded = {}
        # name → (input, index) of the first match
        self._seen = {}

        self._flagmatches = {}
        self._optionmatches = {}
        self._positionalmatches = {}

    @property
    def state(self):
        if self._awaiting is not None:
            return State.AWAITING_VALUE
        if self._positional_only:
            return State.POSITIONAL_ONLY
        return State.NORMAL

    def _fault(self, exception, message, /, **options):
        """build a fault carrying the context shared by every fault of this level."""
        return exception(
            message,
            tool=self.command,
            prog=self.prog,
            docs=getdoc(options["code"]),
            **options,
        )

    def _label(self, name):
        for table in (self.flags, self.options):
            if name in table:
                return table[name].label
        for positional in self.command._positionals.values():
            if positional.name == name:
                return positional.label
        return name

    def _matched(self, name):
        return name in self._flagmatches or name in self._optionmatches or name in self._positionalmatches

    def _shortcut(self, input, /, *, field):
        """
        help/version shortcuts: raise the display request when 'input' is the long
        name or short character (per 'field') of an active built-in.
        """
        for name, request in (("help", HelpRequested), ("version", VersionRequested)):
            if (flag := self._builtins.get(name)) is not None and getattr(flag, field) == input:
                logger.debug("%s requested on %r", name, self.prog)
                raise request(tool=self.command, prog=self.prog)

    def _accept(self, argument, input, index):
        """
        bookkeeping shared by every match: exclusion and repeat checks, then merge
        the argument's exclusions, clear it from the required set and add its
        unmet dependencies.
        """
        if (excluder := self._excluded.get(argument.name)) is not None:
            raise self._fault(
                MutuallyExclusiveError,
                "argument %r at %s position is mutually exclusive with %r" % (input, ordinal(index), excluder),
                title="mutually exclusive arguments",
                code=FaultCode.MUTUALLY_EXCLUSIVE,
                hint="use either %r or %r, not both" % (excluder, argument.label),
                usage=True,
                input=input,
                index=index,
                argument=argument,
            )

        if self._matched(argument.name) and not getattr(argument, "multiple", False):
            raise self._fault(
                DuplicateNotAllowedError,
                "argument %r at %s position was supplied more than once, but does not support multiple values" % (
                    input, ordinal(index)
                ),
                title="duplicate argument",
                code=FaultCode.DUPLICATE_NOT_ALLOWED,
                hint="keep a single occurrence of %r" % argument.label,
                usage=True,
                input=input,
                index=index,
                argument=argument,
            )

        for name in argument.excludes:
            self._excluded.setdefault(name, argument.label)
        self._required.pop(argument.name, None)
        for name in argument.requires:
            if not self._matched(name):
                self._required.setdefault(name)
        self._seen.setdefault(argument.name, (input, index))

    def _match_flag(self, flag, input, index):
        self._accept(flag, input, index)
        self._flagmatches.setdefault(flag.name, FlagMatch(flag.name))._occurrences += 1

    def _match_option(self, option, input, index):
        self._accept(option, input, index)
        self._optionmatches.setdefault(option.name, OptionMatch(option.name))

    def _assign(self, option, value):
        record = self._optionmatches[option.name]
        record._values.append(value)
        record._occurrences = record._occurrences + 1 if option.multiple else 1

    def _unknown(self, input, index, /, hint=Unset):
        if hint is Unset:
            suggestions = difflib.get_close_matches(input.lstrip("-"), self._longs.keys(), 1)
            try:
                hint = "did you mean '--%s'? you can also run '%s --help' to see all arguments" % (
                    suggestions[0], self.prog
                )
            except IndexError:
                hint = "try '%s --help' to see all available arguments" % self.prog
        return self._fault(
            UnknownArgumentError,
            "unknown argument %r at %s position" % (input, ordinal(index)),
            title="unknown argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            hint=hint,
            usage=True,
            input=input,
            index=index,
        )

    def _parse_long(self, token):
        """handle '--name' and '--name=value'; returns the option awaiting a value, if any."""
        input = token.removeprefix("--")
        self._shortcut(input, field="long")

        name, separator, value = input.partition("=")
        input = "--" + name

        if separator and not value:
            raise self._fault(
                MissingValueError,
                "argument %r at %s position requires a value, but none was supplied" % (input, ordinal(self._index)),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="add a value after '=' (for example: %s=<%s>)" % (input, name),
                usage=True,
                input=input,
                index=self._index,
            )

        if (argument := self._longs.get(name)) is None:
            raise self._unknown(input, self._index)

        if isinstance(argument, Flag):
            if separator:
                raise self._fault(
                    FlagAssignmentError,
                    "flag %r at %s position cannot have an inline value" % (input, ordinal(self._index)),
                    title="flag cannot take a value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    hint="remove everything from '=' (for example: %s)" % input,
                    usage=True,
                    input=input,
                    index=self._index,
                    argument=argument,
                )
            self._match_flag(argument, input, self._index)
            return None

        self._match_option(argument, input, self._index)
        if separator:
            self._assign(argument, value)
            return None
        return argument

    def _parse_short(self, token):
        """handle '-x' and flag clusters '-abc'; returns the option awaiting a value, if any."""
        input = token.removeprefix("-")

        if len(input) > 1:
            # the whole cluster is checked before any of its flags is recorded
            for char in input:
                self._shortcut(char, field="short")
                if isinstance(argument := self._shorts.get(char), Option):
                    raise self._unknown(token, self._index, hint=(
                        "'-%s' takes a value, so it cannot be grouped with other flags (for example: -%s <%s>)" % (
                            char, char, argument.name
                        )
                    ))
                if argument is None:
                    raise self._unknown(token, self._index, hint=(
                        "'-%s' is not a known flag; try '%s --help' to see all available arguments" % (char, self.prog)
                    ))
            for char in input:
                self._match_flag(self._shorts[char], token, self._index)
            return None

        self._shortcut(input, field="short")
        if (argument := self._shorts.get(input)) is None:
            raise self._unknown(token, self._index)

        if isinstance(argument, Flag):
            self._match_flag(argument, token, self._index)
            return None

        self._match_option(argument, token, self._index)
        return argument

    def _parse_positional(self, token):
        if not self.command._positionals:
            suggestions = difflib.get_close_matches(token, self.subcommands.keys(), 1)
            try:
                hint = "did you mean the subcommand %r? you can also run '%s --help' to see available subcommands" % (
                    suggestions[0], self.prog
                )
            except IndexError:
                hint = "try '%s --help' to see what %r accepts" % (self.prog, self.prog)
            raise self._fault(
                PositionalsNotAcceptedError,
                "found positional argument %r at %s position, but %r doesn't accept any" % (
                    token, ordinal(self._index), self.prog
                ),
                title="unexpected positional argument",
                code=FaultCode.POSITIONALS_NOT_ACCEPTED,
                hint=hint,
                usage=True,
                input=token,
                index=self._index,
            )

        try:
            argument = self._pending.popleft()
        except IndexError:
            raise self._fault(
                UnexpectedPositionalError,
                "positional argument %r at %s position was found, but %r wasn't expecting any more" % (
                    token, ordinal(self._index), self.prog
                ),
                title="unexpected positional argument",
                code=FaultCode.UNEXPECTED_POSITIONAL,
                hint="%r accepts %d positional argument(s); remove the extra ones" % (
                    self.prog, len(self.command._positionals)
                ),
                usage=True,
                input=token,
                index=self._index,
            ) from None

        self._accept(argument, token, self._index)
        self._positionalmatches[argument.name] = PositionalMatch(argument.name, token)

    def _finalize(self):
        if self._awaiting is not None:
            option, input, index = self._awaiting
            raise self._fault(
                MissingValueError,
                "argument %r at %s position requires a value, but none was supplied" % (input, ordinal(index)),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="pass a value after it (for example: %s <%s>)" % (input, option.name),
                usage=True,
                input=input,
                index=index,
                argument=option,
            )

        if self._required:
            labels = list(map(self._label, self._required))
            raise self._fault(
                MissingRequiredError,
                "one or more required arguments were not supplied: %s" % ", ".join(map(repr, labels)),
                title="missing required arguments",
                code=FaultCode.MISSING_REQUIRED,
                hint="add %s and try again" % " ".join(labels),
                usage=True,
                missing=tuple(self._required),
            )

        for name, excluder in self._excluded.items():
            if not self._matched(name):
                continue
            input, index = self._seen[name]
            raise self._fault(
                MutuallyExclusiveError,
                "argument %r at %s position is mutually exclusive with %r" % (input, ordinal(index), excluder),
                title="mutually exclusive arguments",
                code=FaultCode.MUTUALLY_EXCLUSIVE,
                hint="use either %r or %r, not both" % (excluder, self._label(name)),
                usage=name not in self._positionalmatches,
                input=input,
                index=index,
            )

    def parse(self):
        """consume the tokens of this level and return its Matches (raises on faults)."""
        logger.debug("parsing %d token(s) for %r", len(self._tokens), self.prog)

        subcommand = None
        while self._tokens:
            token = self._tokens.popleft()
            self._index += 1
            logger.debug("token %r at %s position (%s)", token, ordinal(self._index), self.state.value)

            if self._awaiting is not None:
                self._assign(self._awaiting[0], token)
                self._awaiting = None
                continue

            if not self._positional_only:
                if token == "--":
                    self._positional_only = True
                    continue
                if token.startswith("-") and len(token) > 1:
                    option = self._parse_long(token) if token.startswith("--") else self._parse_short(token)
                    if option is not None:
                        self._awaiting = (option, token, self._index)
                    continue

            if token in self.subcommands:
                if token == "help":
                    logger.debug("help requested on %r through the help subcommand", self.prog)
                    raise HelpRequested(tool=self.command, prog=self.prog)
                subcommand = token
                break

            self._parse_positional(token)

        logger.debug("finalizing %r", self.prog)
        self._finalize()

        matches = Matches(self._flagmatches.values(), self._optionmatches.values(), self._positionalmatches.values())
        if subcommand is not None:
            logger.debug("dispatching %d token(s) to subcommand %r", len(self._tokens), subcommand)
            child = Parser(
                self.subcommands[subcommand],
                list(self._tokens),
                prog=f"{self.prog} {subcommand}",
                index=self._index,
            )
            self._tokens.clear()
            matches._subcommand = SubcommandMatch(subcommand, child.parse())
        return matches


__all__ = (
    "State",
    "Parser",
)
