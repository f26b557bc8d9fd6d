"""
Argmatch faults (parse errors and display exits) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing outcome.
- CommandException: base type of runtime parse faults; carries message + options and
  knows how to render itself through rich and how to terminate the process (status 1).
- CommandExit: base type of requested displays (help, version); renders the requested
  text and terminates with status 0.
- trigger(): central entry point to surface any fault or display request.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: messages include the ordinal position of the offending
  token when one exists (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Faults whose 'usage' option is set are followed by the usage block of the command
  that failed and a "For more information try --help" line.

Integration
- The parser raises these exceptions; it never prints or exits.
- Command.get_matches()/get_matches_from() catch them and call trigger(fault).
- Construction-time misuse is not a fault: it raises TypeError/ValueError directly.
"""
import sys
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .style import Colorizer, ColorWhen
from .utils import *


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - display exits (100xx)
      • HELP_REQUESTED, VERSION_REQUESTED
    - switches (options/flags) (111xx)
      • UNKNOWN_ARGUMENT, FLAG_ASSIGNMENT, DUPLICATE_NOT_ALLOWED,
        MUTUALLY_EXCLUSIVE, MISSING_VALUE
    - positionals (1112x)
      • UNEXPECTED_POSITIONAL, POSITIONALS_NOT_ACCEPTED
    - requirements (1113x)
      • MISSING_REQUIRED

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- display exits (10xxx) ---
    HELP_REQUESTED              = 10001
    VERSION_REQUESTED           = 10002

    # --- switch/flag/option errors (11xxx) ---
    UNKNOWN_ARGUMENT            = 11112
    FLAG_ASSIGNMENT             = 11113
    DUPLICATE_NOT_ALLOWED       = 11115
    MUTUALLY_EXCLUSIVE          = 11116
    MISSING_VALUE               = 11117

    # --- positional errors (11xxx) ---
    UNEXPECTED_POSITIONAL       = 11121
    POSITIONALS_NOT_ACCEPTED    = 11122

    # --- requirement errors (11xxx) ---
    MISSING_REQUIRED            = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _colorizer(options):
    try:
        return options["tool"].colorizer
    except KeyError:
        return Colorizer(ColorWhen.AUTO)


class CommandException(Exception):
    """
    base type of runtime parse faults.

    options (all optional, used by the renderer)
    - tool: the Command whose level failed (usage block, colour policy).
    - prog: display name of that level (e.g. "git remote").
    - code / title / hint / docs: header and guidance lines.
    - usage: follow the message with the usage block.
    - input / index / argument: the offending token, its 1-based position and its spec.
    """
    status = 1

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        colorizer = _colorizer(self.options)
        renders = []

        tool = self.options.get("tool")
        prog = self.options.get("prog") or (tool.name if tool is not None else None)

        if (code := self.options.get("code")) is not None:
            header = Text.assemble(
                "[ ",
                *((colorizer.none(prog), " — ") if prog else ()),
                colorizer.error(code.normalize()),
                " | ",
                colorizer.error(self.options.get("title", "error").title()),
                " ]",
            )
            renders.append(header)

        if self.message:
            renders.append(colorizer.none(self.message))

        if hint := self.options.get("hint"):
            renders.append(Text.assemble(colorizer.good(" → "), colorizer.none(hint)))

        if docs := self.options.get("docs"):
            renders.append(colorizer.none(docs))

        if self.options.get("usage") and tool is not None:
            renders.append(Text(""))
            renders.append(tool.format_usage(True, prog=self.options.get("prog", Unset)))

        return Group(*renders)

    def __trigger__(self, console):
        console.print(self)
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownArgumentError(CommandException): ...
class FlagAssignmentError(CommandException): ...
class MissingValueError(CommandException): ...
class DuplicateNotAllowedError(CommandException): ...
class MutuallyExclusiveError(CommandException): ...
class MissingRequiredError(CommandException): ...
class UnexpectedPositionalError(CommandException): ...
class PositionalsNotAcceptedError(UnexpectedPositionalError): ...


class CommandExit(Exception):
    """
    base type of requested displays (help, version).

    these are terminal: raising one stops the parse, and triggering it prints the
    requested text and exits with status 0.
    """
    status = 0

    def __init__(self, **options):
        super().__init__(type(self).__name__)
        self.options = MappingProxyType(options)

    def __rich__(self):
        raise NotImplementedError

    def __trigger__(self, console):
        console.print(self)
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(**{**self.options, **overrides})


class HelpRequested(CommandExit):
    def __rich__(self):
        return self.options["tool"].format_help(prog=self.options.get("prog", Unset))


class VersionRequested(CommandExit):
    def __rich__(self):
        return self.options["tool"].format_version()


def trigger(fault, /, *, console=Unset, **overrides):
    """
    surface a fault or display request and terminate the process.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - overrides (e.g. prog=...) are merged into the fault options through __replace__
      before it is surfaced.
    - the console defaults to one built from the failing command's colour policy
      (standard output).
    - never returns: __trigger__ exits with the fault's status.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    if overrides:
        fault = fault.__replace__(**overrides)
    if console is Unset:
        console = _colorizer(fault.options).console()
    fault.__trigger__(console)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "CommandException",
    "UnknownArgumentError",
    "FlagAssignmentError",
    "MissingValueError",
    "DuplicateNotAllowedError",
    "MutuallyExclusiveError",
    "MissingRequiredError",
    "UnexpectedPositionalError",
    "PositionalsNotAcceptedError",
    "CommandExit",
    "HelpRequested",
    "VersionRequested",
    "trigger",
    "getdoc",
)
