"""
Argmatch commands: the argument registry, its renderers and its entry points.

Overview
- Command: a builder that accumulates flags, options, positionals and nested
  subcommands, enforcing the construction invariants as each one is added.
  • arg()/args(): add Argument declarations (classified here) or ready specs.
  • subcommand()/subcommands(): attach child commands (each has at most one parent).
  • parse(): pure parse of a token list into Matches (raises faults).
  • get_matches()/get_matches_from(): process entry points (print and exit on faults,
    help and version).
  • format_usage()/format_help()/format_version(): rich Text renderers, plus
    print_usage()/print_help()/print_version().

Built-ins
- A help flag (-h/--help) and a version flag (-v/--version) are provided unless the
  program declares the long form itself; a taken short character only
  drops the short form of the built-in.
- An implicit "help" subcommand is provided when subcommands exist and none is named "help".
Built-ins are computed when needed, so they never count as user declarations and a
command can keep being built after it was rendered or parsed.

Construction misuse (duplicates, contradictory declarations) raises TypeError or
ValueError immediately; the registry is left untouched by a failed call.

Quick example:
    >>> from argmatch import Argument, Command
    >>> command = (
    ...     Command("myprog", version="1.0", about="Does great things")
    ...     .arg(Argument("config", "c", "config", "Sets a custom config file"))
    ...     .arg(Argument("name", "n", "name", "Your name", takes_value=True, required=True))
    ...     .arg(Argument("file", help="Input file", index=1))
    ... )
    >>> matches = command.get_matches()
"""
import logging
import sys
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from .arguments import Argument, Flag, Option, Positional
from .faults import CommandException, CommandExit, HelpRequested, VersionRequested, trigger
from .parser import Parser
from .style import Colorizer, ColorWhen
from .utils import *

logger = logging.getLogger(__name__)


def _process_strings(cls, metadata):
    """
    Validate and normalize the optional string metadata of a command.

    - name: required, trimmed, non-empty, without whitespace (it is also a token).
    - author/version/about/usage: optional; trimmed and non-empty when provided,
      None when omitted.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif any(char.isspace() for char in name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespace")
    metadata["name"] = name

    for field in ("author", "version", "about", "usage"):
        if not isinstance(value := metadata[field], str | Unset):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
        metadata[field] = coalesce(value)

    if not isinstance(metadata["color"], ColorWhen | Unset):
        raise TypeError(f"{cls.__typename__} 'color' must be a ColorWhen")


class Command(metaclass=Introspective):
    """
    Argument registry and builder for one command level.

    Fields exposed read-only: name, author, version, about, usage, flags, options,
    positionals (index → spec, ascending), children (name → subcommand), required (names of the
    required options/positionals in declaration order) and parent.
    """

    __introspectable__ = (
        "name",
        "author",
        "version",
        "about",
        "usage",
        "flags",
        "options",
        "positionals",
        "children",
        "required",
        "parent",
    )

    __displayable__ = (
        "name",
        "version",
        "about",
        "flags",
        "options",
        "positionals",
        "children",
        "color",
    )

    def __new__(cls, name, /, author=Unset, version=Unset, about=Unset, usage=Unset, *, color=Unset):
        metadata = {
            "name": name,
            "author": author,
            "version": version,
            "about": about,
            "usage": usage,
            "color": color,
        }
        _process_strings(cls, metadata)

        self = super().__new__(cls)
        for field, value in metadata.items():
            setattr(self, "_" + field, value)

        self._flags = {}
        self._options = {}
        self._positionals = {}
        self._children = {}
        self._required = []
        self._parent = None

        # uniqueness tracking across every argument kind
        self._names = set()
        self._shorts = set()
        self._longs = set()

        self._helper = None
        return self

    @property
    def color(self):
        """Colour policy: the declared one, else the parent's, else AUTO."""
        if self._color is not Unset:
            return self._color
        if self._parent is not None:
            return self._parent.color
        return ColorWhen.AUTO

    @property
    def colorizer(self):
        return Colorizer(self.color)

    @property
    def root(self):
        command = self
        while command._parent is not None:
            command = command._parent
        return command

    def arg(self, argument, /):
        """
        Add one argument: an Argument declaration (classified here) or a Flag,
        Option or Positional. Returns the command for chaining.

        Raises
        - TypeError: not an argument, or a structural conflict found while classifying.
        - ValueError: name, short form, long form or positional index already in use.
        """
        if isinstance(argument, Argument):
            argument = argument.classify()
        elif not isinstance(argument, Flag | Option | Positional):
            raise TypeError(f"{type(self).__typename__} arg() argument must be an argument declaration or spec")

        short = getattr(argument, "short", None)
        long = getattr(argument, "long", None)

        if argument.name in self._names:
            raise ValueError(f"{type(self).__typename__} argument name {argument.name!r} is already in use")
        if short is not None and short in self._shorts:
            raise ValueError(f"{type(self).__typename__} short form '-{short}' is already in use")
        if long is not None and long in self._longs:
            raise ValueError(f"{type(self).__typename__} long form '--{long}' is already in use")
        if isinstance(argument, Positional) and argument.index in self._positionals:
            raise ValueError(f"{type(self).__typename__} positional index {argument.index} is already in use")

        self._names.add(argument.name)
        if short is not None:
            self._shorts.add(short)
        if long is not None:
            self._longs.add(long)

        match argument:
            case Flag():
                self._flags[argument.name] = argument
            case Option():
                self._options[argument.name] = argument
            case Positional():
                self._positionals = dict(sorted((self._positionals | {argument.index: argument}).items()))

        if argument.required:
            self._required.append(argument.name)

        logger.debug("registered %s %r on command %r", type(argument).__typename__, argument.name, self._name)
        return self

    def args(self, *arguments):
        """Add several arguments in order (see arg())."""
        for argument in arguments:
            self.arg(argument)
        return self

    def subcommand(self, command, /):
        """
        Attach a child command under its name. Returns the command for chaining.

        Raises
        - TypeError: not a Command.
        - ValueError: the name is already in use, the child already has a parent,
          or attaching it would create a cycle.
        """
        if not isinstance(command, Command):
            raise TypeError(f"{type(self).__typename__} subcommand() argument must be a command")
        if command._parent is not None:
            raise ValueError(f"{type(self).__typename__} {command.name!r} is already attached to {command._parent.name!r}")
        if command is self.root:
            raise ValueError(f"{type(self).__typename__} {command.name!r} cannot be attached to one of its own subcommands")
        if command.name in self._children:
            raise ValueError(f"{type(self).__typename__} subcommand name {command.name!r} is already in use")

        self._children[command.name] = command
        command._parent = self
        logger.debug("attached subcommand %r to command %r", command.name, self._name)
        return self

    def subcommands(self, *commands):
        """Attach several child commands in order (see subcommand())."""
        for command in commands:
            self.subcommand(command)
        return self

    def _builtins(self):
        """
        Built-in help/version flags still available on this command.

        They live in their own table (keyed "help"/"version"), apart from the user
        flags, so an argument merely named "help" or "version" never collides with them.
        """
        flags = {}
        if "help" not in self._longs:
            flags["help"] = Flag("help", "h" if "h" not in self._shorts else Unset, "help", "Prints this message")
        if "version" not in self._longs:
            flags["version"] = Flag("version", "v" if "v" not in self._shorts else Unset, "version", "Prints version information")
        return flags

    def _effective_flags(self):
        return [*self._flags.values(), *self._builtins().values()]

    def _effective_subcommands(self):
        if not self._children or "help" in self._children:
            return dict(self._children)
        if self._helper is None:
            self._helper = Command("help", about="Prints this message")
            self._helper._parent = self
        return self._children | {"help": self._helper}

    def _check_relations(self):
        """
        Every name listed in an 'excludes' or 'requires' relation must be declared.

        This can only be checked once the command is complete, so it runs when a
        parse starts.
        """
        for argument in (*self._flags.values(), *self._options.values(), *self._positionals.values()):
            for field in ("excludes", "requires"):
                for name in getattr(argument, field):
                    if name not in self._names:
                        raise ValueError(
                            f"{type(self).__typename__} argument {argument.name!r} {field} unknown argument {name!r}"
                        )

    def format_version(self):
        """'name version' (just the name when no version was declared)."""
        if self._version:
            return Text.assemble(self.colorizer.good(self._name), " ", self._version)
        return self.colorizer.good(self._name)

    def format_usage(self, more_info=False, /, *, prog=Unset):
        """
        Render the usage block.

        The line is the literal usage override when one was declared, otherwise
        "<prog> [FLAGS] [OPTIONS] [POSITIONAL] [SUBCOMMANDS]" where each
        placeholder appears only when something of that kind exists and required
        options/positionals are spelled out in place of their placeholder.
        """
        colorizer = self.colorizer
        usage = Text()
        usage.append(colorizer.warning("USAGE:")).append("\n").append(" " * 4)

        if self._usage:
            usage.append(colorizer.none(self._usage))
        else:
            parts = [coalesce(prog, self._name)]
            if self._effective_flags():
                parts.append("[FLAGS]")

            if required := [option.usage for option in self._options.values() if option.required]:
                parts.extend(required)
            elif self._options:
                parts.append("[OPTIONS]")

            if required := [positional.label for positional in self._positionals.values() if positional.required]:
                parts.extend(required)
            elif self._positionals:
                parts.append("[POSITIONAL]")

            if self._effective_subcommands():
                parts.append("[SUBCOMMANDS]")

            usage.append(colorizer.none(" ".join(parts)))

        if more_info:
            usage.append("\n\n").append("For more information try ").append(colorizer.good("--help"))
        return usage

    def format_help(self, *, prog=Unset, width=Unset):
        """
        Render the full help text: version line, author, about, usage block and the
        FLAGS / OPTIONS / POSITIONAL ARGUMENTS / SUBCOMMANDS sections (each only when
        non-empty). Help texts wrap with a hanging indent to the given width
        (the terminal width by default).
        """
        colorizer = self.colorizer
        console = Console(width=coalesce(width, None))

        def forms(argument):
            short = f"-{argument.short}" if argument.short else "  "
            long = f"--{argument.long}" if argument.long else ""
            return f"{short}{', ' if argument.short and argument.long else '  ' if long else ''}{long}"

        sections = {
            "FLAGS": [(forms(flag), flag.help) for flag in self._effective_flags()],
            "OPTIONS": [(f"{forms(option)} <{option.name}>", option.help) for option in self._options.values()],
            "POSITIONAL ARGUMENTS": [(positional.label, positional.help) for positional in self._positionals.values()],
            "SUBCOMMANDS": [(name, child.about) for name, child in self._effective_subcommands().items()],
        }

        padding = 4
        column = min(max((len(name) for entries in sections.values() for name, _ in entries), default=0), 24)
        indent = padding + column + 4

        renders = [self.format_version()]
        if self._author:
            renders.append(colorizer.none(self._author))
        if self._about:
            renders.append(colorizer.none(self._about))
        renders.append(Text(""))
        renders.append(self.format_usage(prog=prog))

        for title, entries in sections.items():
            if not entries:
                continue

            section = Text()
            section.append(colorizer.warning(f"{title}:"))
            for name, help in entries:
                section.append("\n").append(" " * padding).append(colorizer.good(name))
                if not help:
                    continue

                # names wider than the column push the description to its own line
                if padding + len(name) + 2 > indent:
                    section.append("\n").append(" " * indent)
                else:
                    section.append(" " * (indent - padding - len(name)))

                wrapped = colorizer.none(help).wrap(console, max(console.width - indent, 20))
                try:
                    section.append(wrapped.pop(0))
                except IndexError:
                    pass
                for line in wrapped:
                    section.append("\n").append(" " * indent).append(line)

            renders.append(Text(""))
            renders.append(section)

        return Text("\n").join(renders)

    def print_usage(self, more_info=False, /, *, console=Unset):
        coalesce(console, self.colorizer.console()).print(self.format_usage(more_info))

    def print_help(self, *, prog=Unset, console=Unset):
        """Print the help text (shown under 'prog', the command name by default) and exit with status 0."""
        trigger(HelpRequested(tool=self), console=console, prog=coalesce(prog, self._name))

    def print_version(self, quit=True, /, *, console=Unset):
        """Print the version line; exit with status 0 when 'quit' is set."""
        if quit:
            trigger(VersionRequested(tool=self), console=console)
        coalesce(console, self.colorizer.console()).print(self.format_version())

    def parse(self, tokens, /, *, prog=Unset):
        """
        Parse argument tokens (program path excluded) into Matches.

        This is the pure form: faults and help/version requests are raised
        (CommandException / CommandExit), nothing is printed and the process is
        never terminated.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError(f"{type(self).__typename__} parse() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError(f"{type(self).__typename__} parse() tokens must be strings")
        return Parser(self, tokens, prog=coalesce(prog, self._name)).parse()

    def get_matches_from(self, argv, /, *, console=Unset):
        """
        Parse a full argv (program path first) and return Matches.

        The program path only provides the display name. Faults are printed and
        terminate the process with status 1; help and version requests print and
        terminate with status 0.
        """
        argv = list(argv)
        prog = progname(argv[0]) if argv else self._name
        try:
            return self.parse(argv[1:], prog=prog)
        except (CommandException, CommandExit) as fault:
            logger.debug("parse of %r ended with %s", prog, type(fault).__name__)
            trigger(fault, console=console)

    def get_matches(self, *, console=Unset):
        """Parse the running process's arguments (see get_matches_from())."""
        return self.get_matches_from(sys.argv, console=console)


__all__ = (
    "Command",
)
