r"""
Argmatch argument specifications.

Overview
- Declaration
  • Argument: an unclassified declaration as written by the program author
    (name, short/long forms, help, index, required/multiple/takes_value,
    exclusion and dependency relations). Argument.classify() turns it into
    exactly one of the specs below.

- Specs (immutable once built)
  • Flag: named, presence-only switch counted by occurrences, e.g., -v/--verbose.
  • Option: named, value-bearing switch, e.g., -n <name> or --name=<name>.
  • Positional: bare, value-bearing argument identified by its 1-based index.

- Introspection & representation
  • Every spec is built by the Introspective metaclass: read-only properties for the
    names in __introspectable__, a stable __repr__ and a __rich_repr__.

Metadata (sanitized on construction)
- name: str, trimmed, non-empty, word characters and hyphens only.
- help: Unset | str (short help), non-empty when provided; becomes None when omitted.
- short: Unset | str, exactly one character other than '-', '=' or whitespace.
- long: Unset | str, non-empty, no leading '-', no '=' and no whitespace.
- index: int >= 1 (Positional only).
- required / multiple / takes_value: bool.
- excludes / requires: iterables of argument names; duplicates collapse, order is
  kept, and an argument cannot name itself.

Classification (Argument.classify)
- index given            → Positional (no short/long, not multiple, not takes_value)
- takes_value            → Option (needs short or long)
- otherwise              → Flag (needs short or long, can never be required)

Quick example:
    >>> from argmatch import Argument, Flag, Option, Positional
    >>> Argument("config", "c", "config", "Use a config").classify()
    flag(name='config', short='c', long='config', help='Use a config', ...)
    >>> Argument("name", "n", "name", takes_value=True).classify()
    option(name='name', short='n', long='name', help=None, ...)
    >>> Positional("file", 1, "File to read", required=True)
    positional(name='file', index=1, help='File to read', ...)
"""
import re
from collections.abc import Iterable

from .utils import *


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the metadata shared by every argument kind.

    - name: required, non-empty after trimming, made of word characters and hyphens.
    - help: optional; trimmed, non-empty when provided, None when omitted.
    - required / multiple / takes_value (whichever are present): booleans.

    Raises
    - TypeError: wrong types.
    - ValueError: empty or malformed strings.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"\w[\w-]*", name):
        raise ValueError(f"{cls.__typename__} 'name' must contain only letters, digits, underscores or hyphens")
    metadata["name"] = name

    if not isinstance(help := metadata["help"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = coalesce(help)

    for field in ("required", "multiple", "takes_value"):
        if field in metadata and not isinstance(metadata[field], bool):
            raise TypeError(f"{cls.__typename__} {field!r} must be a boolean")


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate the short and long forms of a named argument.

    - short: a single character; '-', '=' and whitespace are rejected since they
      would be ambiguous inside a cluster such as "-abc".
    - long: a name without the leading "--"; it cannot start with '-' nor contain
      '=' (reserved for inline values) or whitespace.

    Both become None when omitted. Whether at least one of them is required is
    decided by the caller (Flag/Option), not here.
    """
    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and (len(short) != 1 or short in "-=" or short.isspace()):
        raise ValueError(f"{cls.__typename__} 'short' must be a single character other than '-' or '='")
    metadata["short"] = coalesce(short)

    if not isinstance(long := metadata["long"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif isinstance(long, str) and not (long := long.strip()):
        raise ValueError(f"{cls.__typename__} 'long' cannot be empty")
    elif isinstance(long, str) and not re.fullmatch(r"[^\s=-][^\s=]*", long):
        raise ValueError(f"{cls.__typename__} 'long' must be given without dashes and cannot contain '=' or spaces")
    metadata["long"] = coalesce(long)


def _sanitize_relations(cls, metadata, /):
    """
    Internal: validate the 'excludes' and 'requires' relations.

    Each relation is an iterable of argument names (a bare string is rejected
    because it would be read character by character). Duplicates collapse while
    keeping the declared order, and a name cannot point to its own argument.
    """
    for field in ("excludes", "requires"):
        if isinstance(relation := metadata[field], str) or not isinstance(relation, Iterable):
            raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of names")

        names = {}
        for name in relation:
            if not isinstance(name, str):
                raise TypeError(f"{cls.__typename__} {field!r} names must be strings")
            elif not (name := name.strip()):
                raise ValueError(f"{cls.__typename__} {field!r} names cannot be empty-strings")
            elif name == metadata["name"]:
                raise ValueError(f"{cls.__typename__} {metadata['name']!r} cannot {field[:-1]} itself")
            names[name] = None
        metadata[field] = tuple(names)


def _sanitize_index(cls, metadata, /):
    """
    Internal: positional indexes are 1-based integers (booleans are rejected).
    """
    if isinstance(index := metadata["index"], bool) or not isinstance(index, int | Unset):
        raise TypeError(f"{cls.__typename__} 'index' must be an integer")
    elif isinstance(index, int) and index < 1:
        raise ValueError(f"{cls.__typename__} 'index' must be a positive integer")
    metadata["index"] = coalesce(index)


def _build(cls, metadata, /):
    self = object.__new__(cls)
    for name, value in metadata.items():
        setattr(self, "_" + name, value)
    return self


class Argument(metaclass=Introspective):
    """
    Unclassified argument declaration.

    This is the builder-facing form: it accepts every field any spec kind may
    need and leaves the decision of what the argument *is* to classify(), which
    the registry calls when the argument is added. Field-level validation
    (types, shapes) happens here; structural conflicts are reported by classify().
    """

    __introspectable__ = (
        "name",
        "short",
        "long",
        "help",
        "index",
        "required",
        "multiple",
        "takes_value",
        "excludes",
        "requires",
    )

    def __new__(
            cls,
            name,
            /,
            short=Unset,
            long=Unset,
            help=Unset,
            *,
            index=Unset,
            required=False,
            multiple=False,
            takes_value=False,
            excludes=(),
            requires=(),
    ):
        metadata = {
            "name": name,
            "short": short,
            "long": long,
            "help": help,
            "index": index,
            "required": required,
            "multiple": multiple,
            "takes_value": takes_value,
            "excludes": excludes,
            "requires": requires,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_index(cls, metadata)
        _sanitize_relations(cls, metadata)
        return _build(cls, metadata)

    def classify(self):
        """
        Turn this declaration into a Flag, an Option or a Positional.

        Raises
        - TypeError: when the declared fields contradict the chosen kind (an index
          combined with short/long, multiple or takes_value; a required flag; a
          flag or option with neither a short nor a long form).
        """
        relations = {"excludes": self.excludes, "requires": self.requires}
        help = Unset if self.help is None else self.help

        if self.index is not None:
            if self.short is not None or self.long is not None:
                raise TypeError(f"argument {self.name!r} cannot have both an index and a short or long form")
            if self.multiple:
                raise TypeError(f"argument {self.name!r} has an index, and positional arguments cannot be repeated")
            if self.takes_value:
                raise TypeError(f"argument {self.name!r} has an index, and positional arguments cannot take an extra value")
            return Positional(self.name, self.index, help, required=self.required, **relations)

        forms = (
            Unset if self.short is None else self.short,
            Unset if self.long is None else self.long,
            help,
        )

        if self.takes_value:
            return Option(self.name, *forms, required=self.required, multiple=self.multiple, **relations)

        if self.required:
            raise TypeError(f"argument {self.name!r} is a flag, and flags cannot be required")
        return Flag(self.name, *forms, multiple=self.multiple, **relations)


class Flag(metaclass=Introspective):
    """
    Named, presence-only switch.

    A flag records how many times it appeared; without 'multiple' a second
    appearance is a parse fault. Flags are never required and never take a value.
    """

    __introspectable__ = (
        "name",
        "short",
        "long",
        "help",
        "required",
        "multiple",
        "excludes",
        "requires",
    )

    def __new__(cls, name, /, short=Unset, long=Unset, help=Unset, *, multiple=False, excludes=(), requires=()):
        metadata = {
            "name": name,
            "short": short,
            "long": long,
            "help": help,
            "required": False,
            "multiple": multiple,
            "excludes": excludes,
            "requires": requires,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_relations(cls, metadata)
        if metadata["short"] is None and metadata["long"] is None:
            raise TypeError(f"{cls.__typename__} {metadata['name']!r} needs a short or a long form")
        return _build(cls, metadata)

    @property
    def label(self):
        """The form shown to users in messages: '--long' when available, otherwise '-s'."""
        return f"--{self.long}" if self.long else f"-{self.short}"


class Option(metaclass=Introspective):
    """
    Named, value-bearing switch.

    Values are supplied as the following token ("-n bob", "--name bob") or
    inline with the long form ("--name=bob"); short forms never take inline
    values. With 'multiple' the option may repeat and collects every value in
    order.
    """

    __introspectable__ = (
        "name",
        "short",
        "long",
        "help",
        "required",
        "multiple",
        "excludes",
        "requires",
    )

    def __new__(
            cls,
            name,
            /,
            short=Unset,
            long=Unset,
            help=Unset,
            *,
            required=False,
            multiple=False,
            excludes=(),
            requires=(),
    ):
        metadata = {
            "name": name,
            "short": short,
            "long": long,
            "help": help,
            "required": required,
            "multiple": multiple,
            "excludes": excludes,
            "requires": requires,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_relations(cls, metadata)
        if metadata["short"] is None and metadata["long"] is None:
            raise TypeError(f"{cls.__typename__} {metadata['name']!r} takes a value, so it needs a short or a long form")
        return _build(cls, metadata)

    @property
    def label(self):
        """The form shown to users in messages: '--long' when available, otherwise '-s'."""
        return f"--{self.long}" if self.long else f"-{self.short}"

    @property
    def usage(self):
        """Inline usage form of a required option: '-s <name>' or '--long=<name>'."""
        if self.short:
            return f"-{self.short} <{self.name}>"
        return f"--{self.long}=<{self.name}>"


class Positional(metaclass=Introspective):
    """
    Bare, value-bearing argument filled by position.

    Positionals are filled in ascending index order by the tokens that are not
    switches or subcommand names; each holds exactly one value.
    """

    __introspectable__ = (
        "name",
        "index",
        "help",
        "required",
        "excludes",
        "requires",
    )

    def __new__(cls, name, index, /, help=Unset, *, required=False, excludes=(), requires=()):
        metadata = {
            "name": name,
            "index": index,
            "help": help,
            "required": required,
            "excludes": excludes,
            "requires": requires,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_relations(cls, metadata)
        _sanitize_index(cls, metadata)
        return _build(cls, metadata)

    @property
    def label(self):
        """The form shown to users in messages and usage lines: '<name>'."""
        return f"<{self.name}>"


__all__ = (
    "Argument",
    "Flag",
    "Option",
    "Positional",
)
