"""
Argmatch result tree.

A successful parse produces one Matches per registry level that was visited:
- flags: name → FlagMatch (occurrence count)
- options: name → OptionMatch (occurrence count and the values in token order)
- positionals: name → PositionalMatch (the single value)
- subcommand: at most one SubcommandMatch (name and the nested Matches)

Everything is exposed read-only (mappingproxy / tuple views); the parser that
builds a tree is the only writer.

Quick example:
    >>> matches = command.parse(["-c", "-n", "bob", "input.txt"])
    >>> matches.is_present("config"), matches.value_of("name"), matches.value_of("file")
    (True, 'bob', 'input.txt')
"""
from .utils import *


class FlagMatch(metaclass=Introspective):
    __introspectable__ = ("name", "occurrences")

    def __new__(cls, name, /, occurrences=0):
        self = super().__new__(cls)
        self._name = name
        self._occurrences = occurrences
        return self


class OptionMatch(metaclass=Introspective):
    __introspectable__ = ("name", "occurrences", "values")

    def __new__(cls, name, /, occurrences=0, values=()):
        self = super().__new__(cls)
        self._name = name
        self._occurrences = occurrences
        self._values = list(values)
        return self


class PositionalMatch(metaclass=Introspective):
    __introspectable__ = ("name", "value")

    def __new__(cls, name, value, /):
        self = super().__new__(cls)
        self._name = name
        self._value = value
        return self


class SubcommandMatch(metaclass=Introspective):
    __introspectable__ = ("name", "matches")

    def __new__(cls, name, matches, /):
        self = super().__new__(cls)
        self._name = name
        self._matches = matches
        return self


class Matches(metaclass=Introspective):
    """
    Result of parsing one registry level.

    Lookups are by argument name (not by its short/long form). A positional
    counts as one occurrence of itself; absent arguments report 0 occurrences
    and None values.
    """

    __introspectable__ = ("flags", "options", "positionals", "subcommand")

    def __new__(cls, flags=(), options=(), positionals=(), subcommand=None):
        self = super().__new__(cls)
        self._flags = {match.name: match for match in flags}
        self._options = {match.name: match for match in options}
        self._positionals = {match.name: match for match in positionals}
        self._subcommand = subcommand
        return self

    def __contains__(self, name):
        return self.is_present(name)

    def is_present(self, name, /):
        """whether the named flag, option or positional was matched."""
        return name in self._flags or name in self._options or name in self._positionals

    def occurrences_of(self, name, /):
        """how many times the named argument appeared (0 when absent)."""
        if (match := self._flags.get(name) or self._options.get(name)) is not None:
            return match.occurrences
        return int(name in self._positionals)

    def value_of(self, name, /):
        """
        first value of the named option, or the value of the named positional.

        flags carry no value, so they always yield None.
        """
        if name in self._positionals:
            return self._positionals[name].value
        if (match := self._options.get(name)) is not None and match.values:
            return match.values[0]
        return None

    def values_of(self, name, /):
        """every value of the named option (in token order) as a tuple, or None when absent."""
        if name in self._positionals:
            return (self._positionals[name].value,)
        if (match := self._options.get(name)) is not None:
            return match.values
        return None

    @property
    def subcommand_name(self):
        """name of the recognized subcommand, or None."""
        return self._subcommand.name if self._subcommand is not None else None

    def subcommand_matches(self, name, /):
        """nested matches of the named subcommand, or None when another (or none) was used."""
        if self._subcommand is not None and self._subcommand.name == name:
            return self._subcommand.matches
        return None


__all__ = (
    "FlagMatch",
    "OptionMatch",
    "PositionalMatch",
    "SubcommandMatch",
    "Matches",
)
