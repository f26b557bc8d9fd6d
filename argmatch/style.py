"""
Argmatch styling (semantic tones rendered through rich).

Scope
- Tone: the semantic classes the renderers ask for (success, warning, error, plain).
- ColorWhen: colour policy (auto, always, never).
- Colorizer / paint(): turn a string into a rich Text in a given tone under a policy,
  and build a matching Console for output.

Palette
- Defaults: success → green, warning → yellow, error → bold red, plain → no style.
- The host application can override any entry by defining a mapping named
  __styles__ in __main__, keyed by tone value ("success", "warning", ...).

Callers only rely on the text of what is returned; styling is a rendering concern.
"""
from collections import defaultdict
from enum import Enum

from rich.console import Console
from rich.text import Text


class Tone(Enum):
    """semantic class of a rendered fragment."""
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    PLAIN = "plain"


class ColorWhen(Enum):
    """
    colour policy.

    - AUTO: style fragments and let the console decide (terminal detection, NO_COLOR, ...).
    - ALWAYS: style fragments and force terminal output.
    - NEVER: emit plain fragments on a console without colours.
    """
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def _palette():
    return defaultdict(str, {
        "success": "green",
        "warning": "yellow",
        "error": "bold red",
        "plain": "",
    } | getattr(__import__("__main__"), "__styles__", {}))


def paint(text, /, tone=Tone.PLAIN, when=ColorWhen.AUTO):
    """
    Render a string (or Text) in the given tone under the given colour policy.

    Returns a rich Text whose plain content is always the input text.
    """
    if not isinstance(tone, Tone):
        raise TypeError("paint() 'tone' must be a Tone")
    if not isinstance(when, ColorWhen):
        raise TypeError("paint() 'when' must be a ColorWhen")
    if isinstance(text, Text):
        return text.copy() if when is not ColorWhen.NEVER else Text(text.plain)
    if not isinstance(text, str):
        raise TypeError("paint() argument must be a string")
    if when is ColorWhen.NEVER:
        return Text(text)
    return Text(text, _palette()[tone.value])


class Colorizer:
    """
    Tone helpers bound to one colour policy.

    >>> colorizer = Colorizer(ColorWhen.NEVER)
    >>> colorizer.error("boom").plain
    'boom'
    """

    def __init__(self, when=ColorWhen.AUTO):
        if not isinstance(when, ColorWhen):
            raise TypeError("Colorizer() argument must be a ColorWhen")
        self.when = when

    def good(self, text, /):
        return paint(text, Tone.SUCCESS, self.when)

    def warning(self, text, /):
        return paint(text, Tone.WARNING, self.when)

    def error(self, text, /):
        return paint(text, Tone.ERROR, self.when)

    def none(self, text, /):
        return paint(text, Tone.PLAIN, self.when)

    def console(self, *, file=None, width=None):
        """
        Build a console honoring this policy (standard output unless 'file' is given).
        """
        match self.when:
            case ColorWhen.ALWAYS:
                return Console(file=file, width=width, force_terminal=True, highlight=False)
            case ColorWhen.NEVER:
                return Console(file=file, width=width, color_system=None, no_color=True, highlight=False)
            case _:
                return Console(file=file, width=width, highlight=False)

    def __repr__(self):
        return f"colorizer(when={self.when.value!r})"


__all__ = (
    "Tone",
    "ColorWhen",
    "Colorizer",
    "paint",
)
