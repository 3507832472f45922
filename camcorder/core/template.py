"""
Command templates.

A template is an ordered sequence of tokens. Each token is either a
Literal (copied verbatim) or a Placeholder (looked up in a resolution
context). Templates embed their own whitespace; resolve() never inserts
separators and never quotes values.

Example:
    template = CommandTemplate.of(
        "recordmydesktop --windowid ", Placeholder.WINDOW_ID,
        " -o ", Placeholder.OUTPUT_FILE,
    )
    template.resolve({Placeholder.WINDOW_ID: "0x15",
                      Placeholder.OUTPUT_FILE: "/tmp/out.ogv"})
    # 'recordmydesktop --windowid 0x15 -o /tmp/out.ogv'
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Tuple, Union

from camcorder.core.errors import UnresolvedPlaceholder


class Placeholder(Enum):
    """Placeholder kinds a template may reference."""
    OUTPUT_FILE = "output-file"
    INPUT_FILE = "input-file"
    WINDOW_ID = "window-id"
    TEMP_FILE = "temp-file"
    TEMP_DIR = "temp-dir"
    TEMP_OUTPUT_FILE = "temp-output-file"


@dataclass(frozen=True)
class Literal:
    """Literal command text."""
    text: str

    def __str__(self):
        return self.text


Token = Union[Literal, Placeholder]
ResolutionContext = Dict[Placeholder, str]


@dataclass(frozen=True)
class CommandTemplate:
    """Immutable, ordered sequence of tokens."""
    tokens: Tuple[Token, ...]

    def __post_init__(self):
        for token in self.tokens:
            if not isinstance(token, (Literal, Placeholder)):
                raise TypeError(f"Invalid template token: {token!r}")

    @classmethod
    def of(cls, *parts: Union[str, Token]) -> "CommandTemplate":
        """Build a template from plain strings and Placeholder members."""
        return cls(tuple(Literal(p) if isinstance(p, str) else p for p in parts))

    @property
    def placeholders(self) -> FrozenSet[Placeholder]:
        """Placeholder kinds this template needs."""
        return frozenset(t for t in self.tokens if isinstance(t, Placeholder))

    @property
    def command_name(self) -> str:
        """
        Name of the executable, i.e. the first word of the leading literal.

        Returns an empty string when the template starts with a placeholder.
        """
        if not self.tokens or not isinstance(self.tokens[0], Literal):
            return ""
        words = self.tokens[0].text.split()
        if not words:
            return ""
        return words[0].rsplit("/", 1)[-1]

    def resolve(self, context: Mapping[Placeholder, str]) -> str:
        return resolve(self, context)

    def describe(self) -> str:
        """Human-readable form with placeholders shown as <kind>."""
        return "".join(
            t.text if isinstance(t, Literal) else f"<{t.value}>" for t in self.tokens
        )

    def __str__(self):
        return self.describe()


def resolve(template: CommandTemplate, context: Mapping[Placeholder, str]) -> str:
    """
    Resolve a template into a command string.

    Args:
        template: Template to resolve
        context: Placeholder kind -> concrete value

    Returns:
        Concatenation of all literal texts and placeholder values, in order

    Raises:
        UnresolvedPlaceholder: A placeholder kind has no value in context
    """
    parts = []
    for token in template.tokens:
        if isinstance(token, Literal):
            parts.append(token.text)
        elif token in context:
            parts.append(str(context[token]))
        else:
            raise UnresolvedPlaceholder(token)
    return "".join(parts)
