"""Parsing of spreadsheet number format codes into their sections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class FormatError(ValueError):
    """Raised when a number format code cannot be parsed."""


@dataclass(frozen=True)
class FormatOptions:
    """One section of a number format, reduced to its number-formatting core."""

    full_format_string: str = ""
    reduced_format_string: str = ""
    prefix: str = ""
    suffix: str = ""
    show_percent: bool = False
    is_time_format: bool = False


@dataclass(frozen=True)
class ParsedNumberFormat:
    """A full number format split into positive, negative, zero and text sections."""

    num_fmt: str
    is_time_format: bool = False
    negative_format_expects_positive: bool = False
    positive_format: Optional[FormatOptions] = None
    negative_format: Optional[FormatOptions] = None
    zero_format: Optional[FormatOptions] = None
    text_format: Optional[FormatOptions] = None
    parse_error: Optional[FormatError] = None


GENERAL = FormatOptions(full_format_string="general", reduced_format_string="general")
FALLBACK_ERROR_FORMAT = GENERAL

# Order matters: the two-character codes must be tried before single ones.
FORMATTING_CHARACTERS = (
    "0/", "#/", "?/", "E-", "E+", "e-", "e+", "0", "#", "?", ".", ",", "@", "*",
)

TIME_FORMAT_CHARACTERS = (
    "M", "D", "Y", "YY", "YYYY", "MM", "yyyy", "m", "d", "yy", "h", "m",
    "AM/PM", "A/P", "am/pm", "a/p", "r", "g", "e", "b1", "b2",
    "[hh]", "[h]", "[mm]", "[m]",
    "s.0000", "s.000", "s.00", "s.0", "s",
    "[ss].0000", "[ss].000", "[ss].00", "[ss].0", "[ss]",
    "[s].0000", "[s].000", "[s].00", "[s].0", "[s]",
    "上", "午", "下",
)

_LITERAL_CHARACTERS = frozenset("$-+/()!^&'~{}<>=: ")


def _match_prefix(text: str, candidates: tuple[str, ...]) -> Optional[str]:
    return next((c for c in candidates if text.startswith(c)), None)


def compare_format_string(fmt1: str, fmt2: str) -> bool:
    """Compare format codes, treating "" and any casing of "general" as equal."""
    if fmt1 == fmt2:
        return True
    if fmt1 == "" or fmt1.casefold() == "general":
        fmt1 = "general"
    if fmt2 == "" or fmt2.casefold() == "general":
        fmt2 = "general"
    return fmt1 == fmt2


def split_format_on_semicolon(format: str) -> list[str]:
    """Split a format code into sections, ignoring escaped or quoted semicolons."""
    sections = []
    start = 0
    i = 0
    while i < len(format):
        ch = format[i]
        if ch == ";":
            sections.append(format[start:i])
            start = i + 1
        elif ch == "\\":
            i += 1
        elif ch == '"':
            end = format.find('"', i + 1)
            if end == -1:
                raise FormatError("invalid format string, unmatched double quote")
            i = end
        i += 1
    sections.append(format[start:])
    return sections


def split_format_and_suffix_format(format: str) -> tuple[str, str]:
    """Split off the leading run of formatting characters from what follows."""
    i = 0
    while i < len(format):
        special = _match_prefix(format[i:], FORMATTING_CHARACTERS)
        if special is None:
            break
        i += len(special)
    return format[:i], format[i:]


def parse_literals(format: str) -> tuple[str, str, bool]:
    """Read literal text up to the first formatting character.

    Returns the literal text, the rest of the format starting at the first
    formatting character (or "" if none), and whether a percent sign was seen.
    """
    prefix: list[str] = []
    show_percent = False
    i = 0
    while i < len(format):
        rest = format[i:]
        ch = rest[0]
        if ch == "\\":
            if len(rest) > 1:
                i += 1
                prefix.append(rest[1])
        elif ch == "_":
            if len(rest) > 1:
                i += 1
        elif ch == "*":
            pass  # fill character; there is no cell width to fill here
        elif ch == '"':
            end = rest.find('"', 1)
            if end == -1:
                raise FormatError("invalid formatting code, unmatched double quote")
            prefix.append(rest[1:end])
            i += end
        elif ch == "%":
            show_percent = True
            prefix.append("%")
        elif ch == "[":
            bracket = rest.find("]")
            if bracket == -1:
                raise FormatError("invalid formatting code, invalid brackets")
            if len(rest) > 2 and rest[1] == "$":
                dash = rest.find("-")
                if dash == -1 or dash >= bracket:
                    raise FormatError(
                        "invalid formatting code, invalid currency annotation"
                    )
                prefix.append(rest[2:dash])
            i += bracket
        elif ch in _LITERAL_CHARACTERS:
            prefix.append(ch)
        elif _match_prefix(rest, FORMATTING_CHARACTERS) is not None:
            return "".join(prefix), rest, show_percent
        else:
            raise FormatError(
                "invalid formatting code: unsupported or unescaped characters"
            )
        i += 1
    return "".join(prefix), "", show_percent


def parse_number_format_section(full_format: str) -> FormatOptions:
    """Parse one format section into prefix, core format code and suffix."""
    reduced = full_format.strip()
    if compare_format_string(reduced, "general"):
        return GENERAL

    prefix, reduced, percent_before = parse_literals(reduced)
    reduced, suffix_format = split_format_and_suffix_format(reduced)
    suffix, remaining, percent_after = parse_literals(suffix_format)
    if remaining:
        raise FormatError("invalid or unsupported format string")

    return FormatOptions(
        full_format_string=full_format,
        reduced_format_string=reduced,
        prefix=prefix,
        suffix=suffix,
        show_percent=percent_before or percent_after,
    )


def is_time_format(format: str) -> bool:
    """Tell whether a format code describes a date or time."""
    found = False
    i = 0
    while i < len(format):
        rest = format[i:]
        ch = rest[0]
        if ch in ("\\", "_"):
            if len(rest) > 1:
                i += 1
        elif ch == "*" or ch == "," or ch in _LITERAL_CHARACTERS:
            pass
        elif ch == '"':
            end = rest.find('"', 1)
            if end == -1:
                return False
            i += end + 1
        else:
            special = _match_prefix(rest, TIME_FORMAT_CHARACTERS)
            if special is not None:
                found = True
                i += len(special) - 1
            elif ch == "[":
                end = rest.find("]", 1)
                if end == -1:
                    return False
                i += end
            else:
                return False
        i += 1
    return found


def is_12_hour_time(format: str) -> bool:
    """Tell whether a time format code uses a 12-hour clock."""
    return any(marker in format for marker in ("am/pm", "AM/PM", "a/p", "A/P"))


def parse_full_number_format_string(num_fmt: str) -> ParsedNumberFormat:
    """Parse a complete format code; invalid sections fall back to General."""
    if is_time_format(num_fmt):
        return ParsedNumberFormat(
            num_fmt=num_fmt,
            is_time_format=True,
            text_format=GENERAL,
        )

    parse_error: Optional[FormatError] = None
    options: list[FormatOptions] = []
    try:
        sections = split_format_on_semicolon(num_fmt)
    except FormatError as exc:
        options.append(FALLBACK_ERROR_FORMAT)
        parse_error = exc
    else:
        for section in sections:
            try:
                options.append(parse_number_format_section(section))
            except FormatError as exc:
                options.append(FALLBACK_ERROR_FORMAT)
                parse_error = exc

    if len(options) > 4:
        options = [FALLBACK_ERROR_FORMAT]
        parse_error = FormatError("invalid number format, too many format sections")

    if len(options) == 1:
        only = options[0]
        return ParsedNumberFormat(
            num_fmt=num_fmt,
            positive_format=only,
            negative_format=only,
            zero_format=only,
            text_format=only if "@" in only.full_format_string else GENERAL,
            parse_error=parse_error,
        )
    if len(options) == 2:
        positive, negative = options
        return ParsedNumberFormat(
            num_fmt=num_fmt,
            negative_format_expects_positive=True,
            positive_format=positive,
            negative_format=negative,
            zero_format=positive,
            text_format=GENERAL,
            parse_error=parse_error,
        )
    positive, negative, zero = options[:3]
    text = options[3] if len(options) == 4 else GENERAL
    return ParsedNumberFormat(
        num_fmt=num_fmt,
        negative_format_expects_positive=True,
        positive_format=positive,
        negative_format=negative,
        zero_format=zero,
        text_format=text,
        parse_error=parse_error,
    )