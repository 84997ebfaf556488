import pytest
from hypothesis import given
from hypothesis import strategies as st

from sheetfmt.sections import (
    FormatError,
    compare_format_string,
    is_12_hour_time,
    is_time_format,
    parse_full_number_format_string,
    parse_literals,
    parse_number_format_section,
    split_format_and_suffix_format,
    split_format_on_semicolon,
)

NOT_TIME = [
    "General", "0", "0.00", "#,##0", "#,##0.00", "0%", "0.00%", "0.00E+00",
]

TIME = [
    "mm-dd-yy", "d-mmm-yy", "d-mmm", "mmm-yy", "h:mm AM/PM", "h:mm:ss AM/PM",
    "h:mm", "h:mm:ss", "m/d/yy h:mm", "mm:ss", "[h]:mm:ss", "mmss.0",
    "[$-404]e/m/d", 'yyyy"年"m"月"', '[$-404]e"年"', 'm"月"d"日" m"月"d"日"',
    '[$-404]e"年"m"月"d"日"', 'm"月"d"日"', " m/d/yy", "m-d-yy",
    'yyyy"年"m"月"d"日"', 'hh"時"mm"分"', 'h"时"mm"分"', 'hh"時"mm"分"ss"秒"',
    'h"时"mm"分"ss"秒"', '上午/下午 hh"時"mm"分"ss"秒"', '上午/下午 h"时"mm"分"ss"秒"',
    "上午/下午", 'hh"時"mm"分" yyyy"年"m"月"', 'hh"時"mm"分"ss"秒 " m"月"d"日"',
    "[$-409]M/D/YYYY", 'hh"時"mm"分" 上午/下午 h"时"mm"分"', "下午",
    'yyyy"5E74"m"6708"', '[$-404]e"5E74"m"6708"d"65E5"', 'm"6708"d"65E5"',
    "m/d/yy",
]


@pytest.mark.parametrize("fmt", NOT_TIME)
def test_number_formats_are_not_time(fmt):
    assert is_time_format(fmt) is False


@pytest.mark.parametrize("fmt", TIME)
def test_time_formats_detected(fmt):
    assert is_time_format(fmt) is True


@pytest.mark.parametrize(
    "fmt, prefix, reduced, suffix",
    [
        ("[red]0", "", "0", ""),
        ("[blue]0", "", "0", ""),
        ("[color50]0", "", "0", ""),
        ("[$$-409]0", "$", "0", ""),
        ("[$¥-409]0", "¥", "0", ""),
        ("[$€-409]0", "€", "0", ""),
        ("[$£-409]0", "£", "0", ""),
        ("[$USD-409] 0", "USD ", "0", ""),
        ("0[$USD-409]", "", "0", "USD"),
        ("-[$USD-409]0", "-USD", "0", ""),
        ("\\[0", "[", "0", ""),
        ('"["0', "[", "0", ""),
        ("_[0", "", "0", ""),
        ('"asdf"0', "asdf", "0", ""),
        ('"$"0', "$", "0", ""),
        ("$0", "$", "0", ""),
        (
            "$-+/()!^&'~{}<>=: 0 :=><}{~'&^)(/+-$",
            "$-+/()!^&'~{}<>=: ",
            "0",
            " :=><}{~'&^)(/+-$",
        ),
    ],
)
def test_section_literals(fmt, prefix, reduced, suffix):
    options = parse_number_format_section(fmt)
    assert (options.prefix, options.reduced_format_string, options.suffix) == (
        prefix,
        reduced,
        suffix,
    )
    assert options.show_percent is False
    assert options.full_format_string == fmt


def test_percent_anywhere_sets_show_percent():
    options = parse_number_format_section("%0")
    assert options.show_percent is True
    assert options.prefix == "%"
    assert options.reduced_format_string == "0"


def test_general_section_is_normalised():
    options = parse_number_format_section("  General ")
    assert options.reduced_format_string == "general"
    assert options.full_format_string == "general"


@pytest.mark.parametrize("fmt", ['"abc', "[red0", "[$USD]0", "0 a", "x0"])
def test_invalid_sections_raise(fmt):
    with pytest.raises(FormatError):
        parse_number_format_section(fmt)


def test_two_sections_negative_in_parentheses():
    parsed = parse_full_number_format_string("0;(0)")
    assert parsed.negative_format_expects_positive is True
    assert parsed.positive_format.reduced_format_string == "0"
    assert parsed.zero_format is parsed.positive_format
    assert (parsed.negative_format.prefix, parsed.negative_format.suffix) == ("(", ")")
    assert parsed.text_format.reduced_format_string == "general"
    assert parsed.parse_error is None


def test_three_sections_zero_text():
    parsed = parse_full_number_format_string('0;(0);"zero"')
    assert parsed.zero_format.prefix == "zero"
    assert parsed.zero_format.reduced_format_string == ""
    assert parsed.text_format.reduced_format_string == "general"


@pytest.mark.parametrize(
    "fmt, prefix",
    [
        ('0;(0);"zero";"Behold: "@', "Behold: "),
        ('0;(0);"zero";"Behold": @', "Behold: "),
        ('0;(0);"zero";"Behold; "@', "Behold; "),
    ],
)
def test_four_sections_text_format(fmt, prefix):
    parsed = parse_full_number_format_string(fmt)
    assert parsed.text_format.prefix == prefix
    assert parsed.text_format.reduced_format_string == "@"


def test_single_section_with_at_is_text_format():
    parsed = parse_full_number_format_string('"Note: "@')
    assert parsed.text_format is parsed.positive_format
    assert parsed.negative_format_expects_positive is False


def test_time_format_keeps_general_text():
    parsed = parse_full_number_format_string("h:mm")
    assert parsed.is_time_format is True
    assert parsed.text_format.reduced_format_string == "general"
    assert parsed.positive_format is None


def test_unmatched_quote_falls_back_to_general():
    parsed = parse_full_number_format_string('0;"oops')
    assert isinstance(parsed.parse_error, FormatError)
    assert parsed.positive_format.reduced_format_string == "general"


def test_too_many_sections_falls_back_to_general():
    parsed = parse_full_number_format_string("0;0;0;0;0")
    assert isinstance(parsed.parse_error, FormatError)
    assert parsed.positive_format.reduced_format_string == "general"
    assert parsed.negative_format_expects_positive is False


def test_split_skips_quoted_and_escaped_semicolons():
    assert split_format_on_semicolon('0;"a;b"0;\\;0') == ["0", '"a;b"0', "\\;0"]


def test_split_unmatched_quote_raises():
    with pytest.raises(FormatError):
        split_format_on_semicolon('0;"abc')


@given(st.text(alphabet="0#.;ab ", max_size=30))
def test_split_plain_matches_str_split(text):
    assert split_format_on_semicolon(text) == text.split(";")


def test_split_format_and_suffix():
    assert split_format_and_suffix_format("#,##0.00 USD") == ("#,##0.00", " USD")
    assert split_format_and_suffix_format("0.00E+00") == ("0.00E+00", "")


def test_parse_literals_returns_rest():
    assert parse_literals('"x"$0.0') == ("x$", "0.0", False)
    assert parse_literals("%") == ("%", "", True)


def test_compare_format_string():
    assert compare_format_string("", "General") is True
    assert compare_format_string("GENERAL", "general") is True
    assert compare_format_string("0", "0.00") is False


@given(st.text(max_size=10), st.text(max_size=10))
def test_compare_is_symmetric(a, b):
    assert compare_format_string(a, b) == compare_format_string(b, a)


@pytest.mark.parametrize(
    "fmt, expected",
    [("h:mm AM/PM", True), ("h:mm a/p", True), ("hh:mm", False), ("am/pm", True)],
)
def test_is_12_hour_time(fmt, expected):
    assert is_12_hour_time(fmt) is expected