# sheetfmt

Display spreadsheet cell values the way a spreadsheet application does, from
their number format codes (`0.00`, `[$$-409]0`, `0;(0);"zero"`, `yyyy-mm-dd`
and so on), plus small helpers to convert between RGB and HSL colours.

## Installation

```
pip install sheetfmt
```

## Formatting values

`sheetfmt.formatting.format_value` takes a format code, the cell's raw text,
its `CellType`, optional rich-text runs and whether the workbook uses the 1904
date system:

```python
from sheetfmt.formatting import CellType, format_value

format_value("[$$-409]0", "18.989999999999998", CellType.NUMERIC, None, False)
# '$19'

format_value("0;(0)", "-1", CellType.NUMERIC, None, False)
# '(1)'

format_value('0;(0);"zero";"Behold: "@', "asdf", CellType.STRING, None, False)
# 'Behold: asdf'

format_value("General", "1", CellType.BOOL, None, False)
# 'TRUE'
```

Error and date cells are returned unchanged. If a value cannot be formatted
(a non-numeric value in a numeric cell, a bool cell holding something other
than `0` or `1`, an unsupported text format), `FormattedValueError` is raised;
the raw value is kept on its `value` attribute.

Supported numeric cores are General, `@`, `0`, `0.0` to `0.0000` (with or
without a `#,##` grouping prefix, which is not rendered), `0.00e+00` and
`##0.0e+0`. Other cores fall back to the raw value. Prefixes and suffixes,
quoted and escaped literals, colours, conditions, currency annotations and
percent signs are handled.

Numbers in the General format switch to scientific notation when their
magnitude is below 1e-9 or at least 1e11:

```python
from sheetfmt.formatting import general_numeric_scientific

general_numeric_scientific("123456789012", True)
# '1.23456789012E+11'
```

Date and time formats turn spreadsheet serial numbers into text, honouring the
1900 and 1904 date systems:

```python
from sheetfmt.formatting import format_time

format_time("yyyy-mm-dd", "43831", False)
# '2020-01-01'
```

`format_numeric` renders a value through an already parsed format.

## Inspecting format codes

`sheetfmt.sections` parses format strings into their positive, negative, zero
and text sections:

```python
from sheetfmt.sections import is_time_format, parse_full_number_format_string

is_time_format("h:mm AM/PM")       # True
is_time_format("#,##0.00")         # False

parsed = parse_full_number_format_string("0;(0)")
parsed.negative_format.prefix      # '('
```

Invalid sections fall back to General and the problem is kept on
`parsed.parse_error`. Helpers such as `split_format_on_semicolon`,
`split_format_and_suffix_format`, `parse_literals`,
`parse_number_format_section`, `compare_format_string` and `is_12_hour_time`
are available for finer-grained work; malformed codes raise `FormatError`.

## Colours

```python
from sheetfmt.hsl import HSL, hsl_model, hsl_to_rgb, rgb_to_hsl

rgb_to_hsl(255, 0, 0)      # (0.0, 1.0, 0.5)
hsl_to_rgb(0.0, 1.0, 0.5)  # (255, 0, 0)
HSL(0.0, 1.0, 0.5).rgba()  # (65535, 0, 0, 65535)
hsl_model((65535, 0, 0))   # HSL(h=0.0, s=1.0, l=0.5)
```

## What it does not do

sheetfmt works on format codes and cell values given to it as strings. It does
not open, read or write spreadsheet files, and keeps no workbooks, sheets,
rows or styles of its own.

## Running the tests

```
pip install -e ".[test]"
pytest
```