"""Spreadsheet number format parsing, value formatting and HSL colour helpers."""

__version__ = "0.1.0"
__all__ = ["formatting", "hsl", "sections"]