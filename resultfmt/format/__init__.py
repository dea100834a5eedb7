"""Value formatting: escaping, width measurement and formatters."""

from resultfmt.format.escape import format_bytes, format_float, str_width
from resultfmt.format.formatter import EscapeFormatter, Formatter

__all__ = ["EscapeFormatter", "Formatter", "format_bytes", "format_float", "str_width"]
