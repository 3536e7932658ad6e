"""
app/parsing package marker.
"""

from app.parsing.csv_lines import DELIMITER, iter_lines, parse_header, split_values

__all__ = [
    "DELIMITER",
    "iter_lines",
    "parse_header",
    "split_values",
]
