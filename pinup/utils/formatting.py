"""
Utility module for console formatting: ANSI colors and plain text tables.
"""

import re
from enum import Enum
from typing import Any, Dict, List


class ColorCode(Enum):
    RED = '\x1b[31m'
    GREEN = '\x1b[32m'
    YELLOW = '\x1b[33m'
    BLUE = '\x1b[34m'
    MAGENTA = '\x1b[35m'
    CYAN = '\x1b[36m'
    WHITE = '\x1b[37m'
    DEFAULT = '\x1b[39m'


_RESET = '\x1b[0m'
_ANSI_ESCAPE = re.compile(
    r'[\u001b\u009b][\[()#;?]*(?:[0-9]{1,4}(?:;[0-9]{0,4})*)?[0-9A-ORZcf-nqry=><]'
)


def colorize(text: str, color: ColorCode = ColorCode.DEFAULT) -> str:
    """Wrap text in the ANSI code of the given color."""
    return f"{color.value}{text}{_RESET}"


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences, e.g. before writing to a log file."""
    return _ANSI_ESCAPE.sub('', text)


def format_table(rows: List[Dict[str, Any]]) -> str:
    """
    Render a list of dicts as an aligned plain text table.

    Columns come from the keys of the first row, in order.

    Args:
        rows: Table rows, all with the same keys

    Returns:
        Table as a multi-line string ('' for no rows)

    Example:
        format_table([{'method': 'get', 'path': '/users'}])
        # method | path
        # -------+-------
        # get    | /users
    """
    if not rows:
        return ''

    columns = list(rows[0].keys())
    cells = [[str(row.get(column, '')) for column in columns] for row in rows]
    widths = [
        max(len(column), *(len(line[index]) for line in cells))
        for index, column in enumerate(columns)
    ]

    def render(values):
        return ' | '.join(value.ljust(width) for value, width in zip(values, widths)).rstrip()

    separator = '-+-'.join('-' * width for width in widths)
    return '\n'.join([render(columns), separator] + [render(line) for line in cells])
