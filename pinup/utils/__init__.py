# Utils package initialization
from pinup.utils.paths import normalize_path, split_path, join_path, as_list, to_flask_rule
from pinup.utils.formatting import ColorCode, colorize, strip_ansi, format_table

__all__ = [
    'normalize_path',
    'split_path',
    'join_path',
    'as_list',
    'to_flask_rule',
    'ColorCode',
    'colorize',
    'strip_ansi',
    'format_table'
]
