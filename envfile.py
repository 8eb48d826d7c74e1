# envfile.py
"""
.env export of the loaded variable set.
"""

from typing import Iterable, Optional

from models import EditableEnvVar

EXPORT_FILENAME = '.env'


def _quote(value: Optional[str]) -> str:
    escaped = (value or '').replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


def serialize_env(variables: Iterable[EditableEnvVar]) -> str:
    """
    One KEY="VALUE" line per variable, in the given order.
    """
    return '\n'.join(f'{var.name}={_quote(var.value)}' for var in variables)
