"""
Command output formatter.

Each completed unit of work (a listed key, a transferred file, ...)
is emitted once as either a text line, a JSON document per line, or
a YAML document.
"""
import json
import sys
from datetime import datetime
from typing import Any, Dict, IO, Optional

import yaml

from ...exceptions import ConfigurationError

SUPPORTED_FORMATS = ('text', 'json', 'yaml', 'yml')


def _json_default(value):
    """Serialize values the json module does not know about."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return str(value)


class OutputFormatter:
    """Renders command events in the configured output format.

    Args:
        output_format: One of ``text``, ``json``, ``yaml`` or ``yml``
        stream: Writable text stream (defaults to stdout)
    """

    def __init__(self, output_format: str = 'text', stream: Optional[IO[str]] = None):
        if output_format not in SUPPORTED_FORMATS:
            raise ConfigurationError(
                f"unsupported output format: {output_format} "
                f"(accepts {', '.join(SUPPORTED_FORMATS)})"
            )
        self.format = 'yaml' if output_format == 'yml' else output_format
        self.stream = stream if stream is not None else sys.stdout

    @property
    def is_text(self) -> bool:
        return self.format == 'text'

    def emit(self, fields: Dict[str, Any], template: str, *args) -> None:
        """Emit one event.

        Args:
            fields: Structured values for json/yaml output
            template: ``%``-style line used for text output
            *args: Values substituted into *template*
        """
        if self.format == 'json':
            self.stream.write(json.dumps(fields, default=_json_default) + "\n")
        elif self.format == 'yaml':
            self.stream.write(yaml.safe_dump(
                _yaml_safe(fields),
                explicit_start=True,
                default_flow_style=False,
                sort_keys=False,
            ))
        else:
            line = template % args if args else template
            if not line.endswith("\n"):
                line += "\n"
            self.stream.write(line)
        self.stream.flush()


def _yaml_safe(fields):
    # safe_dump handles datetime natively, but not bytes or arbitrary objects
    safe = {}
    for key, value in fields.items():
        if isinstance(value, bytes):
            value = value.decode('utf-8', errors='replace')
        elif not isinstance(value, (str, int, float, bool, datetime, type(None), list, dict)):
            value = str(value)
        safe[key] = value
    return safe
