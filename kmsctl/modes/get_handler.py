"""Handler for the 'get' subcommand.

Usage:
    kmsctl get --bucket <BUCKET> [--output-dir DIR] [--recursive] [--flatten]
               [--filter REGEX] [--perms MODE] [PATH ...]
"""
from .base_handler import ModeHandler
from ..exceptions import ConfigurationError
from ..models.transfer import TransferRequest
from ..utils.file_utils import parse_perms


class GetHandler(ModeHandler):
    """Handles ``kmsctl get``: download files into the output directory."""

    REQUIRED_OPTIONS = ('bucket', 'output_dir')

    def prepare_context(self):
        perms = getattr(self.args, 'perms', None) or '0744'
        try:
            mode = parse_perms(perms)
        except ValueError as e:
            raise ConfigurationError(f"invalid file permissions: {perms}, {e}") from e

        return {
            'request': TransferRequest(
                bucket=self.option('bucket'),
                paths=getattr(self.args, 'paths', []),
                recursive=bool(getattr(self.args, 'recursive', False)),
                flatten=bool(getattr(self.args, 'flatten', False)),
                filter_pattern=getattr(self.args, 'filter', None) or '.*',
                output_dir=self.option('output_dir'),
                perms=mode,
            ),
        }

    def execute_workflow(self, context):
        self.app.transfer.materialize_objects(context['request'], callback=self._retrieved)

    def _retrieved(self, key, destination, content):
        self.output.emit(
            {
                "action": "get",
                "source": key,
                "destination": destination,
                "content": content.decode('utf-8', errors='replace'),
            },
            "retrieved the file: %s and wrote to: %s", key, destination,
        )
