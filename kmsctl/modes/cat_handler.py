"""Handler for the 'cat' subcommand.

Usage:
    kmsctl cat --bucket <BUCKET> KEY [KEY ...]
"""
import sys

from .base_handler import ModeHandler
from ..utils.display.display_utils import print_error


class CatHandler(ModeHandler):
    """Handles ``kmsctl cat``: write decrypted file contents to stdout."""

    REQUIRED_OPTIONS = ('bucket',)

    def validate_prerequisites(self) -> bool:
        if not super().validate_prerequisites():
            return False
        if not getattr(self.args, 'paths', None):
            print_error("you have not specified any files to display")
            return False
        return True

    def execute_workflow(self, context):
        stream = getattr(sys.stdout, 'buffer', sys.stdout)
        for _, content in self.app.transfer.read_objects(self.option('bucket'), self.args.paths):
            stream.write(content)
        stream.flush()
