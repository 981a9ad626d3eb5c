"""List handler: lists the files held in a bucket.

Usage:
    kmsctl list --bucket <BUCKET> [--long] [--no-recursive] [PATH ...]
"""
from .base_handler import ModeHandler
from ..models.transfer import TransferRequest
from ..services.traversal import compile_filter, select_objects
from ..utils.display.display_utils import format_timestamp


class ListHandler(ModeHandler):
    """Handles ``kmsctl list``: one line per file under each path."""

    REQUIRED_OPTIONS = ('bucket',)

    def prepare_context(self):
        # compiled before any listing so a bad filter does no work
        return {
            'pattern': compile_filter(getattr(self.args, 'filter', None) or '.*'),
            'request': TransferRequest(
                bucket=self.option('bucket'),
                paths=getattr(self.args, 'paths', []),
                recursive=bool(getattr(self.args, 'recursive', True)),
            ),
        }

    def execute_workflow(self, context):
        request = context['request']
        detailed = bool(getattr(self.args, 'long', False))

        for prefix in request.prefixes():
            entries = self.app.s3.list_objects(request.bucket, prefix)
            for entry in select_objects(entries, prefix, request.recursive, context['pattern']):
                if detailed:
                    self.output.emit(
                        entry.to_dict(),
                        "%s %-10d %-20s %s",
                        entry.owner or "-", entry.size,
                        format_timestamp(entry.last_modified), entry.key,
                    )
                else:
                    self.output.emit({"key": entry.key}, "%s", entry.key)
