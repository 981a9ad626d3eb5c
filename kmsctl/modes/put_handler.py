"""Handler for the 'put' subcommand.

Usage:
    kmsctl put --bucket <BUCKET> --kms <KEY-ID> [--flatten] PATH [PATH ...]
"""
from .base_handler import ModeHandler
from ..models.transfer import TransferRequest


class PutHandler(ModeHandler):
    """Handles ``kmsctl put``: upload files encrypted with a KMS key."""

    REQUIRED_OPTIONS = ('bucket', 'kms')

    def prepare_context(self):
        return {
            'request': TransferRequest(
                bucket=self.option('bucket'),
                paths=getattr(self.args, 'paths', []),
                flatten=bool(getattr(self.args, 'flatten', False)),
                kms_key_id=self.option('kms'),
            ),
        }

    def execute_workflow(self, context):
        request = context['request']

        def pushed(path, key):
            self.output.emit(
                {"action": "put", "path": path, "bucket": request.bucket, "key": key},
                "successfully pushed the file: %s to s3://%s/%s", path, request.bucket, key,
            )

        self.app.transfer.push_files(request, callback=pushed)
