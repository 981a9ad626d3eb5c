"""Handler for the 'edit' subcommand.

Usage:
    kmsctl edit --bucket <BUCKET> [--kms <KEY-ID>] KEY [KEY ...]
    kmsctl edit --local-file PATH [PATH ...]
"""
from .base_handler import ModeHandler
from ..utils.display.display_utils import print_error


class EditHandler(ModeHandler):
    """Handles ``kmsctl edit``: inline edit of remote (or local) secrets."""

    def validate_prerequisites(self) -> bool:
        if not getattr(self.args, 'paths', None):
            print_error("you have not specified any files to edit")
            return False
        if not getattr(self.args, 'local_file', False) and not self.option('bucket'):
            print_error("the command option 'bucket' is required")
            return False
        return True

    def execute_workflow(self, context):
        editor = self.option('editor', 'vim')

        if getattr(self.args, 'local_file', False):
            for path in self.args.paths:
                self.app.transfer.edit_local_file(path, editor)
                self.output.emit({"action": "edit", "path": path}, "edited the file: %s", path)
            return

        bucket = self.option('bucket')
        kms_key_id = getattr(self.args, 'kms', None) or None
        for key in self.args.paths:
            updated = self.app.transfer.edit_remote_file(bucket, key, editor, kms_key_id)
            if updated:
                message = "updated the file: s3://%s/%s"
            else:
                message = "no changes made to: s3://%s/%s"
            self.output.emit(
                {"action": "edit", "bucket": bucket, "key": key, "updated": updated},
                message, bucket, key,
            )
