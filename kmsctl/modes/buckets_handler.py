"""Handlers for the 'buckets' subcommand.

Usage:
    kmsctl buckets [list]
    kmsctl buckets create --name <NAME>
    kmsctl buckets delete --name <NAME> [--force]
"""
from datetime import datetime, timezone

from .base_handler import ModeHandler
from ..utils.display.display_utils import format_timestamp


class BucketsListHandler(ModeHandler):
    """Handles ``kmsctl buckets list``."""

    def execute_workflow(self, context):
        for bucket in self.app.s3.list_buckets():
            self.output.emit(
                {"bucket": bucket.name, "created": bucket.creation_date},
                "%-42s %20s", bucket.name, format_timestamp(bucket.creation_date),
            )


class BucketsCreateHandler(ModeHandler):
    """Handles ``kmsctl buckets create``."""

    REQUIRED_OPTIONS = ('name',)

    def execute_workflow(self, context):
        name = self.option('name')
        self.app.s3.create_bucket(name)

        self.output.emit(
            {"operation": "created", "bucket": name, "created": datetime.now(timezone.utc)},
            "successfully created the bucket: %s", name,
        )


class BucketsDeleteHandler(ModeHandler):
    """Handles ``kmsctl buckets delete``: refuses non-empty buckets without --force."""

    REQUIRED_OPTIONS = ('name',)

    def execute_workflow(self, context):
        name = self.option('name')
        removed = self.app.s3.delete_bucket(name, force=bool(getattr(self.args, 'force', False)))

        self.output.emit(
            {"operation": "delete", "bucket": name, "objects": removed,
             "deleted": datetime.now(timezone.utc)},
            "successfully deleted the bucket: %s", name,
        )
