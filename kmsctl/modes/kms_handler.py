"""Handlers for the 'kms' subcommand.

Usage:
    kmsctl kms [list]
    kmsctl kms create --name <NAME> --description <DESC>
    kmsctl kms delete --name <NAME> [--no-schedule-deletion]
"""
from .base_handler import ModeHandler
from ..utils.logger import get_logger

log = get_logger(__name__)


class KmsListHandler(ModeHandler):
    """Handles ``kmsctl kms list``: list the usable key aliases."""

    def execute_workflow(self, context):
        for alias in self.app.kms.list_aliases():
            if not alias.is_usable():
                log.debug("Skipping alias %s without a target key", alias.alias_name)
                continue

            self.output.emit(
                {"id": alias.target_key_id, "alias": alias.alias_name},
                "%-40s %-24s", alias.target_key_id, alias.alias_name,
            )


class KmsCreateHandler(ModeHandler):
    """Handles ``kmsctl kms create``: create a key and its alias."""

    REQUIRED_OPTIONS = ('name', 'description')

    def execute_workflow(self, context):
        name = self.option('name')
        key = self.app.kms.create_key(name, self.option('description'))

        self.output.emit(
            {"alias": key['alias'], "arn": key['arn'], "account": key['account']},
            "successfully created the key: %s", name,
        )


class KmsDeleteHandler(ModeHandler):
    """Handles ``kmsctl kms delete``: remove an alias and schedule its key."""

    REQUIRED_OPTIONS = ('name',)

    def execute_workflow(self, context):
        name = self.option('name')
        deletion = getattr(self.args, 'schedule_deletion', True)
        alias = self.app.kms.delete_key(name, schedule_deletion=deletion)

        self.output.emit(
            {"alias": alias.alias_name, "keyId": alias.target_key_id, "deletion": deletion},
            "successfully deleted the kms key: %s", name,
        )
