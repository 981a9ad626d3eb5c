"""
KMS key and alias operations.

Resolves human-readable alias names to key ids and manages the
create/delete lifecycle of keys and their aliases.
"""
from typing import Dict, List

from ...exceptions import AlreadyExistsError, NotFoundError, provider_errors
from ...models.key_alias import ALIAS_PREFIX, KeyAlias
from ...utils.logger import get_logger

log = get_logger(__name__)

# KMS requires a waiting period of 7-30 days before a key is destroyed
DEFAULT_PENDING_WINDOW_DAYS = 7


class KmsOperations:
    """KMS operations over an injected boto3 KMS client.

    Args:
        kms_client: boto3 KMS client
    """

    def __init__(self, kms_client):
        self.kms_client = kms_client

    def list_aliases(self) -> List[KeyAlias]:
        """Retrieve every alias in the region.

        Returns:
            List of KeyAlias, including aliases without a target key
        """
        aliases = []

        log.debug("ListAliases")
        with provider_errors("list kms aliases"):
            paginator = self.kms_client.get_paginator('list_aliases')
            for page in paginator.paginate():
                for entry in page.get('Aliases', []):
                    aliases.append(KeyAlias.from_dict(entry))

        return aliases

    def resolve_alias(self, name: str) -> KeyAlias:
        """Find the alias with the given name.

        Matching is exact and case sensitive against the alias name with
        its ``alias/`` prefix removed. The first match wins.

        Args:
            name: Alias name without the ``alias/`` prefix

        Returns:
            The matching KeyAlias

        Raises:
            NotFoundError: If no alias matches
        """
        for alias in self.list_aliases():
            if alias.name == name:
                return alias

        raise NotFoundError(name)

    def alias_exists(self, name: str) -> bool:
        """Check if an alias exists.

        Args:
            name: Alias name without the ``alias/`` prefix

        Returns:
            True if the alias resolves
        """
        try:
            self.resolve_alias(name)
        except NotFoundError:
            return False
        return True

    def create_key(self, name: str, description: str = "") -> Dict[str, str]:
        """Create a KMS key and bind an alias to it.

        The key and the alias are created by two separate calls; if the
        alias creation fails the key is left without an alias.

        Args:
            name: Alias name without the ``alias/`` prefix
            description: Description stored on the key

        Returns:
            Dictionary with the alias, key arn, key id and account

        Raises:
            AlreadyExistsError: If the alias is already in use
        """
        if self.alias_exists(name):
            raise AlreadyExistsError("key alias", name)

        log.debug("CreateKey description=%r", description)
        with provider_errors(f"create kms key {name}"):
            resp = self.kms_client.create_key(Description=description, Origin='AWS_KMS')
        metadata = resp['KeyMetadata']

        alias_name = f"{ALIAS_PREFIX}{name}"
        log.debug("CreateAlias %s -> %s", alias_name, metadata['Arn'])
        with provider_errors(f"create kms alias {alias_name}"):
            self.kms_client.create_alias(AliasName=alias_name, TargetKeyId=metadata['Arn'])

        return {
            "alias": name,
            "arn": metadata['Arn'],
            "id": metadata.get('KeyId', ''),
            "account": metadata.get('AWSAccountId', ''),
        }

    def delete_key(self, name: str, schedule_deletion: bool = True,
                   pending_days: int = DEFAULT_PENDING_WINDOW_DAYS) -> KeyAlias:
        """Delete an alias and optionally schedule its key for deletion.

        KMS never deletes a key immediately; it is destroyed once the
        pending window has elapsed.

        Args:
            name: Alias name without the ``alias/`` prefix
            schedule_deletion: Also schedule the target key for deletion
            pending_days: Days before the key is destroyed

        Returns:
            The deleted KeyAlias

        Raises:
            NotFoundError: If the alias does not exist
        """
        alias = self.resolve_alias(name)

        log.debug("DeleteAlias %s", alias.alias_name)
        with provider_errors(f"delete kms alias {alias.alias_name}"):
            self.kms_client.delete_alias(AliasName=alias.alias_name)

        if schedule_deletion:
            if not alias.is_usable():
                log.warning("Alias %s has no target key, nothing to schedule for deletion", name)
                return alias

            log.debug("ScheduleKeyDeletion %s in %d days", alias.target_key_id, pending_days)
            with provider_errors(f"schedule deletion of kms key {alias.target_key_id}"):
                self.kms_client.schedule_key_deletion(
                    KeyId=alias.target_key_id,
                    PendingWindowInDays=pending_days,
                )

        return alias
