"""
KeyAlias model for KMS key aliases
"""
from typing import Optional

ALIAS_PREFIX = "alias/"


class KeyAlias:
    """
    Represents a named pointer to a KMS encryption key.

    An alias without a target key id (e.g. an AWS managed alias which
    has not been used yet) does not reference a usable key.
    """

    def __init__(self, alias_name: str, target_key_id: Optional[str] = None,
                 alias_arn: Optional[str] = None):
        """
        Initialize a KeyAlias.

        Args:
            alias_name: Full alias name as returned by KMS (``alias/<name>``)
            target_key_id: Id of the key the alias points at, if any
            alias_arn: ARN of the alias, if known
        """
        self.alias_name = alias_name
        self.target_key_id = target_key_id
        self.alias_arn = alias_arn

    @property
    def name(self) -> str:
        """Alias name with the literal ``alias/`` prefix removed."""
        return normalize_alias_name(self.alias_name)

    def is_usable(self) -> bool:
        """Check the alias points at a key."""
        return bool(self.target_key_id)

    def to_dict(self):
        """Serialize to dictionary"""
        data = {"alias": self.alias_name}
        if self.target_key_id:
            data["id"] = self.target_key_id
        if self.alias_arn:
            data["arn"] = self.alias_arn
        return data

    @classmethod
    def from_dict(cls, data):
        """Deserialize from a KMS ``AliasListEntry`` dictionary"""
        return cls(
            alias_name=data.get("AliasName", ""),
            target_key_id=data.get("TargetKeyId"),
            alias_arn=data.get("AliasArn"),
        )

    def __repr__(self):
        return f"KeyAlias({self.alias_name!r}, target_key_id={self.target_key_id!r})"


def normalize_alias_name(alias_name: str) -> str:
    """
    Strip the literal ``alias/`` prefix from an alias name.

    Only the exact prefix is removed; ``alias/sail`` becomes ``sail``.

    Args:
        alias_name: Alias name, with or without the prefix

    Returns:
        The bare alias name
    """
    if alias_name.startswith(ALIAS_PREFIX):
        return alias_name[len(ALIAS_PREFIX):]
    return alias_name
