"""
Bucket model for S3 buckets
"""


class Bucket:
    """Represents an S3 bucket."""

    def __init__(self, name, creation_date=None):
        self.name = name
        self.creation_date = creation_date

    def to_dict(self):
        """Serialize to dictionary"""
        return {"bucket": self.name, "created": self.creation_date}

    @classmethod
    def from_dict(cls, data):
        """Deserialize from a ``ListBuckets`` entry"""
        return cls(name=data.get("Name", ""), creation_date=data.get("CreationDate"))
