# dogbook/models/user.py
from dataclasses import dataclass, field, asdict, fields
from datetime import datetime
from typing import Dict, Any

from dogbook.utils.datetime_utils import DateTimeUtils


def normalize_email(email: str) -> str:
    """Emails are unique case-insensitively; this is the stored/lookup form."""
    return (email or "").strip().lower()


@dataclass
class User:
    """
    Document structure of the Firestore 'users' collection.
    The matching 'user_emails/{email}' document holds the uniqueness claim.
    """
    user_id: str
    email: str
    password_hash: str
    is_premium: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        known = {f.name for f in fields(cls)}
        processed = {k: v for k, v in DateTimeUtils.from_firestore(data).items() if k in known}
        return cls(**processed)

    def to_dict(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))

    def to_public_dict(self) -> Dict[str, Any]:
        """User fields safe to send to clients (no password hash)."""
        data = asdict(self)
        data.pop('password_hash')
        return data
