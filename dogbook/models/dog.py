# dogbook/models/dog.py
from dataclasses import dataclass, field, asdict, fields
from datetime import datetime
from typing import Optional, Dict, Any

from dogbook.utils.datetime_utils import DateTimeUtils


class _Absent:
    """Marks a patch field the caller did not send."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _Absent()


@dataclass
class Dog:
    """
    Document structure of the Firestore 'dogs' collection.
    One per owner; 'dog_owners/{owner_id}' holds the claim that enforces it.
    """
    dog_id: str
    owner_id: str
    name: str
    breed: Optional[str] = None
    age: Optional[int] = None
    avatar: Optional[str] = None
    # Storage path of an uploaded avatar; used to delete it later.
    avatar_path: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dog":
        known = {f.name for f in fields(cls)}
        processed = {k: v for k, v in DateTimeUtils.from_firestore(data).items() if k in known}
        return cls(**processed)

    def to_dict(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))

    def summary(self) -> Dict[str, Any]:
        """Fields embedded into feed items."""
        return {"dog_id": self.dog_id, "name": self.name, "breed": self.breed, "avatar": self.avatar}


@dataclass(frozen=True)
class DogPatch:
    """
    Partial update of a dog profile.

    A field left as ABSENT keeps the stored value. Any other value, including
    an empty string or None, is written. ``avatar=None`` clears the avatar.
    """
    name: Any = ABSENT
    breed: Any = ABSENT
    age: Any = ABSENT
    avatar: Any = ABSENT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DogPatch":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def present(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not ABSENT}

    def is_empty(self) -> bool:
        return not self.present()
