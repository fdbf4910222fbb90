# dogbook/models/post.py
from dataclasses import dataclass, field, asdict, fields
from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable, Tuple

from dogbook.utils.datetime_utils import DateTimeUtils


@dataclass
class Post:
    """
    Document structure of the Firestore 'posts' collection.
    Author and dog are stored as ids and resolved when the feed is read.
    """
    post_id: str
    author_id: str
    dog_id: str
    content: str
    image: Optional[str] = None
    likes: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Post":
        known = {f.name for f in fields(cls)}
        processed = {k: v for k, v in DateTimeUtils.from_firestore(data).items() if k in known}
        # Older documents may carry duplicates; likes are a set.
        processed['likes'] = list(dict.fromkeys(processed.get('likes') or []))
        return cls(**processed)

    def to_dict(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))

    @property
    def likes_count(self) -> int:
        return len(self.likes)

    def is_liked_by(self, user_id: Optional[str]) -> bool:
        return bool(user_id) and user_id in self.likes


@dataclass(frozen=True)
class LikeToggleResult:
    post_id: str
    likes_count: int
    liked_by_user: bool


def toggle_like(likes: Iterable[str], user_id: str) -> Tuple[List[str], bool]:
    """
    One transition of the per-(post, user) like state.

    ABSENT -> PRESENT when user_id is not in likes, PRESENT -> ABSENT otherwise.
    Returns the new like set (order kept, no duplicates) and whether the user
    now likes the post.
    """
    current = list(dict.fromkeys(likes or []))
    if user_id in current:
        current.remove(user_id)
        return current, False
    current.append(user_id)
    return current, True
