# dogbook/client/like_state.py
from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any

from dogbook.models.post import LikeToggleResult
from .api_client import DogbookClient
from .session import ApiSession


@dataclass
class LikeState:
    """
    Client-side view of one post's like state for the current user.

    States mirror the server (liked / not liked). ``begin_toggle`` applies the
    transition locally before the server answers; ``reconcile`` replaces the
    local guess with the server's result; ``revert`` undoes the guess.
    """
    post_id: str
    liked: bool = False
    likes_count: int = 0
    _snapshot: Optional[Tuple[bool, int]] = field(default=None, repr=False)

    @classmethod
    def from_post(cls, post: Dict[str, Any]) -> "LikeState":
        """Builds the state from a feed item as returned by GET /api/posts."""
        likes = post.get('likes') or []
        return cls(
            post_id=post['postId'],
            liked=bool(post.get('likedByUser')),
            likes_count=post.get('likesCount', len(likes)),
        )

    @property
    def pending(self) -> bool:
        return self._snapshot is not None

    def begin_toggle(self):
        if self.pending:
            raise RuntimeError(f"A like toggle is already in flight for post {self.post_id}")
        self._snapshot = (self.liked, self.likes_count)
        self.liked = not self.liked
        self.likes_count = self.likes_count + 1 if self.liked else max(0, self.likes_count - 1)

    def reconcile(self, result: LikeToggleResult):
        self.liked = result.liked_by_user
        self.likes_count = result.likes_count
        self._snapshot = None

    def revert(self):
        if self._snapshot is None:
            return
        self.liked, self.likes_count = self._snapshot
        self._snapshot = None


def toggle_like_optimistically(client: DogbookClient, session: ApiSession, state: LikeState) -> LikeToggleResult:
    """Flips the like locally, asks the server, then settles on its answer."""
    state.begin_toggle()
    try:
        result = client.toggle_like(session, state.post_id)
    except Exception:
        state.revert()
        raise
    state.reconcile(result)
    return result
