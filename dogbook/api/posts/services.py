# dogbook/api/posts/services.py
import logging
import uuid
from typing import Optional, Dict, Any, List, Iterable

from firebase_admin import firestore

from dogbook.api.dogs.services import DogService
from dogbook.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from dogbook.models.post import Post, LikeToggleResult, toggle_like
from dogbook.models.user import User
from dogbook.utils.datetime_utils import DateTimeUtils


def _toggle_like_in_transaction(transaction, post_ref, user_id: str) -> LikeToggleResult:
    """
    Flips the user's like on one post inside a Firestore transaction.

    The post is read through the transaction, so a concurrent write to the same
    document makes Firestore retry this function against the fresh snapshot.
    The write itself is an ArrayUnion / ArrayRemove, which keeps the like set
    free of duplicates and leaves other users' likes untouched.
    """
    snapshot = post_ref.get(transaction=transaction)
    if not snapshot.exists:
        raise NotFoundError("Post not found", error_code="POST_NOT_FOUND")

    likes, liked = toggle_like(snapshot.to_dict().get('likes') or [], user_id)
    transform = firestore.ArrayUnion([user_id]) if liked else firestore.ArrayRemove([user_id])
    transaction.update(post_ref, {'likes': transform, 'updated_at': DateTimeUtils.now()})
    return LikeToggleResult(post_id=post_ref.id, likes_count=len(likes), liked_by_user=liked)


class PostService:
    """
    Posts and the feed.
    Author and dog summaries are joined in when the feed is read, not stored.
    """
    def __init__(self, dog_service: DogService, db=None, require_dog_ownership: bool = True):
        self.db = db or firestore.client()
        self.posts_ref = self.db.collection('posts')
        self.users_ref = self.db.collection('users')
        self.dog_service = dog_service
        self.require_dog_ownership = require_dog_ownership

    def create_post(self, author_id: str, dog_id: Optional[str], content: Optional[str], image: Optional[str] = None) -> Dict[str, Any]:
        """Creates a post written on behalf of a dog and returns it as a feed item."""
        content = (content or '').strip()
        if not content or not dog_id:
            raise ValidationError("Content and dog are required")

        dog = self.dog_service.get_dog(dog_id)
        if not dog:
            raise NotFoundError("Dog not found", error_code="DOG_NOT_FOUND")
        if self.require_dog_ownership and dog.owner_id != author_id:
            raise ForbiddenError("You can only post for your own dog")

        created_at = DateTimeUtils.now()
        post = Post(
            post_id=str(uuid.uuid4()),
            author_id=author_id,
            dog_id=dog_id,
            content=content,
            image=image or None,
            created_at=created_at,
            updated_at=created_at,
        )
        try:
            self.posts_ref.document(post.post_id).set(post.to_dict())
        except Exception as e:
            logging.error(f"Post creation failed (author_id: {author_id}): {e}", exc_info=True)
            raise

        logging.info(f"Post created (post_id: {post.post_id}, author_id: {author_id})")
        return self._to_feed_items([post], viewer_id=author_id)[0]

    def get_posts(self, viewer_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Every post, newest first, with author and dog resolved."""
        query = self.posts_ref.order_by("created_at", direction=firestore.Query.DESCENDING)
        posts = [Post.from_dict(doc.to_dict()) for doc in query.stream()]
        return self._to_feed_items(posts, viewer_id)

    def toggle_post_like(self, post_id: str, user_id: str) -> LikeToggleResult:
        """Likes the post if the user has not, otherwise removes the like."""
        post_ref = self.posts_ref.document(post_id)
        transaction = self.db.transaction()
        result = firestore.transactional(_toggle_like_in_transaction)(transaction, post_ref, user_id)
        logging.info(f"Post like toggled (post_id: {post_id}, user_id: {user_id}, liked: {result.liked_by_user})")
        return result

    def _get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        refs = [self.users_ref.document(user_id) for user_id in dict.fromkeys(user_ids) if user_id]
        if not refs:
            return {}
        return {doc.id: User.from_dict(doc.to_dict()) for doc in self.db.get_all(refs) if doc.exists}

    def _to_feed_items(self, posts: List[Post], viewer_id: Optional[str]) -> List[Dict[str, Any]]:
        users = self._get_users(p.author_id for p in posts)
        dogs = self.dog_service.get_dogs(p.dog_id for p in posts)

        items = []
        for post in posts:
            author = users.get(post.author_id)
            dog = dogs.get(post.dog_id)
            items.append({
                "post_id": post.post_id,
                "content": post.content,
                "image": post.image,
                "author": {"user_id": post.author_id, "email": author.email if author else None},
                "dog": dog.summary() if dog else {"dog_id": post.dog_id, "name": None, "breed": None, "avatar": None},
                "likes": list(post.likes),
                "likes_count": post.likes_count,
                "liked_by_user": post.is_liked_by(viewer_id),
                "created_at": post.created_at,
                "updated_at": post.updated_at,
            })
        return items
