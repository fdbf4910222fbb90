# tests/test_models.py
from datetime import datetime, timezone

import pytest

from dogbook.core.security import hash_password, verify_password
from dogbook.models.dog import ABSENT, Dog, DogPatch
from dogbook.models.post import Post, toggle_like
from dogbook.models.user import User, normalize_email


# --- like transitions ---

def test_toggle_like_adds_then_removes():
    likes, liked = toggle_like([], "user-a")
    assert (likes, liked) == (["user-a"], True)

    likes, liked = toggle_like(likes, "user-a")
    assert (likes, liked) == ([], False)


def test_toggle_like_keeps_other_users():
    likes, liked = toggle_like(["user-b"], "user-a")
    assert liked is True
    assert likes == ["user-b", "user-a"]

    likes, liked = toggle_like(likes, "user-a")
    assert liked is False
    assert likes == ["user-b"]


def test_toggle_like_collapses_duplicates():
    likes, liked = toggle_like(["user-a", "user-a", "user-b"], "user-a")

    assert liked is False
    assert likes == ["user-b"]


def test_post_from_dict_dedupes_likes_and_ignores_unknown_keys():
    post = Post.from_dict({
        "post_id": "p1", "author_id": "u1", "dog_id": "d1", "content": "hi",
        "likes": ["u2", "u2", "u3"], "legacy_field": True,
        "created_at": datetime(2024, 1, 15, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 15, tzinfo=timezone.utc),
    })

    assert post.likes == ["u2", "u3"]
    assert post.likes_count == 2
    assert post.is_liked_by("u3")
    assert not post.is_liked_by(None)


# --- dog patches ---

def test_dog_patch_tracks_only_present_fields():
    patch = DogPatch.from_dict({"age": 4, "breed": "", "unknown": "x"})

    assert patch.present() == {"age": 4, "breed": ""}
    assert patch.name is ABSENT
    assert not patch.is_empty()


def test_dog_patch_none_is_present():
    patch = DogPatch(avatar=None)

    assert patch.present() == {"avatar": None}


def test_empty_dog_patch():
    assert DogPatch().is_empty()
    assert not ABSENT


def test_dog_round_trip_through_storage_format():
    stamp = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    dog = Dog(dog_id="d1", owner_id="u1", name="Rex", breed="Beagle", age=3, created_at=stamp, updated_at=stamp)

    restored = Dog.from_dict(dog.to_dict())

    assert restored == dog
    assert dog.summary() == {"dog_id": "d1", "name": "Rex", "breed": "Beagle", "avatar": None}


# --- users and passwords ---

def test_normalize_email():
    assert normalize_email("  Rex.Owner@Example.COM ") == "rex.owner@example.com"
    assert normalize_email(None) == ""


def test_public_user_has_no_password_hash():
    user = User(user_id="u1", email="rex@example.com", password_hash="secret-hash")

    public = user.to_public_dict()

    assert "password_hash" not in public
    assert public["email"] == "rex@example.com"


def test_password_hash_verifies():
    hashed = hash_password("woofwoof", rounds=4)

    assert hashed != "woofwoof"
    assert verify_password("woofwoof", hashed)
    assert not verify_password("meowmeow", hashed)


@pytest.mark.parametrize("password, stored", [
    ("", "whatever"),
    ("woofwoof", ""),
    ("woofwoof", "not-a-bcrypt-hash"),
])
def test_verify_password_rejects_bad_input(password, stored):
    assert verify_password(password, stored) is False
