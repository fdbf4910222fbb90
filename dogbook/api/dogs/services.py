# dogbook/api/dogs/services.py
import logging
import uuid
from typing import Dict, Any, Iterable, Optional

from firebase_admin import firestore
from google.api_core.exceptions import Conflict
from werkzeug.datastructures import FileStorage

from dogbook.core.exceptions import ConflictError, NotFoundError, ValidationError
from dogbook.models.dog import Dog, DogPatch
from dogbook.services.storage_service import StorageService
from dogbook.utils.datetime_utils import DateTimeUtils


class DogService:
    """Dog profiles: one per owner, created once, then patched by the owner."""

    def __init__(self, storage_service: StorageService, db=None):
        self.db = db or firestore.client()
        self.dogs_ref = self.db.collection('dogs')
        # 'dog_owners/{owner_id}' -> {'dog_id': ...}; its existence means "has a dog".
        self.owners_ref = self.db.collection('dog_owners')
        self.storage_service = storage_service
        logging.info("DogService initialized.")

    def create_dog(self, owner_id: str, data: Dict[str, Any]) -> Dog:
        """Creates the owner's dog profile. Fails if one already exists."""
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError("Dog name is required")

        dog = Dog(
            dog_id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=name,
            breed=data.get('breed'),
            age=data.get('age'),
            avatar=data.get('avatar'),
        )

        batch = self.db.batch()
        batch.create(self.owners_ref.document(owner_id), {'dog_id': dog.dog_id, 'created_at': dog.created_at})
        batch.set(self.dogs_ref.document(dog.dog_id), dog.to_dict())
        try:
            batch.commit()
        except Conflict:
            raise ConflictError("Dog profile already exists", error_code="DOG_PROFILE_EXISTS")

        logging.info(f"Dog profile created (owner_id: {owner_id}, dog_id: {dog.dog_id})")
        return dog

    def get_dog(self, dog_id: str) -> Optional[Dog]:
        try:
            doc_ref = self.dogs_ref.document(dog_id)
        except ValueError:
            # Not a usable document id (e.g. contains a path separator).
            return None
        doc = doc_ref.get()
        if not doc.exists:
            return None
        return Dog.from_dict(doc.to_dict())

    def get_dogs(self, dog_ids: Iterable[str]) -> Dict[str, Dog]:
        """Batch read used by the feed; missing ids are left out."""
        refs = [self.dogs_ref.document(dog_id) for dog_id in dict.fromkeys(dog_ids) if dog_id]
        if not refs:
            return {}
        return {doc.id: Dog.from_dict(doc.to_dict()) for doc in self.db.get_all(refs) if doc.exists}

    def get_my_dog(self, owner_id: str) -> Dog:
        """The owner's dog. NotFoundError is the normal answer for new users."""
        claim = self.owners_ref.document(owner_id).get()
        dog = self.get_dog(claim.to_dict().get('dog_id')) if claim.exists else None
        if not dog:
            raise NotFoundError("Dog profile not found", error_code="DOG_PROFILE_NOT_FOUND")
        return dog

    def update_my_dog(self, owner_id: str, patch: DogPatch, avatar_file: Optional[FileStorage] = None) -> Dog:
        """
        Applies a partial update to the owner's dog.

        Only fields present in the patch are written. An uploaded file replaces
        the avatar; ``patch.avatar`` set to None clears it. Avatar order:
        upload the new file, save the document, then delete the old file. A
        failed save removes the new upload again; a failed delete of the old
        file only leaves an orphan in the bucket.
        """
        dog = self.get_my_dog(owner_id)
        if patch.is_empty() and avatar_file is None:
            return dog

        present = patch.present()
        updates: Dict[str, Any] = {}

        if 'name' in present:
            name = (present['name'] or '').strip()
            if not name:
                raise ValidationError("Dog name cannot be empty")
            updates['name'] = name
        if 'breed' in present:
            breed = present['breed']
            updates['breed'] = breed.strip() if isinstance(breed, str) else breed
        if 'age' in present:
            updates['age'] = present['age']

        new_upload = None
        if avatar_file is not None:
            new_upload = self.storage_service.upload_avatar(owner_id, avatar_file)
            updates['avatar'] = new_upload['url']
            updates['avatar_path'] = new_upload['file_path']
        elif 'avatar' in present:
            updates['avatar'] = present['avatar'] or None
            updates['avatar_path'] = None

        updates['updated_at'] = DateTimeUtils.now()
        try:
            self.dogs_ref.document(dog.dog_id).update(DateTimeUtils.for_firestore(updates))
        except Exception:
            logging.error(f"Dog profile update failed (dog_id: {dog.dog_id})", exc_info=True)
            if new_upload:
                self._delete_asset_quietly(new_upload['file_path'])
            raise

        if 'avatar_path' in updates and dog.avatar_path and dog.avatar_path != updates['avatar_path']:
            self._delete_asset_quietly(dog.avatar_path)

        logging.info(f"Dog profile updated (dog_id: {dog.dog_id}) fields: {sorted(updates)}")
        return self.get_dog(dog.dog_id)

    def _delete_asset_quietly(self, file_path: str):
        try:
            self.storage_service.delete_file(file_path)
        except Exception as e:
            logging.error(f"Avatar delete failed, orphaned file left in storage ({file_path}): {e}")
