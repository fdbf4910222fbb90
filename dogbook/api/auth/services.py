# dogbook/api/auth/services.py
import uuid
import logging
from typing import Optional, Tuple
from urllib.parse import quote

import jwt
from flask import Flask
from firebase_admin import firestore
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from google.api_core.exceptions import Conflict

from dogbook.core.exceptions import AuthError, ConflictError, ValidationError
from dogbook.core.security import hash_password, verify_password
from dogbook.models.user import User, normalize_email

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """
    Registration, login and token verification.

    Users live in 'users/{user_id}'. The 'user_emails/{email}' document is the
    uniqueness claim for an address and maps it back to the user id.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.emails_ref = self.db.collection('user_emails')
        self.bcrypt_rounds = 12
        self.app: Optional[Flask] = None

    def init_app(self, app: Flask):
        self.bcrypt_rounds = app.config.get('BCRYPT_ROUNDS', self.bcrypt_rounds)
        self.app = app

    @staticmethod
    def _email_key(email: str) -> str:
        # Document ids cannot contain '/'.
        return quote(email, safe='@+')

    def register(self, email: str, password: str) -> Tuple[User, str]:
        """Creates a user and returns it with a fresh access token."""
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = User(
            user_id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
        )

        # The claim and the user are written together; the create precondition
        # fails the whole batch if the email is taken.
        batch = self.db.batch()
        batch.create(self.emails_ref.document(self._email_key(email)), {
            'user_id': user.user_id,
            'created_at': user.created_at,
        })
        batch.set(self.users_ref.document(user.user_id), user.to_dict())
        try:
            batch.commit()
        except Conflict:
            logging.info(f"Registration rejected, email already in use: {email}")
            raise ConflictError("Email is already registered", error_code="EMAIL_ALREADY_REGISTERED")

        logging.info(f"User registered (user_id: {user.user_id})")
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """Checks credentials. Unknown email and wrong password fail the same way."""
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS, error_code="INVALID_CREDENTIALS")
        return user, self.issue_token(user)

    def verify(self, token: Optional[str]) -> User:
        """Decodes a bearer token and loads its user, or raises AuthError."""
        if not token:
            raise AuthError("Token is missing", error_code="TOKEN_MISSING")
        try:
            payload = decode_token(token)
        except jwt.ExpiredSignatureError:
            raise AuthError("Token has expired", error_code="TOKEN_EXPIRED")
        except (jwt.PyJWTError, JWTExtendedException) as e:
            logging.info(f"Rejected token: {e}")
            raise AuthError("Invalid token", error_code="INVALID_TOKEN")

        user = self.get_user(payload.get('sub'))
        if not user:
            raise AuthError("Invalid token", error_code="INVALID_TOKEN")
        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(identity=user.user_id)

    def get_user(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            return None
        return User.from_dict(doc.to_dict())

    def get_user_by_email(self, email: str) -> Optional[User]:
        email = normalize_email(email)
        if not email:
            return None
        claim = self.emails_ref.document(self._email_key(email)).get()
        if not claim.exists:
            return None
        return self.get_user(claim.to_dict().get('user_id'))

