# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Customer authentication.

Passwords are hashed with bcrypt (cost factor 12). Login is by e-mail,
which is stored lower-case and is unique across the store.
"""

import bcrypt
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import User
from ..validation import ValidationError, ConflictError

MIN_PASSWORD_LENGTH = 6


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def validate_password_strength(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt with cost factor 12.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def create_user(name: str, email: str, password: str, phone: str) -> User:
    """
    Create a customer account.

    Raises:
        ValidationError: missing name/e-mail/phone
        PasswordValidationError: password too short
        ConflictError: e-mail already registered
    """
    email = normalize_email(email)
    name = (name or "").strip()
    phone = (phone or "").strip()
    missing = [field for field, value in (("name", name), ("email", email), ("phone", phone)) if not value]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if "@" not in email:
        raise ValidationError("email is not valid")

    if db.session.query(User.id).filter_by(email=email).first():
        raise ConflictError("Email already registered")

    user = User(
        name=name,
        email=email,
        phone=phone,
        password_hash=hash_password(password),
        is_active=True,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Email already registered")
    return user


def authenticate(email: str, password: str) -> User | None:
    user = db.session.query(User).filter_by(email=normalize_email(email)).first()
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
