# Overview: Service-layer operations for customer profile and address book.

from __future__ import annotations

from ..extensions import db
from ..errors import NotFoundError
from ..models import User, Address
from ..validation import ValidationError

ADDRESS_REQUIRED_FIELDS = ("type", "street", "city", "state", "pincode")
ADDRESS_OPTIONAL_FIELDS = ("label", "landmark")


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", details={"user_id": user_id})
    return user


def get_address(user_id: int, address_id: int) -> Address:
    """Address lookup scoped to its owner; another user's id is NotFound."""
    address = db.session.query(Address).filter_by(id=address_id, user_id=user_id).first()
    if address is None:
        raise NotFoundError("Address not found", details={"address_id": address_id})
    return address


def update_profile(user_id: int, data: dict) -> User:
    user = get_user(user_id)
    for key in ("name", "phone"):
        value = data.get(key)
        if value:
            setattr(user, key, str(value).strip())
    db.session.commit()
    return user


def _clean_address_fields(data: dict, *, partial: bool) -> dict:
    cleaned = {}
    for key in ADDRESS_REQUIRED_FIELDS:
        if key in data:
            value = str(data[key] or "").strip()
            if not value:
                raise ValidationError(f"{key.capitalize()} is required")
            cleaned[key] = value
        elif not partial:
            raise ValidationError(f"{key.capitalize()} is required")
    for key in ADDRESS_OPTIONAL_FIELDS:
        if key in data:
            value = data[key]
            cleaned[key] = str(value).strip() if value is not None else None
    return cleaned


def _make_sole_default(user: User, address: Address) -> None:
    for other in user.addresses:
        other.is_default = other is address


def add_address(user_id: int, data: dict) -> User:
    """The first address, or one flagged is_default, becomes the only default."""
    user = get_user(user_id)
    fields = _clean_address_fields(data, partial=False)

    address = Address(**fields, is_default=False)
    user.addresses.append(address)

    if len(user.addresses) == 1 or bool(data.get("is_default")):
        _make_sole_default(user, address)

    db.session.commit()
    return user


def update_address(user_id: int, address_id: int, data: dict) -> User:
    user = get_user(user_id)
    address = get_address(user_id, address_id)

    for key, value in _clean_address_fields(data, partial=True).items():
        setattr(address, key, value)

    if "is_default" in data:
        if data["is_default"]:
            _make_sole_default(user, address)
        else:
            address.is_default = False

    db.session.commit()
    return user


def delete_address(user_id: int, address_id: int) -> User:
    """Deleting the default promotes the oldest remaining address."""
    user = get_user(user_id)
    address = get_address(user_id, address_id)
    was_default = address.is_default

    user.addresses.remove(address)
    if was_default and user.addresses:
        _make_sole_default(user, user.addresses[0])

    db.session.commit()
    return user
