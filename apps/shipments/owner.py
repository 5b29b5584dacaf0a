"""
Who a shipment belongs to.

A shipment is owned either by a registered customer account or by a guest who
booked without one. The two cases are kept apart as distinct types rather than
two nullable columns read side by side.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class RegisteredOwner:
    user_id: object
    name: str = ""
    phone: str = ""

    kind = "registered"


@dataclass(frozen=True)
class GuestOwner:
    name: str
    phone: str = ""

    kind = "guest"


Owner = Union[RegisteredOwner, GuestOwner]


def resolve_owner(customer, guest_name: str = "", guest_phone: str = "") -> Owner:
    """Customer account wins; otherwise the inline guest details."""
    if customer is not None:
        return RegisteredOwner(user_id=customer.pk, name=customer.name, phone=customer.phone)
    return GuestOwner(name=guest_name, phone=guest_phone)


def owner_fields(owner: Owner) -> dict:
    """Model field values for persisting `owner` on a Shipment."""
    if isinstance(owner, RegisteredOwner):
        return {"customer_id": owner.user_id, "guest_name": "", "guest_phone": ""}
    return {"customer": None, "guest_name": owner.name, "guest_phone": owner.phone}


def as_dict(owner: Optional[Owner]) -> Optional[dict]:
    if owner is None:
        return None
    data = {"type": owner.kind, "name": owner.name, "phone": owner.phone}
    if isinstance(owner, RegisteredOwner):
        data["user_id"] = str(owner.user_id)
    return data
