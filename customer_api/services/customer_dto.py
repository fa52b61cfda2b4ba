"""
Customer transfer objects and the entity-to-DTO mapper.

The DTO is what leaves the service layer: it never carries the password
hash, and exposes the login identifier as ``username``.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from customer_api.models.customers import Customer, Gender


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CustomerDTO(BaseModel):
    """Read-only projection of a customer."""
    id: int
    name: str
    email: str
    gender: Gender
    age: int
    roles: List[str]
    username: str
    profile_image_id: Optional[str] = None


class CustomerRegistrationRequest(BaseModel):
    """Registration payload."""
    name: str = Field(..., min_length=1, examples=["Alex"])
    email: str = Field(..., pattern=EMAIL_PATTERN, examples=["alex@gmail.com"])
    password: str = Field(..., min_length=1)
    age: int = Field(..., ge=0)
    gender: Gender


class CustomerUpdateRequest(BaseModel):
    """Partial update payload; absent or null fields are left untouched."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    age: Optional[int] = Field(None, ge=0)


def to_customer_dto(customer: Customer) -> CustomerDTO:
    """Map a customer entity to its DTO."""
    return CustomerDTO(
        id=customer.id,
        name=customer.name,
        email=customer.email,
        gender=customer.gender,
        age=customer.age,
        roles=list(customer.roles or []),
        username=customer.username,
        profile_image_id=customer.profile_image_id,
    )
