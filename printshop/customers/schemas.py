"""Customer request/response schemas."""

from pydantic import BaseModel, Field


class CustomerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    address: str = ""


class CustomerResponse(BaseModel):
    id: str
    customer_display_id: str | None
    name: str
    email: str | None
    phone: str | None
    address: str | None

    @classmethod
    def from_customer(cls, customer) -> "CustomerResponse":
        return cls(
            id=str(customer.id),
            customer_display_id=customer.customer_display_id,
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
            address=customer.address,
        )
