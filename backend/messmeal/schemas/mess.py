from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, model_validator


class AddressIn(BaseModel):
    street: str = ""
    area: str = ""
    city: str = ""
    postal_code: int | None = Field(default=None, validation_alias=AliasChoices("postal_code", "postalCode"))


class OwnerIn(BaseModel):
    name: str = ""
    phone: str = ""


class MessIn(BaseModel):
    id: int | None = None
    name: str = ""
    type: str = "BOYS_MESS"
    phone: str = ""
    status: str = "active"
    address: AddressIn = Field(default_factory=AddressIn)
    owner: OwnerIn = Field(default_factory=OwnerIn)

    @model_validator(mode="after")
    def _check_required(self) -> "MessIn":
        errors = []
        if not self.name.strip():
            errors.append("Mess name is required")
        if not self.owner.name.strip():
            errors.append("Owner name is required")
        if not self.owner.phone.strip():
            errors.append("Owner contact is required")
        if not self.address.city.strip():
            errors.append("City is required")
        if errors:
            raise ValueError("; ".join(errors))
        return self


class AddressRead(BaseModel):
    street: str
    area: str
    city: str
    postalCode: int | None


class OwnerRead(BaseModel):
    name: str
    phone: str


class MessRead(BaseModel):
    id: int
    name: str
    type: str
    phone: str
    status: str
    address: AddressRead
    owner: OwnerRead
    created_at: datetime
    updated_at: datetime


class MessPage(BaseModel):
    messes: list[MessRead]
    total: int
    limit: int
    skip: int
