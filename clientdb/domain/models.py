"""
Domain models for clientdb.

`ClientData` is what callers hand to `insert_client`: the four user-supplied
fields, validated. `Client` is what comes back from storage: the same fields
plus the storage-assigned `id`, mapped from a row as-is.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field, ValidationInfo, field_validator

BIRTHDAY_FORMAT = "%Y%m%d"

_MODEL_CONFIG = {
    "frozen": True,
    "populate_by_name": True,
}


def _parse_birthday(value: str) -> date:
    return datetime.strptime(value, BIRTHDAY_FORMAT).date()


class ClientData(BaseModel):
    """
    Client fields accepted on insert. Every field is required and must
    contain something besides whitespace. Values are stored exactly as given.
    """

    fio: str = Field(..., alias="FIO", min_length=1, description="Full name.")
    login: str = Field(..., alias="Login", min_length=1, description="Account identifier.")
    birthday: str = Field(
        ...,
        alias="Birthday",
        pattern=r"^\d{8}$",
        description="Date of birth as YYYYMMDD.",
    )
    email: str = Field(..., alias="Email", min_length=1, description="Contact address.")

    model_config = _MODEL_CONFIG

    @field_validator("fio", "login", "email")
    @classmethod
    def check_not_blank(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            raise ValueError(f"{info.field_name} must not be blank")
        return value

    @field_validator("birthday")
    @classmethod
    def check_birthday_is_date(cls, value: str) -> str:
        try:
            _parse_birthday(value)
        except ValueError as exc:
            raise ValueError(f"birthday {value!r} is not a valid YYYYMMDD date") from exc
        return value

    @field_validator("email")
    @classmethod
    def check_email_has_at_sign(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError(f"email {value!r} must contain '@'")
        return value


class Client(BaseModel):
    """
    Representation of a single row in the `clients` table.

    All fields default to zero values so that an absent record can be
    represented by `Client.empty()`.
    """

    id: int = Field(0, alias="ID", description="Storage-assigned primary key.")
    fio: str = Field("", alias="FIO")
    login: str = Field("", alias="Login")
    birthday: str = Field("", alias="Birthday")
    email: str = Field("", alias="Email")

    model_config = _MODEL_CONFIG

    @classmethod
    def empty(cls) -> "Client":
        return cls()

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Client":
        """Map an `(id, fio, login, birthday, email)` row onto a Client."""
        client_id, fio, login, birthday, email = row
        return cls(id=client_id, fio=fio, login=login, birthday=birthday, email=email)

    @property
    def is_empty(self) -> bool:
        return self == Client.empty()

    @property
    def birth_date(self) -> Optional[date]:
        try:
            return _parse_birthday(self.birthday)
        except ValueError:
            return None

    def to_data(self) -> ClientData:
        """Validate the user-supplied fields and drop the id."""
        return ClientData.model_validate(self.model_dump(exclude={"id"}))


__all__ = ["BIRTHDAY_FORMAT", "Client", "ClientData"]
