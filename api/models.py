"""
Pydantic models for API request/response validation.

Request models use strict types so that a wrongly typed JSON value is an
invalid request rather than something silently coerced.
"""

from pydantic import BaseModel, StrictBool, StrictStr, conint, field_validator
from typing import Optional

from models import Company

# JSON integers must fit a signed 64-bit column
Int64 = conint(strict=True, ge=-(2**63), le=2**63 - 1)


def replace_lone_surrogates(value):
    """Swap unpaired UTF-16 surrogates (valid JSON escapes, invalid text) for U+FFFD."""
    if isinstance(value, str):
        return "".join("\ufffd" if "\ud800" <= ch <= "\udfff" else ch for ch in value)
    return value


class CompanyCreateRequest(BaseModel):
    """Body of POST /company. Missing fields take their zero value."""
    name: StrictStr = ""
    description: StrictStr = ""
    employee_count: Int64 = 0
    is_registered: StrictBool = False
    type: StrictStr = ""

    @field_validator("*", mode="before")
    @classmethod
    def _null_means_zero_value(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return replace_lone_surrogates(value)


class CompanyUpdateRequest(BaseModel):
    """Body of PATCH /company/{id}. Absent or null fields are left unchanged."""
    name: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    employee_count: Optional[Int64] = None
    is_registered: Optional[StrictBool] = None
    type: Optional[StrictStr] = None

    @field_validator("name", "description", "type", mode="before")
    @classmethod
    def _lone_surrogates(cls, value):
        return replace_lone_surrogates(value)

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class CompanyResponse(BaseModel):
    """Company as returned to clients."""
    id: str
    name: str
    description: str = ""
    employee_count: int
    is_registered: bool
    type: str

    @classmethod
    def from_company(cls, company: Company) -> "CompanyResponse":
        return cls(
            id=company.id,
            name=company.name,
            description=company.description,
            employee_count=company.employee_count,
            is_registered=company.is_registered,
            type=company.legal_type.value,
        )

    def to_json(self) -> dict:
        """Serialize, dropping description when it is empty."""
        data = self.model_dump()
        if not data["description"]:
            del data["description"]
        return data


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
