"""Contract-related models"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, field_validator

# Fields that must be present and non-blank when a contract is created
REQUIRED_FIELDS = ("title", "company", "client_name", "start_date", "end_date")

# Fields an update may never overwrite
IMMUTABLE_FIELDS = ("id", "created_at", "status")


class ContractType(str, Enum):
    """Who the contract is held with"""
    INDIVIDUAL = "individual"
    CLIENT = "client"


class ContractStatus(str, Enum):
    """Lifecycle state derived from the end date"""
    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"


class Contract(BaseModel):
    """A tracked engagement record.

    ``status`` is derived on every read and never persisted.
    """
    id: int
    title: str
    company: str
    client_name: str
    contract_type: ContractType = ContractType.INDIVIDUAL
    start_date: date
    end_date: date
    salary: Optional[Union[int, float]] = None
    notes: Optional[str] = ""
    created_at: datetime
    status: Optional[ContractStatus] = None

    @field_validator("notes")
    @classmethod
    def notes_default_empty(cls, value):
        return value or ""

    @field_validator("salary")
    @classmethod
    def salary_not_negative(cls, value):
        if value is not None and value < 0:
            raise ValueError("salary must not be negative")
        return value

    def to_document(self) -> dict:
        """Serialize for the JSON document, without the derived status"""
        return self.model_dump(mode="json", exclude={"status"})


class Alert(BaseModel):
    """Notice for a contract that is expiring or already expired"""
    contract_id: int
    title: str
    company: str
    end_date: date
    days_remaining: int
    status: ContractStatus
    message: str
