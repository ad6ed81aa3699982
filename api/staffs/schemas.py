"""
Staff management schemas for CRUD operations.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from api.common.schemas import TimestampedModel, ItemResponse, JSendResponse

# Free bottles of each size a staff member gets per allowance period
MAX_BOTTLE_ALLOWANCE = 2


class StaffName(BaseModel):
    """
    Base for payloads carrying a staff name.
    """
    name: str

    @field_validator('name')
    @classmethod
    def clean_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class StaffCreate(StaffName):
    """
    Schema for creating a new staff member. Allowances start full.
    """
    pass


class StaffUpdate(StaffName):
    """
    Schema for renaming a staff member.
    """
    pass


class StaffBottlesUpdate(BaseModel):
    """
    Schema for setting a staff member's remaining bottle allowance by hand.
    """
    largeBottles: Optional[int] = Field(None, ge=0, le=MAX_BOTTLE_ALLOWANCE)
    smallBottles: Optional[int] = Field(None, ge=0, le=MAX_BOTTLE_ALLOWANCE)

    @model_validator(mode='after')
    def require_one_counter(self):
        if self.largeBottles is None and self.smallBottles is None:
            raise ValueError("Provide largeBottles and/or smallBottles")
        return self


class StaffInDB(TimestampedModel):
    """
    Staff member as stored in the database.
    """
    id: str
    name: str
    largeBottles: int = MAX_BOTTLE_ALLOWANCE
    smallBottles: int = MAX_BOTTLE_ALLOWANCE

    @field_validator('largeBottles', 'smallBottles', mode='before')
    @classmethod
    def clamp_allowance(cls, value):
        """Keep stored counters inside [0, MAX_BOTTLE_ALLOWANCE]."""
        if value is None:
            return MAX_BOTTLE_ALLOWANCE
        return max(0, min(MAX_BOTTLE_ALLOWANCE, int(value)))


def staff_from_snapshot(doc) -> StaffInDB:
    """Build a StaffInDB from a Firestore document snapshot."""
    staff_data = doc.to_dict() or {}
    staff_data['id'] = doc.id
    return StaffInDB(**staff_data)


class StaffItemResponse(ItemResponse[StaffInDB]):
    """
    Wrapper for single staff item response.
    """
    pass


class StaffResponse(JSendResponse[StaffItemResponse]):
    """
    Response model for single staff operations with item wrapper.
    """
    pass


class StaffListResponse(JSendResponse[List[StaffInDB]]):
    """
    Response model for staff list operations.
    """
    pass
