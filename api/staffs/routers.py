"""
Staff management routers with full CRUD operations and the bottle allowance reset.
"""

from fastapi import APIRouter, status, Depends, Path, Query

from .schemas import (
    StaffBottlesUpdate, StaffCreate, StaffItemResponse, StaffListResponse, StaffResponse, StaffUpdate,
)
from .services import (
    create_staff_service,
    delete_staff_service,
    get_staff_list_service,
    get_staff_service,
    reset_bottles_service,
    search_staff_service,
    update_staff_bottles_service,
    update_staff_service,
)
from api.auth.dependencies import get_current_user_id
from api.common.responses import json_error, json_success

router = APIRouter()


@router.get("", response_model=StaffListResponse)
async def get_staff_list(user_id: str = Depends(get_current_user_id)):
    """
    Get all staff members sorted by name.
    """
    try:
        return json_success(await get_staff_list_service())
    except Exception as e:
        return json_error(e)


@router.get("/search", response_model=StaffListResponse)
async def search_staff(
    name: str = Query(..., description="Part of the staff member's name"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Search staff members by name (case-insensitive, partial match).
    """
    try:
        return json_success(await search_staff_service(name))
    except Exception as e:
        return json_error(e)


@router.post("/reset-bottles", response_model=StaffListResponse)
async def reset_bottles(user_id: str = Depends(get_current_user_id)):
    """
    Reset every staff member's water bottle allowance to the maximum.
    """
    try:
        return json_success(await reset_bottles_service())
    except Exception as e:
        return json_error(e)


@router.post("", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    staff_data: StaffCreate,
    user_id: str = Depends(get_current_user_id)
):
    """
    Create a new staff member; only a name is required.
    """
    try:
        staff = await create_staff_service(staff_data)
        return json_success(StaffItemResponse(item=staff), status_code=status.HTTP_201_CREATED)
    except Exception as e:
        return json_error(e)


@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff(
    staff_id: str = Path(..., description="Staff member ID"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Get a specific staff member.
    """
    try:
        staff = await get_staff_service(staff_id)
        return json_success(StaffItemResponse(item=staff))
    except Exception as e:
        return json_error(e)


@router.put("/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_data: StaffUpdate,
    staff_id: str = Path(..., description="Staff member ID"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Rename a staff member.
    """
    try:
        staff = await update_staff_service(staff_id, staff_data)
        return json_success(StaffItemResponse(item=staff))
    except Exception as e:
        return json_error(e)


@router.patch("/{staff_id}/bottles", response_model=StaffResponse)
async def update_staff_bottles(
    bottles: StaffBottlesUpdate,
    staff_id: str = Path(..., description="Staff member ID"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Set a staff member's remaining large/small bottle allowance.
    """
    try:
        staff = await update_staff_bottles_service(staff_id, bottles)
        return json_success(StaffItemResponse(item=staff))
    except Exception as e:
        return json_error(e)


@router.delete("/{staff_id}")
async def delete_staff(
    staff_id: str = Path(..., description="Staff member ID"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Delete a staff member.
    """
    try:
        return json_success(await delete_staff_service(staff_id))
    except Exception as e:
        return json_error(e)
