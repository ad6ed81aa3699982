"""
Staff management services for CRUD operations.
"""
import asyncio
import logging
from typing import List, Optional

from fastapi import HTTPException
from firebase_admin import firestore

from api.common import database
from api.staffs.ledger import AllowanceLedger
from api.staffs.schemas import (
    MAX_BOTTLE_ALLOWANCE, StaffBottlesUpdate, StaffCreate, StaffInDB, StaffUpdate, staff_from_snapshot,
)

logger = logging.getLogger(__name__)

DUPLICATE_NAME_DETAIL = "Staff member with this name already exists"


def _staff_collection():
    return database.get_firestore_client().collection(database.STAFF_COLLECTION)


def _ensure_name_free(transaction, db, name: str, exclude_id: Optional[str] = None) -> None:
    """Case-insensitive uniqueness check, read through the transaction."""
    query = db.collection(database.STAFF_COLLECTION).where('nameLower', '==', name.lower())
    if any(doc.id != exclude_id for doc in query.get(transaction=transaction)):
        raise HTTPException(status_code=400, detail=DUPLICATE_NAME_DETAIL)


def _create_staff(transaction, db, name: str) -> str:
    _ensure_name_free(transaction, db, name)

    doc_ref = db.collection(database.STAFF_COLLECTION).document()
    transaction.set(doc_ref, {
        "name": name,
        "nameLower": name.lower(),
        "largeBottles": MAX_BOTTLE_ALLOWANCE,
        "smallBottles": MAX_BOTTLE_ALLOWANCE,
        "createdAt": firestore.SERVER_TIMESTAMP,
        "updatedAt": firestore.SERVER_TIMESTAMP,
    })
    return doc_ref.id


def _rename_staff(transaction, db, staff_id: str, name: str) -> None:
    doc_ref = db.collection(database.STAFF_COLLECTION).document(staff_id)
    if not doc_ref.get(transaction=transaction).exists:
        raise HTTPException(status_code=404, detail="Staff member not found")
    _ensure_name_free(transaction, db, name, exclude_id=staff_id)

    transaction.update(doc_ref, {
        "name": name,
        "nameLower": name.lower(),
        "updatedAt": firestore.SERVER_TIMESTAMP,
    })


def _get_existing_ref(staff_id: str):
    doc_ref = _staff_collection().document(staff_id)
    if not doc_ref.get().exists:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return doc_ref


async def get_staff_list_service() -> List[StaffInDB]:
    """Get all staff members sorted by name."""
    try:
        staff = [staff_from_snapshot(doc) for doc in _staff_collection().stream()]
        staff.sort(key=lambda member: member.name.lower())
        return staff
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to retrieve staff list: {str(e)}")


async def search_staff_service(name: str) -> List[StaffInDB]:
    """Case-insensitive substring search on staff names."""
    if not name or not name.strip():
        raise HTTPException(status_code=400, detail="Name query parameter is required")

    needle = name.strip().lower()
    staff = await get_staff_list_service()
    return [member for member in staff if needle in member.name.lower()]


async def get_staff_service(staff_id: str) -> StaffInDB:
    """Get a specific staff member."""
    try:
        doc = _staff_collection().document(staff_id).get()
        if not doc.exists:
            raise HTTPException(status_code=404, detail="Staff member not found")
        return staff_from_snapshot(doc)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to retrieve staff member: {str(e)}")


async def create_staff_service(staff_data: StaffCreate) -> StaffInDB:
    """
    Create a staff member with a full bottle allowance.

    The duplicate-name check and the insert run in one transaction, so two
    concurrent creates with the same name cannot both succeed.
    """
    try:
        db = database.get_firestore_client()
        staff_id = await asyncio.to_thread(
            database.run_in_transaction, db, _create_staff, db, staff_data.name
        )
        logger.info(f"Created staff member {staff_id} ({staff_data.name})")
        return staff_from_snapshot(_staff_collection().document(staff_id).get())
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create staff member: {str(e)}")


async def update_staff_service(staff_id: str, staff_data: StaffUpdate) -> StaffInDB:
    """Rename a staff member, keeping names unique case-insensitively."""
    try:
        db = database.get_firestore_client()
        await asyncio.to_thread(
            database.run_in_transaction, db, _rename_staff, db, staff_id, staff_data.name
        )
        return staff_from_snapshot(_staff_collection().document(staff_id).get())
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update staff member: {str(e)}")


async def update_staff_bottles_service(staff_id: str, bottles: StaffBottlesUpdate) -> StaffInDB:
    """Set the remaining bottle allowance counters of one staff member."""
    try:
        doc_ref = _get_existing_ref(staff_id)
        update_data = bottles.model_dump(exclude_none=True)
        update_data["updatedAt"] = firestore.SERVER_TIMESTAMP
        doc_ref.update(update_data)
        return staff_from_snapshot(doc_ref.get())
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update staff bottles: {str(e)}")


async def delete_staff_service(staff_id: str) -> dict:
    """Delete a staff member. Their past sales keep the name snapshot."""
    try:
        doc_ref = _get_existing_ref(staff_id)
        doc_ref.delete()
        logger.info(f"Deleted staff member {staff_id}")
        return {"message": "Staff member deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete staff member: {str(e)}")


async def reset_bottles_service() -> List[StaffInDB]:
    """Reset every staff member's allowance to the maximum and return the refreshed list."""
    try:
        db = database.get_firestore_client()
        count = AllowanceLedger(db).reset_all()
        logger.info(f"Reset water bottle allowance for {count} staff members")
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to reset bottles: {str(e)}")

    return await get_staff_list_service()
