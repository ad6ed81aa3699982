"""
Allowance ledger: staff water-bottle counters.
"""
import logging
from typing import Dict, Optional, Tuple

from firebase_admin import firestore

from api.common import database
from api.common.exceptions import StaffNotFound
from api.products.schemas import BottleSize
from api.staffs.schemas import MAX_BOTTLE_ALLOWANCE, StaffInDB, staff_from_snapshot

logger = logging.getLogger(__name__)

ALLOWANCE_FIELDS = {
    BottleSize.LARGE: "largeBottles",
    BottleSize.SMALL: "smallBottles",
}


class AllowanceLedger:
    """
    Consumes and resets the per-staff free bottle allowance.

    Inside a sale, pass the Firestore transaction: the staff document is read
    through it and consumed units are staged until commit(). reset_all()
    does not need a transaction.
    """

    def __init__(self, db, transaction=None):
        self._db = db
        self._transaction = transaction
        self._staff: Dict[str, Tuple[object, StaffInDB]] = {}
        self._remaining: Dict[Tuple[str, BottleSize], int] = {}

    def _collection(self):
        return self._db.collection(database.STAFF_COLLECTION)

    def resolve_staff(self, staff_id: Optional[str] = None, staff_name: Optional[str] = None) -> StaffInDB:
        """
        Find the staff member by document id, then by case-insensitive exact name.

        Raises:
            StaffNotFound: If neither lookup matches
        """
        if staff_id:
            staff_ref = self._collection().document(staff_id)
            doc = staff_ref.get(transaction=self._transaction)
            if doc.exists:
                return self._remember(staff_ref, doc)

        if staff_name and staff_name.strip():
            query = self._collection().where('nameLower', '==', staff_name.strip().lower()).limit(1)
            for doc in query.get(transaction=self._transaction):
                return self._remember(doc.reference, doc)

        raise StaffNotFound(staff_id, staff_name)

    def _remember(self, staff_ref, doc) -> StaffInDB:
        staff = staff_from_snapshot(doc)
        self._staff[staff.id] = (staff_ref, staff)
        return staff

    def remaining(self, staff: StaffInDB, bottle_size: BottleSize) -> int:
        key = (staff.id, bottle_size)
        if key not in self._remaining:
            self._remaining[key] = getattr(staff, ALLOWANCE_FIELDS[bottle_size])
        return self._remaining[key]

    def consume_if_available(self, staff: StaffInDB, bottle_size: BottleSize) -> bool:
        """
        Take one free unit of the given size if any is left.

        Returns:
            bool: True if a unit was granted (and staged for commit),
                False if the counter is already at zero (nothing staged)
        """
        remaining = self.remaining(staff, bottle_size)
        if remaining <= 0:
            return False

        self._remaining[(staff.id, bottle_size)] = remaining - 1
        return True

    def commit(self) -> None:
        """Stage the consumed counters on the transaction."""
        updates: Dict[str, dict] = {}
        for (staff_id, bottle_size), remaining in self._remaining.items():
            field = ALLOWANCE_FIELDS[bottle_size]
            staff = self._staff[staff_id][1]
            if remaining == getattr(staff, field):
                continue
            updates.setdefault(staff_id, {})[field] = max(0, min(MAX_BOTTLE_ALLOWANCE, remaining))

        for staff_id, update_data in updates.items():
            staff_ref, staff = self._staff[staff_id]
            update_data["updatedAt"] = firestore.SERVER_TIMESTAMP
            self._transaction.update(staff_ref, update_data)
            logger.debug(f"Allowance for {staff.name} now {update_data}")

    def reset_all(self) -> int:
        """
        Set every staff member's large and small counters to the maximum.

        Returns:
            int: Number of staff documents updated
        """
        reset_data = {field: MAX_BOTTLE_ALLOWANCE for field in ALLOWANCE_FIELDS.values()}

        count = 0
        batch = self._db.batch()
        pending = 0
        for doc in self._collection().stream():
            batch.update(doc.reference, {**reset_data, "updatedAt": firestore.SERVER_TIMESTAMP})
            pending += 1
            count += 1
            if pending == database.MAX_BATCH_WRITES:
                batch.commit()
                batch = self._db.batch()
                pending = 0

        if pending:
            batch.commit()

        return count
