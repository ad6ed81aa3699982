"""
Stock ledger: transactional check-and-reserve of product stock.
"""
import logging
from typing import Dict, Optional, Tuple

from firebase_admin import firestore

from api.common import database
from api.common.exceptions import InsufficientStock
from api.products.schemas import ProductInDB
from api.products.services import product_from_snapshot

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Reserves stock for the lines of one sale inside a Firestore transaction.

    Reads go through the transaction so concurrent checkouts of the same
    product are serialized by Firestore. Decrements are staged in memory and
    only written by commit(), after every line has been checked.
    """

    def __init__(self, db, transaction):
        self._db = db
        self._transaction = transaction
        self._products: Dict[str, Tuple[object, ProductInDB]] = {}
        self._reserved: Dict[str, int] = {}

    def load(self, product_id: str) -> Optional[ProductInDB]:
        """Read a product's live record, or None if it does not exist."""
        if product_id in self._products:
            return self._products[product_id][1]

        product_ref = self._db.collection(database.PRODUCTS_COLLECTION).document(product_id)
        doc = product_ref.get(transaction=self._transaction)
        if not doc.exists:
            return None

        product = product_from_snapshot(doc)
        self._products[product_id] = (product_ref, product)
        return product

    def available(self, product: ProductInDB) -> int:
        """Stock not yet reserved by earlier lines of this sale."""
        return product.stock - self._reserved.get(product.id, 0)

    def check_and_reserve(self, product: ProductInDB, quantity: int) -> int:
        """
        Reserve quantity units of a loaded product.

        Returns:
            int: Units left after the reservation

        Raises:
            InsufficientStock: If fewer than quantity units are available;
                nothing is reserved in that case
        """
        available = self.available(product)
        if available < quantity:
            raise InsufficientStock(product.name, available, quantity)

        self._reserved[product.id] = self._reserved.get(product.id, 0) + quantity
        return available - quantity

    def commit(self) -> None:
        """Stage one stock update per reserved product on the transaction."""
        for product_id, quantity in self._reserved.items():
            product_ref, product = self._products[product_id]
            new_stock = max(0, product.stock - quantity)
            self._transaction.update(product_ref, {
                "stock": new_stock,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
            logger.debug(f"Stock for {product.name}: {product.stock} -> {new_stock}")
