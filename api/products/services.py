"""
This module contains the business logic for product catalog operations.
"""
import logging
from typing import Optional

from fastapi import HTTPException
from firebase_admin import firestore

from api.common import database
from api.common.schemas import paginate
from api.products.schemas import ProductCreate, ProductInDB, ProductUpdate, ProductsData

logger = logging.getLogger(__name__)


def product_from_snapshot(doc) -> ProductInDB:
    """Build a ProductInDB from a Firestore document snapshot."""
    product_data = doc.to_dict() or {}
    product_data['id'] = doc.id
    return ProductInDB(**product_data)


async def get_products(owner: Optional[str] = None, page: int = 1, size: int = 100) -> ProductsData:
    """
    Service function to retrieve products sorted by name, optionally filtered by owner.

    Args:
        owner: Only return products with this owner tag
        page: The page number (starts at 1)
        size: Number of products per page

    Returns:
        ProductsData object containing the paginated products

    Raises:
        HTTPException: If errors occur during retrieval
    """
    try:
        db = database.get_firestore_client()
        query = db.collection(database.PRODUCTS_COLLECTION)
        if owner:
            query = query.where('owner', '==', owner)

        products = [product_from_snapshot(doc) for doc in query.stream()]
        products.sort(key=lambda product: product.name.lower())

        return ProductsData(**paginate(products, page, size))

    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(exc)}"
        )


async def get_product_by_id(product_id: str) -> ProductInDB:
    """
    Service function to retrieve a single product by ID.

    Raises:
        HTTPException: 404 if the product does not exist
    """
    if not product_id:
        raise HTTPException(
            status_code=400,
            detail="Missing product ID parameter"
        )

    try:
        db = database.get_firestore_client()
        doc = db.collection(database.PRODUCTS_COLLECTION).document(product_id).get()

        if not doc.exists:
            raise HTTPException(
                status_code=404,
                detail="Product not found"
            )

        return product_from_snapshot(doc)

    except HTTPException:
        # Re-raise HTTP exceptions to preserve status code and detail
        raise
    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(exc)}"
        )


async def create_product(product: ProductCreate) -> ProductInDB:
    """
    Service function to create a new product.

    Returns:
        ProductInDB object containing the created product data
    """
    try:
        db = database.get_firestore_client()

        product_data = product.model_dump(mode="json")
        product_data['createdAt'] = firestore.SERVER_TIMESTAMP
        product_data['updatedAt'] = firestore.SERVER_TIMESTAMP

        new_product_ref = db.collection(database.PRODUCTS_COLLECTION).document()
        new_product_ref.set(product_data)
        logger.info(f"Created product {new_product_ref.id} ({product.name})")

        # Retrieve the created product so server timestamps are resolved
        return product_from_snapshot(new_product_ref.get())

    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(exc)}"
        )


async def update_product(product_id: str, product_update: ProductUpdate) -> ProductInDB:
    """
    Service function to update an existing product. Only provided fields change.

    Raises:
        HTTPException: 404 if the product does not exist, 400 if nothing to update
    """
    update_data = product_update.model_dump(mode="json", exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=400,
            detail="No fields provided for update"
        )

    try:
        db = database.get_firestore_client()
        doc_ref = db.collection(database.PRODUCTS_COLLECTION).document(product_id)

        if not doc_ref.get().exists:
            raise HTTPException(
                status_code=404,
                detail="Product not found"
            )

        update_data['updatedAt'] = firestore.SERVER_TIMESTAMP
        doc_ref.update(update_data)

        return product_from_snapshot(doc_ref.get())

    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(exc)}"
        )


async def delete_product(product_id: str) -> bool:
    """
    Service function to delete a product from the catalog.

    Past sales keep their own line snapshots, so they are unaffected.
    """
    try:
        db = database.get_firestore_client()
        doc_ref = db.collection(database.PRODUCTS_COLLECTION).document(product_id)

        if not doc_ref.get().exists:
            raise HTTPException(
                status_code=404,
                detail="Product not found"
            )

        doc_ref.delete()
        logger.info(f"Deleted product {product_id}")
        return True

    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(exc)}"
        )
