"""
Firestore access shared by all modules.
"""
import json
import logging

import firebase_admin
from firebase_admin import credentials, firestore

from api.common.config import Settings

logger = logging.getLogger(__name__)

# Firebase collections
PRODUCTS_COLLECTION = "products"
STAFF_COLLECTION = "staff"
SALES_COLLECTION = "sales"

# Firestore rejects batches larger than this
MAX_BATCH_WRITES = 500


def get_firestore_client():
    """Get Firestore client instance."""
    return firestore.client()


def run_in_transaction(db, fn, *args, **kwargs):
    """
    Run fn(transaction, *args, **kwargs) inside a Firestore transaction.

    Firestore retries the function on contention, so fn must only stage
    writes through the transaction and must do all its reads before writing.
    Any exception raised by fn rolls the transaction back and is re-raised.
    """
    transaction = db.transaction()
    return firestore.transactional(fn)(transaction, *args, **kwargs)


def initialize_firebase(settings: Settings) -> None:
    """
    Initialize the Firebase Admin SDK once per process.

    Priority: FIREBASE_CREDENTIALS_JSON_CONTENT env var (for production),
    fallback: local JSON file (for local development).
    """
    if firebase_admin._apps:
        return

    if settings.firebase_credentials_json:
        try:
            cred = credentials.Certificate(json.loads(settings.firebase_credentials_json))
            logger.info("Initialized Firebase from FIREBASE_CREDENTIALS_JSON_CONTENT env var.")
        except json.JSONDecodeError as e:
            logger.critical(f"FIREBASE_CREDENTIALS_JSON_CONTENT is set but contains invalid JSON: {e}")
            raise
    else:
        try:
            cred = credentials.Certificate(settings.firebase_credentials_file)
            logger.info(f"Initialized Firebase from local JSON file: {settings.firebase_credentials_file}")
        except FileNotFoundError:
            logger.critical(
                f"Local credentials file '{settings.firebase_credentials_file}' not found. "
                "It is required when FIREBASE_CREDENTIALS_JSON_CONTENT is not set."
            )
            raise

    firebase_admin.initialize_app(cred)
