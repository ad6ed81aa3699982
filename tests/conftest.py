"""
This module contains pytest fixtures and configuration for testing.
"""
from unittest.mock import MagicMock, patch
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add the project's root directory to the system path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

# Import the main app
from main import app
from api.auth.dependencies import get_current_user_id
from api.common.config import Settings
from fakes import FakeFirestore, fake_run_in_transaction

TEST_USER_ID = "operator-1"


@pytest.fixture
def test_app():
    """
    Create a FastAPI test application with authentication stubbed out.
    """
    app.dependency_overrides[get_current_user_id] = lambda: TEST_USER_ID
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """
    Create a test client for the FastAPI application.
    """
    return TestClient(test_app)


@pytest.fixture
def unauthenticated_client():
    """
    Test client that goes through real token verification.
    """
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def mock_firestore():
    """
    Create a mock for the Firestore client.
    """
    with patch('firebase_admin.firestore.client') as mock:
        # Configure the mock to provide the necessary methods and return values
        firestore_mock = MagicMock()
        mock.return_value = firestore_mock
        yield firestore_mock


@pytest.fixture
def fake_db():
    """
    In-memory Firestore with working transactions, for checkout scenarios.
    """
    db = FakeFirestore()
    with patch('firebase_admin.firestore.client', return_value=db), \
            patch('api.common.database.run_in_transaction', side_effect=fake_run_in_transaction):
        yield db


@pytest.fixture
def settings():
    """
    Default settings, patched into the sale service.
    """
    test_settings = Settings()
    with patch('api.sales.services.get_settings', return_value=test_settings):
        yield test_settings


@pytest.fixture
def mock_auth():
    """
    Create a mock for Firebase Auth.
    """
    with patch('firebase_admin.auth') as mock:
        yield mock
