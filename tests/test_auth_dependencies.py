"""
Unit tests for authentication dependencies.
"""
import pytest
from unittest.mock import patch
from fastapi import HTTPException

from api.auth.dependencies import LOCAL_USER_ID, get_current_user_id
from api.common.config import Settings


class TestAuthDependencies:
    """Test authentication dependencies."""

    @pytest.mark.asyncio
    async def test_get_current_user_id_success(self):
        """Test successful user ID extraction from valid token."""
        with patch('firebase_admin.auth.verify_id_token') as mock_verify:
            mock_verify.return_value = {"uid": "user123"}

            user_id = await get_current_user_id("Bearer valid_token")

            assert user_id == "user123"
            mock_verify.assert_called_once_with("valid_token")

    @pytest.mark.asyncio
    async def test_get_current_user_id_missing_header(self):
        """Test error when authorization header is missing."""
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user_id(None)

        assert exc_info.value.status_code == 401
        assert "Authorization header is required" in str(exc_info.value.detail)

    @pytest.mark.asyncio
    async def test_get_current_user_id_invalid_token(self):
        """Test error when token is invalid."""
        with patch('firebase_admin.auth.verify_id_token') as mock_verify:
            mock_verify.side_effect = Exception("Invalid token")

            with pytest.raises(HTTPException) as exc_info:
                await get_current_user_id("Bearer invalid_token")

            assert exc_info.value.status_code == 401
            assert "Invalid authentication token" in str(exc_info.value.detail)

    @pytest.mark.asyncio
    async def test_local_environment_bypass(self):
        """Test local development runs without a token."""
        with patch('api.auth.dependencies.get_settings', return_value=Settings(env="local")):
            assert await get_current_user_id(None) == LOCAL_USER_ID

    @pytest.mark.asyncio
    async def test_local_environment_still_verifies_given_token(self):
        """Test a provided token is verified even locally."""
        with patch('api.auth.dependencies.get_settings', return_value=Settings(env="local")), \
                patch('firebase_admin.auth.verify_id_token') as mock_verify:
            mock_verify.return_value = {"uid": "user123"}

            assert await get_current_user_id("Bearer token") == "user123"
