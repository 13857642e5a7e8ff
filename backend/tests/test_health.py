"""
Tests for health check endpoint.
"""

import pytest
from httpx import AsyncClient

from csvanalyzer.core.config import settings


@pytest.mark.asyncio
async def test_health_endpoint_returns_200(test_client: AsyncClient):
    """Test that /health endpoint returns 200 status code."""
    response = await test_client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_endpoint_has_status(test_client: AsyncClient):
    """Test that /health endpoint returns status field."""
    response = await test_client.get("/health")
    data = response.json()
    assert data["status"] == "healthy"


@pytest.mark.asyncio
async def test_health_endpoint_has_version(test_client: AsyncClient):
    """Test that /health endpoint returns the configured version."""
    response = await test_client.get("/health")
    data = response.json()
    assert data["version"] == settings.APP_VERSION
