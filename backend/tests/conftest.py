"""
Shared pytest fixtures for the CSV analyzer test suite.
"""

import pytest
from pathlib import Path
from typing import AsyncGenerator, Callable, Union

from httpx import AsyncClient, ASGITransport
from csvanalyzer.api.analyze import get_analyzer
from csvanalyzer.core.config import Settings, get_settings
from csvanalyzer.main import app
from csvanalyzer.models.types import ContactProperty, DataType
from csvanalyzer.services.analyzer import CsvAnalyzer
from csvanalyzer.services.properties import StaticPropertySource


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., str]:
    """Write text or bytes to a temporary file and return its path."""
    def _write(content: Union[str, bytes], name: str = "contacts.csv") -> str:
        path = tmp_path / name
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return str(path)
    return _write


@pytest.fixture
def test_settings() -> Settings:
    """Provide a private copy of the settings that tests may change."""
    return get_settings().model_copy()


@pytest.fixture
def contact_properties() -> list:
    """Provide known contact properties for an account."""
    return [
        ContactProperty(name="FirstName", datatype=DataType.STRING),
        ContactProperty(name="Age", datatype=DataType.INTEGER),
        ContactProperty(name="Score", datatype=DataType.FLOAT),
        ContactProperty(name="City", datatype=DataType.INTEGER),
    ]


@pytest.fixture
def analyzer(test_settings: Settings) -> CsvAnalyzer:
    """Provide an analyzer without a contact property source."""
    return CsvAnalyzer(test_settings)


@pytest.fixture
def property_analyzer(test_settings: Settings, contact_properties: list) -> CsvAnalyzer:
    """Provide an analyzer backed by an in-memory property source."""
    return CsvAnalyzer(test_settings, StaticPropertySource(contact_properties))


@pytest.fixture
def sample_contacts_csv() -> str:
    """Provide a small comma-separated contact file with a header."""
    return (
        "name,email,age,signup\n"
        "John,john@example.com,34,2020-01-15\n"
        "Jane,jane@example.com,28,2020-02-20\n"
    )


@pytest.fixture
async def test_client(property_analyzer: CsvAnalyzer) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing FastAPI endpoints."""
    app.dependency_overrides[get_analyzer] = lambda: property_analyzer
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
