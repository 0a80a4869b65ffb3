"""Pytest configuration and shared fixtures for redshift-mcp tests"""

import os
import sys
from typing import AsyncGenerator, Optional

import pytest
from dotenv import load_dotenv

from fakes import FakeConnectionProvider
from redshift_mcp.core import CatalogReader, DatabaseConnection, QueryExecutor
from redshift_mcp.dispatcher import ToolDispatcher
from redshift_mcp.models.config import DatabaseConfig

# Load environment variables
load_dotenv()

# psycopg requires SelectorEventLoop on Windows
if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())  # type: ignore[attr-defined]


# ==================== Configuration Fixtures ====================


@pytest.fixture
def config() -> DatabaseConfig:
    """Configuration for tests that never open a real connection"""
    return DatabaseConfig(
        host="warehouse.example.com",
        database="dev",
        user="awsuser",
        password="secret",
        schemas=("public", "analytics"),
    )


# ==================== Fake Pool Fixtures ====================


@pytest.fixture
def provider() -> FakeConnectionProvider:
    """Scripted connection provider"""
    return FakeConnectionProvider()


@pytest.fixture
def catalog(provider: FakeConnectionProvider, config: DatabaseConfig) -> CatalogReader:
    """Catalog reader over the fake provider"""
    return CatalogReader(provider, config)


@pytest.fixture
def executor(provider: FakeConnectionProvider) -> QueryExecutor:
    """Query executor over the fake provider"""
    return QueryExecutor(provider)


@pytest.fixture
def dispatcher(catalog: CatalogReader, executor: QueryExecutor) -> ToolDispatcher:
    """Tool dispatcher over the fake provider"""
    return ToolDispatcher(catalog, executor)


# ==================== Live Warehouse Fixtures ====================


@pytest.fixture(scope="session")
def redshift_test_env() -> Optional[dict[str, str]]:
    """REDSHIFT_TEST_* variables mapped to REDSHIFT_* names, or None if unset"""
    if not os.getenv("REDSHIFT_TEST_HOST"):
        return None

    prefix = "REDSHIFT_TEST_"
    return {
        "REDSHIFT_" + key[len(prefix):]: value
        for key, value in os.environ.items()
        if key.startswith(prefix)
    }


@pytest.fixture
async def live_config(redshift_test_env: Optional[dict[str, str]]) -> DatabaseConfig:
    """Configuration for the live test warehouse"""
    if not redshift_test_env:
        pytest.skip("REDSHIFT_TEST_HOST not set in environment")
    return DatabaseConfig.from_env(redshift_test_env)


@pytest.fixture
async def live_connection(
    live_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnection, None]:
    """Pooled connection to the live warehouse with proper cleanup"""
    connection = DatabaseConnection(live_config)
    await connection.initialize()
    try:
        yield connection
    finally:
        await connection.dispose()


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "postgresql: PostgreSQL wire protocol tests")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )
