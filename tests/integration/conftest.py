"""
Fixtures for tests against a real PostgreSQL instance.

Set USERKIT_TEST_DATABASE_URL to a disposable database to run them; the
schema in schema.sql is re-created for every test.
"""

import os
from pathlib import Path

import pytest
import pytest_asyncio

from userkit.services.postgres import PostgresService

DATABASE_URL = os.environ.get("USERKIT_TEST_DATABASE_URL")
SCHEMA = (Path(__file__).parent / "schema.sql").read_text()


def pytest_collection_modifyitems(config, items):
    here = Path(__file__).parent
    skip = pytest.mark.skip(reason="USERKIT_TEST_DATABASE_URL not set")
    for item in items:
        if here in item.path.parents:
            item.add_marker(pytest.mark.integration)
            if not DATABASE_URL:
                item.add_marker(skip)


@pytest_asyncio.fixture
async def postgres():
    """Connected PostgresService over a freshly created schema."""
    async with PostgresService(connection_string=DATABASE_URL, pool_max_size=4) as db:
        await db.execute(SCHEMA)
        yield db
