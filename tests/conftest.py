import os

import pytest
import pytest_asyncio
from pymongo.errors import PyMongoError

from pygoose_paginate import connect, disconnect, disable_tracing
from pygoose_paginate.core.connection import _databases

TEST_URI = os.environ.get(
    "PYGOOSE_PAGINATE_TEST_URI", "mongodb://localhost:27017/pygoose_paginate_test"
)


@pytest_asyncio.fixture
async def mongo_connection():
    """Connect to the test MongoDB, drop its collections afterwards.

    Skips the test when no server is reachable.
    """
    db = await connect(TEST_URI, serverSelectionTimeoutMS=1500)
    try:
        await db.command("ping")
    except PyMongoError as e:
        await disconnect()
        pytest.skip(f"MongoDB not reachable at {TEST_URI}: {e}")
    yield db
    # Reconnect if the test disconnected (e.g., connection tests)
    if "default" not in _databases:
        db = await connect(TEST_URI)
    for name in await db.list_collection_names():
        await db.drop_collection(name)
    await disconnect()


@pytest.fixture(autouse=True)
def reset_tracing():
    yield
    disable_tracing()
