import asyncio
import inspect
from pathlib import Path

import pytest

from widget_sync import storage


def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            sig = inspect.signature(pyfuncitem.obj)
            accepted = {name: value for name, value in pyfuncitem.funcargs.items() if name in sig.parameters}
            loop.run_until_complete(pyfuncitem.obj(**accepted))
        finally:
            loop.close()
            asyncio.set_event_loop(None)
        return True
    return None


@pytest.fixture
def sqlite_store(tmp_path: Path) -> storage.KeyValueStore:
    """KeyValueStore on a fresh SQLite file."""
    storage.init_db(storage.get_engine(tmp_path / "widget_sync.db"))
    return storage.KeyValueStore()
