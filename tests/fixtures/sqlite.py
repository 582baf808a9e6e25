import dbbridge
import pytest

CREATE_USERS = """
CREATE TABLE Users (
    Id INTEGER PRIMARY KEY AUTOINCREMENT,
    Name TEXT NOT NULL,
    Age INTEGER NULL
)
"""


@pytest.fixture
def sqlite_path(tmp_path):
    """Path of a fresh SQLite database file"""
    return str(tmp_path / 'dbbridge.db')


@pytest.fixture
async def sqlite_db(sqlite_path):
    """Database handle over a file SQLite database with an empty Users table"""
    db = dbbridge.connect('sqlite', sqlite_path)
    await db.execute(CREATE_USERS)
    yield db
    await db.close()
