"""Test configuration for the Contact Passports project.

Provides a fresh SQLite database per test, a controllable clock for the
application-managed timestamps, and ready-made contacts.
"""

from typing import AsyncIterator, Callable, Dict, List

import pytest
import pytest_asyncio

from contact_passports.config import get_settings
from contact_passports.core.database import Database
from contact_passports.models import Contact
from contact_passports.repositories import PassportRepository
from tests.helpers import FakeClock


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "concurrency: mark test as racing concurrent transactions"
    )
    config.addinivalue_line("markers", "cli: mark test as driving the command line")


@pytest.fixture(autouse=True)
def fresh_settings() -> None:
    """Reload settings for every test so env changes take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database_url(tmp_path) -> str:
    """URL of a throwaway SQLite database file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'passports.db'}"


@pytest_asyncio.fixture
async def database(database_url) -> AsyncIterator[Database]:
    """Database handle with the schema created."""
    db = Database(database_url)
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest.fixture
def clock() -> FakeClock:
    """Controllable timestamp source."""
    return FakeClock()


@pytest.fixture
def repository(database, clock) -> PassportRepository:
    """Repository wired to the test database and clock."""
    return PassportRepository(database, max_serializable_attempts=5, clock=clock)


async def add_contact(database: Database, **fields: str) -> Contact:
    """Insert a contact row and return it."""
    async with database.session() as session:
        contact = Contact(**fields)
        session.add(contact)
    return contact


@pytest_asyncio.fixture
async def contact(database) -> Contact:
    """A contact without a passport."""
    return await add_contact(
        database, first_name="Amina", last_name="Haddad", email="amina@example.org"
    )


@pytest_asyncio.fixture
async def contacts(database) -> List[Contact]:
    """Three contacts without passports."""
    return [
        await add_contact(database, first_name="Lars", last_name="Eriksen"),
        await add_contact(database, first_name="Mei", last_name="Tanaka"),
        await add_contact(database, first_name="Tomas", last_name="Novak"),
    ]


@pytest.fixture
def passport_fields() -> Dict[str, object]:
    """Passport values, keyed by repository argument name."""
    return {
        "passport_number": "X1234567",
        "surname": "HADDAD",
        "given_names": "AMINA LEILA",
        "sex": "F",
        "date_of_birth": "1988-04-12",
        "place_of_birth": "BEIRUT",
        "nationality": "LBN",
        "date_of_issue": "2019-06-01",
        "date_of_expiration": "2029-05-31",
        "passport_type": "P",
        "issuing_country": "LBN",
        "authority": "GENERAL SECURITY",
        "photo": b"\x89PNG\r\n\x1a\nfake-photo",
    }


@pytest.fixture
def passport_args(passport_fields) -> Callable[[int], tuple]:
    """Build the positional argument tuple for a contact id."""

    def build(contact_id: int, **overrides: object) -> tuple:
        values = {**passport_fields, **overrides}
        return (contact_id, *values.values())

    return build
