"""Shared fixtures for partial record tests."""

import pytest

from partial_record import Partial, PartialConfig
from records import Address, Company, Person


# ============================================================================
# CONFIGURATION
# ============================================================================


@pytest.fixture(autouse=True)
def restore_config():
    """Undo any PartialConfig changes made by a test."""
    saved = (PartialConfig.CHECK_WRITE_TYPES, PartialConfig.CHECK_READ_TYPES)
    yield
    PartialConfig.CHECK_WRITE_TYPES, PartialConfig.CHECK_READ_TYPES = saved


# ============================================================================
# RECORDS
# ============================================================================


@pytest.fixture
def address() -> Address:
    return Address(street="12 St James's Square", city="London", postcode="SW1Y 4JH")


@pytest.fixture
def ada(address: Address) -> Person:
    return Person(name="Ada", nickname="Countess", address=address, tags=["maths"])


@pytest.fixture
def company(ada: Person) -> Company:
    return Company(name="Analytical Engines", founder=ada)


# ============================================================================
# PARTIALS
# ============================================================================


@pytest.fixture
def empty_person() -> Partial[Person]:
    """Empty partial with no backing value."""
    return Partial(Person)


@pytest.fixture
def backed_person(ada: Person) -> Partial[Person]:
    """Partial backed by a complete Person."""
    return Partial(Person, backing_value=ada)
