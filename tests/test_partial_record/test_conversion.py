"""Tests for materializing records from partials."""

import pytest

from partial_record import (
    Partial,
    PartialConvertible,
    PartialInvariantError,
    PathNotSetError,
    field_paths,
    supports_partial,
)
from records import Address, Alias, Company, Labelled, Person, Point, Segment, Tag

NAME = Person.path("name")
NICKNAME = Person.path("nickname")
ADDRESS = Person.path("address")
TAGS = Person.path("tags")
STREET = Address.path("street")
CITY = Address.path("city")


def complete_address() -> Partial[Address]:
    partial = Address.partial()
    partial.set_value(STREET, "12 St James's Square")
    partial.set_value(CITY, "London")
    return partial


class TestCapability:
    """Tests for detecting the conversion capability."""

    def test_supports_partial(self):
        assert supports_partial(Person)
        assert supports_partial(Point)
        assert not supports_partial(Tag)
        assert not supports_partial(list[str])
        assert not supports_partial(None)

    def test_protocol(self):
        assert issubclass(Person, PartialConvertible)
        assert issubclass(Point, PartialConvertible)
        assert not issubclass(Tag, PartialConvertible)

    def test_unwrap_requires_capability(self):
        with pytest.raises(TypeError) as exc_info:
            Partial(Tag).unwrapped_value()

        assert "Tag cannot be built from a partial" in str(exc_info.value)


class TestPersonScenario:
    """Building a Person with a nested Address step by step."""

    def test_missing_address(self, empty_person: Partial[Person]):
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(NICKNAME, None)

        with pytest.raises(PathNotSetError) as exc_info:
            empty_person.unwrapped_value()

        assert exc_info.value.path == ADDRESS

    def test_complete_with_nested_partial(self, empty_person: Partial[Person]):
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(NICKNAME, None)
        empty_person.set_value(ADDRESS, complete_address())

        person = empty_person.unwrapped_value()

        assert person == Person(
            name="Ada",
            nickname=None,
            address=Address(street="12 St James's Square", city="London"),
        )
        assert person.tags == []

    def test_materialization_does_not_freeze(self, empty_person: Partial[Person]):
        """The partial stays editable after a successful build."""
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(NICKNAME, None)
        empty_person.set_value(ADDRESS, complete_address())
        first = empty_person.unwrapped_value()

        empty_person.set_value(NAME, "Augusta")
        second = empty_person.unwrapped_value()

        assert first.name == "Ada"
        assert second.name == "Augusta"


class TestRecursiveUnwrap:
    """Errors from nested partials propagate unchanged."""

    def test_error_names_inner_field(self, empty_person: Partial[Person]):
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(NICKNAME, None)
        empty_person.set_value(ADDRESS, Address.partial())

        with pytest.raises(PathNotSetError) as exc_info:
            empty_person.unwrapped_value()

        assert exc_info.value.path == STREET
        assert exc_info.value.path.owner is Address

    def test_typed_read_unwraps(self, empty_person: Partial[Person]):
        """value() on a nested partial materializes it."""
        empty_person.set_value(ADDRESS, complete_address())

        assert empty_person.value(ADDRESS) == Address(street="12 St James's Square", city="London")

    def test_typed_read_propagates(self, empty_person: Partial[Person]):
        nested = Address.partial()
        nested.set_value(STREET, "12 St James's Square")
        empty_person.set_value(ADDRESS, nested)

        with pytest.raises(PathNotSetError) as exc_info:
            empty_person.value(ADDRESS)

        assert exc_info.value.path == CITY

    def test_two_levels(self, empty_person: Partial[Person]):
        """Company -> Person -> Address reports the Address field."""
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(NICKNAME, "Countess")
        empty_person.set_value(ADDRESS, Address.partial())
        company = Company.partial()
        company.set_value(Company.path("name"), "Analytical Engines")
        company.set_value(Company.path("founder"), empty_person)

        with pytest.raises(PathNotSetError) as exc_info:
            company.unwrapped_value()

        assert exc_info.value.path == STREET

    def test_nested_backing_value(self, address: Address):
        """A nested partial backed by a value only needs overrides."""
        nested = Partial(Address, backing_value=address)
        nested.set_value(CITY, "Paris")
        person = Person.partial()
        person.set_value(NAME, "Ada")
        person.set_value(NICKNAME, None)
        person.set_value(ADDRESS, nested)

        built = person.unwrapped_value()

        assert built.address.city == "Paris"
        assert built.address.street == address.street
        assert built.address.postcode == address.postcode

    def test_unwrap_is_recomputed_on_each_read(self, empty_person: Partial[Person]):
        """Edits to the stored nested partial show up on the next read."""
        empty_person.set_value(ADDRESS, complete_address())
        before = empty_person.value(ADDRESS)

        empty_person.partial_value(ADDRESS).set_value(CITY, "Paris")
        after = empty_person.value(ADDRESS)

        assert before.city == "London"
        assert after.city == "Paris"

    def test_nested_partial_of_non_convertible_type(self):
        """A nested partial can be stored but not unwrapped if the type cannot be built."""
        labelled = Labelled.partial()
        tag = Labelled.path("tag")
        labelled.set_value(tag, Partial(Tag))

        assert labelled.partial_value(tag).wrapped is Tag
        with pytest.raises(PartialInvariantError):
            labelled.value(tag)


class TestRoundTrip:
    """A backed partial with no edits rebuilds the backing value."""

    def test_person(self, ada: Person):
        assert ada.to_partial().unwrapped_value() == ada

    def test_company(self, company: Company):
        assert company.to_partial().unwrapped_value() == company

    def test_dataclass(self):
        point = Point(x=1.0, y=2.5, label="origin-ish")

        assert Partial(Point, backing_value=point).unwrapped_value() == point


class TestAliasedFields:
    """Models whose fields carry a validation alias."""

    def test_round_trip(self):
        record = Alias(fullName="Ada Lovelace", birthYear=1815)

        assert Partial(Alias, backing_value=record).unwrapped_value() == record

    def test_build_from_empty(self):
        partial = Alias.partial()
        partial.set_value(Alias.path("full_name"), "Ada Lovelace")

        record = partial.unwrapped_value()

        assert record.full_name == "Ada Lovelace"
        assert record.birth_year is None

    def test_paths_use_field_names(self):
        assert set(Alias.field_paths()) == {"full_name", "birth_year"}


class TestPartialModelDefaults:
    """Fields with defaults may stay unset."""

    def test_default_applies(self, empty_person: Partial[Person], address: Address):
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(NICKNAME, None)
        empty_person.set_value(ADDRESS, address)

        assert empty_person.unwrapped_value().tags == []

    def test_optional_without_default_is_required(self, empty_person: Partial[Person], address: Address):
        """`nickname: str | None` has no default, so it must be set."""
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(ADDRESS, address)

        with pytest.raises(PathNotSetError) as exc_info:
            empty_person.unwrapped_value()

        assert exc_info.value.path == NICKNAME

    def test_nested_error_under_defaulted_field_propagates(self):
        """A defaulted field still reports missing fields of its nested partial."""
        company = Company.partial()
        company.set_value(Company.path("headquarters"), Address.partial())

        with pytest.raises(PathNotSetError) as exc_info:
            Company.from_partial(company)

        assert exc_info.value.path == Company.path("name")

        company.set_value(Company.path("name"), "Analytical Engines")
        company.set_value(Company.path("founder"), Person(
            name="Ada", nickname=None, address=Address(street="s", city="c")
        ))
        with pytest.raises(PathNotSetError) as exc_info:
            company.unwrapped_value()

        assert exc_info.value.path == STREET


class TestHandWrittenConversion:
    """Dataclasses implementing from_partial by hand."""

    def test_segment(self):
        paths = field_paths(Point)
        start = Partial(Point)
        start.set_value(paths.x, 0.0)
        start.set_value(paths.y, 0.0)
        start.set_value(paths.label, None)
        segment = Partial(Segment)
        segment.set_value(field_paths(Segment).start, start)
        segment.set_value(field_paths(Segment).end, Point(x=3.0, y=4.0))

        built = segment.unwrapped_value()

        assert built == Segment(start=Point(0.0, 0.0), end=Point(3.0, 4.0))

    def test_segment_missing(self):
        segment = Partial(Segment)
        segment.set_value(field_paths(Segment).start, Partial(Point))

        with pytest.raises(PathNotSetError) as exc_info:
            segment.unwrapped_value()

        assert exc_info.value.path == field_paths(Point).x


class TestMissingPaths:
    """Tests for reporting what is still needed."""

    def test_empty(self, empty_person: Partial[Person]):
        assert empty_person.missing_paths() == [NAME, NICKNAME, ADDRESS]

    def test_backed(self, backed_person: Partial[Person]):
        assert backed_person.missing_paths() == []

    def test_nested(self, empty_person: Partial[Person]):
        nested = Address.partial()
        nested.set_value(STREET, "12 St James's Square")
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(NICKNAME, None)
        empty_person.set_value(ADDRESS, nested)

        assert empty_person.missing_paths() == [CITY]

    def test_complete(self, empty_person: Partial[Person]):
        empty_person.set_value(NAME, "Ada")
        empty_person.set_value(NICKNAME, None)
        empty_person.set_value(ADDRESS, complete_address())

        assert empty_person.missing_paths() == []
