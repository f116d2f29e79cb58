"""Test the contact and passport models."""

from contact_passports.models import PASSPORT_FIELDS, Contact, Passport
from contact_passports.models.base import utcnow


class TestPassportModel:
    """Test passport table layout."""

    def test_contact_id_is_primary_and_foreign_key(self):
        column = Passport.__table__.c.contact_id

        assert column.primary_key
        assert [pk.name for pk in Passport.__table__.primary_key] == ["contact_id"]
        (foreign_key,) = column.foreign_keys
        assert foreign_key.target_fullname == "contacts.id"
        assert foreign_key.ondelete == "CASCADE"

    def test_columns_match_field_order(self):
        columns = [c.name for c in Passport.__table__.columns]

        assert columns[: len(PASSPORT_FIELDS)] == list(PASSPORT_FIELDS)
        assert columns[len(PASSPORT_FIELDS) :] == ["created_at", "updated_at"]

    def test_repr(self):
        passport = Passport(contact_id=9, passport_number="A1")

        assert repr(passport) == "<Passport(contact_id=9, passport_number=A1)>"


class TestContactModel:
    """Test the contact side of the relationship."""

    def test_passport_relationship_is_one_to_one(self):
        relationship = Contact.__mapper__.relationships["passport"]

        assert relationship.uselist is False
        assert relationship.passive_deletes is True

    def test_utcnow_is_timezone_aware(self):
        assert utcnow().tzinfo is not None

    def test_models_carry_no_serialisation_helpers(self):
        """JSON output goes through the pydantic record types instead."""
        assert not hasattr(Passport, "to_dict")
        assert not hasattr(Contact, "to_dict")
