"""Integration tests for the SQLAlchemy organization store."""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from backend.app.db.models import (
    Organization,
    OrganizationAddress,
    OrganizationText,
    OrganizationWebPage,
)
from backend.app.hierarchy import OrganizationNotFoundError
from backend.app.models import (
    ContactInformation,
    PostalAddresses,
    PostOfficeBoxAddress,
    StreetAddress,
    VisitingAddress,
    WebPage,
)
from tests.factories import NOW, make_record, names


def _full_record(parent=None):
    return make_record(
        "Helsingin kaupunki",
        parent,
        type="Kunta",
        municipality_code="091",
        oid="1.2.246.10.2010013",
        descriptions=names("Kunta", sv="Kommun"),
        name_abbreviations=names("HKI"),
        valid_from=NOW - timedelta(days=10),
        valid_to=NOW + timedelta(days=10),
        can_be_transferred_to_fsc=True,
        contact=ContactInformation(
            phone_number="09 310 1691",
            call_charge_type="Paikallisverkkomaksu",
            call_charge_infos=names("Puhelun hinta"),
            email_address="kirjaamo@hel.fi",
            web_pages=[WebPage(name="Helsinki", url="https://www.hel.fi")],
            homepage_urls=names("https://www.hel.fi/fi", sv="https://www.hel.fi/sv"),
        ),
        visiting_address=VisitingAddress(
            street_addresses=names("Pohjoisesplanadi 11-13"),
            postal_code="00170",
            postal_districts=names("Helsinki", sv="Helsingfors"),
            qualifiers=names("Pääovi"),
        ),
        postal_addresses=PostalAddresses(
            street_address=StreetAddress(
                street_addresses=names("Pohjoisesplanadi 11-13"),
                postal_code="00170",
                postal_districts=names("Helsinki"),
            ),
            post_office_box_address=PostOfficeBoxAddress(
                post_office_box="PL 1", postal_code="00099", postal_districts=names("Helsingin kaupunki")
            ),
        ),
    )


def _count(session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


class TestSqlOrganizationStore:
    """Tests for SqlOrganizationStore."""

    def test_insert_and_reload(self, sql_store, test_session):
        """Every field survives a commit and a fresh load."""
        record = _full_record()
        sql_store.insert(record)
        sql_store.commit()
        test_session.expire_all()

        assert sql_store.get(record.id) == record

    def test_validity_read_back_as_utc(self, sql_store, test_session):
        record = _full_record()
        sql_store.insert(record)
        sql_store.commit()
        test_session.expire_all()

        loaded = sql_store.get(record.id)

        assert loaded.valid_from.utcoffset() == timedelta(0)
        assert loaded.valid_from == NOW - timedelta(days=10)

    def test_list_all_includes_deactivated(self, sql_store):
        root = make_record("A")
        child = make_record("B", root, active=False)
        sql_store.insert(root)
        sql_store.insert(child)
        sql_store.commit()

        records = {record.id: record for record in sql_store.list_all()}

        assert set(records) == {root.id, child.id}
        assert records[child.id].active is False
        assert records[child.id].parent_id == root.id

    def test_get_unknown(self, sql_store):
        with pytest.raises(OrganizationNotFoundError):
            sql_store.get(uuid4())

    def test_replace_texts(self, sql_store, test_session):
        """Replacing names swaps the rows rather than appending."""
        record = _full_record()
        sql_store.insert(record)

        sql_store.replace(record.id, {"names": names("Helsinki", sv="Helsingfors")})
        sql_store.commit()
        test_session.expire_all()

        loaded = sql_store.get(record.id)
        assert [name.value for name in loaded.names] == ["Helsinki", "Helsingfors"]
        assert loaded.descriptions == record.descriptions

    def test_replace_clears_address(self, sql_store, test_session):
        record = _full_record()
        sql_store.insert(record)

        sql_store.replace(record.id, {"visiting_address": None})
        sql_store.commit()
        test_session.expire_all()

        assert sql_store.get(record.id).visiting_address is None
        assert _count(test_session, OrganizationAddress) == 2

    def test_replace_scalar(self, sql_store):
        record = _full_record()
        sql_store.insert(record)

        sql_store.replace(record.id, {"active": False})

        assert sql_store.get(record.id).active is False

    def test_replace_unknown_field(self, sql_store):
        record = make_record("A")
        sql_store.insert(record)

        with pytest.raises(KeyError):
            sql_store.replace(record.id, {"parent_id": None})

    def test_delete_removes_owned_rows(self, sql_store, test_session):
        """Texts, web pages and addresses go with the organization."""
        record = _full_record()
        sql_store.insert(record)
        sql_store.commit()

        sql_store.delete(record.id)
        sql_store.commit()

        assert _count(test_session, Organization) == 0
        assert _count(test_session, OrganizationText) == 0
        assert _count(test_session, OrganizationWebPage) == 0
        assert _count(test_session, OrganizationAddress) == 0

    def test_rollback_discards_writes(self, sql_store):
        committed = make_record("A")
        sql_store.insert(committed)
        sql_store.commit()

        sql_store.insert(make_record("B"))
        sql_store.replace(committed.id, {"active": False})
        sql_store.rollback()

        records = sql_store.list_all()
        assert [record.id for record in records] == [committed.id]
        assert records[0].active is True
