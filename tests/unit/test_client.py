"""Tests for sfmock.client."""

import pytest
import requests

import sfmock
from sfmock.client import Client, new_record_id, parse_path
from sfmock.config import MockConfig
from sfmock.exceptions import (
    ConflictError,
    MalformedPathError,
    RecordNotFoundError,
    RequiredFieldMissingError,
    SchemaMissingError,
    SchemaUnavailableError,
)
from sfmock.store import RecordStore, default_store


@pytest.fixture
def client():
    return Client()


class TestParsePath:
    def test_type_and_id(self):
        assert parse_path("/sobjects/Contact/12345") == ("Contact", "12345")

    def test_full_rest_path(self):
        assert parse_path("/services/data/v60.0/sobjects/Object__c/a01") == ("Object__c", "a01")

    def test_type_only(self):
        assert parse_path("sobjects/Contact") == ("Contact", None)

    def test_no_sobjects_raises(self):
        with pytest.raises(MalformedPathError):
            parse_path("/limits")


def test_new_record_ids_are_url_safe():
    rid = new_record_id()
    assert len(rid) == 18
    assert all(c.isalnum() or c in "-_" for c in rid)


def test_accepts_auth_options():
    c = Client(username="someone", client_id="abc")
    assert c.opts == {"username": "someone", "client_id": "abc"}


def test_seeding_helpers_use_shared_store():
    Client().add_object("Contact", "some id", {"Name": "Name here"})

    assert default_store().get("Contact", "some id") == {"Name": "Name here"}
    assert Client().get_object("Contact", "some id") == {"Name": "Name here"}


class TestApiPost:
    def test_creates_record(self, client):
        values = {"Name": "Name here"}
        resp = client.api_post("/sobjects/Contact", values)
        new_id = resp.body["id"]

        assert resp.status_code == 201
        assert default_store().get("Contact", new_id) == values

    def test_schema_file_missing(self, client):
        sfmock.configure(raise_on_schema_missing=True)

        with pytest.raises(SchemaUnavailableError, match="Schema file is not defined"):
            client.api_post("/sobjects/Contact", {"Name": "Name here"})

    def test_schema_for_object_missing(self, client, required_schema):
        sfmock.configure(raise_on_schema_missing=True, schema_file=required_schema)

        with pytest.raises(SchemaMissingError, match="No schema for Salesforce object Contact"):
            client.api_post("/sobjects/Contact", {"Name": "Name here"})

    def test_schema_file_path_does_not_exist(self, client, tmp_path):
        sfmock.configure(raise_on_schema_missing=True, schema_file=str(tmp_path / "nope.yml"))

        with pytest.raises(SchemaUnavailableError, match="No schema for Salesforce object is available"):
            client.api_post("/sobjects/Contact", {"Name": "Name here"})

    def test_validates_required_fields(self, client, required_schema):
        sfmock.configure(schema_file=required_schema)

        with pytest.raises(requests.HTTPError) as ei:
            client.api_post("/sobjects/Object__c", {"Name": "Name here"})

        assert isinstance(ei.value, RequiredFieldMissingError)
        assert "Required fields are missing: [Program__c, Section_Name__c]" in str(ei.value)
        assert len(default_store()) == 0

    def test_required_fields_not_checked_when_disabled(self, client, required_schema):
        sfmock.configure(schema_file=required_schema, error_on_required=False)

        new_id = client.api_post("/sobjects/Object__c", {"Name": "Name here"}).body["id"]

        assert default_store().get("Object__c", new_id) == {"Name": "Name here"}

    def test_id_collision_conflicts(self, client, monkeypatch):
        monkeypatch.setattr("sfmock.client.new_record_id", lambda: "dup")
        client.api_post("/sobjects/Contact", {"Name": "A"})

        with pytest.raises(ConflictError):
            client.api_post("/sobjects/Contact", {"Name": "B"})


class TestApiPatch:
    ID = "HGUKK674J79HjsH"
    VALUES = {"Name": "Name here", "Program__c": "1234", "Section_Name__c": "12345"}

    def test_schema_file_missing(self, client):
        sfmock.configure(raise_on_schema_missing=True)
        client.add_object("Object__c", self.ID, dict(self.VALUES))

        with pytest.raises(SchemaUnavailableError, match="Schema file is not defined"):
            client.api_patch(f"/sobjects/Object__c/{self.ID}", self.VALUES)

    def test_updates_fields(self, client):
        client.add_object("Object__c", self.ID, dict(self.VALUES))

        resp = client.api_patch(
            f"/sobjects/Object__c/{self.ID}", {"Name": "New Name", "Program__c": "91233"}
        )

        o = client.get_object("Object__c", self.ID)
        assert o["Program__c"] == "91233"
        assert o["Name"] == "New Name"
        assert o["Section_Name__c"] == "12345"
        assert resp.body == {"id": o}

    def test_missing_record_is_not_found_and_not_created(self, client):
        with pytest.raises(RecordNotFoundError, match=self.ID):
            client.api_patch(f"/sobjects/Object__c/{self.ID}", {"Name": "X"})

        assert client.get_object("Object__c", self.ID) is None

    def test_required_fields_not_checked_on_update(self, client, required_schema):
        sfmock.configure(schema_file=required_schema)
        client.add_object("Object__c", self.ID, {"Name": "A"})

        client.api_patch(f"/sobjects/Object__c/{self.ID}", {"Name": "B"})

    def test_needs_id(self, client):
        with pytest.raises(MalformedPathError):
            client.api_patch("/sobjects/Object__c", {"Name": "X"})


class TestApiGet:
    def test_find(self, client):
        client.add_object("Contact", "12345", {"Email": "debrah.obrian@yahoo.com"})

        resp = client.api_get("/sobjects/Contact/12345", "12345")

        assert resp.body == {"id": {"Email": "debrah.obrian@yahoo.com"}}

    def test_find_missing_returns_none(self, client):
        resp = client.api_get("/sobjects/Contact/12345")

        assert resp.body == {"id": None}

    def test_query(self, client):
        client.add_object("Contact", "12345", {"Email": "debrah.obrian@yahoo.com"})
        soql = "Select Id FROM Contact WHERE Email = 'debrah.obrian@yahoo.com'"

        body = client.api_get("query", {"q": soql}).body

        assert body["totalSize"] == 1
        assert body["done"] is True
        assert [r["Id"] for r in body["records"]] == ["12345"]
        assert body["records"][0]["attributes"] == {
            "type": "Contact",
            "url": "/services/data/v60.0/sobjects/Contact/12345",
        }

    def test_query_escaped_single_quote(self, client):
        client.add_object("Contact", "123456", {"Email": "debrah.o'brian@yahoo.com"})
        email = "debrah.o\\'brian@yahoo.com"

        body = client.api_get("query", {"q": f"Select Id FROM Contact WHERE Email = '{email}'"}).body

        assert [r["Id"] for r in body["records"]] == ["123456"]

    def test_query_no_match_is_empty(self, client):
        body = client.api_get(
            "query", {"q": "Select Id FROM Contact WHERE Email = 'no.exist@yahoo.com'"}
        ).body

        assert body == {"totalSize": 0, "done": True, "records": []}

    def test_query_without_params_is_a_path(self, client):
        with pytest.raises(MalformedPathError):
            client.api_get("query")


class TestHighLevelHelpers:
    def test_create_find_update_destroy(self, client):
        new_id = client.create("Account", {"Name": "Acme"})
        assert client.find("Account", new_id) == {"Name": "Acme"}

        assert client.update("Account", {"Id": new_id, "Industry": "Retail"}) is True
        assert client.find("Account", new_id) == {"Name": "Acme", "Industry": "Retail"}

        assert client.destroy("Account", new_id) is True
        assert client.find("Account", new_id) is None

    def test_update_requires_id(self, client):
        with pytest.raises(ValueError):
            client.update("Account", {"Name": "Acme"})

    def test_destroy_missing_is_not_found(self, client):
        with pytest.raises(RecordNotFoundError):
            client.destroy("Account", "nope")

    def test_query_helper(self, client):
        new_id = client.create("Contact", {"LastName": "Smith"})

        res = client.query("SELECT Id FROM Contact WHERE LastName = 'Smith'")

        assert res["records"][0]["Id"] == new_id

    def test_describe_object_from_schema(self, required_schema):
        c = Client(config=MockConfig(schema_file=required_schema))

        desc = c.describe_object("Object__c")

        by_name = {f["name"]: f for f in desc["fields"]}
        assert by_name["Program__c"]["nillable"] is False
        assert by_name["Name"]["nillable"] is True

    def test_describe_unknown_object(self, required_schema):
        c = Client(config=MockConfig(schema_file=required_schema))

        with pytest.raises(SchemaMissingError):
            c.describe_object("Contact")


class TestIsolation:
    def test_explicit_store_is_private(self):
        own = RecordStore()
        c = Client(store=own)

        new_id = c.create("Contact", {"Name": "A"})

        assert own.get("Contact", new_id) == {"Name": "A"}
        assert default_store().get("Contact", new_id) is None

    def test_reset_forgets_everything(self, client):
        ids = [client.create("Contact", {"Name": "A"}), client.create("Account", {"Name": "B"})]

        sfmock.reset_store()

        assert client.find("Contact", ids[0]) is None
        assert client.find("Account", ids[1]) is None

    def test_schema_reloaded_when_file_changes(self, client, required_schema, tmp_path):
        other = tmp_path / "other.yml"
        other.write_text("Contact:\n  LastName:\n    required: true\n", encoding="utf-8")

        sfmock.configure(schema_file=required_schema)
        assert "Object__c" in client.schema()

        sfmock.configure(schema_file=str(other))
        assert list(client.schema()) == ["Contact"]


class TestEmptyRecords:
    def test_empty_record_can_be_updated_and_found(self, client):
        new_id = client.create("Contact", {})

        client.update("Contact", {"Id": new_id, "Name": "A"})

        assert client.find("Contact", new_id) == {"Name": "A"}

    def test_empty_record_can_be_destroyed(self, client):
        new_id = client.create("Contact", {})

        assert client.destroy("Contact", new_id) is True
        assert client.get_object("Contact", new_id) is None


def test_update_strips_both_id_spellings(client):
    new_id = client.create("Account", {"Name": "Acme"})

    client.update("Account", {"Id": new_id, "id": new_id, "Industry": "Retail"})

    assert client.find("Account", new_id) == {"Name": "Acme", "Industry": "Retail"}


def test_patch_response_is_a_copy(client):
    client.add_object("Contact", "1", {"Name": "A"})

    body = client.api_patch("/sobjects/Contact/1", {"Phone": "123"}).body
    body["id"]["Name"] = "Changed"

    assert client.get_object("Contact", "1") == {"Name": "A", "Phone": "123"}
