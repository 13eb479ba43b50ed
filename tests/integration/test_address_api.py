"""Integration tests for the address HTTP API."""

import base64
import json
from urllib.parse import parse_qs, urlsplit

import pytest

from src.addressbook.core.errors import StoreError
from src.addressbook.entities import AddressRepository
from tests.fixtures.core import SEED_ROWS


def _token(payload: dict) -> str:
    raw = json.dumps(payload).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _walk(client, url: str) -> list[dict]:
    """Follow ``next`` links until an empty page comes back."""
    seen: list[dict] = []
    for _ in range(1000):
        response = client.get(url)
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["success"] is True
        if not body["addresses"]:
            assert body["next"] is None
            return seen
        seen.extend(body["addresses"])
        url = body["next"]
    pytest.fail("pagination did not terminate")


def _all_addresses(client) -> list[dict]:
    return _walk(client, "/address?limit=100")


class TestCreateAndGet:
    def test_create_then_get(self, empty_client):
        response = empty_client.post(
            "/address",
            json={"first_name": "Jane", "last_name": "Doe", "phone": "070000000"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        address_id = body["id"]

        response = empty_client.get(f"/address/{address_id}")
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "id": address_id,
            "first_name": "Jane",
            "last_name": "Doe",
            "phone": "070000000",
        }

    def test_create_without_phone(self, empty_client):
        response = empty_client.post(
            "/address", json={"first_name": "Angela", "last_name": "Thompson"}
        )

        assert response.status_code == 200
        detail = empty_client.get(f"/address/{response.json()['id']}").json()
        assert detail["phone"] is None

    def test_created_ids_increase(self, empty_client):
        ids = [
            empty_client.post(
                "/address", json={"first_name": "A", "last_name": str(i)}
            ).json()["id"]
            for i in range(3)
        ]

        assert ids == sorted(ids)
        assert len(set(ids)) == 3

    @pytest.mark.parametrize(
        "payload",
        [
            {"last_name": "Doe"},
            {"first_name": "Jane"},
            {},
            {"first_name": "", "last_name": "Doe"},
        ],
    )
    def test_missing_required_fields(self, empty_client, payload):
        response = empty_client.post("/address", json=payload)

        assert response.status_code == 400
        assert "error" in response.json()

    def test_store_failure_on_create(self, empty_client, monkeypatch):
        def fail(self, address):
            raise StoreError("disk I/O error")

        monkeypatch.setattr(AddressRepository, "create", fail)

        response = empty_client.post(
            "/address", json={"first_name": "Jane", "last_name": "Doe"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "disk I/O error"}

    def test_get_unknown_id(self, client):
        response = client.get("/address/999999")

        assert response.status_code == 404
        assert response.json() == {"error": "no entry with id 999999"}

    def test_get_id_beyond_integer_range(self, client):
        response = client.get("/address/" + "9" * 30)

        assert response.status_code == 404
        assert "error" in response.json()

    def test_get_non_numeric_id(self, client):
        response = client.get("/address/abc")

        assert response.status_code == 400
        assert "error" in response.json()


class TestListAddresses:
    def test_default_page(self, client):
        body = client.get("/address").json()

        assert body["success"] is True
        assert len(body["addresses"]) == 20
        ids = [a["id"] for a in body["addresses"]]
        assert ids == sorted(ids)
        assert body["next"].startswith("/address?")

    def test_default_walk_matches_id_order(self, client):
        walked = _walk(client, "/address")

        assert len(walked) == len(SEED_ROWS)
        ids = [a["id"] for a in walked]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    @pytest.mark.parametrize("field", ["first_name", "last_name"])
    def test_sorted_walk(self, client, field):
        everything = _all_addresses(client)

        walked = _walk(client, f"/address?sort={field}&limit=9")

        expected = sorted(everything, key=lambda a: (a[field], a["id"]))
        assert [a["id"] for a in walked] == [a["id"] for a in expected]

    def test_unknown_sort_falls_back_to_id(self, client):
        body = client.get("/address?sort=phone&limit=100").json()

        ids = [a["id"] for a in body["addresses"]]
        assert ids == sorted(ids)

    def test_next_keeps_other_parameters(self, client):
        body = client.get("/address?sort=last_name&search=S&limit=5").json()

        query = parse_qs(urlsplit(body["next"]).query)
        assert urlsplit(body["next"]).path == "/address"
        assert query["sort"] == ["last_name"]
        assert query["search"] == ["S"]
        assert query["limit"] == ["5"]
        assert len(query["last"]) == 1

    def test_next_replaces_previous_last(self, client):
        first = client.get("/address?limit=5").json()
        second = client.get(first["next"]).json()

        assert parse_qs(urlsplit(second["next"]).query)["last"] != parse_qs(
            urlsplit(first["next"]).query
        )["last"]
        assert second["addresses"][0]["id"] > first["addresses"][-1]["id"]

    @pytest.mark.parametrize(
        ("limit", "expected"),
        [("1000", 100), ("42", 42), ("-100", 20), ("0", 20), ("1", 1)],
    )
    def test_limit_clamping(self, client, limit, expected):
        body = client.get(f"/address?limit={limit}").json()

        assert len(body["addresses"]) == expected

    def test_non_numeric_limit(self, client):
        response = client.get("/address?limit=asdf")

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.parametrize(
        ("sort", "last"),
        [
            (None, "12__Doe"),
            (None, "%%%"),
            (None, "eyJuYW1lIjoiRG9lIn0"),
            (None, _token({"id": 10**30})),
            ("last_name", _token({"id": 1, "name": "\ud800"})),
        ],
    )
    def test_malformed_last(self, client, sort, last):
        response = client.get("/address", params={"sort": sort, "last": last})

        assert response.status_code == 400
        assert "invalid last key" in response.json()["error"]

    def test_id_token_rejected_for_name_sort(self, client):
        token = parse_qs(urlsplit(client.get("/address?limit=1").json()["next"]).query)[
            "last"
        ][0]

        response = client.get("/address", params={"sort": "last_name", "last": token})

        assert response.status_code == 400

    def test_search_prefix(self, client):
        body = client.get("/address?search=Thomp").json()

        assert [(a["first_name"], a["last_name"]) for a in body["addresses"]] == [
            ("Angela", "Thompson")
        ]

    def test_search_without_match(self, client):
        body = client.get("/address?search=zzz").json()

        assert body == {"success": True, "addresses": [], "next": None}

    def test_empty_table(self, empty_client):
        body = empty_client.get("/address").json()

        assert body == {"success": True, "addresses": [], "next": None}


class TestDeleteAddress:
    def test_delete_found_by_search(self, client):
        found = client.get("/address?search=Thomp").json()["addresses"]
        assert len(found) == 1
        address_id = found[0]["id"]

        response = client.delete(f"/address/{address_id}")
        assert response.status_code == 200
        assert response.json() == {"success": True}

        assert client.get("/address?search=Thomp").json()["addresses"] == []
        assert client.get(f"/address/{address_id}").status_code == 404

        again = client.delete(f"/address/{address_id}")
        assert again.status_code == 404
        assert again.json() == {"error": f"no entry with id {address_id}"}

    def test_delete_unknown(self, client):
        assert client.delete("/address/999999").status_code == 404

    def test_delete_id_beyond_integer_range(self, client):
        response = client.delete("/address/" + "9" * 30)

        assert response.status_code == 404
        assert "error" in response.json()

    def test_delete_keeps_other_entries(self, client):
        before = len(_all_addresses(client))
        first_id = client.get("/address?limit=1").json()["addresses"][0]["id"]

        client.delete(f"/address/{first_id}")

        assert len(_all_addresses(client)) == before - 1


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {
            "status": "healthy",
            "service": "addressbook",
        }

    def test_readiness(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["database"]["type"] == "sqlite"
