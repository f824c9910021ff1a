"""Integration tests for the HTTP API."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from bills import __version__
from bills.api.app import create_app
from bills.config import settings
from bills.store import create_store


@pytest.fixture
def client(store):
    """Test client for an app bound to the seeded store fixture."""
    with TestClient(create_app(store)) as client:
        yield client


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "version": __version__}


def test_users_query(client):
    resp = client.post("/graphql", json={"query": "{ users { id name role } }"})

    assert resp.status_code == 200, resp.text
    assert resp.json() == {
        "data": {
            "users": [
                {"id": "1", "name": "Pasha", "role": "SUPERADMIN"},
                {"id": "2", "name": "Ira", "role": "USER"},
            ]
        }
    }


def test_missing_user_is_null(client):
    resp = client.post("/graphql", json={"query": '{ user(id: "99") { name } }'})

    assert resp.status_code == 200
    assert resp.json() == {"data": {"user": None}}


def test_create_user_mutation(client, store):
    resp = client.post(
        "/graphql",
        json={
            "query": "mutation Create($n: String!, $e: String!, $p: String!) "
            "{ createUser(name: $n, email: $e, password: $p) { id role token } }",
            "variables": {"n": "Ann", "e": "ann@x.com", "p": "pw"},
            "operationName": "Create",
        },
    )

    assert resp.status_code == 200, resp.text
    assert resp.json() == {"data": {"createUser": {"id": "3", "role": "USER", "token": None}}}
    assert store.get_user(3).name == "Ann"


def test_create_user_conflict_has_error_code(client, store):
    resp = client.post(
        "/graphql",
        json={
            "query": 'mutation { createUser(name: "Ira", email: "ira@gmail.com", '
            'password: "pw") { id } }'
        },
    )

    body = resp.json()
    assert body["data"] is None
    assert body["errors"][0]["extensions"]["code"] == "CONFLICT"
    assert len(store) == 2


def test_apps_do_not_share_state():
    first = TestClient(create_app(create_store()))
    second = TestClient(create_app(create_store()))

    first.post(
        "/graphql",
        json={
            "query": 'mutation { createUser(name: "Ann", email: "a@x.com", password: "pw") '
            "{ id } }"
        },
    )
    resp = second.post("/graphql", json={"query": "{ users { id } }"})

    assert len(resp.json()["data"]["users"]) == 2


class TestCSRFPrevention:
    """GraphQL operations a browser could send cross-site are rejected."""

    def test_get_query_without_preflight_header_is_rejected(self, client, store):
        resp = client.get("/graphql", params={"query": "{ users { id } }"})

        assert resp.status_code == 400
        body = resp.json()
        assert "data" not in body
        assert body["errors"][0]["extensions"]["code"] == "BAD_REQUEST"

    @pytest.mark.parametrize(
        "header", ["apollo-require-preflight", "x-apollo-operation-name"]
    )
    def test_get_query_with_preflight_header_is_served(self, client, header):
        resp = client.get(
            "/graphql",
            params={"query": "{ users { id } }"},
            headers={header: "true"},
        )

        assert resp.status_code == 200, resp.text
        assert resp.json() == {"data": {"users": [{"id": "1"}, {"id": "2"}]}}

    @pytest.mark.parametrize(
        "content_type",
        ["text/plain", "application/x-www-form-urlencoded", "multipart/form-data; boundary=x"],
    )
    def test_post_with_simple_content_type_is_rejected(self, client, store, content_type):
        resp = client.post(
            "/graphql",
            content='{"query": "mutation { createUser(name: \\"A\\", email: \\"a@x.com\\", '
            'password: \\"pw\\") { id } }"}',
            headers={"content-type": content_type},
        )

        assert resp.status_code == 400
        assert len(store) == 2

    def test_json_post_is_served(self, client):
        resp = client.post("/graphql", json={"query": "{ users { id } }"})

        assert resp.status_code == 200

    def test_ide_page_is_not_blocked(self, client):
        resp = client.get("/graphql", headers={"accept": "text/html"})

        assert resp.status_code == 200

    def test_can_be_disabled(self, store):
        with patch.object(settings, "csrf_prevention", False):
            app = create_app(store)

        with TestClient(app) as client:
            resp = client.get("/graphql", params={"query": "{ users { id } }"})

        assert resp.status_code == 200
        assert resp.json() == {"data": {"users": [{"id": "1"}, {"id": "2"}]}}
