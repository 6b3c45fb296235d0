import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from src.core.errors import (
    DATABASE_ERROR_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    UploadError,
    ValidationError,
    describe_error,
    setup_exception_handlers,
)


class TestDescribeError:
    @pytest.mark.parametrize(
        "err, expected",
        [
            ("Plain text", "Plain text"),
            ("", GENERIC_ERROR_MESSAGE),
            (None, GENERIC_ERROR_MESSAGE),
            (NotFoundError("Missing"), "Missing"),
            (RuntimeError("boom"), "boom"),
            (RuntimeError(), GENERIC_ERROR_MESSAGE),
            ({"message": "From message"}, "From message"),
            ({"details": "From details"}, "From details"),
            ({"error_description": "From description"}, "From description"),
            ({"error": {"message": "Nested"}}, "Nested"),
            ({"error": "Flat"}, "Flat"),
            ({}, DATABASE_ERROR_MESSAGE),
        ],
    )
    def test_messages(self, err, expected):
        assert describe_error(err) == expected

    def test_unknown_dict_is_rendered(self):
        assert describe_error({"code": 42}) == '{"code": 42}'

    def test_http_errors(self):
        assert describe_error(httpx.ConnectError("refused")) == "refused"


@pytest.fixture
def error_client():
    app = FastAPI()
    setup_exception_handlers(app)

    raising = {
        "missing": NotFoundError("Order 7 not found."),
        "invalid": ValidationError("Your cart is empty."),
        "taken": ConflictError("Slug taken."),
        "forbidden": PermissionDeniedError("Admins only."),
        "cdn": UploadError("Invalid image file"),
        "duplicate": IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")),
        "crash": RuntimeError("unexpected"),
    }

    @app.get("/raise/{name}")
    def raise_it(name: str):
        raise raising[name]

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.mark.parametrize(
    "name, status, detail",
    [
        ("missing", 404, "Order 7 not found."),
        ("invalid", 422, "Your cart is empty."),
        ("taken", 409, "Slug taken."),
        ("forbidden", 403, "Admins only."),
        ("cdn", 502, "Invalid image file"),
    ],
)
def test_domain_errors_map_to_status_codes(error_client, name, status, detail):
    response = error_client.get(f"/raise/{name}")
    assert response.status_code == status
    assert response.json() == {"detail": detail}


def test_integrity_errors_are_conflicts(error_client):
    assert error_client.get("/raise/duplicate").status_code == 409


def test_unexpected_errors_get_an_error_id(error_client):
    response = error_client.get("/raise/crash")
    assert response.status_code == 500
    body = response.json()
    assert body["detail"] == GENERIC_ERROR_MESSAGE
    assert len(body["error_id"]) == 12
