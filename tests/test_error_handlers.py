import asyncio
import json

from fastapi import FastAPI
from fastapi.testclient import TestClient
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from todo_service.errors import AppError
from todo_service.handlers import error_handler, http_exception_handler, validation_exception_handler


def make_request(path="/somewhere"):
    return Request({"type": "http", "method": "GET", "path": path, "headers": [], "query_string": b""})


def call(handler, exc):
    response = asyncio.run(handler(make_request(), exc))
    return response.status_code, json.loads(response.body)


class TestErrorHandler:
    def test_defaults_to_500_with_message(self):
        assert call(error_handler, Exception("Something went wrong")) == (500, {"error": "Something went wrong"})

    def test_uses_status_code_if_provided(self):
        assert call(error_handler, AppError("Bad request", 400)) == (400, {"error": "Bad request"})

    def test_status_code_attribute_on_plain_exception(self):
        exc = RuntimeError("Teapot")
        exc.status_code = 418
        assert call(error_handler, exc) == (418, {"error": "Teapot"})

    def test_empty_message_falls_back(self):
        assert call(error_handler, RuntimeError()) == (500, {"error": "Internal server error"})


class TestNotFoundHandler:
    def test_route_not_found(self):
        assert call(http_exception_handler, StarletteHTTPException(404)) == (404, {"error": "Route not found"})

    def test_other_http_errors_keep_detail(self):
        assert call(http_exception_handler, StarletteHTTPException(405, "Method Not Allowed")) == (
            405,
            {"error": "Method Not Allowed"},
        )


class TestValidationHandler:
    def test_malformed_json(self):
        exc = RequestValidationError([{"type": "json_invalid", "loc": ("body", 1), "msg": "JSON decode error", "input": {}}])
        assert call(validation_exception_handler, exc) == (400, {"error": "Invalid JSON body"})

    def test_other_validation_errors(self):
        exc = RequestValidationError([{"type": "missing", "loc": ("query", "limit"), "msg": "Field required", "input": None}])
        assert call(validation_exception_handler, exc) == (400, {"error": "Invalid request"})


def test_handlers_wired_into_an_app():
    app = FastAPI()
    app.add_exception_handler(AppError, error_handler)
    app.add_exception_handler(Exception, error_handler)

    @app.get("/app-error")
    def raise_app_error():
        raise AppError("Bad request", 400)

    @app.get("/crash")
    def crash():
        raise RuntimeError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    res = client.get("/app-error")
    assert res.status_code == 400
    assert res.json() == {"error": "Bad request"}

    res = client.get("/crash")
    assert res.status_code == 500
    assert res.json() == {"error": "boom"}
