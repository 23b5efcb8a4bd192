import pytest
import requests

from todo_service.client import TodoClient, TodoServiceError


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, *responses):
        self.headers = {}
        self.calls = []
        self._responses = list(responses)

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(*responses):
    session = FakeSession(*responses)
    return TodoClient("http://todo:3000/", session=session), session


def test_create_posts_title():
    todo = {"id": "1", "title": "Buy milk", "status": "TODO"}
    client, session = make_client(FakeResponse(201, todo))
    assert client.create_todo("Buy milk") == todo
    assert session.calls == [("POST", "http://todo:3000/todos", {"json": {"title": "Buy milk"}})]
    assert session.headers["Content-Type"] == "application/json"


def test_update_sends_only_given_fields():
    client, session = make_client(FakeResponse(200, {"id": "1", "title": "x", "status": "DONE"}))
    client.update_todo("1", status="DONE")
    assert session.calls[0] == ("PUT", "http://todo:3000/todos/1", {"json": {"status": "DONE"}})


def test_error_body_becomes_message():
    client, _ = make_client(FakeResponse(404, {"error": "Todo not found"}, reason="Not Found"))
    with pytest.raises(TodoServiceError) as info:
        client.delete_todo("missing")
    assert str(info.value) == "Todo not found"
    assert info.value.status_code == 404


def test_error_without_json_uses_reason():
    client, _ = make_client(FakeResponse(502, None, reason="Bad Gateway"))
    with pytest.raises(TodoServiceError) as info:
        client.get_all_todos()
    assert str(info.value) == "Bad Gateway"
    assert info.value.status_code == 502


def test_transport_error_is_500():
    client, _ = make_client(requests.ConnectionError("connection refused"))
    with pytest.raises(TodoServiceError) as info:
        client.get_todo_by_id("1")
    assert info.value.status_code == 500


def test_stats():
    todos = [
        {"id": "1", "title": "a", "status": "DONE"},
        {"id": "2", "title": "b", "status": "TODO"},
        {"id": "3", "title": "c", "status": "TODO"},
    ]
    client, _ = make_client(FakeResponse(200, todos))
    assert client.get_todo_stats() == {"total": 3, "completed": 1, "pending": 2, "completion_rate": 33.33}


def test_stats_empty():
    client, _ = make_client(FakeResponse(200, []))
    assert client.get_todo_stats() == {"total": 0, "completed": 0, "pending": 0, "completion_rate": 0}


def test_health_check():
    client, _ = make_client(FakeResponse(200, {"status": "OK"}), requests.Timeout("slow"))
    assert client.health_check() is True
    assert client.health_check() is False
