import pytest

from todo_service.errors import ConfigError
from todo_service.settings import get_mcp_settings, get_settings

ENV_VARS = [
    "HOST",
    "PORT",
    "DATABASE_URL",
    "PERSISTENCE_BACKEND",
    "SQLITE_DB_PATH",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "TODO_SERVICE_URL",
    "MCP_SERVER_PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = get_settings()
    assert s.port == 3000
    assert s.persistence_backend == "sqlite"
    assert s.sqlite_db_path == "./data/todos.db"
    assert s.cors_allow_origins == ["*"]
    assert s.log_level == "info"
    assert s.log_format == "console"


def test_mcp_defaults(clean_env):
    s = get_mcp_settings()
    assert s.todo_service_url == "http://localhost:3000"
    assert s.mcp_server_port == 3001


def test_database_url_sqlite(clean_env):
    clean_env.setenv("PERSISTENCE_BACKEND", "memory")
    clean_env.setenv("DATABASE_URL", "sqlite:////var/lib/todo/todos.db")
    s = get_settings()
    assert s.persistence_backend == "sqlite"
    assert s.sqlite_db_path == "/var/lib/todo/todos.db"


def test_database_url_memory(clean_env):
    clean_env.setenv("DATABASE_URL", "memory://")
    assert get_settings().persistence_backend == "memory"


def test_cors_origins_list(clean_env):
    clean_env.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
    assert get_settings().cors_allow_origins == ["http://a.test", "http://b.test"]


def test_trailing_slash_stripped_from_service_url(clean_env):
    clean_env.setenv("TODO_SERVICE_URL", "http://todo:3000/")
    assert get_mcp_settings().todo_service_url == "http://todo:3000"


@pytest.mark.parametrize(
    "name,value",
    [
        ("PORT", "abc"),
        ("PORT", "70000"),
        ("PERSISTENCE_BACKEND", "postgres"),
        ("DATABASE_URL", "postgresql://localhost/todos"),
        ("LOG_LEVEL", "loud"),
        ("LOG_FORMAT", "xml"),
    ],
)
def test_invalid_values(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ConfigError):
        get_settings()


@pytest.mark.parametrize(
    "name,value",
    [
        ("MCP_SERVER_PORT", "0"),
        ("MCP_SERVER_PORT", "abc"),
        ("TODO_SERVICE_URL", "not a url"),
    ],
)
def test_invalid_mcp_values_only_affect_the_adapter(clean_env, name, value):
    clean_env.setenv(name, value)
    assert get_settings().port == 3000
    with pytest.raises(ConfigError):
        get_mcp_settings()
