from __future__ import annotations

import json
import socket
import textwrap
from pathlib import Path

import pytest
from hypothesis import settings

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile("envcachectl", deadline=None, max_examples=100)
settings.load_profile("envcachectl")

DATABASE_PHP = textwrap.dedent(
    """\
    <?php

    use Illuminate\\Support\\Str;

    return [
        // env('COMMENTED_OUT') must not be picked up
        'default' => env('DB_CONNECTION', 'mysql'),
        'connections' => [
            'mysql' => [
                'driver' => 'mysql',
                'host' => env('DB_HOST', '127.0.0.1'),
                'port' => env('DB_PORT', '3306'),
                'options' => extension_loaded('pdo_mysql') ? array_filter([
                    PDO::MYSQL_ATTR_SSL_CA => env('MYSQL_ATTR_SSL_CA'),
                ]) : [],
            ],
        ],
        'redis' => [
            'default' => [
                'password' => env('REDIS_PASSWORD'),
            ],
            'cache' => [
                'password' => env('REDIS_PASSWORD'),
            ],
        ],
    ];
    """
)

APP_PHP = textwrap.dedent(
    """\
    <?php

    return [
        'name' => env('APP_NAME', 'Laravel'),
        'debug' => (bool) env('APP_DEBUG', false),
        'url' => env("APP_URL", 'http://localhost'),
    ];
    """
)

SNAPSHOT = {
    "app": {"name": "Demo", "debug": True, "url": "http://localhost"},
    "database": {
        "default": "mysql",
        "connections": {"mysql": {"driver": "mysql", "host": "localhost", "port": "3306", "options": []}},
        "redis": {"default": {"password": None}, "cache": {"password": None}},
    },
}

ENV_TEXT = textwrap.dedent(
    """\
    APP_NAME=Demo
    APP_DEBUG=true
    APP_URL="http://localhost"
    # database
    DB_CONNECTION=mysql
    DB_HOST=127.0.0.1
    DB_PORT=3306
    REDIS_PASSWORD=null
    MAIL_MAILER=smtp
    """
)


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A minimal Laravel-shaped project with a JSON config snapshot."""
    root = tmp_path / "project"
    (root / "config").mkdir(parents=True)
    (root / "bootstrap/cache").mkdir(parents=True)
    (root / "artisan").write_text("#!/usr/bin/env php\n", encoding="utf-8")
    (root / ".env").write_text(ENV_TEXT, encoding="utf-8")
    (root / "config/database.php").write_text(DATABASE_PHP, encoding="utf-8")
    (root / "config/app.php").write_text(APP_PHP, encoding="utf-8")
    (root / "bootstrap/cache/config.json").write_text(json.dumps(SNAPSHOT, indent=2), encoding="utf-8")
    return root
