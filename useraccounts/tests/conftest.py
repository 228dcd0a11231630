from __future__ import annotations

from collections.abc import Iterator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from useraccounts.app import create_app
from useraccounts.application.services.session_tokens import SessionIssuer, SessionVerifier
from useraccounts.shared.config import AppConfig
from useraccounts.shared.config.settings import CacheConfig, DatabaseConfig, JwtConfig
from useraccounts.tests.fakes import TEST_SECRET, DictTokenCache, InMemoryUserRepository


@pytest.fixture()
def app_config() -> AppConfig:
    return AppConfig(
        app_env="testing",
        database=DatabaseConfig(url="sqlite://"),
        cache=CacheConfig(url="memory://"),
        jwt=JwtConfig(secret=TEST_SECRET, expires_in=3600),
    )


@pytest.fixture()
def app(app_config: AppConfig) -> Iterator[Flask]:
    flask_app = create_app(app_config)
    flask_app.config.update(TESTING=True)
    yield flask_app
    flask_app.extensions["container"].close()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def token_cache() -> DictTokenCache:
    return DictTokenCache()


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def issuer(token_cache: DictTokenCache) -> SessionIssuer:
    return SessionIssuer(cache=token_cache, secret=TEST_SECRET, expires_in=600)


@pytest.fixture()
def verifier(token_cache: DictTokenCache) -> SessionVerifier:
    return SessionVerifier(cache=token_cache, secret=TEST_SECRET)

