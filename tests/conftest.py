"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from fakes import FakeBackend
from paperlens.backend.client import BackendClient
from paperlens.backend.protocol import ArtifactProtocol
from paperlens.db.connection import Database
from paperlens.db.schema import initialize
from paperlens.db.storage import KeyValueStorage
from paperlens.store.document_store import DocumentStore
from paperlens.workspace.service import open_store, open_workspace


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".paperlens.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def storage(tmp_db) -> KeyValueStorage:
    return KeyValueStorage(tmp_db)


@pytest.fixture
def store(storage) -> DocumentStore:
    s = DocumentStore(storage)
    s.load()
    return s


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def protocol(backend: FakeBackend) -> ArtifactProtocol:
    client = BackendClient("http://backend.test", transport=backend.transport())
    return ArtifactProtocol(client)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run a command in tmp_path with no global config or env overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("paperlens.config._GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    monkeypatch.delenv("PAPERLENS_BACKEND_URL", raising=False)
    monkeypatch.delenv("PAPERLENS_DB", raising=False)


@pytest.fixture
def db_path(tmp_path, isolated_config) -> Path:
    return tmp_path / "lib.db"


@pytest.fixture
def seed(db_path):
    """Return a function that adds documents to the CLI's database."""

    def _seed(*docs):
        with open_store(db_path) as store:
            for doc in docs:
                store.add(doc)

    return _seed


@pytest.fixture
def cli_backend(monkeypatch) -> FakeBackend:
    """Route the generate and chat commands to an in-process fake backend."""
    fake = FakeBackend()

    def _open(cfg, **kwargs):
        return open_workspace(cfg, transport=fake.transport())

    monkeypatch.setattr("paperlens.cli.generate.open_workspace", _open)
    monkeypatch.setattr("paperlens.cli.chat.open_workspace", _open)
    return fake
