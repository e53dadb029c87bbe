import sqlite3

import pytest

from zenhost.models import (
    AppNotify,
    ConnectionRecord,
    PeerDrive,
    RelyRecord,
    ShareRecord,
    create_schema,
)

ALL_MODELS = [ConnectionRecord, PeerDrive, AppNotify, RelyRecord, ShareRecord]


@pytest.fixture
def db():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


def _tables(connection):
    rows = connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {name for (name,) in rows}


def test_create_schema_creates_every_table(db):
    create_schema(db)
    assert {model.TABLE for model in ALL_MODELS} <= _tables(db)


def test_create_schema_is_idempotent(db):
    create_schema(db)
    before = _tables(db)
    create_schema(db)
    assert _tables(db) == before


@pytest.mark.parametrize("model", ALL_MODELS)
def test_table_columns_match_model_columns(db, model):
    create_schema(db)
    columns = {row[1] for row in db.execute(f"PRAGMA table_info({model.TABLE})")}
    assert columns == set(model.COLUMNS)


def test_table_names_fixed_by_source(db):
    create_schema(db)
    assert {"o_connections", "o_notify", "o_rely", "o_shares"} <= _tables(db)


def test_peer_online_is_not_a_stored_column():
    assert "online" not in PeerDrive.COLUMNS
    assert PeerDrive(online=True).online is True


def test_default_records_are_empty():
    assert ConnectionRecord().host == ""
    assert RelyRecord().created_at is None
    assert ShareRecord().anonymous is False