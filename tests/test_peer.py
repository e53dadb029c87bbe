import sqlite3

import pytest

from zenhost.models import PeerDrive, create_schema
from zenhost.peer import PeerService


@pytest.fixture
def service():
    connection = sqlite3.connect(":memory:")
    create_schema(connection)
    yield PeerService(connection)
    connection.close()


def _peer(peer_id, **fields):
    return PeerDrive(id=peer_id, **fields)


def test_create_fills_timestamps(service):
    stored = service.create_peer(_peer("p1", display_name="Linux Firefox"))
    assert stored.created > 0
    assert stored.updated > 0


def test_lookups_find_created_peer(service):
    stored = service.create_peer(
        _peer("p1", display_name="Linux Firefox", user_agent="Mozilla/5.0 test")
    )
    assert service.get_peer_by_id("p1") == stored
    assert service.get_peer_by_name("Linux Firefox") == stored
    assert service.get_peer_by_user_agent("Mozilla/5.0 test") == stored


def test_lookups_missing_return_none(service):
    assert service.get_peer_by_id("nope") is None
    assert service.get_peer_by_name("nope") is None
    assert service.get_peer_by_user_agent("nope") is None


def test_get_peers_orders_by_updated_descending(service):
    service.create_peer(_peer("old", updated=100))
    service.create_peer(_peer("new", updated=200))
    service.create_peer(_peer("mid", updated=150))
    updated = [peer.updated for peer in service.get_peers()]
    assert updated == sorted(updated, reverse=True)
    assert [peer.id for peer in service.get_peers()][0] == "new"


def test_online_flag_is_not_persisted(service):
    service.create_peer(_peer("p1", online=True))
    assert service.get_peer_by_id("p1").online is False


def test_duplicate_id_is_rejected(service):
    service.create_peer(_peer("p1"))
    with pytest.raises(sqlite3.IntegrityError):
        service.create_peer(_peer("p1"))


def test_delete_peer(service):
    service.create_peer(_peer("p1"))
    service.create_peer(_peer("p2"))
    service.delete_peer("p1")
    assert service.get_peer_by_id("p1") is None
    assert [peer.id for peer in service.get_peers()] == ["p2"]