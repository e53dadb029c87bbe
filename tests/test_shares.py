import sqlite3
from unittest import mock

import pytest

from zenhost.models import ShareRecord, create_schema
from zenhost.shares import (
    MANAGED_MARKER,
    SHARE_CONFIG_NAME,
    SharesService,
    render_share_config,
)


@pytest.fixture
def db():
    connection = sqlite3.connect(":memory:")
    create_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def service(db, tmp_path):
    samba = tmp_path / "samba"
    samba.mkdir()
    with mock.patch("zenhost.shares.subprocess.run") as run:
        svc = SharesService(db, samba, "/opt/shell")
        svc.run_mock = run
        yield svc


def test_render_share_config_uses_base_name_and_path():
    text = render_share_config([ShareRecord(path="/DATA/Media/")])
    assert "[Media]" in text
    assert "path = /DATA/Media/" in text
    assert "guest ok = Yes" in text


def test_render_share_config_empty():
    assert render_share_config([]) == ""


def test_render_share_config_one_section_per_share():
    text = render_share_config([ShareRecord(path="/a/x"), ShareRecord(path="/a/y")])
    assert text.index("[x]") < text.index("[y]")
    assert text.count("force user = root") == 2


def test_create_and_list(service):
    stored = service.create_share(ShareRecord(path="/DATA/docs", name="docs", anonymous=True))
    assert stored.id > 0
    shares = service.get_shares_list()
    assert [(s.id, s.path, s.anonymous) for s in shares] == [(stored.id, "/DATA/docs", True)]
    assert shares[0].name == ""


def test_get_by_path_and_name(service):
    service.create_share(ShareRecord(path="/DATA/a", name="a"))
    service.create_share(ShareRecord(path="/DATA/b", name="b"))
    assert [s.path for s in service.get_shares_by_path("/DATA/b")] == ["/DATA/b"]
    assert [s.path for s in service.get_shares_by_name("a")] == ["/DATA/a"]
    assert service.get_shares_by_name("missing") == []


def test_create_writes_config_and_restarts(service):
    service.create_share(ShareRecord(path="/DATA/music"))
    content = (service.samba_dir / SHARE_CONFIG_NAME).read_text()
    assert "[music]" in content
    command = service.run_mock.call_args.args[0]
    assert command[0] == "bash"
    assert "/opt/shell/helper.sh" in command[2]
    assert command[2].endswith("RestartSMBD")


def test_delete_share(service):
    stored = service.create_share(ShareRecord(path="/DATA/tmp"))
    service.delete_share(stored.id)
    assert service.get_shares_list() == []
    assert (service.samba_dir / SHARE_CONFIG_NAME).read_text() == ""


def test_delete_share_by_path_prefix(service):
    service.create_share(ShareRecord(path="/DATA/x/one"))
    service.create_share(ShareRecord(path="/DATA/x/two"))
    service.create_share(ShareRecord(path="/DATA/y"))
    service.delete_share_by_path("/DATA/x")
    assert [s.path for s in service.get_shares_list()] == ["/DATA/y"]


def test_init_samba_config_replaces_unmanaged(service):
    main = service.samba_dir / "smb.conf"
    main.write_text("[global]\nworkgroup = HOME\n")
    assert service.init_samba_config() is True
    assert (service.samba_dir / "smb.conf.bak").read_text() == "[global]\nworkgroup = HOME\n"
    content = main.read_text()
    assert content.splitlines()[0] == MANAGED_MARKER
    assert f"include={service.samba_dir / SHARE_CONFIG_NAME}" in content


def test_init_samba_config_keeps_managed(service):
    main = service.samba_dir / "smb.conf"
    main.write_text("[global]\n")
    service.init_samba_config()
    first = main.read_text()
    assert service.init_samba_config() is False
    assert main.read_text() == first


def test_init_samba_config_without_file(service):
    assert service.init_samba_config() is False
    assert not (service.samba_dir / "smb.conf").exists()