"""Samba shares: their records and the configuration files generated from them."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import sqlite3
import subprocess
import time
from dataclasses import replace
from pathlib import Path
from typing import Iterable

from zenhost.models import ShareRecord

logger = logging.getLogger(__name__)

SHARE_CONFIG_NAME = "smb.casa.conf"
MAIN_CONFIG_NAME = "smb.conf"
MANAGED_MARKER = "# Managed by zenhost: edits to this file are not supported."

_SUMMARY_COLUMNS = ("anonymous", "path", "id")

_GLOBAL_SECTION = """[global]
## fruit settings
   min protocol = SMB2
   ea support = yes
## vfs objects = fruit streams_xattr
   fruit:metadata = stream
   fruit:model = Macmini
   fruit:veto_appledouble = no
   fruit:posix_rename = yes
   fruit:zero_file_id = yes
   fruit:wipe_intentionally_left_blank_rfork = yes
   fruit:delete_empty_adfiles = yes
   map to guest = bad user
   include={include}"""


def _base(path: str) -> str:
    """Last element of a path, ignoring trailing slashes."""
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def render_share_config(shares: Iterable[ShareRecord]) -> str:
    """Return the Samba sections that publish every share."""
    sections = []
    for share in shares:
        name = _base(share.path)
        sections.append(
            f"\n[{name}]\n"
            f"comment = Shared folder {name}\n"
            "public = Yes\n"
            f"path = {share.path}\n"
            "browseable = Yes\n"
            "read only = No\n"
            "guest ok = Yes\n"
            "create mask = 0777\n"
            "directory mask = 0777\n"
            "force user = root\n\n"
        )
    return "".join(sections)


class SharesService:
    """Keeps share records and regenerates the Samba configuration."""

    def __init__(self, db: sqlite3.Connection, samba_dir="/etc/samba", shell_path=""):
        self._db = db
        self.samba_dir = Path(samba_dir)
        self.shell_path = str(shell_path)

    def _select(self, where: str = "", params: tuple = ()) -> list[ShareRecord]:
        cursor = self._db.cursor()
        cursor.row_factory = sqlite3.Row
        sql = f"SELECT {', '.join(_SUMMARY_COLUMNS)} FROM {ShareRecord.TABLE}{where}"
        records = []
        for row in cursor.execute(sql, params):
            values = dict(row)
            values["anonymous"] = bool(values["anonymous"])
            records.append(ShareRecord(**values))
        return records

    def get_shares_list(self) -> list[ShareRecord]:
        """Return every share with its id, path and anonymous flag."""
        return self._select()

    def get_shares_by_path(self, path: str) -> list[ShareRecord]:
        """Return the shares of exactly this path."""
        return self._select(" WHERE path = ?", (path,))

    def get_shares_by_name(self, name: str) -> list[ShareRecord]:
        """Return the shares with this name."""
        return self._select(" WHERE name = ?", (name,))

    def create_share(self, share: ShareRecord) -> ShareRecord:
        """Store a share and regenerate the Samba configuration."""
        now = int(time.time())
        stored = replace(share, created=share.created or now, updated=share.updated or now)
        row = {column: getattr(stored, column) for column in ShareRecord.COLUMNS}
        row["anonymous"] = int(bool(row["anonymous"]))
        if not stored.id:
            del row["id"]
        columns = ", ".join(row)
        marks = ", ".join("?" for _ in row)
        with self._db:
            cursor = self._db.execute(
                f"INSERT INTO {ShareRecord.TABLE} ({columns}) VALUES ({marks})",
                tuple(row.values()),
            )
        stored = replace(stored, id=stored.id or cursor.lastrowid)
        self.init_samba_config()
        self.update_config_file()
        return stored

    def delete_share(self, share_id) -> None:
        """Remove the share with this id and regenerate the configuration."""
        with self._db:
            self._db.execute(f"DELETE FROM {ShareRecord.TABLE} WHERE id = ?", (share_id,))
        self.update_config_file()

    def delete_share_by_path(self, path: str) -> None:
        """Remove every share whose path starts with ``path``."""
        with self._db:
            self._db.execute(
                f"DELETE FROM {ShareRecord.TABLE} WHERE path LIKE ?", (path + "%",)
            )
        self.update_config_file()

    def update_config_file(self) -> Path:
        """Write the share sections file and restart the Samba daemon."""
        target = self.samba_dir / SHARE_CONFIG_NAME
        self.samba_dir.mkdir(parents=True, exist_ok=True)
        target.write_text(render_share_config(self._select()))
        helper = shlex.quote(os.path.join(self.shell_path, "helper.sh"))
        try:
            subprocess.run(
                ["bash", "-c", f"source {helper} ;RestartSMBD"],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as error:
            logger.error("cannot restart samba: %s", error)
        return target

    def init_samba_config(self) -> bool:
        """Replace an unmanaged smb.conf with one that includes the share file.

        The previous file is kept as smb.conf.bak. Returns True when the
        file was replaced.
        """
        main = self.samba_dir / MAIN_CONFIG_NAME
        if not main.exists():
            return False
        with main.open() as handle:
            first_line = handle.readline()
        if MANAGED_MARKER in first_line:
            return False
        shutil.move(str(main), str(main.with_name(MAIN_CONFIG_NAME + ".bak")))
        include = self.samba_dir / SHARE_CONFIG_NAME
        main.write_text(
            MANAGED_MARKER + "\n#\n" + _GLOBAL_SECTION.format(include=include)
        )
        return True