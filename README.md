# zenhost

A service layer for a small Linux home server. It keeps track of Samba
shares, remote SMB connections, peer devices, notifications and
dependency records in SQLite (through the standard library `sqlite3`),
runs queued file copy and move operations, assembles chunked uploads and
reports on the host: CPU, memory, disk, temperature, network cards,
running services and ports in use.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module | What it provides |
| --- | --- |
| `zenhost.types` | Enumerations such as `NotifyState`, `NotifyType`, `NotifyClass`, `DownloadState`, `TaskState`, `PersonMessage` |
| `zenhost.models` | Record dataclasses (`ConnectionRecord`, `PeerDrive`, `AppNotify`, `RelyRecord`, `ShareRecord`) and `create_schema(connection)` |
| `zenhost.rely` | `RelyService`: create, look up and delete dependency records by custom id |
| `zenhost.peer` | `PeerService`: store and look up peer devices by id, name or user agent |
| `zenhost.connections` | `ConnectionsService`: SMB connection records, plus `mount_samba` / `unmount_samba` via `mount -t cifs` and `umount -l` |
| `zenhost.shares` | `SharesService` and `render_share_config`: share records and the generated `smb.casa.conf` / `smb.conf` |
| `zenhost.file_ops` | `FileQueue`, `FileOperation`, `FileItem`, `copy_dir`, `tree_size`, `is_mounted`, and the cancellable `ContextReader` / `ContextWriter` |
| `zenhost.upload` | `ChunkUploadService` for resumable chunked uploads, raising `UploadError` for unknown or out-of-range chunks |
| `zenhost.notify` | `NotifyService` (stored notifications, event publishing) and `build_file_operate_payload` |
| `zenhost.peers` | `parse_user_agent`, `get_name`, `get_name_by_db`, `get_ip`, `get_peer_id` |
| `zenhost.casa` | `CasaService`: the latest release from a fetch function, cached for twenty minutes |
| `zenhost.system` | `SystemService`, `SystemPaths`, `PathEntry`, `PathExistsError`, `get_device_all_ip` |
| `zenhost.health` | `HealthService`: `systemctl` units matching `casaos*`, listening TCP and bound UDP ports |
| `zenhost.other` | `OtherService`, `SearchEngine`, `default_engines`, `parse_suggestions`: search suggestions from Bing, Google, Baidu, DuckDuckGo and Startpage |
| `zenhost.registry` | `ServiceRegistry`, which creates the schema and one instance of every service |

## Examples

Records and Samba configuration:

```python
import sqlite3

from zenhost.models import ShareRecord, create_schema
from zenhost.shares import render_share_config

db = sqlite3.connect(":memory:")
create_schema(db)

print(render_share_config([ShareRecord(path="/DATA/Media")]))
```

`SharesService(db, samba_dir, shell_path)` writes the share sections to
`samba_dir/smb.casa.conf` whenever a share is created or deleted and then
runs `RestartSMBD` from `shell_path/helper.sh`. `init_samba_config()`
replaces an unmanaged `smb.conf` with one that includes the share file,
keeping the old one as `smb.conf.bak`.

Chunked uploads:

```python
import tempfile

from zenhost.upload import ChunkUploadService

target = tempfile.mkdtemp()
uploads = ChunkUploadService()
done = uploads.upload_chunk(target, 1, 1024, 1, "abc", "note.txt", "note.txt", b"hello")
print(done)  # True: the only chunk arrived and note.txt.tmp was renamed to note.txt
```

Chunks are written into `<relative_path>.tmp` at offset
`(chunk_number - 1) * chunk_size`; once every chunk has arrived the file
is renamed to its final name. `test_chunk(identifier, chunk_number)`
returns True for a chunk that has arrived and raises `UploadError`
otherwise.

Wiring everything together:

```python
import sqlite3

from zenhost.registry import ServiceRegistry
from zenhost.system import SystemPaths

def publish(name, properties):
    print(name, properties)
    return 200

registry = ServiceRegistry(
    sqlite3.connect("zenhost.db"),
    paths=SystemPaths(shell_path="/usr/share/zenhost/shell"),
    publisher=publish,
)
registry.notify.send_notify("zenhost:example", {"value": 1})
```

The registry exposes `casa`, `connections`, `notify`, `rely`, `system`,
`health`, `shares`, `other`, `peer`, `file_queue` and `uploads`.

## What it does not do

- It has no HTTP API, server or command-line program; it is a library
  to be called from one.
- It has no message-bus client. `NotifyService` hands each event to the
  `publisher` callable it is given, as a name and a dict of JSON-encoded
  string values; without one, `ServiceRegistry` drops events.
- It does not know where the update server is. `CasaService` is given a
  function returning the server's JSON response; without one,
  `ServiceRegistry` raises `RuntimeError` when the version is asked for.
- It does not manage a gateway or its port, nor remote storage mounts
  other than SMB connections.
- Commands that go through `helper.sh` (`GetNetCard`, `GetTimeZone`,
  `RestartSMBD`) need that script in the configured shell path; it is not
  shipped with the package.