"""Host information, file system helpers and system control."""

from __future__ import annotations

import ipaddress
import logging
import os
import shlex
import subprocess
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import psutil

logger = logging.getLogger(__name__)

CPU_ZONE_TYPES = ("x86_pkg_temp", "cpu", "CPU", "soc")
ENTRY_FILE_NAME = "entry.json"
APP_ORDER_FILE_NAME = "app_order.json"
_MAX_THERMAL_ZONES = 100


class PathExistsError(FileExistsError):
    """Raised when a file or directory to be created is already there."""


@dataclass
class SystemPaths:
    """Locations the system service reads from and writes to."""

    shell_path: str = "/usr/share/zenhost/shell"
    db_path: str = "/var/lib/zenhost"
    user_data_path: str = "/var/lib/zenhost"
    log_path: str = "/var/log/zenhost"
    log_save_name: str = "zenhost"
    log_file_ext: str = "log"
    modules_path: str = "/var/lib/casaos/www/modules"
    thermal_zone_stub: str = "/sys/devices/virtual/thermal/thermal_zone"
    hwmon_temperature: str = "/sys/class/hwmon/hwmon0/temp1_input"
    cpu_energy: str = "/sys/class/powercap/intel-rapl/intel-rapl:0/energy_uj"


@dataclass
class PathEntry:
    """A file or directory as shown in a listing."""

    name: str
    path: str
    is_dir: bool
    size: int = 0
    date: Optional[datetime] = None


def _read(path) -> bytes:
    """Contents of a file, or empty bytes when it cannot be read."""
    try:
        return Path(path).read_bytes()
    except OSError:
        return b""


def _one_decimal(value: float) -> float:
    return float(f"{value:.1f}")


class SystemService:
    """Reports on the host and performs file and system operations."""

    def __init__(self, paths: Optional[SystemPaths] = None):
        self.paths = paths or SystemPaths()
        self._thermal_zone: Optional[str] = None

    # file system

    def mkdir_all(self, path) -> Path:
        """Create a directory and its parents.

        Raises PathExistsError if the path exists and NotADirectoryError if a
        parent is a file.
        """
        target = Path(path)
        try:
            target.stat()
        except FileNotFoundError:
            target.mkdir(parents=True, exist_ok=True)
            return target
        raise PathExistsError(f"already exists: {path}")

    def rename_file(self, old, new) -> Path:
        """Rename ``old`` to ``new``; raise PathExistsError if ``new`` exists."""
        try:
            os.stat(new)
        except FileNotFoundError:
            os.rename(old, new)
            return Path(new)
        raise PathExistsError(f"already exists: {new}")

    def create_file(self, path) -> Path:
        """Create an empty file; raise PathExistsError if the path exists."""
        target = Path(path)
        try:
            target.stat()
        except FileNotFoundError:
            target.touch()
            return target
        raise PathExistsError(f"already exists: {path}")

    def get_dir_path(self, path) -> list[PathEntry]:
        """List a directory by name; symbolic links report their target's kind."""
        path = str(path)
        if path == "/DATA":
            if sys.platform.startswith("win"):
                path = "C:\\CasaOS\\DATA"
            elif sys.platform == "darwin":
                path = "./CasaOS/DATA"
        entries = []
        with os.scandir(path) as scanner:
            for entry in sorted(scanner, key=lambda item: item.name):
                info = entry.stat(follow_symlinks=False)
                entries.append(
                    PathEntry(
                        name=entry.name,
                        path=os.path.join(path, entry.name),
                        is_dir=entry.is_dir(),
                        size=info.st_size,
                        date=datetime.fromtimestamp(info.st_mtime),
                    )
                )
        return entries

    def get_dir_path_one(self, path) -> Optional[PathEntry]:
        """Describe one path, or return None when it cannot be read."""
        try:
            info = os.stat(path)
        except OSError:
            return None
        return PathEntry(
            name=os.path.basename(os.path.normpath(str(path))),
            path=str(path),
            is_dir=os.path.isdir(path),
            size=info.st_size,
            date=datetime.fromtimestamp(info.st_mtime),
        )

    # sensors

    def get_cpu_thermal_zone(self) -> str:
        """Path of the thermal zone that measures the CPU, or "" if none exists.

        When zones exist but none is recognised as the CPU, the first one is
        used. The answer is remembered.
        """
        if self._thermal_zone is not None:
            return self._thermal_zone
        stub = self.paths.thermal_zone_stub
        name = ""
        path = ""
        for index in range(_MAX_THERMAL_ZONES):
            path = f"{stub}{index}"
            try:
                os.stat(path)
            except FileNotFoundError:
                path = f"{stub}0" if name else ""
                break
            except OSError:
                pass
            name = _read(f"{path}/type").decode(errors="replace").removesuffix("\n")
            if name.startswith(CPU_ZONE_TYPES):
                logger.info("CPU thermal zone found: %s, path: %s.", name, path)
                self._thermal_zone = path
                return path
        self._thermal_zone = path
        return path

    def get_cpu_temperature(self) -> int:
        """CPU temperature in degrees Celsius, or 0 when unknown."""
        zone = self.get_cpu_thermal_zone()
        if zone:
            output = _read(f"{zone}/temp").decode(errors="replace")
        else:
            output = _read(self.paths.hwmon_temperature).decode(errors="replace") or "0"
        try:
            celsius = int(output.strip())
        except ValueError:
            celsius = 0
        if celsius > 1000:
            celsius //= 1000
        return celsius

    def get_cpu_power(self) -> dict[str, str]:
        """Cumulative CPU energy counter in microjoules, with a timestamp."""
        energy = Path(self.paths.cpu_energy)
        value = _read(energy).decode(errors="replace").strip() if energy.exists() else "0"
        return {"timestamp": str(int(time.time())), "value": value}

    def get_mem_info(self) -> dict:
        """Memory totals in bytes and the used share in percent."""
        memory = psutil.virtual_memory()
        return {
            "total": memory.total,
            "available": memory.available,
            "used": memory.used,
            "free": memory.free,
            "usedPercent": _one_decimal(memory.percent),
        }

    def get_cpu_percent(self) -> float:
        """CPU use in percent since the previous call, to one decimal."""
        return _one_decimal(psutil.cpu_percent(interval=None))

    def get_cpu_core_num(self) -> int:
        """Number of physical CPU cores, 0 if it cannot be determined."""
        return psutil.cpu_count(logical=False) or 0

    def get_disk_info(self) -> dict:
        """Usage of the root file system, percentages to one decimal."""
        root = "C:" if sys.platform.startswith("win") else "/"
        usage = psutil.disk_usage(root)
        info = {
            "path": root,
            "total": usage.total,
            "free": usage.free,
            "used": usage.used,
            "usedPercent": _one_decimal(usage.percent),
            "inodesTotal": 0,
            "inodesUsed": 0,
            "inodesFree": 0,
            "inodesUsedPercent": 0.0,
        }
        if hasattr(os, "statvfs"):
            stats = os.statvfs(root)
            used = stats.f_files - stats.f_ffree
            info["inodesTotal"] = stats.f_files
            info["inodesUsed"] = used
            info["inodesFree"] = stats.f_ffree
            if stats.f_files:
                info["inodesUsedPercent"] = _one_decimal(used / stats.f_files * 100)
        return info

    # web modules

    def _collect_entries(self) -> Optional[str]:
        try:
            modules = sorted(os.scandir(self.paths.modules_path), key=lambda item: item.name)
        except OSError as error:
            logger.error("read dir error: %s", error)
            return None
        parts = []
        for module in modules:
            try:
                data = Path(module.path, ENTRY_FILE_NAME).read_text()
            except OSError as error:
                logger.error("read entry file error: %s", error)
                continue
            parts.append(data + ",")
        return "[" + "".join(parts).rstrip(",") + "]"

    def get_system_entry(self) -> str:
        """JSON array of every module's entry file, or "" if none can be read."""
        return self._collect_entries() or ""

    def generate_system_entry(self) -> Path:
        """Write the combined module entries to the database directory."""
        target = Path(self.paths.db_path, "db", ENTRY_FILE_NAME)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.touch(exist_ok=True)
        content = self._collect_entries()
        if content is not None:
            target.write_text(content)
        return target

    # files kept for the user interface

    def get_logs(self) -> str:
        """Contents of the service log file."""
        name = f"{self.paths.log_save_name}.{self.paths.log_file_ext}"
        return Path(self.paths.log_path, name).read_text(errors="replace")

    def up_app_order_file(self, content: str, user_id: str) -> Path:
        """Store a user's application order."""
        directory = Path(self.paths.db_path, str(user_id))
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / APP_ORDER_FILE_NAME
        target.write_text(content)
        return target

    def get_app_order_file(self, user_id: str) -> bytes:
        """A user's stored application order, or empty bytes."""
        return _read(Path(self.paths.user_data_path, str(user_id), APP_ORDER_FILE_NAME))

    # shell helpers

    def _helper(self, command: str) -> str:
        helper = shlex.quote(os.path.join(self.paths.shell_path, "helper.sh"))
        result = subprocess.run(
            ["bash", "-c", f"source {helper} ;{command}"],
            capture_output=True,
            text=True,
            check=False,
        )
        return result.stdout

    def get_net(self, physics: bool) -> list[str]:
        """Names of the network cards, only physical ones when ``physics``."""
        kind = "2" if physics else "1"
        return [line for line in self._helper(f"GetNetCard {kind}").splitlines() if line]

    def get_time_zone(self) -> str:
        """The host's time zone as reported by the helper script."""
        return self._helper("GetTimeZone").rstrip("\n")

    # power

    @staticmethod
    def _init(level: str) -> None:
        subprocess.run(["init", level], capture_output=True, check=True)

    def reboot(self) -> None:
        """Reboot the host."""
        self._init("6")

    def shutdown(self) -> None:
        """Power the host off."""
        self._init("0")


def get_device_all_ip() -> list[str]:
    """Every non-loopback IPv4 and IPv6 address of the host."""
    addresses = []
    for entries in psutil.net_if_addrs().values():
        for entry in entries:
            if entry.family not in (psutil.AF_LINK,) and entry.address:
                text = entry.address.split("%", 1)[0]
                try:
                    ip = ipaddress.ip_address(text)
                except ValueError:
                    continue
                if not ip.is_loopback:
                    addresses.append(str(ip))
    return addresses