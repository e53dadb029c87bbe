"""Health of the host's own services and the ports in use."""

from __future__ import annotations

import subprocess

import psutil

SERVICE_PATTERN = "casaos*"


def _parse_units(output: str) -> dict[bool, list[str]]:
    running: list[str] = []
    not_running: list[str] = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 4:
            continue
        name, sub = fields[0], fields[3]
        (running if sub == "running" else not_running).append(name)
    return {True: running, False: not_running}


class HealthService:
    """Reports which services run and which ports are taken."""

    def services(self) -> dict[bool, list[str]]:
        """Map True to the running services and False to the others.

        Raises subprocess.CalledProcessError when systemctl fails.
        """
        result = subprocess.run(
            [
                "systemctl",
                "list-units",
                "--type=service",
                "--all",
                "--no-legend",
                "--plain",
                SERVICE_PATTERN,
            ],
            capture_output=True,
            text=True,
            check=True,
        )
        return _parse_units(result.stdout)

    def ports(self) -> tuple[list[int], list[int]]:
        """Listening TCP ports and bound UDP ports, each sorted and unique."""
        tcp = {
            connection.laddr.port
            for connection in psutil.net_connections(kind="tcp")
            if connection.laddr and connection.status == psutil.CONN_LISTEN
        }
        udp = {
            connection.laddr.port
            for connection in psutil.net_connections(kind="udp")
            if connection.laddr
        }
        return sorted(tcp), sorted(udp)