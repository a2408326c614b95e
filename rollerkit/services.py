"""Supervising long-running service processes and controlling system services."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from rollerkit.balances import AccountData
from rollerkit.bash import exec_cmd

_LAUNCHD_PLIST = "/Library/LaunchDaemons/xyz.dymension.roller.{}.plist"
_POLL_SECONDS = 0.1


@dataclass
class UIData:
    """What a status display shows about one service."""

    name: str = ""
    accounts: list[AccountData] = field(default_factory=list)
    balance: str = ""
    status: str = ""


@dataclass
class Service:
    """A service: the command that runs it and how to report on it."""

    command: Sequence[str] | None = None
    fetch_fn: Callable[[Any], list[AccountData]] | None = None
    status_fn: Callable[[Any], str] | None = None
    ui_data: UIData = field(default_factory=UIData)


@dataclass
class ServiceConfig:
    """A set of named services sharing a logger and a stop signal."""

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("rollerkit.services")
    )
    stop_event: threading.Event = field(default_factory=threading.Event)
    services: dict[str, Service] = field(default_factory=dict)
    restart_delay: float = 5.0
    _threads: list[threading.Thread] = field(default_factory=list, init=False, repr=False)

    def fetch_services_data(self, cfg: Any) -> None:
        """Refresh the accounts and status of every service that can report them."""
        for name, service in self.services.items():
            if service.fetch_fn is None:
                continue
            try:
                accounts = service.fetch_fn(cfg)
            except Exception as exc:  # noqa: BLE001 - a failing service must not stop the rest
                self.logger.error("failed to fetch data of %s: %s", name, exc)
                continue
            service.ui_data.accounts = list(accounts)
            if service.status_fn is not None:
                service.ui_data.status = service.status_fn(cfg)

    def init_services_data(self, cfg: Any) -> None:
        """Mark every service as starting."""
        for service in self.services.values():
            service.ui_data.status = "Starting..."

    def get_ui_data(self) -> list[UIData]:
        """Return the display data of every service, in insertion order."""
        return [service.ui_data for service in self.services.values()]

    def add_service(self, name: str, data: Service) -> None:
        """Register ``data`` under ``name``, replacing any previous service."""
        self.services[name] = data

    def run_service_with_restart(self, name: str) -> threading.Thread | None:
        """Run the service's command in the background, restarting it when it exits.

        The process is killed once ``stop_event`` is set. Returns the
        supervising thread, or ``None`` when the service has no command.
        """
        if name not in self.services:
            raise KeyError("service with that name does not exist")
        command = self.services[name].command
        if command is None:
            self.logger.info("service %s does not need to run separately", name)
            return None

        thread = threading.Thread(
            target=self._supervise, args=(list(command),), name=f"service-{name}", daemon=True
        )
        self._threads.append(thread)
        thread.start()
        return thread

    def _supervise(self, command: list[str]) -> None:
        line = " ".join(command)
        while not self.stop_event.is_set():
            self.logger.info("starting service command %s", line)
            try:
                process = subprocess.Popen(command)
            except OSError as exc:
                self.logger.error("failed to start %s: %s", line, exc)
            else:
                while process.poll() is None:
                    if self.stop_event.wait(_POLL_SECONDS):
                        process.kill()
                        process.wait()
                        return
            self.logger.info("process %s exited, restarting...", line)
            if self.stop_event.wait(self.restart_delay):
                return


def _launchd_plist(service_name: str) -> str:
    return _LAUNCHD_PLIST.format(service_name)


def start_systemd_service(service_name: str) -> None:
    """Start a systemd service."""
    exec_cmd(["sudo", "systemctl", "start", service_name])


def start_launchctl_service(service_name: str) -> None:
    """Start a launchd service by unloading and loading its plist."""
    plist = _launchd_plist(service_name)
    exec_cmd(["sudo", "launchctl", "unload", "-w", plist])
    exec_cmd(["sudo", "launchctl", "load", "-w", plist])


def restart_systemd_service(service_name: str) -> None:
    """Restart a systemd service."""
    exec_cmd(["sudo", "systemctl", "restart", service_name])


def restart_launchctl_service(service_name: str) -> None:
    """Restart a launchd service by unloading and loading its plist."""
    plist = _launchd_plist(service_name)
    exec_cmd(["sudo", "launchctl", "unload", "-w", plist])
    exec_cmd(["sudo", "launchctl", "load", "-w", plist])


def stop_systemd_service(service_name: str) -> None:
    """Stop a systemd service."""
    exec_cmd(["sudo", "systemctl", "stop", service_name])


def stop_launchd_service(service_name: str) -> None:
    """Stop a launchd service by unloading its plist."""
    exec_cmd(["sudo", "launchctl", "unload", "-w", _launchd_plist(service_name)])