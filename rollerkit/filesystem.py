"""File, archive, hosts-file and service-file helpers."""

from __future__ import annotations

import hashlib
import os
import shutil
import subprocess
import sys
import tarfile
import time
import urllib.error
import urllib.request
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO

from rollerkit.bash import CommandError, exec_command_with_stdout

_HOSTS_FILE = "/etc/hosts"
_CHUNK = 64 * 1024
_POLL_SECONDS = 0.25


def dir_not_empty(path: str | os.PathLike[str]) -> bool:
    """Return whether ``path`` is a directory holding at least one entry."""
    target = Path(path)
    try:
        is_dir = target.is_dir()
        exists = target.exists()
    except OSError:
        raise
    if not exists:
        return False
    if not is_dir:
        raise NotADirectoryError(f"{path} is not a directory")
    return any(target.iterdir())


def move_file(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
    """Copy ``src`` to ``dst``, creating parent directories, then delete ``src``."""
    try:
        source = open(src, "rb")
    except OSError as exc:
        raise OSError(f"failed to open source file: {exc}") from exc
    with source:
        try:
            Path(dst).parent.mkdir(mode=0o750, parents=True, exist_ok=True)
        except OSError as exc:
            raise OSError(f"failed to create parent directories: {exc}") from exc
        try:
            destination = open(dst, "wb")
        except OSError as exc:
            raise OSError(f"failed to create destination file: {exc}") from exc
        with destination:
            try:
                shutil.copyfileobj(source, destination)
            except OSError as exc:
                raise OSError(f"failed to copy file: {exc}") from exc
    try:
        os.remove(src)
    except OSError as exc:
        raise OSError(f"failed to delete source file: {exc}") from exc


def expand_home_path(path: str) -> str:
    """Replace a leading ``~/`` with the current user's home directory."""
    if path.startswith("~/"):
        return os.path.join(str(Path.home()), path[2:])
    return path


def _open_url(url: str):  # type: ignore[no-untyped-def]
    return urllib.request.urlopen(url)  # noqa: S310


def download_file(url: str, fp: str | os.PathLike[str]) -> None:
    """Download ``url`` into the file ``fp``."""
    target = Path(fp)
    target.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
    print(f"Downloading {target.name}")
    try:
        response = _open_url(url)
    except (urllib.error.URLError, OSError) as exc:
        print(f"failed to download file: {exc}", file=sys.stderr)
        raise OSError(f"failed to download file: {exc}") from exc
    with response:
        with open(target, "wb") as out:
            shutil.copyfileobj(response, out)
    print(f"Successfully downloaded the {target.name}")


def download_and_save_archive(url: str, dest_path: str | os.PathLike[str]) -> str:
    """Download ``url`` to ``dest_path`` and return the SHA-256 hex digest."""
    print("Downloading file...")
    target = Path(dest_path)
    try:
        target.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create destination directory: {exc}") from exc

    try:
        response = _open_url(url)
    except urllib.error.HTTPError as exc:
        exc.close()
        print(f"Bad status: {exc.code} {exc.reason}", file=sys.stderr)
        raise OSError(f"bad status: {exc.code} {exc.reason}") from exc
    except (urllib.error.URLError, OSError) as exc:
        print(f"Failed to download file: {exc}", file=sys.stderr)
        raise OSError(f"failed to download file: {exc}") from exc

    digest = hashlib.sha256()
    with response:
        try:
            out = open(target, "wb")
        except OSError as exc:
            raise OSError(f"failed to create file: {exc}") from exc
        with out:
            try:
                for chunk in iter(lambda: response.read(_CHUNK), b""):
                    out.write(chunk)
                    digest.update(chunk)
            except OSError as exc:
                raise OSError(f"failed to save file: {exc}") from exc

    print("File downloaded and saved successfully")
    return digest.hexdigest()


def _is_data_member(name: str) -> bool:
    return name == "data" or name.startswith("data/")


def _safe_target(dest_dir: Path, name: str) -> Path:
    target = (dest_dir / name).resolve()
    root = dest_dir.resolve()
    if target != root and root not in target.parents:
        raise ValueError(f"archive member escapes destination: {name}")
    return target


def extract_tar_gz(
    source_path: str | os.PathLike[str], dest_dir: str | os.PathLike[str]
) -> None:
    """Extract the ``data`` directory of a gzipped tar archive into ``dest_dir``."""
    print("Extracting archive...")
    try:
        source = open(source_path, "rb")
    except OSError as exc:
        raise OSError(f"failed to open source file: {exc}") from exc

    destination = Path(dest_dir)
    with source:
        try:
            archive = tarfile.open(fileobj=source, mode="r|gz")
        except (tarfile.TarError, OSError, EOFError) as exc:
            raise ValueError(f"failed to create gzip reader: {exc}") from exc
        with archive:
            try:
                for member in archive:
                    if not _is_data_member(member.name):
                        continue
                    target = _safe_target(destination, member.name)
                    if member.isdir():
                        try:
                            target.mkdir(mode=0o755, parents=True, exist_ok=True)
                        except OSError as exc:
                            raise OSError(
                                f"failed to create directory {target}: {exc}"
                            ) from exc
                    elif member.isreg():
                        _write_member(archive, member, target)
            except (tarfile.TarError, EOFError) as exc:
                raise ValueError(f"tar reading error: {exc}") from exc

    print("Archive extracted successfully")


def _write_member(archive: tarfile.TarFile, member: tarfile.TarInfo, target: Path) -> None:
    try:
        descriptor = os.open(target, os.O_CREAT | os.O_RDWR, 0o755)
    except OSError as exc:
        raise OSError(f"failed to create file {target}: {exc}") from exc
    with os.fdopen(descriptor, "wb") as out:
        content = archive.extractfile(member)
        if content is None:
            return
        try:
            shutil.copyfileobj(content, out)
        except OSError as exc:
            raise OSError(f"failed to write to file {target}: {exc}") from exc


def remove_file_if_exists(file_path: str | os.PathLike[str]) -> None:
    """Remove ``file_path`` with elevated rights when it exists."""
    path = os.fspath(file_path)
    try:
        os.stat(path)
    except FileNotFoundError:
        print(f"File {path} does not exist")
        return
    except OSError as exc:
        raise OSError(f"error checking file: {exc}") from exc

    try:
        exec_command_with_stdout(["sudo", "rm", "-rf", path])
    except CommandError as exc:
        raise CommandError(f"failed to remove file: {exc}") from exc
    print(f"File {path} has been removed")


def _follow(handle: IO[str]) -> Iterator[str]:
    pending = ""
    while True:
        chunk = handle.readline()
        if not chunk:
            time.sleep(_POLL_SECONDS)
            continue
        pending += chunk
        if pending.endswith("\n"):
            yield pending[:-1]
            pending = ""


def tail_file(fp: str | os.PathLike[str], svc_name: str, line_number: int) -> None:
    """Follow new lines appended to ``fp`` and print them, forever.

    The first ``line_number`` new lines are skipped.
    """
    try:
        handle = open(fp, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise OSError(f"failed to tail file: {exc}") from exc
    with handle:
        handle.seek(0, os.SEEK_END)
        for index, line in enumerate(_follow(handle)):
            if index < line_number:
                continue
            print(f"{svc_name} {line}", flush=True)


def _hosts_entry_exists(host: str) -> bool:
    try:
        return host in Path(_HOSTS_FILE).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False


def update_hosts_file(addr: str, host: str) -> None:
    """Add ``addr host`` to the hosts file unless ``host`` is already there."""
    print(f"adding {host} to hosts file")
    if _hosts_entry_exists(host):
        print(f"Entry for {host} already exists in {_HOSTS_FILE}")
        return

    try:
        result = subprocess.run(
            ["sudo", "sh", "-c", f"echo '{addr} {host}' >> {_HOSTS_FILE}"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise CommandError(f"failed to update hosts file: {exc}") from exc
    if result.returncode != 0:
        raise CommandError(
            f"failed to update hosts file: exit status {result.returncode} - {result.stdout}",
            returncode=result.returncode,
            stdout=result.stdout or "",
        )
    print(f"Added {host} to {_HOSTS_FILE}")


def _service_file_path(service: str) -> str | None:
    if sys.platform.startswith("linux"):
        return os.path.join("/etc/systemd/system/", f"{service}.service")
    if sys.platform == "darwin":
        return os.path.join("/Library/LaunchDaemons/", f"xyz.dymension.roller.{service}.plist")
    return None


def remove_service_files(services: Iterable[str]) -> None:
    """Remove the systemd units or launchd plists of ``services``."""
    names = list(services)
    if _service_file_path("probe") is None:
        return
    print("removing old systemd services")
    for service in names:
        path = _service_file_path(service)
        assert path is not None
        try:
            remove_file_if_exists(path)
        except (OSError, CommandError) as exc:
            print(f"failed to remove systemd service: {exc}", file=sys.stderr)
            raise