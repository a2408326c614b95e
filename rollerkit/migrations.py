"""Deciding whether a rollapp needs a migration by comparing commit dates."""

from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from collections.abc import Callable
from datetime import datetime
from http import HTTPStatus
from typing import Any

DEFAULT_OWNER = "dymensionxyz"
API_URL_ENV = "ROLLERKIT_GITHUB_API_URL"
_DEFAULT_API_URL = "https://api.github.com"
_REQUEST_TIMEOUT = 30.0

CommitFallback = Callable[[], str]


class MigrationRequiredError(RuntimeError):
    """Raised when the installed and last used versions differ."""

    def __init__(self, last: str, current_commit: str) -> None:
        super().__init__(f"a migration from {last} to {current_commit} is required")
        self.last = last
        self.current_commit = current_commit


def _api_url() -> str:
    return os.environ.get(API_URL_ENV, _DEFAULT_API_URL).rstrip("/")


def _get(url: str) -> tuple[int, str, bytes]:
    try:
        with urllib.request.urlopen(url, timeout=_REQUEST_TIMEOUT) as response:  # noqa: S310
            return response.status, str(response.reason), response.read()
    except urllib.error.HTTPError as exc:
        try:
            return exc.code, str(exc.reason), exc.read()
        finally:
            exc.close()


def _json_object(body: bytes) -> dict[str, Any]:
    data = json.loads(body)
    if not isinstance(data, dict):
        raise ValueError("response is not a JSON object")
    return data


def _parse_date(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def get_commit_timestamp(owner: str, repo: str, sha: str) -> datetime:
    """Return the committer date of ``sha``."""
    sha = sha.lower()
    sha = sha[:-1] if sha.endswith("\n") else sha
    status, reason, body = _get(f"{_api_url()}/repos/{owner}/{repo}/commits/{sha}")
    if status != HTTPStatus.OK:
        raise OSError(f"failed to fetch commit data: {status} {reason}")
    data = _json_object(body)
    try:
        date = data["commit"]["committer"]["date"]
    except (KeyError, TypeError) as exc:
        raise ValueError("commit data has no committer date") from exc
    return _parse_date(str(date))


def _tag_commit(
    owner: str, repo: str, tag: str, fallback: CommitFallback | None
) -> str:
    status, reason, body = _get(f"{_api_url()}/repos/{owner}/{repo}/git/refs/tags/{tag}")
    if status == HTTPStatus.NOT_FOUND:
        if fallback is None:
            raise LookupError(f"tag {tag} not found")
        print(f"tag not found, extracting commit from build flags {tag}")
        return fallback()
    if status != HTTPStatus.OK:
        raise OSError(f"failed to fetch tag data: {status} {reason}")
    tag_object = _json_object(body).get("object") or {}
    if not isinstance(tag_object, dict):
        raise ValueError("tag data object is not a JSON object")
    return str(tag_object.get("sha") or "")


def get_commit_from_tag(
    owner: str, repo: str, tag: str, fallback: CommitFallback | None = None
) -> str:
    """Return the commit a tag points to.

    When the tag does not exist, ``fallback`` supplies the commit.
    """
    return _tag_commit(owner, repo, tag, fallback)


def get_commit_timestamp_by_tag(
    owner: str, repo: str, tag: str, fallback: CommitFallback | None = None
) -> datetime:
    """Return the committer date of the commit a tag points to."""
    return get_commit_timestamp(owner, repo, _tag_commit(owner, repo, tag, fallback))


def get_commit_timestamp_by_release(
    owner: str, repo: str, release_tag: str, fallback: CommitFallback | None = None
) -> datetime:
    """Return the committer date of the commit behind a release."""
    status, reason, body = _get(
        f"{_api_url()}/repos/{owner}/{repo}/releases/tags/{release_tag}"
    )
    if status != HTTPStatus.OK:
        raise OSError(f"failed to fetch release data: {status} {reason}")
    tag_name = str(_json_object(body).get("tag_name") or "")
    return get_commit_timestamp_by_tag(owner, repo, tag_name, fallback)


def rollapp_repo_name(vm_type: str) -> str:
    """Return the repository name of a rollapp of the given VM type."""
    if vm_type == "wasm":
        return "rollapp-wasm"
    if vm_type == "evm":
        return "rollapp-evm"
    raise ValueError(f"invalid rollapp type: {vm_type}")


def require_rollapp_migrate_if_needed(
    current: str, last: str, vm_type: str, fallback: CommitFallback | None = None
) -> None:
    """Return when ``current`` equals ``last``; otherwise raise ``MigrationRequiredError``.

    Versions starting with ``v`` are tags, anything else a commit.
    """
    if current == last:
        print("versions match")
        return

    repo = rollapp_repo_name(vm_type)

    if current.startswith("v"):
        current_timestamp = get_commit_timestamp_by_tag(DEFAULT_OWNER, repo, current, fallback)
        current_commit = get_commit_from_tag(DEFAULT_OWNER, repo, current, fallback)
    else:
        current_timestamp = get_commit_timestamp(DEFAULT_OWNER, repo, current)
        current_commit = current

    if last.startswith("v"):
        last_timestamp = get_commit_timestamp_by_tag(DEFAULT_OWNER, repo, last, fallback)
    else:
        last_timestamp = get_commit_timestamp(DEFAULT_OWNER, repo, last)

    if last_timestamp < current_timestamp:
        print(
            f"The last used rollapp version commit ({last})"
            f" is older than the currently installed version commit ({current_commit})"
            f" please run roller rollapp migrate {current_commit} to migrate the binary"
            " and configuration before being able to start the RollApp"
        )

    raise MigrationRequiredError(last, current_commit)