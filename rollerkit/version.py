"""Build version information."""

BUILD_VERSION = "<version>"
BUILD_TIME = "<build-time>"
BUILD_COMMIT = "<build-commit>"


def trim_version_str(version_str: str) -> str:
    """Return the part of a version string before the first dash."""
    return version_str.split("-", 1)[0]