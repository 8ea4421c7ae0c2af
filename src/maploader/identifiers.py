"""Identifier to path mapping."""

import os

from maploader.types import Identifier

SEPARATOR = "."


def is_valid_identifier(identifier: Identifier) -> bool:
    """Check that every segment of a dotted identifier is a usable path part."""
    if not identifier:
        return False
    for segment in identifier.split(SEPARATOR):
        if not segment or segment in (os.curdir, os.pardir):
            return False
        if "/" in segment or "\\" in segment or "\0" in segment:
            return False
    return True


def identifier_to_path(identifier: Identifier) -> str:
    """Map "a.b.c" to the relative path "a/b/c"."""
    if not is_valid_identifier(identifier):
        raise ValueError(f"Invalid identifier: {identifier!r}")
    return identifier.replace(SEPARATOR, "/")


def descend_path(directory: str, relative: str) -> str:
    """Join `relative` below `directory`, refusing paths that escape it."""
    root = os.path.abspath(directory)
    path = os.path.abspath(os.path.join(root, relative))
    if os.path.commonpath([root, path]) != root:
        raise ValueError(f"Path {relative!r} escapes {directory!r}")
    return path


def identifier_file_path(identifier: Identifier, directory: str, suffix: str) -> str:
    """Return `<directory>/<id-path><suffix>`."""
    return descend_path(directory, identifier_to_path(identifier) + suffix)
