"""Test doubles for the resolver's collaborators."""

from .collaborators import (
    FakeCache,
    FakeFetcher,
    FakeReleaseDirectory,
    make_tar_gz,
    make_zip,
)

__all__ = [
    "FakeCache",
    "FakeFetcher",
    "FakeReleaseDirectory",
    "make_tar_gz",
    "make_zip",
]
