"""Identifier derivations used to rename the system template."""

from __future__ import annotations

import re

__all__ = [
    "transform_package_name",
    "transform_class_name",
    "transform_constant_name",
    "safe_property_name",
]


_INVALID_PACKAGE_RUN = re.compile(r"[^a-z0-9]+")
_INVALID_CLASS_CHAR = re.compile(r"[^A-Za-z0-9]")
_INVALID_CONSTANT_CHAR = re.compile(r"[^A-Z0-9]")


def transform_package_name(name: str) -> str:
    """Return the package name form of ``name``, such as ``my-system``.

    The value is lower-cased and every run of characters outside ``[a-z0-9]``
    is collapsed into a single hyphen. ``"My  System!!"`` becomes
    ``"my-system-"``.
    """

    return _INVALID_PACKAGE_RUN.sub("-", name.lower())


def transform_class_name(name: str | None, *, package_name: str = "") -> str:
    """Return the class name form of ``name``, such as ``MySystem``.

    Parameters
    ----------
    name:
        The raw class name. When ``None`` the ``package_name`` is used instead.
    package_name:
        Fallback value for a missing ``name``.
    """

    source = package_name if name is None else name
    return _INVALID_CLASS_CHAR.sub("", source)


def transform_constant_name(name: str | None, *, package_name: str = "") -> str:
    """Return the constant name form of ``name``, such as ``MYSYSTEM``.

    Everything outside ``[A-Z0-9]`` is dropped after upper-casing, underscores
    included.
    """

    source = package_name if name is None else name
    return _INVALID_CONSTANT_CHAR.sub("", source.upper())


def safe_property_name(package_name: str) -> str:
    """Return ``package_name`` without hyphens for use as an object property."""

    return package_name.replace("-", "")
