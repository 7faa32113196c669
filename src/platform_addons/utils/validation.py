"""Validation utilities for Kubernetes object names."""

import re

_DNS_LABEL = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


def validate_namespace(name: str) -> bool:
    """Validate a namespace name follows Kubernetes DNS label rules.

    Namespace names must:
    - Be lowercase
    - Start and end with alphanumeric characters
    - Contain only alphanumeric characters and hyphens
    - Be between 1 and 63 characters

    Args:
        name: Namespace name to validate

    Returns:
        True if valid

    Raises:
        ValueError: If name is invalid
    """
    if not name:
        raise ValueError("Namespace cannot be empty")

    if len(name) > 63:
        raise ValueError("Namespace must be 63 characters or less")

    if not _DNS_LABEL.match(name):
        raise ValueError(
            f"Invalid namespace '{name}': must be lowercase alphanumeric with hyphens, "
            "starting and ending with alphanumeric characters"
        )

    return True


def validate_release_name(name: str) -> bool:
    """Validate a Helm release name.

    Helm limits release names to 53 characters so generated resource names stay
    within the 63 character label limit.

    Args:
        name: Release name to validate

    Returns:
        True if valid

    Raises:
        ValueError: If name is invalid
    """
    if not name:
        raise ValueError("Release name cannot be empty")

    if len(name) > 53:
        raise ValueError("Release name must be 53 characters or less")

    if not _DNS_LABEL.match(name):
        raise ValueError(
            f"Invalid release name '{name}': must be lowercase alphanumeric with hyphens"
        )

    return True
