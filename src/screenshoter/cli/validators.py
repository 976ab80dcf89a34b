#!/usr/bin/env python3
"""
Validators for Screenshoter CLI

This module provides validation functions for CLI inputs: collection names,
export user names, intervals and monitor numbers.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- CLI parameter values

Expected output:
- Validated and processed parameter values
- Friendly error messages
"""

from typing import Optional

import typer

from screenshoter.core.errors import ErrorKind
from screenshoter.core.sanitizer import sanitize
from screenshoter.cli.formatters import print_error, print_warning


def validate_collection_label(ctx: typer.Context, value: str) -> str:
    """
    Typer callback for validating a new collection name.

    Args:
        ctx: Typer context
        value: Collection name from CLI

    Returns:
        str: The trimmed name
    """
    trimmed = (value or "").strip()
    if not trimmed:
        print_error(ErrorKind.EMPTY_LABEL.message)
        raise typer.Exit(1)
    if not sanitize(trimmed):
        print_error(f"'{value}' contains no letters or digits to name a collection with.")
        raise typer.Exit(1)
    return trimmed


def validate_collection_key(ctx: typer.Context, value: Optional[str]) -> Optional[str]:
    """
    Typer callback that normalizes a collection key.

    Args:
        ctx: Typer context
        value: Collection key or label from CLI

    Returns:
        Optional[str]: Sanitized key, "" for the default collection
    """
    if value is None:
        return None
    key = sanitize(value)
    if value.strip() and key != value.strip():
        print_warning(f"Using collection key '{key or 'default'}' for '{value}'.")
    return key


def validate_username(ctx: typer.Context, value: Optional[str]) -> Optional[str]:
    """
    Typer callback for the export user name. None means "ask".

    Args:
        ctx: Typer context
        value: User name from CLI

    Returns:
        Optional[str]: Trimmed user name, or None when not given
    """
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        print_error(ErrorKind.EMPTY_USERNAME.message)
        raise typer.Exit(1)
    return trimmed


def validate_interval(ctx: typer.Context, value: Optional[float]) -> Optional[float]:
    """
    Typer callback for capture intervals in seconds.

    Args:
        ctx: Typer context
        value: Interval from CLI

    Returns:
        Optional[float]: Validated interval
    """
    if value is not None and value <= 0:
        print_error(f"Invalid interval: {value}. Must be greater than 0 seconds.")
        raise typer.Exit(1)
    return value


def validate_json_output(ctx: typer.Context, value: bool) -> bool:
    """
    Typer callback for validating JSON output option.

    Args:
        ctx: Typer context
        value: JSON output flag from CLI

    Returns:
        bool: Validated JSON output flag
    """
    # Store in context for other callbacks to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = value
    return value
