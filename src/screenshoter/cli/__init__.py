"""
CLI Layer for Screenshoter

This package contains the CLI (Command Line Interface) layer, providing a rich
interface for human users.

The CLI layer is designed to:
1. Handle user interaction concerns (review prompts, export name prompt)
2. Format outputs for human readability
3. Parse and validate command-line arguments
4. Implement CLI-specific error handling

Usage:
    from screenshoter.cli import app as screenshoter_app

    # Run the CLI app
    screenshoter_app()
"""

# CLI application
from screenshoter.cli.cli import app

# Formatters for rich output
from screenshoter.cli.formatters import (
    print_capture_result,
    print_collections_table,
    print_export_results,
    print_error,
    print_warning,
    print_info,
    print_json,
    create_progress,
    console
)

# Schema definitions
from screenshoter.cli.schemas import (
    ErrorResponse,
    SuccessResponse,
    format_cli_response,
    validate_output_against_schema
)

__all__ = [
    # CLI application
    'app',

    # Formatters
    'print_capture_result',
    'print_collections_table',
    'print_export_results',
    'print_error',
    'print_warning',
    'print_info',
    'print_json',
    'create_progress',
    'console',

    # Schemas
    'ErrorResponse',
    'SuccessResponse',
    'format_cli_response',
    'validate_output_against_schema'
]
