#!/usr/bin/env python3
"""
Formatters for Screenshoter CLI

This module provides rich formatting utilities for the CLI presentation layer.
It includes tables, panels, and progress indicators for a better user experience.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- Capture result dictionary (CaptureResult.to_dict())
- Collections with item counts
- Export report dictionary (ExportReport.to_dict())

Expected output:
- Rich formatted tables, panels, and progress indicators
"""

import json
import os
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


# Initialize console
console = Console()


# Color scheme
COLORS = {
    "success": "green",
    "error": "red",
    "warning": "yellow",
    "info": "blue",
    "path": "cyan",
    "highlight": "magenta",
    "dim": "grey70",
}


def _collection_name(key: str) -> str:
    return key or "default"


def print_capture_result(result: Dict[str, Any]) -> None:
    """
    Format and print a capture or confirm result to the console.

    Args:
        result: Capture result dictionary
    """
    if not result.get("success", False):
        print_error(result.get("error", "Capture failed"))
        return

    if result.get("staged"):
        content = Text()
        content.append("Collection: ", style=COLORS["dim"])
        content.append(f"{_collection_name(result.get('collection_key', ''))}\n", style=COLORS["highlight"])
        content.append("Size: ", style=COLORS["dim"])
        content.append(f"{result.get('width', '?')}x{result.get('height', '?')}", style=COLORS["info"])
        console.print(Panel(
            content,
            title="[bold yellow]Capture Awaiting Review",
            border_style=COLORS["warning"],
            padding=(1, 2)
        ))
        return

    file_path = result.get("file", "Unknown")
    file_info = Text()
    file_info.append("Filename: ", style=COLORS["dim"])
    file_info.append(f"{os.path.basename(file_path)}\n", style=COLORS["path"])
    file_info.append("Directory: ", style=COLORS["dim"])
    file_info.append(f"{os.path.dirname(file_path)}\n", style=COLORS["path"])
    file_info.append("Collection: ", style=COLORS["dim"])
    file_info.append(_collection_name(result.get("collection_key", "")), style=COLORS["highlight"])

    if os.path.exists(file_path):
        size_kb = os.path.getsize(file_path) / 1024
        file_info.append("\nSize: ", style=COLORS["dim"])
        file_info.append(f"{size_kb:.1f} KB", style=COLORS["info"])

    console.print(Panel(
        file_info,
        title="[bold green]Screenshot Saved",
        border_style=COLORS["success"],
        padding=(1, 2)
    ))


def print_collections_table(collections: List[Dict[str, Any]], current_key: Optional[str] = None) -> None:
    """
    Format and print collections and their image counts as a table.

    Args:
        collections: Dicts with key, label and count
        current_key: Key of the selected collection, marked in the table
    """
    table = Table(title="Collections")

    table.add_column("", width=1, style=COLORS["success"])
    table.add_column("Label", style=COLORS["highlight"])
    table.add_column("Key", style=COLORS["dim"])
    table.add_column("Images", justify="right", style=COLORS["info"])

    for collection in collections:
        table.add_row(
            "*" if collection["key"] == current_key else "",
            collection["label"],
            _collection_name(collection["key"]),
            str(collection["count"])
        )

    console.print(table)


def print_export_results(report: Dict[str, Any]) -> None:
    """
    Format and print the outcome of an export.

    Args:
        report: Export report dictionary
    """
    if not report.get("success", False):
        print_error(report.get("error", "Export failed"))
        return

    outcome = report.get("outcome")
    if outcome == "nothing_to_export":
        print_warning("There are no screenshots to export.")
        return

    table = Table(title="Exported Archives")
    table.add_column("Collection", style=COLORS["highlight"])
    table.add_column("Images", justify="right", style=COLORS["info"])
    table.add_column("Result")

    for result in report.get("results", []):
        if result["success"]:
            status = Text(os.path.basename(result["file"] or ""), style=COLORS["path"])
        else:
            status = Text(result["error"] or "Failed", style=COLORS["error"])
        table.add_row(result["label"], str(result["file_count"]), status)

    console.print(table)

    success_count = report.get("success_count", 0)
    failure_count = report.get("failure_count", 0)
    if outcome == "all_failed":
        print_error(f"All {failure_count} archives failed.", title="Export Failed")
    elif outcome == "partial":
        print_warning(f"{success_count} archives written, {failure_count} failed.", title="Export Incomplete")
    else:
        console.print(f"[bold {COLORS['success']}]{success_count} archives written.[/bold {COLORS['success']}]")


def print_session_settings(settings: Dict[str, Any]) -> None:
    """
    Format and print the session settings.

    Args:
        settings: Dict with current_collection_key, require_confirmation and
            optional storage locations
    """
    content = Text()
    content.append("Collection: ", style=COLORS["dim"])
    content.append(f"{_collection_name(settings.get('current_collection_key', ''))}\n", style=COLORS["highlight"])
    content.append("Confirm each capture: ", style=COLORS["dim"])
    content.append("yes" if settings.get("require_confirmation") else "no", style=COLORS["info"])
    for name in ("storage_root", "prefs_dir"):
        if settings.get(name):
            content.append(f"\n{name.replace('_', ' ').capitalize()}: ", style=COLORS["dim"])
            content.append(str(settings[name]), style=COLORS["path"])

    console.print(Panel(
        content,
        title=f"[bold {COLORS['info']}]Settings",
        border_style=COLORS["info"],
        padding=(1, 2)
    ))


def print_error(message: str, title: str = "Error") -> None:
    """
    Format and print error message to the console.

    Args:
        message: Error message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["error"]),
        title=f"[bold {COLORS['error']}]{title}",
        border_style=COLORS["error"],
        padding=(1, 2)
    )

    console.print(panel)


def print_warning(message: str, title: str = "Warning") -> None:
    """
    Format and print warning message to the console.

    Args:
        message: Warning message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["warning"]),
        title=f"[bold {COLORS['warning']}]{title}",
        border_style=COLORS["warning"],
        padding=(1, 2)
    )

    console.print(panel)


def print_info(message: str, title: str = "Info") -> None:
    """
    Format and print info message to the console.

    Args:
        message: Info message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["info"]),
        title=f"[bold {COLORS['info']}]{title}",
        border_style=COLORS["info"],
        padding=(1, 2)
    )

    console.print(panel)


def print_json(data: Dict[str, Any], title: str = "JSON Output") -> None:
    """
    Format and print JSON data to the console.

    Args:
        data: JSON data
        title: Panel title
    """
    json_str = json.dumps(data, indent=2, default=str)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=True)

    panel = Panel(
        syntax,
        title=f"[bold {COLORS['info']}]{title}",
        border_style=COLORS["info"],
        padding=(1, 2)
    )

    console.print(panel)


def create_progress(description: str = "Processing") -> Progress:
    """
    Create a progress indicator.

    Args:
        description: Progress description

    Returns:
        Progress: Rich progress indicator
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("[bold green]{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
    )


if __name__ == "__main__":
    """Demonstrate formatters"""
    console.print("\n[bold]Saved Capture Example:[/bold]")
    print_capture_result({
        "success": True,
        "mode": "direct",
        "staged": False,
        "collection_key": "movies",
        "file": "/tmp/Pictures/Screenshoter/movies/Screenshot_1718000000000.png",
    })

    console.print("\n[bold]Error Example:[/bold]")
    print_capture_result({"success": False, "error": "No screen frame is ready yet, try again."})

    console.print("\n[bold]Collections Example:[/bold]")
    print_collections_table(
        [
            {"key": "", "label": "Default", "count": 2},
            {"key": "movies", "label": "Movies", "count": 5},
        ],
        current_key="movies"
    )

    console.print("\n[bold]Export Example:[/bold]")
    print_export_results({
        "success": True,
        "outcome": "partial",
        "success_count": 1,
        "failure_count": 1,
        "results": [
            {"key": "movies", "label": "Movies", "file_count": 5, "success": True,
             "file": "/tmp/Download/ScreenshotCollections/ada-movies-5.zip", "error": None},
            {"key": "food", "label": "Food", "file_count": 2, "success": False,
             "file": None, "error": "Unable to create zip destination."},
        ],
    })
