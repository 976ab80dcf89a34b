#!/usr/bin/env python3
"""
Command Line Interface for Screenshoter

This module provides a CLI for capturing screenshots into collections,
reviewing them, managing collections and exporting them as zip archives,
using Typer and Rich.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- screenshoter capture --collection movies
- screenshoter collections add "My Trip"
- screenshoter export --user ada

Expected output:
- Formatted console output of operation results
- Screenshots and zip archives saved under the storage root
- Structured JSON output for machine consumption (--json)
"""

import threading
import time
from typing import Any, Dict, Optional

import typer
from loguru import logger
from rich.prompt import Confirm, Prompt

from screenshoter import __version__
from screenshoter.core.config import CONFIG, validate_config
from screenshoter.core.errors import ErrorKind
from screenshoter.core.exporter import ExportOutcome
from screenshoter.core.pipeline import CaptureMode, CaptureResult
from screenshoter.core.sanitizer import sanitize
from screenshoter.core.service import ScreenshoterService
from screenshoter.core.source import get_monitors, get_system_info
from screenshoter.core.utils import configure_logging
from screenshoter.cli.formatters import (
    console,
    create_progress,
    print_capture_result,
    print_collections_table,
    print_error,
    print_export_results,
    print_info,
    print_json,
    print_session_settings,
    print_warning,
)
from screenshoter.cli.schemas import (
    ErrorResponse,
    SuccessResponse,
    format_cli_response,
    response_from_result,
    validate_output_against_schema,
)
from screenshoter.cli.validators import (
    validate_collection_key,
    validate_collection_label,
    validate_interval,
    validate_json_output,
    validate_username,
)


# Initialize typer app with command groups
app = typer.Typer(
    help="Screenshoter - capture screenshots into collections and export them",
    rich_markup_mode="rich",
    add_completion=False
)

collections_app = typer.Typer(help="Collection commands", rich_markup_mode="rich")
settings_app = typer.Typer(help="Capture settings", rich_markup_mode="rich")
tools_app = typer.Typer(help="Utility tools", rich_markup_mode="rich")

app.add_typer(collections_app, name="collections", help="Collection commands")
app.add_typer(settings_app, name="settings", help="Capture settings")
app.add_typer(tools_app, name="tools", help="Utility tools")


def _get_service(ctx: typer.Context) -> ScreenshoterService:
    """Create the service on first use; it is closed when the command ends."""
    root = ctx.find_root()
    root.ensure_object(dict)
    service = root.obj.get("service")
    if service is None:
        service = ScreenshoterService.from_config(CONFIG)
        root.obj["service"] = service
        root.call_on_close(service.close)
    return service


def _json_output(ctx: typer.Context) -> bool:
    root = ctx.find_root()
    return bool(root.obj and root.obj.get("json_output", False))


def _emit_json(response: Dict[str, Any]) -> None:
    model = SuccessResponse if response.get("success") else ErrorResponse
    valid, error = validate_output_against_schema(response, model)
    if not valid:
        logger.warning(f"JSON output does not match {model.__name__}: {error}")
    print_json(response)


def _fail(json_output: bool, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    if json_output:
        _emit_json(format_cli_response(False, error=message, details=details))
    else:
        print_error(message)
    raise typer.Exit(1)


def _start_session(service: ScreenshoterService, json_output: bool) -> None:
    if not service.start().result():
        _fail(json_output, ErrorKind.SOURCE_UNAVAILABLE.message, {"error_kind": ErrorKind.SOURCE_UNAVAILABLE.value})


def _capture_when_ready(
    service: ScreenshoterService,
    mode: Optional[CaptureMode],
    collection_key: Optional[str],
    timeout: float
) -> CaptureResult:
    """Retry while the capture source has not produced its first frame yet."""
    deadline = time.monotonic() + timeout
    while True:
        result = service.capture_now(mode, collection_key).result()
        if result.error != ErrorKind.NO_FRAME_AVAILABLE or time.monotonic() >= deadline:
            return result
        time.sleep(0.05)


def _review_pending(service: ScreenshoterService) -> CaptureResult:
    """Ask whether to keep the pending capture, then confirm or reject it."""
    pending = service.pending_capture()
    label = service.collections.folder_label(pending.collection_key) if pending else ""
    if Confirm.ask(f"Save this screenshot to [magenta]{label}[/magenta]?", default=True):
        return service.confirm_pending().result()
    service.reject_pending()
    return CaptureResult(CaptureMode.PREVIEW, error=ErrorKind.NOTHING_PENDING)


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON",
        callback=validate_json_output
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show informational log messages"
    ),
):
    """
    Screenshoter - Captures screenshots into collections

    Screenshots are stored per collection under the storage root and can be
    bundled into one zip archive per collection.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json_output

    level = "INFO" if verbose else CONFIG["logging"]["level"]
    configure_logging(level, CONFIG["logging"]["file"])
    for problem in validate_config(CONFIG):
        logger.warning(f"Configuration problem: {problem}")


@app.command("capture")
def capture_command(
    ctx: typer.Context,
    collection: Optional[str] = typer.Option(
        None,
        "--collection", "-c",
        help="Collection to save into. Defaults to the selected collection.",
        callback=validate_collection_key
    ),
    preview: Optional[bool] = typer.Option(
        None,
        "--preview/--direct",
        help="Review the capture before saving. Defaults to the confirmation setting."
    ),
    yes: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Save a previewed capture without asking"
    ),
    wait: float = typer.Option(
        3.0,
        "--wait",
        help="Seconds to wait for the first screen frame",
        callback=validate_interval
    ),
):
    """
    Take one screenshot and save it into a collection.

    With confirmation enabled the screenshot is shown for review first.
    """
    json_output = _json_output(ctx)
    service = _get_service(ctx)

    try:
        _start_session(service, json_output)

        mode = None if preview is None else (CaptureMode.PREVIEW if preview else CaptureMode.DIRECT)
        if not json_output:
            with console.status("Capturing screen..."):
                result = _capture_when_ready(service, mode, collection, wait)
        else:
            result = _capture_when_ready(service, mode, collection, wait)

        if result.staged:
            if yes:
                result = service.confirm_pending().result()
            elif json_output:
                service.reject_pending()
                _fail(json_output, "Preview needs an interactive terminal; pass --yes or --direct.")
            else:
                print_capture_result(result.to_dict())
                result = _review_pending(service)
                if result.error == ErrorKind.NOTHING_PENDING:
                    print_info("Screenshot discarded.")
                    return
    finally:
        service.stop()

    if json_output:
        _emit_json(response_from_result(result.to_dict()))
    else:
        print_capture_result(result.to_dict())
    if not result.success:
        raise typer.Exit(1)


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval", "-i",
        help="Seconds between captures. Defaults to SCREENSHOTER_AUTO_INTERVAL.",
        callback=validate_interval
    ),
    count: int = typer.Option(
        0,
        "--count", "-n",
        help="Stop after this many saved screenshots (0 runs until Ctrl+C)"
    ),
    collection: Optional[str] = typer.Option(
        None,
        "--collection", "-c",
        help="Collection to save into",
        callback=validate_collection_key
    ),
):
    """
    Capture periodically until stopped.

    With confirmation enabled every capture is shown for review.
    """
    json_output = _json_output(ctx)
    service = _get_service(ctx)
    if json_output and service.session_state().require_confirmation:
        _fail(json_output, "Watching with confirmation needs an interactive terminal; run 'settings confirm --off'.")

    if collection is not None:
        service.select_collection(collection)
    _start_session(service, json_output)

    saved = []
    saved_event = threading.Event()

    def on_capture(timestamp: int) -> None:
        if timestamp:
            saved.append(timestamp)
            saved_event.set()

    unsubscribe = service.pipeline.capture_events.subscribe(on_capture)
    service.start_auto_capture(interval)
    if not json_output:
        print_info(
            f"Capturing every {interval or service.auto_interval:g}s into "
            f"'{service.collections.folder_label(service.session_state().current_collection_key)}'. "
            "Press Ctrl+C to stop."
        )

    source_lost = False
    try:
        while count <= 0 or len(saved) < count:
            if not service.session.is_active:
                source_lost = True
                break
            saved_event.wait(0.2)
            saved_event.clear()
            if service.pending_capture() is not None:
                _review_pending(service)
    except KeyboardInterrupt:
        pass
    finally:
        unsubscribe()
        service.stop()

    if source_lost:
        logger.warning("capture session ended, the screen source is no longer available")

    if json_output:
        _emit_json(format_cli_response(True, data={"saved": len(saved)}))
    else:
        print_info(f"Saved {len(saved)} screenshots.")


@collections_app.command("list")
def collections_list(ctx: typer.Context):
    """
    Show all collections and how many screenshots each holds.
    """
    json_output = _json_output(ctx)
    service = _get_service(ctx)
    collections = service.list_collections()
    current = service.session_state().current_collection_key

    if json_output:
        _emit_json(format_cli_response(True, data={"collections": collections, "current": current}))
    else:
        print_collections_table(collections, current_key=current)


@collections_app.command("add")
def collections_add(
    ctx: typer.Context,
    label: str = typer.Argument(
        ...,
        help="Name of the new collection",
        callback=validate_collection_label
    ),
    select: bool = typer.Option(
        False,
        "--select", "-s",
        help="Also make it the selected collection"
    ),
):
    """
    Create a custom collection.
    """
    json_output = _json_output(ctx)
    service = _get_service(ctx)
    result = service.add_collection(label)
    if not result.success:
        _fail(json_output, result.error.message, {"error_kind": result.error.value})

    key = sanitize(label)
    if select:
        service.select_collection(key)

    if json_output:
        _emit_json(format_cli_response(True, data={"key": key, "label": label, "selected": select}))
    else:
        print_info(f"Collection '{label}' created with key '{key}'.")


@collections_app.command("select")
def collections_select(
    ctx: typer.Context,
    key: str = typer.Argument(
        ...,
        help="Key of the collection to save new screenshots into ('' for Default)",
        callback=validate_collection_key
    ),
):
    """
    Select the collection new screenshots go to.
    """
    json_output = _json_output(ctx)
    service = _get_service(ctx)
    known = {c.key for c in service.collections.all_collections()}
    if key not in known:
        print_warning(f"'{key}' is not a known collection; screenshots will still be saved under it.")
    key = service.select_collection(key)
    label = service.collections.folder_label(key)

    if json_output:
        _emit_json(format_cli_response(True, data={"key": key, "label": label}))
    else:
        print_info(f"New screenshots go to '{label}'.")


@app.command("export")
def export_command(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(
        None,
        "--user", "-u",
        help="Name used in the archive file names. Asked for when omitted.",
        callback=validate_username
    ),
):
    """
    Bundle every non-empty collection into its own zip archive.
    """
    json_output = _json_output(ctx)
    service = _get_service(ctx)

    if user is None:
        last = service.last_export_name()
        if json_output:
            if not last:
                _fail(json_output, ErrorKind.EMPTY_USERNAME.message, {"error_kind": ErrorKind.EMPTY_USERNAME.value})
            user = last
        else:
            user = Prompt.ask("Name for the export", default=last)

    if json_output:
        report = service.export_all(user or "").result()
    else:
        with create_progress("Exporting collections") as progress:
            task = progress.add_task("Preparing...", total=None)

            def on_progress(current: int, total: int, label: str) -> None:
                progress.update(task, completed=current - 1, total=total, description=f"Zipping {label}")

            report = service.export_all(user or "", on_progress).result()
            progress.update(task, completed=1, total=1, description="Done")

    data = report.to_dict()
    if json_output:
        _emit_json(response_from_result(data))
    else:
        print_export_results(data)
    if not report.success or report.summary.outcome == ExportOutcome.ALL_FAILED:
        raise typer.Exit(1)


@settings_app.command("show")
def settings_show(ctx: typer.Context):
    """
    Show the selected collection and the confirmation setting.
    """
    json_output = _json_output(ctx)
    service = _get_service(ctx)
    state = service.session_state()
    settings = {
        "current_collection_key": state.current_collection_key,
        "require_confirmation": state.require_confirmation,
        "storage_root": CONFIG["storage"]["root"],
        "prefs_dir": CONFIG["storage"]["prefs_dir"],
    }

    if json_output:
        _emit_json(format_cli_response(True, data=settings))
    else:
        print_session_settings(settings)


@settings_app.command("confirm")
def settings_confirm(
    ctx: typer.Context,
    enabled: bool = typer.Option(
        ...,
        "--on/--off",
        help="Review each capture before it is saved"
    ),
):
    """
    Turn capture confirmation on or off.
    """
    json_output = _json_output(ctx)
    service = _get_service(ctx)
    persisted = service.set_require_confirmation(enabled)

    if json_output:
        _emit_json(format_cli_response(True, data={"require_confirmation": enabled, "persisted": persisted}))
    else:
        if not persisted:
            print_warning("The setting could not be saved and will be lost on exit.")
        print_info(f"Capture confirmation {'enabled' if enabled else 'disabled'}.")


@tools_app.command("monitors")
def show_monitors(ctx: typer.Context):
    """
    Show the monitors available for capture.
    """
    json_output = _json_output(ctx)
    monitors = get_monitors()
    if json_output:
        _emit_json(format_cli_response(True, data={"monitors": monitors}))
    elif not monitors:
        print_warning("No monitors found.")
    else:
        print_info("\n".join(
            f"{m['monitor_num']}: {m['width']}x{m['height']} at ({m['left']}, {m['top']})" for m in monitors
        ))


@tools_app.command("version")
def show_version(ctx: typer.Context):
    """
    Show version information.
    """
    version_info = {
        "name": "Screenshoter",
        "version": __version__,
        "description": "Capture screenshots into collections and export them as zip archives.",
    }
    version_info.update(get_system_info())

    if _json_output(ctx):
        _emit_json(format_cli_response(True, data=version_info))
    else:
        print_info("\n".join(f"{key.replace('_', ' ').capitalize()}: {value}" for key, value in version_info.items()))


if __name__ == "__main__":
    """
    CLI entry point for Screenshoter.

    Examples:
      python -m screenshoter.cli.cli capture --collection movies
      python -m screenshoter.cli.cli collections list
      python -m screenshoter.cli.cli export --user ada
    """
    app()
