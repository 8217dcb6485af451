"""Main entry point for the aftership command line tool.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from aftership.core.aftership import AfterShip
from aftership.core.command_handler import CommandHandler, build_identifier
from aftership.domain.models.courier import DetectCourierParams
from aftership.domain.models.errors import AfterShipError
from aftership.domain.models.identifiers import TrackingIdentifier
from aftership.domain.models.serialization import from_dict
from aftership.domain.models.tracking import (
    CreateTrackingParams,
    EstimatedDeliveryDate,
    GetTrackingsParams,
    TrackingCompletedStatus,
    UpdateTrackingParams,
)
from aftership.infrastructure.cli.display import ConsoleDisplay
from aftership.infrastructure.config.settings import get_config, load_configuration
from aftership.infrastructure.monitoring.logger_setup import setup_logging, level_from_name

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

_handler: Optional[CommandHandler] = None
_ui: Optional[ConsoleDisplay] = None


def get_ui() -> ConsoleDisplay:
    global _ui
    if _ui is None:
        _ui = ConsoleDisplay()
    return _ui


def create_command_handler() -> CommandHandler:
    """Creates and wires up the dependencies for the CLI.

    This acts as the Composition Root. Exits with status 1 when the client
    cannot be configured (e.g. no API key).
    """
    global _handler
    if _handler is not None:
        return _handler
    ui = get_ui()
    try:
        aftership = AfterShip()
    except AfterShipError as e:
        logger.error(f"Failed to initialize AfterShip client: {e}")
        ui.display_error(f"Initialization failed: {e}")
        raise typer.Exit(code=1)
    _handler = CommandHandler(aftership=aftership, ui=ui)
    logger.debug("Command handler initialized.")
    return _handler


def reset_dependencies() -> None:
    """Drops cached dependencies (used between CLI invocations in tests)."""
    global _handler, _ui
    _handler = None
    _ui = None


def _finish(ok: bool) -> None:
    if not ok:
        raise typer.Exit(code=1)


def _identifier(tracking_id: Optional[str], slug: Optional[str], number: Optional[str]) -> TrackingIdentifier:
    try:
        return build_identifier(tracking_id, slug, number)
    except AfterShipError as e:
        get_ui().display_error(str(e))
        raise typer.Exit(code=1)


# --- Typer App Definition ---
app = typer.Typer(
    name="aftership",
    help="Command line client for the AfterShip tracking API.",
    add_completion=False,
    no_args_is_help=True,
)
trackings_app = typer.Typer(help="Create, list, update and delete trackings.", no_args_is_help=True)
couriers_app = typer.Typer(help="List and detect couriers.", no_args_is_help=True)
notifications_app = typer.Typer(help="Manage notification receivers of a tracking.", no_args_is_help=True)
edd_app = typer.Typer(help="Estimated delivery date predictions.", no_args_is_help=True)
app.add_typer(trackings_app, name="trackings")
app.add_typer(couriers_app, name="couriers")
app.add_typer(notifications_app, name="notifications")
app.add_typer(edd_app, name="edd")

# Shared identifier options
IdOption = Annotated[Optional[str], typer.Option("--id", help="Tracking ID generated by AfterShip.")]
SlugOption = Annotated[Optional[str], typer.Option("--slug", "-s", help="Courier slug, e.g. 'dhl'.")]
NumberOption = Annotated[Optional[str], typer.Option("--number", "-n", help="Tracking number.")]


@app.callback()
def main_callback(
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Logging level (debug, info, warning, error).")
    ] = None,
):
    """Configure logging before any command runs."""
    load_configuration()
    level = level_from_name(log_level or get_config('logging.level'))
    setup_logging(
        log_level=level,
        log_file=get_config('logging.file'),
        log_format=get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
    )


# --- Tracking commands ---

@trackings_app.command("create")
def create_tracking(
    tracking_number: Annotated[str, typer.Argument(help="Tracking number of the shipment.")],
    slug: SlugOption = None,
    title: Annotated[Optional[str], typer.Option(help="Title of the tracking.")] = None,
    order_id: Annotated[Optional[str], typer.Option("--order-id", help="Order ID.")] = None,
    emails: Annotated[Optional[List[str]], typer.Option("--email", help="Email to notify (repeatable).")] = None,
    smses: Annotated[Optional[List[str]], typer.Option("--sms", help="Phone number to notify (repeatable).")] = None,
    language: Annotated[Optional[str], typer.Option(help="ISO 639-1 language code.")] = None,
):
    """Create a new tracking."""
    params = CreateTrackingParams(
        tracking_number=tracking_number,
        slug=slug,
        title=title,
        order_id=order_id,
        emails=emails or None,
        smses=smses or None,
        language=language,
    )
    _finish(create_command_handler().handle_create_tracking(params))


@trackings_app.command("list")
def list_trackings(
    slug: SlugOption = None,
    tag: Annotated[Optional[str], typer.Option(help="Filter by status tag, e.g. 'InTransit'.")] = None,
    keyword: Annotated[Optional[str], typer.Option(help="Search tracking numbers, titles and order IDs.")] = None,
    page: Annotated[Optional[int], typer.Option(min=1, help="Page to show.")] = None,
    limit: Annotated[Optional[int], typer.Option(min=1, max=200, help="Trackings per page.")] = None,
    fetch_all: Annotated[bool, typer.Option("--all", help="Fetch every page.")] = False,
):
    """List trackings."""
    params = GetTrackingsParams(slug=slug, tag=tag, keyword=keyword, page=page, limit=limit)
    _finish(create_command_handler().handle_list_trackings(params, fetch_all=fetch_all))


@trackings_app.command("get")
def get_tracking(
    tracking_id: IdOption = None,
    slug: SlugOption = None,
    number: NumberOption = None,
    fields: Annotated[Optional[str], typer.Option(help="Comma separated fields to return.")] = None,
    lang: Annotated[Optional[str], typer.Option(help="Language of checkpoint messages.")] = None,
):
    """Show a single tracking with its checkpoints."""
    identifier = _identifier(tracking_id, slug, number)
    _finish(create_command_handler().handle_get_tracking(identifier, fields=fields, lang=lang))


@trackings_app.command("update")
def update_tracking(
    tracking_id: IdOption = None,
    slug: SlugOption = None,
    number: NumberOption = None,
    title: Annotated[Optional[str], typer.Option(help="New title.")] = None,
    customer_name: Annotated[Optional[str], typer.Option("--customer-name", help="Customer name.")] = None,
    order_id: Annotated[Optional[str], typer.Option("--order-id", help="Order ID.")] = None,
    note: Annotated[Optional[str], typer.Option(help="Note.")] = None,
):
    """Update fields of a tracking."""
    identifier = _identifier(tracking_id, slug, number)
    params = UpdateTrackingParams(title=title, customer_name=customer_name, order_id=order_id, note=note)
    _finish(create_command_handler().handle_update_tracking(identifier, params))


@trackings_app.command("delete")
def delete_tracking(tracking_id: IdOption = None, slug: SlugOption = None, number: NumberOption = None):
    """Delete a tracking."""
    identifier = _identifier(tracking_id, slug, number)
    _finish(create_command_handler().handle_delete_tracking(identifier))


@trackings_app.command("retrack")
def retrack_tracking(tracking_id: IdOption = None, slug: SlugOption = None, number: NumberOption = None):
    """Retrack an expired tracking (max 3 times per tracking)."""
    identifier = _identifier(tracking_id, slug, number)
    _finish(create_command_handler().handle_retrack(identifier))


@trackings_app.command("complete")
def mark_completed(
    status: Annotated[TrackingCompletedStatus, typer.Argument(help="Reason for completing the tracking.")],
    tracking_id: IdOption = None,
    slug: SlugOption = None,
    number: NumberOption = None,
):
    """Mark a tracking as completed."""
    identifier = _identifier(tracking_id, slug, number)
    _finish(create_command_handler().handle_mark_completed(identifier, status))


# --- Courier commands ---

@couriers_app.command("list")
def list_couriers():
    """List couriers activated in the account."""
    _finish(create_command_handler().handle_list_couriers())


@couriers_app.command("all")
def list_all_couriers():
    """List every courier supported by AfterShip."""
    _finish(create_command_handler().handle_list_couriers(include_all=True))


@couriers_app.command("detect")
def detect_courier(
    tracking_number: Annotated[str, typer.Argument(help="Tracking number to detect.")],
    postal_code: Annotated[Optional[str], typer.Option("--postal-code", help="Destination postal code.")] = None,
    ship_date: Annotated[Optional[str], typer.Option("--ship-date", help="Ship date (YYYYMMDD).")] = None,
    slugs: Annotated[Optional[List[str]], typer.Option("--slug", help="Only consider these couriers.")] = None,
):
    """Detect the courier of a tracking number."""
    params = DetectCourierParams(
        tracking_number=tracking_number,
        tracking_postal_code=postal_code,
        tracking_ship_date=ship_date,
        slug=slugs or None,
    )
    _finish(create_command_handler().handle_detect_courier(params))


# --- Last checkpoint ---

@app.command("checkpoint")
def last_checkpoint(tracking_id: IdOption = None, slug: SlugOption = None, number: NumberOption = None):
    """Show the last checkpoint of a tracking."""
    identifier = _identifier(tracking_id, slug, number)
    _finish(create_command_handler().handle_last_checkpoint(identifier))


# --- Notifications ---

EmailOption = Annotated[Optional[List[str]], typer.Option("--email", help="Email receiver (repeatable).")]
SmsOption = Annotated[Optional[List[str]], typer.Option("--sms", help="SMS receiver (repeatable).")]


@notifications_app.command("get")
def get_notification(tracking_id: IdOption = None, slug: SlugOption = None, number: NumberOption = None):
    """Show notification receivers of a tracking."""
    identifier = _identifier(tracking_id, slug, number)
    _finish(create_command_handler().handle_get_notification(identifier))


@notifications_app.command("add")
def add_notification(
    tracking_id: IdOption = None,
    slug: SlugOption = None,
    number: NumberOption = None,
    emails: EmailOption = None,
    smses: SmsOption = None,
):
    """Add notification receivers to a tracking."""
    identifier = _identifier(tracking_id, slug, number)
    _finish(create_command_handler().handle_change_notification(identifier, emails or [], smses or []))


@notifications_app.command("remove")
def remove_notification(
    tracking_id: IdOption = None,
    slug: SlugOption = None,
    number: NumberOption = None,
    emails: EmailOption = None,
    smses: SmsOption = None,
):
    """Remove notification receivers from a tracking."""
    identifier = _identifier(tracking_id, slug, number)
    _finish(create_command_handler().handle_change_notification(identifier, emails or [], smses or [], remove=True))


# --- Estimated delivery dates ---

@edd_app.command("predict")
def predict_edd(
    file: Annotated[Path, typer.Argument(
        exists=True, file_okay=True, dir_okay=False, readable=True, resolve_path=True,
        help="JSON file with a list of estimated delivery date requests.")],
):
    """Predict delivery dates for the shipments listed in a JSON file."""
    try:
        payload = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        get_ui().display_error(f"Could not read {file}: {e}")
        raise typer.Exit(code=1)
    if isinstance(payload, dict):
        payload = payload.get("estimated_delivery_dates", [])
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        get_ui().display_error(f"{file} must contain a list of JSON objects.")
        raise typer.Exit(code=1)
    requests_ = [from_dict(EstimatedDeliveryDate, item) for item in payload]
    _finish(create_command_handler().handle_predict_edd(requests_))


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
