import logging
from datetime import datetime
from typing import Any, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.box import ROUNDED, HEAVY, SIMPLE
from rich.text import Text
from rich.table import Table

from aftership.domain.interfaces.user_interface import UserInterface
from aftership.domain.models.courier import Courier, LastCheckpoint, Notification
from aftership.domain.models.tracking import Checkpoint, EstimatedDeliveryDate, Tracking

logger = logging.getLogger(__name__)

# Colours per tracking tag (AfterShip status)
TAG_STYLES = {
    "Pending": "dim",
    "InfoReceived": "cyan",
    "InTransit": "blue",
    "OutForDelivery": "bold blue",
    "AttemptFail": "yellow",
    "Delivered": "bold green",
    "AvailableForPickup": "green",
    "Exception": "bold red",
    "Expired": "red",
}


def _fmt(value: Any) -> str:
    """Renders an optional value for a table cell."""
    if value is None or value == "":
        return "-"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) or "-"
    return str(value)


def _tag(tag: Optional[str]) -> Text:
    return Text(tag or "-", style=TAG_STYLES.get(tag or "", "white"))


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self.console = console or Console()

    def display_tracking(self, tracking: Tracking, **kwargs: Any) -> None:
        """Displays a single tracking: a summary panel followed by its checkpoints.

        Args:
            tracking: The tracking to display.
            **kwargs: Additional arguments including:
                - title: Panel title (default: "Tracking")
        """
        title = kwargs.get("title", "Tracking")
        summary = Table(show_header=False, box=SIMPLE, padding=(0, 1))
        summary.add_column("Field", style="bold cyan")
        summary.add_column("Value", style="white")
        summary.add_row("ID", _fmt(tracking.id))
        summary.add_row("Courier", _fmt(tracking.slug))
        summary.add_row("Tracking number", _fmt(tracking.tracking_number))
        summary.add_row("Title", _fmt(tracking.title))
        summary.add_row("Status", _tag(tracking.tag))
        summary.add_row("Subtag", _fmt(tracking.subtag_message or tracking.subtag))
        summary.add_row("Origin", _fmt(tracking.origin_country_iso3))
        summary.add_row("Destination", _fmt(tracking.destination_country_iso3))
        summary.add_row("Expected delivery", _fmt(tracking.expected_delivery))
        summary.add_row("Updated", _fmt(tracking.updated_at))

        self.console.print(Panel(summary, title=f"[bold cyan]{title}[/bold cyan]",
                                 title_align="left", border_style="cyan", box=ROUNDED))
        if tracking.checkpoints:
            self.console.print(self._checkpoint_table(tracking.checkpoints))

    def _checkpoint_table(self, checkpoints: List[Checkpoint]) -> Table:
        table = Table(show_header=True, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Time", style="dim")
        table.add_column("Status")
        table.add_column("Location")
        table.add_column("Message", style="white")
        # Newest first
        for checkpoint in reversed(checkpoints):
            table.add_row(
                _fmt(checkpoint.checkpoint_time),
                _tag(checkpoint.tag),
                _fmt(checkpoint.location or checkpoint.city or checkpoint.country_name),
                _fmt(checkpoint.message),
            )
        return table

    def display_trackings(self, trackings: List[Tracking], **kwargs: Any) -> None:
        """Displays a list of trackings as a table."""
        if not trackings:
            self.display_info("No trackings found.")
            return
        table = Table(show_header=True, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("#", style="cyan", justify="right")
        table.add_column("ID", style="dim")
        table.add_column("Courier")
        table.add_column("Tracking number", style="bold")
        table.add_column("Status")
        table.add_column("Updated", style="dim")
        for index, tracking in enumerate(trackings, start=1):
            table.add_row(
                str(index),
                _fmt(tracking.id),
                _fmt(tracking.slug),
                _fmt(tracking.tracking_number),
                _tag(tracking.tag),
                _fmt(tracking.updated_at),
            )
        self.console.print(table)
        total = kwargs.get("total")
        if total is not None:
            self.console.print(f"[dim]{len(trackings)} of {total} trackings[/dim]")

    def display_couriers(self, couriers: List[Courier], **kwargs: Any) -> None:
        """Displays a list of couriers as a table."""
        if not couriers:
            self.display_info("No couriers found.")
            return
        table = Table(show_header=True, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Slug", style="bold")
        table.add_column("Name")
        table.add_column("Required fields", style="dim")
        for courier in couriers:
            table.add_row(_fmt(courier.slug), _fmt(courier.name), _fmt(courier.required_fields))
        self.console.print(table)

    def display_last_checkpoint(self, last_checkpoint: LastCheckpoint, **kwargs: Any) -> None:
        header = f"{_fmt(last_checkpoint.slug)} / {_fmt(last_checkpoint.tracking_number)}"
        if last_checkpoint.checkpoint is None:
            self.display_info(f"{header}: no checkpoint yet ({_fmt(last_checkpoint.tag)})")
            return
        table = self._checkpoint_table([last_checkpoint.checkpoint])
        self.console.print(Panel(table, title=f"[bold cyan]{header}[/bold cyan]",
                                 title_align="left", border_style="cyan", box=ROUNDED))

    def display_notification(self, notification: Notification, **kwargs: Any) -> None:
        table = Table(show_header=False, box=SIMPLE, padding=(0, 1))
        table.add_column("Channel", style="bold cyan")
        table.add_column("Receivers", style="white")
        table.add_row("Emails", _fmt(notification.emails))
        table.add_row("SMS", _fmt(notification.smses))
        self.console.print(table)

    def display_estimated_delivery_dates(self, dates: List[EstimatedDeliveryDate], **kwargs: Any) -> None:
        table = Table(show_header=True, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Courier")
        table.add_column("Estimated", style="bold green")
        table.add_column("Earliest", style="dim")
        table.add_column("Latest", style="dim")
        table.add_column("Confidence", justify="right")
        for edd in dates:
            table.add_row(
                _fmt(edd.slug),
                _fmt(edd.estimated_delivery_date),
                _fmt(edd.estimated_delivery_date_min),
                _fmt(edd.estimated_delivery_date_max),
                _fmt(edd.confidence_score),
            )
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message."""
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message."""
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)
