import logging
import typing as t

from django.core.management.base import BaseCommand, CommandError

from engagements import conf
from engagements.services import build_services
from engagements.services.sweeper import Sweeper

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Advance events whose end time has passed, once or on a fixed interval."""

    help = "Finish open and in-progress events whose end time has passed."

    def add_arguments(self, parser: t.Any) -> None:
        parser.add_argument(
            "--interval",
            type=float,
            default=None,
            help="Seconds between sweeps (defaults to ENGAGEMENTS['SWEEP_INTERVAL_SECONDS']).",
        )
        parser.add_argument("--once", action="store_true", help="Run a single sweep and exit.")

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        interval = options["interval"] if options["interval"] is not None else conf.sweep_interval_seconds()
        try:
            sweeper = Sweeper(build_services().lifecycle, interval_seconds=interval)
        except ValueError as e:
            raise CommandError(str(e)) from e

        if options["once"]:
            moved = sweeper.run_once()
            self.stdout.write(f"Finished {moved} event(s)")
            return

        try:
            sweeper.run_forever()
        except KeyboardInterrupt:  # pragma: no cover
            sweeper.stop()
            logger.info("Interrupted")
