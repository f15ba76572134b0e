"""
Main orchestrator for PowerSchool Grade Watch.

Each polling cycle:
1. Load the previous class and assignment snapshots
2. Log in to PowerSchool and fetch the student record
3. Project it onto the active quarter
4. Diff classes and assignments against the previous snapshot
5. Send one Discord notification per collection with changes
6. Save the new snapshot for the next cycle
"""

import logging
import signal
import sys
import threading
from datetime import datetime
from typing import Optional

from dateutil.tz import gettz
from pydantic import ValidationError

from ps_watch.auth import PowerSchoolError, PowerSchoolSession
from ps_watch.config import Settings, get_settings, setup_logging
from ps_watch.core import DiffResult, diff_assignments, diff_classes, project
from ps_watch.models import SnapshotKind
from ps_watch.notify import DiscordNotifier, MessageFormatter
from ps_watch.store import SnapshotStore

logger = logging.getLogger(__name__)


class GradeMonitor:
    """
    Runs fetch-diff-notify-save cycles.

    Collaborators are passed in explicitly; any left out are built
    from the settings.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[PowerSchoolSession] = None,
        store: Optional[SnapshotStore] = None,
        notifier: Optional[DiscordNotifier] = None,
    ):
        """Initialize the monitor with all components."""
        self.settings = settings or get_settings()
        self.client = client or PowerSchoolSession(self.settings)
        self.store = store or SnapshotStore(
            self.settings.classes_snapshot_file,
            self.settings.assignments_snapshot_file,
        )
        self.notifier = notifier or DiscordNotifier(
            self.settings.discord_webhook_url,
            self.settings.request_timeout,
        )
        self.formatter = MessageFormatter()
        self.timezone = gettz(self.settings.timezone)
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict:
        return {
            "classes_found": 0,
            "assignments_found": 0,
            "changes_detected": 0,
            "notifications_sent": 0,
            "errors": 0,
        }

    def run_cycle(self, now: Optional[datetime] = None) -> bool:
        """
        Execute one full polling cycle.

        Args:
            now: Instant used to select the active terms, defaults to the current time

        Returns:
            bool: True if the cycle completed and both snapshots were saved
        """
        self.stats = self._empty_stats()
        logger.info("Starting data fetch and comparison...")

        old_classes, _ = self.store.load_classes()
        old_assignments, _ = self.store.load_assignments()

        try:
            with self.client as client:
                student = client.get_student()
        except PowerSchoolError as e:
            logger.error(f"Failed to get student data: {e}")
            self.stats["errors"] += 1
            return False

        if now is None:
            now = datetime.now(self.timezone)

        snapshot = project(student, now, self.settings.term_title_prefix)
        self.stats["classes_found"] = len(snapshot.classes)
        self.stats["assignments_found"] = len(snapshot.assignments)

        self._report(diff_classes(old_classes, snapshot.classes))
        self._report(diff_assignments(old_assignments, snapshot.assignments))

        saved = self._save(SnapshotKind.CLASSES, snapshot.classes)
        saved = self._save(SnapshotKind.ASSIGNMENTS, snapshot.assignments) and saved

        self._log_summary()
        return saved

    def _report(self, result: DiffResult) -> None:
        """Notify about one collection's changes, or log that there were none."""
        message = self.formatter.format_changes(result)
        if message is None:
            logger.info(self.formatter.format_no_changes(result))
            return

        self.stats["changes_detected"] += len(result.events)
        logger.info(f"{result.kind.value.capitalize()}: {self.formatter.format_counts(result)}")

        if self.notifier.send_long_message(message):
            self.stats["notifications_sent"] += 1
        else:
            logger.warning(f"Failed to send {result.kind.value} notification")
            self.stats["errors"] += 1

    def _save(self, kind: SnapshotKind, records) -> bool:
        if self.store.save(kind, records):
            return True
        logger.error(
            f"Failed to back up new {kind.value} data, "
            "the same changes may be reported again next cycle"
        )
        self.stats["errors"] += 1
        return False

    def _log_summary(self) -> None:
        """Log execution summary."""
        for line in self.formatter.format_summary(self.stats):
            logger.info(line)

    def run_forever(self, stop_event: threading.Event) -> None:
        """
        Run a cycle now, then one every poll interval until stopped.

        Cycles never overlap: the wait for the next one starts only after
        the current one finishes.

        Args:
            stop_event: Set to end the loop after the current cycle
        """
        interval = self.settings.poll_interval_seconds
        logger.info(f"Polling every {interval:g}s")

        while not stop_event.is_set():
            try:
                self.run_cycle()
            except Exception as e:
                logger.error(f"Cycle failed with error: {e}", exc_info=True)
            stop_event.wait(interval)

        logger.info("Stopped")


def _install_signal_handlers(stop_event: threading.Event) -> None:
    def handle(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, stopping after current cycle")
        # set() takes the event lock, which the interrupted wait() may hold
        threading.Thread(target=stop_event.set, daemon=True).start()

    signal.signal(signal.SIGINT, handle)
    signal.signal(signal.SIGTERM, handle)


def main() -> int:
    """
    Entry point for PowerSchool Grade Watch.

    Returns:
        int: Exit code (0 after a requested stop, 1 on startup failure)
    """
    try:
        # Validate configuration early
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        print("Please check your environment variables.", file=sys.stderr)
        return 1

    setup_logging(settings)
    logger.debug(f"Loaded configuration for {settings.powerschool_url}")

    try:
        monitor = GradeMonitor(settings)
    except Exception as e:
        logger.error(f"Failed to start: {e}", exc_info=True)
        return 1

    stop_event = threading.Event()
    _install_signal_handlers(stop_event)
    monitor.run_forever(stop_event)

    return 0


if __name__ == "__main__":
    sys.exit(main())
