"""
Message formatters for change notifications.

Turns diff results into the text posted to Discord and the end-of-cycle
summary written to the log.
"""

from typing import Dict, List, Optional

from ps_watch.core.diff import ChangeType, DiffResult


class MessageFormatter:
    """Formats diff results and cycle stats as text."""

    @staticmethod
    def format_changes(result: DiffResult) -> Optional[str]:
        """
        Format all changes of one kind as a single message.

        Args:
            result: Diff of one collection kind

        Returns:
            str or None: One line per change, None if nothing changed
        """
        return result.message()

    @staticmethod
    def format_no_changes(result: DiffResult) -> str:
        return f"No changes in {result.kind.value.capitalize()}."

    @staticmethod
    def format_counts(result: DiffResult) -> str:
        """Short count breakdown, e.g. '2 added, 1 regraded, 0 removed'."""
        counts = {change_type: 0 for change_type in ChangeType}
        for event in result.events:
            counts[event.change_type] += 1
        return (
            f"{counts[ChangeType.ADDED]} added, "
            f"{counts[ChangeType.GRADE_CHANGED]} regraded, "
            f"{counts[ChangeType.REMOVED]} removed"
        )

    @staticmethod
    def format_summary(stats: Dict[str, int]) -> List[str]:
        """
        Format the end-of-cycle summary.

        Args:
            stats: Counters collected during the cycle

        Returns:
            List[str]: Log lines
        """
        return [
            "=" * 50,
            "Cycle Complete - Summary",
            "=" * 50,
            f"Classes found:        {stats.get('classes_found', 0)}",
            f"Assignments found:    {stats.get('assignments_found', 0)}",
            f"Changes detected:     {stats.get('changes_detected', 0)}",
            f"Notifications sent:   {stats.get('notifications_sent', 0)}",
            f"Errors:               {stats.get('errors', 0)}",
            "=" * 50,
        ]
