"""
Snapshot store.

Keeps the last seen class and assignment records in two JSON files so
the next poll, even after a restart, has something to diff against.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from ps_watch.config import Settings, get_settings
from ps_watch.models import AssignmentRecord, ClassRecord, SnapshotKind

logger = logging.getLogger(__name__)

SnapshotRecords = Union[List[ClassRecord], List[AssignmentRecord]]

_ADAPTERS: Dict[SnapshotKind, TypeAdapter] = {
    SnapshotKind.CLASSES: TypeAdapter(List[ClassRecord]),
    SnapshotKind.ASSIGNMENTS: TypeAdapter(List[AssignmentRecord]),
}


class SnapshotStore:
    """
    Loads and saves snapshot collections as flat JSON files.

    A missing or unreadable file is not an error: it loads as an empty
    collection with found=False and the caller treats it as a first run.
    Saves replace the whole file through a temporary file and a rename,
    so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(
        self,
        classes_path: Optional[Union[str, Path]] = None,
        assignments_path: Optional[Union[str, Path]] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the snapshot store.

        Args:
            classes_path: File for class records, defaults to settings
            assignments_path: File for assignment records, defaults to settings
            settings: Optional settings instance, used only for missing paths
        """
        if classes_path is None or assignments_path is None:
            settings = settings or get_settings()
            classes_path = classes_path or settings.classes_snapshot_file
            assignments_path = assignments_path or settings.assignments_snapshot_file

        self.paths: Dict[SnapshotKind, Path] = {
            SnapshotKind.CLASSES: Path(classes_path),
            SnapshotKind.ASSIGNMENTS: Path(assignments_path),
        }

    def load(self, kind: SnapshotKind) -> Tuple[SnapshotRecords, bool]:
        """
        Load the last saved collection of one kind.

        Args:
            kind: Which collection to load

        Returns:
            (records, found): found is False when the file is missing or corrupt
        """
        path = self.paths[kind]

        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.warning(f"No saved {kind.value} at {path}, possibly first run")
            return [], False
        except OSError as e:
            logger.warning(f"Could not read saved {kind.value} from {path}: {e}")
            return [], False

        try:
            records = _ADAPTERS[kind].validate_json(data)
        except ValidationError as e:
            logger.warning(
                f"Saved {kind.value} at {path} is corrupt, treating as first run: "
                f"{e.error_count()} error(s)"
            )
            return [], False

        logger.debug(f"Loaded {len(records)} {kind.value} from {path}")
        return records, True

    def save(self, kind: SnapshotKind, records: SnapshotRecords) -> bool:
        """
        Replace the saved collection of one kind.

        Args:
            kind: Which collection to save
            records: The complete new collection

        Returns:
            bool: True if the file was replaced
        """
        path = self.paths[kind]
        tmp_name: Optional[str] = None

        try:
            data = _ADAPTERS[kind].dump_json(list(records), indent=2)
            path.parent.mkdir(parents=True, exist_ok=True)

            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())

            os.replace(tmp_name, path)
            tmp_name = None

            logger.debug(f"Saved {len(records)} {kind.value} to {path}")
            return True

        except OSError as e:
            logger.error(f"Failed to save {kind.value} to {path}: {e}")
            return False

        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def load_classes(self) -> Tuple[List[ClassRecord], bool]:
        return self.load(SnapshotKind.CLASSES)

    def load_assignments(self) -> Tuple[List[AssignmentRecord], bool]:
        return self.load(SnapshotKind.ASSIGNMENTS)
