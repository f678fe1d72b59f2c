"""Process sources: the OS process-listing collaborator of the watcher.

A source returns every live process as a ProcessRecord. The watcher only
depends on the ``ProcessSource`` protocol, so tests can hand it synthetic
process tables.
"""

from datetime import datetime
from typing import Callable, Iterable, List, Optional, Protocol

import psutil

from ..exceptions import ProcessEnumerationError
from ..models.process_record import ProcessRecord, ProcessSnapshot


class ProcessSource(Protocol):
    """Anything that can list the processes currently running."""

    def list_processes(self) -> Iterable[ProcessRecord]:
        ...


class PsutilProcessSource:
    """Process source backed by ``psutil.process_iter``."""

    ATTRS = ["pid", "name"]

    def list_processes(self) -> List[ProcessRecord]:
        """Return a record for every live process.

        ``process_iter`` already drops processes that exit while being
        enumerated; a name that cannot be read comes back as ``None`` and is
        recorded as an empty string.

        Raises:
            ProcessEnumerationError: If the OS process table cannot be listed
        """
        records: List[ProcessRecord] = []
        try:
            for process in psutil.process_iter(self.ATTRS, ad_value=None):
                info = process.info
                records.append(ProcessRecord(pid=info["pid"], name=info["name"]))
        except (psutil.Error, OSError) as exc:
            raise ProcessEnumerationError(
                f"Failed to enumerate processes: {exc}",
                details={"error_type": type(exc).__name__},
            ) from exc
        return records

    def __str__(self) -> str:
        return "PsutilProcessSource()"


def take_snapshot(
    source: ProcessSource, clock: Optional[Callable[[], datetime]] = None
) -> ProcessSnapshot:
    """Capture the current process table from a source.

    Any exception other than ProcessEnumerationError raised by the source is
    wrapped, so callers only need to handle one fatal error type.
    """
    clock = clock or datetime.now
    try:
        records = list(source.list_processes())
    except ProcessEnumerationError:
        raise
    except Exception as exc:
        raise ProcessEnumerationError(
            f"Failed to enumerate processes: {exc}",
            details={"source": str(source), "error_type": type(exc).__name__},
        ) from exc
    return ProcessSnapshot.from_records(records, taken_at=clock())
