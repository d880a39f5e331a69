from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.problem_record import ProblemRecord

"""Problem log buffering.

- JSON Lines with a fixed schema (no extra keys)
- One ``logs/problems-YYYYMMDD-HHMMSS.log`` (UTC) per run, created on first flush
- Records are buffered and written once at the end of a run
"""

__all__ = [
    "ProblemRecord",
    "ProblemLogBuffer",
    "LOGS_DIR",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ProblemLogBuffer:
    """In-memory buffer for problem records. ``flush`` appends JSON Lines.

    Not thread safe; one buffer belongs to one sequential run.
    """

    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self._records: list[ProblemRecord] = []
        self._logs_dir = logs_dir
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"problems-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ProblemRecord]:
        return list(self._records)

    def append(self, record: ProblemRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None if nothing was written."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
