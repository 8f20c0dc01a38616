"""Operator-facing progress lines for each ID list."""

import sys
from typing import Iterable, Optional, TextIO


class ReportSink:
    """
    Writes the per-ID-list progress lines.

    These lines are the tool's output contract, so they go straight to
    the stream instead of through ``logging``.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees redirected stderr.
        return self._stream if self._stream is not None else sys.stderr

    def _emit(self, line: str) -> None:
        print(line, file=self.stream)

    def parsed(self, count: int, path: str) -> None:
        self._emit(f'parsed {count} from "{path}"')

    def found(self, matched: int, total: int) -> None:
        self._emit(f"found {matched} of {total}")

    def missing(self, ids: Iterable[str]) -> None:
        for parcel_id in sorted(ids):
            self._emit(f"could not find: {parcel_id}")
