"""External pager process."""

from __future__ import annotations

import io
import logging
import shlex
import subprocess
from typing import BinaryIO

from resultfmt.errors import PagerError

logger = logging.getLogger(__name__)


def _fileno(w: BinaryIO) -> int | None:
    try:
        return w.fileno()
    except (AttributeError, io.UnsupportedOperation):
        return None


class Pager:
    """A pager command reading the rendered output on its stdin.

    The pager writes to the encoder's sink when the sink is a real file,
    and to the inherited stdout otherwise.
    """

    def __init__(self, cmd: str, w: BinaryIO) -> None:
        w.flush()
        out = _fileno(w)
        logger.debug("starting pager %r", cmd)
        self.proc = subprocess.Popen(shlex.split(cmd), stdin=subprocess.PIPE, stdout=out, stderr=out)

    @property
    def stdin(self) -> BinaryIO:
        return self.proc.stdin

    def close(self) -> None:
        """Close the pager's input and wait for it to exit."""
        try:
            self.proc.stdin.close()
        except BrokenPipeError:
            self.abandon()
            return
        code = self.proc.wait()
        logger.debug("pager exited with status %d", code)
        if code != 0:
            raise PagerError(f"pager exited with status {code}")

    def abandon(self) -> None:
        """Close the pager's input and wait for it, ignoring its exit status."""
        logger.debug("abandoning pager")
        try:
            self.proc.stdin.close()
        except BrokenPipeError:
            pass
        self.proc.wait()
