"""
rxcommon.shared.utils

Progress helpers shared across rxren modules.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from tqdm import tqdm


class Progress:
    """
    Thin wrapper around an open-ended tqdm counter.

    The bar renders on stderr; `write()` prints a line above it so regular
    output is never interleaved with the bar. When disabled, `write()` goes
    straight to the target stream.
    """

    def __init__(self, desc: str = "Processing", unit: str = "entry", enabled: bool = True):
        self._tqdm: Optional[tqdm] = None
        if enabled:
            self._tqdm = tqdm(
                desc=desc,
                unit=unit,
                file=sys.stderr,
                leave=False,
                dynamic_ncols=True,
            )

    def update(self, n: int = 1) -> None:
        if self._tqdm is not None:
            self._tqdm.update(n)

    def write(self, message: str, file: Optional[TextIO] = None) -> None:
        """Print a message above the progress bar on its own line."""
        target = file or sys.stdout
        if self._tqdm is not None:
            self._tqdm.write(message, file=target)
        else:
            target.write(message + "\n")

    def close(self) -> None:
        if self._tqdm is not None:
            self._tqdm.close()

    def __enter__(self) -> "Progress":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
