"""Serialize a generation result into source text.

:class:`SourceEmitter` pairs a :class:`~restgen.emit.base.Printer` with an
output sink.  The complete text is rendered in memory first and written in
one call, so a failure while printing never leaves a partial file behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, TextIO, Union

from restgen.emit.base import Printer
from restgen.emit.python import PythonPrinter
from restgen.emit.rust import RustPrinter
from restgen.exceptions import InvalidUsageError
from restgen.generator.pipeline import GenerationResult
from restgen.models import Target

logger = logging.getLogger(__name__)

PRINTERS: dict[Target, type[Printer]] = {
    Target.PYTHON: PythonPrinter,
    Target.RUST: RustPrinter,
}


def get_printer(target: Union[Target, str]) -> Printer:
    """Return a printer for *target*.

    Raises:
        InvalidUsageError: If no printer is registered for *target*.
    """
    try:
        return PRINTERS[Target(target)]()
    except ValueError:
        known = ", ".join(t.value for t in PRINTERS)
        raise InvalidUsageError(f"Unknown target '{target}' (expected one of: {known})") from None


class SourceEmitter:
    """Render generation results with one printer.

    Example::

        emitter = SourceEmitter(PythonPrinter())
        source = emitter.render(generate(endpoints))
    """

    def __init__(self, printer: Printer) -> None:
        self.printer = printer

    def render(self, result: GenerationResult, comment_markers: bool = True) -> str:
        """Return the complete source text for *result*."""
        text = self.printer.print_module(result.module, comment_markers=comment_markers)
        logger.debug("Rendered %d characters of %s source", len(text), self.printer.target)
        return text

    def emit(
        self,
        result: GenerationResult,
        sink: TextIO,
        comment_markers: bool = True,
    ) -> str:
        """Render *result* and write it to *sink* in a single write.

        Returns:
            The text that was written.
        """
        text = self.render(result, comment_markers=comment_markers)
        sink.write(text)
        return text

    def emit_to_file(
        self,
        result: GenerationResult,
        path: Union[str, Path],
        comment_markers: bool = True,
    ) -> Path:
        """Render *result* and atomically replace the file at *path*."""
        text = self.render(result, comment_markers=comment_markers)
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write(target, text)
        return target


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure the
    temp file is removed and *path* is left untouched.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
