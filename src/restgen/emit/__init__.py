"""Source emission -- print the generated-code IR for a target language.

Sub-modules:

* :mod:`~restgen.emit.base` -- Printer base class and the Jinja2 environment.
* :mod:`~restgen.emit.python` -- Python printer.
* :mod:`~restgen.emit.rust` -- Rust printer.
* :mod:`~restgen.emit.emitter` -- :class:`SourceEmitter` and the printer
  registry.
"""

from restgen.emit.emitter import PRINTERS, SourceEmitter, get_printer

__all__ = ["PRINTERS", "SourceEmitter", "get_printer"]
