"""Descriptor parser -- load documents, extract endpoints, parse path templates.

This sub-package is responsible for the first half of the restgen pipeline:
turning raw descriptor documents (JSON or YAML, a spec directory, a single
file or a remote URL) into :class:`~restgen.models.Endpoint` values that the
generator can consume.

Typical usage::

    from restgen.parser import load_spec_documents, extract_endpoints

    documents = load_spec_documents("./spec")
    endpoints = extract_endpoints(documents)

Sub-modules:

* :mod:`~restgen.parser.loader` -- I/O layer (directory, file, URL, stdin)
  plus format detection.
* :mod:`~restgen.parser.template` -- Path template and endpoint name parsing.
* :mod:`~restgen.parser.extractor` -- Builds endpoints from descriptor dicts.
"""

from restgen.parser.extractor import extract_endpoints
from restgen.parser.loader import load_spec_documents
from restgen.parser.template import parse_mod_path, parse_url_path

__all__ = ["load_spec_documents", "extract_endpoints", "parse_mod_path", "parse_url_path"]
