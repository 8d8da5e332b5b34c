"""Code generator -- normalize endpoints and build the generated-code IR.

Sub-modules:

* :mod:`~restgen.generator.normalizer` -- Verb selection, path dedup and
  derived endpoint synthesis.
* :mod:`~restgen.generator.type_mapper` -- Declared types to host types.
* :mod:`~restgen.generator.url_builder` -- FormatStyle and PushStyle URL
  builders.
* :mod:`~restgen.generator.requests` -- Request descriptors and their IR.
* :mod:`~restgen.generator.pipeline` -- Runs all of the above.
"""

from restgen.generator.normalizer import normalize_endpoints
from restgen.generator.pipeline import GenerationResult, generate

__all__ = ["GenerationResult", "generate", "normalize_endpoints"]
