"""Generate command -- compile descriptors into request builder source.

``restgen generate`` resolves the configuration, loads every descriptor
from the ``--spec`` location, runs the generation pipeline and writes the source
for the chosen target to stdout or to the ``--output`` file.
"""

from __future__ import annotations

from typing import Optional

import typer

from restgen.emit import SourceEmitter, get_printer
from restgen.exceptions import RestgenError
from restgen.generator import GenerationResult, generate
from restgen.models import GeneratorConfig, Target, UrlStrategy
from restgen.output import debug, error, print_data, success, warning
from restgen.parser import extract_endpoints, load_spec_documents


def build_result(config: GeneratorConfig) -> GenerationResult:
    """Load the descriptors named by *config* and run the pipeline.

    Raises:
        SpecParseError: If the descriptors cannot be loaded or extracted.
        GenerationError: If any endpoint cannot be generated.
    """
    documents = load_spec_documents(config.spec)
    debug(f"Loaded {len(documents)} descriptor document(s) from {config.spec}")
    endpoints = extract_endpoints(documents)
    return generate(endpoints, config.policy)


def generate_command(
    ctx: typer.Context,
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Descriptor directory, file or URL."
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output file ('-' for stdout)."
    ),
    target: Optional[Target] = typer.Option(
        None, "--target", "-t", help="Target language.", case_sensitive=False
    ),
    strategy: Optional[UrlStrategy] = typer.Option(
        None, "--strategy", help="URL assembly strategy.", case_sensitive=False
    ),
    no_markers: bool = typer.Option(
        False, "--no-markers", help="Omit the generated-code banner comment."
    ),
) -> None:
    """Generate request builders from endpoint descriptors.

    Example::

        restgen generate --spec ./spec --target python -o requests.py
        restgen generate --strategy format | less
    """
    from restgen.config import resolve_config

    obj = ctx.obj or {}
    try:
        config = resolve_config(
            cli_config=obj.get("config"),
            cli_spec=spec,
            cli_output=output,
            cli_target=target.value if target else None,
            cli_strategy=strategy.value if strategy else None,
            cli_comment_markers=False if no_markers else None,
        )
        result = build_result(config)
        if not result.endpoints:
            warning(f"No endpoints found in {config.spec}")
        emitter = SourceEmitter(get_printer(config.target))

        if config.output == "-":
            print_data(emitter.render(result, comment_markers=config.comment_markers))
        else:
            path = emitter.emit_to_file(
                result, config.output, comment_markers=config.comment_markers
            )
            success(f"Wrote {len(result.endpoints)} endpoint(s) to {path}")
    except RestgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
