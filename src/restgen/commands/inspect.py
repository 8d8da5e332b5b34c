"""Inspect commands -- examine normalized endpoints.

Provides the ``restgen inspect`` sub-command group with read-only commands
for checking what the generator will see: the endpoint list after verb
selection, path dedup and derived endpoint synthesis, and the request
descriptors of a single endpoint.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from restgen.exceptions import InvalidUsageError, RestgenError
from restgen.models import Endpoint, PushStyle, RequestDescriptor
from restgen.output import error, get_output


inspect_app = typer.Typer(no_args_is_help=True)


def _load_result(ctx: typer.Context, spec: Optional[str]):  # noqa: ANN202
    """Resolve the config and run the pipeline, exiting on any error."""
    from restgen.commands.generate import build_result
    from restgen.config import resolve_config

    obj = ctx.obj or {}
    try:
        config = resolve_config(cli_config=obj.get("config"), cli_spec=spec)
        return build_result(config)
    except RestgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _body_label(endpoint: Endpoint) -> str:
    if endpoint.body is None:
        return "-"
    return "required" if endpoint.body.required else "optional"


@inspect_app.command("endpoints")
def inspect_endpoints(
    ctx: typer.Context,
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Descriptor directory, file or URL."
    ),
) -> None:
    """List all endpoints after normalization.

    Displays one row per endpoint with its selected method, the surviving
    path templates (one per shape) and its body requirement.

    Example::

        restgen inspect endpoints --spec ./spec
    """
    result = _load_result(ctx, spec)

    headers = ["Name", "Method", "Paths", "Body"]
    rows: list[list[str]] = []
    for endpoint in result.endpoints:
        rows.append([
            endpoint.name,
            endpoint.method.value,
            ", ".join(path.template or "/" for path in endpoint.paths),
            _body_label(endpoint),
        ])

    get_output().print_table(headers, rows, title=f"Endpoints ({len(rows)})")


@inspect_app.command("endpoint")
def inspect_endpoint(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Endpoint name, e.g. indices.put_alias."),
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Descriptor directory, file or URL."
    ),
) -> None:
    """Show one normalized endpoint and its request descriptors as JSON.

    Example::

        restgen inspect endpoint indices.put_alias
    """
    result = _load_result(ctx, spec)

    endpoint = next((e for e in result.endpoints if e.name == name), None)
    if endpoint is None:
        exc = InvalidUsageError(f"Unknown endpoint '{name}'")
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    get_output().print_json({
        "endpoint": endpoint.model_dump(mode="json"),
        "requests": [_describe(d) for d in result.descriptors[endpoint.name]],
    })


def _describe(descriptor: RequestDescriptor) -> dict[str, Any]:
    """Summarise *descriptor* for display."""
    builder = descriptor.url_builder
    info: dict[str, Any] = {
        "type": descriptor.type_name,
        "constructor": descriptor.ctor_name,
        "url_function": descriptor.url_function,
        "path": descriptor.path,
        "params": [p.name for p in descriptor.params],
        "strategy": builder.style,
    }
    if isinstance(builder, PushStyle):
        info["capacity"] = builder.capacity_terms()
    else:
        info["template"] = builder.template
    return info
