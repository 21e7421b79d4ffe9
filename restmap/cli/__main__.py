"""restmap CLI - Main Entry Point.

Commands:
    routes  - Action / scope / HTTP method table for a controller
    docs    - Controller documentation as JSON or YAML
    invoke  - Run one action in-process with schema validation
"""

import importlib
import json
import os
import sys
from typing import Optional, Tuple

import click

from .. import __version__
from ..config import ConfigError, ConfigLoader, configure_logging
from ..controller import RestController
from ..faults import Fault, FaultResponseMapper
from . import __cli_name__


def load_controller_class(target: str) -> type:
    """Import ``package.module:ClassName`` and check it is a RestController."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise click.BadParameter(f"expected MODULE:CLASS, got {target!r}", param_hint="TARGET")

    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_name!r}: {exc}", param_hint="TARGET") from exc

    controller_class = getattr(module, class_name, None)
    if not isinstance(controller_class, type) or not issubclass(controller_class, RestController):
        raise click.BadParameter(
            f"{target!r} is not a RestController subclass", param_hint="TARGET"
        )
    return controller_class


def _build_controller(ctx: click.Context, target: str) -> RestController:
    controller_class = load_controller_class(target)
    return controller_class.api(config=ctx.obj["config"])


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option("--config", "config_paths", multiple=True, help="JSON/YAML config file (repeatable)")
@click.option("--env-file", type=click.Path(dir_okay=False), help="Path to a .env file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx, config_paths: Tuple[str, ...], env_file: Optional[str], verbose: bool):
    """Inspect and exercise restmap controllers."""
    try:
        config = ConfigLoader.load(paths=list(config_paths), env_file=env_file).to_config()
        configure_logging("DEBUG" if verbose else config.log_level)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("routes")
@click.argument("target")
@click.option("--json-output", is_flag=True, help="Print the table as JSON")
@click.pass_context
def routes(ctx, target: str, json_output: bool):
    """List the actions a controller responds to."""
    controller = _build_controller(ctx, target)
    mapping = controller.method_mapping()
    rows = [
        {"action": name, "scope": scope, "http_method": mapping[name]}
        for scope, names in (
            ("resource", controller.get_resource_methods()),
            ("collection", controller.get_collection_methods()),
        )
        for name in names
    ]

    if json_output:
        click.echo(json.dumps({"controller": type(controller).__name__, "routes": rows}, indent=2))
        return

    if not rows:
        click.echo(f"{type(controller).__name__} implements no actions")
        return

    width = max(len(row["action"]) for row in rows) + 2
    for row in rows:
        click.echo(f"{row['http_method']:<8}{row['action']:<{width}}{row['scope']}")


@cli.command("docs")
@click.argument("target")
@click.option("--format", "fmt", type=click.Choice(["json", "yaml"]), default="json", show_default=True)
@click.pass_context
def docs(ctx, target: str, fmt: str):
    """Print controller documentation."""
    documentor = _build_controller(ctx, target).get_documentation()
    click.echo(documentor.to_yaml() if fmt == "yaml" else documentor.to_json())


@cli.command("invoke")
@click.argument("target")
@click.argument("action")
@click.option("--params", default="{}", show_default=True, help="Action parameters as a JSON object")
@click.option("--format", "fmt", default=None, help="Response format (json, yaml, text)")
@click.pass_context
def invoke(ctx, target: str, action: str, params: str, fmt: Optional[str]):
    """
    Run one action with schema validation.

    Examples:
      restmap invoke myapp.controllers:UsersController fetch --params '{"id": 5}'
    """
    try:
        parsed = json.loads(params)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--params") from exc

    controller = _build_controller(ctx, target)
    try:
        result = controller.invoke(action, parsed)
        click.echo(controller.format_response(action, result, fmt))
    except Fault as fault:
        mapper = FaultResponseMapper()
        mapper.report(fault)
        click.echo(json.dumps(mapper.to_body(fault), indent=2))
        ctx.exit(1)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
