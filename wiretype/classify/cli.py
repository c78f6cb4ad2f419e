"""Command-line interface for inspecting wire types."""

from __future__ import annotations

import importlib
import json
import logging
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from wiretype.classify import classify, descriptor_for, name_of, service_signatures
from wiretype.classify.methods import MethodSignature
from wiretype.classify.types import TypeDescriptor, WireType


class ResolutionError(RuntimeError):
    """Raised when a MODULE:ATTR path cannot be loaded."""


def load_object(path: str) -> Any:
    """Import ``module:attr`` (or ``module.attr``) and return the attribute."""
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")

    if not module_name or not attr_path:
        raise ResolutionError(f"Expected MODULE:ATTR, got {path!r}")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ResolutionError(f"Cannot import module {module_name!r}: {exc}") from exc

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ResolutionError(f"{module_name!r} has no attribute {attr_path!r}") from exc
    return obj


def _load(path: str) -> Any:
    try:
        return load_object(path)
    except ResolutionError as exc:
        raise click.ClickException(str(exc)) from exc


def _wire_label(wire_type: WireType) -> str:
    return name_of(wire_type) or "invalid"


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log classification decisions")
def cli(verbose: bool) -> None:
    """Wiretype XML-RPC type inspector."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@cli.command(name="type")
@click.argument("path")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def type_(path: str, output_json: bool) -> None:
    """Classify the type at MODULE:ATTR."""
    descriptor = descriptor_for(_load(path))
    wire_type = classify(descriptor)

    if output_json:
        _type_json(descriptor, wire_type)
    else:
        _type_plain(descriptor, wire_type)


@cli.command()
@click.argument("path")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def service(path: str, output_json: bool) -> None:
    """List the remote method signatures of the class at MODULE:CLASS."""
    cls = _load(path)
    if not isinstance(cls, type):
        raise click.ClickException(f"{path} is not a class")

    signatures = service_signatures(cls)

    if output_json:
        print(json.dumps([s.to_dict() for s in signatures], indent=2))
    else:
        _service_plain(signatures)


def _type_json(descriptor: TypeDescriptor, wire_type: WireType) -> None:
    data: dict = {
        "type": descriptor.name,
        "wire_type": wire_type.value,
        "wire_name": name_of(wire_type),
        "members": [],
    }

    if wire_type == WireType.STRUCT:
        for member in descriptor.members:
            member_type = classify(member.type)
            data["members"].append(
                {
                    "name": member.name,
                    "type": member.type.name,
                    "wire_type": member_type.value,
                    "wire_name": name_of(member_type),
                }
            )

    print(json.dumps(data, indent=2))


def _type_plain(descriptor: TypeDescriptor, wire_type: WireType) -> None:
    console = Console()

    console.print(f"[bold cyan]{descriptor.name}[/bold cyan] -> {_wire_label(wire_type)}")

    if wire_type != WireType.STRUCT or not descriptor.members:
        return

    console.print()
    member_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    member_table.add_column("Member", style="white")
    member_table.add_column("Type", style="dim")
    member_table.add_column("Wire", style="yellow")

    for member in descriptor.members:
        member_table.add_row(member.name, member.type.name, _wire_label(classify(member.type)))

    console.print(member_table)


def _service_plain(signatures: list[MethodSignature]) -> None:
    console = Console()

    console.print("[bold cyan]Methods[/bold cyan]")
    method_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    method_table.add_column("Name", style="white")
    method_table.add_column("Returns", style="yellow")
    method_table.add_column("Params", style="yellow")
    method_table.add_column("Visible", style="green")

    for sig in signatures:
        params = ", ".join(f"{p.name}: {p.type or 'invalid'}" for p in sig.params)
        method_table.add_row(sig.name, sig.returns or "invalid", params, "yes" if sig.visible else "no")

    console.print(method_table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
