"""Command-line interface for gql-compose."""

import logging
import os
from collections import Counter

import click
from graphql import print_schema

from .core.errors import ComposeError
from .core.schema_composer import SchemaComposer

SCHEMA_EXTENSIONS = (".graphql", ".graphqls")


def collect_schema_files(schema_path: str) -> list[str]:
    """Collect all .graphql / .graphqls files from a file or directory path."""
    files = []
    if os.path.isfile(schema_path):
        if schema_path.endswith(SCHEMA_EXTENSIONS):
            files.append(schema_path)
    else:
        for root, _, filenames in os.walk(schema_path):
            for filename in filenames:
                if filename.endswith(SCHEMA_EXTENSIONS):
                    files.append(os.path.join(root, filename))
    return sorted(files)


def load_schema_composer(schema_path: str, default_scalars: bool = False) -> SchemaComposer:
    """Read every schema file under a path into a fresh schema composer.

    Files are joined into a single document so ``extend`` definitions can
    target types declared in other files.
    """
    files = collect_schema_files(schema_path)
    if not files:
        raise click.ClickException(f"No .graphql or .graphqls files found in {schema_path}")
    sources = []
    for file_path in files:
        with open(file_path) as f:
            sources.append(f.read())
    sc = SchemaComposer(default_scalars=default_scalars)
    sc.parse_types_from_string("\n".join(sources))
    return sc


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


schema_option = click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL schema file or directory (.graphql, .graphqls).",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
default_scalars_option = click.option(
    "--default-scalars",
    is_flag=True,
    help="Predefine the DateTime, Date, UUID, JSON and JSONObject scalars.",
)


@click.group()
@click.version_option()
def main():
    """Compose GraphQL schemas from mutable type builders.

    Parse SDL files into composers and materialize them into a schema.
    """
    pass


@main.command()
@schema_option
@click.option("--query", default="Query", show_default=True, help="Name of the query root type.")
@click.option(
    "--mutation", default="Mutation", show_default=True, help="Name of the mutation root type."
)
@click.option("--print", "print_sdl", is_flag=True, help="Print the composed schema as SDL.")
@default_scalars_option
@verbose_option
def build(schema: str, query: str, mutation: str, print_sdl: bool, default_scalars: bool, verbose: bool):
    """Compose schema files and materialize a GraphQL schema.

    Examples:

        gql-compose build --schema ./schema

        gql-compose build -s ./schema.graphql --print
    """
    _configure_logging(verbose)
    try:
        sc = load_schema_composer(schema, default_scalars=default_scalars)
        gql_schema = sc.build_schema(query=query, mutation=mutation)
    except ComposeError as error:
        raise click.ClickException(str(error)) from error

    if print_sdl:
        click.echo(print_schema(gql_schema))
        return

    kinds = Counter(sc.get_composer(name).kind for name in sc.type_names())
    click.echo(f"Composed {len(sc.type_names())} types.")
    for kind in ("object", "input", "enum", "interface", "union", "scalar"):
        if kinds[kind]:
            click.echo(f"  {kind.capitalize()}s: {kinds[kind]}")
    click.echo(f"  Query: {query}")
    if gql_schema.mutation_type is not None:
        click.echo(f"  Mutation: {mutation}")


@main.command()
@schema_option
@click.argument("type_string")
@default_scalars_option
@verbose_option
def wrapped(schema: str, type_string: str, default_scalars: bool, verbose: bool):
    """Resolve a wrapped-type string such as '[User!]!' against a schema.

    Examples:

        gql-compose wrapped --schema ./schema '[Color!]'
    """
    _configure_logging(verbose)
    try:
        sc = load_schema_composer(schema, default_scalars=default_scalars)
        gql_type = sc.get_wrapped(type_string)
    except ComposeError as error:
        raise click.ClickException(str(error)) from error
    click.echo(str(gql_type))


if __name__ == "__main__":
    main()
