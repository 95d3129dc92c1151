"""CLI entry point for api-client-gen."""

from pathlib import Path

import click

from api_client_gen.errors import SchemaError
from api_client_gen.parser.base import SchemaDocument
from api_client_gen.parser.endpoints import build_endpoints
from api_client_gen.parser.swagger import fetch_schema, load_schema
from api_client_gen.pipeline import clean_units, generate as run_generation, write_units
from api_client_gen.report import format_summary, print_header, print_result
from api_client_gen.sampler import HttpTransport, Sampler

DEFAULT_BASE_URL = "http://localhost:6397"
DEFAULT_SCHEMA_PATH = "/swagger-schema.json"


def _load_schema(base_url: str, schema_path: str, schema_file: Path | None) -> SchemaDocument:
    """Load the schema from a local file or from the server. Fatal on failure."""
    try:
        if schema_file is not None:
            return load_schema(schema_file)
        return fetch_schema(base_url.rstrip("/") + schema_path)
    except SchemaError as e:
        raise click.ClickException(str(e)) from e


@click.group()
def main():
    """API Client Gen: generate a typed Python client from a Swagger schema and live samples."""
    pass


@main.command()
@click.option("--base", "base_url", default=DEFAULT_BASE_URL, envvar="API_BASE_URL", show_default=True, help="Base URL of the API.")
@click.option("-o", "--out", "out_dir", default="lib", envvar="API_CLIENT_OUT", show_default=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for generated code.")
@click.option("--schema-path", default=DEFAULT_SCHEMA_PATH, show_default=True, help="Schema location relative to the base URL.")
@click.option("--schema-file", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Read the schema from a local JSON/YAML file instead.")
@click.option("--no-sample", is_flag=True, help="Skip live sampling; every operation returns raw bytes.")
def generate(base_url: str, out_dir: Path, schema_path: str, schema_file: Path | None, no_sample: bool):
    """Fetch the schema, sample parameterless GETs and write models.py + client.py."""
    click.echo(f"Loading schema from {schema_file}..." if schema_file else "Fetching swagger schema...")
    schema = _load_schema(base_url, schema_path, schema_file)
    click.echo(f"Parsed schema: {schema.title} v{schema.version}, {len(schema.paths)} paths")

    endpoints = build_endpoints(schema)
    click.echo(f"Found {len(endpoints)} endpoints")

    sampler = None
    if not no_sample:
        sampler = Sampler(HttpTransport(base_url))
        print_header()
    result = run_generation(schema, endpoints, sampler=sampler, on_result=print_result)
    if sampler:
        click.echo()
        click.echo(format_summary(result.samples))

    click.echo()
    for path in write_units(result.units, out_dir):
        click.echo(f"  Created {path}")
    click.echo(f"Generated {result.units.record_count} models and {len(endpoints)} client methods")
    click.echo(f"Done! Generated code in: {out_dir}")


@main.command()
@click.option("-o", "--out", "out_dir", default="lib", envvar="API_CLIENT_OUT", show_default=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory of generated code.")
def clean(out_dir: Path):
    """Remove generated models.py and client.py."""
    removed = clean_units(out_dir)
    for path in removed:
        click.echo(f"  Removed {path}")
    click.echo(f"Removed {len(removed)} files from {out_dir}")
