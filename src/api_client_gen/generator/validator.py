"""Syntax validation and re-formatting of generated source units."""

import ast
import re
from pathlib import Path

import click

from api_client_gen.errors import FormatError

_BLANK_RUN = re.compile(r"\n{4,}")


def validate_python(files: dict[str, str]) -> dict[str, str]:
    """Check generated Python units for syntax errors.

    Returns dict of {filename: error_message} for units with errors.
    """
    errors = {}
    for filename, content in files.items():
        try:
            ast.parse(content, filename=filename)
        except SyntaxError as e:
            errors[filename] = f"SyntaxError: {e.msg} (line {e.lineno})"
    return errors


def format_source(code: str, filename: str = "<generated>") -> str:
    """Normalize whitespace of a generated unit.

    Strips trailing whitespace, collapses runs of blank lines to at most two
    and ends the text with a single newline. Raises FormatError if the code
    does not parse.
    """
    error = validate_python({filename: code}).get(filename)
    if error:
        raise FormatError(f"{filename}: {error}")
    lines = [line.rstrip() for line in code.splitlines()]
    text = _BLANK_RUN.sub("\n\n\n", "\n".join(lines))
    return text.strip("\n") + "\n"


def write_formatted(path: Path, code: str) -> None:
    """Write a unit, falling back to the unformatted text if formatting fails."""
    try:
        formatted = format_source(code, path.name)
    except FormatError as e:
        click.echo(f"Warning: formatting failed for {path}: {e} (writing unformatted)", err=True)
        formatted = code
    path.write_text(formatted, encoding="utf-8")
