"""Human-facing progress report for the sampling pass."""

import click

from api_client_gen.inference.types import render_type
from api_client_gen.sampler import SampleOutcome, SampleResult

PATH_WIDTH = 55


def format_bytes(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    if size >= 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size} B"


def _format_ms(seconds: float) -> str:
    return f"{seconds * 1000:.0f}ms"


def print_header() -> None:
    click.echo()
    click.echo(f"{'ENDPOINT':<{PATH_WIDTH}} {'STATUS':>6} {'SIZE':>10}  TIME")
    click.echo(f"{'─' * PATH_WIDTH} {'─' * 6} {'─' * 10}  {'─' * 8}")


def format_result(result: SampleResult) -> str:
    status = "ERR" if result.status_code is None else str(result.status_code)
    size = "-" if result.outcome is SampleOutcome.TRANSPORT_ERROR else format_bytes(result.size)
    line = f"{result.endpoint.path:<{PATH_WIDTH}} {status:>6} {size:>10}  {_format_ms(result.elapsed):>8}"
    if result.ok:
        return f"{line}  -> {render_type(result.inferred)}"
    if result.outcome is SampleOutcome.TRANSPORT_ERROR:
        return f"{line}  SKIP (error: {result.error})"
    if result.outcome is SampleOutcome.BAD_STATUS:
        return f"{line}  SKIP"
    return f"{line}  SKIP ({result.outcome.value})"


def print_result(result: SampleResult) -> None:
    click.echo(format_result(result))


def format_summary(results: list[SampleResult]) -> str:
    inferred = sum(1 for r in results if r.ok)
    total_bytes = sum(r.size for r in results)
    total_time = sum(r.elapsed for r in results)
    return (
        f"GET summary: {len(results)} called, {inferred} inferred, {len(results) - inferred} skipped"
        f" | {format_bytes(total_bytes)} total data | {_format_ms(total_time)} total time"
    )
