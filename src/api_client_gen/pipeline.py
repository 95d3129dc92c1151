"""Generation run: endpoints -> samples -> inferred types -> source units.

The run is a single linear pass. The record table and the per-endpoint
response types are owned by the run and threaded explicitly through each
stage.
"""

from pathlib import Path

from pydantic import BaseModel

from api_client_gen.generator.client import render_client
from api_client_gen.generator.models import render_models
from api_client_gen.generator.validator import write_formatted
from api_client_gen.inference.engine import InferenceContext
from api_client_gen.inference.types import InferredType
from api_client_gen.parser.base import EndpointDescriptor, SchemaDocument
from api_client_gen.sampler import Sampler, SampleResult

MODELS_FILE = "models.py"
CLIENT_FILE = "client.py"
INIT_FILE = "__init__.py"

INIT_SOURCE = '''"""Generated API client."""

from .client import ApiError, Client, DecodeError

__all__ = ["ApiError", "Client", "DecodeError"]
'''


class GeneratedUnits(BaseModel):
    """Rendered source of the two generated modules."""

    models: str
    client: str
    response_types: dict[str, InferredType]  # "<METHOD> <path>" -> type
    record_count: int


class GenerationResult(BaseModel):
    endpoints: list[EndpointDescriptor]
    samples: list[SampleResult]
    units: GeneratedUnits


def collect_response_types(samples: list[SampleResult]) -> dict[str, InferredType]:
    return {s.endpoint.key: s.inferred for s in samples if s.ok}


def render_units(
    schema: SchemaDocument,
    endpoints: list[EndpointDescriptor],
    ctx: InferenceContext,
    response_types: dict[str, InferredType],
) -> GeneratedUnits:
    records = ctx.sorted_records()
    return GeneratedUnits(
        models=render_models(records, schema.title, schema.version),
        client=render_client(endpoints, response_types),
        response_types=response_types,
        record_count=len(records),
    )


def generate(
    schema: SchemaDocument,
    endpoints: list[EndpointDescriptor],
    sampler: Sampler | None = None,
    on_result=None,
) -> GenerationResult:
    """Sample (when a sampler is given), infer and render both units."""
    ctx = InferenceContext()
    samples = sampler.sample_all(endpoints, ctx, on_result=on_result) if sampler else []
    units = render_units(schema, endpoints, ctx, collect_response_types(samples))
    return GenerationResult(endpoints=endpoints, samples=samples, units=units)


def write_units(units: GeneratedUnits, out_dir: Path) -> list[Path]:
    """Write the generated package into ``out_dir``; returns the files written."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for filename, content in ((MODELS_FILE, units.models), (CLIENT_FILE, units.client)):
        path = out_dir / filename
        write_formatted(path, content)
        written.append(path)
    init_path = out_dir / INIT_FILE
    if not init_path.exists():
        init_path.write_text(INIT_SOURCE, encoding="utf-8")
        written.append(init_path)
    return written


def clean_units(out_dir: Path) -> list[Path]:
    removed = []
    for filename in (MODELS_FILE, CLIENT_FILE):
        path = out_dir / filename
        if path.exists():
            path.unlink()
            removed.append(path)
    return removed
