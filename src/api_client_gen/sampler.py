"""Live sampling of parameterless GET endpoints.

Each eligible endpoint is called exactly once, sequentially, with no query
string and no body. Only a 200 response with a non-empty JSON body feeds type
inference; every other outcome is recorded and the endpoint stays untyped.
"""

import json
import time
from enum import Enum

import requests
from pydantic import BaseModel

from api_client_gen.inference.engine import InferenceContext, infer_response
from api_client_gen.inference.types import InferredType
from api_client_gen.parser.base import EndpointDescriptor


class SampleOutcome(str, Enum):
    OK = "ok"
    TRANSPORT_ERROR = "error"
    BAD_STATUS = "status"
    EMPTY = "empty"
    NOT_JSON = "not JSON"
    NOT_INFERABLE = "not inferable"


class SampleResult(BaseModel):
    """What happened when one endpoint was sampled."""

    endpoint: EndpointDescriptor
    outcome: SampleOutcome
    status_code: int | None = None
    size: int = 0
    elapsed: float = 0.0  # seconds
    error: str = ""
    inferred: InferredType | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is SampleOutcome.OK


class HttpTransport:
    """Thin request primitive over a requests session."""

    def __init__(self, base_url: str, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def execute(self, method: str, path: str, body: object = None) -> requests.Response:
        if body is None:
            return self.session.request(method, self.base_url + path)
        return self.session.request(method, self.base_url + path, json=body)


class Sampler:
    """Calls eligible endpoints and infers response types from what comes back."""

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    def eligible(self, endpoints: list[EndpointDescriptor]) -> list[EndpointDescriptor]:
        return [ep for ep in endpoints if ep.callable_without_input]

    def sample_all(self, endpoints: list[EndpointDescriptor], ctx: InferenceContext, on_result=None) -> list[SampleResult]:
        """Sample every eligible endpoint in order, threading ``ctx`` through.

        ``on_result`` is called with each SampleResult as soon as it is known.
        """
        results = []
        for ep in self.eligible(endpoints):
            result = self.sample(ep, ctx)
            results.append(result)
            if on_result is not None:
                on_result(result)
        return results

    def sample(self, endpoint: EndpointDescriptor, ctx: InferenceContext) -> SampleResult:
        start = time.perf_counter()
        try:
            resp = self.transport.execute("GET", endpoint.path)
        except requests.RequestException as e:
            return SampleResult(
                endpoint=endpoint,
                outcome=SampleOutcome.TRANSPORT_ERROR,
                elapsed=time.perf_counter() - start,
                error=str(e),
            )
        elapsed = time.perf_counter() - start
        body = resp.content or b""

        def result(outcome: SampleOutcome, **kwargs) -> SampleResult:
            return SampleResult(
                endpoint=endpoint,
                outcome=outcome,
                status_code=resp.status_code,
                size=len(body),
                elapsed=elapsed,
                **kwargs,
            )

        if resp.status_code != 200:
            return result(SampleOutcome.BAD_STATUS)
        if not body:
            return result(SampleOutcome.EMPTY)
        try:
            payload = json.loads(body)
        except (ValueError, RecursionError):
            return result(SampleOutcome.NOT_JSON)

        # Records reach the shared table only once the whole sample is inferred
        scratch = InferenceContext()
        try:
            inferred = infer_response(endpoint.func_name, payload, scratch)
        except RecursionError:
            return result(SampleOutcome.NOT_INFERABLE, error="sample nested too deeply")
        ctx.merge(scratch)
        return result(SampleOutcome.OK, inferred=inferred)
