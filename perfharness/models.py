"""Data models for endpoint catalogs, probe samples, and performance reports."""

from dataclasses import dataclass, field
from typing import Dict, List, Union


@dataclass(frozen=True)
class EndpointDescriptor:
    path: str
    method: str = "GET"
    weight: int = 1
    description: str = ""

    def __post_init__(self):
        if self.weight <= 0:
            raise ValueError(f"weight must be positive, got {self.weight} for {self.path}")


@dataclass(frozen=True)
class Success:
    status_code: int
    content_length: int = 0


@dataclass(frozen=True)
class TransportFailure:
    reason: str


Outcome = Union[Success, TransportFailure]

# Status code reported for a probe that never received an HTTP response.
TRANSPORT_FAILURE_STATUS = 0


@dataclass(frozen=True)
class MetricSample:
    endpoint: str
    method: str
    response_time: float  # milliseconds
    outcome: Outcome
    timestamp: float  # epoch seconds at completion

    @property
    def status_code(self) -> int:
        if isinstance(self.outcome, Success):
            return self.outcome.status_code
        return TRANSPORT_FAILURE_STATUS

    @property
    def content_length(self) -> int:
        if isinstance(self.outcome, Success):
            return self.outcome.content_length
        return 0

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 400


@dataclass(frozen=True)
class Summary:
    total_requests: int
    average_response_time: float
    p50_response_time: float
    p95_response_time: float
    p99_response_time: float
    min_response_time: float
    max_response_time: float
    success_rate: float  # percent
    error_rate: float  # percent


@dataclass(frozen=True)
class EndpointStats:
    requests: int
    avg_response_time: float
    p95_response_time: float
    success_rate: float  # percent


@dataclass(frozen=True)
class Report:
    summary: Summary
    endpoint_breakdown: Dict[str, EndpointStats] = field(default_factory=dict)
    samples: List[MetricSample] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
