"""Aggregate a run's samples into summary statistics and recommendations."""

import math
from collections import OrderedDict
from typing import Dict, List, Sequence

from perfharness.models import EndpointStats, MetricSample, Report, Success, Summary


class ReportError(Exception):
    """Raised when a report cannot be generated from a result set."""


class EmptyResultError(ReportError):
    """Raised when the result set holds no samples at all."""


class NoSuccessfulSamplesError(ReportError):
    """Raised when no sample in the result set has a 2xx/3xx status."""


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Return the element at index ``floor(len * p)`` of an ascending sequence.

    Nearest rank below, with no interpolation between neighbours.
    """
    index = math.floor(len(sorted_values) * p)
    return sorted_values[min(index, len(sorted_values) - 1)]


def generate_report(samples: Sequence[MetricSample]) -> Report:
    """Build a Report from a run's samples.

    Latency statistics cover successful samples only; success and error
    rates cover every sample.

    Raises:
        EmptyResultError: If ``samples`` is empty.
        NoSuccessfulSamplesError: If no sample has a 2xx/3xx status.
    """
    samples = list(samples)
    if not samples:
        raise EmptyResultError("no test results available")

    successful = [s for s in samples if s.is_success]
    times = sorted(s.response_time for s in successful)
    if not times:
        raise NoSuccessfulSamplesError(
            f"no successful requests for analysis ({len(samples)} failed)"
        )

    total = len(samples)
    average = sum(times) / len(times)
    success_rate = len(successful) / total * 100
    p95 = percentile(times, 0.95)

    summary = Summary(
        total_requests=total,
        average_response_time=average,
        p50_response_time=percentile(times, 0.5),
        p95_response_time=p95,
        p99_response_time=percentile(times, 0.99),
        min_response_time=times[0],
        max_response_time=times[-1],
        success_rate=success_rate,
        error_rate=(total - len(successful)) / total * 100,
    )

    return Report(
        summary=summary,
        endpoint_breakdown=_endpoint_breakdown(samples),
        samples=samples,
        recommendations=build_recommendations(average, p95, success_rate),
    )


def _endpoint_breakdown(samples: List[MetricSample]) -> Dict[str, EndpointStats]:
    # Keyed by path alone; different methods on one path share an entry.
    groups: Dict[str, List[MetricSample]] = OrderedDict()
    for sample in samples:
        groups.setdefault(sample.endpoint, []).append(sample)

    breakdown = OrderedDict()
    for endpoint, group in groups.items():
        times = sorted(s.response_time for s in group)
        successes = sum(1 for s in group if s.is_success)
        breakdown[endpoint] = EndpointStats(
            requests=len(group),
            avg_response_time=sum(times) / len(times),
            p95_response_time=percentile(times, 0.95),
            success_rate=successes / len(group) * 100,
        )
    return breakdown


def build_recommendations(average: float, p95: float, success_rate: float) -> List[str]:
    """Turn mean latency, p95 latency and success rate (percent) into advice.

    Each ladder contributes exactly one message, first matching band wins.
    """
    recommendations = []

    if average < 50:
        recommendations.append(
            "EXCELLENT: Average response time under 50ms - world-class performance"
        )
    elif average < 100:
        recommendations.append(
            "GOOD: Average response time under 100ms - great user experience"
        )
    elif average < 200:
        recommendations.append(
            "FAIR: Consider optimizing database queries and caching"
        )
    else:
        recommendations.append(
            "NEEDS IMPROVEMENT: Response times over 200ms may impact user experience"
        )

    if p95 < 100:
        recommendations.append("95% of requests served under 100ms - consistent performance")
    elif p95 < 200:
        recommendations.append("95th percentile under 200ms - good consistency")
    else:
        recommendations.append("High P95 response time suggests performance bottlenecks")

    if success_rate >= 99.9:
        recommendations.append("OUTSTANDING: 99.9%+ success rate - extremely reliable")
    elif success_rate >= 99:
        recommendations.append("EXCELLENT: 99%+ success rate - very reliable")
    elif success_rate >= 95:
        recommendations.append("GOOD: 95%+ success rate - monitor error patterns")
    else:
        recommendations.append("INVESTIGATE: Success rate below 95% - check error logs")

    if average < 100 and success_rate > 99:
        recommendations.append(
            "VALIDATED: Sub-100ms average with 99%+ success - the service is production ready"
        )
        recommendations.append(
            "COMPETITIVE ADVANTAGE: Latency well below typical cloud-hosted services"
        )

    return recommendations


def report_to_dict(report: Report) -> dict:
    """Serialize a Report into the camelCase shape used by the JSON export."""
    s = report.summary
    return {
        "summary": {
            "totalRequests": s.total_requests,
            "averageResponseTime": s.average_response_time,
            "p50ResponseTime": s.p50_response_time,
            "p95ResponseTime": s.p95_response_time,
            "p99ResponseTime": s.p99_response_time,
            "minResponseTime": s.min_response_time,
            "maxResponseTime": s.max_response_time,
            "successRate": s.success_rate,
            "errorRate": s.error_rate,
        },
        "endpointBreakdown": {
            endpoint: {
                "requests": stats.requests,
                "avgResponseTime": stats.avg_response_time,
                "p95ResponseTime": stats.p95_response_time,
                "successRate": stats.success_rate,
            }
            for endpoint, stats in report.endpoint_breakdown.items()
        },
        "timeSeriesData": [_sample_to_dict(sample) for sample in report.samples],
        "recommendations": list(report.recommendations),
    }


def _sample_to_dict(sample: MetricSample) -> dict:
    entry = {
        "endpoint": sample.endpoint,
        "method": sample.method,
        "responseTime": sample.response_time,
        "statusCode": sample.status_code,
        "contentLength": sample.content_length,
        "timestamp": int(sample.timestamp * 1000),
    }
    if not isinstance(sample.outcome, Success):
        entry["error"] = sample.outcome.reason
    return entry
