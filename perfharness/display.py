"""Console rendering of performance reports."""

from perfharness.models import Report

WIDE = "=" * 80
RULE = "-" * 60
TABLE_RULE = "-" * 80


def render_report(report: Report) -> str:
    s = report.summary
    lines = [
        "",
        WIDE,
        "PERFORMANCE REPORT",
        WIDE,
        "",
        "SUMMARY:",
        RULE,
        f"Total Requests: {s.total_requests:,}",
        f"Average Response Time: {s.average_response_time:.1f}ms",
        f"50th Percentile (Median): {s.p50_response_time:.1f}ms",
        f"95th Percentile: {s.p95_response_time:.1f}ms",
        f"99th Percentile: {s.p99_response_time:.1f}ms",
        f"Fastest Response: {s.min_response_time:.1f}ms",
        f"Slowest Response: {s.max_response_time:.1f}ms",
        f"Success Rate: {s.success_rate:.2f}%",
        f"Error Rate: {s.error_rate:.2f}%",
        "",
        "ENDPOINT BREAKDOWN:",
        TABLE_RULE,
        "| Endpoint                   | Requests | Avg Time | P95 Time | Success |",
        TABLE_RULE,
    ]

    for endpoint, stats in report.endpoint_breakdown.items():
        name = endpoint[:23] + "..." if len(endpoint) > 26 else endpoint.ljust(26)
        lines.append(
            f"| {name} "
            f"| {stats.requests:>8} "
            f"| {f'{stats.avg_response_time:.1f}ms':>8} "
            f"| {f'{stats.p95_response_time:.1f}ms':>8} "
            f"| {f'{stats.success_rate:.1f}%':>7} |"
        )
    lines.append(TABLE_RULE)

    lines.extend(["", "RECOMMENDATIONS:", RULE])
    lines.extend(report.recommendations)

    lines.extend([
        "",
        "VERDICT:",
        RULE,
        "Latency: " + ("SUB-100MS" if s.average_response_time < 100 else "ABOVE 100MS"),
        "Responsiveness: " + ("SUB-200MS" if s.average_response_time < 200 else "ABOVE 200MS"),
        "Reliability: " + ("PRODUCTION GRADE" if s.success_rate > 99 else "DEVELOPMENT GRADE"),
        "",
        WIDE,
    ])
    return "\n".join(lines)
