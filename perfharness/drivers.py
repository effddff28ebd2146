"""Run drivers: the scheduling policies that feed probes into a result set.

Every driver takes a prober (anything with ``async probe(endpoint, method)``)
and injectable ``clock``, ``sleep`` and ``rng`` collaborators so that runs
can be reproduced without real waiting. User-facing progress goes through
``echo``.
"""

import asyncio
import logging
import math
import random
import time
from collections import deque
from datetime import datetime
from typing import Callable, Optional, Sequence

import click

from perfharness.catalog import DEFAULT_CATALOG, VALIDATION_CATALOG, select_endpoint
from perfharness.models import EndpointDescriptor, Report
from perfharness.report import ReportError, generate_report
from perfharness.results import ResultSet

logger = logging.getLogger(__name__)

REQUEST_DELAY_SECONDS = 0.01
USER_DELAY_MS = (500, 2000)
USER_PROGRESS_EVERY = 5
MONITOR_WINDOW = 10


async def run_quick_benchmark(
    prober,
    requests: int = 100,
    *,
    catalog: Sequence[EndpointDescriptor] = DEFAULT_CATALOG,
    delay: float = REQUEST_DELAY_SECONDS,
    echo: Callable[[str], None] = click.echo,
    sleep=asyncio.sleep,
    rng=random,
) -> Report:
    """Probe ``requests`` times in sequence and report on the results."""
    results = ResultSet()
    await _run_sequential(prober, requests, catalog, results, delay, echo, sleep, rng)
    return generate_report(results.snapshot())


async def run_validation(
    prober,
    requests: int = 100,
    *,
    delay: float = REQUEST_DELAY_SECONDS,
    echo: Callable[[str], None] = click.echo,
    sleep=asyncio.sleep,
    rng=random,
) -> Report:
    """Sequential run restricted to endpoints expected to succeed."""
    return await run_quick_benchmark(
        prober,
        requests,
        catalog=VALIDATION_CATALOG,
        delay=delay,
        echo=echo,
        sleep=sleep,
        rng=rng,
    )


async def _run_sequential(prober, requests, catalog, results, delay, echo, sleep, rng):
    progress_every = max(1, math.ceil(requests / 10))

    for i in range(requests):
        endpoint = select_endpoint(catalog, rng)
        results.append(await prober.probe(endpoint.path, endpoint.method))

        done = i + 1
        if done % progress_every == 0:
            echo(
                f"Progress: {done / requests * 100:.0f}% ({done}/{requests}) "
                f"- Avg: {results.average_response_time():.1f}ms"
            )

        await sleep(delay)


async def run_load_test(
    prober,
    concurrent_users: int = 3,
    duration_seconds: float = 60,
    *,
    catalog: Sequence[EndpointDescriptor] = DEFAULT_CATALOG,
    echo: Callable[[str], None] = click.echo,
    clock=time.monotonic,
    sleep=asyncio.sleep,
    rng=random,
) -> Report:
    """Simulate ``concurrent_users`` users until ``duration_seconds`` elapse.

    Each user loops select, probe, append, think-time until the shared
    deadline. The deadline is checked at the top of each iteration, so an
    in-flight probe always completes.
    """
    results = ResultSet()
    started = clock()
    deadline = started + duration_seconds

    await asyncio.gather(*(
        simulate_user(
            prober,
            results,
            deadline,
            user_id,
            catalog=catalog,
            started=started,
            echo=echo,
            clock=clock,
            sleep=sleep,
            rng=rng,
        )
        for user_id in range(concurrent_users)
    ))

    echo(f"Load test completed: {len(results)} requests processed")
    return generate_report(results.snapshot())


async def simulate_user(
    prober,
    results: ResultSet,
    deadline: float,
    user_id: int,
    *,
    catalog: Sequence[EndpointDescriptor] = DEFAULT_CATALOG,
    started: Optional[float] = None,
    echo: Callable[[str], None] = click.echo,
    clock=time.monotonic,
    sleep=asyncio.sleep,
    rng=random,
) -> int:
    """One simulated user's loop. Returns the number of samples it appended.

    An unexpected error ends this user's loop only; it is logged and the
    remaining users carry on.
    """
    count = 0
    try:
        while clock() < deadline:
            endpoint = select_endpoint(catalog, rng)
            results.append(await prober.probe(endpoint.path, endpoint.method))
            count += 1

            if user_id == 0 and count % USER_PROGRESS_EVERY == 0 and started is not None:
                span = deadline - started
                progress = min(100.0, (clock() - started) / span * 100) if span > 0 else 100.0
                echo(
                    f"Progress: {progress:.1f}% ({len(results)} requests) "
                    f"- Avg: {results.average_response_time():.1f}ms"
                )

            await sleep(rng.uniform(*USER_DELAY_MS) / 1000.0)
    except Exception:
        logger.exception("user %d stopped after %d requests", user_id, count)
    return count


async def run_monitor(
    prober,
    interval_seconds: float = 5,
    *,
    on_stop: Callable[[Report], None],
    stop_event: Optional[asyncio.Event] = None,
    catalog: Sequence[EndpointDescriptor] = DEFAULT_CATALOG,
    echo: Callable[[str], None] = click.echo,
    clock=time.monotonic,
    sleep=asyncio.sleep,
    rng=random,
) -> Optional[Report]:
    """Probe one endpoint every ``interval_seconds`` until stopped.

    Runs until ``stop_event`` is set or the task is cancelled (Ctrl+C under
    ``asyncio.run``). Either way the collected samples are turned into a
    report exactly once and handed to ``on_stop``.

    Returns:
        The final report on a normal stop, or None when nothing was collected.
    """
    results = ResultSet()
    window = deque(maxlen=MONITOR_WINDOW)
    report = None

    try:
        while stop_event is None or not stop_event.is_set():
            started = clock()

            endpoint = select_endpoint(catalog, rng)
            sample = await prober.probe(endpoint.path, endpoint.method)
            results.append(sample)
            window.append(sample)

            avg = sum(s.response_time for s in window) / len(window)
            success = sum(1 for s in window if s.is_success) / len(window) * 100
            mark = "OK  " if sample.is_success else "FAIL"
            echo(
                f"[{datetime.now().strftime('%H:%M:%S')}] {mark} {endpoint.description or endpoint.path}"
                f" - {sample.response_time:.1f}ms"
                f" (avg: {avg:.1f}ms, success: {success:.1f}%)"
            )

            await sleep(max(0.0, interval_seconds - (clock() - started)))
    finally:
        samples = results.snapshot()
        if samples:
            echo("Monitoring stopped. Generating final report...")
            try:
                report = generate_report(samples)
            except ReportError as exc:
                logger.warning("could not build final monitor report: %s", exc)
            else:
                on_stop(report)

    return report
