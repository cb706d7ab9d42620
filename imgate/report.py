"""Collects benchmark results and prints a latency report."""

from __future__ import annotations

import sys
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import TextIO

_MAX_SAMPLES = 100000
_PERCENTILES = (10, 50, 75, 90, 99)
_BUCKET_COUNT = 4
BAR_CHAR = "■"


@dataclass
class Result:
    """One request's outcome; the duration is in seconds."""

    status_code: int = 0
    error: BaseException | None = None
    duration: float = 0.0
    content_length: int = 0


@dataclass
class Bucket:
    """A histogram bucket: its upper mark, its count and its share of samples."""

    mark: float
    count: int
    frequency: float


@dataclass
class LatencyDistribution:
    """The latency at a percentile."""

    percentage: int = 0
    latency: float = 0.0


@dataclass
class Snapshot:
    """The figures a report prints."""

    total: float
    average: float
    rps: float
    fastest: float = 0.0
    slowest: float = 0.0
    size_total: int = 0
    num_res: int = 0
    lats: list[float] = field(default_factory=list)
    status_codes: list[int] = field(default_factory=list)
    error_dist: dict[str, int] = field(default_factory=dict)
    status_code_dist: dict[int, int] = field(default_factory=dict)
    latency_distribution: list[LatencyDistribution] = field(default_factory=list)
    histogram: list[Bucket] = field(default_factory=list)


def _divide(a: float, b: float) -> float:
    if b:
        return a / b
    if a == 0:
        return float("nan")
    return float("inf") if a > 0 else float("-inf")


def format_number(value: float) -> str:
    """Format a number with four decimals."""
    return f"{value:4.4f}"


def histogram(buckets: list[Bucket]) -> str:
    """Render buckets as text bars scaled to a width of 40."""
    peak = max((b.count for b in buckets), default=0)
    lines = []
    for bucket in buckets:
        bar_len = (bucket.count * 40 + peak // 2) // peak if peak > 0 else 0
        lines.append(f"  {bucket.mark:4.3f} [{bucket.count}]\t|{BAR_CHAR * bar_len}\n")
    return "".join(lines)


def _build_histogram(lats: list[float]) -> list[Bucket]:
    fastest, slowest = lats[0], lats[-1]
    step = (slowest - fastest) / _BUCKET_COUNT
    marks = [fastest + step * i for i in range(_BUCKET_COUNT)] + [slowest]
    counts = [0] * len(marks)
    index = 0
    for lat in lats:
        while lat > marks[index] and index < len(marks) - 1:
            index += 1
        counts[index] += 1
    return [
        Bucket(mark=mark, count=count, frequency=count / len(lats))
        for mark, count in zip(marks, counts)
    ]


def _build_latencies(lats: list[float]) -> list[LatencyDistribution]:
    found: dict[int, float] = {}
    pending = iter(_PERCENTILES)
    target = next(pending)
    for i, lat in enumerate(lats):
        if i * 100 // len(lats) >= target:
            found[target] = lat
            target = next(pending, None)
            if target is None:
                break
    return [
        LatencyDistribution(p, found[p]) if found.get(p, 0) > 0 else LatencyDistribution()
        for p in _PERCENTILES
    ]


def _render(s: Snapshot) -> str:
    out = [
        "\nSummary:\n",
        f"  Total:\t{format_number(s.total)} secs\n",
        f"  Slowest:\t{format_number(s.slowest)} secs\n",
        f"  Fastest:\t{format_number(s.fastest)} secs\n",
        f"  Average:\t{format_number(s.average)} secs\n",
        f"  Requests/sec:\t{format_number(s.rps)}\n",
        "  ",
    ]
    if s.size_total > 0:
        out.append(f"\n  Total data:\t{s.size_total} bytes")
    out.append("\nResponse time histogram:\n")
    out.append(histogram(s.histogram))
    out.append("\nLatency distribution:")
    out.extend(
        f"\n  {d.percentage}% in {format_number(d.latency)} secs"
        for d in s.latency_distribution
    )
    out.append("\n\nStatus code distribution:")
    out.extend(
        f"\n  [{code}]\t{s.status_code_dist[code]} responses"
        for code in sorted(s.status_code_dist)
    )
    out.append("\n")
    if s.error_dist:
        out.append("Error distribution:")
        out.extend(f"\n  [{s.error_dist[err]}]\t{err}" for err in sorted(s.error_dist))
    out.append("\n")
    return "".join(out)


class Report:
    """Accumulates results from many workers and prints a summary when finalized."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._lock = threading.Lock()
        self._lats: list[float] = []
        self._status_codes: list[int] = []
        self._error_dist: Counter[str] = Counter()
        self._num_res = 0
        self._avg_total = 0.0
        self._size_total = 0

    def add(self, result: Result) -> None:
        """Record one result; safe to call from several threads."""
        with self._lock:
            self._num_res += 1
            if result.error is not None:
                self._error_dist[str(result.error)] += 1
                return
            self._avg_total += result.duration
            if len(self._lats) < _MAX_SAMPLES:
                self._lats.append(result.duration)
                self._status_codes.append(result.status_code)
            if result.content_length > 0:
                self._size_total += result.content_length

    def finalize(self, total: float) -> Snapshot:
        """Print the report for a run that took ``total`` seconds and return its figures."""
        with self._lock:
            lats = list(self._lats)
            snapshot = Snapshot(
                total=total,
                average=_divide(self._avg_total, len(lats)),
                rps=_divide(self._num_res, total),
                size_total=self._size_total,
                num_res=self._num_res,
                lats=list(lats),
                status_codes=list(self._status_codes),
                error_dist=dict(self._error_dist),
            )
        if lats:
            lats.sort()
            snapshot.fastest = lats[0]
            snapshot.slowest = lats[-1]
            snapshot.histogram = _build_histogram(lats)
            snapshot.latency_distribution = _build_latencies(lats)
            snapshot.status_code_dist = dict(Counter(snapshot.status_codes))
        self._stream.write(_render(snapshot))
        self._stream.write("\n")
        return snapshot