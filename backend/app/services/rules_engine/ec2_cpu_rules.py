"""
EC2 CPU Threshold Check
=======================
Flags EC2 instances whose most recent CloudWatch CPUUtilization average is
above the alarm threshold (90% unless configured otherwise).

Reads only the collected cache:
- ec2 / describeInstances / <region>
- cloudwatch / getEc2MetricStatistics / <region> / <instance-id>
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from numbers import Real
from typing import Any, Iterator, Optional

from app.core.config import Settings, get_settings
from app.core.errors import DataUnavailable, FetchError
from app.core.logging import ContextLogger
from app.core.regions import regions_for
from app.models.cache import CacheKey, CacheSnapshot, CallResult, SourceTracker, describe_error
from app.models.finding import CheckRun, Finding, Status, add_result
from app.services.rules_engine.base import RuleCheck

logger = logging.getLogger(__name__)

DEFAULT_CPU_THRESHOLD = 90.0


def _listing_key(region: str) -> CacheKey:
    return CacheKey("ec2", "describeInstances", region)


def _metric_key(region: str, instance_id: str) -> CacheKey:
    return CacheKey("cloudwatch", "getEc2MetricStatistics", region, instance_id)


def _iter_instance_ids(reservations: list[Any], log: ContextLogger) -> Iterator[str]:
    """Yield each defined InstanceId once, in listing order."""
    seen: set[str] = set()
    for reservation in reservations:
        if not isinstance(reservation, Mapping):
            continue
        for instance in reservation.get("Instances") or []:
            if not isinstance(instance, Mapping):
                continue
            instance_id = instance.get("InstanceId")
            if not instance_id:
                continue
            # Cache keys are strings
            instance_id = str(instance_id)
            if instance_id in seen:
                log.debug(f"Skipping repeated instance {instance_id}")
                continue
            seen.add(instance_id)
            yield instance_id


def _latest_cpu(metric: Optional[CallResult]) -> Optional[float]:
    """
    Average of the last datapoint, as delivered by the collector.
    Returns None when the call succeeded with an empty Datapoints list.
    """
    if metric is None or metric.failed or not metric.has_data:
        raise FetchError(describe_error(metric))

    datapoints = metric.data.get("Datapoints") if isinstance(metric.data, Mapping) else None
    if datapoints is None:
        raise FetchError(describe_error(metric))
    if not isinstance(datapoints, list):
        raise DataUnavailable(f"Datapoints is a {type(datapoints).__name__}, expected a list")
    if not datapoints:
        return None

    last = datapoints[-1]
    value = last.get("Average") if isinstance(last, Mapping) else None
    if isinstance(value, bool) or not isinstance(value, Real):
        raise DataUnavailable("latest datapoint carries no numeric Average")
    return value


def _format_value(value: float) -> str:
    # 95.0 -> "95"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def check_region(tracker: SourceTracker, region: str, threshold: float = DEFAULT_CPU_THRESHOLD) -> list[Finding]:
    """Classify every instance in one region as OK, ALERT or UNKNOWN."""
    log = ContextLogger(__name__, region=region)
    results: list[Finding] = []

    listing = tracker.lookup(_listing_key(region))
    if listing is None:
        # Region was not collected
        return results

    if listing.failed or not listing.has_data:
        add_result(
            results, Status.UNKNOWN,
            f"Unable to query for EC2 instances: {describe_error(listing)}", region,
        )
        return results

    if not isinstance(listing.data, list):
        add_result(
            results, Status.UNKNOWN,
            f"Unable to query for EC2 instances: unexpected {type(listing.data).__name__} payload", region,
        )
        return results

    if not listing.data:
        add_result(results, Status.OK, "No EC2 instances found", region)
        return results

    for instance_id in _iter_instance_ids(listing.data, log):
        metric = tracker.lookup(_metric_key(region, instance_id))
        try:
            cpu = _latest_cpu(metric)
        except FetchError as e:
            add_result(
                results, Status.UNKNOWN,
                f"Unable to query for CPU metric statistics: {e}", region, instance_id,
            )
            continue
        except DataUnavailable as e:
            add_result(
                results, Status.UNKNOWN,
                f"CPU metric statistics are unusable: {e}", region, instance_id,
            )
            continue

        if cpu is None:
            add_result(results, Status.OK, "CPU metric statistics are not available", region, instance_id)
        elif cpu > threshold:
            add_result(
                results, Status.ALERT,
                f"CPU threshold exceeded - Current CPU utilization: {_format_value(cpu)}%", region, instance_id,
            )
        else:
            add_result(
                results, Status.OK,
                f"CPU threshold not exceeded - Current CPU utilization: {_format_value(cpu)}%", region, instance_id,
            )

    log.debug(f"Evaluated {len(results)} instance(s)")
    return results


class OverutilizedEC2Instance(RuleCheck):
    key = "overutilizedEC2Instance"
    title = "EC2 CPU Alarm Threshold Exceeded"
    category = "EC2"
    domain = "Compute"
    description = "Identify EC2 instances that have exceeded the alarm threshold for CPU utilization."
    more_info = (
        "Excessive CPU utilization can indicate performance issues or the need "
        "for capacity optimization."
    )
    link = "https://docs.aws.amazon.com/AWSEC2/latest/UserGuide/using-cloudwatch.html"
    recommended_action = (
        "Investigate the cause of high CPU utilization and consider optimizing or scaling resources."
    )
    apis = ("EC2:describeInstances", "CloudWatch:getEc2MetricStatistics")

    def __init__(self, threshold: Optional[float] = None) -> None:
        self._threshold = threshold

    def run(self, cache: CacheSnapshot, settings: Optional[Settings] = None) -> CheckRun:
        settings = settings or get_settings()
        threshold = self._threshold if self._threshold is not None else settings.cpu_threshold
        regions = regions_for(settings)
        tracker = SourceTracker(cache)

        per_region: dict[str, list[Finding]] = {}
        workers = max(1, min(settings.check_max_workers, len(regions)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(check_region, tracker, region, threshold): region
                for region in regions
            }
            for future in as_completed(futures):
                region = futures[future]
                try:
                    per_region[region] = future.result()
                except Exception as e:
                    ContextLogger(__name__, region=region).exception(f"CPU threshold check failed in {region}")
                    per_region[region] = [Finding(
                        status=Status.UNKNOWN,
                        message=f"Unable to evaluate EC2 CPU utilization: {e}",
                        region=region,
                    )]

        # Merge after the join, in region order
        findings: list[Finding] = []
        for region in regions:
            findings.extend(per_region.get(region, []))

        alerts = sum(1 for f in findings if f.status == Status.ALERT)
        logger.info(
            f"{self.key}: {len(findings)} finding(s), {alerts} alert(s) "
            f"across {len(regions)} region(s) at threshold {threshold}%"
        )
        return CheckRun(findings=findings, source=tracker.source)
