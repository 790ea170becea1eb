"""
Mock Cache
==========
Builds a collector-shaped cache snapshot without touching AWS, for local runs
of rule checks. Seeded, so the same regions always give the same snapshot.
"""
from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import Any

from app.models.cache import CacheSnapshot

_INSTANCE_TYPES = [
    "t3.micro", "t3.small", "t3.medium", "t3.large",
    "m5.large", "m5.xlarge", "c5.2xlarge", "r5.xlarge",
]


def _mock_datapoints(rng: random.Random, hot: bool) -> list[dict[str, Any]]:
    now = datetime.now(tz=timezone.utc).replace(minute=0, second=0, microsecond=0)
    points = []
    for hours_ago in range(rng.randint(0, 6), 0, -1):
        average = rng.uniform(91.0, 100.0) if hot else rng.uniform(1.0, 85.0)
        points.append({
            "Timestamp": (now - timedelta(hours=hours_ago)).isoformat(),
            "Average": round(average, 2),
            "Unit": "Percent",
        })
    return points


def mock_cache_data(regions: list[str], seed: int = 42) -> dict[str, Any]:
    rng = random.Random(seed)
    listings: dict[str, Any] = {}
    metrics: dict[str, Any] = {}

    for region in regions:
        roll = rng.random()
        if roll < 0.1:
            listings[region] = {"err": {"code": "UnauthorizedOperation", "message": "You are not authorized to perform this operation."}}
            continue
        if roll < 0.2:
            listings[region] = {"data": []}
            continue

        instances = []
        region_metrics: dict[str, Any] = {}
        for _ in range(rng.randint(1, 5)):
            instance_id = f"i-{rng.getrandbits(64):016x}"
            instances.append({
                "InstanceId": instance_id,
                "InstanceType": rng.choice(_INSTANCE_TYPES),
                "State": {"Name": "running"},
            })
            if rng.random() < 0.1:
                region_metrics[instance_id] = {"err": {"code": "Throttling", "message": "Rate exceeded"}}
            else:
                hot = rng.random() < 0.3
                region_metrics[instance_id] = {"data": {"Label": "CPUUtilization", "Datapoints": _mock_datapoints(rng, hot)}}

        listings[region] = {"data": [{"ReservationId": f"r-{rng.getrandbits(64):016x}", "Instances": instances}]}
        metrics[region] = region_metrics

    return {
        "ec2": {"describeInstances": listings},
        "cloudwatch": {"getEc2MetricStatistics": metrics},
    }


def mock_cache(regions: list[str], seed: int = 42) -> CacheSnapshot:
    return CacheSnapshot(mock_cache_data(regions, seed))
