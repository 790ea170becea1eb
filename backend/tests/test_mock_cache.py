"""Tests for the mock cache generator (local runs without AWS)."""
from app.core.config import Settings
from app.models.cache import CacheKey
from app.models.finding import Status
from app.services.rules_engine.ec2_cpu_rules import OverutilizedEC2Instance
from app.services.scanner.mock_cache import mock_cache, mock_cache_data

_REGIONS = ["us-east-1", "us-east-2", "us-west-1", "us-west-2", "eu-west-1", "eu-central-1"]


def test_mock_cache_is_deterministic_for_seed():
    first = mock_cache_data(_REGIONS, seed=7)
    second = mock_cache_data(_REGIONS, seed=7)
    assert first["ec2"] == second["ec2"]


def test_mock_cache_covers_every_region():
    cache = mock_cache(_REGIONS)
    for region in _REGIONS:
        assert cache.lookup(CacheKey("ec2", "describeInstances", region)) is not None


def test_mock_instances_have_metrics():
    cache = mock_cache(_REGIONS)
    for region in _REGIONS:
        listing = cache.lookup(CacheKey("ec2", "describeInstances", region))
        if listing.failed:
            continue
        for reservation in listing.data:
            for instance in reservation["Instances"]:
                assert instance["InstanceId"].startswith("i-")
                key = CacheKey("cloudwatch", "getEc2MetricStatistics", region, instance["InstanceId"])
                assert cache.lookup(key) is not None


def test_check_runs_against_mock_cache():
    settings = Settings(scan_regions=",".join(_REGIONS))
    run = OverutilizedEC2Instance().run(mock_cache(_REGIONS), settings)
    assert len(run.findings) >= len(_REGIONS)
    assert {f.region for f in run.findings} == set(_REGIONS)
    for finding in run.findings:
        assert finding.status in (Status.OK, Status.ALERT, Status.UNKNOWN)
        if finding.status == Status.ALERT:
            assert finding.resource.startswith("i-")
