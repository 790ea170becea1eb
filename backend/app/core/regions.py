from __future__ import annotations

from typing import List

from app.core.config import Settings

# Commercial regions where EC2 is offered
EC2_REGIONS: tuple[str, ...] = (
    "us-east-1", "us-east-2", "us-west-1", "us-west-2",
    "af-south-1",
    "ap-east-1", "ap-south-1", "ap-south-2",
    "ap-northeast-1", "ap-northeast-2", "ap-northeast-3",
    "ap-southeast-1", "ap-southeast-2", "ap-southeast-3", "ap-southeast-4",
    "ca-central-1", "ca-west-1",
    "eu-central-1", "eu-central-2",
    "eu-west-1", "eu-west-2", "eu-west-3",
    "eu-north-1", "eu-south-1", "eu-south-2",
    "il-central-1",
    "me-south-1", "me-central-1",
    "sa-east-1",
)


def regions_for(settings: Settings) -> List[str]:
    """Regions a check iterates: the configured subset, else the full catalogue."""
    configured = settings.scan_regions_list
    if configured:
        # Keep configured order, drop repeats
        return list(dict.fromkeys(configured))
    return list(EC2_REGIONS)
