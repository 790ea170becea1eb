#!/usr/bin/env python3
"""
Run the EC2 CPU threshold check against a collected cache.
Usage:
    python scripts/run_check.py --cache cache.json
    python scripts/run_check.py --cache cache.json --regions us-east-1 eu-west-1
    python scripts/run_check.py --mock --regions us-east-1 us-west-2
    python scripts/run_check.py --cache cache.json --output findings.json

Reads CACHE_FILE / MOCK_CACHE / CPU_THRESHOLD from the environment when the
flags are omitted.
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

# Add backend root to path so we can import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import get_settings  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402
from app.core.regions import regions_for  # noqa: E402
from app.models.cache import CacheSnapshot  # noqa: E402
from app.services.rules_engine.ec2_cpu_rules import OverutilizedEC2Instance  # noqa: E402
from app.services.scanner.mock_cache import mock_cache  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the EC2 CPU threshold check")
    parser.add_argument("--cache", help="Path to a collected cache JSON file")
    parser.add_argument("--mock", action="store_true", help="Use a generated mock cache")
    parser.add_argument("--regions", nargs="+", help="Regions to evaluate")
    parser.add_argument("--threshold", type=float, help="CPU alarm threshold in percent")
    parser.add_argument("--output", help="Write findings JSON to this file instead of stdout")
    args = parser.parse_args()

    if args.regions:
        os.environ["SCAN_REGIONS"] = ",".join(args.regions)
    # stdout carries the findings JSON
    configure_logging(sys.stderr)
    settings = get_settings()

    cache_path = args.cache or settings.cache_file
    if args.mock or (settings.mock_cache and not cache_path):
        cache = mock_cache(regions_for(settings))
    elif cache_path:
        try:
            cache = CacheSnapshot.from_file(cache_path)
        except (OSError, ValueError) as e:
            print(f"Error: could not load cache {cache_path}: {e}", file=sys.stderr)
            return 1
    else:
        print("Error: pass --cache <file> or --mock (or set CACHE_FILE / MOCK_CACHE).", file=sys.stderr)
        return 1

    check = OverutilizedEC2Instance(threshold=args.threshold)
    run = check.run(cache, settings)

    report = {
        "plugin": check.describe(),
        "results": [f.to_dict() for f in run.findings],
        "source": run.source,
    }
    payload = json.dumps(report, indent=2, default=str)

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"✅ {len(run.findings)} finding(s) written to {args.output}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
