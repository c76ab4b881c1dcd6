#!/usr/bin/env python3
"""
LAKECAST CLI Tool.

Command-line access to the GLOFS frame server and the local API:
- Run discovery
- Frame fetch (single lake or several lakes at once)
- Health checks

Usage:
    python -m api.cli latest-run --lake all
    python -m api.cli frame --lake leofs --hour 24 --bbox=-83.5,41.3,-78.8,42.9
    python -m api.cli frame-multi --lakes leofs,loofs --hour 0 --bbox=-84,41,-76,44.5
    python -m api.cli check-health
"""
import argparse
import json
import sys
from typing import Optional, Sequence


def _parse_bbox(text: str):
    values = [float(v) for v in text.split(",")]
    if len(values) != 4:
        raise argparse.ArgumentTypeError("bbox must be minLon,minLat,maxLon,maxLat")
    return tuple(values)


def latest_run(lake: str) -> None:
    """Print the latest run per lake."""
    from lakecast.glofs.client import GlofsClient

    runs = GlofsClient().latest_run(lake)
    print(f"\n{'Lake':<10} {'Run':<30}")
    print("-" * 40)
    for code, run in runs.items():
        print(f"{code:<10} {run or 'n/a':<30}")
    print()


def frame(lake: str, hour: int, bbox, run: Optional[str], stride_rg: int, stride_wind: int,
          as_json: bool = False) -> None:
    """Fetch one frame and print a summary (or the full JSON)."""
    from lakecast.glofs.client import GlofsClient

    result = GlofsClient().fetch_frame(lake, hour, bbox, run, stride_rg, stride_wind)
    if as_json:
        print(json.dumps(result.to_dict()))
        return
    print(f"\nLake: {result.meta.lake}")
    print(f"Run: {result.meta.run}")
    print(f"Time: {result.time}")
    print(f"Spacing: {result.dx_deg} x {result.dy_deg} deg")
    print(f"Wind samples: {len(result.wind)} ({result.meta.units.wind})")
    print(f"Current samples: {len(result.curr)} ({result.meta.units.curr})")
    print(f"Temperature samples: {len(result.temp)} ({result.meta.units.temp})\n")


def frame_multi(lakes: str, hour: int, bbox, run: Optional[str], stride_rg: int, stride_wind: int) -> None:
    """Fetch several lakes in one request; per-lake errors are listed, not fatal."""
    from lakecast.glofs.client import GlofsClient

    results = GlofsClient().fetch_frame_multi(lakes, hour, bbox, run, stride_rg, stride_wind)
    print(f"\n{'Lake':<10} {'Status':<8} {'Detail':<50}")
    print("-" * 70)
    for code, r in results.items():
        if r.is_ok:
            s = r.frame.summary()
            detail = f"{s['time']} wind={s['wind']} curr={s['curr']} temp={s['temp']}"
            print(f"{code:<10} {'ok':<8} {detail:<50}")
        else:
            print(f"{code:<10} {'error':<8} {r.error:<50}")
    print()


def check_health(url: str) -> None:
    """Check API health."""
    import requests

    try:
        response = requests.get(url, timeout=5)
        if response.status_code == 200:
            data = response.json()
            print(f"\nAPI Status: {data.get('status', 'unknown')}")
            print(f"Version: {data.get('version', 'unknown')}")
            print(f"Timestamp: {data.get('timestamp', 'unknown')}")
        else:
            print(f"\nAPI returned status code: {response.status_code}")
            sys.exit(1)
    except requests.exceptions.ConnectionError:
        print("\nError: Could not connect to API. Is the server running?")
        sys.exit(1)


def main(argv: Optional[Sequence[str]] = None):
    import requests

    from lakecast.glofs.client import DEFAULT_STRIDE_RG, DEFAULT_STRIDE_WIND
    from lakecast.glofs.errors import GlofsHTTPError

    parser = argparse.ArgumentParser(
        description="LAKECAST CLI Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Latest runs for every lake:
    python -m api.cli latest-run

  Lake Erie wind/current/temperature 24 h into the latest run:
    python -m api.cli frame --lake leofs --hour 24 --bbox=-83.5,41.3,-78.8,42.9

  Two lakes in one request, pinned run:
    python -m api.cli frame-multi --lakes leofs,loofs --hour 6 --bbox=-84,41,-76,44.5 --run 2025-08-14T12:00:00Z

  Check API health:
    python -m api.cli check-health
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # latest-run
    run_parser = subparsers.add_parser("latest-run", help="Show latest run per lake")
    run_parser.add_argument("--lake", default="all", help="Lake code or 'all' (default: all)")

    def _frame_args(p):
        p.add_argument("--hour", type=int, required=True, help="Hour offset, -6..120")
        p.add_argument("--bbox", type=_parse_bbox, required=True, help="minLon,minLat,maxLon,maxLat")
        p.add_argument("--run", default=None, help="Run id (default: server picks latest)")
        p.add_argument("--stride-rg", type=int, default=DEFAULT_STRIDE_RG)
        p.add_argument("--stride-wind", type=int, default=DEFAULT_STRIDE_WIND)

    # frame
    frame_parser = subparsers.add_parser("frame", help="Fetch one lake's frame")
    frame_parser.add_argument("--lake", required=True, help="leofs | lmhofs | loofs | lsofs")
    frame_parser.add_argument("--json", action="store_true", help="Print the full frame as JSON")
    _frame_args(frame_parser)

    # frame-multi
    multi_parser = subparsers.add_parser("frame-multi", help="Fetch several lakes in one request")
    multi_parser.add_argument("--lakes", required=True, help="Comma-separated lake codes")
    _frame_args(multi_parser)

    # check-health
    health_parser = subparsers.add_parser("check-health", help="Check API health")
    health_parser.add_argument("--url", default="http://localhost:8000/api/health")

    args = parser.parse_args(argv)

    try:
        if args.command == "latest-run":
            latest_run(args.lake)
        elif args.command == "frame":
            frame(args.lake, args.hour, args.bbox, args.run, args.stride_rg, args.stride_wind, args.json)
        elif args.command == "frame-multi":
            frame_multi(args.lakes, args.hour, args.bbox, args.run, args.stride_rg, args.stride_wind)
        elif args.command == "check-health":
            check_health(args.url)
        else:
            parser.print_help()
            sys.exit(1)
    except GlofsHTTPError as e:
        print(f"\nError: {e}")
        sys.exit(1)
    except requests.exceptions.JSONDecodeError as e:
        print(f"\nError: upstream returned a non-JSON body ({e})")
        sys.exit(1)
    except ValueError as e:
        print(f"\nInvalid argument: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
