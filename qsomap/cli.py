"""qsomap - map ADIF QSO logs by day

Usage:
  qsomap parse log.adi                     # records as JSON
  qsomap timeline log.adi                  # QSO dates and counts
  qsomap render log.adi -o map.png         # first day in the log
  qsomap render log.adi --date 20220115    # a specific day
  qsomap render log.adi --percent 50       # slider position
  qsomap grid CN86rx                       # grid -> lat/lon
  qsomap grid --latlon 47.5 -122.3         # lat/lon -> grid
  qsomap serve --port 5000                 # web API
  qsomap --dump-config                     # emit default config to stdout

Config file: ~/.config/qsomap/config.yaml (see DEFAULT_CONFIG in config.py)
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from .adif import load_adif
from .config import DEFAULT_CONFIG, load_config
from .errors import AdifParseError
from .locator import grid_to_latlon, latlon_to_grid
from .session import MapSession
from .timeline import build_timeline, parse_qso_date
from .viewport import ZoomTo


def read_log(path: Path, normalize_tags: bool) -> list[dict]:
    try:
        return load_adif(path, normalize_tags)
    except OSError as e:
        sys.exit(f"Failed to read {path}: {e}")
    except AdifParseError as e:
        sys.exit(f"{path}: {e}")


def cmd_parse(args, cfg):
    records = read_log(args.file, cfg["normalize_tags"])
    json.dump(records, sys.stdout, indent=2)
    print()


def cmd_timeline(args, cfg):
    records = read_log(args.file, cfg["normalize_tags"])
    timeline = build_timeline(records)

    print(f"{len(records)} QSOs, {len(timeline)} dated, {timeline.skipped} skipped")
    print(f"Range: {timeline.start} to {timeline.end} ({timeline.total_days} days)")
    print("-" * 40)
    for day, count in timeline.days():
        pct = timeline.date_to_slider(day)
        print(f"  {day}  {count:4d} QSOs  (slider {pct:5.1f}%)")


def cmd_render(args, cfg):
    if args.width:
        cfg["width"] = args.width
    if args.height:
        cfg["height"] = args.height
    if args.no_background:
        cfg["geometry_url"] = None
        cfg["geometry_file"] = None

    session = MapSession(cfg)
    session.load_records(read_log(args.file, cfg["normalize_tags"]))

    if args.date:
        day = parse_qso_date(args.date.replace("-", ""))
        if day is None:
            sys.exit(f"Invalid date '{args.date}' (expected YYYYMMDD)")
        session.select_date(day)
    elif args.percent is not None:
        try:
            session.select_percent(args.percent)
        except ValueError as e:
            sys.exit(str(e))

    if args.zoom:
        session.handle(ZoomTo(args.zoom))

    from .plot import render_png
    frame = session.frame()
    args.output.write_bytes(render_png(frame))

    print(f"{session.selected}: {len(frame.connections)} QSOs drawn, {frame.omitted} without location")
    if frame.error:
        print(f"Warning: {frame.error}", file=sys.stderr)
    print(f"Wrote {args.output}")


def cmd_grid(args, cfg):
    if args.latlon:
        lat, lon = args.latlon
        try:
            print(latlon_to_grid(lat, lon, args.precision))
        except ValueError as e:
            sys.exit(str(e))
        return

    if not args.grid:
        sys.exit("grid or --latlon is required")
    coords = grid_to_latlon(args.grid, center=not args.corner)
    if coords is None:
        sys.exit(f"Invalid grid square '{args.grid}'")
    print(f"{args.grid}: {coords.lat:.4f}, {coords.lon:.4f}")


def cmd_serve(args, cfg):
    from . import web
    web.set_session(MapSession(cfg))
    web.run(host=args.host, port=args.port, debug=args.debug)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="qsomap", description="Map ADIF QSO logs by day")
    p.add_argument("--config", type=Path, help="Config file (YAML)")
    p.add_argument("--dump-config", action="store_true", help="Emit default config to stdout")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command")

    sp = sub.add_parser("parse", help="Parse a log and print records as JSON")
    sp.add_argument("file", type=Path)
    sp.set_defaults(func=cmd_parse)

    sp = sub.add_parser("timeline", help="List QSO dates")
    sp.add_argument("file", type=Path)
    sp.set_defaults(func=cmd_timeline)

    sp = sub.add_parser("render", help="Render one day to PNG")
    sp.add_argument("file", type=Path)
    sp.add_argument("-o", "--output", type=Path, default=Path("qso_map.png"))
    sp.add_argument("--date", help="Day to show (YYYYMMDD)")
    sp.add_argument("--percent", type=float, help="Slider position 0-100")
    sp.add_argument("--zoom", type=float, help="Zoom factor (0.5-5)")
    sp.add_argument("--width", type=int)
    sp.add_argument("--height", type=int)
    sp.add_argument("--no-background", action="store_true", help="Skip country outlines")
    sp.set_defaults(func=cmd_render)

    sp = sub.add_parser("grid", help="Convert between grid squares and lat/lon")
    sp.add_argument("grid", nargs="?")
    sp.add_argument("--latlon", type=float, nargs=2, metavar=("LAT", "LON"))
    sp.add_argument("--precision", type=int, default=6, choices=(4, 6))
    sp.add_argument("--corner", action="store_true", help="South-west corner instead of center")
    sp.set_defaults(func=cmd_grid)

    sp = sub.add_parser("serve", help="Run the web API")
    sp.add_argument("--host", default="0.0.0.0")
    sp.add_argument("--port", type=int)
    sp.add_argument("--debug", action="store_true")
    sp.set_defaults(func=cmd_serve)

    return p


def main(argv: list[str] | None = None):
    p = build_parser()
    args = p.parse_args(argv)

    if args.dump_config:
        print(yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False))
        return

    if not args.command:
        p.print_help()
        sys.exit(1)

    cfg = load_config(args.config)
    level = logging.DEBUG if args.verbose else cfg.get("log_level", "INFO")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    args.func(args, cfg)


if __name__ == "__main__":
    main()
