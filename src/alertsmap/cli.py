"""CLI entrypoint for the alerts map renderer."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .config import AppConfig, load_config
from .directory import GeoDataError, GeoDirectory, default_directory
from .grid import GridRenderError, MapGrid
from .models import Region
from .spatial_index import GridIndex
from .statuses import decode_oblast_statuses
from .util import setup_logging

LOGGER = logging.getLogger("alertsmap.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alertsmap",
        description="Braille terminal map of Ukraine's regions.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", default=None, help="Path to YAML config.")
        p.add_argument("--verbose", action="store_true", help="Enable debug logs.")

    render_p = subparsers.add_parser("render", help="Print the map as braille text.")
    add_common(render_p)
    render_p.add_argument(
        "--region",
        action="append",
        default=[],
        help="Region name (either locale) or canonical id. Can be repeated.",
    )
    render_p.add_argument("--width", type=int, default=None, help="Grid width in characters.")
    render_p.add_argument("--height", type=int, default=None, help="Grid height in characters.")
    render_p.add_argument(
        "--area",
        action="store_true",
        help="Fill polygon interiors instead of drawing outlines.",
    )
    render_p.add_argument(
        "--simplification",
        type=float,
        default=None,
        help="Simplification tolerance in degrees (0 disables).",
    )

    regions_p = subparsers.add_parser("regions", help="List regions in canonical order.")
    add_common(regions_p)

    bounds_p = subparsers.add_parser("bounds", help="Print padded viewport bounds.")
    add_common(bounds_p)
    bounds_p.add_argument("--region", default=None, help="Region name or canonical id.")

    statuses_p = subparsers.add_parser(
        "statuses",
        help="Decode a per-region alert status string.",
    )
    add_common(statuses_p)
    statuses_p.add_argument("data", help="One status character per region, e.g. ANNP...")

    return parser


def _load_and_setup(args: argparse.Namespace) -> AppConfig:
    cfg = load_config(args.config)
    setup_logging(cfg.logging.log_file, verbose=bool(args.verbose) or cfg.logging.verbose)
    return cfg


def _resolve_region(directory: GeoDirectory, query: str) -> Region | None:
    text = query.strip()
    if text.isdigit():
        return directory.get_region_by_id(int(text))
    return directory.get_region_by_name(text)


def _resolve_regions(directory: GeoDirectory, queries: Sequence[str]) -> list[Region] | None:
    regions: list[Region] = []
    for query in queries:
        region = _resolve_region(directory, query)
        if region is None:
            LOGGER.error("Unknown region: %s", query)
            return None
        regions.append(region)
    return regions


def _run_render(
    cfg: AppConfig,
    directory: GeoDirectory,
    *,
    region_queries: Sequence[str],
    width: int | None,
    height: int | None,
    area: bool,
    simplification: float | None,
) -> int:
    regions = _resolve_regions(directory, region_queries)
    if regions is None:
        return 1
    geometries = [region.geometry for region in regions] if regions else [directory.borders]
    index = GridIndex.from_geometries(
        geometries,
        simplification=cfg.render.simplification if simplification is None else simplification,
        is_area=area or cfg.render.area_mode,
    )
    grid = MapGrid(
        width if width is not None else cfg.render.width,
        height if height is not None else cfg.render.height,
        index,
    )
    grid.render(sys.stdout)
    return 0


def _run_regions(cfg: AppConfig, directory: GeoDirectory) -> int:
    for region in directory.regions:
        print(
            f"{region.id:>2}  uid={region.location_uid:<3} "
            f"{region.name_by_locale(cfg.geo.locale)}"
        )
    return 0


def _run_bounds(cfg: AppConfig, directory: GeoDirectory, *, region_query: str | None) -> int:
    region: Region | None = None
    if region_query is not None:
        region = _resolve_region(directory, region_query)
        if region is None:
            LOGGER.error("Unknown region: %s", region_query)
            return 1
    (min_x, max_x), (min_y, max_y) = directory.get_viewport_bounds(
        region.geometry if region is not None else None,
        padding=cfg.geo.viewport_padding_deg,
    )
    print(f"x: [{min_x:.4f}, {max_x:.4f}]")
    print(f"y: [{min_y:.4f}, {max_y:.4f}]")
    return 0


def _run_statuses(cfg: AppConfig, directory: GeoDirectory, *, data: str) -> int:
    try:
        statuses = decode_oblast_statuses(data, directory.regions)
    except ValueError as exc:
        LOGGER.error("Cannot decode statuses: %s", exc)
        return 1
    active = 0
    for status in statuses:
        print(status.label(cfg.geo.locale))
        active += int(status.is_active)
    LOGGER.info("%d of %d regions under alert", active, len(statuses))
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    cfg = _load_and_setup(args)
    directory = default_directory()
    command = str(args.command)
    if command == "render":
        return _run_render(
            cfg,
            directory,
            region_queries=[str(item) for item in args.region],
            width=args.width,
            height=args.height,
            area=bool(args.area),
            simplification=args.simplification,
        )
    if command == "regions":
        return _run_regions(cfg, directory)
    if command == "bounds":
        return _run_bounds(cfg, directory, region_query=args.region)
    if command == "statuses":
        return _run_statuses(cfg, directory, data=str(args.data))
    LOGGER.error("Unknown command: %s", command)
    return 2


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return _dispatch(args)
    except (GeoDataError, GridRenderError) as exc:
        LOGGER.error("%s", exc)
        return 1
    except (FileNotFoundError, ValueError) as exc:
        LOGGER.error("Invalid input: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
