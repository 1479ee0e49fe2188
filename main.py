"""
Indoor navigation command-line demo.

Runs the localization pipeline or the route planner on the demo data in
config.py (or on JSON input files) and prints the result as JSON.

    python main.py locate --scans 20
    python main.py route --start 0 0 --goal 10 5
    python main.py grid --start 0 0 --goal 4 0
"""

import sys
import json
import logging
import argparse
from typing import Dict, List, Optional, Sequence

import config
from nav_core.proto import Anchor, Point2D, Sample
from nav_core.localization import (
    FilterConfig,
    FilterType,
    LocalizationConfig,
    LocalizationPipeline,
    PositionSolverConfig,
    SignalModelConfig,
    TrilaterationMethod,
    estimate_signal_strength,
)
from nav_core.navigation import OccupancyGrid, RoutePlanner, RoutePlannerConfig, WaypointGraph
from nav_core.metrics import get_metrics

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False):
    """Configure root logging from config.LOGGING_CONFIG."""
    level = logging.DEBUG if debug else getattr(logging, config.LOGGING_CONFIG["level"])
    logging.basicConfig(level=level, format=config.LOGGING_CONFIG["format"])


def build_localization_config() -> LocalizationConfig:
    """Translate config.py dictionaries into component configs."""
    return LocalizationConfig(
        signal_config=SignalModelConfig(**config.SIGNAL_CONFIG),
        filter_config=FilterConfig(
            filter_type=FilterType(config.FILTER_CONFIG["filter_type"]),
            window_size=config.FILTER_CONFIG["window_size"],
            process_noise=config.FILTER_CONFIG["process_noise"],
            measurement_noise=config.FILTER_CONFIG["measurement_noise"],
        ),
        solver_config=PositionSolverConfig(
            min_anchors=config.SOLVER_CONFIG["min_anchors"],
            max_iterations=config.SOLVER_CONFIG["max_iterations"],
            three_anchor_method=TrilaterationMethod(config.SOLVER_CONFIG["three_anchor_method"]),
            seed_method=TrilaterationMethod(config.SOLVER_CONFIG["seed_method"]),
            max_accuracy_m=config.SOLVER_CONFIG["max_accuracy_m"],
        ),
    )


def build_anchors(records: Sequence[Dict]) -> List[Anchor]:
    default_power = config.SIGNAL_CONFIG["default_reference_power"]
    return [Anchor.from_dict(record, default_power) for record in records]


def simulate_samples(
    anchors: Sequence[Anchor],
    position: Point2D,
    path_loss_exponent: float,
    timestamp: float = 0.0,
) -> List[Sample]:
    """
    One noise-free scan of all anchors from a known position.

    Args:
        anchors: Beacons to simulate
        position: True user position
        path_loss_exponent: Exponent of the forward model
        timestamp: Sample timestamp

    Returns:
        One Sample per anchor with rounded RSSI
    """
    samples = []
    for anchor in anchors:
        distance = max(position.distance_to(anchor.position), 0.1)
        rssi = estimate_signal_strength(distance, anchor.reference_power, path_loss_exponent)
        samples.append(Sample(anchor.anchor_id, int(round(rssi)), timestamp))
    return samples


def load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def run_locate(args) -> Dict:
    """Run the localization pipeline on demo or file input."""
    if args.input:
        data = load_json(args.input)
        anchors = build_anchors(data["anchors"])
        batches = [[
            Sample(s["anchor_id"], int(s["signal_strength"]), float(s.get("timestamp", 0.0)))
            for s in data["samples"]
        ]]
    else:
        anchors = build_anchors(config.DEMO_ANCHORS)
        user = Point2D.from_dict(config.DEMO_USER_POSITION)
        exponent = config.SIGNAL_CONFIG["path_loss_exponent"]
        batches = [simulate_samples(anchors, user, exponent, float(t)) for t in range(args.scans)]

    pipeline = LocalizationPipeline(anchors, build_localization_config())

    estimate = None
    for batch in batches:
        estimate = pipeline.process(batch)

    if estimate is None:
        logger.warning("Could not determine position")
        return {"location": None, "accuracy": None}

    logger.info("Position: (%.2f, %.2f)", estimate.x, estimate.y)
    return estimate.to_dict()


def run_route(args) -> Dict:
    """Plan a route on the demo or file way-point graph."""
    records = load_json(args.graph) if args.graph else config.DEMO_ROOM_GRAPH
    graph = WaypointGraph.from_records(records)

    planner = RoutePlanner(RoutePlannerConfig(config.NAVIGATION_CONFIG["walking_speed_m_s"]))
    route = planner.find_route(graph, Point2D(*args.start), Point2D(*args.goal))

    if not route.found:
        logger.warning("No route found")
    return route.to_dict()


def run_grid(args) -> Dict:
    """Plan a cell path on the demo or file occupancy grid."""
    rows = load_json(args.grid) if args.grid else config.DEMO_FLOOR_GRID
    grid = OccupancyGrid.from_rows(rows, config.NAVIGATION_CONFIG["grid_cell_size_m"])

    planner = RoutePlanner(RoutePlannerConfig(config.NAVIGATION_CONFIG["walking_speed_m_s"]))
    route = planner.find_grid_route(grid, tuple(args.start), tuple(args.goal))

    if not route.found:
        logger.warning("No grid path found")

    result = route.to_dict()
    result["cells"] = [list(cell) for cell in route.node_ids]
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Indoor navigation demo')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--metrics', '-m', action='store_true',
                        help='Print metrics summary to stderr')

    subparsers = parser.add_subparsers(dest='command', required=True)

    locate = subparsers.add_parser('locate', help='Estimate position from beacon samples')
    locate.add_argument('--input', '-i', type=str, default=None,
                        help='JSON file with "anchors" and "samples"')
    locate.add_argument('--scans', type=int, default=20,
                        help='Number of simulated scans for the demo')
    locate.set_defaults(handler=run_locate)

    route = subparsers.add_parser('route', help='Plan a route on a way-point graph')
    route.add_argument('--graph', type=str, default=None,
                       help='JSON file with {id, x, y, connectedNodes} records')
    route.add_argument('--start', type=float, nargs=2, required=True, metavar=('X', 'Y'))
    route.add_argument('--goal', type=float, nargs=2, required=True, metavar=('X', 'Y'))
    route.set_defaults(handler=run_route)

    grid = subparsers.add_parser('grid', help='Plan a path on an occupancy grid')
    grid.add_argument('--grid', type=str, default=None,
                      help='JSON file with a list of 0/1 rows')
    grid.add_argument('--start', type=int, nargs=2, required=True, metavar=('ROW', 'COL'))
    grid.add_argument('--goal', type=int, nargs=2, required=True, metavar=('ROW', 'COL'))
    grid.set_defaults(handler=run_grid)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    result = args.handler(args)
    print(json.dumps(result, indent=2))

    if args.metrics:
        print(get_metrics().format_summary(), file=sys.stderr)

    found = result.get("location") is not None or bool(result.get("route"))
    return 0 if found else 1


if __name__ == "__main__":
    sys.exit(main())
