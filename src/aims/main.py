#!/usr/bin/env python3
"""
===============================================================================
AIMS - COMMAND LINE ENTRY POINT
===============================================================================
Atlas Interceptor Mission Simulator: body positions and interceptor
estimates from the command line.

USAGE:
    aims positions                           # All bodies, now
    aims positions --time 1760745600000      # At a Unix-ms instant
    aims positions --velocities              # Include velocities (km/s)
    aims intercept --propulsion nuclear --payload camera probe \\
                   --launch 2026-03-01T00:00:00Z --csv out/traj.csv --plot out/
    aims validate --propulsion ion --payload probe --launch 2031-01-01

OUTPUTS:
    stdout         - tables of positions / mission summary
    --csv PATH     - trajectory samples (one row per point)
    --plot DIR     - positions.png, trajectory.png, fuel.png

DEPENDENCIES:
    numpy, pandas, matplotlib, pyyaml
===============================================================================
"""

import argparse
import logging
import os
import sys
import time
from datetime import datetime, timezone

from aims.core.config import default_config, load_config
from aims.core.exceptions import AimsError
from aims.dynamics.ephemeris import PositionService
from aims.guidance.mission_config import MissionConfig
from aims.guidance.mission_planner import MissionPlanner

logger = logging.getLogger('AIMS_MAIN')

EXIT_ENGINE_ERROR = 2


def setup_logging(level: str = 'INFO') -> None:
    """Configure root logging for command-line runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def now_ms() -> float:
    return time.time() * 1000.0


def _config(args):
    return load_config(args.config) if args.config else default_config()


def _mission_config(args) -> MissionConfig:
    data = {
        'propulsion_type': args.propulsion,
        'payload': args.payload,
    }
    if args.launch:
        data['launch_window'] = args.launch
    if args.trajectory_type:
        data['trajectory_type'] = args.trajectory_type
    if args.fuel_capacity is not None:
        data['fuel_capacity'] = args.fuel_capacity
    if args.mission_duration is not None:
        data['mission_duration'] = args.mission_duration
    return MissionConfig.from_dict(data)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def run_positions(args) -> int:
    config = _config(args)
    service = PositionService.from_config(config)
    epoch_ms = args.time if args.time is not None else now_ms()

    states = service.current_states(epoch_ms)
    stamp = datetime.fromtimestamp(epoch_ms / 1000.0, tz=timezone.utc)
    print(f"Heliocentric ecliptic positions at {stamp.isoformat()}")
    print("-" * 70)
    for name, state in states.items():
        x, y, z = state.position
        line = f"  {name:<10s} {x:+10.5f} {y:+10.5f} {z:+10.5f} AU  r={state.r_mag:8.4f}"
        if args.velocities:
            vx, vy, vz = state.velocity
            line += f"  v=({vx:+8.3f}, {vy:+8.3f}, {vz:+8.3f}) km/s"
        print(line)

    if args.plot:
        from aims.visualization.trajectory_plots import plot_body_positions
        positions = {name: tuple(s.position) for name, s in states.items()}
        path = plot_body_positions(positions, os.path.join(args.plot, 'positions.png'))
        logger.info("Positions plot saved to %s", path)
    return 0


def run_intercept(args) -> int:
    config = _config(args)
    planner = MissionPlanner.from_config(config)
    mission = _mission_config(args)

    launch_ms = None
    if mission.launch_window is None:
        launch_ms = now_ms()

    result = planner.plan_intercept(mission, launch_ms=launch_ms,
                                    origin=args.origin, target=args.target)
    traj = result.trajectory

    print("=" * 70)
    print(f"  INTERCEPT ESTIMATE: {args.origin} -> {args.target}")
    print("=" * 70)
    print(f"  Propulsion:            {mission.propulsion_type.value}")
    print(f"  Total delta-V:         {traj.total_delta_v:,.1f} m/s")
    print(f"  Propellant:            {traj.total_fuel_used:,.1f} kg")
    print(f"  Flight time:           {traj.flight_time / 86400.0:,.1f} days")
    print(f"  Intercept probability: {traj.intercept_probability:.2%}")
    for message in result.warnings:
        print(f"  WARNING: {message}")
    print("=" * 70)

    if args.csv:
        directory = os.path.dirname(args.csv)
        if directory:
            os.makedirs(directory, exist_ok=True)
        traj.to_dataframe().to_csv(args.csv, index=False)
        logger.info("Trajectory saved to %s", args.csv)

    if args.plot:
        from aims.visualization.trajectory_plots import (
            plot_fuel_history,
            plot_intercept_trajectory,
        )
        epoch = traj.points[0].time
        positions = planner.positions.current_positions(epoch)
        plot_intercept_trajectory(traj, positions, os.path.join(args.plot, 'trajectory.png'))
        plot_fuel_history(traj, os.path.join(args.plot, 'fuel.png'))
        logger.info("Trajectory plots saved to %s", args.plot)
    return 0


def run_validate(args) -> int:
    mission = _mission_config(args)
    outcome = MissionPlanner.validate(mission, now_ms())
    print(f"Valid: {outcome.valid}")
    for message in outcome.warnings:
        print(f"  WARNING: {message}")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _add_mission_arguments(parser):
    parser.add_argument('--propulsion', required=True,
                        help='Propulsion type: chemical, ion or nuclear')
    parser.add_argument('--payload', nargs='+', required=True,
                        help='Payload items: camera, spectrometer, probe')
    parser.add_argument('--launch', type=str, default=None,
                        help='Launch window (ISO-8601). Defaults to now')
    parser.add_argument('--trajectory-type', type=str, default=None,
                        help='hohmann, bi-elliptic or gravity-assist')
    parser.add_argument('--fuel-capacity', type=float, default=None,
                        help='Fuel capacity (kg)')
    parser.add_argument('--mission-duration', type=float, default=None,
                        help='Mission duration (days)')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='aims',
        description='Atlas Interceptor Mission Simulator engine',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to an alternative configuration YAML')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        help='Logging level (default: WARNING)')
    sub = parser.add_subparsers(dest='command', required=True)

    p_pos = sub.add_parser('positions', help='Body positions at an instant')
    p_pos.add_argument('--time', type=float, default=None,
                       help='Unix timestamp in milliseconds (default: now)')
    p_pos.add_argument('--velocities', action='store_true',
                       help='Also print velocities')
    p_pos.add_argument('--plot', type=str, default=None,
                       help='Directory for the positions plot')
    p_pos.set_defaults(func=run_positions)

    p_int = sub.add_parser('intercept', help='Estimate an interceptor trajectory')
    _add_mission_arguments(p_int)
    p_int.add_argument('--origin', type=str, default='Earth')
    p_int.add_argument('--target', type=str, default='3I/ATLAS')
    p_int.add_argument('--csv', type=str, default=None,
                       help='Write trajectory samples to this CSV file')
    p_int.add_argument('--plot', type=str, default=None,
                       help='Directory for trajectory plots')
    p_int.set_defaults(func=run_intercept)

    p_val = sub.add_parser('validate', help='Check a mission configuration')
    _add_mission_arguments(p_val)
    p_val.set_defaults(func=run_validate)

    return parser


def main(argv=None) -> int:
    """
    Main entry point. Parses command line arguments and runs the requested
    command. Returns the process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return args.func(args)
    except (AimsError, KeyError) as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ENGINE_ERROR


if __name__ == '__main__':
    sys.exit(main())
