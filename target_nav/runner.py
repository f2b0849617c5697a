"""
Command-line runner for a simulated drive to a vision target.

Builds a simulated robot and camera, schedules a DriveRouteToTargetTask on a
cooperative scheduler and steps the simulation once per control tick until the
task finishes. Optionally records per-tick telemetry to CSV.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from . import config
from .config import TERM_BLUE, TERM_ORANGE, TERM_RESET, DriveSettings
from .data_collector import TelemetryRecorder
from .interfaces import DriveContext
from .model import DEFAULT_PROFILE, KinematicProfile
from .orientation import ROCKET_TARGETS, STANDARD_TARGETS
from .route import DriveRouteToTargetTask
from .sim import CooperativeScheduler, SimulatedRobot, SimulatedVision
from .tasks import Status


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    This formatter provides clean console output by showing INFO messages without
    timestamps while preserving full context for WARNING, ERROR, and DEBUG messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)


def run_simulation(
    tx: float,
    ty: float,
    yaw: float = 0.0,
    settings: Optional[DriveSettings] = None,
    rocket: bool = False,
    lock_after: Optional[int] = 0,
    bump_at: Optional[int] = None,
    max_ticks: int = config.SIM_MAX_TICKS,
    recorder: Optional[TelemetryRecorder] = None,
    profile: KinematicProfile = DEFAULT_PROFILE,
) -> Status:
    """Drive a simulated robot to a target seen at bearing (tx, ty).

    Args:
        tx: Horizontal bearing to the target (degrees)
        ty: Vertical bearing to the target (degrees)
        yaw: Starting yaw of the robot (degrees)
        settings: Drive settings (defaults if None)
        rocket: Use the rocket target orientations instead of the standard ones
        lock_after: Camera polls before the target appears (None: never)
        bump_at: Tick at which to inject a collision spike (None: no collision)
        max_ticks: Tick budget for the run
        recorder: Optional telemetry recorder, already set up
        profile: Kinematic model of the drive train

    Returns:
        Final status of the drive task (CANCELLED if the tick budget ran out)
    """
    robot = SimulatedRobot(yaw=yaw, profile=profile)
    vision = SimulatedVision(tx, ty, lock_after=lock_after)
    scheduler = CooperativeScheduler()
    context = DriveContext(drive=robot, heading=robot, abort=scheduler.abort_all, profile=profile)
    task = DriveRouteToTargetTask(
        context,
        vision,
        settings=settings,
        orientation=ROCKET_TARGETS if rocket else STANDARD_TARGETS,
    )
    scheduler.add(task)

    dt = profile.sec_per_step

    def on_tick(tick: int) -> None:
        if bump_at is not None and tick == bump_at:
            robot.bump(1.0)
        robot.step(dt)
        if recorder is not None:
            recorder.log_tick(
                tick, tick * dt, robot.left, robot.right, robot.distance(), robot.yaw(),
                task.status.value,
            )

    ticks = scheduler.run(max_ticks, on_tick=on_tick)
    if not task.done:
        logging.warning(f"Tick budget of {max_ticks} exhausted")
        scheduler.abort_all()

    logging.info(
        f"Finished after {ticks} ticks ({ticks * dt:.2f}s) with status {task.status.value}; "
        f"robot at ({robot.x:.2f}, {robot.y:.2f}) yaw {robot.yaw():.2f}"
    )
    return task.status


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = DriveSettings()
    parser = argparse.ArgumentParser(
        description="Simulate driving a route to a vision target"
    )
    parser.add_argument("--tx", type=float, default=0.0, help="Horizontal bearing to target (deg)")
    parser.add_argument("--ty", type=float, default=5.0, help="Vertical bearing to target (deg)")
    parser.add_argument("--yaw", type=float, default=0.0, help="Starting robot yaw (deg)")
    parser.add_argument(
        "--rocket", action="store_true", help="Target is on the rocket (angled faces)"
    )
    parser.add_argument(
        "--standoff", type=float, default=defaults.standoff_distance,
        help=f"Final approach distance (default: {defaults.standoff_distance})",
    )
    parser.add_argument(
        "--velocity", type=float, default=defaults.drive_velocity,
        help=f"Intercept leg cruise velocity (default: {defaults.drive_velocity})",
    )
    parser.add_argument(
        "--normal-velocity", type=float, default=defaults.normal_velocity,
        help=f"Final approach cruise velocity (default: {defaults.normal_velocity})",
    )
    parser.add_argument(
        "--max-time", type=float, default=defaults.max_time,
        help=f"Route time limit in seconds (default: {defaults.max_time})",
    )
    parser.add_argument(
        "--route-timeout", type=float, default=defaults.route_timeout,
        help=f"Target search time limit in seconds (default: {defaults.route_timeout})",
    )
    parser.add_argument(
        "--lock-after", type=int, default=0, help="Camera polls before the target is seen"
    )
    parser.add_argument(
        "--bump-at", type=int, default=None, help="Inject a collision at this tick"
    )
    parser.add_argument("--record", action="store_true", help="Record telemetry to CSV")
    parser.add_argument(
        "--output-dir", type=str, default=".", help="Base directory for recorded runs"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one simulated drive; returns the process exit status."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    settings = DriveSettings(
        standoff_distance=args.standoff,
        drive_velocity=args.velocity,
        normal_velocity=args.normal_velocity,
        max_time=args.max_time,
        route_timeout=args.route_timeout,
    )
    run_kwargs = dict(
        tx=args.tx,
        ty=args.ty,
        yaw=args.yaw,
        settings=settings,
        rocket=args.rocket,
        lock_after=args.lock_after,
        bump_at=args.bump_at,
    )

    try:
        if args.record:
            with TelemetryRecorder(output_dir=args.output_dir) as recorder:
                status = run_simulation(recorder=recorder, **run_kwargs)
        else:
            status = run_simulation(**run_kwargs)
    except ValueError as e:
        logging.error(f"Error: {e}")
        return 1

    if status is Status.SUCCEEDED:
        logging.info(f"{TERM_BLUE}✓ Reached target{TERM_RESET}")
        return 0
    logging.info(f"{TERM_ORANGE}✗ Did not reach target ({status.value}){TERM_RESET}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
