import pytest

from target_nav.config import COLLISION_THRESHOLD_G, SIM_MAX_ACCEL_G, DriveSettings
from target_nav.errors import DriveRangeError
from target_nav.interfaces import CameraMode, DriveContext
from target_nav.route import DriveRouteToTargetTask
from target_nav.runner import run_simulation
from target_nav.sim import CooperativeScheduler, SimulatedRobot, SimulatedVision
from target_nav.tasks import Status, Task

DT = 0.02


class CountdownTask(Task):
    def __init__(self, ticks):
        super().__init__()
        self.ticks_left = ticks

    def on_tick(self):
        self.ticks_left -= 1
        if self.ticks_left <= 0:
            self.finish(Status.SUCCEEDED)


class TestSimulatedRobot:
    def test_rejects_out_of_range_power(self):
        robot = SimulatedRobot()
        with pytest.raises(DriveRangeError):
            robot.set_differential(1.2, 0.0)

    def test_drives_along_heading(self):
        robot = SimulatedRobot(yaw=0.0)
        robot.set_differential(0.3, 0.3)
        for _ in range(50):
            robot.step(DT)
        assert robot.y > 0.0
        assert robot.x == pytest.approx(0.0, abs=1e-9)
        assert robot.yaw() == pytest.approx(0.0)
        assert robot.distance() == pytest.approx(robot.y)

        robot = SimulatedRobot(yaw=90.0)
        robot.set_differential(0.3, 0.3)
        for _ in range(50):
            robot.step(DT)
        assert robot.x > 0.0

    def test_faster_left_side_turns_clockwise(self):
        robot = SimulatedRobot()
        robot.set_differential(0.1, -0.1)
        robot.step(DT)
        assert robot.rate() > 0.0
        assert robot.yaw() > 0.0
        assert robot.speed == 0.0

    def test_acceleration_reversal_stays_below_collision_threshold(self):
        robot = SimulatedRobot()
        robot.set_differential(1.0, 1.0)
        for _ in range(10):
            robot.step(DT)
        accelerating = robot.world_linear_accel_y()
        assert accelerating == pytest.approx(SIM_MAX_ACCEL_G)
        robot.stop()
        robot.step(DT)
        assert accelerating - robot.world_linear_accel_y() < COLLISION_THRESHOLD_G

    def test_bump_is_a_single_spike(self):
        robot = SimulatedRobot()
        robot.bump(1.0, -0.5)
        robot.step(DT)
        assert robot.world_linear_accel_x() == pytest.approx(1.0)
        assert robot.world_linear_accel_y() == pytest.approx(-0.5)
        robot.step(DT)
        assert robot.world_linear_accel_x() == pytest.approx(0.0)

    def test_stop_and_reset(self):
        robot = SimulatedRobot()
        robot.set_differential(0.5, 0.5)
        robot.step(DT)
        robot.stop()
        assert (robot.left, robot.right) == (0.0, 0.0)
        robot.reset_encoders()
        assert robot.distance() == 0.0


def test_vision_only_reports_in_vision_mode():
    vision = SimulatedVision(3.0, 4.0)
    assert not vision.has_target()
    vision.set_mode(CameraMode.VISION)
    assert vision.has_target()
    assert (vision.bearing_x(), vision.bearing_y()) == (3.0, 4.0)


class TestCooperativeScheduler:
    def test_drops_finished_tasks(self):
        scheduler = CooperativeScheduler()
        short, long = CountdownTask(1), CountdownTask(3)
        scheduler.add(short)
        scheduler.add(long)
        scheduler.run_once()
        assert scheduler.tasks == [long]
        assert scheduler.run(max_ticks=10) == 2
        assert scheduler.idle

    def test_tick_budget(self):
        scheduler = CooperativeScheduler()
        scheduler.add(CountdownTask(100))
        seen = []
        assert scheduler.run(max_ticks=5, on_tick=seen.append) == 5
        assert seen == [1, 2, 3, 4, 5]
        assert not scheduler.idle

    def test_abort_all_cancels_everything(self):
        scheduler = CooperativeScheduler()
        tasks = [CountdownTask(10), CountdownTask(10)]
        for task in tasks:
            scheduler.add(task)
        scheduler.run_once()
        scheduler.abort_all()
        assert scheduler.idle
        assert all(task.status is Status.CANCELLED for task in tasks)


def test_drive_to_target_end_to_end():
    robot = SimulatedRobot(yaw=0.0)
    vision = SimulatedVision(0.0, 5.0)
    scheduler = CooperativeScheduler()
    context = DriveContext(drive=robot, heading=robot, abort=scheduler.abort_all)
    task = DriveRouteToTargetTask(context, vision)
    scheduler.add(task)

    scheduler.run(max_ticks=1000, on_tick=lambda tick: robot.step(DT))

    assert task.status is Status.SUCCEEDED
    assert (robot.left, robot.right) == (0.0, 0.0)
    assert robot.x < 0.0
    assert robot.y > 45.0
    assert abs(robot.yaw()) < 5.0
    assert vision.mode is CameraMode.DRIVER


def test_run_simulation_succeeds():
    assert run_simulation(tx=0.0, ty=5.0) is Status.SUCCEEDED


def test_run_simulation_collision_aborts():
    assert run_simulation(tx=0.0, ty=5.0, bump_at=4) is Status.CANCELLED


def test_run_simulation_without_target_fails():
    settings = DriveSettings(route_timeout=0.2)
    assert run_simulation(tx=0.0, ty=5.0, settings=settings, lock_after=None) is Status.FAILED


def test_run_simulation_tick_budget():
    assert run_simulation(tx=0.0, ty=5.0, max_ticks=10) is Status.CANCELLED
