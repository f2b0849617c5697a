import math

import pytest

from target_nav.config import DriveSettings
from target_nav.errors import DriveRangeError
from target_nav.drive_tasks import (
    DriveStraightTask,
    DriveTask,
    TurnTask,
    vector_drive,
    vector_drive_from_settings,
)
from target_nav.model import DEFAULT_PROFILE
from target_nav.tasks import Status
from target_nav.vector import Vec2d


class TestDriveTask:
    def test_invalid_velocity_fails_without_commanding_power(self, context, drive):
        task = DriveTask(context, 24.0, 0.0)
        assert task.tick() is Status.FAILED
        assert drive.commands == []
        assert drive.stops == 1

    def test_drives_until_distance_reached(self, context, drive):
        task = DriveTask(context, 24.0, 24.0)
        assert task.tick() is Status.RUNNING
        assert drive.encoder_resets == 1
        expected = DEFAULT_PROFILE.start_power + DEFAULT_PROFILE.power_per_step
        assert drive.commands[0] == pytest.approx((expected, expected))

        drive.distance_value = 10.0
        assert task.tick() is Status.RUNNING
        drive.distance_value = 24.0
        assert task.tick() is Status.SUCCEEDED
        assert len(drive.commands) == 2
        assert drive.stops == 1
        assert not task.controller.enabled

    def test_heading_drift_is_corrected(self, context, drive, heading):
        task = DriveTask(context, 24.0, 24.0)
        task.tick()
        heading.yaw_value = -5.0
        task.tick()
        left, right = drive.commands[-1]
        # Drifted counterclockwise: left side speeds up
        assert left > right

    def test_collision_cancels_before_commanding(self, context, drive, heading, abort):
        task = DriveTask(context, 24.0, 24.0)
        task.tick()
        heading.accel_x = 1.0
        assert task.tick() is Status.CANCELLED
        assert abort.calls == 1
        assert len(drive.commands) == 1
        assert drive.stops == 1
        assert not task.controller.enabled

    def test_heading_fault_stops_drive_and_disables_pid(self, context, drive, heading):
        task = DriveTask(context, 24.0, 24.0)
        task.tick()

        def broken_yaw():
            raise RuntimeError("gyro disconnected")

        heading.yaw = broken_yaw
        with pytest.raises(RuntimeError):
            task.tick()
        assert task.status is Status.FAILED
        assert drive.stops == 1
        assert not task.controller.enabled
        assert task.run.phase.value == "done"

    def test_cancel_stops_drive_and_profile(self, context, drive):
        task = DriveTask(context, 24.0, 24.0)
        task.tick()
        task.cancel()
        assert drive.stops == 1
        assert task.run.phase.value == "done"
        task.tick()
        assert len(drive.commands) == 1


class TestTurnTask:
    def test_already_on_heading(self, context, drive):
        task = TurnTask(context, 90.0)
        assert task.tick() is Status.SUCCEEDED
        assert drive.commands == []
        assert drive.stops == 1

    def test_turns_clockwise_toward_target(self, context, drive, heading):
        task = TurnTask(context, 0.0)
        assert task.tick() is Status.RUNNING
        left, right = drive.commands[-1]
        assert left > 0.0 > right
        assert left == pytest.approx(-right)

        heading.yaw_value = 89.5
        heading.rate_value = 40.0
        assert task.tick() is Status.RUNNING

        heading.rate_value = 0.0
        assert task.tick() is Status.SUCCEEDED
        assert drive.stops == 1
        assert not task.controller.enabled

    def test_collision_during_turn(self, context, drive, heading, abort):
        task = TurnTask(context, 0.0)
        task.tick()
        heading.accel_y = 0.9
        assert task.tick() is Status.CANCELLED
        assert abort.calls == 1
        assert len(drive.commands) == 1


def test_drive_straight_task_holds_power_until_timeout(context, drive):
    task = DriveStraightTask(context, 0.3, timeout=0.1)
    for _ in range(10):
        task.tick()
    assert task.status is Status.SUCCEEDED
    assert 5 <= len(drive.commands) <= 6
    assert all(cmd == pytest.approx((0.3, 0.3)) for cmd in drive.commands)
    assert drive.stops == 1


def test_vector_drive_builds_turn_then_drive(context):
    vec = Vec2d.make_polar(30.0, math.radians(120.0))
    task = vector_drive(context, vec, 20.0, timeout=4.0)
    turn, drive_task = task.children
    assert isinstance(turn, TurnTask)
    assert isinstance(drive_task, DriveTask)
    assert turn.field_angle == pytest.approx(120.0)
    assert drive_task.distance == pytest.approx(30.0)
    assert drive_task.velocity == 20.0
    assert task.timeout == 4.0


def test_vector_drive_from_settings(context):
    settings = DriveSettings(drive_angle=45.0, drive_distance=36.0, drive_velocity=18.0, max_time=6.0)
    task = vector_drive_from_settings(context, settings)
    turn, drive_task = task.children
    assert turn.field_angle == pytest.approx(45.0)
    assert drive_task.distance == pytest.approx(36.0)
    assert drive_task.velocity == 18.0
    assert task.timeout == 6.0


@pytest.mark.parametrize("power", [1.5, -1.01, float("nan")])
def test_drive_straight_task_rejects_out_of_range_power(context, drive, power):
    with pytest.raises(DriveRangeError):
        DriveStraightTask(context, power, timeout=1.0)
    assert drive.commands == []


def test_turn_fault_during_start_stops_drive(context, drive, heading):
    def broken_yaw():
        raise RuntimeError("gyro disconnected")

    heading.yaw = broken_yaw
    task = TurnTask(context, 0.0)
    with pytest.raises(RuntimeError):
        task.tick()
    assert task.status is Status.FAILED
    assert drive.stops == 1
    assert drive.commands == []
