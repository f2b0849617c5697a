import math

import pytest

from target_nav import config
from target_nav.config import DriveSettings
from target_nav.drive_tasks import DriveTask, TurnTask
from target_nav.interfaces import CameraMode
from target_nav.orientation import ROCKET_ANGLE, ROCKET_TARGETS
from target_nav.route import DriveRouteToTargetTask, RouteLeg, RouteTask, route_legs
from target_nav.sim import SimulatedVision
from target_nav.target import RouteToTarget
from target_nav.tasks import SequentialTask, Status
from target_nav.vector import Vec2d


@pytest.fixture
def route():
    return RouteToTarget(
        target_direct_vec=Vec2d(0.0, 50.0),
        intercept_vec=Vec2d(-7.0, 38.0),
        normal_vec=Vec2d(0.0, 12.0),
    )


def test_leg_from_vector():
    leg = RouteLeg.from_vector(Vec2d(0.0, 12.0), 12.0)
    assert leg.heading_degrees == pytest.approx(90.0)
    assert leg.distance == pytest.approx(12.0)
    assert leg.velocity == 12.0


def test_route_legs_order(route):
    intercept, normal = route_legs(route, 24.0, 12.0)
    assert intercept.heading_degrees == pytest.approx(math.degrees(math.atan2(38.0, -7.0)))
    assert intercept.distance == pytest.approx(math.hypot(7.0, 38.0))
    assert intercept.velocity == 24.0
    assert normal == RouteLeg(90.0, 12.0, 12.0)


def test_route_task_structure(context, route):
    task = RouteTask(context, route, 24.0, 12.0, timeout=10.0)
    assert task.timeout == 10.0
    assert len(task.children) == 2
    for leg, child in zip(task.legs, task.children):
        assert isinstance(child, SequentialTask)
        turn, drive_task = child.children
        assert isinstance(turn, TurnTask)
        assert isinstance(drive_task, DriveTask)
        assert turn.field_angle == pytest.approx(leg.heading_degrees)
        assert drive_task.distance == pytest.approx(leg.distance)
        assert drive_task.velocity == leg.velocity


def test_route_task_cancel_stops_active_turn(context, drive, route):
    task = RouteTask(context, route, 24.0, 12.0)
    task.tick()
    turn = task.children[0].children[0]
    assert turn.status is Status.RUNNING
    task.cancel()
    assert turn.status is Status.CANCELLED
    assert drive.stops == 1
    assert not turn.controller.enabled


class TestDriveRouteToTarget:
    def test_no_target_times_out(self, context, drive):
        vision = SimulatedVision(0.0, 5.0, lock_after=None)
        task = DriveRouteToTargetTask(context, vision, DriveSettings(route_timeout=0.1))
        for _ in range(10):
            task.tick()
        assert task.status is Status.FAILED
        assert vision.modes == [CameraMode.VISION, CameraMode.DRIVER]
        assert drive.commands == []

    def test_waits_for_camera_lock(self, context):
        vision = SimulatedVision(0.0, 5.0, lock_after=3)
        task = DriveRouteToTargetTask(context, vision)
        for _ in range(3):
            task.tick()
            assert task.route_task is None
        task.tick()
        assert task.route_task is not None

    def test_computes_route_and_hands_off(self, context):
        vision = SimulatedVision(0.0, 5.0)
        task = DriveRouteToTargetTask(context, vision)
        assert task.tick() is Status.RUNNING

        distance = (config.TARGET_HEIGHT - config.CAMERA_HEIGHT) / math.tan(math.radians(25.0))
        assert task.route.intercept_vec.x == pytest.approx(-7.0)
        assert task.route.intercept_vec.y == pytest.approx(distance - 12.0)
        assert task.route.normal_vec.x == pytest.approx(0.0, abs=1e-12)
        assert task.route.normal_vec.y == pytest.approx(12.0)

        assert vision.modes == [CameraMode.VISION, CameraMode.DRIVER]
        assert task.route_task.status is Status.RUNNING
        assert task.route_task.timeout == DriveSettings().max_time
        assert [leg.velocity for leg in task.route_task.legs] == [24.0, 12.0]

    def test_rocket_targets(self, context):
        vision = SimulatedVision(0.0, 5.0)
        task = DriveRouteToTargetTask(context, vision, orientation=ROCKET_TARGETS)
        task.tick()
        assert math.degrees(task.target_norm.theta) == pytest.approx(-ROCKET_ANGLE)

    def test_routing_error_fails_without_driving(self, context, drive):
        # Elevation of 90 degrees puts the distance on the tangent singularity
        vision = SimulatedVision(0.0, 90.0 - config.CAMERA_AIM_ANGLE)
        task = DriveRouteToTargetTask(context, vision)
        assert task.tick() is Status.FAILED
        assert task.route_task is None
        assert drive.commands == []

    def test_cancel_while_searching_restores_driver_mode(self, context):
        vision = SimulatedVision(0.0, 5.0, lock_after=None)
        task = DriveRouteToTargetTask(context, vision)
        task.tick()
        assert vision.mode is CameraMode.VISION
        task.cancel()
        assert vision.mode is CameraMode.DRIVER
        assert task.status is Status.CANCELLED

    def test_cancel_while_driving_cancels_route(self, context, drive):
        vision = SimulatedVision(0.0, 5.0)
        task = DriveRouteToTargetTask(context, vision)
        task.tick()
        task.tick()
        task.cancel()
        assert task.route_task.status is Status.CANCELLED
        assert drive.stops == 1
