import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from target_nav.errors import check_power
from target_nav.interfaces import DriveContext


class FakeHeading:
    """Heading source whose readings are set directly by the test."""

    def __init__(self, yaw=0.0):
        self.yaw_value = yaw
        self.rate_value = 0.0
        self.accel_x = 0.0
        self.accel_y = 0.0

    def yaw(self):
        return self.yaw_value

    def angle(self):
        return self.yaw_value

    def rate(self):
        return self.rate_value

    def reset(self):
        self.yaw_value = 0.0

    def world_linear_accel_x(self):
        return self.accel_x

    def world_linear_accel_y(self):
        return self.accel_y


class RecordingDrive:
    """Drive actuator recording every command; distance is set by the test."""

    def __init__(self):
        self.commands = []
        self.stops = 0
        self.encoder_resets = 0
        self.distance_value = 0.0

    def set_differential(self, left, right):
        check_power(left, "left power")
        check_power(right, "right power")
        self.commands.append((left, right))

    def stop(self):
        self.stops += 1

    def distance(self):
        return self.distance_value

    def reset_encoders(self):
        self.encoder_resets += 1
        self.distance_value = 0.0


class AbortRecorder:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


@pytest.fixture
def heading():
    return FakeHeading()


@pytest.fixture
def drive():
    return RecordingDrive()


@pytest.fixture
def abort():
    return AbortRecorder()


@pytest.fixture
def context(drive, heading, abort):
    return DriveContext(drive=drive, heading=heading, abort=abort)
