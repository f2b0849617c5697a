"""Target Navigation - Vision-Guided Route Driving for Differential-Drive Robots

Autonomous navigation core of a competition robot: from a camera bearing to a
vision target and the robot's heading, compute a two-leg route that ends at a
fixed standoff distance square to the target, then drive it with a motion
profile under heading hold and collision supervision.

## Architecture Overview

Everything runs inside a host scheduler that polls each active task once per
20 ms control tick. Nothing blocks; every task is `start()` / `tick()` /
`cancel()`.

### Layer 1: Target Geometry (target.py, orientation.py, vector.py)
Turns the camera bearing into field-relative vectors.
- Distance from the camera's vertical angle and the known target height
- Target normal looked up from the robot's yaw (standard or rocket targets)
- Output: RouteToTarget (direct, intercept and normal vectors)

### Layer 2: Route Sequencing (route.py, tasks.py, drive_tasks.py)
Turns a route into strictly sequential turn-and-drive legs.
- Intercept leg onto the target's normal line, then the final approach
- Optional route time limit cancels the active leg

### Layer 3: Motion Control (motion_profile.py, heading_controller.py)
Produces the drive powers for each tick.
- Trapezoidal (or triangular) power profile from the kinematic model
- Continuous PID heading hold with saturation redistribution
- Turn in place until heading and rotation rate are both in tolerance

### Layer 4: Supervision (collision.py)
Watches world-frame linear acceleration for a jerk spike and asks the
scheduler to abort all motion.

## Modules

### Core
- `config.py` - Centralized configuration parameters with documentation
- `vector.py` - Immutable 2-D vectors
- `model.py` - Kinematic model of the drive train (power/voltage/velocity)
- `nav.py` - Yaw and field angle conversions
- `target.py` - Route to target calculation
- `orientation.py` - Yaw to target normal maps
- `motion_profile.py` - Trapezoidal motion profile
- `heading_controller.py` - Continuous PID heading control
- `collision.py` - Jerk-based collision detection
- `tasks.py`, `drive_tasks.py`, `route.py` - Polled tasks and route sequencing
- `interfaces.py`, `errors.py` - Collaborator protocols and exception types

### Simulation & Data
- `sim.py` - Simulated robot, camera and cooperative scheduler
- `data_collector.py` - CSV telemetry logging
- `plot_results.py` - CLI for telemetry plots
- `runner.py` - CLI for a simulated drive to a target

## Quick Start

```bash
python -m target_nav --tx 0 --ty 5 --record
python -m target_nav.plot_results --save
```
"""

__version__ = "1.0.0"

from .config import DriveSettings
from .errors import DomainError, DriveRangeError, NavigationError, OrientationLookupError
from .model import DEFAULT_PROFILE, KinematicProfile
from .orientation import ROCKET_TARGETS, STANDARD_TARGETS, TargetOrientationMap
from .route import DriveRouteToTargetTask, RouteLeg, RouteTask, route_legs
from .target import RouteToTarget, TargetCalculator, camera_vector
from .tasks import SequentialTask, Status, Task
from .vector import Vec2d

__all__ = [
    "DEFAULT_PROFILE",
    "DomainError",
    "DriveRangeError",
    "DriveRouteToTargetTask",
    "DriveSettings",
    "KinematicProfile",
    "NavigationError",
    "OrientationLookupError",
    "ROCKET_TARGETS",
    "RouteLeg",
    "RouteTask",
    "RouteToTarget",
    "STANDARD_TARGETS",
    "SequentialTask",
    "Status",
    "Task",
    "TargetCalculator",
    "TargetOrientationMap",
    "Vec2d",
    "camera_vector",
    "route_legs",
]
