# physics/__init__.py

from .physics_engine import PhysicsEngine
from .walls import WallSegment, WallSystem
from .collision_models import (
    BaseCollisionModel,
    PassThroughCollisionModel,
    ResolvedMove,
    SlidingWallCollisionModel,
    truncate_velocity,
)
