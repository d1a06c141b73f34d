"""Idle/walk state machine for the cafe's wandering characters."""
import logging
import math
import random

from cafe_sim.config import (
    ARRIVAL_THRESHOLD, BOB_AMPLITUDE, BOB_FREQUENCY, DESTINATION_INSET,
    FIRST_IDLE_RANGE_MS, IDLE_RANGE_MS, SQUASH_FACTOR, STRETCH_FACTOR, WALK_SPEED,
)
from cafe_sim.errors import PreconditionViolation
from cafe_sim.models import Agent, AgentState, Point, Rect, WalkPose

logger = logging.getLogger(__name__)

_default_rng = random.Random()


def create_agent(
    kind: str,
    x: float,
    y: float,
    area: Rect,
    walk_speed: float = WALK_SPEED,
    rng: random.Random | None = None,
) -> Agent:
    """Create an idle agent inside ``area``.

    The area must be wider and taller than twice ``DESTINATION_INSET`` so that
    destinations can be sampled away from the walls.
    """
    if area.width <= 2 * DESTINATION_INSET or area.height <= 2 * DESTINATION_INSET:
        raise PreconditionViolation(
            f"Area {area.width}x{area.height} is too small for an inset of {DESTINATION_INSET}"
        )
    if walk_speed <= 0:
        raise PreconditionViolation(f"Walk speed must be positive, got {walk_speed}")
    rng = rng or _default_rng
    # First wait comes from a shorter range than later ones
    idle_duration = rng.randint(*FIRST_IDLE_RANGE_MS)
    return Agent(kind=kind, x=x, y=y, area=area, walk_speed=walk_speed, idle_duration_ms=idle_duration)


def pick_destination(area: Rect, rng: random.Random | None = None) -> Point:
    rng = rng or _default_rng
    inner = area.shrink(DESTINATION_INSET)
    return Point(rng.uniform(inner.x, inner.right), rng.uniform(inner.y, inner.bottom))


def _start_walking(agent: Agent, rng: random.Random) -> None:
    agent.target = pick_destination(agent.area, rng)
    agent.state = AgentState.WALKING
    agent.walk_elapsed_ms = 0.0
    logger.debug("%s walking to (%.1f, %.1f)", agent.kind, agent.target.x, agent.target.y)


def _arrive(agent: Agent, rng: random.Random) -> None:
    agent.target = None
    agent.state = AgentState.IDLE
    agent.idle_elapsed_ms = 0.0
    agent.idle_duration_ms = rng.randint(*IDLE_RANGE_MS)


def tick(agent: Agent, delta_ms: float, rng: random.Random | None = None) -> None:
    """Advance one agent by one frame of ``delta_ms`` milliseconds."""
    rng = rng or _default_rng
    delta_ms = max(0.0, delta_ms)

    if agent.state is AgentState.IDLE:
        agent.walk_elapsed_ms = 0.0
        agent.idle_elapsed_ms += delta_ms
        if agent.idle_elapsed_ms >= agent.idle_duration_ms:
            _start_walking(agent, rng)
        return

    dx = agent.target.x - agent.x
    dy = agent.target.y - agent.y
    distance = math.hypot(dx, dy)
    if distance < ARRIVAL_THRESHOLD:
        _arrive(agent, rng)
        return

    step = min(agent.walk_speed * delta_ms / 1000, distance)
    agent.x += dx / distance * step
    agent.y += dy / distance * step
    agent.facing_left = dx < 0
    agent.walk_elapsed_ms += delta_ms


def tick_all(agents: list[Agent], delta_ms: float, rng: random.Random | None = None) -> None:
    for agent in agents:
        tick(agent, delta_ms, rng)


def walk_pose(walk_elapsed_ms: float) -> WalkPose:
    """Bob offset and shadow squash/stretch for a given walk phase."""
    offset = BOB_AMPLITUDE * math.sin(walk_elapsed_ms * BOB_FREQUENCY)
    return WalkPose(
        offset=offset,
        squash=1 - offset * SQUASH_FACTOR,
        stretch=1 + offset * STRETCH_FACTOR,
    )


def pose_for(agent: Agent) -> WalkPose:
    if not agent.is_walking:
        return WalkPose()
    return walk_pose(agent.walk_elapsed_ms)


def render_order(agents: list[Agent]) -> list[Agent]:
    """Agents back to front."""
    return sorted(agents, key=lambda a: a.depth)
