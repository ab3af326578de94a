#!/usr/bin/env python3
"""Example: Guard AI using behavior trees.

This example demonstrates a guard that:
- Patrols between waypoints, taking time to walk each leg
- Drops the patrol to investigate when it hears a noise
- Retreats to the barracks to recover when badly hurt, even mid-investigation

The behavior tree structure:
    Repeater (guard_duty, forever)
    └── Selector (guard)
        ├── Conditional flee (health < 30 or still resting, interrupts lower priority)
        │   └── Sequence (retreat)
        │       ├── Action run_to_barracks
        │       └── Action rest (+40 health per tick until full)
        ├── Conditional investigate (noise heard, interrupts lower priority)
        │   └── Sequence (check_noise)
        │       ├── Wait look_around
        │       └── Action all_clear
        └── Sequence (patrol)
            ├── Wait walk_to_gate
            ├── Action arrive_gate
            └── ... one Wait/Action pair per waypoint

Usage:
    python examples/guard_ai.py [options]

Options:
    --ticks INT           Number of ticks to run (default: 30)
    --delta FLOAT         Seconds per tick (default: 0.5)
    --noise-chance FLOAT  Chance of a noise each tick (default: 0.1)
    --hit-chance FLOAT    Chance of being hit each tick (default: 0.05)
    --seed INT            Random seed for reproducibility
    --trace               Print the execution trace of every tick
"""

import argparse
import random
import sys
from pathlib import Path

# Add the src directory to the path so we can import arbor
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arbor import (
    AbortMode,
    Action,
    BehaviorTree,
    Blackboard,
    Conditional,
    NodeState,
    Repeater,
    Selector,
    Sequence,
    TraceCollector,
    Wait,
    print_trace,
    print_tree,
)

WAYPOINTS = ["gate", "tower", "yard"]
MAX_HEALTH = 100
HURT_THRESHOLD = 30

# Conditions


def needs_rest(ctx) -> bool:
    if ctx.blackboard.get_bool("retreating"):
        return True
    return ctx.blackboard.get_int("health", MAX_HEALTH) < HURT_THRESHOLD


def heard_noise(ctx) -> bool:
    return ctx.blackboard.get_bool("noise")


# Actions


def arrive_at(waypoint: str) -> Action:
    """Build an action that records arrival at a waypoint."""

    def arrive(ctx) -> NodeState:
        ctx.blackboard.set_value("waypoint", waypoint)
        ctx.blackboard.increment("waypoints_visited")
        print(f"  [{ctx.owner}] Arrived at the {waypoint}")
        return NodeState.SUCCESS

    return Action(f"arrive_{waypoint}", arrive)


def all_clear(ctx) -> NodeState:
    ctx.blackboard.set_value("noise", False)
    ctx.blackboard.increment("investigations")
    print(f"  [{ctx.owner}] Nothing there, all clear")
    return NodeState.SUCCESS


def run_to_barracks(ctx) -> NodeState:
    ctx.blackboard.set_value("waypoint", "barracks")
    ctx.blackboard.set_value("retreating", True)
    ctx.blackboard.increment("retreats")
    print(f"  [{ctx.owner}] Retreating to the barracks")
    return NodeState.SUCCESS


def rest(ctx) -> NodeState:
    health = min(MAX_HEALTH, ctx.blackboard.get_int("health", MAX_HEALTH) + 40)
    ctx.blackboard.set_value("health", health)
    print(f"  [{ctx.owner}] Resting, health -> {health}")
    if health < MAX_HEALTH:
        return NodeState.RUNNING
    ctx.blackboard.set_value("retreating", False)
    return NodeState.SUCCESS


def build_guard_tree(
    waypoints: list[str] = WAYPOINTS,
    walk_time: float = 1.0,
    look_time: float = 0.5,
    blackboard: Blackboard | None = None,
    emitter=None,
) -> BehaviorTree:
    """Build the guard AI behavior tree.

    Args:
        waypoints: Patrol route, walked in order.
        walk_time: Seconds needed to walk to each waypoint.
        look_time: Seconds spent looking around after a noise.
        blackboard: Optional blackboard to share with the game.
        emitter: Optional event emitter, e.g. a TraceCollector.
    """
    patrol = Sequence("patrol")
    for waypoint in waypoints:
        patrol.add_children(Wait(f"walk_to_{waypoint}", walk_time), arrive_at(waypoint))

    flee = Conditional(
        "flee",
        needs_rest,
        child=Sequence(
            "retreat",
            [Action("run_to_barracks", run_to_barracks), Action("rest", rest)],
        ),
        abort_mode=AbortMode.LOWER_PRIORITY,
    )
    investigate = Conditional(
        "investigate",
        heard_noise,
        child=Sequence(
            "check_noise",
            [Wait("look_around", look_time), Action("all_clear", all_clear)],
        ),
        abort_mode=AbortMode.LOWER_PRIORITY,
    )

    root = Repeater("guard_duty", Selector("guard", [flee, investigate, patrol]))
    return BehaviorTree(owner="guard", root=root, blackboard=blackboard, emitter=emitter)


def print_state(blackboard: Blackboard, label: str = "State") -> None:
    """Print the guard's blackboard."""
    print(f"{label}:")
    print(f"  health: {blackboard.get_int('health', MAX_HEALTH)}")
    print(f"  waypoint: {blackboard.get_str('waypoint', 'N/A')}")
    print(f"  waypoints visited: {blackboard.get_int('waypoints_visited')}")
    print(f"  investigations: {blackboard.get_int('investigations')}")
    print(f"  retreats: {blackboard.get_int('retreats')}")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Guard AI behavior tree example",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with random events
  python examples/guard_ai.py

  # A noisy night
  python examples/guard_ai.py --noise-chance 0.4

  # Reproducible run with execution traces
  python examples/guard_ai.py --seed 42 --trace
        """,
    )
    parser.add_argument("--ticks", type=int, default=30, help="Number of ticks to run")
    parser.add_argument("--delta", type=float, default=0.5, help="Seconds per tick")
    parser.add_argument(
        "--noise-chance",
        type=float,
        default=0.1,
        help="Chance of hearing a noise each tick (0-1, default: 0.1)",
    )
    parser.add_argument(
        "--hit-chance",
        type=float,
        default=0.05,
        help="Chance of taking 40 damage each tick (0-1, default: 0.05)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print the execution trace of every tick",
    )
    return parser.parse_args()


def main():
    """Run the guard AI example."""
    args = parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    collector = TraceCollector(max_traces=1) if args.trace else None
    blackboard = Blackboard({"health": MAX_HEALTH})
    tree = build_guard_tree(blackboard=blackboard, emitter=collector)

    print("=" * 60)
    print("Guard AI Behavior Tree Example")
    print("=" * 60)
    print()
    print_tree(tree.root)
    print()

    tree.start()
    for tick in range(1, args.ticks + 1):
        print("=" * 60)
        print(f"Tick {tick}")
        print("=" * 60)

        if random.random() < args.noise_chance:
            print("  *** A noise in the dark! ***")
            blackboard.set_value("noise", True)
        if random.random() < args.hit_chance:
            health = max(0, blackboard.get_int("health", MAX_HEALTH) - 40)
            print(f"  *** The guard is hit! health -> {health} ***")
            blackboard.set_value("health", health)
            if health <= 0:
                print("*** The guard has fallen! ***")
                break

        result = tree.tick(args.delta)
        print(f"  Result: {result.value}")

        if collector is not None:
            print_trace(collector.get_trace())
        print()

    tree.stop()

    print("=" * 60)
    print("Final Summary")
    print("=" * 60)
    print_state(blackboard, "Final state")


if __name__ == "__main__":
    main()
