# File: demos/run_atwood_machine.py
"""
DEMO: ATWOOD MACHINE AND A MOVABLE BLOCK
========================================

PURPOSE:
--------
Solve the two textbook pulley arrangements and print what the solver found:

1. ATWOOD MACHINE: one fixed pulley, two equal masses. A fixed pulley only
   changes the direction of the rope, so both legs carry the same tension
   and the mechanical advantage is 1.

2. MOVABLE BLOCK: the rope runs from one anchor, down round a movable
   pulley and back up to a second anchor. The load hangs from the block's
   becket. Two rope legs share the load, so each carries about half.

THEORETICAL BACKGROUND:
----------------------
    Atwood:       T = m·g·cos θ          (θ: leg angle from vertical)
    Movable:      T_leg = m·g / (2·cos θ)

Run from the repository root:

    python demos/run_atwood_machine.py
"""

import logging
import math

from mini_pulley import (
    Anchor,
    Mass,
    Point,
    Pulley,
    PulleyBecket,
    Rope,
    SystemState,
    solve,
)
from mini_pulley.logging_config import setup_logging
from mini_pulley.results import mechanical_advantage_report, rope_table


def atwood_machine() -> SystemState:
    return SystemState([
        Pulley("P", Point(0.0, 0.0), radius=30.0),
        Mass("M1", Point(-30.0, 200.0), mass=10.0),
        Mass("M2", Point(30.0, 200.0), mass=10.0),
        Rope("R1", "M1", "P"),
        Rope("R2", "P", "M2"),
    ])


def movable_block() -> SystemState:
    return SystemState([
        Anchor("A1", Point(-30.0, 0.0)),
        Anchor("A2", Point(30.0, 0.0)),
        PulleyBecket("MP", Point(0.0, 100.0), radius=30.0, fixed=False),
        Mass("M", Point(0.0, 200.0), mass=10.0),
        Rope("R1", "A1", "MP"),
        Rope("R2", "MP", "A2"),
        Rope("R3", "MP_becket", "M"),
    ])


def report(title: str, system: SystemState) -> None:
    result = solve(system)

    print(title)
    print("=" * 60)
    if not result.solved:
        print(f"FAILED: {result.error}")
        print()
        return

    print(rope_table(result).to_string(index=False, float_format=lambda v: f"{v:.2f}"))
    print()
    print("Support reactions (N):")
    for node_id, r in result.reaction_forces.items():
        print(f"  {node_id:<10} Rx = {r.x:8.2f}   Ry = {r.y:8.2f}")

    ma = mechanical_advantage_report(system, result)
    if ma is not None:
        print()
        print(f"Load:   {ma.load_force:.2f} N ({ma.load_mass_id})")
        print(f"Effort: {ma.effort_force:.2f} N")
        print(f"MA:     {ma.mechanical_advantage} - {ma.explanation}")
    if result.warnings:
        print()
        for warning in result.warnings:
            print(f"WARNING: {warning}")
    print()


def main():
    setup_logging(logging.INFO)

    report("Atwood machine (10 kg / 10 kg)", atwood_machine())
    cos_theta = 200.0 / math.hypot(30.0, 200.0)
    print(f"Expected: T = m·g·cos θ = {10.0 * 9.81 * cos_theta:.2f} N on both legs")
    print()

    report("Movable block (10 kg on the becket)", movable_block())
    cos_theta = 100.0 / math.hypot(30.0, 100.0)
    print(f"Expected: T_leg = m·g / (2·cos θ) = {10.0 * 9.81 / (2 * cos_theta):.2f} N")


if __name__ == "__main__":
    main()
