#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  SKI JUMP TRAJECTORY SIMULATOR: Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the complete simulation pipeline:
    1. Hill profile check
    2. Reference jump (in-run, takeoff, flight)
    3. Flight height at hill stations
    4. Per-step table export
    5. Integration variants (direction function, position-update order)
    6. Figures (jump, dashboard, variant comparison)
    7. Start-gate and body-mass studies

  All outputs saved to outputs/ directory.

  Usage:
    python main.py                       # Run everything
    python main.py --quick               # Skip figures and studies
    python main.py --start 10 --height 1.75
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import os
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from skijump.errors import SkiJumpError
from skijump.parameters import SkierParameters
from skijump.hill import HillProfile, TAKEOFF_LIP_X
from skijump.integrator import (
    simulate_jump, IntegrationPolicy, PositionUpdate, REFERENCE_POLICY,
    quadrant_naive_direction, four_quadrant_direction,
)
from skijump.export import write_trajectory_table
from skijump.study import run_standard_studies


STATIONS = [100.0, 125.0, 150.0, 175.0]


def banner():
    print("""
╔═══════════════════════════════════════════════════════════════════════╗
║                                                                       ║
║     SKI JUMP TRAJECTORY SIMULATOR                                     ║
║     ─────────────────────────────────────────────────────             ║
║     Whistler HS140 · In-run · Takeoff push · Lift/Drag flight         ║
║     Method: explicit Euler, dt = 1 ms                                 ║
║                                                                       ║
╚═══════════════════════════════════════════════════════════════════════╝
""")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def parse_args(argv=None):
    defaults = SkierParameters()
    parser = argparse.ArgumentParser(description="Ski jump trajectory simulator")
    parser.add_argument('--height', type=float, default=defaults.height,
                        help="skier height (m)")
    parser.add_argument('--body-mass', type=float, default=defaults.body_mass,
                        help="body mass without skis (kg)")
    parser.add_argument('--start', type=float, default=defaults.start_position,
                        help="start position along the in-run (m)")
    parser.add_argument('--friction', type=float, default=defaults.friction_coeff)
    parser.add_argument('--air-density', type=float, default=defaults.air_density)
    parser.add_argument('--dt', type=float, default=defaults.dt,
                        help="integration step (s)")
    parser.add_argument('--four-quadrant', action='store_true',
                        help="use atan2 for the flight direction")
    parser.add_argument('--first-order', action='store_true',
                        help="drop the ½·a·dt² position term in both phases")
    parser.add_argument('--outputs', default='outputs')
    parser.add_argument('--export', default=None,
                        help="path of the per-step table (default: <outputs>/SkiJumpResultsData.tsv)")
    parser.add_argument('--quick', action='store_true',
                        help="skip figures and parameter studies")
    return parser.parse_args(argv)


def run(args):
    start_time = time.time()
    banner()
    out = args.outputs
    os.makedirs(out, exist_ok=True)

    params = SkierParameters(
        body_mass=args.body_mass,
        height=args.height,
        friction_coeff=args.friction,
        air_density=args.air_density,
        dt=args.dt,
        start_position=args.start,
    )
    policy = REFERENCE_POLICY
    if args.first_order:
        policy = IntegrationPolicy(PositionUpdate.FIRST_ORDER, PositionUpdate.FIRST_ORDER)
    direction = four_quadrant_direction if args.four_quadrant else quadrant_naive_direction
    hill = HillProfile()

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Hill Profile
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Whistler HS140 Profile")
    print(f"  {'Segment end (m)':>16} {'Altitude (m)':>13}")
    for bound in hill.boundaries + (hill.end_x,):
        print(f"  {bound:>16.3f} {hill.hill_altitude(bound):>13.3f}")
    print(f"  Takeoff lip at x = {TAKEOFF_LIP_X} m")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Reference Jump
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Jump Simulation")
    print(f"  Mass {params.mass:.2f} kg | Height {params.height:.2f} m | "
          f"Start {params.start_position:.2f} m | dt {params.dt} s")
    print(f"  Policy: {policy.label} | Direction: {direction.__name__}")

    result = simulate_jump(params, hill=hill, policy=policy, direction=direction)
    print(result.summary())
    print(f"  In-run: {result.takeoff_index} steps, {result.track_time:.3f} s | "
          f"Flight: {int(result.airborne.sum())} recorded steps")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Flight Stations
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Flight Height at Hill Stations")
    print(f"  {'x (m)':>8} {'t (s)':>8} {'v (m/s)':>9} {'h (m)':>8}")
    for station in STATIONS:
        if station > result.x[-1]:
            continue
        t_s = result.interpolate_at_x('time', station)
        v_s = result.interpolate_at_x('velocity', station)
        h_s = result.interpolate_at_x('y', station) - hill.hill_altitude(station)
        print(f"  {station:>8.1f} {t_s:>8.3f} {v_s:>9.2f} {h_s:>8.2f}")
    print(f"  Max height over hill: {result.max_height_above_hill:.2f} m")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Export
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Per-Step Table")
    table_path = write_trajectory_table(
        result, args.export or os.path.join(out, 'SkiJumpResultsData.tsv'))
    print(f"  ✓ Saved: {table_path} ({len(result.time)} rows)")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Integration Variants
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Integration Variants")
    variants = {
        'reference': result,
        'atan2 direction': simulate_jump(params, hill=hill, policy=policy,
                                         direction=four_quadrant_direction),
        'first-order position': simulate_jump(
            params, hill=hill, direction=direction,
            policy=IntegrationPolicy(PositionUpdate.FIRST_ORDER, PositionUpdate.FIRST_ORDER)),
    }
    base = result.result.final_distance
    for label, res in variants.items():
        d = res.result.final_distance
        print(f"  {label:<22s}  Takeoff: {res.result.takeoff_speed:>6.3f} m/s  "
              f"Distance: {d:>8.3f} m  (Δ {d - base:+.4f} m)")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6 & 7: Figures and Studies
    # ══════════════════════════════════════════════════════════════════════
    if not args.quick:
        from skijump.visualization import plot_jump, plot_dashboard, plot_comparison
        import matplotlib.pyplot as plt

        section("PHASE 6: Figures")
        for name, fig in [
            ('01_jump.png', plot_jump(result, hill, save_path=f'{out}/01_jump.png')),
            ('02_dashboard.png', plot_dashboard(result, save_path=f'{out}/02_dashboard.png')),
            ('03_variants.png', plot_comparison(variants, save_path=f'{out}/03_variants.png')),
        ]:
            plt.close(fig)
            print(f"  ✓ Saved: {out}/{name}")

        section("PHASE 7: Parameter Studies")
        run_standard_studies(verbose=True)
    else:
        section("PHASE 6 & 7: Figures and studies SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  All outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")


def main(argv=None):
    args = parse_args(argv)
    try:
        run(args)
    except SkiJumpError as exc:
        print(f"\n  ✗ Simulation aborted: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
