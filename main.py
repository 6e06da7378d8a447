#!/usr/bin/env python3
"""
main.py — Goal Funding Engine: plan SIPs and link holdings to goals

Usage:
  python main.py --plan data/example_plan.json
  python main.py --plan data/plan.json --save
  python main.py --plan data/plan.json --step-up --csv outputs/
  python main.py --plan data/plan.json --charts outputs/ --verbose
"""

import argparse
import logging
import os

from data.store import PlanStore
from models.plan import get_goals
from planner.goals import validate_goal_inputs, yearly_projection
from planner.plan import build_plan
from utils.report import format_plan_report, format_allocation_report, allocation_frame
from config import DATA_DIR, PLAN_FILE


# ─────────────────────────────────────────────────────────────────────────────
# PIPELINE
# ─────────────────────────────────────────────────────────────────────────────

def run_pipeline(
    plan_path: str,
    save: bool        = False,
    step_up: bool     = False,
    csv_dir: str      = None,
    charts_dir: str   = None,
) -> dict:
    """Load → re-link holdings → project goals → report."""
    store    = PlanStore(plan_path)
    document = store.load()

    # ── Warnings ───────────────────────────────────────────────────────────
    warnings_list = [
        f"{goal.get('name', goal.get('id'))}: {w}"
        for goal in get_goals(document)
        for w in validate_goal_inputs(goal)
    ]
    if warnings_list:
        print("\n  WARNINGS:")
        for w in warnings_list:
            print(f"  * {w}")

    # ── Recompute ──────────────────────────────────────────────────────────
    plan = build_plan(document, step_up=step_up)

    plan_report  = format_plan_report(plan)
    alloc_report = format_allocation_report(plan["document"], plan["allocations"])
    print(plan_report)
    print(alloc_report)

    if save:
        if store.save(plan["document"]):
            print(f"\n  ✓ Linked holdings saved -> {store.path}")
        else:
            print(f"\n  ✗ Could not save plan to {store.path}")

    # ── Exports ────────────────────────────────────────────────────────────
    if csv_dir:
        os.makedirs(csv_dir, exist_ok=True)
        plan["table"].to_csv(os.path.join(csv_dir, "goal_plan.csv"), index=False)
        allocation_frame(plan["document"], plan["allocations"]).to_csv(
            os.path.join(csv_dir, "holdings.csv"), index=False)
        with open(os.path.join(csv_dir, "plan_report.txt"), "w", encoding="utf-8") as f:
            f.write(plan_report + "\n\n" + alloc_report)
        print(f"  Reports saved -> {csv_dir}")

    if charts_dir:
        from utils.visualization import plot_plan_dashboard, plot_goal_projection
        plot_plan_dashboard(plan, os.path.join(charts_dir, "plan_dashboard.png"))
        for i, (goal, projection) in enumerate(zip(get_goals(plan["document"]), plan["projections"])):
            yearly = yearly_projection(projection)
            plot_goal_projection(
                yearly, goal.get("name", f"Goal {i + 1}"), projection,
                os.path.join(charts_dir, f"goal_{i + 1}.png"),
            )

    return plan


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Goal Funding Engine — monthly SIPs and holding-to-goal links",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --plan data/example_plan.json
  python main.py --plan data/plan.json --save --csv outputs/
        """
    )
    parser.add_argument("--plan",    type=str, default=os.path.join(DATA_DIR, PLAN_FILE),
                        help="Plan document (JSON)")
    parser.add_argument("--save",    action="store_true", help="Write recomputed links back to the plan")
    parser.add_argument("--step-up", action="store_true", dest="step_up",
                        help="Solve SIPs with the annual investment step-up from settings")
    parser.add_argument("--csv",     type=str, default=None, help="Directory for CSV/text exports")
    parser.add_argument("--charts",  type=str, default=None, help="Directory for PNG charts")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_pipeline(
        plan_path  = args.plan,
        save       = args.save,
        step_up    = args.step_up,
        csv_dir    = args.csv,
        charts_dir = args.charts,
    )
