# utils/report.py — Plain-text plan reports for the command line

import pandas as pd

from config import SHORT, LONG, BUCKET_DISPLAY
from models.plan import get_assets


def _timeline(years: float) -> str:
    total_months = round(years * 12)
    y, m = divmod(total_months, 12)
    if y == 0:
        return f"{m} month{'s' if m != 1 else ''}"
    if m == 0:
        return f"{y} year{'s' if y != 1 else ''}"
    return f"{y}y {m}m"


def format_plan_report(plan: dict) -> str:
    """Generate the goal-by-goal and per-bucket investment plan report."""
    table   = plan["table"]
    buckets = plan["buckets"]

    lines = []
    lines.append("╔" + "═" * 62 + "╗")
    lines.append("║  GOAL FUNDING PLAN" + " " * 43 + "║")
    lines.append("╠" + "═" * 62 + "╣")
    lines.append(f"║  Goals           : {len(table):<42}║")
    lines.append(f"║  Total SIP/month : ₹{plan['total_sip']:>14,.0f}" + " " * 27 + "║")
    lines.append("╚" + "═" * 62 + "╝")

    for bucket in (SHORT, LONG):
        summary = buckets[bucket]
        rows = table[(table["bucket"] == bucket) & (table["years"] > 0)]
        lines.append(f"\n  📊 {BUCKET_DISPLAY[bucket].upper()}  "
                     f"({summary['goals']} goals, {summary['blended_return']:.1f}% expected)")
        lines.append(f"  {'Goal':<22} {'Timeline':>9} {'Target':>14} {'Linked':>12} {'SIP':>10}")
        lines.append(f"  {'─'*71}")
        for _, row in rows.iterrows():
            lines.append(
                f"  {str(row['name'])[:22]:<22} {_timeline(row['years']):>9} "
                f"₹{row['inflation_adjusted_target']:>13,.0f} "
                f"₹{row['linked_amount']:>11,.0f} "
                f"₹{row['monthly_sip']:>9,.0f}"
            )
        lines.append(f"  {'─'*71}")
        lines.append(f"  {'Bucket SIP':<22} {' ':>9} {' ':>14} {' ':>12} ₹{summary['total_sip']:>9,.0f}")

        lines.append("  Suggested split:")
        for fund, amount in summary["allocation"].items():
            label = fund.replace("_", " ").title()
            lines.append(f"    • {label:<20} ₹{amount:>10,.0f}/month  {summary['funds'][fund]}")

    past = table[table["years"] <= 0]
    if not past.empty:
        lines.append("\n  ⚠  Past target date (excluded): " + ", ".join(str(n) for n in past["name"]))

    lines.append(f"\n  ⚠  This is not financial advice. Consult a SEBI-registered advisor.")
    lines.append("─" * 64)
    return "\n".join(lines)


def format_allocation_report(document, allocations: dict) -> str:
    """Holding utilisation: value, linked amount, free amount."""
    lines = []
    lines.append("=" * 62)
    lines.append("  HOLDINGS LINKED TO GOALS")
    lines.append("=" * 62)
    lines.append(f"  {'Holding':<24} {'Value':>11} {'Linked':>11} {'Free':>11}")
    lines.append("─" * 62)

    for asset in get_assets(document):
        alloc = allocations.get(asset.get("id"))
        if alloc is None:
            continue
        flag = "  ⚠ over" if alloc["allocated"] > alloc["total"] + 0.01 else ""
        lines.append(
            f"  {str(asset.get('name', ''))[:24]:<24} "
            f"₹{alloc['total']:>10,.0f} "
            f"₹{alloc['allocated']:>10,.0f} "
            f"₹{alloc['available']:>10,.0f}{flag}"
        )
    lines.append("=" * 62)
    return "\n".join(lines)


def allocation_frame(document, allocations: dict) -> pd.DataFrame:
    """Holding utilisation as a DataFrame (for CSV export)."""
    rows = [
        {
            "asset_id": a.get("id"),
            "name":     a.get("name", ""),
            "category": a.get("category", ""),
            **allocations.get(a.get("id"), {"total": 0.0, "allocated": 0.0, "available": 0.0}),
        }
        for a in get_assets(document)
    ]
    return pd.DataFrame(rows, columns=["asset_id", "name", "category", "total", "allocated", "available"])
