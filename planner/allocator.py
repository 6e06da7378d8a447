# planner/allocator.py — Assign existing holdings to goals (AssetAllocator)

import logging
from dataclasses import dataclass, field

from config import SHORT, LONG, SHORT_ONLY, LONG_ONLY, BOTH, NOT_LINKABLE, \
    CATEGORY_ELIGIBILITY, ALLOCATION_EPSILON
from models.plan import get_goals, get_assets, find_asset, linked_assets, num
from planner.calculator import years_remaining, inflation_adjusted
from planner.goals import bucket_for_years

logger = logging.getLogger(__name__)


def eligibility(category) -> str:
    """Horizon eligibility of a holding category; unknown categories never link."""
    if not isinstance(category, str):
        return NOT_LINKABLE
    return CATEGORY_ELIGIBILITY.get(category, NOT_LINKABLE)


@dataclass
class _GoalSlot:
    goal:     dict
    order:    int
    years:    float
    capacity: float
    links:    dict = field(default_factory=dict)   # asset_id → amount, insertion-ordered

    @property
    def remaining(self) -> float:
        return self.capacity - sum(self.links.values())


@dataclass
class _HoldingSlot:
    asset_id:  object
    order:     int
    remaining: float


def auto_assign_assets(document, today=None):
    """
    Rebuild every goal's `linked_assets` from scratch.

    Algorithm:
    1. Capacity per goal = inflation-adjusted target; past-dated and
       zero-target goals, and holdings worth nothing, are left out
    2. Holdings split by eligibility, goals by horizon bucket
    3. Greedy passes, exclusive pools first:
         SHORT_ONLY → short goals
         LONG_ONLY  → long goals
         BOTH       → short goals, leftover → long goals
       Goals nearest-first; each goal takes the largest remaining holding
       first so it ends up with as few holdings as possible
       Holdings without an id, or repeating one, cannot be referenced by a
       link and are skipped
    4. Replace `linked_assets` wholesale; unfunded goals get []

    Mutates and returns `document`. Anything without goals and asset items
    is returned untouched.
    """
    if not isinstance(document, dict) or not isinstance(document.get("goals"), list):
        return document
    assets = document.get("assets")
    if not isinstance(assets, dict) or not isinstance(assets.get("items"), list):
        return document

    # ── Goals: capacity + bucket ───────────────────────────────────────────
    goal_slots = {SHORT: [], LONG: []}
    all_slots = []
    for order, goal in enumerate(get_goals(document)):
        years = years_remaining(goal.get("target_date"), today)
        slot = _GoalSlot(goal=goal, order=order, years=years, capacity=0.0)
        all_slots.append(slot)
        if years <= 0:
            continue
        slot.capacity = inflation_adjusted(
            num(goal.get("target_amount")), num(goal.get("inflation_rate")), years,
        )
        if slot.capacity <= 0:
            continue
        goal_slots[bucket_for_years(years)].append(slot)

    for bucket in goal_slots:
        goal_slots[bucket].sort(key=lambda s: (s.years, s.order))

    # ── Holdings: eligibility pools ────────────────────────────────────────
    pools = {SHORT_ONLY: [], LONG_ONLY: [], BOTH: []}
    seen_ids = set()
    for order, asset in enumerate(get_assets(document)):
        asset_id = asset.get("id")
        if not isinstance(asset_id, (str, int)) or asset_id in seen_ids:
            logger.debug("Skipping holding %r at position %d: missing or duplicate id", asset_id, order)
            continue
        seen_ids.add(asset_id)

        pool = eligibility(asset.get("category"))
        value = num(asset.get("value"))
        if pool == NOT_LINKABLE or value <= 0:
            continue
        pools[pool].append(_HoldingSlot(asset_id=asset_id, order=order, remaining=value))

    # ── Passes ─────────────────────────────────────────────────────────────
    _greedy_fill(pools[SHORT_ONLY], goal_slots[SHORT])
    _greedy_fill(pools[LONG_ONLY],  goal_slots[LONG])
    _greedy_fill(pools[BOTH],       goal_slots[SHORT])
    _greedy_fill(pools[BOTH],       goal_slots[LONG])

    # ── Write back ─────────────────────────────────────────────────────────
    for slot in all_slots:
        slot.goal["linked_assets"] = [
            {"asset_id": asset_id, "amount": amount}
            for asset_id, amount in slot.links.items()
            if amount > 0
        ]

    logger.debug(
        "Auto-assign: %d short / %d long goals, %d linked holdings",
        len(goal_slots[SHORT]), len(goal_slots[LONG]),
        sum(len(s.links) for s in all_slots),
    )
    return document


def _greedy_fill(pool: list, goals: list) -> None:
    """Fill each goal in order from the largest remaining holdings in `pool`."""
    if not pool or not goals:
        return
    for slot in goals:
        needed = slot.remaining
        if needed <= ALLOCATION_EPSILON:
            continue
        available = sorted(
            (h for h in pool if h.remaining > ALLOCATION_EPSILON),
            key=lambda h: (-h.remaining, h.order),
        )
        for holding in available:
            if needed <= ALLOCATION_EPSILON:
                break
            amount = min(holding.remaining, needed)
            slot.links[holding.asset_id] = slot.links.get(holding.asset_id, 0.0) + amount
            holding.remaining -= amount
            needed -= amount


# ─────────────────────────────────────────────────────────────────────────────
# ALLOCATION REPORTING
# ─────────────────────────────────────────────────────────────────────────────

def _allocated_to(document, asset_id, exclude_goal_id=None) -> float:
    total = 0.0
    for goal in get_goals(document):
        if exclude_goal_id is not None and goal.get("id") == exclude_goal_id:
            continue
        for la in linked_assets(goal):
            if la.get("asset_id") == asset_id:
                total += num(la.get("amount"))
    return total


def get_asset_allocations(document) -> dict:
    """Per holding: value, amount linked across goals, and what is still free."""
    allocations = {}
    for asset in get_assets(document):
        total = num(asset.get("value"))
        allocated = _allocated_to(document, asset.get("id"))
        allocations[asset.get("id")] = {
            "total":     total,
            "allocated": allocated,
            "available": max(0.0, total - allocated),
        }
    return allocations


def validate_link_amount(document, asset_id, amount, exclude_goal_id=None) -> dict:
    """
    Check a manual link before it is written. `exclude_goal_id` is the goal
    being edited, so its current link does not count against the holding.
    """
    asset = find_asset(document, asset_id)
    if asset is None:
        return {"valid": False, "available": 0.0, "error": "Asset not found"}

    available = max(0.0, num(asset.get("value")) - _allocated_to(document, asset_id, exclude_goal_id))
    amount = num(amount, default=-1.0)

    if amount < 0:
        return {"valid": False, "available": available, "error": "Amount must be zero or more"}
    if amount > available + ALLOCATION_EPSILON:
        return {
            "valid": False,
            "available": available,
            "error": f"Amount exceeds available value ({available:,.0f})",
        }
    return {"valid": True, "available": available}


def check_asset_over_allocation(document, asset_id) -> dict:
    """Flag a holding whose links add up to more than it is worth."""
    asset = find_asset(document, asset_id)
    total = num(asset.get("value")) if asset is not None else 0.0
    allocated = _allocated_to(document, asset_id)
    excess = max(0.0, allocated - total)
    return {
        "over_allocated": excess > ALLOCATION_EPSILON,
        "total":          total,
        "allocated":      allocated,
        "excess":         excess,
    }
