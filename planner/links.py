# planner/links.py — Manual edits to holdings and goal links
#
# Entry points the presentation layer calls when the user adds, edits or
# removes goals, holdings and links by hand. All of them mutate and return the
# document; unknown ids are ignored. Validate amounts first with
# allocator.validate_link_amount.

from datetime import date

from data.store import generate_id
from models.plan import ONE_TIME, find_goal, find_asset, get_goals, linked_assets, num


# ─────────────────────────────────────────────────────────────────────────────
# GOALS
# ─────────────────────────────────────────────────────────────────────────────

def add_goal(document, goal: dict):
    """
    Append a goal. Missing id, start date, type and links are filled in:
    a fresh id, today, one-time and no linked holdings.
    """
    if not isinstance(document, dict) or not isinstance(goal, dict):
        return document
    goal["id"]         = goal.get("id") or generate_id()
    goal["start_date"] = goal.get("start_date") or date.today().isoformat()
    goal["goal_type"]  = goal.get("goal_type") or ONE_TIME
    if not isinstance(goal.get("linked_assets"), list):
        goal["linked_assets"] = []
    if not isinstance(document.get("goals"), list):
        document["goals"] = []
    document["goals"].append(goal)
    return document


def update_goal(document, goal_id, updates: dict):
    goal = find_goal(document, goal_id)
    if goal is None or not isinstance(updates, dict):
        return document
    goal.update({k: v for k, v in updates.items() if k != "id"})
    return document


def delete_goal(document, goal_id):
    """Remove a goal; the holdings it was linked to become free again."""
    if isinstance(document, dict) and isinstance(document.get("goals"), list):
        document["goals"] = [
            g for g in document["goals"] if not (isinstance(g, dict) and g.get("id") == goal_id)
        ]
    return document


# ─────────────────────────────────────────────────────────────────────────────
# LINKS
# ─────────────────────────────────────────────────────────────────────────────

def link_asset_to_goal(document, goal_id, asset_id, amount):
    """Link `amount` of a holding to a goal, replacing any existing link."""
    goal = find_goal(document, goal_id)
    if goal is None:
        return document

    links = linked_assets(goal)
    existing = next((la for la in links if la.get("asset_id") == asset_id), None)
    if existing is not None:
        existing["amount"] = num(amount)
    else:
        links.append({"asset_id": asset_id, "amount": num(amount)})
    goal["linked_assets"] = links
    return document


def unlink_asset_from_goal(document, goal_id, asset_id):
    goal = find_goal(document, goal_id)
    if goal is None:
        return document
    goal["linked_assets"] = [la for la in linked_assets(goal) if la.get("asset_id") != asset_id]
    return document


def update_linked_amount(document, goal_id, asset_id, amount):
    goal = find_goal(document, goal_id)
    if goal is None:
        return document
    for la in linked_assets(goal):
        if la.get("asset_id") == asset_id:
            la["amount"] = num(amount)
    return document


# ─────────────────────────────────────────────────────────────────────────────
# HOLDINGS
# ─────────────────────────────────────────────────────────────────────────────

def add_asset(document, asset: dict):
    """Append a holding, giving it a fresh id when it has none."""
    if not isinstance(document, dict) or not isinstance(asset, dict):
        return document
    asset["id"] = asset.get("id") or generate_id()
    assets = document.get("assets")
    if not isinstance(assets, dict):
        assets = document["assets"] = {}
    if not isinstance(assets.get("items"), list):
        assets["items"] = []
    assets["items"].append(asset)
    return document


def update_asset(document, asset_id, updates: dict):
    """
    Apply field updates to a holding. When its value drops below what is
    linked to it, every link on it is scaled down proportionally.
    """
    asset = find_asset(document, asset_id)
    if asset is None or not isinstance(updates, dict):
        return document

    old_value = num(asset.get("value"))
    asset.update(updates)

    if "value" not in updates:
        return document
    new_value = num(updates.get("value"))
    if new_value >= old_value:
        return document

    links = [
        la for goal in get_goals(document) for la in linked_assets(goal)
        if la.get("asset_id") == asset_id
    ]
    allocated = sum(num(la.get("amount")) for la in links)
    if allocated > new_value:
        ratio = max(0.0, new_value) / allocated
        for la in links:
            la["amount"] = num(la.get("amount")) * ratio
    return document


def delete_asset(document, asset_id):
    """Remove a holding and every goal link that points at it."""
    if not isinstance(document, dict):
        return document
    assets = document.get("assets")
    if isinstance(assets, dict) and isinstance(assets.get("items"), list):
        assets["items"] = [a for a in assets["items"] if not (isinstance(a, dict) and a.get("id") == asset_id)]
    for goal in get_goals(document):
        if "linked_assets" in goal:
            goal["linked_assets"] = [la for la in linked_assets(goal) if la.get("asset_id") != asset_id]
    return document
