# data/store.py — JSON-file Data Store for the plan document
#
# load()  → document merged over defaults, migrated, never raises
# save()  → True / False, whole-file replace (last write wins)
# generate_id() → unique string id

import copy
import json
import logging
import os
import uuid

from config import DATA_DIR, PLAN_FILE, DEFAULT_SETTINGS, DEPRECATED_GOAL_FIELDS
from models.plan import default_document

logger = logging.getLogger(__name__)


def generate_id() -> str:
    return str(uuid.uuid4())


def merge_with_defaults(raw) -> dict:
    """Fill a partial document with default settings and empty collections."""
    if not isinstance(raw, dict):
        return default_document()

    def section(name, key):
        part = raw.get(name)
        items = part.get(key) if isinstance(part, dict) else None
        return items if isinstance(items, list) else []

    settings = raw.get("settings") if isinstance(raw.get("settings"), dict) else {}
    goals = raw.get("goals") if isinstance(raw.get("goals"), list) else []
    return {
        "settings":    {**copy.deepcopy(DEFAULT_SETTINGS), **settings},
        "cashflow":    {"income": section("cashflow", "income"),
                        "expenses": section("cashflow", "expenses")},
        "assets":      {"items": section("assets", "items")},
        "liabilities": {"items": section("liabilities", "items")},
        "goals":       goals,
    }


def migrate(document: dict) -> bool:
    """
    Bring an older document up to date in place. Returns True if anything changed.

    - goals without linked_assets get an empty list
    - deprecated per-goal allocation fields are dropped
    - links to holdings that no longer exist are removed
    """
    migrated = False
    asset_ids = {a.get("id") for a in document["assets"]["items"] if isinstance(a, dict)}

    for goal in document["goals"]:
        if not isinstance(goal, dict):
            continue
        for name in DEPRECATED_GOAL_FIELDS:
            if name in goal:
                del goal[name]
                migrated = True

        links = goal.get("linked_assets")
        if not isinstance(links, list):
            goal["linked_assets"] = []
            migrated = True
            continue

        kept = [la for la in links if isinstance(la, dict) and la.get("asset_id") in asset_ids]
        if len(kept) != len(links):
            goal["linked_assets"] = kept
            migrated = True

    return migrated


class PlanStore:
    """Plan document persisted as a single JSON file."""

    def __init__(self, path: str = None):
        self.path = path or os.path.join(DATA_DIR, PLAN_FILE)

    def load(self) -> dict:
        if not os.path.exists(self.path):
            logger.info("No plan at %s, starting from defaults", self.path)
            return default_document()

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error loading plan from %s: %s — using defaults", self.path, e)
            return default_document()

        document = merge_with_defaults(raw)
        if migrate(document):
            logger.warning("Plan at %s migrated to current schema", self.path)
            self.save(document)
        return document

    def save(self, document) -> bool:
        tmp_path = f"{self.path}.tmp"
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving plan to %s: %s", self.path, e)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            return False

    def clear(self) -> dict:
        """Delete the stored plan and hand back a fresh default document."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Error clearing plan at %s: %s", self.path, e)
        return default_document()

    generate_id = staticmethod(generate_id)
