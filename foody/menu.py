# foody/menu.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from .models import Food

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_FOODS_PATH = DATA_DIR / "foods.json"


def food_to_dict(food: Food) -> Dict[str, Any]:
    return {
        "id": food.id,
        "name": food.name,
        "price": food.price,
        "description": food.description,
        "image": food.image,
    }


def load_default_foods(path: Path = DEFAULT_FOODS_PATH) -> List[Dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"Food catalog not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, list):
        raise ValueError(f"Expected a list of foods in {path}")

    out: List[Dict[str, Any]] = []
    for it in data:
        if not isinstance(it, dict):
            continue
        name = str(it.get("name") or "").strip()
        if not name:
            continue
        out.append(
            {
                "name": name,
                "price": float(it.get("price", 0.0) or 0.0),
                "description": it.get("description"),
                "image": it.get("image"),
            }
        )
    return out


def list_foods(db: Session) -> List[Food]:
    return db.query(Food).all()


def find_foods(db: Session, food_ids: Iterable[Any]) -> Dict[str, Food]:
    """Index the foods whose ids appear in ``food_ids``; unknown ids are skipped."""
    ids = {str(fid) for fid in food_ids if fid}
    if not ids:
        return {}
    return {f.id: f for f in db.query(Food).filter(Food.id.in_(sorted(ids))).all()}


def seed_foods(db: Session, foods: Optional[List[Dict[str, Any]]] = None, reset: bool = True) -> List[Food]:
    """Replace (or extend, with ``reset=False``) the catalog with ``foods``."""
    foods = load_default_foods() if foods is None else foods

    if reset:
        removed = db.query(Food).delete()
        logger.info("Cleared %d existing foods", removed)

    rows = [Food(**f) for f in foods]
    db.add_all(rows)
    db.commit()
    for r in rows:
        db.refresh(r)

    logger.info("Seeded %d foods", len(rows))
    return rows
