from __future__ import annotations

import argparse
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from foody.db import Base, SessionLocal, engine
from foody.menu import DEFAULT_FOODS_PATH, load_default_foods, seed_foods


def main() -> None:
    parser = argparse.ArgumentParser(description="Load the food catalog into the database.")
    parser.add_argument("--file", type=Path, default=DEFAULT_FOODS_PATH, help="JSON list of foods")
    parser.add_argument("--keep", action="store_true", help="append instead of replacing existing foods")
    args = parser.parse_args()

    foods = load_default_foods(args.file)
    if not foods:
        raise SystemExit(f"No foods found in {args.file}")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        rows = seed_foods(db, foods, reset=not args.keep)
        for r in rows:
            print(f"OK  {r.id}  {r.name}  {r.price:.2f}")
    finally:
        db.close()

    print(f"\nDone. Seeded {len(rows)} foods.")


if __name__ == "__main__":
    main()
