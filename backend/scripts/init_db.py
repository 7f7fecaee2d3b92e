"""Create tables and optionally load post metrics from a JSON file."""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))
os.chdir(ROOT_DIR)

from app.database import Base, SessionLocal, engine
from app import models  # noqa: F401
from app.schemas import PostRecord
from app.services.storage import MetricsStore


def create_tables() -> None:
    Base.metadata.create_all(bind=engine)


def load_metrics(path: Path, user_id: str) -> tuple[int, int]:
    """JSON 文件内容为 PostRecord 对象数组"""
    payload = json.loads(path.read_text(encoding="utf-8"))
    records = [PostRecord.model_validate(item) for item in payload]

    db = SessionLocal()
    try:
        return MetricsStore(db).add_many(user_id, records)
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", type=Path, help="JSON file of post records to ingest")
    parser.add_argument("--user", default="demo-user", help="user id for seeded records")
    args = parser.parse_args()

    create_tables()
    if args.seed:
        inserted, updated = load_metrics(args.seed, args.user)
        print(f"Seeded {args.user}: inserted={inserted}, updated={updated}")


if __name__ == "__main__":
    main()
