"""Seed recipes from a JSON file for one user.

Usage: python -m scripts.import_data owner@example.com [data/recipes.json]

The file holds a list of objects shaped like the POST /recipes body.
Recipes whose name the user already has are skipped.
"""
import json
import sys
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy import select

from cookbook import crud, models, schemas
from cookbook.db import SessionLocal, init_db


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(__doc__)
        return 2
    email = argv[0]
    p = Path(argv[1]) if len(argv) > 1 else (
        Path(__file__).resolve().parents[1] / 'data' / 'recipes.json')
    if not p.exists():
        print(f'{p} not found')
        return 1

    init_db()
    data = json.loads(p.read_text(encoding='utf-8'))
    db = SessionLocal()
    try:
        user = crud.get_user_by_email(db, email)
        if user is None:
            print(f'no user with email {email}')
            return 1
        added = 0
        for r in data:
            try:
                payload = schemas.RecipeIn.model_validate(r)
            except ValidationError as exc:
                print(f"skipping {r.get('name')!r}: {exc.error_count()} error(s)")
                continue
            exists = db.scalar(
                select(models.Recipe)
                .where(models.Recipe.owner_id == user.id)
                .where(models.Recipe.name == payload.name)
            )
            if exists:
                continue
            crud.create_recipe(db, user.id, payload)
            added += 1
    finally:
        db.close()
    print(f'Imported {added} recipes')
    return 0


if __name__ == '__main__':
    sys.exit(main())
