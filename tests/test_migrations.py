from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from cookbook.db import Base

ROOT = Path(__file__).resolve().parent.parent


def migrated_schema(tmp_path):
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", f"sqlite:///{tmp_path / 'migrated.db'}")
    cfg.attributes["configure_logger"] = False
    command.upgrade(cfg, "head")

    engine = create_engine(f"sqlite:///{tmp_path / 'migrated.db'}")
    try:
        return describe(inspect(engine), skip={"alembic_version"})
    finally:
        engine.dispose()


def describe(insp, skip=()):
    out = {}
    for table in insp.get_table_names():
        if table in skip:
            continue
        out[table] = {
            "columns": {c["name"]: bool(c["nullable"]) for c in insp.get_columns(table)},
            "pk": sorted(insp.get_pk_constraint(table)["constrained_columns"]),
            "indexes": {i["name"]: bool(i["unique"]) for i in insp.get_indexes(table)},
            "fks": sorted(
                (tuple(fk["constrained_columns"]), fk["referred_table"])
                for fk in insp.get_foreign_keys(table)
            ),
        }
    return out


def test_initial_revision_matches_models(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'models.db'}")
    try:
        Base.metadata.create_all(bind=engine)
        expected = describe(inspect(engine))
    finally:
        engine.dispose()

    assert migrated_schema(tmp_path) == expected
