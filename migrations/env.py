from logging.config import fileConfig

from alembic import context

from cookbook import models  # noqa: F401
from cookbook.db import Base, make_engine
from cookbook.config import settings

config = context.config
# callers that run migrations in-process keep their own logging setup
if (config.config_file_name is not None
        and config.attributes.get("configure_logger", True)):
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
# an explicit sqlalchemy.url (tests, one-off runs) wins over DATABASE_URL
database_url = config.get_main_option("sqlalchemy.url") or settings.database_url


def run_migrations_offline() -> None:
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = make_engine(database_url)
    with engine.connect() as connection:
        context.configure(connection=connection,
                          target_metadata=target_metadata,
                          render_as_batch=connection.dialect.name == "sqlite")
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
