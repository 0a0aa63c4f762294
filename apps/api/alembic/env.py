from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from dotenv import load_dotenv

# -------------------------------------------------------------------
# Load environment variables (.env in apps/api/)
# -------------------------------------------------------------------
load_dotenv()

# -------------------------------------------------------------------
# Alembic Config object
# -------------------------------------------------------------------
config = context.config

# -------------------------------------------------------------------
# Override sqlalchemy.url from Settings (DATABASE_URL / .env)
# (avoids alembic.ini interpolation issues)
# -------------------------------------------------------------------
from dispatch_api.core.config import settings

config.set_main_option("sqlalchemy.url", settings.database_url)

# -------------------------------------------------------------------
# Logging configuration
# -------------------------------------------------------------------
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# -------------------------------------------------------------------
# Import models & metadata for autogenerate
# -------------------------------------------------------------------
from dispatch_api.core.database import Base
from dispatch_api.models.employee import Employee  # noqa: F401
from dispatch_api.models.shift_option import ShiftOption  # noqa: F401
from dispatch_api.models.staffing_requirement import StaffingRequirement  # noqa: F401
from dispatch_api.models.holiday import Holiday  # noqa: F401
from dispatch_api.models.schedule_period import SchedulePeriod  # noqa: F401
from dispatch_api.models.individual_shift import IndividualShift  # noqa: F401
from dispatch_api.models.time_off import TimeOffRequest  # noqa: F401

target_metadata = Base.metadata

# -------------------------------------------------------------------
# Offline migrations
# -------------------------------------------------------------------
def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()

# -------------------------------------------------------------------
# Online migrations
# -------------------------------------------------------------------
def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
        )

        with context.begin_transaction():
            context.run_migrations()

# -------------------------------------------------------------------
# Entrypoint
# -------------------------------------------------------------------
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
