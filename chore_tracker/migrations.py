"""
Automatic database migration system.
Compares SQLAlchemy models with actual database schema and adds missing columns.
"""
import logging
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from chore_tracker.database import Base
from chore_tracker.exceptions import DatabaseException
from chore_tracker import models  # noqa: F401 - registers the mapped tables

logger = logging.getLogger("chore_tracker.migrations")


def get_default_value(column) -> str:
    """Get default value for a column in SQL format"""
    default = column.default
    if default is None or not getattr(default, "is_scalar", False):
        # Callables (timestamps) cannot be expressed as a literal default
        return 'NULL'

    value = default.arg
    if isinstance(value, bool):
        return '1' if value else '0'
    elif isinstance(value, (int, float)):
        return str(value)
    elif isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    return 'NULL'


def build_add_column_sql(table_name: str, column, dialect) -> str:
    """Build the ALTER TABLE statement that adds a mapped column"""
    column_type = column.type.compile(dialect=dialect)
    default_value = get_default_value(column)

    alter_sql = f"ALTER TABLE {table_name} ADD COLUMN {column.name} {column_type}"
    if default_value != 'NULL':
        alter_sql += f" DEFAULT {default_value}"
        # NOT NULL is only safe for existing rows when a default fills them
        if not column.nullable:
            alter_sql += " NOT NULL"
    return alter_sql


def auto_migrate(engine: Engine) -> int:
    """
    Add columns that exist on the models but not in the database.

    Tables missing entirely are skipped; Base.metadata.create_all creates them.

    Returns:
        Number of columns added

    Raises:
        DatabaseException: if an ALTER TABLE statement fails
    """
    logger.info("Starting automatic schema migration...")

    inspector = inspect(engine)
    existing_tables = inspector.get_table_names()
    migrations_applied = 0

    try:
        with engine.begin() as conn:
            for table_name, table in Base.metadata.tables.items():
                if table_name not in existing_tables:
                    logger.warning(f"Table '{table_name}' doesn't exist. Run Base.metadata.create_all() first.")
                    continue

                existing_columns = {col["name"] for col in inspector.get_columns(table_name)}

                for column in table.columns:
                    if column.name in existing_columns:
                        continue

                    alter_sql = build_add_column_sql(table_name, column, engine.dialect)
                    logger.info(f"Adding column '{column.name}' to table '{table_name}'")
                    logger.debug(f"SQL: {alter_sql}")
                    conn.execute(text(alter_sql))
                    migrations_applied += 1
    except SQLAlchemyError as e:
        logger.error(f"Migration failed: {e}")
        raise DatabaseException("migration", str(e)) from e

    if migrations_applied > 0:
        logger.info(f"Migration completed: {migrations_applied} column(s) added")
    else:
        logger.info("Schema is up to date - no migrations needed")

    return migrations_applied
