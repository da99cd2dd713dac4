"""Database engine settings and the constraint naming scheme of the schema."""

# Connections are recycled before PostgreSQL or a proxy drops them
POOL_RECYCLE_SECONDS = 3600
COMMAND_TIMEOUT_SECONDS = 60

# Slow query log lines keep only the head of the statement
MAX_LOGGED_STATEMENT_LENGTH = 500

# Constraint names used by the models and by migrations/versions.
# Join tables only ever index their foreign key columns.
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "ix": "ix_%(table_name)s_%(column_0_name)s",
}
