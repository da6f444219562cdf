"""
Persistence gateway.

One query primitive over Django's pooled connection, plus idempotent schema
bootstrap. ORM access in the service modules shares the same connection.
"""

import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.core.management import call_command
from django.db import connections

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    rows: list = field(default_factory=list)
    rowcount: int = 0


def query(sql, params=None, using="default"):
    """
    Execute one parameterized statement.

    Args:
        sql: Statement with %s placeholders
        params: Sequence of parameters (never interpolated into sql)
        using: Database alias

    Returns:
        QueryResult: rows as dicts (empty for statements without a result
        set) and the driver's affected-row count
    """
    with connections[using].cursor() as cursor:
        cursor.execute(sql, params or [])
        if cursor.description is None:
            return QueryResult(rows=[], rowcount=cursor.rowcount)
        columns = [col[0] for col in cursor.description]
        rows = [dict(zip(columns, row)) for row in cursor.fetchall()]
        return QueryResult(rows=rows, rowcount=cursor.rowcount)


def ping(using="default"):
    """Return True when the database answers SELECT 1."""
    result = query("SELECT 1 AS ok", using=using)
    return bool(result.rows) and result.rows[0]["ok"] == 1


def bootstrap_schema(using="default"):
    """Create every table that does not exist yet. Safe to call repeatedly."""
    logger.info("schema_bootstrap_started", extra={"operation": "BOOTSTRAP_SCHEMA"})
    call_command("migrate", database=using, interactive=False, verbosity=0)
    logger.info("schema_bootstrap_finished", extra={"operation": "BOOTSTRAP_SCHEMA"})


def bootstrap_on_start(using="default"):
    """Process-start hook. Returns whether the schema bootstrap ran."""
    if not settings.AUTO_MIGRATE:
        logger.info("schema_bootstrap_skipped", extra={"operation": "BOOTSTRAP_SCHEMA"})
        return False
    bootstrap_schema(using=using)
    return True
