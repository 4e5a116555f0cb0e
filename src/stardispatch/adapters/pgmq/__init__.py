"""PGMQ adapter – PostgreSQL-backed polling queue transport."""
from stardispatch.adapters.pgmq.transport import PgmqTransport

__all__ = ["PgmqTransport"]
