"""Column types that map to Postgres natives and degrade gracefully elsewhere."""

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

JsonB = JSON().with_variant(JSONB(), "postgresql")
