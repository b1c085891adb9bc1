"""Add updated_at trigger to users

Revision ID: 002
Revises: 001
Create Date: 2024-10-10 00:00:02.000000+00:00

What:  BEFORE UPDATE trigger that sets users.updated_at = clock_timestamp()
       on every row modification, including direct SQL outside the service.
       clock_timestamp() (not CURRENT_TIMESTAMP) so two updates inside one
       transaction still produce increasing values.

PostgreSQL only; other dialects skip this revision.
"""

from typing import Sequence, Union
from alembic import op

from userapi.models.user import UPDATED_AT_FUNCTION_DDL, UPDATED_AT_TRIGGER_DDL

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _is_postgresql() -> bool:
    return op.get_bind().dialect.name == "postgresql"


def upgrade() -> None:
    if not _is_postgresql():
        return
    op.execute(UPDATED_AT_FUNCTION_DDL)
    op.execute(UPDATED_AT_TRIGGER_DDL)


def downgrade() -> None:
    if not _is_postgresql():
        return
    op.execute("DROP TRIGGER IF EXISTS update_users_updated_at ON users")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")
