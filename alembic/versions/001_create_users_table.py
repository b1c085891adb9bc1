"""Create users table

Revision ID: 001
Revises: None
Create Date: 2024-10-10 00:00:01.000000+00:00

What:  Creates the `users` table with its unique email constraint and the
       email / created_at indexes.

Rollback: downgrade() drops the table (destructive — all users are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",

        # SERIAL primary key, assigned by the store
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),

        sa.Column("name", sa.String(255), nullable=False),

        sa.Column("email", sa.String(255), nullable=False),

        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),

        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),

        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )

    op.create_index("idx_users_email", "users", ["email"])
    op.create_index(
        "idx_users_created_at",
        "users",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_index("idx_users_email", table_name="users")
    op.drop_table("users")
