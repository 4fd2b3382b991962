# This project was developed with assistance from AI tools.
"""add post-sale board

Revision ID: 7e4f2b8c1a93
Revises: 3c1d9a7e5b20
Create Date: 2026-09-21 16:40:07.218835

"""

import sqlalchemy as sa
from alembic import op

revision = "7e4f2b8c1a93"
down_revision = "3c1d9a7e5b20"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "post_sale_tasks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("assigned_to_id", sa.Uuid(), nullable=True),
        sa.Column("created_by_id", sa.Uuid(), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=True),
        sa.Column("policy_id", sa.Uuid(), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("board_column", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["assigned_to_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["policy_id"], ["policies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_sale_tasks_assigned_to_id", "post_sale_tasks", ["assigned_to_id"])
    op.create_index("ix_post_sale_tasks_customer_id", "post_sale_tasks", ["customer_id"])
    op.create_index(
        "ix_post_sale_tasks_board_column_position", "post_sale_tasks", ["board_column", "position"]
    )


def downgrade() -> None:
    op.drop_table("post_sale_tasks")
