"""classrooms and missing-classroom reports

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "classroom",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("building", sa.String(length=255), nullable=True),
        sa.Column("floor", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
    )
    # Индекс под поиск по коду + уникальность
    op.create_index("ix_classroom_code", "classroom", ["code"], unique=True)

    op.create_table(
        "classroom_report",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("building", sa.String(length=255), nullable=False),
        sa.Column("room_number", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

def downgrade():
    op.drop_table("classroom_report")
    op.drop_index("ix_classroom_code", table_name="classroom")
    op.drop_table("classroom")
