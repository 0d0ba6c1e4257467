"""Job postings, candidate profiles and interaction history."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "20261001_0001"
down_revision = None
branch_labels = None
depends_on = None


def _uuid_type() -> sa.types.TypeEngine:
    if op.get_context().dialect.name == "postgresql":
        return postgresql.UUID(as_uuid=True)
    return sa.String(length=36)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    """Create the matching schema."""

    op.create_table(
        "job_postings",
        sa.Column("id", _uuid_type(), primary_key=True, nullable=False),
        sa.Column("source", sa.String(length=100), nullable=False),
        sa.Column("external_id", sa.String(length=255), nullable=False),
        sa.Column("external_url", sa.String(length=1000), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("requirements", sa.JSON(), nullable=False),
        sa.Column("work_mode", sa.String(length=20), nullable=True),
        sa.Column("salary_min", sa.Integer(), nullable=True),
        sa.Column("salary_max", sa.Integer(), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("industry", sa.String(length=100), nullable=True),
        sa.Column("trust_score", sa.Integer(), nullable=False, server_default=sa.text("50")),
        sa.Column("liveness_status", sa.String(length=20), nullable=False, server_default=sa.text("'unknown'")),
        sa.Column("last_liveness_check", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default=sa.text("'active'")),
        sa.Column("posted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
            server_onupdate=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint("source", "external_id", name="uq_job_postings_source_external_id"),
        sa.CheckConstraint("trust_score >= 0 AND trust_score <= 100", name="ck_job_postings_trust_score"),
    )
    op.create_index("ix_job_postings_status_expires_at", "job_postings", ["status", "expires_at"])
    op.create_index("ix_job_postings_posted_at", "job_postings", ["posted_at"])

    op.create_table(
        "candidate_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("experience", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("industry", sa.String(length=100), nullable=True),
        sa.Column("work_mode", sa.String(length=20), nullable=True),
        sa.Column("salary_min", sa.Integer(), nullable=True),
        sa.Column("salary_max", sa.Integer(), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "candidate_interactions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("candidate_id", sa.Integer(), nullable=False),
        sa.Column("job_id", _uuid_type(), nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["candidate_id"], ["candidate_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["job_id"], ["job_postings.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_candidate_interactions_candidate_id", "candidate_interactions", ["candidate_id"])


def downgrade() -> None:
    """Drop the matching schema."""

    op.drop_index("ix_candidate_interactions_candidate_id", table_name="candidate_interactions")
    op.drop_table("candidate_interactions")
    op.drop_table("candidate_profiles")
    op.drop_index("ix_job_postings_posted_at", table_name="job_postings")
    op.drop_index("ix_job_postings_status_expires_at", table_name="job_postings")
    op.drop_table("job_postings")
