"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

Profiles, projects with their role/technology tags, collaborations,
favorites and attachment links.
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

collaboration_relationship = postgresql.ENUM(
    "Creator",
    "CollaboratorPending",
    "CollaboratorAccepted",
    "CollaboratorDeclined",
    name="collaboration_relationship",
    create_type=False,
)


def upgrade() -> None:
    collaboration_relationship.create(op.get_bind(), checkfirst=True)

    # --- profiles ---
    op.create_table(
        "profiles",
        sa.Column("id", sa.String, primary_key=True, nullable=False),
        sa.Column("name", sa.String, nullable=False, server_default=""),
        sa.Column("email", sa.String, nullable=False),
        sa.Column("avatar_url", sa.String, nullable=True),
        sa.Column("bio", sa.String, nullable=False, server_default=""),
        sa.Column(
            "active_project_slots", sa.Integer, nullable=False, server_default="3"
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_profiles_id", "profiles", ["id"])
    op.create_index("ix_profiles_email", "profiles", ["email"])

    # --- projects ---
    op.create_table(
        "projects",
        sa.Column("id", sa.String(36), primary_key=True, nullable=False),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("description", sa.String, nullable=False, server_default=""),
        sa.Column("is_open", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("complexity", sa.String, nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_projects_id", "projects", ["id"])
    op.create_index("ix_projects_is_open", "projects", ["is_open"])
    op.create_index("ix_projects_complexity", "projects", ["complexity"])

    # --- project tags ---
    op.create_table(
        "project_roles",
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("role", sa.String, primary_key=True),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_project_roles_role", "project_roles", ["role"])

    op.create_table(
        "project_technologies",
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("technology", sa.String, primary_key=True),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index(
        "ix_project_technologies_technology", "project_technologies", ["technology"]
    )

    # --- collaborations ---
    op.create_table(
        "collaborations",
        sa.Column("id", sa.String(36), primary_key=True, nullable=False),
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "profile_id",
            sa.String,
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("relation", collaboration_relationship, nullable=False),
        sa.Column("request_message", sa.String, nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("project_id", "profile_id", name="uq_collaboration_pair"),
    )
    op.create_index(
        "ix_collaborations_project_id", "collaborations", ["project_id"]
    )
    op.create_index(
        "ix_collaborations_profile_id", "collaborations", ["profile_id"]
    )
    op.create_index("ix_collaborations_relation", "collaborations", ["relation"])

    # --- favorites ---
    op.create_table(
        "project_favorites",
        sa.Column(
            "profile_id",
            sa.String,
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    )

    # --- attachment links ---
    op.create_table(
        "attachment_links",
        sa.Column("id", sa.String(36), primary_key=True, nullable=False),
        sa.Column("link_type", sa.String, nullable=False),
        sa.Column("title", sa.String, nullable=False),
        sa.Column("url", sa.String, nullable=False),
        sa.Column(
            "profile_id",
            sa.String,
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "project_id",
            sa.String(36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.CheckConstraint(
            "(profile_id IS NULL) <> (project_id IS NULL)",
            name="ck_attachment_link_single_owner",
        ),
    )
    op.create_index(
        "ix_attachment_links_profile_id", "attachment_links", ["profile_id"]
    )
    op.create_index(
        "ix_attachment_links_project_id", "attachment_links", ["project_id"]
    )


def downgrade() -> None:
    op.drop_table("attachment_links")
    op.drop_table("project_favorites")
    op.drop_table("collaborations")
    op.drop_table("project_technologies")
    op.drop_table("project_roles")
    op.drop_table("projects")
    op.drop_table("profiles")
    collaboration_relationship.drop(op.get_bind(), checkfirst=True)
