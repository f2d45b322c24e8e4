"""Initial family-tree schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-16
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_GENDERS = sa.Enum(
    "male", "female", "other", "unspecified", name="gender", native_enum=False, length=16
)
_RELATIONSHIP_TYPES = sa.Enum(
    "parentOf", "spouse", name="relationshiptype", native_enum=False, length=16
)
_PARENT_ROLES = sa.Enum("mother", "father", name="parentrole", native_enum=False, length=16)


def upgrade() -> None:
    op.create_table(
        "owner",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("default_person_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_owner")),
    )
    op.create_table(
        "person",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("gender", _GENDERS, nullable=False),
        sa.Column("birth_date", sa.String(length=10), nullable=True),
        sa.Column("death_date", sa.String(length=10), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("birth_surname", sa.String(), nullable=True),
        sa.Column("nickname", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["owner.id"],
            name=op.f("fk_person_owner_id_owner"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_person")),
    )
    op.create_index(op.f("ix_person_owner_id"), "person", ["owner_id"])

    op.create_table(
        "relationship",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("person1_id", sa.Integer(), nullable=False),
        sa.Column("person2_id", sa.Integer(), nullable=False),
        sa.Column("type", _RELATIONSHIP_TYPES, nullable=False),
        sa.Column("parent_role", _PARENT_ROLES, nullable=True),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "person1_id <> person2_id",
            name=op.f("ck_relationship_distinct_endpoints"),
        ),
        sa.ForeignKeyConstraint(
            ["person1_id"],
            ["person.id"],
            name=op.f("fk_relationship_person1_id_person"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["person2_id"],
            ["person.id"],
            name=op.f("fk_relationship_person2_id_person"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["owner.id"],
            name=op.f("fk_relationship_owner_id_owner"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_relationship")),
    )
    op.create_index(op.f("ix_relationship_person1_id"), "relationship", ["person1_id"])
    op.create_index(op.f("ix_relationship_person2_id"), "relationship", ["person2_id"])
    op.create_index(op.f("ix_relationship_owner_id"), "relationship", ["owner_id"])
    op.create_index(
        "uq_relationship_key",
        "relationship",
        ["person1_id", "person2_id", "type", sa.text("coalesce(parent_role, '')")],
        unique=True,
    )

    op.create_table(
        "person_merge",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("source_id", sa.Integer(), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("source_name", sa.String(), nullable=False),
        sa.Column("relationships_transferred", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["owner.id"],
            name=op.f("fk_person_merge_owner_id_owner"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_person_merge")),
    )
    op.create_index(op.f("ix_person_merge_owner_id"), "person_merge", ["owner_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_person_merge_owner_id"), table_name="person_merge")
    op.drop_table("person_merge")
    op.drop_index("uq_relationship_key", table_name="relationship")
    op.drop_index(op.f("ix_relationship_owner_id"), table_name="relationship")
    op.drop_index(op.f("ix_relationship_person2_id"), table_name="relationship")
    op.drop_index(op.f("ix_relationship_person1_id"), table_name="relationship")
    op.drop_table("relationship")
    op.drop_index(op.f("ix_person_owner_id"), table_name="person")
    op.drop_table("person")
    op.drop_table("owner")
