"""catalog schema

Revision ID: 0001_catalog
Revises:
Create Date: 2026-10-19 09:12:04.118230

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_catalog"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=32), nullable=False),
        sa.Column("icon", sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_subjects"),
        sa.UniqueConstraint("name", name="uq_subjects_name"),
    )
    op.create_index("ix_subjects_created_at", "subjects", ["created_at"])

    op.create_table(
        "systems",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["subject_id"],
            ["subjects.id"],
            name="fk_systems_subject_id_subjects",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_systems"),
        sa.UniqueConstraint("subject_id", "name", name="uq_systems_subject_id_name"),
    )
    op.create_index("ix_systems_subject_id", "systems", ["subject_id"])
    op.create_index("ix_systems_created_at", "systems", ["created_at"])

    op.create_table(
        "marks_sections",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("marks", sa.Integer(), nullable=False),
        sa.Column("label", sa.String(length=100), nullable=False),
        sa.Column("system_id", sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["system_id"],
            ["systems.id"],
            name="fk_marks_sections_system_id_systems",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_marks_sections"),
        sa.UniqueConstraint("system_id", "marks", name="uq_marks_sections_system_id_marks"),
    )
    op.create_index("ix_marks_sections_system_id", "marks_sections", ["system_id"])
    op.create_index("ix_marks_sections_created_at", "marks_sections", ["created_at"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("years", sa.Text(), nullable=False),
        sa.Column("repeat_count", sa.Integer(), nullable=False),
        sa.Column("importance_score", sa.Float(), nullable=False),
        sa.Column("global_importance", sa.Float(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_bookmarked", sa.Boolean(), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("system_id", sa.String(length=36), nullable=False),
        sa.Column("marks_section_id", sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["subject_id"],
            ["subjects.id"],
            name="fk_questions_subject_id_subjects",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["system_id"],
            ["systems.id"],
            name="fk_questions_system_id_systems",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["marks_section_id"],
            ["marks_sections.id"],
            name="fk_questions_marks_section_id_marks_sections",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_questions"),
    )
    op.create_index("ix_questions_subject_id", "questions", ["subject_id"])
    op.create_index("ix_questions_system_id", "questions", ["system_id"])
    op.create_index("ix_questions_marks_section_id", "questions", ["marks_section_id"])
    op.create_index("ix_questions_importance_score", "questions", ["importance_score"])
    op.create_index("ix_questions_created_at", "questions", ["created_at"])

    op.create_table(
        "folders",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("question_id", sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["questions.id"],
            name="fk_folders_question_id_questions",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_folders"),
        sa.UniqueConstraint("question_id", "name", name="uq_folders_question_id_name"),
    )
    op.create_index("ix_folders_question_id", "folders", ["question_id"])
    op.create_index("ix_folders_created_at", "folders", ["created_at"])

    op.create_table(
        "files",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("question_id", sa.String(length=36), nullable=False),
        sa.Column("folder_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["questions.id"],
            name="fk_files_question_id_questions",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["folder_id"],
            ["folders.id"],
            name="fk_files_folder_id_folders",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_files"),
    )
    op.create_index("ix_files_question_id", "files", ["question_id"])
    op.create_index("ix_files_folder_id", "files", ["folder_id"])
    op.create_index("ix_files_created_at", "files", ["created_at"])

    op.create_table(
        "statistics",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("total_subjects", sa.Integer(), nullable=False),
        sa.Column("total_systems", sa.Integer(), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False),
        sa.Column("total_files", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_statistics"),
    )


def downgrade() -> None:
    op.drop_table("statistics")
    for table in ("files", "folders"):
        op.drop_index(f"ix_{table}_created_at", table_name=table)
    op.drop_index("ix_files_folder_id", table_name="files")
    op.drop_index("ix_files_question_id", table_name="files")
    op.drop_table("files")
    op.drop_index("ix_folders_question_id", table_name="folders")
    op.drop_table("folders")
    for col in ("created_at", "importance_score", "marks_section_id", "system_id", "subject_id"):
        op.drop_index(f"ix_questions_{col}", table_name="questions")
    op.drop_table("questions")
    op.drop_index("ix_marks_sections_created_at", table_name="marks_sections")
    op.drop_index("ix_marks_sections_system_id", table_name="marks_sections")
    op.drop_table("marks_sections")
    op.drop_index("ix_systems_created_at", table_name="systems")
    op.drop_index("ix_systems_subject_id", table_name="systems")
    op.drop_table("systems")
    op.drop_index("ix_subjects_created_at", table_name="subjects")
    op.drop_table("subjects")
