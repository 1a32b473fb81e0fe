"""SQLAlchemy ORM models for flattened AAS records.

One row per environment, shell, submodel, submodel element and concept
description, plus four value tables keyed by element:
- s_value / i_value / d_value: scalar content, one family per element (t_value)
- o_value: serialized structured attributes (references, flags, lists)

List- and object-valued attributes are stored as canonical JSON text.
Primary keys are UUID strings assigned when a record is built, so records
can link to each other before anything is flushed.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    BigInteger,
    DateTime,
    Double,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def new_record_id() -> str:
    """Generate a primary key for a new record."""
    return str(uuid4())


# -----------------------------------------------------------------------------
# Column groups
# -----------------------------------------------------------------------------


class ReferableColumns:
    """Columns every named record carries."""

    id_short: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    extensions: Mapped[str | None] = mapped_column(Text, nullable=True)
    embedded_data_specifications: Mapped[str | None] = mapped_column(Text, nullable=True)


class AdministrationColumns:
    """Flattened AdministrativeInformation of an identifiable."""

    version: Mapped[str | None] = mapped_column(Text, nullable=True)
    revision: Mapped[str | None] = mapped_column(Text, nullable=True)
    creator: Mapped[str | None] = mapped_column(Text, nullable=True)
    template_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    a_embedded_data_specifications: Mapped[str | None] = mapped_column(Text, nullable=True)


class SemanticColumns:
    semantic_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    supplemental_semantic_ids: Mapped[str | None] = mapped_column(Text, nullable=True)
    qualifiers: Mapped[str | None] = mapped_column(Text, nullable=True)


class TimestampColumns:
    """Document timestamps, copied from the source node (never defaulted)."""

    time_stamp_create: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    time_stamp: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    time_stamp_tree: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    time_stamp_delete: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


# -----------------------------------------------------------------------------
# Identifiables
# -----------------------------------------------------------------------------


class EnvTable(Base):
    """One loaded document."""

    __tablename__ = "env"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    path: Mapped[str | None] = mapped_column(Text, nullable=True)


class ConceptDescriptionTable(ReferableColumns, AdministrationColumns, TimestampColumns, Base):
    """Concept description, shared by every environment that lists it."""

    __tablename__ = "cd"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    identifier: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    is_case_of: Mapped[str | None] = mapped_column(Text, nullable=True)


class EnvConceptDescriptionTable(Base):
    """Membership of a concept description in an environment."""

    __tablename__ = "env_cd"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    env_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("env.id", ondelete="CASCADE"), nullable=False
    )
    cd_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("cd.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (Index("idx_env_cd_env_cd", env_id, cd_id),)


class AasTable(ReferableColumns, AdministrationColumns, TimestampColumns, Base):
    """Asset Administration Shell with its flattened asset information."""

    __tablename__ = "aas"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    env_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("env.id", ondelete="CASCADE"), nullable=False
    )
    identifier: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    derived_from: Mapped[str | None] = mapped_column(Text, nullable=True)

    # AssetInformation
    asset_kind: Mapped[str | None] = mapped_column(String(20), nullable=True)
    specific_asset_ids: Mapped[str | None] = mapped_column(Text, nullable=True)
    global_asset_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    asset_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_thumbnail_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_thumbnail_content_type: Mapped[str | None] = mapped_column(Text, nullable=True)


class SubmodelTable(
    ReferableColumns, SemanticColumns, AdministrationColumns, TimestampColumns, Base
):
    """Submodel, owned by a shell when one claims it, else by the environment."""

    __tablename__ = "sm"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    env_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("env.id", ondelete="CASCADE"), nullable=False
    )
    aas_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), ForeignKey("aas.id", ondelete="SET NULL"), nullable=True
    )
    identifier: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    kind: Mapped[str | None] = mapped_column(String(20), nullable=True)


class SubmodelElementTable(ReferableColumns, SemanticColumns, TimestampColumns, Base):
    """Submodel element of any kind.

    sme_type holds the kind tag (with operation group prefix), t_value the
    value family ("S", "I", "D") whose table holds the scalar content.
    """

    __tablename__ = "sme"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    sm_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("sm.id", ondelete="CASCADE"), nullable=False
    )
    parent_sme_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), ForeignKey("sme.id", ondelete="CASCADE"), nullable=True
    )
    # Pre-order position within the submodel
    seq: Mapped[int] = mapped_column(Integer, nullable=False)
    sme_type: Mapped[str] = mapped_column(String(16), nullable=False)
    t_value: Mapped[str | None] = mapped_column(String(1), nullable=True)

    __table_args__ = (
        Index("idx_sme_sm_seq", sm_id, seq),
        Index("idx_sme_parent", parent_sme_id),
    )


# -----------------------------------------------------------------------------
# Values
# -----------------------------------------------------------------------------


class StringValueTable(Base):
    __tablename__ = "s_value"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    sme_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("sme.id", ondelete="CASCADE"), nullable=False, index=True
    )
    annotation: Mapped[str | None] = mapped_column(Text, nullable=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)


class IntValueTable(Base):
    __tablename__ = "i_value"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    sme_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("sme.id", ondelete="CASCADE"), nullable=False, index=True
    )
    annotation: Mapped[str | None] = mapped_column(Text, nullable=True)
    value: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


class DoubleValueTable(Base):
    __tablename__ = "d_value"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    sme_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("sme.id", ondelete="CASCADE"), nullable=False, index=True
    )
    annotation: Mapped[str | None] = mapped_column(Text, nullable=True)
    value: Mapped[float | None] = mapped_column(Double, nullable=True)


class ObjectValueTable(Base):
    """Serialized structured attribute of an element, named by ``attribute``."""

    __tablename__ = "o_value"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    sme_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("sme.id", ondelete="CASCADE"), nullable=False, index=True
    )
    attribute: Mapped[str] = mapped_column(String(32), nullable=False)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)


ScalarValueTable = StringValueTable | IntValueTable | DoubleValueTable
ValueTable = StringValueTable | IntValueTable | DoubleValueTable | ObjectValueTable
