"""SQLAlchemy models for ledgerdesk database."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Company/ledger owner model."""

    __tablename__ = "accounts"

    # IDs are assigned by the store (collection size), never autoincremented
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)
    created_on = Column(String, nullable=False)
    linked = Column(Boolean, default=True, nullable=False)

    # Relationships
    documents = relationship("Document", back_populates="account")


class DocType(Base):
    """Document template model."""

    __tablename__ = "doc_types"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name_en = Column(String, nullable=False)
    name_ar = Column(String, nullable=False)

    # Relationships
    documents = relationship("Document", back_populates="doc_type_ref")


class Document(Base):
    """Accounting document model. Rows are kept as a JSON list."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)
    doc_type = Column(Integer, ForeignKey("doc_types.id"), nullable=False)
    doc_number = Column(Integer, nullable=False)
    company = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    data = Column(JSON, nullable=False, default=list)
    created_on = Column(String, nullable=False)
    linked = Column(Boolean, default=True, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="documents")
    doc_type_ref = relationship("DocType", back_populates="documents")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions may be used from worker threads while holding a write lock
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
