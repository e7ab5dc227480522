"""SQLAlchemy models for the Account API schema."""

from sqlalchemy import (
    BigInteger, Column, Text, DateTime, ForeignKey, Index, Identity, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
from sqlalchemy import create_engine

from ..config import get_settings

# Create base class for models
Base = declarative_base()


class User(Base):
    """Users table model."""
    __tablename__ = 'users'

    id = Column(BigInteger, Identity(), primary_key=True)
    name = Column(Text, nullable=False)
    picture = Column(Text)
    email = Column(Text, nullable=False)
    issuer = Column(Text, nullable=False, unique=True)
    github = Column(Text)
    public_address = Column(Text, nullable=False, unique=True)
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class UserTag(Base):
    """User tags table model."""
    __tablename__ = 'user_tags'

    id = Column(BigInteger, Identity(), primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.id'), nullable=False)
    tag = Column(Text, nullable=False)
    value = Column(Text, nullable=False)
    reason = Column(Text, nullable=False, server_default='')
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index('user_tags_user_id_tag_idx', 'user_id', 'tag'),
    )


class UserTagProposal(Base):
    """User tag proposals (change requests) table model."""
    __tablename__ = 'user_tag_proposals'

    id = Column(BigInteger, Identity(), primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.id'), nullable=False)
    tag = Column(Text, nullable=False)
    proposed_tag_value = Column(Text, nullable=False)
    user_proposal_form = Column(JSONB, nullable=False)
    admin_decision_type = Column(Text)
    admin_decision_message = Column(Text)
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True))


class AuthKey(Base):
    """API tokens table model."""
    __tablename__ = 'auth_keys'

    id = Column(BigInteger, Identity(), primary_key=True)
    name = Column(Text, nullable=False)
    secret = Column(Text, nullable=False, unique=True)
    user_id = Column(BigInteger, ForeignKey('users.id'), nullable=False)
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True))


class Content(Base):
    """Content (DAG roots) table model."""
    __tablename__ = 'content'

    cid = Column(Text, primary_key=True)
    dag_size = Column(BigInteger)
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Upload(Base):
    """Uploads table model."""
    __tablename__ = 'uploads'

    id = Column(BigInteger, Identity(), primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.id'), nullable=False)
    auth_key_id = Column(BigInteger, ForeignKey('auth_keys.id'))
    content_cid = Column(Text, ForeignKey('content.cid'), nullable=False)
    source_cid = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    name = Column(Text)
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint('user_id', 'source_cid', name='uploads_user_id_source_cid_key'),
        Index('uploads_user_id_inserted_at_desc', 'user_id', 'inserted_at', postgresql_ops={'inserted_at': 'DESC'}),
    )


class PinLocation(Base):
    """Pinning cluster peers table model."""
    __tablename__ = 'pin_locations'

    id = Column(BigInteger, Identity(), primary_key=True)
    peer_id = Column(Text, nullable=False, unique=True)
    peer_name = Column(Text)
    region = Column(Text)


class Pin(Base):
    """Pins of content on cluster peers table model."""
    __tablename__ = 'pins'

    id = Column(BigInteger, Identity(), primary_key=True)
    content_cid = Column(Text, ForeignKey('content.cid'), nullable=False)
    pin_location_id = Column(BigInteger, ForeignKey('pin_locations.id'), nullable=False)
    # One of: queued, pinning, pinned, failed
    status = Column(Text, nullable=False)
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('content_cid', 'pin_location_id', name='pins_content_cid_pin_location_id_key'),
    )


class PsaPinRequest(Base):
    """Pinning Service API pin requests table model."""
    __tablename__ = 'psa_pin_requests'

    id = Column(BigInteger, Identity(), primary_key=True)
    auth_key_id = Column(BigInteger, ForeignKey('auth_keys.id'), nullable=False)
    content_cid = Column(Text, ForeignKey('content.cid'), nullable=False)
    source_cid = Column(Text, nullable=False)
    name = Column(Text)
    origins = Column(JSONB)
    meta = Column(JSONB)
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index('psa_pin_requests_auth_key_id_inserted_at_desc', 'auth_key_id', 'inserted_at', postgresql_ops={'inserted_at': 'DESC'}),
    )


class Customer(Base):
    """Billing provider customers table model."""
    __tablename__ = 'customers'

    id = Column(Text, primary_key=True)
    user_id = Column(BigInteger, ForeignKey('users.id'), nullable=False, unique=True)
    inserted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


def create_engine_from_env():
    """Create SQLAlchemy engine from application settings."""
    return create_engine(get_settings().database_url)
