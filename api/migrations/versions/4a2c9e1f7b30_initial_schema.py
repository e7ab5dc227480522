"""initial_schema

Revision ID: 4a2c9e1f7b30
Revises:
Create Date: 2026-10-19 10:12:31.204517

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4a2c9e1f7b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, sa.TIMESTAMP(timezone=True), nullable=True)
    return sa.Column(name, sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('now()'))


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('picture', sa.Text(), nullable=True),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('issuer', sa.Text(), nullable=False),
        sa.Column('github', sa.Text(), nullable=True),
        sa.Column('public_address', sa.Text(), nullable=False),
        _timestamp('inserted_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('issuer'),
        sa.UniqueConstraint('public_address')
    )

    op.create_table('user_tags',
        sa.Column('id', sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('tag', sa.Text(), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False, server_default=''),
        _timestamp('inserted_at'),
        _timestamp('deleted_at', nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('user_tags_user_id_tag_idx', 'user_tags', ['user_id', 'tag'], unique=False)

    op.create_table('user_tag_proposals',
        sa.Column('id', sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('tag', sa.Text(), nullable=False),
        sa.Column('proposed_tag_value', sa.Text(), nullable=False),
        sa.Column('user_proposal_form', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('admin_decision_type', sa.Text(), nullable=True),
        sa.Column('admin_decision_message', sa.Text(), nullable=True),
        _timestamp('inserted_at'),
        _timestamp('deleted_at', nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('auth_keys',
        sa.Column('id', sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('secret', sa.Text(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        _timestamp('inserted_at'),
        _timestamp('updated_at'),
        _timestamp('deleted_at', nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('secret')
    )

    op.create_table('content',
        sa.Column('cid', sa.Text(), nullable=False),
        sa.Column('dag_size', sa.BigInteger(), nullable=True),
        _timestamp('inserted_at'),
        sa.PrimaryKeyConstraint('cid')
    )

    op.create_table('uploads',
        sa.Column('id', sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('auth_key_id', sa.BigInteger(), nullable=True),
        sa.Column('content_cid', sa.Text(), nullable=False),
        sa.Column('source_cid', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=True),
        _timestamp('inserted_at'),
        _timestamp('updated_at'),
        _timestamp('deleted_at', nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['auth_key_id'], ['auth_keys.id'], ),
        sa.ForeignKeyConstraint(['content_cid'], ['content.cid'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'source_cid', name='uploads_user_id_source_cid_key')
    )
    op.create_index(
        'uploads_user_id_inserted_at_desc',
        'uploads',
        ['user_id', 'inserted_at'],
        unique=False,
        postgresql_ops={'inserted_at': 'DESC'}
    )

    op.create_table('pin_locations',
        sa.Column('id', sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column('peer_id', sa.Text(), nullable=False),
        sa.Column('peer_name', sa.Text(), nullable=True),
        sa.Column('region', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('peer_id')
    )

    op.create_table('pins',
        sa.Column('id', sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column('content_cid', sa.Text(), nullable=False),
        sa.Column('pin_location_id', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False),
        _timestamp('inserted_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['content_cid'], ['content.cid'], ),
        sa.ForeignKeyConstraint(['pin_location_id'], ['pin_locations.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('content_cid', 'pin_location_id', name='pins_content_cid_pin_location_id_key')
    )

    op.create_table('psa_pin_requests',
        sa.Column('id', sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column('auth_key_id', sa.BigInteger(), nullable=False),
        sa.Column('content_cid', sa.Text(), nullable=False),
        sa.Column('source_cid', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('origins', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('meta', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _timestamp('inserted_at'),
        _timestamp('updated_at'),
        _timestamp('deleted_at', nullable=True),
        sa.ForeignKeyConstraint(['auth_key_id'], ['auth_keys.id'], ),
        sa.ForeignKeyConstraint(['content_cid'], ['content.cid'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'psa_pin_requests_auth_key_id_inserted_at_desc',
        'psa_pin_requests',
        ['auth_key_id', 'inserted_at'],
        unique=False,
        postgresql_ops={'inserted_at': 'DESC'}
    )

    op.create_table('customers',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        _timestamp('inserted_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )


def downgrade() -> None:
    # Drop indexes first
    op.drop_index('psa_pin_requests_auth_key_id_inserted_at_desc', table_name='psa_pin_requests')
    op.drop_index('uploads_user_id_inserted_at_desc', table_name='uploads')
    op.drop_index('user_tags_user_id_tag_idx', table_name='user_tags')

    # Drop tables in reverse order due to foreign key constraints
    op.drop_table('customers')
    op.drop_table('psa_pin_requests')
    op.drop_table('pins')
    op.drop_table('pin_locations')
    op.drop_table('uploads')
    op.drop_table('content')
    op.drop_table('auth_keys')
    op.drop_table('user_tag_proposals')
    op.drop_table('user_tags')
    op.drop_table('users')
