"""create_cards_tables

Revision ID: 001
Revises:
Create Date: 2026-10-12 10:14:03.512240

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    # Bases creadas con init_db ya tienen las tablas
    if inspector.has_table('cards'):
        return

    op.create_table('cards',
    sa.Column('id', sa.BigInteger(), autoincrement=False, nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('type', sa.String(length=100), nullable=False),
    sa.Column('frame_type', sa.String(length=50), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('atk', sa.Integer(), nullable=True),
    sa.Column('defense', sa.Integer(), nullable=True),
    sa.Column('level', sa.Integer(), nullable=True),
    sa.Column('race', sa.String(length=100), nullable=False),
    sa.Column('attribute', sa.String(length=50), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_cards_name'), 'cards', ['name'], unique=False)
    op.create_index(op.f('ix_cards_created_at'), 'cards', ['created_at'], unique=False)
    op.create_index(op.f('ix_cards_updated_at'), 'cards', ['updated_at'], unique=False)

    op.create_table('card_sets',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('card_id', sa.BigInteger(), nullable=False),
    sa.Column('set_name', sa.String(length=255), nullable=False),
    sa.Column('set_code', sa.String(length=50), nullable=False),
    sa.Column('set_rarity', sa.String(length=100), nullable=False),
    sa.Column('set_rarity_code', sa.String(length=50), nullable=False),
    sa.Column('set_price', sa.String(length=50), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['card_id'], ['cards.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_card_sets_card_id'), 'card_sets', ['card_id'], unique=False)

    op.create_table('card_images',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('card_id', sa.BigInteger(), nullable=False),
    sa.Column('image_url', sa.Text(), nullable=False),
    sa.Column('image_url_small', sa.Text(), nullable=False),
    sa.Column('image_url_cropped', sa.Text(), nullable=False),
    sa.Column('image_data', sa.LargeBinary(), nullable=True),
    sa.Column('image_small_data', sa.LargeBinary(), nullable=True),
    sa.Column('image_cropped_data', sa.LargeBinary(), nullable=True),
    sa.Column('content_type', sa.String(length=100), nullable=True),
    sa.Column('file_size', sa.Integer(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['card_id'], ['cards.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_card_images_card_id'), 'card_images', ['card_id'], unique=False)

    op.create_table('card_prices',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('card_id', sa.BigInteger(), nullable=False),
    sa.Column('cardmarket_price', sa.String(length=50), nullable=True),
    sa.Column('tcgplayer_price', sa.String(length=50), nullable=True),
    sa.Column('ebay_price', sa.String(length=50), nullable=True),
    sa.Column('amazon_price', sa.String(length=50), nullable=True),
    sa.Column('coolstuffinc_price', sa.String(length=50), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['card_id'], ['cards.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_card_prices_card_id'), 'card_prices', ['card_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_card_prices_card_id'), table_name='card_prices')
    op.drop_table('card_prices')
    op.drop_index(op.f('ix_card_images_card_id'), table_name='card_images')
    op.drop_table('card_images')
    op.drop_index(op.f('ix_card_sets_card_id'), table_name='card_sets')
    op.drop_table('card_sets')
    op.drop_index(op.f('ix_cards_updated_at'), table_name='cards')
    op.drop_index(op.f('ix_cards_created_at'), table_name='cards')
    op.drop_index(op.f('ix_cards_name'), table_name='cards')
    op.drop_table('cards')
