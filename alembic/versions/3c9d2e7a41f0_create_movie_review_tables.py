"""create_movie_review_tables

Revision ID: 3c9d2e7a41f0
Revises:
Create Date: 2026-10-12 09:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9d2e7a41f0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False,
                  comment='Unique username shown next to reviews'),
        sa.Column('email', sa.String(length=255), nullable=False,
                  comment="User's email address (stored lower-cased)"),
        sa.Column('hashed_password', sa.String(length=255), nullable=False,
                  comment='Bcrypt hashed password'),
        sa.Column('role', sa.String(length=20), nullable=False,
                  comment='Access role (user, admin)'),
        sa.Column('profile_picture', sa.Text(), nullable=True,
                  comment="URL to the user's profile picture"),
        sa.Column('is_active', sa.Boolean(), nullable=False,
                  comment='Whether the account is active'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.text('now()'), nullable=False,
                  comment='When the user registered'),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  server_default=sa.text('now()'), nullable=False,
                  comment='When the user profile was last updated'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'movies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False, comment='Movie title'),
        sa.Column('description', sa.Text(), nullable=False, comment='Plot summary'),
        sa.Column('release_year', sa.Integer(), nullable=False, comment='Year of release'),
        sa.Column('release_month', sa.Integer(), nullable=True,
                  comment='Month of release (1-12)'),
        sa.Column('director', sa.String(length=255), nullable=False, comment='Director name'),
        sa.Column('cast_members', sa.JSON(), nullable=False, comment='Cast member names'),
        sa.Column('poster_url', sa.Text(), nullable=False, comment='Poster image URL'),
        sa.Column('banner_url', sa.Text(), nullable=True, comment='Banner image URL'),
        sa.Column('trailer_url', sa.Text(), nullable=True, comment='Trailer video URL'),
        sa.Column('average_rating', sa.Float(), nullable=False,
                  comment='Mean review rating, 0 when there are no reviews'),
        sa.Column('total_reviews', sa.Integer(), nullable=False,
                  comment='Number of reviews for this movie'),
        sa.Column('created_by', sa.Integer(), nullable=True,
                  comment='Admin who added the movie'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_movies_title'), 'movies', ['title'], unique=False)
    op.create_index(op.f('ix_movies_release_year'), 'movies', ['release_year'], unique=False)
    op.create_index(op.f('ix_movies_average_rating'), 'movies', ['average_rating'], unique=False)

    op.create_table(
        'movie_genres',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('movie_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.ForeignKeyConstraint(['movie_id'], ['movies.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('movie_id', 'name', name='uq_movie_genre'),
    )
    op.create_index(op.f('ix_movie_genres_movie_id'), 'movie_genres', ['movie_id'], unique=False)
    op.create_index(op.f('ix_movie_genres_name'), 'movie_genres', ['name'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('movie_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False, comment='Rating from 1-5 stars'),
        sa.Column('comment', sa.Text(), nullable=False, comment='Review text'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
        sa.ForeignKeyConstraint(['movie_id'], ['movies.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('movie_id', 'user_id', name='uq_review_movie_user'),
    )
    op.create_index(op.f('ix_reviews_id'), 'reviews', ['id'], unique=False)
    op.create_index(op.f('ix_reviews_movie_id'), 'reviews', ['movie_id'], unique=False)
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'], unique=False)
    op.create_index(op.f('ix_reviews_created_at'), 'reviews', ['created_at'], unique=False)

    op.create_table(
        'watchlist_items',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('movie_id', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime(timezone=True),
                  server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['movie_id'], ['movies.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id', 'movie_id'),
        comment='Movies each user has saved to watch later',
    )


def downgrade() -> None:
    op.drop_table('watchlist_items')

    op.drop_index(op.f('ix_reviews_created_at'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_user_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_movie_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_id'), table_name='reviews')
    op.drop_table('reviews')

    op.drop_index(op.f('ix_movie_genres_name'), table_name='movie_genres')
    op.drop_index(op.f('ix_movie_genres_movie_id'), table_name='movie_genres')
    op.drop_table('movie_genres')

    op.drop_index(op.f('ix_movies_average_rating'), table_name='movies')
    op.drop_index(op.f('ix_movies_release_year'), table_name='movies')
    op.drop_index(op.f('ix_movies_title'), table_name='movies')
    op.drop_table('movies')

    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
