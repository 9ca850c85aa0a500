from datetime import datetime, timedelta

import sqlalchemy as sa
import sqlalchemy.orm


Base = sa.orm.declarative_base()


class User(Base):
    __tablename__ = 'u'

    id = sa.Column(sa.Integer, primary_key=True)
    login = sa.Column(sa.String, nullable=False, unique=True)
    ctime = sa.Column(sa.DateTime, nullable=False)

    articles = sa.orm.relationship('Article', back_populates='author', order_by='Article.id')


class Article(Base):
    __tablename__ = 'a'

    id = sa.Column(sa.Integer, primary_key=True)
    user_id = sa.Column(sa.ForeignKey(User.id), nullable=False)
    title = sa.Column(sa.String, nullable=False)

    author = sa.orm.relationship(User, back_populates='articles')


# Core tables
users: sa.Table = User.__table__
articles: sa.Table = Article.__table__


# The moment the first user was created
EPOCH = datetime(2021, 1, 1, 12, 0, 0)


def user_row(id: int, **extra):
    """ Make a dict for a User row

    Users are created one day after another:

    Example:
        user_row(3)
        => dict(id=3, login='user-3', ctime=datetime(2021, 1, 3, 12, 0, 0))
    """
    return {
        'id': id,
        'login': f'user-{id}',
        'ctime': EPOCH + timedelta(days=id - 1),
        **extra
    }


def article_row(id: int, user_id: int, **extra):
    """ Make a dict for an Article row """
    return {
        'id': id,
        'user_id': user_id,
        'title': f'article-{id}',
        **extra
    }
