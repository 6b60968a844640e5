"""
Slug Module - URL-safe identifiers for posts, categories and tags
"""

import re
import unicodedata
from extensions import db


def slugify(value, separator='-'):
    """'My First Post!' -> 'my-first-post'"""
    value = unicodedata.normalize('NFKD', str(value or '')).encode('ascii', 'ignore').decode('ascii')
    value = value.replace('@', ' at ').replace('&', ' and ')
    value = re.sub(r'[^\w\s-]', '', value.lower())
    value = re.sub(r'[\s_-]+', separator, value).strip(separator)
    return value


def unique_slug(model, source, exclude_id=None, fallback='item'):
    """
    Derive a slug from `source` that no other row of `model` uses.

    Collisions get a numeric suffix: my-post, my-post-2, my-post-3, ...

    Args:
        model: SQLAlchemy model with a `slug` column
        source (str): title/name (or an explicit slug) to derive from
        exclude_id: primary key of the row being edited, if any
    """
    base = slugify(source) or fallback
    query = db.session.query(model.slug).filter(
        db.or_(model.slug == base, model.slug.like(f'{base}-%')))
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    taken = {row[0] for row in query.all()}

    if base not in taken:
        return base
    suffix = 2
    while f'{base}-{suffix}' in taken:
        suffix += 1
    return f'{base}-{suffix}'


def slug_in_use(model, slug, exclude_id=None):
    query = model.query.filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return db.session.query(query.exists()).scalar()


__all__ = ['slugify', 'unique_slug', 'slug_in_use']
