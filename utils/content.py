"""
Content Module - Admin editing of blog posts, categories and tags
"""

from flask import current_app
from extensions import db
from models import BlogPost, BlogCategory, BlogTag
from .errors import ValidationError, NotFoundError, IntegrityGuardError
from .helpers import utcnow, calculate_reading_time
from .slugs import slugify, unique_slug, slug_in_use
from .validation import validate_post_form, validate_category_form, validate_tag_form


def get_or_404(model, identifier):
    obj = db.session.get(model, identifier)
    if obj is None:
        raise NotFoundError(model.__name__, identifier)
    return obj


def _resolve_slug(model, data, source_field, instance=None):
    """Explicit slugs are normalized and must be free; derived ones get a numeric suffix when taken"""
    exclude_id = instance.id if instance is not None else None
    if data.get('slug'):
        explicit = slugify(data['slug'])
        if not explicit:
            raise ValidationError({'slug': ['The slug must contain letters or numbers.']})
        if slug_in_use(model, explicit, exclude_id=exclude_id):
            raise ValidationError({'slug': ['The slug has already been taken.']})
        return explicit
    if instance is not None and instance.slug:
        return instance.slug
    return unique_slug(model, data[source_field], exclude_id=exclude_id)


def _load_by_ids(model, ids, field):
    if not ids:
        return []
    found = model.query.filter(model.id.in_(ids)).all()
    missing = set(ids) - {obj.id for obj in found}
    if missing:
        raise ValidationError({field: [f'The selected {field} are invalid.']})
    return found


# Posts

def save_post(form, post=None, default_author='Site Owner'):
    """
    Create a post, or update `post`, from an admin form.

    - slug derived from the title when omitted
    - reading time computed from content unless given, recomputed on content change
    - publishing without a timestamp stamps the current time
    - categories/tags replaced by the submitted id lists
    """
    data = validate_post_form(form, BlogPost.STATUSES)
    creating = post is None
    if creating:
        post = BlogPost(views_count=0)

    slug = _resolve_slug(BlogPost, data, 'title', instance=None if creating else post)
    categories = _load_by_ids(BlogCategory, data['categories'], 'categories')
    tags = _load_by_ids(BlogTag, data['tags'], 'tags')

    content_changed = creating or post.content != data['content']

    post.title = data['title']
    post.slug = slug
    post.excerpt = data['excerpt']
    post.content = data['content']
    if data['cover_image']:
        post.cover_image = data['cover_image']
    post.author_name = data['author_name'] or post.author_name or default_author
    if data['reading_time']:
        post.reading_time = data['reading_time']
    elif content_changed:
        post.reading_time = calculate_reading_time(data['content'])
    post.status = data['status']
    if data['published_at']:
        post.published_at = data['published_at']
    elif post.status == BlogPost.STATUS_PUBLISHED and post.published_at is None:
        post.published_at = utcnow()
    post.is_featured = data['is_featured']
    post.meta_title = data['meta_title']
    post.meta_description = data['meta_description']
    post.categories = categories
    post.tags = tags

    if creating:
        db.session.add(post)
    db.session.commit()
    current_app.logger.info(f"Blog post {'created' if creating else 'updated'}: {post.slug}")
    return post


def delete_post(post):
    """Comments and taxonomy links go with the post"""
    slug = post.slug
    db.session.delete(post)
    db.session.commit()
    current_app.logger.info(f"Blog post deleted: {slug}")


# Categories and tags

def save_category(form, category=None):
    data = validate_category_form(form)
    creating = category is None
    if creating:
        category = BlogCategory()
    category.slug = _resolve_slug(BlogCategory, data, 'name', instance=None if creating else category)
    category.name = data['name']
    category.description = data['description']
    category.display_order = data['display_order'] or 0
    if creating:
        db.session.add(category)
    db.session.commit()
    current_app.logger.info(f"Blog category {'created' if creating else 'updated'}: {category.slug}")
    return category


def save_tag(form, tag=None):
    data = validate_tag_form(form)
    creating = tag is None
    if creating:
        tag = BlogTag()
    tag.slug = _resolve_slug(BlogTag, data, 'name', instance=None if creating else tag)
    tag.name = data['name']
    tag.display_order = data['display_order'] or 0
    if creating:
        db.session.add(tag)
    db.session.commit()
    current_app.logger.info(f"Blog tag {'created' if creating else 'updated'}: {tag.slug}")
    return tag


def attached_posts_count(term):
    """Posts of any status linked to a category or tag"""
    relation = BlogPost.categories if isinstance(term, BlogCategory) else BlogPost.tags
    model = type(term)
    return BlogPost.query.filter(relation.any(model.id == term.id)).count()


def delete_term(term):
    """
    Delete a category or tag that no post references.

    Raises:
        IntegrityGuardError: when posts are still attached
    """
    kind = 'category' if isinstance(term, BlogCategory) else 'tag'
    count = attached_posts_count(term)
    if count > 0:
        raise IntegrityGuardError(
            f"Cannot delete {kind}. It has {count} post(s) attached. "
            f"Remove posts from this {kind} first.", count)
    slug = term.slug
    db.session.delete(term)
    db.session.commit()
    current_app.logger.info(f"Blog {kind} deleted: {slug}")


def reorder_categories(entries):
    """
    Apply display_order values: entries = [{'id': ..., 'display_order': n}, ...]

    Unknown ids are skipped; negative or non-integer orders are rejected.
    """
    updates = {}
    for entry in entries:
        try:
            order = int(entry.get('display_order'))
        except (TypeError, ValueError):
            raise ValidationError({'categories': ['Each display order must be an integer.']})
        if order < 0:
            raise ValidationError({'categories': ['Display order must be at least 0.']})
        if entry.get('id'):
            updates[str(entry['id'])] = order

    changed = 0
    for category in BlogCategory.query.filter(BlogCategory.id.in_(list(updates))).all():
        category.display_order = updates[category.id]
        changed += 1
    db.session.commit()
    return changed


__all__ = [
    'get_or_404',
    'save_post',
    'delete_post',
    'save_category',
    'save_tag',
    'attached_posts_count',
    'delete_term',
    'reorder_categories'
]
