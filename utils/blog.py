"""
Blog Module - Publication queries for the public blog
Listing with featured post, category/tag/search filters, detail lookup,
related posts, view counting and taxonomy summaries.
"""

from flask import current_app
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from extensions import db
from models import BlogPost, BlogCategory, BlogTag, blog_post_category, blog_post_tag
from .errors import NotFoundError
from .helpers import utcnow


def escape_like(term):
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class PublicationQuery:
    """
    Read side of the blog. Only posts with status 'published' and a
    publish timestamp at or before now are ever returned.

    Args:
        per_page (int): page size for the listing
        clock (callable): returns the current naive UTC datetime
    """

    def __init__(self, per_page=9, clock=utcnow):
        self.per_page = per_page
        self.clock = clock

    def published_criteria(self):
        return (
            BlogPost.status == BlogPost.STATUS_PUBLISHED,
            BlogPost.published_at.isnot(None),
            BlogPost.published_at <= self.clock(),
        )

    def published(self):
        return BlogPost.query.filter(*self.published_criteria())

    @staticmethod
    def latest_first(query):
        return query.order_by(BlogPost.published_at.desc(), BlogPost.created_at.desc())

    def featured_post(self):
        """Most recent published post flagged as featured, if any"""
        query = self.published().filter(BlogPost.is_featured.is_(True)).options(
            selectinload(BlogPost.categories), selectinload(BlogPost.tags))
        return self.latest_first(query).first()

    def list_posts(self, category=None, tag=None, search=None, page=1):
        """
        One page of published posts plus the featured post.

        The featured post is chosen independently of the filters and is
        never repeated in the page results.

        Returns:
            tuple: (featured BlogPost or None, Pagination)
        """
        featured = self.featured_post()

        query = self.published().options(
            selectinload(BlogPost.categories), selectinload(BlogPost.tags))
        if featured is not None:
            query = query.filter(BlogPost.id != featured.id)

        # any() compiles to EXISTS, so a post matching twice is still one row
        if category:
            query = query.filter(BlogPost.categories.any(BlogCategory.slug == category))
        if tag:
            query = query.filter(BlogPost.tags.any(BlogTag.slug == tag))
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.filter(db.or_(
                BlogPost.title.ilike(pattern, escape='\\'),
                BlogPost.excerpt.ilike(pattern, escape='\\'),
                BlogPost.content.ilike(pattern, escape='\\'),
            ))

        pagination = self.latest_first(query).paginate(
            page=max(int(page or 1), 1), per_page=self.per_page, error_out=False)
        return featured, pagination

    def get_post(self, slug):
        """Published post by slug, with taxonomy and comments loaded"""
        post = self.published().filter(BlogPost.slug == slug).options(
            selectinload(BlogPost.categories),
            selectinload(BlogPost.tags),
            selectinload(BlogPost.comments),
        ).first()
        if post is None:
            raise NotFoundError('BlogPost', slug)
        return post

    def record_view(self, post):
        """Single UPDATE ... SET views_count = views_count + 1"""
        BlogPost.query.filter(BlogPost.id == post.id).update(
            {BlogPost.views_count: BlogPost.views_count + 1},
            synchronize_session=False)
        db.session.commit()
        current_app.logger.debug(f"View recorded for post {post.slug}")

    def related_posts(self, post, limit=3):
        """Other published posts sharing at least one category, newest first"""
        category_ids = [c.id for c in post.categories]
        if not category_ids:
            return []
        query = self.published().filter(
            BlogPost.id != post.id,
            BlogPost.categories.any(BlogCategory.id.in_(category_ids)),
        ).options(selectinload(BlogPost.categories))
        return self.latest_first(query).limit(limit).all()

    def _published_counts(self, link_table, link_column):
        rows = (db.session.query(link_column, func.count(BlogPost.id))
                .join(BlogPost, BlogPost.id == link_table.c.blog_post_id)
                .filter(*self.published_criteria())
                .group_by(link_column)
                .all())
        return dict(rows)

    def category_summaries(self):
        """All categories in display order, each with its published post count"""
        counts = self._published_counts(blog_post_category, blog_post_category.c.blog_category_id)
        categories = BlogCategory.query.order_by(
            BlogCategory.display_order.asc(), BlogCategory.name.asc()).all()
        return [(category, counts.get(category.id, 0)) for category in categories]

    def tag_summaries(self):
        """All tags in display order, each with its published post count"""
        counts = self._published_counts(blog_post_tag, blog_post_tag.c.blog_tag_id)
        tags = BlogTag.query.order_by(BlogTag.display_order.asc(), BlogTag.name.asc()).all()
        return [(tag, counts.get(tag.id, 0)) for tag in tags]

    @classmethod
    def from_config(cls, config):
        return cls(per_page=config.get('BLOG_PER_PAGE', 9))


__all__ = ['PublicationQuery', 'escape_like']
