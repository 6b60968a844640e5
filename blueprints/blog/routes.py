"""
Blog Routes - Public blog pages
Handles: Listing (category/tag/search filters), post detail, comment submission
"""

from flask import request, redirect, url_for, flash, current_app, abort
from utils.blog import PublicationQuery
from utils.errors import NotFoundError, ValidationError
from utils.helpers import paginate_payload, utcnow
from utils.presenters import post_card, post_detail, related_card, term_summary
from utils.security import get_client_ip, get_user_agent
from utils.submissions import CommentSubmissionPipeline
from utils.ui_helpers import render_page, flash_errors
from . import blog_bp


def _publication_query():
    return PublicationQuery.from_config(current_app.config)


@blog_bp.route('')
def index():
    """Blog listing with featured post and filters"""
    filters = {
        key: request.args.get(key, '').strip()
        for key in ('category', 'tag', 'search')
        if request.args.get(key, '').strip()
    }
    page = request.args.get('page', 1, type=int)

    query = _publication_query()
    featured, pagination = query.list_posts(
        category=filters.get('category'),
        tag=filters.get('tag'),
        search=filters.get('search'),
        page=page)

    return render_page(
        'Blog',
        featuredPost=post_card(featured, include_tags=False) if featured else None,
        posts=paginate_payload(pagination, post_card),
        categories=[term_summary(c, n) for c, n in query.category_summaries()],
        tags=[term_summary(t, n) for t, n in query.tag_summaries()],
        filters=filters)


@blog_bp.route('/<slug>')
def show(slug):
    """Single published post with approved comments and related posts"""
    query = _publication_query()
    try:
        post = query.get_post(slug)
    except NotFoundError:
        abort(404)

    query.record_view(post)
    now = utcnow()

    return render_page(
        'BlogShow',
        post=post_detail(post, current_app.config['APP_URL'], now),
        relatedPosts=[related_card(p) for p in query.related_posts(post)])


@blog_bp.route('/<post_id>/comments', methods=['POST'])
def store_comment(post_id):
    """Comment submission - always lands in the moderation queue"""
    post = _publication_query().published().filter_by(id=post_id).first()
    if post is None:
        abort(404)

    back = url_for('blog.show', slug=post.slug, _anchor='comments')
    pipeline = CommentSubmissionPipeline.from_config(current_app.config)
    try:
        result = pipeline.submit(post, request.form, get_client_ip(), get_user_agent())
    except ValidationError as e:
        flash_errors(e.first_errors(), old_input=request.form.to_dict())
        return redirect(back)

    flash(result.message, 'success')
    return redirect(back)
