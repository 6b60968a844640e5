"""
Admin Routes - Content management
Handles: Dashboard, blog posts, categories, tags, comment moderation, contact inbox
"""

from flask import request, redirect, url_for, flash, current_app, abort
from sqlalchemy import func, or_
from extensions import db
from models import BlogPost, BlogCategory, BlogTag, BlogComment, ContactMessage, blog_post_category, blog_post_tag
from utils.blog import escape_like
from utils.content import (
    get_or_404, save_post, delete_post, save_category, save_tag, delete_term, reorder_categories
)
from utils.decorators import admin_required
from utils.errors import ValidationError, NotFoundError, IntegrityGuardError
from utils.helpers import paginate_payload, utcnow
from utils.moderation import (
    set_comment_approval, toggle_comment_approval, delete_comment, bulk_approve_comments,
    bulk_delete_comments, toggle_post_publish, toggle_post_featured, set_message_read,
    toggle_message_read, set_message_replied, toggle_message_replied, delete_message,
    bulk_set_messages_read, bulk_delete_messages
)
from utils.presenters import (
    admin_post_row, admin_post_form, admin_post_preview, admin_category_row, admin_tag_row,
    admin_comment_row, message_row, message_detail, term_ref
)
from utils.ui_helpers import render_page, flash_errors, redirect_back
from . import admin_bp


def _load(model, identifier):
    try:
        return get_or_404(model, identifier)
    except NotFoundError:
        abort(404)


def _selected_ids():
    ids = request.form.getlist('ids') or request.form.getlist('ids[]')
    if not ids:
        payload = request.get_json(silent=True) or {}
        ids = payload.get('ids') or []
    return [str(i) for i in ids if i]


def _search_term():
    return (request.args.get('search') or '').strip()


def _taxonomy_options():
    categories = BlogCategory.query.order_by(BlogCategory.display_order.asc(), BlogCategory.name.asc()).all()
    tags = BlogTag.query.order_by(BlogTag.name.asc()).all()
    return (
        [dict(id=c.id, **term_ref(c)) for c in categories],
        [dict(id=t.id, **term_ref(t)) for t in tags],
    )


def _comment_counts(post_ids):
    if not post_ids:
        return {}
    rows = db.session.query(BlogComment.blog_post_id, func.count(BlogComment.id)).filter(
        BlogComment.blog_post_id.in_(post_ids)).group_by(BlogComment.blog_post_id).all()
    return dict(rows)


def _term_post_counts(association, column, published_only=False):
    """{term_id: posts_count} from an association table"""
    query = db.session.query(column, func.count(association.c.blog_post_id))
    if published_only:
        query = query.join(BlogPost, BlogPost.id == association.c.blog_post_id).filter(
            BlogPost.status == BlogPost.STATUS_PUBLISHED)
    return dict(query.group_by(column).all())


# ============================================================
# Dashboard
# ============================================================

@admin_bp.route('')
@admin_required
def dashboard():
    """Admin dashboard with content and moderation counts"""
    stats = {
        'posts_total': BlogPost.query.count(),
        'posts_published': BlogPost.query.filter_by(status=BlogPost.STATUS_PUBLISHED).count(),
        'posts_draft': BlogPost.query.filter_by(status=BlogPost.STATUS_DRAFT).count(),
        'comments_pending': BlogComment.query.filter_by(is_approved=False).count(),
        'messages_unread': ContactMessage.query.filter_by(is_read=False).count(),
    }
    recent_messages = ContactMessage.query.order_by(ContactMessage.created_at.desc()).limit(5).all()
    pending_comments = BlogComment.query.filter_by(is_approved=False).order_by(
        BlogComment.created_at.desc()).limit(5).all()
    now = utcnow()
    return render_page(
        'admin/Dashboard',
        stats=stats,
        recentMessages=[message_row(m, now) for m in recent_messages],
        pendingComments=[admin_comment_row(c, now) for c in pending_comments])


# ============================================================
# Blog posts
# ============================================================

@admin_bp.route('/blog/posts')
@admin_required
def posts():
    """Post list with status/category/search filters"""
    status = request.args.get('status', '').strip()
    category = request.args.get('category', '').strip()
    search = _search_term()

    query = BlogPost.query
    if status in BlogPost.STATUSES:
        query = query.filter(BlogPost.status == status)
    if category:
        query = query.filter(BlogPost.categories.any(BlogCategory.id == category))
    if search:
        pattern = f"%{escape_like(search)}%"
        query = query.filter(or_(BlogPost.title.ilike(pattern, escape='\\'),
                                 BlogPost.excerpt.ilike(pattern, escape='\\')))

    pagination = query.order_by(BlogPost.created_at.desc()).paginate(
        page=request.args.get('page', 1, type=int),
        per_page=current_app.config['ADMIN_POSTS_PER_PAGE'],
        error_out=False)
    counts = _comment_counts([p.id for p in pagination.items])
    categories, _ = _taxonomy_options()

    return render_page(
        'admin/blog/posts/Index',
        posts=paginate_payload(pagination, lambda p: admin_post_row(p, counts.get(p.id, 0))),
        categories=categories,
        statuses=BlogPost.STATUSES,
        filters={'status': status, 'category': category, 'search': search})


@admin_bp.route('/blog/posts/create')
@admin_required
def create_post():
    categories, tags = _taxonomy_options()
    return render_page('admin/blog/posts/Create', categories=categories, tags=tags,
                       statuses=BlogPost.STATUSES)


@admin_bp.route('/blog/posts', methods=['POST'])
@admin_required
def store_post():
    try:
        post = save_post(request.form, default_author=current_app.config['DEFAULT_AUTHOR_NAME'])
    except ValidationError as e:
        flash_errors(e.first_errors(), old_input=request.form.to_dict())
        return redirect(url_for('admin.create_post'))

    flash(f'Post "{post.title}" created successfully.', 'success')
    return redirect(url_for('admin.posts'))


@admin_bp.route('/blog/posts/<post_id>/edit')
@admin_required
def edit_post(post_id):
    post = _load(BlogPost, post_id)
    categories, tags = _taxonomy_options()
    return render_page('admin/blog/posts/Edit', post=admin_post_form(post),
                       categories=categories, tags=tags, statuses=BlogPost.STATUSES)


@admin_bp.route('/blog/posts/<post_id>', methods=['POST'])
@admin_required
def update_post(post_id):
    post = _load(BlogPost, post_id)
    try:
        save_post(request.form, post=post, default_author=current_app.config['DEFAULT_AUTHOR_NAME'])
    except ValidationError as e:
        db.session.rollback()
        flash_errors(e.first_errors(), old_input=request.form.to_dict())
        return redirect(url_for('admin.edit_post', post_id=post_id))

    flash('Post updated successfully.', 'success')
    return redirect(url_for('admin.posts'))


@admin_bp.route('/blog/posts/<post_id>/delete', methods=['POST'])
@admin_required
def destroy_post(post_id):
    delete_post(_load(BlogPost, post_id))
    flash('Post deleted successfully.', 'success')
    return redirect(url_for('admin.posts'))


@admin_bp.route('/blog/posts/<post_id>/preview')
@admin_required
def preview_post(post_id):
    """Preview regardless of status"""
    return render_page('admin/blog/posts/Preview', post=admin_post_preview(_load(BlogPost, post_id)))


@admin_bp.route('/blog/posts/<post_id>/toggle-publish', methods=['POST'])
@admin_required
def toggle_publish(post_id):
    post = toggle_post_publish(_load(BlogPost, post_id))
    flash(f'Post {"published" if post.status == BlogPost.STATUS_PUBLISHED else "unpublished"}.', 'success')
    return redirect_back('admin.posts')


@admin_bp.route('/blog/posts/<post_id>/toggle-featured', methods=['POST'])
@admin_required
def toggle_featured(post_id):
    post = toggle_post_featured(_load(BlogPost, post_id))
    flash(f'Post {"marked as featured" if post.is_featured else "removed from featured"}.', 'success')
    return redirect_back('admin.posts')


# ============================================================
# Categories
# ============================================================

@admin_bp.route('/blog/categories')
@admin_required
def categories():
    """Categories with published post counts"""
    counts = _term_post_counts(blog_post_category, blog_post_category.c.blog_category_id,
                               published_only=True)
    rows = BlogCategory.query.order_by(BlogCategory.display_order.asc(), BlogCategory.name.asc()).all()
    return render_page('admin/blog/categories/Index',
                       categories=[admin_category_row(c, counts.get(c.id, 0)) for c in rows])


@admin_bp.route('/blog/categories', methods=['POST'])
@admin_required
def store_category():
    try:
        category = save_category(request.form)
    except ValidationError as e:
        flash_errors(e.first_errors(), old_input=request.form.to_dict())
        return redirect(url_for('admin.categories'))

    flash(f'Category "{category.name}" created successfully.', 'success')
    return redirect(url_for('admin.categories'))


@admin_bp.route('/blog/categories/<category_id>', methods=['POST'])
@admin_required
def update_category(category_id):
    category = _load(BlogCategory, category_id)
    try:
        save_category(request.form, category=category)
    except ValidationError as e:
        db.session.rollback()
        flash_errors(e.first_errors(), old_input=request.form.to_dict())
        return redirect(url_for('admin.categories'))

    flash('Category updated successfully.', 'success')
    return redirect(url_for('admin.categories'))


@admin_bp.route('/blog/categories/<category_id>/delete', methods=['POST'])
@admin_required
def destroy_category(category_id):
    try:
        delete_term(_load(BlogCategory, category_id))
    except IntegrityGuardError as e:
        current_app.logger.warning(f"Category {category_id} not deleted: {e.blocking_count} post(s) attached")
        flash(str(e), 'error')
        return redirect(url_for('admin.categories'))

    flash('Category deleted successfully.', 'success')
    return redirect(url_for('admin.categories'))


@admin_bp.route('/blog/categories/reorder', methods=['POST'])
@admin_required
def reorder():
    """Apply display_order values: {"categories": [{"id": ..., "display_order": n}, ...]}"""
    payload = request.get_json(silent=True) or {}
    entries = payload.get('categories')
    if entries is None:
        ids = request.form.getlist('ids') or request.form.getlist('ids[]')
        entries = [{'id': cid, 'display_order': index} for index, cid in enumerate(ids)]

    try:
        changed = reorder_categories(entries)
    except ValidationError as e:
        flash_errors(e.first_errors())
        return redirect(url_for('admin.categories'))

    current_app.logger.info(f"Reordered {changed} categories")
    flash('Categories reordered successfully.', 'success')
    return redirect(url_for('admin.categories'))


# ============================================================
# Tags
# ============================================================

@admin_bp.route('/blog/tags')
@admin_required
def tags():
    counts = _term_post_counts(blog_post_tag, blog_post_tag.c.blog_tag_id)
    rows = BlogTag.query.order_by(BlogTag.display_order.asc(), BlogTag.name.asc()).all()
    return render_page('admin/blog/tags/Index',
                       tags=[admin_tag_row(t, counts.get(t.id, 0)) for t in rows])


@admin_bp.route('/blog/tags', methods=['POST'])
@admin_required
def store_tag():
    try:
        tag = save_tag(request.form)
    except ValidationError as e:
        flash_errors(e.first_errors(), old_input=request.form.to_dict())
        return redirect(url_for('admin.tags'))

    flash(f'Tag "{tag.name}" created successfully.', 'success')
    return redirect(url_for('admin.tags'))


@admin_bp.route('/blog/tags/<tag_id>', methods=['POST'])
@admin_required
def update_tag(tag_id):
    tag = _load(BlogTag, tag_id)
    try:
        save_tag(request.form, tag=tag)
    except ValidationError as e:
        db.session.rollback()
        flash_errors(e.first_errors(), old_input=request.form.to_dict())
        return redirect(url_for('admin.tags'))

    flash('Tag updated successfully.', 'success')
    return redirect(url_for('admin.tags'))


@admin_bp.route('/blog/tags/<tag_id>/delete', methods=['POST'])
@admin_required
def destroy_tag(tag_id):
    try:
        delete_term(_load(BlogTag, tag_id))
    except IntegrityGuardError as e:
        current_app.logger.warning(f"Tag {tag_id} not deleted: {e.blocking_count} post(s) attached")
        flash(str(e), 'error')
        return redirect(url_for('admin.tags'))

    flash('Tag deleted successfully.', 'success')
    return redirect(url_for('admin.tags'))


# ============================================================
# Comment moderation
# ============================================================

@admin_bp.route('/blog/comments')
@admin_required
def comments():
    """Moderation queue: status approved/pending, search on name/email/body"""
    status = request.args.get('status', '').strip()
    search = _search_term()

    query = BlogComment.query
    if status == 'approved':
        query = query.filter(BlogComment.is_approved.is_(True))
    elif status == 'pending':
        query = query.filter(BlogComment.is_approved.is_(False))
    if search:
        pattern = f"%{escape_like(search)}%"
        query = query.filter(or_(
            BlogComment.user_name.ilike(pattern, escape='\\'),
            BlogComment.user_email.ilike(pattern, escape='\\'),
            BlogComment.comment_body.ilike(pattern, escape='\\'),
        ))

    pagination = query.order_by(BlogComment.created_at.desc()).paginate(
        page=request.args.get('page', 1, type=int),
        per_page=current_app.config['ADMIN_PER_PAGE'],
        error_out=False)
    now = utcnow()
    counts = {
        'pending': BlogComment.query.filter_by(is_approved=False).count(),
        'approved': BlogComment.query.filter_by(is_approved=True).count(),
        'total': BlogComment.query.count(),
    }

    return render_page(
        'admin/blog/comments/Index',
        comments=paginate_payload(pagination, lambda c: admin_comment_row(c, now)),
        counts=counts,
        filters={'status': status, 'search': search})


@admin_bp.route('/blog/comments/<comment_id>/approve', methods=['POST'])
@admin_required
def approve_comment(comment_id):
    set_comment_approval(_load(BlogComment, comment_id), True)
    flash('Comment approved successfully.', 'success')
    return redirect_back('admin.comments')


@admin_bp.route('/blog/comments/<comment_id>/unapprove', methods=['POST'])
@admin_required
def unapprove_comment(comment_id):
    set_comment_approval(_load(BlogComment, comment_id), False)
    flash('Comment unapproved.', 'success')
    return redirect_back('admin.comments')


@admin_bp.route('/blog/comments/<comment_id>/toggle', methods=['POST'])
@admin_required
def toggle_comment(comment_id):
    comment = toggle_comment_approval(_load(BlogComment, comment_id))
    flash(f'Comment {"approved" if comment.is_approved else "unapproved"}.', 'success')
    return redirect_back('admin.comments')


@admin_bp.route('/blog/comments/<comment_id>/delete', methods=['POST'])
@admin_required
def destroy_comment(comment_id):
    delete_comment(_load(BlogComment, comment_id))
    flash('Comment deleted successfully.', 'success')
    return redirect_back('admin.comments')


@admin_bp.route('/blog/comments/bulk-approve', methods=['POST'])
@admin_required
def bulk_approve():
    count = bulk_approve_comments(_selected_ids())
    flash(f'{count} comment(s) approved.', 'success')
    return redirect_back('admin.comments')


@admin_bp.route('/blog/comments/bulk-delete', methods=['POST'])
@admin_required
def bulk_delete():
    count = bulk_delete_comments(_selected_ids())
    flash(f'{count} comment(s) deleted.', 'success')
    return redirect_back('admin.comments')


# ============================================================
# Contact inbox
# ============================================================

INBOX_FILTERS = {
    'unread': ContactMessage.is_read.is_(False),
    'read': ContactMessage.is_read.is_(True),
    'replied': ContactMessage.is_replied.is_(True),
    'unreplied': ContactMessage.is_replied.is_(False),
}


@admin_bp.route('/inbox')
@admin_required
def inbox():
    """Contact messages with read/replied filters and search"""
    status = request.args.get('status', '').strip()
    search = _search_term()

    query = ContactMessage.query
    if status in INBOX_FILTERS:
        query = query.filter(INBOX_FILTERS[status])
    if search:
        pattern = f"%{escape_like(search)}%"
        query = query.filter(or_(
            ContactMessage.name.ilike(pattern, escape='\\'),
            ContactMessage.email.ilike(pattern, escape='\\'),
            ContactMessage.subject.ilike(pattern, escape='\\'),
            ContactMessage.message.ilike(pattern, escape='\\'),
        ))

    pagination = query.order_by(ContactMessage.created_at.desc()).paginate(
        page=request.args.get('page', 1, type=int),
        per_page=current_app.config['ADMIN_PER_PAGE'],
        error_out=False)
    now = utcnow()
    counts = {
        'total': ContactMessage.query.count(),
        'unread': ContactMessage.query.filter_by(is_read=False).count(),
        'replied': ContactMessage.query.filter_by(is_replied=True).count(),
    }

    return render_page(
        'admin/inbox/Index',
        messages=paginate_payload(pagination, lambda m: message_row(m, now)),
        counts=counts,
        filters={'status': status, 'search': search})


@admin_bp.route('/inbox/<message_id>')
@admin_required
def show_message(message_id):
    """Opening a message marks it read"""
    message = _load(ContactMessage, message_id)
    if not message.is_read:
        set_message_read(message, True)
    return render_page('admin/inbox/Show', message=message_detail(message, utcnow()))


@admin_bp.route('/inbox/<message_id>/read', methods=['POST'])
@admin_required
def mark_read(message_id):
    set_message_read(_load(ContactMessage, message_id), True)
    flash('Message marked as read.', 'success')
    return redirect_back('admin.inbox')


@admin_bp.route('/inbox/<message_id>/unread', methods=['POST'])
@admin_required
def mark_unread(message_id):
    set_message_read(_load(ContactMessage, message_id), False)
    flash('Message marked as unread.', 'success')
    return redirect_back('admin.inbox')


@admin_bp.route('/inbox/<message_id>/toggle-read', methods=['POST'])
@admin_required
def toggle_read(message_id):
    message = toggle_message_read(_load(ContactMessage, message_id))
    flash(f'Message marked as {"read" if message.is_read else "unread"}.', 'success')
    return redirect_back('admin.inbox')


@admin_bp.route('/inbox/<message_id>/replied', methods=['POST'])
@admin_required
def mark_replied(message_id):
    set_message_replied(_load(ContactMessage, message_id), True)
    flash('Message marked as replied.', 'success')
    return redirect_back('admin.inbox')


@admin_bp.route('/inbox/<message_id>/toggle-replied', methods=['POST'])
@admin_required
def toggle_replied(message_id):
    message = toggle_message_replied(_load(ContactMessage, message_id))
    flash(f'Message marked as {"replied" if message.is_replied else "not replied"}.', 'success')
    return redirect_back('admin.inbox')


@admin_bp.route('/inbox/<message_id>/delete', methods=['POST'])
@admin_required
def destroy_message(message_id):
    delete_message(_load(ContactMessage, message_id))
    flash('Message deleted successfully.', 'success')
    return redirect(url_for('admin.inbox'))


@admin_bp.route('/inbox/bulk-delete', methods=['POST'])
@admin_required
def bulk_delete_inbox():
    count = bulk_delete_messages(_selected_ids())
    flash(f'{count} message(s) deleted.', 'success')
    return redirect_back('admin.inbox')


@admin_bp.route('/inbox/bulk-read', methods=['POST'])
@admin_required
def bulk_read():
    count = bulk_set_messages_read(_selected_ids(), True)
    flash(f'{count} message(s) marked as read.', 'success')
    return redirect_back('admin.inbox')


@admin_bp.route('/inbox/bulk-unread', methods=['POST'])
@admin_required
def bulk_unread():
    count = bulk_set_messages_read(_selected_ids(), False)
    flash(f'{count} message(s) marked as unread.', 'success')
    return redirect_back('admin.inbox')
