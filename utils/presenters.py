"""
Presenters Module - Shape stored entities into page payloads
Pure functions: no queries beyond already-loaded relationships, no writes.
"""

from urllib.parse import quote
from .badges import get_status_info, service_type_label, pricing_model_label
from .helpers import (
    format_date, time_ago, storage_url, strip_tags, limit_text, sanitize_about, utcnow
)


def term_ref(term):
    return {'name': term.name, 'slug': term.slug}


def reading_time_text(post):
    return f"{post.reading_time or 1} min read"


def post_url(post, app_url):
    return f"{app_url.rstrip('/')}/blog/{post.slug}"


def share_links(post, app_url):
    """Absolute post URL plus ready-made share links"""
    url = post_url(post, app_url)
    encoded = quote(url, safe='')
    return {
        'url': url,
        'twitter_share_url': f"https://twitter.com/intent/tweet?url={encoded}&text={quote(post.title, safe='')}",
        'linkedin_share_url': f"https://www.linkedin.com/sharing/share-offsite/?url={encoded}",
        'facebook_share_url': f"https://www.facebook.com/sharer/sharer.php?u={encoded}",
    }


def meta_title(post):
    return post.meta_title or post.title


def meta_description(post):
    return post.meta_description or post.excerpt or limit_text(strip_tags(post.content), 160)


def post_card(post, include_tags=True):
    card = {
        'id': post.id,
        'title': post.title,
        'slug': post.slug,
        'excerpt': post.excerpt,
        'cover_url': storage_url(post.cover_image),
        'author_name': post.author_name,
        'reading_time_text': reading_time_text(post),
        'formatted_date': format_date(post.published_at, default='Not published'),
        'categories': [term_ref(c) for c in post.categories],
    }
    if include_tags:
        card['tags'] = [term_ref(t) for t in post.tags]
    return card


def related_card(post):
    return {
        'id': post.id,
        'title': post.title,
        'slug': post.slug,
        'excerpt': post.excerpt,
        'cover_url': storage_url(post.cover_image),
        'reading_time_text': reading_time_text(post),
        'formatted_date': format_date(post.published_at, default='Not published'),
    }


def public_comment(comment, now=None):
    return {
        'id': comment.id,
        'user_name': comment.user_name,
        'comment_body': comment.comment_body,
        'time_ago': time_ago(comment.created_at, now),
        'formatted_date': format_date(comment.created_at),
    }


def post_detail(post, app_url, now=None):
    """Public detail payload; only approved comments are exposed"""
    now = now or utcnow()
    comments = [public_comment(c, now) for c in post.comments if c.is_approved]
    payload = {
        'id': post.id,
        'title': post.title,
        'slug': post.slug,
        'excerpt': post.excerpt,
        'content': post.content,
        'cover_url': storage_url(post.cover_image),
        'author_name': post.author_name,
        'reading_time_text': reading_time_text(post),
        'formatted_date': format_date(post.published_at, default='Not published'),
        'views_count': post.views_count,
        'categories': [term_ref(c) for c in post.categories],
        'tags': [term_ref(t) for t in post.tags],
        'comments': comments,
        'comments_count': len(comments),
        'meta_title': meta_title(post),
        'meta_description': meta_description(post),
    }
    payload.update(share_links(post, app_url))
    return payload


def term_summary(term, posts_count):
    return {'name': term.name, 'slug': term.slug, 'posts_count': posts_count}


# Admin payloads

def admin_post_row(post, comments_count=0):
    return {
        'id': post.id,
        'title': post.title,
        'slug': post.slug,
        'excerpt': post.excerpt,
        'cover_url': storage_url(post.cover_image),
        'author_name': post.author_name,
        'reading_time': post.reading_time,
        'status': post.status,
        'is_featured': post.is_featured,
        'views_count': post.views_count,
        'published_at': format_date(post.published_at, '%Y-%m-%d %H:%M', None),
        'formatted_date': format_date(post.published_at, default='Not published'),
        'categories': [dict(id=c.id, **term_ref(c)) for c in post.categories],
        'tags': [dict(id=t.id, **term_ref(t)) for t in post.tags],
        'comments_count': comments_count,
        'created_at': format_date(post.created_at, '%Y-%m-%d %H:%M'),
    }


def admin_post_form(post):
    return {
        'id': post.id,
        'title': post.title,
        'slug': post.slug,
        'excerpt': post.excerpt,
        'content': post.content,
        'cover_image': post.cover_image,
        'cover_url': storage_url(post.cover_image),
        'author_name': post.author_name,
        'reading_time': post.reading_time,
        'status': post.status,
        'published_at': format_date(post.published_at, '%Y-%m-%dT%H:%M', None),
        'is_featured': post.is_featured,
        'meta_title': post.meta_title,
        'meta_description': post.meta_description,
        'category_ids': [c.id for c in post.categories],
        'tag_ids': [t.id for t in post.tags],
    }


def admin_post_preview(post):
    return {
        'id': post.id,
        'title': post.title,
        'slug': post.slug,
        'excerpt': post.excerpt,
        'content': post.content,
        'cover_url': storage_url(post.cover_image),
        'author_name': post.author_name,
        'reading_time_text': reading_time_text(post),
        'formatted_date': format_date(post.published_at, default='Not published'),
        'status': post.status,
        'categories': [term_ref(c) for c in post.categories],
        'tags': [term_ref(t) for t in post.tags],
    }


def admin_category_row(category, posts_count):
    return {
        'id': category.id,
        'name': category.name,
        'slug': category.slug,
        'description': category.description,
        'display_order': category.display_order,
        'posts_count': posts_count,
        'created_at': format_date(category.created_at, '%Y-%m-%d'),
    }


def admin_tag_row(tag, posts_count):
    return {
        'id': tag.id,
        'name': tag.name,
        'slug': tag.slug,
        'display_order': tag.display_order,
        'posts_count': posts_count,
        'created_at': format_date(tag.created_at, '%Y-%m-%d'),
    }


def admin_comment_row(comment, now=None):
    post = comment.post
    return {
        'id': comment.id,
        'user_name': comment.user_name,
        'user_email': comment.user_email,
        'comment_body': comment.comment_body,
        'is_approved': comment.is_approved,
        'ip_address': comment.ip_address,
        'post': {'id': post.id, 'title': post.title, 'slug': post.slug} if post else None,
        'time_ago': time_ago(comment.created_at, now),
        'created_at': format_date(comment.created_at, '%Y-%m-%d %H:%M'),
    }


def message_row(message, now=None):
    return {
        'id': message.id,
        'name': message.name,
        'email': message.email,
        'subject': message.subject,
        'preview': limit_text(message.message, 100),
        'is_read': message.is_read,
        'is_replied': message.is_replied,
        'formatted_date': time_ago(message.created_at, now),
        'created_at': format_date(message.created_at, '%Y-%m-%d %H:%M'),
    }


def message_detail(message, now=None):
    return {
        'id': message.id,
        'name': message.name,
        'email': message.email,
        'subject': message.subject,
        'message': message.message,
        'is_read': message.is_read,
        'is_replied': message.is_replied,
        'ip_address': message.ip_address,
        'user_agent': message.user_agent,
        'formatted_date': time_ago(message.created_at, now),
        'created_at': message.created_at.strftime('%B %d, %Y at %I:%M %p') if message.created_at else '',
    }


# Portfolio payloads

def profile_payload(profile):
    if profile is None:
        return None
    return {
        'fullName': profile.full_name,
        'title': profile.title,
        'subtitle': profile.subtitle,
        'shortBio': profile.short_bio,
        'longBio': sanitize_about(profile.long_bio),
        'profileImage': storage_url(profile.profile_image),
        'company': profile.company,
        'location': profile.location,
        'yearsOfExperience': profile.years_of_experience,
        'university': profile.university,
        'cgpa': profile.cgpa,
        'academicHighlight': profile.academic_highlight,
        'resumeUrl': profile.resume_url,
        'email': profile.email,
        'phone': profile.phone,
        'socialLinks': profile.social_links or {},
        'status': profile.status,
    }


def skill_category_payload(category):
    return {
        'id': category.id,
        'name': category.name,
        'slug': category.slug,
        'description': category.description,
        'icon': category.icon,
        'color': category.color,
        'skills': [{
            'id': skill.id,
            'name': skill.name,
            'icon': skill.icon,
            'tag': skill.tag,
            'description': skill.description,
            'isFeatured': skill.is_featured,
        } for skill in category.skills if skill.is_active],
    }


def experience_date_range(experience):
    start = format_date(experience.start_date, '%b %Y')
    end = 'Present' if experience.is_current else format_date(experience.end_date, '%b %Y')
    return f"{start} - {end}"


def experience_payload(experience):
    return {
        'id': experience.id,
        'title': experience.title,
        'company': experience.company,
        'location': experience.location,
        'type': experience.type,
        'year': format_date(experience.start_date, '%Y'),
        'dateRange': experience_date_range(experience),
        'isCurrent': experience.is_current,
        'description': experience.description,
        'highlights': experience.highlights or [],
    }


def _project_type_fields(project):
    project_type = project.project_type
    return {
        'project_type_id': project.project_type_id,
        'project_type_slug': project_type.slug if project_type else 'unknown',
        'project_type_label': project_type.name if project_type else 'Unknown',
        'project_type_color': (project_type.color if project_type else None) or 'cyan',
    }


def project_card(project):
    status = get_status_info(project.status)
    card = {
        'id': project.id,
        'title': project.title,
        'slug': project.slug,
        'short_description': project.short_description,
        'tech_stack': project.tech_stack or [],
        'tags': project.tags or [],
        'thumbnail_url': storage_url(project.thumbnail_image),
        'github_url': project.github_url,
        'live_url': project.live_url,
        'paper_url': project.paper_url,
        'is_featured': project.is_featured,
        'status': project.status,
        'status_label': status['label'],
        'status_color': status['color'],
    }
    card.update(_project_type_fields(project))
    return card


def project_detail(project):
    payload = project_card(project)
    payload.update({
        'detailed_description': project.detailed_description,
        'cover_url': storage_url(project.cover_image),
        'dataset_used': project.dataset_used,
        'role': project.role,
    })
    return payload


def project_type_payload(project_type):
    return {
        'id': project_type.id,
        'name': project_type.name,
        'slug': project_type.slug,
        'color': project_type.color,
    }


def service_payload(service):
    return {
        'id': service.id,
        'title': service.title,
        'slug': service.slug,
        'short_description': service.short_description,
        'detailed_description': service.detailed_description,
        'service_type': service.service_type,
        'service_type_label': service_type_label(service.service_type),
        'pricing_model': service.pricing_model,
        'pricing_model_label': pricing_model_label(service.pricing_model),
        'price_label': service.price_label,
        'duration': service.duration,
        'icon': service.icon,
        'is_featured': service.is_featured,
        'features': [f.feature_text for f in service.features],
    }


__all__ = [
    'term_ref',
    'share_links',
    'meta_description',
    'post_card',
    'related_card',
    'public_comment',
    'post_detail',
    'term_summary',
    'admin_post_row',
    'admin_post_form',
    'admin_post_preview',
    'admin_category_row',
    'admin_tag_row',
    'admin_comment_row',
    'message_row',
    'message_detail',
    'profile_payload',
    'skill_category_payload',
    'experience_payload',
    'project_card',
    'project_detail',
    'project_type_payload',
    'service_payload'
]
