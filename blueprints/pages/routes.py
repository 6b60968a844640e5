"""
Pages Routes - Public portfolio pages
"""

from flask import abort, current_app
from models import Profile, SkillCategory, Experience, Project, ProjectType, Service
from utils.blog import PublicationQuery
from utils.presenters import (
    profile_payload, skill_category_payload, experience_payload, project_card,
    project_detail, project_type_payload, service_payload, related_card
)
from utils.ui_helpers import render_page
from . import pages_bp


def _active_profile():
    return Profile.query.filter_by(is_active=True).first()


def _active_projects():
    return Project.query.filter_by(is_active=True).order_by(
        Project.display_order.asc(), Project.created_at.desc())


def _active_services():
    return Service.query.filter_by(is_active=True).order_by(
        Service.display_order.asc(), Service.created_at.desc())


@pages_bp.route('/')
def index():
    """Landing page - profile, featured work and latest writing"""
    query = PublicationQuery.from_config(current_app.config)
    latest_posts = query.latest_first(query.published()).limit(3).all()
    return render_page(
        'Home',
        profile=profile_payload(_active_profile()),
        featuredProjects=[project_card(p) for p in _active_projects().filter_by(is_featured=True).limit(6)],
        featuredServices=[service_payload(s) for s in _active_services().filter_by(is_featured=True).limit(3)],
        latestPosts=[related_card(p) for p in latest_posts])


@pages_bp.route('/about')
def about():
    """About page - profile, skills and experience timeline"""
    categories = SkillCategory.query.filter_by(is_active=True).order_by(
        SkillCategory.display_order.asc(), SkillCategory.name.asc()).all()
    experiences = Experience.query.filter_by(is_active=True).order_by(
        Experience.display_order.asc(), Experience.start_date.desc()).all()
    return render_page(
        'About',
        profile=profile_payload(_active_profile()),
        skillCategories=[skill_category_payload(c) for c in categories],
        experiences=[experience_payload(e) for e in experiences])


@pages_bp.route('/projects')
def projects():
    """Projects listing"""
    cards = [project_card(p) for p in _active_projects().all()]
    project_types = ProjectType.query.filter_by(is_active=True).order_by(
        ProjectType.display_order.asc(), ProjectType.name.asc()).all()
    return render_page(
        'Projects',
        projects=cards,
        featuredProjects=[c for c in cards if c['is_featured']],
        projectTypes=[project_type_payload(t) for t in project_types])


@pages_bp.route('/projects/<slug>')
def project_show(slug):
    """Project detail with up to three related projects of the same type"""
    project = Project.query.filter_by(slug=slug, is_active=True).first()
    if not project:
        abort(404)

    related = _active_projects().filter(
        Project.id != project.id,
        Project.project_type_id == project.project_type_id,
    ).limit(3).all() if project.project_type_id else []

    return render_page(
        'ProjectShow',
        project=project_detail(project),
        relatedProjects=[project_card(p) for p in related])


@pages_bp.route('/services')
def services():
    """Services listing, split featured/regular and grouped by type"""
    payloads = [service_payload(s) for s in _active_services().all()]
    by_type = {}
    for payload in payloads:
        by_type.setdefault(payload['service_type'] or 'other', []).append(payload)
    return render_page(
        'Services',
        featuredServices=[s for s in payloads if s['is_featured']],
        regularServices=[s for s in payloads if not s['is_featured']],
        servicesByType=by_type,
        allServices=payloads)


@pages_bp.route('/services/<slug>')
def service_show(slug):
    """Service detail with up to three related services of the same type"""
    service = Service.query.filter_by(slug=slug, is_active=True).first()
    if not service:
        abort(404)

    related = _active_services().filter(
        Service.id != service.id,
        Service.service_type == service.service_type,
    ).limit(3).all()

    return render_page(
        'ServiceShow',
        service=service_payload(service),
        relatedServices=[service_payload(s) for s in related])
