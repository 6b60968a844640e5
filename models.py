from extensions import db
from flask_login import UserMixin
from sqlalchemy import JSON
from utils.helpers import utcnow
import uuid

# Custom JSON type that uses JSONB on PostgreSQL and JSON/Text on SQLite
class SafeJSON(db.TypeDecorator):
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            from sqlalchemy.dialects.postgresql import JSONB
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


def _uuid():
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(50), default='user')
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_admin(self):
        return self.role == 'admin'


# Blog taxonomy association tables
blog_post_category = db.Table(
    'blog_post_category',
    db.Column('blog_post_id', db.String(36),
              db.ForeignKey('blog_posts.id', ondelete='CASCADE'), primary_key=True),
    db.Column('blog_category_id', db.String(36),
              db.ForeignKey('blog_categories.id', ondelete='CASCADE'), primary_key=True),
)

blog_post_tag = db.Table(
    'blog_post_tag',
    db.Column('blog_post_id', db.String(36),
              db.ForeignKey('blog_posts.id', ondelete='CASCADE'), primary_key=True),
    db.Column('blog_tag_id', db.String(36),
              db.ForeignKey('blog_tags.id', ondelete='CASCADE'), primary_key=True),
)


class BlogPost(db.Model):
    __tablename__ = 'blog_posts'

    STATUS_DRAFT = 'draft'
    STATUS_PUBLISHED = 'published'
    STATUSES = {
        'draft': 'Draft',
        'published': 'Published',
    }

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.Text)
    content = db.Column(db.Text, nullable=False)
    cover_image = db.Column(db.String(500))
    author_name = db.Column(db.String(255), nullable=False)
    reading_time = db.Column(db.Integer, default=1)
    status = db.Column(db.String(20), default=STATUS_DRAFT, nullable=False)
    published_at = db.Column(db.DateTime)
    is_featured = db.Column(db.Boolean, default=False, nullable=False)
    views_count = db.Column(db.Integer, default=0, nullable=False)
    meta_title = db.Column(db.String(255))
    meta_description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    categories = db.relationship('BlogCategory', secondary=blog_post_category,
                                 back_populates='posts', lazy='select')
    tags = db.relationship('BlogTag', secondary=blog_post_tag,
                           back_populates='posts', lazy='select')
    comments = db.relationship('BlogComment', back_populates='post', lazy='select',
                               cascade='all, delete-orphan',
                               order_by='BlogComment.created_at')

    __table_args__ = (
        db.Index('idx_blog_posts_status_published', 'status', 'published_at'),
    )


class BlogCategory(db.Model):
    __tablename__ = 'blog_categories'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    description = db.Column(db.Text)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    posts = db.relationship('BlogPost', secondary=blog_post_category,
                            back_populates='categories', lazy='select')


class BlogTag(db.Model):
    __tablename__ = 'blog_tags'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    posts = db.relationship('BlogPost', secondary=blog_post_tag,
                            back_populates='tags', lazy='select')


class BlogComment(db.Model):
    __tablename__ = 'blog_comments'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    blog_post_id = db.Column(db.String(36),
                             db.ForeignKey('blog_posts.id', ondelete='CASCADE'),
                             nullable=False)
    user_name = db.Column(db.String(255), nullable=False)
    user_email = db.Column(db.String(255), nullable=False)
    comment_body = db.Column(db.Text, nullable=False)
    is_approved = db.Column(db.Boolean, default=False, nullable=False)
    # Captured once at submission for abuse audits, never updated
    ip_address = db.Column(db.String(45))
    user_agent = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    post = db.relationship('BlogPost', back_populates='comments')

    __table_args__ = (
        db.Index('idx_blog_comments_ip_created', 'ip_address', 'created_at'),
    )


class ContactMessage(db.Model):
    __tablename__ = 'contact_messages'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, default=False, nullable=False)
    is_replied = db.Column(db.Boolean, default=False, nullable=False)
    ip_address = db.Column(db.String(45))
    user_agent = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)


# Portfolio content (About / Projects / Services pages)

class Profile(db.Model):
    __tablename__ = 'about_profiles'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    full_name = db.Column(db.String(255), nullable=False)
    title = db.Column(db.String(255))
    subtitle = db.Column(db.String(255))
    short_bio = db.Column(db.Text)
    long_bio = db.Column(db.Text)
    profile_image = db.Column(db.String(500))
    company = db.Column(db.String(255))
    location = db.Column(db.String(255))
    years_of_experience = db.Column(db.Integer)
    university = db.Column(db.String(255))
    cgpa = db.Column(db.String(20))
    academic_highlight = db.Column(db.String(255))
    resume_url = db.Column(db.String(500))
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    social_links = db.Column(SafeJSON, default=dict)  # {github, linkedin, twitter, ...}
    status = db.Column(db.String(100))  # e.g. "Open to work"
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)


class SkillCategory(db.Model):
    __tablename__ = 'skill_categories'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text)
    icon = db.Column(db.String(100))
    color = db.Column(db.String(50))
    display_order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    skills = db.relationship('Skill', backref='category', lazy=True,
                             cascade='all, delete-orphan', order_by='Skill.display_order')


class Skill(db.Model):
    __tablename__ = 'skills'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    skill_category_id = db.Column(db.String(36), db.ForeignKey('skill_categories.id'), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    icon = db.Column(db.String(100))
    tag = db.Column(db.String(50))  # Primary, Expert, ...
    description = db.Column(db.Text)
    display_order = db.Column(db.Integer, default=0)
    is_featured = db.Column(db.Boolean, default=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)


class Experience(db.Model):
    __tablename__ = 'experiences'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(255), nullable=False)
    company = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(255))
    type = db.Column(db.String(50))  # full-time, internship, research, ...
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)
    is_current = db.Column(db.Boolean, default=False)
    description = db.Column(db.Text)
    highlights = db.Column(SafeJSON, default=list)
    display_order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)


class ProjectType(db.Model):
    __tablename__ = 'project_types'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    color = db.Column(db.String(50), default='cyan')
    icon = db.Column(db.String(100))
    description = db.Column(db.Text)
    display_order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    projects = db.relationship('Project', backref='project_type', lazy=True)


class Project(db.Model):
    __tablename__ = 'projects'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    project_type_id = db.Column(db.String(36), db.ForeignKey('project_types.id'))
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    short_description = db.Column(db.Text)
    detailed_description = db.Column(db.Text)
    tech_stack = db.Column(SafeJSON, default=list)
    tags = db.Column(SafeJSON, default=list)
    thumbnail_image = db.Column(db.String(500))
    cover_image = db.Column(db.String(500))
    github_url = db.Column(db.String(500))
    live_url = db.Column(db.String(500))
    paper_url = db.Column(db.String(500))
    dataset_used = db.Column(db.String(255))
    role = db.Column(db.String(255))
    status = db.Column(db.String(50), default='completed')  # completed, ongoing
    is_featured = db.Column(db.Boolean, default=False)
    display_order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)


class Service(db.Model):
    __tablename__ = 'services'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    short_description = db.Column(db.Text)
    detailed_description = db.Column(db.Text)
    service_type = db.Column(db.String(50))  # consulting, development, research, ...
    pricing_model = db.Column(db.String(50))  # hourly, project, retainer, custom
    price_label = db.Column(db.String(100))
    duration = db.Column(db.String(100))
    icon = db.Column(db.String(100))
    is_featured = db.Column(db.Boolean, default=False)
    display_order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    features = db.relationship('ServiceFeature', backref='service', lazy=True,
                               cascade='all, delete-orphan',
                               order_by='ServiceFeature.display_order')


class ServiceFeature(db.Model):
    __tablename__ = 'service_features'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    service_id = db.Column(db.String(36), db.ForeignKey('services.id'), nullable=False)
    feature_text = db.Column(db.String(500), nullable=False)
    display_order = db.Column(db.Integer, default=0)
