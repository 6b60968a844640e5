import pytest
from werkzeug.datastructures import MultiDict

from models import BlogCategory, BlogPost, BlogTag
from utils.content import save_category, save_post, save_tag
from utils.errors import ValidationError
from utils.slugs import slugify, unique_slug


def test_slugify_normalizes_titles():
    assert slugify("My First Post!") == "my-first-post"
    assert slugify("  Flask & SQLAlchemy  ") == "flask-and-sqlalchemy"
    assert slugify("Café déjà vu") == "cafe-deja-vu"
    assert slugify("snake_case   words") == "snake-case-words"
    assert slugify("!!!") == ""


def test_unique_slug_appends_numeric_suffix(app, make_post):
    make_post(title="Hello", slug="hello")
    assert unique_slug(BlogPost, "Hello") == "hello-2"

    make_post(title="Hello again", slug="hello-2")
    assert unique_slug(BlogPost, "Hello") == "hello-3"


def test_unique_slug_ignores_row_being_edited(app, make_post):
    post = make_post(title="Hello", slug="hello")
    assert unique_slug(BlogPost, "Hello", exclude_id=post.id) == "hello"


def test_unique_slug_falls_back_when_source_has_no_letters(app):
    assert unique_slug(BlogTag, "???", fallback="tag") == "tag"


def test_save_post_derives_slug_and_reading_time(app):
    content = "<p>" + " ".join(["word"] * 401) + "</p>"
    post = save_post(MultiDict({"title": "Building a Blog", "content": content, "status": "draft"}))

    assert post.slug == "building-a-blog"
    assert post.reading_time == 3
    assert post.author_name == "Site Owner"
    assert post.published_at is None


def test_save_post_collision_gets_suffix(app):
    save_post(MultiDict({"title": "Same Title", "content": "Body text", "status": "draft"}))
    second = save_post(MultiDict({"title": "Same Title", "content": "Other body", "status": "draft"}))
    assert second.slug == "same-title-2"


def test_explicit_duplicate_slug_is_rejected(app, make_post):
    make_post(slug="taken")
    with pytest.raises(ValidationError) as excinfo:
        save_post(MultiDict({"title": "New", "slug": "taken", "content": "Body", "status": "draft"}))
    assert "slug" in excinfo.value.errors
    assert BlogPost.query.count() == 1


def test_explicit_slug_is_normalized(app, client):
    post = save_post(MultiDict({"title": "Series", "slug": "Hello World/part 2",
                                "content": "Body", "status": "published"}))

    assert post.slug == "hello-worldpart-2"
    assert client.get("/blog/hello-worldpart-2").status_code == 200


def test_explicit_slug_collision_is_checked_after_normalizing(app, make_post):
    make_post(slug="taken-slug")
    with pytest.raises(ValidationError) as excinfo:
        save_post(MultiDict({"title": "New", "slug": "Taken Slug", "content": "Body", "status": "draft"}))
    assert "slug" in excinfo.value.errors


def test_explicit_slug_without_letters_is_rejected(app):
    with pytest.raises(ValidationError) as excinfo:
        save_category(MultiDict({"name": "Misc", "slug": "///"}))
    assert "slug" in excinfo.value.errors
    assert BlogCategory.query.count() == 0


def test_update_keeps_slug_when_title_changes(app):
    post = save_post(MultiDict({"title": "Original", "content": "Body", "status": "draft"}))
    save_post(MultiDict({"title": "Renamed", "content": "Body", "status": "draft"}), post=post)
    assert post.slug == "original"
    assert post.title == "Renamed"


def test_publishing_without_timestamp_stamps_now(app):
    post = save_post(MultiDict({"title": "Live", "content": "Body", "status": "published"}))
    assert post.published_at is not None


def test_reading_time_recomputed_only_when_content_changes(app):
    post = save_post(MultiDict({"title": "Timed", "content": "short", "status": "draft", "reading_time": "7"}))
    assert post.reading_time == 7

    save_post(MultiDict({"title": "Timed", "content": "short", "status": "draft"}), post=post)
    assert post.reading_time == 7

    save_post(MultiDict({"title": "Timed", "content": "now different", "status": "draft"}), post=post)
    assert post.reading_time == 1


def test_category_and_tag_slugs(app):
    save_category(MultiDict({"name": "Machine Learning"}))
    category = save_category(MultiDict({"name": "Machine Learning"}))
    tag = save_tag(MultiDict({"name": "Deep Dive"}))

    assert category.slug == "machine-learning-2"
    assert tag.slug == "deep-dive"
    assert BlogCategory.query.count() == 2
