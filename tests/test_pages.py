from datetime import date

import pytest
from flask import flash

from extensions import db
from models import (
    Experience,
    Profile,
    Project,
    ProjectType,
    Service,
    ServiceFeature,
    Skill,
    SkillCategory,
)
from utils.ui_helpers import collect_flash


@pytest.fixture
def portfolio(app):
    profile = Profile(full_name="Jane Doe", title="ML Engineer", long_bio="Line one\n\nLine two",
                      social_links={"github": "https://github.com/jane"})
    retired = Profile(full_name="Old Me", is_active=False)

    languages = SkillCategory(name="Languages", slug="languages", display_order=1)
    languages.skills = [
        Skill(name="Python", display_order=1),
        Skill(name="COBOL", display_order=2, is_active=False),
    ]
    hidden_category = SkillCategory(name="Hidden", slug="hidden", is_active=False)

    current_job = Experience(title="Engineer", company="Acme", start_date=date(2022, 3, 1),
                             is_current=True, display_order=1, highlights=["Shipped things"])
    past_job = Experience(title="Intern", company="Initech", start_date=date(2020, 6, 1),
                          end_date=date(2020, 9, 1), display_order=2)

    ml = ProjectType(name="Machine Learning", slug="machine-learning", color="purple")
    web = ProjectType(name="Web", slug="web")
    projects = [
        Project(title="Vision", slug="vision", project_type=ml, is_featured=True, display_order=1,
                tech_stack=["PyTorch"], status="completed"),
        Project(title="Speech", slug="speech", project_type=ml, display_order=2, status="ongoing"),
        Project(title="Shop", slug="shop", project_type=web, display_order=3),
        Project(title="Archived", slug="archived", project_type=ml, is_active=False),
    ]

    consulting = Service(title="ML Consulting", slug="ml-consulting", service_type="consulting",
                         pricing_model="hourly", is_featured=True, display_order=1)
    consulting.features = [ServiceFeature(feature_text="Discovery call", display_order=1)]
    audit = Service(title="Model Audit", slug="model-audit", service_type="consulting", display_order=2)
    build = Service(title="API Build", slug="api-build", service_type="development", display_order=3)
    retired_service = Service(title="Old", slug="old", is_active=False)

    db.session.add_all([profile, retired, languages, hidden_category, current_job, past_job, ml, web,
                        *projects, consulting, audit, build, retired_service])
    db.session.commit()


def test_home_page(client, portfolio, make_post):
    make_post(slug="latest")
    props = client.get("/").get_json()["props"]

    assert props["profile"]["fullName"] == "Jane Doe"
    assert [p["slug"] for p in props["featuredProjects"]] == ["vision"]
    assert [s["slug"] for s in props["featuredServices"]] == ["ml-consulting"]
    assert [p["slug"] for p in props["latestPosts"]] == ["latest"]


def test_about_page(client, portfolio):
    payload = client.get("/about").get_json()
    props = payload["props"]

    assert payload["component"] == "About"
    assert props["profile"]["longBio"] == "<p>Line one</p><p>Line two</p>"
    assert props["profile"]["socialLinks"] == {"github": "https://github.com/jane"}
    assert [c["slug"] for c in props["skillCategories"]] == ["languages"]
    assert [s["name"] for s in props["skillCategories"][0]["skills"]] == ["Python"]
    assert [e["dateRange"] for e in props["experiences"]] == ["Mar 2022 - Present", "Jun 2020 - Sep 2020"]


def test_projects_page(client, portfolio):
    props = client.get("/projects").get_json()["props"]

    assert [p["slug"] for p in props["projects"]] == ["vision", "speech", "shop"]
    assert [p["slug"] for p in props["featuredProjects"]] == ["vision"]
    assert {t["slug"] for t in props["projectTypes"]} == {"machine-learning", "web"}
    vision = props["projects"][0]
    assert vision["project_type_label"] == "Machine Learning"
    assert vision["project_type_color"] == "purple"
    assert vision["status_label"] == "Completed"


def test_project_detail_and_related(client, portfolio):
    props = client.get("/projects/vision").get_json()["props"]
    assert props["project"]["title"] == "Vision"
    assert [p["slug"] for p in props["relatedProjects"]] == ["speech"]


def test_inactive_project_is_not_found(client, portfolio):
    assert client.get("/projects/archived").status_code == 404
    assert client.get("/projects/nope").status_code == 404


def test_services_page(client, portfolio):
    props = client.get("/services").get_json()["props"]

    assert [s["slug"] for s in props["featuredServices"]] == ["ml-consulting"]
    assert [s["slug"] for s in props["regularServices"]] == ["model-audit", "api-build"]
    assert set(props["servicesByType"]) == {"consulting", "development"}
    assert props["featuredServices"][0]["features"] == ["Discovery call"]
    assert props["featuredServices"][0]["pricing_model_label"] == "Hourly Rate"


def test_service_detail(client, portfolio):
    props = client.get("/services/ml-consulting").get_json()["props"]
    assert props["service"]["title"] == "ML Consulting"
    assert [s["slug"] for s in props["relatedServices"]] == ["model-audit"]
    assert client.get("/services/old").status_code == 404


def test_pages_without_content(client):
    props = client.get("/about").get_json()["props"]
    assert props["profile"] is None
    assert props["skillCategories"] == []


def test_health_and_security_headers(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_unknown_route_renders_error_payload(client):
    response = client.get("/definitely/not/here")
    assert response.status_code == 404
    assert response.get_json()["component"] == "errors/404"


def test_flash_keeps_last_message_per_category(app):
    with app.test_request_context("/"):
        flash("Saved draft.", "success")
        flash("Published.", "success")
        flash("Cover image missing.", "error")

        assert collect_flash() == {"success": "Published.", "error": "Cover image missing."}
