"""
Tests for the public read API.
"""

import pytest

from baakh.database import db
from baakh.models import Category, Couplet, Poet, Poetry, TimelineEvent, TimelinePeriod


@pytest.fixture
def couplets(poet, other_poet):
    Poetry.ensure_system_record()
    category = Category(slug="ghazal")
    poem = Poetry(poetry_slug="sur-kalyan", poet=poet, category=category)
    db.session.add_all([category, poem])
    db.session.flush()

    rows = [
        Couplet(poetry_id=0, poet_id=poet.id, couplet_slug="dil-sindh", couplet_text="دل سنڌ\nٻي سٽ",
                couplet_tags="love, longing", lang="sd"),
        Couplet(poetry_id=0, poet_id=poet.id, couplet_slug="dil-sindh", couplet_text="dil Sindh",
                couplet_tags="love, longing", lang="en"),
        Couplet(poetry_id=poem.id, poet_id=poet.id, couplet_slug="sur-kalyan-1",
                couplet_text="Pehriyan wichaar", lang="en"),
        Couplet(poetry_id=0, poet_id=other_poet.id, couplet_slug="sachal-1",
                couplet_text="Sach sachal", lang="en"),
    ]
    db.session.add_all(rows)
    db.session.commit()
    return rows


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "OK"}


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.get_json()["error"]["message"] == "Resource not found"


# Poets

def test_list_poets_paginates(client, poet, other_poet):
    response = client.get("/api/poets?limit=1&sortBy=english_name&sortOrder=asc")
    data = response.get_json()
    assert response.status_code == 200
    assert data["total"] == 2
    assert data["totalPages"] == 2
    assert data["hasMore"] is True
    assert [p["poet_slug"] for p in data["poets"]] == ["sachal-sarmast"]


def test_list_poets_hides_hidden_poets(client, poet):
    db.session.add(Poet(poet_slug="hidden", sindhi_name="ل", english_name="Hidden", is_hidden=True))
    db.session.commit()
    data = client.get("/api/poets?countOnly=true").get_json()
    assert data == {"success": True, "total": 1}


def test_list_poets_search_uses_language_columns(client, poet, other_poet):
    english = client.get("/api/poets?search=sachal").get_json()
    assert [p["poet_slug"] for p in english["poets"]] == ["sachal-sarmast"]

    sindhi = client.get("/api/poets?lang=sd&search=سچل").get_json()
    assert [p["poet_slug"] for p in sindhi["poets"]] == ["sachal-sarmast"]
    assert sindhi["poets"][0]["display_name"] == "سچل سرمست"


def test_list_poets_rejects_bad_params(client):
    response = client.get("/api/poets?limit=0&lang=fr")
    assert response.status_code == 400
    details = response.get_json()["error"]["details"]
    assert "limit" in details
    assert "lang" in details


def test_get_poet_by_id_and_slug(client, couplets, poet):
    by_id = client.get(f"/api/poets/{poet.id}").get_json()["poet"]
    by_slug = client.get("/api/poets/Shah-Abdul-Latif-Bhittai").get_json()["poet"]
    assert by_id["id"] == by_slug["id"] == poet.id
    assert by_id["categories"] == [{"id": 1, "slug": "ghazal"}]
    assert by_id["stats"]["couplets"] == 2
    assert by_id["stats"]["coupletsByLang"] == {"sd": 1, "en": 2}
    assert by_id["stats"]["poetry"] == 1
    assert by_id["tags"] == ["Sufi", "Classical"]


def test_get_missing_poet(client):
    response = client.get("/api/poets/nobody")
    assert response.status_code == 404
    assert response.get_json()["error"]["message"] == "Poet not found"


# Couplets

def test_list_couplets_defaults_to_english(client, couplets):
    data = client.get("/api/couplets").get_json()
    assert data["total"] == 3
    assert {c["lang"] for c in data["couplets"]} == {"en"}


def test_list_couplets_filters(client, couplets, poet):
    standalone = client.get(f"/api/couplets?standalone=1&poetId={poet.id}").get_json()
    assert [c["couplet_slug"] for c in standalone["couplets"]] == ["dil-sindh"]
    assert standalone["couplets"][0]["poetry"] is None
    assert standalone["couplets"][0]["poet"]["slug"] == poet.poet_slug

    in_poem = client.get(f"/api/couplets?poetry_id={couplets[2].poetry_id}").get_json()
    assert [c["couplet_slug"] for c in in_poem["couplets"]] == ["sur-kalyan-1"]
    assert in_poem["couplets"][0]["poetry"]["slug"] == "sur-kalyan"


def test_list_couplets_search_is_case_insensitive(client, couplets):
    data = client.get("/api/couplets?search=SINDH").get_json()
    assert [c["couplet_slug"] for c in data["couplets"]] == ["dil-sindh"]


def test_search_treats_wildcards_literally(client, couplets):
    data = client.get("/api/couplets?search=%25").get_json()
    assert data["total"] == 0


def test_couplets_by_poet(client, couplets, other_poet):
    response = client.get(f"/api/couplets/by-poet/{other_poet.id}")
    data = response.get_json()
    assert [c["couplet_slug"] for c in data["couplets"]] == ["sachal-1"]
    assert data["poet"]["slug"] == "sachal-sarmast"
    assert data["pagination"]["total"] == 1

    assert client.get("/api/couplets/by-poet/999").status_code == 404


def test_get_couplet_includes_translation(client, couplets):
    sindhi = couplets[0]
    data = client.get(f"/api/couplets/{sindhi.id}").get_json()["couplet"]
    assert data["lines"] == ["دل سنڌ", "ٻي سٽ"]
    assert data["tags"] == ["love", "longing"]
    assert data["translation"]["couplet_text"] == "dil Sindh"

    assert client.get("/api/couplets/999").status_code == 404


# Tags

def test_tags_exclude_poet_descriptor_types(client, tags):
    data = client.get("/api/tags").get_json()
    assert [t["slug"] for t in data["tags"]] == ["longing", "love"]
    love = data["tags"][1]
    assert love["english"] == {"title": "Love", "details": "Poems of love"}
    assert love["sindhi"] == {"title": "محبت", "details": "Love"}
    longing = data["tags"][0]
    assert longing["sindhi"] == {"title": "Longing", "details": "Longing"}


# Timeline

@pytest.fixture
def timeline(poet):
    classical = TimelinePeriod(period_slug="classical", start_year=1600, end_year=1850,
                               sindhi_name="ڪلاسيڪي دور", english_name="Classical Era",
                               english_characteristics=["Sufi poetry"], is_featured=True)
    modern = TimelinePeriod(period_slug="modern", start_year=1947, is_ongoing=True,
                            sindhi_name="جديد دور", english_name="Modern Era")
    db.session.add_all([modern, classical])
    db.session.flush()
    db.session.add_all([
        TimelineEvent(event_slug="risalo", event_year=1750, period_id=classical.id, poet_id=poet.id,
                      sindhi_title="رسالو", english_title="Shah jo Risalo compiled"),
        TimelineEvent(event_slug="birth", event_year=1689, period_id=classical.id, poet_id=poet.id,
                      sindhi_title="ڄم", english_title="Birth of Shah Latif", event_type="birth"),
        TimelineEvent(event_slug="partition", event_year=1947, period_id=modern.id,
                      sindhi_title="ورهاڱو", english_title="Partition"),
    ])
    db.session.commit()
    return {"classical": classical, "modern": modern}


def test_periods_are_ordered_by_start_year(client, timeline):
    data = client.get("/api/timeline/periods").get_json()
    assert [p["period_slug"] for p in data["periods"]] == ["classical", "modern"]
    assert data["periods"][0]["characteristics"] == ["Sufi poetry"]
    assert data["hasMore"] is False


def test_period_detail_by_slug_has_events(client, timeline):
    data = client.get("/api/timeline/periods/classical?lang=sd").get_json()["period"]
    assert data["name"] == "ڪلاسيڪي دور"
    assert [e["event_slug"] for e in data["events"]] == ["birth", "risalo"]
    assert client.get("/api/timeline/periods/unknown").status_code == 404


def test_events_filter_and_window(client, timeline):
    data = client.get("/api/timeline/events?limit=2").get_json()
    assert [e["event_slug"] for e in data["events"]] == ["birth", "risalo"]
    assert data["total"] == 3
    assert data["hasMore"] is True

    births = client.get("/api/timeline/events?event_type=birth").get_json()
    assert [e["event_slug"] for e in births["events"]] == ["birth"]
    assert births["events"][0]["poet"]["slug"] == "shah-abdul-latif-bhittai"
    assert births["events"][0]["period"]["slug"] == "classical"
