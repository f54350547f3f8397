"""
Tests for the admin API: content writes, text tools and lexicon sync.
"""

import os

import pytest

from baakh.database import db
from baakh.models import Couplet, HesudharEntry, Poetry, RomanWord, SYSTEM_POETRY_ID
from baakh.models.mixins import utcnow
from baakh.text.hesudhar import HEH, HEH_DOACHASHMEE
from baakh.text.lexicon_file import parse_lexicon


def read_lexicon(lexicon_dir, name):
    with open(os.path.join(lexicon_dir, name), encoding="utf-8") as fh:
        return parse_lexicon(fh.read())


def couplet_record(poet, **overrides):
    record = {
        "poetry_id": 0,
        "poet_id": poet.id,
        "couplet_slug": "dil-sindh",
        "couplet_tags": ["love", "longing"],
        "couplet_text": "دل سنڌ",
        "lang": "sd",
    }
    record.update(overrides)
    return record


# Poets

def test_create_poet_slugifies_and_rejects_duplicates(client):
    body = {"poet_slug": "Shaikh Ayaz", "sindhi_name": "شيخ اياز", "english_name": "Shaikh Ayaz",
            "tags": ["Modern", "Progressive"]}
    response = client.post("/api/admin/poets", json=body)
    assert response.status_code == 201
    poet = response.get_json()["poet"]
    assert poet["poet_slug"] == "shaikh-ayaz"
    assert poet["tags"] == ["Modern", "Progressive"]

    again = client.post("/api/admin/poets", json=body)
    assert again.status_code == 409


def test_create_poet_needs_latin_slug(client):
    response = client.post("/api/admin/poets", json={
        "poet_slug": "اياز", "sindhi_name": "اياز", "english_name": "Ayaz",
    })
    assert response.status_code == 400


def test_admin_poet_search(client, poet, other_poet):
    data = client.get("/api/admin/poets?search=bhittai").get_json()
    assert [p["poet_slug"] for p in data["poets"]] == ["shah-abdul-latif-bhittai"]


# Couplets

def test_create_single_couplet_creates_system_record(client, poet):
    assert db.session.get(Poetry, SYSTEM_POETRY_ID) is None

    response = client.post("/api/admin/poetry/couplets", json=couplet_record(poet))

    assert response.status_code == 201
    data = response.get_json()
    assert data["success"] is True
    assert data["couplets"][0]["couplet_tags"] == "love, longing"
    assert data["couplets"][0]["poetry_id"] == 0

    system = db.session.get(Poetry, SYSTEM_POETRY_ID)
    assert system.poetry_slug == "system-standalone-couplets"
    assert system.visibility is False


def test_create_couplet_batch(client, poet):
    response = client.post("/api/admin/poetry/couplets", json=[
        couplet_record(poet),
        couplet_record(poet, couplet_text="dil Sindh", lang="en", couplet_tags="love,  longing"),
    ])
    assert response.status_code == 201
    assert [c["lang"] for c in response.get_json()["couplets"]] == ["sd", "en"]
    assert Couplet.query.count() == 2
    assert {c.couplet_tags for c in Couplet.query.all()} == {"love, longing"}


def test_duplicate_slug_and_lang_is_409(client, poet):
    client.post("/api/admin/poetry/couplets", json=[couplet_record(poet)])
    response = client.post("/api/admin/poetry/couplets", json=[couplet_record(poet)])

    assert response.status_code == 409
    assert response.get_json()["error"]["message"] == \
        "Duplicate key violation. Please use a unique couplet slug."
    assert Couplet.query.count() == 1


def test_couplet_requires_text_slug_and_lang(client, poet):
    response = client.post("/api/admin/poetry/couplets", json=[
        {"poet_id": poet.id, "couplet_slug": " ", "lang": "fr"},
    ])
    assert response.status_code == 400
    details = response.get_json()["error"]["details"]["0"]
    assert set(details) == {"couplet_slug", "couplet_text", "lang"}


def test_couplet_for_unknown_poet_is_rejected(client, poet):
    response = client.post("/api/admin/poetry/couplets", json=couplet_record(poet, poet_id=999))
    assert response.status_code == 400
    assert response.get_json()["error"]["details"] == {"poet_id": [999]}


def test_string_ids_are_coerced(client, poet):
    response = client.post("/api/admin/poetry/couplets",
                           json=couplet_record(poet, poet_id=str(poet.id), poetry_id="0"))
    assert response.status_code == 201
    assert response.get_json()["couplets"][0]["poet_id"] == poet.id


def test_admin_list_pairs_english_rows(client, poet):
    client.post("/api/admin/poetry/couplets", json=[
        couplet_record(poet),
        couplet_record(poet, couplet_text="dil Sindh", lang="en"),
        couplet_record(poet, couplet_slug="only-sindhi", couplet_text="رڳو سنڌي"),
    ])
    data = client.get("/api/admin/poetry/couplets?sortBy=couplet_slug&sortOrder=asc").get_json()

    assert [c["couplet_slug"] for c in data["couplets"]] == ["dil-sindh", "only-sindhi"]
    assert data["couplets"][0]["english_couplet"]["couplet_text"] == "dil Sindh"
    assert data["couplets"][1]["english_couplet"] is None
    assert data["pagination"] == {"page": 1, "limit": 10, "total": 2, "totalPages": 1}


def test_update_and_delete_couplet(client, poet):
    created = client.post("/api/admin/poetry/couplets", json=couplet_record(poet)).get_json()
    couplet_id = created["couplets"][0]["id"]

    response = client.put(f"/api/admin/poetry/couplets/{couplet_id}",
                          json={"couplet_text": "نئين سٽ", "couplet_tags": ["sufi"], "poetry_id": None})
    assert response.status_code == 200
    data = response.get_json()["couplet"]
    assert data["couplet_text"] == "نئين سٽ"
    assert data["couplet_tags"] == "sufi"
    assert data["poetry_id"] == SYSTEM_POETRY_ID

    by_slug = client.get("/api/admin/poetry/couplets/by-slug/dil-sindh").get_json()
    assert list(by_slug["couplets"]) == ["sd"]

    assert client.delete(f"/api/admin/poetry/couplets/{couplet_id}").status_code == 200
    assert client.delete(f"/api/admin/poetry/couplets/{couplet_id}").status_code == 404


# Tags

def test_create_tag_with_translations(client):
    response = client.post("/api/admin/tags", json={
        "slug": "love", "label": "Love",
        "english": {"title": "Love", "details": "About love"},
        "sindhi": {"title": "محبت"},
    })
    assert response.status_code == 201
    tag = response.get_json()["tag"]
    assert tag["sindhi"] == {"title": "محبت", "details": "Love"}

    assert client.post("/api/admin/tags", json={"slug": "love", "label": "Again"}).status_code == 409
    listed = client.get("/api/admin/tags?type=Topic").get_json()
    assert listed["total"] == 1


# Hesudhar

def test_hesudhar_correct_reads_synced_file(client, lexicon_dir):
    client.post("/api/admin/romanizer/hesudhar", json={"word": "غلط", "correct": "صحيح"})
    sync = client.post("/api/admin/hesudhar/sync", json={}).get_json()
    assert sync["newEntries"] == 1
    assert read_lexicon(lexicon_dir, "hesudhar.txt") == {"غلط": "صحيح"}

    data = client.post("/api/admin/hesudhar/correct", json={"text": "هي غلط آهي"}).get_json()
    assert data["correctedText"] == "هي صحيح آهي"
    assert data["corrections"] == [{"originalWord": "غلط", "correctedWord": "صحيح", "position": 1}]
    assert data["message"] == "Applied 1 corrections"


def test_hesudhar_correct_rejects_blank_text(client):
    response = client.post("/api/admin/hesudhar/correct", json={"text": "   "})
    assert response.status_code == 400
    assert "text" in response.get_json()["error"]["details"]


def test_hesudhar_entry_crud(client):
    created = client.post("/api/admin/romanizer/hesudhar", json={"word": " غلط ", "correct": "صحيح"})
    assert created.status_code == 201
    entry_id = created.get_json()["hesudhar"]["id"]

    updated = client.put("/api/admin/romanizer/hesudhar",
                         json={"id": entry_id, "word": "غلط", "correct": "درست"})
    assert updated.get_json()["hesudhar"]["correct"] == "درست"

    listed = client.get("/api/admin/romanizer/hesudhar?search=غلط").get_json()
    assert [h["word"] for h in listed["hesudhars"]] == ["غلط"]

    assert client.delete(f"/api/admin/romanizer/hesudhar?id={entry_id}").status_code == 200
    assert client.get("/api/admin/romanizer/hesudhar").get_json()["total"] == 0
    assert db.session.get(HesudharEntry, entry_id).deleted_at is not None


# Romanizer

def test_romanizer_info(client):
    data = client.get("/api/admin/romanizer").get_json()
    assert data["operations"] == ["hesudhar", "romanize"]


def test_romanizer_hesudhar_operation(client):
    text = f"ڪ{HEH}ڙو"
    data = client.post("/api/admin/romanizer", json={
        "text": text, "operation": "hesudhar", "mode": "global",
    }).get_json()
    assert data == {"original": text, "hesudhar": f"ڪ{HEH_DOACHASHMEE}ڙو", "replacements": 1, "mode": "global"}


def test_romanizer_romanize_operation_uses_default_words(client):
    data = client.post("/api/admin/romanizer", json={"text": "سنڌ دل"}).get_json()
    assert data["romanized"] == "Sindh dil"
    assert data["mode"] == "smart"


def test_roman_word_sync_is_incremental(client, lexicon_dir):
    first = client.post("/api/admin/romanizer/roman-words", json={"word_sd": "ڪتاب", "word_roman": "kitab"})
    assert first.status_code == 201
    client.post("/api/admin/romanizer/roman-words", json={"word_sd": "قلم", "word_roman": "qalam"})

    sync = client.post("/api/admin/romanizer/sync", json={}).get_json()
    assert sync["success"] is True
    assert sync["newEntries"] == 2
    assert sync["addedCount"] == 2
    assert sync["count"] == 2
    assert sync["message"] == "Successfully synced 2 new entries"

    again = client.post("/api/admin/romanizer/sync").get_json()
    assert again["newEntries"] == 0
    assert again["message"] == "No new entries found. File is up to date!"

    word_id = first.get_json()["id"]
    client.put("/api/admin/romanizer/roman-words",
               json={"id": word_id, "word_sd": "ڪتاب", "word_roman": "kitaab"})
    client.post("/api/admin/romanizer/roman-words", json={"word_sd": "دل", "word_roman": "dil"})

    third = client.post("/api/admin/romanizer/sync").get_json()
    assert third["newEntries"] == 2
    assert third["updatedCount"] == 1
    assert third["addedCount"] == 1
    assert read_lexicon(lexicon_dir, "romanizer.txt") == {"ڪتاب": "kitaab", "قلم": "qalam", "دل": "dil"}

    fast = client.post("/api/admin/romanizer/fast", json={"text": "ڪتاب ۽ قلم"}).get_json()
    assert fast["romanizedText"] == "kitaab ۽ qalam"
    assert len(fast["mappings"]) == 2


def test_deleted_roman_word_leaves_the_file(client, lexicon_dir):
    created = client.post("/api/admin/romanizer/roman-words", json={"word_sd": "ڪتاب", "word_roman": "kitab"})
    client.post("/api/admin/romanizer/sync")

    word_id = created.get_json()["id"]
    assert client.delete(f"/api/admin/romanizer/roman-words?id={word_id}").status_code == 200
    assert client.delete(f"/api/admin/romanizer/roman-words?id={word_id}").status_code == 404

    sync = client.post("/api/admin/romanizer/sync").get_json()
    assert sync["removedCount"] == 1
    assert read_lexicon(lexicon_dir, "romanizer.txt") == {}
    assert client.get("/api/admin/romanizer/roman-words").get_json()["romanWords"] == []


def test_full_sync_rebuilds_from_live_rows(client, lexicon_dir):
    client.post("/api/admin/romanizer/roman-words", json={"word_sd": "ڪتاب", "word_roman": "kitab"})
    db.session.add(RomanWord(word_sd="قلم", word_roman="qalam", deleted_at=utcnow()))
    db.session.commit()

    result = client.post("/api/admin/romanizer/sync", json={"full": True}).get_json()
    assert result["count"] == 1
    assert read_lexicon(lexicon_dir, "romanizer.txt") == {"ڪتاب": "kitab"}


def test_sync_status_reports_file_and_marker(client):
    status = client.get("/api/admin/romanizer/sync").get_json()
    assert status["success"] is False
    assert status["fileExists"] is False

    client.post("/api/admin/romanizer/roman-words", json={"word_sd": "دل", "word_roman": "dil"})
    client.post("/api/admin/romanizer/sync")

    status = client.get("/api/admin/romanizer/sync").get_json()
    assert status["success"] is True
    assert status["mappingsCount"] == 1
    assert status["databaseEntries"] == 1
    assert status["sync"]["lastEntryMarker"] is not None


# Timeline

def test_timeline_period_and_event_lifecycle(client, poet):
    period = client.post("/api/admin/timeline/periods", json={
        "period_slug": "classical", "start_year": 1600, "end_year": 1850,
        "sindhi_name": "ڪلاسيڪي دور", "english_name": "Classical Era",
    })
    assert period.status_code == 201
    period_id = period.get_json()["period"]["id"]

    bad_years = client.post("/api/admin/timeline/periods", json={
        "period_slug": "broken", "start_year": 1900, "end_year": 1800,
        "sindhi_name": "غلط", "english_name": "Broken",
    })
    assert bad_years.status_code == 400

    event = client.post("/api/admin/timeline/events", json={
        "event_slug": "risalo", "event_year": 1750, "period_id": period_id, "poet_id": poet.id,
        "sindhi_title": "رسالو", "english_title": "Risalo",
    })
    assert event.status_code == 201
    event_id = event.get_json()["event"]["id"]

    missing = client.post("/api/admin/timeline/events", json={
        "event_slug": "other", "event_year": 1800, "period_id": 999,
        "sindhi_title": "ٻيو", "english_title": "Other",
    })
    assert missing.status_code == 400

    assert client.delete(f"/api/admin/timeline/periods/{period_id}").status_code == 200
    events = client.get("/api/timeline/events").get_json()["events"]
    assert events[0]["period"] is None

    assert client.delete(f"/api/admin/timeline/events/{event_id}").status_code == 200
    assert client.delete(f"/api/admin/timeline/events/{event_id}").status_code == 404


@pytest.mark.parametrize("path", ["/api/admin/poetry/couplets", "/api/admin/romanizer/fast"])
def test_non_json_body_is_rejected(client, path):
    response = client.post(path, data="not json", content_type="text/plain")
    assert response.status_code == 400
    assert response.get_json()["error"]["message"] == "Request body must be JSON"
