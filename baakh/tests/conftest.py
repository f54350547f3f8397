import pytest

from baakh.app import create_app
from baakh.database import db
from baakh.models import Poet, Tag, TagTranslation


@pytest.fixture
def app(tmp_path):
    app = create_app(testing=True, LEXICON_DIR=str(tmp_path / "lexicon"))
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def lexicon_dir(app):
    return app.config["LEXICON_DIR"]


@pytest.fixture
def poet(app):
    poet = Poet(
        poet_slug="shah-abdul-latif-bhittai",
        sindhi_name="شاهه عبداللطيف ڀٽائي",
        english_name="Shah Abdul Latif Bhittai",
        sindhi_laqab="ڀٽائي",
        english_laqab="Bhittai",
        tags="Sufi, Classical",
        is_featured=True,
    )
    db.session.add(poet)
    db.session.commit()
    return poet


@pytest.fixture
def other_poet(app):
    poet = Poet(
        poet_slug="sachal-sarmast",
        sindhi_name="سچل سرمست",
        english_name="Sachal Sarmast",
    )
    db.session.add(poet)
    db.session.commit()
    return poet


@pytest.fixture
def tags(app):
    love = Tag(slug="love", label="Love", tag_type="Topic")
    love.translations.append(TagTranslation(lang_code="en", title="Love", detail="Poems of love"))
    love.translations.append(TagTranslation(lang_code="sd", title="محبت"))
    sufi = Tag(slug="sufi", label="Sufi", tag_type="Era / Tradition")
    longing = Tag(slug="longing", label="Longing", tag_type="Topic")
    db.session.add_all([love, sufi, longing])
    db.session.commit()
    return {"love": love, "sufi": sufi, "longing": longing}
