import pytest

from content_browser import services
from content_browser.errors import MalformedResponse, NotFound, RenditionNotFound
from content_browser.models import HomePage

from conftest import rendition_asset

HOME_ITEM = {
    "id": "HOME",
    "name": "HomePage",
    "fields": {
        "company_logo": {"id": "LOGO"},
        "company_name": "Cafe Supremo",
        "topics": [{"id": "T1"}, {"id": "T2"}],
        "about_url": "https://example.com/about",
        "contact_url": "https://example.com/contact",
    },
}


def test_fetch_home_page_returns_none_for_empty_result(make_client):
    client, session = make_client({"items?": {"items": []}})

    assert services.fetch_home_page(client) is None
    assert "OCEGettingStartedHomePage" in session.calls[0][0]


def test_fetch_home_page_projects_fields(make_client):
    client, _ = make_client({"items?": {"items": [HOME_ITEM]}})

    home = services.fetch_home_page(client)

    assert home == HomePage(
        logo_id="LOGO",
        title="Cafe Supremo",
        topics=[{"id": "T1"}, {"id": "T2"}],
        about_url="https://example.com/about",
        contact_url="https://example.com/contact",
    )


def test_fetch_home_page_keeps_topic_records(make_client):
    item = {
        "id": "HOME",
        "fields": {"topics": [{"id": "T1", "name": "Coffee", "type": "Topic"}]},
    }
    client, _ = make_client({"items?": {"items": [item]}})

    home = services.fetch_home_page(client)

    assert home.topics == [{"id": "T1", "name": "Coffee", "type": "Topic"}]
    assert home.logo_id is None


@pytest.mark.parametrize("topics", [["T1"], {"id": "T1"}])
def test_fetch_home_page_rejects_topics_that_are_not_records(make_client, topics):
    item = {"id": "HOME", "fields": {"topics": topics}}
    client, _ = make_client({"items?": {"items": [item]}})

    with pytest.raises(MalformedResponse):
        services.fetch_home_page(client)


def test_fetch_home_page_without_fields_is_malformed(make_client):
    client, _ = make_client({"items?": {"items": [{"id": "HOME"}]}})

    with pytest.raises(MalformedResponse):
        services.fetch_home_page(client)


def test_fetch_home_page_propagates_failures(make_client):
    client, _ = make_client({})

    with pytest.raises(NotFound):
        services.fetch_home_page(client)


def test_fetch_articles_orders_by_published_date(make_client):
    newer = {"id": "A2", "fields": {"published_date": {"value": "2021-06-01T00:00:00Z"}}}
    older = {"id": "A1", "fields": {"published_date": {"value": "2020-01-01T00:00:00Z"}}}
    client, session = make_client({"OCEGettingStartedArticle": {"items": [newer, older]}})

    articles = services.fetch_articles(client, "T1")

    assert [article["id"] for article in articles] == ["A2", "A1"]
    url = session.calls[0][0]
    assert "orderBy=fields.published_date%3Adesc" in url
    assert "fields.topic+eq+%22T1%22" in url


def test_fetch_topic_expands_thumbnail(make_client):
    client, session = make_client({"items/T1": {"id": "T1", "name": "Coffee"}})

    topic = services.fetch_topic(client, "T1")

    assert topic["name"] == "Coffee"
    assert session.calls[0][0].endswith("&expand=fields.thumbnail")


def test_fetch_article_expands_author(make_client):
    client, session = make_client({"items/A1": {"id": "A1"}})

    services.fetch_article(client, "A1")

    assert session.calls[0][0].endswith("&expand=fields.author")


def test_get_medium_rendition_url_returns_self_link(make_client):
    asset = {
        "id": "IMG",
        "fields": {
            "renditions": [
                {
                    "name": "Medium",
                    "formats": [
                        {"format": "jpg", "links": [{"rel": "self", "href": "X"}]}
                    ],
                }
            ]
        },
    }
    client, session = make_client({"items/IMG": asset})

    assert services.get_medium_rendition_url(client, "IMG") == "X"
    assert session.calls[0][0].endswith("&expand=fields.renditions")


def test_find_rendition_url_skips_other_renditions_and_formats():
    asset = rendition_asset("IMG", "https://cdn.example.com/medium.jpg")

    assert services.find_rendition_url(asset) == "https://cdn.example.com/medium.jpg"


@pytest.mark.parametrize(
    "asset",
    [
        rendition_asset("IMG", "X", name="Large"),
        rendition_asset("IMG", "X", fmt="png"),
        rendition_asset("IMG", "X", rel="canonical"),
        {"id": "IMG", "fields": {}},
    ],
)
def test_find_rendition_url_raises_when_a_stage_has_no_match(asset):
    with pytest.raises(RenditionNotFound):
        services.find_rendition_url(asset)


def test_missing_medium_rendition_is_a_not_found_error(make_client):
    client, _ = make_client({"items/IMG": rendition_asset("IMG", "X", name="Small")})

    with pytest.raises(NotFound):
        services.get_medium_rendition_url(client, "IMG")


def test_get_rendition_url_uses_native_asset_url(make_client):
    client, session = make_client()

    url = services.get_rendition_url(client, "LOGO")

    assert url.endswith("assets/LOGO/native?channelToken=tok123")
    assert session.calls == []
