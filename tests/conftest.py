import pytest

from content_browser.client import ContentClient
from content_browser.config import ContentConfig

SERVER = "https://cms.example.com"
TOKEN = "tok123"
DELIVERY = SERVER + "/content/published/api/v1.1/"


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Answers GET requests from a table of URL fragments.

    Values are JSON payloads, ``FakeResponse`` objects or exceptions to raise.
    The first fragment contained in the requested URL wins.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        for fragment, answer in self.routes.items():
            if fragment in url:
                if isinstance(answer, Exception):
                    raise answer
                if isinstance(answer, FakeResponse):
                    return answer
                return FakeResponse(200, answer)
        return FakeResponse(404, {"detail": "not found"})

    def close(self):
        self.closed = True


@pytest.fixture
def content_config():
    return ContentConfig(server_url=SERVER, channel_token=TOKEN, timeout=5.0)


@pytest.fixture
def make_client(content_config):
    def factory(routes=None):
        session = FakeSession(routes)
        return ContentClient(content_config, session=session), session

    return factory


def rendition_asset(asset_id, href, name="Medium", fmt="jpg", rel="self"):
    return {
        "id": asset_id,
        "fields": {
            "renditions": [
                {
                    "name": "Thumbnail",
                    "formats": [
                        {"format": "jpg", "links": [{"rel": "self", "href": "thumb"}]}
                    ],
                },
                {
                    "name": name,
                    "formats": [
                        {"format": "webp", "links": [{"rel": "self", "href": "webp"}]},
                        {"format": fmt, "links": [{"rel": rel, "href": href}]},
                    ],
                },
            ]
        },
    }
