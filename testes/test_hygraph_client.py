import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
import requests

from wp_hygraph.migrators import hygraph_client
from wp_hygraph.migrators.hygraph_client import (
    GraphQLError,
    HygraphClient,
    RateLimiter,
    UploadError,
    publish_mutation,
)
from wp_hygraph.models.hygraph import UploadTicket


class StubResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class StubSession:
    def __init__(self, *responses):
        self.headers = {}
        self.responses = list(responses)
        self.sent = []

    def post(self, url, json=None, timeout=None):
        self.sent.append((url, json))
        return self.responses.pop(0)


def make_client(*responses):
    session = StubSession(*responses)
    client = HygraphClient("https://api.hygraph.test/master", "secret", requests_per_minute=60000, session=session)
    return client, session


def test_bearer_token_is_sent():
    _, session = make_client()
    assert session.headers["Authorization"] == "Bearer secret"


def test_create_author_sends_variables_and_returns_id():
    client, session = make_client(StubResponse(payload={"data": {"createAuthor": {"id": "a1"}}}))
    assert client.create_author("Ada", "Bio") == "a1"
    url, body = session.sent[0]
    assert url == "https://api.hygraph.test/master"
    assert "createAuthor" in body["query"]
    assert body["variables"] == {"name": "Ada", "about": "Bio"}


def test_graphql_errors_raise():
    errors = [{"message": "value is not unique for the field \"slug\""}]
    client, _ = make_client(StubResponse(payload={"data": None, "errors": errors}))
    with pytest.raises(GraphQLError) as exc_info:
        client.create_category("News", "news", "")
    assert exc_info.value.errors == errors
    assert "not unique" in str(exc_info.value)


def test_http_error_without_json_raises_http_error():
    client, _ = make_client(StubResponse(status_code=502, payload=None, text="Bad Gateway"))
    with pytest.raises(requests.HTTPError):
        client.list_authors()


def test_list_posts_passes_reserved_slugs():
    client, session = make_client(StubResponse(payload={"data": {"blogPosts": [{"id": "p1", "slug": "a"}]}}))
    assert client.list_posts(["hello-world"]) == [{"id": "p1", "slug": "a"}]
    assert session.sent[0][1]["variables"] == {"reservedSlugs": ["hello-world"]}


def test_create_post_omits_featured_image_when_missing():
    client, session = make_client(
        StubResponse(payload={"data": {"createBlogPost": {"id": "p1", "title": "T"}}}),
        StubResponse(payload={"data": {"createBlogPost": {"id": "p2", "title": "T"}}}),
    )
    client.create_post(title="T", slug="t", excerpt="", description={"children": []}, author_id="a1")
    client.create_post(title="T", slug="t2", excerpt="", description={"children": []}, author_id="a1", featured_image_id="img")
    assert session.sent[0][1]["variables"]["featuredImage"] is None
    assert session.sent[1][1]["variables"]["featuredImage"] == {"connect": {"id": "img"}}


def test_set_post_categories_uses_set_with_slugs():
    client, session = make_client(StubResponse(payload={"data": {"updateBlogPost": {"id": "p1"}}}))
    client.set_post_categories("p1", ["news", "tips"])
    body = session.sent[0][1]
    assert "set: $categoryConnects" in body["query"]
    assert body["variables"]["categoryConnects"] == [{"categorySlug": "news"}, {"categorySlug": "tips"}]


@pytest.mark.parametrize(
    "kind, field",
    [("author", "publishAuthor"), ("post", "publishBlogPost"), ("asset", "publishAsset"), ("comment", "publishComment")],
)
def test_publish_uses_model_specific_mutation(kind, field):
    client, session = make_client(StubResponse(payload={"data": {field: {"id": "x1"}}}))
    assert client.publish(kind, "x1") == "x1"
    assert f"{field}(where: {{ id: $id }}, to: PUBLISHED)" in session.sent[0][1]["query"]


def test_publish_mutation_rejects_unknown_kind():
    with pytest.raises(KeyError):
        publish_mutation("page")


def test_create_asset_returns_ticket():
    post_data = {"url": "https://s3.test/b", "key": "k", "policy": "p", "signature": "s", "securityToken": "t"}
    client, _ = make_client(
        StubResponse(payload={"data": {"createAsset": {"id": "as1", "upload": {"requestPostData": post_data}}}})
    )
    created = client.create_asset("hero.jpg")
    assert created.id == "as1"
    assert created.ticket.url == "https://s3.test/b"
    assert created.ticket.form_fields()["x-amz-security-token"] == "t"


def test_create_asset_without_ticket_raises():
    client, _ = make_client(StubResponse(payload={"data": {"createAsset": {"id": "as1", "upload": None}}}))
    with pytest.raises(ValueError):
        client.create_asset("hero.jpg")


def test_upload_posts_form_without_bearer_token(monkeypatch):
    sent = {}

    def fake_post(url, data=None, files=None, timeout=None, **kwargs):
        sent.update(url=url, data=data, files=files, kwargs=kwargs)
        return StubResponse(status_code=204)

    monkeypatch.setattr(hygraph_client.requests, "post", fake_post)
    client, _ = make_client()
    ticket = UploadTicket(url="https://s3.test/b", key="k", policy="p")
    client.upload_asset(ticket, b"bytes", "hero.jpg")

    assert sent["url"] == "https://s3.test/b"
    assert sent["data"] == {"key": "k", "policy": "p"}
    assert sent["files"] == {"file": ("hero.jpg", b"bytes")}
    assert "headers" not in sent["kwargs"]


def test_upload_failure_raises(monkeypatch):
    monkeypatch.setattr(
        hygraph_client.requests, "post", lambda *a, **k: StubResponse(status_code=403, text="AccessDenied")
    )
    client, _ = make_client()
    with pytest.raises(UploadError) as exc_info:
        client.upload_asset(UploadTicket(url="https://s3.test/b"), b"x", "a.jpg")
    assert exc_info.value.status_code == 403


def test_rate_limiter_sleeps_between_calls():
    clock = [100.0]
    sleeps = []

    def sleep(seconds):
        sleeps.append(seconds)
        clock[0] += seconds

    limiter = RateLimiter(rpm=60)
    limiter.wait(time_fn=lambda: clock[0], sleep_fn=sleep)
    limiter.wait(time_fn=lambda: clock[0], sleep_fn=sleep)
    assert sleeps == [pytest.approx(1.0)]
