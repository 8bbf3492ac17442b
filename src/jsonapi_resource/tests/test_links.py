import dataclasses

import pytest


@dataclasses.dataclass
class Article:
    id: int
    url: str

    def links(self):
        return {"self": self.url, "comments": f"{self.url}/comments"}

    def related_url(self):
        return f"/related/{self.id}"


@pytest.fixture
def target():
    from ..defaults import DefaultFetcherImpl
    from ..links import LinkResolver

    return LinkResolver(fetcher=DefaultFetcherImpl())


def test_mapping(target):
    article = Article(id=1, url="/articles/1")
    result = target.resolve(
        article,
        {
            "self": "url",
            "related": "related_url",
            "first": lambda a: f"/articles/{a.id}/first",
        },
    )
    assert list(result.items()) == [
        ("self", "/articles/1"),
        ("related", "/related/1"),
        ("first", "/articles/1/first"),
    ]


def test_name_of_mapping(target):
    article = Article(id=1, url="/articles/1")
    assert target.resolve(article, "links") == {
        "self": "/articles/1",
        "comments": "/articles/1/comments",
    }


def test_mapping_object(target):
    assert target.resolve({"id": 1, "url": "/articles/1"}, {"self": "url"}) == {
        "self": "/articles/1",
    }


def test_key(target):
    article = Article(id=1, url="/articles/1")
    result = target.resolve(article, {"self_link": "url"}, key=lambda k: k.upper())
    assert result == {"SELF_LINK": "/articles/1"}


@pytest.mark.parametrize(
    "links",
    [
        ["self"],
        {"self": 1},
        "id",
    ],
)
def test_invalid(target, links):
    from ..exceptions import InvalidLinkSpecError

    with pytest.raises(InvalidLinkSpecError):
        target.resolve(Article(id=1, url="/articles/1"), links)
