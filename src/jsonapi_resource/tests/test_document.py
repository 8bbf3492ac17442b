import dataclasses
import typing

import pytest


@dataclasses.dataclass
class Post:
    id: typing.Optional[int]
    title: str
    secret: str = "s3cr3t"


@dataclasses.dataclass
class Profile:
    id: int
    bio: str


@dataclasses.dataclass
class User:
    id: typing.Optional[int]
    name: str
    posts: typing.Sequence[typing.Any] = ()
    profile: typing.Optional[Profile] = None


@pytest.fixture
def post_resource():
    from ..declarative import Attr, Resource

    class PostResource(Resource):
        title = Attr()

    return PostResource


@pytest.fixture
def user_resource(post_resource):
    from ..declarative import Attr, Resource, has_many, has_one

    class UserResource(Resource):
        name = Attr()
        posts = has_many(post_resource)
        profile = has_one()

    return UserResource


@pytest.fixture
def jane():
    return User(
        id=1,
        name="Jane",
        posts=[Post(id=10, title="first"), Post(id=11, title="second")],
        profile=Profile(id=5, bio="hi"),
    )


def test_plain_object():
    from ..declarative import Resource

    class UserResource(Resource):
        class Meta:
            attributes = ["name"]

    result = UserResource({"id": 1, "name": "Jane"}).serializable_hash()
    assert result == {
        "data": {
            "type": "users",
            "id": "1",
            "attributes": {"name": "Jane"},
        },
    }


def test_included_from_mappings():
    from ..declarative import Resource, has_many

    class PostResource(Resource):
        pass

    class UserResource(Resource):
        posts = has_many(PostResource)

    result = UserResource(
        {"id": 1, "posts": [{"id": 10}, {"id": 11}]},
        params={"include": ["posts"]},
    ).serializable_hash()
    assert result == {
        "data": {
            "type": "users",
            "id": "1",
            "relationships": {
                "posts": {
                    "data": [
                        {"type": "posts", "id": "10"},
                        {"type": "posts", "id": "11"},
                    ],
                },
            },
        },
        "included": [
            {"type": "posts", "id": "10"},
            {"type": "posts", "id": "11"},
        ],
    }


def test_single_object(user_resource, jane):
    result = user_resource(jane).serializable_hash()
    assert result == {
        "data": {
            "type": "users",
            "id": "1",
            "attributes": {"name": "Jane"},
            "relationships": {
                "posts": {
                    "data": [
                        {"type": "posts", "id": "10"},
                        {"type": "posts", "id": "11"},
                    ],
                },
                "profile": {
                    "data": {"type": "profile", "id": "5"},
                },
            },
        },
    }


def test_to_h(user_resource, jane):
    assert user_resource(jane).to_h() == user_resource(jane).serializable_hash()["data"]


def test_to_repr(user_resource, jane):
    from ..serde.models import ResourceIdRepr, SingletonDocumentRepr

    doc = user_resource(jane).to_repr()
    assert isinstance(doc, SingletonDocumentRepr)
    assert doc.data is not None
    assert doc.data.identifier == ResourceIdRepr(type="users", id="1")
    assert doc.included is None


def test_collection(user_resource):
    users = [User(id=i, name=f"user{i}") for i in (3, 1, 2)]
    result = user_resource(users).serializable_hash()
    assert [(r["type"], r["id"]) for r in result["data"]] == [
        ("users", "3"),
        ("users", "1"),
        ("users", "2"),
    ]


def test_collection_from_generator(user_resource):
    result = user_resource(
        (User(id=i, name=f"user{i}", posts=[Post(id=i * 10, title="")]) for i in (1, 2)),
        params={"include": "posts"},
    ).serializable_hash()
    assert [r["id"] for r in result["data"]] == ["1", "2"]
    assert [r["id"] for r in result["included"]] == ["10", "20"]


def test_empty_collection(user_resource):
    assert user_resource([]).serializable_hash() == {"data": []}


class Record:
    """Iterates over its fields the way pydantic models do."""

    def __init__(self, **fields):
        self.__dict__.update(fields)

    def __iter__(self):
        return iter(self.__dict__.items())


def test_iterable_object_is_single(user_resource):
    result = user_resource(Record(id=1, name="Jane", posts=[], profile=None)).serializable_hash()
    assert result["data"]["type"] == "users"
    assert result["data"]["id"] == "1"
    assert result["data"]["attributes"] == {"name": "Jane"}


def test_iterable_object_as_to_one(user_resource):
    user = User(id=1, name="Jane", profile=Record(id=5, bio="hi"))
    result = user_resource(user, params={"include": "profile"}).serializable_hash()
    assert result["data"]["relationships"]["profile"] == {
        "data": {"type": "profile", "id": "5"},
    }
    assert [(r["type"], r["id"]) for r in result["included"]] == [("profile", "5")]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ([1], True),
        ((1,), True),
        ({1}, True),
        (iter([1]), True),
        ((i for i in [1]), True),
        ("abc", False),
        (b"abc", False),
        ({"id": 1}, False),
        (Record(id=1), False),
        (None, False),
    ],
)
def test_is_collection(value, expected):
    from ..utils import is_collection

    assert is_collection(value) is expected


def test_idempotent(user_resource, jane):
    first = user_resource(jane, params={"include": "posts"}).serializable_hash()
    second = user_resource(jane, params={"include": "posts"}).serializable_hash()
    assert first == second


class TestRelationships:
    def test_identifier_only(self):
        from ..declarative import Attr, Resource, has_many

        class UserResource(Resource):
            name = Attr()
            posts = has_many()

        result = UserResource(
            {
                "id": 1,
                "name": "Jane",
                "posts": [{"type": "articles", "id": 10, "title": "first"}, {"id": 11}],
            }
        ).to_h()
        assert result["relationships"]["posts"]["data"] == [
            {"type": "articles", "id": "10"},
            {"type": "post", "id": "11"},
        ]

    def test_no_target(self):
        from ..declarative import Resource, has_many

        class UserResource(Resource):
            posts = has_many()

        result = UserResource(User(id=1, name="Jane", posts=[Post(id=10, title="")])).to_h()
        assert result["relationships"] == {
            "posts": {"data": [{"type": "post", "id": "10"}]},
        }

    def test_null(self, user_resource):
        result = user_resource(User(id=1, name="Jane", posts=[])).to_h()
        assert result["relationships"] == {
            "posts": {"data": []},
            "profile": {"data": None},
        }

    def test_unidentifiable_entries(self, user_resource):
        result = user_resource(
            User(
                id=1,
                name="Jane",
                posts=[None, {"title": "no id"}, {"id": ""}, Post(id=10, title="")],
            )
        ).to_h()
        assert result["relationships"]["posts"]["data"] == [
            None,
            None,
            None,
            {"type": "posts", "id": "10"},
        ]

    def test_resource_instances(self, post_resource):
        from ..declarative import Resource, has_many

        class UserResource(Resource):
            posts = has_many()

        user = User(id=1, name="Jane", posts=[post_resource(Post(id=10, title=""))])
        result = UserResource(user).to_h()
        assert result["relationships"]["posts"]["data"] == [{"type": "posts", "id": "10"}]

    def test_key_and_selector(self, post_resource):
        from ..declarative import Resource, has_many

        class UserResource(Resource):
            articles = has_many(
                post_resource,
                selector=lambda user: user.posts[:1],
                key="writings",
            )

        user = User(id=1, name="Jane", posts=[Post(id=10, title=""), Post(id=11, title="")])
        result = UserResource(user, params={"include": "articles"}).serializable_hash()
        assert result["data"]["relationships"] == {
            "writings": {"data": [{"type": "posts", "id": "10"}]},
        }
        assert [r["id"] for r in result["included"]] == ["10"]

    def test_meta_and_links(self, post_resource):
        from ..declarative import Resource, has_many

        class UserResource(Resource):
            posts = has_many(
                post_resource,
                meta=lambda user: {"count": len(user.posts)},
                links={
                    "related": lambda user: f"/users/{user.id}/posts",
                    "first": "first_post_url",
                },
            )

        class UserWithLinks(User):
            def first_post_url(self):
                return f"/posts/{self.posts[0].id}"

        user = UserWithLinks(id=1, name="Jane", posts=[Post(id=10, title="")])
        result = UserResource(user).to_h()
        assert result["relationships"]["posts"] == {
            "data": [{"type": "posts", "id": "10"}],
            "meta": {"count": 1},
            "links": {"related": "/users/1/posts", "first": "/posts/10"},
        }

    def test_links_from_method(self, post_resource):
        from ..declarative import Resource, has_many

        class UserResource(Resource):
            posts = has_many(post_resource, links="post_links")

        class UserWithLinks(User):
            def post_links(self):
                return {"related": f"/users/{self.id}/posts"}

        result = UserResource(UserWithLinks(id=1, name="Jane")).to_h()
        assert result["relationships"]["posts"]["links"] == {"related": "/users/1/posts"}

    def test_invalid_links(self, post_resource):
        from ..declarative import Resource, has_many
        from ..exceptions import InvalidLinkSpecError

        class UserResource(Resource):
            posts = has_many(post_resource, links=["related"])

        with pytest.raises(InvalidLinkSpecError):
            UserResource(User(id=1, name="Jane")).to_h()

    def test_string_target(self):
        from ..declarative import Attr, Resource, has_many

        class UserResource(Resource):
            posts = has_many("PostResource")

        class PostResource(Resource):
            class Meta:
                key = "articles"

            title = Attr()

        result = UserResource(
            User(id=1, name="Jane", posts=[Post(id=10, title="first")]),
            params={"include": "posts"},
        ).serializable_hash()
        assert result["data"]["relationships"]["posts"]["data"] == [
            {"type": "articles", "id": "10"}
        ]
        assert result["included"] == [
            {"type": "articles", "id": "10", "attributes": {"title": "first"}},
        ]

    def test_unknown_string_target(self):
        from ..declarative import Resource, has_many
        from ..exceptions import InvalidDeclarationError

        class UserResource(Resource):
            posts = has_many("NoSuchResource")

        with pytest.raises(InvalidDeclarationError):
            UserResource(User(id=1, name="Jane", posts=[Post(id=10, title="")])).to_h()


class TestConditions:
    def test_related_condition_false_removes_relationship(self, post_resource):
        from ..conditions import RelatedCondition
        from ..declarative import Resource, has_many, has_one

        class UserResource(Resource):
            posts = has_many(
                post_resource,
                condition=RelatedCondition(lambda user, posts: len(posts) > 5),
            )
            profile = has_one()

        result = UserResource(
            User(id=1, name="Jane", posts=[Post(id=10, title="")]),
        ).to_h()
        assert "posts" not in result["relationships"]
        assert result["relationships"] == {"profile": {"data": None}}

    def test_failing_condition_never_fetches(self, post_resource):
        from ..conditions import NoArgCondition
        from ..declarative import Attr, Resource, has_many

        calls: typing.List[str] = []

        def fetch(name):
            def _(user):
                calls.append(name)
                return getattr(user, name)

            return _

        class UserResource(Resource):
            name = Attr(selector=fetch("name"), condition=lambda user: False)
            posts = has_many(
                post_resource,
                selector=fetch("posts"),
                condition=NoArgCondition(lambda: False),
            )

        result = UserResource(
            User(id=1, name="Jane", posts=[Post(id=10, title="")]),
            params={"include": "posts"},
        ).serializable_hash()
        assert calls == []
        assert result == {
            "data": {"type": "users", "id": "1", "attributes": {}, "relationships": {}},
            "included": [],
        }

    def test_related_value_fetched_once(self, post_resource):
        from ..conditions import RelatedCondition
        from ..declarative import Resource, has_many

        calls: typing.List[int] = []

        def posts(user):
            calls.append(user.id)
            return user.posts

        class UserResource(Resource):
            posts_ = has_many(
                post_resource,
                selector=posts,
                key="posts",
                condition=RelatedCondition(lambda user, posts: bool(posts)),
            )

        result = UserResource(User(id=1, name="Jane", posts=[Post(id=10, title="")])).to_h()
        assert calls == [1]
        assert result["relationships"]["posts"]["data"] == [{"type": "posts", "id": "10"}]

    def test_attribute_conditions(self):
        from ..conditions import RelatedCondition
        from ..declarative import Attr, Resource

        class UserResource(Resource):
            name = Attr(condition=RelatedCondition(lambda user, name: name.startswith("J")))
            posts = Attr(selector=lambda user: len(user.posts), condition="show_counts")

            def show_counts(self):
                return self.params.get("counts", False)

        jane = User(id=1, name="Jane")
        john = User(id=2, name="Bob")
        assert UserResource(jane).to_h()["attributes"] == {"name": "Jane"}
        assert UserResource(john).to_h()["attributes"] == {}
        assert UserResource(john, params={"counts": True}).to_h()["attributes"] == {"posts": 0}

    def test_condition_on_collection(self):
        from ..declarative import Attr, Resource

        class UserResource(Resource):
            name = Attr(condition=lambda user: user.id % 2 == 1)

        result = UserResource([User(id=1, name="a"), User(id=2, name="b")]).to_h()
        assert [r["attributes"] for r in result] == [{"name": "a"}, {}]

    def test_missing_method(self):
        from ..declarative import Attr, Resource
        from ..exceptions import InvalidConditionError

        class UserResource(Resource):
            name = Attr(condition="no_such_method")

        with pytest.raises(InvalidConditionError):
            UserResource(User(id=1, name="Jane")).to_h()


class TestIncluded:
    def test_absent_without_include(self, user_resource, jane):
        assert "included" not in user_resource(jane).serializable_hash()
        assert "included" not in user_resource(jane, params={"include": []}).serializable_hash()
        assert "included" not in user_resource(jane, params={"include": ""}).serializable_hash()

    def test_present_with_include(self, user_resource, jane):
        result = user_resource(jane, params={"include": "posts"}).serializable_hash()
        assert result["included"] == [
            {"type": "posts", "id": "10", "attributes": {"title": "first"}},
            {"type": "posts", "id": "11", "attributes": {"title": "second"}},
        ]

    def test_comma_separated(self, user_resource, jane):
        result = user_resource(jane, params={"include": "posts, profile"}).serializable_hash()
        assert [(r["type"], r["id"]) for r in result["included"]] == [
            ("posts", "10"),
            ("posts", "11"),
            ("profile", "5"),
        ]

    def test_unknown_name_skipped(self, user_resource, jane):
        result = user_resource(jane, params={"include": ["comments"]}).serializable_hash()
        assert result["included"] == []

    def test_unknown_name_strict(self, user_resource, jane):
        from ..config import Config
        from ..exceptions import UnknownIncludeTargetError

        with pytest.raises(UnknownIncludeTargetError) as e:
            user_resource(
                jane,
                params={"include": ["comments"]},
                config=Config(strict_includes=True),
            ).serializable_hash()
        assert e.value.name == "comments"
        assert list(e.value.known_names) == ["posts", "profile"]

    def test_collection(self, user_resource):
        users = [
            User(id=1, name="a", posts=[Post(id=10, title="x")]),
            User(id=2, name="b", posts=[Post(id=20, title="y"), Post(id=21, title="z")]),
        ]
        result = user_resource(users, params={"include": "posts"}).serializable_hash()
        assert [r["id"] for r in result["included"]] == ["10", "20", "21"]

    def test_no_deduplication_by_default(self, post_resource):
        from ..declarative import Resource, has_many, has_one

        class UserResource(Resource):
            posts = has_many(post_resource)
            pinned = has_one(post_resource, selector=lambda user: user.posts[0])

        user = User(id=1, name="Jane", posts=[Post(id=10, title="x")])
        result = UserResource(user, params={"include": "posts,pinned"}).serializable_hash()
        assert [r["id"] for r in result["included"]] == ["10", "10"]

    def test_deduplication(self, post_resource):
        from ..config import Config
        from ..declarative import Resource, has_many, has_one

        class UserResource(Resource):
            class Meta:
                key = "posts"

            posts = has_many(post_resource)
            pinned = has_one(post_resource, selector=lambda user: user.posts[0])

        user = User(id=10, name="Jane", posts=[Post(id=10, title="x"), Post(id=11, title="y")])
        result = UserResource(
            user,
            params={"include": "posts,pinned"},
            config=Config(deduplicate_included=True),
        ).serializable_hash()
        assert [r["id"] for r in result["included"]] == ["11"]

    def test_excluded_by_condition(self, post_resource):
        from ..declarative import Resource, has_many

        class UserResource(Resource):
            posts = has_many(post_resource, condition=lambda user: user.id == 1)

        users = [
            User(id=1, name="a", posts=[Post(id=10, title="x")]),
            User(id=2, name="b", posts=[Post(id=20, title="y")]),
        ]
        result = UserResource(users, params={"include": "posts"}).serializable_hash()
        assert [r["id"] for r in result["included"]] == ["10"]

    def test_without_target(self, user_resource, jane):
        result = user_resource(jane, params={"include": "profile"}).serializable_hash()
        assert result["included"] == [{"type": "profile", "id": "5"}]

    def test_params_and_within_shared(self):
        from ..declarative import Attr, Resource, has_many

        class PostResource(Resource):
            title = Attr()
            secret = Attr(condition="is_admin")

            def is_admin(self):
                return self.within == "admin" and self.params.get("show_secrets", False)

        class UserResource(Resource):
            posts = has_many(PostResource)

        user = User(id=1, name="Jane", posts=[Post(id=10, title="x")])
        result = UserResource(
            user,
            params={"include": "posts", "show_secrets": True},
            within="admin",
        ).serializable_hash()
        assert result["included"][0]["attributes"] == {"title": "x", "secret": "s3cr3t"}

        result = UserResource(user, params={"include": "posts"}).serializable_hash()
        assert result["included"][0]["attributes"] == {"title": "x"}


class TestDocument:
    def test_meta_and_links(self, user_resource, jane):
        result = user_resource(
            jane,
            meta={"total": 1},
            links={"self": "/users/1"},
        ).serializable_hash()
        assert list(result) == ["data", "meta", "links"]
        assert result["meta"] == {"total": 1}
        assert result["links"] == {"self": "/users/1"}

    def test_resource_meta_and_links(self):
        from ..declarative import Attr, Resource

        class UserResource(Resource):
            class Meta:
                meta = lambda user: {"name_length": len(user.name)}  # noqa: E731
                links = {"self": lambda user: f"/users/{user.id}"}

            name = Attr()

        result = UserResource(User(id=1, name="Jane")).to_h()
        assert result == {
            "type": "users",
            "id": "1",
            "attributes": {"name": "Jane"},
            "meta": {"name_length": 4},
            "links": {"self": "/users/1"},
        }

    def test_no_fields(self):
        from ..declarative import Resource

        class UserResource(Resource):
            pass

        assert UserResource(User(id=1, name="Jane")).to_h() == {"type": "users", "id": "1"}

    def test_reserved_keys(self):
        from ..declarative import Attr, Resource

        class UserResource(Resource):
            id = Attr()
            type = Attr(selector=lambda user: "x")
            name = Attr()

        assert UserResource(User(id=1, name="Jane")).to_h()["attributes"] == {"name": "Jane"}


class TestIdentifiers:
    def test_id_field(self):
        from ..declarative import Resource

        class UserResource(Resource):
            class Meta:
                id = "user_id"

        assert UserResource({"user_id": 7}).to_h() == {"type": "users", "id": "7"}

    def test_id_callable(self):
        from ..declarative import Resource

        class UserResource(Resource):
            class Meta:
                id = lambda user: f"u-{user.id}"  # noqa: E731

        assert UserResource(User(id=1, name="Jane")).to_h()["id"] == "u-1"

    def test_type_override(self):
        from ..declarative import Resource

        class UserResource(Resource):
            class Meta:
                type = lambda user: "admins" if user.name == "root" else "people"  # noqa: E731

        assert UserResource(User(id=1, name="root")).to_h()["type"] == "admins"
        assert UserResource(User(id=2, name="Jane")).to_h()["type"] == "people"

    def test_missing_id(self):
        from ..declarative import Resource
        from ..exceptions import MissingIdentifierError

        class UserResource(Resource):
            pass

        with pytest.raises(MissingIdentifierError):
            UserResource(User(id=None, name="Jane")).to_h()
        with pytest.raises(MissingIdentifierError):
            UserResource({"name": "Jane"}).to_h()
        with pytest.raises(MissingIdentifierError):
            UserResource(object()).to_h()
        with pytest.raises(MissingIdentifierError):
            UserResource({"id": ""}).to_h()

    def test_empty_type(self):
        from ..declarative import Resource
        from ..exceptions import MissingIdentifierError

        class UserResource(Resource):
            class Meta:
                type = lambda user: ""  # noqa: E731

        with pytest.raises(MissingIdentifierError):
            UserResource({"id": 1}).to_h()


class TestKeyCasing:
    @pytest.fixture
    def blog_post_resource(self):
        from ..declarative import Attr, Resource, has_one

        class BlogPostResource(Resource):
            class Meta:
                transform_keys = "lower_camel"
                links = {"self_link": lambda post: f"/blog_posts/{post['id']}"}

            first_name = Attr()
            author_profile = has_one()

        return BlogPostResource

    @pytest.fixture
    def blog_post(self):
        return {
            "id": 1,
            "first_name": "first_name_value",
            "author_profile": {"id": 2},
        }

    def test_keys_without_inferring(self, blog_post_resource, blog_post):
        result = blog_post_resource(blog_post, links={"next_page": "/x"}).serializable_hash()
        assert result == {
            "data": {
                "type": "blog_posts",
                "id": "1",
                "attributes": {"firstName": "first_name_value"},
                "relationships": {
                    "authorProfile": {"data": {"type": "author_profile", "id": "2"}},
                },
                "links": {"self_link": "/blog_posts/1"},
            },
            "links": {"next_page": "/x"},
        }

    def test_keys_with_inferring(self, blog_post_resource, blog_post):
        from ..config import Config

        result = blog_post_resource(
            blog_post,
            links={"next_page": "/x"},
            config=Config(inferring=True),
        ).serializable_hash()
        assert result == {
            "data": {
                "type": "blogPosts",
                "id": "1",
                "attributes": {"firstName": "first_name_value"},
                "relationships": {
                    "authorProfile": {"data": {"type": "authorProfile", "id": "2"}},
                },
                "links": {"selfLink": "/blog_posts/1"},
            },
            "links": {"nextPage": "/x"},
        }

    def test_config_from_meta(self):
        from ..config import Config
        from ..declarative import Resource

        class BlogPostResource(Resource):
            class Meta:
                transform_keys = "dash"
                config = Config(inferring=True)

        assert BlogPostResource({"id": 1}).to_h() == {"type": "blog-posts", "id": "1"}
        assert BlogPostResource({"id": 1}, config=Config()).to_h() == {
            "type": "blog_posts",
            "id": "1",
        }

    def test_callable_transform(self):
        from ..declarative import Attr, Resource

        class UserResource(Resource):
            class Meta:
                transform_keys = str.upper

            name = Attr()

        assert UserResource({"id": 1, "name": "Jane"}).to_h()["attributes"] == {"NAME": "Jane"}
