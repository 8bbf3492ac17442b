import pytest


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("UserProfile", "user_profile"),
        ("HTTPRequest", "http_request"),
        ("first-name", "first_name"),
        ("firstName", "first_name"),
        ("first_name", "first_name"),
    ],
)
def test_underscore(word, expected):
    from ..inflector import underscore

    assert underscore(word) == expected


def test_camelize():
    from ..inflector import camelize

    assert camelize("first_name") == "FirstName"
    assert camelize("first_name", uppercase_first_letter=False) == "firstName"
    assert camelize("first-name", uppercase_first_letter=False) == "firstName"
    assert camelize("name", uppercase_first_letter=False) == "name"


def test_dasherize():
    from ..inflector import dasherize

    assert dasherize("first_name") == "first-name"
    assert dasherize("FirstName") == "first-name"


@pytest.mark.parametrize(
    ("singular", "plural"),
    [
        ("user", "users"),
        ("category", "categories"),
        ("day", "days"),
        ("box", "boxes"),
        ("match", "matches"),
        ("person", "people"),
        ("blog_post", "blog_posts"),
    ],
)
def test_pluralize_and_singularize(singular, plural):
    from ..inflector import pluralize, singularize

    assert pluralize(singular) == plural
    assert singularize(plural) == singular


def test_singularize_keeps_singular():
    from ..inflector import singularize

    assert singularize("address") == "address"
    assert singularize("profile") == "profile"


@pytest.mark.parametrize(
    ("class_name", "expected"),
    [
        ("UserResource", "users"),
        ("BlogPostResource", "blog_posts"),
        ("CategorySerializer", "categories"),
        ("Person", "people"),
        ("Resource", "resources"),
    ],
)
def test_infer_resource_key(class_name, expected):
    from ..inflector import infer_resource_key

    assert infer_resource_key(class_name) == expected


def test_transforms():
    from ..inflector import TRANSFORMS

    assert {name: fn("first_name") for name, fn in TRANSFORMS.items()} == {
        "none": "first_name",
        "camel": "FirstName",
        "lower_camel": "firstName",
        "dash": "first-name",
        "snake": "first_name",
    }
