"""
Naming-convention helpers used for key casing and for inferring resource types
from class names.
"""

import re
import typing

_FIRST_CAP_RE = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP_RE = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATOR_RE = re.compile(r"[-_\s]+")

_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
}
_IRREGULAR_SINGULARS = {v: k for k, v in _IRREGULAR_PLURALS.items()}


def underscore(word: str) -> str:
    """
    ``"UserProfile"`` -> ``"user_profile"``, ``"first-name"`` -> ``"first_name"``
    """
    word = _FIRST_CAP_RE.sub(r"\1_\2", word)
    word = _ALL_CAP_RE.sub(r"\1_\2", word)
    return _SEPARATOR_RE.sub("_", word).lower()


def camelize(word: str, uppercase_first_letter: bool = True) -> str:
    """
    ``"first_name"`` -> ``"FirstName"``, or ``"firstName"`` with ``uppercase_first_letter=False``
    """
    parts = [p for p in _SEPARATOR_RE.split(underscore(word)) if p]
    if not parts:
        return word
    head = parts[0].capitalize() if uppercase_first_letter else parts[0]
    return head + "".join(p.capitalize() for p in parts[1:])


def dasherize(word: str) -> str:
    """
    ``"first_name"`` -> ``"first-name"``
    """
    return underscore(word).replace("_", "-")


def pluralize(word: str) -> str:
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if word.endswith("s"):
        return word
    if word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u"):
        return word[:-1] + "ies"
    if word.endswith(("x", "ch", "sh")):
        return word + "es"
    return word + "s"


def singularize(word: str) -> str:
    if word in _IRREGULAR_SINGULARS:
        return _IRREGULAR_SINGULARS[word]
    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if word.endswith(("xes", "ches", "shes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


TRANSFORMS: typing.Dict[str, typing.Callable[[str], str]] = {
    "none": lambda key: key,
    "camel": camelize,
    "lower_camel": lambda key: camelize(key, uppercase_first_letter=False),
    "dash": dasherize,
    "snake": underscore,
}


def infer_resource_key(class_name: str) -> str:
    """
    Derives a plural resource key from a resource class name:
    ``"UserResource"`` -> ``"users"``, ``"BlogPostSerializer"`` -> ``"blog_posts"``
    """
    name = class_name
    for suffix in ("Resource", "Serializer"):
        if name.endswith(suffix) and name != suffix:
            name = name[: -len(suffix)]
            break
    return pluralize(underscore(name))
