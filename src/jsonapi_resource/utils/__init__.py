from .typing import is_collection  # noqa
