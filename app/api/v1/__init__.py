from app.api.v1 import repositories, stories

__all__ = [
    "repositories",
    "stories",
]
