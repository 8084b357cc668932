from enum import Enum


class Platform(str, Enum):
    """Supported publishing platforms."""

    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    THREADS = "threads"

    @classmethod
    def parse(cls, value: str) -> "Platform | None":
        """Resolve a platform id, returning None for unknown ids."""
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            return None
