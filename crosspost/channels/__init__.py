from .base import ChannelAdapter
from .facebook import FacebookAdapter
from .instagram import InstagramAdapter
from .linkedin import LinkedInAdapter
from .threads import ThreadsAdapter
from .twitter import TwitterAdapter

__all__ = [
    "ChannelAdapter",
    "FacebookAdapter",
    "InstagramAdapter",
    "LinkedInAdapter",
    "ThreadsAdapter",
    "TwitterAdapter",
]
