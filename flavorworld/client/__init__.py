# flavorworld/client/__init__.py
from .api import ApiResult, ErrorKind, FlavorWorldAPI
from .feed_session import FeedSession

__all__ = ['ApiResult', 'ErrorKind', 'FlavorWorldAPI', 'FeedSession']
