from .aiohttp_backend import AiohttpBackend
from .httpx_backend import HttpxAsyncBackend

__all__ = [
    "AiohttpBackend",
    "HttpxAsyncBackend",
]
