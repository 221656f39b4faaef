"""
Passthrough route handling.

Proxied LRS responses must reach the caller exactly as the upstream sent
them, so gateway-level header decoration is skipped on those paths.

Dependencies: re (stdlib), starlette
System role: CORS policy for proxied vs. gateway-owned routes
"""

import re

from starlette.middleware.cors import CORSMiddleware
from starlette.types import Receive, Scope, Send

_LRS_PATH = re.compile(r"/sessions/[^/]+/lrs(/|$)")


def is_passthrough_path(path: str) -> bool:
    """Whether a request path is served by the LRS reverse proxy."""
    return _LRS_PATH.search(path) is not None


class PassthroughCORSMiddleware(CORSMiddleware):
    """
    CORS middleware that leaves LRS proxy traffic alone.

    The upstream LRS answers preflights and supplies CORS headers itself.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and is_passthrough_path(scope["path"]):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
