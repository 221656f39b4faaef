"""
Player service client.

Thin async wrapper over httpx for the Player API calls the gateway makes:
requesting AU launch URLs, deleting courses, and refreshing fetch tokens.
Upstream failures are raised as UpstreamError with the Player's status and
message embedded when available.

Dependencies: httpx, session_gateway.configs, session_gateway.core.exceptions
System role: Upstream HTTP boundary
"""

import base64
import logging
from typing import Any

import httpx

from session_gateway.configs.player import PlayerSettings
from session_gateway.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def create_http_client(settings: PlayerSettings) -> httpx.AsyncClient:
    """
    Create the shared async HTTP client used for all upstream traffic.

    Redirects are not followed so proxied responses reach the caller as-is.

    Args:
        settings: Player settings supplying timeouts

    Returns:
        httpx.AsyncClient: Client owned by the application lifespan
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            settings.timeout_seconds,
            connect=settings.connect_timeout_seconds,
        ),
        follow_redirects=False,
    )


def _describe_failure(body: Any) -> str:
    """Format the Player's ``message`` / ``srcError`` pair for error text."""
    if not isinstance(body, dict):
        return str(body) if body else ""

    message = body.get("message", "")
    src_error = body.get("srcError")
    return f"{message} ({src_error})" if src_error else str(message)


def _read_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class PlayerClient:
    """
    Player API client.

    Args:
        http_client: Shared httpx.AsyncClient
        settings: Player settings (base URL and fallback credentials)
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: PlayerSettings) -> None:
        self.http = http_client
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")

    def auth_headers(self, api_token: str | None = None) -> dict[str, str]:
        """
        Build the Authorization header for a Player API call.

        Args:
            api_token: Tenant bearer token; falls back to basic auth with the
                configured key/secret when absent

        Returns:
            dict: Header mapping, empty when no credentials are configured
        """
        if api_token:
            return {"Authorization": f"Bearer {api_token}"}
        if self.settings.key and self.settings.secret:
            raw = f"{self.settings.key}:{self.settings.secret}".encode("utf-8")
            return {"Authorization": f"Basic {base64.b64encode(raw).decode('ascii')}"}
        return {}

    async def request_launch_url(
        self,
        course_player_id: str,
        au_index: int,
        registration_code: str,
        actor: Any,
        api_token: str | None = None,
    ) -> dict[str, Any]:
        """
        Ask the Player for an AU launch URL.

        Args:
            course_player_id: Course id inside the Player
            au_index: Index of the AU within the course
            registration_code: Upstream registration reference
            actor: xAPI actor for the learner
            api_token: Tenant bearer token

        Returns:
            dict: Player response body with ``id`` and ``url``

        Raises:
            UpstreamError: Transport failure or non-200 status
        """
        url = f"{self.base_url}/api/v1/courses/{course_player_id}/launch-url/{au_index}"
        try:
            response = await self.http.post(
                url,
                json={"reg": registration_code, "actor": actor},
                headers=self.auth_headers(api_token),
            )
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"Failed to request AU launch url from player: {e}") from e

        if response.status_code != 200:
            raise UpstreamError(
                f"Failed to retrieve AU launch URL ({response.status_code}): "
                f"{_describe_failure(body)}",
                upstream_status=response.status_code,
            )

        logger.info(
            "AU launch URL issued by player",
            extra={"course_player_id": course_player_id, "au_index": au_index},
        )
        return body

    async def delete_course(self, course_player_id: str, api_token: str | None = None) -> None:
        """
        Delete a course in the Player.

        Only an empty 204 response counts as success.

        Args:
            course_player_id: Course id inside the Player
            api_token: Tenant bearer token

        Raises:
            UpstreamError: Transport failure or any status other than 204
        """
        url = f"{self.base_url}/api/v1/course/{course_player_id}"
        try:
            response = await self.http.delete(url, headers=self.auth_headers(api_token))
        except httpx.HTTPError as e:
            raise UpstreamError(f"Failed to request course deletion from player: {e}") from e

        if response.status_code != 204:
            detail = _describe_failure(_read_json(response))
            raise UpstreamError(
                f"Failed to delete player course ({response.status_code})"
                + (f": {detail}" if detail else ""),
                upstream_status=response.status_code,
            )

    async def fetch(self, fetch_url: str) -> tuple[int, Any]:
        """
        Call a session's fetch URL to obtain an auth token.

        Args:
            fetch_url: Player fetch URL for the session

        Returns:
            tuple: (status code, parsed JSON body)

        Raises:
            UpstreamError: Transport failure or a body that is not JSON
        """
        try:
            response = await self.http.post(fetch_url)
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"Failed to request fetch url from player: {e}") from e

        return response.status_code, body
