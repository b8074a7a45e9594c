"""
HTTP access to remote agents.

A remote agent publishes its DDO at ``<url>/api/ddo``. Access may require a
token, issued by ``<url>/api/v1/auth/token`` against Basic authentication.
"""
import base64
import logging
from typing import Any, Dict, Optional

import requests

from ..exceptions import RemoteAgentError
from .authentication import AgentAuthentication

logger = logging.getLogger(__name__)

DDO_PATH = "/api/ddo"
TOKEN_PATH = "/api/v1/auth/token"
DEFAULT_TIMEOUT = 30


def url_join(base: str, path: str) -> str:
    return base.rstrip("/") + "/" + path.lstrip("/")


class RemoteAgentAdapter:
    """
    Client for the remote agent HTTP API.

    Requests are never retried here, failures are raised as
    :class:`RemoteAgentError` carrying the URL and status code.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def create_headers(content_type: Optional[str] = None, token: Optional[str] = None) -> Dict[str, str]:
        headers = {}
        if content_type:
            headers["Content-Type"] = content_type
        if token:
            headers["Authorization"] = f"token {token}"
        return headers

    @staticmethod
    def basic_auth_header(username: str, password: Optional[str]) -> Dict[str, str]:
        credentials = f"{username}:{password or ''}".encode("utf-8")
        return {"Authorization": f"Basic {base64.b64encode(credentials).decode('ascii')}"}

    def _request(self, method: str, url: str, headers: Dict[str, str]) -> requests.Response:
        self.logger.debug(f"{method} {url}")
        try:
            return self.session.request(method, url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"Request to remote agent failed: {method} {url}: {e}")
            raise RemoteAgentError(f"Request to {url} failed: {str(e)}", url=url) from e

    def get_authorization_token(self, username: str, password: Optional[str], url: str) -> str:
        """
        Get an access token, reusing the newest existing one or creating a new one.

        Args:
            username: Agent account username
            password: Agent account password
            url: Token endpoint URL

        Returns:
            Access token

        Raises:
            RemoteAgentError: If the token list cannot be read or a token cannot be created
        """
        headers = self.basic_auth_header(username, password)
        response = self._request("GET", url, headers)
        if not response.ok:
            raise RemoteAgentError(
                f"Unable to get access token from {url} error: {response.status_code}",
                url=url,
                status_code=response.status_code
            )

        token_list = self._json(response, url)
        if not isinstance(token_list, list):
            raise RemoteAgentError(
                f"Unexpected token list from {url}: expected a JSON array",
                url=url,
                status_code=response.status_code
            )
        if token_list:
            return token_list[-1]

        response = self._request("POST", url, headers)
        if response.ok:
            return self._json(response, url)
        raise RemoteAgentError(
            f"Unable to create new token from {url} error: {response.status_code}",
            url=url,
            status_code=response.status_code
        )

    def get_ddo(self, url: str, token: Optional[str] = None) -> str:
        """
        Fetch the DDO text published by a remote agent

        Raises:
            RemoteAgentError: If the agent does not return the DDO
        """
        ddo_url = url_join(url, DDO_PATH)
        headers = self.create_headers("application/json", token)
        response = self._request("GET", ddo_url, headers)
        if response.ok:
            return response.text
        raise RemoteAgentError(
            f"Unable to get DDO information from url {ddo_url} error: {response.status_code}",
            url=ddo_url,
            status_code=response.status_code
        )

    def _json(self, response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteAgentError(f"Invalid JSON response from {url}: {str(e)}", url=url,
                                   status_code=response.status_code)

    def resolve_url(self, url: str, authentication: Optional[AgentAuthentication] = None) -> Optional[str]:
        """
        Fetch the DDO text of the agent at ``url`` using the given credentials.

        A token is used as is; otherwise a username and password are exchanged
        for a token first.

        Returns:
            DDO text, or None if the agent returned an empty document
        """
        token = None
        if authentication is not None:
            token = authentication.get_token()
            if not token and authentication.username:
                token = self.get_authorization_token(
                    authentication.username,
                    authentication.get_password(),
                    url_join(url, TOKEN_PATH)
                )
        return self.get_ddo(url, token) or None

    def close(self) -> None:
        self.session.close()
