"""GitHub API client."""

import json
import logging
import os
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import SecretStr, TypeAdapter
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from .errors import (
    EncodingError,
    MalformedError,
    NotAnOrganizationError,
    NotAUserError,
    NothingError,
    ParseEndpointError,
    RequestBuildError,
    RequestError,
    UnauthorizedError,
    UnavailableError,
    UnhandledError,
    ValidationError,
)
from .models import AccountBase, AccountInfo

if TYPE_CHECKING:
    from .account import Account, Organization, User
    from .repository import Repository

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
USER_AGENT = "ghandle"
PER_PAGE = 100

# Retry configuration
DEFAULT_MAX_RETRIES = 3
DEFAULT_MIN_WAIT = 1  # seconds
DEFAULT_MAX_WAIT = 10  # seconds

# Retryable exceptions; HTTP status errors never reach the retry loop
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
    httpx.PoolTimeout,
    httpx.NetworkError,
)


def get_token_from_gh_cli() -> str | None:
    """
    Get GitHub token from gh cli.

    Returns:
        Token string or None if gh cli not available/authenticated
    """
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            logger.info("Using token from gh cli")
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("gh cli not available: %s", e)
    return None


def get_token(token: str | None = None, use_gh_cli: bool = False) -> str | None:
    """
    Get GitHub token from various sources.

    Priority:
    1. Explicitly provided token
    2. Environment variable GH_TOKEN / GITHUB_TOKEN
    3. gh cli (`gh auth token`) - only if use_gh_cli=True

    Args:
        token: Explicitly provided token
        use_gh_cli: Whether to use gh cli credentials (requires user consent)

    Returns:
        GitHub token or None
    """
    if token:
        logger.debug("Using explicitly provided token")
        return token

    env_token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if env_token:
        logger.info("Using token from environment variable")
        return env_token

    if use_gh_cli:
        return get_token_from_gh_cli()

    return None


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff for transient transport failures.

    Only connection-level errors are retried; a response with an error status
    is classified and raised on the first attempt.
    """

    max_attempts: int = DEFAULT_MAX_RETRIES
    multiplier: float = 1
    min_wait: float = DEFAULT_MIN_WAIT
    max_wait: float = DEFAULT_MAX_WAIT

    @classmethod
    def immediate(cls, max_attempts: int = DEFAULT_MAX_RETRIES) -> "RetryPolicy":
        """Policy that retries without sleeping, for tests."""
        return cls(max_attempts=max_attempts, multiplier=0, min_wait=0, max_wait=0)

    def build(self):
        """Create a tenacity retry decorator for this policy."""
        return retry(
            retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.multiplier, min=self.min_wait, max=self.max_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )


class GitHubResponse:
    """Successful response with typed body accessors."""

    def __init__(self, response: httpx.Response):
        self._response = response

    @property
    def code(self) -> int:
        return self._response.status_code

    def is_success(self) -> bool:
        return self._response.is_success

    def bytes(self) -> bytes:
        return self._response.content

    def text(self) -> str:
        try:
            return self._response.content.decode(self._response.encoding or "utf-8")
        except (UnicodeDecodeError, LookupError) as e:
            raise EncodingError(f"Encoding error: {e}") from e

    def json(self, model: Any = None) -> Any:
        """
        Decode the body, validating it into ``model`` when given.

        ``model`` may be anything pydantic can validate: a BaseModel subclass,
        ``list[...]``, ``dict``, an annotated union...
        """
        text = self.text()
        try:
            if model is None:
                return json.loads(text)
            return TypeAdapter(model).validate_json(text)
        except ValueError as e:
            logger.debug("Malformed response body for %s: %s", model, e)
            raise MalformedError(str(e)) from e


def _server_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return None


def classify(response: httpx.Response) -> GitHubResponse:
    """Return the response if successful, otherwise raise its status error."""
    if response.is_success:
        return GitHubResponse(response)

    code = response.status_code
    message = _server_message(response)
    logger.debug("Error response: status=%d message=%s", code, message)
    if code in (401, 403):
        raise UnauthorizedError(code, message)
    if code == 404:
        raise NothingError(code, message)
    if code == 422:
        raise ValidationError(code, message)
    raise UnhandledError(code, message)


class GitHubClient:
    """
    GitHub REST API client with retry support.

    Holds one connection pool and read-only credentials; it is shared by every
    handle derived from it and may be used from several threads.
    """

    BASE_URL = API_URL

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        use_gh_cli: bool = False,
        retry_policy: RetryPolicy | None = None,
        user_agent: str = USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token (optional)
            base_url: Custom base URL (defaults to $GITHUB_API_URL, then GitHub API)
            timeout: Request timeout in seconds
            use_gh_cli: Use gh cli credentials (requires user consent)
            retry_policy: Backoff for transient failures (default: 3 attempts)
            user_agent: User-Agent header value
            transport: Custom httpx transport
        """
        self.base_url = base_url or os.environ.get("GITHUB_API_URL") or self.BASE_URL
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": user_agent,
        }

        resolved_token = get_token(token, use_gh_cli=use_gh_cli)
        self.token = SecretStr(resolved_token) if resolved_token else None

        if self.token is not None:
            self.headers["Authorization"] = f"Bearer {self.token.get_secret_value()}"
            logger.debug("GitHub client initialized with token")
        else:
            logger.warning("GitHub client initialized without token (rate limited)")

        self._http = httpx.Client(
            base_url=self.base_url,
            headers=self.headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )
        logger.info(
            "GitHub client ready, base_url=%s, max_attempts=%d",
            self.base_url,
            self.retry_policy.max_attempts,
        )

    def __repr__(self) -> str:
        return f"GitHubClient(base_url={self.base_url!r}, authenticated={self.token is not None})"

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ============ Requests ============

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> GitHubResponse:
        """
        Send a request to ``endpoint`` (relative to the API base).

        Transient transport failures are retried according to the retry
        policy. Non-2xx responses raise a ``StatusError`` subclass.
        """
        try:
            request = self._http.build_request(method, endpoint, params=params, json=json)
        except httpx.InvalidURL as e:
            raise ParseEndpointError(endpoint) from e
        except (TypeError, ValueError) as e:
            raise RequestBuildError(f"Request could not be built: {e}") from e

        @self.retry_policy.build()
        def do_request() -> httpx.Response:
            logger.debug("Request: %s %s", method, request.url)
            return self._http.send(request)

        try:
            response = do_request()
        except httpx.TransportError as e:
            logger.error("Server unavailable: %s %s (%s)", method, endpoint, e)
            raise UnavailableError(f"Server is unavailable: {e}") from e
        except httpx.RequestError as e:
            logger.error("Request failed: %s %s (%s)", method, endpoint, e)
            raise RequestError(f"Request failed: {e}") from e

        logger.debug(
            "Response: %s %s (status=%d)",
            method,
            endpoint,
            response.status_code,
        )
        return classify(response)

    def get(self, endpoint: str, *, params: dict[str, Any] | None = None) -> GitHubResponse:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, *, json: Any = None) -> GitHubResponse:
        return self.request("POST", endpoint, json=json)

    def put(self, endpoint: str, *, json: Any = None) -> GitHubResponse:
        return self.request("PUT", endpoint, json=json)

    def patch(self, endpoint: str, *, json: Any = None) -> GitHubResponse:
        return self.request("PATCH", endpoint, json=json)

    def delete(self, endpoint: str, *, json: Any = None) -> GitHubResponse:
        return self.request("DELETE", endpoint, json=json)

    def paginate(
        self,
        endpoint: str,
        model: Any,
        *,
        params: dict[str, Any] | None = None,
        per_page: int = PER_PAGE,
        stop_on_missing: bool = False,
    ) -> list:
        """
        Collect every page of a list endpoint.

        Pages are requested until one comes back shorter than ``per_page``.
        There is no page cap; a server that keeps returning full pages keeps
        the loop going.

        Args:
            endpoint: List endpoint, relative to the API base
            model: Item model each page is validated into
            params: Extra query parameters sent with every page
            per_page: Page size
            stop_on_missing: End the walk on a 404 and keep the pages
                already collected, instead of raising ``NothingError``

        Returns:
            Items of every page, in server order
        """
        collection: list = []
        page = 0

        while True:
            page += 1
            query = {"per_page": per_page, "page": page, **(params or {})}
            try:
                response = self.get(endpoint, params=query)
            except NothingError:
                if not stop_on_missing:
                    raise
                logger.debug("Page %d of %s not found, stopping", page, endpoint)
                break
            items = response.json(list[model])
            collection.extend(items)
            logger.debug("Page %d of %s: %d items", page, endpoint, len(items))

            if len(items) < per_page:
                break

        logger.debug("Collected %d items from %s", len(collection), endpoint)
        return collection

    # ============ Accounts ============

    def get_username(self, name: str) -> AccountBase:
        """Fetch the account behind a login, whatever its kind."""
        logger.info("Fetching account: %s", name)
        return self.get(f"users/{name}").json(AccountInfo)

    def get_account(self, name: str) -> "Account":
        """Resolve ``owner`` or ``owner/...`` into an organization or user handle."""
        from .account import resolve_account

        return resolve_account(self, name.split("/", 1)[0])

    def get_organization(self, name: str) -> "Organization":
        from .account import account_from_info

        info = self.get_username(name.split("/", 1)[0])
        if not info.is_organization():
            raise NotAnOrganizationError(info)
        return account_from_info(self, info)

    def get_user(self, name: str) -> "User":
        from .account import account_from_info

        info = self.get_username(name.split("/", 1)[0])
        if not info.is_user():
            raise NotAUserError(info)
        return account_from_info(self, info)

    def get_repository(self, name: str) -> "Repository":
        """Resolve ``owner/repo`` into a repository handle."""
        return self.get_account(name).get_repository(name)
