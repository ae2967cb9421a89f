"""MVP activities API client."""

from __future__ import annotations

import math
import os
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional

import requests
import structlog

from . import MVP_API_BASE, TENANT
from .profile import UserProfile

logger = structlog.get_logger(__name__)

TOKEN_ENV_VAR = "MVP_API_TOKEN"
EMAIL_ENV_VAR = "MVP_API_EMAIL"

USER_STATUS_PATH = "/api/UserStatus/{email}"
ACTIVITIES_PATH = "/api/Activities/"
ACTIVITY_PATH = "/api/Activities/{activity_id}"
HIGH_IMPACT_PATH = "/api/Contributions/HighImpact/{activity_id}"
SEARCH_PATH = "/api/Contributions/CommunityLeaderActivities/search"

PAGE_SIZE = 50

# Headers sent by the MVP website, reproduced verbatim.
DEFAULT_HEADERS = {
    "accept": "*/*",
    "accept-language": "en-GB,en-US;q=0.9,en;q=0.8",
    "content-type": "application/json",
    "request-context": "appId=cid-v1:2db9d7c1-6193-4a5a-b311-b0996a53daee",
    "sec-ch-ua": '"Not A(Brand";v="99", "Google Chrome";v="121", "Chromium";v="121"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"macOS"',
    "sec-fetch-dest": "empty",
    "sec-fetch-mode": "cors",
    "sec-fetch-site": "cross-site",
    "Referer": "https://mvp.microsoft.com/",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class MVPError(RuntimeError):
    """Base class for every error raised by the client."""


class MVPConfigurationError(MVPError):
    """Raised when the auth token or the email cannot be resolved."""


class MVPClientNotInitializedError(MVPError):
    """Raised when a data operation runs before ``init()``."""


class MVPAPIError(MVPError):
    """Raised when the MVP API answers with a status code >= 400.

    The message is the raw response body, as returned by the service.
    """

    def __init__(self, body: str, *, status_code: int) -> None:
        super().__init__(body)
        self.body = body
        self.status_code = status_code


@dataclass
class SubmittedActivitiesResult:
    """Record for the results of a submitted activities listing."""

    activities: List[Dict[str, Any]]
    total_requests: int
    filtered_count: int


class MVPActivitiesClient:
    """Authorized access to the MVP activities API.

    Credentials not passed explicitly are read from ``MVP_API_TOKEN`` and
    ``MVP_API_EMAIL``. ``init()`` must be called once before any other
    operation; it fetches the user profile needed by the activity endpoints.

    Example::

        client = MVPActivitiesClient()
        client.init()
        for activity in client.get_submitted_activities():
            print(activity["title"])
    """

    def __init__(
        self,
        auth_token: Optional[str] = None,
        email: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = MVP_API_BASE,
    ) -> None:
        self.auth_token = auth_token or os.environ.get(TOKEN_ENV_VAR)
        self.email = email or os.environ.get(EMAIL_ENV_VAR)

        if not self.auth_token:
            raise MVPConfigurationError(f"{TOKEN_ENV_VAR} is required")
        if not self.email:
            raise MVPConfigurationError(f"{EMAIL_ENV_VAR} is required")

        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self._profile: Optional[UserProfile] = None
        self._last_request_count = 0
        self._last_filtered_count = 0

    @property
    def initialized(self) -> bool:
        return self._profile is not None

    @property
    def profile(self) -> UserProfile:
        """Return the cached user profile."""
        if self._profile is None:
            raise MVPClientNotInitializedError(
                "Client not initialized. Call init() first"
            )
        return self._profile

    @property
    def last_request_count(self) -> int:
        """Return the number of page requests performed by the last listing."""
        return self._last_request_count

    def init(self) -> UserProfile:
        """Fetch and cache the user profile."""
        payload = self.request(
            "GET",
            self._url(USER_STATUS_PATH, email=self.email),
            require_init=False,
            endpoint=USER_STATUS_PATH,
        )
        try:
            profile = UserProfile.from_dict(payload or {})
        except KeyError as exc:
            raise MVPAPIError(
                f"User profile response is missing {exc.args[0]}",
                status_code=200,
            ) from exc

        self._profile = profile
        logger.info("client_initialised", user_profile_id=profile.id)
        return profile

    def build_headers(self) -> Dict[str, str]:
        """Return the headers for a single call, with a fresh request id."""
        headers = dict(DEFAULT_HEADERS)
        headers["request-id"] = f"|{uuid.uuid4()}"
        headers["authorization"] = f"Bearer {self.auth_token}"
        return headers

    def request(
        self,
        method: str,
        url: str,
        *,
        json: Optional[Mapping[str, Any]] = None,
        require_init: bool = True,
        endpoint: Optional[str] = None,
    ) -> Any:
        """Perform an authorized HTTP request and return the decoded JSON body.

        ``endpoint`` is the unformatted path logged on failure; it defaults to
        ``url``.
        """
        if require_init and not self.initialized:
            raise MVPClientNotInitializedError(
                "Client not initialized. Call init() first"
            )

        response = self.session.request(
            method,
            url,
            json=json,
            headers=self.build_headers(),
        )

        if response.status_code >= 400:
            logger.error(
                "mvp_api_error",
                method=method,
                endpoint=endpoint or url,
                status_code=response.status_code,
            )
            raise MVPAPIError(response.text, status_code=response.status_code)

        if not response.content:
            return None
        return response.json()

    def submit_activity(self, activity: Mapping[str, Any]) -> Any:
        """Submit a new activity.

        The activity mapping is forwarded as-is; ``userProfileId`` and ``id``
        are filled in unless the caller provides them.
        """
        body = {"userProfileId": self.profile.id, "id": 0, **activity}
        response = self.request(
            "POST",
            self._url(ACTIVITIES_PATH),
            json={"activity": body},
            endpoint=ACTIVITIES_PATH,
        )
        logger.info("activity_submitted", title=activity.get("title"))
        return response

    def update_activity(self, activity: Mapping[str, Any]) -> Any:
        """Update an existing activity, identified by its ``id`` field."""
        body = {"userProfileId": self.profile.id, **activity}
        response = self.request(
            "PUT",
            self._url(ACTIVITIES_PATH),
            json={"activity": body},
            endpoint=ACTIVITIES_PATH,
        )
        logger.info("activity_updated", activity_id=activity.get("id"))
        return response

    def mark_as_high_impact(self, activity_id: int) -> Any:
        response = self.request(
            "PUT",
            self._url(HIGH_IMPACT_PATH, activity_id=activity_id),
            json={"contribution": {"Id": activity_id, "IsHighImpact": True}},
            endpoint=HIGH_IMPACT_PATH,
        )
        logger.info("activity_marked_high_impact", activity_id=activity_id)
        return response

    def delete_activity(self, activity_id: int) -> Any:
        """Delete an activity.

        NOTE: as of 2024-02-04 the API reports success for this call but the
        activity is not actually removed; it shows up again on the next
        listing. The MVP website behaves the same way.
        """
        response = self.request(
            "DELETE",
            self._url(ACTIVITY_PATH, activity_id=activity_id),
            endpoint=ACTIVITY_PATH,
        )
        logger.info("activity_deleted", activity_id=activity_id)
        return response

    def get_submitted_activities(self) -> List[Dict[str, Any]]:
        """Return every activity submitted by the user, in page order."""
        return list(self.iter_submitted_activities())

    def fetch_submitted_activities(self) -> SubmittedActivitiesResult:
        """Fetch every submitted activity along with listing metadata."""
        activities = list(self.iter_submitted_activities())
        return SubmittedActivitiesResult(
            activities=activities,
            total_requests=self._last_request_count,
            filtered_count=self._last_filtered_count,
        )

    def iter_submitted_activities(self) -> Iterator[Dict[str, Any]]:
        """Yield submitted activities from the search endpoint page by page.

        Raises MVPClientNotInitializedError on call, before the first page.
        """
        return self._iter_search_pages(self.profile.user_profile_identifier)

    def _iter_search_pages(
        self, identifier: Optional[str]
    ) -> Iterator[Dict[str, Any]]:
        search_url = self._url(SEARCH_PATH)
        self._last_request_count = 0
        self._last_filtered_count = 0

        num_pages = 1
        current_page = 1
        while current_page <= num_pages:
            search = {
                "pageIndex": current_page,
                "pageSize": PAGE_SIZE,
                "tenant": TENANT,
                "userProfileIdentifier": identifier,
                "contributionTargetAudience": [],
                "technologyFocusArea": [],
                "type": [],
            }
            body = self.request(
                "POST", search_url, json=search, endpoint=SEARCH_PATH
            )
            self._last_request_count += 1
            if body is None:
                body = {}
            elif not isinstance(body, Mapping):
                raise MVPAPIError(
                    f"Unexpected search response: {body!r}", status_code=200
                )

            batch = body.get("communityLeaderActivities") or []
            for activity in batch:
                yield activity

            filtered_count = int(body.get("filteredCount") or 0)
            self._last_filtered_count = filtered_count
            num_pages = math.ceil(filtered_count / PAGE_SIZE)
            logger.info(
                "fetched_activities_page",
                page=current_page,
                fetched=len(batch),
                total_pages=num_pages,
            )
            current_page += 1

    def _url(self, path: str, **params: Any) -> str:
        return self.base_url + path.format(**params)
