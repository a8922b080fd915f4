"""Functions to interact with the cloud save REST API"""

import json
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from cloudsync import settings
from cloudsync.exceptions import AuthorizationError, SubscriptionRequiredError
from cloudsync.util import system
from cloudsync.util.log import logger

ARTIFACTS_PATH = "/profile/games/artifacts"
SUBSCRIPTION_ERROR_MESSAGES = ("user/not-subscribed", "subscription-required")


@dataclass
class UploadAuthorization:
    """Permission to upload one archive, valid for a short time.

    Attributes:
        artifact_id: Id of the artifact on the server
        upload_url: Presigned URL the archive must be sent to
    """

    artifact_id: str
    upload_url: str


def read_api_key() -> Optional[str]:
    """Read the API token from disk"""
    if not system.path_exists(settings.API_KEY_FILE_PATH):
        return None
    with open(settings.API_KEY_FILE_PATH, "r", encoding="utf-8") as token_file:
        token = token_file.read().strip()
    return token or None


def read_user_info() -> Dict[str, Any]:
    if not os.path.exists(settings.USER_INFO_FILE_PATH):
        return {}
    try:
        with open(settings.USER_INFO_FILE_PATH, encoding="utf-8") as user_info_file:
            return json.load(user_info_file)
    except (OSError, json.JSONDecodeError) as ex:
        logger.error("Unable to read user info in %s: %s", settings.USER_INFO_FILE_PATH, ex)
        return {}


def parse_api_date(date_string: str) -> datetime:
    """Convert an ISO 8601 date coming from the API to an aware datetime"""
    date = datetime.fromisoformat(date_string.replace("Z", "+00:00"))
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return date


def is_subscription_active(user_info: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    subscription = user_info.get("subscription") or {}
    expires_at = subscription.get("expiresAt")
    if not expires_at:
        return False
    try:
        expiration = parse_api_date(expires_at)
    except ValueError:
        logger.error("Invalid subscription expiration date: %s", expires_at)
        return False
    return expiration > (now or datetime.now(timezone.utc))


def _is_subscription_error(response: requests.Response) -> bool:
    if response.status_code == 402:
        return True
    try:
        body = response.json()
    except ValueError:
        return False
    return isinstance(body, dict) and body.get("message") in SUBSCRIPTION_ERROR_MESSAGES


class CloudSyncApi:
    """Client for the API that authorizes save uploads"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None, session=None) -> None:
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self.session = session or requests.Session()

    def get_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": "%s/%s" % (settings.PROJECT, settings.VERSION)}
        token = read_api_key()
        if token:
            headers["Authorization"] = "Bearer %s" % token
        return headers

    def has_active_subscription(self) -> bool:
        """Whether the connected user may use cloud saves, from the cached account info"""
        return is_subscription_active(read_user_info())

    def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = self.base_url + path
        logger.debug("POST %s", url)
        try:
            response = self.session.post(url, json=payload, headers=self.get_headers(), timeout=self.timeout)
        except requests.RequestException as ex:
            raise AuthorizationError("Unable to connect to server (%s): %s" % (url, ex)) from ex
        if _is_subscription_error(response):
            raise SubscriptionRequiredError()
        try:
            response.raise_for_status()
        except requests.HTTPError as ex:
            raise AuthorizationError("%s" % ex, status_code=response.status_code) from ex
        try:
            return response.json()
        except ValueError as ex:
            raise AuthorizationError("Invalid JSON response from %s" % url) from ex

    def request_upload(
        self,
        artifact_length: int,
        shop: str,
        object_id: str,
        hostname: str,
        wine_prefix_path: Optional[str],
        home_dir: str,
        download_option_title: Optional[str],
        platform: str,
        label: Optional[str] = None,
    ) -> UploadAuthorization:
        """Ask for permission to upload an artifact of artifact_length bytes"""
        response = self.post(
            ARTIFACTS_PATH,
            {
                "artifactLengthInBytes": artifact_length,
                "shop": shop,
                "objectId": object_id,
                "hostname": hostname,
                "winePrefixPath": wine_prefix_path,
                "homeDir": home_dir,
                "downloadOptionTitle": download_option_title,
                "platform": platform,
                "label": label,
            },
        )
        try:
            return UploadAuthorization(artifact_id=response["id"], upload_url=response["uploadUrl"])
        except (KeyError, TypeError) as ex:
            raise AuthorizationError("Incomplete upload authorization: %s" % response) from ex
