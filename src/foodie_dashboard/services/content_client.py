"""Client for reading objects from the headless content store API."""

import json
import logging
import os
import time
from collections.abc import Sequence

import httpx
from pydantic import ValidationError

from foodie_dashboard.models.content_models import ObjectList
from foodie_dashboard.observability import traced
from foodie_dashboard.observability.metrics import record_content_fetch

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.cosmicjs.com/v3"


class ContentClientError(Exception):
    """Base class for content store failures raised by this client."""


class ContentNotFoundError(ContentClientError):
    """The content store reported that no objects match the query (HTTP 404)."""

    def __init__(self, object_type: str) -> None:
        super().__init__(f"No '{object_type}' objects found")
        self.object_type = object_type
        self.status = 404


class ContentResponseError(ContentClientError):
    """The content store answered with a body that is not an object list."""


class ContentClient:
    """HTTP client for the content store's object listing endpoint.

    Each call issues a single unbounded request: no retry, no caching and
    no pagination. A 404 is reported as ``ContentNotFoundError``; every other
    HTTP or transport error propagates unchanged.
    """

    def __init__(
        self,
        bucket_slug: str,
        read_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the content client.

        Args:
            bucket_slug: Slug of the bucket holding the dashboard's objects
            read_key: Read key for the bucket
            api_url: Base URL of the content API (e.g., "https://api.cosmicjs.com/v3")
            timeout_seconds: Transport timeout for each request
        """
        self.bucket_slug = bucket_slug
        self.read_key = read_key
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_environment(cls) -> "ContentClient":
        """Create a client from ``COSMIC_*`` environment variables.

        Returns:
            ContentClient configured for the dashboard's bucket

        Raises:
            ValueError: If the bucket slug or read key is missing
        """
        bucket_slug = os.getenv("COSMIC_BUCKET_SLUG")
        read_key = os.getenv("COSMIC_READ_KEY")

        if not bucket_slug or not read_key:
            raise ValueError("COSMIC_BUCKET_SLUG and COSMIC_READ_KEY must be set in environment")

        api_url = os.getenv("COSMIC_API_URL", DEFAULT_API_URL)
        timeout = float(os.getenv("COSMIC_TIMEOUT_SECONDS", "10"))

        logger.info(f"Content client configured - bucket: {bucket_slug}, URL: {api_url}")
        return cls(bucket_slug=bucket_slug, read_key=read_key, api_url=api_url, timeout_seconds=timeout)

    @property
    def objects_url(self) -> str:
        """URL of the bucket's object listing endpoint."""
        return f"{self.api_url}/buckets/{self.bucket_slug}/objects"

    @traced("content.find_objects")
    async def find_objects(
        self,
        object_type: str,
        props: Sequence[str],
        depth: int = 0,
    ) -> ObjectList:
        """Fetch every object of a type with the given projection.

        Args:
            object_type: Object type slug (e.g., "orders")
            props: Field names to project
            depth: Relation expansion depth (0 leaves references as ids)

        Returns:
            ObjectList with the matching objects

        Raises:
            ContentNotFoundError: If the store has no objects of this type
            ContentResponseError: If the response body is not an object list
            httpx.HTTPStatusError: For any other unsuccessful HTTP status
            httpx.RequestError: For transport failures
        """
        params = {
            "read_key": self.read_key,
            "query": json.dumps({"type": object_type}),
            "props": ",".join(props),
            "depth": str(depth),
        }

        started = time.perf_counter()
        outcome = "error"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(self.objects_url, params=params)

                if response.status_code == 404:
                    outcome = "not_found"
                    logger.info(f"Content store returned 404 for type '{object_type}'")
                    raise ContentNotFoundError(object_type)

                response.raise_for_status()

                try:
                    object_list = ObjectList.model_validate(response.json())
                except (ValueError, ValidationError) as e:
                    raise ContentResponseError(
                        f"Malformed object list for type '{object_type}': {e}"
                    ) from e

            outcome = "success"
            logger.debug(
                f"Fetched {len(object_list.objects)} '{object_type}' objects (depth={depth})"
            )
            return object_list
        finally:
            record_content_fetch(object_type, outcome, time.perf_counter() - started)
