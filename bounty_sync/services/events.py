"""Canonical issue events and their publisher"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import redis

from bounty_sync.services.trackers.base import RemoteIssue

logger = logging.getLogger(__name__)

ISSUE_CREATED = "issue.created"
ISSUE_RECREATED = "issue.recreated"


def build_issue_event(
    event: str,
    provider: str,
    *,
    number: int,
    remote_issue: RemoteIssue,
    repository_id: Any,
    repo_name: str,
    owner_path: str,
) -> Dict[str, Any]:
    """Build the canonical event payload from remote tracker data.

    `labels` is only present when the remote issue has any.
    """
    issue = {
        "number": number,
        "title": remote_issue.title,
        "body": remote_issue.body,
        "owner": {"id": remote_issue.owner_id},
        "assignees": [{"id": a} for a in remote_issue.assignee_ids],
    }
    if remote_issue.labels:
        issue["labels"] = list(remote_issue.labels)
    return {
        "event": event,
        "provider": provider,
        "data": {
            "issue": issue,
            "repository": {
                "id": repository_id,
                "name": repo_name,
                "full_name": f"{owner_path}/{repo_name}",
            },
        },
    }


def serialize_event(event: Dict[str, Any]) -> str:
    return json.dumps(event)


class EventPublisher(ABC):
    """Hands serialized events to the message bus"""

    @abstractmethod
    def publish(self, message: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release transport resources (no-op by default)"""


class RedisEventPublisher(EventPublisher):
    """Publishes events to a Redis Stream.

    Delivery is fire-and-forget from the service's point of view; consumers
    read the stream with their own group semantics.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        stream_key: str = "bounty_sync:issue_events",
        maxlen: int = 100000,
        client: Optional[redis.Redis] = None,
    ):
        self.stream_key = stream_key
        self.maxlen = maxlen
        self._client = client or redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=10,
            socket_connect_timeout=10,
        )

    def publish(self, message: str) -> None:
        kwargs = {}
        if self.maxlen:
            kwargs = {"maxlen": self.maxlen, "approximate": True}
        entry_id = self._client.xadd(self.stream_key, {"payload": message}, **kwargs)
        logger.info(f"Published event {entry_id} to {self.stream_key}")

    def close(self) -> None:
        self._client.close()
