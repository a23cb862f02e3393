import json
import logging
import unittest

from bounty_sync.errors import ForbiddenError, RemoteProviderError, ValidationError
from bounty_sync.models import Issue
from bounty_sync.security import CurrentUser
from bounty_sync.services.issue_service import IssueService
from bounty_sync.services.trackers.base import RemoteIssue

from tests.fakes import (
    ClientFactory,
    RecordingPublisher,
    StubProviderError,
    StubTrackerClient,
    add_account,
    add_issue,
    add_project,
    make_session,
)

logging.disable(logging.CRITICAL)


class IssueRecreateTests(unittest.TestCase):
    def setUp(self):
        self.db = make_session()
        self.client = StubTrackerClient(repository_id=42)
        self.publisher = RecordingPublisher()
        self.svc = IssueService(self.db, self.publisher, client_factory=ClientFactory(self.client))
        self.project = add_project(
            self.db, owner="alice", repo_url="https://gitlab.com/acme/platform/api"
        )
        add_account(self.db, "alice", provider="gitlab", token="alice-token")

    def tearDown(self):
        self.db.close()

    def _request(self, recreate=True, number=5):
        return {
            "projectId": self.project.id,
            "number": number,
            "url": f"https://gitlab.com/acme/platform/api/-/issues/{number}",
            "recreate": recreate,
        }

    def _events(self):
        return [json.loads(m) for m in self.publisher.messages]

    def test_publishes_issue_created_when_no_local_record(self):
        result = self.svc.recreate(self._request(), CurrentUser("alice"))

        self.assertEqual(result, {"success": True})
        self.assertEqual(
            self._events(),
            [
                {
                    "event": "issue.created",
                    "provider": "gitlab",
                    "data": {
                        "issue": {
                            "number": 5,
                            "title": "[$100] Fix it",
                            "body": "Please fix",
                            "owner": {"id": 7},
                            "assignees": [{"id": 8}, {"id": 9}],
                            "labels": ["Open for pickup"],
                        },
                        "repository": {
                            "id": 42,
                            "name": "api",
                            "full_name": "acme/platform/api",
                        },
                    },
                }
            ],
        )

    def test_publishes_issue_recreated_when_local_record_exists(self):
        add_issue(self.db, self.project, provider="gitlab", repository_id=42, number=5, title="stale title")

        self.svc.recreate(self._request(), CurrentUser("alice"))

        events = self._events()
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0]["event"], "issue.recreated")
        # Built from the remote issue, not the cached row.
        self.assertEqual(events[0]["data"]["issue"]["title"], "[$100] Fix it")
        # The synchronizer never writes issue rows itself.
        self.assertEqual(self.db.query(Issue).count(), 1)

    def test_record_for_other_provider_does_not_count(self):
        add_issue(self.db, self.project, provider="github", repository_id=42, number=5)

        self.svc.recreate(self._request(), CurrentUser("alice"))

        self.assertEqual(self._events()[0]["event"], "issue.created")

    def test_labels_omitted_when_remote_has_none(self):
        self.client.remote_issue = RemoteIssue(title="T", body="B", owner_id=1, assignee_ids=[], labels=[])

        self.svc.recreate(self._request(), CurrentUser("alice"))

        issue = self._events()[0]["data"]["issue"]
        self.assertNotIn("labels", issue)
        self.assertEqual(issue["assignees"], [])

    def test_repeated_recreate_publishes_once_per_call(self):
        self.svc.recreate(self._request(), CurrentUser("alice"))
        self.svc.recreate(self._request(), CurrentUser("alice"))

        self.assertEqual(len(self.publisher.messages), 2)

    def test_delete_request_removes_local_record_without_publishing(self):
        add_issue(self.db, self.project, provider="gitlab", repository_id=42, number=5)

        result = self.svc.recreate(self._request(recreate=False), CurrentUser("alice"))

        self.assertEqual(result, {"success": True})
        self.assertEqual(self.db.query(Issue).count(), 0)
        self.assertEqual(self.publisher.messages, [])

    def test_delete_request_without_local_record_is_noop(self):
        other = add_issue(self.db, self.project, provider="gitlab", repository_id=42, number=6)

        result = self.svc.recreate(self._request(recreate=False), CurrentUser("alice"))

        self.assertEqual(result, {"success": True})
        self.assertEqual([i.id for i in self.db.query(Issue).all()], [other.id])
        self.assertEqual(self.publisher.messages, [])

    def test_remote_issue_failure_aborts_before_datastore_and_bus(self):
        add_issue(self.db, self.project, provider="gitlab", repository_id=42, number=5)
        self.client.get_issue_error = StubProviderError("404 Issue Not Found", upstream_status=404)

        for recreate in (True, False):
            with self.subTest(recreate=recreate):
                with self.assertRaises(RemoteProviderError):
                    self.svc.recreate(self._request(recreate=recreate), CurrentUser("alice"))

        self.assertEqual(self.db.query(Issue).count(), 1)
        self.assertEqual(self.publisher.messages, [])

    def test_repository_failure_aborts_before_issue_fetch(self):
        self.client.repo_error = StubProviderError("403 Forbidden", upstream_status=403)

        with self.assertRaises(RemoteProviderError):
            self.svc.recreate(self._request(), CurrentUser("alice"))

        self.assertEqual([c[0] for c in self.client.calls], ["get_repository_details"])
        self.assertEqual(self.publisher.messages, [])

    def test_forbidden_user(self):
        with self.assertRaises(ForbiddenError):
            self.svc.recreate(self._request(), CurrentUser("mallory"))
        self.assertEqual(self.client.calls, [])

    def test_invalid_request(self):
        request = self._request()
        del request["recreate"]

        with self.assertRaises(ValidationError):
            self.svc.recreate(request, CurrentUser("alice"))


if __name__ == "__main__":
    unittest.main()
