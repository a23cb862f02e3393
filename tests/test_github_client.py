import logging
import unittest
from unittest.mock import Mock

import requests

from bounty_sync.services.trackers.github_client import GitHubClient, GitHubProviderError

logging.disable(logging.CRITICAL)


def _response(status_code, body=None, text=""):
    response = Mock()
    response.status_code = status_code
    if isinstance(body, Exception):
        response.json = Mock(side_effect=body)
    else:
        response.json = Mock(return_value=body)
    response.text = text
    return response


class GitHubClientTests(unittest.TestCase):
    def setUp(self):
        self.client = GitHubClient("secret", base_url="https://api.github.test/", timeout=5)
        self.client.session = Mock()

    def test_init_sets_auth_header_and_strips_base_url(self):
        client = GitHubClient("secret")
        self.assertEqual(client.session.headers["Authorization"], "token secret")
        self.assertEqual(self.client.base_url, "https://api.github.test")

    def test_create_issue_posts_payload(self):
        self.client.session.request.return_value = _response(
            201, {"number": 5, "html_url": "https://github.com/acme/widgets/issues/5"}
        )

        created = self.client.create_issue("acme", "widgets", "[$10] T", "B", ["Open for pickup"])

        self.assertEqual(created.number, 5)
        self.assertEqual(created.url, "https://github.com/acme/widgets/issues/5")
        self.client.session.request.assert_called_once_with(
            "POST",
            "https://api.github.test/repos/acme/widgets/issues",
            timeout=5,
            json={"title": "[$10] T", "body": "B", "labels": ["Open for pickup"]},
        )

    def test_get_issue_maps_fields(self):
        self.client.session.request.return_value = _response(
            200,
            {
                "title": "T",
                "body": None,
                "user": {"id": 1},
                "assignees": [{"id": 2, "login": "x"}, {"id": 3}],
                "labels": [{"name": "Open for pickup"}, "legacy"],
            },
        )

        issue = self.client.get_issue("acme", "widgets", 9)

        self.assertEqual(issue.title, "T")
        self.assertIsNone(issue.body)
        self.assertEqual(issue.owner_id, 1)
        self.assertEqual(issue.assignee_ids, [2, 3])
        self.assertEqual(issue.labels, ["Open for pickup", "legacy"])
        args, _ = self.client.session.request.call_args
        self.assertEqual(args, ("GET", "https://api.github.test/repos/acme/widgets/issues/9"))

    def test_get_repository_details(self):
        self.client.session.request.return_value = _response(200, {"id": 1234, "name": "widgets"})

        self.assertEqual(self.client.get_repository_details("acme", "widgets").id, 1234)

    def test_http_error_becomes_provider_error(self):
        self.client.session.request.return_value = _response(404, {"message": "Not Found"})

        with self.assertRaises(GitHubProviderError) as ctx:
            self.client.get_issue("acme", "widgets", 1)

        self.assertEqual(ctx.exception.upstream_status, 404)
        self.assertEqual(ctx.exception.upstream_message, "Not Found")
        self.assertIn("Not Found", str(ctx.exception))

    def test_non_json_error_body_uses_text(self):
        self.client.session.request.return_value = _response(502, ValueError("no json"), text="Bad gateway")

        with self.assertRaises(GitHubProviderError) as ctx:
            self.client.get_repository_details("acme", "widgets")

        self.assertEqual(ctx.exception.upstream_message, "Bad gateway")

    def test_transport_error_becomes_provider_error(self):
        self.client.session.request.side_effect = requests.ConnectionError("down")

        with self.assertRaises(GitHubProviderError) as ctx:
            self.client.get_repository_details("acme", "widgets")

        self.assertIsNone(ctx.exception.upstream_status)

    def test_already_exists_predicate(self):
        self.client.session.request.return_value = _response(
            422,
            {
                "message": "Validation Failed",
                "errors": [{"resource": "Label", "code": "already_exists", "field": "name"}],
            },
        )
        with self.assertRaises(GitHubProviderError) as ctx:
            self.client.create_issue("acme", "widgets", "t", "b", [])

        self.assertTrue(self.client.is_already_exists(ctx.exception))

    def test_non_json_success_body_becomes_provider_error(self):
        self.client.session.request.return_value = _response(200, ValueError("no json"), text="<html>")

        with self.assertRaises(GitHubProviderError) as ctx:
            self.client.get_issue("acme", "widgets", 1)

        self.assertEqual(ctx.exception.upstream_status, 200)

    def test_non_object_success_body_becomes_provider_error(self):
        self.client.session.request.return_value = _response(200, ["not", "a", "dict"])

        with self.assertRaises(GitHubProviderError):
            self.client.get_repository_details("acme", "widgets")

    def test_created_issue_missing_fields_becomes_provider_error(self):
        self.client.session.request.return_value = _response(201, {"number": 5})

        with self.assertRaises(GitHubProviderError) as ctx:
            self.client.create_issue("acme", "widgets", "t", "b", [])

        self.assertIn("html_url", str(ctx.exception))

    def test_repository_missing_id_becomes_provider_error(self):
        self.client.session.request.return_value = _response(200, {"name": "widgets"})

        with self.assertRaises(GitHubProviderError):
            self.client.get_repository_details("acme", "widgets")

    def test_other_validation_errors_are_not_already_exists(self):
        err = GitHubProviderError("x", errors=[{"code": "missing_field"}])
        self.assertFalse(self.client.is_already_exists(err))
        self.assertFalse(self.client.is_already_exists(GitHubProviderError("x")))


if __name__ == "__main__":
    unittest.main()
