"""
Unit tests for the revision history query.
"""

import json
from datetime import date

import pytest

from wikiapi_client.query.builder import Direction
from wikiapi_client.query.revisions import RevisionBuilder, RevisionDecoder, RevisionProperty
from wikiapi_client.runtime.errors import ConfigurationError, DecodeError
from wikiapi_client.transport.base import RawResponse

from helpers import missing_page, revisions_page


def _raw(body):
    return RawResponse(json.dumps(body).encode("utf-8"))


class TestRevisionBuilder:
    """Tests for the request template."""

    def test_defaults(self, anonymous_session):
        """Test the minimal revision query."""
        template = RevisionBuilder(anonymous_session, "Main Page").build().template
        assert template.to_dict() == {
            "action": "query",
            "prop": "revisions",
            "titles": "Main Page",
            "continue": "",
            "rvlimit": "max",
        }

    def test_properties(self, anonymous_session):
        """Test properties are sorted; content asks for the main slot."""
        builder = RevisionBuilder(anonymous_session, "Main Page")
        builder.with_properties(RevisionProperty.USER, RevisionProperty.CONTENT, RevisionProperty.IDS)
        template = builder.build().template
        assert template.get("rvprop") == "content|ids|user"
        assert template.get("rvslots") == "main"

    def test_range_and_users(self, anonymous_session):
        """Test range, direction and user filters."""
        builder = (
            RevisionBuilder(anonymous_session, "Main Page")
            .with_limit(10)
            .with_start(date(2020, 1, 1))
            .with_end(date(2021, 1, 1))
            .with_dir(Direction.NEWER)
            .exclude_user("Vandal")
        )
        template = builder.build().template
        assert template.get("rvlimit") == "10"
        assert template.get("rvstart") == "2020-01-01T00:00:00Z"
        assert template.get("rvdir") == "newer"
        assert template.get("rvexcludeuser") == "Vandal"

    def test_only_user_wins(self, anonymous_session):
        """Test only_user takes precedence over exclude_user."""
        template = RevisionBuilder(anonymous_session, "X").exclude_user("B").only_user("A").build().template
        assert template.get("rvuser") == "A"
        assert not template.has_param("rvexcludeuser")

    def test_blank_title(self, anonymous_session):
        """Test a title is required."""
        with pytest.raises(ConfigurationError, match="title"):
            RevisionBuilder(anonymous_session, "  ").build()

    def test_end_before_start(self, anonymous_session):
        """Test the shared range check."""
        builder = RevisionBuilder(anonymous_session, "X").with_start(date(2024, 1, 1)).with_end(date(2023, 12, 31))
        with pytest.raises(ConfigurationError):
            builder.build()


class TestRevisionDecoder:
    """Tests for decoding revision pages."""

    def test_decode(self):
        """Test revisions of the first page are decoded."""
        body = revisions_page("Main Page", [
            {"revid": 3, "parentid": 2, "user": "Alice", "slots": {"main": {"content": "v3"}}},
            {"revid": 2, "parentid": 1, "user": "Bob", "slots": {"main": {"content": "v2"}}},
        ], cont={"continue": "||", "rvcontinue": "20240101|2"})
        page = RevisionDecoder().decode(_raw(body))
        assert [r.rev_id for r in page.elements] == [3, 2]
        assert page.elements[0].content == "v3"
        assert dict(page.continuation.params)["rvcontinue"] == "20240101|2"

    def test_missing_page(self):
        """Test a missing page decodes as an empty final page."""
        page = RevisionDecoder().decode(_raw(missing_page("No such page")))
        assert page.elements == ()
        assert page.is_last

    def test_no_pages(self):
        """Test a response without pages."""
        assert RevisionDecoder().decode(_raw({"batchcomplete": True})).elements == ()

    def test_malformed_revisions(self):
        """Test revisions that are not a list."""
        body = {"query": {"pages": [{"title": "X", "revisions": "none"}]}}
        with pytest.raises(DecodeError):
            RevisionDecoder().decode(_raw(body))


class TestRevisionIteration:
    """Tests for running a revision query."""

    def test_history(self, anonymous_session, transport):
        """Test the history is followed across pages."""
        transport.enqueue(
            revisions_page("Main Page", [{"revid": 3}], cont={"continue": "||", "rvcontinue": "x"}),
            revisions_page("Main Page", [{"revid": 2}, {"revid": 1}]),
        )
        query = RevisionBuilder(anonymous_session, "Main Page", transport).build()
        assert [r.rev_id for r in query] == [3, 2, 1]
        assert transport.requests[1].get("rvcontinue") == "x"

    def test_missing_page_is_empty(self, anonymous_session, transport):
        """Test a missing page yields nothing after one fetch."""
        transport.enqueue(missing_page("No such page"))
        assert RevisionBuilder(anonymous_session, "No such page", transport).build().to_list() == []
        assert transport.call_count == 1
