"""
Unit tests for RequestDescriptor.

Tests immutability, canonical serialization and secret redaction.
"""

from datetime import date

import pytest

from wikiapi_client.request import DEFAULT_API_PATH, HttpMethod, RequestDescriptor
from wikiapi_client.runtime.errors import ConfigurationError, ErrorCode


class TestConstruction:
    """Tests for building descriptors."""

    def test_defaults(self):
        """Test an empty descriptor."""
        descriptor = RequestDescriptor()
        assert descriptor.method is HttpMethod.GET
        assert descriptor.path == DEFAULT_API_PATH
        assert descriptor.params == ()
        assert not descriptor.mutating
        assert descriptor.owner_prefix is None

    def test_of_sorts_params(self):
        """Test parameters are kept sorted by name."""
        descriptor = RequestDescriptor.of({"list": "watchlist", "action": "query"})
        assert descriptor.params == (("action", "query"), ("list", "watchlist"))

    def test_of_drops_absent_values(self):
        """Test None and False values are not sent."""
        descriptor = RequestDescriptor.of({"action": "query", "wlprop": None, "redirects": False})
        assert descriptor.to_dict() == {"action": "query"}

    def test_write_is_mutating_post(self):
        """Test write descriptors."""
        descriptor = RequestDescriptor.write({"action": "edit"})
        assert descriptor.method is HttpMethod.POST
        assert descriptor.mutating

    def test_duplicate_names_rejected(self):
        """Test duplicate parameter names."""
        with pytest.raises(ConfigurationError) as exc_info:
            RequestDescriptor(params=(("a", "1"), ("a", "2")))
        assert exc_info.value.code is ErrorCode.INVALID_PARAMETER

    def test_unsorted_params_are_sorted(self):
        """Test direct construction normalizes the order."""
        descriptor = RequestDescriptor(params=(("b", "2"), ("a", "1")))
        assert descriptor.params == (("a", "1"), ("b", "2"))


class TestDerivation:
    """Tests for deriving descriptors."""

    def test_with_param_returns_copy(self):
        """Test adding a parameter leaves the original untouched."""
        base = RequestDescriptor.of({"action": "query"})
        derived = base.with_param("list", "allpages")
        assert not base.has_param("list")
        assert derived.get("list") == "allpages"

    def test_with_param_overwrites(self):
        """Test a parameter can be replaced."""
        descriptor = RequestDescriptor.of({"limit": 10}).with_param("limit", 20)
        assert descriptor.get("limit") == "20"
        assert len(descriptor.params) == 1

    def test_with_param_none_removes(self):
        """Test None removes a parameter."""
        descriptor = RequestDescriptor.of({"a": "1", "b": "2"}).with_param("a", None)
        assert descriptor.to_dict() == {"b": "2"}

    def test_true_flag(self):
        """Test boolean flags are sent as presence."""
        assert RequestDescriptor().with_param("redirects", True).get("redirects") == "1"

    def test_empty_name_rejected(self):
        """Test empty parameter names."""
        with pytest.raises(ConfigurationError):
            RequestDescriptor().with_param("", "x")

    def test_values_are_encoded(self):
        """Test dates and collections are encoded."""
        descriptor = RequestDescriptor.of({"wlstart": date(2024, 1, 1), "wlnamespace": (0, 4)})
        assert descriptor.get("wlstart") == "2024-01-01T00:00:00Z"
        assert descriptor.get("wlnamespace") == "0|4"

    def test_without_param(self):
        """Test removing parameters."""
        descriptor = RequestDescriptor.of({"a": "1"})
        assert descriptor.without_param("a").params == ()
        assert descriptor.without_param("missing") is descriptor

    def test_attributes_preserved(self):
        """Test method, path and flags survive derivation."""
        base = RequestDescriptor.of({}, method=HttpMethod.POST, path="/w/api.php", owner_prefix="wl")
        derived = base.with_param("x", "1")
        assert derived.method is HttpMethod.POST
        assert derived.path == "/w/api.php"
        assert derived.owner_prefix == "wl"


class TestSerialization:
    """Tests for the canonical encoding."""

    def test_serialize(self):
        """Test method, path and sorted query string."""
        descriptor = RequestDescriptor.of({"b": 2, "a": "x"})
        assert descriptor.serialize() == "GET /api.php?a=x&b=2"

    def test_insertion_order_irrelevant(self):
        """Test equal descriptors serialize identically."""
        first = RequestDescriptor.of({"action": "query"}).with_param("list", "watchlist")
        second = RequestDescriptor.of({"list": "watchlist", "action": "query"})
        assert first == second
        assert first.serialize() == second.serialize()

    def test_flags_not_serialized(self):
        """Test the mutating flag and owner prefix stay out of the encoding."""
        plain = RequestDescriptor.of({"action": "query"}, method=HttpMethod.POST)
        mutating = RequestDescriptor.of({"action": "query"}, method=HttpMethod.POST, mutating=True)
        owned = RequestDescriptor.of({"action": "query"}, method=HttpMethod.POST, owner_prefix="wl")
        assert plain.serialize() == mutating.serialize() == owned.serialize()
        assert plain != mutating
        assert plain != owned

    def test_redacted_masks_secrets(self):
        """Test secret values never show up in redacted output."""
        descriptor = RequestDescriptor.of({"lgname": "Bot", "lgpassword": "hunter2", "token": "abc+\\"})
        text = descriptor.redacted()
        assert "hunter2" not in text
        assert "abc" not in text
        assert "lgname=Bot" in text
        assert "hunter2" in descriptor.serialize()

    def test_repr_is_redacted(self):
        """Test the repr uses the redacted form."""
        descriptor = RequestDescriptor.write({"action": "edit", "token": "secret-token"})
        assert "secret-token" not in repr(descriptor)
        assert "mutating" in repr(descriptor)

    def test_iteration(self):
        """Test iterating yields sorted pairs."""
        assert list(RequestDescriptor.of({"b": "2", "a": "1"})) == [("a", "1"), ("b", "2")]
