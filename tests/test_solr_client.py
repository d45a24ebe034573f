"""
Tests for the Solr client.
"""

import pytest
import requests
from unittest.mock import Mock

from solr_search.infrastructure.solr.solr_client import SolrClient
from solr_search.shared.exceptions import SearchBackendError

SOLRCONFIG = b"""<?xml version="1.0"?>
<config>
  <requestHandler name="/select" class="solr.SearchHandler">
    <lst name="defaults">
      <str name="qf">dc.title^5 dc.subject^2</str>
    </lst>
  </requestHandler>
  <requestHandler name="standard" class="solr.SearchHandler">
    <lst name="defaults">
      <str name="q.alt">*:*</str>
    </lst>
  </requestHandler>
</config>
"""


def make_response(json_data=None, content=b""):
    response = Mock()
    response.json.return_value = json_data
    response.content = content
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def client(session):
    return SolrClient("http://solr.test/solr/core/", session=session)


class TestSearch:
    """Test suite for select requests."""

    def test_get(self, client, session):
        session.get.return_value = make_response({"response": {"numFound": 0, "docs": []}})

        data = client.search("river", 20, 10, {"fq": ["a:1", "b:2"], "facet": True, "qf": None})

        assert data["response"]["numFound"] == 0
        args, kwargs = session.get.call_args
        assert args[0] == "http://solr.test/solr/core/select"
        assert kwargs["params"] == [
            ("q", "river"),
            ("start", "20"),
            ("rows", "10"),
            ("wt", "json"),
            ("fq", "a:1"),
            ("fq", "b:2"),
            ("facet", "true"),
        ]

    def test_post(self, client, session):
        session.post.return_value = make_response({"response": {"numFound": 0, "docs": []}})

        client.search("river", 0, 10, {}, method="POST")

        session.get.assert_not_called()
        assert ("q", "river") in session.post.call_args.kwargs["data"]

    def test_connection_error(self, client, session):
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(SearchBackendError, match="refused"):
            client.search("river", 0, 10, {})

    def test_http_error(self, client, session):
        response = make_response()
        response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        session.get.return_value = response

        with pytest.raises(SearchBackendError):
            client.search("river", 0, 10, {})

    def test_malformed_body(self, client, session):
        response = make_response()
        response.json.side_effect = ValueError("not json")
        session.get.return_value = response

        with pytest.raises(SearchBackendError, match="malformed"):
            client.search("river", 0, 10, {})

    def test_missing_response_section(self, client, session):
        session.get.return_value = make_response({"error": {"msg": "undefined field"}})

        with pytest.raises(SearchBackendError):
            client.search("river", 0, 10, {})


class TestAdminLookups:
    """Test suite for version and handler lookups."""

    def test_get_version(self, client, session):
        session.get.return_value = make_response({"lucene": {"solr-spec-version": "8.11.2"}})

        assert client.get_version() == "8.11.2"
        assert session.get.call_args.args[0] == "http://solr.test/solr/core/admin/system"

    def test_get_version_failure(self, client, session):
        session.get.side_effect = requests.Timeout("slow")
        assert client.get_version() is None

    def test_get_version_unexpected_body(self, client, session):
        session.get.return_value = make_response({"status": "ok"})
        assert client.get_version() is None

    @pytest.mark.parametrize("handler,expected", [
        ("/select", True),
        ("select", True),
        ("standard", False),
        ("", True),
        ("missing", False),
    ])
    def test_request_handler_has_qf(self, client, session, handler, expected):
        session.get.return_value = make_response(content=SOLRCONFIG)
        assert client.request_handler_has_qf(handler) is expected

    def test_unreadable_solrconfig(self, client, session):
        session.get.return_value = make_response(content=b"<config>")
        assert client.request_handler_has_qf("/select") is False
