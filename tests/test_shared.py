"""
Tests for logging, error contexts and the session store.
"""

import io
import json

from solr_search.core.entities import NavigationSession
from solr_search.infrastructure.session.memory_session_store import InMemorySessionStore
from solr_search.shared.exceptions import ErrorContextManager, SearchBackendError
from solr_search.shared.logging import LogLevel, StructuredLogger, configure_logging


class TestStructuredLogger:
    """Test suite for JSON logging."""

    def test_entries_are_json_with_context(self):
        stream = io.StringIO()
        logger = StructuredLogger("solr_search.test.json", output=stream)
        logger.add_context(collection="col:1")

        logger.info("Executing search", offset=20)

        entry = json.loads(stream.getvalue())
        assert entry["level"] == "INFO"
        assert entry["message"] == "Executing search"
        assert entry["context"] == {"collection": "col:1", "offset": 20}

    def test_level_filtering(self):
        stream = io.StringIO()
        logger = configure_logging("solr_search.test.level", LogLevel.WARNING, stream)

        logger.info("hidden")
        logger.warning("shown")

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "shown"

    def test_reconfiguring_does_not_duplicate_output(self):
        stream = io.StringIO()
        configure_logging("solr_search.test.dupe", output=stream)
        logger = configure_logging("solr_search.test.dupe", output=stream)

        logger.info("once")

        assert len(stream.getvalue().splitlines()) == 1

    def test_parse_level(self):
        assert LogLevel.parse("debug") is LogLevel.DEBUG
        assert LogLevel.parse("nonsense") is LogLevel.INFO
        assert LogLevel.parse(None, LogLevel.ERROR) is LogLevel.ERROR


class TestErrorContext:
    """Test suite for error contexts."""

    def test_create_context(self):
        error = SearchBackendError("Solr request failed", {"url": "http://solr"})
        context = ErrorContextManager.create_context(error, stage="backend", query="river")

        assert context.error_type == "SearchBackendError"
        assert context.error_message == "Solr request failed"
        assert context.context_data == {"query": "river"}
        assert context.to_dict()["stage"] == "backend"

    def test_format_context(self):
        context = ErrorContextManager.create_context(ValueError("bad"), stage="query_hook", hook="h")
        assert ErrorContextManager.format_context(context) == "[query_hook] ValueError: bad (hook=h)"


class TestInMemorySessionStore:
    """Test suite for the navigation session store."""

    def make_session(self, token):
        return NavigationSession(token=token, path="search", query="q", query_internal="q", limit=10)

    def test_put_and_get(self):
        store = InMemorySessionStore()
        store.put("abc", self.make_session("abc"))

        assert store.get("abc").token == "abc"
        assert store.get("missing") is None

    def test_oldest_session_is_evicted(self):
        store = InMemorySessionStore(max_entries=2)
        for token in ("a", "b", "c"):
            store.put(token, self.make_session(token))

        assert store.get("a") is None
        assert len(store) == 2
