"""
Tests for result post-processing.
"""

import pytest
from unittest.mock import Mock

from solr_search.domain.results.field_transforms import extract_purl
from solr_search.domain.results.result_processor import ResultProcessor
from solr_search.shared.exceptions import GraphStoreError


def page_doc(pid, model, number, parent):
    return {
        "PID": pid,
        "fgs_label_s": f"Page {number}",
        "RELS_EXT_hasModel_uri_ms": [f"info:fedora/{model}"],
        "RELS_EXT_isSequenceNumber_literal_ms": [str(number)],
        "RELS_EXT_isPageOf_uri_ms": [f"info:fedora/{parent}"],
    }


class TestRecords:
    """Test suite for record construction."""

    def test_identifiers_and_urls(self, processor, query_spec, site_config, solr_docs):
        records = processor.process(solr_docs, query_spec, site_config)

        assert [r.id for r in records] == ["ns:1", "ns:2"]
        assert records[0].url == "islandora/object/ns:1"
        assert records[0].label == "River photograph"
        assert records[0].content_models == ["islandora:sp_basic_image"]
        assert records[0].datastream_ids == ["OBJ", "TN"]
        assert records[0].source_document is solr_docs[0]

    def test_thumbnails(self, processor, query_spec, site_config, solr_docs):
        no_datastreams = {"PID": "ns:3"}
        records = processor.process(solr_docs + [no_datastreams], query_spec, site_config)

        assert records[0].thumbnail_url == "islandora/object/ns:1/datastream/TN/view"
        assert records[1].thumbnail_url == "images/defaultimg.png"
        assert records[2].thumbnail_url == "islandora/object/ns:3/datastream/TN/view"

    def test_multi_valued_label_is_joined(self, processor, query_spec, site_config):
        records = processor.process(
            [{"PID": "ns:1", "fgs_label_s": ["One", "Two"]}], query_spec, site_config
        )
        assert records[0].label == "One, Two"

    def test_empty_hits(self, processor, query_spec, site_config):
        assert processor.process([], query_spec, site_config) == []


class TestPageLabels:
    """Test suite for page relabeling."""

    def test_newspaper_page(self, make_graph_store, query_spec, site_config):
        store = make_graph_store(labels={"issue:1": "Daily News, 1901-05-02"})
        processor = ResultProcessor(graph_store=store)
        doc = page_doc("page:3", "islandora:newspaperPageCModel", 3, "issue:1")

        records = processor.process([doc], query_spec, site_config)

        assert records[0].label == "Daily News, 1901-05-02 (PAGE 3)"

    def test_book_page(self, make_graph_store, query_spec, site_config):
        store = make_graph_store(labels={"book:1": "Field Notes"})
        processor = ResultProcessor(graph_store=store)
        doc = page_doc("page:7", "islandora:pageCModel", 7, "book:1")

        records = processor.process([doc], query_spec, site_config)

        assert records[0].label == "Field Notes (7)"

    def test_unresolved_parent_clears_label(self, processor, query_spec, site_config):
        doc = page_doc("page:7", "islandora:pageCModel", 7, "book:404")
        records = processor.process([doc], query_spec, site_config)

        assert records[0].label is None

    def test_parent_lookup_failure_clears_label(self, query_spec, site_config):
        store = Mock()
        store.label_of.side_effect = GraphStoreError("down")
        processor = ResultProcessor(graph_store=store)
        doc = page_doc("page:7", "islandora:pageCModel", 7, "book:1")

        records = processor.process([doc], query_spec, site_config)

        assert records[0].label is None

    def test_parent_titles_are_cached_per_page(self, make_graph_store, query_spec, site_config):
        store = make_graph_store(labels={"book:1": "Field Notes"})
        processor = ResultProcessor(graph_store=store)
        docs = [page_doc(f"page:{n}", "islandora:pageCModel", n, "book:1") for n in (1, 2, 3)]

        processor.process(docs, query_spec, site_config)

        assert store.label_lookups == ["book:1"]

    def test_pages_without_sequence_keep_label(self, processor, query_spec, site_config):
        doc = page_doc("page:7", "islandora:pageCModel", 7, "book:1")
        del doc["RELS_EXT_isSequenceNumber_literal_ms"]

        records = processor.process([doc], query_spec, site_config)

        assert records[0].label == "Page 7"


class TestDisplayFields:
    """Test suite for prepare_doc."""

    def test_allow_list_and_purl(self, processor, query_spec, make_config):
        config = make_config(result_fields=["PID", "mods_location_url_ms"])
        doc = {
            "PID": "ns:1",
            "dc.description": "hidden by the allow-list",
            "mods_location_url_ms": ["http://example.org/x", "http://purl.example.org/ns/1"],
        }

        shaped = processor.prepare_doc(doc, query_spec, config)

        assert shaped == {
            "PID": "ns:1",
            "mods_location_url_ms": ["http://example.org/x", "http://purl.example.org/ns/1"],
            "PURL": "http://purl.example.org/ns/1",
        }

    def test_title_only_allow_list(self, processor, query_spec, make_config):
        config = make_config(result_fields=["title"])
        doc = {
            "PID": "ns:1",
            "title": "River",
            "dc.title": ["River"],
            "dc.creator": ["Smith"],
            "dc.date": ["1901"],
            "dc.description": ["Flood season"],
            "fgs_label_s": "River",
            "RELS_EXT_hasModel_uri_ms": ["info:fedora/islandora:sp_basic_image"],
            "fedora_datastreams_ms": ["OBJ", "TN"],
            "rights_code_s": "InC",
            "mods_location_url_ms": ["http://purl.example.org/ns/1"],
        }

        records = processor.process([doc], query_spec, config)
        plain = processor.prepare_doc({**doc, "mods_location_url_ms": []}, query_spec, config)

        assert records[0].display_fields == {
            "title": "River",
            "PURL": "http://purl.example.org/ns/1",
        }
        assert plain == {"title": "River"}

    def test_display_title_suppresses_plain_title(self, processor, query_spec, site_config):
        doc = {"dc.title": ["River"], "mods_titleInfo_display_s": "River: A History"}
        shaped = processor.prepare_doc(doc, query_spec, site_config)

        assert "dc.title" not in shaped
        assert shaped["mods_titleInfo_display_s"] == "River: A History"

    def test_full_text_blanked_unless_full_text_query(self, processor, query_spec, site_config):
        doc = {"OCR_t": "lots of page text"}

        assert processor.prepare_doc(doc, query_spec, site_config)["OCR_t"] == ""

        query_spec.is_full_text_query = True
        assert processor.prepare_doc(doc, query_spec, site_config)["OCR_t"] == "lots of page text"

    def test_field_access(self, query_spec, site_config):
        processor = ResultProcessor(field_access=lambda name: name != "secret_s")
        shaped = processor.prepare_doc({"PID": "ns:1", "secret_s": "x"}, query_spec, site_config)

        assert shaped == {"PID": "ns:1"}

    def test_transforms(self, make_graph_store, query_spec, site_config):
        store = make_graph_store(labels={"col:1": "Maps"})
        processor = ResultProcessor(graph_store=store)
        doc = {
            "RELS_EXT_hasModel_uri_ms": ["info:fedora/islandora:bookCModel"],
            "rights_code_s": "InC",
            "reuse_code_s": ["CC-BY", "XYZ"],
            "RELS_EXT_isMemberOfCollection_uri_ms": ["info:fedora/col:1", "info:fedora/col:2"],
        }

        shaped = processor.prepare_doc(doc, query_spec, site_config)

        assert shaped["RELS_EXT_hasModel_uri_ms"] == ["Book"]
        assert shaped["rights_code_s"] == "In Copyright"
        assert shaped["reuse_code_s"] == ["Creative Commons Attribution", "XYZ"]
        assert shaped["RELS_EXT_isMemberOfCollection_uri_ms"] == ["Maps", "col:2"]

    def test_extract_purl(self):
        assert extract_purl(None) is None
        assert extract_purl("http://example.org") is None
        assert extract_purl("http://purl.example.org/1") == "http://purl.example.org/1"


class TestNavigation:
    """Test suite for search navigation state."""

    def test_navigation_params(self, processor, session_store, query_spec, make_config, solr_docs):
        config = make_config(search_navigation=True)
        records = processor.process(solr_docs, query_spec, config, path="islandora/search/river")

        token = records[0].navigation_params["search_nav_id"]
        assert [r.navigation_params["search_nav_offset"] for r in records] == [20, 21]
        assert all(r.navigation_params["search_nav_id"] == token for r in records)

        session = session_store.get(token)
        assert session.path == "islandora/search/river"
        assert session.query == "river"
        assert session.limit == 10

    def test_fresh_token_per_page(self, processor, query_spec, make_config, solr_docs):
        config = make_config(search_navigation=True)

        first = processor.process(solr_docs, query_spec, config)
        second = processor.process(solr_docs, query_spec, config)

        assert (
            first[0].navigation_params["search_nav_id"]
            != second[0].navigation_params["search_nav_id"]
        )

    def test_navigation_disabled(self, processor, session_store, query_spec, site_config, solr_docs):
        records = processor.process(solr_docs, query_spec, site_config)

        assert records[0].navigation_params == {}
        assert len(session_store) == 0


class TestResultHooks:
    """Test suite for result alter hooks."""

    def test_hooks_see_records(self, processor, query_spec, site_config, solr_docs):
        def mark(records, spec):
            for record in records:
                record.display_fields["marked"] = True

        processor.register_hook(mark)
        records = processor.process(solr_docs, query_spec, site_config)

        assert all(r.display_fields["marked"] for r in records)

    def test_failing_hook_is_recorded(self, query_spec, site_config, solr_docs):
        def broken(records, spec):
            raise ValueError("bad hook")

        processor = ResultProcessor(hooks=[broken])
        records = processor.process(solr_docs, query_spec, site_config)

        assert len(records) == 2
        assert query_spec.errors[0].stage == "result_hook"
        assert query_spec.errors[0].error_type == "ValueError"
