"""
Unit tests for the SearchEngine class
Run with: pytest tests/test_engine.py -v
"""

import json
import math
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from omegaconf import OmegaConf

from minisearch import SearchEngine, SearchResult, ImportResult


@pytest.fixture
def sample_documents():
    """Sample documents for testing."""
    return [
        {
            'title': 'Python ML',
            'content': 'Python programming is great for machine learning',
        },
        {
            'title': 'Java Enterprise',
            'content': 'Java programming is used for enterprise applications',
        },
        {
            'title': 'ML Python',
            'content': 'Machine learning with Python is powerful',
        },
        {
            'title': 'Deep Learning',
            'content': 'Deep learning is a subset of machine learning',
        },
    ]


@pytest.fixture
def engine(sample_documents):
    """Engine loaded with the sample documents."""
    engine = SearchEngine()
    for doc in sample_documents:
        engine.add_document(doc['content'], doc['title'])
    return engine


class TestAddDocument:
    """Test document insertion."""

    def test_ids_strictly_increasing(self):
        """Test successive ids are 1, 2, 3..."""
        engine = SearchEngine()
        assert [engine.add_document(f"text {i}") for i in range(4)] == [1, 2, 3, 4]

    def test_default_title(self):
        """Test untitled documents get a generated title."""
        engine = SearchEngine()
        doc_id = engine.add_document("some content")
        assert engine.get_document(doc_id).title == "Document 1"

    def test_empty_content(self):
        """Test empty content is stored without postings."""
        engine = SearchEngine()
        doc_id = engine.add_document("")

        assert doc_id == 1
        assert engine.get_document(doc_id).length == 0
        assert engine.stats() == {
            'total_documents': 1,
            'total_terms': 0,
            'average_document_length': 0.0
        }

    def test_unknown_document(self):
        """Test get_document returns None for unknown ids."""
        assert SearchEngine().get_document(7) is None


class TestSearch:
    """Test ranked search."""

    def test_scenario_single_term(self):
        """Test 'cat' scores D1 by (2/3) ln 2 and excludes D2."""
        engine = SearchEngine()
        engine.add_document("cat dog cat")
        engine.add_document("dog bird")

        results = engine.search("cat")

        assert len(results) == 1
        assert results[0].document_id == 1
        assert results[0].score == round((2 / 3) * math.log(2), 4)
        assert results[0].score > 0

    def test_all_stopword_query(self):
        """Test a query of only stopwords returns nothing."""
        engine = SearchEngine()
        engine.add_document("the a an cat")
        assert engine.search("the a an") == []

    def test_empty_query(self):
        """Test empty and punctuation-only queries return nothing."""
        engine = SearchEngine()
        engine.add_document("cat")
        assert engine.search("") == []
        assert engine.search("?!") == []

    def test_unknown_terms(self, engine):
        """Test queries with no indexed terms return nothing."""
        assert engine.search("zebra giraffe") == []

    def test_equal_scores_ordered_by_id(self):
        """Test identical relevance ranks by ascending document id."""
        engine = SearchEngine()
        engine.add_document("banana split")
        engine.add_document("apple pie")
        engine.add_document("apple tart")

        results = engine.search("apple")
        assert [r.document_id for r in results] == [2, 3]
        assert results[0].score == results[1].score

    def test_ranking(self, engine):
        """Test multi-term ranking order."""
        results = engine.search("python machine learning")
        ids = [r.document_id for r in results]

        assert set(ids) == {1, 3, 4}
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_result_fields(self, engine):
        """Test result records carry document data and a snippet."""
        result = engine.search("enterprise")[0]

        assert isinstance(result, SearchResult)
        assert result.document_id == 2
        assert result.title == 'Java Enterprise'
        assert result.content == 'Java programming is used for enterprise applications'
        assert result.snippet == 'Java programming is used for <strong>enterprise</strong> applications'
        assert set(result.to_dict()) == {'document_id', 'title', 'content', 'score', 'snippet'}

    def test_repeated_query_terms(self):
        """Test repeating a query term scales the score."""
        engine = SearchEngine()
        engine.add_document("cat dog cat")
        engine.add_document("dog bird")

        single = engine.score_document(1, "cat")
        assert engine.score_document(1, "cat cat") == pytest.approx(2 * single)
        assert engine.search("cat cat")[0].score == round(2 * single, 4)

    def test_limit(self, engine):
        """Test the result cap."""
        assert len(engine.search("learning", limit=1)) == 1
        assert len(engine.search("learning")) == 3

    def test_negative_limit(self, engine):
        """Test a negative limit is rejected instead of dropping the tail."""
        with pytest.raises(ValueError, match="limit"):
            engine.search("learning", limit=-1)

    def test_negative_max_results(self):
        """Test a negative configured cap is rejected at search time."""
        engine = SearchEngine({'search': {'max_results': -2}})
        engine.add_document("alpha beta")
        with pytest.raises(ValueError, match="limit"):
            engine.search("alpha")

    def test_zero_limit(self, engine):
        """Test a zero limit returns no results."""
        assert engine.search("learning", limit=0) == []

    def test_score_precision(self):
        """Test scores are rounded to four places by default."""
        engine = SearchEngine()
        engine.add_document("alpha beta gamma")
        engine.add_document("delta")

        score = engine.search("alpha")[0].score
        assert score == round(score, 4)
        assert score == round(math.log(2) / 3, 4)


class TestConfiguration:
    """Test engine configuration."""

    def test_dict_config(self):
        """Test a plain dict config is accepted."""
        engine = SearchEngine({'search': {'score_precision': 2, 'max_results': 1},
                               'snippet': {'highlight_tag': 'em'}})
        engine.add_document("alpha beta gamma")
        engine.add_document("alpha delta")
        engine.add_document("epsilon")

        results = engine.search("alpha")
        assert len(results) == 1
        assert results[0].score == round(results[0].score, 2)
        assert '<em>alpha</em>' in results[0].snippet

    def test_omegaconf_config(self):
        """Test a DictConfig is used as-is."""
        config = OmegaConf.create({'snippet': {'window_size': 2, 'ellipsis': '~'}})
        engine = SearchEngine(config)
        engine.add_document("alpha beta gamma delta")
        engine.add_document("zeta")

        assert engine.search("alpha")[0].snippet == "<strong>alpha</strong> beta~"


class TestStats:
    """Test collection statistics."""

    def test_empty_engine(self):
        """Test statistics of an empty engine."""
        assert SearchEngine().stats() == {
            'total_documents': 0,
            'total_terms': 0,
            'average_document_length': 0
        }

    def test_stats(self):
        """Test document count, vocabulary and mean length."""
        engine = SearchEngine()
        engine.add_document("cat dog cat")
        engine.add_document("dog bird")

        assert engine.stats() == {
            'total_documents': 2,
            'total_terms': 3,
            'average_document_length': pytest.approx(2.5)
        }


class TestExportImport:
    """Test snapshot export and import."""

    def test_round_trip(self, engine):
        """Test an imported snapshot reproduces searches and statistics."""
        snapshot = json.loads(json.dumps(engine.export_index()))

        restored = SearchEngine()
        result = restored.import_index(snapshot)

        assert result
        assert result == ImportResult(success=True)
        assert restored.stats() == engine.stats()
        for query in ["python", "machine learning", "java enterprise", "deep subset", "zebra"]:
            assert restored.search(query) == engine.search(query)

    def test_counter_continues_after_import(self, engine):
        """Test new ids continue from the imported counter."""
        restored = SearchEngine()
        restored.import_index(engine.export_index())
        assert restored.add_document("new document") == 5

    def test_snapshot_shape(self):
        """Test the exported snapshot fields."""
        engine = SearchEngine()
        engine.add_document("cat dog cat", title="Pets")
        snapshot = engine.export_index()

        assert snapshot['format_version'] == 1
        assert snapshot['document_count'] == 1
        assert snapshot['documents'] == {
            '1': {'id': 1, 'title': 'Pets', 'content': 'cat dog cat', 'length': 3}
        }
        assert snapshot['index'] == {
            'cat': {'1': {'frequency': 2, 'positions': [0, 2]}},
            'dog': {'1': {'frequency': 1, 'positions': [1]}},
        }

    def test_missing_field_leaves_state(self, engine):
        """Test a rejected snapshot changes nothing."""
        before_stats = engine.stats()
        before_results = engine.search("python")

        snapshot = engine.export_index()
        del snapshot['documents']
        result = SearchEngine().import_index(snapshot)
        assert not result
        assert 'documents' in result.reason

        result = engine.import_index({'index': {}, 'document_count': 0})

        assert not result
        assert engine.stats() == before_stats
        assert engine.search("python") == before_results

    def test_malformed_snapshot_leaves_state(self, engine):
        """Test malformed postings are rejected atomically."""
        before = engine.export_index()
        snapshot = engine.export_index()
        snapshot['index']['python']['1']['positions'] = [0, 0, 1]

        result = engine.import_index(snapshot)

        assert result.success is False
        assert result.reason
        assert engine.export_index() == before

    def test_non_mapping_snapshot(self):
        """Test snapshots of the wrong type are rejected."""
        engine = SearchEngine()
        assert not engine.import_index(None)
        assert not engine.import_index("not a snapshot")
        assert not engine.import_index([])

    def test_zero_length_document_in_snapshot(self):
        """Test a zero-length document with postings scores zero, not NaN."""
        snapshot = {
            'index': {'cat': {'1': {'frequency': 1, 'positions': [0]}}},
            'documents': {'1': {'title': 'Empty', 'content': 'cat', 'length': 0},
                          '2': {'title': 'Other', 'content': 'dog', 'length': 1}},
            'document_count': 2,
        }
        engine = SearchEngine()
        assert engine.import_index(snapshot)

        results = engine.search("cat")
        assert results[0].score == 0.0
        assert not math.isnan(results[0].score)
