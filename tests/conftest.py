"""Shared pytest fixtures"""

from pathlib import Path

import pytest

from fdp_search.documents import SearchResult
from fdp_search.ontology import Annotation, OntologyClass
from fdp_search.relevance import KeywordExtractor

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def cancer_ontology_file() -> Path:
    """YAML ontology with two annotated classes and one empty class"""
    return FIXTURES_DIR / "ontology" / "cancer.yaml"


@pytest.fixture
def extractor():
    """Default extractor: bundled stopwords, punctuation filtered"""
    return KeywordExtractor()


@pytest.fixture
def blood_cancer_class():
    """Class labelled 'Blood Cancer' with synonym 'Leukemia'"""
    return OntologyClass(
        iri="http://example.org/onto#C1",
        annotations=[
            Annotation(value="Blood Cancer", is_label=True, property="rdfs:label"),
            Annotation(value="Leukemia", is_label=False, property="skos:altLabel"),
        ],
    )


@pytest.fixture
def metadata_documents():
    """Three metadata documents of a small catalog"""
    return [
        SearchResult(
            uri="http://fdp.example.org/dataset/leukemia-registry",
            title="Leukemia registry",
            description="Patient registry for leukemia research",
        ),
        SearchResult(
            uri="http://fdp.example.org/dataset/blood-donors",
            title="Blood donors",
            description="Blood donation statistics",
        ),
        SearchResult(
            uri="http://fdp.example.org/dataset/climate",
            title="Climate data",
            description="Temperature measurements",
        ),
    ]
