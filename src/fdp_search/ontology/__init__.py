"""
Ontology keyword index for query expansion.

Usage:
    from fdp_search.ontology import FileOntologySource, OntologyIndex

    index = OntologyIndex(extractor)
    index.index_ontology(FileOntologySource("ontologies/ncit.yaml").classes())
    index.associated_keywords("cancer")
"""

from .base import Annotation, Literal, OntologyClass, OntologySource
from .index import IndexStats, OntologyIndex, TermAssociation
from .sources import FileOntologySource, InMemoryOntologySource

__all__ = [
    "Annotation",
    "Literal",
    "OntologyClass",
    "OntologySource",
    "IndexStats",
    "OntologyIndex",
    "TermAssociation",
    "FileOntologySource",
    "InMemoryOntologySource",
]
