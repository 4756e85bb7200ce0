"""Exceptions raised by the relevance search engine"""


class SearchEngineError(Exception):
    """Base class for search engine failures"""


class OntologySourceError(SearchEngineError):
    """Ontology source could not be read or parsed"""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class DocumentSearchError(SearchEngineError):
    """Document search collaborator failed while serving a request"""
