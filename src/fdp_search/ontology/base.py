"""
Ontology domain model and the abstract ontology source.

All ontology sources must implement OntologySource to be swappable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema#"
XSD_STRING = "xsd:string"
RDFS_LABEL = "rdfs:label"

STRING_DATATYPES = frozenset({XSD_STRING, XSD_NAMESPACE + "string"})
LABEL_PROPERTIES = frozenset({RDFS_LABEL, "http://www.w3.org/2000/01/rdf-schema#label"})


@dataclass(frozen=True)
class Literal:
    """Typed RDF literal as it appears in an annotation"""
    lexical: str
    datatype: str = XSD_STRING
    language: Optional[str] = None  # Language-tagged literals are rdf:langString


@dataclass
class Annotation:
    """Single annotation attached to an ontology class"""
    value: Any                # str, Literal, IRI or anything else
    is_label: bool = False    # True for the primary human-readable name
    property: str = ""        # Annotation property IRI (informational)

    def text(self) -> Optional[str]:
        """
        Return the annotation value as plain text, or None when it is not a string literal.

        Plain str values and xsd:string literals are text. Language-tagged
        literals, other datatypes and non-literal values are not.
        """
        if isinstance(self.value, str):
            return self.value
        if isinstance(self.value, Literal):
            if self.value.language is None and self.value.datatype in STRING_DATATYPES:
                return self.value.lexical
        return None


@dataclass
class OntologyClass:
    """Concept node of an ontology with its annotations"""
    iri: str
    annotations: List[Annotation] = field(default_factory=list)


class OntologySource(ABC):
    """
    Abstract producer of ontology classes.

    Fetching, caching and parsing the underlying ontology is up to the
    implementation. Failures to obtain the source raise OntologySourceError.
    """

    @abstractmethod
    def classes(self) -> Iterator[OntologyClass]:
        """
        Iterate over the classes of the ontology.

        Raises:
            OntologySourceError: Source cannot be read or parsed
        """
        pass

    @property
    def name(self) -> str:
        """Human-readable source name for logs"""
        return type(self).__name__
