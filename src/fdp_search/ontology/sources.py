"""
Ontology sources: in-memory classes and YAML/JSON ontology documents.

File format (YAML shown, JSON works the same, ".gz" files are decompressed):

    classes:
      - iri: http://purl.obolibrary.org/obo/NCIT_C3161
        annotations:
          - property: rdfs:label
            value: Leukemia
          - property: skos:altLabel
            value: Blood Cancer
            label: true                 # overrides "property is rdfs:label"
          - property: skos:definition
            value: A cancer of the blood
            language: en                # language-tagged, not indexed
          - property: ncit:code
            value: C3161
            datatype: xsd:string

Annotation "label" defaults to True when the property is rdfs:label.
"""

import gzip
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import OntologySourceError
from .base import LABEL_PROPERTIES, Annotation, Literal, OntologyClass, OntologySource

logger = logging.getLogger(__name__)

RDF_LANG_STRING = "rdf:langString"


class AnnotationDocument(BaseModel):
    """Annotation entry of an ontology document"""
    model_config = ConfigDict(populate_by_name=True)

    property_iri: str = Field("", alias="property")
    value: Any = None
    datatype: Optional[str] = None
    language: Optional[str] = None
    label: Optional[bool] = None

    def to_annotation(self) -> Annotation:
        is_label = self.label if self.label is not None else self.property_iri in LABEL_PROPERTIES

        if self.language is not None:
            value = Literal(str(self.value), datatype=RDF_LANG_STRING, language=self.language)
        elif self.datatype is not None:
            value = Literal(str(self.value), datatype=self.datatype)
        else:
            # Plain YAML scalars: strings are text, numbers/booleans/mappings are not
            value = self.value

        return Annotation(value=value, is_label=is_label, property=self.property_iri)


class ClassDocument(BaseModel):
    """Ontology class entry of an ontology document"""
    iri: str
    annotations: List[AnnotationDocument] = Field(default_factory=list)

    def to_class(self) -> OntologyClass:
        return OntologyClass(iri=self.iri, annotations=[a.to_annotation() for a in self.annotations])


class OntologyDocument(BaseModel):
    """Root of an ontology document"""
    classes: List[ClassDocument] = Field(default_factory=list)


class InMemoryOntologySource(OntologySource):
    """Ontology source over classes that are already in memory."""

    def __init__(self, classes: Iterable[OntologyClass], name: str = "in-memory"):
        self._classes = list(classes)
        self._name = name

    def classes(self) -> Iterator[OntologyClass]:
        return iter(self._classes)

    @property
    def name(self) -> str:
        return self._name


class FileOntologySource(OntologySource):
    """
    Ontology source reading a YAML or JSON ontology document.

    The file is read and validated on every classes() call, so a source can be
    re-indexed after the file changes.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def name(self) -> str:
        return str(self.path)

    def _read_text(self) -> str:
        if self.path.suffix == ".gz":
            with gzip.open(self.path, "rt", encoding="utf-8") as f:
                return f.read()
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

    def load(self) -> OntologyDocument:
        """
        Read and validate the ontology document.

        Raises:
            OntologySourceError: File missing, unreadable, not YAML/JSON or not an ontology document
        """
        try:
            raw = yaml.safe_load(self._read_text())
        except (OSError, EOFError, UnicodeDecodeError) as e:
            raise OntologySourceError(self.name, f"cannot read ontology file: {e}") from e
        except yaml.YAMLError as e:
            raise OntologySourceError(self.name, f"cannot parse ontology file: {e}") from e

        if raw is None:
            logger.warning(f"Ontology file is empty: {self.name}")
            return OntologyDocument()

        try:
            document = OntologyDocument.model_validate(raw)
        except ValidationError as e:
            raise OntologySourceError(self.name, f"invalid ontology document: {e}") from e

        logger.debug(f"Loaded {len(document.classes)} classes from {self.name}")
        return document

    def classes(self) -> Iterator[OntologyClass]:
        document = self.load()
        return (cls.to_class() for cls in document.classes)
