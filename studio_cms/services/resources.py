"""Registry of content resource kinds and how each one is stored and validated"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from studio_cms.models.content import (
    ContactDocument,
    FAQDocument,
    FAQItem,
    HeroDocument,
    LocationsDocument,
    ProcessDocument,
    ProcessStep,
    StoryDocument,
    WorkDocument,
    WorkProject,
)
from studio_cms.utils.exceptions import NotFoundError


@dataclass(frozen=True)
class ResourceDefinition:
    """
    One content document kind.

    ``collection`` names the array of addressable items inside the document
    (``projects``, ``items``, ``processSteps``); kinds without one only support
    whole-document reads and replacement.
    """

    kind: str
    label: str
    schema: Type[BaseModel]
    default: Dict[str, Any] = field(default_factory=dict)
    collection: Optional[str] = None
    item_schema: Optional[Type[BaseModel]] = None
    item_label: str = "Item"

    @property
    def has_collection(self) -> bool:
        return self.collection is not None

    def default_document(self) -> Dict[str, Any]:
        return copy.deepcopy(self.default)


RESOURCES: Dict[str, ResourceDefinition] = {
    definition.kind: definition
    for definition in (
        ResourceDefinition(kind="hero", label="Hero", schema=HeroDocument),
        ResourceDefinition(
            kind="work",
            label="Work",
            schema=WorkDocument,
            default={"banner": {}, "projects": []},
            collection="projects",
            item_schema=WorkProject,
            item_label="Project",
        ),
        ResourceDefinition(
            kind="process",
            label="Process",
            schema=ProcessDocument,
            default={"processSteps": []},
            collection="processSteps",
            item_schema=ProcessStep,
            item_label="Process step",
        ),
        ResourceDefinition(kind="story", label="Story", schema=StoryDocument, default={"circles": []}),
        ResourceDefinition(
            kind="locations", label="Locations", schema=LocationsDocument, default={"locations": []}
        ),
        ResourceDefinition(kind="contact", label="Contact", schema=ContactDocument),
        ResourceDefinition(
            kind="faq",
            label="FAQ",
            schema=FAQDocument,
            default={"items": []},
            collection="items",
            item_schema=FAQItem,
            item_label="FAQ item",
        ),
    )
}


def get_resource(kind: str) -> ResourceDefinition:
    try:
        return RESOURCES[kind]
    except KeyError:
        raise NotFoundError(f"Unknown resource: {kind}")
