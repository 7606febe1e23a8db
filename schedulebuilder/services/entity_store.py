"""
In-memory store for students and educators.

Owns names, ordered attributes, meeting requirements and the availability
schedule of every entity. Schedules are only ever written as full
replacements.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..domain.exceptions import (
    AttributeKeyConflictError,
    EntityNotFoundError,
    InvalidEntityError,
    MissingAttributeError,
)
from ..domain.models import (
    AttributeList,
    Entity,
    EntityKind,
    MeetingRequirement,
    RequiredAttribute,
    TimeSlot,
)

logger = logging.getLogger(__name__)


class EntityStore:
    """
    Students and educators in insertion order.

    Also keeps the list of attributes every new student must provide.
    """

    def __init__(self, required_attributes: Iterable[RequiredAttribute] = ()):
        self._entities: Dict[str, Entity] = {}
        self._required: List[RequiredAttribute] = []
        for requirement in required_attributes:
            self.add_required_attribute(requirement.name, requirement.values)

    # -- lookup ----------------------------------------------------------

    def get(self, entity_id: str) -> Entity:
        """
        Raises:
            EntityNotFoundError: If no entity has this id
        """
        try:
            return self._entities[entity_id]
        except KeyError:
            raise EntityNotFoundError(f"Unknown entity id: {entity_id}") from None

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def students(self) -> List[Entity]:
        return self._of_kind(EntityKind.STUDENT)

    def educators(self) -> List[Entity]:
        return self._of_kind(EntityKind.EDUCATOR)

    def _of_kind(self, kind: EntityKind) -> List[Entity]:
        return [e for e in self._entities.values() if e.kind is kind]

    # -- lifecycle -------------------------------------------------------

    def add_student(
        self,
        name: str,
        attributes: Sequence[Tuple[str, str]] = (),
        meeting_requirements: Sequence[MeetingRequirement] = (),
    ) -> Entity:
        """
        Create a student.

        Attribute pairs with a blank key are dropped. Every required
        attribute must be present with an acceptable value.

        Args:
            name: Display name
            attributes: Ordered key/value pairs
            meeting_requirements: Per-educator meeting needs

        Returns:
            The new student

        Raises:
            InvalidEntityError: If the name is blank, keys repeat or a
                requirement references an unknown educator
            MissingAttributeError: If required attributes are missing
        """
        clean_name = self._clean_name(name)

        pairs = [(key.strip(), value) for key, value in attributes if key.strip()]
        keys = [key for key, _ in pairs]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise AttributeKeyConflictError(
                f"Duplicate attribute key(s): {', '.join(duplicates)}"
            )
        attribute_list = AttributeList(pairs)

        failing = [
            req.name for req in self._required
            if not req.accepts(attribute_list.get(req.name))
        ]
        if failing:
            raise MissingAttributeError(failing)

        requirements: Dict[str, MeetingRequirement] = {}
        for requirement in meeting_requirements:
            self._check_educator(requirement.educator_id)
            requirements[requirement.educator_id] = requirement

        student = Entity(
            id=self._new_id(),
            kind=EntityKind.STUDENT,
            name=clean_name,
            attributes=attribute_list,
            meeting_requirements=list(requirements.values()),
        )
        self._entities[student.id] = student
        logger.info("Added student %s (%s)", student.name, student.id)
        return student

    def add_educator(self, name: str) -> Entity:
        """
        Raises:
            InvalidEntityError: If the name is blank
        """
        educator = Entity(
            id=self._new_id(),
            kind=EntityKind.EDUCATOR,
            name=self._clean_name(name),
        )
        self._entities[educator.id] = educator
        logger.info("Added educator %s (%s)", educator.name, educator.id)
        return educator

    def delete(self, entity_id: str) -> Entity:
        """
        Remove an entity. Deleting an educator also drops every student
        meeting requirement that references it.
        """
        entity = self.get(entity_id)
        del self._entities[entity_id]

        if entity.kind is EntityKind.EDUCATOR:
            for student in self.students():
                student.meeting_requirements = [
                    req for req in student.meeting_requirements
                    if req.educator_id != entity_id
                ]

        logger.info("Deleted %s %s (%s)", entity.kind.value, entity.name, entity.id)
        return entity

    # -- schedules -------------------------------------------------------

    def replace_schedule(self, entity_id: str, slots: Iterable[TimeSlot]) -> None:
        """
        Replace the whole schedule of an entity.

        A cell listed more than once keeps its last slot.
        """
        entity = self.get(entity_id)
        by_key: Dict[Tuple[int, int], TimeSlot] = {}
        for slot in slots:
            by_key[slot.key] = slot
        entity.schedule = list(by_key.values())
        logger.debug("Stored %d slot(s) for %s", len(entity.schedule), entity_id)

    def clear_schedule(self, entity_id: str) -> None:
        self.replace_schedule(entity_id, [])

    # -- attributes ------------------------------------------------------

    def add_attribute(self, entity_id: str) -> int:
        """Append an empty attribute pair and return its index."""
        entity = self.get(entity_id)
        entity.attributes.append()
        return len(entity.attributes) - 1

    def update_attribute(self, entity_id: str, index: int, key: str, value: str) -> None:
        """
        Edit the attribute at ``index`` in place.

        Renaming onto another existing key, or to a blank key, is rejected
        and leaves the attributes untouched.

        Raises:
            InvalidEntityError: If the index is out of range or the key is blank
            AttributeKeyConflictError: If the key is used by another pair
        """
        entity = self.get(entity_id)
        self._check_index(entity, index)

        new_key = key.strip()
        old_key, _ = entity.attributes[index]
        if not new_key and old_key:
            raise InvalidEntityError("Attribute key cannot be blank")

        if new_key:
            existing = entity.attributes.index_of(new_key)
            if existing not in (-1, index):
                raise AttributeKeyConflictError(
                    f"Attribute key '{new_key}' already exists on {entity.name}"
                )

        entity.attributes.set_at(index, new_key, value)

    def remove_attribute(self, entity_id: str, index: int) -> None:
        entity = self.get(entity_id)
        self._check_index(entity, index)
        entity.attributes.remove_at(index)

    @staticmethod
    def _check_index(entity: Entity, index: int) -> None:
        if not 0 <= index < len(entity.attributes):
            raise InvalidEntityError(
                f"No attribute at position {index} on {entity.name}"
            )

    # -- required attributes --------------------------------------------

    @property
    def required_attributes(self) -> List[RequiredAttribute]:
        return list(self._required)

    def add_required_attribute(
        self, name: str, values: Optional[Sequence[str]] = None
    ) -> RequiredAttribute:
        """
        Require an attribute on new students. Existing students are not
        re-validated.

        Raises:
            InvalidEntityError: If the name is blank or already required
        """
        clean = name.strip()
        if not clean:
            raise InvalidEntityError("Required attribute name cannot be blank")
        if self._find_required(clean) is not None:
            raise InvalidEntityError(f"Attribute '{clean}' is already required")

        requirement = RequiredAttribute(name=clean, values=self._clean_values(values))
        self._required.append(requirement)
        return requirement

    def remove_required_attribute(self, name: str) -> None:
        self._required = [req for req in self._required if req.name != name]

    def update_required_attribute_values(
        self, name: str, values: Optional[Sequence[str]]
    ) -> RequiredAttribute:
        requirement = self._find_required(name)
        if requirement is None:
            raise InvalidEntityError(f"Attribute '{name}' is not required")

        updated = RequiredAttribute(name=name, values=self._clean_values(values))
        self._required[self._required.index(requirement)] = updated
        return updated

    def _find_required(self, name: str) -> Optional[RequiredAttribute]:
        for requirement in self._required:
            if requirement.name == name:
                return requirement
        return None

    @staticmethod
    def _clean_values(values: Optional[Sequence[str]]) -> Optional[Tuple[str, ...]]:
        if values is None:
            return None
        cleaned = tuple(v.strip() for v in values if v.strip())
        # An empty option list means free-form text
        return cleaned or None

    # -- meeting requirements --------------------------------------------

    def add_meeting_requirement(self, student_id: str, requirement: MeetingRequirement) -> None:
        """Add or replace the requirement for ``requirement.educator_id``."""
        student = self._get_student(student_id)
        self._check_educator(requirement.educator_id)
        student.meeting_requirements = [
            req for req in student.meeting_requirements
            if req.educator_id != requirement.educator_id
        ] + [requirement]

    def remove_meeting_requirement(self, student_id: str, educator_id: str) -> None:
        student = self._get_student(student_id)
        student.meeting_requirements = [
            req for req in student.meeting_requirements
            if req.educator_id != educator_id
        ]

    def _get_student(self, entity_id: str) -> Entity:
        entity = self.get(entity_id)
        if entity.kind is not EntityKind.STUDENT:
            raise InvalidEntityError(f"{entity.name} is not a student")
        return entity

    def _check_educator(self, educator_id: str) -> None:
        entity = self._entities.get(educator_id)
        if entity is None or entity.kind is not EntityKind.EDUCATOR:
            raise InvalidEntityError(f"Unknown educator id: {educator_id}")

    # -- helpers ---------------------------------------------------------

    @staticmethod
    def _clean_name(name: str) -> str:
        clean = name.strip()
        if not clean:
            raise InvalidEntityError("Name cannot be blank")
        return clean

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex
