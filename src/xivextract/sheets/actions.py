"""
Action listings by class/job and by role.
"""

import logging
from enum import Enum
from typing import List, Tuple, Union

from xivextract.archive.base import ArchiveReader
from xivextract.errors import ColumnNotFound, JobNotFound, RowNotFound
from xivextract.excel.rows import RowRecord
from xivextract.results import ActionList
from xivextract.schema.models import FieldLayout
from xivextract.schema.resolver import SchemaResolver
from xivextract.sheets.projector import read_field, read_named

logger = logging.getLogger(__name__)

ACTION_SHEET = "Action"
CLASS_JOB_SHEET = "ClassJob"


class Role(Enum):
    """Party roles and the ClassJobCategory rows their role actions use."""

    TANK = ("tank", (113, 161))
    HEALER = ("healer", (117, 120))
    MELEE = ("melee", (114, 161, 118))
    PHYSICAL_RANGED = ("physical-ranged", (115, 161, 118))
    CASTER = ("caster", (116, 120))

    def __init__(self, label: str, class_categories: Tuple[int, ...]):
        self.label = label
        self.class_categories = class_categories

    @classmethod
    def from_label(cls, label: str) -> "Role":
        for role in cls:
            if role.label == label:
                return role
        raise ValueError(f"Unknown role {label!r}")


def _entry(row: RowRecord, layout: FieldLayout, names: bool) -> Union[int, str]:
    if names:
        return read_named(row, layout, "Name").value
    return row.row_id


def job_actions(archive: ArchiveReader, resolver: SchemaResolver,
                job_id: int, names: bool = False) -> ActionList:
    """
    List the actions of a class or job, including its parent class's.

    Raises:
        JobNotFound: no ClassJob row ``job_id``
    """
    class_job_layout = resolver.layout(CLASS_JOB_SHEET)
    try:
        class_job = archive.row(CLASS_JOB_SHEET, job_id)
    except RowNotFound:
        raise JobNotFound(job_id) from None
    parent = read_named(class_job, class_job_layout, "ClassJobParent").value
    logger.debug(f"ClassJob {job_id} has parent {parent}")

    layout = resolver.layout(ACTION_SHEET)
    class_job_column = layout.get("ClassJob")
    if class_job_column is None:
        raise ColumnNotFound(ACTION_SHEET, "ClassJob")

    items: List[Union[int, str]] = []
    for row in archive.rows(ACTION_SHEET):
        owner = read_field(row, class_job_column).value
        if owner == job_id or owner == parent:
            items.append(_entry(row, layout, names))
    return ActionList(items)


def role_actions(archive: ArchiveReader, resolver: SchemaResolver,
                 role: Role, names: bool = False) -> ActionList:
    """List the role actions available to a party role."""
    layout = resolver.layout(ACTION_SHEET)

    items: List[Union[int, str]] = []
    for row in archive.rows(ACTION_SHEET):
        if not read_named(row, layout, "IsRoleAction").value:
            continue
        if read_named(row, layout, "ClassJobCategory").value in role.class_categories:
            items.append(_entry(row, layout, names))
    return ActionList(items)
