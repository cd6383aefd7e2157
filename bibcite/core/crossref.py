"""Cross-reference resolution for citation generation.

A record may name a parent record in its ``crossref`` field and borrow
every field it does not define itself. Only one level is followed: the
parent's own ``crossref`` is ignored, which rules out cycles and long
chains.
"""

import logging

from .fields import LINK_FIELDS
from .models import LinkResolver, Record

logger = logging.getLogger(__name__)


class CrossRefResolver:
    """Fill missing record fields from the linked parent record."""

    def __init__(self, links: LinkResolver | None):
        """Initialize with the lookup used to find parent records.

        Args:
            links: Lookup over the full collection, or None to disable
                inheritance.
        """
        self.links = links

    def parent_of(self, record: Record) -> Record | None:
        """Return the parent record, or None when there is nothing to inherit."""
        parent_key = record.crossref
        if not parent_key or self.links is None:
            return None

        if parent_key == record.key:
            return None

        parent = self.links.resolve(parent_key)
        if parent is None:
            logger.debug(
                "Crossref target %r of %r not found", parent_key, record.key
            )
            return None
        if parent is record:
            return None
        return parent

    def resolve_entry(self, record: Record) -> Record:
        """Resolve the cross-reference of a single record.

        Child fields take precedence. A child field that is present but
        blank counts as missing.

        Args:
            record: Record to resolve.

        Returns:
            Record with inherited fields, or the original if no parent.
        """
        parent = self.parent_of(record)
        if parent is None:
            return record

        updates = {}
        for field, parent_value in parent.fields.items():
            if field in LINK_FIELDS:
                continue
            if not parent_value or not parent_value.strip():
                continue
            if not record.has(field):
                updates[field] = parent_value

        if updates:
            return record.with_fields(**updates)

        return record
