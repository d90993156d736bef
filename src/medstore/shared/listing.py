"""Helpers for reading aggregates back for list endpoints.

Filters, including lookups such as ``name__icontains`` or ``price__gte``, are
pushed to the repository. Reads walk the matching records in batches ordered
by identity, so no result is ever cut short. Sorting and paging for the
response happen on the returned list.
"""

import math

from protean.utils.globals import current_domain
from protean.utils.reflection import id_field

_BATCH_SIZE = 500


def _query(element_cls, **filters):
    query = current_domain.repository_for(element_cls)._dao.query
    return query.filter(**filters) if filters else query


def fetch_all(element_cls, **filters):
    """Every record of ``element_cls`` that matches ``filters``."""
    query = _query(element_cls, **filters).order_by(id_field(element_cls).field_name)
    items = []
    while True:
        batch = query.offset(len(items)).limit(_BATCH_SIZE).all()
        items.extend(batch.items)
        if len(batch.items) < _BATCH_SIZE or len(items) >= batch.total:
            return items


def count(element_cls, **filters):
    return _query(element_cls, **filters).limit(1).all().total


def paginate(items, page=1, limit=20):
    page = max(int(page or 1), 1)
    limit = max(int(limit or 20), 1)
    total = len(items)
    start = (page - 1) * limit
    return {
        "items": items[start : start + limit],
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit) if total else 0,
    }


def contains(haystack, needle):
    """Case-insensitive substring match tolerant of missing values."""
    return bool(haystack) and needle.lower() in haystack.lower()
