"""Paging helper for repository queries.

Protean querysets cap results per call, so reads that must see every
matching record walk the queryset page by page.
"""

DEFAULT_PAGE_SIZE = 500


def iter_all(queryset, page_size: int = DEFAULT_PAGE_SIZE):
    """Yield every record matched by ``queryset``.

    The queryset should carry an ``order_by`` so that pages are stable.
    """
    offset = 0
    while True:
        items = queryset.offset(offset).limit(page_size).all().items
        yield from items
        if len(items) < page_size:
            return
        offset += page_size
