import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


def pagination_meta(page_number, page_size, total):
    """Pagination block shared by every list endpoint."""
    total_pages = math.ceil(total / page_size) if page_size else 0
    return {
        'currentPage': page_number,
        'totalPages': total_pages,
        'totalItems': total,
        'hasNext': page_number * page_size < total,
        'hasPrev': page_number > 1,
    }


class StandardResultsPagination(PageNumberPagination):
    """
    Page based pagination answering
    ``{success, data: {items, pagination: {...}}}``.

    ``page`` selects the page, ``limit`` the page size (capped at 100).
    """
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_pagination_meta(self):
        return pagination_meta(
            self.page.number,
            self.page.paginator.per_page,
            self.page.paginator.count,
        )

    def get_paginated_response(self, data, **extra):
        payload = {
            'items': data,
            'pagination': self.get_pagination_meta(),
        }
        payload.update(extra)
        return Response({'success': True, 'data': payload})

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'success': {'type': 'boolean'},
                'data': {
                    'type': 'object',
                    'properties': {
                        'items': schema,
                        'pagination': {'type': 'object'},
                    },
                },
            },
        }
