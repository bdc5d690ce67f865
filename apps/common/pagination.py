import math

from rest_framework import serializers
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


class PaginationQuerySerializer(serializers.Serializer):
    """
    Validate pagination query parameters.

    Query Parameters:
        page (int): 1-based page number
        limit (int): Page size, capped at StandardPagination.max_limit
    """

    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=10)


class StandardPagination(BasePagination):
    """
    Page/limit pagination rendered as ``{data, meta}``.

    Pages past the end return an empty ``data`` list rather than 404.
    """

    default_limit = 10
    max_limit = 100

    def paginate_queryset(self, queryset, request, view=None):
        params = PaginationQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        self.page = params.validated_data['page']
        self.limit = min(params.validated_data['limit'], self.max_limit)
        self.total = queryset.count()

        offset = (self.page - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def get_paginated_response(self, data):
        return Response({
            'data': data,
            'meta': build_meta(page=self.page, limit=self.limit, total=self.total),
        })

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'required': ['data', 'meta'],
            'properties': {
                'data': schema,
                'meta': {
                    'type': 'object',
                    'properties': {
                        'page': {'type': 'integer', 'example': 1},
                        'limit': {'type': 'integer', 'example': 10},
                        'total': {'type': 'integer', 'example': 42},
                        'totalPages': {'type': 'integer', 'example': 5},
                        'hasNextPage': {'type': 'boolean'},
                        'hasPreviousPage': {'type': 'boolean'},
                    },
                },
            },
        }


def build_meta(*, page: int, limit: int, total: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': total_pages,
        'hasNextPage': page < total_pages,
        'hasPreviousPage': page > 1,
    }
