from rest_framework.decorators import action
from rest_framework.response import Response


class AllRecordsMixin:
    """
    Adds ``GET <prefix>/all/``: the filtered queryset without pagination.
    """

    @action(detail=False, methods=['get'], url_path='all')
    def all(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)


UUID_LOOKUP_REGEX = '[0-9a-fA-F-]{36}'
