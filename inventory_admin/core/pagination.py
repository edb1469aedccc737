from django.core.paginator import Paginator
from .responses import success_response

DEFAULT_PAGE_SIZE = 15
MAX_PAGE_SIZE = 200


def _int_param(request, name, default):
    try:
        value = int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def paginate(queryset, request, serializer_class, message=None, context=None):
    """Page through `queryset` with ?page=&limit= and wrap it in the envelope"""
    page = _int_param(request, 'page', 1)
    limit = min(_int_param(request, 'limit', DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)
    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})

    return success_response(
        serializer.data,
        message=message,
        count=paginator.count,
        pagination={
            'page': page_obj.number,
            'limit': limit,
            'total': paginator.count,
            'total_pages': paginator.num_pages,
            'next': page_obj.next_page_number() if page_obj.has_next() else None,
            'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        },
    )
