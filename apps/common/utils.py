"""
Common utility functions for API responses
"""
from rest_framework.response import Response
from rest_framework import status
from rest_framework.pagination import PageNumberPagination


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK):
    """
    Standard success response format
    """
    response_data = {
        "code": status_code,
        "msg": message,
        "data": data
    }
    return Response(response_data, status=status_code)


def paginated_response(queryset, serializer_class, request, message="Success"):
    """
    Standard paginated response format
    """
    paginator = PageNumberPagination()
    page = paginator.paginate_queryset(queryset, request)

    if page is not None:
        serializer = serializer_class(page, many=True)
        return success_response({
            "list": serializer.data,
            "page": {
                "pageNum": paginator.page.number,
                "pageSize": paginator.get_page_size(request),
                "total": paginator.page.paginator.count,
                "totalPages": paginator.page.paginator.num_pages
            }
        }, message)

    serializer = serializer_class(queryset, many=True)
    return success_response({
        "list": serializer.data,
        "page": {
            "pageNum": 1,
            "pageSize": len(serializer.data),
            "total": len(serializer.data),
            "totalPages": 1
        }
    }, message)
