from rest_framework.response import Response


def rest_api_formatter(data, status_code, success, message=None,
                       error_code=None, error_message=None, error_fields=None):
    """
    Wrap a payload in the common response envelope:

        {"success": ..., "message": ..., "data": ..., "error": {...}}

    `error` is only present on failed responses.
    """
    body = {
        'success': success,
        'message': message,
        'data': data,
    }
    if not success:
        body['error'] = {
            'code': error_code,
            'message': error_message or message,
            'fields': error_fields or [],
        }
    return Response(body, status=status_code)
