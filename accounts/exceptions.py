from rest_framework import status
from rest_framework.exceptions import APIException


class ConflictError(APIException):
    """Registration collides with existing data: duplicate email or a second admin."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with existing data.'
    default_code = 'conflict'
