from rest_framework import status
from rest_framework.exceptions import APIException


class RoleIntegrityError(APIException):
    """
    An identity's role records are in a state registration never produces:
    no role records at all, or a Staff base record without its matching
    Manager/DeliveryAgent row.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Account role records are inconsistent.'
    default_code = 'role_integrity_error'
