"""
Domain errors. Each carries an HTTP status, a human-readable detail and a
machine code; config.exceptions.custom_exception_handler renders them.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class AppError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An internal error occurred.'
    default_code = 'error'

    def __init__(self, status_code=None, detail=None, code=None):
        if status_code is not None:
            self.status_code = status_code
        if code is None:
            code = _CODES_BY_STATUS.get(self.status_code, self.default_code)
        super().__init__(detail=detail, code=code)


_CODES_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: 'bad_request',
    status.HTTP_403_FORBIDDEN: 'permission_denied',
    status.HTTP_404_NOT_FOUND: 'not_found',
    status.HTTP_409_CONFLICT: 'conflict',
}
