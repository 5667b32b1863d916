"""
Доменные ошибки сервисного слоя.

Сервисы поднимают эти исключения, обработчик в main.py переводит их в
HTTP-ответ по status_code. Отказ в доступе в предикатах прав сюда не
входит: они возвращают False.
"""
from http import HTTPStatus


class ServiceError(Exception):
    """Базовая доменная ошибка"""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ServiceError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = "Not found"


class ProjectNotFoundError(NotFoundError):
    default_message = "Project not found"


class MemberNotFoundError(NotFoundError):
    default_message = "Member not found"


class SprintNotFoundError(NotFoundError):
    default_message = "Sprint not found"


class PermissionDeniedError(ServiceError):
    status_code = HTTPStatus.FORBIDDEN
    default_message = "You don't have permission to manage members of this project"


class OwnerMembershipError(ServiceError):
    """Попытка изменить или удалить владельца проекта через членство"""

    default_message = "The project owner cannot be changed or removed"


class ConflictError(ServiceError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Conflict"


class AlreadyMemberError(ConflictError):
    default_message = "User is already a member of this project"


class SprintTitleConflictError(ConflictError):
    default_message = "A sprint with this title already exists"


class InvalidSprintDatesError(ServiceError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    default_message = "Start date cannot be after end date"
