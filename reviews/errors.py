from enum import Enum


class ErrorCode(str, Enum):
    TEAM_EXISTS = 'TEAM_EXISTS'
    TEAM_NOT_FOUND = 'TEAM_NOT_FOUND'
    USER_NOT_FOUND = 'USER_NOT_FOUND'
    PR_EXISTS = 'PR_EXISTS'
    PR_NOT_FOUND = 'PR_NOT_FOUND'
    AUTHOR_MISSING = 'AUTHOR_MISSING'
    PR_MERGED = 'PR_MERGED'
    NOT_ASSIGNED = 'NOT_ASSIGNED'
    NO_CANDIDATE = 'NO_CANDIDATE'


DEFAULT_MESSAGES = {
    ErrorCode.TEAM_EXISTS: 'team_name already exists',
    ErrorCode.TEAM_NOT_FOUND: 'team not found',
    ErrorCode.USER_NOT_FOUND: 'user not found',
    ErrorCode.PR_EXISTS: 'PR id already exists',
    ErrorCode.PR_NOT_FOUND: 'PR not found',
    ErrorCode.AUTHOR_MISSING: 'author not found or has no team',
    ErrorCode.PR_MERGED: 'cannot reassign on merged PR',
    ErrorCode.NOT_ASSIGNED: 'reviewer is not assigned to this PR',
    ErrorCode.NO_CANDIDATE: 'no active replacement candidate in team',
}


class DomainError(Exception):
    """
    Доменная ошибка сервисного слоя

    code - одно из значений закрытого перечисления ErrorCode, вызывающий код
    ветвится по нему, а не по типу исключения. Исключение, выброшенное внутри
    блока Transaction, откатывает транзакцию.
    """

    def __init__(self, code: ErrorCode, message: str = None):
        self.code = ErrorCode(code)
        self.message = message or DEFAULT_MESSAGES[self.code]
        super().__init__(self.message)

    def __repr__(self):
        return f"DomainError({self.code.value}, {self.message!r})"
