from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.transaction import TransactionManagementError


class Transaction:
    """
    Хэндл одного открытого блока ``transaction.atomic``

    Используется как контекстный менеджер: при нормальном выходе транзакция
    коммитится, при любом исключении (в том числе DomainError) откатывается.
    Методы репозитория, участвующие в многошаговой записи, принимают хэндл
    и отказываются работать с уже закрытым.

        with Transaction() as tx:
            status = repository.lock_pr_status(tx, pr_id)
            ...
    """

    def __init__(self, using: str = None):
        self.using = using or DEFAULT_DB_ALIAS
        self._atomic = None

    def __enter__(self):
        if self._atomic is not None:
            raise TransactionManagementError('Transaction handle is already open')
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        atomic, self._atomic = self._atomic, None
        return atomic.__exit__(exc_type, exc_value, traceback)

    @property
    def active(self) -> bool:
        return self._atomic is not None and transaction.get_connection(self.using).in_atomic_block

    def ensure_active(self):
        if not self.active:
            raise TransactionManagementError('Operation requires an open Transaction')
