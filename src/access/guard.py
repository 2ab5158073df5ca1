"""Admin Guard — единая проверка прав администратора.

Все admin-gated операции (add_currency, set_rate, collect_fees, grant/revoke)
проходят через require_admin / admin_only, чтобы проверка не расходилась
между точками входа.

Authorizer — внешний коллаборатор с единственным методом is_admin(principal).
StaticAuthorizer — реализация с явным набором администраторов.
"""

import functools
import logging
import threading
from typing import Callable, Iterable, Protocol, TypeVar, runtime_checkable

from src.core.errors import Unauthorized

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


@runtime_checkable
class Authorizer(Protocol):
    """Authorization backend."""

    def is_admin(self, principal: str) -> bool: ...


def require_admin(authorizer: Authorizer, caller: str, operation: str = "") -> None:
    """Проверка admin-capability вызывающего.

    Raises:
        Unauthorized: если authorizer не признаёт caller администратором
    """
    if not isinstance(caller, str) or not caller or not authorizer.is_admin(caller):
        logger.warning("Unauthorized %s attempt by %r", operation or "admin operation", caller)
        raise Unauthorized(f"{caller!r} is not authorized to perform {operation or 'this operation'}")


def admin_only(method: F) -> F:
    """Декоратор для методов вида method(self, caller, ...).

    Использует self._authorizer; проверка выполняется до любых изменений состояния.
    """

    @functools.wraps(method)
    def wrapper(self, caller: str, *args, **kwargs):
        require_admin(self._authorizer, caller, method.__name__)
        return method(self, caller, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _check_principal(principal: str) -> None:
    if not isinstance(principal, str) or not principal:
        raise ValueError(f"Admin principal must be a non-empty string, got {principal!r}")


class StaticAuthorizer:
    """Authorizer с явным набором администраторов.

    Изменение набора (grant/revoke) само является admin-операцией.
    Последнего администратора отозвать нельзя.
    """

    def __init__(self, admins: Iterable[str]):
        admins = frozenset(admins)
        if not admins:
            raise ValueError("StaticAuthorizer requires at least one admin")
        for principal in admins:
            _check_principal(principal)
        self._admins: frozenset[str] = admins
        self._lock = threading.Lock()

    @property
    def _authorizer(self) -> "StaticAuthorizer":
        return self

    @property
    def admins(self) -> frozenset[str]:
        return self._admins

    def is_admin(self, principal: str) -> bool:
        return principal in self._admins

    @admin_only
    def grant(self, caller: str, principal: str) -> None:
        _check_principal(principal)
        with self._lock:
            self._admins = self._admins | {principal}
        logger.info("Admin granted to %r by %r", principal, caller)

    @admin_only
    def revoke(self, caller: str, principal: str) -> None:
        with self._lock:
            remaining = self._admins - {principal}
            if not remaining:
                raise ValueError("Cannot revoke the last admin")
            self._admins = remaining
        logger.info("Admin revoked from %r by %r", principal, caller)
