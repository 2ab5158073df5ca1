"""Access — admin-контроль для мутаций Registry, Oracle и Ledger."""

from .guard import Authorizer, StaticAuthorizer, admin_only, require_admin

__all__ = [
    "Authorizer",
    "StaticAuthorizer",
    "admin_only",
    "require_admin",
]
