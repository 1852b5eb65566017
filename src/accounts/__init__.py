"""Accounts — учётные записи инвесторов (вход, регистрация, депозит, история)."""

from .investor_service import AccountsConfig, InvestorService

__all__ = [
    "InvestorService",
    "AccountsConfig",
]
