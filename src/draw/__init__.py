"""Draw — однократный лотерейный розыгрыш размещения после дедлайна."""

from .engine import DrawEngine

__all__ = ["DrawEngine"]
