"""Admin — действия оператора: публикация размещений и запуск розыгрыша."""

from .administrator import Administrator

__all__ = ["Administrator"]
