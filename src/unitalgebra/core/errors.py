# unitalgebra.core.errors

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from unitalgebra.core.unit import CompoundUnit


class DimensionMismatchError(TypeError):
    """
    Raised whenever two units or values must share a dimension and do not.

    A ``TypeError``: combining incompatible dimensions is a type error.

    Attributes
    ----------
    left, right : Any
        The two operands (units or values) that were combined.
    difference : CompoundUnit | None
        The unit that ``left`` would have to be multiplied by to match
        ``right``, when it is known.
    """

    def __init__(
        self,
        message: str,
        left: Any = None,
        right: Any = None,
        difference: "CompoundUnit | None" = None,
    ) -> None:
        super().__init__(message)
        self.left = left
        self.right = right
        self.difference = difference


__all__ = ["DimensionMismatchError"]
