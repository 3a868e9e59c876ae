from abc import ABC, abstractmethod
from math import sqrt
from typing import ClassVar

from quadint.utils import is_squarefree

# Rings conventionally named after a generator instead of a square root
_UNICODE_GENERATORS = {-1: "i", -3: "ω", 5: "φ"}
_ASCII_GENERATORS = {-1: "i", -3: "omega", 5: "phi"}


class IntegerRing(ABC):
    """What a ring of algebraic integers has to provide to the rest of the package."""

    __slots__ = ()

    @abstractmethod
    def get_max_algebraic_degree(self) -> int:
        ...

    @abstractmethod
    def is_purely_real(self) -> bool:
        ...

    @abstractmethod
    def discriminant(self) -> int:
        ...

    @abstractmethod
    def to_ascii_string(self) -> str:
        ...


class QuadraticRing(IntegerRing):
    """
    The ring of algebraic integers of Q(sqrt(d)), for squarefree d other than 0 and 1.

    When d = 1 (mod 4) the ring contains "half-integers" (a + b*sqrt(d))/2 with a and b both
    odd, and is written O_Q(sqrt(d)); otherwise it is Z[sqrt(d)].

    Two rings are equal iff their radicands are equal. Use :meth:`apply` to get the right
    variant for a radicand of either sign.
    """

    __slots__ = ("radicand", "abs_radicand", "real_rad_sqrt", "d1mod4")

    radicand: int
    abs_radicand: int
    real_rad_sqrt: float
    d1mod4: bool

    MAX_ALGEBRAIC_DEGREE: ClassVar[int] = 2

    def __init__(self, d: int) -> None:
        """
        Args:
            d: The radicand.

        Raises:
            ValueError: If d is 0, 1 or not squarefree.
        """
        if d == 0 or d == 1:
            raise ValueError(f"{d} is not a valid radicand for a quadratic ring")
        if not is_squarefree(d):
            raise ValueError(f"{d} is not squarefree")

        self.radicand = d
        self.abs_radicand = abs(d)
        self.real_rad_sqrt = sqrt(self.abs_radicand)
        # Python's % is already the mathematical modulus: -3 % 4 == 1
        self.d1mod4 = d % 4 == 1

    @staticmethod
    def apply(d: int) -> "QuadraticRing":
        """
        Build the ring variant matching the sign of d.

        Raises:
            ValueError: If d is not a valid radicand.
        """
        if d < 0:
            return ImaginaryQuadraticRing(d)
        return RealQuadraticRing(d)

    def has_half_integers(self) -> bool:
        return self.d1mod4

    def get_max_algebraic_degree(self) -> int:
        return self.MAX_ALGEBRAIC_DEGREE

    def discriminant(self) -> int:
        """d if d = 1 (mod 4), else 4d."""
        if self.d1mod4:
            return self.radicand
        return 4 * self.radicand

    def is_purely_real(self) -> bool:
        return self.radicand > 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuadraticRing):
            return False
        return self.radicand == other.radicand

    def __hash__(self) -> int:
        return hash(self.radicand)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.radicand})"

    def __str__(self) -> str:
        letter = _UNICODE_GENERATORS.get(self.radicand)
        if letter is not None:
            return f"Z[{letter}]"
        if self.d1mod4:
            return f"O_Q(√{self.radicand})"
        return f"Z[√{self.radicand}]"

    def to_ascii_string(self) -> str:
        letter = _ASCII_GENERATORS.get(self.radicand)
        if letter is not None:
            return f"Z[{letter}]"
        if self.d1mod4:
            return f"O_(Q(sqrt({self.radicand})))"
        return f"Z[sqrt({self.radicand})]"


class ImaginaryQuadraticRing(QuadraticRing):
    """Q(sqrt(d)) for negative d: the integers form a lattice in the complex plane."""

    __slots__ = ()

    def __init__(self, d: int) -> None:
        if d >= 0:
            raise ValueError(f"Imaginary quadratic rings need a negative radicand, not {d}")
        super().__init__(d)


class RealQuadraticRing(QuadraticRing):
    """Q(sqrt(d)) for d > 1: every element is a real number and there are infinitely many units."""

    __slots__ = ()

    def __init__(self, d: int) -> None:
        if d < 2:
            raise ValueError(f"Real quadratic rings need a radicand greater than 1, not {d}")
        super().__init__(d)
