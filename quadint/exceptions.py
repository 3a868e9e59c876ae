from fractions import Fraction
from math import ceil, floor, hypot
from typing import TYPE_CHECKING, Optional, Union

from quadint.rings import IntegerRing, QuadraticRing
from quadint.utils import square_part

if TYPE_CHECKING:
    from quadint.calculator import NumberTheoreticFunctionsCalculator
    from quadint.quad import AlgebraicInteger, QuadraticInteger


def _quotient_ring(dividend: "QuadraticInteger", divisor: "QuadraticInteger") -> QuadraticRing:
    """The ring a quotient of the two numbers lives in."""
    if dividend.ring == divisor.ring or dividend.surd_part_mult == 0:
        return divisor.ring
    if divisor.surd_part_mult == 0:
        return dividend.ring
    return QuadraticRing.apply(square_part(dividend.ring.radicand * divisor.ring.radicand)[1])


class NotDivisibleException(ArithmeticError):
    """
    A division whose quotient is not an algebraic integer of the ring.

    This is an answer more than a failure: the exact quotient is kept as the two fractions of
    reg + surd*sqrt(d), and the ring elements around it can be listed and rounded to, which is
    what the Euclidean algorithm needs.
    """

    def __init__(self,
                 message: str,
                 dividend: "QuadraticInteger",
                 divisor: "QuadraticInteger",
                 fractions: tuple[Fraction, ...],
                 ring: Optional[QuadraticRing] = None) -> None:
        """
        Args:
            message: Human-readable description.
            dividend: The number that was divided.
            divisor: The number it was divided by.
            fractions: The exact regular part and surd coefficient of the quotient.
            ring: The ring of the quotient. Worked out from the operands if not given.

        Raises:
            ValueError: If fractions does not hold exactly two values.
        """
        if len(fractions) != 2:
            raise ValueError(f"A quadratic quotient has a regular and a surd part, got {len(fractions)} fractions")

        super().__init__(message)
        self.dividend = dividend
        self.divisor = divisor
        self.fractions = (fractions[0], fractions[1])
        self.ring = ring if ring is not None else _quotient_ring(dividend, divisor)

    @property
    def numeric_real_part(self) -> float:
        reg, surd = self.fractions
        if self.ring.radicand < 0:
            return float(reg)
        return float(reg) + float(surd) * self.ring.real_rad_sqrt

    @property
    def numeric_imag_part(self) -> float:
        if self.ring.radicand > 0:
            return 0.0
        return float(self.fractions[1]) * self.ring.real_rad_sqrt

    def get_abs(self) -> float:
        return hypot(self.numeric_real_part, self.numeric_imag_part)

    def bounding_integers(self) -> list["QuadraticInteger"]:
        """
        Ring elements close to the exact quotient.

        In rings with half-integers these are the four points of the half-integer lattice
        around the quotient; otherwise the four corners of the unit square holding it. For
        real rings, where a lattice point can be far from the quotient on the number line,
        the rational integers either side of it and their neighbours one sqrt(d) away are
        added.

        Returns:
            list: The distinct candidates, in a fixed order.
        """
        from quadint.quad import QuadraticInteger

        reg, surd = self.fractions
        ring = self.ring
        candidates: list[QuadraticInteger] = []
        if ring.has_half_integers():
            a, b = ceil(2 * reg), ceil(2 * surd)
            if (a ^ b) & 1:
                a -= 1
            for x, y in ((a, b), (a - 1, b - 1), (a + 1, b - 1), (a, b - 2)):
                candidates.append(QuadraticInteger.apply(x, y, ring, 2))
        else:
            for x in (floor(reg), ceil(reg)):
                for y in (floor(surd), ceil(surd)):
                    candidates.append(QuadraticInteger.apply(x, y, ring))

        if ring.radicand > 0:
            value = self.numeric_real_part
            root = ring.real_rad_sqrt
            for x in (floor(value), ceil(value)):
                candidates.append(QuadraticInteger.apply(x, 0, ring))
            for x in (floor(value - root), ceil(value - root)):
                candidates.append(QuadraticInteger.apply(x, 1, ring))
            for x in (floor(value + root), ceil(value + root)):
                candidates.append(QuadraticInteger.apply(x, -1, ring))

        bounds: list[QuadraticInteger] = []
        for candidate in candidates:
            if candidate not in bounds:
                bounds.append(candidate)
        return bounds

    def round_towards_zero(self) -> "QuadraticInteger":
        """The bounding integer of least absolute value; the first one on ties."""
        return min(self.bounding_integers(), key=lambda n: n.abs())

    def round_away_from_zero(self) -> "QuadraticInteger":
        """The bounding integer of greatest absolute value; the first one on ties."""
        return max(self.bounding_integers(), key=lambda n: n.abs())


class NonEuclideanDomainException(ArithmeticError):
    """The Euclidean algorithm was asked to run in a ring that is not norm-Euclidean."""

    def __init__(self,
                 message: str,
                 a: "QuadraticInteger",
                 b: "QuadraticInteger",
                 calculator: Optional["NumberTheoreticFunctionsCalculator"] = None) -> None:
        super().__init__(message)
        self.causing_numbers = (a, b)
        self.calculator = calculator

    def _calculator(self) -> "NumberTheoreticFunctionsCalculator":
        if self.calculator is not None:
            return self.calculator
        from quadint.calculator import DEFAULT_CALCULATOR
        return DEFAULT_CALCULATOR

    def try_euclidean_gcd_anyway(self) -> "QuadraticInteger":
        """
        Run the Euclidean algorithm on the two numbers regardless.

        Some pairs still work out even though the ring is not norm-Euclidean.

        Raises:
            ArithmeticError: If a remainder of smaller norm can't be found.
        """
        return self._calculator().try_euclidean_gcd_anyway(*self.causing_numbers)

    def get_euclidean_gcd_anyway(self) -> Optional["QuadraticInteger"]:
        """Like :meth:`try_euclidean_gcd_anyway`, but None when the algorithm gets stuck."""
        try:
            return self.try_euclidean_gcd_anyway()
        except ArithmeticError:
            return None


class NonUniqueFactorizationDomainException(ArithmeticError):
    """Factorization into primes was asked for in a ring that is not a UFD."""

    def __init__(self,
                 message: str,
                 number: "QuadraticInteger",
                 calculator: Optional["NumberTheoreticFunctionsCalculator"] = None) -> None:
        super().__init__(message)
        self.unfactorized_number = number
        self.calculator = calculator

    def try_to_factorize_anyway(self) -> list["QuadraticInteger"]:
        """
        A factorization into irreducibles.

        Each factor that is irreducible but not prime adds the pair -1, -1 at the front, so
        the product is unchanged but the caller can tell the factorization is not the only
        one.
        """
        calculator = self.calculator
        if calculator is None:
            from quadint.calculator import DEFAULT_CALCULATOR
            calculator = DEFAULT_CALCULATOR
        return calculator.try_to_factorize_anyway(self.unfactorized_number)


class AlgebraicDegreeOverflowException(ArithmeticError):
    """The result of an operation has a higher algebraic degree than the number types hold."""

    def __init__(self, message: str, max_degree: int, a: "AlgebraicInteger", b: "AlgebraicInteger") -> None:
        super().__init__(message)
        self.max_expected_algebraic_degree = max_degree
        self.necessary_algebraic_degree = a.algebraic_degree() * b.algebraic_degree()
        self.causing_numbers = (a, b)


class UnsupportedNumberDomainException(NotImplementedError):
    """An operation was asked of a ring, or of numbers of a ring, that it is not available for."""

    def __init__(self,
                 message: str,
                 domain: Union[IntegerRing, "AlgebraicInteger"],
                 other: Optional["AlgebraicInteger"] = None) -> None:
        super().__init__(message)
        if isinstance(domain, IntegerRing):
            self.causing_domain = domain
            self.causing_numbers: tuple["AlgebraicInteger", ...] = ()
        else:
            self.causing_domain = domain.get_ring()
            self.causing_numbers = (domain,) if other is None else (domain, other)
