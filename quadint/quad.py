from abc import ABC, abstractmethod
from fractions import Fraction
from math import atan2, floor, hypot, pi
from typing import Optional, Union, cast

from quadint.exceptions import (
    AlgebraicDegreeOverflowException,
    NotDivisibleException,
    UnsupportedNumberDomainException,
)
from quadint.rings import ImaginaryQuadraticRing, IntegerRing, QuadraticRing, RealQuadraticRing
from quadint.utils import square_part

OTHER_OP_TYPES = int
OP_TYPES = Union["QuadraticInteger", OTHER_OP_TYPES]


class AlgebraicInteger(ABC):
    """What an algebraic integer has to provide to take part in the calculator functions."""

    __slots__ = ()

    @abstractmethod
    def algebraic_degree(self) -> int:
        ...

    @abstractmethod
    def trace(self) -> int:
        ...

    @abstractmethod
    def norm(self) -> int:
        ...

    def full_norm(self) -> int:
        """Same as :meth:`norm`: Python integers do not overflow."""
        return self.norm()

    @abstractmethod
    def min_polynomial_coeffs(self) -> tuple[int, int, int]:
        ...

    @abstractmethod
    def get_ring(self) -> IntegerRing:
        ...

    @abstractmethod
    def abs(self) -> float:
        ...

    @abstractmethod
    def get_real_part_numeric(self) -> float:
        ...

    @abstractmethod
    def get_imag_part_numeric(self) -> float:
        ...

    @abstractmethod
    def is_re_approx(self) -> bool:
        ...

    @abstractmethod
    def is_im_approx(self) -> bool:
        ...

    @abstractmethod
    def angle(self) -> float:
        ...

    @abstractmethod
    def to_ascii_string(self) -> str:
        ...


def _from_fractions(reg: Fraction, surd: Fraction, ring: QuadraticRing) -> Optional["QuadraticInteger"]:
    """The number reg + surd*sqrt(d) of ring, or None if it is not one of the ring's integers."""
    twice_reg = 2 * reg
    twice_surd = 2 * surd
    if twice_reg.denominator != 1 or twice_surd.denominator != 1:
        return None

    a, b = twice_reg.numerator, twice_surd.numerator
    if (a ^ b) & 1:
        return None
    if a & 1 and not ring.has_half_integers():
        return None
    return QuadraticInteger.apply(a, b, ring, 2)


def _round_down(reg: Fraction, surd: Fraction, ring: QuadraticRing) -> "QuadraticInteger":
    """The lattice point of ring at or just below reg + surd*sqrt(d), coordinate-wise."""
    if ring.has_half_integers():
        a, b = floor(2 * reg), floor(2 * surd)
        if (a ^ b) & 1:
            a -= 1
        return QuadraticInteger.apply(a, b, ring, 2)
    return QuadraticInteger.apply(floor(reg), floor(surd), ring)


def _real_sign(x: int, y: int, d: int) -> int:
    """Sign of x + y*sqrt(d) for d > 1 not a square, without floating point."""
    if x >= 0 and y >= 0:
        return 0 if x == 0 and y == 0 else 1
    if x <= 0 and y <= 0:
        return -1
    if x > 0:
        return 1 if x * x > d * y * y else -1
    return 1 if d * y * y > x * x else -1


class QuadraticInteger(AlgebraicInteger):
    """
    An algebraic integer of degree at most 2:

        (reg_part_mult + surd_part_mult * sqrt(d)) / denominator

    The denominator is 1 or 2. It is 2 only in rings with half-integers, and then both
    numerators are odd (a value with two even numerators is stored over 1), so every number
    has exactly one representation.

    Build values with :meth:`apply`, which picks the imaginary or real variant from the ring.
    Arithmetic with a number of another ring works as long as one of the operands is a
    rational integer, or the result is a square root that lands in a third quadratic ring;
    anything else would need degree 4 and raises AlgebraicDegreeOverflowException.
    """

    __slots__ = ("reg_part_mult", "surd_part_mult", "ring", "denominator")

    reg_part_mult: int
    surd_part_mult: int
    ring: QuadraticRing
    denominator: int

    def __init__(self, a: int, b: int, ring: QuadraticRing, denom: int = 1) -> None:
        """
        Initialize a quadratic integer.

        Args:
            a: The regular part, multiplied by the denominator.
            b: The coefficient of sqrt(d), multiplied by the denominator.
            ring: The ring the number belongs to.
            denom: 1 or 2. Negative values negate a and b.

        Raises:
            ValueError: If the denominator is not 1 or 2 (up to sign), or the numerators do not
                describe an algebraic integer of the ring.
        """
        if denom < 0:
            a, b, denom = -a, -b, -denom
        if denom != 1 and denom != 2:
            raise ValueError(f"Denominator {denom} is not valid, it must be 1 or 2")

        if denom == 2:
            if (a ^ b) & 1:
                raise ValueError(f"Parity of regular part {a} and surd part {b} must match over a denominator of 2")
            if not a & 1:
                a //= 2
                b //= 2
                denom = 1
            elif not ring.has_half_integers():
                raise ValueError(f"({a} + {b}sqrt({ring.radicand}))/2 is not an algebraic integer of "
                                 f"{ring.to_ascii_string()}, which has no half-integers")

        self.reg_part_mult = a
        self.surd_part_mult = b
        self.ring = ring
        self.denominator = denom

    # region constructors
    @staticmethod
    def apply(a: int, b: int, ring: QuadraticRing, denom: int = 1) -> "QuadraticInteger":
        """
        Build the quadratic integer (a + b*sqrt(d))/denom of the variant that matches the ring.

        Returns:
            QuadraticInteger: An ImaginaryQuadraticInteger if d < 0, else a RealQuadraticInteger.
        """
        if ring.radicand < 0:
            return ImaginaryQuadraticInteger(a, b, ring, denom)
        return RealQuadraticInteger(a, b, ring, denom)

    @staticmethod
    def apply_theta(m: int, n: int, ring: QuadraticRing) -> "QuadraticInteger":
        """
        Build m + n*theta, with theta = (1 + sqrt(d))/2.

        Raises:
            ValueError: If the ring has no half-integers, so theta is not in it.
        """
        if not ring.has_half_integers():
            raise ValueError(f"{ring.to_ascii_string()} has no half-integers, so theta is not one of its integers")
        return QuadraticInteger.apply(2 * m + n, n, ring, 2)

    @staticmethod
    def apply_omega(m: int, n: int) -> "QuadraticInteger":
        """Build the Eisenstein integer m + n*omega, with omega = (-1 + sqrt(-3))/2."""
        return QuadraticInteger.apply(2 * m - n, n, ImaginaryQuadraticRing(-3), 2)

    @staticmethod
    def apply_phi(m: int, n: int) -> "QuadraticInteger":
        """Build m + n*phi, with phi the golden ratio (1 + sqrt(5))/2."""
        return QuadraticInteger.apply_theta(m, n, RealQuadraticRing(5))

    def _make(self, a: int, b: int, denom: int = 1) -> "QuadraticInteger":
        """Construct a number of the same ring as self."""
        return QuadraticInteger.apply(a, b, self.ring, denom)
    # endregion

    def _halves(self) -> tuple[int, int]:
        """The numerators of self written over a denominator of 2."""
        if self.denominator == 2:
            return self.reg_part_mult, self.surd_part_mult
        return 2 * self.reg_part_mult, 2 * self.surd_part_mult

    def get_ring(self) -> QuadraticRing:
        return self.ring

    def algebraic_degree(self) -> int:
        """0 for zero, 1 for a rational integer, 2 otherwise."""
        if self.surd_part_mult != 0:
            return 2
        if self.reg_part_mult != 0:
            return 1
        return 0

    def trace(self) -> int:
        """The number plus its conjugate."""
        return self._halves()[0]

    def norm(self) -> int:
        """
        The number times its conjugate:

            N((a + b*sqrt(d))/den) = (a^2 - d*b^2) / den^2

        Always an integer, negative for some numbers of real rings.
        """
        a, b = self._halves()
        return (a * a - self.ring.radicand * b * b) // 4

    def min_polynomial_coeffs(self) -> tuple[int, int, int]:
        """
        Coefficients (c0, c1, c2) of the minimal polynomial c0 + c1*x + c2*x^2.

        The zero polynomial slot c2 is 0 for rational integers, and zero itself gives x.
        """
        degree = self.algebraic_degree()
        if degree == 2:
            return self.norm(), -self.trace(), 1
        if degree == 1:
            return -self.reg_part_mult, 1, 0
        return 0, 1, 0

    def min_polynomial_string(self) -> str:
        """The minimal polynomial as text, like ``x^2 - 5x + 8``."""
        c0, c1, c2 = self.min_polynomial_coeffs()
        if c2 == 0:
            if c0 == 0:
                return "x"
            return f"x {'-' if c0 < 0 else '+'} {abs(c0)}"

        text = "x^2"
        if c1 != 0:
            magnitude = "" if abs(c1) == 1 else str(abs(c1))
            text += f" {'-' if c1 < 0 else '+'} {magnitude}x"
        if c0 != 0:
            text += f" {'-' if c0 < 0 else '+'} {abs(c0)}"
        return text

    # region arithmetic
    def conjugate(self) -> "QuadraticInteger":
        """(a + b*sqrt(d))/den -> (a - b*sqrt(d))/den"""
        return self._make(self.reg_part_mult, -self.surd_part_mult, self.denominator)

    def negate(self) -> "QuadraticInteger":
        return self._make(-self.reg_part_mult, -self.surd_part_mult, self.denominator)

    def _overflow(self, verb: str, other: "QuadraticInteger") -> AlgebraicDegreeOverflowException:
        return AlgebraicDegreeOverflowException(
            f"Can't {verb} {self.to_ascii_string()} of {self.ring.to_ascii_string()} and "
            f"{other.to_ascii_string()} of {other.ring.to_ascii_string()}, the result has degree 4",
            self.ring.get_max_algebraic_degree(), self, other)

    def plus(self, addend: OP_TYPES) -> "QuadraticInteger":
        """
        Add a quadratic integer or a rational integer.

        Raises:
            AlgebraicDegreeOverflowException: If both numbers are irrational and from different rings.
        """
        if isinstance(addend, int):
            return self._make(self.reg_part_mult + addend * self.denominator, self.surd_part_mult, self.denominator)

        if self.ring != addend.ring:
            # a rational integer wrapped in some ring fits into any other one
            if addend.surd_part_mult == 0:
                return self.plus(addend.reg_part_mult)
            if self.surd_part_mult == 0:
                return addend.plus(self.reg_part_mult)
            raise self._overflow("add", addend)

        a, b = self._halves()
        c, d = addend._halves()
        return self._make(a + c, b + d, 2)

    def minus(self, subtrahend: OP_TYPES) -> "QuadraticInteger":
        """
        Subtract a quadratic integer or a rational integer.

        Raises:
            AlgebraicDegreeOverflowException: If both numbers are irrational and from different rings.
        """
        if isinstance(subtrahend, int):
            return self.plus(-subtrahend)
        return self.plus(subtrahend.negate())

    def times(self, multiplicand: OP_TYPES) -> "QuadraticInteger":
        """
        Multiply by a quadratic integer or a rational integer.

        Two square roots from different rings multiply to a square root of a third ring:
        sqrt(d)*sqrt(e) = s*sqrt(k), where de = s^2*k with k squarefree (and i*i = -1 when
        both are imaginary).

        Raises:
            AlgebraicDegreeOverflowException: If the product has degree 4.
        """
        if isinstance(multiplicand, int):
            return self._make(self.reg_part_mult * multiplicand, self.surd_part_mult * multiplicand,
                              self.denominator)

        if self.ring != multiplicand.ring:
            if multiplicand.surd_part_mult == 0:
                return self.times(multiplicand.reg_part_mult)
            if self.surd_part_mult == 0:
                return multiplicand.times(self.reg_part_mult)
            if self.reg_part_mult != 0 or multiplicand.reg_part_mult != 0:
                raise self._overflow("multiply", multiplicand)

            d, e = self.ring.radicand, multiplicand.ring.radicand
            s, k = square_part(d * e)
            coeff = self.surd_part_mult * multiplicand.surd_part_mult * s
            if d < 0 and e < 0:
                coeff = -coeff
            return QuadraticInteger.apply(0, coeff, QuadraticRing.apply(k))

        # Over a denominator of 4 the numerators are even for any two integers of the ring
        a, b = self._halves()
        c, e = multiplicand._halves()
        d = self.ring.radicand
        return self._make((a * c + b * e * d) // 2, (a * e + b * c) // 2, 2)

    def _quotient_fractions(self, divisor: "QuadraticInteger") -> tuple[Fraction, Fraction]:
        """Exact regular and surd parts of self / divisor, for a nonzero divisor of the same ring."""
        a, b = self._halves()
        c, e = divisor._halves()
        d = self.ring.radicand
        scale = c * c - d * e * e
        return Fraction(a * c - b * e * d, scale), Fraction(b * c - a * e, scale)

    def _not_divisible(self,
                       divisor: "QuadraticInteger",
                       fractions: tuple[Fraction, Fraction],
                       ring: QuadraticRing) -> NotDivisibleException:
        return NotDivisibleException(f"{self.to_ascii_string()} is not divisible by {divisor.to_ascii_string()}",
                                     self, divisor, fractions, ring)

    def divides(self, divisor: OP_TYPES) -> "QuadraticInteger":
        """
        Exact division.

        Returns:
            QuadraticInteger: The quotient.

        Raises:
            ZeroDivisionError: If the divisor is 0.
            NotDivisibleException: If the quotient is not an algebraic integer. The exception
                carries the exact quotient.
            AlgebraicDegreeOverflowException: If the quotient has degree 4.
        """
        if isinstance(divisor, int):
            if divisor == 0:
                raise ZeroDivisionError(f"Can't divide {self.to_ascii_string()} by 0")
            reg = Fraction(self.reg_part_mult, self.denominator * divisor)
            surd = Fraction(self.surd_part_mult, self.denominator * divisor)
            quotient = _from_fractions(reg, surd, self.ring)
            if quotient is None:
                raise self._not_divisible(self._make(divisor, 0), (reg, surd), self.ring)
            return quotient

        if not divisor:
            raise ZeroDivisionError(f"Can't divide {self.to_ascii_string()} by 0")

        if self.ring != divisor.ring:
            if divisor.surd_part_mult == 0:
                return self.divides(divisor.reg_part_mult)
            if self.surd_part_mult == 0:
                return QuadraticInteger.apply(self.reg_part_mult, 0, divisor.ring).divides(divisor)
            if self.reg_part_mult != 0 or divisor.reg_part_mult != 0:
                raise self._overflow("divide", divisor)

            # x / y = x * conj(y) / N(y), and x * conj(y) lives in Q(sqrt(de))
            numerator = self.times(divisor.conjugate())
            n = divisor.norm()
            reg = Fraction(numerator.reg_part_mult, n)
            surd = Fraction(numerator.surd_part_mult, n)
            quotient = _from_fractions(reg, surd, numerator.ring)
            if quotient is None:
                raise self._not_divisible(divisor, (reg, surd), numerator.ring)
            return quotient

        reg, surd = self._quotient_fractions(divisor)
        quotient = _from_fractions(reg, surd, self.ring)
        if quotient is None:
            raise self._not_divisible(divisor, (reg, surd), self.ring)
        return quotient

    def is_divisible_by(self, divisor: OP_TYPES) -> bool:
        """
        Raises:
            ZeroDivisionError: If the divisor is 0.
            AlgebraicDegreeOverflowException: If the quotient has degree 4.
        """
        try:
            self.divides(divisor)
        except NotDivisibleException:
            return False
        return True

    def mod(self, divisor: OP_TYPES) -> "QuadraticInteger":
        """
        Remainder after division, with the quotient rounded down to a point of the ring's lattice
        (half-integer points included where the ring has them).

        Raises:
            ZeroDivisionError: If the divisor is 0.
            AlgebraicDegreeOverflowException: If the divisor is irrational and from another ring.
        """
        if isinstance(divisor, int):
            if divisor == 0:
                raise ZeroDivisionError(f"Can't divide {self.to_ascii_string()} by 0")
            reg = Fraction(self.reg_part_mult, self.denominator * divisor)
            surd = Fraction(self.surd_part_mult, self.denominator * divisor)
            return self.minus(_round_down(reg, surd, self.ring).times(divisor))

        if not divisor:
            raise ZeroDivisionError(f"Can't divide {self.to_ascii_string()} by 0")

        if self.ring != divisor.ring:
            if divisor.surd_part_mult == 0:
                return self.mod(divisor.reg_part_mult)
            if self.surd_part_mult == 0:
                return QuadraticInteger.apply(self.reg_part_mult, 0, divisor.ring).mod(divisor)
            raise self._overflow("divide", divisor)

        reg, surd = self._quotient_fractions(divisor)
        return self.minus(_round_down(reg, surd, self.ring).times(divisor))

    def __add__(self, other: OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, (int, QuadraticInteger)):
            return self.plus(other)
        return NotImplemented

    def __radd__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        return self.__add__(other)

    def __sub__(self, other: OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, (int, QuadraticInteger)):
            return self.minus(other)
        return NotImplemented

    def __rsub__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, int):
            return self.negate().plus(other)
        return NotImplemented

    def __neg__(self) -> "QuadraticInteger":
        return self.negate()

    def __pos__(self) -> "QuadraticInteger":
        return self

    def __mul__(self, other: OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, (int, QuadraticInteger)):
            return self.times(other)
        return NotImplemented

    def __rmul__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        return self.__mul__(other)

    def __truediv__(self, other: OP_TYPES) -> "QuadraticInteger":
        # exact division only: an inexact quotient raises NotDivisibleException
        if isinstance(other, (int, QuadraticInteger)):
            return self.divides(other)
        return NotImplemented

    def __rtruediv__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, int):
            return self._make(other, 0).divides(self)
        return NotImplemented

    def __mod__(self, other: OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, (int, QuadraticInteger)):
            return self.mod(other)
        return NotImplemented

    def __pow__(self, exp: int) -> "QuadraticInteger":
        e = int(exp)
        if e < 0:
            raise ValueError("Negative powers not supported")

        result = self._make(1, 0)
        base = self
        while e:
            if e & 1:
                result = result.times(base)
            e >>= 1
            if e:
                base = base.times(base)
        return result
    # endregion

    def __abs__(self) -> float:
        return self.abs()

    def __bool__(self) -> bool:
        return self.reg_part_mult != 0 or self.surd_part_mult != 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuadraticInteger):
            return False
        return (self.reg_part_mult == other.reg_part_mult
                and self.surd_part_mult == other.surd_part_mult
                and self.denominator == other.denominator
                and self.ring == other.ring)

    def __hash__(self) -> int:
        return hash((self.reg_part_mult, self.surd_part_mult, self.denominator, self.ring.radicand))

    def __repr__(self) -> str:
        return (f"{type(self).__name__}({self.reg_part_mult}, {self.surd_part_mult}, "
                f"{self.ring!r}, {self.denominator})")

    # region text
    def _render(self, root: str) -> str:
        """Write self out, with ``root`` standing for sqrt(d)."""
        a, b = self.reg_part_mult, self.surd_part_mult
        over = "" if self.denominator == 1 else "/2"
        if b == 0:
            return f"{a}{over}"

        surd = f"{root}{over}" if abs(b) == 1 else f"{abs(b)}{root}{over}"
        if a == 0:
            return f"-{surd}" if b < 0 else surd
        return f"{a}{over} {'-' if b < 0 else '+'} {surd}"

    def __str__(self) -> str:
        if self.ring.radicand == -1:
            return self._render("i")
        return self._render(f"√{self.ring.radicand}")

    def to_ascii_string(self) -> str:
        if self.ring.radicand == -1:
            return self._render("i")
        return self._render(f"sqrt({self.ring.radicand})")

    def theta_parts(self) -> tuple[int, int]:
        """
        (m, n) such that self = m + n*theta, where theta is the ring's half-integer generator:
        omega = (-1 + sqrt(-3))/2 in Z[omega], (1 + sqrt(d))/2 elsewhere.
        """
        a, b = self._halves()
        if self.ring.radicand == -3:
            return (a + b) // 2, b
        return (a - b) // 2, b

    def _render_alt(self, letter: str) -> str:
        m, n = self.theta_parts()
        if n == 0:
            return str(m)
        term = letter if abs(n) == 1 else f"{abs(n)}{letter}"
        if m == 0:
            return f"-{term}" if n < 0 else term
        return f"{m} {'-' if n < 0 else '+'} {term}"

    def to_string_alt(self) -> str:
        """Write self in terms of omega, phi or theta; rings without half-integers use the usual form."""
        if not self.ring.has_half_integers():
            return str(self)
        return self._render_alt({-3: "ω", 5: "φ"}.get(self.ring.radicand, "θ"))

    def to_ascii_string_alt(self) -> str:
        if not self.ring.has_half_integers():
            return self.to_ascii_string()
        return self._render_alt({-3: "omega", 5: "phi"}.get(self.ring.radicand, "theta"))
    # endregion


class ImaginaryQuadraticInteger(QuadraticInteger):
    """A quadratic integer of a ring with negative radicand; the surd part is the imaginary part."""

    __slots__ = ()

    def __init__(self, a: int, b: int, ring: QuadraticRing, denom: int = 1) -> None:
        if ring.radicand > 0:
            raise UnsupportedNumberDomainException(f"{ring.to_ascii_string()} is not an imaginary quadratic ring", ring)
        super().__init__(a, b, ring, denom)

    def get_real_part_numeric(self) -> float:
        return self.reg_part_mult / self.denominator

    def get_imag_part_numeric(self) -> float:
        return self.surd_part_mult * self.ring.real_rad_sqrt / self.denominator

    def abs(self) -> float:
        return hypot(self.get_real_part_numeric(), self.get_imag_part_numeric())

    def angle(self) -> float:
        return atan2(self.get_imag_part_numeric(), self.get_real_part_numeric())

    def is_re_approx(self) -> bool:
        return False

    def is_im_approx(self) -> bool:
        return self.surd_part_mult != 0 and self.ring.abs_radicand != 1


class RealQuadraticInteger(QuadraticInteger):
    """
    A quadratic integer of a ring with positive radicand.

    These are real numbers, so they are also ordered, exactly, against each other and against
    rational integers.
    """

    __slots__ = ()

    def __init__(self, a: int, b: int, ring: QuadraticRing, denom: int = 1) -> None:
        if ring.radicand < 0:
            raise UnsupportedNumberDomainException(f"{ring.to_ascii_string()} is not a real quadratic ring", ring)
        super().__init__(a, b, ring, denom)

    def get_real_part_numeric(self) -> float:
        return (self.reg_part_mult + self.surd_part_mult * self.ring.real_rad_sqrt) / self.denominator

    def get_imag_part_numeric(self) -> float:
        return 0.0

    def abs(self) -> float:
        return abs(self.get_real_part_numeric())

    def angle(self) -> float:
        if self.get_real_part_numeric() < 0:
            return pi
        return 0.0

    def is_re_approx(self) -> bool:
        return self.surd_part_mult != 0

    def is_im_approx(self) -> bool:
        return False

    def signum(self) -> int:
        """-1, 0 or 1, computed exactly."""
        a, b = self._halves()
        return _real_sign(a, b, self.ring.radicand)

    def _compare(self, other: object) -> int:
        if not isinstance(other, (int, RealQuadraticInteger)):
            raise TypeError(f"Can't order {self.to_ascii_string()} against {type(other).__name__}")

        if isinstance(other, RealQuadraticInteger) and other.ring != self.ring \
                and other.surd_part_mult != 0 and self.surd_part_mult != 0:
            x, y = self.get_real_part_numeric(), other.get_real_part_numeric()
            return (x > y) - (x < y)

        difference = cast(RealQuadraticInteger, self.minus(other))
        return difference.signum()

    def __lt__(self, other: object) -> bool:
        return self._compare(other) < 0

    def __le__(self, other: object) -> bool:
        return self._compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        return self._compare(other) > 0

    def __ge__(self, other: object) -> bool:
        return self._compare(other) >= 0
