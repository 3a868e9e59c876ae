import logging

from math import ceil, floor, fsum, gcd, isqrt, log, pi, sin, sqrt
from random import Random
from threading import RLock
from typing import Iterable, Iterator, Optional, Union

from sympy import divisors, factorint, jacobi_symbol, legendre_symbol

from quadint.exceptions import (
    AlgebraicDegreeOverflowException,
    NonEuclideanDomainException,
    NonUniqueFactorizationDomainException,
    NotDivisibleException,
    UnsupportedNumberDomainException,
)
from quadint.quad import AlgebraicInteger, QuadraticInteger, RealQuadraticInteger
from quadint.rings import ImaginaryQuadraticRing, IntegerRing, QuadraticRing, RealQuadraticRing
from quadint.utils import cache_generator, exact_isqrt, is_perfect_square, is_squarefree

logger = logging.getLogger(__name__)

NUMBER_TYPES = Union[int, QuadraticInteger]

# region constants
NORM_EUCLIDEAN_QUADRATIC_IMAGINARY_RINGS_D = (-11, -7, -3, -2, -1)
NORM_EUCLIDEAN_QUADRATIC_REAL_RINGS_D = (2, 3, 5, 6, 7, 11, 13, 17, 19, 21, 29, 33, 37, 41, 57, 73)
NORM_EUCLIDEAN_QUADRATIC_RINGS_D = NORM_EUCLIDEAN_QUADRATIC_IMAGINARY_RINGS_D + NORM_EUCLIDEAN_QUADRATIC_REAL_RINGS_D

HEEGNER_NUMBERS = (-163, -67, -43, -19, -11, -7, -3, -2, -1)

# Fundamental units with a surd part above this are remembered instead of searched for again
SURD_PART_CACHE_THRESHOLD = 1000

_RANDOM = Random()

RING_GAUSSIAN = ImaginaryQuadraticRing(-1)
IMAG_UNIT_I = QuadraticInteger.apply(0, 1, RING_GAUSSIAN)
IMAG_UNIT_NEG_I = QuadraticInteger.apply(0, -1, RING_GAUSSIAN)

RING_EISENSTEIN = ImaginaryQuadraticRing(-3)
COMPLEX_CUBIC_ROOT_OF_UNITY = QuadraticInteger.apply(-1, 1, RING_EISENSTEIN, 2)
# e^(i*pi/3), the unit that turns Z[omega] by one sector
_EISENSTEIN_ROTATION = QuadraticInteger.apply(1, 1, RING_EISENSTEIN, 2)

RING_ZPHI = RealQuadraticRing(5)
GOLDEN_RATIO = QuadraticInteger.apply(1, 1, RING_ZPHI, 2)
# endregion


def _known_fundamental_units() -> dict[QuadraticRing, QuadraticInteger]:
    """Units that take too long to find by searching."""
    known = {
        139: (77563250, 6578829),
        151: (1728148040, 140634693),
        166: (1700902565, 132015642),
        199: (16266196520, 1153080099),
    }
    units: dict[QuadraticRing, QuadraticInteger] = {}
    for d, (a, b) in known.items():
        ring = RealQuadraticRing(d)
        units[ring] = QuadraticInteger.apply(a, b, ring)
    return units


def _known_class_numbers() -> dict[QuadraticRing, int]:
    return {RealQuadraticRing(199): 1}


# region rational integers
def mod(n: int, m: int) -> int:
    """
    The residue of n modulo m, always in 0 <= r < |m|.

    Raises:
        ValueError: If m is 0.
    """
    if m == 0:
        raise ValueError("Modulus 0 is not valid")
    return n % abs(m)


def prime_factors_of_int(n: int) -> list[int]:
    """
    The prime factors of n in ascending order, repeated by multiplicity.

    Negative numbers start with -1; 0 and 1 give themselves.
    """
    if n == 0 or n == 1:
        return [n]

    factors = [-1] if n < 0 else []
    for p, exp in sorted(factorint(abs(n)).items()):
        factors.extend([p] * exp)
    return factors


def is_prime_int(n: int) -> bool:
    """Primality of a rational integer by trial division. -2 and 2 are prime; -1, 0 and 1 are not."""
    n = abs(n)
    if n < 2:
        return False
    if n < 4:
        return True
    if not n & 1:
        return False
    for k in range(3, isqrt(n) + 1, 2):
        if n % k == 0:
            return False
    return True


def is_powerfree(n: int, power: int) -> bool:
    """
    True if no prime raised to `power` divides n. 0 is never powerfree.

    Raises:
        ValueError: If power is less than 2.
    """
    if power < 2:
        raise ValueError(f"Power {power} is not valid, it must be at least 2")
    if n == 0:
        return False
    return all(exp < power for exp in factorint(abs(n)).values())


def is_cubefree(n: int) -> bool:
    """True if no cube of a prime divides n. 0 is not cubefree."""
    return is_powerfree(n, 3)


def kernel(n: int) -> int:
    """The product of the distinct primes dividing n, ignoring sign. kernel(0) is 0."""
    if n == 0:
        return 0
    k = 1
    for p in factorint(abs(n)):
        k *= p
    return k


def moebius_mu(n: int) -> int:
    """
    The Möbius function of |n|: 0 unless squarefree, else -1 to the number of prime factors.

    Raises:
        ValueError: If n is 0.
    """
    if n == 0:
        raise ValueError("The Moebius function is not defined for 0")

    factors = factorint(abs(n))
    if any(exp > 1 for exp in factors.values()):
        return 0
    return -1 if len(factors) & 1 else 1


def next_lowest_squarefree(n: int) -> int:
    """The greatest squarefree integer below n."""
    k = n - 1
    while not is_squarefree(k):
        k -= 1
    return k


def next_highest_squarefree(n: int) -> int:
    """The least squarefree integer above n."""
    k = n + 1
    while not is_squarefree(k):
        k += 1
    return k


def random_squarefree_number(bound: int, rng: Optional[Random] = None) -> int:
    """
    A pseudorandom positive squarefree number, usually below |bound|.

    A number in 0 <= k < |bound| is picked and then raised to the next squarefree number if it
    is not squarefree itself, so the result can go past the bound.

    Raises:
        ValueError: If bound is 0.
    """
    if bound == 0:
        raise ValueError("Bound 0 is not valid")
    choice = (rng or _RANDOM).randrange(abs(bound))
    while not is_squarefree(choice):
        choice += 1
    return choice


def random_squarefree_number_mod(n: int, m: int, rng: Optional[Random] = None) -> int:
    """
    A pseudorandom positive squarefree number congruent to n modulo m.

    Raises:
        ValueError: If m is 0, or gcd(m, n) is not squarefree so no such number exists.
    """
    if m == 0:
        raise ValueError("Modulus 0 is not valid")
    m = abs(m)
    common = gcd(m, n)
    if not is_squarefree(common):
        raise ValueError(f"Given that gcd({m}, {n}) = {common}, there is no squarefree number "
                         f"congruent to {n} mod {m}")

    choice = m * (rng or _RANDOM).randrange(4096) + mod(n, m)
    while not is_squarefree(choice):
        choice += m
    return choice


def random_squarefree_number_other_than(n: int, bound: int, rng: Optional[Random] = None) -> int:
    """
    A pseudorandom positive squarefree number below bound, other than n.

    Raises:
        ValueError: If no squarefree number other than n lies below bound.
    """
    if bound < 2 or (bound == 2 and n == 1):
        raise ValueError(f"There is no squarefree number other than {n} below {bound}")

    generator = rng or _RANDOM
    while True:
        choice = generator.randrange(1, bound)
        if choice != n and is_squarefree(choice):
            return choice


def symbol_legendre(a: int, p: int) -> int:
    """
    The Legendre symbol (a/p).

    Raises:
        ValueError: If p is not an odd prime.
    """
    if p < 3 or not is_prime_int(p):
        raise ValueError(f"{p} is not an odd prime; use symbol_jacobi or symbol_kronecker instead")
    return int(legendre_symbol(a % p, p))


def symbol_jacobi(n: int, m: int) -> int:
    """
    The Jacobi symbol (n/m).

    Raises:
        ValueError: If m is not odd and positive.
    """
    if m < 1 or not m & 1:
        raise ValueError(f"{m} is not an odd positive number; use symbol_kronecker instead")
    if m == 1:
        return 1
    return int(jacobi_symbol(n % m, m))


def symbol_kronecker(n: int, m: int) -> int:
    """
    The Kronecker symbol (n/m), defined for any pair of integers.

    Extends the Jacobi symbol with (n/0) = 1 for n = ±1 and 0 otherwise, (n/-1) = -1 for
    negative n, and (n/2) = 0 for even n, 1 for n = ±1 (mod 8), -1 for n = ±3 (mod 8).
    """
    if m == 0:
        return 1 if abs(n) == 1 else 0

    sign = 1
    if m < 0:
        m = -m
        if n < 0:
            sign = -1

    while not m & 1:
        if not n & 1:
            return 0
        m //= 2
        if n % 8 in (3, 5):
            sign = -sign

    return sign * symbol_jacobi(n, m)
# endregion


# region quadratic integers
def get_one_in_ring(ring: QuadraticRing) -> QuadraticInteger:
    return QuadraticInteger.apply(1, 0, ring)


def get_zero_in_ring(ring: QuadraticRing) -> QuadraticInteger:
    return QuadraticInteger.apply(0, 0, ring)


def get_neg_one_in_ring(ring: QuadraticRing) -> QuadraticInteger:
    return QuadraticInteger.apply(-1, 0, ring)


def sort_list_algebraic_integers_by_norm(values: Iterable[QuadraticInteger]) -> list[QuadraticInteger]:
    """Stable sort by the absolute value of the norm."""
    return sorted(values, key=lambda n: abs(n.norm()))


def _require_quadratic(n: AlgebraicInteger) -> QuadraticInteger:
    if not isinstance(n, QuadraticInteger):
        raise UnsupportedNumberDomainException(f"{n.to_ascii_string()} is not a quadratic integer", n)
    return n


def _into_common_ring(a: NUMBER_TYPES, b: NUMBER_TYPES) -> tuple[QuadraticInteger, QuadraticInteger]:
    """Bring a rational integer into the other operand's ring; at most one of a, b is an int."""
    if isinstance(a, int):
        if isinstance(b, int):
            raise TypeError("At least one of the numbers must be a quadratic integer")
        return QuadraticInteger.apply(a, 0, b.ring), b
    if isinstance(b, int):
        return a, QuadraticInteger.apply(b, 0, a.ring)

    if a.ring == b.ring:
        return a, b
    if b.surd_part_mult == 0:
        return a, QuadraticInteger.apply(b.reg_part_mult, 0, a.ring)
    if a.surd_part_mult == 0:
        return QuadraticInteger.apply(a.reg_part_mult, 0, b.ring), b
    raise AlgebraicDegreeOverflowException(
        f"{a.to_ascii_string()} and {b.to_ascii_string()} are from different rings",
        a.ring.get_max_algebraic_degree(), a, b)


def is_divisible_by(n: NUMBER_TYPES, m: NUMBER_TYPES) -> bool:
    """
    Raises:
        ZeroDivisionError: If m is 0.
    """
    if isinstance(n, int) and isinstance(m, int):
        if m == 0:
            raise ZeroDivisionError(f"Can't divide {n} by 0")
        return n % m == 0
    if isinstance(n, int):
        n, m = _into_common_ring(n, m)
    return n.is_divisible_by(m)


def is_inert(p: int, ring: QuadraticRing) -> bool:
    """
    Whether the rational prime p stays prime in ring.

    The congruences used for d = -1, -2 and -3 give the same answers as the Kronecker symbol of
    the discriminant, which decides every other ring.

    Raises:
        ValueError: If p is not prime.
    """
    p = abs(p)
    if not is_prime_int(p):
        raise ValueError(f"{p} is not prime")

    d = ring.radicand
    if p == 2:
        return symbol_kronecker(ring.discriminant(), 2) == -1
    if d == -1:
        return p % 4 == 3
    if d == -2:
        return p % 8 in (5, 7)
    if d == -3:
        return p % 3 == 2
    return symbol_legendre(d, p) == -1


def is_prime(n: Union[int, AlgebraicInteger]) -> bool:
    """
    Whether n generates a prime ideal.

    A prime norm makes n prime. Otherwise n can only be prime if it is a rational prime p
    (up to units) that stays inert, which shows up as |N(n)| = p^2 with p dividing n.
    """
    if isinstance(n, int):
        return is_prime_int(n)

    num = _require_quadratic(n)
    norm = abs(num.norm())
    if is_prime_int(norm):
        return True

    root = exact_isqrt(norm)
    if root is None or not is_prime_int(root):
        return False
    return num.is_divisible_by(root) and is_inert(root, num.ring)


def place_in_primary_sector(n: QuadraticInteger) -> QuadraticInteger:
    """
    The associate of n in the first sector of the complex plane.

    In Z[i] that is 0 <= angle < pi/2, in Z[omega] 0 <= angle < pi/3. Every other ring only has
    the units -1 and 1 (or is real), and gets a non-negative regular part.
    """
    if not n:
        return n

    d = n.ring.radicand
    if d == -1:
        while not (n.reg_part_mult > 0 and n.surd_part_mult >= 0):
            n = n.times(IMAG_UNIT_I)
        return n

    if d == -3:
        while True:
            a, b = n.trace(), 2 * n.surd_part_mult // n.denominator
            if b >= 0 and a > b:
                return n
            n = n.times(_EISENSTEIN_ROTATION)

    if n.reg_part_mult < 0:
        return n.negate()
    return n


def _canonicalize(unit: QuadraticInteger, factors: list[QuadraticInteger]) -> list[QuadraticInteger]:
    """
    Sort factors by absolute norm and give each a non-negative leading coefficient, moving the
    signs into the unit, which leads the list unless it is 1.
    """
    canonical = []
    for factor in sort_list_algebraic_integers_by_norm(factors):
        if factor.reg_part_mult < 0 or (factor.reg_part_mult == 0 and factor.surd_part_mult < 0):
            factor = factor.negate()
            unit = unit.negate()
        canonical.append(factor)

    if unit == get_one_in_ring(unit.ring):
        return canonical
    return [unit] + canonical


def _normalize_gcd(g: QuadraticInteger) -> QuadraticInteger:
    if abs(g.norm()) == 1:
        return get_one_in_ring(g.ring)
    if g.ring.radicand == -1 and g.reg_part_mult == 0:
        g = g.times(IMAG_UNIT_NEG_I)
    if g.reg_part_mult < 0 or (g.reg_part_mult == 0 and g.surd_part_mult < 0):
        g = g.negate()
    return g


def _real_sign(n: QuadraticInteger) -> int:
    if not isinstance(n, RealQuadraticInteger):
        raise TypeError(f"{n.to_ascii_string()} is not a real number")
    return n.signum()


def _nearby_quotients(e: NotDivisibleException, radius: int) -> Iterator[QuadraticInteger]:
    """
    Ring elements q for which |N(x - q)| can be small, x being the exact quotient in e.

    In real rings the norm is small along the lines A = 2*reg ± sqrt(d)*(2*surd - B), so this
    walks them for B within radius of 2*surd, all over a denominator of 2.
    """
    reg, surd = e.fractions
    ring = e.ring
    root = ring.real_rad_sqrt
    center = floor(2 * surd)
    for b in range(center - radius, center + radius + 2):
        if not ring.has_half_integers() and b & 1:
            continue
        offset = root * abs(float(2 * surd) - b)
        for base in (float(2 * reg) - offset, float(2 * reg) + offset):
            for a in range(floor(base) - 1, ceil(base) + 2):
                if (a ^ b) & 1:
                    continue
                yield QuadraticInteger.apply(a, b, ring, 2)


def _euclidean_remainder(a: QuadraticInteger, b: QuadraticInteger) -> QuadraticInteger:
    """A remainder of a by b with norm below the norm of b, if one turns up."""
    try:
        a.divides(b)
    except NotDivisibleException as e:
        best = a
        for q in e.bounding_integers():
            r = a.minus(q.times(b))
            if abs(r.norm()) < abs(best.norm()):
                best = r

        if abs(best.norm()) >= abs(b.norm()) and a.ring.radicand > 0:
            for q in _nearby_quotients(e, 12):
                r = a.minus(q.times(b))
                if abs(r.norm()) < abs(best.norm()):
                    best = r
        return best
    return get_zero_in_ring(a.ring)


@cache_generator
def _elements_of_norm(ring: QuadraticRing, k: int, surd_bound: int) -> Iterator[QuadraticInteger]:
    """
    The elements of ring with norm k (or -k in real rings) whose surd coefficient, over a
    denominator of 2, lies in 0..surd_bound. Each element comes with its negated conjugate,
    so the bound covers every element up to units when it is chosen as in
    :meth:`NumberTheoreticFunctionsCalculator._norm_search_bound`.
    """
    d = ring.radicand
    targets = [4 * k, -4 * k] if d > 0 else [4 * k]
    for b in range(surd_bound + 1):
        found = set()
        for target in targets:
            a = exact_isqrt(target + d * b * b)
            if a is not None and not (a ^ b) & 1:
                found.add(a)

        for a in sorted(found):
            yield QuadraticInteger.apply(a, b, ring, 2)
            if a and b:
                yield QuadraticInteger.apply(-a, b, ring, 2)
# endregion


class NumberTheoreticFunctionsCalculator:
    """
    Primality, factorization, GCDs, units and class numbers in quadratic rings.

    The calculator owns the memo tables for fundamental units and class numbers, both of which
    never change once known. Instances are safe to share between threads.
    """

    def __init__(self,
                 *,
                 unit_cache: Optional[dict[QuadraticRing, QuadraticInteger]] = None,
                 class_number_cache: Optional[dict[QuadraticRing, int]] = None,
                 cache_threshold: int = SURD_PART_CACHE_THRESHOLD) -> None:
        """
        Args:
            unit_cache: Extra fundamental units to start with.
            class_number_cache: Extra class numbers to start with.
            cache_threshold: Fundamental units found by search are remembered once their surd
                part is larger than this.
        """
        self._lock = RLock()
        self.unit_cache = _known_fundamental_units()
        if unit_cache:
            self.unit_cache.update(unit_cache)
        self.class_number_cache = _known_class_numbers()
        if class_number_cache:
            self.class_number_cache.update(class_number_cache)
        self.cache_threshold = cache_threshold

    # region units and class numbers
    def fundamental_unit(self, ring: IntegerRing) -> QuadraticInteger:
        """
        The least unit greater than 1 of a real quadratic ring.

        Raises:
            ValueError: If the ring is imaginary, so its unit group is finite.
            UnsupportedNumberDomainException: If the ring is not quadratic.
        """
        if not isinstance(ring, QuadraticRing):
            raise UnsupportedNumberDomainException(
                f"Fundamental unit not supported for {ring.to_ascii_string()}", ring)
        if ring.radicand < 0:
            raise ValueError(f"{ring.to_ascii_string()} has a finite unit group, so there is no fundamental unit")

        with self._lock:
            unit = self.unit_cache.get(ring)
        if unit is not None:
            logger.debug("Fundamental unit of %s from cache", ring.to_ascii_string())
            return unit

        unit = self._search_fundamental_unit(ring)
        if abs(unit.surd_part_mult) > self.cache_threshold:
            with self._lock:
                unit = self.unit_cache.setdefault(ring, unit)
        return unit

    @staticmethod
    def _search_fundamental_unit(ring: QuadraticRing) -> QuadraticInteger:
        """
        Walk the surd coefficient B upwards until (A + B*sqrt(d))/2 has norm -1 or 1.

        Parity works out by itself: without half-integers B only takes even values, and then
        so does A.
        """
        d = ring.radicand
        step = 1 if ring.has_half_integers() else 2
        b = step
        while True:
            for target in (-4, 4):
                a = exact_isqrt(d * b * b + target)
                if a is not None:
                    unit = QuadraticInteger.apply(a, b, ring, 2)
                    logger.debug("Found fundamental unit %s of %s", unit.to_ascii_string(), ring.to_ascii_string())
                    return unit
            b += step

    def field_class_number(self, ring: QuadraticRing) -> int:
        """
        The class number of the ring, by the analytic class number formula.

        For discriminant D < 0:

            h = -w / (2|D|) * sum(kronecker(D, a) * a for 0 < a < |D|)

        with w the number of units. For D > 0, with fundamental unit u:

            h = -1 / (2 ln u) * sum(kronecker(D, a) * ln sin(pi * a / D) for 0 < a < D)

        rounded to the nearest integer.
        """
        with self._lock:
            cached = self.class_number_cache.get(ring)
        if cached is not None:
            return cached

        disc = ring.discriminant()
        if disc < 0:
            units = 4 if disc == -4 else 6 if disc == -3 else 2
            total = sum(symbol_kronecker(disc, a) * a for a in range(1, -disc))
            h = (-units * total) // (2 * -disc)
        else:
            unit = self.fundamental_unit(ring)
            total_log = fsum(symbol_kronecker(disc, a) * log(sin(pi * a / disc)) for a in range(1, disc))
            h = round(-total_log / (2 * log(unit.get_real_part_numeric())))

        logger.debug("Class number of %s is %d", ring.to_ascii_string(), h)
        with self._lock:
            return self.class_number_cache.setdefault(ring, h)

    def divide_out_units(self, n: QuadraticInteger) -> QuadraticInteger:
        """
        A canonical associate of n.

        In real rings that is the positive associate u with 1 <= u < ε, ε being the fundamental
        unit. Imaginary rings use :func:`place_in_primary_sector`.
        """
        if not n:
            return n
        if not isinstance(n, RealQuadraticInteger):
            return place_in_primary_sector(n)

        unit = self.fundamental_unit(n.ring)
        current = n.negate() if _real_sign(n) < 0 else n
        while _real_sign(current.minus(1)) < 0:
            current = current.times(unit)

        reduced = current.divides(unit)
        while _real_sign(reduced.minus(1)) >= 0:
            current = reduced
            reduced = current.divides(unit)
        return current
    # endregion

    # region factorization
    def is_ufd(self, ring: QuadraticRing) -> bool:
        """
        Whether the ring has unique factorization.

        Imaginary rings: exactly the Heegner numbers. Real rings: the norm-Euclidean ones and
        any other with class number 1.
        """
        d = ring.radicand
        if d < 0:
            return d in HEEGNER_NUMBERS
        return d in NORM_EUCLIDEAN_QUADRATIC_REAL_RINGS_D or self.field_class_number(ring) == 1

    def _norm_search_bound(self, ring: QuadraticRing, k: int) -> int:
        """
        A bound on the surd coefficient (over a denominator of 2) that some associate of every
        element of norm ±k stays within.

        For real rings, scaling by the fundamental unit u brings any such element to a value
        between sqrt(k/u) and sqrt(k*u), which bounds B*sqrt(d), the difference between it
        and its conjugate.
        """
        if ring.radicand < 0:
            return isqrt(4 * k // ring.abs_radicand)
        epsilon = self.fundamental_unit(ring).get_real_part_numeric()
        return floor(2 * sqrt(k * epsilon / ring.radicand)) + 1

    def _elements_of_norm(self, ring: QuadraticRing, k: int) -> Iterator[QuadraticInteger]:
        return _elements_of_norm(ring, k, self._norm_search_bound(ring, k))

    def _least_divisor(self, n: QuadraticInteger) -> Optional[QuadraticInteger]:
        """A divisor of n of least norm among the non-units of smaller norm, or None if none exists."""
        norm = abs(n.norm())
        for k in divisors(norm)[1:-1]:
            for candidate in self._elements_of_norm(n.ring, k):
                try:
                    n.divides(candidate)
                except NotDivisibleException:
                    continue
                return candidate
        return None

    def is_irreducible(self, n: Union[int, AlgebraicInteger]) -> bool:
        """
        Whether n is a non-unit with no factorization into two non-units.

        In unique factorization domains this is the same as being prime. Elsewhere it takes a
        search for a divisor whose norm is a proper divisor of the norm of n.
        """
        if isinstance(n, int):
            return is_prime_int(n)

        num = _require_quadratic(n)
        norm = abs(num.norm())
        if norm < 2:
            return False
        if is_prime_int(norm):
            return True

        d = num.ring.radicand
        if d in NORM_EUCLIDEAN_QUADRATIC_RINGS_D or d in HEEGNER_NUMBERS:
            return is_prime(num)
        return self._least_divisor(num) is None

    def _prime_over(self, n: QuadraticInteger, p: int) -> QuadraticInteger:
        """A prime factor of n lying over the rational prime p, which divides the norm of n."""
        ring = n.ring
        if is_inert(p, ring):
            return QuadraticInteger.apply(p, 0, ring)

        for candidate in self._elements_of_norm(ring, p):
            if n.is_divisible_by(candidate):
                return candidate
        raise ArithmeticError(f"No prime of norm {p} divides {n.to_ascii_string()}; factorization incomplete")

    def prime_factors(self, n: AlgebraicInteger) -> list[QuadraticInteger]:
        """
        Factor n into primes.

        Primes come out sorted by absolute norm with non-negative leading coefficients. A unit
        other than 1 needed to make the product come out right leads the list.

        Raises:
            NonUniqueFactorizationDomainException: If the ring of n is not a UFD.
            ArithmeticError: If there is an unexpected problem preventing factoring, indicating
                a bug in the code.
        """
        num = _require_quadratic(n)
        if not self.is_ufd(num.ring):
            raise NonUniqueFactorizationDomainException(
                f"{num.ring.to_ascii_string()} is not a unique factorization domain, so "
                f"{num.to_ascii_string()} may have more than one factorization", num, self)

        norm = abs(num.norm())
        if norm < 2:
            return [num]

        remaining = num
        factors = []
        for p in sorted(factorint(norm)):
            while abs(remaining.norm()) % p == 0:
                factor = self._prime_over(remaining, p)
                logger.debug("Prime factor %s of %s", factor.to_ascii_string(), num.to_ascii_string())
                factors.append(factor)
                remaining = remaining.divides(factor)

        if abs(remaining.norm()) != 1:
            raise ArithmeticError(f"Remaining cofactor {remaining.to_ascii_string()} is not a unit; "
                                  "factorization incomplete")
        return _canonicalize(remaining, factors)

    def irreducible_factors(self, n: QuadraticInteger) -> list[QuadraticInteger]:
        """
        Factor n into irreducibles, in any ring.

        In UFDs this is :meth:`prime_factors`. Otherwise the divisor of least norm is split off
        until what remains is irreducible, so the result is one of possibly several
        factorizations.
        """
        if self.is_ufd(n.ring):
            return self.prime_factors(n)

        if abs(n.norm()) < 2:
            return [n]

        remaining = n
        factors = []
        while abs(remaining.norm()) > 1:
            divisor = self._least_divisor(remaining)
            if divisor is None:
                factors.append(remaining)
                remaining = get_one_in_ring(n.ring)
                break
            logger.debug("Irreducible factor %s of %s", divisor.to_ascii_string(), n.to_ascii_string())
            factors.append(divisor)
            remaining = remaining.divides(divisor)
        return _canonicalize(remaining, factors)

    def try_to_factorize_anyway(self, n: QuadraticInteger) -> list[QuadraticInteger]:
        """
        :meth:`irreducible_factors`, prefixed with -1, -1 for every factor that is irreducible
        but not prime, to flag that other factorizations exist.
        """
        factors = self.irreducible_factors(n)
        count = sum(1 for factor in factors if abs(factor.norm()) > 1 and not is_prime(factor))
        neg_one = get_neg_one_in_ring(n.ring)
        return [neg_one, neg_one] * count + factors
    # endregion

    # region gcd
    def euclidean_gcd(self, a: NUMBER_TYPES, b: NUMBER_TYPES) -> NUMBER_TYPES:
        """
        The greatest common divisor by the Euclidean algorithm.

        Two rational integers give their non-negative gcd. Otherwise a rational integer is taken
        into the ring of the other number.

        Raises:
            AlgebraicDegreeOverflowException: If both numbers are irrational and from different rings.
            NonEuclideanDomainException: If the ring is not norm-Euclidean.
        """
        if isinstance(a, int) and isinstance(b, int):
            return gcd(a, b)

        x, y = _into_common_ring(a, b)
        if x.ring.radicand not in NORM_EUCLIDEAN_QUADRATIC_RINGS_D:
            raise NonEuclideanDomainException(
                f"{x.ring.to_ascii_string()} is not norm-Euclidean, so the Euclidean GCD of "
                f"{x.to_ascii_string()} and {y.to_ascii_string()} may not exist", x, y, self)
        return self.try_euclidean_gcd_anyway(x, y)

    def try_euclidean_gcd_anyway(self, a: QuadraticInteger, b: QuadraticInteger) -> QuadraticInteger:
        """
        Run the Euclidean algorithm without checking the ring is norm-Euclidean.

        Raises:
            ArithmeticError: If no remainder of smaller norm is found.
        """
        if abs(a.norm()) < abs(b.norm()):
            a, b = b, a

        while b:
            remainder = _euclidean_remainder(a, b)
            if abs(remainder.norm()) >= abs(b.norm()):
                raise ArithmeticError(f"Euclidean descent failed (non-decreasing remainder norm) for "
                                      f"{a.to_ascii_string()} and {b.to_ascii_string()}")
            a, b = b, remainder
        return _normalize_gcd(a)
    # endregion


DEFAULT_CALCULATOR = NumberTheoreticFunctionsCalculator()


# region default calculator
def fundamental_unit(ring: IntegerRing) -> QuadraticInteger:
    return DEFAULT_CALCULATOR.fundamental_unit(ring)


def field_class_number(ring: QuadraticRing) -> int:
    return DEFAULT_CALCULATOR.field_class_number(ring)


def divide_out_units(n: QuadraticInteger) -> QuadraticInteger:
    return DEFAULT_CALCULATOR.divide_out_units(n)


def is_ufd(ring: QuadraticRing) -> bool:
    return DEFAULT_CALCULATOR.is_ufd(ring)


def is_irreducible(n: Union[int, AlgebraicInteger]) -> bool:
    return DEFAULT_CALCULATOR.is_irreducible(n)


def prime_factors(n: AlgebraicInteger) -> list[QuadraticInteger]:
    return DEFAULT_CALCULATOR.prime_factors(n)


def irreducible_factors(n: QuadraticInteger) -> list[QuadraticInteger]:
    return DEFAULT_CALCULATOR.irreducible_factors(n)


def try_to_factorize_anyway(n: QuadraticInteger) -> list[QuadraticInteger]:
    return DEFAULT_CALCULATOR.try_to_factorize_anyway(n)


def euclidean_gcd(a: NUMBER_TYPES, b: NUMBER_TYPES) -> NUMBER_TYPES:
    return DEFAULT_CALCULATOR.euclidean_gcd(a, b)


def try_euclidean_gcd_anyway(a: QuadraticInteger, b: QuadraticInteger) -> QuadraticInteger:
    return DEFAULT_CALCULATOR.try_euclidean_gcd_anyway(a, b)
# endregion


__all__ = [
    "COMPLEX_CUBIC_ROOT_OF_UNITY",
    "DEFAULT_CALCULATOR",
    "GOLDEN_RATIO",
    "HEEGNER_NUMBERS",
    "IMAG_UNIT_I",
    "IMAG_UNIT_NEG_I",
    "NORM_EUCLIDEAN_QUADRATIC_IMAGINARY_RINGS_D",
    "NORM_EUCLIDEAN_QUADRATIC_REAL_RINGS_D",
    "NORM_EUCLIDEAN_QUADRATIC_RINGS_D",
    "NumberTheoreticFunctionsCalculator",
    "RING_EISENSTEIN",
    "RING_GAUSSIAN",
    "RING_ZPHI",
    "SURD_PART_CACHE_THRESHOLD",
    "divide_out_units",
    "euclidean_gcd",
    "field_class_number",
    "fundamental_unit",
    "get_neg_one_in_ring",
    "get_one_in_ring",
    "get_zero_in_ring",
    "irreducible_factors",
    "is_cubefree",
    "is_divisible_by",
    "is_inert",
    "is_irreducible",
    "is_perfect_square",
    "is_powerfree",
    "is_prime",
    "is_prime_int",
    "is_squarefree",
    "is_ufd",
    "kernel",
    "mod",
    "moebius_mu",
    "next_highest_squarefree",
    "next_lowest_squarefree",
    "place_in_primary_sector",
    "prime_factors",
    "prime_factors_of_int",
    "random_squarefree_number",
    "random_squarefree_number_mod",
    "random_squarefree_number_other_than",
    "sort_list_algebraic_integers_by_norm",
    "symbol_jacobi",
    "symbol_kronecker",
    "symbol_legendre",
    "try_euclidean_gcd_anyway",
    "try_to_factorize_anyway",
]
