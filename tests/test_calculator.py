import logging

from itertools import product
from math import prod
from random import Random

import pytest

from sympy import isprime, jacobi_symbol, legendre_symbol, primerange

from quadint.calculator import (
    COMPLEX_CUBIC_ROOT_OF_UNITY,
    GOLDEN_RATIO,
    HEEGNER_NUMBERS,
    IMAG_UNIT_I,
    IMAG_UNIT_NEG_I,
    NORM_EUCLIDEAN_QUADRATIC_RINGS_D,
    NumberTheoreticFunctionsCalculator,
    divide_out_units,
    euclidean_gcd,
    field_class_number,
    fundamental_unit,
    get_neg_one_in_ring,
    get_one_in_ring,
    get_zero_in_ring,
    irreducible_factors,
    is_cubefree,
    is_divisible_by,
    is_inert,
    is_irreducible,
    is_powerfree,
    is_prime,
    is_prime_int,
    is_squarefree,
    is_ufd,
    kernel,
    mod,
    moebius_mu,
    next_highest_squarefree,
    next_lowest_squarefree,
    place_in_primary_sector,
    prime_factors,
    prime_factors_of_int,
    random_squarefree_number,
    random_squarefree_number_mod,
    random_squarefree_number_other_than,
    sort_list_algebraic_integers_by_norm,
    symbol_jacobi,
    symbol_kronecker,
    symbol_legendre,
    try_to_factorize_anyway,
)
from quadint.exceptions import AlgebraicDegreeOverflowException, NonEuclideanDomainException, NotDivisibleException
from quadint.quad import QuadraticInteger
from quadint.rings import ImaginaryQuadraticRing, QuadraticRing, RealQuadraticRing

R_NEG5 = ImaginaryQuadraticRing(-5)
R_NEG3 = ImaginaryQuadraticRing(-3)
R_NEG2 = ImaginaryQuadraticRing(-2)
R_NEG1 = ImaginaryQuadraticRing(-1)
R2 = RealQuadraticRing(2)
R3 = RealQuadraticRing(3)
R7 = RealQuadraticRing(7)
R10 = RealQuadraticRing(10)


def gaussian(a: int, b: int) -> QuadraticInteger:
    return QuadraticInteger.apply(a, b, R_NEG1)


def ring_values(ring: QuadraticRing, bound: int) -> list[QuadraticInteger]:
    """Small numbers of the ring, half-integers included where it has them"""
    values = []
    for a, b in product(range(-bound, bound + 1), repeat=2):
        values.append(QuadraticInteger.apply(a, b, ring))
        if ring.has_half_integers() and a & 1 and b & 1:
            values.append(QuadraticInteger.apply(a, b, ring, 2))
    return values


class TestIntegers:
    """Tests for the rational integer functions"""

    def test_mod(self):
        """Residues are never negative"""
        assert mod(-7, 3) == 2
        assert mod(7, -3) == 1
        assert mod(9, 3) == 0
        with pytest.raises(ValueError):
            mod(5, 0)

    def test_prime_factors_of_int(self):
        """Ascending primes, -1 first for negative numbers"""
        assert prime_factors_of_int(-12) == [-1, 2, 2, 3]
        assert prime_factors_of_int(97) == [97]
        assert prime_factors_of_int(0) == [0]
        assert prime_factors_of_int(1) == [1]
        for n in range(2, 500):
            factors = prime_factors_of_int(n)
            assert prod(factors) == n
            assert factors == sorted(factors)

    def test_is_prime_int(self):
        """Compare against sympy"""
        for n in range(-200, 2000):
            assert is_prime_int(n) == isprime(abs(n))

    def test_is_cubefree(self):
        """No cube of a prime divides n"""
        assert is_cubefree(12)
        assert not is_cubefree(24)
        assert not is_cubefree(-27)
        assert is_cubefree(-1)
        assert not is_cubefree(0)

    def test_kernel(self):
        """The product of the distinct primes"""
        assert kernel(72) == 6
        assert kernel(-50) == 10
        assert kernel(1) == 1
        assert kernel(0) == 0

    def test_moebius_mu(self):
        """0 unless squarefree, else the parity of the prime count"""
        assert moebius_mu(1) == 1
        assert moebius_mu(6) == 1
        assert moebius_mu(30) == -1
        assert moebius_mu(-2) == -1
        assert moebius_mu(12) == 0
        with pytest.raises(ValueError):
            moebius_mu(0)

    def test_squarefree_neighbours(self):
        """The nearest squarefree numbers either side"""
        assert next_lowest_squarefree(10) == 7
        assert next_highest_squarefree(7) == 10
        assert next_lowest_squarefree(1) == -1
        assert next_highest_squarefree(-1) == 1
        assert next_highest_squarefree(23) == 26

    def test_is_powerfree(self):
        """Squarefree and cubefree are the powers 2 and 3"""
        for n in range(-100, 101):
            assert is_powerfree(n, 2) == is_squarefree(n)
            assert is_powerfree(n, 3) == is_cubefree(n)
        assert is_powerfree(8 * 81, 5)
        assert not is_powerfree(32, 5)
        with pytest.raises(ValueError):
            is_powerfree(10, 1)

    def test_random_squarefree_number(self):
        """Squarefree and positive, usually below the bound"""
        rng = Random(2024)
        for bound in (2, 10, 100, -100, 8192):
            for _ in range(50):
                n = random_squarefree_number(bound, rng)
                assert n > 0
                assert is_squarefree(n)
                assert n <= next_highest_squarefree(abs(bound) - 1)
        with pytest.raises(ValueError):
            random_squarefree_number(0)

    def test_random_squarefree_number_mod(self):
        """Squarefree numbers in a residue class"""
        rng = Random(7)
        for n, m in ((1, 4), (3, 4), (2, 8), (5, 12), (0, 6), (-1, 4)):
            for _ in range(20):
                k = random_squarefree_number_mod(n, m, rng)
                assert k > 0
                assert is_squarefree(k)
                assert k % m == n % m
        with pytest.raises(ValueError):
            random_squarefree_number_mod(4, 8)
        with pytest.raises(ValueError):
            random_squarefree_number_mod(1, 0)

    def test_random_squarefree_number_other_than(self):
        """Never the excluded number"""
        rng = Random(11)
        for _ in range(100):
            n = random_squarefree_number_other_than(2, 5, rng)
            assert n in (1, 3)
        assert random_squarefree_number_other_than(1, 3, rng) == 2
        with pytest.raises(ValueError):
            random_squarefree_number_other_than(1, 2)


class TestSymbols:
    """Tests for the Legendre, Jacobi and Kronecker symbols"""

    def test_legendre(self):
        """Compare against sympy"""
        for p in primerange(3, 60):
            for a in range(-30, 30):
                assert symbol_legendre(a, p) == legendre_symbol(a % p, p)

        for p in (-3, 2, 9, 15):
            with pytest.raises(ValueError):
                symbol_legendre(3, p)

    def test_jacobi(self):
        """Compare against sympy"""
        for m in range(3, 60, 2):
            for n in range(-30, 30):
                assert symbol_jacobi(n, m) == jacobi_symbol(n % m, m)
        assert symbol_jacobi(5, 1) == 1

        for m in (0, 4, -3):
            with pytest.raises(ValueError):
                symbol_jacobi(3, m)

    def test_kronecker(self):
        """The extension to even and non-positive m"""
        assert symbol_kronecker(1, 0) == 1
        assert symbol_kronecker(-1, 0) == 1
        assert symbol_kronecker(2, 0) == 0
        assert symbol_kronecker(-5, -1) == -1
        assert symbol_kronecker(5, -1) == 1
        assert symbol_kronecker(3, 2) == -1
        assert symbol_kronecker(5, 2) == -1
        assert symbol_kronecker(7, 2) == 1
        assert symbol_kronecker(-3, 2) == -1
        assert symbol_kronecker(4, 2) == 0
        assert symbol_kronecker(-4, 3) == -1
        assert symbol_kronecker(5, 12) == symbol_kronecker(5, 4) * symbol_kronecker(5, 3)

        for m in range(3, 60, 2):
            for n in range(-30, 30):
                assert symbol_kronecker(n, m) == symbol_jacobi(n, m)


class TestRingHelpers:
    """Tests for the small helpers"""

    def test_constants(self):
        """One, zero and minus one"""
        assert get_one_in_ring(R2) == QuadraticInteger.apply(1, 0, R2)
        assert get_zero_in_ring(R_NEG1) == gaussian(0, 0)
        assert get_neg_one_in_ring(R_NEG1) == gaussian(-1, 0)
        assert IMAG_UNIT_I * IMAG_UNIT_I == gaussian(-1, 0)
        assert IMAG_UNIT_I * IMAG_UNIT_NEG_I == gaussian(1, 0)
        assert COMPLEX_CUBIC_ROOT_OF_UNITY ** 3 == get_one_in_ring(R_NEG3)
        assert GOLDEN_RATIO * GOLDEN_RATIO == GOLDEN_RATIO + 1

    def test_sort(self):
        """A stable sort by absolute norm"""
        values = [gaussian(3, 0), gaussian(1, 1), gaussian(0, 3), gaussian(1, 0)]
        assert sort_list_algebraic_integers_by_norm(values) == [gaussian(1, 0), gaussian(1, 1),
                                                                 gaussian(3, 0), gaussian(0, 3)]

    def test_is_divisible_by(self):
        """Mixes of ints and quadratic integers"""
        assert is_divisible_by(12, 4)
        assert not is_divisible_by(12, 5)
        assert is_divisible_by(10, gaussian(1, 3))
        assert is_divisible_by(gaussian(2, 6), 2)
        assert not is_divisible_by(gaussian(2, 5), 2)
        with pytest.raises(ZeroDivisionError):
            is_divisible_by(3, 0)


class TestPrimality:
    """Tests for is_inert, is_prime and is_irreducible"""

    def test_inert(self):
        """The congruences agree with the Kronecker symbol"""
        for ring in (R_NEG1, R_NEG2, R_NEG3):
            for p in primerange(2, 300):
                assert is_inert(p, ring) == (symbol_kronecker(ring.discriminant(), p) == -1)

        assert is_inert(3, R_NEG1)
        assert not is_inert(5, R_NEG1)
        assert not is_inert(2, R_NEG1)
        assert is_inert(5, R_NEG2)
        assert is_inert(2, R_NEG3)
        assert not is_inert(3, R_NEG3)
        with pytest.raises(ValueError):
            is_inert(9, R_NEG1)

    def test_gaussian(self):
        """Gaussian primes"""
        assert is_prime(gaussian(1, 1))
        for a, b in product(range(-10, 11), repeat=2):
            if a == 0 or b == 0:
                # only rational primes p = 3 (mod 4) stay prime on the axes
                expected = isprime(abs(a + b)) and abs(a + b) % 4 == 3
            else:
                expected = isprime(a * a + b * b)
            n = gaussian(a, b)
            assert is_prime(n) == expected
            assert is_irreducible(n) == expected

    def test_ints(self):
        """Rational integers use trial division"""
        assert is_prime(7)
        assert not is_prime(9)
        assert is_irreducible(-13)
        assert not is_irreducible(1)

    def test_units(self):
        """Units are neither prime nor irreducible"""
        assert not is_irreducible(gaussian(0, 1))
        assert not is_irreducible(QuadraticInteger.apply(1, 1, R2))
        assert not is_irreducible(GOLDEN_RATIO)
        assert not is_irreducible(get_zero_in_ring(R2))

    def test_irreducible_not_prime(self):
        """2 + sqrt(10) and the factors of 6 in Z[sqrt(-5)]"""
        n = QuadraticInteger.apply(2, 1, R10)
        assert is_irreducible(n)
        assert not is_prime(n)

        for n in (QuadraticInteger.apply(2, 0, R_NEG5), QuadraticInteger.apply(3, 0, R_NEG5),
                  QuadraticInteger.apply(1, 1, R_NEG5), QuadraticInteger.apply(1, -1, R_NEG5)):
            assert is_irreducible(n)
            assert not is_prime(n)

    def test_imaginary_roots(self):
        """sqrt(d) is irreducible in these imaginary rings, d itself is not"""
        for d in (-5, -6, -10, -13, -14, -30):
            ring = ImaginaryQuadraticRing(d)
            assert is_irreducible(QuadraticInteger.apply(0, 1, ring))
            assert not is_irreducible(QuadraticInteger.apply(d, 0, ring))

    def test_real_roots(self):
        """sqrt(d) in real rings without unique factorization"""
        for d in (10, 130, 170):
            ring = RealQuadraticRing(d)
            assert is_irreducible(QuadraticInteger.apply(0, 1, ring))
            assert not is_prime(QuadraticInteger.apply(0, 1, ring))

        # sqrt(d) has a divisor of norm -5 or -10 here
        for d in (30, 70, 110, 190):
            assert not is_irreducible(QuadraticInteger.apply(0, 1, RealQuadraticRing(d)))
        ring = RealQuadraticRing(30)
        assert QuadraticInteger.apply(5, 1, ring) * QuadraticInteger.apply(6, -1, ring) == QuadraticInteger.apply(0, 1, ring)

        for d in (10, 30, 70, 110, 130, 170, 190):
            assert not is_irreducible(QuadraticInteger.apply(d, 0, RealQuadraticRing(d)))


class TestUFD:
    """Tests for is_ufd"""

    def test_imaginary(self):
        """Exactly the Heegner numbers"""
        for d in HEEGNER_NUMBERS:
            assert is_ufd(ImaginaryQuadraticRing(d))
        for d in (-5, -6, -10, -13, -14, -15, -17, -21, -23):
            assert not is_ufd(ImaginaryQuadraticRing(d))

    def test_real(self):
        """Class number 1"""
        for d in (2, 3, 5, 6, 7, 11, 13, 14, 23, 31):
            assert is_ufd(RealQuadraticRing(d))
        for d in (10, 15, 26, 34, 79):
            assert not is_ufd(RealQuadraticRing(d))


class TestFactorization:
    """Tests for prime_factors, irreducible_factors and try_to_factorize_anyway"""

    def test_reconstruction(self):
        """The primes multiply back to the number"""
        for d in (-1, -2, -3, -7, -11, -19, 2, 3, 5, 13):
            ring = QuadraticRing.apply(d)
            for n in ring_values(ring, 5):
                if abs(n.norm()) < 2:
                    continue
                factors = prime_factors(n)
                assert prod(factors) == n
                for i, factor in enumerate(factors):
                    if abs(factor.norm()) == 1:
                        assert i == 0
                    else:
                        assert is_prime(factor)
                        assert factor.reg_part_mult >= 0

    def test_gaussian(self):
        """2 ramifies, 5 splits"""
        assert prime_factors(gaussian(2, 0)) == [IMAG_UNIT_NEG_I, gaussian(1, 1), gaussian(1, 1)]
        assert prime_factors(gaussian(5, 0)) == [gaussian(2, 1), gaussian(2, -1)]
        assert prime_factors(gaussian(3, 0)) == [gaussian(3, 0)]
        assert prime_factors(gaussian(0, 1)) == [gaussian(0, 1)]

    def test_ramified_roots(self):
        """d = sqrt(d)*sqrt(d)"""
        for d in (-2, -7, -11, 2, 3):
            ring = QuadraticRing.apply(d)
            root = QuadraticInteger.apply(0, 1, ring)
            assert prime_factors(QuadraticInteger.apply(d, 0, ring)) == [root, root]

        root = QuadraticInteger.apply(0, 1, R_NEG2)
        assert prime_factors(QuadraticInteger.apply(2, 0, R_NEG2)) == [get_neg_one_in_ring(R_NEG2), root, root]

    def test_split_two(self):
        """2 splits in the rings of sqrt(57) and sqrt(73)"""
        for d in (57, 73):
            ring = RealQuadraticRing(d)
            two = QuadraticInteger.apply(2, 0, ring)
            factors = prime_factors(two)
            assert prod(factors) == two
            primes = [factor for factor in factors if abs(factor.norm()) != 1]
            assert [abs(factor.norm()) for factor in primes] == [2, 2]

    def test_irreducible_factors(self):
        """Factorizations into irreducibles in rings without unique factorization"""
        ring = ImaginaryQuadraticRing(-31)
        n = QuadraticInteger.apply(-29, 1, ring)
        assert irreducible_factors(n) == [get_neg_one_in_ring(ring), QuadraticInteger.apply(2, 0, ring),
                                          QuadraticInteger.apply(29, -1, ring, 2)]

        ring = RealQuadraticRing(26)
        n = QuadraticInteger.apply(28, 3, ring)
        factors = irreducible_factors(n)
        assert prod(factors) == n
        for factor in factors:
            if abs(factor.norm()) != 1:
                assert is_irreducible(factor)

    def test_irreducible_factors_ufd(self):
        """In a UFD these are the prime factors"""
        assert irreducible_factors(gaussian(5, 0)) == prime_factors(gaussian(5, 0))

    def test_anyway(self):
        """Pairs of -1 flag each irreducible that is not prime"""
        ring = ImaginaryQuadraticRing(-31)
        n = QuadraticInteger.apply(-29, 1, ring)
        factors = try_to_factorize_anyway(n)
        assert factors[:4] == [get_neg_one_in_ring(ring)] * 4
        assert factors[4:] == irreducible_factors(n)
        assert prod(factors) == n


class TestGCD:
    """Tests for euclidean_gcd"""

    def test_ints(self):
        """Two rational integers"""
        assert euclidean_gcd(12, 18) == 6
        assert euclidean_gcd(0, 5) == 5
        assert euclidean_gcd(-4, 6) == 2

    def test_gaussian(self):
        """gcd(5, 3 + i) is a prime of norm 5"""
        g = euclidean_gcd(5, gaussian(3, 1))
        assert g == gaussian(1, 2)
        assert is_divisible_by(gaussian(5, 0), g)
        assert is_divisible_by(gaussian(3, 1), g)

    def test_eisenstein(self):
        """(5 + sqrt(-3))/2 has norm 7"""
        g = euclidean_gcd(7, QuadraticInteger.apply(5, 1, R_NEG3, 2))
        assert g.norm() == 7

    def test_common_divisors(self):
        """Every small common divisor has norm at most that of the gcd"""
        for ring in (R_NEG1, R_NEG2, R_NEG3):
            values = [n for n in ring_values(ring, 2) if n]
            pairs = [(n * 3, m * 3) for n, m in zip(values, reversed(values))]
            pairs += [(n * m, m) for n, m in zip(values, values[1:])]
            for a, b in pairs:
                g = euclidean_gcd(a, b)
                assert a.is_divisible_by(g)
                assert b.is_divisible_by(g)
                for c in values:
                    if a.is_divisible_by(c) and b.is_divisible_by(c):
                        assert c.norm() <= g.norm()

    def test_real(self):
        """gcd(2, 1 + sqrt(d)) in norm-Euclidean real rings"""
        expected = {2: 1, 3: 2, 5: 4, 6: 1, 7: 2, 11: 2, 13: 4, 17: 4, 21: 4, 29: 4}
        for d, norm in expected.items():
            ring = RealQuadraticRing(d)
            n = QuadraticInteger.apply(1, 1, ring)
            g = euclidean_gcd(2, n)
            assert abs(g.norm()) == norm
            assert is_divisible_by(2, g)
            assert is_divisible_by(n, g)

        assert euclidean_gcd(2, QuadraticInteger.apply(1, 1, R2)) == get_one_in_ring(R2)

    def test_real_common_factor(self):
        """A constructed common factor divides the gcd"""
        for d in (2, 3, 5, 13, 17):
            ring = RealQuadraticRing(d)
            f = QuadraticInteger.apply(3, 1, ring)
            a = f * QuadraticInteger.apply(2, 1, ring)
            b = f * QuadraticInteger.apply(5, -1, ring)
            g = euclidean_gcd(a, b)
            assert a.is_divisible_by(g)
            assert b.is_divisible_by(g)
            assert g.is_divisible_by(f)

    def test_real_larger_radicands(self):
        """A constructed common factor divides the gcd in the remaining norm-Euclidean real rings"""
        cofactors = ((-9, -4), (-8, 1), (-4, -1), (-3, 2), (2, 1), (5, -1), (7, 3))
        for d in (19, 33, 37, 41, 57, 73):
            ring = RealQuadraticRing(d)
            f = QuadraticInteger.apply(3, 1, ring)
            for (x1, x2), (y1, y2) in product(cofactors, repeat=2):
                a = f * QuadraticInteger.apply(x1, x2, ring)
                b = f * QuadraticInteger.apply(y1, y2, ring)
                g = euclidean_gcd(a, b)
                assert a.is_divisible_by(g)
                assert b.is_divisible_by(g)
                assert g.is_divisible_by(f)

    def test_real_wide_search(self):
        """Pairs where no bounding integer of the quotient leaves a smaller remainder"""
        pairs = {
            19: ((-9, -4), (-9, -2)),
            33: ((-9, -4), (-8, -1)),
            37: ((-9, -4), (-9, -2)),
            41: ((-9, -4), (-8, 1)),
            57: ((-9, -4), (-8, -1)),
            73: ((-9, -4), (-9, 2)),
        }
        for d, ((x1, x2), (y1, y2)) in pairs.items():
            ring = RealQuadraticRing(d)
            f = QuadraticInteger.apply(3, 1, ring)
            a = f * QuadraticInteger.apply(x1, x2, ring)
            b = f * QuadraticInteger.apply(y1, y2, ring)
            assert abs(a.norm()) > abs(b.norm())

            with pytest.raises(NotDivisibleException) as exc_info:
                a.divides(b)
            remainders = [abs((a - q * b).norm()) for q in exc_info.value.bounding_integers()]
            assert min(remainders) >= abs(b.norm())

            g = euclidean_gcd(a, b)
            assert a.is_divisible_by(g)
            assert b.is_divisible_by(g)
            assert g.is_divisible_by(f)

    def test_other_ring_integer(self):
        """A rational integer of another ring is taken into the ring of the other number"""
        assert euclidean_gcd(QuadraticInteger.apply(5, 0, R3), gaussian(3, 1)) == gaussian(1, 2)
        assert euclidean_gcd(gaussian(3, 1), QuadraticInteger.apply(5, 0, R2)) == gaussian(1, 2)
        assert is_divisible_by(QuadraticInteger.apply(6, 0, R2), QuadraticInteger.apply(2, 0, R_NEG1))

    def test_overflow(self):
        """Numbers of two rings"""
        with pytest.raises(AlgebraicDegreeOverflowException):
            euclidean_gcd(QuadraticInteger.apply(1, 1, R2), QuadraticInteger.apply(1, 1, R3))

    def test_non_euclidean(self):
        """29 and 12 + 8sqrt(-5)"""
        with pytest.raises(NonEuclideanDomainException):
            euclidean_gcd(29, QuadraticInteger.apply(12, 8, R_NEG5))
        assert -5 not in NORM_EUCLIDEAN_QUADRATIC_RINGS_D
        assert len(NORM_EUCLIDEAN_QUADRATIC_RINGS_D) == 21

    def test_anyway(self):
        """try_euclidean_gcd_anyway skips the norm-Euclidean check"""
        calculator = NumberTheoreticFunctionsCalculator()
        g = calculator.try_euclidean_gcd_anyway(gaussian(4, 0), gaussian(6, 0))
        assert g == gaussian(2, 0)


class TestUnits:
    """Tests for fundamental_unit and divide_out_units"""

    def test_fundamental_unit(self):
        """Known fundamental units"""
        known = {
            2: (1, 1, 1),
            3: (2, 1, 1),
            5: (1, 1, 2),
            10: (3, 1, 1),
            21: (5, 1, 2),
            22: (197, 42, 1),
            29: (5, 1, 2),
            30: (11, 2, 1),
            41: (32, 5, 1),
            70: (251, 30, 1),
            79: (80, 9, 1),
            97: (5604, 569, 1),
            109: (261, 25, 2),
            130: (57, 5, 1),
            170: (13, 1, 1),
            210: (29, 2, 1),
            401: (20, 1, 1),
        }
        for d, (a, b, den) in known.items():
            ring = RealQuadraticRing(d)
            unit = fundamental_unit(ring)
            assert unit == QuadraticInteger.apply(a, b, ring, den)
            assert abs(unit.norm()) == 1

        assert fundamental_unit(RealQuadraticRing(5)) == GOLDEN_RATIO

    def test_seeded(self):
        """Units too large to search for come from the cache"""
        ring = RealQuadraticRing(199)
        unit = fundamental_unit(ring)
        assert unit == QuadraticInteger.apply(16266196520, 1153080099, ring)
        assert unit.norm() == 1

    def test_cache(self):
        """Only units with a large surd part are remembered"""
        calculator = NumberTheoreticFunctionsCalculator()
        ring = RealQuadraticRing(103)
        unit = calculator.fundamental_unit(ring)
        assert unit == QuadraticInteger.apply(227528, 22419, ring)
        assert calculator.unit_cache[ring] == unit

        calculator.fundamental_unit(R2)
        assert R2 not in calculator.unit_cache

    def test_preloaded_cache(self):
        """Units passed to the constructor are used as is"""
        unit = QuadraticInteger.apply(8, 3, R7)
        calculator = NumberTheoreticFunctionsCalculator(unit_cache={R7: unit})
        assert calculator.fundamental_unit(R7) is unit

    def test_imaginary(self):
        """Imaginary rings have no fundamental unit"""
        with pytest.raises(ValueError):
            fundamental_unit(R_NEG5)

    def test_divide_out_units(self):
        """Associates of 3 + sqrt(7)"""
        expected = QuadraticInteger.apply(3, 1, R7)
        for n in (QuadraticInteger.apply(182115, 68833, R7), QuadraticInteger.apply(-11427, 4319, R7),
                  QuadraticInteger.apply(3, -1, R7), QuadraticInteger.apply(-3, -1, R7), expected):
            assert divide_out_units(n) == expected

        unit = fundamental_unit(R7)
        assert divide_out_units(unit ** 3) == get_one_in_ring(R7)
        assert divide_out_units(get_zero_in_ring(R7)) == get_zero_in_ring(R7)
        assert divide_out_units(gaussian(3, -10)) == gaussian(10, 3)

    def test_logging(self, caplog):
        """Searches are logged at debug level"""
        calculator = NumberTheoreticFunctionsCalculator()
        with caplog.at_level(logging.DEBUG, logger="quadint.calculator"):
            calculator.fundamental_unit(R7)
        assert "Found fundamental unit 8 + 3sqrt(7) of Z[sqrt(7)]" in caplog.text


class TestClassNumber:
    """Tests for field_class_number"""

    def test_main(self):
        """Known class numbers"""
        known = {
            1: (-1, -2, -3, -7, -11, -19, -163, 2, 5, 13, 14, 23, 31, 43, 47),
            2: (-5, -6, -10, -15, 10, 15, 26, 34),
            3: (-23, -31, 79),
            4: (-21, 82),
            5: (-47, 401),
            16: (-589,),
        }
        for h, radicands in known.items():
            for d in radicands:
                assert field_class_number(QuadraticRing.apply(d)) == h

    def test_cache(self):
        """Class numbers are remembered"""
        calculator = NumberTheoreticFunctionsCalculator(class_number_cache={R_NEG5: 2})
        assert calculator.field_class_number(R_NEG5) == 2
        calculator.field_class_number(R10)
        assert calculator.class_number_cache[R10] == 2

    def test_sampled_radicands(self):
        """Unique factorization goes with class number 1"""
        rng = Random(163)
        for _ in range(20):
            ring = ImaginaryQuadraticRing(-random_squarefree_number(500, rng))
            assert is_ufd(ring) == (field_class_number(ring) == 1)
        for _ in range(10):
            ring = RealQuadraticRing(random_squarefree_number_other_than(1, 60, rng))
            assert is_ufd(ring) == (field_class_number(ring) == 1)


class TestPrimarySector:
    """Tests for place_in_primary_sector"""

    def test_gaussian(self):
        """The associate with 0 <= angle < pi/2"""
        assert place_in_primary_sector(gaussian(3, -10)) == gaussian(10, 3)
        assert place_in_primary_sector(gaussian(0, 2)) == gaussian(2, 0)
        for n in (gaussian(2, 1), gaussian(-1, 2), gaussian(-2, -1), gaussian(1, -2)):
            assert place_in_primary_sector(n) == gaussian(2, 1)

    def test_eisenstein(self):
        """All six associates land on the same number"""
        expected = QuadraticInteger.apply(7, 1, R_NEG3, 2)
        n = expected
        for _ in range(3):
            assert place_in_primary_sector(n) == expected
            assert place_in_primary_sector(-n) == expected
            n = n * COMPLEX_CUBIC_ROOT_OF_UNITY
        assert place_in_primary_sector(QuadraticInteger.apply(1, 2, R_NEG3)) == expected

    def test_other(self):
        """Other rings only flip the sign"""
        assert place_in_primary_sector(QuadraticInteger.apply(-3, 1, R_NEG5)) == QuadraticInteger.apply(3, -1, R_NEG5)
        assert place_in_primary_sector(QuadraticInteger.apply(-2, 1, R2)) == QuadraticInteger.apply(2, -1, R2)
        assert place_in_primary_sector(get_zero_in_ring(R_NEG1)) == get_zero_in_ring(R_NEG1)
