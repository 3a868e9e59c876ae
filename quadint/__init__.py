import logging

from quadint.calculator import (
    COMPLEX_CUBIC_ROOT_OF_UNITY,
    DEFAULT_CALCULATOR,
    GOLDEN_RATIO,
    HEEGNER_NUMBERS,
    IMAG_UNIT_I,
    IMAG_UNIT_NEG_I,
    NORM_EUCLIDEAN_QUADRATIC_IMAGINARY_RINGS_D,
    NORM_EUCLIDEAN_QUADRATIC_REAL_RINGS_D,
    NORM_EUCLIDEAN_QUADRATIC_RINGS_D,
    RING_EISENSTEIN,
    RING_GAUSSIAN,
    RING_ZPHI,
    NumberTheoreticFunctionsCalculator,
)
from quadint.exceptions import (
    AlgebraicDegreeOverflowException,
    NonEuclideanDomainException,
    NonUniqueFactorizationDomainException,
    NotDivisibleException,
    UnsupportedNumberDomainException,
)
from quadint.quad import AlgebraicInteger, ImaginaryQuadraticInteger, QuadraticInteger, RealQuadraticInteger
from quadint.rings import ImaginaryQuadraticRing, IntegerRing, QuadraticRing, RealQuadraticRing

logging.getLogger(__name__).addHandler(logging.NullHandler())

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
    "RING_EISENSTEIN",
    "RING_GAUSSIAN",
    "RING_ZPHI",
    "AlgebraicDegreeOverflowException",
    "AlgebraicInteger",
    "ImaginaryQuadraticInteger",
    "ImaginaryQuadraticRing",
    "IntegerRing",
    "NonEuclideanDomainException",
    "NonUniqueFactorizationDomainException",
    "NotDivisibleException",
    "NumberTheoreticFunctionsCalculator",
    "QuadraticInteger",
    "QuadraticRing",
    "RealQuadraticInteger",
    "RealQuadraticRing",
    "UnsupportedNumberDomainException",
]
