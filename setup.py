from mypyc.build import mypycify
from setuptools import setup

setup(
    name="quadint",
    version="0.1.0",
    description="Quadratic integer arithmetic: factorization, primality, Euclidean GCD, units and class numbers",

    packages=["quadint"],
    include_package_data=True,
    package_data={"quadint": ["py.typed"]},

    # exceptions.py stays interpreted: its classes extend the builtin exception types.
    # utils.py stays interpreted for the generator cache's closures.
    ext_modules=mypycify([
        "quadint/__init__.py",
        "quadint/rings.py",
        "quadint/quad.py",
        "quadint/calculator.py",
    ]),

    python_requires=">=3.9",
    install_requires=["sympy"],
    extras_require={"test": ["pytest"]},

    license="MIT",
)
