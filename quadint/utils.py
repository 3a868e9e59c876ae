from functools import wraps
from math import isqrt
from threading import RLock
from typing import Any, Callable, Hashable, Iterator, Optional, cast

from sympy import factorint


class _ReplayBuffer:
    """Items produced so far by one shared generator, plus how it ended."""

    __slots__ = ("lock", "items", "source", "finished", "error")

    def __init__(self, source: Iterator[Any]) -> None:
        self.lock = RLock()
        self.items: list[Any] = []
        self.source: Optional[Iterator[Any]] = source
        self.finished = False
        self.error: Optional[BaseException] = None

    def fetch(self, index: int) -> tuple[bool, Any]:
        """
        Return ``(True, item)`` for position ``index``, pulling from the source when needed.

        Returns ``(False, None)`` once the source is exhausted. A failure in the source is
        remembered and raised again for every later reader.
        """
        with self.lock:
            if index < len(self.items):
                return True, self.items[index]

            if self.finished:
                if self.error is not None:
                    raise self.error
                return False, None

            try:
                item = next(cast(Iterator[Any], self.source))
            except StopIteration:
                self.source = None
                self.finished = True
                return False, None
            except BaseException as e:
                self.source = None
                self.finished = True
                self.error = e
                raise

            self.items.append(item)
            return True, item


def _call_key(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Hashable:
    if not kwargs:
        return args
    return args, tuple(sorted(kwargs.items()))


def cache_generator(fn: Callable[..., Iterator[Any]]) -> Callable[..., Iterator[Any]]:
    """
    Memoize a generator function per argument tuple.

    Every call returns a new iterator that first replays what earlier callers already
    pulled and then keeps advancing the one underlying generator, so the expensive work
    behind each item happens once per process. Safe to share between threads.

    Returns:
        Callable: The wrapped generator function.
    """
    buffers: dict[Hashable, _ReplayBuffer] = {}
    buffers_lock = RLock()

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Iterator[Any]:
        key = _call_key(args, kwargs)
        with buffers_lock:
            buffer = buffers.get(key)
            if buffer is None:
                buffer = _ReplayBuffer(fn(*args, **kwargs))
                buffers[key] = buffer

        def _replay() -> Iterator[Any]:
            index = 0
            while True:
                found, item = buffer.fetch(index)
                if not found:
                    return
                index += 1
                yield item

        return _replay()

    return wrapper


# region integer helpers
def is_squarefree(n: int) -> bool:
    """True if no square of a prime divides n. 0 is not squarefree, -1 and 1 are."""
    if n == 0:
        return False
    return all(exp == 1 for exp in factorint(abs(n)).values())


def square_part(n: int) -> tuple[int, int]:
    """
    Split n into s and k with n == s*s*k and k squarefree.

    Returns:
        tuple: (s, k), where s > 0 and k carries the sign of n.

    Raises:
        ValueError: If n is 0.
    """
    if n == 0:
        raise ValueError("0 has no squarefree kernel")

    s = 1
    k = -1 if n < 0 else 1
    for p, exp in factorint(abs(n)).items():
        s *= p ** (exp // 2)
        if exp & 1:
            k *= p
    return s, k


def is_perfect_square(n: int) -> bool:
    """True for 0, 1, 4, 9, ...; negative numbers are never perfect squares."""
    if n < 0:
        return False
    root = isqrt(n)
    return root * root == n


def exact_isqrt(n: int) -> Optional[int]:
    """Square root of n if n is a perfect square, else None."""
    if n < 0:
        return None
    root = isqrt(n)
    if root * root != n:
        return None
    return root
# endregion
