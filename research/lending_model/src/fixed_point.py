"""Checked unsigned arithmetic and the full precision mul-div service"""
from typing import Protocol

from .constants import UINT256_MAX
from .errors import ArithmeticOverflowError


def checked_add(a: int, b: int) -> int:
    """Add with overflow checking"""
    result = a + b
    if result > UINT256_MAX:
        raise ArithmeticOverflowError("Arithmetic overflow in addition")
    return result

def checked_sub(a: int, b: int) -> int:
    """Subtract with underflow checking"""
    if b > a:
        raise ArithmeticOverflowError("Arithmetic underflow in subtraction")
    return a - b

def checked_mul(a: int, b: int) -> int:
    """Multiply with overflow checking"""
    result = a * b
    if result > UINT256_MAX:
        raise ArithmeticOverflowError("Arithmetic overflow in multiplication")
    return result

def checked_div(a: int, b: int) -> int:
    """Divide with overflow checking"""
    if b == 0:
        raise ArithmeticOverflowError("Division by zero")
    return a // b


class FullMath(Protocol):
    """Multiply-divide with an intermediate product wider than 256 bits"""

    def mul_div(self, a: int, b: int, denominator: int) -> int:
        ...

    def mul_div_rounding_up(self, a: int, b: int, denominator: int) -> int:
        ...


class PythonFullMath:
    """FullMath over Python's unbounded ints.

    Only the final result has to fit in 256 bits, the product a * b may not.
    """

    def mul_div(self, a: int, b: int, denominator: int) -> int:
        if denominator == 0:
            raise ArithmeticOverflowError("Division by zero")
        if a < 0 or b < 0 or denominator < 0:
            raise ArithmeticOverflowError("Negative operand in mul_div")
        result = (a * b) // denominator
        if result > UINT256_MAX:
            raise ArithmeticOverflowError("mul_div result overflows uint256")
        return result

    def mul_div_rounding_up(self, a: int, b: int, denominator: int) -> int:
        result = self.mul_div(a, b, denominator)
        if (a * b) % denominator > 0:
            result = checked_add(result, 1)
        return result


DEFAULT_FULL_MATH = PythonFullMath()
