"""
Class group of binary quadratic forms with negative discriminant.

Elements are forms (a, b, c) with b^2 - 4ac = D < 0. Every element is kept
in its reduced form, which is the unique canonical representative of its
class, so equality of elements is equality of (a, b, c).

Arithmetic follows Cohen, "A Course in Computational Number Theory":
composition is Algorithm 5.4.7, reduction is Algorithm 5.4.2.
"""

from __future__ import annotations

import gmpy2
from gmpy2 import mpz


def encoded_int_size(int_size_bits: int) -> int:
    """Bytes used for each of `a` and `b` when a form is serialised."""
    return (int_size_bits + 16) >> 4


def encoded_element_size(int_size_bits: int) -> int:
    return 2 * encoded_int_size(int_size_bits)


class ClassGroup:
    __slots__ = ("a", "b", "c", "discriminant")

    def __init__(self, a, b, c):
        self.a = mpz(a)
        self.b = mpz(b)
        self.c = mpz(c)
        self.discriminant = self.b * self.b - 4 * self.a * self.c

    @classmethod
    def from_ab_discriminant(cls, a, b, discriminant) -> ClassGroup:
        """Build the reduced form with the given `a`, `b` and discriminant."""
        a, b, discriminant = mpz(a), mpz(b), mpz(discriminant)
        if a <= 0:
            raise ValueError("Form coefficient a must be positive")
        numerator = b * b - discriminant
        if numerator % (4 * a) != 0:
            raise ValueError("b^2 - D is not divisible by 4a")
        return cls(a, b, numerator // (4 * a)).reduced()

    @classmethod
    def identity_for_discriminant(cls, discriminant) -> ClassGroup:
        return cls.from_ab_discriminant(1, 1, discriminant)

    @classmethod
    def generator_for_discriminant(cls, discriminant) -> ClassGroup:
        """The form (2, 1, c) every VDF evaluation starts from."""
        return cls.from_ab_discriminant(2, 1, discriminant)

    def identity(self) -> ClassGroup:
        return self.identity_for_discriminant(self.discriminant)

    def is_normalized(self) -> bool:
        return -self.a < self.b <= self.a

    def is_reduced(self) -> bool:
        if not self.is_normalized():
            return False
        return self.a < self.c or (self.a == self.c and self.b >= 0)

    def normalized(self) -> ClassGroup:
        a, b, c = self.a, self.b, self.c
        if -a < b <= a:
            return self
        r = (a - b) // (2 * a)
        b, c = b + 2 * r * a, a * r * r + b * r + c
        return self.__class__(a, b, c)

    def reduced(self) -> ClassGroup:
        form = self.normalized()
        a, b, c = form.a, form.b, form.c
        while a > c or (a == c and b < 0):
            s = (c + b) // (c + c)
            a, b, c = c, -b + 2 * s * c, c * s * s - b * s + a
        return self.__class__(a, b, c).normalized()

    def __mul__(self, other: ClassGroup) -> ClassGroup:
        if not isinstance(other, ClassGroup):
            return NotImplemented
        if self.discriminant != other.discriminant:
            raise ValueError("Cannot compose forms with different discriminants")

        f1, f2 = (self, other) if self.a <= other.a else (other, self)
        a1, b1 = f1.a, f1.b
        a2, b2, c2 = f2.a, f2.b, f2.c

        s = (b1 + b2) >> 1
        n = b2 - s

        if a2 % a1 == 0:
            y1 = mpz(0)
            d = a1
        else:
            d, u, _ = gmpy2.gcdext(a2, a1)
            y1 = u

        if s % d == 0:
            x2, y2 = mpz(0), mpz(-1)
            d1 = d
        else:
            d1, u, v = gmpy2.gcdext(s, d)
            x2, y2 = u, -v

        v1 = a1 // d1
        v2 = a2 // d1
        r = (y1 * y2 * n - x2 * c2) % v1
        a3 = v1 * v2
        b3 = b2 + 2 * v2 * r
        c3 = (b3 * b3 - self.discriminant) // (4 * a3)
        return self.__class__(a3, b3, c3).reduced()

    def square(self) -> ClassGroup:
        return self * self

    def __pow__(self, exponent) -> ClassGroup:
        exponent = int(exponent)
        if exponent < 0:
            raise ValueError("Negative exponents are not supported")
        result = self.identity()
        for i in range(exponent.bit_length() - 1, -1, -1):
            result = result.square()
            if (exponent >> i) & 1:
                result = result * self
        return result

    def repeated_square(self, iterations: int) -> ClassGroup:
        """Return self^(2^iterations) by sequential squaring."""
        result = self
        for _ in range(iterations):
            result = result.square()
        return result

    def serialize(self, int_size_bits: int) -> bytes:
        """Encode `a` then `b` as fixed-width big-endian two's complement."""
        size = encoded_int_size(int_size_bits)
        try:
            return int(self.a).to_bytes(size, "big", signed=True) + int(self.b).to_bytes(
                size, "big", signed=True
            )
        except OverflowError as e:
            raise ValueError(f"Form does not fit in {size} bytes per coefficient") from e

    @classmethod
    def from_bytes(cls, data: bytes, discriminant) -> ClassGroup:
        """
        Decode a form produced by `serialize`.

        Only canonical encodings are accepted: the decoded form must already
        be reduced.
        """
        if not data or len(data) % 2:
            raise ValueError("Encoded form must have a non-zero even length")
        half = len(data) // 2
        a = int.from_bytes(data[:half], "big", signed=True)
        b = int.from_bytes(data[half:], "big", signed=True)
        form = cls.from_ab_discriminant(a, b, discriminant)
        if form.a != a or form.b != b:
            raise ValueError("Encoded form is not reduced")
        return form

    def __eq__(self, other) -> bool:
        if not isinstance(other, ClassGroup):
            return NotImplemented
        return (self.a, self.b, self.c) == (other.a, other.b, other.c)

    def __hash__(self) -> int:
        return hash((int(self.a), int(self.b), int(self.c)))

    def __repr__(self) -> str:
        return f"ClassGroup(a={self.a}, b={self.b}, c={self.c})"


def serialize_elements(elements: list[ClassGroup], int_size_bits: int) -> bytes:
    return b"".join(element.serialize(int_size_bits) for element in elements)


def deserialize_elements(blob: bytes, discriminant, int_size_bits: int) -> list[ClassGroup]:
    """Split a blob into consecutive fixed-width forms."""
    element_size = encoded_element_size(int_size_bits)
    if not blob or len(blob) % element_size:
        raise ValueError(
            f"Proof length {len(blob)} is not a positive multiple of {element_size}"
        )
    return [
        ClassGroup.from_bytes(blob[offset : offset + element_size], discriminant)
        for offset in range(0, len(blob), element_size)
    ]
