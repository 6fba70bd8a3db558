"""
Wesolowski VDF over the class group.

The proof is (y, pi) with pi = x^floor(2^T / B), where B is a 128-bit prime
derived from x and y. Verification checks pi^B * x^(2^T mod B) = y.
"""

import hashlib

import gmpy2
from gmpy2 import mpz

from vdf_gateway.errors import InvalidProof
from vdf_gateway.vdf.classgroup import ClassGroup, encoded_element_size
from vdf_gateway.vdf.discriminant import create_discriminant


def hash_prime(*seeds: bytes) -> mpz:
    """First probable prime among sha256("prime" || j || seeds)[:16], j = 0, 1, ..."""
    j = 0
    while True:
        hasher = hashlib.sha256(b"prime")
        hasher.update(j.to_bytes(8, "big"))
        for seed in seeds:
            hasher.update(seed)
        n = mpz(int.from_bytes(hasher.digest()[:16], "big"))
        if gmpy2.is_prime(n):
            return n
        j += 1


def _challenge_prime(x: ClassGroup, y: ClassGroup, int_size_bits: int) -> mpz:
    return hash_prime(x.serialize(int_size_bits), y.serialize(int_size_bits))


def create_proof_of_time_wesolowski(x: ClassGroup, iterations: int, int_size_bits: int) -> bytes:
    y = x.repeated_square(iterations)
    b = _challenge_prime(x, y, int_size_bits)
    proof = x ** ((mpz(1) << iterations) // b)
    return y.serialize(int_size_bits) + proof.serialize(int_size_bits)


def verify_proof(
    x: ClassGroup, y: ClassGroup, proof: ClassGroup, iterations: int, int_size_bits: int
) -> bool:
    b = _challenge_prime(x, y, int_size_bits)
    r = gmpy2.powmod(2, iterations, b)
    return proof**b * x**r == y


class WesolowskiVDF:
    def __init__(self, int_size_bits: int):
        self.int_size_bits = int_size_bits

    def check_difficulty(self, difficulty: int) -> None:
        """Wesolowski proves any iteration count, so nothing is rejected."""

    def solve(self, challenge: bytes, difficulty: int) -> bytes:
        self.check_difficulty(difficulty)
        discriminant = create_discriminant(challenge, self.int_size_bits)
        x = ClassGroup.generator_for_discriminant(discriminant)
        return create_proof_of_time_wesolowski(x, difficulty, self.int_size_bits)

    def verify(self, challenge: bytes, difficulty: int, alleged_solution: bytes) -> None:
        """
        Raise InvalidProof unless `alleged_solution` is y followed by pi for
        this challenge and difficulty.

        Forms too wide for the hashing encoding at this security level are
        reported as InvalidProof.
        """
        element_size = encoded_element_size(self.int_size_bits)
        if len(alleged_solution) != 2 * element_size:
            raise InvalidProof(
                f"Wesolowski proof must be {2 * element_size} bytes, got {len(alleged_solution)}"
            )
        try:
            discriminant = create_discriminant(challenge, self.int_size_bits)
            x = ClassGroup.generator_for_discriminant(discriminant)
            y = ClassGroup.from_bytes(alleged_solution[:element_size], discriminant)
            proof = ClassGroup.from_bytes(alleged_solution[element_size:], discriminant)
            valid = verify_proof(x, y, proof, difficulty, self.int_size_bits)
        except ValueError as e:
            raise InvalidProof(str(e)) from e

        if not valid:
            raise InvalidProof("Wesolowski proof does not verify")
