"""
Pietrzak VDF over the class group.

A proof is the output y followed by the intermediate values mu produced by
repeatedly halving the claim x^(2^T) = y. Halving stops once the remaining
exponent reaches the DELTA-th value from the end of the halving schedule,
which the verifier then checks by direct squaring.
"""

import hashlib

from vdf_gateway.errors import InvalidIterations, InvalidProof
from vdf_gateway.vdf.classgroup import ClassGroup, deserialize_elements, serialize_elements
from vdf_gateway.vdf.discriminant import create_discriminant

DELTA = 8
MIN_DIFFICULTY = 66


def halving_schedule(t: int) -> list[int]:
    """
    Remaining exponents after each round, ending in [..., 2, 1].

    Odd halves are rounded up; the prover and verifier square y to match.
    """
    schedule = []
    curr_t = t
    while curr_t != 2:
        schedule.append(curr_t)
        curr_t >>= 1
        if curr_t & 1:
            curr_t += 1
    schedule += [2, 1]
    return schedule


def calculate_final_t(t: int, delta: int = DELTA) -> int:
    return halving_schedule(t)[-delta]


def generate_r_value(x: ClassGroup, y: ClassGroup, mu: ClassGroup, int_size_bits: int) -> int:
    """Fiat-Shamir challenge for one halving round."""
    digest = hashlib.sha256(serialize_elements([x, y, mu], int_size_bits)).digest()
    return int.from_bytes(digest[:16], "big")


def create_proof_of_time_pietrzak(x: ClassGroup, iterations: int, int_size_bits: int) -> bytes:
    y = x.repeated_square(iterations)
    final_t = calculate_final_t(iterations)

    mus = []
    x_p, y_p = x, y
    curr_t = iterations
    while curr_t != final_t:
        half_t = curr_t >> 1
        mu = x_p.repeated_square(half_t)
        r = generate_r_value(x_p, y_p, mu, int_size_bits)
        x_p = x_p**r * mu
        y_p = mu**r * y_p
        mus.append(mu)

        curr_t = half_t
        if curr_t & 1:
            curr_t += 1
            y_p = y_p.square()

    return serialize_elements([y, *mus], int_size_bits)


def verify_proof(
    x: ClassGroup, y: ClassGroup, mus: list[ClassGroup], iterations: int, int_size_bits: int
) -> bool:
    schedule = halving_schedule(iterations)
    if len(mus) != len(schedule) - DELTA:
        return False

    curr_t = iterations
    for mu in mus:
        r = generate_r_value(x, y, mu, int_size_bits)
        x = x**r * mu
        y = mu**r * y
        curr_t >>= 1
        if curr_t & 1:
            curr_t += 1
            y = y.square()

    return x.repeated_square(schedule[-DELTA]) == y


class PietrzakVDF:
    def __init__(self, int_size_bits: int):
        self.int_size_bits = int_size_bits

    def check_difficulty(self, difficulty: int) -> None:
        if difficulty & 1 or difficulty < MIN_DIFFICULTY:
            raise InvalidIterations(
                f"Pietrzak iterations must be an even number, and at least "
                f"{MIN_DIFFICULTY}, not {difficulty}"
            )

    def solve(self, challenge: bytes, difficulty: int) -> bytes:
        self.check_difficulty(difficulty)
        discriminant = create_discriminant(challenge, self.int_size_bits)
        x = ClassGroup.generator_for_discriminant(discriminant)
        return create_proof_of_time_pietrzak(x, difficulty, self.int_size_bits)

    def verify(self, challenge: bytes, difficulty: int, alleged_solution: bytes) -> None:
        try:
            self.check_difficulty(difficulty)
            discriminant = create_discriminant(challenge, self.int_size_bits)
            x = ClassGroup.generator_for_discriminant(discriminant)
            y, *mus = deserialize_elements(alleged_solution, discriminant, self.int_size_bits)
            valid = verify_proof(x, y, mus, difficulty, self.int_size_bits)
        except ValueError as e:
            raise InvalidProof(str(e)) from e

        if not valid:
            raise InvalidProof("Pietrzak proof does not verify")
