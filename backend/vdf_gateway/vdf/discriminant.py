"""
Deterministic derivation of a negative prime discriminant from a seed.

The discriminant is -q where q is the smallest probable prime of the form
n + M*i, q = 7 (mod 8), and n is a `length`-bit number drawn from SHA-256
entropy over the seed.
"""

import hashlib

import gmpy2
from gmpy2 import mpz

# Product of 8 and the first odd primes; candidates are taken from residue
# classes mod M that are 7 (mod 8) and coprime to 3, 5, 7, 11 and 13.
M = 8 * 3 * 5 * 7 * 11 * 13
SIEVE_SIZE = 1 << 16


def _primes_below(limit: int) -> list[int]:
    flags = bytearray([1]) * limit
    flags[0:2] = b"\x00\x00"
    for p in range(2, int(limit**0.5) + 1):
        if flags[p]:
            flags[p * p :: p] = bytes(len(range(p * p, limit, p)))
    return [p for p in range(limit) if flags[p]]


RESIDUES = tuple(x for x in range(7, M, 8) if all(x % p for p in (3, 5, 7, 11, 13)))

# (p, M^-1 mod p) for every sieving prime that does not divide M.
SIEVE_INFO = tuple((p, pow(M, p - 2, p)) for p in _primes_below(SIEVE_SIZE) if p > 13)


def entropy_from_seed(seed: bytes, byte_count: int) -> bytes:
    """Expand `seed` to `byte_count` bytes with counter-mode SHA-256."""
    if byte_count > 32 * 0xFFFF:
        raise ValueError(f"Cannot draw {byte_count} bytes of entropy from one seed")
    blob = bytearray()
    extra = 0
    while len(blob) < byte_count:
        blob += hashlib.sha256(seed + extra.to_bytes(2, "big")).digest()
        extra += 1
    return bytes(blob[:byte_count])


def create_discriminant(seed: bytes, length: int) -> mpz:
    """Return a negative discriminant of `length` bits derived from `seed`."""
    if length < 1:
        raise ValueError(f"Discriminant length must be at least 1 bit, got {length}")

    extra = length & 7
    random_bytes = entropy_from_seed(seed, ((length + 7) >> 3) + 2)
    n = mpz(int.from_bytes(random_bytes[:-2], "big")) >> ((8 - extra) & 7)
    n = gmpy2.bit_set(n, length - 1)
    residue = RESIDUES[int.from_bytes(random_bytes[-2:], "big") % len(RESIDUES)]
    n = n - n % M + residue

    while True:
        sieve = bytearray(SIEVE_SIZE)
        for p, q in SIEVE_INFO:
            # n + M*i = 0 (mod p)  <=>  i = -n * M^-1 (mod p)
            i = int((-n) % p) * q % p
            sieve[i::p] = b"\x01" * len(range(i, SIEVE_SIZE, p))

        for i, composite in enumerate(sieve):
            if composite:
                continue
            candidate = n + M * i
            if gmpy2.is_prime(candidate):
                return -candidate

        n += M * SIEVE_SIZE
