"""Tests for the Pietrzak prover and verifier."""

import pytest

from vdf_gateway.errors import InvalidIterations, InvalidProof
from vdf_gateway.vdf.classgroup import ClassGroup, encoded_element_size
from vdf_gateway.vdf.discriminant import create_discriminant
from vdf_gateway.vdf.pietrzak import PietrzakVDF, calculate_final_t, halving_schedule

ELEMENT_SIZE = encoded_element_size(512)


@pytest.fixture(scope="module")
def pietrzak():
    """Pietrzak scheme at the 512-bit security level."""
    return PietrzakVDF(512)


class TestSchedule:
    """Tests for the halving schedule."""

    def test_halving_schedule(self):
        """Test that the schedule halves down to [..., 2, 1]."""
        assert halving_schedule(100) == [100, 50, 26, 14, 8, 4, 2, 1]

    def test_odd_halves_round_up(self):
        """Test that odd halves are rounded up to the next even number."""
        assert halving_schedule(1000) == [1000, 500, 250, 126, 64, 32, 16, 8, 4, 2, 1]

    @pytest.mark.parametrize(
        ("t", "final_t"),
        [(66, 66), (100, 100), (200, 100), (1000, 126)],
    )
    def test_final_t(self, t, final_t):
        """Test that halving stops at the eighth value from the end."""
        assert calculate_final_t(t) == final_t


class TestCheckDifficulty:
    """Tests for the Pietrzak iteration constraints."""

    @pytest.mark.parametrize("difficulty", [0, 2, 64, 65, 67, 101])
    def test_rejects_odd_or_small(self, pietrzak, difficulty):
        """Test that odd counts and counts below 66 are refused."""
        with pytest.raises(InvalidIterations):
            pietrzak.check_difficulty(difficulty)

    @pytest.mark.parametrize("difficulty", [66, 68, 100, 1_000_000])
    def test_accepts_even_from_minimum(self, pietrzak, difficulty):
        """Test that even counts from 66 upwards are accepted."""
        pietrzak.check_difficulty(difficulty)


class TestValidProof:
    """Tests against a proof with three mu values."""

    def test_verifies(self, pietrzak, pietrzak_proof):
        """Test that an untouched proof verifies."""
        pietrzak.verify(
            pietrzak_proof["challenge"], pietrzak_proof["difficulty"], pietrzak_proof["solution"]
        )

    def test_solve_is_deterministic(self, pietrzak, pietrzak_proof):
        """Test that solving again yields the same bytes."""
        solution = pietrzak.solve(pietrzak_proof["challenge"], pietrzak_proof["difficulty"])
        assert solution == pietrzak_proof["solution"]

    def test_wrong_difficulty(self, pietrzak, pietrzak_proof):
        """Test that the proof fails for another even difficulty with the same mu count."""
        with pytest.raises(InvalidProof):
            pietrzak.verify(pietrzak_proof["challenge"], 1002, pietrzak_proof["solution"])

    def test_wrong_challenge(self, pietrzak, pietrzak_proof):
        """Test that the proof fails under another challenge's discriminant."""
        with pytest.raises(InvalidProof):
            pietrzak.verify(b"\xab", pietrzak_proof["difficulty"], pietrzak_proof["solution"])

    def test_odd_difficulty_is_invalid_proof(self, pietrzak, pietrzak_proof):
        """Test that an odd difficulty surfaces as an invalid proof."""
        with pytest.raises(InvalidProof):
            pietrzak.verify(pietrzak_proof["challenge"], 999, pietrzak_proof["solution"])

    @pytest.mark.parametrize("element", range(4), ids=["y", "mu0", "mu1", "mu2"])
    def test_flipped_bit_in_each_element(self, pietrzak, pietrzak_proof, element):
        """Test that flipping the low bit of y or any mu breaks the proof."""
        tampered = bytearray(pietrzak_proof["solution"])
        tampered[(element + 1) * ELEMENT_SIZE - 1] ^= 0x01
        with pytest.raises(InvalidProof):
            pietrzak.verify(
                pietrzak_proof["challenge"], pietrzak_proof["difficulty"], bytes(tampered)
            )


class TestSolveVerify:
    """Tests for proof layout and structural rejections."""

    @pytest.mark.parametrize(("difficulty", "mu_count"), [(66, 0), (200, 1), (1000, 3)])
    def test_proof_layout(self, pietrzak, difficulty, mu_count):
        """Test that a proof is y plus one mu per halving round."""
        solution = pietrzak.solve(b"layout", difficulty)
        assert len(solution) == ELEMENT_SIZE * (1 + mu_count)
        pietrzak.verify(b"layout", difficulty, solution)

    def test_dropped_mu(self, pietrzak, pietrzak_proof):
        """Test that a proof missing its last mu is rejected."""
        with pytest.raises(InvalidProof):
            pietrzak.verify(
                pietrzak_proof["challenge"],
                pietrzak_proof["difficulty"],
                pietrzak_proof["solution"][:-ELEMENT_SIZE],
            )

    def test_swapped_mu(self, pietrzak, pietrzak_proof):
        """Test that reordering the mu values is rejected."""
        solution = pietrzak_proof["solution"]
        y = solution[:ELEMENT_SIZE]
        mus = [
            solution[offset : offset + ELEMENT_SIZE]
            for offset in range(ELEMENT_SIZE, len(solution), ELEMENT_SIZE)
        ]
        mus[0], mus[1] = mus[1], mus[0]
        with pytest.raises(InvalidProof):
            pietrzak.verify(
                pietrzak_proof["challenge"], pietrzak_proof["difficulty"], y + b"".join(mus)
            )

    def test_extra_mu(self, pietrzak, pietrzak_proof):
        """Test that trailing elements beyond the schedule are rejected."""
        solution = pietrzak_proof["solution"] + pietrzak_proof["solution"][-ELEMENT_SIZE:]
        with pytest.raises(InvalidProof):
            pietrzak.verify(pietrzak_proof["challenge"], pietrzak_proof["difficulty"], solution)

    @pytest.mark.parametrize(
        "solution",
        [b"", b"\x00" * ELEMENT_SIZE, b"\x01" * (ELEMENT_SIZE - 1)],
        ids=["empty", "zeros", "short"],
    )
    def test_malformed_solution(self, pietrzak, solution):
        """Test that undecodable blobs are rejected."""
        with pytest.raises(InvalidProof):
            pietrzak.verify(b"\xaa", 100, solution)


class TestReferenceVector:
    """The host's published vector for challenge 0xaa.

    Its y is not a form of discriminant create_discriminant(b"\\xaa", 512):
    b^2 - D is not divisible by 4a, so no prover over that discriminant can
    produce it.
    """

    def test_y_does_not_belong_to_derived_discriminant(self, reference_vector):
        """Test that decoding y against the derived discriminant fails."""
        discriminant = create_discriminant(reference_vector["challenge"], 512)
        with pytest.raises(ValueError, match="not divisible by 4a"):
            ClassGroup.from_bytes(reference_vector["solution"], discriminant)

    @pytest.mark.xfail(
        raises=InvalidProof,
        strict=True,
        reason="vector comes from a prover whose discriminant for 0xaa differs",
    )
    def test_verifies(self, pietrzak, reference_vector):
        """Test that the published vector verifies."""
        pietrzak.verify(
            reference_vector["challenge"],
            reference_vector["difficulty"],
            reference_vector["solution"],
        )
