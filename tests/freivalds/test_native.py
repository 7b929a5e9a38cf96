"""
Native Freivalds reference tests
"""
import pytest

from zkmatmul.r1cs.field import FR, FR381, FQBase
from zkmatmul.r1cs.errors import ConfigurationError
from zkmatmul.sponge.native import PoseidonSponge
from zkmatmul.freivalds.native import (
    matrix_vector_product,
    derive_challenges,
    freivalds_check,
)


class TestMatrixVectorProduct:
    def test_product(self):
        result = matrix_vector_product([[1, 2], [3, 4]], [FR(5), FR(6)])
        assert result == [FR(17), FR(39)]

    def test_wraps_modulus(self):
        result = matrix_vector_product([[FR.field_modulus - 1]], [FR(2)])
        assert result == [FR(-2)]


class TestDeriveChallenges:
    def test_shape(self, example_matrices):
        challenges = derive_challenges(3, *example_matrices)
        assert len(challenges) == 3
        assert all(len(r) == 2 for r in challenges)

    def test_deterministic(self, example_matrices):
        assert derive_challenges(1, *example_matrices) == derive_challenges(1, *example_matrices)

    def test_rounds_extend_prefix(self, example_matrices):
        """k를 늘려도 앞 라운드의 챌린지는 같다"""
        one = derive_challenges(1, *example_matrices)
        two = derive_challenges(2, *example_matrices)
        assert two[0] == one[0]
        assert two[1] != two[0]

    def test_bound_to_public_matrix(self, example_matrices, tampered_matrices):
        """C도 흡수되므로 C가 바뀌면 챌린지도 바뀐다"""
        assert derive_challenges(1, *example_matrices) != derive_challenges(1, *tampered_matrices)

    def test_absorption_order(self, poseidon_config, example_matrices):
        """A 행 우선 → B 행 우선 → C 행 우선, 원소마다 한 번씩 추출"""
        a, b, c = example_matrices
        sponge = PoseidonSponge(poseidon_config)
        for value in [1, 2, 3, 4, 5, 6, 7, 8, 19, 22, 43, 50]:
            sponge.absorb(FR(value))
        expected = sponge.squeeze_native_field_elements(1) + sponge.squeeze_native_field_elements(1)
        assert derive_challenges(1, a, b, c, config=poseidon_config) == [expected]

    def test_depends_on_field(self, example_matrices):
        base = derive_challenges(1, *example_matrices, field=FQBase)
        assert all(isinstance(x, FQBase) for x in base[0])
        assert [int(x) for x in base[0]] != [int(x) for x in derive_challenges(1, *example_matrices)[0]]

    def test_invalid_rounds(self, example_matrices):
        with pytest.raises(ConfigurationError):
            derive_challenges(0, *example_matrices)


class TestFreivaldsCheck:
    def test_valid(self, example_matrices):
        assert freivalds_check(1, *example_matrices)
        assert freivalds_check(3, *example_matrices)

    def test_tampered(self, tampered_matrices):
        assert not freivalds_check(1, *tampered_matrices)

    def test_other_field(self, example_matrices, tampered_matrices):
        assert freivalds_check(1, *example_matrices, field=FR381)
        assert not freivalds_check(1, *tampered_matrices, field=FR381)

    def test_uses_given_challenges(self, tampered_matrices):
        """미리 도출한 챌린지를 넘기면 다시 도출하지 않고 그 값으로 검사한다"""
        challenges = derive_challenges(2, *tampered_matrices)
        assert not freivalds_check(2, *tampered_matrices, challenges=challenges)
        # r = 0이면 어떤 행렬도 통과한다
        assert freivalds_check(1, *tampered_matrices, challenges=[[FR(0), FR(0)]])

    def test_given_challenges_still_validated(self, example_matrices):
        with pytest.raises(ConfigurationError):
            freivalds_check(0, *example_matrices, challenges=[])
