"""
Freivalds 검사 (네이티브 참조 구현)
====================================

회로를 만들지 않고 같은 트랜스크립트 규칙으로 챌린지를 도출하여
Freivalds 검사를 직접 수행한다.

  - derive_challenges: 회로와 동일한 흡수 순서/추출 일정으로 r₀..r_{k-1} 계산
  - freivalds_check:   각 rᵢ에 대해 A·(B·rᵢ) == C·rᵢ 확인

회로의 is_satisfied() 결과는 항상 freivalds_check()와 일치해야 한다.

사용 예시:
    >>> freivalds_check(1, [[1, 2], [3, 4]], [[5, 6], [7, 8]], [[19, 22], [43, 50]])
    True
"""

from zkmatmul.r1cs.field import FR, to_field
from zkmatmul.sponge.params import poseidon_setup
from zkmatmul.sponge.native import PoseidonSponge
from zkmatmul.freivalds.allocator import validate_inputs


def matrix_vector_product(matrix, vector, field=FR):
    """필드 위의 행렬-벡터 곱."""
    result = []
    for row in matrix:
        acc = field(0)
        for entry, x in zip(row, vector):
            acc = acc + to_field(field, entry) * x
        result.append(acc)
    return result


def derive_challenges(k, a, b, c, field=FR, config=None):
    """회로와 같은 규칙으로 k개의 챌린지 벡터를 도출한다.

    Args:
        k: 라운드 수
        a, b, c: N×N 정수 행렬
        field: 필드 클래스
        config: PoseidonConfig (None이면 poseidon_setup(field))

    Returns:
        list[list[field]]: k개의 길이 N 챌린지 벡터
    """
    n = validate_inputs(k, a, b, c)
    sponge = PoseidonSponge(config or poseidon_setup(field))

    for matrix in (a, b, c):
        for row in matrix:
            for value in row:
                sponge.absorb(to_field(field, value))

    challenges = []
    for _ in range(k):
        r = []
        for _ in range(n):
            r.extend(sponge.squeeze_native_field_elements(1))
        challenges.append(r)
    return challenges


def freivalds_check(k, a, b, c, field=FR, challenges=None):
    """회로 밖에서 Freivalds 검사를 수행한다.

    Args:
        challenges: 이미 도출한 챌린지 벡터 (None이면 derive_challenges로 도출)

    Returns:
        bool: 모든 라운드에서 A·(B·r) == C·r이면 True
    """
    if challenges is None:
        challenges = derive_challenges(k, a, b, c, field)
    else:
        validate_inputs(k, a, b, c)
    for r in challenges:
        br = matrix_vector_product(b, r, field)
        abr = matrix_vector_product(a, br, field)
        cr = matrix_vector_product(c, r, field)
        if abr != cr:
            return False
    return True
