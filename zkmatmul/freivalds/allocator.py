"""
행렬 변수 할당 (Circuit Variable Allocator)
=============================================

정수 행렬의 각 원소를 필드 원소로 변환하여 회로 변수로 할당한다.

  | 행렬 | 역할          | 할당 함수            |
  |------|---------------|----------------------|
  | A    | 비공개 위트니스 | FpVar.new_witness   |
  | B    | 비공개 위트니스 | FpVar.new_witness   |
  | C    | 공개 입력      | FpVar.new_input     |

할당 순서는 행 우선(row-major)으로 고정되어 있다.
이 순서가 트랜스크립트 흡수 순서와 챌린지 값을 결정한다.

빌드 설정 검증(k, 행렬 모양, 원소 범위)도 이 모듈에서 한다.
검증은 제약을 하나도 만들기 전에 끝난다.
"""

from enum import Enum

from zkmatmul.r1cs.errors import ConfigurationError
from zkmatmul.r1cs.field import to_field
from zkmatmul.r1cs.fp_var import FpVar


class Role(Enum):
    """회로 변수의 역할."""
    WITNESS = "witness"
    INPUT = "input"


def validate_matrix(matrix, name, n=None):
    """N×N 정사각 행렬인지, 원소가 음이 아닌 정수인지 확인한다.

    Args:
        matrix: 정수 리스트의 리스트
        name: 오류 메시지용 행렬 이름
        n: 기대 차원 (None이면 행 수로 결정)

    Returns:
        int: 차원 N

    Raises:
        ConfigurationError: 빈 행렬, 정사각이 아님, 차원 불일치, 잘못된 원소
    """
    if not isinstance(matrix, (list, tuple)) or len(matrix) == 0:
        raise ConfigurationError(f"행렬 {name}은(는) 비어 있지 않은 리스트여야 합니다")
    size = len(matrix) if n is None else n
    if len(matrix) != size:
        raise ConfigurationError(f"행렬 {name}의 차원 {len(matrix)}이(가) {size}와 다릅니다")
    for i, row in enumerate(matrix):
        if not isinstance(row, (list, tuple)) or len(row) != size:
            raise ConfigurationError(f"행렬 {name}의 {i}번째 행 길이가 {size}가 아닙니다")
        for value in row:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(
                    f"행렬 {name}의 원소는 음이 아닌 정수여야 합니다: {value!r}"
                )
    return size


def validate_inputs(k, a, b, c):
    """빌드 입력 전체를 검증한다.

    Returns:
        int: 공통 차원 N

    Raises:
        ConfigurationError: k < 1 이거나 행렬이 잘못되었을 때
    """
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ConfigurationError(f"라운드 수 k는 1 이상의 정수여야 합니다: {k!r}")
    n = validate_matrix(a, "A")
    validate_matrix(b, "B", n)
    validate_matrix(c, "C", n)
    return n


def allocate_matrix(cs, matrix, role):
    """행렬 원소를 행 우선 순서로 회로 변수에 할당한다.

    Args:
        cs: ConstraintSystem
        matrix: N×N 정수 행렬
        role: Role.WITNESS 또는 Role.INPUT

    Returns:
        list[list[FpVar]]: 할당된 변수 행렬

    Raises:
        ConfigurationError: 알 수 없는 역할
        AllocationError: 제약 시스템이 변수를 받을 수 없을 때 (즉시 전파)
    """
    if role == Role.WITNESS:
        new_variable = FpVar.new_witness
    elif role == Role.INPUT:
        new_variable = FpVar.new_input
    else:
        raise ConfigurationError(f"알 수 없는 변수 역할: {role!r}")

    return [
        [new_variable(cs, lambda v=value: to_field(cs.field, v)) for value in row]
        for row in matrix
    ]
