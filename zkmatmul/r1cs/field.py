"""
회로 기반 모듈: 유한체(Finite Field)
======================================

이 모듈은 회로 전체에서 사용되는 기본 대수적 도구를 정의한다.

**유한체 FR**:
  bn128(BN254) 타원곡선의 스칼라 필드 (scalar field). 행렬 원소, 챌린지,
  중간 곱셈 결과 등 모든 회로 값은 이 필드 위에 있다.
  - 위수(order) p ≈ 2^254, 소수체(prime field)
  - 비트 크기 254 → Poseidon 상수 생성(Grain LFSR)의 입력으로 사용

**유한체 FR381**:
  BLS12-381 곡선의 스칼라 필드 (비트 크기 255).
  같은 회로를 다른 필드 위에서 구성할 때 사용한다.

**유한체 FQBase**:
  bn128 곡선의 기저 필드 (비트 크기 254). G1 좌표 필드 위의 회로용.

사용 예시:
    >>> from zkmatmul.r1cs.field import FR
    >>> a = FR(3)
    >>> b = FR(7)
    >>> c = a * b        # FR(21)
    >>> modulus_bit_size(FR)  # 254
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc.fields import bls12_381_FQ as FQ381
from py_ecc import bn128
from py_ecc import bls12_381


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field)
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    bn128.curve_order (≈ 2^254) 위의 모듈러 산술을 지원한다.
    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    속성:
        field_modulus: bn128 곡선 위수 (소수 p)

    예시:
        >>> x = FR(3)
        >>> x * x          # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


class FR381(FQ381):
    """bls12_381 스칼라 필드 위의 유한체 원소."""
    field_modulus = bls12_381.curve_order


class FQBase(FQ):
    """bn128 기저 필드(base field) 위의 유한체 원소.

    G1 좌표가 속한 필드 (위수 bn128.field_modulus, 254비트).
    기저 필드 위에서 회로를 구성한 다른 구현의 챌린지와 맞출 때 사용한다.
    """
    field_modulus = bn128.field_modulus


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order


def modulus_bit_size(field):
    """필드 위수의 비트 길이를 반환한다.

    Args:
        field: FR 같은 필드 원소 클래스

    Returns:
        int: 위수의 비트 수 (bn128: 254, bls12_381: 255)
    """
    return field.field_modulus.bit_length()


def to_field(field, value):
    """정수 또는 필드 원소를 주어진 필드의 원소로 변환한다.

    다른 필드 클래스의 원소는 정수 값을 거쳐 다시 축소(reduce)한다.

    Args:
        field: 대상 필드 클래스
        value: int 또는 FQ 원소

    Returns:
        field 원소
    """
    if isinstance(value, field):
        return value
    return field(int(value) % field.field_modulus)
