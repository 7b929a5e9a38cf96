"""
Poseidon 스펀지 파라미터 생성
===============================

Poseidon 순열(permutation)을 구성하는 고정 파라미터를 만든다.
필드와 몇 개의 보안 상수에만 의존하는 순수 함수이며, 상태가 없다.

**고정 상수**:
  | 이름            | 값 | 의미                                  |
  |-----------------|----|---------------------------------------|
  | FULL_ROUNDS     | 8  | 전체 라운드 R_F (앞 4 + 뒤 4)          |
  | PARTIAL_ROUNDS  | 57 | 부분 라운드 R_P (S-box는 state[0]만)  |
  | ALPHA           | 5  | S-box 지수 x^5                         |
  | RATE            | 2  | 흡수/추출 가능한 셀 수                 |
  | CAPACITY        | 1  | 보안용 숨김 셀 수                      |

**상수 생성 절차** (find_poseidon_ark_and_mds):
  1. Grain LFSR을 (필드 비트 크기, 너비 rate+1, R_F, R_P)로 초기화
  2. 라운드 상수: (R_F + R_P)행 × (rate+1)열, 거부 샘플링
  3. MDS 행렬: skip_matrices개 블록을 건너뛴 뒤 xs, ys를 뽑아
     코시(Cauchy) 행렬 mds[i][j] = 1 / (xs[i] + ys[j]) 구성

사용 예시:
    >>> config = poseidon_setup(FR)
    >>> len(config.ark)   # 65
    >>> len(config.mds)   # 3
"""

import logging

from zkmatmul.r1cs.field import FR, modulus_bit_size
from zkmatmul.sponge.grain_lfsr import PoseidonGrainLFSR

logger = logging.getLogger(__name__)


FULL_ROUNDS = 8
PARTIAL_ROUNDS = 57
ALPHA = 5
RATE = 2
CAPACITY = 1


class PoseidonConfig:
    """Poseidon 순열 파라미터.

    속성:
        full_rounds: 전체 라운드 수 R_F
        partial_rounds: 부분 라운드 수 R_P
        alpha: S-box 지수
        ark: 라운드 상수, (R_F + R_P) × (rate + capacity)
        mds: MDS 행렬, (rate + capacity) × (rate + capacity)
        rate: 흡수율
        capacity: 용량
        field: 필드 클래스
    """

    def __init__(self, full_rounds, partial_rounds, alpha, ark, mds, rate, capacity, field=FR):
        self.full_rounds = full_rounds
        self.partial_rounds = partial_rounds
        self.alpha = alpha
        self.ark = ark
        self.mds = mds
        self.rate = rate
        self.capacity = capacity
        self.field = field

    @property
    def width(self):
        """상태 너비 t = rate + capacity."""
        return self.rate + self.capacity

    def validate(self):
        """파라미터 모양과 값의 기본 조건을 확인한다.

        Raises:
            ValueError: 조건을 만족하지 않을 때
        """
        if self.rate < 1 or self.capacity < 1:
            raise ValueError("rate와 capacity는 1 이상이어야 합니다")
        if self.full_rounds % 2 != 0:
            raise ValueError("전체 라운드 수는 짝수여야 합니다 (앞/뒤 절반)")
        if self.alpha < 3 or self.alpha % 2 == 0:
            raise ValueError("alpha는 3 이상의 홀수여야 합니다")
        t = self.width
        if len(self.mds) != t or any(len(row) != t for row in self.mds):
            raise ValueError(f"MDS 행렬은 {t}×{t}이어야 합니다")
        rounds = self.full_rounds + self.partial_rounds
        if len(self.ark) != rounds or any(len(row) != t for row in self.ark):
            raise ValueError(f"라운드 상수는 {rounds}×{t}이어야 합니다")


def find_poseidon_ark_and_mds(field, prime_bits, rate, full_rounds, partial_rounds,
                              skip_matrices=0):
    """Grain LFSR로 라운드 상수와 MDS 행렬을 생성한다.

    Args:
        field: 필드 클래스
        prime_bits: 필드 비트 크기
        rate: 흡수율 (상태 너비는 rate + 1)
        full_rounds: 전체 라운드 수
        partial_rounds: 부분 라운드 수
        skip_matrices: 건너뛸 MDS 후보 블록 수

    Returns:
        tuple: (ark, mds): 필드 원소의 2차원 리스트
    """
    width = rate + 1
    lfsr = PoseidonGrainLFSR(False, prime_bits, width, full_rounds, partial_rounds)

    ark = []
    for _ in range(full_rounds + partial_rounds):
        ark.append(lfsr.get_field_elements_rejection_sampling(field, width))

    for _ in range(skip_matrices):
        lfsr.get_field_elements_mod_p(field, 2 * width)

    xs = lfsr.get_field_elements_mod_p(field, width)
    ys = lfsr.get_field_elements_mod_p(field, width)

    # 코시 행렬: xs, ys가 무작위이므로 xs[i] + ys[j] = 0일 확률은 무시할 만하다
    mds = [[field(1) / (xs[i] + ys[j]) for j in range(width)] for i in range(width)]

    return ark, mds


def poseidon_setup(field=FR):
    """회로 트랜스크립트용 Poseidon 파라미터를 생성한다.

    Args:
        field: 필드 클래스 (기본값: bn128 스칼라 필드 FR)

    Returns:
        PoseidonConfig: R_F=8, R_P=57, α=5, rate=2, capacity=1
    """
    ark, mds = find_poseidon_ark_and_mds(
        field,
        modulus_bit_size(field),
        RATE,
        FULL_ROUNDS,
        PARTIAL_ROUNDS,
        0,
    )
    config = PoseidonConfig(
        full_rounds=FULL_ROUNDS,
        partial_rounds=PARTIAL_ROUNDS,
        alpha=ALPHA,
        ark=ark,
        mds=mds,
        rate=RATE,
        capacity=CAPACITY,
        field=field,
    )
    config.validate()
    logger.debug(f"Poseidon parameters generated for {modulus_bit_size(field)}-bit field")
    return config
