"""
Freivalds 행렬 곱 회로 빌더: 오케스트레이터
==============================================

비공개 정사각 행렬 A, B와 공개 행렬 C에 대해 "A·B = C를 안다"를
증명하는 R1CS 제약 시스템을 만든다.

**빌드 흐름** (단일 패스, 순서 고정):

  ┌─────────────────────────────────────────────────────┐
  │  1. Poseidon 파라미터 생성 (R_F=8, R_P=57, α=5)      │
  ├─────────────────────────────────────────────────────┤
  │  2. 변수 할당                                        │
  │     A, B → 위트니스 / C → 공개 입력 (행 우선)        │
  ├─────────────────────────────────────────────────────┤
  │  3. 트랜스크립트 흡수: A 전체 → B 전체 → C 전체      │
  ├─────────────────────────────────────────────────────┤
  │  4. k 라운드 Freivalds 검사 (순서대로)               │
  │     r ← squeeze, A·(B·r) == C·r 강제                │
  ├─────────────────────────────────────────────────────┤
  │  5. finalize: 잠금 + 희소 행렬 계산                  │
  └─────────────────────────────────────────────────────┘

**오류**:
  설정 오류는 ConfigurationError로 제약 생성 전에 거부된다.
  할당/합성/값 누락 오류는 그대로 호출자에게 전파되며 부분 결과는 없다.
  틀린 행렬은 오류가 아니라 만족 불가능한 시스템을 만든다.

사용 예시:
    >>> from zkmatmul.freivalds import build
    >>> cs = build(1, [[1, 2], [3, 4]], [[5, 6], [7, 8]], [[19, 22], [43, 50]])
    >>> cs.is_satisfied()  # True
"""

import logging

from zkmatmul.r1cs.field import FR
from zkmatmul.r1cs.constraint_system import ConstraintSystem, SynthesisMode
from zkmatmul.sponge.params import poseidon_setup
from zkmatmul.sponge.gadget import PoseidonSpongeVar
from zkmatmul.freivalds import rounds
from zkmatmul.freivalds.allocator import Role, allocate_matrix, validate_inputs

logger = logging.getLogger(__name__)


class BuilderState:
    """빌드 단계 간에 공유되는 상태.

    속성:
        k: 라운드 수
        n: 행렬 차원 N
        cs: ConstraintSystem (이 빌드가 독점 소유)
        config: PoseidonConfig
        transcript: PoseidonSpongeVar (이 빌드가 독점 소유)
        a_vars, b_vars, c_vars: 할당된 FpVar 행렬
    """

    def __init__(self, k, n, cs, config):
        self.k = k
        self.n = n
        self.cs = cs
        self.config = config
        self.transcript = PoseidonSpongeVar(cs, config)

        self.a_vars = None
        self.b_vars = None
        self.c_vars = None


def absorb_matrices(state):
    """A, B, C의 모든 원소를 행 우선 순서로 트랜스크립트에 흡수한다.

    A, B는 증명자가 고르는 값이고, C도 인스턴스의 일부로서 흡수하여
    챌린지를 문장 전체에 묶는다.
    """
    for matrix_vars in (state.a_vars, state.b_vars, state.c_vars):
        for row in matrix_vars:
            for var in row:
                state.transcript.absorb(var)


def build(k, a, b, c, field=FR, mode=SynthesisMode.PROVE):
    """Freivalds 회로를 구성하고 finalize된 제약 시스템을 반환한다.

    Args:
        k: Freivalds 라운드 수 (1 이상)
        a: 비공개 N×N 정수 행렬
        b: 비공개 N×N 정수 행렬
        c: 공개 N×N 정수 행렬
        field: 회로 필드 클래스 (기본값: bn128 스칼라 필드 FR).
            bn128 기저 필드 위의 챌린지가 필요하면 FQBase를 넘긴다.
            필드가 다르면 Poseidon 상수와 챌린지도 달라진다.
        mode: SynthesisMode (기본값: PROVE)

    Returns:
        ConstraintSystem: finalize된 제약 시스템

    Raises:
        ConfigurationError: k < 1, 행렬 모양/원소 오류
        AllocationError, SynthesisError, AssignmentMissing: 합성 중 오류
    """
    n = validate_inputs(k, a, b, c)
    logger.info(f"Building Freivalds circuit: n={n}, k={k}, mode={mode.value}")

    cs = ConstraintSystem(field)
    cs.set_mode(mode, construct_matrices=True)

    # ── 1. 스펀지 파라미터 ──
    state = BuilderState(k, n, cs, poseidon_setup(field))

    # ── 2. 변수 할당 ──
    state.a_vars = allocate_matrix(cs, a, Role.WITNESS)
    state.b_vars = allocate_matrix(cs, b, Role.WITNESS)
    state.c_vars = allocate_matrix(cs, c, Role.INPUT)

    # ── 3. 트랜스크립트 흡수 ──
    absorb_matrices(state)

    # ── 4. k 라운드 ──
    for round_index in range(k):
        rounds.execute(state, round_index)

    # ── 5. finalize ──
    cs.finalize()
    logger.info(
        f"Freivalds circuit built: {cs.num_constraints} constraints, "
        f"{cs.num_witness_variables} witness variables"
    )
    return cs
