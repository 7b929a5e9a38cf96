"""
Poseidon 스펀지 가젯: 회로 안 Fiat-Shamir 트랜스크립트
=========================================================

네이티브 PoseidonSponge와 똑같은 듀플렉스 규칙으로 동작하지만,
상태 셀이 FpVar이므로 순열의 모든 S-box가 R1CS 제약으로 기록된다.

**Fiat-Shamir 변환**:
  대화식 Freivalds 검사에서는 검증자가 무작위 벡터 r을 보낸다.
  비대화식 회로에서는 검증자가 없으므로, 증명자가 A, B, C를 모두
  스펀지에 흡수한 뒤 추출(squeeze)한 값을 r로 사용한다.
  - 같은 입력을 같은 순서로 흡수하면 항상 같은 챌린지가 나온다.
  - 추출 값은 흡수한 모든 값의 결정론적 함수로 제약된다.
  - 따라서 증명자는 r을 보고 나서 A, B를 바꿀 수 없다.

**제약 비용** (rate=2, capacity=1, R_F=8, R_P=57, α=5):
  순열 1회 = S-box (8·3 + 57) = 81개 × 곱셈 3개 = 243개 제약
  ARK, MDS, 흡수는 선형이므로 제약이 없다.

**추출 값의 실체화**:
  squeeze_field_elements()는 각 출력 셀을 새 위트니스 변수로 할당하고
  셀과 같다는 제약을 추가한다. 챌린지의 구체적인 값이 필요하므로
  SETUP 모드에서는 AssignmentMissing이 발생한다.

사용 예시:
    >>> cs = ConstraintSystem()
    >>> transcript = PoseidonSpongeVar(cs, poseidon_setup(FR))
    >>> transcript.absorb(FpVar.new_witness(cs, lambda: 7))
    >>> r = transcript.squeeze_field_elements(2)   # FpVar 2개
"""

from py_ecc.fields.field_elements import FQ

from zkmatmul.r1cs.errors import SynthesisError, AssignmentMissing
from zkmatmul.r1cs.fp_var import FpVar
from zkmatmul.sponge.native import PoseidonSponge


class PoseidonSpongeVar(PoseidonSponge):
    """회로 안 Poseidon 스펀지 (트랜스크립트).

    속성:
        cs: 제약을 기록할 ConstraintSystem
        config: PoseidonConfig
        state: FpVar 상태 셀 리스트
    """

    def __init__(self, cs, config):
        self.cs = cs
        super().__init__(config)

    def _zero(self):
        return FpVar.zero(self.config.field)

    def _sbox(self, x):
        return x.pow_by_constant(self.config.alpha)

    def _coerce_input(self, element):
        if isinstance(element, (int, FQ)):
            return FpVar.constant(element, self.config.field)
        if not isinstance(element, FpVar):
            raise SynthesisError(f"흡수할 수 없는 값: {element!r}")
        if element.cs is not None and element.cs is not self.cs:
            raise SynthesisError("다른 제약 시스템의 변수는 흡수할 수 없습니다")
        return element

    def absorb(self, elements):
        """FpVar(또는 리스트)를 흡수한다.

        Raises:
            SynthesisError: finalize된 제약 시스템이거나 다른 시스템의 변수일 때
        """
        if self.cs.is_finalized:
            raise SynthesisError("finalize된 제약 시스템의 트랜스크립트에는 흡수할 수 없습니다")
        super().absorb(elements)

    def squeeze_field_elements(self, count):
        """count개의 챌린지를 추출한다.

        Returns:
            list[FpVar]: 새 위트니스 변수로 실체화된 챌린지

        Raises:
            AssignmentMissing: SETUP 모드 (구체적인 챌린지 값을 도출할 수 없음)
        """
        if self.cs.is_in_setup_mode():
            raise AssignmentMissing("SETUP 모드에서는 트랜스크립트 챌린지를 도출할 수 없습니다")

        challenges = []
        for cell in self._squeeze(count):
            challenge = FpVar.new_witness(self.cs, cell.value)
            challenge.enforce_equal(cell)
            challenges.append(challenge)
        return challenges
