"""
R1CS 제약 시스템 (Rank-1 Constraint System)
=============================================

회로를 "변수 + 쌍선형 등식 제약"의 집합으로 표현한다.

**R1CS 제약 구조**:
  각 제약은 세 개의 선형결합(linear combination) a, b, c로 구성:

    <a, z> · <b, z> = <c, z>

  여기서 z = (1, 공개 입력..., 위트니스...)는 전체 변수 할당 벡터이다.

**변수 종류**:
  | 종류      | 의미                                      |
  |-----------|-------------------------------------------|
  | instance  | 공개 입력 (검증자에게 공개됨). 0번은 상수 1 |
  | witness   | 비공개 위트니스 (증명자만 앎)              |

**합성 모드 (SynthesisMode)**:
  - PROVE: 변수마다 구체적인 값을 저장한다. is_satisfied() 사용 가능.
  - SETUP: 회로의 형태(shape)만 구성한다. 값이 필요한 연산은
           AssignmentMissing을 발생시킨다.

**수명 주기**:
  변수와 제약은 단조 증가(monotonic)로만 추가된다.
  finalize() 이후에는 잠겨서 더 이상 변수/제약을 받지 않으며,
  증명 백엔드가 사용할 희소(sparse) 행렬 A, B, C가 계산된다.

사용 예시:
    >>> cs = ConstraintSystem()
    >>> x = cs.new_witness_variable(lambda: 3)
    >>> y = cs.new_input_variable(lambda: 9)
    >>> lx = LinearCombination.from_variable(x)
    >>> cs.enforce_constraint(lx, lx, LinearCombination.from_variable(y))
    >>> cs.is_satisfied()  # True
"""

import logging
from collections import namedtuple
from enum import Enum

from zkmatmul.r1cs.field import FR, to_field
from zkmatmul.r1cs.errors import SynthesisError, AllocationError, AssignmentMissing

logger = logging.getLogger(__name__)


INSTANCE = "instance"
WITNESS = "witness"

# 제약 시스템 안의 변수: (종류, 인덱스)
Variable = namedtuple("Variable", ["kind", "index"])

# 상수 1 (instance 0번)
ONE = Variable(INSTANCE, 0)


class SynthesisMode(Enum):
    """제약 합성 모드."""
    SETUP = "setup"
    PROVE = "prove"


# ─────────────────────────────────────────────────────────────────────
# 선형결합 (Linear Combination)
# ─────────────────────────────────────────────────────────────────────

class LinearCombination:
    """변수들의 선형결합 Σ coeffᵢ · varᵢ.

    속성:
        field: 계수가 속한 필드 클래스
        terms: Variable → 필드 계수 딕셔너리 (계수 0인 항은 저장하지 않음)
    """

    def __init__(self, field=FR, terms=None):
        self.field = field
        self.terms = dict(terms) if terms else {}

    @classmethod
    def from_variable(cls, var, field=FR, coeff=1):
        """단일 변수 coeff · var."""
        coeff = to_field(field, coeff)
        if coeff == 0:
            return cls(field)
        return cls(field, {var: coeff})

    @classmethod
    def constant(cls, value, field=FR):
        """상수 value · ONE."""
        return cls.from_variable(ONE, field, value)

    def __len__(self):
        return len(self.terms)

    def __repr__(self):
        body = " + ".join(
            f"{int(coeff)}·{var.kind[0]}{var.index}" for var, coeff in self.terms.items()
        )
        return f"LC({body or '0'})"

    def __add__(self, other):
        terms = dict(self.terms)
        for var, coeff in other.terms.items():
            if var in terms:
                total = terms[var] + coeff
                if total == 0:
                    del terms[var]
                else:
                    terms[var] = total
            else:
                terms[var] = coeff
        return LinearCombination(self.field, terms)

    def __neg__(self):
        return LinearCombination(
            self.field, {var: -coeff for var, coeff in self.terms.items()}
        )

    def __sub__(self, other):
        return self + (-other)

    def scale(self, coeff):
        """모든 계수에 coeff를 곱한 새 선형결합."""
        coeff = to_field(self.field, coeff)
        if coeff == 0:
            return LinearCombination(self.field)
        return LinearCombination(
            self.field, {var: c * coeff for var, c in self.terms.items()}
        )

    def is_constant(self):
        """ONE 이외의 변수를 포함하지 않으면 True (빈 결합 포함)."""
        return all(var == ONE for var in self.terms)

    def constant_term(self):
        """ONE의 계수 (없으면 0)."""
        return self.terms.get(ONE, self.field(0))

    def evaluate(self, value_of):
        """변수 값 조회 함수 value_of로 선형결합을 평가한다."""
        total = self.field(0)
        for var, coeff in self.terms.items():
            total = total + coeff * value_of(var)
        return total


# ─────────────────────────────────────────────────────────────────────
# 제약 행렬 (finalize 결과)
# ─────────────────────────────────────────────────────────────────────

class ConstraintMatrices:
    """finalize()가 계산하는 희소 R1CS 행렬.

    열(column) 배치: [instance 0..m-1 | witness 0..w-1]
    각 행은 (계수, 열 인덱스) 튜플 리스트이다.

    속성:
        a, b, c: 제약 수만큼의 희소 행 리스트
        num_instance_variables: 공개 변수 수 (상수 1 포함)
        num_witness_variables: 위트니스 변수 수
        num_constraints: 제약 수
    """

    def __init__(self, a, b, c, num_instance_variables, num_witness_variables):
        self.a = a
        self.b = b
        self.c = c
        self.num_instance_variables = num_instance_variables
        self.num_witness_variables = num_witness_variables
        self.num_constraints = len(a)

    @property
    def a_num_non_zero(self):
        return sum(len(row) for row in self.a)

    @property
    def b_num_non_zero(self):
        return sum(len(row) for row in self.b)

    @property
    def c_num_non_zero(self):
        return sum(len(row) for row in self.c)


# ─────────────────────────────────────────────────────────────────────
# 제약 시스템
# ─────────────────────────────────────────────────────────────────────

class ConstraintSystem:
    """변수와 R1CS 제약을 누적하는 제약 시스템.

    하나의 빌드 호출이 독점적으로 소유한다. 빌드 간에 공유하지 않는다.

    속성:
        field: 회로 필드 클래스
        mode: SynthesisMode
        construct_matrices: finalize() 시 희소 행렬을 계산할지 여부
        instance_assignment: 공개 변수 값 리스트 (0번은 상수 1)
        witness_assignment: 위트니스 값 리스트
        constraints: (a, b, c, label) 튜플 리스트
        matrices: finalize() 이후의 ConstraintMatrices (또는 None)
        is_finalized: 잠금 여부
    """

    def __init__(self, field=FR, mode=SynthesisMode.PROVE, construct_matrices=True):
        self.field = field
        self.mode = mode
        self.construct_matrices = construct_matrices
        self.instance_assignment = [field(1)]
        self.witness_assignment = []
        self.num_instance_variables = 1
        self.num_witness_variables = 0
        self.constraints = []
        self.matrices = None
        self.is_finalized = False

    @property
    def num_constraints(self):
        """지금까지 추가된 제약 수."""
        return len(self.constraints)

    def set_mode(self, mode, construct_matrices=True):
        """합성 모드를 설정한다. 변수를 할당하기 전에만 가능하다."""
        if self.is_finalized:
            raise SynthesisError("finalize된 제약 시스템의 모드는 바꿀 수 없습니다")
        if self.num_instance_variables > 1 or self.num_witness_variables > 0:
            raise SynthesisError("변수가 할당된 뒤에는 합성 모드를 바꿀 수 없습니다")
        self.mode = mode
        self.construct_matrices = construct_matrices

    def is_in_setup_mode(self):
        return self.mode == SynthesisMode.SETUP

    # ── 변수 할당 ──

    def _evaluate(self, value_fn):
        value = value_fn()
        if value is None:
            raise AssignmentMissing("변수 값이 할당되지 않았습니다")
        return to_field(self.field, value)

    def new_input_variable(self, value_fn):
        """공개 입력(instance) 변수를 할당한다.

        Args:
            value_fn: 값을 반환하는 함수. SETUP 모드에서는 호출되지 않는다.

        Returns:
            Variable: 새 instance 변수

        Raises:
            AllocationError: finalize 이후 할당 시도
            AssignmentMissing: value_fn이 값을 제공하지 못할 때
        """
        if self.is_finalized:
            raise AllocationError("finalize된 제약 시스템에는 변수를 할당할 수 없습니다")
        if not self.is_in_setup_mode():
            self.instance_assignment.append(self._evaluate(value_fn))
        index = self.num_instance_variables
        self.num_instance_variables += 1
        return Variable(INSTANCE, index)

    def new_witness_variable(self, value_fn):
        """비공개 위트니스 변수를 할당한다. (new_input_variable과 같은 규칙)"""
        if self.is_finalized:
            raise AllocationError("finalize된 제약 시스템에는 변수를 할당할 수 없습니다")
        if not self.is_in_setup_mode():
            self.witness_assignment.append(self._evaluate(value_fn))
        index = self.num_witness_variables
        self.num_witness_variables += 1
        return Variable(WITNESS, index)

    def assigned_value(self, var):
        """변수에 할당된 값을 반환한다.

        Raises:
            AssignmentMissing: SETUP 모드이거나 값이 없을 때
        """
        if self.is_in_setup_mode():
            raise AssignmentMissing("SETUP 모드에는 변수 값이 없습니다")
        assignment = (
            self.instance_assignment if var.kind == INSTANCE else self.witness_assignment
        )
        if var.index >= len(assignment):
            raise AssignmentMissing(f"할당되지 않은 변수: {var}")
        return assignment[var.index]

    # ── 제약 ──

    def enforce_constraint(self, a, b, c, label=None):
        """제약 <a,z>·<b,z> = <c,z>를 추가한다.

        Args:
            a, b, c: LinearCombination
            label: 디버깅용 제약 이름 (which_is_unsatisfied가 반환)

        Raises:
            SynthesisError: finalize 이후 추가 시도
        """
        if self.is_finalized:
            raise SynthesisError("finalize된 제약 시스템에는 제약을 추가할 수 없습니다")
        self.constraints.append((a, b, c, label))

    # ── 마무리 / 검사 ──

    def finalize(self):
        """제약 시스템을 잠그고 희소 행렬을 계산한다. 두 번째 호출은 무시된다."""
        if self.is_finalized:
            return
        if self.construct_matrices:
            self.matrices = self.to_matrices()
        self.is_finalized = True
        logger.debug(
            f"Constraint system finalized: {self.num_constraints} constraints, "
            f"{self.num_instance_variables} instance / "
            f"{self.num_witness_variables} witness variables"
        )

    def _column(self, var):
        if var.kind == INSTANCE:
            return var.index
        return self.num_instance_variables + var.index

    def _sparse_row(self, lc):
        row = [(coeff, self._column(var)) for var, coeff in lc.terms.items()]
        row.sort(key=lambda entry: entry[1])
        return row

    def to_matrices(self):
        """현재 제약들을 ConstraintMatrices로 변환한다."""
        a_rows, b_rows, c_rows = [], [], []
        for a, b, c, _ in self.constraints:
            a_rows.append(self._sparse_row(a))
            b_rows.append(self._sparse_row(b))
            c_rows.append(self._sparse_row(c))
        return ConstraintMatrices(
            a_rows, b_rows, c_rows,
            self.num_instance_variables, self.num_witness_variables,
        )

    def which_is_unsatisfied(self):
        """처음으로 만족되지 않는 제약의 이름을 반환한다 (모두 만족하면 None).

        Raises:
            AssignmentMissing: SETUP 모드 (값이 없음)
        """
        if self.is_in_setup_mode():
            raise AssignmentMissing("SETUP 모드에서는 만족 여부를 확인할 수 없습니다")
        for i, (a, b, c, label) in enumerate(self.constraints):
            a_val = a.evaluate(self.assigned_value)
            b_val = b.evaluate(self.assigned_value)
            c_val = c.evaluate(self.assigned_value)
            if a_val * b_val != c_val:
                return label if label is not None else f"constraint {i}"
        return None

    def is_satisfied(self):
        """현재 할당이 모든 제약을 만족하는지 확인한다."""
        unsatisfied = self.which_is_unsatisfied()
        if unsatisfied is not None:
            logger.debug(f"Unsatisfied constraint: {unsatisfied}")
        return unsatisfied is None

    def public_inputs(self):
        """공개 입력 값 리스트 (상수 1 제외)."""
        if self.is_in_setup_mode():
            raise AssignmentMissing("SETUP 모드에는 공개 입력 값이 없습니다")
        return list(self.instance_assignment[1:])

    def full_assignment(self):
        """행렬 열 순서와 같은 전체 할당 벡터 z = (instance..., witness...)."""
        if self.is_in_setup_mode():
            raise AssignmentMissing("SETUP 모드에는 할당 벡터가 없습니다")
        return list(self.instance_assignment) + list(self.witness_assignment)
