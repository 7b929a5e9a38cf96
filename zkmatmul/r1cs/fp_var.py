"""
필드 원소 가젯 (FpVar)
========================

회로 안의 필드 값을 표현하는 가젯(gadget). 산술 연산을 하면
값을 계산하는 동시에 필요한 R1CS 제약을 제약 시스템에 추가한다.

**연산별 제약 비용**:
  | 연산              | 추가되는 제약 | 설명                          |
  |-------------------|---------------|-------------------------------|
  | x + y, x - y      | 0             | 선형결합 병합                  |
  | c · x (c 상수)    | 0             | 선형결합 스케일               |
  | x · y             | 1             | 새 위트니스 p, 제약 x·y = p   |
  | x^5               | 3             | 제곱-곱셈 (x², x⁴, x⁵)        |
  | x == y (강제)     | 1             | (x - y)·1 = 0                 |

FpVar는 선형결합(lc)과 값 캐시(value)를 함께 들고 다닌다.
SETUP 모드에서는 값이 None이며, value()는 AssignmentMissing을 발생시킨다.

사용 예시:
    >>> cs = ConstraintSystem()
    >>> x = FpVar.new_witness(cs, lambda: 3)
    >>> y = x * x + 5          # 제약 1개
    >>> y.enforce_equal(FpVar.new_input(cs, lambda: 14))
    >>> cs.is_satisfied()      # True
"""

from py_ecc.fields.field_elements import FQ

from zkmatmul.r1cs.field import FR, to_field
from zkmatmul.r1cs.errors import SynthesisError, AssignmentMissing
from zkmatmul.r1cs.constraint_system import LinearCombination


class FpVar:
    """제약 시스템에 묶인 필드 값.

    속성:
        cs: 소속 ConstraintSystem (순수 상수이면 None)
        lc: 이 값을 나타내는 LinearCombination
        field: 필드 클래스
    """

    def __init__(self, cs, lc, value, field=FR):
        self.cs = cs
        self.lc = lc
        self._value = value
        self.field = field

    # ── 생성 ──

    @classmethod
    def constant(cls, value, field=FR):
        value = to_field(field, value)
        return cls(None, LinearCombination.constant(value, field), value, field)

    @classmethod
    def zero(cls, field=FR):
        return cls.constant(0, field)

    @classmethod
    def one(cls, field=FR):
        return cls.constant(1, field)

    @classmethod
    def _from_variable(cls, cs, var):
        value = None if cs.is_in_setup_mode() else cs.assigned_value(var)
        return cls(cs, LinearCombination.from_variable(var, cs.field), value, cs.field)

    @classmethod
    def new_witness(cls, cs, value_fn):
        """비공개 위트니스로 할당한다."""
        return cls._from_variable(cs, cs.new_witness_variable(value_fn))

    @classmethod
    def new_input(cls, cs, value_fn):
        """공개 입력으로 할당한다."""
        return cls._from_variable(cs, cs.new_input_variable(value_fn))

    # ── 조회 ──

    def value(self):
        """구체적인 값을 반환한다.

        Raises:
            AssignmentMissing: SETUP 모드에서 만들어진 값
        """
        if self._value is None:
            raise AssignmentMissing("가젯 값이 할당되지 않았습니다 (SETUP 모드)")
        return self._value

    def is_constant(self):
        return self.lc.is_constant()

    def __repr__(self):
        value = "?" if self._value is None else int(self._value)
        return f"FpVar({value}, {self.lc!r})"

    # ── 내부 헬퍼 ──

    def _coerce(self, other):
        if isinstance(other, FpVar):
            return other
        if isinstance(other, (int, FQ)):
            return FpVar.constant(other, self.field)
        return NotImplemented

    def _merge_cs(self, other):
        if self.cs is None:
            return other.cs
        if other.cs is not None and other.cs is not self.cs:
            raise SynthesisError("서로 다른 제약 시스템의 변수는 결합할 수 없습니다")
        return self.cs

    def _combine_value(self, other, op):
        if self._value is None or other._value is None:
            return None
        return op(self._value, other._value)

    # ── 선형 연산 (제약 없음) ──

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return FpVar(
            self._merge_cs(other),
            self.lc + other.lc,
            self._combine_value(other, lambda x, y: x + y),
            self.field,
        )

    __radd__ = __add__

    def __neg__(self):
        value = None if self._value is None else -self._value
        return FpVar(self.cs, -self.lc, value, self.field)

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other + (-self)

    # ── 곱셈 ──

    def __mul__(self, other):
        """곱셈. 한쪽이 상수이면 스케일(제약 0개), 아니면 제약 1개."""
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented

        if self.is_constant() or other.is_constant():
            const, var = (self, other) if self.is_constant() else (other, self)
            coeff = const.lc.constant_term()
            value = None if var._value is None else var._value * coeff
            return FpVar(var.cs, var.lc.scale(coeff), value, self.field)

        cs = self._merge_cs(other)
        value = self._combine_value(other, lambda x, y: x * y)
        # p = x · y 를 새 위트니스로 만들고 x·y = p 제약 추가
        product = FpVar.new_witness(cs, lambda: value)
        cs.enforce_constraint(self.lc, other.lc, product.lc)
        return product

    __rmul__ = __mul__

    def square(self):
        return self * self

    def pow_by_constant(self, exponent):
        """self^exponent (상수 지수, 제곱-곱셈).

        최상위 비트부터 처리한다. 결과 초기값 1은 상수이므로
        첫 제곱과 첫 곱셈은 제약을 만들지 않는다.
        """
        result = FpVar.one(self.field)
        for bit in bin(exponent)[2:]:
            result = result.square()
            if bit == "1":
                result = result * self
        return result

    # ── 등식 강제 ──

    def enforce_equal(self, other, label=None):
        """self == other 제약 (self - other)·1 = 0을 추가한다.

        두 값이 모두 상수이면 제약 없이 즉시 비교한다.

        Raises:
            SynthesisError: 두 상수가 서로 다를 때
        """
        coerced = self._coerce(other)
        if coerced is NotImplemented:
            raise TypeError(f"FpVar와 비교할 수 없는 값: {other!r}")
        other = coerced
        if self.is_constant() and other.is_constant():
            if self.lc.constant_term() != other.lc.constant_term():
                raise SynthesisError("만족 불가능: 서로 다른 두 상수의 등식")
            return
        cs = self._merge_cs(other)
        cs.enforce_constraint(
            self.lc - other.lc,
            LinearCombination.constant(1, self.field),
            LinearCombination(self.field),
            label,
        )
