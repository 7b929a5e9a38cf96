"""
FpVar gadget tests: 연산 값과 제약 비용
"""
import pytest

from zkmatmul.r1cs.field import FR
from zkmatmul.r1cs.errors import SynthesisError, AssignmentMissing
from zkmatmul.r1cs.constraint_system import ConstraintSystem, SynthesisMode
from zkmatmul.r1cs.fp_var import FpVar


@pytest.fixture
def cs():
    return ConstraintSystem()


class TestLinearOps:
    def test_add_sub_free(self, cs):
        x = FpVar.new_witness(cs, lambda: 10)
        y = FpVar.new_witness(cs, lambda: 4)
        assert (x + y).value() == FR(14)
        assert (x - y).value() == FR(6)
        assert (-x).value() == FR(-10)
        assert cs.num_constraints == 0

    def test_mixed_with_int(self, cs):
        x = FpVar.new_witness(cs, lambda: 10)
        assert (x + 1).value() == FR(11)
        assert (1 + x).value() == FR(11)
        assert (20 - x).value() == FR(10)
        assert (x - 3).value() == FR(7)

    def test_constant_times_var_free(self, cs):
        x = FpVar.new_witness(cs, lambda: 10)
        y = 3 * x
        assert y.value() == FR(30)
        assert not y.is_constant()
        assert cs.num_constraints == 0

    def test_constants_have_no_cs(self):
        c = FpVar.constant(5) + FpVar.one()
        assert c.cs is None
        assert c.is_constant()
        assert c.value() == FR(6)


class TestMultiplication:
    def test_var_times_var(self, cs):
        x = FpVar.new_witness(cs, lambda: 6)
        y = FpVar.new_witness(cs, lambda: 7)
        p = x * y
        assert p.value() == FR(42)
        assert cs.num_constraints == 1
        assert cs.num_witness_variables == 3
        assert cs.is_satisfied()

    def test_square(self, cs):
        x = FpVar.new_witness(cs, lambda: 9)
        assert x.square().value() == FR(81)
        assert cs.num_constraints == 1

    def test_pow_five_costs_three(self, cs):
        """x^5: x², x⁴, x⁵ 세 번의 곱셈"""
        x = FpVar.new_witness(cs, lambda: 3)
        assert x.pow_by_constant(5).value() == FR(243)
        assert cs.num_constraints == 3
        assert cs.is_satisfied()

    def test_pow_of_constant_free(self):
        assert FpVar.constant(2).pow_by_constant(5).value() == FR(32)

    def test_cross_system_rejected(self, cs):
        other = ConstraintSystem()
        x = FpVar.new_witness(cs, lambda: 1)
        y = FpVar.new_witness(other, lambda: 2)
        with pytest.raises(SynthesisError):
            x * y
        with pytest.raises(SynthesisError):
            x + y

    def test_unsupported_operand(self, cs):
        x = FpVar.new_witness(cs, lambda: 1)
        with pytest.raises(TypeError):
            x * "2"


class TestEnforceEqual:
    def test_satisfied(self, cs):
        x = FpVar.new_witness(cs, lambda: 3)
        y = FpVar.new_input(cs, lambda: 14)
        (x * x + 5).enforce_equal(y)
        assert cs.num_constraints == 2
        assert cs.is_satisfied()

    def test_unsatisfied_label(self, cs):
        x = FpVar.new_witness(cs, lambda: 3)
        x.enforce_equal(4, label="x is four")
        assert not cs.is_satisfied()
        assert cs.which_is_unsatisfied() == "x is four"

    def test_constants_equal(self):
        FpVar.constant(3).enforce_equal(3)

    def test_constants_differ(self):
        with pytest.raises(SynthesisError):
            FpVar.constant(3).enforce_equal(FpVar.constant(4))

    def test_not_comparable(self, cs):
        x = FpVar.new_witness(cs, lambda: 3)
        with pytest.raises(TypeError):
            x.enforce_equal(3.5)


class TestSetupMode:
    def test_shape_without_values(self):
        cs = ConstraintSystem(mode=SynthesisMode.SETUP)
        x = FpVar.new_witness(cs, lambda: 3)
        y = x * x
        assert cs.num_constraints == 1
        with pytest.raises(AssignmentMissing):
            y.value()
