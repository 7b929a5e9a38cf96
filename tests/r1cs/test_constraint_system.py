"""
ConstraintSystem / LinearCombination tests
"""
import pytest

from zkmatmul.r1cs.field import FR
from zkmatmul.r1cs.errors import SynthesisError, AllocationError, AssignmentMissing
from zkmatmul.r1cs.constraint_system import (
    ConstraintSystem,
    LinearCombination,
    SynthesisMode,
    Variable,
    ONE,
    INSTANCE,
    WITNESS,
)


def square_system(x_value, y_value, label=None):
    """x·x = y 제약 하나짜리 시스템"""
    cs = ConstraintSystem()
    x = cs.new_witness_variable(lambda: x_value)
    y = cs.new_input_variable(lambda: y_value)
    lx = LinearCombination.from_variable(x)
    cs.enforce_constraint(lx, lx, LinearCombination.from_variable(y), label)
    return cs, x, y


# =====================================================================
# LinearCombination
# =====================================================================

class TestLinearCombination:
    def test_from_variable(self):
        x = Variable(WITNESS, 0)
        lc = LinearCombination.from_variable(x, FR, 3)
        assert lc.terms == {x: FR(3)}

    def test_zero_coefficient_dropped(self):
        x = Variable(WITNESS, 0)
        assert len(LinearCombination.from_variable(x, FR, 0)) == 0

    def test_add_merges_terms(self):
        x = Variable(WITNESS, 0)
        lc = LinearCombination.from_variable(x, FR, 2) + LinearCombination.from_variable(x, FR, 5)
        assert lc.terms[x] == FR(7)

    def test_sub_cancels(self):
        """같은 변수끼리 빼면 항이 사라진다"""
        x = Variable(WITNESS, 0)
        lc = LinearCombination.from_variable(x) - LinearCombination.from_variable(x)
        assert len(lc) == 0
        assert lc.is_constant()

    def test_scale(self):
        x = Variable(WITNESS, 0)
        lc = LinearCombination.from_variable(x, FR, 2).scale(3)
        assert lc.terms[x] == FR(6)
        assert len(lc.scale(0)) == 0

    def test_constant(self):
        lc = LinearCombination.constant(9)
        assert lc.is_constant()
        assert lc.constant_term() == FR(9)
        assert LinearCombination().constant_term() == FR(0)

    def test_evaluate(self):
        x = Variable(WITNESS, 0)
        lc = LinearCombination.from_variable(x, FR, 2) + LinearCombination.constant(5)
        values = {x: FR(10), ONE: FR(1)}
        assert lc.evaluate(values.__getitem__) == FR(25)


# =====================================================================
# 변수 할당
# =====================================================================

class TestAllocation:
    def test_one_is_instance_zero(self):
        cs = ConstraintSystem()
        assert cs.num_instance_variables == 1
        assert cs.assigned_value(ONE) == FR(1)

    def test_variable_indices(self):
        cs = ConstraintSystem()
        assert cs.new_input_variable(lambda: 1) == Variable(INSTANCE, 1)
        assert cs.new_input_variable(lambda: 2) == Variable(INSTANCE, 2)
        assert cs.new_witness_variable(lambda: 3) == Variable(WITNESS, 0)
        assert cs.num_instance_variables == 3
        assert cs.num_witness_variables == 1

    def test_values_reduced_into_field(self):
        cs = ConstraintSystem()
        x = cs.new_witness_variable(lambda: FR.field_modulus + 4)
        assert cs.assigned_value(x) == FR(4)

    def test_missing_value(self):
        """값 함수가 None을 돌려주면 AssignmentMissing"""
        cs = ConstraintSystem()
        with pytest.raises(AssignmentMissing):
            cs.new_witness_variable(lambda: None)

    def test_public_inputs_and_full_assignment(self):
        cs, _, _ = square_system(3, 9)
        assert cs.public_inputs() == [FR(9)]
        assert cs.full_assignment() == [FR(1), FR(9), FR(3)]


# =====================================================================
# 만족 여부
# =====================================================================

class TestSatisfaction:
    def test_satisfied(self):
        cs, _, _ = square_system(3, 9)
        assert cs.is_satisfied()
        assert cs.which_is_unsatisfied() is None

    def test_unsatisfied_with_label(self):
        cs, _, _ = square_system(3, 10, label="x squared")
        assert not cs.is_satisfied()
        assert cs.which_is_unsatisfied() == "x squared"

    def test_unsatisfied_default_label(self):
        cs, _, _ = square_system(3, 10)
        assert cs.which_is_unsatisfied() == "constraint 0"

    def test_num_constraints(self):
        cs, _, _ = square_system(3, 9)
        assert cs.num_constraints == 1


# =====================================================================
# SETUP 모드
# =====================================================================

class TestSetupMode:
    def test_value_fn_not_called(self):
        cs = ConstraintSystem()
        cs.set_mode(SynthesisMode.SETUP)

        def fail():
            raise AssertionError("SETUP 모드에서 값 함수가 호출됨")

        x = cs.new_witness_variable(fail)
        assert x == Variable(WITNESS, 0)
        assert cs.witness_assignment == []

    def test_values_unavailable(self):
        cs = ConstraintSystem(mode=SynthesisMode.SETUP)
        x = cs.new_witness_variable(lambda: 3)
        with pytest.raises(AssignmentMissing):
            cs.assigned_value(x)
        with pytest.raises(AssignmentMissing):
            cs.is_satisfied()
        with pytest.raises(AssignmentMissing):
            cs.public_inputs()

    def test_set_mode_after_allocation(self):
        cs = ConstraintSystem()
        cs.new_witness_variable(lambda: 1)
        with pytest.raises(SynthesisError):
            cs.set_mode(SynthesisMode.SETUP)


# =====================================================================
# finalize
# =====================================================================

class TestFinalize:
    def test_locks_system(self):
        cs, x, _ = square_system(3, 9)
        cs.finalize()
        assert cs.is_finalized
        with pytest.raises(AllocationError):
            cs.new_witness_variable(lambda: 1)
        with pytest.raises(AllocationError):
            cs.new_input_variable(lambda: 1)
        lx = LinearCombination.from_variable(x)
        with pytest.raises(SynthesisError):
            cs.enforce_constraint(lx, lx, lx)
        with pytest.raises(SynthesisError):
            cs.set_mode(SynthesisMode.PROVE)

    def test_still_checkable_after_finalize(self):
        cs, _, _ = square_system(3, 9)
        cs.finalize()
        assert cs.is_satisfied()

    def test_idempotent(self):
        cs, _, _ = square_system(3, 9)
        cs.finalize()
        matrices = cs.matrices
        cs.finalize()
        assert cs.matrices is matrices

    def test_matrices_columns(self):
        """열 배치: [ONE, y | x]"""
        cs, _, _ = square_system(3, 9)
        cs.finalize()
        m = cs.matrices
        assert m.num_constraints == 1
        assert m.num_instance_variables == 2
        assert m.num_witness_variables == 1
        assert m.a == [[(FR(1), 2)]]
        assert m.b == [[(FR(1), 2)]]
        assert m.c == [[(FR(1), 1)]]
        assert (m.a_num_non_zero, m.b_num_non_zero, m.c_num_non_zero) == (1, 1, 1)

    def test_no_matrices_when_disabled(self):
        cs = ConstraintSystem(construct_matrices=False)
        cs.finalize()
        assert cs.is_finalized
        assert cs.matrices is None
