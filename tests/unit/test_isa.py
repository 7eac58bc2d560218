import pytest
from src.vm_translator.isa import op_spec, ARITHMETIC, BRANCH_COMMANDS

def test_all_nine_operations_present():
    assert set(ARITHMETIC) == {"add", "sub", "neg", "eq", "gt", "lt", "and", "or", "not"}

def test_operation_kinds():
    assert op_spec("neg").kind == "unary" and op_spec("not").kind == "unary"
    assert op_spec("add").comp == "D+M"
    assert op_spec("sub").comp == "M-D"
    assert op_spec("eq").jump == "JEQ"
    assert op_spec("gt").jump == "JGT"
    assert op_spec("lt").jump == "JLT"

def test_unknown_operation():
    with pytest.raises(KeyError):
        op_spec("mul")

def test_branch_keywords():
    assert "if-goto" in BRANCH_COMMANDS
    assert "if_goto" not in BRANCH_COMMANDS
