from green_calculator import config
from green_calculator.engine import Failure, FailureKind, IntegrationMode, Success
from green_calculator.verbal_descriptions import describe_mode, describe_result


def test_describe_mode():
    assert "Green's theorem" in describe_mode(IntegrationMode.VECTOR_FIELD)
    assert "Q(x, y) directly" in describe_mode("direct")


def test_describe_result():
    assert "positive: 2.0000" in describe_result(Success(2.0, "label"))
    assert "negative" in describe_result(Success(-0.5, "label"))
    assert "is 0" in describe_result(Success(0.0, "label"))
    assert "Fill in" in describe_result(Failure(FailureKind.MISSING_INPUT, config.MSG_MISSING_INPUT))
    assert describe_result(Failure(FailureKind.INVALID_BOUND, "bad x")) == "bad x"
