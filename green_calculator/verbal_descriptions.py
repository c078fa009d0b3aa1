"""Plain-language summaries of calculation outcomes."""

from .engine import Failure, FailureKind, IntegrationMode, Success


def describe_mode(mode):
    if IntegrationMode(mode) is IntegrationMode.VECTOR_FIELD:
        return "Green's theorem: integrates ∂Q/∂x − ∂P/∂y over the region between the curves."
    return "Integrates Q(x, y) directly over the region between the curves."


def describe_result(result):
    if isinstance(result, Success):
        if result.value == 0:
            return "The contributions cancel out (or the region has no height): the integral is 0."
        sign = "positive" if result.value > 0 else "negative"
        return f"The integral over the region is {sign}: {result.formatted}."
    if isinstance(result, Failure) and result.kind is FailureKind.MISSING_INPUT:
        return "Fill in every function and limit, then calculate again."
    return result.message
