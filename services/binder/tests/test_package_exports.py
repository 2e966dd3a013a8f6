"""
Where: services/binder/tests/test_package_exports.py
What: Guard tests for package-level exports.
Why: Prevent regressions when editing package __init__.py files.
"""


def test_models_package_re_exports() -> None:
    from services.binder.models import InputContext, RequestField, Source, bindable

    assert InputContext.__name__ == "InputContext"
    assert RequestField.__name__ == "RequestField"
    assert Source.BODY.value == "BODY"
    assert callable(bindable)


def test_core_package_re_exports() -> None:
    from services.binder.core import BindError, ConversionService, MissingValueError

    assert issubclass(MissingValueError, BindError)
    assert ConversionService.__name__ == "ConversionService"


def test_services_package_re_exports() -> None:
    from services.binder.services import build_input_context

    assert build_input_context.__name__ == "build_input_context"
