import warnings

from app.core.exceptions import ReferentialIntegrityError, StoreError, UpstreamError, ValidationError


def test_validation_error_is_422_without_deprecation_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        exc = ValidationError("amount must be greater than zero", details={"field": "amount"})
    assert exc.status_code == 422
    assert exc.code == "VALIDATION_ERROR"


def test_error_codes():
    assert ReferentialIntegrityError("Account has associated debts").status_code == 409
    assert ReferentialIntegrityError("Account has associated debts").code == "REFERENTIAL_INTEGRITY"
    assert StoreError().status_code == 503
    assert UpstreamError().status_code == 502
