"""Business error carrying identifiers, business codes and parameters."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from exception_report.core.ids import IdGenerator, generate_id
from exception_report.schemas.business_code import BusinessCode

from .capabilities import error_message


class BusinessError(Exception):
    """Business-classified failure with enough metadata for log correlation.

    An ``error_id`` is generated on construction; pass ``error_id`` or call
    :meth:`with_error_id` to use an identifier issued elsewhere. Setting the
    correlation id is useful when an external service returned its own id
    and the local failure should map onto it.

    Errors can be fully described through keyword arguments or assembled with
    the chained ``with_*`` helpers, which return the same instance::

        raise (
            BusinessError("Failed to log the user in", cause=exc)
            .with_business_code(AccountCode.ACC_01)
            .with_param("user", "imam")
        )
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        cause: BaseException | None = None,
        error_id: str | None = None,
        correlation_id: str | None = None,
        span_id: str | None = None,
        trace_id: str | None = None,
        http_code: int | None = None,
        business_codes: Iterable[BusinessCode] | None = None,
        params: Mapping[str, Any] | None = None,
        id_generator: IdGenerator = generate_id,
    ) -> None:
        if message is None and cause is not None:
            message = error_message(cause)
        if message is None:
            super().__init__()
        else:
            super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

        self.message = message
        self._id_generator = id_generator
        self.error_id: str = error_id or id_generator()
        self.correlation_id = correlation_id
        self.span_id = span_id
        self.trace_id = trace_id
        self.http_code = http_code
        self.business_codes: list[BusinessCode] = list(business_codes or ())
        self.params: dict[str, Any] = dict(params or {})

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, error_id={self.error_id!r}, "
            f"codes={[code.code for code in self.business_codes]!r})"
        )

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def generate_id(self) -> BusinessError:
        self.error_id = self._id_generator()
        return self

    def with_error_id(self, error_id: str | None) -> BusinessError:
        """Override the generated id; empty values keep the current one."""
        if error_id:
            self.error_id = error_id
        return self

    def with_correlation_id(self, correlation_id: str | None) -> BusinessError:
        self.correlation_id = correlation_id
        return self

    def with_span_id(self, span_id: str | None) -> BusinessError:
        self.span_id = span_id
        return self

    def with_trace_id(self, trace_id: str | None) -> BusinessError:
        self.trace_id = trace_id
        return self

    def with_http_code(self, http_code: int | None) -> BusinessError:
        self.http_code = http_code
        return self

    def with_business_code(self, code: BusinessCode) -> BusinessError:
        self.business_codes.append(code)
        return self

    def with_business_codes(self, codes: Iterable[BusinessCode]) -> BusinessError:
        """Replace the business codes; order is preserved, duplicates are kept."""
        self.business_codes = list(codes)
        return self

    def with_param(self, key: str, value: Any) -> BusinessError:
        self.params[key] = value
        return self

    def with_params(self, params: Mapping[str, Any]) -> BusinessError:
        """Replace the parameter mapping."""
        self.params = dict(params)
        return self


__all__ = ["BusinessError"]
