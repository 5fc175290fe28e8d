"""
fgp.core: value containers and ambient plumbing.

Containers:
    result.py     ─ Ok / Err, the outcome container every task returns
    option.py     ─ Some / Nothing, presence or absence of a value
    validated.py  ─ Valid / Invalid, error-accumulating validation

Plumbing:
    errors.py     ─ FgpError hierarchy, join_errors, is_error
    logging.py    ─ structlog configuration and get_logger
    settings.py   ─ FgpSettings (pydantic-settings, FGP_* env vars)
"""

from fgp.core.errors import (
    ErrorCategory,
    FgpError,
    InvalidArgumentError,
    MissingValueError,
    NilError,
    NoTasksError,
    PanicError,
    is_error,
    join_errors,
)
from fgp.core.option import (
    Nothing,
    Option,
    Some,
    sequence_options,
    traverse_options,
    zip_options,
)
from fgp.core.result import (
    Err,
    Ok,
    Result,
    collect_all_errors,
    collect_ok,
    collect_results,
    from_bool,
    partition_results,
    traverse_results,
    try_result,
    try_result_with,
    zip_results,
)
from fgp.core.validated import (
    Invalid,
    Valid,
    Validated,
    sequence_validated,
    traverse_validated,
    zip_validated,
)

__all__ = [
    # errors
    "ErrorCategory",
    "FgpError",
    "InvalidArgumentError",
    "MissingValueError",
    "NilError",
    "NoTasksError",
    "PanicError",
    "is_error",
    "join_errors",
    # option
    "Nothing",
    "Option",
    "Some",
    "sequence_options",
    "traverse_options",
    "zip_options",
    # result
    "Err",
    "Ok",
    "Result",
    "collect_all_errors",
    "collect_ok",
    "collect_results",
    "from_bool",
    "partition_results",
    "traverse_results",
    "try_result",
    "try_result_with",
    "zip_results",
    # validated
    "Invalid",
    "Valid",
    "Validated",
    "sequence_validated",
    "traverse_validated",
    "zip_validated",
]
