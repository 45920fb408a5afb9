# storefront/core/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type


class RetryableConflict(Exception):
    """
    Raised inside a transaction step that lost a race on a unique key
    (cart vanished under us, order number already taken). The step has
    already rolled its session back when this is raised.
    """


def conflict_retry(attempts: int):
    """
    Retry a whole transaction step a bounded number of times.
    After the last attempt the RetryableConflict is re-raised to the caller,
    which turns it into a ConflictError.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.01, min=0.01, max=0.2),
        retry=retry_if_exception_type(RetryableConflict),
    )
