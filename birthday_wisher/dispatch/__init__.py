from birthday_wisher.dispatch.results import BatchResult, DispatchOutcome, DispatchStatus
from birthday_wisher.dispatch.runner import DispatchRunner

__all__ = ["BatchResult", "DispatchOutcome", "DispatchRunner", "DispatchStatus"]
