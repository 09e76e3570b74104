class UnbalancedVoucherError(Exception):
    """Raised when a voucher's debits and credits do not agree."""
    pass


class AlreadyPostedDifferentPayload(Exception):
    """Raised when a voucher id is appended again with different lines."""
    pass


class PlannerPromptPending(Exception):
    """Raised when plans are edited before a period rollover is resolved."""
    pass
