class AuthenticationError(Exception):
    """Raised when the supplied PIN does not match the stored one."""
    pass

class TransactionValidationError(ValueError):
    """Raised when a new transaction is rejected before it reaches the store."""
    pass
