from enum import Enum

class TransactionType(Enum):
    """Represents whether money is coming in or out"""
    INCOME = "income" # in
    EXPENSE = "expense" # out

class TransactionStatus(Enum):
    """Whether the amount is realized or still expected"""
    CONFIRMED = "confirmed"
    PENDING = "pending"
