from staysync.models.expense.expense import Expense, RecurringExpense

__all__ = ["Expense", "RecurringExpense"]
