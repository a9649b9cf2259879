from staysync.repositories.expense.expense_repository import ExpenseRepository, RecurringExpenseRepository

__all__ = ["ExpenseRepository", "RecurringExpenseRepository"]
