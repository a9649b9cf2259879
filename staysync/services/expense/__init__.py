from staysync.services.expense.expense_service import RECURRING_NOTE, ExpenseService, RecurringExpenseService

__all__ = ["ExpenseService", "RecurringExpenseService", "RECURRING_NOTE"]
