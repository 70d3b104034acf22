from expenses.services.expense_service import ExpenseService

__all__ = ["ExpenseService"]
