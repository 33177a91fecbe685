from projectit.services.reminders.sweep import DueReminderSweep, due_text, parse_due_date

__all__ = ["DueReminderSweep", "due_text", "parse_due_date"]
