from models.journal_entry import JournalEntry, JournalEntryStatus
from models.journal_entry_line import JournalEntryLine
from models.audit_log import AuditLog
from models.entry_number_counter import EntryNumberCounter
from models.chart_of_accounts import ChartOfAccounts

__all__ = ['AuditLog', 'ChartOfAccounts', 'EntryNumberCounter', 'JournalEntry', 'JournalEntryLine', 'JournalEntryStatus',]
