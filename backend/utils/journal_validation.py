from decimal import Decimal
from typing import Sequence, Tuple
from utils.exceptions import DebitCreditMismatch, EmptyEntry, EntryTotalOutOfRange, InvalidLineAmount

ZERO = Decimal("0")
# Largest value a Numeric(15, 2) column holds
MAX_AMOUNT = Decimal("9999999999999.99")


def validate_journal_lines(lines: Sequence) -> Tuple[Decimal, Decimal]:
    """
    Check the shape and balance of proposed journal entry lines.

    Each line needs `debit_amount` and `credit_amount`. Exactly one of them must
    be strictly positive and the other exactly zero, and the debits must add up
    to the credits. Runs before any I/O and has no side effects.

    Returns:
        (total_debit, total_credit), which are equal.

    Raises:
        EmptyEntry: no lines at all.
        InvalidLineAmount: a line with both, neither, or a negative amount.
        DebitCreditMismatch: the totals differ.
        EntryTotalOutOfRange: the totals do not fit the amount columns.
    """
    if not lines:
        raise EmptyEntry()

    total_debit = ZERO
    total_credit = ZERO
    for line_number, line in enumerate(lines, start=1):
        debit = Decimal(line.debit_amount or 0)
        credit = Decimal(line.credit_amount or 0)
        is_debit = debit > ZERO and credit == ZERO
        is_credit = credit > ZERO and debit == ZERO
        if not (is_debit or is_credit):
            raise InvalidLineAmount(line_number, debit, credit)
        total_debit += debit
        total_credit += credit

    if total_debit != total_credit:
        raise DebitCreditMismatch(total_debit, total_credit)

    if total_debit > MAX_AMOUNT:
        raise EntryTotalOutOfRange(total_debit, MAX_AMOUNT)

    return total_debit, total_credit
