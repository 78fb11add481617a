"""Account identifiers synthesized from OFX account aggregates.

OFX identifies an account by a combination of elements that depends on the
kind of account: <BANKID>, <BRANCHID>, <ACCTID> and <ACCTKEY> for bank
accounts, <ACCTID> and <ACCTKEY> for credit cards, <BROKERID> and <ACCTID>
for investment accounts.  None of them is a unique identifier on its own, so
a single identifier is derived from whichever components are present.

The derivation only depends on the component values, so the same account
yields the same identifier in every document and every parse.
"""

from typing import Optional

from .records import AccountType


def derive_account_id(bank_id: Optional[str] = None,
                      branch_id: Optional[str] = None,
                      account_number: Optional[str] = None,
                      account_key: Optional[str] = None) -> Optional[str]:
    """Returns the account identifier for the given components.

    The components that are present (not `None` and not empty) are joined in
    the fixed order bank id, branch id, account number, account key,
    separated by a single space.  Returns `None` if no component is present.

    For investment accounts, the broker id is passed as `bank_id`.
    """
    parts = [
        x for x in (bank_id, branch_id, account_number, account_key) if x
    ]
    if not parts:
        return None
    return ' '.join(parts)


def account_display_name(account_type: Optional[AccountType],
                         account_number: Optional[str],
                         broker_id: Optional[str] = None) -> Optional[str]:
    """Returns a human readable name for an account, e.g. "Bank account 1234"."""
    if not account_number:
        return None
    if account_type == AccountType.CREDITCARD:
        return 'Credit card %s' % account_number
    if account_type == AccountType.INVESTMENT:
        if broker_id:
            return 'Investment account %s at broker %s' % (account_number,
                                                           broker_id)
        return 'Investment account %s' % account_number
    return 'Bank account %s' % account_number
