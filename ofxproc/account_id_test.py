from .account_id import account_display_name, derive_account_id
from .records import AccountType


def test_bank_account():
    assert derive_account_id('001', None, '12345', None) == '001 12345'


def test_all_components_in_order():
    assert derive_account_id(
        account_key='K', account_number='N', branch_id='BR',
        bank_id='B') == 'B BR N K'


def test_missing_components_are_skipped():
    assert derive_account_id(None, '', '4111', 'KEY') == '4111 KEY'


def test_no_components():
    assert derive_account_id() is None
    assert derive_account_id('', None, '', None) is None


def test_deterministic():
    first = derive_account_id('021000021', '77', '000123', None)
    assert derive_account_id('021000021', '77', '000123', None) == first


def test_display_names():
    assert account_display_name(AccountType.CHECKING,
                                '12345') == 'Bank account 12345'
    assert account_display_name(None, '12345') == 'Bank account 12345'
    assert account_display_name(AccountType.CREDITCARD,
                                '4111') == 'Credit card 4111'
    assert account_display_name(
        AccountType.INVESTMENT, '999',
        'example.com') == 'Investment account 999 at broker example.com'
    assert account_display_name(AccountType.INVESTMENT,
                                '999') == 'Investment account 999'
    assert account_display_name(AccountType.SAVINGS, None) is None
