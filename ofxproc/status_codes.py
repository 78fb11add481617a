"""OFX status codes.

Maps the numeric <CODE> of a <STATUS> aggregate to a short name and a
description, following the code tables of the OFX 1.6 / 2.1 specifications.
"""

from typing import Dict, Tuple

UNKNOWN_CODE = ('Unknown code', 'No description for this code')

STATUS_CODES = {
    0: ('Success', 'The server successfully processed the request.'),
    1: ('Client is up-to-date',
        'Based on the client timestamp, the client has the latest information.'),
    2000: ('General error',
           'Error other than those specified by the remaining error codes.'),
    2001: ('Invalid account', 'The specified account is not valid.'),
    2002: ('General account error',
           'Account error not specified by the remaining error codes.'),
    2003: ('Account not found',
           'The specified account number does not correspond to one of the '
           "user's accounts."),
    2004: ('Account closed',
           'The specified account number corresponds to an account that has '
           'been closed.'),
    2005: ('Account not authorized',
           'The user is not authorized to perform this action on the account, '
           'or the server does not allow this type of action to be performed '
           'on the account.'),
    2006: ('Source account not found',
           'The specified account number does not correspond to one of the '
           "user's accounts."),
    2007: ('Source account closed',
           'The specified account number corresponds to an account that has '
           'been closed.'),
    2008: ('Source account not authorized',
           'The user is not authorized to perform this action on the account, '
           'or the server does not allow this type of action to be performed '
           'on the account.'),
    2009: ('Destination account not found',
           'The specified account number does not correspond to one of the '
           "user's accounts."),
    2010: ('Destination account closed',
           'The specified account number corresponds to an account that has '
           'been closed.'),
    2011: ('Destination account not authorized',
           'The user is not authorized to perform this action on the account, '
           'or the server does not allow this type of action to be performed '
           'on the account.'),
    2012: ('Invalid amount',
           'The specified amount is not valid for this action; for example, '
           'the user specified a negative payment amount.'),
    2014: ('Date too soon',
           'The server cannot process the requested action by the date '
           'specified by the user.'),
    2015: ('Date too far in future',
           'The server cannot accept requests for an action that far in the '
           'future.'),
    2016: ('Transaction already committed',
           'Transaction has entered the processing loop and cannot be '
           'modified/cancelled using OFX.'),
    2017: ('Already canceled',
           'The transaction cannot be canceled or modified because it has '
           'already been canceled.'),
    2018: ('Unknown server ID',
           'The specified server ID does not exist or no longer exists.'),
    2019: ('Duplicate request',
           'A request with this <TRNUID> has already been received and '
           'processed.'),
    2020: ('Invalid date',
           'The specified datetime stamp cannot be parsed; for instance, the '
           'datetime stamp specifies 25:00 hours.'),
    2021: ('Unsupported version',
           'The server does not support the requested version.'),
    2022: ('Invalid TAN', 'The server was unable to validate the TAN sent in '
           'the request.'),
    2023: ('Unknown FITID', 'The specified FITID/BILLID does not exist.'),
    2025: ('Branch ID missing',
           'A <BRANCHID> value must be provided in the <BANKACCTFROM> '
           'aggregate for this country system, but this field is missing.'),
    2026: ('Bank name doesn\'t match bank ID',
           'The value of <BANKNAME> in the <EXTBANKACCTTO> aggregate is '
           'inconsistent with the value of <BANKID>.'),
    2027: ('Invalid date range',
           'Response for non-overlapping dates, date ranges in the future, '
           'etc.'),
    2028: ('Requested element unknown',
           'One or more elements of the request were not recognized by the '
           'server or the server does not support the element.'),
    6500: ('<REJECTIFMISSING>Y invalid without <TOKEN>',
           'This error code may appear in the <SYNCERROR> element of an '
           '<xxxSYNCRS> wrapper.'),
    6501: ('Embedded transactions in request failed to process: Out of date',
           'A data synchronization request contains embedded transactions '
           'that could not be processed because the token is out of date.'),
    6502: ('Unable to process embedded transaction due to out-of-date <TOKEN>',
           'Used in response transaction wrapper for embedded transactions '
           'when <SYNCERROR>6501 appears in the surrounding sync wrapper.'),
    10000: ('Stop check in process',
            'Stop check is already in process.'),
    10500: ('Too many checks to process',
            'The stop-payment request <STPCHKRQ> specifies too many checks.'),
    10501: ('Invalid payee', 'Payee error not specified by the remaining '
            'error codes.'),
    10502: ('Invalid payee address',
            'Some portion of the payee\'s address is incorrect or unknown.'),
    10503: ('Invalid payee account number',
            'The account number <PAYACCT> of the requested payee is invalid.'),
    10504: ('Insufficient funds',
            'The server cannot process the request because the specified '
            'account does not have enough funds.'),
    10505: ('Cannot modify element',
            'The server does not allow modifications to one or more values in '
            'a modification request.'),
    10506: ('Cannot modify source account',
            'Reserved for future use.'),
    10507: ('Cannot modify destination account',
            'Reserved for future use.'),
    10508: ('Invalid frequency',
            'The specified frequency <FREQ> does not match one of the '
            'accepted frequencies for recurring transactions.'),
    10509: ('Model already canceled',
            'The server has already canceled the specified recurring model.'),
    10510: ('Invalid payee ID',
            'The specified payee ID does not exist or no longer exists.'),
    10511: ('Invalid payee city',
            'The specified city is incorrect or unknown.'),
    10512: ('Invalid payee state',
            'The specified state is incorrect or unknown.'),
    10513: ('Invalid payee postal code',
            'The specified postal code is incorrect or unknown.'),
    10514: ('Transaction already processed',
            'Transaction has already been sent or date due is past.'),
    10515: ('Payee not modifiable by client',
            'The server does not allow clients to change payee information.'),
    10516: ('Wire beneficiary invalid',
            'The specified wire beneficiary does not exist or no longer '
            'exists.'),
    10517: ('Invalid payee name',
            'The server does not recognize the specified payee name.'),
    10518: ('Unknown model ID',
            'The specified model ID does not exist or no longer exists.'),
    10519: ('Invalid payee list ID',
            'The specified payee list ID does not exist or no longer exists.'),
    12250: ('Investment transaction download not supported',
            'The server does not support investment transaction download.'),
    12251: ('Investment position download not supported',
            'The server does not support investment position download.'),
    12252: ('Investment positions for specified date not available',
            'The server does not support investment positions for the '
            'specified date.'),
    12253: ('Investment open order download not supported',
            'The server does not support open order download.'),
    12254: ('Investment balances download not supported',
            'The server does not support investment balances download.'),
    12500: ('One or more securities not found',
            'The server could not find the requested securities.'),
    13000: ('User ID & password will be sent out-of-band',
            'The server will send the user ID and password via postal mail, '
            'e-mail, or another means.'),
    13500: ('Unable to enroll user',
            'The server could not enroll the user.'),
    13501: ('User already enrolled',
            'The server has already enrolled the user.'),
    13502: ('Invalid service',
            'The server does not support the service <SVC> specified in the '
            'service-activation request.'),
    13503: ('Cannot change user information',
            'The server does not support the <CHGUSERINFORQ> request.'),
    15000: ('Must change USERPASS',
            'The user must change his or her <USERPASS> number as part of the '
            'next OFX request.'),
    15500: ('Signon invalid',
            'The user cannot signon because he or she entered an invalid user '
            'ID or password.'),
    15501: ('Customer account already in use',
            'The server allows only one connection at a time, and another '
            'user is already signed on.'),
    15502: ('USERPASS lockout',
            'The server will not allow signon because of repeated invalid '
            'attempts.'),
    15503: ('Could not change USERPASS',
            'The server does not support the <PINCHRQ> request.'),
    15504: ('Could not provide random data',
            'The server could not generate random data as requested by the '
            '<CHALLENGERQ>.'),
    16500: ('HTML not allowed',
            'The server does not accept HTML formatting in the request.'),
    16501: ('Unknown mail To:',
            'The server was unable to send mail to the specified Internet '
            'address.'),
    16502: ('Invalid URL', 'The server could not parse the URL.'),
    16503: ('Unable to get URL',
            'The server was unable to retrieve the information at this URL.'),
}  # type: Dict[int, Tuple[str, str]]


def describe(code: int) -> Tuple[str, str]:
    """Returns the `(name, description)` pair for an OFX status code."""
    return STATUS_CODES.get(code, UNKNOWN_CODE)
