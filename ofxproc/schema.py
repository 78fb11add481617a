"""Static knowledge about OFX element names.

OFX distinguishes "aggregates", elements that contain other elements, from
"data elements", which contain text.  In SGML documents only aggregates are
reliably closed, so the tree builder needs to know which names are
aggregates before it sees their content.  Names not listed here are
classified structurally by the tree builder.
"""

from typing import Dict
import enum


class TagClass(enum.Enum):
    AGGREGATE = 'aggregate'
    DATA = 'data'
    UNKNOWN = 'unknown'


class ContainerKind(enum.Enum):
    UNRECOGNIZED = 'UNRECOGNIZED'
    PASSTHROUGH = 'PASSTHROUGH'
    STATUS = 'STATUS'
    BALANCE = 'BALANCE'
    STATEMENT = 'STATEMENT'
    ACCOUNT = 'ACCOUNT'
    TRANSACTION = 'TRANSACTION'
    SECURITY = 'SECURITY'


# Kinds whose completion is reported to the consumer.
TERMINAL_KINDS = frozenset([
    ContainerKind.STATUS,
    ContainerKind.ACCOUNT,
    ContainerKind.STATEMENT,
    ContainerKind.TRANSACTION,
    ContainerKind.SECURITY,
])

STATEMENT_TAGS = frozenset(['STMTRS', 'CCSTMTRS', 'INVSTMTRS'])

ACCOUNT_TAGS = frozenset(['BANKACCTFROM', 'CCACCTFROM', 'INVACCTFROM'])

BALANCE_TAGS = frozenset(['BALANCE', 'LEDGERBAL', 'AVAILBAL'])

# Investment transaction aggregates; the tag itself is the transaction subtype.
INVESTMENT_TRANSACTION_TAGS = frozenset([
    'BUYDEBT', 'BUYMF', 'BUYOPT', 'BUYOTHER', 'BUYSTOCK', 'CLOSUREOPT',
    'INCOME', 'INVEXPENSE', 'JRNLFUND', 'JRNLSEC', 'MARGININTEREST',
    'REINVEST', 'RETOFCAP', 'SELLDEBT', 'SELLMF', 'SELLOPT', 'SELLOTHER',
    'SELLSTOCK', 'SPLIT', 'TRANSFER',
])

SECURITY_TAGS = frozenset(
    ['STOCKINFO', 'MFINFO', 'DEBTINFO', 'OPTINFO', 'OTHERINFO'])

# Structural wrappers whose data elements belong to the enclosing container.
PASSTHROUGH_TAGS = frozenset([
    'BANKTRANLIST', 'INVTRANLIST', 'INVTRAN', 'INVBUY', 'INVSELL', 'SECID',
    'SECINFO', 'CURRENCY', 'ORIGCURRENCY', 'PAYEE', 'INVBANKTRAN',
])

CONTAINER_KINDS = {}  # type: Dict[str, ContainerKind]
CONTAINER_KINDS['STATUS'] = ContainerKind.STATUS
CONTAINER_KINDS['STMTTRN'] = ContainerKind.TRANSACTION
for _tags, _kind in [
    (BALANCE_TAGS, ContainerKind.BALANCE),
    (STATEMENT_TAGS, ContainerKind.STATEMENT),
    (ACCOUNT_TAGS, ContainerKind.ACCOUNT),
    (INVESTMENT_TRANSACTION_TAGS, ContainerKind.TRANSACTION),
    (SECURITY_TAGS, ContainerKind.SECURITY),
    (PASSTHROUGH_TAGS, ContainerKind.PASSTHROUGH),
]:
    for _tag in _tags:
        CONTAINER_KINDS[_tag] = _kind
del _tags, _kind, _tag

AGGREGATE_TAGS = frozenset(CONTAINER_KINDS) | frozenset([
    # Top level and signon
    'OFX', 'SIGNONMSGSRQV1', 'SIGNONMSGSRSV1', 'SONRQ', 'SONRS', 'FI',
    'MFACHALLENGERQ', 'MFACHALLENGERS', 'MFACHALLENGE', 'MFACHALLENGEA',
    'PINCHTRNRQ', 'PINCHTRNRS', 'PINCHRQ', 'PINCHRS', 'CHALLENGETRNRQ',
    'CHALLENGETRNRS', 'CHALLENGERQ', 'CHALLENGERS',
    # Signup
    'SIGNUPMSGSRQV1', 'SIGNUPMSGSRSV1', 'ACCTINFOTRNRQ', 'ACCTINFOTRNRS',
    'ACCTINFORQ', 'ACCTINFORS', 'ACCTINFO', 'BANKACCTINFO', 'CCACCTINFO',
    'INVACCTINFO', 'ENROLLTRNRQ', 'ENROLLTRNRS', 'ENROLLRQ', 'ENROLLRS',
    'ACCTTRNRQ', 'ACCTTRNRS', 'ACCTRQ', 'ACCTRS', 'SVCADD', 'SVCCHG',
    'SVCDEL', 'CHGUSERINFOTRNRQ', 'CHGUSERINFOTRNRS', 'CHGUSERINFORQ',
    'CHGUSERINFORS',
    # Banking
    'BANKMSGSRQV1', 'BANKMSGSRSV1', 'STMTTRNRQ', 'STMTTRNRS', 'STMTRQ',
    'INCTRAN', 'BANKACCTTO', 'CCACCTTO', 'BALLIST', 'BAL',
    'STMTENDTRNRQ', 'STMTENDTRNRS', 'STMTENDRQ', 'STMTENDRS', 'CLOSING',
    'STPCHKTRNRQ', 'STPCHKTRNRS', 'STPCHKRQ', 'STPCHKRS', 'CHKRANGE',
    'CHKDESC', 'STPCHKNUM', 'INTRATRNRQ', 'INTRATRNRS', 'INTRARQ',
    'INTRARS', 'INTRAMODRQ', 'INTRAMODRS', 'INTRACANRQ', 'INTRACANRS',
    'XFERINFO', 'XFERPRCSTS', 'INTERTRNRQ', 'INTERTRNRS', 'INTERRQ',
    'INTERRS', 'INTERMODRQ', 'INTERMODRS', 'INTERCANRQ', 'INTERCANRS',
    'WIRETRNRQ', 'WIRETRNRS', 'WIRERQ', 'WIRERS', 'WIREBENEFICIARY',
    'WIREDESTBANK', 'EXTBANKDESC', 'RECINTRATRNRQ', 'RECINTRATRNRS',
    'RECINTRARQ', 'RECINTRARS', 'RECURRINST', 'RECINTERTRNRQ',
    'RECINTERTRNRS', 'RECINTERRQ', 'RECINTERRS', 'BANKMAILTRNRQ',
    'BANKMAILTRNRS', 'BANKMAILRQ', 'BANKMAILRS', 'BANKMAILSYNCRQ',
    'BANKMAILSYNCRS', 'STMTSYNCRQ', 'STMTSYNCRS', 'IMAGEDATA',
    # Credit card
    'CREDITCARDMSGSRQV1', 'CREDITCARDMSGSRSV1', 'CCSTMTTRNRQ', 'CCSTMTTRNRS',
    'CCSTMTRQ', 'CCSTMTENDTRNRQ', 'CCSTMTENDTRNRS', 'CCSTMTENDRQ',
    'CCSTMTENDRS', 'CCCLOSING', 'REWARDINFO',
    # Investment
    'INVSTMTMSGSRQV1', 'INVSTMTMSGSRSV1', 'INVSTMTTRNRQ', 'INVSTMTTRNRS',
    'INVSTMTRQ', 'INCPOS', 'INVPOSLIST', 'INVPOS', 'POSDEBT', 'POSMF',
    'POSOPT', 'POSOTHER', 'POSSTOCK', 'INVBAL', 'INVOOLIST', 'OO',
    'OOBUYDEBT', 'OOBUYMF', 'OOBUYOPT', 'OOBUYOTHER', 'OOBUYSTOCK',
    'OOSELLDEBT', 'OOSELLMF', 'OOSELLOPT', 'OOSELLOTHER', 'OOSELLSTOCK',
    'SWITCHMF', 'INV401K', 'INV401KBAL', 'MATCHINFO', 'CONTRIBSECURITY',
    'CONTRIBINFO', 'VESTINFO', 'LOANINFO', 'INV401KSUMMARY', 'YEARTODATE',
    'INCEPTODATE', 'PERIODTODATE', 'EMPLOYERMATCH', 'MFASSETCLASS',
    'FIMFASSETCLASS', 'PORTION', 'FIPORTION', 'INVMAILTRNRQ',
    'INVMAILTRNRS', 'INVMAILRQ', 'INVMAILRS', 'INVMAILSYNCRQ',
    'INVMAILSYNCRS', 'INVACCTTO',
    # Securities
    'SECLISTMSGSRQV1', 'SECLISTMSGSRSV1', 'SECLISTTRNRQ', 'SECLISTTRNRS',
    'SECLISTRQ', 'SECLISTRS', 'SECRQ', 'SECLIST',
    # Bill pay
    'BILLPAYMSGSRQV1', 'BILLPAYMSGSRSV1', 'PMTTRNRQ', 'PMTTRNRS', 'PMTRQ',
    'PMTRS', 'PMTINFO', 'PMTPRCSTS', 'PMTMODRQ', 'PMTMODRS', 'PMTCANCRQ',
    'PMTCANCRS', 'RECPMTTRNRQ', 'RECPMTTRNRS', 'RECPMTRQ', 'RECPMTRS',
    'PAYEETRNRQ', 'PAYEETRNRS', 'PAYEERQ', 'PAYEERS', 'PAYEEMODRQ',
    'PAYEEMODRS', 'PAYEEDELRQ', 'PAYEEDELRS', 'EXTDPAYEE', 'EXTDPMT',
    'EXTDPMTINV', 'DISCOUNT', 'ADJUSTMENT', 'LINEITEM', 'PMTINQRQ',
    'PMTINQRS', 'PMTMAILTRNRQ', 'PMTMAILTRNRS', 'PMTMAILRQ', 'PMTMAILRS',
    'PMTSYNCRQ', 'PMTSYNCRS', 'PAYEESYNCRQ', 'PAYEESYNCRS',
    # E-mail and profile
    'EMAILMSGSRQV1', 'EMAILMSGSRSV1', 'MAILTRNRQ', 'MAILTRNRS', 'MAILRQ',
    'MAILRS', 'MAIL', 'MAILSYNCRQ', 'MAILSYNCRS', 'GETMIMETRNRQ',
    'GETMIMETRNRS', 'GETMIMERQ', 'GETMIMERS', 'PROFMSGSRQV1',
    'PROFMSGSRSV1', 'PROFTRNRQ', 'PROFTRNRS', 'PROFRQ', 'PROFRS',
    'MSGSETLIST', 'MSGSETCORE', 'SIGNONINFOLIST', 'SIGNONINFO',
    'SIGNONMSGSET', 'SIGNONMSGSETV1', 'SIGNUPMSGSET', 'SIGNUPMSGSETV1',
    'BANKMSGSET', 'BANKMSGSETV1', 'CREDITCARDMSGSET', 'CREDITCARDMSGSETV1',
    'INVSTMTMSGSET', 'INVSTMTMSGSETV1', 'SECLISTMSGSET', 'SECLISTMSGSETV1',
    'BILLPAYMSGSET', 'BILLPAYMSGSETV1', 'EMAILMSGSET', 'EMAILMSGSETV1',
    'PROFMSGSET', 'PROFMSGSETV1', 'XFERPROF', 'STPCHKPROF', 'EMAILPROF',
    'IMAGEPROF', 'CLIENTENROLL', 'WEBENROLL', 'OTHERENROLL',
])

# Data elements common enough that they never need structural classification.
DATA_TAGS = frozenset([
    'CODE', 'SEVERITY', 'MESSAGE', 'DTSERVER', 'LANGUAGE', 'DTPROFUP',
    'DTACCTUP', 'ORG', 'FID', 'TRNUID', 'CLTCOOKIE', 'CURDEF', 'BANKID',
    'BRANCHID', 'ACCTID', 'ACCTTYPE', 'ACCTKEY', 'BROKERID', 'DTSTART',
    'DTEND', 'TRNTYPE', 'DTPOSTED', 'DTUSER', 'DTAVAIL', 'TRNAMT', 'FITID',
    'CORRECTFITID', 'CORRECTACTION', 'SRVRTID', 'CHECKNUM', 'REFNUM', 'SIC',
    'PAYEEID', 'NAME', 'MEMO', 'BALAMT', 'DTASOF', 'MKTGINFO', 'UNIQUEID',
    'UNIQUEIDTYPE', 'SECNAME', 'TICKER', 'UNITPRICE', 'DTPRICEASOF',
    'UNITS', 'TOTAL', 'DTTRADE', 'DTSETTLE', 'CURSYM', 'CURRATE', 'VALUE',
    'DESC', 'BALTYPE', 'AVAILCASH', 'MARGINBALANCE', 'SHORTBALANCE',
    'COMMISSION', 'FEES', 'TAXES', 'INCOMETYPE', 'SUBACCTSEC',
    'SUBACCTFUND', 'SUBACCTFROM', 'SUBACCTTO', 'TFERACTION', 'POSTYPE',
    'BUYTYPE', 'SELLTYPE', 'INV401KSOURCE', 'MKTVAL', 'HELDINACCT',
    'SESSCOOKIE', 'USERKEY', 'TSKEYEXPIRE', 'ACCESSKEY',
])


def classify(name: str) -> TagClass:
    """Classifies an upper-cased OFX tag name."""
    if name in AGGREGATE_TAGS:
        return TagClass.AGGREGATE
    if name in DATA_TAGS:
        return TagClass.DATA
    return TagClass.UNKNOWN


def container_kind(name: str) -> ContainerKind:
    """Returns the container variant created for the aggregate `name`."""
    return CONTAINER_KINDS.get(name, ContainerKind.UNRECOGNIZED)
