# snapshop/auth.py
"""Account registration and login against locally stored accounts.

Passwords are stored and compared in plaintext. That is a deliberate
simplification for a single-machine demo and must not be carried into
anything that holds real credentials.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from .database import KeyValueStore, USERS_KEY, AUTH_KEY, read_json, read_json_list, write_json
from .errors import ValidationFailed, DuplicateEmail, AccountNotFound, IncorrectPassword
from .models import Account, Session, UserSummary, SignupForm, LoginForm
from .validators import validate_signup, validate_login

logger = logging.getLogger(__name__)

_warned_plaintext = False


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_accounts(store: KeyValueStore) -> List[Account]:
    accounts = []
    for raw in read_json_list(store, USERS_KEY):
        try:
            accounts.append(Account.model_validate(raw))
        except ValidationError:
            logger.warning("skipping unreadable account record")
    return accounts


def find_account(store: KeyValueStore, email: str) -> Optional[Account]:
    # exact, case-sensitive match on the stored value
    for account in get_accounts(store):
        if account.email == email:
            return account
    return None


def signup(store: KeyValueStore, form: SignupForm, now: Optional[datetime] = None) -> Account:
    global _warned_plaintext

    errors = validate_signup(form)
    if errors:
        raise ValidationFailed(errors)

    email = form.email.strip()
    accounts = get_accounts(store)
    if any(a.email == email for a in accounts):
        raise DuplicateEmail()

    moment = _now(now)
    account = Account(
        id=int(moment.timestamp() * 1000),
        name=form.name.strip(),
        email=email,
        phone=form.phone.strip(),
        password=form.password,
        created_at=_iso(moment),
    )
    accounts.append(account)
    write_json(store, USERS_KEY, [a.model_dump(by_alias=True) for a in accounts])

    if not _warned_plaintext:
        logger.warning("account passwords are kept in plaintext; demo use only")
        _warned_plaintext = True
    logger.info("account created for %s", email)
    return account


def login(durable: KeyValueStore, ephemeral: KeyValueStore, form: LoginForm,
          now: Optional[datetime] = None) -> Session:
    """Check credentials and persist a session. "remember me" picks the durable
    store, otherwise the session lives only as long as the ephemeral one."""
    errors = validate_login(form)
    if errors:
        raise ValidationFailed(errors)

    account = find_account(durable, form.email.strip())
    if account is None:
        raise AccountNotFound()
    if account.password != form.password:
        raise IncorrectPassword()

    session = Session(
        is_authenticated=True,
        user=UserSummary(name=account.name, email=account.email, phone=account.phone),
        login_time=_iso(_now(now)),
    )
    target = durable if form.remember_me else ephemeral
    write_json(target, AUTH_KEY, session.model_dump(by_alias=True))
    logger.info("login for %s (remember_me=%s)", account.email, form.remember_me)
    return session


def _read_session(store: KeyValueStore) -> Optional[Session]:
    raw = read_json(store, AUTH_KEY)
    if raw is None:
        return None
    try:
        return Session.model_validate(raw)
    except ValidationError:
        logger.warning("ignoring unreadable session record")
        return None


def current_session(durable: KeyValueStore, ephemeral: KeyValueStore) -> Optional[Session]:
    session = _read_session(durable)
    if session is None:
        session = _read_session(ephemeral)
    return session


def is_logged_in(durable: KeyValueStore, ephemeral: KeyValueStore) -> bool:
    session = current_session(durable, ephemeral)
    return session is not None and session.is_authenticated
