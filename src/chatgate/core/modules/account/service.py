import bcrypt
import structlog

from chatgate.core.core import Service
from chatgate.core.modules.account.models import Account
from chatgate.core.modules.account.validators import is_password_too_long, validate_credentials
from chatgate.errors import DuplicateAccountError

logger = structlog.get_logger(__name__)


class AccountService(Service):
    """Manages accounts stored in the JSON document."""

    async def create_account(self, email: str, password: str) -> Account:
        """Create account with hashed password."""
        validate_credentials(email, password)
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

        async with self.store.transaction() as document:
            if any(account.email == email for account in document.accounts):
                raise DuplicateAccountError
            account = Account(email=email, password_hash=password_hash)
            document.accounts.append(account)

        logger.info("account_created", email=email)
        return account

    async def verify_password(self, email: str, password: str) -> bool:
        """Verify password against stored hash."""
        if not email or not password or is_password_too_long(password):
            return False
        document = await self.store.read()
        account = next((a for a in document.accounts if a.email == email), None)
        if account is None:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), account.password_hash.encode("utf-8"))

    async def count_accounts(self) -> int:
        document = await self.store.read()
        return len(document.accounts)
