"""Account store models."""

from sqlalchemy import Column, ForeignKey, Integer, String, text
from sqlalchemy.orm import declarative_base

from .. import domain

Base = declarative_base()


class DBAccount(Base):  # type: ignore
    """
    Account table.

    +--------------+--------------+------+-----+---------+----------------+
    | Field        | Type         | Null | Key | Default | Extra          |
    +--------------+--------------+------+-----+---------+----------------+
    | id           | int(11)      | NO   | PRI | NULL    | auto_increment |
    | username     | varchar(128) | NO   | UNI | NULL    |                |
    | email        | varchar(128) | NO   | UNI | NULL    |                |
    | pw_hash      | varchar(255) | NO   |     | NULL    |                |
    | confirmation | varchar(255) | NO   |     | NULL    |                |
    | joined_date  | int(11)      | NO   |     | 0       |                |
    +--------------+--------------+------+-----+---------+----------------+
    """

    __tablename__ = 'accounts'

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(128), nullable=False, unique=True)
    email = Column(String(128), nullable=False, unique=True)
    pw_hash = Column(String(255), nullable=False)
    confirmation = Column(String(255), nullable=False)
    joined_date = Column(Integer, nullable=False, server_default=text("'0'"))

    def to_domain(self) -> domain.AccountRecord:
        """Generate a :class:`.domain.AccountRecord` from this row."""
        return domain.AccountRecord(
            account_id=self.id,
            username=self.username,
            email=self.email,
            password_hash=self.pw_hash,
            confirmation=self.confirmation,
            joined_date=self.joined_date or 0
        )


class DBSession(Base):  # type: ignore
    """Login and API token hashes, at most one row per account."""

    __tablename__ = 'sessions'

    user_id = Column(ForeignKey('accounts.id', ondelete='CASCADE'),
                     primary_key=True, autoincrement=False)
    login_hash = Column(String(255))
    api_hash = Column(String(255))
    login_issued = Column(Integer)
    api_issued = Column(Integer)

    def to_domain(self) -> domain.SessionRecord:
        """Generate a :class:`.domain.SessionRecord` from this row."""
        return domain.SessionRecord(
            account_id=self.user_id,
            login_hash=self.login_hash,
            api_hash=self.api_hash,
            login_issued=self.login_issued,
            api_issued=self.api_issued
        )
