# Standard library imports
import enum
import datetime as dt
from typing import Optional

# Third-party imports
import sqlalchemy as sa
import sqlalchemy.orm as so
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

# Local application imports
from scheduler import db, login
from scheduler.errors import AuthenticationRequired

# Owner recorded for events submitted without an authenticated identity
ANONYMOUS_OWNER = 'anonymous'


def utcnow():
    """Naive UTC timestamp, matching the DateTime columns below."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class AccountRole(enum.Enum):
    MEMBER = 'member'
    ADMIN = 'admin'


class Account(UserMixin, db.Model):
    __tablename__ = 'accounts'

    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    username: so.Mapped[str] = so.mapped_column(sa.String(64), index=True,
                                                unique=True)
    email: so.Mapped[Optional[str]] = so.mapped_column(sa.String(120), index=True,
                                                       nullable=True)
    password_hash: so.Mapped[Optional[str]] = so.mapped_column(sa.String(256))
    role: so.Mapped[AccountRole] = so.mapped_column(
        sa.Enum(AccountRole, native_enum=False, length=16,
                values_callable=lambda roles: [role.value for role in roles]),
        default=AccountRole.MEMBER, nullable=False
    )
    created_at: so.Mapped[dt.datetime] = so.mapped_column(sa.DateTime, default=utcnow, nullable=False)
    last_login: so.Mapped[Optional[dt.datetime]] = so.mapped_column(sa.DateTime, nullable=True)

    def __repr__(self):
        return '<Account {}>'.format(self.username)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if self.password_hash is None or password is None:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == AccountRole.ADMIN


@login.user_loader
def load_user(id):
    from scheduler.routes import get_account_store
    return get_account_store().get(int(id))


@login.request_loader
def load_user_from_request(request):
    """Resolve an ``Authorization: Bearer <token>`` header to an account."""
    from scheduler.accounts.utils import verify_api_token

    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return verify_api_token(token.strip())


@login.unauthorized_handler
def unauthorized():
    raise AuthenticationRequired()


class Event(db.Model):
    __tablename__ = 'events'
    # Identifiers of deleted events are never handed out again
    __table_args__ = {'sqlite_autoincrement': True}

    id: so.Mapped[int] = so.mapped_column(sa.Integer, primary_key=True)
    title: so.Mapped[str] = so.mapped_column(sa.String(100), nullable=False)
    description: so.Mapped[Optional[str]] = so.mapped_column(sa.Text, nullable=True)
    date: so.Mapped[dt.date] = so.mapped_column(sa.Date, nullable=False, index=True)
    time: so.Mapped[Optional[dt.time]] = so.mapped_column(sa.Time, nullable=True)
    user_id: so.Mapped[str] = so.mapped_column(sa.String(64), nullable=False, default=ANONYMOUS_OWNER)
    approved: so.Mapped[bool] = so.mapped_column(sa.Boolean, nullable=False, default=False, index=True)
    approved_at: so.Mapped[Optional[dt.datetime]] = so.mapped_column(sa.DateTime, nullable=True)
    created_at: so.Mapped[dt.datetime] = so.mapped_column(sa.DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Event id={self.id}, title='{self.title}', date={self.date}, approved={self.approved}>"

    @property
    def is_pending(self):
        return not self.approved
