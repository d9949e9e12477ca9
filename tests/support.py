"""Shared test helpers: isolated databases, a mailer that records links, and user factories."""

from sqlalchemy.orm import Session, sessionmaker

from userhub.core.config import Settings, get_settings
from userhub.core.database import build_engine
from userhub.core.security import hash_password
from userhub.models import Base, User, UserRole
from userhub.repositories.users import SqlUserStore
from userhub.services.mailer import Mailer

DEFAULT_PASSWORD = "secret123"


def make_sessionmaker() -> sessionmaker:
    """Fresh in-memory database with the schema created."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_session() -> Session:
    return make_sessionmaker()()


def make_settings(**overrides: object) -> Settings:
    return get_settings().model_copy(update=overrides)


def add_user(
    store: SqlUserStore,
    email: str,
    password: str = DEFAULT_PASSWORD,
    role: UserRole = UserRole.user,
) -> User:
    return store.create(email=email, password_hash=hash_password(password), role=role)


class RecordingMailer(Mailer):
    """Mailer that keeps every confirmation link token instead of sending mail."""

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__(settings or get_settings())
        self.sent: list[tuple[str, str, str]] = []
        self.contact_forms: list[tuple[str, str, str]] = []

    def send_registration_link(self, email: str, token: str) -> None:
        self.sent.append(("registration", email, token))

    def send_reset_password_link(self, email: str, token: str) -> None:
        self.sent.append(("reset_password", email, token))

    def send_change_email_link(self, email: str, token: str) -> None:
        self.sent.append(("change_email", email, token))

    def send_delete_profile_link(self, email: str, token: str) -> None:
        self.sent.append(("delete_profile", email, token))

    def send_contact_form(self, email: str, subject: str, message: str) -> None:
        self.contact_forms.append((email, subject, message))

    def last(self, kind: str) -> tuple[str, str]:
        """Return (recipient, token) of the most recent link of that kind."""
        for sent_kind, email, token in reversed(self.sent):
            if sent_kind == kind:
                return email, token
        raise AssertionError(f"no {kind} link was sent")
