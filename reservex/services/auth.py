"""
Sign-in for the remote service.

The remote service issues the bearer token. While it is unreachable, the
bundled demo users can sign in with any non-empty password and get a local
demo token, so the engine stays usable offline. A 401 from any remote call
clears the session (see ``AuthSession.invalidate``); signing in again
restores it.
"""
import logging

from reservex.domain import Role, User
from reservex.errors import InvalidInput, RemoteUnavailable, Unauthorized
from reservex.utils import mint_local_id, now_iso

logger = logging.getLogger(__name__)

DEMO_TOKEN_PREFIX = "demo-"
SELF_SERVICE_ROLES = frozenset({Role.CUSTOMER.value, Role.MANAGER.value})


class AuthService:
    def __init__(self, resolver, session):
        self.resolver = resolver
        self.session = session
        self.demo_mode = False

    def login(self, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        if not email or not password:
            raise InvalidInput("Email and password are required.")

        def local():
            for user in self.resolver.seeds.records("users"):
                if user.get("email", "").lower() == email:
                    return {"user": user, "token": self._demo_token(user["id"])}
            raise Unauthorized("Invalid email or password.")

        body = self._signed_in("login", lambda: self.resolver.remote.login(email, password), local)
        return User.from_dict(body["user"])

    def register(self, email: str, password: str, name: str, role: str = Role.CUSTOMER.value,
                 phone: str = "") -> User:
        email = (email or "").strip().lower()
        if not email or not password or not name:
            raise InvalidInput("Email, password and name are required.")
        if role not in SELF_SERVICE_ROLES:
            raise InvalidInput(f"Cannot register with role {role!r}.", field="role")
        payload = {"email": email, "password": password, "name": name, "role": role, "phone": phone}

        def local():
            # Held by the session only; offline sign-ups are not written anywhere.
            user = {"id": mint_local_id("user"), "email": email, "name": name, "role": role,
                    "phone": phone, "createdAt": now_iso()}
            return {"user": user, "token": self._demo_token(user["id"])}

        body = self._signed_in("register", lambda: self.resolver.remote.register(payload), local)
        return User.from_dict(body["user"])

    def logout(self) -> None:
        try:
            self.resolver.remote.logout()
        except (RemoteUnavailable, Unauthorized) as e:
            logger.warning("logout: remote did not confirm (%s); clearing local session", e)
        finally:
            self.session.sign_out()
            self.demo_mode = False

    def current_user(self) -> User:
        if not self.session.authenticated:
            raise Unauthorized("Sign in again." if self.session.reauth_required else "Not signed in.")
        user = self.resolver.execute("current_user", self.resolver.remote.me, lambda: self.session.user)
        self.session.user = user
        return User.from_dict(user)

    def _signed_in(self, operation, remote_fn, fallback_fn) -> dict:
        body = self.resolver.execute(operation, remote_fn, fallback_fn)
        self.session.sign_in(body["token"], body["user"])
        self.demo_mode = body["token"].startswith(DEMO_TOKEN_PREFIX)
        logger.info("%s: signed in as %s%s", operation, body["user"].get("email"),
                    " (demo)" if self.demo_mode else "")
        return body

    @staticmethod
    def _demo_token(user_id: str) -> str:
        return f"{DEMO_TOKEN_PREFIX}{user_id}-{now_iso()}"
