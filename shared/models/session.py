from pydantic import BaseModel


class SessionContext(BaseModel):
    """Bearer credential handed to the dashboard by the external session store."""

    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.token.strip())

    def clear(self) -> None:
        self.token = None
