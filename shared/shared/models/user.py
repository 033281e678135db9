from pydantic import BaseModel, ConfigDict


class Authorizer(BaseModel):
    """Caller context resolved from the bearer token; used by all services.

    ``account_id`` is the authenticating identity, ``user_id`` the profile it
    acts as, and ``access_token`` the raw bearer token (keys per-session caches).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    account_id: str
    user_id: str
    access_token: str
