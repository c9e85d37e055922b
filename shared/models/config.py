from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    A single configuration parameter a client needs from the environment.

    Attributes:
        env_key (str): The raw key, without the "{CLIENT_TYPE}_{ENGINE}_" prefix (e.g. "BASE_URL").
        val_type (str): Expected type of the value: "string", "number" or "bool".
        default (str | int | bool | None): Fallback value. None makes the key required.
    """

    env_key: str
    val_type: str
    default: str | int | bool | None = None
