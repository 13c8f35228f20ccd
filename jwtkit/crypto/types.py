"""Type definitions for generated signing keys."""

from pydantic import BaseModel


class SigningKeyData(BaseModel):
    """A keypair for token signing, PEM encoded."""

    kid: str
    algorithm: str
    private_key_pem: str
    public_key_pem: str
