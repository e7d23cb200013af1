"""
Data types for the identity module.
"""
from dataclasses import dataclass, field

from eth_account.signers.local import LocalAccount


@dataclass(frozen=True)
class ClientIdentity:
    """
    Represents the signing identity a client authenticates to the relay with.

    The address is never stored on its own; it is always read from the
    account derived from the private key.

    Attributes:
        account: Local account holding the secp256k1 private key
    """
    account: LocalAccount = field(repr=False)

    @property
    def address(self) -> str:
        """Checksummed address derived from the signing key"""
        return self.account.address

    def __repr__(self) -> str:
        return f"ClientIdentity(address={self.address})"
