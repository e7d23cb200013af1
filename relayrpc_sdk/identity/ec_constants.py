"""
secp256k1 parameters used to validate searcher signing keys.
"""

# Group order n; a signing scalar must lie in [1, n-1]
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

SECP256K1_MIN = 1
SECP256K1_MAX = SECP256K1_N - 1

# 32-byte scalar rendered as hex, without 0x
PRIVATE_KEY_HEX_LENGTH = 64
