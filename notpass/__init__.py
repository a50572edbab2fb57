"""Password Safe v3 vault reader, software YubiKey and random passphrase generator."""

__version__ = "0.1.0"