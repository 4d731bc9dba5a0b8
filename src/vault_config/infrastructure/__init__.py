"""Infrastructure adapters: authentication, signing, Vault access, logging."""
