"""Domain layer: Vault options, ports (protocols) and validators."""
