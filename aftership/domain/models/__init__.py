"""Domain models mirroring the AfterShip JSON schema."""
