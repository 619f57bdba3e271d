"""Area Scout backend."""
