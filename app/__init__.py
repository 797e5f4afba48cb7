"""Music sharing REST backend."""
