"""AI Health Companion backend."""
