"""Session, actions, web API and entry point."""
