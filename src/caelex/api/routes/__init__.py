"""API routers. Each module receives the shared engine through set_engine()."""
