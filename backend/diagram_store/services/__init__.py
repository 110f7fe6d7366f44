"""Service Layer — read/modify/write orchestration between routes and the store."""
