"""Clone, rewrite and push orchestration."""
