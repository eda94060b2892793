"""HTTP route modules mounted by marketflow.api."""
