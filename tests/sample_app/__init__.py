"""Sample capabilities and implementations scanned by the tests."""
