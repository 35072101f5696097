def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, deterministic unit tests")
